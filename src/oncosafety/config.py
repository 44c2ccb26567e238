"""Configuration for the drug-safety engine.

Loads settings from environment variables (via a .env file or the system
environment). Every setting has a default so the package can be imported
and tested without any configuration at all.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Optional .env beside pyproject.toml. Variables already set in the process
# environment take precedence over it.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

# --- Risk scoring ---
# The risk score is unbounded while it accumulates; for display it is capped
# at this ceiling.
RISK_SCORE_CEILING: float = float(os.getenv("ONCOSAFETY_RISK_SCORE_CEILING", "100"))

# --- Result cache ---
# Caching is an optional optimization. Results are keyed by the medication
# list and the patient context, and expire after the TTL.
CACHE_ENABLED: bool = os.getenv("ONCOSAFETY_CACHE_ENABLED", "false").lower() in (
    "1",
    "true",
    "yes",
)
CACHE_TTL_SECONDS: float = float(os.getenv("ONCOSAFETY_CACHE_TTL_SECONDS", "1800"))
CACHE_MAX_ENTRIES: int = int(os.getenv("ONCOSAFETY_CACHE_MAX_ENTRIES", "256"))

# --- Logging ---
LOG_LEVEL: str = os.getenv("ONCOSAFETY_LOG_LEVEL", "INFO").upper()
