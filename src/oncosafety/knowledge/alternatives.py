"""Therapeutic alternatives for drugs that commonly cause interactions."""

from typing import Any

DRUG_ALTERNATIVES: dict[str, list[dict[str, Any]]] = {
    "warfarin": [
        {"name": "apixaban", "rationale": "DOAC with fewer interactions", "monitoring": "No INR required"},
        {"name": "rivaroxaban", "rationale": "DOAC alternative", "monitoring": "Renal function monitoring"},
    ],
    "omeprazole": [
        {"name": "pantoprazole", "rationale": "Minimal CYP2C19 inhibition", "monitoring": "Standard PPI monitoring"},
        {"name": "famotidine", "rationale": "H2 blocker alternative", "monitoring": "Less potent but safer"},
    ],
    "paroxetine": [
        {"name": "sertraline", "rationale": "Weaker CYP2D6 inhibition", "monitoring": "Monitor for efficacy"},
        {
            "name": "venlafaxine",
            "rationale": "SNRI with minimal CYP interactions",
            "monitoring": "Blood pressure monitoring",
        },
    ],
    "ketoconazole": [
        {"name": "fluconazole", "rationale": "Less potent CYP3A4 inhibition", "monitoring": "Liver function tests"},
        {
            "name": "terbinafine",
            "rationale": "Different mechanism of action",
            "monitoring": "For appropriate infections only",
        },
    ],
}

# Alternatives that must not be offered to a patient with severe renal
# impairment.
SEVERE_RENAL_EXCLUSIONS: tuple[str, ...] = ("rivaroxaban",)
