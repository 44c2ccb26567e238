"""FastAPI server — the HTTP entry point for the drug-safety engine.

Endpoints:

- GET  /health        — Simple check that the server is running
- POST /analyze       — Full analysis: interactions, risk, alerts, monitoring
- POST /interactions  — Interaction detection only

Request bodies are validated with the same Pydantic models the library
entry points use (see validation.py), so the HTTP API and
`oncosafety.analyze()` accept exactly the same input. The analysis itself
is synchronous CPU-bound work, so it runs in the threadpool; each request
is independent and shares nothing but the read-only knowledge base.

Run locally with:
    uvicorn oncosafety.app:app --reload
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field, StrictStr
from starlette.concurrency import run_in_threadpool

from oncosafety.config import LOG_LEVEL
from oncosafety.models import Medication
from oncosafety.pipeline import get_pipeline
from oncosafety.validation import AnalysisValidationError, MedicationInput, PatientContextInput

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging when the server starts, not when the module is imported."""
    logging.basicConfig(level=LOG_LEVEL)
    yield


app = FastAPI(
    title="Oncology Drug Safety Engine",
    description="Drug-drug interaction detection, risk scoring and clinical alerts",
    version="0.1.0",
    lifespan=lifespan,
)


class AnalyzeRequest(BaseModel):
    """What the client sends to /analyze."""

    medications: list[StrictStr | MedicationInput]
    patient_context: PatientContextInput | None = Field(
        default=None, validation_alias=AliasChoices("patientContext", "patient_context")
    )


class InteractionCheckRequest(BaseModel):
    """What the client sends to /interactions."""

    medications: list[StrictStr | MedicationInput]


def _medication_payload(medications: list[str | MedicationInput]) -> list[str | Medication]:
    return [m if isinstance(m, str) else m.to_medication() for m in medications]


@app.exception_handler(AnalysisValidationError)
async def validation_error_handler(request: Request, exc: AnalysisValidationError) -> JSONResponse:
    """Malformed analysis input is the client's fault: answer 422."""
    return JSONResponse(status_code=422, content={"detail": exc.detail})


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint. Returns 200 if the server is running."""
    return {"status": "ok"}


@app.post("/analyze")
async def analyze(request: AnalyzeRequest) -> dict[str, Any]:
    """Analyze a patient's medication list.

    Returns the detected interactions, the risk assessment, prioritized
    alerts, recommendations, safer alternatives, a monitoring plan and a
    summary. Check the `degraded` flag: when true, part of the analysis
    could not run and the result must not be read as complete.
    """
    result = await run_in_threadpool(
        get_pipeline().analyze,
        _medication_payload(request.medications),
        request.patient_context,
    )
    return result.to_dict()


@app.post("/interactions")
async def check_interactions(request: InteractionCheckRequest) -> dict[str, Any]:
    """Detect interactions between the medications, without patient context."""
    detection = await run_in_threadpool(
        get_pipeline().detect, _medication_payload(request.medications)
    )
    return {
        "interactions": [i.to_dict() for i in detection],
        "degraded": detection.degraded,
        "failedRules": list(detection.failed_rules),
    }
