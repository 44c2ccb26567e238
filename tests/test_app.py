"""Tests for the HTTP API.

Requests go through httpx's ASGITransport straight into the FastAPI app,
so no server process is needed.
"""

from __future__ import annotations

import importlib
from unittest.mock import MagicMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

import oncosafety.app
from oncosafety.app import app
from oncosafety.config import LOG_LEVEL
from oncosafety.pipeline import AnalysisPipeline


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


# --- /analyze ---


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_full_analysis(self) -> None:
        async with _client() as client:
            response = await client.post(
                "/analyze",
                json={"medications": ["warfarin", "amiodarone"], "patientContext": {"age": 72}},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["riskAssessment"]["score"] == 2.25
        assert data["riskAssessment"]["level"] == "high"
        assert data["interactions"][0]["drugPair"] == ["warfarin", "amiodarone"]
        assert data["alerts"][0]["title"] == "Immediate Review Required"
        assert data["alerts"][0]["priorityLabel"] == "urgent"
        assert data["degraded"] is False

    @pytest.mark.asyncio
    async def test_medication_objects_and_no_context(self) -> None:
        async with _client() as client:
            response = await client.post(
                "/analyze",
                json={"medications": [{"name": "ondansetron", "code": "26225"}, "haloperidol"]},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["interactions"][0]["type"] == "predicted"
        assert data["patientContext"]["age"] is None

    @pytest.mark.asyncio
    async def test_snake_case_context_is_accepted(self) -> None:
        async with _client() as client:
            response = await client.post(
                "/analyze",
                json={"medications": ["drug01"], "patient_context": {"renal_function": "severe"}},
            )

        assert response.status_code == 200
        assert response.json()["riskAssessment"]["factors"] == ["Severe renal impairment"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"medications": "warfarin"},
            {"medications": ["warfarin"], "patientContext": {"age": "72"}},
            {"medications": ["warfarin"], "patientContext": {"age": -3}},
            {"medications": ["warfarin"], "patientContext": {"renalFunction": "terrible"}},
            {"medications": ["warfarin"], "patientContext": {"weight": 70}},
            {},
        ],
    )
    async def test_malformed_request_is_422(self, body: dict[str, object]) -> None:
        async with _client() as client:
            response = await client.post("/analyze", json=body)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_library_and_http_accept_the_same_context(self) -> None:
        """Older key spellings mean the same thing through either entry point."""
        context = {"pregnancy": True, "comorbidities": ["ckd", "chf"], "renalFunction": "Moderate"}
        direct = AnalysisPipeline().analyze(["drug01"], context).to_dict()

        async with _client() as client:
            response = await client.post(
                "/analyze", json={"medications": ["drug01"], "patientContext": context}
            )

        assert response.status_code == 200
        served = response.json()
        assert served["patientContext"] == direct["patientContext"]
        assert served["patientContext"]["pregnant"] is True
        assert served["patientContext"]["comorbidityCount"] == 2
        assert served["riskAssessment"] == direct["riskAssessment"]

    def test_blank_medication_name_is_422(self) -> None:
        """Caught by the analysis validator rather than the request model."""
        client = TestClient(app)
        response = client.post("/analyze", json={"medications": ["warfarin", "  "]})

        assert response.status_code == 422
        assert "medications[1]" in response.json()["detail"]


# --- /interactions ---


@pytest.mark.asyncio
async def test_interactions_endpoint() -> None:
    async with _client() as client:
        response = await client.post(
            "/interactions", json={"medications": ["amiodarone", "warfarin", "digoxin"]}
        )

    assert response.status_code == 200
    data = response.json()
    assert [i["drugPair"] for i in data["interactions"]] == [
        ["amiodarone", "warfarin"],
        ["amiodarone", "digoxin"],
    ]
    assert data["degraded"] is False
    assert data["failedRules"] == []


@pytest.mark.asyncio
async def test_health() -> None:
    async with _client() as client:
        response = await client.get("/health")
    assert response.json() == {"status": "ok"}


# --- Logging setup ---


@patch("logging.basicConfig")
def test_import_leaves_logging_alone(mock_basic_config: MagicMock) -> None:
    """Importing the app must not reconfigure the host's root logger."""
    importlib.reload(oncosafety.app)
    mock_basic_config.assert_not_called()


@patch("logging.basicConfig")
def test_startup_configures_logging(mock_basic_config: MagicMock) -> None:
    with TestClient(app):
        pass
    mock_basic_config.assert_called_once_with(level=LOG_LEVEL)
