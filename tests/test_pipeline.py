"""End-to-end tests for AnalysisPipeline.

These run the real detector, scorer and synthesizer together. Collaborators
that can fail (the name resolver, a heuristic) are replaced with fakes to
check that failures degrade the result instead of aborting it.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest

from oncosafety.cache import AnalysisCache
from oncosafety.heuristics import DEFAULT_RULES, HeuristicRule
from oncosafety.knowledge import KnowledgeBase
from oncosafety.models import EvidenceLevel, RiskLevel, Severity
from oncosafety.pipeline import ROUTINE_ACTIONS, URGENT_ACTIONS, AnalysisPipeline, analyze
from oncosafety.validation import AnalysisValidationError


def _stable_view(result_dict: dict[str, Any]) -> dict[str, Any]:
    """Drop the per-run identifiers so two analyses can be compared."""
    return {k: v for k, v in result_dict.items() if k not in ("analysisId", "timestamp")}


def _failing_rule() -> HeuristicRule:
    def matcher(key_a: str, key_b: str, kb: KnowledgeBase) -> bool:
        raise KeyError("qt_prolonging")

    return HeuristicRule(
        name="flaky",
        matches=matcher,
        severity=Severity.MAJOR,
        mechanism="-",
        effect="-",
        management="-",
        confidence=0.5,
        evidence_level=EvidenceLevel.D,
    )


# --- Clinical scenarios ---


class TestScenarios:
    def test_warfarin_amiodarone(self) -> None:
        result = AnalysisPipeline().analyze(["warfarin", "amiodarone"])

        assert len(result.interactions) == 1
        assert result.risk_assessment.score == 1.5
        assert result.risk_assessment.level is RiskLevel.MODERATE
        assert "PT/INR monitoring" in result.monitoring_plan.ongoing
        assert "Monitor for signs of toxicity" in result.monitoring_plan.ongoing
        assert result.alerts[0].title == "Major Interaction: warfarin + amiodarone"
        assert not result.degraded

    def test_elderly_patient_with_age_72(self) -> None:
        result = AnalysisPipeline().analyze(["warfarin", "amiodarone"], {"age": 72})
        assert result.risk_assessment.score == 2.25
        assert result.risk_assessment.level is RiskLevel.HIGH
        assert result.alerts[0].title == "Immediate Review Required"

    def test_qt_pair_is_predicted(self) -> None:
        result = AnalysisPipeline().analyze(["ondansetron", "haloperidol"])

        record = result.interactions[0]
        assert record.mechanism == "Additive QT prolongation"
        assert record.confidence == 0.85
        assert "ECG monitoring" in result.monitoring_plan.ongoing
        assert result.summary.key_findings == ("1 predicted major interaction(s)",)

    def test_very_old_patient_without_interactions(self) -> None:
        result = AnalysisPipeline().analyze(["drug01"], {"age": 90})

        assert result.interactions == ()
        assert result.risk_assessment.score == 2.5
        assert result.risk_assessment.level is RiskLevel.HIGH
        assert result.risk_assessment.factors == ("Advanced age (>85)",)
        assert [a.title for a in result.alerts] == [
            "Immediate Review Required",
            "Geriatric Considerations",
        ]

    def test_twelve_unrelated_medications(self) -> None:
        meds = [f"drug{i:02d}" for i in range(1, 13)]
        result = AnalysisPipeline().analyze(meds)

        assert result.interactions == ()
        assert result.risk_assessment.score == 1.8
        assert result.risk_assessment.level is RiskLevel.MODERATE
        assert result.risk_assessment.factors == ("High polypharmacy (>10 drugs)",)
        assert [r.title for r in result.recommendations].count("Medication Reconciliation") == 1
        assert [a.title for a in result.alerts].count("Medication Reconciliation") == 1

    def test_allergy_filters_alternatives(self) -> None:
        result = AnalysisPipeline().analyze(
            ["warfarin", "amiodarone"], {"allergies": ["apixaban"]}
        )
        names = [alt.name for s in result.alternatives for alt in s.alternatives]
        assert names == ["rivaroxaban"]

    def test_salt_form_repeat_does_not_inflate_risk(self) -> None:
        result = AnalysisPipeline().analyze(["warfarin", "amiodarone", "amiodarone HCl"])

        assert len(result.interactions) == 1
        assert result.risk_assessment.score == 1.5
        assert result.risk_assessment.level is RiskLevel.MODERATE
        assert "Immediate Review Required" not in [a.title for a in result.alerts]

    def test_empty_medication_list(self) -> None:
        result = AnalysisPipeline().analyze([])
        assert result.interactions == ()
        assert result.risk_assessment.level is RiskLevel.LOW
        assert result.summary.urgent_actions == ROUTINE_ACTIONS
        assert result.summary.key_findings == ("No major interactions detected",)


# --- Summary ---


def test_summary_counts_and_actions() -> None:
    result = AnalysisPipeline().analyze(["warfarin", "amiodarone", "ondansetron", "haloperidol"])
    summary = result.summary

    assert summary.interaction_count == 2
    assert summary.major_interaction_count == 2
    assert summary.critical_interaction_count == 0
    assert summary.urgent_actions == URGENT_ACTIONS
    assert summary.key_findings == (
        "1 major known interaction(s)",
        "1 predicted major interaction(s)",
    )


def test_results_are_deterministic() -> None:
    pipeline = AnalysisPipeline()
    first = pipeline.analyze(["warfarin", "amiodarone", "digoxin"], {"age": 80})
    second = pipeline.analyze(["warfarin", "amiodarone", "digoxin"], {"age": 80})

    assert first.analysis_id != second.analysis_id
    assert _stable_view(first.to_dict()) == _stable_view(second.to_dict())


def test_to_dict_uses_camel_case() -> None:
    data = analyze(["warfarin", "amiodarone"], {"renalFunction": "moderate"}).to_dict()

    assert data["riskAssessment"]["factors"] == ["Moderate renal impairment"]
    assert data["patientContext"]["renalFunction"] == "moderate"
    assert data["monitoringPlan"]["alerts"][0]["parameter"] == "Creatinine"
    assert data["summary"]["riskLevel"] == data["riskAssessment"]["level"]


def test_validation_errors_propagate() -> None:
    with pytest.raises(AnalysisValidationError):
        AnalysisPipeline().analyze("warfarin")
    with pytest.raises(AnalysisValidationError):
        AnalysisPipeline().analyze(["warfarin"], {"age": -1})


# --- Name resolution ---


class TestResolver:
    def test_brand_names_are_resolved(self) -> None:
        brands = {"coumadin": "warfarin", "cordarone": "amiodarone"}
        pipeline = AnalysisPipeline(resolver=lambda name: brands.get(name.lower()))
        result = pipeline.analyze(["Coumadin", "Cordarone"])

        assert len(result.interactions) == 1
        assert result.alerts[0].title == "Major Interaction: Coumadin + Cordarone"
        assert result.alternatives[0].original_drug == "Coumadin"

    def test_resolver_failure_degrades_result(self) -> None:
        def resolver(name: str) -> str | None:
            raise ConnectionError("terminology service down")

        result = AnalysisPipeline(resolver=resolver).analyze(["warfarin", "amiodarone"])

        assert result.degraded
        assert len(result.warnings) == 2
        # names are used as given, so the known pair is still found
        assert len(result.interactions) == 1
        assert result.to_dict()["degraded"] is True


# --- Degradation and caching ---


def test_failing_rule_degrades_result() -> None:
    pipeline = AnalysisPipeline(rules=(_failing_rule(), *DEFAULT_RULES))
    result = pipeline.analyze(["ondansetron", "haloperidol"])

    assert result.degraded
    assert "flaky" in result.warnings[0]
    assert len(result.interactions) == 1
    assert result.summary.key_findings[-1].startswith("Analysis incomplete")


def test_cache_hit_gets_its_own_id_and_timestamp() -> None:
    pipeline = AnalysisPipeline(cache=AnalysisCache())
    first = pipeline.analyze(["warfarin", "amiodarone"])

    with patch("oncosafety.pipeline.score") as mock_score:
        second = pipeline.analyze(["warfarin", "amiodarone"])

    mock_score.assert_not_called()
    assert second.analysis_id != first.analysis_id
    assert second.timestamp >= first.timestamp
    assert _stable_view(second.to_dict()) == _stable_view(first.to_dict())


def test_degraded_results_are_not_cached() -> None:
    cache = AnalysisCache()
    pipeline = AnalysisPipeline(rules=(_failing_rule(),), cache=cache)
    pipeline.analyze(["drug01", "drug02"])
    assert len(cache) == 0
