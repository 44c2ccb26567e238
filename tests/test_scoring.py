"""Tests for the risk scorer.

Interactions are built by hand here so each test controls exactly how many
majors and moderates the scorer sees.
"""

from __future__ import annotations

import pytest

from oncosafety.models import (
    EvidenceLevel,
    InteractionRecord,
    OrganFunction,
    Origin,
    PatientContext,
    RiskLevel,
    Severity,
)
from oncosafety.scoring import categorize, mitigation_strategies, round_half_up, score

TWO_MEDS = ["drug01", "drug02"]


def _meds(count: int) -> list[str]:
    return [f"drug{i:02d}" for i in range(1, count + 1)]


def _interaction(severity: Severity, a: str = "drug01", b: str = "drug02") -> InteractionRecord:
    return InteractionRecord(
        drug_a=a,
        drug_b=b,
        origin=Origin.KNOWN,
        severity=severity,
        mechanism="Test mechanism",
        effect="Test effect",
        management="Test management",
        confidence=0.95,
        evidence_level=EvidenceLevel.B,
    )


# --- Patient factors ---


class TestPatientFactors:
    def test_baseline_is_one(self) -> None:
        risk = score(TWO_MEDS, None, [])
        assert risk.score == 1.0
        assert risk.level is RiskLevel.LOW
        assert risk.factors == ()

    def test_age_brackets_do_not_stack(self) -> None:
        """A 90-year-old gets only the >85 multiplier, not all three."""
        risk = score(TWO_MEDS, PatientContext(age=90), [])
        assert risk.score == 2.5
        assert risk.level is RiskLevel.HIGH
        assert risk.factors == ("Advanced age (>85)",)

    @pytest.mark.parametrize(
        ("age", "expected"),
        [(65, 1.0), (66, 1.5), (75, 1.5), (76, 2.0), (85, 2.0), (86, 2.5)],
    )
    def test_age_thresholds_are_strict(self, age: int, expected: float) -> None:
        assert score(TWO_MEDS, PatientContext(age=age), []).score == expected

    def test_mild_impairment_is_not_penalized(self) -> None:
        context = PatientContext(
            renal_function=OrganFunction.MILD, hepatic_function=OrganFunction.MILD
        )
        risk = score(TWO_MEDS, context, [])
        assert risk.score == 1.0
        assert risk.factors == ()

    def test_moderate_renal_impairment(self) -> None:
        risk = score(TWO_MEDS, PatientContext(renal_function=OrganFunction.MODERATE), [])
        assert risk.score == 1.8
        assert risk.level is RiskLevel.MODERATE
        assert risk.factors == ("Moderate renal impairment",)

    def test_severe_hepatic_impairment(self) -> None:
        risk = score(TWO_MEDS, PatientContext(hepatic_function=OrganFunction.SEVERE), [])
        assert risk.score == 3.5
        assert risk.level is RiskLevel.CRITICAL
        assert risk.factors == ("Severe hepatic impairment",)

    @pytest.mark.parametrize(
        ("count", "expected", "factor"),
        [
            (5, 1.0, None),
            (6, 1.3, "Polypharmacy (>5 drugs)"),
            (11, 1.8, "High polypharmacy (>10 drugs)"),
            (16, 2.2, "Extreme polypharmacy (>15 drugs)"),
        ],
    )
    def test_polypharmacy_brackets(self, count: int, expected: float, factor: str | None) -> None:
        risk = score(_meds(count), None, [])
        assert risk.score == expected
        assert risk.factors == ((factor,) if factor else ())

    def test_factor_order(self) -> None:
        """Factors are listed in the order the multipliers apply."""
        context = PatientContext(
            age=80,
            renal_function=OrganFunction.SEVERE,
            hepatic_function=OrganFunction.MODERATE,
        )
        risk = score(_meds(11), context, [])
        assert risk.factors == (
            "Advanced age (>75)",
            "Severe renal impairment",
            "Moderate hepatic impairment",
            "High polypharmacy (>10 drugs)",
        )

    def test_unassessed_factors_are_skipped(self) -> None:
        """Pregnancy, comorbidities and genetics do not move the score."""
        context = PatientContext(
            pregnant=True,
            comorbidity_count=4,
            genetics=(("CYP2D6", "poor_metabolizer"),),
        )
        assert score(TWO_MEDS, context, []).score == 1.0


# --- Interaction load ---


class TestInteractionLoad:
    def test_one_major(self) -> None:
        risk = score(TWO_MEDS, None, [_interaction(Severity.MAJOR)])
        assert risk.score == 1.5
        assert risk.level is RiskLevel.MODERATE

    def test_critical_counts_as_major(self) -> None:
        risk = score(TWO_MEDS, None, [_interaction(Severity.CRITICAL)])
        assert risk.score == 1.5

    def test_minor_adds_nothing(self) -> None:
        assert score(TWO_MEDS, None, [_interaction(Severity.MINOR)]).score == 1.0

    def test_mixed_load(self) -> None:
        interactions = [
            _interaction(Severity.MAJOR, "a1", "b1"),
            _interaction(Severity.MAJOR, "a2", "b2"),
            _interaction(Severity.MODERATE, "a3", "b3"),
        ]
        risk = score(_meds(3), None, interactions)
        assert risk.score == 2.2
        assert risk.level is RiskLevel.HIGH
        assert risk.factors == ()
        assert risk.interaction_counts == {
            "minor": 0,
            "moderate": 1,
            "major": 2,
            "critical": 0,
            "total": 3,
        }

    def test_adding_an_interaction_never_lowers_the_score(self) -> None:
        context = PatientContext(age=70)
        interactions: list[InteractionRecord] = []
        previous = score(_meds(4), context, interactions).raw_score
        for i, severity in enumerate([Severity.MINOR, Severity.MODERATE, Severity.MAJOR]):
            interactions.append(_interaction(severity, f"a{i}", f"b{i}"))
            current = score(_meds(4), context, interactions).raw_score
            assert current >= previous
            previous = current

    def test_rounding_applies_after_multiplying(self) -> None:
        context = PatientContext(age=66, renal_function=OrganFunction.MODERATE)
        risk = score(_meds(6), context, [])
        assert risk.score == 3.51
        assert risk.level is RiskLevel.CRITICAL

    def test_ceiling_caps_displayed_score(self) -> None:
        risk = score(TWO_MEDS, PatientContext(age=90), [], ceiling=2.0)
        assert risk.score == 2.0
        assert risk.raw_score == 2.5
        assert risk.level is RiskLevel.HIGH


# --- Categorization ---


@pytest.mark.parametrize(
    ("value", "level"),
    [
        (1.0, RiskLevel.LOW),
        (1.49, RiskLevel.LOW),
        (1.5, RiskLevel.MODERATE),
        (1.99, RiskLevel.MODERATE),
        (2.0, RiskLevel.HIGH),
        (2.99, RiskLevel.HIGH),
        (3.0, RiskLevel.CRITICAL),
        (50.0, RiskLevel.CRITICAL),
    ],
)
def test_categorize_boundaries_are_inclusive(value: float, level: RiskLevel) -> None:
    assert categorize(value) is level


def test_round_half_up() -> None:
    assert round_half_up(1.125) == 1.13
    assert round_half_up(2.25) == 2.25
    assert round_half_up(1.0) == 1.0


# --- Mitigation strategies ---


class TestMitigationStrategies:
    def test_low_risk_has_none(self) -> None:
        assert mitigation_strategies(RiskLevel.LOW, []) == ()

    def test_high_risk_with_polypharmacy(self) -> None:
        strategies = mitigation_strategies(RiskLevel.HIGH, ["High polypharmacy (>10 drugs)"])
        assert strategies[0] == "Urgent clinical review within 24 hours"
        assert "Medication reconciliation and deprescribing review" in strategies

    def test_renal_factor_adds_renal_strategies(self) -> None:
        strategies = mitigation_strategies(RiskLevel.MODERATE, ["Severe renal impairment"])
        assert "Dose adjustment for renal function" in strategies
        assert "Avoid nephrotoxic combinations" in strategies

    def test_scorer_attaches_strategies(self) -> None:
        risk = score(_meds(16), None, [])
        assert "Medication reconciliation and deprescribing review" in risk.mitigation_strategies
        assert risk.to_dict()["color"] == "orange"
