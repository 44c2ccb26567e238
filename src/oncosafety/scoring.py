"""Risk Scorer — folds patient factors and interactions into one score.

The score starts at 1.0 and is multiplied, in this fixed order, by:
1. the highest matching age bracket (>85, >75, >65; never more than one)
2. renal impairment (moderate or severe only)
3. hepatic impairment (moderate or severe only)
4. the highest matching polypharmacy bracket (>15, >10, >5 drugs)
5. interaction load: 1 + 0.5 × major + 0.2 × moderate (critical counts as major)

Each applied multiplier (except the interaction load) adds one
human-readable factor, and the factor list keeps that order because
clinicians read it verbatim. The score never decreases when a factor or an
interaction is added, since every multiplier is >= 1.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from oncosafety.config import RISK_SCORE_CEILING
from oncosafety.knowledge import KnowledgeBase, get_knowledge_base
from oncosafety.models import (
    InteractionRecord,
    Medication,
    OrganFunction,
    PatientContext,
    RiskAssessment,
    RiskLevel,
    Severity,
)

logger = logging.getLogger(__name__)

# Mild impairment is deliberately not penalized.
PENALIZED_IMPAIRMENT = (OrganFunction.SEVERE, OrganFunction.MODERATE)

_LEVEL_STRATEGIES: dict[RiskLevel, tuple[str, ...]] = {
    RiskLevel.CRITICAL: (
        "Emergency medication review required",
        "Consider hospitalization for medication optimization",
        "Pharmacist consultation mandatory",
    ),
    RiskLevel.HIGH: (
        "Urgent clinical review within 24 hours",
        "Enhanced monitoring protocols",
        "Patient/caregiver education on warning signs",
    ),
    RiskLevel.MODERATE: (
        "Clinical review within 1 week",
        "Standard monitoring with increased vigilance",
        "Consider medication alternatives",
    ),
    RiskLevel.LOW: (),
}

# (substring looked for in a factor, strategies it adds)
_FACTOR_STRATEGIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("polypharmacy", ("Medication reconciliation and deprescribing review",)),
    ("renal", ("Dose adjustment for renal function", "Avoid nephrotoxic combinations")),
)


def count_by_severity(interactions: Iterable[InteractionRecord]) -> dict[str, int]:
    counts = {severity.value: 0 for severity in Severity}
    total = 0
    for interaction in interactions:
        counts[interaction.severity.value] += 1
        total += 1
    counts["total"] = total
    return counts


def categorize(score: float, knowledge_base: KnowledgeBase | None = None) -> RiskLevel:
    """Map a score to exactly one risk level (thresholds are inclusive)."""
    kb = knowledge_base or get_knowledge_base()
    for threshold, level in kb.risk_thresholds:
        if score >= threshold:
            return level
    return RiskLevel.LOW


def round_half_up(value: float, places: int = 2) -> float:
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def mitigation_strategies(level: RiskLevel, factors: Sequence[str]) -> tuple[str, ...]:
    """Strategies for the risk level, then any factor-specific extras."""
    strategies = list(_LEVEL_STRATEGIES[level])
    lowered = [factor.lower() for factor in factors]
    for keyword, extras in _FACTOR_STRATEGIES:
        if any(keyword in factor for factor in lowered):
            strategies.extend(s for s in extras if s not in strategies)
    return tuple(strategies)


def score(
    medications: Sequence[Medication | str],
    context: PatientContext | None,
    interactions: Iterable[InteractionRecord],
    knowledge_base: KnowledgeBase | None = None,
    ceiling: float = RISK_SCORE_CEILING,
) -> RiskAssessment:
    """Compute the patient's risk assessment.

    Args:
        medications: The full medication list (its length drives the
            polypharmacy bracket, repeats included).
        context: Patient context; missing fields skip their multiplier.
        interactions: Interactions from the detector.
        knowledge_base: Weight tables to use (defaults to the shared one).
        ceiling: Display cap for the score.

    Returns:
        RiskAssessment with the capped, rounded score and its level.
    """
    kb = knowledge_base or get_knowledge_base()
    context = context or PatientContext()
    risk = 1.0
    factors: list[str] = []

    if context.age is not None:
        for threshold, weight, label in kb.age_weights:
            if context.age > threshold:
                risk *= weight
                factors.append(label)
                break

    organs = (
        (context.renal_function, kb.renal_weights, "renal"),
        (context.hepatic_function, kb.hepatic_weights, "hepatic"),
    )
    for function, weights, organ in organs:
        if function in PENALIZED_IMPAIRMENT:
            risk *= weights[function]
            factors.append(f"{function.value.capitalize()} {organ} impairment")

    medication_count = len(medications)
    for threshold, weight, label in kb.polypharmacy_weights:
        if medication_count > threshold:
            risk *= weight
            factors.append(label)
            break

    counts = count_by_severity(interactions)
    major = counts[Severity.MAJOR.value] + counts[Severity.CRITICAL.value]
    moderate = counts[Severity.MODERATE.value]
    risk *= 1 + kb.major_interaction_weight * major + kb.moderate_interaction_weight * moderate

    capped = min(risk, ceiling)
    level = categorize(capped, kb)
    logger.debug("Risk score %.3f (%s) from %d factor(s)", risk, level.value, len(factors))

    return RiskAssessment(
        score=round_half_up(capped),
        raw_score=risk,
        level=level,
        factors=tuple(factors),
        interaction_counts=counts,
        mitigation_strategies=mitigation_strategies(level, factors),
    )
