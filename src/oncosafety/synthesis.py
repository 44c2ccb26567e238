"""Alert & Recommendation Synthesizer.

Takes the detector's interactions and the scorer's risk assessment and
produces what the care team actually sees:
- alerts:           prioritized, one per actionable finding
- recommendations:  broader clinical actions (interventions, dosing, monitoring)
- alternatives:     safer substitutes for drugs in significant interactions
- monitoring plan:  baseline labs, ongoing checks and escalation thresholds

All alerts are generated first and sorted once at the end. Python's sort is
stable, so alerts with the same priority stay in generation order (which,
for interaction alerts, is detection order).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from oncosafety.knowledge import KnowledgeBase, get_knowledge_base
from oncosafety.models import (
    Alert,
    AlertPriority,
    AlternativeSuggestion,
    InteractionRecord,
    Medication,
    MonitoringPlan,
    OrganFunction,
    PatientContext,
    Recommendation,
    RiskAssessment,
    RiskLevel,
    Severity,
    normalize_name,
)
from oncosafety.monitoring import build_monitoring_plan, monitoring_for

logger = logging.getLogger(__name__)

GERIATRIC_AGE = 75
POLYPHARMACY_COUNT = 10
ELEVATED_RISK = (RiskLevel.HIGH, RiskLevel.CRITICAL)
ALTERNATIVE_SEVERITIES = (Severity.MODERATE, Severity.MAJOR, Severity.CRITICAL)
POOR_METABOLIZER = "poor_metabolizer"


@dataclass(frozen=True)
class Synthesis:
    alerts: tuple[Alert, ...]
    recommendations: tuple[Recommendation, ...]
    alternatives: tuple[AlternativeSuggestion, ...]
    monitoring_plan: MonitoringPlan


def _pair_label(interaction: InteractionRecord) -> str:
    return f"{interaction.drug_a} + {interaction.drug_b}"


def _display_name(med: Medication | str) -> str:
    return med if isinstance(med, str) else med.name


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


def build_alerts(
    medications: Sequence[Medication | str],
    interactions: Sequence[InteractionRecord],
    context: PatientContext,
    risk: RiskAssessment,
) -> list[Alert]:
    alerts: list[Alert] = []

    if risk.level in ELEVATED_RISK:
        alerts.append(
            Alert(
                priority=AlertPriority.URGENT,
                severity=Severity.CRITICAL if risk.level is RiskLevel.CRITICAL else Severity.MAJOR,
                category="safety",
                title="Immediate Review Required",
                message="High-risk drug combination detected. Immediate clinical review recommended.",
                action="Review all medications and consider alternatives",
                timeframe="Immediate",
            )
        )

    for interaction in interactions:
        if not interaction.severity.is_major_or_worse:
            continue
        alerts.append(
            Alert(
                priority=AlertPriority.HIGH,
                severity=interaction.severity,
                category="interaction",
                title=f"{interaction.severity.value.capitalize()} Interaction: {_pair_label(interaction)}",
                message=interaction.effect,
                action=interaction.management,
                timeframe="Within 24 hours",
                source=_pair_label(interaction),
                monitoring=monitoring_for(interaction),
            )
        )

    seen_allergies: set[str] = set()
    for med in medications:
        name = _display_name(med)
        key = normalize_name(name)
        if key in seen_allergies or not context.is_allergic_to(name):
            continue
        seen_allergies.add(key)
        alerts.append(
            Alert(
                priority=AlertPriority.URGENT,
                severity=Severity.CRITICAL,
                category="allergy",
                title=f"Allergy Contraindication: {name}",
                message=f"{name} matches a documented allergy for this patient.",
                action="Discontinue or verify the allergy history before administration",
                timeframe="Immediate",
                source=name,
            )
        )

    if context.phenotype("CYP2D6") == POOR_METABOLIZER:
        affected = [i for i in interactions if "CYP2D6" in i.mechanism]
        if affected:
            alerts.append(
                Alert(
                    priority=AlertPriority.MEDIUM,
                    severity=Severity.MODERATE,
                    category="pharmacogenomic",
                    title="Pharmacogenomic Risk",
                    message="CYP2D6 poor metabolizer with CYP2D6-mediated interaction(s): "
                    + ", ".join(_pair_label(i) for i in affected),
                    action="Review CPIC guidance for affected drugs; consider genotype-guided dosing",
                    timeframe="Within 1 week",
                    source=_pair_label(affected[0]),
                )
            )

    if context.age is not None and context.age > GERIATRIC_AGE:
        alerts.append(
            Alert(
                priority=AlertPriority.MEDIUM,
                severity=Severity.MODERATE,
                category="geriatric",
                title="Geriatric Considerations",
                message="Enhanced sensitivity to drug effects in elderly patients",
                action="Consider lower starting doses and slower titration",
                timeframe="Next medication review",
            )
        )

    if len(medications) > POLYPHARMACY_COUNT:
        alerts.append(
            Alert(
                priority=AlertPriority.MEDIUM,
                severity=Severity.MODERATE,
                category="polypharmacy",
                title="Medication Reconciliation",
                message="High number of medications increases interaction risk",
                action="Review necessity of each medication; consider deprescribing",
                timeframe="Next medication review",
            )
        )

    alerts.sort(key=lambda alert: alert.priority)
    return alerts


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def _dose_adjustment_actions(context: PatientContext) -> tuple[str, ...]:
    actions: list[str] = []
    if context.renal_function in (OrganFunction.MODERATE, OrganFunction.SEVERE):
        actions.append("Adjust renally cleared drugs to current creatinine clearance")
    if context.hepatic_function in (OrganFunction.MODERATE, OrganFunction.SEVERE):
        actions.append("Reduce doses of hepatically metabolized drugs")
    if context.age is not None and context.age > 65:
        actions.append("Start low and titrate slowly")
    actions.extend(("Consider dose reduction", "Increase monitoring frequency"))
    return tuple(actions)


def build_recommendations(
    medications: Sequence[Medication | str],
    interactions: Sequence[InteractionRecord],
    context: PatientContext,
    risk: RiskAssessment,
    monitoring_plan: MonitoringPlan,
) -> list[Recommendation]:
    recommendations: list[Recommendation] = []

    for interaction in interactions:
        if not interaction.severity.is_major_or_worse:
            continue
        recommendations.append(
            Recommendation(
                priority=(
                    AlertPriority.URGENT
                    if interaction.severity is Severity.CRITICAL
                    else AlertPriority.HIGH
                ),
                category="intervention",
                title=f"Address {interaction.severity.value} interaction: {_pair_label(interaction)}",
                description=interaction.effect or "Significant drug interaction",
                actions=(interaction.management or "Monitor closely",),
                timeline="Immediate",
                evidence=interaction.evidence_level.value,
                monitoring=monitoring_for(interaction),
            )
        )

    if risk.level in ELEVATED_RISK:
        recommendations.append(
            Recommendation(
                priority=AlertPriority.HIGH,
                category="dosing",
                title="Consider dose adjustments based on risk factors",
                description="Patient has elevated risk factors requiring dose modifications",
                actions=_dose_adjustment_actions(context),
                timeline="Within 24 hours",
                evidence="A",
            )
        )

    if len(medications) > POLYPHARMACY_COUNT:
        recommendations.append(
            Recommendation(
                priority=AlertPriority.MEDIUM,
                category="polypharmacy",
                title="Medication Reconciliation",
                description="High number of medications increases interaction risk",
                actions=(
                    "Review necessity of each medication",
                    "Consider deprescribing",
                ),
                timeline="Next medication review",
                evidence="B",
            )
        )

    recommendations.append(
        Recommendation(
            priority=AlertPriority.LOW,
            category="surveillance",
            title="Enhanced monitoring protocol",
            description="Implement systematic monitoring for drug safety",
            actions=monitoring_plan.ongoing or ("Weekly labs for 4 weeks", "Symptom assessment"),
            timeline="Ongoing",
            evidence="A",
        )
    )

    recommendations.sort(key=lambda rec: rec.priority)
    return recommendations


# ---------------------------------------------------------------------------
# Alternatives
# ---------------------------------------------------------------------------


def suggest_alternatives(
    interactions: Sequence[InteractionRecord],
    context: PatientContext,
    knowledge_base: KnowledgeBase | None = None,
) -> list[AlternativeSuggestion]:
    """Safer substitutes for each drug of a moderate-or-worse interaction.

    Alternatives the patient is allergic to, or that are excluded under
    severe renal impairment, are removed. A drug with nothing left to offer
    produces no suggestion.
    """
    kb = knowledge_base or get_knowledge_base()
    severe_renal = context.renal_function is OrganFunction.SEVERE
    suggestions: list[AlternativeSuggestion] = []

    for interaction in interactions:
        if interaction.severity not in ALTERNATIVE_SEVERITIES:
            continue
        for drug, key in ((interaction.drug_a, interaction.key_a), (interaction.drug_b, interaction.key_b)):
            candidates = tuple(
                alt
                for alt in kb.alternatives_for(key)
                if not context.is_allergic_to(alt.name)
                and not (severe_renal and normalize_name(alt.name) in kb.severe_renal_exclusions)
            )
            if not candidates:
                continue
            partner = interaction.partner_of(drug)
            suggestions.append(
                AlternativeSuggestion(
                    original_drug=drug,
                    interacting_drug=partner,
                    severity=interaction.severity,
                    alternatives=candidates,
                    reasoning=(
                        f"Safer alternatives to avoid {interaction.severity.value} "
                        f"interaction with {partner}"
                    ),
                )
            )
    return suggestions


def synthesize(
    medications: Sequence[Medication | str],
    interactions: Sequence[InteractionRecord],
    context: PatientContext | None,
    risk: RiskAssessment,
    knowledge_base: KnowledgeBase | None = None,
) -> Synthesis:
    """Build alerts, recommendations, alternatives and the monitoring plan."""
    context = context or PatientContext()
    monitoring_plan = build_monitoring_plan(interactions)
    alerts = build_alerts(medications, interactions, context, risk)
    recommendations = build_recommendations(
        medications, interactions, context, risk, monitoring_plan
    )
    alternatives = suggest_alternatives(interactions, context, knowledge_base)
    logger.debug(
        "Synthesized %d alert(s), %d recommendation(s), %d alternative set(s)",
        len(alerts),
        len(recommendations),
        len(alternatives),
    )
    return Synthesis(
        alerts=tuple(alerts),
        recommendations=tuple(recommendations),
        alternatives=tuple(alternatives),
        monitoring_plan=monitoring_plan,
    )
