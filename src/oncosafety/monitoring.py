"""Monitoring derivation — which labs and checks an interaction calls for.

Interactions are first sorted into MechanismCategory buckets. A record may
carry explicit `mechanism_tags` (the heuristics set them); on top of those,
keyword matching over the free-text mechanism and effect always runs:

    "CYP" in mechanism                      -> CYP_METABOLISM
    "QT" in mechanism                       -> QT_PROLONGATION
    "bleeding" in mechanism or effect       -> BLEEDING
    "renal"/"nephrotoxicity" in mechanism   -> RENAL

Categories compose: an interaction can need ECGs and INR checks at once.
"""

from __future__ import annotations

from collections.abc import Iterable

from oncosafety.models import (
    EscalationRule,
    InteractionRecord,
    MechanismCategory,
    MonitoringPlan,
)

MONITORING_ITEMS: dict[MechanismCategory, tuple[str, ...]] = {
    MechanismCategory.CYP_METABOLISM: (
        "Monitor for signs of toxicity",
        "Consider therapeutic drug monitoring if available",
    ),
    MechanismCategory.QT_PROLONGATION: (
        "ECG monitoring",
        "Electrolyte monitoring (K+, Mg2+)",
    ),
    MechanismCategory.BLEEDING: (
        "CBC with attention to platelet count",
        "PT/INR monitoring",
        "Monitor for signs of bleeding",
    ),
    MechanismCategory.RENAL: (
        "Serum creatinine and BUN",
        "Urine output monitoring",
    ),
}

BASELINE_TESTS: tuple[str, ...] = (
    "Complete blood count (CBC)",
    "Comprehensive metabolic panel (CMP)",
    "Liver function tests (LFTs)",
    "Renal function (creatinine, eGFR)",
    "Vital signs and symptom assessment",
)

ESCALATION_RULES: tuple[EscalationRule, ...] = (
    EscalationRule(
        parameter="Creatinine",
        threshold=">1.5x baseline",
        action="Evaluate for nephrotoxicity, consider dose reduction",
    ),
    EscalationRule(
        parameter="ALT/AST",
        threshold=">3x ULN",
        action="Hold hepatotoxic drugs, evaluate for drug-induced liver injury",
    ),
    EscalationRule(
        parameter="Platelet count",
        threshold="<100,000",
        action="Assess for drug-induced thrombocytopenia",
    ),
)

VISIT_SCHEDULE: dict[str, str] = {
    "immediate": "Baseline labs and assessment",
    "48hours": "Follow-up assessment if high-risk interactions",
    "1week": "First monitoring labs",
    "2weeks": "Safety assessment",
    "monthly": "Routine monitoring thereafter",
}


def classify_mechanism(interaction: InteractionRecord) -> tuple[MechanismCategory, ...]:
    """Mechanism categories for an interaction, in MechanismCategory order."""
    found = set(interaction.mechanism_tags)
    mechanism = interaction.mechanism
    lowered = mechanism.lower()

    if "CYP" in mechanism:
        found.add(MechanismCategory.CYP_METABOLISM)
    if "QT" in mechanism:
        found.add(MechanismCategory.QT_PROLONGATION)
    if "bleeding" in lowered or "bleeding" in interaction.effect.lower():
        found.add(MechanismCategory.BLEEDING)
    if "renal" in lowered or "nephrotoxicity" in lowered:
        found.add(MechanismCategory.RENAL)

    return tuple(category for category in MechanismCategory if category in found)


def monitoring_for(interaction: InteractionRecord) -> tuple[str, ...]:
    items: list[str] = []
    for category in classify_mechanism(interaction):
        items.extend(MONITORING_ITEMS[category])
    return tuple(items)


def build_monitoring_plan(interactions: Iterable[InteractionRecord]) -> MonitoringPlan:
    """Baseline tests plus the deduplicated union of interaction monitoring."""
    ongoing: list[str] = []
    for interaction in interactions:
        for item in monitoring_for(interaction):
            if item not in ongoing:
                ongoing.append(item)

    return MonitoringPlan(
        baseline=BASELINE_TESTS,
        ongoing=tuple(ongoing),
        escalation=ESCALATION_RULES,
        schedule=dict(VISIT_SCHEDULE),
    )
