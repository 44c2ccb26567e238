"""Pharmacologic heuristics for pairs missing from the curated table.

Each rule checks category membership of the two drugs and, when it
matches, produces a fully classified "predicted" interaction with the
rule's own fixed confidence and evidence level.

Rules are evaluated in the order of DEFAULT_RULES. With the default
categories no pair can satisfy two rules at once, but custom categories can
overlap; the first rule that matches wins, so the order of the tuple is the
precedence.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from oncosafety.knowledge import KnowledgeBase
from oncosafety.models import (
    EvidenceLevel,
    InteractionRecord,
    MechanismCategory,
    Origin,
    Severity,
)

# (key_a, key_b, knowledge_base) -> matched?
PairMatcher = Callable[[str, str, KnowledgeBase], bool]


def both_in(category: str) -> PairMatcher:
    """Match when both drugs belong to the category."""

    def matcher(key_a: str, key_b: str, kb: KnowledgeBase) -> bool:
        return kb.in_category(key_a, category) and kb.in_category(key_b, category)

    return matcher


def one_each(first: str, second: str) -> PairMatcher:
    """Match when one drug is in `first` and the other in `second`.

    Either orientation counts, so the result does not depend on the order of
    the medication list.
    """

    def matcher(key_a: str, key_b: str, kb: KnowledgeBase) -> bool:
        return (kb.in_category(key_a, first) and kb.in_category(key_b, second)) or (
            kb.in_category(key_b, first) and kb.in_category(key_a, second)
        )

    return matcher


@dataclass(frozen=True)
class HeuristicRule:
    name: str
    matches: PairMatcher
    severity: Severity
    mechanism: str
    effect: str
    management: str
    confidence: float
    evidence_level: EvidenceLevel
    sources: tuple[str, ...] = ()
    mechanism_tags: tuple[MechanismCategory, ...] = ()

    def apply(
        self,
        drug_a: str,
        drug_b: str,
        key_a: str,
        key_b: str,
        kb: KnowledgeBase,
    ) -> InteractionRecord | None:
        """Return a predicted interaction for the pair, or None."""
        if not self.matches(key_a, key_b, kb):
            return None
        return InteractionRecord(
            drug_a=drug_a,
            drug_b=drug_b,
            origin=Origin.PREDICTED,
            severity=self.severity,
            mechanism=self.mechanism,
            effect=self.effect,
            management=self.management,
            confidence=self.confidence,
            evidence_level=self.evidence_level,
            sources=self.sources,
            rule=self.name,
            mechanism_tags=self.mechanism_tags,
            key_a=key_a,
            key_b=key_b,
        )


QT_PROLONGATION = HeuristicRule(
    name="qt_prolongation",
    matches=both_in("qt_prolonging"),
    severity=Severity.MAJOR,
    mechanism="Additive QT prolongation",
    effect="Torsades de pointes risk",
    management="Monitor ECG and electrolytes; consider alternatives",
    confidence=0.85,
    evidence_level=EvidenceLevel.B,
    sources=("Category analysis",),
    mechanism_tags=(MechanismCategory.QT_PROLONGATION,),
)

OPIOID_CNS_DEPRESSANT = HeuristicRule(
    name="opioid_cns_depressant",
    matches=one_each("opioids", "cns_depressants"),
    severity=Severity.MAJOR,
    mechanism="Additive CNS and respiratory depression",
    effect="Respiratory depression and death risk",
    management="Avoid combination; consider naloxone availability",
    confidence=0.92,
    evidence_level=EvidenceLevel.A,
    sources=("Category analysis", "CDC Guidelines"),
)

CYP3A4_INHIBITION = HeuristicRule(
    name="cyp3a4_inhibition",
    matches=one_each("cyp3a4_inhibitors", "cyp3a4_substrates"),
    severity=Severity.MODERATE,
    mechanism="CYP3A4 inhibition increases substrate exposure",
    effect="Increased toxicity risk of substrate drug",
    management="Monitor for toxicity; consider dose reduction",
    confidence=0.78,
    evidence_level=EvidenceLevel.B,
    sources=("Mechanism analysis",),
    mechanism_tags=(MechanismCategory.CYP_METABOLISM,),
)

# Evaluation order. The first matching rule wins.
DEFAULT_RULES: tuple[HeuristicRule, ...] = (
    QT_PROLONGATION,
    OPIOID_CNS_DEPRESSANT,
    CYP3A4_INHIBITION,
)
