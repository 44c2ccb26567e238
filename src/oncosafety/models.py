"""Domain types shared by the detector, scorer and synthesizer.

Everything here is an immutable value object. A fresh set of them is built
for every analysis request and nothing is persisted, so the same objects can
be handed between threads freely.

The `to_dict()` methods produce the JSON shape the HTTP API returns
(camelCase keys, enums as their string values).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any


def normalize_name(name: str) -> str:
    """Canonical comparable form of a drug name (case and spacing folded)."""
    return " ".join(name.split()).lower()


class Severity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordering weight, higher is more severe."""
        return _SEVERITY_RANK[self]

    @property
    def is_major_or_worse(self) -> bool:
        return self.rank >= _SEVERITY_RANK[Severity.MAJOR]


_SEVERITY_RANK = {
    Severity.MINOR: 0,
    Severity.MODERATE: 1,
    Severity.MAJOR: 2,
    Severity.CRITICAL: 3,
}


class Origin(str, Enum):
    """Where an interaction came from: the curated table or a heuristic."""

    KNOWN = "known"
    PREDICTED = "predicted"


class EvidenceLevel(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class OrganFunction(str, Enum):
    """Renal or hepatic impairment category."""

    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def color(self) -> str:
        """Traffic-light color shown next to the risk level in the UI."""
        return _RISK_COLORS[self]


_RISK_COLORS = {
    RiskLevel.LOW: "green",
    RiskLevel.MODERATE: "yellow",
    RiskLevel.HIGH: "orange",
    RiskLevel.CRITICAL: "red",
}


class AlertPriority(IntEnum):
    """Alert and recommendation priority. Lower value = more urgent."""

    URGENT = 0
    HIGH = 1
    MEDIUM = 2
    LOW = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class MechanismCategory(str, Enum):
    """Coarse pharmacologic mechanism classes that drive monitoring."""

    CYP_METABOLISM = "cyp_metabolism"
    QT_PROLONGATION = "qt_prolongation"
    BLEEDING = "bleeding"
    RENAL = "renal"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Medication:
    """A drug on the patient's list, identified by name (and optional code)."""

    name: str
    code: str | None = None
    # Canonical name supplied by a resolver (e.g. brand -> generic)
    canonical: str | None = None

    @property
    def key(self) -> str:
        return normalize_name(self.canonical or self.name)


@dataclass(frozen=True)
class PatientContext:
    """Patient factors that modify interaction risk.

    Every field is optional. A missing field means the factor was not
    assessed, so the matching risk multiplier is skipped; it never means
    the factor is absent.
    """

    age: int | None = None
    sex: str | None = None
    renal_function: OrganFunction | None = None
    hepatic_function: OrganFunction | None = None
    pregnant: bool | None = None
    allergies: frozenset[str] = frozenset()
    comorbidity_count: int | None = None
    # (gene, phenotype) pairs, e.g. ("CYP2D6", "poor_metabolizer")
    genetics: tuple[tuple[str, str], ...] = ()

    def phenotype(self, gene: str) -> str | None:
        """Return the recorded phenotype for a gene, if any."""
        wanted = gene.upper()
        for name, phenotype in self.genetics:
            if name.upper() == wanted:
                return phenotype
        return None

    def is_allergic_to(self, drug_name: str) -> bool:
        key = normalize_name(drug_name)
        for allergy in self.allergies:
            allergy = normalize_name(allergy)
            if allergy and (allergy == key or allergy in key):
                return True
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "age": self.age,
            "sex": self.sex,
            "renalFunction": self.renal_function.value if self.renal_function else None,
            "hepaticFunction": self.hepatic_function.value if self.hepatic_function else None,
            "pregnant": self.pregnant,
            "allergies": sorted(self.allergies),
            "comorbidityCount": self.comorbidity_count,
            "genetics": dict(self.genetics),
        }


# ---------------------------------------------------------------------------
# Detector output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class InteractionRecord:
    """A classified interaction between two medications.

    `drug_a` and `drug_b` are display names in medication-list order.
    `key_a` and `key_b` are the normalized (possibly resolved) names used for
    matching. Two records are equal when they describe the same unordered
    pair with the same classification, so {A, B} == {B, A}.
    """

    drug_a: str
    drug_b: str
    origin: Origin
    severity: Severity
    mechanism: str
    effect: str
    management: str
    confidence: float
    evidence_level: EvidenceLevel
    sources: tuple[str, ...] = ()
    rule: str | None = None
    mechanism_tags: tuple[MechanismCategory, ...] = ()
    key_a: str = ""
    key_b: str = ""

    def __post_init__(self) -> None:
        if not self.key_a:
            object.__setattr__(self, "key_a", normalize_name(self.drug_a))
        if not self.key_b:
            object.__setattr__(self, "key_b", normalize_name(self.drug_b))

    @property
    def pair(self) -> frozenset[str]:
        return frozenset((self.key_a, self.key_b))

    @property
    def drugs(self) -> tuple[str, str]:
        return (self.drug_a, self.drug_b)

    def partner_of(self, drug_name: str) -> str:
        """Return the other drug of the pair."""
        return self.drug_b if drug_name == self.drug_a else self.drug_a

    def _identity(self) -> tuple[Any, ...]:
        return (
            self.pair,
            self.origin,
            self.severity,
            self.mechanism,
            self.effect,
            self.confidence,
            self.evidence_level,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InteractionRecord):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def to_dict(self) -> dict[str, Any]:
        return {
            "drugPair": [self.drug_a, self.drug_b],
            "type": self.origin.value,
            "severity": self.severity.value,
            "mechanism": self.mechanism,
            "effect": self.effect,
            "management": self.management,
            "confidence": self.confidence,
            "evidenceLevel": self.evidence_level.value,
            "sources": list(self.sources),
            "rule": self.rule,
        }


# ---------------------------------------------------------------------------
# Scorer output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskAssessment:
    """Patient-level risk derived from context and detected interactions."""

    score: float  # capped and rounded for display
    raw_score: float  # unrounded, uncapped product of all multipliers
    level: RiskLevel
    factors: tuple[str, ...]  # in the order the multipliers were applied
    interaction_counts: dict[str, int]
    mitigation_strategies: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level.value,
            "color": self.level.color,
            "factors": list(self.factors),
            "interactionCounts": dict(self.interaction_counts),
            "recommendations": list(self.mitigation_strategies),
        }


# ---------------------------------------------------------------------------
# Synthesizer output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Alert:
    priority: AlertPriority
    severity: Severity
    category: str
    title: str
    message: str
    action: str
    timeframe: str
    source: str | None = None  # interaction pair or contraindicated drug
    monitoring: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": int(self.priority),
            "priorityLabel": self.priority.label,
            "severity": self.severity.value,
            "type": self.category,
            "title": self.title,
            "message": self.message,
            "action": self.action,
            "timeframe": self.timeframe,
            "source": self.source,
            "monitoring": list(self.monitoring),
        }


@dataclass(frozen=True)
class Recommendation:
    priority: AlertPriority
    category: str
    title: str
    description: str
    actions: tuple[str, ...]
    timeline: str
    evidence: str = "B"
    monitoring: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": self.priority.label,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "actions": list(self.actions),
            "timeline": self.timeline,
            "evidence": self.evidence,
            "monitoring": list(self.monitoring),
        }


@dataclass(frozen=True)
class DrugAlternative:
    name: str
    rationale: str
    monitoring: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "rationale": self.rationale, "monitoring": self.monitoring}


@dataclass(frozen=True)
class AlternativeSuggestion:
    """Safer substitutes for one drug of an interacting pair."""

    original_drug: str
    interacting_drug: str
    severity: Severity
    alternatives: tuple[DrugAlternative, ...]
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalDrug": self.original_drug,
            "interactingDrug": self.interacting_drug,
            "severity": self.severity.value,
            "alternatives": [alt.to_dict() for alt in self.alternatives],
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class EscalationRule:
    """A lab threshold that should trigger clinical action."""

    parameter: str
    threshold: str
    action: str

    def to_dict(self) -> dict[str, str]:
        return {"parameter": self.parameter, "threshold": self.threshold, "action": self.action}


@dataclass(frozen=True)
class MonitoringPlan:
    baseline: tuple[str, ...]
    ongoing: tuple[str, ...]
    escalation: tuple[EscalationRule, ...]
    schedule: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline": list(self.baseline),
            "ongoing": list(self.ongoing),
            "alerts": [rule.to_dict() for rule in self.escalation],
            "schedule": dict(self.schedule),
        }
