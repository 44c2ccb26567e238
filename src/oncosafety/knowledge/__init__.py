"""Read-only clinical knowledge used by every analysis.

The curated tables live in plain Python modules in this package:
- interactions.py:  Known drug-drug interactions
- categories.py:    Drug categories, risk weights and score thresholds
- alternatives.py:  Safer substitutes and their renal exclusions

`get_knowledge_base()` turns those tables into one immutable
`KnowledgeBase`, built on first use and shared by every request. Tests (or
a deployment with its own formulary) can build a different one with
`KnowledgeBase.from_tables()` and pass it to the pipeline.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from oncosafety.knowledge import alternatives as _alternatives
from oncosafety.knowledge import categories as _categories
from oncosafety.knowledge import interactions as _interactions
from oncosafety.models import (
    DrugAlternative,
    EvidenceLevel,
    OrganFunction,
    RiskLevel,
    Severity,
    normalize_name,
)


@dataclass(frozen=True)
class KnownInteraction:
    """One row of the curated interaction table."""

    drugs: tuple[str, str]
    severity: Severity
    mechanism: str
    effect: str
    management: str
    evidence_level: EvidenceLevel
    sources: tuple[str, ...] = ()


@dataclass(frozen=True)
class KnowledgeBase:
    interactions: tuple[KnownInteraction, ...]
    categories: Mapping[str, tuple[str, ...]]
    alternatives: Mapping[str, tuple[DrugAlternative, ...]]
    severe_renal_exclusions: frozenset[str]
    age_weights: tuple[tuple[int, float, str], ...]
    polypharmacy_weights: tuple[tuple[int, float, str], ...]
    renal_weights: Mapping[OrganFunction, float]
    hepatic_weights: Mapping[OrganFunction, float]
    major_interaction_weight: float
    moderate_interaction_weight: float
    risk_thresholds: tuple[tuple[float, RiskLevel], ...]

    @classmethod
    def from_tables(
        cls,
        interactions: Iterable[Mapping[str, Any]] = _interactions.KNOWN_INTERACTIONS,
        categories: Mapping[str, Iterable[str]] = _categories.DRUG_CATEGORIES,
        alternatives: Mapping[str, Iterable[Mapping[str, str]]] = _alternatives.DRUG_ALTERNATIVES,
        severe_renal_exclusions: Iterable[str] = _alternatives.SEVERE_RENAL_EXCLUSIONS,
    ) -> KnowledgeBase:
        """Build a knowledge base from plain dict/list tables.

        Raises:
            ValueError: If a table row is malformed (wrong arity, unknown
                severity or evidence level).
        """
        rows = []
        for row in interactions:
            drugs = tuple(normalize_name(d) for d in row["drugs"])
            if len(drugs) != 2:
                raise ValueError(f"Interaction entry must name two drugs: {row['drugs']!r}")
            rows.append(
                KnownInteraction(
                    drugs=(drugs[0], drugs[1]),
                    severity=Severity(row["severity"]),
                    mechanism=row["mechanism"],
                    effect=row["effect"],
                    management=row["management"],
                    evidence_level=EvidenceLevel(row.get("evidence_level", "B")),
                    sources=tuple(row.get("sources", ())),
                )
            )

        return cls(
            interactions=tuple(rows),
            categories=MappingProxyType(
                {name: tuple(normalize_name(m) for m in members) for name, members in categories.items()}
            ),
            alternatives=MappingProxyType(
                {
                    normalize_name(drug): tuple(DrugAlternative(**alt) for alt in alts)
                    for drug, alts in alternatives.items()
                }
            ),
            severe_renal_exclusions=frozenset(normalize_name(d) for d in severe_renal_exclusions),
            age_weights=_categories.AGE_WEIGHTS,
            polypharmacy_weights=_categories.POLYPHARMACY_WEIGHTS,
            renal_weights=MappingProxyType(
                {OrganFunction(k): v for k, v in _categories.RENAL_WEIGHTS.items()}
            ),
            hepatic_weights=MappingProxyType(
                {OrganFunction(k): v for k, v in _categories.HEPATIC_WEIGHTS.items()}
            ),
            major_interaction_weight=_categories.MAJOR_INTERACTION_WEIGHT,
            moderate_interaction_weight=_categories.MODERATE_INTERACTION_WEIGHT,
            risk_thresholds=tuple(
                (threshold, RiskLevel(level)) for threshold, level in _categories.RISK_THRESHOLDS
            ),
        )

    def in_category(self, drug_key: str, category: str) -> bool:
        """True if the normalized drug name contains any member of the category."""
        return any(member in drug_key for member in self.categories.get(category, ()))

    def alternatives_for(self, drug_key: str) -> tuple[DrugAlternative, ...]:
        """Alternatives for a drug; an exact key wins over a contained one."""
        if drug_key in self.alternatives:
            return self.alternatives[drug_key]
        for key, alts in self.alternatives.items():
            if key in drug_key:
                return alts
        return ()


@lru_cache(maxsize=1)
def get_knowledge_base() -> KnowledgeBase:
    """Return the process-wide knowledge base (built once, never mutated)."""
    return KnowledgeBase.from_tables()
