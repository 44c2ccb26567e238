"""Interaction Detector — turns a medication list into classified drug pairs.

For every unordered pair of distinct medications:
1. Look the pair up in the curated known-interaction table. A hit becomes a
   "known" interaction with fixed confidence (KNOWN_CONFIDENCE).
2. Otherwise run the heuristic rules (see heuristics.py) in order. The
   first rule that matches gives a "predicted" interaction.

Pair enumeration is O(n²) in the number of medications. That is fine: one
patient rarely takes more than a few dozen drugs.

Unknown drug names are never an error; they just match nothing. A heuristic
that raises is logged and treated as "no match", and its name is reported in
DetectionResult.failed_rules so the caller can flag the analysis as
degraded instead of presenting it as complete.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from oncosafety.heuristics import DEFAULT_RULES, HeuristicRule
from oncosafety.knowledge import KnowledgeBase, KnownInteraction, get_knowledge_base
from oncosafety.models import InteractionRecord, Medication, Origin, PatientContext

logger = logging.getLogger(__name__)

KNOWN_CONFIDENCE = 0.95

# A medication name shorter than this never matches a longer table name by
# being contained in it ("in" would otherwise match almost every entry).
MIN_CONTAINED_NAME_LENGTH = 4


@dataclass(frozen=True)
class DetectionResult:
    """Interactions found in one detection pass, in detection order."""

    interactions: tuple[InteractionRecord, ...]
    failed_rules: tuple[str, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.failed_rules)

    def __iter__(self) -> Iterator[InteractionRecord]:
        return iter(self.interactions)

    def __len__(self) -> int:
        return len(self.interactions)


def _name_matches(key: str, member: str) -> bool:
    if key == member or member in key:
        return True
    return len(key) >= MIN_CONTAINED_NAME_LENGTH and key in member


def _entry_match(entry: KnownInteraction, key_a: str, key_b: str) -> bool | None:
    """Match a table entry against a pair.

    Returns True for an exact match, False for a containment match and None
    when the entry does not apply. Each drug has to match a different member
    of the entry.
    """
    first, second = entry.drugs
    if {key_a, key_b} == {first, second}:
        return True
    if (_name_matches(key_a, first) and _name_matches(key_b, second)) or (
        _name_matches(key_a, second) and _name_matches(key_b, first)
    ):
        return False
    return None


def _outranks(candidate: InteractionRecord, current: InteractionRecord) -> bool:
    """Higher severity wins, then higher confidence, then known over predicted."""
    return (
        candidate.severity.rank,
        candidate.confidence,
        candidate.origin is Origin.KNOWN,
    ) > (
        current.severity.rank,
        current.confidence,
        current.origin is Origin.KNOWN,
    )


def _same_drug(key_a: str, key_b: str) -> bool:
    """True when one name is the other plus a salt or form ("methadone hcl")."""
    if key_a == key_b:
        return True
    shorter, longer = sorted((key_a, key_b), key=len)
    return len(shorter) >= MIN_CONTAINED_NAME_LENGTH and shorter in longer


def _unique_medications(medications: Iterable[Medication | str]) -> list[Medication]:
    """Drop blank names and repeats of the same drug; first one wins.

    "amiodarone HCl" after "amiodarone" is a repeat, so a drug is never
    paired with its own salt and a table entry is never matched twice.
    """
    unique: list[Medication] = []
    for med in medications:
        if isinstance(med, str):
            med = Medication(name=med)
        if not med.key:
            continue
        duplicate_of = next((kept for kept in unique if _same_drug(kept.key, med.key)), None)
        if duplicate_of is not None:
            logger.debug("Treating %r as a repeat of %r", med.name, duplicate_of.name)
            continue
        unique.append(med)
    return unique


class InteractionDetector:
    """Classifies every drug pair against the knowledge base.

    The detector holds no per-request state, so one instance can serve any
    number of concurrent analyses.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase | None = None,
        rules: Sequence[HeuristicRule] = DEFAULT_RULES,
    ) -> None:
        self.knowledge_base = knowledge_base or get_knowledge_base()
        self.rules = tuple(rules)

    def detect(
        self,
        medications: Sequence[Medication | str],
        context: PatientContext | None = None,
    ) -> DetectionResult:
        """Find interactions among the medications.

        Args:
            medications: The medication list. Order only affects the order of
                the result and the order of drug names within each record.
            context: Patient context. Accepted for interface symmetry with
                the scorer; the current rules do not depend on it.

        Returns:
            DetectionResult with at most one record per unordered pair.
        """
        meds = _unique_medications(medications)
        failed: list[str] = []
        found: dict[frozenset[str], InteractionRecord] = {}

        for i in range(len(meds)):
            for j in range(i + 1, len(meds)):
                record = self._match_known(meds[i], meds[j]) or self._predict(
                    meds[i], meds[j], failed
                )
                if record is None:
                    continue
                current = found.get(record.pair)
                if current is None or _outranks(record, current):
                    found[record.pair] = record

        if failed:
            logger.warning("Interaction detection degraded; failed rules: %s", ", ".join(failed))
        return DetectionResult(interactions=tuple(found.values()), failed_rules=tuple(failed))

    def _match_known(self, a: Medication, b: Medication) -> InteractionRecord | None:
        best: KnownInteraction | None = None
        best_rank: tuple[bool, int] | None = None
        for entry in self.knowledge_base.interactions:
            exact = _entry_match(entry, a.key, b.key)
            if exact is None:
                continue
            rank = (exact, entry.severity.rank)
            # strict ">" keeps the earlier entry on ties
            if best_rank is None or rank > best_rank:
                best, best_rank = entry, rank

        if best is None:
            return None
        return InteractionRecord(
            drug_a=a.name,
            drug_b=b.name,
            origin=Origin.KNOWN,
            severity=best.severity,
            mechanism=best.mechanism,
            effect=best.effect,
            management=best.management,
            confidence=KNOWN_CONFIDENCE,
            evidence_level=best.evidence_level,
            sources=best.sources,
            key_a=a.key,
            key_b=b.key,
        )

    def _predict(
        self, a: Medication, b: Medication, failed: list[str]
    ) -> InteractionRecord | None:
        """First matching rule wins; a rule that raises is skipped."""
        for rule in self.rules:
            try:
                candidate = rule.apply(a.name, b.name, a.key, b.key, self.knowledge_base)
            except Exception:
                logger.exception("Heuristic %r failed; treating the pair as unmatched", rule.name)
                if rule.name not in failed:
                    failed.append(rule.name)
                continue
            if candidate is not None:
                return candidate
        return None


def detect(
    medications: Sequence[Medication | str],
    context: PatientContext | None = None,
    knowledge_base: KnowledgeBase | None = None,
) -> list[InteractionRecord]:
    """Convenience wrapper returning just the interaction list."""
    return list(InteractionDetector(knowledge_base).detect(medications, context))
