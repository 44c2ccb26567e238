"""Analysis pipeline — validation, detection, scoring and synthesis in one call.

Data flows strictly forward:

    validate -> (resolve names) -> detect -> score -> synthesize -> summarize

No stage mutates another stage's output, and the only object shared between
requests is the read-only knowledge base, so one AnalysisPipeline can serve
concurrent requests without locking.

Errors come in two kinds:
- Malformed input raises AnalysisValidationError before any work is done.
- Internal failures (a heuristic or the name resolver raising) do not abort
  the analysis. The result comes back with `degraded=True` and a warning per
  failure, so a partial answer is never mistaken for a clean one.

Usage:
    pipeline = AnalysisPipeline()
    result = pipeline.analyze(["warfarin", "amiodarone"], {"age": 72})
    result.risk_assessment.level  # RiskLevel.HIGH (age 72 x one major interaction)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from oncosafety.cache import AnalysisCache
from oncosafety.config import (
    CACHE_ENABLED,
    CACHE_MAX_ENTRIES,
    CACHE_TTL_SECONDS,
    RISK_SCORE_CEILING,
)
from oncosafety.detector import DetectionResult, InteractionDetector
from oncosafety.heuristics import DEFAULT_RULES, HeuristicRule
from oncosafety.knowledge import KnowledgeBase, get_knowledge_base
from oncosafety.models import (
    Alert,
    AlternativeSuggestion,
    InteractionRecord,
    Medication,
    MonitoringPlan,
    Origin,
    PatientContext,
    Recommendation,
    RiskAssessment,
    RiskLevel,
    Severity,
)
from oncosafety.scoring import score
from oncosafety.synthesis import synthesize
from oncosafety.validation import coerce_medications, parse_patient_context

logger = logging.getLogger(__name__)

# Maps a display name to a canonical drug name, or None if unknown
NameResolver = Callable[[str], str | None]

URGENT_ACTIONS = ("Review medication list", "Consider alternatives", "Enhance monitoring")
ROUTINE_ACTIONS = ("Continue current regimen", "Routine monitoring sufficient")


@dataclass(frozen=True)
class AnalysisSummary:
    interaction_count: int
    major_interaction_count: int
    critical_interaction_count: int
    risk_level: RiskLevel
    risk_score: float
    key_findings: tuple[str, ...]
    urgent_actions: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "interactionCount": self.interaction_count,
            "majorInteractionCount": self.major_interaction_count,
            "criticalInteractionCount": self.critical_interaction_count,
            "riskLevel": self.risk_level.value,
            "riskScore": self.risk_score,
            "keyFindings": list(self.key_findings),
            "urgentActions": list(self.urgent_actions),
        }


@dataclass(frozen=True)
class AnalysisResult:
    analysis_id: str
    timestamp: str
    medications: tuple[Medication, ...]
    patient_context: PatientContext
    interactions: tuple[InteractionRecord, ...]
    risk_assessment: RiskAssessment
    alerts: tuple[Alert, ...]
    recommendations: tuple[Recommendation, ...]
    alternatives: tuple[AlternativeSuggestion, ...]
    monitoring_plan: MonitoringPlan
    summary: AnalysisSummary
    degraded: bool = False
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "analysisId": self.analysis_id,
            "timestamp": self.timestamp,
            "medications": [med.name for med in self.medications],
            "patientContext": self.patient_context.to_dict(),
            "interactions": [i.to_dict() for i in self.interactions],
            "riskAssessment": self.risk_assessment.to_dict(),
            "alerts": [a.to_dict() for a in self.alerts],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "alternatives": [s.to_dict() for s in self.alternatives],
            "monitoringPlan": self.monitoring_plan.to_dict(),
            "summary": self.summary.to_dict(),
            "degraded": self.degraded,
            "warnings": list(self.warnings),
        }


def build_summary(
    interactions: Sequence[InteractionRecord],
    risk: RiskAssessment,
    degraded: bool = False,
) -> AnalysisSummary:
    """Headline numbers and key findings for the analysis."""
    major = [i for i in interactions if i.severity.is_major_or_worse]
    critical = [i for i in major if i.severity is Severity.CRITICAL]
    findings: list[str] = []

    if risk.level is RiskLevel.CRITICAL:
        findings.append("Critical drug interaction risk detected")

    major_known = sum(1 for i in major if i.origin is Origin.KNOWN)
    if major_known:
        findings.append(f"{major_known} major known interaction(s)")

    major_predicted = sum(1 for i in major if i.origin is Origin.PREDICTED)
    if major_predicted:
        findings.append(f"{major_predicted} predicted major interaction(s)")

    if len(risk.factors) > 3:
        findings.append(f"Multiple risk factors present ({len(risk.factors)})")

    if degraded:
        findings.append("Analysis incomplete: some interaction checks could not be evaluated")

    if not findings:
        findings.append("No major interactions detected")

    return AnalysisSummary(
        interaction_count=len(interactions),
        major_interaction_count=len(major),
        critical_interaction_count=len(critical),
        risk_level=risk.level,
        risk_score=risk.score,
        key_findings=tuple(findings),
        urgent_actions=URGENT_ACTIONS if interactions else ROUTINE_ACTIONS,
    )


class AnalysisPipeline:
    """Runs complete drug-safety analyses.

    Attributes:
        knowledge_base: Shared, read-only clinical tables.
        detector: The interaction detector built from the knowledge base.
        resolver: Optional name resolver (e.g. brand -> generic). It must be
            synchronous; any lookup it needs has to be ready before the call.
        cache: Optional result cache.
        score_ceiling: Display cap for the risk score.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase | None = None,
        rules: Sequence[HeuristicRule] = DEFAULT_RULES,
        resolver: NameResolver | None = None,
        cache: AnalysisCache | None = None,
        score_ceiling: float = RISK_SCORE_CEILING,
    ) -> None:
        self.knowledge_base = knowledge_base or get_knowledge_base()
        self.detector = InteractionDetector(self.knowledge_base, rules)
        self.resolver = resolver
        self.cache = cache
        self.score_ceiling = score_ceiling

    def _resolve(self, medications: list[Medication], warnings: list[str]) -> list[Medication]:
        if self.resolver is None:
            return medications
        resolved: list[Medication] = []
        for med in medications:
            try:
                canonical = self.resolver(med.name)
            except Exception:
                logger.exception("Name resolver failed for %r; using the name as given", med.name)
                warnings.append(f"Could not resolve medication name {med.name!r}")
                canonical = None
            resolved.append(replace(med, canonical=canonical) if canonical else med)
        return resolved

    def detect(self, medications: Any) -> DetectionResult:
        """Validate the medication list and run detection only."""
        meds = self._resolve(coerce_medications(medications), [])
        return self.detector.detect(meds)

    def analyze(self, medications: Any, context: Any = None) -> AnalysisResult:
        """Run the full analysis for one patient.

        Args:
            medications: List of drug names, Medication objects or mappings
                with a "name".
            context: PatientContext, mapping, or None.

        Returns:
            AnalysisResult; check `degraded` before trusting it as complete.

        Raises:
            AnalysisValidationError: If either input is malformed.
        """
        meds = coerce_medications(medications)
        patient = parse_patient_context(context)

        cache_key = None
        if self.cache is not None:
            cache_key = AnalysisCache.make_key(meds, patient)
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Analysis cache hit")
                # every request gets its own id and timestamp
                return replace(
                    cached,
                    analysis_id=str(uuid.uuid4()),
                    timestamp=datetime.now(timezone.utc).isoformat(),
                )

        warnings: list[str] = []
        meds = self._resolve(meds, warnings)

        detection = self.detector.detect(meds, patient)
        for rule in detection.failed_rules:
            warnings.append(f"Interaction rule {rule!r} failed; pairs it covers were not checked")
        interactions = detection.interactions

        risk = score(meds, patient, interactions, self.knowledge_base, self.score_ceiling)
        synthesis = synthesize(meds, interactions, patient, risk, self.knowledge_base)
        degraded = bool(warnings)

        result = AnalysisResult(
            analysis_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc).isoformat(),
            medications=tuple(meds),
            patient_context=patient,
            interactions=interactions,
            risk_assessment=risk,
            alerts=synthesis.alerts,
            recommendations=synthesis.recommendations,
            alternatives=synthesis.alternatives,
            monitoring_plan=synthesis.monitoring_plan,
            summary=build_summary(interactions, risk, degraded),
            degraded=degraded,
            warnings=tuple(warnings),
        )

        if cache_key is not None and not degraded:
            self.cache.put(cache_key, result)  # type: ignore[union-attr]

        logger.info(
            "Analyzed %d medication(s): %d interaction(s), risk %s (%.2f)%s",
            len(meds),
            len(interactions),
            risk.level.value,
            risk.score,
            " [degraded]" if degraded else "",
        )
        return result


@lru_cache(maxsize=1)
def get_pipeline() -> AnalysisPipeline:
    """Process-wide pipeline configured from the environment."""
    cache = AnalysisCache(CACHE_TTL_SECONDS, CACHE_MAX_ENTRIES) if CACHE_ENABLED else None
    return AnalysisPipeline(cache=cache)


def analyze(medications: Any, context: Any = None) -> AnalysisResult:
    """Analyze with the default pipeline. See AnalysisPipeline.analyze()."""
    return get_pipeline().analyze(medications, context)
