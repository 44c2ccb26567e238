"""Oncology drug-safety engine.

This package turns a patient's medication list into a drug-drug interaction
report: which pairs interact, how risky the regimen is for this patient, and
what the care team should do about it.

The work happens in three stages, each feeding the next:
- detector.py:   Find known and predicted interactions between drug pairs
- scoring.py:    Fold patient factors and interactions into one risk score
- synthesis.py:  Build prioritized alerts, recommendations and a monitoring plan

pipeline.py wires the stages together and app.py serves them over HTTP.
"""

from oncosafety.pipeline import AnalysisPipeline, AnalysisResult, analyze
from oncosafety.validation import AnalysisValidationError

__all__ = [
    "AnalysisPipeline",
    "AnalysisResult",
    "AnalysisValidationError",
    "analyze",
]
