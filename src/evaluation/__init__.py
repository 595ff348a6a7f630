from .context import demographic_context
from .evaluator import ConceptEvaluator
from .feedback import QualitativeFeedbackGenerator
from .models import (
    METRIC_LABELS,
    METRICS,
    ConceptScores,
    DemographicContext,
    Evaluation,
    Metric,
    QualitativeFeedback,
)
from .scoring import ScoringModel, round_half_up

__all__ = [
    "ConceptEvaluator",
    "ConceptScores",
    "DemographicContext",
    "Evaluation",
    "METRICS",
    "METRIC_LABELS",
    "Metric",
    "QualitativeFeedback",
    "QualitativeFeedbackGenerator",
    "ScoringModel",
    "demographic_context",
    "round_half_up",
]
