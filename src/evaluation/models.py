from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Metric(StrEnum):
    APPEAL = "appeal"
    RELEVANCE = "relevance"
    BELIEVABILITY = "believability"
    UNIQUENESS = "uniqueness"
    PURCHASE_INTENTION = "purchase_intention"


METRICS: tuple[Metric, ...] = tuple(Metric)

METRIC_LABELS: dict[Metric, str] = {
    Metric.APPEAL: "Appeal",
    Metric.RELEVANCE: "Relevance",
    Metric.BELIEVABILITY: "Believability",
    Metric.UNIQUENESS: "Differentiation",
    Metric.PURCHASE_INTENTION: "Purchase Intention",
}

SCORE_MIN = 1.0
SCORE_MAX = 10.0


class ConceptScores(BaseModel):
    """Five bounded metrics, each on a 1-10 scale."""

    model_config = ConfigDict(frozen=True)

    appeal: float
    relevance: float
    believability: float
    uniqueness: float
    purchase_intention: float

    @field_validator("*")
    @classmethod
    def _within_bounds(cls, value: float) -> float:
        if value < SCORE_MIN or value > SCORE_MAX:
            raise ValueError(f"score must be within [{SCORE_MIN}, {SCORE_MAX}], got {value}")
        return value

    def get(self, metric: Metric | str) -> float:
        return float(getattr(self, Metric(metric).value))


class QualitativeFeedback(BaseModel):
    model_config = ConfigDict(frozen=True)

    likes: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    emotional_reaction: str = ""


class DemographicContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    life_stage_relevance: str
    tier_appropriateness: str
    regional_considerations: str


class Evaluation(BaseModel):
    """Scored and narrative reaction of one persona to one concept."""

    model_config = ConfigDict(frozen=True)

    persona_id: str
    concept_id: str
    scores: ConceptScores
    qualitative_feedback: QualitativeFeedback
    demographic_context: DemographicContext
