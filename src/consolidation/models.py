from __future__ import annotations

import math
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _normalize_token(value: str) -> str:
    return value.strip().upper().replace("_", "-").replace(" ", "-")


class Recommendation(StrEnum):
    GO = "GO"
    REFINE = "REFINE"
    NO_GO = "NO-GO"


class InsightCategory(StrEnum):
    CRITICAL = "CRITICAL"
    IMPORTANT = "IMPORTANT"
    RECOMMENDATION = "RECOMMENDATION"


class Impact(StrEnum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


RECOMMENDATION_ALIASES: dict[str, Recommendation] = {
    "GO": Recommendation.GO,
    "PROCEED": Recommendation.GO,
    "PROCEDER": Recommendation.GO,
    "REFINE": Recommendation.REFINE,
    "REFINAR": Recommendation.REFINE,
    "NO-GO": Recommendation.NO_GO,
    "NOGO": Recommendation.NO_GO,
    "DISCARD": Recommendation.NO_GO,
    "DESCARTAR": Recommendation.NO_GO,
}

CATEGORY_ALIASES: dict[str, InsightCategory] = {
    "CRITICAL": InsightCategory.CRITICAL,
    "CRÍTICO": InsightCategory.CRITICAL,
    "CRITICO": InsightCategory.CRITICAL,
    "IMPORTANT": InsightCategory.IMPORTANT,
    "IMPORTANTE": InsightCategory.IMPORTANT,
    "RECOMMENDATION": InsightCategory.RECOMMENDATION,
    "RECOMENDACIÓN": InsightCategory.RECOMMENDATION,
    "RECOMENDACION": InsightCategory.RECOMMENDATION,
}

IMPACT_ALIASES: dict[str, Impact] = {
    "HIGH": Impact.HIGH,
    "ALTO": Impact.HIGH,
    "MEDIUM": Impact.MEDIUM,
    "MEDIO": Impact.MEDIUM,
    "LOW": Impact.LOW,
    "BAJO": Impact.LOW,
}

SECTION_TITLES: tuple[str, ...] = (
    "Strategic Recommendation",
    "Red Flags",
    "Pre-Field Improvement Opportunities",
    "Critical Elements to Validate in Field",
)


class ReportModel(BaseModel):
    """Base for every report record: snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Decision(ReportModel):
    recommendation: Recommendation
    confidence: int = Field(ge=1, le=100)
    reasoning: str
    next_steps: list[str] = Field(default_factory=list)

    @field_validator("recommendation", mode="before")
    @classmethod
    def _canonical_recommendation(cls, value):
        if isinstance(value, str):
            key = _normalize_token(value)
            if key not in RECOMMENDATION_ALIASES:
                raise ValueError(f"unknown recommendation '{value}'")
            return RECOMMENDATION_ALIASES[key]
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value):
        if isinstance(value, bool):
            raise ValueError("confidence must be a number")
        if isinstance(value, str):
            value = float(value.strip().rstrip("%"))
        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                raise ValueError(f"confidence must be finite, got {value}")
            return int(max(1, min(100, round(value))))
        return value


class OptimizationInsight(ReportModel):
    category: InsightCategory
    title: str
    description: str = ""
    evidence: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)
    impact: Impact = Impact.MEDIUM

    @field_validator("category", mode="before")
    @classmethod
    def _canonical_category(cls, value):
        if isinstance(value, str):
            return CATEGORY_ALIASES.get(_normalize_token(value), value)
        return value

    @field_validator("impact", mode="before")
    @classmethod
    def _canonical_impact(cls, value):
        if isinstance(value, str):
            return IMPACT_ALIASES.get(_normalize_token(value), value)
        return value


class KeyFindings(ReportModel):
    strength_points: list[str] = Field(default_factory=list)
    weakness_points: list[str] = Field(default_factory=list)
    surprising_findings: list[str] = Field(default_factory=list)


class TargetOptimization(ReportModel):
    messaging: list[str] = Field(default_factory=list)
    positioning: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    pricing: list[str] = Field(default_factory=list)


class ResearchRecommendations(ReportModel):
    must_validate: list[str] = Field(default_factory=list)
    segments: list[str] = Field(default_factory=list)
    methodology: list[str] = Field(default_factory=list)


class Quote(ReportModel):
    text: str
    speaker: str
    context: str = ""


class SectionInsight(ReportModel):
    title: str
    summary: str
    impact: str = ""


class ReportSection(ReportModel):
    title: str
    content: str
    key_insights: list[SectionInsight] = Field(default_factory=list)
    relevant_quotes: list[Quote] = Field(default_factory=list)
    key_takeaways: list[str] = Field(default_factory=list)


class Timeline(ReportModel):
    analysis_date: datetime
    processing_seconds: float = 0.0
    based_on_interviews: int


class AnalysisContent(ReportModel):
    """The analytical body every consolidated report carries, whichever path produced it."""

    decision: Decision
    insights: list[OptimizationInsight] = Field(default_factory=list)
    key_findings: KeyFindings = Field(default_factory=KeyFindings)
    target_optimization: TargetOptimization = Field(default_factory=TargetOptimization)
    research_recommendations: ResearchRecommendations = Field(default_factory=ResearchRecommendations)


class _ConsolidatedReportBase(AnalysisContent):
    concept_id: str
    concept_name: str
    sections: list[ReportSection] = Field(default_factory=list)
    timeline: Timeline


class GeneratedReport(_ConsolidatedReportBase):
    source: Literal["generated"] = "generated"

    @property
    def is_fallback(self) -> bool:
        return False


class FallbackReport(_ConsolidatedReportBase):
    """Built locally when the consolidation call fails or its answer cannot be used."""

    source: Literal["fallback"] = "fallback"
    fallback_reason: str

    @property
    def is_fallback(self) -> bool:
        return True


ConsolidatedReport = Annotated[Union[GeneratedReport, FallbackReport], Field(discriminator="source")]
