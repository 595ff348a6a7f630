from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from evaluation.models import Metric


class Trend(StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class OpportunitySize(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Readiness(StrEnum):
    READY = "ready"
    NEEDS_DEVELOPMENT = "needs-development"
    NOT_READY = "not-ready"


class SegmentBreakdown(BaseModel):
    """Mean score and most-mentioned phrases for one slice of the panel."""

    name: str
    score: float | None = None
    drivers: list[str] = Field(default_factory=list)
    count: int = 0


class KPIInsight(BaseModel):
    kpi: Metric
    average_score: float
    trend: Trend
    key_drivers: list[str] = Field(default_factory=list)
    barriers: list[str] = Field(default_factory=list)
    segments: dict[str, SegmentBreakdown] = Field(default_factory=dict)
    city_segments: dict[str, SegmentBreakdown] = Field(default_factory=dict)
    business_implications: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class OverallPerformance(BaseModel):
    score: float
    ranking: int = 1
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class MarketOpportunity(BaseModel):
    size: OpportunitySize
    readiness: Readiness
    competitive_advantages: list[str] = Field(default_factory=list)
    market_barriers: list[str] = Field(default_factory=list)


class ConceptInsights(BaseModel):
    """Per-KPI and per-segment roll-up of every panel evaluation for one concept."""

    concept_id: str
    concept_name: str
    num_evaluations: int
    overall_performance: OverallPerformance
    kpi_insights: dict[Metric, KPIInsight]
    market_opportunity: MarketOpportunity
    strategic_recommendations: list[str] = Field(default_factory=list)
