from .aggregator import SegmentInsightsAggregator, classify_trend, rank_concepts, top_mentions
from .models import (
    ConceptInsights,
    KPIInsight,
    MarketOpportunity,
    OpportunitySize,
    OverallPerformance,
    Readiness,
    SegmentBreakdown,
    Trend,
)

__all__ = [
    "ConceptInsights",
    "KPIInsight",
    "MarketOpportunity",
    "OpportunitySize",
    "OverallPerformance",
    "Readiness",
    "SegmentBreakdown",
    "SegmentInsightsAggregator",
    "Trend",
    "classify_trend",
    "rank_concepts",
    "top_mentions",
]
