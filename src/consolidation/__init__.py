from .engine import ConsolidationEngine, build_consolidated_data, build_optimization_prompt
from .enrichment import PRICE_RESISTANCE_TITLE, enrich_with_price_resistance, price_resistance_count
from .fallback import build_fallback_report, heuristic_recommendation
from .models import (
    SECTION_TITLES,
    AnalysisContent,
    ConsolidatedReport,
    Decision,
    FallbackReport,
    GeneratedReport,
    Impact,
    InsightCategory,
    KeyFindings,
    OptimizationInsight,
    Quote,
    Recommendation,
    ReportSection,
    ResearchRecommendations,
    SectionInsight,
    TargetOptimization,
    Timeline,
)
from .parsing import REQUIRED_KEYS, parse_analysis

__all__ = [
    "AnalysisContent",
    "ConsolidatedReport",
    "ConsolidationEngine",
    "Decision",
    "FallbackReport",
    "GeneratedReport",
    "Impact",
    "InsightCategory",
    "KeyFindings",
    "OptimizationInsight",
    "PRICE_RESISTANCE_TITLE",
    "Quote",
    "REQUIRED_KEYS",
    "Recommendation",
    "ReportSection",
    "ResearchRecommendations",
    "SECTION_TITLES",
    "SectionInsight",
    "TargetOptimization",
    "Timeline",
    "build_consolidated_data",
    "build_fallback_report",
    "build_optimization_prompt",
    "enrich_with_price_resistance",
    "heuristic_recommendation",
    "parse_analysis",
    "price_resistance_count",
]
