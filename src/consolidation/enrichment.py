from __future__ import annotations

from interviews.models import InterviewsResult
from interviews.tone import PRICE_RESISTANCE_KEYWORDS

from .models import Impact, InsightCategory, OptimizationInsight

PRICE_RESISTANCE_TITLE = "Significant price resistance"


def price_resistance_count(interviews: InterviewsResult) -> int:
    return sum(1 for t in interviews.transcripts if t.mentions_any(PRICE_RESISTANCE_KEYWORDS))


def enrich_with_price_resistance(report, interviews: InterviewsResult, threshold: float = 0.4):
    """Append a CRITICAL price insight when more than `threshold` of the interviews raise price."""
    total = interviews.total_interviews
    mentions = price_resistance_count(interviews)
    if total == 0 or mentions <= total * threshold:
        return report

    insight = OptimizationInsight(
        category=InsightCategory.CRITICAL,
        title=PRICE_RESISTANCE_TITLE,
        description=f"{mentions}/{total} interviewees expressed concern about price",
        evidence=["Automatic pattern analysis of responses"],
        action_items=["Review the pricing strategy", "Communicate the value proposition better"],
        impact=Impact.HIGH,
    )
    return report.model_copy(update={"insights": [*report.insights, insight]})
