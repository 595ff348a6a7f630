from __future__ import annotations

import re
from datetime import datetime, timezone

from interviews.models import EmotionalTone, InterviewsResult, InterviewTranscript
from interviews.tone import PRICE_RESISTANCE_KEYWORDS

from .models import (
    SECTION_TITLES,
    Decision,
    FallbackReport,
    KeyFindings,
    Quote,
    Recommendation,
    ReportSection,
    ResearchRecommendations,
    SectionInsight,
    TargetOptimization,
    Timeline,
)

FALLBACK_CONFIDENCE = 40
QUOTE_LENGTH = 100

POSITIVE_PATTERN = re.compile(r"i like|excellent|\bgood\b|interesting|i would buy|i'd buy|\blove\b")
NEGATIVE_PATTERN = re.compile(r"i don't|i do not|too expensive|wouldn't buy|would not buy|worries|bad taste")


def count_signals(interviews: InterviewsResult) -> tuple[int, int]:
    text = " ".join(r for t in interviews.transcripts for r in t.responses()).lower()
    return len(POSITIVE_PATTERN.findall(text)), len(NEGATIVE_PATTERN.findall(text))


def heuristic_recommendation(positive: int, negative: int) -> Recommendation:
    if positive > negative * 2:
        return Recommendation.GO
    if negative > positive * 2:
        return Recommendation.NO_GO
    return Recommendation.REFINE


def _truncate(text: str, limit: int = QUOTE_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def _quotes(transcripts: list[InterviewTranscript], tone: EmotionalTone | None = None, limit: int = 2) -> list[Quote]:
    quotes: list[Quote] = []
    for transcript in transcripts:
        for exchange in transcript.exchanges:
            if tone is not None and exchange.emotional_tone != tone:
                continue
            quotes.append(Quote(text=_truncate(exchange.response), speaker=transcript.persona_name, context=exchange.question))
            if len(quotes) >= limit:
                return quotes
    return quotes


def _price_quotes(transcripts: list[InterviewTranscript], limit: int = 2) -> list[Quote]:
    quotes: list[Quote] = []
    for transcript in transcripts:
        for exchange in transcript.exchanges:
            if any(keyword in exchange.response.lower() for keyword in PRICE_RESISTANCE_KEYWORDS):
                quotes.append(
                    Quote(text=_truncate(exchange.response), speaker=transcript.persona_name, context=exchange.question)
                )
                break
        if len(quotes) >= limit:
            break
    return quotes


def build_fallback_report(interviews: InterviewsResult, reason: str) -> FallbackReport:
    """Deterministic, evidence-light report built only from the local transcripts."""
    transcripts = interviews.transcripts
    count = interviews.total_interviews
    positive, negative = count_signals(interviews)
    recommendation = heuristic_recommendation(positive, negative)
    balance = "positive" if positive > negative else "negative" if negative > positive else "mixed"
    price_quotes = _price_quotes(transcripts)

    reasoning = (
        f"Based on {count} synthetic interviews, {recommendation.value} is recommended. Automatic analysis "
        f"detected {positive} positive and {negative} negative mentions."
    )
    go_takeaway = (
        "The concept shows potential for field research"
        if recommendation == Recommendation.GO
        else "The concept needs adjustments before field research"
    )

    sections = [
        ReportSection(
            title=SECTION_TITLES[0],
            content=reasoning,
            key_insights=[
                SectionInsight(
                    title="Overall sentiment analysis",
                    summary=f"The balance of responses is {balance}",
                    impact="Determines concept viability",
                )
            ],
            relevant_quotes=_quotes(transcripts[:1]),
            key_takeaways=[go_takeaway, "Validation with real consumers is required"],
        ),
        ReportSection(
            title=SECTION_TITLES[1],
            content="Automatic keyword analysis of potential barriers.",
            key_insights=[
                SectionInsight(
                    title="Price sensitivity detected" if price_quotes else "Value perception to validate",
                    summary="Price came up across the interviews" if price_quotes else "No explicit price objections",
                    impact="May limit adoption",
                )
            ],
            relevant_quotes=price_quotes or _quotes(transcripts, EmotionalTone.NEGATIVE),
            key_takeaways=(
                ["Price perceived as a barrier", "Need to communicate value"]
                if price_quotes
                else ["Value perception still to be confirmed", "Need to communicate value"]
            ),
        ),
        ReportSection(
            title=SECTION_TITLES[2],
            content="Adjustments suggested by automatic analysis.",
            key_insights=[
                SectionInsight(
                    title="Simplify communication",
                    summary="The product message can be clearer",
                    impact="Would improve comprehension",
                )
            ],
            relevant_quotes=_quotes(transcripts, EmotionalTone.CURIOUS),
            key_takeaways=["Clarify the main benefits", "Adapt communication by segment"],
        ),
        ReportSection(
            title=SECTION_TITLES[3],
            content="Key aspects for research with real consumers.",
            key_insights=[
                SectionInsight(
                    title="Real purchase intention",
                    summary="Validate with real consumers",
                    impact="Determines commercial viability",
                )
            ],
            key_takeaways=["Optimal price", "Purchase frequency", "Preferred channels"],
        ),
    ]

    return FallbackReport(
        concept_id=interviews.concept.id,
        concept_name=interviews.concept.name,
        decision=Decision(
            recommendation=recommendation,
            confidence=FALLBACK_CONFIDENCE,
            reasoning=reasoning,
            next_steps=[
                "Review the interview transcripts manually",
                "Re-run the consolidation analysis when the service is available",
                "Validate price and value proposition in field research",
            ],
        ),
        insights=[],
        key_findings=KeyFindings(
            strength_points=[q.text for q in _quotes(transcripts, EmotionalTone.POSITIVE, limit=3)],
            weakness_points=[q.text for q in _quotes(transcripts, EmotionalTone.NEGATIVE, limit=3)],
            surprising_findings=[],
        ),
        target_optimization=TargetOptimization(
            messaging=["Clarify the main benefits"],
            positioning=["Adapt communication by segment"],
            features=[],
            pricing=["Validate price acceptance"] if price_quotes else [],
        ),
        research_recommendations=ResearchRecommendations(
            must_validate=["Optimal price", "Purchase frequency", "Preferred channels"],
            segments=[],
            methodology=["Validation with real consumers"],
        ),
        sections=sections,
        timeline=Timeline(
            analysis_date=datetime.now(timezone.utc),
            based_on_interviews=count,
        ),
        fallback_reason=reason,
    )
