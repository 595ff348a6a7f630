from __future__ import annotations

from interviews.models import InterviewsResult

from .models import SECTION_TITLES, AnalysisContent, InsightCategory, Quote, ReportSection, SectionInsight

MAX_QUOTES = 3


def _section_insights(content: AnalysisContent, categories: set[InsightCategory]) -> list[SectionInsight]:
    return [
        SectionInsight(title=insight.title, summary=insight.description, impact=insight.impact.value)
        for insight in content.insights
        if insight.category in categories
    ]


def _evidence_quotes(content: AnalysisContent, categories: set[InsightCategory]) -> list[Quote]:
    quotes = [
        Quote(text=evidence, speaker="Interview evidence", context=insight.title)
        for insight in content.insights
        if insight.category in categories
        for evidence in insight.evidence
    ]
    return quotes[:MAX_QUOTES]


def sections_from_analysis(content: AnalysisContent, interviews: InterviewsResult) -> list[ReportSection]:
    """Lay out a generated analysis as the four fixed report sections."""
    decision = content.decision
    findings = content.key_findings
    optimization = content.target_optimization
    research = content.research_recommendations
    every_category = set(InsightCategory)

    strategic = ReportSection(
        title=SECTION_TITLES[0],
        content=(
            f"Based on {interviews.total_interviews} synthetic interviews the recommendation is "
            f"{decision.recommendation.value} ({decision.confidence}% confidence). {decision.reasoning}"
        ),
        key_insights=[SectionInsight(title=point, summary="Strength", impact="") for point in findings.strength_points],
        relevant_quotes=_evidence_quotes(content, every_category),
        key_takeaways=list(decision.next_steps),
    )
    red_flags = ReportSection(
        title=SECTION_TITLES[1],
        content="Critical barriers raised during the interviews.",
        key_insights=_section_insights(content, {InsightCategory.CRITICAL}),
        relevant_quotes=_evidence_quotes(content, {InsightCategory.CRITICAL}),
        key_takeaways=list(findings.weakness_points),
    )
    improvements = ReportSection(
        title=SECTION_TITLES[2],
        content="Adjustments to make before taking the concept to field research.",
        key_insights=_section_insights(content, {InsightCategory.IMPORTANT, InsightCategory.RECOMMENDATION}),
        key_takeaways=[*optimization.messaging, *optimization.positioning, *optimization.features, *optimization.pricing],
    )
    validation = ReportSection(
        title=SECTION_TITLES[3],
        content="Aspects that real consumers must confirm in field research.",
        key_insights=[
            *(SectionInsight(title=segment, summary="Priority segment") for segment in research.segments),
            *(SectionInsight(title=method, summary="Suggested methodology") for method in research.methodology),
        ],
        key_takeaways=list(research.must_validate),
    )
    return [strategic, red_flags, improvements, validation]
