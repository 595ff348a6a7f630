from __future__ import annotations

import pytest

from evaluation.models import ConceptScores, DemographicContext, Evaluation, Metric, QualitativeFeedback
from insights.aggregator import SegmentInsightsAggregator, classify_trend, rank_concepts, top_mentions
from insights.models import OpportunitySize, Trend
from panel.models import BrandRelationship, Concept, Persona
from pipeline.errors import ValidationError
from pipeline.runner import score_concepts

APPEALS = [9, 8, 7, 3, 2]


def _persona(idx: int, tier: str, is_user: bool, city: str = "Bogota") -> Persona:
    return Persona(
        id=f"p{idx}",
        name=f"Person {idx}",
        age=30 + idx,
        city=city,
        socioeconomic_tier=tier,
        brand_relationship=BrandRelationship(is_current_user=is_user),
    )


def _concept(concept_id: str = "c1", price_tier: str = "medium") -> Concept:
    return Concept(id=concept_id, name=f"Concept {concept_id}", description="A shampoo", price_tier=price_tier)


def _evaluation(idx: int, appeal: float, likes: list[str] | None = None, concerns: list[str] | None = None) -> Evaluation:
    return Evaluation(
        persona_id=f"p{idx}",
        concept_id="c1",
        scores=ConceptScores(appeal=appeal, relevance=8, believability=3, uniqueness=5, purchase_intention=5),
        qualitative_feedback=QualitativeFeedback(likes=likes or [], concerns=concerns or []),
        demographic_context=DemographicContext(
            life_stage_relevance="", tier_appropriateness="", regional_considerations=""
        ),
    )


def _panel() -> list[Persona]:
    return [
        _persona(1, "A", True, city="Cali"),
        _persona(2, "B", True, city="Cali"),
        _persona(3, "D", False),
        _persona(4, "D", False),
        _persona(5, "D", False),
    ]


def _evaluations() -> list[Evaluation]:
    evaluations = [_evaluation(i + 1, appeal) for i, appeal in enumerate(APPEALS)]
    evaluations[0] = _evaluation(1, 9, likes=["I love the scent"])
    evaluations[4] = _evaluation(5, 2, concerns=["I don't like the color"])
    return evaluations


def test_appeal_mean_and_neutral_trend() -> None:
    insights = SegmentInsightsAggregator(_panel()).aggregate(_concept(), _evaluations())
    appeal = insights.kpi_insights[Metric.APPEAL]

    assert appeal.average_score == 5.8
    assert appeal.trend == Trend.NEUTRAL
    assert insights.num_evaluations == 5


def test_trend_boundaries_are_inclusive() -> None:
    assert classify_trend(7.0) == Trend.POSITIVE
    assert classify_trend(4.0) == Trend.NEGATIVE
    assert classify_trend(6.9) == Trend.NEUTRAL


def test_overall_strengths_and_weaknesses() -> None:
    insights = SegmentInsightsAggregator(_panel()).aggregate(_concept(), _evaluations())
    performance = insights.overall_performance

    assert performance.score == 5.4
    assert performance.strengths == ["Relevance"]
    assert performance.weaknesses == ["Believability"]
    assert insights.strategic_recommendations[0].startswith("DEVELOP")
    assert insights.market_opportunity.size == OpportunitySize.MEDIUM
    assert insights.market_opportunity.competitive_advantages == ["Needs stronger differentiation"]


def test_drivers_and_barriers_come_from_extreme_scores() -> None:
    appeal = SegmentInsightsAggregator(_panel()).aggregate(_concept(), _evaluations()).kpi_insights[Metric.APPEAL]

    assert appeal.key_drivers == ["I love the scent"]
    assert appeal.barriers == ["I don't like the color"]
    assert appeal.recommendations[-1] == "Address the main barrier: I don't like the color"
    assert appeal.business_implications == ["The main barriers identified need a specific strategy"]


def test_segments_split_panel() -> None:
    appeal = SegmentInsightsAggregator(_panel()).aggregate(_concept(), _evaluations()).kpi_insights[Metric.APPEAL]

    assert appeal.segments["higher_tier"].score == 8.5
    assert appeal.segments["higher_tier"].count == 2
    assert appeal.segments["lower_tier"].score == 4.0
    assert appeal.segments["brand_users"].drivers == ["I love the scent"]
    assert appeal.segments["non_users"].drivers == ["Concern: I don't like the color"]
    assert list(appeal.city_segments) == ["Cali", "Bogota"]
    assert appeal.city_segments["Cali"].score == 8.5


def test_empty_segment_has_no_score() -> None:
    panel = [_persona(i + 1, "A", True) for i in range(5)]
    appeal = SegmentInsightsAggregator(panel).aggregate(_concept(), _evaluations()).kpi_insights[Metric.APPEAL]

    assert appeal.segments["lower_tier"].score is None
    assert appeal.segments["lower_tier"].count == 0
    assert appeal.segments["non_users"].score is None


def test_aggregation_is_idempotent() -> None:
    aggregator = SegmentInsightsAggregator(_panel())
    evaluations = _evaluations()

    assert aggregator.aggregate(_concept(), evaluations) == aggregator.aggregate(_concept(), evaluations)


def test_empty_evaluations_rejected() -> None:
    with pytest.raises(ValidationError):
        SegmentInsightsAggregator(_panel()).aggregate(_concept(), [])


def test_top_mentions_keeps_first_seen_order_on_ties() -> None:
    assert top_mentions(["b", "a", "a", "b", "c"]) == ["b", "a", "c"]


def test_rank_concepts_orders_by_overall_score() -> None:
    panel = _panel()
    concepts = [_concept("premium", "super-premium"), _concept("cheap", "economical")]

    ranked = score_concepts(concepts, panel)

    assert [item.concept_id for item in ranked] == ["cheap", "premium"]
    assert [item.overall_performance.ranking for item in ranked] == [1, 2]


def test_rank_concepts_ties_keep_input_order() -> None:
    aggregator = SegmentInsightsAggregator(_panel())
    first = aggregator.aggregate(_concept("first"), _evaluations())
    second = aggregator.aggregate(_concept("second"), _evaluations())

    ranked = rank_concepts([first, second])

    assert [item.concept_id for item in ranked] == ["first", "second"]
    assert ranked[1].overall_performance.ranking == 2


def test_drivers_rank_repeated_phrases_first() -> None:
    evaluations = [
        _evaluation(1, 9, likes=["Interesting scent"]),
        _evaluation(2, 8, likes=["Attractive bottle"]),
        _evaluation(3, 7, likes=["Attractive bottle"]),
        _evaluation(4, 3, concerns=["Boring color"]),
        _evaluation(5, 2, concerns=["I don't like the cap", "Boring color"]),
    ]

    appeal = SegmentInsightsAggregator(_panel()).aggregate(_concept(), evaluations).kpi_insights[Metric.APPEAL]

    assert appeal.key_drivers == ["Attractive bottle", "Interesting scent"]
    assert appeal.barriers == ["Boring color", "I don't like the cap"]
