from __future__ import annotations

from collections import Counter
from typing import Callable

import numpy as np

from evaluation.models import METRIC_LABELS, METRICS, Evaluation, Metric
from evaluation.scoring import round_half_up
from panel.models import DEFAULT_MARKET, Concept, MarketProfile, Persona
from pipeline.errors import ValidationError

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

HIGH_SCORE = 7.0
LOW_SCORE = 4.0
MEDIUM_SCORE = 5.0
DIFFERENTIATION_SCORE = 6.0
MAX_DRIVERS = 4

DRIVER_KEYWORDS: dict[Metric, tuple[str, ...]] = {
    Metric.APPEAL: ("attractive", "interesting", "appealing", "liked", "love"),
    Metric.RELEVANCE: ("need", "useful", "relevant", "important", "matters", "perfect for"),
    Metric.BELIEVABILITY: ("believable", "trust", "reliable", "true", "possible", "works"),
    Metric.UNIQUENESS: ("unique", "different", "innovative", "new"),
    Metric.PURCHASE_INTENTION: ("buy", "purchase", "try", "interest"),
}

BARRIER_KEYWORDS: dict[Metric, tuple[str, ...]] = {
    Metric.APPEAL: ("do not like", "don't like", "boring", "unattractive"),
    Metric.RELEVANCE: ("don't need", "do not need", "irrelevant", "useless"),
    Metric.BELIEVABILITY: ("don't believe", "doubt", "false", "impossible", "promise a lot"),
    Metric.UNIQUENESS: ("same as others", "common", "already exists"),
    Metric.PURCHASE_INTENTION: ("expensive", "wouldn't buy", "would not buy", "high price", "goes over"),
}

ADVANTAGE_KEYWORDS = ("unique", "different")

KPI_RECOMMENDATIONS: dict[Metric, tuple[list[str], list[str]]] = {
    # (when the mean is low, otherwise)
    Metric.APPEAL: (
        ["Improve the visual presentation of the concept", "Evaluate changes to naming or messaging"],
        ["Keep the most attractive design elements"],
    ),
    Metric.RELEVANCE: (
        ["Clarify the key functional benefits", "Connect better with consumer needs"],
        ["Strengthen communication of personal relevance"],
    ),
    Metric.BELIEVABILITY: (
        ["Provide stronger scientific evidence", "Simplify claims to gain credibility"],
        ["Use credibility as a competitive advantage"],
    ),
    Metric.UNIQUENESS: (
        ["Build stronger differentiation versus competitors", "Identify unique elements not yet communicated"],
        ["Protect and reinforce the differentiating elements"],
    ),
    Metric.PURCHASE_INTENTION: (
        ["Review the pricing strategy", "Improve the overall value proposition"],
        ["Optimize conversion with a launch strategy"],
    ),
}

SegmentPredicate = Callable[[Persona], bool]


def classify_trend(mean: float) -> Trend:
    if mean >= HIGH_SCORE:
        return Trend.POSITIVE
    if mean <= LOW_SCORE:
        return Trend.NEGATIVE
    return Trend.NEUTRAL


def top_mentions(items: list[str]) -> list[str]:
    # Counter keeps insertion order, so ties resolve to the first-seen phrase.
    return [item for item, _ in Counter(items).most_common()]


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


def _filter_by_keywords(phrases: list[str], keywords: tuple[str, ...]) -> list[str]:
    return [phrase for phrase in phrases if any(keyword in phrase.lower() for keyword in keywords)]


class SegmentInsightsAggregator:
    """Rolls per-persona evaluations of one concept up into KPI, segment and market insights."""

    def __init__(self, personas: list[Persona], market: MarketProfile | None = None) -> None:
        self.market = market or DEFAULT_MARKET
        self._personas = {persona.id: persona for persona in personas}

    def aggregate(self, concept: Concept, evaluations: list[Evaluation]) -> ConceptInsights:
        if not evaluations:
            raise ValidationError(f"No evaluations provided for concept '{concept.name}'")

        means = {metric: self._mean(evaluations, metric) for metric in METRICS}
        kpi_insights = {metric: self._kpi_insight(metric, means[metric], evaluations) for metric in METRICS}
        overall = round_half_up(float(np.mean(list(means.values()))))

        return ConceptInsights(
            concept_id=concept.id,
            concept_name=concept.name,
            num_evaluations=len(evaluations),
            overall_performance=OverallPerformance(
                score=overall,
                strengths=[METRIC_LABELS[m] for m in METRICS if means[m] >= HIGH_SCORE],
                weaknesses=[METRIC_LABELS[m] for m in METRICS if means[m] <= LOW_SCORE],
            ),
            kpi_insights=kpi_insights,
            market_opportunity=self._market_opportunity(means, evaluations),
            strategic_recommendations=self._strategic_recommendations(overall),
        )

    # ------------------------------------------------------------------
    # Per-KPI
    # ------------------------------------------------------------------

    def _kpi_insight(self, metric: Metric, mean: float, evaluations: list[Evaluation]) -> KPIInsight:
        high = [e for e in evaluations if e.scores.get(metric) >= HIGH_SCORE]
        low = [e for e in evaluations if e.scores.get(metric) <= LOW_SCORE]

        likes = [like for e in high for like in e.qualitative_feedback.likes]
        concerns = [concern for e in low for concern in e.qualitative_feedback.concerns]
        drivers = top_mentions(_filter_by_keywords(likes, DRIVER_KEYWORDS[metric]))[:MAX_DRIVERS]
        barriers = top_mentions(_filter_by_keywords(concerns, BARRIER_KEYWORDS[metric]))[:MAX_DRIVERS]

        return KPIInsight(
            kpi=metric,
            average_score=mean,
            trend=classify_trend(mean),
            key_drivers=drivers,
            barriers=barriers,
            segments={
                name: self._segment(name, predicate, metric, evaluations)
                for name, predicate in self._segment_predicates()
            },
            city_segments={
                city: self._segment(city, lambda p, c=city: p.city == c, metric, evaluations)
                for city in self._cities(evaluations)
            },
            business_implications=self._business_implications(metric, mean, barriers),
            recommendations=self._kpi_recommendations(metric, mean, barriers),
        )

    def _segment_predicates(self) -> list[tuple[str, SegmentPredicate]]:
        return [
            ("higher_tier", self.market.is_higher_tier),
            ("lower_tier", lambda p: not self.market.is_higher_tier(p)),
            ("brand_users", lambda p: p.brand_relationship.is_current_user),
            ("non_users", lambda p: not p.brand_relationship.is_current_user),
        ]

    def _segment(
        self,
        name: str,
        predicate: SegmentPredicate,
        metric: Metric,
        evaluations: list[Evaluation],
    ) -> SegmentBreakdown:
        members = [
            e for e in evaluations if e.persona_id in self._personas and predicate(self._personas[e.persona_id])
        ]
        if not members:
            return SegmentBreakdown(name=name)

        likes = top_mentions([like for e in members for like in e.qualitative_feedback.likes])[:3]
        concerns = top_mentions([c for e in members for c in e.qualitative_feedback.concerns])[:2]
        return SegmentBreakdown(
            name=name,
            score=self._mean(members, metric),
            drivers=likes + [f"Concern: {concern}" for concern in concerns],
            count=len(members),
        )

    def _cities(self, evaluations: list[Evaluation]) -> list[str]:
        cities = [
            self._personas[e.persona_id].city
            for e in evaluations
            if e.persona_id in self._personas and self._personas[e.persona_id].city
        ]
        return _unique(cities)

    @staticmethod
    def _business_implications(metric: Metric, mean: float, barriers: list[str]) -> list[str]:
        label = METRIC_LABELS[metric]
        implications: list[str] = []
        if mean >= HIGH_SCORE:
            implications.append(f"Key strength: {label} shows high potential")
            implications.append("Opportunity to capitalize on it in communication and marketing")
        elif mean <= LOW_SCORE:
            implications.append(f"Critical improvement area: {label} needs immediate attention")
            implications.append("Risk of underperformance if it is not addressed")
        if barriers:
            implications.append("The main barriers identified need a specific strategy")
        return implications

    @staticmethod
    def _kpi_recommendations(metric: Metric, mean: float, barriers: list[str]) -> list[str]:
        recommendations: list[str] = []
        if mean >= HIGH_SCORE:
            recommendations.append("Amplify communication of the most valued aspects")
            recommendations.append("Use it as a differentiating advantage in the marketing strategy")
        elif mean <= LOW_SCORE:
            recommendations.append("Reformulate the concept to address the main concerns")
            recommendations.append("Consider adjustments to formulation or communicated benefits")
        low, otherwise = KPI_RECOMMENDATIONS[metric]
        recommendations.extend(low if mean <= LOW_SCORE else otherwise)
        if barriers:
            recommendations.append(f"Address the main barrier: {barriers[0]}")
        return recommendations

    # ------------------------------------------------------------------
    # Concept level
    # ------------------------------------------------------------------

    def _market_opportunity(self, means: dict[Metric, float], evaluations: list[Evaluation]) -> MarketOpportunity:
        purchase = means[Metric.PURCHASE_INTENTION]
        readiness = (means[Metric.BELIEVABILITY] + means[Metric.RELEVANCE]) / 2

        if purchase >= HIGH_SCORE:
            size = OpportunitySize.HIGH
        elif purchase >= MEDIUM_SCORE:
            size = OpportunitySize.MEDIUM
        else:
            size = OpportunitySize.LOW

        if readiness >= HIGH_SCORE:
            ready = Readiness.READY
        elif readiness >= MEDIUM_SCORE:
            ready = Readiness.NEEDS_DEVELOPMENT
        else:
            ready = Readiness.NOT_READY

        all_likes = [like for e in evaluations for like in e.qualitative_feedback.likes]
        all_concerns = [c for e in evaluations for c in e.qualitative_feedback.concerns]
        if means[Metric.UNIQUENESS] >= DIFFERENTIATION_SCORE:
            advantages = _filter_by_keywords(all_likes, ADVANTAGE_KEYWORDS)[:3]
        else:
            advantages = ["Needs stronger differentiation"]

        return MarketOpportunity(
            size=size,
            readiness=ready,
            competitive_advantages=advantages,
            market_barriers=_unique(all_concerns)[:4],
        )

    @staticmethod
    def _strategic_recommendations(overall: float) -> list[str]:
        if overall >= HIGH_SCORE:
            return [
                "ACCELERATE: high-potential concept, proceed with development",
                "Focus on refining details and preparing for market",
            ]
        if overall >= MEDIUM_SCORE:
            return [
                "DEVELOP: promising concept that needs specific improvements",
                "Apply feedback-driven changes before the next gate",
            ]
        return [
            "PIVOT: consider fundamental changes or redirecting the concept",
            "Evaluate whether the current investment is worth continuing",
        ]

    @staticmethod
    def _mean(evaluations: list[Evaluation], metric: Metric) -> float:
        values = np.array([e.scores.get(metric) for e in evaluations], dtype=float)
        return round_half_up(float(values.mean()))


def rank_concepts(insights: list[ConceptInsights]) -> list[ConceptInsights]:
    """Order concepts by overall score, best first, filling in each ranking. Ties keep input order."""
    ordered = sorted(insights, key=lambda item: item.overall_performance.score, reverse=True)
    ranked: list[ConceptInsights] = []
    for position, item in enumerate(ordered, start=1):
        performance = item.overall_performance.model_copy(update={"ranking": position})
        ranked.append(item.model_copy(update={"overall_performance": performance}))
    return ranked
