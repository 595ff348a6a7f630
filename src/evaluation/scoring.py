from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from panel.models import DEFAULT_MARKET, Concept, InnovationAttitude, MarketProfile, Persona, PriceTier

from .models import SCORE_MAX, SCORE_MIN, ConceptScores, Metric

BASELINE = 5.0

PRICE_TIER_IMPACT: dict[PriceTier, float] = {
    PriceTier.ECONOMICAL: 0.0,
    PriceTier.MEDIUM: -0.5,
    PriceTier.PREMIUM: -1.0,
    PriceTier.SUPER_PREMIUM: -2.0,
}

HIGH_SENSITIVITY = 8
LOW_SENSITIVITY = 4

Deltas = dict[Metric, float]


@dataclass(frozen=True)
class ScoreAdjustment:
    """One additive rule: returns metric deltas for a (persona, concept) pair, or {} when it does not apply."""

    name: str
    apply: Callable[[Persona, Concept, MarketProfile], Deltas]


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, lo: float = SCORE_MIN, hi: float = SCORE_MAX) -> float:
    return max(lo, min(hi, value))


def price_impact(persona: Persona, concept: Concept) -> float:
    if concept.price_tier is None:
        return 0.0
    impact = PRICE_TIER_IMPACT.get(concept.price_tier, 0.0)
    sensitivity = persona.purchase_journey.price_sensitivity
    if sensitivity >= HIGH_SENSITIVITY:
        return impact * 1.5
    if sensitivity <= LOW_SENSITIVITY:
        return impact * 0.5
    return impact


def _brand_relationship(persona: Persona, concept: Concept, market: MarketProfile) -> Deltas:
    relationship = persona.brand_relationship
    if relationship.is_current_user:
        deltas = {Metric.APPEAL: 1.0, Metric.BELIEVABILITY: 1.0}
        if relationship.satisfaction_score >= 7:
            deltas[Metric.PURCHASE_INTENTION] = 1.0
        return deltas
    return {Metric.BELIEVABILITY: -0.5, Metric.PURCHASE_INTENTION: -1.0}


def _socioeconomic_tier(persona: Persona, concept: Concept, market: MarketProfile) -> Deltas:
    if market.is_higher_tier(persona):
        return {Metric.UNIQUENESS: 0.5, Metric.PURCHASE_INTENTION: 0.5}
    # Price-conscious tiers trust the familiar and hold back on purchase.
    return {Metric.BELIEVABILITY: 0.5, Metric.PURCHASE_INTENTION: -0.5}


def _age(persona: Persona, concept: Concept, market: MarketProfile) -> Deltas:
    if persona.age < market.young_age_limit:
        return {Metric.UNIQUENESS: 1.0, Metric.APPEAL: 0.5}
    if persona.age > market.mature_age_limit:
        return {Metric.BELIEVABILITY: 1.0, Metric.UNIQUENESS: -0.5}
    return {}


def _climate_relevance(persona: Persona, concept: Concept, market: MarketProfile) -> Deltas:
    if market.is_humid_city(persona) and market.matches_climate(concept):
        return {Metric.RELEVANCE: 1.0, Metric.PURCHASE_INTENTION: 0.5}
    return {}


def _innovation_attitude(persona: Persona, concept: Concept, market: MarketProfile) -> Deltas:
    attitude = persona.psychographics.innovation_attitude
    if attitude == InnovationAttitude.EARLY_ADOPTER:
        return {Metric.UNIQUENESS: 1.0, Metric.APPEAL: 0.5}
    if attitude == InnovationAttitude.LAGGARD:
        return {Metric.UNIQUENESS: -1.0, Metric.BELIEVABILITY: 0.5}
    return {}


def _price_sensitivity(persona: Persona, concept: Concept, market: MarketProfile) -> Deltas:
    impact = price_impact(persona, concept)
    if impact == 0:
        return {}
    return {Metric.PURCHASE_INTENTION: impact, Metric.RELEVANCE: impact * 0.5}


DEFAULT_ADJUSTMENTS: tuple[ScoreAdjustment, ...] = (
    ScoreAdjustment("brand_relationship", _brand_relationship),
    ScoreAdjustment("socioeconomic_tier", _socioeconomic_tier),
    ScoreAdjustment("age", _age),
    ScoreAdjustment("climate_relevance", _climate_relevance),
    ScoreAdjustment("innovation_attitude", _innovation_attitude),
    ScoreAdjustment("price_sensitivity", _price_sensitivity),
)


class ScoringModel:
    """Deterministic rule arithmetic mapping a (persona, concept) pair to five bounded metrics.

    Every adjustment is purely additive, so the application order does not change the
    result. Clamping and rounding happen once, after all adjustments have been summed.
    """

    def __init__(
        self,
        market: MarketProfile | None = None,
        adjustments: tuple[ScoreAdjustment, ...] = DEFAULT_ADJUSTMENTS,
    ) -> None:
        self.market = market or DEFAULT_MARKET
        self.adjustments = adjustments

    def score(self, persona: Persona, concept: Concept) -> ConceptScores:
        raw = self.raw_scores(persona, concept)
        return ConceptScores(**{metric.value: round_half_up(clamp(value)) for metric, value in raw.items()})

    def raw_scores(self, persona: Persona, concept: Concept) -> dict[Metric, float]:
        totals = {metric: BASELINE for metric in Metric}
        for adjustment in self.adjustments:
            for metric, delta in adjustment.apply(persona, concept, self.market).items():
                totals[metric] += delta
        return totals

    def explain(self, persona: Persona, concept: Concept) -> dict[str, Deltas]:
        """Per-rule deltas, useful when auditing why a persona scored the way it did."""
        return {
            adjustment.name: adjustment.apply(persona, concept, self.market)
            for adjustment in self.adjustments
        }
