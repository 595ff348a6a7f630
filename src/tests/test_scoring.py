from __future__ import annotations

from evaluation.models import SCORE_MAX, SCORE_MIN, ConceptScores, Metric
from evaluation.scoring import DEFAULT_ADJUSTMENTS, ScoringModel, price_impact, round_half_up
from panel.models import (
    BrandRelationship,
    Concept,
    InnovationAttitude,
    Persona,
    Psychographics,
    PurchaseJourney,
)


def _persona(
    *,
    age: int = 32,
    city: str = "Bogota",
    tier: str = "C",
    is_user: bool = False,
    satisfaction: float = 0,
    attitude: InnovationAttitude | None = None,
    sensitivity: int = 5,
) -> Persona:
    return Persona(
        id="p1",
        name="Test Persona",
        age=age,
        city=city,
        socioeconomic_tier=tier,
        brand_relationship=BrandRelationship(is_current_user=is_user, satisfaction_score=satisfaction),
        psychographics=Psychographics(innovation_attitude=attitude),
        purchase_journey=PurchaseJourney(price_sensitivity=sensitivity),
    )


def _concept(price_tier: str | None = "medium", description: str = "A daily shampoo") -> Concept:
    return Concept(id="c1", name="Test Concept", category="shampoo", description=description, price_tier=price_tier)


def test_round_half_up_rounds_ties_away_from_even() -> None:
    assert round_half_up(5.25) == 5.3
    assert round_half_up(7.75) == 7.8
    assert round_half_up(4.0) == 4.0


def test_best_case_persona_gets_expected_scores() -> None:
    persona = _persona(
        age=22,
        city="Cali",
        tier="A",
        is_user=True,
        satisfaction=9,
        attitude=InnovationAttitude.EARLY_ADOPTER,
        sensitivity=3,
    )
    concept = _concept("economical", description="Oil control shampoo for humid days")

    scores = ScoringModel().score(persona, concept)

    assert scores == ConceptScores(
        appeal=7.0,
        relevance=6.0,
        believability=6.0,
        uniqueness=7.5,
        purchase_intention=7.0,
    )


def test_scores_are_clamped_to_scale() -> None:
    persona = _persona(age=50, tier="D", attitude=InnovationAttitude.LAGGARD, sensitivity=9)

    scores = ScoringModel().score(persona, _concept("super-premium"))

    assert scores.purchase_intention == SCORE_MIN
    assert scores.relevance == 3.5
    assert scores.believability == 6.5
    assert scores.uniqueness == 3.5
    for metric in Metric:
        assert SCORE_MIN <= scores.get(metric) <= SCORE_MAX


def test_scoring_is_deterministic() -> None:
    model = ScoringModel()
    persona = _persona(is_user=True, satisfaction=8)
    concept = _concept("premium")

    assert model.score(persona, concept) == model.score(persona, concept)


def test_premium_price_hurts_price_sensitive_purchase_intention() -> None:
    model = ScoringModel()
    persona = _persona(sensitivity=9)

    premium = model.raw_scores(persona, _concept("premium"))
    economical = model.raw_scores(persona, _concept("economical"))

    assert premium[Metric.PURCHASE_INTENTION] < economical[Metric.PURCHASE_INTENTION]
    assert price_impact(persona, _concept("premium")) == -1.5


def test_loyal_user_believability_floor() -> None:
    model = ScoringModel()
    loyal = _persona(is_user=True, satisfaction=8, tier="A")

    for tier in ("economical", "medium", "premium", "super-premium", None):
        assert model.score(loyal, _concept(tier)).believability >= 5.5


def test_adjustment_order_does_not_change_scores() -> None:
    persona = _persona(age=24, city="Barranquilla", is_user=True, satisfaction=7, sensitivity=8)
    concept = _concept("premium", description="Anti-frizz for humid weather")

    forward = ScoringModel().score(persona, concept)
    backward = ScoringModel(adjustments=tuple(reversed(DEFAULT_ADJUSTMENTS))).score(persona, concept)

    assert forward == backward


def test_missing_price_tier_applies_no_price_adjustment() -> None:
    model = ScoringModel()
    persona = _persona(sensitivity=10)

    assert price_impact(persona, _concept(None)) == 0.0
    assert model.score(persona, _concept(None)) == model.score(persona, _concept("economical"))
    assert "price_sensitivity" in model.explain(persona, _concept(None))
    assert model.explain(persona, _concept(None))["price_sensitivity"] == {}
