from __future__ import annotations

from evaluation.context import demographic_context
from evaluation.evaluator import ConceptEvaluator
from evaluation.feedback import QualitativeFeedbackGenerator, price_anchor
from evaluation.models import ConceptScores
from panel.models import (
    AuthenticLanguage,
    BrandRelationship,
    ChangeResistance,
    Concept,
    EmotionalTriggers,
    EthnographicProfile,
    IdentityRelationship,
    MoneyPsychology,
    Persona,
    PurchaseJourney,
    Rituals,
)


def _profile(**overrides) -> EthnographicProfile:
    fields = {
        "rituals": Rituals(routine="Quick morning shower", time_investment="10 minutes"),
        "emotional_triggers": EmotionalTriggers(
            satisfaction_moments=["When my scent lasts the whole shift"],
            frustration_points=["Frizz as soon as I step outside"],
        ),
        "money_psychology": MoneyPsychology(price_anchors={"shampoo_premium": 26000}),
        "authentic_language": AuthenticLanguage(
            satisfaction_expressions=["I love"],
            complaint_expressions=["It bugs me"],
            cultural_expressions=["Chevere", "bacano"],
        ),
    }
    fields.update(overrides)
    return EthnographicProfile(**fields)


def _persona(profile: EthnographicProfile | None = None, sensitivity: int = 7, city: str = "Barranquilla") -> Persona:
    return Persona(
        id="p-maria",
        name="Maria",
        age=28,
        city=city,
        socioeconomic_tier="C",
        family_composition="Lives with partner",
        brand_relationship=BrandRelationship(is_current_user=True, satisfaction_score=8),
        ethnographic_profile=profile,
        purchase_journey=PurchaseJourney(price_sensitivity=sensitivity),
    )


def _concept(price_tier: str = "medium", **overrides) -> Concept:
    fields = {
        "id": "humidity-shield",
        "name": "Humidity Shield",
        "category": "shampoo",
        "description": "Anti-frizz shampoo that is ready in a quick rinse",
        "sensory_experience": "Citrus fragrance with a long-lasting scent",
        "format": "400ml bottle",
        "price_tier": price_tier,
    }
    fields.update(overrides)
    return Concept(**fields)


def test_likes_follow_rule_table_order() -> None:
    feedback = QualitativeFeedbackGenerator().generate(_persona(_profile()), _concept())

    assert feedback.likes == [
        "I love that it keeps the scent I'm known for",
        "Having the scent last until the afternoon really matters to me",
        "Chevere for this humid weather",
    ]


def test_premium_concern_quotes_category_price_anchor() -> None:
    feedback = QualitativeFeedbackGenerator().generate(_persona(_profile()), _concept("premium"))

    assert feedback.concerns == ["It bugs me when something goes over $26,000, I have to be really sure"]


def test_price_anchor_falls_back_to_default() -> None:
    profile = _profile(money_psychology=MoneyPsychology())
    assert price_anchor(profile, _concept()) == 28000.0


def test_no_premium_concern_for_relaxed_shoppers() -> None:
    feedback = QualitativeFeedbackGenerator().generate(_persona(_profile(), sensitivity=4), _concept("premium"))

    assert feedback.concerns == []


def test_past_disappointments_become_a_concern() -> None:
    profile = _profile(change_resistance=ChangeResistance(past_disappointments=["A keratin shampoo dried my hair"]))
    feedback = QualitativeFeedbackGenerator().generate(_persona(profile), _concept())

    assert "I've had bad experiences with products that promise a lot" in feedback.concerns


def test_reaction_cascade_first_match_wins() -> None:
    generator = QualitativeFeedbackGenerator()
    both = _profile(
        identity_relationship=IdentityRelationship(personality_connection="My scent is my signature"),
        money_psychology=MoneyPsychology(guilt_triggers="Impulse purchases"),
    )
    guilt_only = _profile(money_psychology=MoneyPsychology(guilt_triggers="Impulse purchases"))

    assert generator.generate(_persona(both), _concept("premium")).emotional_reaction.startswith(
        "It excites me"
    )
    assert generator.generate(_persona(guilt_only), _concept("premium")).emotional_reaction.startswith(
        "It makes me curious"
    )


def test_default_reaction_uses_second_cultural_expression() -> None:
    feedback = QualitativeFeedbackGenerator().generate(_persona(_profile()), _concept())

    assert feedback.emotional_reaction == "It seems bacano to me, I'd have to evaluate it more"


def test_missing_profile_yields_empty_lists_and_score_based_reaction() -> None:
    generator = QualitativeFeedbackGenerator()
    high = ConceptScores(appeal=8, relevance=5, believability=5, uniqueness=5, purchase_intention=5)
    low = ConceptScores(appeal=3, relevance=5, believability=5, uniqueness=5, purchase_intention=5)

    feedback = generator.generate(_persona(None), _concept(), high)

    assert feedback.likes == []
    assert feedback.concerns == []
    assert feedback.suggestions == []
    assert feedback.emotional_reaction == "It caught my attention, I would like to try it"
    assert generator.generate(_persona(None), _concept(), low).emotional_reaction == "It does not convince me much"
    assert generator.generate(_persona(None), _concept()).emotional_reaction.startswith("I would have to try it")


def test_suggestions_cover_grease_and_routine_time() -> None:
    profile = _profile(
        emotional_triggers=EmotionalTriggers(frustration_points=["Greasy roots by the second day"]),
        rituals=Rituals(time_investment="5 minutes"),
    )
    concept = _concept(description="Softening shampoo", sensory_experience="", usage_frequency="daily")

    feedback = QualitativeFeedbackGenerator().generate(_persona(profile), concept)

    assert feedback.suggestions == [
        "It would be great if it didn't take much time out of my routine",
        "It would be perfect if it helped with the grease that shows up on the second day",
    ]


def test_evaluator_combines_scores_feedback_and_context() -> None:
    persona = _persona(_profile())
    concept = _concept()

    evaluation = ConceptEvaluator().evaluate(persona, concept)

    assert evaluation.persona_id == "p-maria"
    assert evaluation.concept_id == "humidity-shield"
    assert evaluation.demographic_context == demographic_context(persona, concept)
    assert "humidity" in evaluation.demographic_context.regional_considerations
    assert evaluation.qualitative_feedback.likes


def test_price_guilt_reaction_only_for_premium_tier() -> None:
    generator = QualitativeFeedbackGenerator()
    profile = _profile(money_psychology=MoneyPsychology(guilt_triggers="Impulse purchases"))

    reaction = generator.generate(_persona(profile), _concept("super-premium")).emotional_reaction

    assert reaction == "It seems bacano to me, I'd have to evaluate it more"
