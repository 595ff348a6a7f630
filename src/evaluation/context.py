from __future__ import annotations

from panel.models import DEFAULT_MARKET, Concept, MarketProfile, Persona

from .models import DemographicContext

CHILDREN_KEYWORDS = ("child", "children", "kid", "son", "daughter")


def life_stage_relevance(persona: Persona, market: MarketProfile) -> str:
    family = persona.family_composition.lower()
    has_children = any(keyword in family for keyword in CHILDREN_KEYWORDS)
    if persona.age < market.young_age_limit and not has_children:
        return "Very relevant for a stage of exploration and personal care"
    if has_children:
        return "Interesting, but it has to be practical and not take much time"
    return "Relevant if it really solves specific needs"


def tier_appropriateness(persona: Persona, market: MarketProfile) -> str:
    if market.is_higher_tier(persona):
        return "The price would be within range if the benefits justify it"
    return "Would need to be sure the investment is worth it"


def regional_considerations(persona: Persona, concept: Concept, market: MarketProfile) -> str:
    city = persona.city or "this city"
    if market.is_humid_city(persona):
        if market.matches_climate(concept):
            return f"In {city} products must really work against humidity, and this one speaks to it"
        return f"In {city} products must really work against humidity"
    return f"In {city} people look for versatile products for changing weather"


def demographic_context(
    persona: Persona,
    concept: Concept,
    market: MarketProfile = DEFAULT_MARKET,
) -> DemographicContext:
    return DemographicContext(
        life_stage_relevance=life_stage_relevance(persona, market),
        tier_appropriateness=tier_appropriateness(persona, market),
        regional_considerations=regional_considerations(persona, concept, market),
    )
