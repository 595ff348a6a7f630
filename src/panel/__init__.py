from .catalog import find_concept, load_concepts, load_market_profile, load_personas
from .models import (
    DEFAULT_MARKET,
    AspirationGap,
    AuthenticLanguage,
    BrandRelationship,
    ChangeResistance,
    Concept,
    EmotionalTriggers,
    EthnographicProfile,
    IdentityRelationship,
    InnovationAttitude,
    MarketProfile,
    MoneyPsychology,
    Persona,
    PriceTier,
    Psychographics,
    PurchaseJourney,
    Rituals,
)

__all__ = [
    "load_personas",
    "load_concepts",
    "load_market_profile",
    "find_concept",
    "DEFAULT_MARKET",
    "AspirationGap",
    "AuthenticLanguage",
    "BrandRelationship",
    "ChangeResistance",
    "Concept",
    "EmotionalTriggers",
    "EthnographicProfile",
    "IdentityRelationship",
    "InnovationAttitude",
    "MarketProfile",
    "MoneyPsychology",
    "Persona",
    "PriceTier",
    "Psychographics",
    "PurchaseJourney",
    "Rituals",
]
