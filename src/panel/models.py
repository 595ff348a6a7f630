from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PriceTier(StrEnum):
    ECONOMICAL = "economical"
    MEDIUM = "medium"
    PREMIUM = "premium"
    SUPER_PREMIUM = "super-premium"


class InnovationAttitude(StrEnum):
    EARLY_ADOPTER = "early-adopter"
    EARLY_MAJORITY = "early-majority"
    LATE_MAJORITY = "late-majority"
    LAGGARD = "laggard"


class Concept(BaseModel):
    """A proposed product or message. Treated as immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str = ""
    description: str = ""
    emotional_benefit: str = ""
    sensory_experience: str = ""
    expected_results: str = ""
    key_ingredients: list[str] = Field(default_factory=list)
    key_benefits: list[str] = Field(default_factory=list)
    target_segment: str = ""
    price_tier: PriceTier | None = None
    format: str = ""
    usage_frequency: str = ""
    brand: str = ""

    @field_validator("price_tier", mode="before")
    @classmethod
    def _normalize_price_tier(cls, value):
        if isinstance(value, str):
            cleaned = value.strip().lower().replace("_", "-").replace(" ", "-")
            return cleaned or None
        return value

    def text_fields(self) -> list[str]:
        return [
            self.description,
            self.emotional_benefit,
            self.sensory_experience,
            self.expected_results,
            self.format,
            self.usage_frequency,
            *self.key_ingredients,
            *self.key_benefits,
        ]

    def searchable_text(self) -> str:
        return " ".join(part for part in self.text_fields() if part).lower()


class BrandRelationship(BaseModel):
    is_current_user: bool = False
    satisfaction_score: float = Field(default=0, ge=0, le=10)
    loyalty_reasons: list[str] = Field(default_factory=list)
    switch_barriers: list[str] = Field(default_factory=list)


class Rituals(BaseModel):
    routine: str = ""
    time_investment: str = ""
    frequency: str = ""


class EmotionalTriggers(BaseModel):
    satisfaction_moments: list[str] = Field(default_factory=list)
    frustration_points: list[str] = Field(default_factory=list)


class MoneyPsychology(BaseModel):
    value_equation: str = ""
    guilt_triggers: str = ""
    price_anchors: dict[str, float] = Field(default_factory=dict)


class IdentityRelationship(BaseModel):
    personality_connection: str = ""
    brand_identification: str = ""


class ChangeResistance(BaseModel):
    comfort_zone_definition: str = ""
    past_disappointments: list[str] = Field(default_factory=list)
    risk_aversion_sources: str = ""


class AspirationGap(BaseModel):
    dream_routine: str = ""
    current_reality: str = ""


class AuthenticLanguage(BaseModel):
    satisfaction_expressions: list[str] = Field(default_factory=list)
    complaint_expressions: list[str] = Field(default_factory=list)
    cultural_expressions: list[str] = Field(default_factory=list)


class EthnographicProfile(BaseModel):
    rituals: Rituals = Field(default_factory=Rituals)
    emotional_triggers: EmotionalTriggers = Field(default_factory=EmotionalTriggers)
    money_psychology: MoneyPsychology = Field(default_factory=MoneyPsychology)
    identity_relationship: IdentityRelationship = Field(default_factory=IdentityRelationship)
    change_resistance: ChangeResistance = Field(default_factory=ChangeResistance)
    aspiration_gap: AspirationGap = Field(default_factory=AspirationGap)
    authentic_language: AuthenticLanguage = Field(default_factory=AuthenticLanguage)


class PurchaseJourney(BaseModel):
    price_sensitivity: int = Field(default=5, ge=1, le=10)
    channel_preferences: list[str] = Field(default_factory=list)


class Psychographics(BaseModel):
    innovation_attitude: InnovationAttitude | None = None
    values: list[str] = Field(default_factory=list)


class Persona(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    age: int = Field(ge=0, le=120)
    city: str = ""
    socioeconomic_tier: str = ""
    occupation: str = ""
    income: float | None = None
    family_composition: str = ""
    brand_relationship: BrandRelationship = Field(default_factory=BrandRelationship)
    psychographics: Psychographics = Field(default_factory=Psychographics)
    ethnographic_profile: EthnographicProfile | None = None
    purchase_journey: PurchaseJourney = Field(default_factory=PurchaseJourney)


class MarketProfile(BaseModel):
    """Market-specific constants the scoring and feedback rules read from."""

    higher_tiers: frozenset[str] = frozenset({"A", "B", "AB", "C+"})
    humid_cities: frozenset[str] = frozenset({"Barranquilla", "Cartagena", "Santa Marta", "Cali"})
    climate_keywords: tuple[str, ...] = ("humidity", "humid", "frizz", "oil control", "control", "grease", "greasy")
    young_age_limit: int = 30
    mature_age_limit: int = 35

    def is_higher_tier(self, persona: Persona) -> bool:
        return persona.socioeconomic_tier.strip().upper() in {tier.upper() for tier in self.higher_tiers}

    def is_humid_city(self, persona: Persona) -> bool:
        return persona.city.strip().lower() in {city.lower() for city in self.humid_cities}

    def matches_climate(self, concept: Concept) -> bool:
        text = concept.searchable_text()
        return any(keyword in text for keyword in self.climate_keywords)


DEFAULT_MARKET = MarketProfile()
