from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from panel.models import DEFAULT_MARKET, Concept, EthnographicProfile, MarketProfile, Persona, PriceTier

from .models import ConceptScores, QualitativeFeedback

SCENT_KEYWORDS = ("scent", "aroma", "fragrance", "smell")
EASE_KEYWORDS = ("simple", "no hassle", "no-hassle", "uncomplicated", "practical")
FAMILIAR_KEYWORDS = ("known", "familiar")
GREASE_KEYWORDS = ("greasy", "grease", "oily")
QUICK_KEYWORDS = ("quick", "fast", "rapid", "instant")
INTENSIVE_FORMATS = ("mask", "intensive treatment")
IDENTITY_KEYWORDS = ("signature", "identifies", "identity")

DEFAULT_PRICE_ANCHOR = 28000.0
PRICE_ANCHOR_SENSITIVITY = 7
SHORT_ROUTINE_MINUTES = 15

_MINUTES = re.compile(r"(\d+)\s*(?:min|minute)")


@dataclass(frozen=True)
class FeedbackRule:
    """Predicate over (persona, profile, concept) and the phrase it contributes when it holds."""

    name: str
    applies: Callable[[Persona, EthnographicProfile, Concept, MarketProfile], bool]
    phrase: Callable[[Persona, EthnographicProfile, Concept], str]


def _mentions(text: str, keywords: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def _first(items: list[str], index: int = 0, default: str = "") -> str:
    if len(items) > index and items[index].strip():
        return items[index].strip()
    return default


def _is_premium(concept: Concept) -> bool:
    return concept.price_tier in (PriceTier.PREMIUM, PriceTier.SUPER_PREMIUM)


def price_anchor(profile: EthnographicProfile, concept: Concept) -> float:
    anchors = profile.money_psychology.price_anchors
    category = concept.category.strip().lower().replace(" ", "_")
    for key in (f"{category}_premium", category, "premium"):
        if key and key in anchors:
            return anchors[key]
    return DEFAULT_PRICE_ANCHOR


def _format_amount(amount: float) -> str:
    return f"${amount:,.0f}"


def _is_short_routine(time_investment: str) -> bool:
    match = _MINUTES.search(time_investment.lower())
    if match:
        return int(match.group(1)) <= SHORT_ROUTINE_MINUTES
    return _mentions(time_investment, ("quick", "little time", "no time"))


LIKE_RULES: tuple[FeedbackRule, ...] = (
    FeedbackRule(
        "keeps_signature_scent",
        lambda p, prof, c, m: p.brand_relationship.is_current_user
        and _mentions(f"{c.sensory_experience} {c.emotional_benefit}", SCENT_KEYWORDS),
        lambda p, prof, c: (
            f"{_first(prof.authentic_language.satisfaction_expressions, default='I really like')}"
            " that it keeps the scent I'm known for"
        ),
    ),
    FeedbackRule(
        "lasting_scent_moment",
        lambda p, prof, c, m: any(
            _mentions(moment, SCENT_KEYWORDS) for moment in prof.emotional_triggers.satisfaction_moments
        ),
        lambda p, prof, c: "Having the scent last until the afternoon really matters to me",
    ),
    FeedbackRule(
        "climate_fit",
        lambda p, prof, c, m: m.is_humid_city(p) and m.matches_climate(c),
        lambda p, prof, c: (
            f"{_first(prof.authentic_language.cultural_expressions, default='Perfect')} for this humid weather"
        ),
    ),
    FeedbackRule(
        "practical_format",
        lambda p, prof, c, m: _mentions(prof.money_psychology.value_equation, EASE_KEYWORDS)
        and _mentions(c.format, ("easy",)),
        lambda p, prof, c: "I like that it's practical, I don't have time to complicate things",
    ),
)

CONCERN_RULES: tuple[FeedbackRule, ...] = (
    FeedbackRule(
        "premium_price_anchor",
        lambda p, prof, c, m: _is_premium(c)
        and p.purchase_journey.price_sensitivity >= PRICE_ANCHOR_SENSITIVITY,
        lambda p, prof, c: (
            f"{_first(prof.authentic_language.complaint_expressions, default='I do not like it')} when something"
            f" goes over {_format_amount(price_anchor(prof, c))}, I have to be really sure"
        ),
    ),
    FeedbackRule(
        "comfort_zone",
        lambda p, prof, c, m: _mentions(prof.change_resistance.comfort_zone_definition, FAMILIAR_KEYWORDS),
        lambda p, prof, c: "It makes me uneasy to change something I already know and that works for me",
    ),
    FeedbackRule(
        "past_disappointments",
        lambda p, prof, c, m: bool(prof.change_resistance.past_disappointments),
        lambda p, prof, c: "I've had bad experiences with products that promise a lot",
    ),
)

SUGGESTION_RULES: tuple[FeedbackRule, ...] = (
    FeedbackRule(
        "keep_it_quick",
        lambda p, prof, c, m: _is_short_routine(prof.rituals.time_investment)
        and not _mentions(f"{c.usage_frequency} {c.description}", QUICK_KEYWORDS),
        lambda p, prof, c: "It would be great if it didn't take much time out of my routine",
    ),
    FeedbackRule(
        "second_day_grease",
        lambda p, prof, c, m: any(
            _mentions(point, GREASE_KEYWORDS) for point in prof.emotional_triggers.frustration_points
        )
        and not _mentions(c.searchable_text(), GREASE_KEYWORDS + ("oil control",)),
        lambda p, prof, c: "It would be perfect if it helped with the grease that shows up on the second day",
    ),
    FeedbackRule(
        "intensive_version",
        lambda p, prof, c, m: _mentions(prof.aspiration_gap.dream_routine, INTENSIVE_FORMATS)
        and not _mentions(c.format, INTENSIVE_FORMATS),
        lambda p, prof, c: "I'd love a more intensive version, like a mask",
    ),
)

# First match wins.
REACTION_RULES: tuple[FeedbackRule, ...] = (
    FeedbackRule(
        "identity",
        lambda p, prof, c, m: _mentions(prof.identity_relationship.personality_connection, IDENTITY_KEYWORDS),
        lambda p, prof, c: "It excites me to think it could become part of the routine that defines me",
    ),
    FeedbackRule(
        "price_guilt",
        lambda p, prof, c, m: _mentions(prof.money_psychology.guilt_triggers, ("impulse",))
        and c.price_tier == PriceTier.PREMIUM,
        lambda p, prof, c: "It makes me curious, but I also feel guilty thinking about the expense",
    ),
    FeedbackRule(
        "cautious",
        lambda p, prof, c, m: _mentions(prof.change_resistance.risk_aversion_sources, ("time", "effort")),
        lambda p, prof, c: "It sounds interesting, but I would need to be sure before switching",
    ),
)


class QualitativeFeedbackGenerator:
    """Builds likes, concerns, suggestions and an emotional reaction from a persona's ethnographic profile.

    Rules are checked in table order and every matching rule contributes its phrase. The
    emotional reaction is the first matching entry of REACTION_RULES, falling back to a
    phrase built from the persona's cultural expressions.
    """

    def __init__(
        self,
        market: MarketProfile | None = None,
        likes: tuple[FeedbackRule, ...] = LIKE_RULES,
        concerns: tuple[FeedbackRule, ...] = CONCERN_RULES,
        suggestions: tuple[FeedbackRule, ...] = SUGGESTION_RULES,
        reactions: tuple[FeedbackRule, ...] = REACTION_RULES,
    ) -> None:
        self.market = market or DEFAULT_MARKET
        self.like_rules = likes
        self.concern_rules = concerns
        self.suggestion_rules = suggestions
        self.reaction_rules = reactions

    def generate(
        self,
        persona: Persona,
        concept: Concept,
        scores: ConceptScores | None = None,
    ) -> QualitativeFeedback:
        profile = persona.ethnographic_profile
        if profile is None:
            return QualitativeFeedback(emotional_reaction=self._reaction_without_profile(scores))

        return QualitativeFeedback(
            likes=self._collect(self.like_rules, persona, profile, concept),
            concerns=self._collect(self.concern_rules, persona, profile, concept),
            suggestions=self._collect(self.suggestion_rules, persona, profile, concept),
            emotional_reaction=self._reaction(persona, profile, concept),
        )

    def _collect(
        self,
        rules: tuple[FeedbackRule, ...],
        persona: Persona,
        profile: EthnographicProfile,
        concept: Concept,
    ) -> list[str]:
        return [
            rule.phrase(persona, profile, concept)
            for rule in rules
            if rule.applies(persona, profile, concept, self.market)
        ]

    def _reaction(self, persona: Persona, profile: EthnographicProfile, concept: Concept) -> str:
        for rule in self.reaction_rules:
            if rule.applies(persona, profile, concept, self.market):
                return rule.phrase(persona, profile, concept)
        cultural = _first(profile.authentic_language.cultural_expressions, index=1, default="interesting")
        return f"It seems {cultural} to me, I'd have to evaluate it more"

    @staticmethod
    def _reaction_without_profile(scores: ConceptScores | None) -> str:
        if scores is not None and scores.appeal >= 7:
            return "It caught my attention, I would like to try it"
        if scores is not None and scores.appeal <= 4:
            return "It does not convince me much"
        return "I would have to try it before giving my opinion"
