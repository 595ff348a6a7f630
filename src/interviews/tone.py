from __future__ import annotations

from collections.abc import Iterable

from .models import ConversationExchange, EmotionalTone, OverallTone

# Ordered rule tables: (label, keywords). Tone takes the first matching rule;
# themes collect every matching rule.
TONE_RULES: tuple[tuple[EmotionalTone, tuple[str, ...]], ...] = (
    (EmotionalTone.POSITIVE, ("love", "excellent", "great", "i would buy", "i'd buy")),
    (EmotionalTone.NEGATIVE, ("don't like", "do not like", "worries me", "worried", "concerns me")),
    (EmotionalTone.CURIOUS, ("interesting", "curious", "intrigued")),
)

THEME_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Taste", ("taste", "flavor", "flavour")),
    ("Price", ("price", "cost", "expensive")),
    ("Nutrition", ("health", "nutritio")),
    ("Family", ("family", "kids", "children")),
    ("Brand", ("brand", "trust")),
    ("Scent", ("scent", "aroma", "fragrance")),
)

PRICE_RESISTANCE_KEYWORDS: tuple[str, ...] = ("expensive", "price", "cost", "caro", "precio")


def detect_tone(text: str, rules=TONE_RULES) -> EmotionalTone:
    lowered = text.lower()
    for tone, keywords in rules:
        if any(keyword in lowered for keyword in keywords):
            return tone
    return EmotionalTone.NEUTRAL


def extract_themes(text: str, rules=THEME_RULES) -> list[str]:
    lowered = text.lower()
    return [theme for theme, keywords in rules if any(keyword in lowered for keyword in keywords)]


def annotate(exchange: ConversationExchange) -> ConversationExchange:
    return exchange.model_copy(
        update={
            "emotional_tone": detect_tone(exchange.response),
            "key_themes": extract_themes(exchange.response),
        }
    )


def overall_tone(exchanges: Iterable[ConversationExchange]) -> OverallTone:
    tones = [exchange.emotional_tone for exchange in exchanges]
    positive = tones.count(EmotionalTone.POSITIVE)
    negative = tones.count(EmotionalTone.NEGATIVE)
    if positive > negative:
        return OverallTone.MOSTLY_POSITIVE
    if negative > positive:
        return OverallTone.MOSTLY_NEGATIVE
    return OverallTone.BALANCED


def parse_key_insights(analysis: str, limit: int = 5) -> list[str]:
    """Pull bullet lines out of free-form thematic analysis text."""
    insights: list[str] = []
    for line in analysis.splitlines():
        stripped = line.strip()
        if stripped[:1] in {"-", "*", "•"}:
            text = stripped[1:].strip()
            if text:
                insights.append(text)
        if len(insights) >= limit:
            break
    return insights
