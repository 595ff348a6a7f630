from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from panel.models import Concept, Persona


class InterviewStyle(StrEnum):
    OPTIMIZATION_FOCUSED = "optimization-focused"
    EXPLORATORY = "exploratory"


class QuestionDepth(StrEnum):
    LIGHT = "light"
    MEDIUM = "medium"
    DEEP = "deep"


class EmotionalTone(StrEnum):
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    CURIOUS = "Curious"
    NEUTRAL = "Neutral"


class OverallTone(StrEnum):
    MOSTLY_POSITIVE = "mostly positive"
    MOSTLY_NEGATIVE = "mostly negative"
    BALANCED = "balanced"


class InterviewPhaseState(StrEnum):
    PENDING = "pending"
    INTERVIEWING = "interviewing"
    COMPLETED = "completed"
    FAILED = "failed"


DEFAULT_SCRIPT: list[str] = [
    "What is the first thing that comes to mind when you hear about [CONCEPT], and how does it make you feel as a consumer?",
    "What would it mean for [CONCEPT] to be 'done right' for you? Which specific features or experiences would make you think 'yes, this is exactly what I expected'?",
    "When you evaluate a new product in the store, what is your moment of truth: the first look, trying it at home, or something else entirely?",
    "Have you noticed a gap between what you say you want and what you actually end up buying and using?",
    "If [CONCEPT] were available tomorrow where you usually shop, what would worry you most about considering it?",
    "How do you usually learn about new products, and what signals tell you whether something is worth it or just marketing?",
    "What specific questions would you ask about [CONCEPT] from [BRAND] if you were genuinely interested rather than just being polite?",
    "Considering this whole conversation, how would you decide whether [CONCEPT] is a good long-term choice for you?",
]


class InterviewConfig(BaseModel):
    style: InterviewStyle = InterviewStyle.OPTIMIZATION_FOCUSED
    depth: QuestionDepth = QuestionDepth.MEDIUM
    focus_areas: list[str] = Field(
        default_factory=lambda: ["concept-clarity", "barrier-identification", "improvement-opportunities"]
    )
    questions: list[str] = Field(default_factory=lambda: list(DEFAULT_SCRIPT))

    @field_validator("questions")
    @classmethod
    def _validate_questions(cls, v: list[str]) -> list[str]:
        cleaned = [question.strip() for question in v if question.strip()]
        if not cleaned:
            raise ValueError("an interview script needs at least one question")
        return cleaned

    def render_questions(self, concept: Concept) -> list[str]:
        brand = concept.brand or "the brand"
        return [
            question.replace("[CONCEPT]", concept.name).replace("[BRAND]", brand)
            for question in self.questions
        ]


class ConversationExchange(BaseModel):
    question: str
    response: str
    emotional_tone: EmotionalTone = EmotionalTone.NEUTRAL
    key_themes: list[str] = Field(default_factory=list)


class RawInterview(BaseModel):
    """What the external interview call returns: ordered exchanges plus opaque analysis text."""

    exchanges: list[ConversationExchange]
    analysis: str = ""


class InterviewTranscript(BaseModel):
    persona_id: str
    persona_name: str
    concept_id: str
    exchanges: list[ConversationExchange] = Field(default_factory=list)
    overall_tone: OverallTone = OverallTone.BALANCED
    key_insights: list[str] = Field(default_factory=list)
    analysis: str = ""

    def responses(self) -> list[str]:
        return [exchange.response for exchange in self.exchanges]

    def mentions_any(self, keywords: tuple[str, ...]) -> bool:
        return any(keyword in response.lower() for response in self.responses() for keyword in keywords)


class InterviewsResult(BaseModel):
    """Outcome of a fully successful Phase 1: one transcript per persona, in panel order."""

    concept: Concept
    personas: list[Persona]
    transcripts: list[InterviewTranscript]
    completed_at: datetime
    evaluation_seconds: float

    @property
    def total_interviews(self) -> int:
        return len(self.transcripts)

    def persona_for(self, transcript: InterviewTranscript) -> Persona | None:
        return next((p for p in self.personas if p.id == transcript.persona_id), None)
