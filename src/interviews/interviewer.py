from __future__ import annotations

from panel.models import Concept, Persona

from .llm_client import LLMClient
from .models import ConversationExchange, InterviewConfig, RawInterview
from .prompts import INTERVIEW_QUESTION_PROMPT, PERSONA_SYSTEM_PROMPT, THEMATIC_ANALYSIS_PROMPT


class Interviewer:
    """Runs one scripted interview for a (persona, concept) pair through the LLM client."""

    def __init__(self, llm_client: LLMClient, temperature: float = 0.8, max_tokens: int = 600):
        self.llm_client = llm_client
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_system_prompt(self, persona: Persona, concept: Concept) -> str:
        relationship = persona.brand_relationship
        if relationship.is_current_user:
            brand_lines = [f"- Current user, satisfaction {relationship.satisfaction_score:g}/10"]
        else:
            brand_lines = ["- Not a current user"]
        brand_lines.extend(f"- Stays because: {reason}" for reason in relationship.loyalty_reasons)
        brand_lines.extend(f"- Would not switch because: {barrier}" for barrier in relationship.switch_barriers)

        innovation = persona.psychographics.innovation_attitude
        return PERSONA_SYSTEM_PROMPT.format(
            name=persona.name,
            age=persona.age,
            city=persona.city or "Unknown",
            occupation=persona.occupation or "Not specified",
            tier=persona.socioeconomic_tier or "Not specified",
            family=persona.family_composition or "Not specified",
            brand=concept.brand or "the brand",
            brand_relationship="\n".join(brand_lines),
            price_sensitivity=persona.purchase_journey.price_sensitivity,
            channels=", ".join(persona.purchase_journey.channel_preferences) or "Not specified",
            innovation=innovation.value if innovation else "Not specified",
            ethnography="\n".join(f"- {line}" for line in self._ethnography_lines(persona)) or "- Not specified",
        )

    async def interview(self, concept: Concept, persona: Persona, config: InterviewConfig) -> RawInterview:
        system_prompt = self.build_system_prompt(persona, concept)
        questions = config.render_questions(concept)
        exchanges: list[ConversationExchange] = []

        for index, question in enumerate(questions, start=1):
            user_prompt = INTERVIEW_QUESTION_PROMPT.format(
                index=index,
                total=len(questions),
                question=question,
                concept_name=concept.name,
                brand=concept.brand or "the brand",
                description=concept.description,
                style=config.style.value,
                depth=config.depth.value,
                focus_areas=", ".join(config.focus_areas),
                context=self._format_context(exchanges),
            )
            response = await self.llm_client.complete(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            exchanges.append(ConversationExchange(question=question, response=response))

        analysis = await self.llm_client.complete(
            system_prompt="You are a qualitative market research analyst.",
            user_prompt=THEMATIC_ANALYSIS_PROMPT.format(
                name=persona.name,
                concept_name=concept.name,
                transcript=self._format_context(exchanges),
            ),
            temperature=0.2,
            max_tokens=self.max_tokens,
        )
        return RawInterview(exchanges=exchanges, analysis=analysis)

    @staticmethod
    def _format_context(exchanges: list[ConversationExchange]) -> str:
        if not exchanges:
            return "(start of interview)"
        return "\n\n".join(f"Question: {e.question}\nAnswer: {e.response}" for e in exchanges)

    @staticmethod
    def _ethnography_lines(persona: Persona) -> list[str]:
        profile = persona.ethnographic_profile
        if profile is None:
            return []
        candidates = [
            ("Routine", profile.rituals.routine),
            ("Time spent", profile.rituals.time_investment),
            ("Happiest when", ", ".join(profile.emotional_triggers.satisfaction_moments)),
            ("Frustrated by", ", ".join(profile.emotional_triggers.frustration_points)),
            ("Value for money means", profile.money_psychology.value_equation),
            ("Comfort zone", profile.change_resistance.comfort_zone_definition),
            ("Dream routine", profile.aspiration_gap.dream_routine),
            ("Typical expressions", ", ".join(profile.authentic_language.cultural_expressions)),
        ]
        return [f"{label}: {value}" for label, value in candidates if value]
