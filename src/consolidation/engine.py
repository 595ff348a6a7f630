from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable

from interviews.llm_client import LLMClient
from interviews.models import InterviewsResult
from interviews.progress import Phase, PhaseClock, ProgressReporter
from pipeline.errors import CollaboratorCallError, ResponseFormatError, ValidationError

from .enrichment import enrich_with_price_resistance
from .fallback import build_fallback_report
from .models import ConsolidatedReport, GeneratedReport, Timeline
from .parsing import parse_analysis
from .prompts import (
    ANALYST_SYSTEM_PROMPT,
    CONSOLIDATED_DATA_TEMPLATE,
    INTERVIEW_TEMPLATE,
    OPTIMIZATION_PROMPT,
    PROFILE_TEMPLATE,
    RESPONSE_SCHEMA,
)
from .sections import sections_from_analysis

logger = logging.getLogger(__name__)

TOTAL_STEPS = 5


def build_consolidated_data(interviews: InterviewsResult) -> str:
    concept = interviews.concept
    profiles: list[str] = []
    conversations: list[str] = []

    for index, transcript in enumerate(interviews.transcripts, start=1):
        persona = interviews.persona_for(transcript)
        if persona is not None:
            profiles.append(
                PROFILE_TEMPLATE.format(
                    index=index,
                    name=persona.name,
                    age=persona.age,
                    city=persona.city or "Unknown",
                    occupation=persona.occupation or "Not specified",
                    tier=persona.socioeconomic_tier or "Not specified",
                    brand_user="yes" if persona.brand_relationship.is_current_user else "no",
                    price_sensitivity=persona.purchase_journey.price_sensitivity,
                )
            )
        else:
            profiles.append(f"{index}. {transcript.persona_name}")

        exchanges = "\n\n".join(
            f"QUESTION: {exchange.question}\nANSWER: {exchange.response}" for exchange in transcript.exchanges
        )
        insights = "\n".join(f"- {insight}" for insight in transcript.key_insights) or "- No insights extracted"
        conversations.append(
            INTERVIEW_TEMPLATE.format(index=index, name=transcript.persona_name, exchanges=exchanges, insights=insights)
        )

    return CONSOLIDATED_DATA_TEMPLATE.format(
        count=interviews.total_interviews,
        name=concept.name,
        description=concept.description,
        category=concept.category or "Not specified",
        benefits=", ".join(concept.key_benefits) or "Not specified",
        target=concept.target_segment or "Not specified",
        price_tier=concept.price_tier.value if concept.price_tier else "Not specified",
        profiles="\n".join(profiles),
        conversations="\n\n".join(conversations),
    )


def build_optimization_prompt(interviews: InterviewsResult, data: str) -> str:
    return OPTIMIZATION_PROMPT.format(concept_name=interviews.concept.name, data=data) + "\n" + RESPONSE_SCHEMA


class ConsolidationEngine:
    """Phase 2: turns every Phase 1 transcript into one consolidated decision report.

    The external analysis is requested exactly once. If the call fails or its answer
    does not validate, a deterministic FallbackReport is built from the transcripts.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        reporter: ProgressReporter | None = None,
        price_resistance_threshold: float = 0.4,
        temperature: float = 0.2,
        max_tokens: int = 4000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.llm_client = llm_client
        self.reporter = reporter or ProgressReporter()
        self.price_resistance_threshold = price_resistance_threshold
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._clock = clock

    async def run_analysis(self, interviews: InterviewsResult) -> ConsolidatedReport:
        if not interviews.transcripts:
            raise ValidationError(
                f"Cannot consolidate concept '{interviews.concept.name}' without at least one interview"
            )

        clock = PhaseClock(self._clock)
        self._emit(clock, 0, "Preparing consolidated interview data")
        data = build_consolidated_data(interviews)

        self._emit(clock, 1, "Building optimization prompt")
        prompt = build_optimization_prompt(interviews, data)

        self._emit(clock, 2, "Consulting the concept optimization analyst")
        try:
            raw = await self.llm_client.complete_json(
                system_prompt=ANALYST_SYSTEM_PROMPT,
                user_prompt=prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            self._emit(clock, 3, "Parsing strategic recommendations")
            content = parse_analysis(raw)
            report = GeneratedReport(
                concept_id=interviews.concept.id,
                concept_name=interviews.concept.name,
                decision=content.decision,
                insights=content.insights,
                key_findings=content.key_findings,
                target_optimization=content.target_optimization,
                research_recommendations=content.research_recommendations,
                sections=sections_from_analysis(content, interviews),
                timeline=self._timeline(interviews, 0.0),
            )
        except (CollaboratorCallError, ResponseFormatError) as exc:
            logger.warning(
                "consolidation.fallback concept=%s interviews=%s reason=%s",
                interviews.concept.id,
                interviews.total_interviews,
                exc,
            )
            self._emit(clock, 3, "Building local fallback report")
            report = build_fallback_report(interviews, reason=str(exc))

        self._emit(clock, 4, "Applying automatic pattern analysis")
        report = enrich_with_price_resistance(report, interviews, self.price_resistance_threshold)

        report = report.model_copy(update={"timeline": self._timeline(interviews, clock.elapsed())})
        logger.info(
            "consolidation.completed concept=%s source=%s recommendation=%s",
            interviews.concept.id,
            report.source,
            report.decision.recommendation.value,
        )
        self.reporter.on_progress(clock.state(Phase.COMPLETED, TOTAL_STEPS, TOTAL_STEPS, "Optimization analysis completed"))
        return report

    def _emit(self, clock: PhaseClock, step: int, action: str) -> None:
        self.reporter.on_progress(clock.state(Phase.CONSOLIDATION, step, TOTAL_STEPS, action))

    @staticmethod
    def _timeline(interviews: InterviewsResult, seconds: float) -> Timeline:
        return Timeline(
            analysis_date=datetime.now(timezone.utc),
            processing_seconds=round(seconds, 3),
            based_on_interviews=interviews.total_interviews,
        )
