from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, Protocol

from panel.models import Concept, Persona
from pipeline.errors import InterviewFailedError, ValidationError

from .models import InterviewConfig, InterviewPhaseState, InterviewsResult, InterviewTranscript, RawInterview
from .progress import Phase, PhaseClock, ProgressReporter
from .tone import annotate, overall_tone, parse_key_insights

logger = logging.getLogger(__name__)


class InterviewBackend(Protocol):
    async def interview(self, concept: Concept, persona: Persona, config: InterviewConfig) -> RawInterview: ...


def build_transcript(persona: Persona, concept: Concept, raw: RawInterview) -> InterviewTranscript:
    exchanges = [annotate(exchange) for exchange in raw.exchanges]
    return InterviewTranscript(
        persona_id=persona.id,
        persona_name=persona.name,
        concept_id=concept.id,
        exchanges=exchanges,
        overall_tone=overall_tone(exchanges),
        key_insights=parse_key_insights(raw.analysis),
        analysis=raw.analysis,
    )


class InterviewOrchestrator:
    """Phase 1: interviews every persona in panel order, one at a time.

    The phase is all-or-nothing. The first failing interview aborts the run and no
    transcripts are returned.
    """

    def __init__(
        self,
        interviewer: InterviewBackend,
        reporter: ProgressReporter | None = None,
        config: InterviewConfig | None = None,
        pause_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.interviewer = interviewer
        self.reporter = reporter or ProgressReporter()
        self.config = config or InterviewConfig()
        self.pause_seconds = max(0.0, pause_seconds)
        self._clock = clock
        self._sleep = sleep
        self.state = InterviewPhaseState.PENDING

    async def run_interviews(self, concept: Concept, personas: list[Persona]) -> InterviewsResult:
        self._validate(concept, personas)

        total = len(personas)
        clock = PhaseClock(self._clock)
        transcripts: list[InterviewTranscript] = []
        self.state = InterviewPhaseState.INTERVIEWING

        for index, persona in enumerate(personas):
            self.reporter.on_progress(
                clock.state(Phase.INTERVIEWS, index, total, f"Interviewing {persona.name}", persona.name)
            )
            try:
                raw = await self.interviewer.interview(concept, persona, self.config)
            except Exception as exc:
                self.state = InterviewPhaseState.FAILED
                logger.error(
                    "interviews.failed concept=%s persona=%s index=%s error=%s",
                    concept.id,
                    persona.name,
                    index,
                    exc,
                )
                raise InterviewFailedError(persona.name, concept.name, exc) from exc

            transcripts.append(build_transcript(persona, concept, raw))
            logger.info("interviews.completed concept=%s persona=%s step=%s/%s", concept.id, persona.name, index + 1, total)

            if index < total - 1 and self.pause_seconds > 0:
                await self._sleep(self.pause_seconds)

        elapsed = clock.elapsed()
        self.state = InterviewPhaseState.COMPLETED
        self.reporter.on_progress(clock.state(Phase.COMPLETED, total, total, "Interviews completed"))

        return InterviewsResult(
            concept=concept,
            personas=list(personas),
            transcripts=transcripts,
            completed_at=datetime.now(timezone.utc),
            evaluation_seconds=round(elapsed, 3),
        )

    @staticmethod
    def _validate(concept: Concept, personas: list[Persona]) -> None:
        if not personas:
            raise ValidationError("At least one persona is required to run interviews")
        if not concept.name.strip():
            raise ValidationError(f"Concept '{concept.id}' is missing a name")
        if not concept.description.strip():
            raise ValidationError(f"Concept '{concept.name}' is missing a description")
