from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from consolidation.engine import ConsolidationEngine
from consolidation.models import ConsolidatedReport
from evaluation.evaluator import ConceptEvaluator
from insights.aggregator import SegmentInsightsAggregator, rank_concepts
from insights.models import ConceptInsights
from interviews.interviewer import Interviewer
from interviews.llm_client import LLMClient
from interviews.models import InterviewConfig, InterviewsResult
from interviews.orchestrator import InterviewBackend, InterviewOrchestrator
from interviews.progress import ProgressCallback, ProgressReporter
from panel.models import DEFAULT_MARKET, Concept, MarketProfile, Persona

from .config import PipelineSettings

logger = logging.getLogger(__name__)


@dataclass
class CompleteEvaluation:
    interviews: InterviewsResult
    report: ConsolidatedReport


class TwoPhaseEvaluation:
    """Chains Phase 1 (interviews) and Phase 2 (consolidation) for one concept."""

    def __init__(
        self,
        llm_client: LLMClient,
        settings: PipelineSettings | None = None,
        on_progress: ProgressCallback | None = None,
        interviewer: InterviewBackend | None = None,
        interview_config: InterviewConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self.reporter = ProgressReporter()
        if on_progress is not None:
            self.reporter.subscribe(on_progress)
        self._sleep = sleep

        backend = interviewer or Interviewer(
            llm_client,
            temperature=self.settings.interview_temperature,
            max_tokens=self.settings.interview_max_tokens,
        )
        self.orchestrator = InterviewOrchestrator(
            backend,
            reporter=self.reporter,
            config=interview_config,
            pause_seconds=self.settings.interview_pause_seconds,
            sleep=sleep,
        )
        self.engine = ConsolidationEngine(
            llm_client,
            reporter=self.reporter,
            price_resistance_threshold=self.settings.price_resistance_threshold,
            temperature=self.settings.consolidation_temperature,
            max_tokens=self.settings.consolidation_max_tokens,
        )

    async def run_interviews(self, concept: Concept, personas: list[Persona]) -> InterviewsResult:
        return await self.orchestrator.run_interviews(concept, personas)

    async def run_analysis(self, interviews: InterviewsResult) -> ConsolidatedReport:
        return await self.engine.run_analysis(interviews)

    async def run_complete(self, concept: Concept, personas: list[Persona]) -> CompleteEvaluation:
        interviews = await self.run_interviews(concept, personas)
        if self.settings.phase_pause_seconds > 0:
            await self._sleep(self.settings.phase_pause_seconds)
        report = await self.run_analysis(interviews)
        logger.info(
            "pipeline.completed concept=%s interviews=%s fallback=%s",
            concept.id,
            interviews.total_interviews,
            report.is_fallback,
        )
        return CompleteEvaluation(interviews=interviews, report=report)


def score_concepts(
    concepts: list[Concept],
    personas: list[Persona],
    market: MarketProfile = DEFAULT_MARKET,
) -> list[ConceptInsights]:
    """Scoring path: evaluate every concept against the whole panel and rank the results."""
    evaluator = ConceptEvaluator(market)
    aggregator = SegmentInsightsAggregator(personas, market)
    insights = [aggregator.aggregate(concept, evaluator.evaluate_panel(concept, personas)) for concept in concepts]
    return rank_concepts(insights)
