from __future__ import annotations

import logging

from panel.models import DEFAULT_MARKET, Concept, MarketProfile, Persona

from .context import demographic_context
from .feedback import QualitativeFeedbackGenerator
from .models import Evaluation
from .scoring import ScoringModel

logger = logging.getLogger(__name__)


class ConceptEvaluator:
    """Scores and narrates one persona's reaction to one concept without any external calls."""

    def __init__(
        self,
        market: MarketProfile | None = None,
        scoring: ScoringModel | None = None,
        feedback: QualitativeFeedbackGenerator | None = None,
    ) -> None:
        self.market = market or DEFAULT_MARKET
        self.scoring = scoring or ScoringModel(self.market)
        self.feedback = feedback or QualitativeFeedbackGenerator(self.market)

    def evaluate(self, persona: Persona, concept: Concept) -> Evaluation:
        scores = self.scoring.score(persona, concept)
        return Evaluation(
            persona_id=persona.id,
            concept_id=concept.id,
            scores=scores,
            qualitative_feedback=self.feedback.generate(persona, concept, scores),
            demographic_context=demographic_context(persona, concept, self.market),
        )

    def evaluate_panel(self, concept: Concept, personas: list[Persona]) -> list[Evaluation]:
        evaluations = [self.evaluate(persona, concept) for persona in personas]
        logger.debug("evaluation.panel concept=%s personas=%s", concept.id, len(evaluations))
        return evaluations
