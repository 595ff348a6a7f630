from __future__ import annotations


class ConceptLabError(Exception):
    """Base class for every error raised by the evaluation pipeline."""


class CollaboratorCallError(ConceptLabError):
    """The external text-generation service was unreachable or returned a non-success status."""


class ResponseFormatError(ConceptLabError):
    """The external service answered, but the text could not be parsed into the expected shape."""


class ValidationError(ConceptLabError):
    """Locally detected missing or invalid input, raised before any external call."""


class InterviewFailedError(CollaboratorCallError):
    def __init__(self, persona_name: str, concept_name: str, cause: Exception) -> None:
        self.persona_name = persona_name
        self.concept_name = concept_name
        super().__init__(
            f"Interview with {persona_name} could not be completed for concept "
            f"'{concept_name}': {cause}. Every interview must succeed before analysis can run."
        )
