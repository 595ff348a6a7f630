from .config import PipelineSettings
from .errors import (
    CollaboratorCallError,
    ConceptLabError,
    InterviewFailedError,
    ResponseFormatError,
    ValidationError,
)
from .logging_setup import configure_logging

__all__ = [
    "CollaboratorCallError",
    "ConceptLabError",
    "InterviewFailedError",
    "PipelineSettings",
    "ResponseFormatError",
    "ValidationError",
    "configure_logging",
]
