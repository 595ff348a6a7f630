from .interviewer import Interviewer
from .llm_client import PROVIDERS, LLMClient, MockLLMClient, strip_code_fences
from .models import (
    DEFAULT_SCRIPT,
    ConversationExchange,
    EmotionalTone,
    InterviewConfig,
    InterviewPhaseState,
    InterviewsResult,
    InterviewStyle,
    InterviewTranscript,
    OverallTone,
    QuestionDepth,
    RawInterview,
)
from .orchestrator import InterviewOrchestrator, build_transcript
from .progress import Phase, PhaseClock, ProgressReporter, ProgressState, estimate_remaining

__all__ = [
    "DEFAULT_SCRIPT",
    "PROVIDERS",
    "ConversationExchange",
    "EmotionalTone",
    "InterviewConfig",
    "InterviewOrchestrator",
    "InterviewPhaseState",
    "InterviewStyle",
    "InterviewTranscript",
    "Interviewer",
    "InterviewsResult",
    "LLMClient",
    "MockLLMClient",
    "OverallTone",
    "Phase",
    "PhaseClock",
    "ProgressReporter",
    "ProgressState",
    "QuestionDepth",
    "RawInterview",
    "build_transcript",
    "estimate_remaining",
    "strip_code_fences",
]
