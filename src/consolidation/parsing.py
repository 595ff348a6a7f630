from __future__ import annotations

import json

import pydantic

from interviews.llm_client import strip_code_fences
from pipeline.errors import ResponseFormatError

from .models import AnalysisContent

REQUIRED_KEYS: tuple[str, ...] = (
    "decision",
    "insights",
    "keyFindings",
    "targetOptimization",
    "researchRecommendations",
)


def parse_analysis(raw: str) -> AnalysisContent:
    """Validate a consolidation response. Any shape problem raises ResponseFormatError."""
    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ResponseFormatError(f"Consolidation response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ResponseFormatError(f"Consolidation response must be a JSON object, got {type(data).__name__}")

    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise ResponseFormatError(f"Consolidation response is missing required fields: {', '.join(missing)}")

    try:
        return AnalysisContent.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ResponseFormatError(f"Consolidation response failed validation: {exc}") from exc
