from __future__ import annotations

import logging

import pydantic
import pytest

from pipeline.config import PipelineSettings
from pipeline.logging_setup import configure_logging


def test_defaults_without_environment() -> None:
    settings = PipelineSettings.from_env({})

    assert settings.provider == "groq"
    assert settings.interview_pause_seconds == 1.0
    assert settings.price_resistance_threshold == 0.4


def test_environment_overrides_are_typed() -> None:
    settings = PipelineSettings.from_env(
        {
            "CONCEPT_LAB_PROVIDER": "deepseek",
            "CONCEPT_LAB_INTERVIEW_PAUSE_SECONDS": "0",
            "CONCEPT_LAB_CONSOLIDATION_MAX_TOKENS": "2000",
            "CONCEPT_LAB_MODEL": "  ",
            "UNRELATED": "ignored",
        }
    )

    assert settings.provider == "deepseek"
    assert settings.interview_pause_seconds == 0.0
    assert settings.consolidation_max_tokens == 2000
    assert settings.model is None


def test_invalid_environment_value_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        PipelineSettings.from_env({"CONCEPT_LAB_PRICE_RESISTANCE_THRESHOLD": "1.5"})


def test_configure_logging_sets_levels() -> None:
    configure_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
