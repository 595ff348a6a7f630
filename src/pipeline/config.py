from __future__ import annotations

import os

from pydantic import BaseModel, Field

ENV_PREFIX = "CONCEPT_LAB_"


class PipelineSettings(BaseModel):
    provider: str = "groq"
    model: str | None = None
    interview_pause_seconds: float = Field(default=1.0, ge=0)
    phase_pause_seconds: float = Field(default=2.0, ge=0)
    price_resistance_threshold: float = Field(default=0.4, ge=0, le=1)
    interview_temperature: float = 0.8
    interview_max_tokens: int = 600
    consolidation_temperature: float = 0.2
    consolidation_max_tokens: int = 4000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "PipelineSettings":
        """Build settings from CONCEPT_LAB_* variables, falling back to field defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name in cls.model_fields:
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        return cls.model_validate(values)
