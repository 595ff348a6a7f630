from __future__ import annotations

import json
from pathlib import Path

import pydantic
from pydantic import TypeAdapter

from pipeline.errors import ValidationError

from .models import Concept, MarketProfile, Persona

_PERSONAS = TypeAdapter(list[Persona])
_CONCEPTS = TypeAdapter(list[Concept])


def _read_records(path: str | Path, key: str) -> list:
    target = Path(path)
    try:
        payload = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Could not read {key} from {target}: {exc}") from exc

    # Accept either a bare list or {"version": ..., "<key>": [...]}.
    if isinstance(payload, dict):
        payload = payload.get(key, [])
    if not isinstance(payload, list):
        raise ValidationError(f"Expected a list of {key} in {target}")
    return payload


def load_personas(path: str | Path) -> list[Persona]:
    records = _read_records(path, "personas")
    try:
        personas = _PERSONAS.validate_python(records)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid persona panel in {path}: {exc}") from exc
    _ensure_unique_ids([persona.id for persona in personas], "persona")
    return personas


def load_concepts(path: str | Path) -> list[Concept]:
    records = _read_records(path, "concepts")
    try:
        concepts = _CONCEPTS.validate_python(records)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid concept library in {path}: {exc}") from exc
    _ensure_unique_ids([concept.id for concept in concepts], "concept")
    return concepts


def load_market_profile(path: str | Path) -> MarketProfile:
    target = Path(path)
    try:
        return MarketProfile.model_validate_json(target.read_text(encoding="utf-8"))
    except (OSError, pydantic.ValidationError) as exc:
        raise ValidationError(f"Invalid market profile in {target}: {exc}") from exc


def find_concept(concepts: list[Concept], concept_id: str) -> Concept:
    for concept in concepts:
        if concept.id == concept_id:
            return concept
    raise ValidationError(f"Concept '{concept_id}' not found. Available: {[c.id for c in concepts]}")


def _ensure_unique_ids(ids: list[str], kind: str) -> None:
    seen: set[str] = set()
    for identifier in ids:
        if identifier in seen:
            raise ValidationError(f"Duplicate {kind} id '{identifier}'")
        seen.add(identifier)
