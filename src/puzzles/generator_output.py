"""
Turn the free-form text returned by the puzzle generator into a typed candidate.

The generator is asked for a single JSON object, but tends to wrap it in prose or code fences. We take
everything from the first '{' to the last '}' and let Pydantic validate the rest. Nothing here checks
chess legality: the candidate's moves still go through the verifier.
"""

import json
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from src.core.exceptions import GeneratorOutputError
from src.core.models import DEFAULT_TAGS, DEFAULT_TITLE


class GeneratedPuzzle(BaseModel):
    moves: list[str]
    title: str = DEFAULT_TITLE
    hint: Optional[str] = None
    tags: list[str] = Field(default_factory=lambda: list(DEFAULT_TAGS))
    difficulty: Optional[int] = Field(default=None, ge=1)

    @field_validator("moves")
    @classmethod
    def strip_moves(cls, value: list[str]) -> list[str]:
        return [move.strip() for move in value]

    @field_validator("title", mode="before")
    @classmethod
    def default_blank_title(cls, value: Optional[str]) -> str:
        return value or DEFAULT_TITLE

    @field_validator("tags", mode="before")
    @classmethod
    def default_empty_tags(cls, value: Optional[list[str]]) -> list[str]:
        return value or list(DEFAULT_TAGS)


def extract_json(text: str) -> dict:
    """The outermost {...} block of the text, parsed."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise GeneratorOutputError("No JSON object found in generator output")
    try:
        data = json.loads(text[start : end + 1])
    except json.JSONDecodeError as error:
        raise GeneratorOutputError(f"Generator returned invalid JSON: {error}") from error
    if not isinstance(data, dict):
        raise GeneratorOutputError("Generator output is not a JSON object")
    return data


def extract_candidate(text: str) -> GeneratedPuzzle:
    data = extract_json(text)
    try:
        return GeneratedPuzzle.model_validate(data)
    except ValidationError as error:
        raise GeneratorOutputError(
            f"Generator returned a missing/invalid moves array or metadata: {error}"
        ) from error
