"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.core.exceptions import InvalidRequestError, PuzzleRejectedError
from src.core.models import DEFAULT_LEVEL, DEFAULT_TAGS, DEFAULT_TITLE
from src.core.shared_types import RejectionKind


# --- REQUEST MODELS ---
class CreatePuzzleRequest(BaseModel):
    """Puzzle content that already went through the generator (or was typed in by a coach)."""

    moves: list[str]
    title: str = DEFAULT_TITLE
    hint: Optional[str] = None
    tags: list[str] = Field(default_factory=lambda: list(DEFAULT_TAGS))
    difficulty: Optional[int] = None
    level: str = DEFAULT_LEVEL
    is_public: bool = True

    @field_validator("difficulty")
    @classmethod
    def validate_difficulty(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise InvalidRequestError(f"Difficulty starts at 1, got {value}.")
        return value


class GeneratePuzzleRequest(BaseModel):
    """Raw generator text. Difficulty is used when the generator did not provide one."""

    generator_text: str
    difficulty: Optional[int] = None
    level: str = DEFAULT_LEVEL
    make_public: bool = True

    @field_validator("difficulty")
    @classmethod
    def validate_difficulty(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise InvalidRequestError(f"Difficulty starts at 1, got {value}.")
        return value


class GetPuzzleRequest(BaseModel):
    puzzle_id: UUID


class SolvePuzzleRequest(BaseModel):
    puzzle_id: UUID
    moves: list[str] = Field(default_factory=list)
    time_ms: int = 0

    @field_validator("time_ms")
    @classmethod
    def validate_time(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Elapsed time cannot be negative: {value} ms.")
        return value


# --- RESPONSE MODELS ---
class PuzzleResponse(BaseModel):
    puzzle_id: UUID
    title: str
    hint: Optional[str]
    tags: list[str]
    difficulty: int
    level: str
    start_fen: str
    fen: str
    solution: list[str]


class RejectionResponse(BaseModel):
    """Why a candidate puzzle was refused. `index` is 0-based; None for a wrong move count."""

    kind: RejectionKind
    message: str
    index: Optional[int] = None
    move: Optional[str] = None
    fen: Optional[str] = None

    @classmethod
    def from_error(cls, error: PuzzleRejectedError) -> "RejectionResponse":
        return cls(
            kind=error.kind,
            message=error.message,
            index=error.index,
            move=error.move,
            fen=error.fen,
        )


class SolveDebug(BaseModel):
    initial_fen: str
    expected_final_fen: str
    player_final_fen: str
    user_moves: list[str]
    illegal_move_index: Optional[int] = None


class SolveResponse(BaseModel):
    correct: bool
    score: int
    reason: str
    expected_solution: list[str]
    expected_solution_san: list[str]
    debug: SolveDebug
