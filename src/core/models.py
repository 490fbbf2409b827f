"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from src.chess.fen import STARTING_FEN

DEFAULT_TITLE = "AI Puzzle"
DEFAULT_TAGS = ("tactic",)
DEFAULT_LEVEL = "General"


@dataclass
class PuzzleModel:
    """
    Transport-safe representation of a verified puzzle.

    `solution` holds long-form moves only and `fen` is the position reached after playing them.
    Everything from `title` onwards is metadata the chess core never interprets.
    """

    fen: str
    solution: list[str]
    difficulty: int = 1
    start_fen: str = STARTING_FEN
    title: str = DEFAULT_TITLE
    hint: Optional[str] = None
    tags: list[str] = field(default_factory=lambda: list(DEFAULT_TAGS))
    level: str = DEFAULT_LEVEL
    is_public: bool = True
    ai_generated: bool = False


@dataclass
class AttemptModel:
    """One solve request and its outcome. Never updated once stored."""

    puzzle_id: UUID
    moves: list[str]
    time_ms: int
    correct: bool
    score: int
    reason: str
