"""
Puzzle Verifier: decides whether a candidate move list becomes a puzzle.

All-or-nothing: the first problem rejects the whole list. On success the canonical (long-form) moves and the
final position are returned; that is what gets persisted, and it is never derived from raw text again.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.config import Settings, get_settings
from src.core.exceptions import WrongMoveCountError
from src.puzzles.replay import replay

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedPuzzle:
    canonical_moves: list[str]
    final_position: str


def verify_and_canonicalize(
    raw_moves: list[str], settings: Optional[Settings] = None
) -> VerifiedPuzzle:
    """
    Verify a candidate solution from the standard start position
    -----

    1. move count within [min_moves, max_moves] (checked before any board is built)
    2. replay every move (long form if it looks like one, otherwise SAN)
    3. first unparsable / illegal move --> raise, with the ply index and the position it was tried in

    Raises WrongMoveCountError, MoveParseError or IllegalMoveError (all PuzzleRejectedError).
    """
    settings = settings or get_settings()

    if not (settings.min_moves <= len(raw_moves) <= settings.max_moves):
        logger.warning("rejected candidate with %d moves", len(raw_moves))
        raise WrongMoveCountError(
            f"Wrong number of moves: got {len(raw_moves)}, "
            f"expected {settings.min_moves}-{settings.max_moves}"
        )

    result = replay([raw.strip() for raw in raw_moves])
    if result.failure is not None:
        logger.warning(
            "rejected candidate at ply %s: %s", result.failure.index, result.failure
        )
        raise result.failure

    return VerifiedPuzzle(
        canonical_moves=result.canonical_moves,
        final_position=result.final_fen,
    )
