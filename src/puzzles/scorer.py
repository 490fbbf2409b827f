"""
Solve Scorer: replays a player's submission and the stored solution side by side and scores the result.

Pure function of (puzzle, submitted moves, elapsed time). Player mistakes are an expected outcome and come back
as `correct=False`; only a stored solution that no longer replays raises (DataIntegrityError).
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from src.chess.fen import decode
from src.core.config import Settings, get_settings
from src.core.exceptions import DataIntegrityError, InvalidFENError
from src.core.models import PuzzleModel
from src.puzzles.replay import replay

logger = logging.getLogger(__name__)

REASON_MATCH = "Excellent! Final position matches."
REASON_MISMATCH = "Final position differs."


@dataclass(frozen=True)
class SolveOutcome:
    """Plain data handed back to the API layer. The FENs and expected solution are there for diagnostics."""

    correct: bool
    score: int
    reason: str
    expected_solution: list[str]
    expected_solution_san: list[str]
    player_final_fen: str
    expected_final_fen: str
    illegal_move_index: Optional[int] = None


def compute_score(
    difficulty: int,
    elapsed_ms: int,
    submitted_move_count: int,
    solution_move_count: int,
    settings: Optional[Settings] = None,
) -> int:
    """
    score = max(0, base - difficulty_penalty - time_penalty - move_count_penalty)

    * difficulty_penalty: every level above 1 costs `difficulty_step_penalty`
    * time_penalty: one point per whole second beyond the `free_seconds` grace period
    * move_count_penalty: `extra_move_penalty` per move more than the stored solution
    """
    settings = settings or get_settings()
    difficulty_penalty = max(0, difficulty - 1) * settings.difficulty_step_penalty
    time_penalty = math.floor(max(0.0, elapsed_ms / 1000 - settings.free_seconds))
    move_count_penalty = (
        max(0, submitted_move_count - solution_move_count) * settings.extra_move_penalty
    )
    return max(
        0, settings.base_score - difficulty_penalty - time_penalty - move_count_penalty
    )


def score(
    puzzle: PuzzleModel,
    submitted_raw_moves: list[str],
    elapsed_ms: int,
    settings: Optional[Settings] = None,
) -> SolveOutcome:
    """
    Score a solve attempt
    -----

    1. replay the stored solution from the puzzle's start position (recomputed every time, never trusted from the FEN column)
    2. replay the submission from the same start position, stopping at the first unparsable / illegal move
    3. correct := every submitted move was played AND both replays end in the same position (move counters ignored)
    4. score only when correct
    """
    settings = settings or get_settings()

    try:
        start = decode(puzzle.start_fen)
    except InvalidFENError as error:
        raise DataIntegrityError(f"Stored start position is corrupt: {error}") from error

    reference = replay(puzzle.solution, start)
    if reference.failure is not None:
        logger.error(
            "stored solution fails to replay at ply %s: %s",
            reference.failure.index,
            reference.failure,
        )
        raise DataIntegrityError(
            f"Stored solution fails to replay at move {reference.failure.index + 1}: {reference.failure}"
        ) from reference.failure

    attempt = replay(submitted_raw_moves, start)

    illegal_move_index: Optional[int] = None
    if attempt.failure is not None:
        illegal_move_index = attempt.failure.index
        correct = False
        reason = (
            f"Illegal move at move {illegal_move_index + 1}: "
            f"{submitted_raw_moves[illegal_move_index]!r} ({attempt.failure.message})"
        )
    else:
        correct = attempt.final.same_position_as(reference.final)
        reason = REASON_MATCH if correct else REASON_MISMATCH

    points = (
        compute_score(
            difficulty=puzzle.difficulty or 1,
            elapsed_ms=elapsed_ms,
            submitted_move_count=len(submitted_raw_moves),
            solution_move_count=len(puzzle.solution),
            settings=settings,
        )
        if correct
        else 0
    )

    return SolveOutcome(
        correct=correct,
        score=points,
        reason=reason,
        expected_solution=list(puzzle.solution),
        expected_solution_san=reference.san_moves,
        player_final_fen=attempt.final_fen,
        expected_final_fen=reference.final_fen,
        illegal_move_index=illegal_move_index,
    )
