"""
The parse-then-apply loop shared by puzzle creation and puzzle solving.

Replay never raises for bad moves: it stops at the first move that cannot be parsed or played and reports
why. The verifier turns that report into a rejection, the scorer into an "incorrect" outcome.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from src.chess.fen import encode, starting_position
from src.chess.notation import parse_move, to_long_form, to_san
from src.chess.position import Position
from src.chess.rules import apply_move
from src.core.exceptions import PuzzleRejectedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayResult:
    """
    Outcome of replaying a move list.

    `final` is the position after the last move that was successfully applied (the start position if none were).
    `failure` holds the error for the first move that failed, with its ply index attached.
    """

    start: Position
    final: Position
    canonical_moves: list[str] = field(default_factory=list)
    san_moves: list[str] = field(default_factory=list)
    failure: Optional[PuzzleRejectedError] = None

    @property
    def completed(self) -> bool:
        return self.failure is None

    @property
    def final_fen(self) -> str:
        return encode(self.final)


def replay(raw_moves: list[str], start: Optional[Position] = None) -> ReplayResult:
    """Play `raw_moves` (either notation, surrounding whitespace ignored) from `start` (default: the standard start position)."""
    start = start if start is not None else starting_position()
    position = start
    canonical_moves: list[str] = []
    san_moves: list[str] = []

    for index, raw in enumerate(raw_moves):
        try:
            move = parse_move(raw, position)
            next_position, applied = apply_move(position, move)
        except PuzzleRejectedError as error:
            logger.debug("replay stopped at ply %d (%r): %s", index, raw, error)
            return ReplayResult(
                start=start,
                final=position,
                canonical_moves=canonical_moves,
                san_moves=san_moves,
                failure=error.at_ply(index, encode(position)),
            )

        canonical_moves.append(to_long_form(applied))
        san_moves.append(to_san(position, applied))
        position = next_position

    return ReplayResult(
        start=start,
        final=position,
        canonical_moves=canonical_moves,
        san_moves=san_moves,
    )
