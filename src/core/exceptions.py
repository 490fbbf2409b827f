"""
Exceptions raised across layers.

Everything derives from PuzzleError, so the service / API layers can catch the whole family in one place
and still tell player mistakes (rejections) apart from broken stored data (integrity faults).
"""

from typing import Optional

from src.core.shared_types import RejectionKind


class PuzzleError(Exception):
    """Root of all domain errors."""


class InvalidFENError(PuzzleError):
    """The string cannot be interpreted as a position string (FEN)."""


class InvalidRequestError(PuzzleError):
    """Request data failed validation at the API boundary."""


class GeneratorOutputError(PuzzleError):
    """Text returned by the puzzle generator does not contain a usable puzzle."""


class RepositoryError(PuzzleError):
    """Record not found, or the store refused the operation."""


class DataIntegrityError(PuzzleError):
    """A persisted puzzle no longer replays. Not the player's fault, so never scored."""


class PuzzleRejectedError(PuzzleError):
    """
    A move list was refused.

    `index` is the 0-based ply where replay stopped (None for input-shape problems),
    `move` the raw text of that ply, `fen` the position the move was tried against.
    """

    kind: RejectionKind = RejectionKind.ILLEGAL_MOVE

    def __init__(
        self,
        message: str,
        *,
        index: Optional[int] = None,
        move: Optional[str] = None,
        fen: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.index = index
        self.move = move
        self.fen = fen

    def at_ply(self, index: int, fen: str) -> "PuzzleRejectedError":
        """Attach replay context (the codec/rules engine do not know which ply they are checking)."""
        self.index = index
        self.fen = fen
        return self


class WrongMoveCountError(PuzzleRejectedError):
    kind = RejectionKind.WRONG_MOVE_COUNT


class MoveParseError(PuzzleRejectedError):
    """Text matches neither notation, or the short algebraic form is ambiguous / matches nothing."""

    kind = RejectionKind.UNPARSABLE_MOVE


class IllegalMoveError(PuzzleRejectedError):
    """Move was understood but breaks the rules of chess in the current position."""

    kind = RejectionKind.ILLEGAL_MOVE
