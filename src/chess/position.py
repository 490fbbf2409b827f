"""
Representation of a single position in the game. Everything that can be encoded in a FEN string.
"""

from dataclasses import dataclass
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingDirection
from src.chess.pieces import Color
from src.chess.square import Square


@dataclass(frozen=True)
class Position:
    """
    Board State
    ----

    * board: which piece stands where
    * color_to_move: who plays next
    * castling_rights: directions still available. Rights only ever get removed.
    * en_passant_square: the square a pawn skipped over with a two-square advance on the previous ply, else None
    * half_move_clock: plies since the last pawn move or capture
    * num_turns: starts at 1 and increments after every move black makes

    Instances are never mutated. The rules engine hands back a new Position for every ply.
    """

    board: Board
    color_to_move: Color
    castling_rights: frozenset[CastlingDirection]
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    def has_castling_right(self, direction: CastlingDirection) -> bool:
        return direction in self.castling_rights

    def position_key(self) -> tuple:
        """
        Identity of the position for "did we reach the same position" questions.
        Move counters are bookkeeping, so they are left out.
        """
        return (
            self.board.to_fen(),
            self.color_to_move,
            self.castling_rights,
            self.en_passant_square,
        )

    def same_position_as(self, other: "Position") -> bool:
        """Positional equality: placement, side to move, castling rights and en passant square (counters ignored)"""
        return self.position_key() == other.position_key()
