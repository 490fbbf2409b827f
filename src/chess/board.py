"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Self

from src.chess.moves import MOVEMENT_RULES, CandidateMovesFn, Move, is_square_attacked
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square


@dataclass(frozen=True)
class Board:
    """
    Piece placement. Immutable: every update returns a new Board, so two replays started
    from the same Board never see each other's moves.
    """

    position: Mapping[Square, Piece]

    def __post_init__(self) -> None:
        # read-only view over a private copy: nobody holding the original dict can change this board
        object.__setattr__(self, "position", MappingProxyType(dict(self.position)))

    def __hash__(self) -> int:
        return hash(self.to_fen())

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given FEN string.

        That is, we supply the first part of the FEN string that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces. Again, left-to-right reads a1-h1.
        """
        position: dict[Square, Piece] = {}
        fen_by_ranks = fen_str.split("/")
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    position[Square(file, rank)] = Piece.from_fen(character)
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    for _ in range(int(character)):
                        position[Square(file, rank)] = Piece.empty()
                        file += 1
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if not piece.is_empty():
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, square: Square) -> Piece:
        return self.position[square]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square in ALL_SQUARES
            if self.position[square] == Piece(piece_type, color)
        ]

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square in ALL_SQUARES if self.position[square].color == color
        ]

    def king_square(self, color: Color) -> Optional[Square]:
        kings = self.locate_pieces(PieceType.KING, color)
        return kings[0] if kings else None

    # --- ATTACKS ---
    def is_under_attack(self, square: Square, by_color: Color) -> bool:
        return is_square_attacked(square, by_color, self)

    def is_any_under_attack(self, squares: list[Square], by_color: Color) -> bool:
        return any(self.is_under_attack(square, by_color) for square in squares)

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(not self.piece(square).is_empty() for square in squares)

    def is_check(self, color: Color) -> bool:
        """Is the king of the given color attacked by the opponent?"""
        king = self.king_square(color)
        if king is None:
            return False
        return self.is_under_attack(king, color.opponent)

    def generate_candidate_moves(self, color: Color) -> list[Move]:
        """
        Before knowing the set of legal moves, we use raycasting to find candidate moves, which will later be tested for legality
        (making sure it does not put yourself in check.)

        ---
        NOTE: Castling and en passant are added in rules.py.
        """
        candidate_moves: list[Move] = []
        for starting_square in self.locate_color(color):
            piece_type = self.piece(starting_square).type
            movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece_type]
            candidate_moves.extend(movement_rule(starting_square, self))
        return candidate_moves

    # --- UPDATES (each returns a new Board) ---
    def move_piece(self, move: Move) -> Self:
        """Relocate a single piece. Whatever stood on the target square is gone."""
        position = dict(self.position)
        piece_that_moved = position[move.from_square]
        position[move.from_square] = Piece.empty()
        position[move.to_square] = piece_that_moved
        return type(self)(position)

    def move_pieces(self, moves: list[Move]) -> Self:
        """convenience method to apply multiple relocations (castling moves two pieces)"""
        board = self
        for move in moves:
            board = board.move_piece(move)
        return board

    def remove_piece(self, square: Square) -> Self:
        position = dict(self.position)
        position[square] = Piece.empty()
        return type(self)(position)

    def place_piece(self, piece: Piece, square: Square) -> Self:
        position = dict(self.position)
        position[square] = piece
        return type(self)(position)

