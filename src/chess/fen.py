"""
Position Serializer: converts a Position to/from a FEN string.

FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

<board position string> <active color> <castling rights> <en passant square> <# half move clock> <number turns played>

* The string to describe the board position is described in the Board class
* The active color is either "w" or "b"
* Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
    In the starting position: KQkq (all rights available), and once all rights are revoked a "-" is used.
* The en passant square indicates the square a pawn skipped over with its double step. If not available a "-" is used.
* The half move clock count the number of moves made since the last pawn move or capture.
* The number of turns starts at 1 and increments after every move black makes.

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
i.e. it is white to move, all castling options available, no en passant square, no half moves and we are in the first turn.
"""

from src.chess.board import Board
from src.chess.castling import CASTLING_ORDER, CastlingDirection
from src.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.chess.position import Position
from src.chess.square import BOARD_DIMENSIONS, Square, is_valid_square
from src.core.exceptions import InvalidFENError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Every subset of KQkq, written in the canonical order
VALID_CASTLING_ENCODINGS = [
    "-",
    "K",
    "Q",
    "k",
    "q",
    "KQ",
    "Kk",
    "Kq",
    "Qk",
    "Qq",
    "kq",
    "KQk",
    "KQq",
    "Kkq",
    "Qkq",
    "KQkq",
]


def castling_from_fen(castle_fen: str) -> frozenset[CastlingDirection]:
    """parse the part of the FEN string that encodes castling rights"""
    return frozenset(
        direction for direction in CastlingDirection if direction.value in castle_fen
    )


def castling_to_fen(castling_rights: frozenset[CastlingDirection]) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if direction in castling_rights]
    )
    return castling_chars or "-"


# --- VALIDATION ---
def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """
    return _fen_problem(fen) is None


def _fen_problem(fen: str) -> str | None:
    """Describe the first thing wrong with the FEN, or None if it is fine."""
    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return "expected 6 space-separated fields"

    position, color, castling, en_passant, half_moves, full_moves = parts
    if not is_valid_position(position):
        return "invalid piece placement"
    if not is_valid_color_code(color):
        return "active color must be 'w' or 'b'"
    if not is_valid_castling_rights(castling):
        return "invalid castling rights"
    if not is_valid_en_passant(en_passant, color):
        return "invalid en passant square"
    if not (is_valid_move_counter(half_moves) and is_valid_move_counter(full_moves)):
        return "move counters must be non-negative integers"
    if int(full_moves) < 1:
        return "full move number starts at 1"
    board = Board.from_fen(position)
    return _placement_problem(board) or _en_passant_problem(board, en_passant, color)


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character in "12345678":
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def _placement_problem(board: Board) -> str | None:
    """Exactly one king per color, no pawns on the first / last rank."""
    for color in (Color.WHITE, Color.BLACK):
        if len(board.locate_pieces(PieceType.KING, color)) != 1:
            return f"expected exactly one {color.name.lower()} king"
        for square in board.locate_pieces(PieceType.PAWN, color):
            if square.rank in (1, BOARD_DIMENSIONS[1]):
                return f"pawn on back rank: {square.to_algebraic()}"
    return None


def _en_passant_problem(board: Board, en_passant: str, color: str) -> str | None:
    """
    The en passant square must be one a double step just skipped: empty itself, the pawn's starting square
    behind it empty, and the opponent's pawn standing right in front of it.
    """
    if en_passant == "-":
        return None
    skipped = Square.from_algebraic(en_passant)
    # white to move: black just advanced down the board, so its pawn is one rank below the skipped square
    toward_pawn = -1 if color == "w" else 1
    pawn_color = Color.BLACK if color == "w" else Color.WHITE

    if not board.piece(skipped).is_empty():
        return f"en passant square {en_passant} is occupied"
    if not board.piece(skipped.offset(0, -toward_pawn)).is_empty():
        return f"en passant square {en_passant}: pawn start square is occupied"
    if board.piece(skipped.offset(0, toward_pawn)) != Piece(PieceType.PAWN, pawn_color):
        return f"en passant square {en_passant}: no pawn that just made a double step"
    return None


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str, color: str = "w") -> bool:
    """
    Valid en passant square encoding should be a '-' or a square the opponent's pawn just skipped:
    the 6th rank when white is to move, the 3rd rank when black is to move.
    """
    if en_passant == "-":
        return True
    if not is_valid_square(en_passant):
        return False
    expected_rank = "6" if color == "w" else "3"
    return en_passant[1] == expected_rank


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


# --- ENCODE / DECODE ---
def decode(fen: str) -> Position:
    """Parse the FEN into a Position"""

    # raise an exception if invalid FEN:
    problem = _fen_problem(fen)
    if problem is not None:
        raise InvalidFENError(f"Cannot interpret supplied string as FEN ({problem}): {fen}")

    # extract the different components. FEN is space separated
    (
        position,
        active_color,
        castling_str,
        en_passant_algebraic,
        half_move_clock,
        num_turns,
    ) = fen.split(" ")

    return Position(
        board=Board.from_fen(position),
        color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
        castling_rights=castling_from_fen(castling_str),
        en_passant_square=(
            Square.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        ),
        half_move_clock=int(half_move_clock),
        num_turns=int(num_turns),
    )


def encode(position: Position) -> str:
    """reverse operation: write a FEN from the given Position"""
    active_color = "w" if position.color_to_move == Color.WHITE else "b"
    castling_str = castling_to_fen(position.castling_rights)
    en_passant_algebraic = (
        position.en_passant_square.to_algebraic()
        if position.en_passant_square is not None
        else "-"
    )
    return (
        f"{position.board.to_fen()} {active_color} {castling_str} "
        f"{en_passant_algebraic} {position.half_move_clock} {position.num_turns}"
    )


def starting_position() -> Position:
    return decode(STARTING_FEN)
