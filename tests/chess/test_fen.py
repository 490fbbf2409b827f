"""Unit tests for src/chess/fen.py"""

import pytest

from src.chess.castling import CastlingDirection
from src.chess.fen import (
    STARTING_FEN,
    VALID_CASTLING_ENCODINGS,
    castling_from_fen,
    castling_to_fen,
    decode,
    encode,
    is_valid_castling_rights,
    is_valid_color_code,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_position,
    starting_position,
)
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square
from src.core.exceptions import InvalidFENError


@pytest.mark.parametrize(
    "fen, expected_rights",
    [
        ("KQkq", set(CastlingDirection)),
        (
            "KQk",
            {
                CastlingDirection.WHITE_KING_SIDE,
                CastlingDirection.WHITE_QUEEN_SIDE,
                CastlingDirection.BLACK_KING_SIDE,
            },
        ),
        ("Qq", {CastlingDirection.WHITE_QUEEN_SIDE, CastlingDirection.BLACK_QUEEN_SIDE}),
        ("-", set()),
    ],
)
def test_castling_from_fen(fen: str, expected_rights: set[CastlingDirection]) -> None:
    """Check encoding of castling rights is correctly decoded"""
    assert castling_from_fen(fen) == frozenset(expected_rights)


@pytest.mark.parametrize("encoding", VALID_CASTLING_ENCODINGS)
def test_castling_to_fen_uses_canonical_order(encoding: str) -> None:
    assert castling_to_fen(castling_from_fen(encoding)) == encoding


@pytest.mark.parametrize("castling", ["KQkq", "-", "Kq", "k"])
def test_valid_castling_rights(castling: str) -> None:
    assert is_valid_castling_rights(castling)


@pytest.mark.parametrize("castling", ["", "QK", "KK", "x", "KQkq-"])
def test_invalid_castling_rights(castling: str) -> None:
    assert not is_valid_castling_rights(castling)


def test_color_code() -> None:
    assert is_valid_color_code("w")
    assert is_valid_color_code("b")
    assert not is_valid_color_code("W")


@pytest.mark.parametrize(
    "en_passant, color, expected",
    [
        ("-", "w", True),
        ("e6", "w", True),
        ("e3", "b", True),
        ("e3", "w", False),
        ("e6", "b", False),
        ("e4", "w", False),
        ("i6", "w", False),
    ],
)
def test_en_passant_square(en_passant: str, color: str, expected: bool) -> None:
    """The en passant square must sit behind the pawn of the side that just moved"""
    assert is_valid_en_passant(en_passant, color) == expected


@pytest.mark.parametrize(
    "placement, expected",
    [
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", True),
        ("8/8/8/8/8/8/8/8", True),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP", False),
        ("rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR", False),
        ("rnbqkbnr/ppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", False),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX", False),
    ],
)
def test_is_valid_position(placement: str, expected: bool) -> None:
    assert is_valid_position(placement) == expected


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "r3k2r/8/8/8/8/8/8/R3K2R w Kq - 12 40",
        "4k3/8/8/8/8/8/8/4K3 b - - 0 1",
    ],
)
def test_roundtrip(fen: str) -> None:
    """Decoding then encoding a valid FEN gives back the identical string"""
    assert is_valid_fen(fen)
    assert encode(decode(fen)) == fen


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "not a fen",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkqX - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e3 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0",
        "rnbq1bnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQ - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBKKBNR w kq - 0 1",
        "P3k3/8/8/8/8/8/8/4K3 w - - 0 1",
        "4k3/8/8/3Pn3/8/8/8/4K3 w - e6 0 1",  # knight where the pawn should be
        "4k3/8/8/3P4/8/8/8/4K3 w - e6 0 1",  # no pawn at all
        "4k3/4p3/8/3Pp3/8/8/8/4K3 w - e6 0 1",  # pawn still on its start square
        "4k3/8/4n3/3Pp3/8/8/8/4K3 w - e6 0 1",  # skipped square occupied
        "4k3/8/8/8/4p3/8/8/4K3 b - e3 0 1",  # black to move, but the pawn in front is black
    ],
)
def test_invalid_fen_is_rejected(fen: str) -> None:
    assert not is_valid_fen(fen)
    with pytest.raises(InvalidFENError):
        decode(fen)


def test_decode_fields() -> None:
    position = decode("r3k2r/8/8/3pP3/8/8/8/R3K2R w Kq d6 3 17")
    assert position.board.piece(Square.from_algebraic("a8")) == Piece(PieceType.ROOK, Color.BLACK)
    assert position.color_to_move == Color.WHITE
    assert position.castling_rights == frozenset(
        {CastlingDirection.WHITE_KING_SIDE, CastlingDirection.BLACK_QUEEN_SIDE}
    )
    assert position.en_passant_square == Square.from_algebraic("d6")
    assert position.half_move_clock == 3
    assert position.num_turns == 17


def test_starting_position() -> None:
    position = starting_position()
    assert encode(position) == STARTING_FEN
    assert position.color_to_move == Color.WHITE
    assert position.castling_rights == frozenset(CastlingDirection)
    assert position.en_passant_square is None


def test_positional_equality_ignores_counters() -> None:
    early = decode("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    late = decode("4k3/8/8/8/8/8/8/4K3 w - - 37 80")
    other_side = decode("4k3/8/8/8/8/8/8/4K3 b - - 0 1")
    assert early.same_position_as(late)
    assert early != late
    assert not early.same_position_as(other_side)


@pytest.mark.parametrize(
    "fen",
    [
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq e6 0 2",
        "4k3/8/8/8/Pp6/8/8/4K3 b - a3 0 1",
    ],
)
def test_en_passant_square_after_double_step(fen: str) -> None:
    """An en passant square is only accepted behind a pawn that can just have made a double step"""
    assert is_valid_fen(fen)


def test_positions_are_hashable() -> None:
    """Equal positions collapse in a set, a different side to move does not"""
    white = decode("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    again = decode("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    black = decode("4k3/8/8/8/8/8/8/4K3 b - - 0 1")
    assert hash(white) == hash(again)
    assert len({white, again, black}) == 2
