"""Unit tests for src/chess/notation.py"""

import pytest

from src.chess.castling import CastlingDirection
from src.chess.fen import decode, starting_position
from src.chess.moves import Move
from src.chess.notation import (
    is_long_form,
    parse_long_form,
    parse_move,
    parse_san,
    to_long_form,
    to_san,
)
from src.chess.rules import apply_move
from src.core.exceptions import IllegalMoveError, MoveParseError

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
PROMOTION_FEN = "4k3/P7/8/8/8/8/8/4K3 w - - 0 1"
EN_PASSANT_FEN = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 2"
TWO_KNIGHTS_SAME_RANK = "4k3/8/8/8/8/8/8/1N2KN2 w - - 0 1"
TWO_KNIGHTS_SAME_FILE = "4k3/8/8/8/8/1N6/8/1N2K3 w - - 0 1"
PAWN_CAPTURE_FEN = "4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("e2e4", True),
        ("E2E4", True),
        ("e7e8q", True),
        ("e7e8Q", True),
        ("e2-e4", False),
        ("e7e8k", False),
        ("Nf3", False),
        ("i2i4", False),
    ],
)
def test_is_long_form(text: str, expected: bool) -> None:
    assert is_long_form(text) == expected


def test_parse_long_form_needs_no_position() -> None:
    assert parse_long_form("E7E8Q") == Move.from_uci("e7e8q")
    with pytest.raises(MoveParseError):
        parse_long_form("Nf3")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("e2e4", "e2e4"),
        ("  e2e4 ", "e2e4"),
        ("e4", "e2e4"),
        ("Pe4", "e2e4"),
        ("Nf3", "g1f3"),
        ("Nf3+", "g1f3"),
        ("Nf3!?", "g1f3"),
        ("Ng1f3", "g1f3"),
        ("Ng1-f3", "g1f3"),
        ("g1-f3", "g1f3"),
        ("Nh3", "g1h3"),
    ],
)
def test_parse_move_from_start(text: str, expected: str) -> None:
    assert parse_move(text, starting_position()).to_uci() == expected


@pytest.mark.parametrize("text", ["", "   ", "xyz", "Nf6", "e5", "Ke2", "Qx"])
def test_parse_move_refuses(text: str) -> None:
    with pytest.raises(MoveParseError) as error:
        parse_move(text, starting_position())
    assert error.value.move == text


def test_long_form_is_parsed_without_checking_legality() -> None:
    """Shape is enough for the codec. The rules engine refuses it afterwards."""
    position = starting_position()
    move = parse_move("e2e5", position)
    with pytest.raises(IllegalMoveError):
        apply_move(position, move)


def test_ambiguous_short_form() -> None:
    with pytest.raises(MoveParseError, match="Ambiguous"):
        parse_san("Nd2", decode(TWO_KNIGHTS_SAME_RANK))


@pytest.mark.parametrize(
    "fen, text, expected",
    [
        (TWO_KNIGHTS_SAME_RANK, "Nbd2", "b1d2"),
        (TWO_KNIGHTS_SAME_RANK, "Nfd2", "f1d2"),
        (TWO_KNIGHTS_SAME_FILE, "N1d2", "b1d2"),
        (TWO_KNIGHTS_SAME_FILE, "N3d2", "b3d2"),
        (PAWN_CAPTURE_FEN, "exd5", "e4d5"),
        (PAWN_CAPTURE_FEN, "e5", "e4e5"),
        (EN_PASSANT_FEN, "exd6", "e5d6"),
        (EN_PASSANT_FEN, "exd6 e.p.", "e5d6"),
        (PROMOTION_FEN, "a8=Q", "a7a8q"),
        (PROMOTION_FEN, "a8Q+", "a7a8q"),
        (PROMOTION_FEN, "a8=N", "a7a8n"),
        (PROMOTION_FEN, "a8", "a7a8q"),
    ],
)
def test_parse_san(fen: str, text: str, expected: str) -> None:
    assert parse_san(text, decode(fen)).to_uci() == expected


def test_long_form_promotion_without_piece_is_not_defaulted() -> None:
    """Only short algebraic falls back to a queen. The long form is taken literally."""
    position = decode(PROMOTION_FEN)
    move = parse_move("a7a8", position)
    assert move.promote_to is None
    with pytest.raises(IllegalMoveError):
        apply_move(position, move)


@pytest.mark.parametrize(
    "text, direction",
    [
        ("O-O", CastlingDirection.WHITE_KING_SIDE),
        ("0-0", CastlingDirection.WHITE_KING_SIDE),
        ("O-O-O", CastlingDirection.WHITE_QUEEN_SIDE),
        ("0-0-0+", CastlingDirection.WHITE_QUEEN_SIDE),
    ],
)
def test_parse_castling(text: str, direction: CastlingDirection) -> None:
    move = parse_move(text, decode(CASTLING_FEN))
    assert move.castling_direction == direction


@pytest.mark.parametrize("text", ["Kg1", "Kc1", "Ke1g1", "e1-g1"])
def test_king_move_notation_does_not_castle(text: str) -> None:
    """Castling is written O-O / O-O-O in short algebraic. A two-square king move matches nothing."""
    with pytest.raises(MoveParseError):
        parse_san(text, decode(CASTLING_FEN))


def test_long_form_castling_still_works() -> None:
    move = parse_move("e1g1", decode(CASTLING_FEN))
    _, applied = apply_move(decode(CASTLING_FEN), move)
    assert applied.is_castling


def test_castling_without_rights() -> None:
    with pytest.raises(MoveParseError):
        parse_move("O-O", decode("r3k2r/8/8/8/8/8/8/R3K2R w - - 0 1"))


# --- ENCODING ---
@pytest.mark.parametrize(
    "fen, uci, san",
    [
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", "e2e4", "e4"),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", "g1f3", "Nf3"),
        (TWO_KNIGHTS_SAME_RANK, "b1d2", "Nbd2"),
        (TWO_KNIGHTS_SAME_FILE, "b1d2", "N1d2"),
        (PAWN_CAPTURE_FEN, "e4d5", "exd5"),
        (EN_PASSANT_FEN, "e5d6", "exd6"),
        (PROMOTION_FEN, "a7a8q", "a8=Q+"),
        (PROMOTION_FEN, "a7a8n", "a8=N"),
        (CASTLING_FEN, "e1g1", "O-O"),
        (CASTLING_FEN, "e1c1", "O-O-O"),
        (CASTLING_FEN, "a1a8", "Rxa8+"),
        ("rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq g3 0 2", "d8h4", "Qh4#"),
    ],
)
def test_to_san(fen: str, uci: str, san: str) -> None:
    position = decode(fen)
    _, applied = apply_move(position, Move.from_uci(uci))
    assert to_san(position, applied) == san
    assert to_long_form(applied) == uci


@pytest.mark.parametrize(
    "fen, uci",
    [
        (TWO_KNIGHTS_SAME_RANK, "f1d2"),
        (TWO_KNIGHTS_SAME_FILE, "b3d2"),
        (CASTLING_FEN, "h1h8"),
        (PROMOTION_FEN, "a7a8r"),
    ],
)
def test_san_resolves_back_to_same_move(fen: str, uci: str) -> None:
    """What to_san writes, parse_san reads back as the very same move"""
    position = decode(fen)
    move = Move.from_uci(uci)
    _, applied = apply_move(position, move)
    assert parse_san(to_san(position, applied), position) == move
