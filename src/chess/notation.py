"""
Notation Codec: text <--> move descriptors.

Two input grammars, always tried in this order:

1. long form (UCI): origin square + destination square + optional promotion letter, e.g. "e2e4", "e7e8q"
2. short algebraic (SAN), read sloppily: "Nf3", "exd5", "e8=Q", "Ng1f3", "Ng1-f3", "Pe4", "O-O", "0-0-0", "Qh5+", ...

A long-form string only needs to be well-formed to parse (the rules engine decides if it is legal).
A SAN string is always resolved against the legal moves of the position passed in: exactly one legal move must match.

Output is always the long form. That is the only notation ever persisted.
"""

import re
from typing import Optional

from src.chess.moves import AppliedMove, Move
from src.chess.pieces import PIECE_TO_SAN, SAN_TO_PIECE, PieceType
from src.chess.position import Position
from src.chess.rules import legal_moves
from src.chess.square import Square
from src.core.exceptions import MoveParseError

LONG_FORM_PATTERN = re.compile(r"^[a-h][1-8][a-h][1-8][qrbn]?$", re.IGNORECASE)

SAN_PATTERN = re.compile(
    r"""
    ^(?P<piece>[PNBRQK])?
    (?P<from_file>[a-h])?
    (?P<from_rank>[1-8])?
    [-x:]?
    (?P<to_square>[a-h][1-8])
    (?:=?(?P<promotion>[NBRQnbrq]))?$
    """,
    re.VERBOSE,
)

KING_SIDE_CASTLE = {"O-O", "0-0", "o-o"}
QUEEN_SIDE_CASTLE = {"O-O-O", "0-0-0", "o-o-o"}

# check / mate markers, annotation glyphs and en passant suffixes carry no information for resolving the move
_SAN_SUFFIX = re.compile(r"(\s*e\.?p\.?)?[+#!?]*$")


def is_long_form(text: str) -> bool:
    return LONG_FORM_PATTERN.match(text) is not None


def parse_long_form(text: str) -> Move:
    """'e7e8q' --> Move(e7, e8, promote_to=QUEEN). Board context is not needed."""
    if not is_long_form(text):
        raise MoveParseError(f"Not a long-form move: {text!r}", move=text)
    return Move.from_uci(text.lower())


def parse_san(text: str, position: Position) -> Move:
    """Parse a SAN string into the unique legal Move it describes in the given position."""
    clean = _SAN_SUFFIX.sub("", text.strip())
    legal = legal_moves(position)

    # Castling
    if clean in KING_SIDE_CASTLE or clean in QUEEN_SIDE_CASTLE:
        king_side = clean in KING_SIDE_CASTLE
        for move in legal:
            direction = move.castling_direction
            if direction is not None and direction.name.endswith("KING_SIDE") == king_side:
                return move
        raise MoveParseError(f"No legal castling move matches {text!r}", move=text)

    match = SAN_PATTERN.match(clean)
    if match is None:
        raise MoveParseError(f"Cannot interpret {text!r} as a move", move=text)

    piece_letter = match["piece"]
    from_file = match["from_file"]
    from_rank = match["from_rank"]
    to_square = Square.from_algebraic(match["to_square"])
    promotion = SAN_TO_PIECE[match["promotion"].upper()] if match["promotion"] else None

    # No piece letter means a pawn, unless the full origin square is given ("g1-f3")
    piece_type: Optional[PieceType]
    if piece_letter is not None:
        piece_type = PieceType.PAWN if piece_letter == "P" else SAN_TO_PIECE[piece_letter]
    elif from_file and from_rank:
        piece_type = None
    else:
        piece_type = PieceType.PAWN

    # Find matching legal moves. Castling is only ever written as O-O / O-O-O (or the long form e1g1)
    candidates: list[Move] = []
    for move in legal:
        if move.to_square != to_square or move.castling_direction is not None:
            continue
        if piece_type is not None and position.board.piece(move.from_square).type != piece_type:
            continue
        if from_file is not None and move.from_square.to_algebraic()[0] != from_file:
            continue
        if from_rank is not None and move.from_square.rank != int(from_rank):
            continue
        if promotion is not None and move.promote_to != promotion:
            continue
        candidates.append(move)

    # promotion piece left out: default to a queen
    if promotion is None and candidates and all(move.promote_to for move in candidates):
        candidates = [move for move in candidates if move.promote_to == PieceType.QUEEN]

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise MoveParseError(f"No legal move matches {text!r}", move=text)
    options = ", ".join(move.to_uci() for move in candidates)
    raise MoveParseError(f"Ambiguous move {text!r}: could be {options}", move=text)


def parse_move(text: str, position: Position) -> Move:
    """Long form first (if the text has that shape), otherwise short algebraic."""
    raw = text.strip()
    if not raw:
        raise MoveParseError("Empty move", move=text)
    if is_long_form(raw):
        return parse_long_form(raw)
    return parse_san(raw, position)


def to_long_form(applied: AppliedMove) -> str:
    """Canonical encoding: origin + destination + promotion letter (if any), nothing else."""
    return applied.move.to_uci()


def to_san(position: Position, applied: AppliedMove) -> str:
    """Render a move in SAN, given the position *before* the move was played."""
    move = applied.move
    direction = move.castling_direction

    if direction is not None:
        san = "O-O" if direction.name.endswith("KING_SIDE") else "O-O-O"
    else:
        piece_type = applied.moving_piece.type
        origin = move.from_square.to_algebraic()
        san = ""
        if piece_type == PieceType.PAWN:
            if applied.is_capture:
                san += origin[0]
        else:
            san += PIECE_TO_SAN[piece_type]
            san += _disambiguation(position, move, piece_type)

        if applied.is_capture:
            san += "x"
        san += move.to_square.to_algebraic()

        if move.promote_to is not None:
            san += "=" + PIECE_TO_SAN[move.promote_to]

    if applied.is_checkmate:
        san += "#"
    elif applied.gives_check:
        san += "+"
    return san


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    """File, rank or full square of origin when another piece of the same type could go to the same square."""
    rivals = [
        other.from_square
        for other in legal_moves(position)
        if other.to_square == move.to_square
        and other.from_square != move.from_square
        and position.board.piece(other.from_square).type == piece_type
    ]
    if not rivals:
        return ""
    origin = move.from_square.to_algebraic()
    if all(square.file != move.from_square.file for square in rivals):
        return origin[0]
    if all(square.rank != move.from_square.rank for square in rivals):
        return origin[1]
    return origin
