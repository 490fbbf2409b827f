"""
Move Legality Engine.

Single entrypoint for callers: `apply_move(position, move)`. It either hands back the next Position together with
an AppliedMove describing what happened, or raises IllegalMoveError. The Position passed in is never touched, so a
caller may replay several branches from the same starting point.

`legal_moves(position)` lists every legal move (the notation codec resolves short algebraic moves against it).
"""

import logging
from dataclasses import replace
from typing import Optional

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_directions,
    castling_path,
    king_path,
)
from src.chess.moves import (
    MOVEMENT_RULES,
    PROMOTION_OPTIONS,
    AppliedMove,
    Move,
    candidate_castling_move,
    en_passant_capture_square,
    en_passant_moves,
    is_pawn_push_to_promotion_square,
    pawn_pushes_w_promotion,
)
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import IllegalMoveError

logger = logging.getLogger(__name__)


# --- PUBLIC API ---
def apply_move(position: Position, move: Move) -> tuple[Position, AppliedMove]:
    """
    Attempt a move
    -----

    1. a piece of the side to move must stand on the origin square
    2. that piece must be able to reach the destination (blocking pieces, pawn double step from the home rank only,
       en passant only onto the current en passant square, castling conditions)
    3. the destination may not hold one of your own pieces
    4. a pawn reaching the last rank must name its promotion piece, and nothing else may name one
    5. the move may not leave your own king in check
    """
    resolved = _resolve(position, move)
    return _play(position, resolved)


def legal_moves(position: Position) -> list[Move]:
    """
    List of legal moves for the side to move
    ----

    1. generate candidate moves, using the basic movement rules for all pieces (the board does this calculation)
    2. add castling moves that are currently allowed
    3. add candidate en passant moves
    4. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.
    5. Pawn push to promotion square? --> expand the set of moves to include one for every choice of piece type to promote into.
    """
    board = position.board
    candidate_moves = board.generate_candidate_moves(position.color_to_move)

    for direction in castling_directions(position.color_to_move):
        if _castling_problem(position, direction) is None:
            candidate_moves.append(candidate_castling_move(direction))

    if position.en_passant_square is not None:
        candidate_moves.extend(
            en_passant_moves(position.en_passant_square, position.color_to_move, board)
        )

    moves: list[Move] = []
    for move in candidate_moves:
        if _leaves_king_in_check(position, move):
            continue
        if is_pawn_push_to_promotion_square(move, board):
            moves.extend(pawn_pushes_w_promotion(move))
        else:
            moves.append(move)
    return moves


def is_check(position: Position) -> bool:
    """Is the side to move in check?"""
    return position.board.is_check(position.color_to_move)


def is_checkmate(position: Position) -> bool:
    return is_check(position) and not legal_moves(position)


def is_stalemate(position: Position) -> bool:
    return not is_check(position) and not legal_moves(position)


# --- RESOLVING A MOVE DESCRIPTOR ---
def _illegal(move: Move, reason: str) -> IllegalMoveError:
    return IllegalMoveError(f"Illegal move {move.to_uci()}: {reason}", move=move.to_uci())


def _resolve(position: Position, move: Move) -> Move:
    """Match the descriptor to the move the rules allow, with castling / en passant flags filled in."""
    board = position.board
    mover = position.color_to_move
    piece = board.piece(move.from_square)
    origin = move.from_square.to_algebraic()

    if piece.color != mover:
        raise _illegal(move, f"no {mover.name.lower()} piece on {origin}")

    direction = _castling_direction_for(piece, move)
    if direction is not None:
        problem = _castling_problem(position, direction)
        if problem is not None:
            raise _illegal(move, problem)
        if move.promote_to is not None:
            raise _illegal(move, "only pawns reaching the last rank can promote")
        return candidate_castling_move(direction)

    reachable = [
        candidate
        for candidate in _piece_moves(position, move.from_square)
        if candidate.to_square == move.to_square
    ]
    if not reachable:
        if board.piece(move.to_square).color == mover:
            raise _illegal(move, "destination holds one of your own pieces")
        raise _illegal(
            move,
            f"{piece.type.name.lower()} on {origin} cannot reach {move.to_square.to_algebraic()}",
        )
    resolved = reachable[0]

    if is_pawn_push_to_promotion_square(resolved, board):
        if move.promote_to is None:
            raise _illegal(move, "pawn reaching the last rank must name a promotion piece")
        if move.promote_to not in PROMOTION_OPTIONS:
            raise _illegal(move, f"cannot promote to {move.promote_to.name.lower()}")
        resolved = replace(resolved, promote_to=move.promote_to)
    elif move.promote_to is not None:
        raise _illegal(move, "only pawns reaching the last rank can promote")

    if _leaves_king_in_check(position, resolved):
        raise _illegal(move, "leaves own king in check")
    return resolved


def _piece_moves(position: Position, square: Square) -> list[Move]:
    """Candidate moves of the piece on `square`, en passant included"""
    board = position.board
    piece = board.piece(square)
    moves = MOVEMENT_RULES[piece.type](square, board)
    if piece.type == PieceType.PAWN and position.en_passant_square is not None:
        moves.extend(
            move
            for move in en_passant_moves(position.en_passant_square, piece.color, board)
            if move.from_square == square
        )
    return moves


def _leaves_king_in_check(position: Position, move: Move) -> bool:
    """Return True if the move puts (or leaves) your own king in check"""
    return _board_after(position.board, move).is_check(position.color_to_move)


# -- CASTLING RULE HELPERS ---
def _castling_direction_for(piece: Piece, move: Move) -> Optional[CastlingDirection]:
    """Castling is written as the king's two-square move (e1g1, e1c1, e8g8, e8c8)"""
    if piece.type != PieceType.KING:
        return None
    for direction in castling_directions(piece.color):
        rule = CASTLING_RULES[direction]
        if (move.from_square, move.to_square) == (rule.king_from, rule.king_to):
            return direction
    return None


def _castling_problem(position: Position, direction: CastlingDirection) -> Optional[str]:
    """
    Find out why you may not castle in the given direction (None if you may)
    ---

    **you are allowed to castle if**

    * Castling rights are not yet revoked (so the king and that rook never moved).
    * All squares between the king and the rook are empty.
    * The king is not in check, and does not pass through or land on an attacked square.
    """
    board = position.board
    rule = CASTLING_RULES[direction]
    color = direction.color

    if not position.has_castling_right(direction):
        return "castling right already revoked"

    # Rights only come from a FEN string, so double check the pieces are actually there
    if board.piece(rule.king_from) != Piece(PieceType.KING, color) or board.piece(
        rule.rook_from
    ) != Piece(PieceType.ROOK, color):
        return "king or rook not on its starting square"

    if board.is_any_occupied(castling_path(direction)):
        return "squares between king and rook are not empty"

    if board.is_under_attack(rule.king_from, color.opponent):
        return "cannot castle out of check"

    if board.is_any_under_attack(king_path(direction), color.opponent):
        return "king would pass through or land on an attacked square"

    return None


def _revoked_castling_rights(move: Move) -> list[CastlingDirection]:
    """
    Checks which rights should get revoked
    ----

    A right is gone as soon as anything leaves or lands on the king's or the rook's starting square:
    1. the king moves (castling included) --> both of that player's rights
    2. a rook moves away for the first time --> the right in the direction of that rook
    3. the opponent's rook gets captured on its starting square --> the opponent's right in that direction
    """
    touched = {move.from_square, move.to_square}
    return [
        direction
        for direction, rule in CASTLING_RULES.items()
        if touched & {rule.king_from, rule.rook_from}
    ]


# --- MAKING THE MOVE ---
def _board_after(board: Board, move: Move) -> Board:
    """
    Call for the proper updates of the Board's position
    """
    # castling move must displace two pieces on the board
    if move.castling_direction is not None:
        squares = CASTLING_RULES[move.castling_direction]
        return board.move_pieces(
            [
                Move(from_square=squares.king_from, to_square=squares.king_to),
                Move(from_square=squares.rook_from, to_square=squares.rook_to),
            ]
        )

    # en passant: the pawn taken is not standing on the target square
    if move.is_en_passant:
        return board.move_piece(move).remove_piece(en_passant_capture_square(move))

    new_board = board.move_piece(move)
    if move.promote_to is not None:
        pawn = board.piece(move.from_square)
        new_board = new_board.place_piece(pawn.promoted_to(move.promote_to), move.to_square)
    return new_board


def _play(position: Position, move: Move) -> tuple[Position, AppliedMove]:
    """Build the next Position. `move` has already been resolved as legal."""
    board = position.board
    mover = position.color_to_move
    moving_piece = board.piece(move.from_square)

    captured_square = en_passant_capture_square(move) if move.is_en_passant else move.to_square
    captured_piece: Optional[Piece] = board.piece(captured_square)
    if captured_piece is not None and captured_piece.is_empty():
        captured_piece = None

    # the en passant square only lives for a single ply, after a pawn double step
    en_passant_square: Optional[Square] = None
    ranks_moved = abs(move.to_square.rank - move.from_square.rank)
    if moving_piece.type == PieceType.PAWN and ranks_moved == 2:
        en_passant_square = Square(
            file=move.from_square.file,
            rank=(move.from_square.rank + move.to_square.rank) // 2,
        )

    # move counters
    resets_clock = moving_piece.type == PieceType.PAWN or captured_piece is not None
    half_move_clock = 0 if resets_clock else position.half_move_clock + 1
    num_turns = position.num_turns + 1 if mover == Color.BLACK else position.num_turns

    next_position = Position(
        board=_board_after(board, move),
        color_to_move=mover.opponent,
        castling_rights=position.castling_rights - set(_revoked_castling_rights(move)),
        en_passant_square=en_passant_square,
        half_move_clock=half_move_clock,
        num_turns=num_turns,
    )

    gives_check = is_check(next_position)
    applied = AppliedMove(
        move=move,
        moving_piece=moving_piece,
        captured_piece=captured_piece,
        gives_check=gives_check,
        is_checkmate=gives_check and not legal_moves(next_position),
    )
    logger.debug("played %s", move.to_uci())
    return next_position, applied
