"""
Type definitions used across layers
"""

from enum import StrEnum


class RejectionKind(StrEnum):
    """Machine-readable reason a candidate move list was refused."""

    WRONG_MOVE_COUNT = "wrong_move_count"
    UNPARSABLE_MOVE = "unparsable_move"
    ILLEGAL_MOVE = "illegal_move"
