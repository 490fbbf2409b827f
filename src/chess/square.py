"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

# Chess board is always 8x8. Kept as a constant so the geometry code reads in terms of the board edges
BOARD_DIMENSIONS = (8, 8)

FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]
RANK_NAMES = "".join(str(rank) for rank in range(1, BOARD_DIMENSIONS[1] + 1))


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not is_valid_square(sq):
            raise ValueError(f"Not a square on the board: {sq!r}")
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        """The square (df, dr) away. May fall off the board, check with is_within_bounds()."""
        return Square(self.file + df, self.rank + dr)


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a single digit for the rank"""
    return (
        len(square) == 2 and square[0] in FILE_NAMES and square[1] in RANK_NAMES
    )


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank)
    for rank in range(1, BOARD_DIMENSIONS[1] + 1)
    for file in range(1, BOARD_DIMENSIONS[0] + 1)
)
