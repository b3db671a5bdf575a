"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """
        Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)

        Anything that is not exactly a file letter followed by a rank digit maps to INVALID_SQUARE.
        (the file letter is accepted in upper case as well: 'E2' == 'e2')
        """
        if len(sq) != 2:
            return INVALID_SQUARE

        file_char = sq[0].lower()
        rank_char = sq[1]
        last_file = chr(ord("a") + BOARD_DIMENSIONS[0] - 1)
        if not ("a" <= file_char <= last_file):
            return INVALID_SQUARE
        if not (rank_char.isascii() and rank_char.isdigit()):
            return INVALID_SQUARE

        square = cls(ord(file_char) - ord("a") + 1, int(rank_char))
        return square if square.is_within_bounds() else INVALID_SQUARE

    def to_algebraic(self) -> str:
        """Reverse of from_algebraic. Squares off the board have no name: empty string."""
        if not self.is_within_bounds():
            return ""
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, d_file: int, d_rank: int) -> Square:
        return Square(self.file + d_file, self.rank + d_rank)

    def is_adjacent_to(self, other: Square) -> bool:
        """8-neighbourhood. A square is not adjacent to itself."""
        if self == other:
            return False
        return abs(self.file - other.file) <= 1 and abs(self.rank - other.rank) <= 1

    def __str__(self) -> str:
        return self.to_algebraic() or f"({self.file},{self.rank})"


# Sentinel for "invalid / could not be parsed"
INVALID_SQUARE = Square(-1, -1)


def all_squares() -> list[Square]:
    """Every square on the board, a1, b1, ..., h1, a2, ..., h8"""
    return [
        Square(file, rank)
        for rank in range(1, BOARD_DIMENSIONS[1] + 1)
        for file in range(1, BOARD_DIMENSIONS[0] + 1)
    ]
