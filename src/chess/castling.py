"""Helpers for implementing Castling rules. Need to be imported by the validator and the match"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from src.chess.square import BOARD_DIMENSIONS, Square


class CastlingSide(Enum):
    """Values are the file of the rook the king castles with."""

    KINGSIDE = BOARD_DIMENSIONS[0]
    QUEENSIDE = 1

    @classmethod
    def from_king_move(cls, from_square: Square, to_square: Square) -> Self:
        """The king moves two files towards the rook it castles with"""
        return cls.KINGSIDE if to_square.file > from_square.file else cls.QUEENSIDE


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.

    NOTE: the king jumps two squares towards the rook, the rook lands on the square the king jumped over.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def for_king(cls, king_from: Square, side: CastlingSide) -> Self:
        direction = 1 if side == CastlingSide.KINGSIDE else -1
        king_to = king_from.offset(2 * direction, 0)
        rook_from = Square(side.value, king_from.rank)
        rook_to = king_to.offset(-direction, 0)
        return cls(king_from, king_to, rook_from, rook_to)

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make the mapping shown below more readable"""
        return cls(
            Square.from_algebraic(k_from),
            Square.from_algebraic(k_to),
            Square.from_algebraic(r_from),
            Square.from_algebraic(r_to),
        )

    def path(self) -> list[Square]:
        """Squares strictly in between king and rook: all must be empty"""
        low, high = sorted((self.king_from.file, self.rook_from.file))
        return [Square(file, self.king_from.rank) for file in range(low + 1, high)]

