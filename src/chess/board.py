"""The Board keeps the square occupancy records: which piece (name / notation) and which player sits on every square"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Self

from src.chess.definitions import SetupRecord
from src.chess.pieces import PieceDefinition
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares

EMPTY_NAME = "DEFAULT"
EMPTY_NOTATION = "*"
NO_OWNER = -1


@dataclass
class SquareInfo:
    """Occupancy record of a single square. Empty squares have no owner (-1)."""

    square: Square
    piece_name: str = EMPTY_NAME
    notation: str = EMPTY_NOTATION
    owner_id: int = NO_OWNER
    is_selected: bool = False
    is_highlighted: bool = False

    @property
    def is_occupied(self) -> bool:
        return self.owner_id != NO_OWNER

    def clear(self) -> None:
        self.piece_name = EMPTY_NAME
        self.notation = EMPTY_NOTATION
        self.owner_id = NO_OWNER

    def copy_occupant_from(self, other: SquareInfo) -> None:
        self.piece_name = other.piece_name
        self.notation = other.notation
        self.owner_id = other.owner_id


class Board:
    """64 occupancy records, ordered a1, b1, ..., h1, a2, ..., h8"""

    __slots__ = ("_squares",)

    def __init__(self) -> None:
        self._squares: list[SquareInfo] = [SquareInfo(square) for square in all_squares()]

    @classmethod
    def from_setup(cls, setup: Iterable[SetupRecord]) -> Self:
        board = cls()
        for record in setup:
            info = board.square_info(record.square)
            info.piece_name = record.piece_name
            info.notation = record.notation
            info.owner_id = record.owner_id
        return board

    # -- Queries --
    def square_info(self, square: Square) -> SquareInfo:
        if not square.is_within_bounds():
            raise IndexError(f"Square {square} is not on the board")
        files = BOARD_DIMENSIONS[0]
        return self._squares[(square.rank - 1) * files + (square.file - 1)]

    def squares(self) -> list[SquareInfo]:
        return list(self._squares)

    def is_occupied(self, square: Square) -> bool:
        return self.square_info(square).is_occupied

    def owner_at(self, square: Square) -> int:
        return self.square_info(square).owner_id

    def is_any_occupied(self, squares: Iterable[Square]) -> bool:
        return any(self.is_occupied(square) for square in squares)

    # -- Updates (performed by the Match whenever pieces move / disappear) --
    def relocate(self, from_square: Square, to_square: Square) -> None:
        """Whatever stood on to_square is overwritten (a capture), from_square becomes empty."""
        from_info = self.square_info(from_square)
        self.square_info(to_square).copy_occupant_from(from_info)
        from_info.clear()

    def relocate_with_promotion(
        self, from_square: Square, to_square: Square, definition: PieceDefinition
    ) -> None:
        from_info = self.square_info(from_square)
        to_info = self.square_info(to_square)
        to_info.piece_name = definition.name
        to_info.notation = definition.notation_for(from_info.owner_id)
        to_info.owner_id = from_info.owner_id
        from_info.clear()

    def clear_square(self, square: Square) -> None:
        self.square_info(square).clear()

    def clear_highlights(self) -> None:
        for info in self._squares:
            info.is_highlighted = False
            info.is_selected = False

    # -- Text dumps --
    def rank_contents(self, rank: int) -> str:
        """Notation of the 8 squares of a rank, a-file first"""
        return "".join(
            self.square_info(Square(file, rank)).notation
            for file in range(1, BOARD_DIMENSIONS[0] + 1)
        )

    def to_text(self) -> str:
        """Top rank (8th) first, as seen from player 0"""
        rows = [
            f"{rank} {self.rank_contents(rank)}"
            for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        ]
        files = "".join(chr(ord("a") + idx) for idx in range(BOARD_DIMENSIONS[0]))
        rows.append(f"  {files}")
        return "\n".join(rows)
