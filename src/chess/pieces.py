"""Defines the types of chess pieces, the pieces themselves, and the arena that owns them during a match"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional

from src.chess.square import Square


class PieceType(Enum):
    PAWN = auto()
    BISHOP = auto()
    KNIGHT = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


PLAYER_IDS: tuple[int, int] = (0, 1)


def opponent_of(player_id: int) -> int:
    return 1 - player_id


@dataclass(frozen=True)
class PieceDefinition:
    """
    Read-only description of a kind of piece, shared by all pieces of that kind.

    The glyph is what the piece looks like in a text dump of the board (upper case: player 0, lower case: player 1)
    """

    name: str
    type: PieceType
    glyph: str

    def notation_for(self, owner_id: int) -> str:
        return self.glyph.upper() if owner_id == 0 else self.glyph.lower()


@dataclass(frozen=True)
class PieceHandle:
    """
    Stable reference to a piece in the arena.

    A handle whose piece was removed no longer resolves, even after its slot gets reused (generation check).
    """

    index: int
    generation: int


@dataclass(eq=False)
class Piece:
    handle: PieceHandle
    definition: PieceDefinition
    owner_id: int
    square: Square
    has_moved: bool = False
    # presentation state: set for the input/render layer, never read by the rules
    is_selected: bool = False
    is_highlighted: bool = False
    is_being_captured: bool = False

    @property
    def type(self) -> PieceType:
        return self.definition.type

    @property
    def notation(self) -> str:
        return self.definition.notation_for(self.owner_id)

    def move_to(self, square: Square) -> None:
        self.square = square
        self.has_moved = True

    def promote_to(self, definition: PieceDefinition) -> None:
        self.definition = definition


@dataclass
class PieceArena:
    """Owns the pieces that are active in a match. Handles are index + generation."""

    _slots: list[Optional[Piece]] = field(default_factory=list)
    _generations: list[int] = field(default_factory=list)
    _free: list[int] = field(default_factory=list)

    def spawn(
        self, definition: PieceDefinition, owner_id: int, square: Square
    ) -> Piece:
        if self._free:
            index = self._free.pop()
        else:
            index = len(self._slots)
            self._slots.append(None)
            self._generations.append(0)

        handle = PieceHandle(index, self._generations[index])
        piece = Piece(handle, definition, owner_id, square)
        self._slots[index] = piece
        return piece

    def get(self, handle: PieceHandle) -> Optional[Piece]:
        if not (0 <= handle.index < len(self._slots)):
            return None
        if self._generations[handle.index] != handle.generation:
            return None
        return self._slots[handle.index]

    def remove(self, handle: PieceHandle) -> Optional[Piece]:
        """Free the slot. Returns the removed piece (None if the handle was already stale)."""
        piece = self.get(handle)
        if piece is None:
            return None
        self._slots[handle.index] = None
        self._generations[handle.index] += 1
        self._free.append(handle.index)
        return piece

    def __iter__(self) -> Iterator[Piece]:
        return (piece for piece in self._slots if piece is not None)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, PieceHandle) and self.get(handle) is not None
