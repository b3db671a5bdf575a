"""
Catalog of piece definitions + the board set-up a match starts from.

Loaded once and injected into every Match (read-only). External data is validated with pydantic before it becomes a catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Self

from pydantic import BaseModel, ValidationError, field_validator

from src.chess.pieces import PLAYER_IDS, PieceDefinition, PieceType
from src.chess.square import Square
from src.core.exceptions import DefinitionError

logger = logging.getLogger(__name__)

STANDARD_DEFINITIONS: tuple[PieceDefinition, ...] = (
    PieceDefinition("pawn", PieceType.PAWN, "P"),
    PieceDefinition("bishop", PieceType.BISHOP, "B"),
    PieceDefinition("knight", PieceType.KNIGHT, "N"),
    PieceDefinition("rook", PieceType.ROOK, "R"),
    PieceDefinition("queen", PieceType.QUEEN, "Q"),
    PieceDefinition("king", PieceType.KING, "K"),
)

BACK_RANK: tuple[str, ...] = (
    "rook",
    "knight",
    "bishop",
    "queen",
    "king",
    "bishop",
    "knight",
    "rook",
)


@dataclass(frozen=True)
class SetupRecord:
    """One piece on the board at the start of a match."""

    piece_name: str
    notation: str
    owner_id: int
    square: Square


# --- Validation of external catalog data ---
class PieceDefinitionDocument(BaseModel):
    name: str
    type: str
    glyph: str

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: str) -> str:
        if value.upper() not in PieceType.__members__:
            raise ValueError(
                f"Unknown piece type {value!r}. Pick one from {','.join(PieceType.__members__)}"
            )
        return value.upper()

    @field_validator("glyph")
    @classmethod
    def validate_glyph(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError(f"Glyph must be a single character, got {value!r}")
        return value


class SetupDocument(BaseModel):
    piece_name: str
    owner_id: int
    square: str

    @field_validator("owner_id")
    @classmethod
    def validate_owner(cls, value: int) -> int:
        if value not in PLAYER_IDS:
            raise ValueError(f"owner_id must be one of {PLAYER_IDS}, got {value}")
        return value

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not Square.from_algebraic(value).is_within_bounds():
            raise ValueError(f"Cannot interpret {value!r} as a square on the board")
        return value


class CatalogDocument(BaseModel):
    pieces: list[PieceDefinitionDocument]
    setup: list[SetupDocument]


class DefinitionCatalog:
    """Immutable lookup of piece definitions by name, plus the set-up records."""

    __slots__ = ("_definitions", "_setup")

    def __init__(
        self, definitions: Mapping[str, PieceDefinition], setup: tuple[SetupRecord, ...]
    ) -> None:
        self._definitions = MappingProxyType(dict(definitions))
        self._setup = setup
        self._check_consistency()

    @classmethod
    def standard(cls) -> Self:
        """Classical 32 piece starting position"""
        definitions = {definition.name: definition for definition in STANDARD_DEFINITIONS}
        setup: list[SetupRecord] = []
        for owner_id, back_rank, pawn_rank in ((0, 1, 2), (1, 8, 7)):
            for file, name in enumerate(BACK_RANK, start=1):
                setup.append(
                    SetupRecord(
                        name,
                        definitions[name].notation_for(owner_id),
                        owner_id,
                        Square(file, back_rank),
                    )
                )
            for file in range(1, 9):
                setup.append(
                    SetupRecord(
                        "pawn",
                        definitions["pawn"].notation_for(owner_id),
                        owner_id,
                        Square(file, pawn_rank),
                    )
                )
        return cls(definitions, tuple(setup))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Build a catalog from external (ex. JSON) data"""
        try:
            document = CatalogDocument.model_validate(data)
        except ValidationError as exc:
            raise DefinitionError(f"Invalid definition data: {exc}") from exc

        definitions = {
            piece.name: PieceDefinition(piece.name, PieceType[piece.type], piece.glyph)
            for piece in document.pieces
        }
        setup: list[SetupRecord] = []
        for record in document.setup:
            definition = definitions.get(record.piece_name)
            if definition is None:
                raise DefinitionError(
                    f"Set-up refers to unknown piece definition {record.piece_name!r}"
                )
            setup.append(
                SetupRecord(
                    record.piece_name,
                    definition.notation_for(record.owner_id),
                    record.owner_id,
                    Square.from_algebraic(record.square),
                )
            )
        logger.debug(
            "Loaded %d piece definitions and %d set-up records",
            len(definitions),
            len(setup),
        )
        return cls(definitions, tuple(setup))

    def with_setup(self, setup: list[SetupRecord]) -> DefinitionCatalog:
        """Same definitions, different starting position (handy for puzzles and tests)"""
        return DefinitionCatalog(self._definitions, tuple(setup))

    @property
    def setup(self) -> tuple[SetupRecord, ...]:
        return self._setup

    @property
    def definitions(self) -> Mapping[str, PieceDefinition]:
        return self._definitions

    def piece_definition(self, name: str) -> PieceDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            raise DefinitionError(f"No piece definition named {name!r}") from None

    def definition_for_type(self, piece_type: PieceType) -> PieceDefinition:
        for definition in self._definitions.values():
            if definition.type == piece_type:
                return definition
        raise DefinitionError(f"No piece definition of type {piece_type.name}")

    def _check_consistency(self) -> None:
        """Every square holds at most one piece, and every piece has a definition."""
        seen: set[Square] = set()
        for record in self._setup:
            if record.piece_name not in self._definitions:
                raise DefinitionError(
                    f"Set-up refers to unknown piece definition {record.piece_name!r}"
                )
            if not record.square.is_within_bounds():
                raise DefinitionError(f"Set-up square {record.square} is off the board")
            if record.square in seen:
                raise DefinitionError(f"Two pieces set up on {record.square}")
            seen.add(record.square)
