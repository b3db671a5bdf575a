"""Unit tests for /src/chess/definitions.py"""

from typing import Any

import pytest

from src.chess.definitions import DefinitionCatalog, SetupRecord
from src.chess.pieces import PieceType
from src.chess.square import Square
from src.core.exceptions import DefinitionError


@pytest.fixture
def catalog_data() -> dict[str, Any]:
    return {
        "pieces": [
            {"name": "king", "type": "king", "glyph": "K"},
            {"name": "rook", "type": "ROOK", "glyph": "R"},
        ],
        "setup": [
            {"piece_name": "king", "owner_id": 0, "square": "e1"},
            {"piece_name": "rook", "owner_id": 0, "square": "h1"},
            {"piece_name": "king", "owner_id": 1, "square": "e8"},
        ],
    }


def test_standard_catalog() -> None:
    catalog = DefinitionCatalog.standard()
    assert len(catalog.setup) == 32
    assert len(catalog.definitions) == 6

    by_square = {record.square.to_algebraic(): record for record in catalog.setup}
    assert by_square["e1"].piece_name == "king"
    assert by_square["e1"].notation == "K"
    assert by_square["d8"].piece_name == "queen"
    assert by_square["d8"].notation == "q"
    assert by_square["a7"].owner_id == 1
    assert by_square["h2"].owner_id == 0


def test_lookups() -> None:
    catalog = DefinitionCatalog.standard()
    assert catalog.piece_definition("knight").type == PieceType.KNIGHT
    assert catalog.definition_for_type(PieceType.BISHOP).name == "bishop"
    with pytest.raises(DefinitionError):
        catalog.piece_definition("archbishop")


def test_definitions_are_read_only() -> None:
    catalog = DefinitionCatalog.standard()
    with pytest.raises(TypeError):
        catalog.definitions["pawn"] = catalog.definitions["queen"]  # type: ignore[index]


def test_from_dict(catalog_data: dict[str, Any]) -> None:
    catalog = DefinitionCatalog.from_dict(catalog_data)
    assert catalog.piece_definition("rook").type == PieceType.ROOK
    assert [record.notation for record in catalog.setup] == ["K", "R", "k"]
    assert catalog.setup[1].square == Square(8, 1)


@pytest.mark.parametrize(
    "path, bad_value",
    [
        (("pieces", 0, "type"), "archbishop"),
        (("pieces", 0, "glyph"), "KK"),
        (("setup", 0, "owner_id"), 2),
        (("setup", 0, "square"), "z9"),
        (("setup", 0, "piece_name"), "archbishop"),
    ],
)
def test_from_dict_rejects_malformed_data(
    catalog_data: dict[str, Any], path: tuple[Any, ...], bad_value: Any
) -> None:
    section, index, key = path
    catalog_data[section][index][key] = bad_value
    with pytest.raises(DefinitionError):
        DefinitionCatalog.from_dict(catalog_data)


def test_two_pieces_on_one_square() -> None:
    catalog = DefinitionCatalog.standard()
    square = Square.from_algebraic("e4")
    with pytest.raises(DefinitionError):
        catalog.with_setup(
            [
                SetupRecord("pawn", "P", 0, square),
                SetupRecord("pawn", "p", 1, square),
            ]
        )


def test_with_setup_keeps_definitions() -> None:
    catalog = DefinitionCatalog.standard()
    puzzle = catalog.with_setup([SetupRecord("king", "K", 0, Square.from_algebraic("e1"))])
    assert len(puzzle.setup) == 1
    assert dict(puzzle.definitions) == dict(catalog.definitions)
