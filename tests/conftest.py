"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Any, Callable, Generator, Optional

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.definitions import DefinitionCatalog, SetupRecord
from src.chess.match import Match
from src.chess.square import Square
from src.core.config import MatchConfig
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

GLYPH_TO_NAME = {
    "p": "pawn",
    "b": "bishop",
    "n": "knight",
    "r": "rook",
    "q": "queen",
    "k": "king",
}

Layout = dict[str, str]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def db_session_shared() -> Generator[Session, None, None]:
    """Connection to a test database. Mock real setup with multiple sessions connecting to the same engine / database tables."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def catalog_from_layout() -> Callable[[Layout], DefinitionCatalog]:
    """Call the inner function with {square: notation}. Upper case pieces belong to player 0, lower case to player 1."""

    def _create_catalog(layout: Layout) -> DefinitionCatalog:
        setup = [
            SetupRecord(
                GLYPH_TO_NAME[notation.lower()],
                notation,
                0 if notation.isupper() else 1,
                Square.from_algebraic(square),
            )
            for square, notation in layout.items()
        ]
        return DefinitionCatalog.standard().with_setup(setup)

    return _create_catalog


@pytest.fixture
def match_from_layout(
    catalog_from_layout: Callable[[Layout], DefinitionCatalog],
) -> Callable[..., Match]:
    """Call the inner function with the layout (see catalog_from_layout), optionally who moves first."""

    def _create_match(
        layout: Layout,
        first_player_id: int = 0,
        config: Optional[MatchConfig] = None,
        **kwargs: Any,
    ) -> Match:
        config = config or MatchConfig(first_player_id=first_player_id)
        return Match(catalog_from_layout(layout), config, **kwargs)

    return _create_match


@pytest.fixture
def standard_match() -> Match:
    return Match(DefinitionCatalog.standard())
