"""Generate database session"""

from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import database_url
from src.db.schema import Base


def build_engine(url: str | None = None) -> Engine:
    """Engine for the configured database. Ensures all tables are created."""
    engine = create_engine(url or database_url())
    Base.metadata.create_all(bind=engine)
    return engine


def build_session_factory(url: str | None = None) -> sessionmaker[Session]:
    return sessionmaker(bind=build_engine(url))


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
