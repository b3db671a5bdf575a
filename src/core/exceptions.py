"""
Exceptions raised across layers.

Rule violations of a move are NOT exceptions (see MoveResult in src/chess/moves.py).
These are reserved for requests that do not make sense at all in the current state of the application.
"""


class GameError(Exception):
    """Base class, so the service/API layer can catch everything coming from the domain in one go."""


class GameStateError(GameError):
    """Operation not allowed in the current lifecycle state (ex. moving after the match has finished)."""


class InvalidRequestError(GameError):
    """Request / command could not be interpreted."""


class DefinitionError(GameError):
    """Piece or board definition data is malformed or incomplete."""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested record."""
