"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the domain layer (Match) and the db layer use the model defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field

# Type alias to make MatchModel easier to read
MoveCommand = str


@dataclass
class MatchModel:
    """Transport-safe representation of a match. Replaying `moves` on the standard set-up restores it."""

    moves: list[MoveCommand] = field(default_factory=list)
    current_player_id: int = 0
    state: str = "player1 moving"
    winner_id: int | None = None
