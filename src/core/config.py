"""Configuration knobs of a match and the persistence layer"""

import os
from dataclasses import dataclass

DATABASE_URL_ENV = "CHESS_DATABASE_URL"
DEFAULT_DATABASE_URL = "sqlite:///chess_matches.db"


@dataclass(frozen=True)
class MatchConfig:
    """Settings a Match is constructed with."""

    capture_delay_seconds: float = 2.0
    """How long a captured piece lingers (capture animation) before it is removed from the match"""

    check_pawn_double_step_path: bool = False
    """Also require the square a pawn skips over in its double step to be empty.
    Off by default: the classic rule set of this engine only looks at the destination square."""

    first_player_id: int = 0
    """Player that opens the match"""

    def __post_init__(self) -> None:
        if self.capture_delay_seconds < 0:
            raise ValueError(
                f"capture_delay_seconds must be non-negative, got {self.capture_delay_seconds}"
            )
        if self.first_player_id not in (0, 1):
            raise ValueError(f"first_player_id must be 0 or 1, got {self.first_player_id}")


def database_url() -> str:
    return os.environ.get(DATABASE_URL_ENV, DEFAULT_DATABASE_URL)
