"""
Turn / match state machine
-----

WAITING_FOR_CONNECTION -> WAITING_FOR_OPPONENT -> PLAYER1_MOVING <-> PLAYER2_MOVING -> GAME_OVER

GAME_OVER is terminal. Listeners subscribe by appending callbacks to the lists in TurnEvents.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable, Optional

from src.chess.pieces import PLAYER_IDS, opponent_of
from src.core.exceptions import GameStateError

logger = logging.getLogger(__name__)


class MatchState(StrEnum):
    WAITING_FOR_CONNECTION = "waiting for connection"
    WAITING_FOR_OPPONENT = "waiting for opponent"
    PLAYER1_MOVING = "player1 moving"
    PLAYER2_MOVING = "player2 moving"
    GAME_OVER = "game over"


WAITING_STATES = frozenset({MatchState.WAITING_FOR_CONNECTION, MatchState.WAITING_FOR_OPPONENT})
MOVING_STATES: dict[int, MatchState] = {
    0: MatchState.PLAYER1_MOVING,
    1: MatchState.PLAYER2_MOVING,
}

TurnCallback = Callable[[int], None]
GameOverCallback = Callable[[Optional[int]], None]
StateCallback = Callable[[MatchState, MatchState], None]


@dataclass
class TurnEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_turn_entered: list[TurnCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_state_changed: list[StateCallback] = field(default_factory=list)


class TurnStateMachine:
    __slots__ = ("_state", "_current_player_id", "_winner_id", "events")

    def __init__(self) -> None:
        self._state = MatchState.WAITING_FOR_CONNECTION
        self._current_player_id = 0
        self._winner_id: Optional[int] = None
        self.events = TurnEvents()

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def current_player_id(self) -> int:
        return self._current_player_id

    @property
    def winner_id(self) -> Optional[int]:
        return self._winner_id

    @property
    def is_finished(self) -> bool:
        return self._state == MatchState.GAME_OVER

    # -- Transitions --
    def await_connection(self) -> None:
        self._ensure_not_finished("await a connection")
        self._set_state(MatchState.WAITING_FOR_CONNECTION)

    def await_opponent(self) -> None:
        self._ensure_not_finished("await an opponent")
        if self._state not in WAITING_STATES:
            raise GameStateError(f"Cannot wait for an opponent while {self._state}")
        self._set_state(MatchState.WAITING_FOR_OPPONENT)

    def begin(self, first_player: int = 0) -> None:
        self._ensure_not_finished("begin")
        if self._state not in WAITING_STATES:
            raise GameStateError(f"Match already started ({self._state})")
        if first_player not in PLAYER_IDS:
            raise ValueError(f"first_player must be one of {PLAYER_IDS}, got {first_player}")
        self._enter_turn(first_player)

    def advance_turn(self) -> None:
        """Hand the move over to the other player"""
        self._ensure_not_finished("advance the turn")
        if self._state in WAITING_STATES:
            raise GameStateError(f"Cannot advance the turn while {self._state}")
        self._enter_turn(opponent_of(self._current_player_id))

    def finish(self, winner_id: Optional[int]) -> None:
        self._ensure_not_finished("finish")
        self._winner_id = winner_id
        self._set_state(MatchState.GAME_OVER)
        logger.info("Game over, winner: %s", "none" if winner_id is None else f"player {winner_id}")
        self._emit_game_over(winner_id)

    # -- Internals --
    def _ensure_not_finished(self, action: str) -> None:
        if self.is_finished:
            raise GameStateError(f"Cannot {action}: the match is over")

    def _enter_turn(self, player_id: int) -> None:
        self._current_player_id = player_id
        self._set_state(MOVING_STATES[player_id])
        self._emit_turn_entered(player_id)

    def _set_state(self, new_state: MatchState) -> None:
        old_state = self._state
        self._state = new_state
        logger.debug("Match state: %s -> %s", old_state, new_state)
        self._emit_state_changed(old_state, new_state)

    def _emit_turn_entered(self, player_id: int) -> None:
        for cb in self.events.on_turn_entered:
            cb(player_id)

    def _emit_game_over(self, winner_id: Optional[int]) -> None:
        for cb in self.events.on_game_over:
            cb(winner_id)

    def _emit_state_changed(self, old_state: MatchState, new_state: MatchState) -> None:
        for cb in self.events.on_state_changed:
            cb(old_state, new_state)
