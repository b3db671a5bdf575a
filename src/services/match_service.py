"""Orchestration of communication from the console / network / input layer to the match and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.commands import parse_move_command
from src.api.models import ArchiveRequest, MatchResponse, MoveRequest, MoveResponse
from src.chess.definitions import DefinitionCatalog
from src.chess.match import Match
from src.chess.moves import describe_move_result
from src.chess.square import Square
from src.core.config import MatchConfig
from src.core.exceptions import GameStateError, RepositoryError
from src.core.models import MatchModel
from src.core.shared_types import GamePhase
from src.db.repository import MatchRepository
from src.services.network import MoveBroadcaster

logger = logging.getLogger(__name__)

QUEUED = "QUEUED"


class MatchService:
    """
    Application lifecycle around a single match
    ---

    ATTRACT (no match) -> MATCH (a match is being played) -> FINISHED (a king was captured)
    """

    def __init__(
        self,
        catalog: Optional[DefinitionCatalog] = None,
        config: Optional[MatchConfig] = None,
        repository: Optional[MatchRepository] = None,
        broadcaster: Optional[MoveBroadcaster] = None,
    ) -> None:
        self.catalog = catalog or DefinitionCatalog.standard()
        self.config = config or MatchConfig()
        self.repo = repository
        self.broadcaster = broadcaster
        self.phase = GamePhase.ATTRACT
        self.match: Optional[Match] = None

    # -- Lifecycle ---
    def enter_attract(self) -> None:
        """Back to the title screen: the current match is discarded."""
        self.match = None
        self._change_phase(GamePhase.ATTRACT)

    def start_match(self, networked: bool = False) -> Match:
        """
        A new match from the catalog's set-up.

        A networked match waits for the opponent to join (see `opponent_joined`) before the first turn.
        """
        if self.phase == GamePhase.MATCH:
            raise GameStateError("A match is already being played")

        match = Match(self.catalog, self.config, self.broadcaster, start=not networked)
        if networked:
            match.turns.await_opponent()
        self._attach(match)
        return match

    def opponent_joined(self) -> None:
        match = self._require_match()
        match.turns.begin(self.config.first_player_id)

    # -- Moves ---
    def handle_move_request(self, request: MoveRequest) -> MoveResponse:
        match = self._require_match()
        promotion = request.promote_to.value if request.promote_to else None

        if request.is_remote:
            # executed on the next update(), on the thread that owns the match
            match.queue_remote_move(request.from_square, request.to_square, promotion)
            return self._move_response(match, True, QUEUED, "Remote move queued")

        from_square = Square.from_algebraic(request.from_square)
        to_square = Square.from_algebraic(request.to_square)
        result = match.validate_move(from_square, to_square, promotion, request.is_teleport)
        accepted = match.execute_move(
            from_square, to_square, promotion, is_teleport=request.is_teleport
        )
        return self._move_response(match, accepted, result.name, describe_move_result(result))

    def handle_command(self, command: str) -> MoveResponse:
        """`ChessMove from=e2 to=e4 ...` as typed in the console or received from the network"""
        return self.handle_move_request(parse_move_command(command))

    def update(self, delta_seconds: float) -> None:
        if self.match is not None:
            self.match.update(delta_seconds)

    # -- Persistence ---
    def archive(self) -> MatchResponse:
        """Store the move log of the current match."""
        match = self._require_match()
        repo = self._require_repository()
        stored_match, match_id = repo.create_match(match.to_model())
        logger.info("Archived match %s (%d moves)", match_id, len(stored_match.moves))
        return self._create_match_response(match_id, stored_match)

    def restore(self, request: ArchiveRequest) -> Match:
        """Replay an archived match. It becomes the current match."""
        if self.phase == GamePhase.MATCH:
            raise GameStateError("A match is already being played")

        stored_model = self._fetch_match(request.match_id)
        match = Match.from_model(stored_model, self.catalog, self.config)
        match.broadcaster = self.broadcaster
        self._attach(match)
        if match.is_finished:
            self._change_phase(GamePhase.FINISHED)
        return match

    def get_archive(self, request: ArchiveRequest) -> MatchResponse:
        return self._create_match_response(request.match_id, self._fetch_match(request.match_id))

    # -- Private helpers ---
    def _attach(self, match: Match) -> None:
        self.match = match
        match.turns.events.on_game_over.append(self._on_game_over)
        self._change_phase(GamePhase.MATCH)

    def _on_game_over(self, winner_id: Optional[int]) -> None:
        self._change_phase(GamePhase.FINISHED)

    def _change_phase(self, new_phase: GamePhase) -> None:
        logger.info("Phase: %s -> %s", self.phase, new_phase)
        self.phase = new_phase

    def _require_match(self) -> Match:
        if self.match is None:
            raise GameStateError(f"No match is being played (phase: {self.phase})")
        return self.match

    def _require_repository(self) -> MatchRepository:
        if self.repo is None:
            raise RepositoryError("No repository configured")
        return self.repo

    def _fetch_match(self, match_id: UUID) -> MatchModel:
        stored_model = self._require_repository().get_match(match_id)
        if not stored_model:
            raise RepositoryError(f"No match stored with ID: {match_id}")
        return stored_model

    def _move_response(
        self, match: Match, accepted: bool, result: str, description: str
    ) -> MoveResponse:
        return MoveResponse(
            accepted=accepted,
            result=result,
            description=description,
            current_player_id=match.current_player_id,
            state=match.state.value,
        )

    def _create_match_response(self, match_id: UUID, model: MatchModel) -> MatchResponse:
        return MatchResponse(
            match_id=match_id,
            moves=model.moves,
            current_player_id=model.current_player_id,
            state=model.state,
            winner_id=model.winner_id,
        )
