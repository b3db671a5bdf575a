"""
The Match is the entrypoint into the domain layer for the service layer.

It owns everything that changes while playing: the pieces (arena), the occupancy records (board), the move history,
the captures that are still playing out (scheduler) and whose turn it is (state machine).

One frame of the host application:
1. the input layer asks `validate_move` / `highlight_legal_destinations` while the player is choosing
2. `execute_move` applies a legal move and hands the turn to the other player
3. `update(delta_seconds)` runs queued remote moves and removes captured pieces whose time ran out
"""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import TYPE_CHECKING, Optional, Self

from src.chess.board import Board
from src.chess.castling import CastlingSide, CastlingSquares
from src.chess.definitions import DefinitionCatalog
from src.chess.moves import (
    PROMOTION_TYPES,
    Move,
    MoveRecord,
    MoveResult,
    describe_move_result,
    is_move_valid,
    parse_promotion,
)
from src.chess.pieces import Piece, PieceArena, PieceType, opponent_of
from src.chess.removal import CaptureScheduler, PendingRemoval
from src.chess.square import Square, all_squares
from src.chess.turns import MOVING_STATES, WAITING_STATES, MatchState, TurnStateMachine
from src.chess.validator import en_passant_capture_square, validate
from src.core.config import MatchConfig
from src.core.exceptions import GameStateError
from src.core.models import MatchModel
from src.core.shared_types import PromotionChoice

if TYPE_CHECKING:
    from src.services.network import MoveBroadcaster

logger = logging.getLogger(__name__)

# (from, to, promotion) as received from the other side
RemoteMove = tuple[str, str, Optional[str]]


class Match:
    def __init__(
        self,
        catalog: DefinitionCatalog,
        config: Optional[MatchConfig] = None,
        broadcaster: Optional[MoveBroadcaster] = None,
        start: bool = True,
    ) -> None:
        self.catalog = catalog
        self.config = config or MatchConfig()
        self.broadcaster = broadcaster

        self.arena = PieceArena()
        self.board = Board.from_setup(catalog.setup)
        self.history: list[MoveRecord] = []
        self.scheduler = CaptureScheduler()
        self.turns = TurnStateMachine()
        self._remote_moves: deque[RemoteMove] = deque()

        for record in catalog.setup:
            self.arena.spawn(
                catalog.piece_definition(record.piece_name),
                record.owner_id,
                record.square,
            )

        self.turns.events.on_turn_entered.append(self._log_turn)
        if start:
            self.turns.begin(self.config.first_player_id)

    # --- STATE ---
    @property
    def current_player_id(self) -> int:
        return self.turns.current_player_id

    @property
    def state(self) -> MatchState:
        return self.turns.state

    @property
    def is_finished(self) -> bool:
        return self.turns.is_finished

    @property
    def winner_id(self) -> Optional[int]:
        return self.turns.winner_id

    def piece_at(self, square: Square) -> Optional[Piece]:
        """The active piece on a square. Pieces that are being captured no longer count."""
        for piece in self.arena:
            if piece.square == square and not piece.is_being_captured:
                return piece
        return None

    def king_square(self, player_id: int) -> Optional[Square]:
        for piece in self.arena:
            if (
                piece.type == PieceType.KING
                and piece.owner_id == player_id
                and not piece.is_being_captured
            ):
                return piece.square
        return None

    # --- DOMAIN LAYER API CALLED BY SERVICE / INPUT LAYER ---
    def validate_move(
        self,
        from_square: Square,
        to_square: Square,
        promotion: Optional[str] = None,
        is_teleport: bool = False,
    ) -> MoveResult:
        return validate(self, Move(from_square, to_square, parse_promotion(promotion), is_teleport))

    def execute_move(
        self,
        from_square: Square,
        to_square: Square,
        promotion: Optional[str] = None,
        is_teleport: bool = False,
        is_remote: bool = False,
    ) -> bool:
        """
        Attempt to make a move
        -----

        1. validate (again: the board may have changed since the input layer asked)
        2. update the pieces + the board (capture / en passant / promotion / castling)
        3. update the history of moves
        4. tell the other side (local moves only)
        5. hand the turn over
        """
        if self.turns.state not in MOVING_STATES.values() and not self.is_finished:
            raise GameStateError(f"Match has not started yet ({self.turns.state})")

        move = Move(from_square, to_square, parse_promotion(promotion), is_teleport)
        result = validate(self, move)
        if not is_move_valid(result):
            logger.info("Move %s rejected: %s", move.to_uci(), describe_move_result(result))
            return False

        piece = self.piece_at(from_square)
        # snapshot before the update: a promoted pawn is still recorded as a pawn
        record = MoveRecord(piece.handle, piece.type, piece.owner_id, move)
        logger.info(
            "Player %d: %s %s (%s)",
            piece.owner_id,
            piece.definition.name,
            move.to_uci(),
            describe_move_result(result),
        )

        self._update_board(piece, move, result)
        self.history.append(record)
        self.clear_highlights()

        if not is_remote and self.broadcaster is not None:
            self.broadcaster.notify_local_move(
                from_square.to_algebraic(),
                to_square.to_algebraic(),
                move.promote_to.value if move.promote_to else None,
            )

        self.turns.advance_turn()
        return True

    def queue_remote_move(
        self, from_notation: str, to_notation: str, promotion: Optional[str] = None
    ) -> None:
        """Safe to call from the network thread: the move is only executed on the next update()"""
        self._remote_moves.append((from_notation, to_notation, promotion))

    def update(self, delta_seconds: float) -> None:
        """Advance the match by one frame. Remote moves stay queued until the match has begun."""
        while self._remote_moves and self.turns.state not in WAITING_STATES:
            from_notation, to_notation, promotion = self._remote_moves.popleft()
            self.execute_move(
                Square.from_algebraic(from_notation),
                Square.from_algebraic(to_notation),
                promotion,
                is_remote=True,
            )

        for entry in self.scheduler.advance(delta_seconds):
            self._finish_removal(entry)

    def flush_removals(self) -> None:
        """Complete every pending capture right away (no animation to wait for)"""
        for entry in self.scheduler.advance(math.inf):
            self._finish_removal(entry)

    # --- SELECTION / HIGHLIGHTS (read by the presentation layer) ---
    def select(self, square: Square) -> Optional[Piece]:
        self.clear_highlights()
        if not square.is_within_bounds():
            return None
        self.board.square_info(square).is_selected = True
        piece = self.piece_at(square)
        if piece is not None:
            piece.is_selected = True
        return piece

    def highlight_legal_destinations(self, from_square: Square) -> list[Square]:
        """
        Probe every square of the board as destination.

        A pawn reaching the last rank needs a promotion choice to be legal: probe with a queen.
        """
        self.clear_highlights()
        destinations = [
            square
            for square in all_squares()
            if is_move_valid(validate(self, Move(from_square, square, PromotionChoice.QUEEN)))
        ]
        for square in destinations:
            self.board.square_info(square).is_highlighted = True
            piece = self.piece_at(square)
            if piece is not None:
                piece.is_highlighted = True
        return destinations

    def clear_highlights(self) -> None:
        self.board.clear_highlights()
        for piece in self.arena:
            piece.is_selected = False
            piece.is_highlighted = False

    # --- BOUNDARY ---
    def to_model(self) -> MatchModel:
        """Encode into the format the Service layer uses"""
        return MatchModel(
            moves=[record.move.to_uci() for record in self.history],
            current_player_id=self.current_player_id,
            state=self.state.value,
            winner_id=self.winner_id,
        )

    @classmethod
    def from_model(
        cls,
        model: MatchModel,
        catalog: DefinitionCatalog,
        config: Optional[MatchConfig] = None,
    ) -> Self:
        """Replay the move log on the catalog's set-up. Pending captures are completed right away."""
        match = cls(catalog, config)
        for uci in model.moves:
            move = Move.from_uci(uci)
            promotion = move.promote_to.value if move.promote_to else None
            if not match.execute_move(
                move.from_square,
                move.to_square,
                promotion,
                is_teleport=move.is_teleport,
                is_remote=True,
            ):
                raise GameStateError(f"Cannot replay move {uci!r}: not legal in this position")
        match.flush_removals()
        return match

    # -- PRIVATE HELPERS ---
    def _update_board(self, piece: Piece, move: Move, result: MoveResult) -> None:
        if result in (MoveResult.VALID_CASTLE_KINGSIDE, MoveResult.VALID_CASTLE_QUEENSIDE):
            self._castle(piece, move)
        elif result == MoveResult.VALID_CAPTURE_ENPASSANT:
            self._remove_immediately(en_passant_capture_square(move))
            self._relocate(piece, move.to_square)
        elif result == MoveResult.VALID_MOVE_PROMOTION:
            self._promote(piece, move)
        elif result == MoveResult.VALID_CAPTURE_NORMAL:
            self._capture(move.to_square)
            self._relocate(piece, move.to_square)
        else:
            self._relocate(piece, move.to_square)

    def _relocate(self, piece: Piece, to_square: Square) -> None:
        self.board.relocate(piece.square, to_square)
        piece.move_to(to_square)

    def _promote(self, pawn: Piece, move: Move) -> None:
        definition = self.catalog.definition_for_type(PROMOTION_TYPES[move.promote_to])
        if self.board.is_occupied(move.to_square):
            self._capture(move.to_square)
        pawn.promote_to(definition)
        self.board.relocate_with_promotion(move.from_square, move.to_square, definition)
        pawn.move_to(move.to_square)

    def _castle(self, king: Piece, move: Move) -> None:
        """The king jumps two squares towards the rook, the rook lands next to it on the inside"""
        side = CastlingSide.from_king_move(move.from_square, move.to_square)
        squares = CastlingSquares.for_king(move.from_square, side)
        rook = self.piece_at(squares.rook_from)
        self._relocate(king, squares.king_to)
        self._relocate(rook, squares.rook_to)

    def _capture(self, square: Square) -> None:
        """The defender leaves the board right away, but only leaves the match once its capture played out"""
        defender = self.piece_at(square)
        defender.is_being_captured = True
        self.board.clear_square(square)
        self.scheduler.schedule(
            defender.handle, self.config.capture_delay_seconds, defender.type
        )

    def _remove_immediately(self, square: Square) -> None:
        captured = self.piece_at(square)
        self.board.clear_square(square)
        self.arena.remove(captured.handle)
        logger.debug("Removed %s %s en passant", captured.definition.name, square)

    def _finish_removal(self, entry: PendingRemoval) -> None:
        piece = self.arena.remove(entry.piece)
        if piece is None:
            logger.warning("Captured piece %s was already removed", entry.piece)
            return
        logger.debug("Removed captured %s from %s", piece.definition.name, piece.square)
        if entry.captured_type == PieceType.KING and not self.is_finished:
            self.turns.finish(winner_id=opponent_of(piece.owner_id))

    def _log_turn(self, player_id: int) -> None:
        logger.info("Player %d to move\n%s", player_id, self.board.to_text())
