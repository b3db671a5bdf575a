"""
Captured pieces are not removed on the spot: they linger while the capture plays out, then the match frees them.

The scheduler only keeps time. Freeing the piece (and ending the match on a king capture) is up to the Match.
"""

from dataclasses import dataclass, field

from src.chess.pieces import PieceHandle, PieceType


@dataclass
class PendingRemoval:
    piece: PieceHandle
    remaining_time: float
    captured_type: PieceType


@dataclass
class CaptureScheduler:
    _pending: list[PendingRemoval] = field(default_factory=list)

    def schedule(
        self, piece: PieceHandle, delay_seconds: float, captured_type: PieceType
    ) -> PendingRemoval:
        entry = PendingRemoval(piece, delay_seconds, captured_type)
        self._pending.append(entry)
        return entry

    def advance(self, delta_seconds: float) -> list[PendingRemoval]:
        """Tick every entry. Returns (and forgets) the ones whose time ran out."""
        finished: list[PendingRemoval] = []
        still_pending: list[PendingRemoval] = []
        for entry in self._pending:
            entry.remaining_time -= delta_seconds
            if entry.remaining_time <= 0:
                finished.append(entry)
            else:
                still_pending.append(entry)
        self._pending = still_pending
        return finished

    @property
    def pending(self) -> tuple[PendingRemoval, ...]:
        return tuple(self._pending)

    def __len__(self) -> int:
        return len(self._pending)
