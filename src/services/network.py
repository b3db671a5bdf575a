"""
Outgoing side of the network link.

The transport itself is not part of this package: a broadcaster only turns a local move into a ChessMove command
and hands it to whatever sends it. Incoming commands go through MatchService.handle_command (remote=true).
"""

import logging
from typing import Callable, Optional, Protocol

from src.api.commands import format_move_command
from src.api.models import MoveRequest

logger = logging.getLogger(__name__)


class MoveBroadcaster(Protocol):
    def notify_local_move(
        self, from_notation: str, to_notation: str, promotion: Optional[str]
    ) -> None:
        """A move was made on this machine: the other side needs to replay it."""
        ...


class CommandBroadcaster:
    """Sends every local move as a `ChessMove ... remote=true` command."""

    def __init__(self, send: Callable[[str], None]) -> None:
        self.send = send

    def notify_local_move(
        self, from_notation: str, to_notation: str, promotion: Optional[str]
    ) -> None:
        request = MoveRequest(
            from_square=from_notation,
            to_square=to_notation,
            promote_to=promotion,
            is_remote=True,
        )
        command = format_move_command(request)
        logger.debug("Sending %s", command)
        self.send(command)
