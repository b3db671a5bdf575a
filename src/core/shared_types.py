"""
Type definitions used across layers
"""

from enum import StrEnum


class GamePhase(StrEnum):
    """Lifecycle of the application around a single match."""

    ATTRACT = "attract"
    MATCH = "match"
    FINISHED = "finished"


class PromotionChoice(StrEnum):
    """The designators a pawn may be promoted into. Values double as piece definition names."""

    QUEEN = "queen"
    ROOK = "rook"
    BISHOP = "bishop"
    KNIGHT = "knight"
