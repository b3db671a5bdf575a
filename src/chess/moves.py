"""
Move results, move records and the geometry of piece movement

Key idea: Use strategy pattern to define the movement shape of each piece type.

Anything that needs more context than the geometry (pawns, castling, blocking pieces) is handled by the validator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Self

from src.chess.pieces import PieceHandle, PieceType
from src.chess.square import INVALID_SQUARE, Square
from src.core.shared_types import PromotionChoice


class MoveResult(Enum):
    UNKNOWN = auto()
    VALID_MOVE_NORMAL = auto()
    VALID_MOVE_PROMOTION = auto()
    VALID_CASTLE_KINGSIDE = auto()
    VALID_CASTLE_QUEENSIDE = auto()
    VALID_CAPTURE_NORMAL = auto()
    VALID_CAPTURE_ENPASSANT = auto()
    INVALID_MOVE_BAD_LOCATION = auto()
    INVALID_MOVE_NO_PIECE = auto()
    INVALID_MOVE_NOT_YOUR_PIECE = auto()
    INVALID_MOVE_ZERO_DISTANCE = auto()
    INVALID_MOVE_WRONG_MOVE_SHAPE = auto()
    INVALID_MOVE_DESTINATION_BLOCKED = auto()
    INVALID_MOVE_PATH_BLOCKED = auto()
    INVALID_MOVE_ENDS_IN_CHECK = auto()
    INVALID_ENPASSANT_STALE = auto()
    INVALID_CASTLE_KING_HAS_MOVED = auto()
    INVALID_CASTLE_ROOK_HAS_MOVED = auto()
    INVALID_CASTLE_PATH_BLOCKED = auto()
    INVALID_CASTLE_THROUGH_CHECK = auto()
    INVALID_CASTLE_OUT_OF_CHECK = auto()
    INVALID_MOVE_GAME_OVER = auto()


VALID_RESULTS: frozenset[MoveResult] = frozenset(
    {
        MoveResult.VALID_MOVE_NORMAL,
        MoveResult.VALID_MOVE_PROMOTION,
        MoveResult.VALID_CASTLE_KINGSIDE,
        MoveResult.VALID_CASTLE_QUEENSIDE,
        MoveResult.VALID_CAPTURE_NORMAL,
        MoveResult.VALID_CAPTURE_ENPASSANT,
    }
)

MOVE_RESULT_DESCRIPTIONS: dict[MoveResult, str] = {
    MoveResult.UNKNOWN: "Unknown move result!",
    MoveResult.VALID_MOVE_NORMAL: "Valid move",
    MoveResult.VALID_MOVE_PROMOTION: "Valid move, resulting in pawn promotion",
    MoveResult.VALID_CASTLE_KINGSIDE: "Valid move, castling kingside",
    MoveResult.VALID_CASTLE_QUEENSIDE: "Valid move, castling queenside",
    MoveResult.VALID_CAPTURE_NORMAL: "Valid move, capturing enemy piece",
    MoveResult.VALID_CAPTURE_ENPASSANT: "Valid move, capturing enemy pawn en passant",
    MoveResult.INVALID_MOVE_BAD_LOCATION: "Invalid move; invalid board location given",
    MoveResult.INVALID_MOVE_NO_PIECE: "Invalid move; no piece at location given",
    MoveResult.INVALID_MOVE_NOT_YOUR_PIECE: "Invalid move; can't move opponent's piece",
    MoveResult.INVALID_MOVE_ZERO_DISTANCE: "Invalid move; didn't go anywhere",
    MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE: "Invalid move; piece cannot move in that way",
    MoveResult.INVALID_MOVE_DESTINATION_BLOCKED: "Invalid move; destination is blocked by your piece",
    MoveResult.INVALID_MOVE_PATH_BLOCKED: "Invalid move; path is blocked",
    MoveResult.INVALID_MOVE_ENDS_IN_CHECK: "Invalid move; can't leave yourself in check",
    MoveResult.INVALID_ENPASSANT_STALE: "Invalid move; en passant must immediately follow a pawn double-move",
    MoveResult.INVALID_CASTLE_KING_HAS_MOVED: "Invalid castle; king has moved previously",
    MoveResult.INVALID_CASTLE_ROOK_HAS_MOVED: "Invalid castle; that rook has moved previously",
    MoveResult.INVALID_CASTLE_PATH_BLOCKED: "Invalid castle; pieces in-between king and rook",
    MoveResult.INVALID_CASTLE_THROUGH_CHECK: "Invalid castle; king can't move through check",
    MoveResult.INVALID_CASTLE_OUT_OF_CHECK: "Invalid castle; king can't castle out of check",
    MoveResult.INVALID_MOVE_GAME_OVER: "Invalid move; the match is over",
}


def describe_move_result(result: MoveResult) -> str:
    return MOVE_RESULT_DESCRIPTIONS[result]


def is_move_valid(result: MoveResult) -> bool:
    """UNKNOWN is only a default marker. Asking whether it is valid means something upstream forgot to validate."""
    if result == MoveResult.UNKNOWN:
        raise ValueError("MoveResult.UNKNOWN is not the outcome of a validation")
    return result in VALID_RESULTS


# -- PAWN PROMOTION --
PROMOTION_TYPES: dict[PromotionChoice, PieceType] = {
    PromotionChoice.QUEEN: PieceType.QUEEN,
    PromotionChoice.ROOK: PieceType.ROOK,
    PromotionChoice.BISHOP: PieceType.BISHOP,
    PromotionChoice.KNIGHT: PieceType.KNIGHT,
}

# single character used in UCI-like notation ("e7e8q")
PROMOTION_TO_UCI: dict[PromotionChoice, str] = {
    PromotionChoice.QUEEN: "q",
    PromotionChoice.ROOK: "r",
    PromotionChoice.BISHOP: "b",
    PromotionChoice.KNIGHT: "n",
}
UCI_TO_PROMOTION: dict[str, PromotionChoice] = {
    value: key for key, value in PROMOTION_TO_UCI.items()
}


def parse_promotion(designator: Optional[str]) -> Optional[PromotionChoice]:
    """'queen' / 'Queen' -> PromotionChoice.QUEEN. Empty or unrecognized designators give None."""
    if not designator:
        return None
    try:
        return PromotionChoice(designator.strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class Move:
    """A requested move, before anybody checked whether it is legal"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PromotionChoice] = None
    is_teleport: bool = False

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        UCI-like notation
        ---

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q": (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e2e6!": the exclamation mark flags a teleport (cheat) move

        Squares that cannot be parsed become INVALID_SQUARE (the validator rejects those).
        """
        is_teleport = uci.endswith("!")
        body = uci[:-1] if is_teleport else uci
        if len(body) not in (4, 5):
            return cls(INVALID_SQUARE, INVALID_SQUARE, is_teleport=is_teleport)

        promote_to = UCI_TO_PROMOTION.get(body[4].lower()) if len(body) == 5 else None
        return cls(
            Square.from_algebraic(body[:2]),
            Square.from_algebraic(body[2:4]),
            promote_to,
            is_teleport,
        )

    def to_uci(self) -> str:
        promotion = PROMOTION_TO_UCI[self.promote_to] if self.promote_to else ""
        teleport = "!" if self.is_teleport else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{promotion}{teleport}"


@dataclass(frozen=True)
class MoveRecord:
    """History entry: who moved what, from where to where. Appended after every executed move."""

    piece: PieceHandle
    piece_type: PieceType
    owner_id: int
    move: Move

    @property
    def from_square(self) -> Square:
        return self.move.from_square

    @property
    def to_square(self) -> Square:
        return self.move.to_square

    def is_pawn_double_step(self) -> bool:
        return (
            self.piece_type == PieceType.PAWN
            and abs(self.to_square.rank - self.from_square.rank) == 2
        )


# --- MOVEMENT SHAPES ---
def is_rook_shape(d_file: int, d_rank: int) -> bool:
    """Rooks move either horizontally or vertically"""
    return (d_file == 0) != (d_rank == 0)


def is_bishop_shape(d_file: int, d_rank: int) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return d_file != 0 and abs(d_file) == abs(d_rank)


def is_knight_shape(d_file: int, d_rank: int) -> bool:
    return (abs(d_file), abs(d_rank)) in {(2, 1), (1, 2)}


def is_queen_shape(d_file: int, d_rank: int) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_rook_shape(d_file, d_rank) or is_bishop_shape(d_file, d_rank)


def is_king_step(d_file: int, d_rank: int) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately).
    """
    return abs(d_file) <= 1 and abs(d_rank) <= 1 and (d_file, d_rank) != (0, 0)


def is_castling_shape(d_file: int, d_rank: int) -> bool:
    return d_rank == 0 and abs(d_file) == 2


# -- STRATEGY PATTERN: SHAPE RULES ---
# No pawn entry: a pawn move depends on its owner and on the move history (see validator.py)
ShapeRuleFn = Callable[[int, int], bool]
SHAPE_RULES: dict[PieceType, ShapeRuleFn] = {
    PieceType.KNIGHT: is_knight_shape,
    PieceType.BISHOP: is_bishop_shape,
    PieceType.ROOK: is_rook_shape,
    PieceType.QUEEN: is_queen_shape,
    PieceType.KING: is_king_step,
}

# pieces whose path must be free of other pieces
SLIDING_PIECES: frozenset[PieceType] = frozenset(
    {PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN}
)


def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Squares strictly in between two squares on the same rank, file or diagonal.

    Any other pair of squares (ex. a knight jump) has nothing in between.
    """
    d_file = to_square.file - from_square.file
    d_rank = to_square.rank - from_square.rank
    if not (is_rook_shape(d_file, d_rank) or is_bishop_shape(d_file, d_rank)):
        return []

    step_file = (d_file > 0) - (d_file < 0)
    step_rank = (d_rank > 0) - (d_rank < 0)
    steps = max(abs(d_file), abs(d_rank))
    return [from_square.offset(step_file * i, step_rank * i) for i in range(1, steps)]
