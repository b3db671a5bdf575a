"""
Move validation
-----

Decides whether a requested move is legal and what kind of move it is, without changing anything.

Pipeline (stops at the first failure):
1. both squares on the board
2. match still running
3. a piece on the source square
4. ... belonging to the player whose turn it is
5. the piece actually goes somewhere
6. destination not taken by your own piece (teleport/cheat moves stop here: always valid)
7. shape of the move fits the piece (pawn and castling rules included)
8. nothing in the way of sliding pieces
9. kings never stand next to each other
10. classify the legal move
"""

from typing import Optional, Protocol

from src.chess.board import Board
from src.chess.castling import CastlingSide, CastlingSquares
from src.chess.moves import (
    SHAPE_RULES,
    SLIDING_PIECES,
    Move,
    MoveRecord,
    MoveResult,
    is_castling_shape,
    parse_promotion,
    squares_between,
)
from src.chess.pieces import Piece, PieceType, opponent_of
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.config import MatchConfig


class MatchView(Protocol):
    """Just the parts of a match the validator reads"""

    board: Board
    history: list[MoveRecord]
    config: MatchConfig

    @property
    def current_player_id(self) -> int: ...
    @property
    def is_finished(self) -> bool: ...
    def piece_at(self, square: Square) -> Optional[Piece]: ...
    def king_square(self, player_id: int) -> Optional[Square]: ...


def validate_move(
    match: MatchView,
    from_square: Square,
    to_square: Square,
    promotion: Optional[str] = None,
    is_teleport: bool = False,
) -> MoveResult:
    """Read-only: tells if the move is legal, and what kind of move it is."""
    move = Move(from_square, to_square, parse_promotion(promotion), is_teleport)
    return validate(match, move)


def validate(match: MatchView, move: Move) -> MoveResult:
    from_square = move.from_square
    to_square = move.to_square

    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return MoveResult.INVALID_MOVE_BAD_LOCATION

    if match.is_finished:
        return MoveResult.INVALID_MOVE_GAME_OVER

    piece = match.piece_at(from_square)
    if piece is None:
        return MoveResult.INVALID_MOVE_NO_PIECE

    if piece.owner_id != match.current_player_id:
        return MoveResult.INVALID_MOVE_NOT_YOUR_PIECE

    if from_square == to_square:
        return MoveResult.INVALID_MOVE_ZERO_DISTANCE

    destination_owner = match.board.owner_at(to_square)
    if move.is_teleport:
        # debug bypass: no shape / path / destination rules at all
        if match.board.is_occupied(to_square):
            return MoveResult.VALID_CAPTURE_NORMAL
        return MoveResult.VALID_MOVE_NORMAL

    if destination_owner == piece.owner_id:
        return MoveResult.INVALID_MOVE_DESTINATION_BLOCKED

    shape_result = validate_shape(match, piece, move)
    if shape_result is not None:
        return shape_result

    if piece.type in SLIDING_PIECES and match.board.is_any_occupied(
        squares_between(from_square, to_square)
    ):
        return MoveResult.INVALID_MOVE_PATH_BLOCKED

    if piece.type == PieceType.KING and _is_next_to_enemy_king(match, piece, to_square):
        return MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE

    return classify_move(match, piece, move)


# -- SHAPE RULES --
def validate_shape(match: MatchView, piece: Piece, move: Move) -> Optional[MoveResult]:
    """None if the shape of the move is fine, otherwise the reason it is not."""
    d_file = move.to_square.file - move.from_square.file
    d_rank = move.to_square.rank - move.from_square.rank

    if piece.type == PieceType.PAWN:
        return _validate_pawn_move(match, piece, move)

    if piece.type == PieceType.KING and is_castling_shape(d_file, d_rank):
        return _validate_castle(match, piece, move)

    if not SHAPE_RULES[piece.type](d_file, d_rank):
        return MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE
    return None


def forward_direction(player_id: int) -> int:
    """player 0 moves up the board (increasing rank), player 1 moves down"""
    return 1 if player_id == 0 else -1


def home_rank(player_id: int) -> int:
    return 2 if player_id == 0 else BOARD_DIMENSIONS[1] - 1


def promotion_rank(player_id: int) -> int:
    return BOARD_DIMENSIONS[1] if player_id == 0 else 1


def _validate_pawn_move(match: MatchView, pawn: Piece, move: Move) -> Optional[MoveResult]:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - can move by two on its first move (from its home rank)
    - takes diagonally (or en passant)
    - must name what it promotes into when reaching the last rank
    """
    board = match.board
    forward = forward_direction(pawn.owner_id)
    d_file = move.to_square.file - move.from_square.file
    d_rank = (move.to_square.rank - move.from_square.rank) * forward
    destination_taken = board.is_occupied(move.to_square)

    if d_file == 0 and d_rank == 1:
        if destination_taken:
            return MoveResult.INVALID_MOVE_PATH_BLOCKED
    elif d_file == 0 and d_rank == 2:
        may_double_step = (
            move.from_square.rank == home_rank(pawn.owner_id) or not pawn.has_moved
        )
        if not may_double_step:
            return MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE
        if destination_taken:
            return MoveResult.INVALID_MOVE_PATH_BLOCKED
        skipped_square = move.from_square.offset(0, forward)
        if match.config.check_pawn_double_step_path and board.is_occupied(skipped_square):
            return MoveResult.INVALID_MOVE_PATH_BLOCKED
    elif abs(d_file) == 1 and d_rank == 1:
        if not destination_taken:
            en_passant_result = _validate_en_passant(match, pawn, move)
            if en_passant_result is not None:
                return en_passant_result
    else:
        return MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE

    if move.to_square.rank == promotion_rank(pawn.owner_id) and move.promote_to is None:
        return MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE
    return None


def en_passant_capture_square(move: Move) -> Square:
    """The pawn taken en passant stands beside the capturing pawn: destination file, source rank"""
    return Square(move.to_square.file, move.from_square.rank)


def _validate_en_passant(match: MatchView, pawn: Piece, move: Move) -> Optional[MoveResult]:
    """
    Diagonal pawn move onto an empty square. Only allowed as en passant:
    1. the previous move was a pawn double step
    2. that pawn now stands on (destination file, source rank)
    3. the destination is the square that pawn skipped over
    """
    captured_square = en_passant_capture_square(move)
    last_move = match.history[-1] if match.history else None

    if (
        last_move is not None
        and last_move.is_pawn_double_step()
        and last_move.to_square == captured_square
        and move.to_square.file == last_move.from_square.file
        and 2 * move.to_square.rank == last_move.from_square.rank + last_move.to_square.rank
    ):
        return None

    # an enemy pawn stands in the right spot, it just did not arrive there with the last move
    target = match.piece_at(captured_square)
    if (
        target is not None
        and target.type == PieceType.PAWN
        and target.owner_id != pawn.owner_id
    ):
        return MoveResult.INVALID_ENPASSANT_STALE
    return MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE


def _validate_castle(match: MatchView, king: Piece, move: Move) -> Optional[MoveResult]:
    """
    you are allowed to castle if
    ---
    * the king has never moved
    * the rook in the corner you castle towards is yours and has never moved
    * there is no piece in between the king and the rook

    NOTE: whether the king passes through an attacked square is not checked (no check detection in this engine)
    """
    if king.has_moved:
        return MoveResult.INVALID_CASTLE_KING_HAS_MOVED

    side = CastlingSide.from_king_move(move.from_square, move.to_square)
    squares = CastlingSquares.for_king(move.from_square, side)
    rook = match.piece_at(squares.rook_from)
    if (
        rook is None
        or rook.type != PieceType.ROOK
        or rook.owner_id != king.owner_id
        or rook.has_moved
    ):
        return MoveResult.INVALID_CASTLE_ROOK_HAS_MOVED

    if match.board.is_any_occupied(squares.path()):
        return MoveResult.INVALID_CASTLE_PATH_BLOCKED
    return None


def _is_next_to_enemy_king(match: MatchView, king: Piece, to_square: Square) -> bool:
    enemy_king_square = match.king_square(opponent_of(king.owner_id))
    if enemy_king_square is None:
        return False
    return to_square.is_adjacent_to(enemy_king_square)


# -- CLASSIFICATION --
def classify_move(match: MatchView, piece: Piece, move: Move) -> MoveResult:
    """Only called for moves already known to be legal"""
    d_file = move.to_square.file - move.from_square.file
    d_rank = move.to_square.rank - move.from_square.rank
    destination_taken = match.board.is_occupied(move.to_square)

    if piece.type == PieceType.PAWN:
        if move.to_square.rank == promotion_rank(piece.owner_id):
            return MoveResult.VALID_MOVE_PROMOTION
        if d_file != 0 and not destination_taken:
            return MoveResult.VALID_CAPTURE_ENPASSANT

    if piece.type == PieceType.KING and is_castling_shape(d_file, d_rank):
        if CastlingSide.from_king_move(move.from_square, move.to_square) == CastlingSide.KINGSIDE:
            return MoveResult.VALID_CASTLE_KINGSIDE
        return MoveResult.VALID_CASTLE_QUEENSIDE

    if destination_taken:
        return MoveResult.VALID_CAPTURE_NORMAL
    return MoveResult.VALID_MOVE_NORMAL
