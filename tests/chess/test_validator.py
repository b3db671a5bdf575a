"""Unit tests for /src/chess/validator.py"""

from typing import Callable, Optional

import pytest

from src.chess.match import Match
from src.chess.moves import MoveResult
from src.chess.square import INVALID_SQUARE, Square
from src.chess.validator import validate_move
from src.core.config import MatchConfig

MatchFactory = Callable[..., Match]

KINGS = {"a1": "K", "h8": "k"}


def check(
    match: Match,
    from_square: str,
    to_square: str,
    promotion: Optional[str] = None,
    is_teleport: bool = False,
) -> MoveResult:
    return validate_move(
        match,
        Square.from_algebraic(from_square),
        Square.from_algebraic(to_square),
        promotion,
        is_teleport,
    )


# --- PIPELINE ---
@pytest.mark.parametrize(
    "from_square, to_square",
    [
        (INVALID_SQUARE, Square(5, 4)),
        (Square(5, 2), INVALID_SQUARE),
        (Square(0, 1), Square(1, 1)),
        (Square(9, 2), Square(5, 4)),
        (Square(5, 2), Square(5, 9)),
        (Square(5, 0), Square(5, 0)),
        (Square(-3, 12), Square(4, 4)),
    ],
)
def test_off_board_squares(standard_match: Match, from_square: Square, to_square: Square) -> None:
    """Whatever stands on the board, squares off the board are a bad location"""
    assert validate_move(standard_match, from_square, to_square) == MoveResult.INVALID_MOVE_BAD_LOCATION


def test_no_moves_after_game_over(standard_match: Match) -> None:
    standard_match.turns.finish(winner_id=0)
    assert check(standard_match, "e2", "e4") == MoveResult.INVALID_MOVE_GAME_OVER
    # bounds are checked first
    assert (
        validate_move(standard_match, INVALID_SQUARE, Square(5, 4))
        == MoveResult.INVALID_MOVE_BAD_LOCATION
    )


@pytest.mark.parametrize(
    "from_square, to_square, expected",
    [
        ("e4", "e5", MoveResult.INVALID_MOVE_NO_PIECE),
        ("e7", "e5", MoveResult.INVALID_MOVE_NOT_YOUR_PIECE),
        ("e2", "e2", MoveResult.INVALID_MOVE_ZERO_DISTANCE),
        ("a1", "a2", MoveResult.INVALID_MOVE_DESTINATION_BLOCKED),
        ("a1", "a3", MoveResult.INVALID_MOVE_PATH_BLOCKED),
        ("c1", "e3", MoveResult.INVALID_MOVE_PATH_BLOCKED),
        ("d1", "d4", MoveResult.INVALID_MOVE_PATH_BLOCKED),
        ("g1", "f3", MoveResult.VALID_MOVE_NORMAL),
        ("b1", "c3", MoveResult.VALID_MOVE_NORMAL),
        ("g1", "g3", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ("e2", "e3", MoveResult.VALID_MOVE_NORMAL),
        ("e2", "e4", MoveResult.VALID_MOVE_NORMAL),
        ("e2", "e5", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ("e2", "d3", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
    ],
)
def test_starting_position(
    standard_match: Match, from_square: str, to_square: str, expected: MoveResult
) -> None:
    assert check(standard_match, from_square, to_square) == expected


@pytest.mark.parametrize(
    "to_square, expected",
    [
        ("e6", MoveResult.VALID_MOVE_NORMAL),
        ("e7", MoveResult.VALID_CAPTURE_NORMAL),
        ("d1", MoveResult.VALID_CAPTURE_NORMAL),
    ],
)
def test_teleport_skips_the_rules(
    standard_match: Match, to_square: str, expected: MoveResult
) -> None:
    """Teleport (cheat) moves go anywhere, even onto your own pieces"""
    assert check(standard_match, "e2", to_square, is_teleport=True) == expected


def test_teleport_still_needs_your_own_piece(standard_match: Match) -> None:
    assert check(standard_match, "e7", "e5", is_teleport=True) == MoveResult.INVALID_MOVE_NOT_YOUR_PIECE


# --- PAWNS ---
@pytest.mark.parametrize(
    "layout, from_square, to_square, expected",
    [
        ({"e2": "P", "e3": "p"}, "e2", "e3", MoveResult.INVALID_MOVE_PATH_BLOCKED),
        ({"e2": "P", "e4": "p"}, "e2", "e4", MoveResult.INVALID_MOVE_PATH_BLOCKED),
        ({"e4": "P"}, "e4", "e3", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ({"e4": "P"}, "e4", "f4", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ({"e4": "P", "d5": "p"}, "e4", "d5", MoveResult.VALID_CAPTURE_NORMAL),
        ({"e4": "P", "f5": "P"}, "e4", "f5", MoveResult.INVALID_MOVE_DESTINATION_BLOCKED),
        # never moved: a pawn set up outside its home rank may still double step
        ({"e3": "P"}, "e3", "e5", MoveResult.VALID_MOVE_NORMAL),
    ],
)
def test_pawn_moves(
    match_from_layout: MatchFactory,
    layout: dict[str, str],
    from_square: str,
    to_square: str,
    expected: MoveResult,
) -> None:
    match = match_from_layout(layout | KINGS)
    assert check(match, from_square, to_square) == expected


def test_pawn_that_moved_cannot_double_step(match_from_layout: MatchFactory) -> None:
    match = match_from_layout({"e3": "P"} | KINGS)
    match.piece_at(Square.from_algebraic("e3")).has_moved = True
    assert check(match, "e3", "e5") == MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE


def test_double_step_jumps_over_pieces_by_default(match_from_layout: MatchFactory) -> None:
    match = match_from_layout({"e2": "P", "e3": "n"} | KINGS)
    assert check(match, "e2", "e4") == MoveResult.VALID_MOVE_NORMAL


def test_double_step_path_check_can_be_enabled(match_from_layout: MatchFactory) -> None:
    config = MatchConfig(check_pawn_double_step_path=True)
    match = match_from_layout({"e2": "P", "e3": "n"} | KINGS, config=config)
    assert check(match, "e2", "e4") == MoveResult.INVALID_MOVE_PATH_BLOCKED


@pytest.mark.parametrize(
    "from_square, to_square, expected",
    [
        ("e7", "e5", MoveResult.VALID_MOVE_NORMAL),
        ("e7", "e6", MoveResult.VALID_MOVE_NORMAL),
        ("e7", "e8", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ("e7", "d6", MoveResult.VALID_CAPTURE_NORMAL),
    ],
)
def test_player_two_pawns_move_down(
    match_from_layout: MatchFactory, from_square: str, to_square: str, expected: MoveResult
) -> None:
    match = match_from_layout({"e7": "p", "d6": "N"} | KINGS, first_player_id=1)
    assert check(match, from_square, to_square) == expected


# --- PROMOTION ---
@pytest.mark.parametrize(
    "from_square, to_square, promotion, expected",
    [
        ("e7", "e8", "queen", MoveResult.VALID_MOVE_PROMOTION),
        ("e7", "e8", "Knight", MoveResult.VALID_MOVE_PROMOTION),
        ("e7", "d8", "rook", MoveResult.VALID_MOVE_PROMOTION),
        ("e7", "e8", None, MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ("e7", "e8", "king", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ("e7", "d8", None, MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
    ],
)
def test_promotion(
    match_from_layout: MatchFactory,
    from_square: str,
    to_square: str,
    promotion: Optional[str],
    expected: MoveResult,
) -> None:
    match = match_from_layout({"e7": "P", "d8": "r"} | KINGS)
    assert check(match, from_square, to_square, promotion) == expected


# --- EN PASSANT ---
def test_en_passant_right_after_double_step(match_from_layout: MatchFactory) -> None:
    match = match_from_layout({"e5": "P", "f7": "p"} | KINGS, first_player_id=1)
    assert match.execute_move(Square.from_algebraic("f7"), Square.from_algebraic("f5"))
    assert check(match, "e5", "f6") == MoveResult.VALID_CAPTURE_ENPASSANT
    # only towards the pawn that just moved
    assert check(match, "e5", "d6") == MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE


def test_en_passant_is_stale_one_move_later(match_from_layout: MatchFactory) -> None:
    match = match_from_layout({"e5": "P", "f7": "p"} | KINGS, first_player_id=1)
    for from_square, to_square in [("f7", "f5"), ("a1", "b1"), ("h8", "g8")]:
        assert match.execute_move(
            Square.from_algebraic(from_square), Square.from_algebraic(to_square)
        )
    assert check(match, "e5", "f6") == MoveResult.INVALID_ENPASSANT_STALE


def test_en_passant_needs_a_double_step(match_from_layout: MatchFactory) -> None:
    """The pawn beside is in the right spot, but it got there with a single step"""
    match = match_from_layout({"e5": "P", "f6": "p"} | KINGS, first_player_id=1)
    assert match.execute_move(Square.from_algebraic("f6"), Square.from_algebraic("f5"))
    assert check(match, "e5", "f6") == MoveResult.INVALID_ENPASSANT_STALE


# --- CASTLING ---
CASTLING_LAYOUT = {"e1": "K", "a1": "R", "h1": "R", "e8": "k", "a8": "r", "h8": "r"}


@pytest.mark.parametrize(
    "from_square, to_square, expected",
    [
        ("e1", "g1", MoveResult.VALID_CASTLE_KINGSIDE),
        ("e1", "c1", MoveResult.VALID_CASTLE_QUEENSIDE),
    ],
)
def test_castling(
    match_from_layout: MatchFactory, from_square: str, to_square: str, expected: MoveResult
) -> None:
    match = match_from_layout(CASTLING_LAYOUT)
    assert check(match, from_square, to_square) == expected


@pytest.mark.parametrize(
    "extra_piece, to_square",
    [
        ({"f1": "B"}, "g1"),
        ({"g1": "n"}, "g1"),
        ({"b1": "N"}, "c1"),
        ({"d1": "Q"}, "c1"),
    ],
)
def test_castling_path_blocked(
    match_from_layout: MatchFactory, extra_piece: dict[str, str], to_square: str
) -> None:
    match = match_from_layout(CASTLING_LAYOUT | extra_piece)
    assert check(match, "e1", to_square) == MoveResult.INVALID_CASTLE_PATH_BLOCKED


@pytest.mark.parametrize(
    "layout",
    [
        {"e1": "K", "e8": "k"},
        {"e1": "K", "h1": "N", "e8": "k"},
        {"e1": "K", "h1": "r", "e8": "k"},
    ],
)
def test_castling_without_own_rook(match_from_layout: MatchFactory, layout: dict[str, str]) -> None:
    match = match_from_layout(layout)
    assert check(match, "e1", "g1") == MoveResult.INVALID_CASTLE_ROOK_HAS_MOVED


@pytest.mark.parametrize(
    "moves, expected",
    [
        (
            [("e1", "f1"), ("e8", "d8"), ("f1", "e1"), ("d8", "e8")],
            MoveResult.INVALID_CASTLE_KING_HAS_MOVED,
        ),
        (
            [("h1", "h2"), ("e8", "d8"), ("h2", "h1"), ("d8", "e8")],
            MoveResult.INVALID_CASTLE_ROOK_HAS_MOVED,
        ),
    ],
)
def test_castling_after_moving_back(
    match_from_layout: MatchFactory, moves: list[tuple[str, str]], expected: MoveResult
) -> None:
    """Going back to the starting square does not restore the right to castle"""
    match = match_from_layout(CASTLING_LAYOUT)
    for from_square, to_square in moves:
        assert match.execute_move(
            Square.from_algebraic(from_square), Square.from_algebraic(to_square)
        )
    assert check(match, "e1", "g1") == expected
    # the other side is still fine
    if expected == MoveResult.INVALID_CASTLE_ROOK_HAS_MOVED:
        assert check(match, "e1", "c1") == MoveResult.VALID_CASTLE_QUEENSIDE


# --- KINGS ---
@pytest.mark.parametrize(
    "to_square, expected",
    [
        ("e5", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ("d5", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ("f5", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
        ("d4", MoveResult.VALID_MOVE_NORMAL),
        ("e3", MoveResult.VALID_MOVE_NORMAL),
        ("e6", MoveResult.INVALID_MOVE_WRONG_MOVE_SHAPE),
    ],
)
def test_kings_never_stand_side_by_side(
    match_from_layout: MatchFactory, to_square: str, expected: MoveResult
) -> None:
    match = match_from_layout({"e4": "K", "e6": "k"})
    assert check(match, "e4", to_square) == expected


def test_king_may_take_the_enemy_king(match_from_layout: MatchFactory) -> None:
    match = match_from_layout({"e4": "K", "e5": "k"})
    assert check(match, "e4", "e5") == MoveResult.VALID_CAPTURE_NORMAL
