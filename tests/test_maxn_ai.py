"""Max-N search and the factory's routing to it."""

import pytest

from chainreaction.ai import maxn_ai
from chainreaction.ai.factory import (
    DIFFICULTY_PROFILES,
    AIFactory,
    choose_move,
    create_ai,
    get_difficulty_profile,
)
from chainreaction.ai.maxn_ai import MaxNAI
from chainreaction.ai.minimax_ai import MinimaxAI
from chainreaction.ai.random_ai import RandomAI
from chainreaction.ai.simulation import simulate_move
from chainreaction.board_manager import BoardManager
from chainreaction.errors import InvalidTurnOrderError
from chainreaction.game_engine import get_valid_moves
from chainreaction.models import AIConfig, AIType, Difficulty, Move

from tests.conftest import make_board

TURN_ORDER = ["p1", "p2", "p3"]


def test_profiles_cover_every_difficulty() -> None:
    assert set(DIFFICULTY_PROFILES) == set(Difficulty)
    assert get_difficulty_profile(Difficulty.EASY)["ai_type"] == AIType.RANDOM
    assert get_difficulty_profile("HARD")["ai_type"] == AIType.MINIMAX


def test_factory_routes_by_player_count() -> None:
    assert isinstance(create_ai("p1", Difficulty.MEDIUM), MinimaxAI)
    assert isinstance(
        create_ai("p1", Difficulty.MEDIUM, turn_order=["p1", "p2"]), MinimaxAI
    )
    assert isinstance(
        create_ai("p1", Difficulty.HARD, turn_order=TURN_ORDER), MaxNAI
    )
    assert isinstance(
        create_ai("p1", Difficulty.EASY, turn_order=TURN_ORDER), RandomAI
    )


def test_factory_config_difficulty_follows_argument() -> None:
    ai = create_ai("p1", Difficulty.HARD, config=AIConfig(difficulty=Difficulty.MEDIUM))
    assert ai.config.difficulty == Difficulty.HARD
    assert ai.depth == 3


def test_maxn_requires_turn_order() -> None:
    with pytest.raises(InvalidTurnOrderError):
        AIFactory.create(AIType.MAXN, "p1", AIConfig())
    with pytest.raises(InvalidTurnOrderError) as exc_info:
        MaxNAI("p4", AIConfig(), TURN_ORDER)
    assert exc_info.value.context == {"turn_order": TURN_ORDER}
    assert exc_info.value.code == "INVALID_TURN_ORDER"


def test_maxn_takes_immediate_double_knockout() -> None:
    # p1's centre is one orb from exploding into both opponents' only cells.
    board = make_board(
        3, 3, {(1, 1): (3, "p1"), (0, 1): (1, "p2"), (1, 0): (1, "p3")}
    )
    ai = MaxNAI("p1", AIConfig(difficulty=Difficulty.MEDIUM), TURN_ORDER)
    assert ai.select_move(board) == Move(row=1, col=1)


def test_maxn_returns_legal_move_in_three_player_game() -> None:
    board = make_board(
        3,
        3,
        {(0, 0): (1, "p1"), (2, 2): (1, "p2"), (0, 2): (1, "p3"), (2, 0): (1, "p3")},
    )
    ai = MaxNAI("p2", AIConfig(difficulty=Difficulty.MEDIUM), ["p2", "p3", "p1"])
    move = ai.select_move(board)
    assert move in get_valid_moves(board, "p2")
    assert ai.stats.nodes > 0
    assert ai.move_count == 1


def test_maxn_no_moves() -> None:
    cells = {(r, c): (1, "p2") for r in range(2) for c in range(2)}
    cells[(1, 1)] = (1, "p3")
    ai = MaxNAI("p1", AIConfig(), TURN_ORDER)
    assert ai.select_move(make_board(2, 2, cells)) is None


def test_choose_move_with_turn_order_uses_maxn() -> None:
    board = make_board(
        3, 3, {(0, 0): (1, "p1"), (1, 1): (1, "p2"), (2, 2): (1, "p3")}
    )
    move = choose_move(
        board,
        "p1",
        Difficulty.MEDIUM,
        turn_order=TURN_ORDER,
        config=AIConfig(searchDepth=1),
    )
    assert move in get_valid_moves(board, "p1")


def test_knocked_out_players_lose_their_turns(monkeypatch: pytest.MonkeyPatch) -> None:
    # p1 at (0, 0) explodes into p2's only cell; p3 survives elsewhere.
    board = make_board(
        3, 3, {(0, 0): (1, "p1"), (0, 1): (1, "p2"), (2, 2): (1, "p3")}
    )
    movers = []

    def recording_simulate(board, row, col, player_id, max_waves):
        movers.append((player_id, player_id in BoardManager.owners(board)))
        return simulate_move(board, row, col, player_id, max_waves)

    monkeypatch.setattr(maxn_ai, "simulate_move", recording_simulate)
    ai = MaxNAI("p1", AIConfig(difficulty=Difficulty.MEDIUM), TURN_ORDER)
    move = ai.select_move(board)

    assert move in get_valid_moves(board, "p1")
    assert ("p2", True) in movers
    assert ("p2", False) not in movers
    assert ("p3", True) in movers
