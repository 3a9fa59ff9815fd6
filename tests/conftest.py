"""
Shared pytest fixtures for chainreaction tests.

Boards are built from sparse ``{(row, col): (count, owner)}`` maps on top of
an empty grid, so each test only spells out the cells it cares about.
Game-state fixtures are function-scoped to keep tests isolated.
"""

from pathlib import Path
import sys
from typing import Callable, Dict, Optional, Sequence, Tuple

import pytest

# Ensure the repository root is on sys.path so `import chainreaction` and
# `import scripts` work when pytest runs without an installed package.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from chainreaction.game_engine import create_grid  # noqa: E402
from chainreaction.game_session import GameSession  # noqa: E402
from chainreaction.models import (  # noqa: E402
    Board,
    Cell,
    Difficulty,
    GameState,
    PlayerType,
)

CellSpec = Dict[Tuple[int, int], Tuple[int, Optional[str]]]


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


def make_board(rows: int = 3, cols: int = 3, cells: Optional[CellSpec] = None) -> Board:
    """Empty ``rows x cols`` grid with ``cells`` filled in (validated)."""
    grid = create_grid(rows, cols)
    cells = cells or {}
    new_rows = []
    for row in grid.cells:
        new_row = []
        for cell in row:
            if cell.coord in cells:
                count, owner = cells[cell.coord]
                cell = Cell(
                    row=cell.row,
                    col=cell.col,
                    count=count,
                    owner=owner,
                    capacity=cell.capacity,
                )
            new_row.append(cell)
        new_rows.append(tuple(new_row))
    return Board(rows=rows, cols=cols, cells=tuple(new_rows))


@pytest.fixture
def board_factory() -> Callable[..., Board]:
    """Factory for boards with selected cells pre-filled."""
    return make_board


@pytest.fixture
def game_state_factory() -> Callable[..., GameState]:
    """Factory for game states with optional bot seats and a custom board."""

    def _create_game_state(
        num_players: int = 2,
        rows: int = 3,
        cols: int = 3,
        cells: Optional[CellSpec] = None,
        bots: Optional[Dict[int, Difficulty]] = None,
        turn_count: int = 0,
        current_player_index: int = 0,
        eliminated: Sequence[str] = (),
    ) -> GameState:
        state = GameSession.start_game(
            num_players, rows, cols, bots=bots, game_id="test-game"
        )
        players = [
            p.model_copy(update={"is_alive": False}) if p.id in eliminated else p
            for p in state.players
        ]
        return state.model_copy(
            update={
                "board": make_board(rows, cols, cells),
                "players": players,
                "turn_count": turn_count,
                "current_player_index": current_player_index,
            }
        )

    return _create_game_state


@pytest.fixture
def empty_board() -> Board:
    """Default-sized empty board."""
    return create_grid()


@pytest.fixture
def bot_only_state(game_state_factory) -> GameState:
    """Two MEDIUM bots on a 3x3 board."""
    state = game_state_factory(
        bots={0: Difficulty.MEDIUM, 1: Difficulty.MEDIUM},
    )
    assert all(p.type == PlayerType.BOT for p in state.players)
    return state
