"""Simulation engine tests: grid geometry, move application and wave resolution."""

from __future__ import annotations

import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from chainreaction.board_manager import BoardManager
from chainreaction.errors import (
    CellOutOfBoundsError,
    InvalidDimensionsError,
    InvalidStateError,
)
from chainreaction.game_engine import (
    apply_move,
    create_grid,
    get_valid_moves,
    is_valid_move,
    iter_cascade,
    resolve_cascade,
    resolve_wave,
)
from chainreaction.models import Board, Cell

from tests.conftest import make_board


def _brute_force_capacity(rows: int, cols: int, r: int, c: int) -> int:
    count = 0
    for nr in range(rows):
        for nc in range(cols):
            if abs(nr - r) + abs(nc - c) == 1:
                count += 1
    return count


@st.composite
def boards_with_waves(draw):
    """Random board (possibly unstable) plus its set of unstable cells."""
    rows = draw(st.integers(min_value=2, max_value=6))
    cols = draw(st.integers(min_value=2, max_value=6))
    cells = {}
    for r in range(rows):
        for c in range(cols):
            capacity = BoardManager.get_capacity(r, c, rows, cols)
            count = draw(st.integers(min_value=0, max_value=capacity + 1))
            if count:
                cells[(r, c)] = (count, draw(st.sampled_from(["p1", "p2", "p3"])))
    board = make_board(rows, cols, cells)
    return board, BoardManager.unstable_cells(board)


# =============================================================================
# Grid geometry
# =============================================================================


@pytest.mark.parametrize("rows", range(2, 11))
@pytest.mark.parametrize("cols", range(2, 11))
def test_capacity_matches_brute_force(rows: int, cols: int) -> None:
    board = create_grid(rows, cols)
    for cell in board.iter_cells():
        assert cell.capacity == _brute_force_capacity(rows, cols, cell.row, cell.col)
        assert cell.count == 0
        assert cell.owner is None
    total = sum(cell.capacity for cell in board.iter_cells())
    assert total == 2 * (2 * rows * cols - rows - cols)


def test_corner_edge_and_interior_capacities() -> None:
    board = create_grid(4, 5)
    assert board.cell(0, 0).capacity == 2
    assert board.cell(3, 4).capacity == 2
    assert board.cell(0, 2).capacity == 3
    assert board.cell(2, 0).capacity == 3
    assert board.cell(2, 2).capacity == 4


def test_default_grid_is_nine_by_six(empty_board: Board) -> None:
    assert (empty_board.rows, empty_board.cols) == (9, 6)
    assert len(empty_board.cells) == 9
    assert all(len(row) == 6 for row in empty_board.cells)


@pytest.mark.parametrize("rows,cols", [(1, 5), (5, 1), (0, 0), (-2, 3)])
def test_degenerate_dimensions_rejected(rows: int, cols: int) -> None:
    with pytest.raises(InvalidDimensionsError) as exc_info:
        create_grid(rows, cols)
    assert exc_info.value.code == "INVALID_DIMENSIONS"
    assert exc_info.value.context == {"rows": rows, "cols": cols}


def test_board_rejects_misplaced_cells() -> None:
    grid = create_grid(2, 2)
    swapped = (grid.cells[1], grid.cells[0])
    with pytest.raises(ValueError):
        Board(rows=2, cols=2, cells=swapped)


def test_from_dict_rejects_wrong_capacity() -> None:
    data = BoardManager.to_dict(create_grid(3, 3))
    data["cells"][0][0]["capacity"] = 9
    with pytest.raises(ValueError, match="capacity"):
        BoardManager.from_dict(data)


def test_from_dict_rejects_ownerless_orbs() -> None:
    data = BoardManager.to_dict(create_grid(3, 3))
    data["cells"][1][1].update(count=4, owner=None)
    with pytest.raises(ValueError, match="no owner"):
        BoardManager.from_dict(data)


def test_engine_boards_satisfy_validation(board_factory) -> None:
    board = board_factory(3, 3, {(0, 0): (1, "p1"), (0, 1): (2, "p2")})
    board = resolve_cascade(apply_move(board, 0, 0, "p1").board, {(0, 0)}).board
    restored = BoardManager.from_dict(BoardManager.to_dict(board))
    assert BoardManager.board_signature(restored) == BoardManager.board_signature(board)


# =============================================================================
# Move legality
# =============================================================================


@pytest.mark.parametrize("player", ["p1", "p2", "p7"])
def test_unowned_cell_is_valid_for_everyone(player: str) -> None:
    cell = Cell(row=0, col=0, count=0, owner=None, capacity=2)
    assert is_valid_move(cell, player)


def test_owned_cell_is_valid_only_for_owner() -> None:
    cell = Cell(row=1, col=1, count=2, owner="p1", capacity=4)
    assert is_valid_move(cell, "p1")
    assert not is_valid_move(cell, "p2")
    assert not is_valid_move(cell, "p3")


def test_get_valid_moves_in_grid_order(board_factory) -> None:
    board = board_factory(2, 3, {(0, 1): (1, "p2"), (1, 2): (1, "p1")})
    moves = [(m.row, m.col) for m in get_valid_moves(board, "p1")]
    assert moves == [(0, 0), (0, 2), (1, 0), (1, 1), (1, 2)]


# =============================================================================
# apply_move
# =============================================================================


def test_center_cell_explodes_on_fourth_orb() -> None:
    board = create_grid(3, 3)
    for _ in range(3):
        applied = apply_move(board, 1, 1, "p1")
        assert applied.wave == frozenset()
        board = applied.board
    assert board.cell(1, 1).count == 3

    applied = apply_move(board, 1, 1, "p1")
    assert applied.wave == frozenset({(1, 1)})

    resolved = resolve_wave(applied.board, applied.wave)
    after = resolved.board
    assert after.cell(1, 1).count == 0
    assert after.cell(1, 1).owner is None
    for r, c in [(0, 1), (2, 1), (1, 0), (1, 2)]:
        assert after.cell(r, c).count == 1
        assert after.cell(r, c).owner == "p1"
    assert resolved.next_wave == frozenset()
    assert BoardManager.total_orbs(after) == 4


def test_apply_move_takes_ownership_and_leaves_input_untouched(board_factory) -> None:
    board = board_factory(3, 3, {(0, 1): (1, "p2")})
    applied = apply_move(board, 0, 1, "p1")
    assert applied.board.cell(0, 1).count == 2
    assert applied.board.cell(0, 1).owner == "p1"
    assert board.cell(0, 1).count == 1
    assert board.cell(0, 1).owner == "p2"


def test_apply_move_shares_untouched_rows() -> None:
    board = create_grid(3, 3)
    applied = apply_move(board, 0, 0, "p1")
    assert applied.board.cells[0] is not board.cells[0]
    assert applied.board.cells[1] is board.cells[1]
    assert applied.board.cells[2] is board.cells[2]


@pytest.mark.parametrize("row,col", [(3, 0), (0, 3), (-1, 0), (0, -1)])
def test_apply_move_out_of_bounds(row: int, col: int) -> None:
    with pytest.raises(CellOutOfBoundsError) as exc_info:
        apply_move(create_grid(3, 3), row, col, "p1")
    assert exc_info.value.context == {"row": row, "col": col}


# =============================================================================
# resolve_wave
# =============================================================================


def test_empty_wave_returns_board_unchanged(board_factory) -> None:
    board = board_factory(3, 3, {(0, 0): (1, "p1"), (1, 1): (2, "p2")})
    resolved = resolve_wave(board, [])
    assert resolved.board is board
    assert resolved.next_wave == frozenset()


@given(boards_with_waves())
@settings(max_examples=100, deadline=None)
def test_orb_conservation(data) -> None:
    board, wave = data
    resolved = resolve_wave(board, wave)
    assert BoardManager.total_orbs(resolved.board) == BoardManager.total_orbs(board)


@given(boards_with_waves(), st.randoms(use_true_random=False))
@settings(max_examples=100, deadline=None)
def test_wave_order_independence(data, rnd: random.Random) -> None:
    board, wave = data
    ordered = sorted(wave)
    shuffled = list(ordered)
    rnd.shuffle(shuffled)
    first = resolve_wave(board, ordered)
    second = resolve_wave(board, reversed(shuffled))
    assert BoardManager.board_signature(first.board) == BoardManager.board_signature(second.board)
    assert first.next_wave == second.next_wave


@given(boards_with_waves())
@settings(max_examples=100, deadline=None)
def test_resolved_cells_keep_ownership_invariant(data) -> None:
    board, wave = data
    resolved = resolve_wave(board, wave).board
    for cell in resolved.iter_cells():
        if cell.count == 0:
            assert cell.owner is None
        else:
            assert cell.owner is not None
    # Every cell that was unstable went off, so whatever is unstable now
    # was touched by this wave.
    assert resolve_wave(board, wave).next_wave == BoardManager.unstable_cells(resolved)


def test_conflicting_captures_go_to_lowest_source(board_factory) -> None:
    board = board_factory(2, 3, {(0, 0): (2, "p2"), (0, 2): (2, "p1")})
    for order in ([(0, 0), (0, 2)], [(0, 2), (0, 0)]):
        after = resolve_wave(board, order).board
        assert after.cell(0, 1).count == 2
        assert after.cell(0, 1).owner == "p2"
        assert after.cell(1, 0).owner == "p2"
        assert after.cell(1, 2).owner == "p1"
        assert after.cell(0, 0).owner is None
        assert after.cell(0, 2).owner is None


def test_exploding_cell_that_receives_orbs_changes_hands(board_factory) -> None:
    board = board_factory(2, 2, {(0, 0): (2, "p1"), (0, 1): (2, "p2")})
    resolved = resolve_wave(board, {(0, 0), (0, 1)})
    after = resolved.board
    assert (after.cell(0, 0).count, after.cell(0, 0).owner) == (1, "p2")
    assert (after.cell(0, 1).count, after.cell(0, 1).owner) == (1, "p1")
    assert (after.cell(1, 0).count, after.cell(1, 0).owner) == (1, "p1")
    assert (after.cell(1, 1).count, after.cell(1, 1).owner) == (1, "p2")
    assert resolved.next_wave == frozenset()


def test_wave_member_below_capacity_is_rejected(board_factory) -> None:
    board = board_factory(3, 3, {(1, 1): (2, "p1")})
    with pytest.raises(InvalidStateError):
        resolve_wave(board, [(1, 1)])


def test_wave_out_of_bounds_is_rejected() -> None:
    with pytest.raises(CellOutOfBoundsError):
        resolve_wave(create_grid(3, 3), [(5, 5)])


# =============================================================================
# Cascades
# =============================================================================


def test_two_wave_chain(board_factory) -> None:
    board = board_factory(2, 2, {(0, 0): (2, "p1"), (0, 1): (1, "p2")})
    steps = list(iter_cascade(board, {(0, 0)}))
    assert [s.next_wave for s in steps] == [frozenset({(0, 1)}), frozenset()]

    result = resolve_cascade(board, {(0, 0)})
    assert result.waves == 2
    assert not result.truncated
    final = result.board
    assert BoardManager.orbs_by_player(final) == {"p1": 3}
    assert final.cell(0, 1).owner is None
    assert BoardManager.board_signature(final) == BoardManager.board_signature(steps[-1].board)


def test_cascade_cap_truncates(board_factory) -> None:
    board = board_factory(2, 2, {(0, 0): (2, "p1"), (0, 1): (1, "p2")})
    result = resolve_cascade(board, {(0, 0)}, max_waves=1)
    assert result.waves == 1
    assert result.truncated
    assert result.board.cell(0, 1).count == 2


def test_saturated_board_never_settles(board_factory) -> None:
    cells = {(r, c): (2, "p1") for r in range(2) for c in range(2)}
    board = board_factory(2, 2, cells)
    result = resolve_cascade(board, BoardManager.unstable_cells(board), max_waves=5)
    assert result.truncated
    assert result.waves == 5
    assert BoardManager.total_orbs(result.board) == 8


def test_signature_round_trips_through_dict(board_factory) -> None:
    board = board_factory(3, 4, {(0, 0): (1, "p1"), (2, 3): (1, "p2")})
    restored = BoardManager.from_dict(BoardManager.to_dict(board))
    assert BoardManager.board_signature(restored) == BoardManager.board_signature(board)
