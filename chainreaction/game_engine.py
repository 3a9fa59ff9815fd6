"""Core simulation engine for Chain Reaction.

Pure, deterministic grid-state transitions. Every function takes a
:class:`Board` and returns a new one; nothing is mutated in place, so
hypothetical futures explored by the AI never alias the live game.

A turn is one :func:`apply_move` followed by zero or more
:func:`resolve_wave` calls until the returned wave is empty. Resolution is
exposed step by step so that callers can pace cascade animation; the
engine itself holds no state and never sleeps.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Iterator

from .board_manager import BoardManager
from .config import DEFAULT_COLS, DEFAULT_ROWS
from .errors import InvalidDimensionsError, InvalidStateError
from .models import (
    EMPTY_WAVE,
    Board,
    Cell,
    Coord,
    Move,
    MoveApplied,
    PlayerId,
    Wave,
    WaveResolved,
)

logger = logging.getLogger(__name__)

__all__ = [
    "CascadeResult",
    "apply_move",
    "create_grid",
    "get_valid_moves",
    "is_valid_move",
    "iter_cascade",
    "resolve_cascade",
    "resolve_wave",
]


@dataclass(frozen=True)
class CascadeResult:
    """Outcome of fast-forwarding a cascade.

    ``truncated`` is True when ``max_waves`` was reached while cells were
    still unstable; ``board`` is then the intermediate snapshot.
    """
    board: Board
    waves: int
    truncated: bool = False


def create_grid(rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS) -> Board:
    """Build an empty rows x cols board with capacities from adjacency."""
    if rows < 2 or cols < 2:
        raise InvalidDimensionsError(
            "Grid needs at least 2 rows and 2 columns",
            rows=rows,
            cols=cols,
        )
    cells = tuple(
        tuple(
            Cell(
                row=r,
                col=c,
                count=0,
                owner=None,
                capacity=BoardManager.get_capacity(r, c, rows, cols),
            )
            for c in range(cols)
        )
        for r in range(rows)
    )
    return Board(rows=rows, cols=cols, cells=cells)


def is_valid_move(cell: Cell, player_id: PlayerId) -> bool:
    """A player may play into unclaimed cells and cells they already own."""
    if cell.owner is None:
        return True
    return cell.owner == player_id


def get_valid_moves(board: Board, player_id: PlayerId) -> list[Move]:
    """All legal moves for ``player_id`` in row-major order."""
    return [
        Move.model_construct(row=cell.row, col=cell.col)
        for cell in board.iter_cells()
        if is_valid_move(cell, player_id)
    ]


def apply_move(
    board: Board, row: int, col: int, player_id: PlayerId
) -> MoveApplied:
    """Place one orb for ``player_id`` at (row, col).

    Ownership legality is not checked here (see :func:`is_valid_move`);
    bounds are, and raise :class:`CellOutOfBoundsError`. The cascade is not
    resolved: the returned wave holds the target cell if it became unstable.
    """
    BoardManager.require_in_bounds(board, row, col)
    cell = board.cells[row][col]
    placed = Cell.model_construct(
        row=row,
        col=col,
        count=cell.count + 1,
        owner=player_id,
        capacity=cell.capacity,
    )
    row_cells = list(board.cells[row])
    row_cells[col] = placed
    new_board = Board.model_construct(
        rows=board.rows,
        cols=board.cols,
        cells=board.cells[:row] + (tuple(row_cells),) + board.cells[row + 1:],
    )
    wave = frozenset({(row, col)}) if placed.is_unstable else EMPTY_WAVE
    return MoveApplied.model_construct(board=new_board, wave=wave)


def resolve_wave(board: Board, wave: Iterable[Coord]) -> WaveResolved:
    """Explode every cell of ``wave`` simultaneously.

    All explosions read the pre-wave board. Count changes are accumulated
    per cell and committed together, so the result does not depend on the
    order in which wave members are visited:

    * an exploding cell loses ``capacity`` orbs; at 0 its owner is cleared;
    * each in-bounds neighbour gains one orb per incoming explosion and is
      captured by the exploding cell's owner. When explosions from
      different owners land on the same cell in one wave, the one from the
      lowest (row, col) source wins;
    * every touched cell at or above capacity joins the next wave.

    Orbs are conserved: the board total is the same before and after.
    """
    wave = frozenset(wave)
    if not wave:
        return WaveResolved.model_construct(board=board, next_wave=EMPTY_WAVE)

    rows, cols = board.rows, board.cols
    delta: dict[Coord, int] = defaultdict(int)
    # target -> (source coord, source owner)
    captures: dict[Coord, tuple[Coord, PlayerId | None]] = {}

    for coord in wave:
        r, c = coord
        BoardManager.require_in_bounds(board, r, c)
        cell = board.cells[r][c]
        if not cell.is_unstable:
            raise InvalidStateError(
                "Wave names a cell below capacity",
                context={
                    "row": r,
                    "col": c,
                    "count": cell.count,
                    "capacity": cell.capacity,
                },
            )
        delta[coord] -= cell.capacity
        for target in BoardManager.get_neighbors(rows, cols, r, c):
            delta[target] += 1
            previous = captures.get(target)
            if previous is None or coord < previous[0]:
                captures[target] = (coord, cell.owner)

    touched: dict[int, list[Cell]] = {}
    next_wave: set[Coord] = set()
    for (r, c), change in delta.items():
        row_cells = touched.get(r)
        if row_cells is None:
            row_cells = touched[r] = list(board.cells[r])
        old = row_cells[c]
        count = old.count + change
        if count == 0:
            owner = None
        elif (r, c) in captures:
            owner = captures[(r, c)][1]
        else:
            owner = old.owner
        row_cells[c] = Cell.model_construct(
            row=r, col=c, count=count, owner=owner, capacity=old.capacity
        )
        if count >= old.capacity:
            next_wave.add((r, c))

    new_rows = list(board.cells)
    for r, row_cells in touched.items():
        new_rows[r] = tuple(row_cells)
    new_board = Board.model_construct(rows=rows, cols=cols, cells=tuple(new_rows))
    return WaveResolved.model_construct(
        board=new_board, next_wave=frozenset(next_wave)
    )


def iter_cascade(
    board: Board, wave: Iterable[Coord], max_waves: int | None = None
) -> Iterator[WaveResolved]:
    """Yield one :class:`WaveResolved` per cascade step until stable.

    Intended for callers that animate each step. Stops early, with the
    last yielded ``next_wave`` still non-empty, once ``max_waves`` steps
    have been taken.
    """
    current: Wave = frozenset(wave)
    steps = 0
    while current and (max_waves is None or steps < max_waves):
        step = resolve_wave(board, current)
        board, current = step.board, step.next_wave
        steps += 1
        yield step


def resolve_cascade(
    board: Board, wave: Iterable[Coord], max_waves: int | None = None
) -> CascadeResult:
    """Fast-forward all waves. Unbounded unless ``max_waves`` is given."""
    steps = 0
    pending: Wave = frozenset(wave)
    for step in iter_cascade(board, pending, max_waves):
        board, pending = step.board, step.next_wave
        steps += 1
    truncated = bool(pending)
    if truncated:
        logger.debug(
            "Cascade truncated after %d waves with %d cells still unstable",
            steps,
            len(pending),
        )
    return CascadeResult(board=board, waves=steps, truncated=truncated)
