"""Board-level helpers for the Chain Reaction engine.

Geometry (bounds, neighbours, capacity), read-only summaries (orb totals,
ownership) and the structured encoding used to ship boards between hosts.
Nothing here mutates a Board.
"""
from __future__ import annotations

from collections import Counter
from typing import Any

from .errors import CellOutOfBoundsError
from .models import Board, Cell, Coord, PlayerId

__all__ = ["BoardManager", "DIRECTIONS"]

# Top, bottom, left, right. Neighbour iteration order is fixed.
DIRECTIONS: tuple[Coord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class BoardManager:
    """Stateless helpers over :class:`Board`."""

    @staticmethod
    def get_capacity(row: int, col: int, rows: int, cols: int) -> int:
        """Number of in-bounds orthogonal neighbours of (row, col)."""
        neighbors = 0
        if row > 0:
            neighbors += 1
        if row < rows - 1:
            neighbors += 1
        if col > 0:
            neighbors += 1
        if col < cols - 1:
            neighbors += 1
        return neighbors

    @staticmethod
    def is_in_bounds(board: Board, row: int, col: int) -> bool:
        return 0 <= row < board.rows and 0 <= col < board.cols

    @staticmethod
    def require_in_bounds(board: Board, row: int, col: int) -> None:
        if not BoardManager.is_in_bounds(board, row, col):
            raise CellOutOfBoundsError(
                f"({row}, {col}) is outside the {board.rows}x{board.cols} board",
                row=row,
                col=col,
            )

    @staticmethod
    def get_cell(board: Board, row: int, col: int) -> Cell:
        """Bounds-checked cell lookup."""
        BoardManager.require_in_bounds(board, row, col)
        return board.cells[row][col]

    @staticmethod
    def get_neighbors(rows: int, cols: int, row: int, col: int) -> list[Coord]:
        """In-bounds orthogonal neighbours in :data:`DIRECTIONS` order."""
        result = []
        for d_row, d_col in DIRECTIONS:
            n_row, n_col = row + d_row, col + d_col
            if 0 <= n_row < rows and 0 <= n_col < cols:
                result.append((n_row, n_col))
        return result

    @staticmethod
    def total_orbs(board: Board) -> int:
        return sum(cell.count for cell in board.iter_cells())

    @staticmethod
    def orbs_by_player(board: Board) -> dict[PlayerId, int]:
        """Orb totals keyed by owner. Unowned cells are skipped."""
        totals: Counter[PlayerId] = Counter()
        for cell in board.iter_cells():
            if cell.owner is not None:
                totals[cell.owner] += cell.count
        return dict(totals)

    @staticmethod
    def owners(board: Board) -> set[PlayerId]:
        """Players that currently own at least one cell."""
        return {
            cell.owner for cell in board.iter_cells() if cell.owner is not None
        }

    @staticmethod
    def unstable_cells(board: Board) -> frozenset[Coord]:
        return frozenset(
            cell.coord for cell in board.iter_cells() if cell.is_unstable
        )

    @staticmethod
    def board_signature(board: Board) -> tuple:
        """Compact hashable summary: (rows, cols, ((count, owner), ...))."""
        return (
            board.rows,
            board.cols,
            tuple((cell.count, cell.owner) for cell in board.iter_cells()),
        )

    @staticmethod
    def to_dict(board: Board) -> dict[str, Any]:
        """Stable JSON-friendly encoding for relaying boards verbatim."""
        return board.model_dump(mode="json")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Board:
        return Board.model_validate(data)

    @staticmethod
    def render_ascii(board: Board) -> str:
        """Debug rendering: ``.`` for empty, else ``<count><owner-suffix>``."""
        lines = []
        for row in board.cells:
            parts = []
            for cell in row:
                if cell.owner is None:
                    parts.append(" .  ")
                else:
                    parts.append(f"{cell.count}{cell.owner[-2:]:<3}")
            lines.append(" ".join(parts).rstrip())
        return "\n".join(lines)
