"""Random AI implementation for Chain Reaction.

This agent selects uniformly random legal moves using the per‑instance RNG on
the :class:`BaseAI`. It backs the ``EASY`` difficulty and doubles as a
baseline opponent for selfplay.
"""

from __future__ import annotations

from ..models import Board, Move
from .base import BaseAI


class RandomAI(BaseAI):
    """AI that selects random valid moves."""

    def select_move(self, board: Board) -> Move | None:
        """Select a random valid move on ``board``.

        Args:
            board: Current board.

        Returns:
            A random valid :class:`Move` or ``None`` if no legal moves exist.
        """
        valid_moves = self.get_valid_moves(board)

        if not valid_moves:
            return None

        selected = self.get_random_element(valid_moves)

        self.move_count += 1
        return selected
