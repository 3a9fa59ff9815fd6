"""Max-N AI implementation for Chain Reaction.

Max-N is a multi-player extension of minimax that models each player as
self-interested (maximizing their own score) rather than paranoid (assuming
all opponents collude against us).

Algorithm:
- Each node returns a score vector (one score per player)
- At each node, the player to move picks the child that maximizes
  their component of the score vector
- Leaves are scored with :func:`~chainreaction.ai.evaluation.evaluate`
  once per player

Classic Max-N does not support alpha-beta pruning, so this agent is much
more expensive than :class:`MinimaxAI` at equal depth. It is used for games
with three or more live players, where the two-player "other player"
shortcut does not hold. Turn order must be supplied by the caller.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Sequence

from ..board_manager import BoardManager
from ..config import MAX_CASCADE_WAVES
from ..errors import InvalidTurnOrderError
from ..game_engine import is_valid_move
from ..models import AIConfig, Board, Move, PlayerId
from .base import BaseAI
from .evaluation import evaluate
from .minimax_ai import SearchStats, get_search_depth
from .simulation import simulate_move

logger = logging.getLogger(__name__)

ScoreVector = Dict[PlayerId, float]


class MaxNAI(BaseAI):
    """AI using Max-N search for multiplayer games."""

    def __init__(
        self,
        player_id: PlayerId,
        config: AIConfig,
        turn_order: Sequence[PlayerId],
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(player_id, config, rng)
        if player_id not in turn_order:
            raise InvalidTurnOrderError(
                f"{player_id} is not in the turn order", turn_order=list(turn_order)
            )
        self.turn_order: List[PlayerId] = list(turn_order)
        self.max_waves: int = config.max_cascade_waves or MAX_CASCADE_WAVES
        self.depth: int = get_search_depth(config)
        self.stats = SearchStats()
        # Players holding orbs at the root; losing them all knocks them out.
        self._seated: frozenset[PlayerId] = frozenset()

    def _next_index(self, index: int) -> int:
        return (index + 1) % len(self.turn_order)

    def _score_vector(self, board: Board) -> ScoreVector:
        return {p: evaluate(board, p) for p in self.turn_order}

    def _maxn(self, board: Board, depth: int, mover_index: int) -> ScoreVector:
        self.stats.nodes += 1
        if depth == 0:
            return self._score_vector(board)

        mover = self.turn_order[mover_index]
        if mover in self._seated and mover not in BoardManager.owners(board):
            return self._maxn(board, depth, self._next_index(mover_index))
        moves = [cell for cell in board.iter_cells() if is_valid_move(cell, mover)]
        if not moves:
            return self._score_vector(board)

        best: Optional[ScoreVector] = None
        for cell in moves:
            child = simulate_move(board, cell.row, cell.col, mover, self.max_waves)
            if child.is_win:
                # Sole survivor: nothing below can change the outcome.
                vector = self._score_vector(child.board)
            else:
                vector = self._maxn(
                    child.board, depth - 1, self._next_index(mover_index)
                )
            if best is None or vector[mover] > best[mover]:
                best = vector
        return best

    def select_move(self, board: Board) -> Optional[Move]:
        valid_moves = self.get_valid_moves(board)
        if not valid_moves:
            return None

        self.stats = SearchStats()
        self._seated = frozenset(BoardManager.owners(board))
        my_index = self.turn_order.index(self.player_id)
        best_move = valid_moves[0]
        best_score = float("-inf")

        for move in valid_moves:
            result = simulate_move(
                board, move.row, move.col, self.player_id, self.max_waves
            )
            if result.is_win:
                self.move_count += 1
                return move
            vector = self._maxn(
                result.board, self.depth - 1, self._next_index(my_index)
            )
            if vector[self.player_id] > best_score:
                best_score = vector[self.player_id]
                best_move = move

        logger.debug(
            "%r chose (%d, %d) score=%.1f nodes=%d",
            self,
            best_move.row,
            best_move.col,
            best_score,
            self.stats.nodes,
        )
        self.move_count += 1
        return best_move
