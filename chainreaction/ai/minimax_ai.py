"""Minimax AI implementation for Chain Reaction.

This agent uses depth‑limited minimax with alpha‑beta pruning over fully
simulated cascades. It backs the ``MEDIUM`` (depth 2) and ``HARD``
(depth 3) difficulties.

Search outline:

1. Enumerate legal moves for the AI in grid order.
2. Simulate each one ply; the first immediately winning move is returned
   without further search.
3. Otherwise search every candidate from the minimizing side at
   ``depth - 1`` and keep the maximum, ties going to the first found.

Two-player only: the opponent is "the other player". Games with several
opponents go through :class:`~chainreaction.ai.maxn_ai.MaxNAI` instead.

``config.think_time`` (when set) bounds the wall‑clock time of the
top‑level loop. Once exceeded, the best candidate scored so far is
returned; the first candidate is always scored.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Optional

from ..board_manager import BoardManager
from ..config import DIFFICULTY_DEPTHS, EVAL_WORKERS, MAX_CASCADE_WAVES
from ..errors import UnsupportedPlayerCountError
from ..game_engine import is_valid_move
from ..metrics import SEARCH_NODES_TOTAL
from ..models import AIConfig, Board, Difficulty, Move, PlayerId
from .base import BaseAI
from .evaluation import evaluate, is_decided
from .heuristic_weights import LOSS_SCORE, WIN_SCORE
from .parallel_eval import evaluate_candidates, should_parallelize
from .simulation import simulate_move

logger = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """Counters collected while searching."""
    nodes: int = 0


def default_opponent(player_id: PlayerId) -> PlayerId:
    """Conventional two-seat counterpart: ``p1`` plays ``p2`` and vice versa."""
    return "p2" if player_id == "p1" else "p1"


def infer_opponent(board: Board, player_id: PlayerId) -> PlayerId:
    """Derive "the other player" from the owners visible on ``board``.

    Raises:
        UnsupportedPlayerCountError: more than one opponent owns cells.
    """
    opponents = sorted(BoardManager.owners(board) - {player_id})
    if len(opponents) > 1:
        raise UnsupportedPlayerCountError(
            "Minimax supports exactly one opponent",
            opponents=opponents,
        )
    if opponents:
        return opponents[0]
    return default_opponent(player_id)


def get_search_depth(config: AIConfig) -> int:
    """Search depth for ``config``: explicit override, else the difficulty ladder."""
    if config.search_depth is not None:
        return config.search_depth
    if config.difficulty == Difficulty.EASY:
        # EASY never searches through the factory; a directly built
        # searcher gets the shallowest meaningful lookahead.
        return 1
    return DIFFICULTY_DEPTHS[config.difficulty.value]


def search(
    board: Board,
    depth: int,
    maximizing: bool,
    player_id: PlayerId,
    opponent_id: PlayerId,
    alpha: float,
    beta: float,
    *,
    max_waves: int = MAX_CASCADE_WAVES,
    stats: Optional[SearchStats] = None,
) -> float:
    """Minimax with alpha-beta pruning, scored for ``player_id``.

    Decided positions return their score pulled toward zero by the
    remaining depth, so that faster wins and slower losses are preferred.
    A mover with no legal move loses (from the maximizer's viewpoint when
    the maximizer is stuck, and vice versa).
    """
    if stats is not None:
        stats.nodes += 1

    current_score = evaluate(board, player_id)
    if is_decided(current_score):
        return current_score - depth if current_score > 0 else current_score + depth

    if depth == 0:
        return current_score

    mover = player_id if maximizing else opponent_id
    available = [cell for cell in board.iter_cells() if is_valid_move(cell, mover)]

    if not available:
        return LOSS_SCORE if maximizing else WIN_SCORE

    if maximizing:
        max_eval = float("-inf")
        for cell in available:
            next_board = simulate_move(
                board, cell.row, cell.col, mover, max_waves
            ).board
            score = search(
                next_board, depth - 1, False, player_id, opponent_id,
                alpha, beta, max_waves=max_waves, stats=stats,
            )
            max_eval = max(max_eval, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return max_eval

    min_eval = float("inf")
    for cell in available:
        next_board = simulate_move(
            board, cell.row, cell.col, mover, max_waves
        ).board
        score = search(
            next_board, depth - 1, True, player_id, opponent_id,
            alpha, beta, max_waves=max_waves, stats=stats,
        )
        min_eval = min(min_eval, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return min_eval


class MinimaxAI(BaseAI):
    """AI that uses minimax with alpha‑beta pruning.

    Difficulty and depth:
        ``config.search_depth`` wins when set; otherwise the depth comes
        from :data:`chainreaction.config.DIFFICULTY_DEPTHS` (MEDIUM → 2,
        HARD → 3).
    """

    def __init__(
        self,
        player_id: PlayerId,
        config: AIConfig,
        rng: Optional[random.Random] = None,
        opponent_id: Optional[PlayerId] = None,
    ) -> None:
        super().__init__(player_id, config, rng)
        self.opponent_id = opponent_id
        self.max_waves: int = config.max_cascade_waves or MAX_CASCADE_WAVES
        self.num_workers: int = config.num_workers or EVAL_WORKERS
        self.depth: int = self._get_max_depth()
        # Wall‑clock and node bookkeeping for the last select_move call.
        self.start_time: float = 0.0
        self.time_limit: Optional[float] = None
        self.nodes_visited: int = 0
        self.last_score: Optional[float] = None

    def _get_max_depth(self) -> int:
        """Get maximum search depth based on difficulty setting."""
        return get_search_depth(self.config)

    def _time_exceeded(self) -> bool:
        if self.time_limit is None:
            return False
        return time.time() - self.start_time > self.time_limit

    def select_move(self, board: Board) -> Optional[Move]:
        """Select the best move using minimax search.

        Args:
            board: Current board.

        Returns:
            The selected :class:`Move`, or ``None`` if there are no legal
            moves for this player.
        """
        valid_moves = self.get_valid_moves(board)
        if not valid_moves:
            return None

        opponent_id = self.opponent_id or infer_opponent(board, self.player_id)

        self.start_time = time.time()
        self.time_limit = (
            self.config.think_time / 1000.0
            if self.config.think_time is not None and self.config.think_time > 0
            else None
        )
        self.nodes_visited = 0

        # One-ply pass: take any immediate win straight away.
        next_boards = []
        for move in valid_moves:
            result = simulate_move(
                board, move.row, move.col, self.player_id, self.max_waves
            )
            if result.is_win:
                logger.debug(
                    "%r: immediate win at (%d, %d)", self, move.row, move.col
                )
                self.last_score = WIN_SCORE
                self.move_count += 1
                return move
            next_boards.append(result.board)

        if self.time_limit is None and should_parallelize(
            len(valid_moves), self.num_workers
        ):
            best_move, best_score = self._select_parallel(
                valid_moves, next_boards, opponent_id
            )
        else:
            best_move, best_score = self._select_sequential(
                valid_moves, next_boards, opponent_id
            )

        SEARCH_NODES_TOTAL.labels(
            difficulty=self.config.difficulty.value
        ).inc(self.nodes_visited)
        logger.debug(
            "%r chose (%d, %d) score=%.1f depth=%d nodes=%d",
            self,
            best_move.row,
            best_move.col,
            best_score,
            self.depth,
            self.nodes_visited,
        )
        self.last_score = best_score
        self.move_count += 1
        return best_move

    def _select_sequential(
        self,
        valid_moves: list[Move],
        next_boards: list[Board],
        opponent_id: PlayerId,
    ) -> tuple[Move, float]:
        best_move = valid_moves[0]
        best_score = float("-inf")
        stats = SearchStats()

        for index, (move, next_board) in enumerate(zip(valid_moves, next_boards)):
            if index > 0 and self._time_exceeded():
                logger.info(
                    "%r: think time of %sms exhausted after %d/%d candidates",
                    self,
                    self.config.think_time,
                    index,
                    len(valid_moves),
                )
                break
            score = search(
                next_board,
                self.depth - 1,
                False,
                self.player_id,
                opponent_id,
                float("-inf"),
                float("inf"),
                max_waves=self.max_waves,
                stats=stats,
            )
            if score > best_score:
                best_score = score
                best_move = move

        self.nodes_visited += stats.nodes
        return best_move, best_score

    def _select_parallel(
        self,
        valid_moves: list[Move],
        next_boards: list[Board],
        opponent_id: PlayerId,
    ) -> tuple[Move, float]:
        results = evaluate_candidates(
            next_boards,
            self.player_id,
            opponent_id,
            self.depth - 1,
            max_waves=self.max_waves,
            num_workers=self.num_workers,
        )
        best_move = valid_moves[0]
        best_score = float("-inf")
        for move, (score, nodes) in zip(valid_moves, results):
            self.nodes_visited += nodes
            if score > best_score:
                best_score = score
                best_move = move
        return best_move, best_score
