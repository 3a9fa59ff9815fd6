"""
Parallel top-level move evaluation using multiprocessing.

Each candidate move's subtree is independent, so the root of the minimax
search is embarrassingly parallel. Every candidate is searched to
completion and scores come back in candidate order, which lets the caller
apply the same max / first-found tie rule as the sequential loop: the
selected move never depends on worker scheduling.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Sequence, Tuple

from ..config import EVAL_WORKERS, MAX_CASCADE_WAVES, PARALLEL_THRESHOLD
from ..models import Board, PlayerId

logger = logging.getLogger(__name__)

# Global process pool (lazy initialized)
_process_pool: Optional[ProcessPoolExecutor] = None
_pool_workers: int = 0


def get_process_pool(num_workers: int = EVAL_WORKERS) -> ProcessPoolExecutor:
    """Get or create the global process pool."""
    global _process_pool, _pool_workers
    if _process_pool is not None and _pool_workers != num_workers:
        shutdown_pool()
    if _process_pool is None:
        _process_pool = ProcessPoolExecutor(max_workers=num_workers)
        _pool_workers = num_workers
        logger.debug("Started evaluation pool with %d workers", num_workers)
    return _process_pool


def shutdown_pool() -> None:
    """Shutdown the global process pool."""
    global _process_pool, _pool_workers
    if _process_pool is not None:
        _process_pool.shutdown(wait=False)
        _process_pool = None
        _pool_workers = 0


def should_parallelize(num_candidates: int, num_workers: int) -> bool:
    return num_workers > 1 and num_candidates >= PARALLEL_THRESHOLD


def evaluate_candidates(
    boards: Sequence[Board],
    player_id: PlayerId,
    opponent_id: PlayerId,
    depth: int,
    max_waves: int = MAX_CASCADE_WAVES,
    num_workers: int = EVAL_WORKERS,
) -> List[Tuple[float, int]]:
    """Score each post-move board from the minimizing side.

    Args:
        boards: Boards reached by each candidate move, in candidate order.
        player_id: The searching (maximizing) player.
        opponent_id: The player to move next on every board.
        depth: Remaining search depth below the candidate move.
        max_waves: Cascade cap for hypothetical moves.
        num_workers: Worker processes; 1 evaluates in-process.

    Returns:
        ``(score, nodes_visited)`` per board, in the order given.
    """
    args = [
        (board, player_id, opponent_id, depth, max_waves) for board in boards
    ]

    if not should_parallelize(len(args), num_workers):
        return [_evaluate_candidate(a) for a in args]

    pool = get_process_pool(num_workers)
    chunksize = max(1, len(args) // (num_workers * 4))
    # map() preserves input order regardless of completion order.
    return list(pool.map(_evaluate_candidate, args, chunksize=chunksize))


def _evaluate_candidate(
    args: Tuple[Board, PlayerId, PlayerId, int, int],
) -> Tuple[float, int]:
    """Search one candidate subtree (runs in a worker process).

    Module-level so it pickles cleanly into worker processes.
    """
    # Import here to avoid circular imports in worker processes
    from .minimax_ai import SearchStats, search

    board, player_id, opponent_id, depth, max_waves = args
    stats = SearchStats()
    score = search(
        board,
        depth,
        False,
        player_id,
        opponent_id,
        float("-inf"),
        float("inf"),
        max_waves=max_waves,
        stats=stats,
    )
    return score, stats.nodes
