"""Hypothetical move simulation for the search AI.

Unlike the turn loop, the AI fast-forwards whole cascades without pacing,
and caps them at ``max_waves`` steps. A truncated cascade is evaluated at
the still-unstable snapshot: a deliberate accuracy/cost trade-off that
keeps pathological boards from stalling the search. Truncations are logged
at debug level and counted in ``chainreaction_cascade_truncations_total``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..board_manager import BoardManager
from ..config import MAX_CASCADE_WAVES
from ..game_engine import apply_move, resolve_cascade
from ..metrics import CASCADE_TRUNCATIONS_TOTAL
from ..models import Board, PlayerId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    board: Board
    is_win: bool
    is_eliminated: bool
    waves: int
    truncated: bool


def simulate_move(
    board: Board,
    row: int,
    col: int,
    player_id: PlayerId,
    max_waves: int = MAX_CASCADE_WAVES,
) -> SimulationResult:
    """Apply a move and resolve its cascade, at most ``max_waves`` waves deep.

    ``is_win`` means the mover holds orbs and nobody else does;
    ``is_eliminated`` is the reverse.
    """
    applied = apply_move(board, row, col, player_id)
    cascade = resolve_cascade(applied.board, applied.wave, max_waves)
    if cascade.truncated:
        CASCADE_TRUNCATIONS_TOTAL.inc()
        logger.debug(
            "Simulated move (%d, %d) for %s hit the %d-wave cap",
            row,
            col,
            player_id,
            max_waves,
        )

    my_orbs = 0
    enemy_orbs = 0
    for owner, orbs in BoardManager.orbs_by_player(cascade.board).items():
        if owner == player_id:
            my_orbs += orbs
        else:
            enemy_orbs += orbs

    return SimulationResult(
        board=cascade.board,
        is_win=enemy_orbs == 0 and my_orbs > 0,
        is_eliminated=my_orbs == 0 and enemy_orbs > 0,
        waves=cascade.waves,
        truncated=cascade.truncated,
    )
