"""Static position evaluation for Chain Reaction.

A heuristic, not a search: material (orbs), territory (owned cells) and
cells one orb from exploding, from ``player_id``'s point of view. Every
owner other than ``player_id`` counts as an opponent, so the material part
works for any number of players; the win/loss short-circuit is decided
against all opponents together.
"""

from __future__ import annotations

from ..models import Board, PlayerId
from .heuristic_weights import (
    CELL_WEIGHT,
    CRITICAL_BONUS,
    LOSS_SCORE,
    ORB_WEIGHT,
    TERMINAL_MARGIN,
    THREAT_PENALTY,
    WIN_SCORE,
)


def evaluate(board: Board, player_id: PlayerId) -> float:
    """Score ``board`` for ``player_id``.

    Returns :data:`WIN_SCORE` when the player has orbs and no opponent does,
    :data:`LOSS_SCORE` for the reverse, otherwise the heuristic sum.
    """
    score = 0.0
    my_orbs = 0
    enemy_orbs = 0

    for row in board.cells:
        for cell in row:
            owner = cell.owner
            if owner is None:
                continue
            if owner == player_id:
                my_orbs += cell.count
                score += cell.count * ORB_WEIGHT + CELL_WEIGHT
                if cell.count == cell.capacity - 1:
                    score += CRITICAL_BONUS
            else:
                enemy_orbs += cell.count
                score -= cell.count * ORB_WEIGHT
                if cell.count == cell.capacity - 1:
                    score -= THREAT_PENALTY

    if my_orbs == 0 and enemy_orbs > 0:
        return LOSS_SCORE
    if enemy_orbs == 0 and my_orbs > 0:
        return WIN_SCORE
    return score


def evaluation_breakdown(board: Board, player_id: PlayerId) -> dict[str, float]:
    """Per-component view of :func:`evaluate` for diagnostics and the API."""
    my_orbs = 0
    enemy_orbs = 0
    my_cells = 0
    my_critical = 0
    enemy_critical = 0
    for cell in board.iter_cells():
        if cell.owner is None:
            continue
        if cell.owner == player_id:
            my_orbs += cell.count
            my_cells += 1
            my_critical += cell.is_critical
        else:
            enemy_orbs += cell.count
            enemy_critical += cell.is_critical

    return {
        "total": evaluate(board, player_id),
        "orbs": (my_orbs - enemy_orbs) * ORB_WEIGHT,
        "cells": my_cells * CELL_WEIGHT,
        "critical_bonus": my_critical * CRITICAL_BONUS,
        "threat_penalty": -enemy_critical * THREAT_PENALTY,
    }


def is_decided(score: float) -> bool:
    """True when ``score`` marks a won or lost position."""
    return abs(score) >= abs(WIN_SCORE) - TERMINAL_MARGIN
