"""Unified AI Factory for Chain Reaction.

Centralises how a difficulty turns into a concrete AI instance, and
provides :func:`choose_move`, the single entry point the turn loop and the
HTTP service use for bot turns.

Usage:
    from chainreaction.ai.factory import choose_move
    from chainreaction.models import Difficulty

    move = choose_move(board, "p2", Difficulty.HARD)
    if move is None:
        ...  # the bot has no legal move this turn
"""

from __future__ import annotations

import logging
import random
import time
from typing import Optional, Sequence, TypedDict

from ..errors import InvalidTurnOrderError
from ..models import AIConfig, AIType, Board, Difficulty, Move, PlayerId
from ..metrics import observe_ai_move
from .base import BaseAI

logger = logging.getLogger(__name__)


class DifficultyProfile(TypedDict):
    """How one difficulty level maps onto an AI implementation."""
    ai_type: AIType
    description: str


DIFFICULTY_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: {
        "ai_type": AIType.RANDOM,
        "description": "Uniformly random legal move, no lookahead",
    },
    Difficulty.MEDIUM: {
        "ai_type": AIType.MINIMAX,
        "description": "Alpha-beta minimax, 2 plies",
    },
    Difficulty.HARD: {
        "ai_type": AIType.MINIMAX,
        "description": "Alpha-beta minimax, 3 plies",
    },
}


def get_difficulty_profile(difficulty: Difficulty) -> DifficultyProfile:
    return DIFFICULTY_PROFILES[Difficulty(difficulty)]


class AIFactory:
    """Builds AI instances from an :class:`AIType` or a difficulty."""

    @staticmethod
    def create(
        ai_type: AIType,
        player_id: PlayerId,
        config: AIConfig,
        *,
        rng: Optional[random.Random] = None,
        opponent_id: Optional[PlayerId] = None,
        turn_order: Optional[Sequence[PlayerId]] = None,
    ) -> BaseAI:
        if ai_type == AIType.RANDOM:
            from .random_ai import RandomAI

            return RandomAI(player_id, config, rng)
        if ai_type == AIType.MINIMAX:
            from .minimax_ai import MinimaxAI

            return MinimaxAI(player_id, config, rng, opponent_id=opponent_id)
        if ai_type == AIType.MAXN:
            from .maxn_ai import MaxNAI

            if not turn_order:
                raise InvalidTurnOrderError("MaxNAI requires a turn order")
            return MaxNAI(player_id, config, turn_order, rng)
        raise ValueError(f"Unknown AI type: {ai_type}")


def create_ai(
    player_id: PlayerId,
    difficulty: Difficulty,
    *,
    config: Optional[AIConfig] = None,
    rng: Optional[random.Random] = None,
    opponent_id: Optional[PlayerId] = None,
    turn_order: Optional[Sequence[PlayerId]] = None,
) -> BaseAI:
    """Create the AI for ``difficulty``.

    A ``turn_order`` with more than two players switches searching
    difficulties from minimax to Max-N; EASY stays random.
    """
    difficulty = Difficulty(difficulty)
    if config is None:
        config = AIConfig(difficulty=difficulty)
    elif config.difficulty != difficulty:
        config = config.model_copy(update={"difficulty": difficulty})

    ai_type = get_difficulty_profile(difficulty)["ai_type"]
    if ai_type == AIType.MINIMAX and turn_order is not None and len(turn_order) > 2:
        ai_type = AIType.MAXN

    return AIFactory.create(
        ai_type,
        player_id,
        config,
        rng=rng,
        opponent_id=opponent_id,
        turn_order=turn_order,
    )


def choose_move(
    board: Board,
    player_id: PlayerId,
    difficulty: Difficulty,
    *,
    opponent_id: Optional[PlayerId] = None,
    turn_order: Optional[Sequence[PlayerId]] = None,
    config: Optional[AIConfig] = None,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """Pick a move for ``player_id`` at ``difficulty``.

    Returns ``None`` when the player has no legal move; callers treat that
    as a terminal condition for the player, not an error.
    """
    start = time.time()
    ai = create_ai(
        player_id,
        difficulty,
        config=config,
        rng=rng,
        opponent_id=opponent_id,
        turn_order=turn_order,
    )
    move = ai.select_move(board)
    elapsed = time.time() - start
    observe_ai_move(
        Difficulty(difficulty).value,
        "no_move" if move is None else "move",
        elapsed,
    )
    if move is None:
        logger.info("%r has no legal moves", ai)
    return move
