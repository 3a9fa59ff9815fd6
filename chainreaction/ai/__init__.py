"""AI implementations for Chain Reaction.

The recommended entry point is :func:`choose_move`:

    from chainreaction.ai import choose_move

    move = choose_move(board, player_id="p2", difficulty=Difficulty.MEDIUM)

Architecture:
- base.py: BaseAI abstract base class
- factory.py: difficulty profiles, AIFactory, choose_move
- random_ai.py: uniform random play (EASY)
- minimax_ai.py: alpha-beta minimax (MEDIUM / HARD, two players)
- maxn_ai.py: Max-N search for three or more players
- evaluation.py / heuristic_weights.py: static evaluation
- simulation.py: capped cascade simulation for hypothetical moves
- parallel_eval.py: process-pool evaluation of top-level candidates
"""

from chainreaction.ai.base import BaseAI
from chainreaction.ai.evaluation import evaluate, evaluation_breakdown
from chainreaction.ai.factory import (
    DIFFICULTY_PROFILES,
    AIFactory,
    choose_move,
    create_ai,
    get_difficulty_profile,
)
from chainreaction.ai.maxn_ai import MaxNAI
from chainreaction.ai.minimax_ai import MinimaxAI, search
from chainreaction.ai.random_ai import RandomAI
from chainreaction.ai.simulation import SimulationResult, simulate_move

__all__ = [
    "DIFFICULTY_PROFILES",
    "AIFactory",
    "BaseAI",
    "MaxNAI",
    "MinimaxAI",
    "RandomAI",
    "SimulationResult",
    "choose_move",
    "create_ai",
    "evaluate",
    "evaluation_breakdown",
    "get_difficulty_profile",
    "search",
    "simulate_move",
]
