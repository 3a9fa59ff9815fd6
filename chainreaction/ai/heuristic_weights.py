"""Heuristic weights for Chain Reaction position evaluation.

Single source of truth for the scalar weights used by
:func:`chainreaction.ai.evaluation.evaluate` and the terminal scores the
minimax search compares against.
"""

ORB_WEIGHT = 10.0
CELL_WEIGHT = 5.0
# Own cell one orb from exploding.
CRITICAL_BONUS = 5.0
# Opponent cell one orb from exploding: an imminent threat, weighted double.
THREAT_PENALTY = CRITICAL_BONUS * 2

WIN_SCORE = 10000.0
LOSS_SCORE = -10000.0
# Scores within this margin of WIN_SCORE are treated as decided positions.
TERMINAL_MARGIN = 100.0
