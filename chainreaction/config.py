"""Runtime configuration for the Chain Reaction service.

All knobs are module-level constants read once from ``CHAINREACTION_*``
environment variables, falling back to the calibrated defaults below.

    export CHAINREACTION_MAX_CASCADE_WAVES=40
    export CHAINREACTION_HARD_DEPTH=4
"""

from __future__ import annotations

import multiprocessing as mp
import os

from .errors import ConfigurationError

__all__ = [
    "CORS_ORIGINS",
    "DEFAULT_COLS",
    "DEFAULT_ROWS",
    "DIFFICULTY_DEPTHS",
    "EVAL_WORKERS",
    "EXPLOSION_DELAY_MS",
    "MAX_CASCADE_WAVES",
    "MAX_PLAYERS",
    "MIN_PLAYERS",
    "PARALLEL_THRESHOLD",
    "PLAYER_COLORS",
    "env_int",
]


def env_int(name: str, default: int, minimum: int | None = None) -> int:
    """Read an integer environment variable, validating its lower bound."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer",
            context={"value": raw},
        ) from e
    if minimum is not None and value < minimum:
        raise ConfigurationError(
            f"{name} must be >= {minimum}",
            context={"value": value},
        )
    return value


# Board defaults (portrait phone-sized grid).
DEFAULT_ROWS = env_int("CHAINREACTION_DEFAULT_ROWS", 9, minimum=2)
DEFAULT_COLS = env_int("CHAINREACTION_DEFAULT_COLS", 6, minimum=2)

MIN_PLAYERS = 2
MAX_PLAYERS = 8

PLAYER_COLORS = (
    "#FF0000",  # Red
    "#00FF00",  # Green
    "#0000FF",  # Blue
    "#FFFF00",  # Yellow
    "#FF00FF",  # Magenta
    "#00FFFF",  # Cyan
    "#FFA500",  # Orange
    "#800080",  # Purple
)

# Pacing hint for UIs stepping a cascade wave by wave. The engine never sleeps.
EXPLOSION_DELAY_MS = env_int("CHAINREACTION_EXPLOSION_DELAY_MS", 300, minimum=0)

# Waves the AI simulates per hypothetical move before treating the board as
# settled. Hitting the cap truncates evaluation at the still-unstable snapshot.
MAX_CASCADE_WAVES = env_int("CHAINREACTION_MAX_CASCADE_WAVES", 20, minimum=1)

# Minimax depth per difficulty; EASY never searches.
DIFFICULTY_DEPTHS: dict[str, int] = {
    "MEDIUM": env_int("CHAINREACTION_MEDIUM_DEPTH", 2, minimum=1),
    "HARD": env_int("CHAINREACTION_HARD_DEPTH", 3, minimum=1),
}

# Worker processes for top-level move evaluation (default: CPU count - 1, min 1)
EVAL_WORKERS = env_int(
    "CHAINREACTION_EVAL_WORKERS", max(1, mp.cpu_count() - 1), minimum=1
)

# Minimum candidate moves before the process pool is used at all.
PARALLEL_THRESHOLD = env_int("CHAINREACTION_PARALLEL_THRESHOLD", 24, minimum=1)

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
