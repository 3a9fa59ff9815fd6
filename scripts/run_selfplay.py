#!/usr/bin/env python3
"""
Run bot-vs-bot Chain Reaction games and print one JSON summary per game.

Every seat is a bot; ``--bots`` lists one difficulty per seat in turn
order. Cascades are fast-forwarded without pacing.

Usage:
    python scripts/run_selfplay.py --bots EASY,HARD --games 20 --seed 7
    python scripts/run_selfplay.py --config matchups/hard_mirror.yaml

A YAML config supplies defaults for any of the flags below, for example::

    bots: [MEDIUM, HARD]
    games: 50
    rows: 9
    cols: 6
    seed: 1
"""

import argparse
import json
import logging
import os
import random
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

import yaml

# Allow running from a source checkout without installing the package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chainreaction.board_manager import BoardManager  # noqa: E402
from chainreaction.config import DEFAULT_COLS, DEFAULT_ROWS  # noqa: E402
from chainreaction.game_session import GameSession  # noqa: E402
from chainreaction.models import AIConfig, Difficulty, GameStatus  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 500


def play_game(
    bots: Sequence[Difficulty],
    rows: int = DEFAULT_ROWS,
    cols: int = DEFAULT_COLS,
    seed: Optional[int] = None,
    max_turns: int = DEFAULT_MAX_TURNS,
    num_workers: Optional[int] = None,
    game_index: int = 0,
) -> dict:
    """Play one game between ``bots`` and summarise it."""
    rng = random.Random(seed)
    state = GameSession.start_game(
        len(bots),
        rows,
        cols,
        bots={i: Difficulty(d) for i, d in enumerate(bots)},
        game_id=f"selfplay_{game_index}",
    )
    config = AIConfig(numWorkers=num_workers) if num_workers else None

    start = time.time()
    moves = 0
    while state.game_status == GameStatus.ACTIVE and state.turn_count < max_turns:
        state = GameSession.play_bot_turn(state, rng=rng, config=config)
        state = GameSession.run_cascade(state)
        moves += 1

    winner = state.winner
    winner_difficulty = None
    if winner is not None:
        player = state.get_player(winner)
        winner_difficulty = player.difficulty.value if player and player.difficulty else None

    return {
        "game_id": state.id,
        "rows": rows,
        "cols": cols,
        "bots": [Difficulty(d).value for d in bots],
        "seed": seed,
        "status": state.game_status.value,
        "winner": winner,
        "winner_difficulty": winner_difficulty,
        "turns": state.turn_count,
        "moves": moves,
        "orbs": BoardManager.total_orbs(state.board),
        "game_time_sec": round(time.time() - start, 3),
    }


def load_config(path: Optional[str]) -> dict:
    """Load flag defaults from a YAML file."""
    if not path:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    with open(config_path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise SystemExit(f"Config file must contain a mapping: {config_path}")
    if isinstance(data.get("bots"), str):
        data["bots"] = data["bots"].split(",")
    return data


def _parse_bots(value: str) -> list[str]:
    return [v.strip().upper() for v in value.split(",") if v.strip()]


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chain Reaction bot selfplay")
    parser.add_argument("--config", help="YAML file with flag defaults")
    parser.add_argument(
        "--bots",
        type=_parse_bots,
        default=["MEDIUM", "MEDIUM"],
        help="Comma-separated difficulty per seat (e.g. EASY,HARD)",
    )
    parser.add_argument("--games", type=int, default=1)
    parser.add_argument("--rows", type=int, default=DEFAULT_ROWS)
    parser.add_argument("--cols", type=int, default=DEFAULT_COLS)
    parser.add_argument("--seed", type=int, default=None, help="Base seed; game i uses seed + i")
    parser.add_argument("--max-turns", type=int, default=DEFAULT_MAX_TURNS)
    parser.add_argument("--workers", type=int, default=None, help="Evaluation worker processes")
    parser.add_argument("--output", help="Append JSON lines to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = create_argument_parser()
    pre_args, _ = parser.parse_known_args(argv)
    parser.set_defaults(**load_config(pre_args.config))
    args = parser.parse_args(argv)

    if not args.verbose:
        logging.getLogger("chainreaction").setLevel(logging.WARNING)

    try:
        bots = [Difficulty(b.upper()) for b in args.bots]
    except ValueError as e:
        parser.error(str(e))

    out = open(args.output, "a") if args.output else sys.stdout
    wins: dict[str, int] = {}
    try:
        for i in range(args.games):
            seed = None if args.seed is None else args.seed + i
            summary = play_game(
                bots,
                rows=args.rows,
                cols=args.cols,
                seed=seed,
                max_turns=args.max_turns,
                num_workers=args.workers,
                game_index=i,
            )
            out.write(json.dumps(summary) + "\n")
            out.flush()
            key = summary["winner"] or "none"
            wins[key] = wins.get(key, 0) + 1
    finally:
        if out is not sys.stdout:
            out.close()

    logger.info("Finished %d games: %s", args.games, wins)
    return 0


if __name__ == "__main__":
    sys.exit(main())
