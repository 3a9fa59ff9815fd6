"""Prometheus metrics for the Chain Reaction service.

This module centralises counters and histograms so that the AI, the turn
loop and the HTTP handlers can record lightweight telemetry without each
managing its own metric instances.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Histogram


AI_MOVE_REQUESTS: Final[Counter] = Counter(
    "chainreaction_ai_move_requests_total",
    "Total number of bot move selections, labeled by difficulty and outcome.",
    labelnames=("difficulty", "outcome"),
)

AI_MOVE_LATENCY: Final[Histogram] = Histogram(
    "chainreaction_ai_move_latency_seconds",
    "Wall-clock time spent choosing a bot move, labeled by difficulty.",
    labelnames=("difficulty",),
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0),
)

SEARCH_NODES_TOTAL: Final[Counter] = Counter(
    "chainreaction_search_nodes_total",
    "Minimax nodes visited, labeled by difficulty.",
    labelnames=("difficulty",),
)

CASCADE_WAVES: Final[Histogram] = Histogram(
    "chainreaction_cascade_waves",
    "Waves per cascade resolved by the turn loop.",
    buckets=(0, 1, 2, 3, 5, 8, 13, 20, 40, 80),
)

CASCADE_TRUNCATIONS_TOTAL: Final[Counter] = Counter(
    "chainreaction_cascade_truncations_total",
    "Hypothetical cascades cut off at the simulation wave cap.",
)


def observe_ai_move(difficulty: str, outcome: str, seconds: float) -> None:
    """Record one finished move selection."""
    AI_MOVE_REQUESTS.labels(difficulty=difficulty, outcome=outcome).inc()
    AI_MOVE_LATENCY.labels(difficulty=difficulty).observe(seconds)
