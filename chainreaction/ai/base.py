"""
Base AI Player class for Chain Reaction
Abstract base class that all AI implementations inherit from
"""

from abc import ABC, abstractmethod
import random
from typing import Any, Dict, List, Optional

from ..game_engine import get_valid_moves
from ..models import AIConfig, Board, Move, PlayerId
from .evaluation import evaluate, evaluation_breakdown


class BaseAI(ABC):
    """Abstract base class for all AI implementations"""

    def __init__(
        self,
        player_id: PlayerId,
        config: AIConfig,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize AI player

        Args:
            player_id: The player this AI controls
            config: AI configuration settings
            rng: Optional RNG to share with the caller. When omitted, a
                per-instance RNG is seeded from ``config.rng_seed`` (or
                from system entropy when no seed is configured).
        """
        self.player_id = player_id
        self.config = config
        self.move_count = 0
        self.rng_seed: Optional[int] = config.rng_seed
        if rng is not None:
            self.rng = rng
        else:
            self.rng = random.Random(self.rng_seed)

    @abstractmethod
    def select_move(self, board: Board) -> Optional[Move]:
        """
        Select the best move for the current board

        Args:
            board: Current board

        Returns:
            Selected move or None if no valid moves
        """
        pass

    def evaluate_position(self, board: Board) -> float:
        """
        Evaluate the board from this AI's perspective

        Args:
            board: Current board

        Returns:
            Evaluation score (positive = good for this AI, negative = bad)
        """
        return evaluate(board, self.player_id)

    def get_evaluation_breakdown(self, board: Board) -> Dict[str, float]:
        """
        Get detailed breakdown of position evaluation

        Args:
            board: Current board

        Returns:
            Dictionary with evaluation components
        """
        return evaluation_breakdown(board, self.player_id)

    def get_valid_moves(self, board: Board) -> List[Move]:
        """
        Get all valid moves for this AI's player, in grid order.

        Args:
            board: Current board

        Returns:
            List of valid Move instances
        """
        return get_valid_moves(board, self.player_id)

    def get_random_element(self, items: List[Any]) -> Optional[Any]:
        """
        Get random element from list using the per-instance RNG.

        Args:
            items: List of items

        Returns:
            Random item or None if list is empty
        """
        if not items:
            return None
        return self.rng.choice(items)

    def __repr__(self) -> str:
        """String representation of AI"""
        return (
            f"{self.__class__.__name__}"
            f"(player={self.player_id}, "
            f"difficulty={self.config.difficulty.value})"
        )
