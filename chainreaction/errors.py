"""
Chain Reaction Error Hierarchy

Unified exception hierarchy for consistent error handling across the codebase.
All custom exceptions inherit from ChainReactionError for easy catching and
filtering.

Usage:
    from chainreaction.errors import CellOutOfBoundsError, InvalidMoveError

    try:
        GameSession.submit_move(state, "p1", row, col)
    except InvalidMoveError as e:
        logger.warning(f"Rejected move: {e.message} ({e.context})")
"""

from typing import Any

__all__ = [
    # AI errors
    "AIError",
    # Grid errors
    "CellOutOfBoundsError",
    # Base error
    "ChainReactionError",
    # Validation errors
    "ConfigurationError",
    "InvalidDimensionsError",
    "InvalidMoveError",
    "InvalidStateError",
    "InvalidTurnOrderError",
    "UnsupportedPlayerCountError",
    "ValidationError",
]


class ChainReactionError(Exception):
    """Base exception for all Chain Reaction errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "CHAIN_REACTION_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Grid Errors
# =============================================================================


class InvalidDimensionsError(ChainReactionError):
    """Grid requested with a degenerate size.

    A grid needs at least two rows and two columns; a one-wide strip has
    cells with a single neighbour and no meaningful capacity.
    """
    code: str = "INVALID_DIMENSIONS"

    def __init__(
        self,
        message: str,
        rows: int | None = None,
        cols: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if rows is not None:
            self.context["rows"] = rows
        if cols is not None:
            self.context["cols"] = cols


class CellOutOfBoundsError(ChainReactionError):
    """Coordinates that do not address a cell of the board."""
    code: str = "CELL_OUT_OF_BOUNDS"

    def __init__(
        self,
        message: str,
        row: int | None = None,
        col: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if row is not None:
            self.context["row"] = row
        if col is not None:
            self.context["col"] = col


class InvalidStateError(ChainReactionError):
    """Corrupted or unexpected board or game state.

    Raised when a state is in a configuration that normal play cannot
    produce, e.g. a wave naming a cell that is below capacity.
    """
    code: str = "INVALID_STATE"


class InvalidMoveError(ChainReactionError):
    """Move that cannot be applied to the current game state.

    Raised by the turn loop for moves out of turn, into a cell owned by
    another player, during a pending cascade, or after the game ended.
    """
    code: str = "INVALID_MOVE"

    def __init__(
        self,
        message: str,
        player_id: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if player_id:
            self.context["player_id"] = player_id


# =============================================================================
# AI Errors
# =============================================================================


class AIError(ChainReactionError):
    """Base class for AI-related errors."""
    code: str = "AI_ERROR"


class UnsupportedPlayerCountError(AIError):
    """Two-player search asked to play a game with several opponents.

    Minimax derives the opponent as "the other player"; when more than one
    opponent is visible the caller must pick MaxNAI with an explicit turn
    order instead.
    """
    code: str = "UNSUPPORTED_PLAYER_COUNT"

    def __init__(
        self,
        message: str,
        opponents: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if opponents:
            self.context["opponents"] = ",".join(opponents)


class InvalidTurnOrderError(AIError):
    """Max-N turn order missing, or missing the player to move."""
    code: str = "INVALID_TURN_ORDER"

    def __init__(
        self,
        message: str,
        turn_order: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.context["turn_order"] = list(turn_order or [])


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(ChainReactionError):
    """Base class for validation errors."""
    code: str = "VALIDATION_ERROR"


class ConfigurationError(ValidationError):
    """Invalid configuration."""
    code: str = "CONFIGURATION_ERROR"
