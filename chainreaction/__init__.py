"""Chain Reaction grid game: simulation engine, turn loop and search AI."""

from chainreaction.board_manager import BoardManager
from chainreaction.errors import (
    AIError,
    CellOutOfBoundsError,
    ChainReactionError,
    InvalidDimensionsError,
    InvalidMoveError,
    InvalidStateError,
    InvalidTurnOrderError,
    UnsupportedPlayerCountError,
)
from chainreaction.game_engine import (
    CascadeResult,
    apply_move,
    create_grid,
    get_valid_moves,
    is_valid_move,
    iter_cascade,
    resolve_cascade,
    resolve_wave,
)
from chainreaction.game_session import GameSession
from chainreaction.models import (
    AIConfig,
    Board,
    Cell,
    Difficulty,
    GameState,
    GameStatus,
    Move,
    MoveApplied,
    Player,
    PlayerType,
    WaveResolved,
)

__version__ = "1.0.0"

__all__ = [
    "AIConfig",
    "AIError",
    "Board",
    "BoardManager",
    "CascadeResult",
    "Cell",
    "CellOutOfBoundsError",
    "ChainReactionError",
    "Difficulty",
    "GameSession",
    "GameState",
    "GameStatus",
    "InvalidDimensionsError",
    "InvalidMoveError",
    "InvalidStateError",
    "InvalidTurnOrderError",
    "Move",
    "MoveApplied",
    "Player",
    "PlayerType",
    "UnsupportedPlayerCountError",
    "WaveResolved",
    "apply_move",
    "create_grid",
    "get_valid_moves",
    "is_valid_move",
    "iter_cascade",
    "resolve_cascade",
    "resolve_wave",
]
