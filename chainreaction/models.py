"""
Pydantic Models for Chain Reaction Game State
Mirrors the TypeScript client types (Cell, Grid, Player, GameState); multi-word
fields serialize under their camelCase aliases. Service envelopes in
chainreaction.main stay snake_case.
"""

from enum import Enum
from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

PlayerId = str
Coord = Tuple[int, int]
# Cells exploding together in one cascade step. Unordered by definition.
Wave = frozenset[Coord]

EMPTY_WAVE: Wave = frozenset()


class Difficulty(str, Enum):
    """Bot difficulty enumeration"""
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class PlayerType(str, Enum):
    """Seat controller enumeration"""
    HUMAN = "HUMAN"
    BOT = "BOT"


class GameStatus(str, Enum):
    """Game status enumeration"""
    ACTIVE = "active"
    FINISHED = "finished"


class AIType(str, Enum):
    """AI type enumeration"""
    RANDOM = "random"
    MINIMAX = "minimax"
    MAXN = "maxn"


class Cell(BaseModel):
    """A single grid cell.

    ``owner`` records the player whose orb most recently entered the cell;
    it is the capture marker, not a per-player orb tally. ``capacity`` is
    the number of in-bounds orthogonal neighbours and never changes.
    """
    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=0)
    col: int = Field(ge=0)
    count: int = Field(default=0, ge=0)
    owner: Optional[PlayerId] = None
    capacity: int = Field(ge=1)

    @property
    def is_unstable(self) -> bool:
        return self.count >= self.capacity

    @property
    def is_critical(self) -> bool:
        """One orb away from exploding."""
        return self.count == self.capacity - 1

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)


class Board(BaseModel):
    """Immutable rows x cols grid of cells.

    Transitions never mutate a Board; they build a new one and share the
    untouched row tuples with the previous board.
    """
    model_config = ConfigDict(frozen=True)

    rows: int = Field(ge=2)
    cols: int = Field(ge=2)
    cells: Tuple[Tuple[Cell, ...], ...]

    @model_validator(mode="after")
    def _check_shape(self) -> "Board":
        if len(self.cells) != self.rows:
            raise ValueError(
                f"expected {self.rows} rows, got {len(self.cells)}"
            )
        for r, row in enumerate(self.cells):
            if len(row) != self.cols:
                raise ValueError(
                    f"row {r}: expected {self.cols} cells, got {len(row)}"
                )
            for c, cell in enumerate(row):
                if (cell.row, cell.col) != (r, c):
                    raise ValueError(
                        f"cell at {r},{c} claims coordinates "
                        f"{cell.row},{cell.col}"
                    )
                # In-bounds orthogonal neighbours.
                capacity = (
                    (r > 0) + (r < self.rows - 1) + (c > 0) + (c < self.cols - 1)
                )
                if cell.capacity != capacity:
                    raise ValueError(
                        f"cell at {r},{c}: capacity {cell.capacity}, "
                        f"expected {capacity}"
                    )
                if cell.count > 0 and cell.owner is None:
                    raise ValueError(
                        f"cell at {r},{c} holds {cell.count} orbs but no owner"
                    )
        return self

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at (row, col). Bounds are the caller's job."""
        return self.cells[row][col]

    def iter_cells(self) -> Iterator[Cell]:
        """Iterate all cells in row-major (grid) order."""
        for row in self.cells:
            yield from row


class Move(BaseModel):
    """The cell a player targets."""
    model_config = ConfigDict(frozen=True)

    row: int = Field(ge=0)
    col: int = Field(ge=0)


class MoveApplied(BaseModel):
    """Result of placing an orb: the new board and the first wave (may be empty)."""
    model_config = ConfigDict(frozen=True)

    board: Board
    wave: Wave = EMPTY_WAVE


class WaveResolved(BaseModel):
    """Result of resolving one wave: the new board and the wave it triggers."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    board: Board
    next_wave: Wave = Field(default=EMPTY_WAVE, alias="nextWave")


class Player(BaseModel):
    """Player seat"""
    model_config = ConfigDict(populate_by_name=True)

    id: PlayerId
    name: str
    color: str
    is_alive: bool = Field(default=True, alias="isAlive")
    order: int = Field(ge=0)
    type: PlayerType = PlayerType.HUMAN
    difficulty: Optional[Difficulty] = None


class GameState(BaseModel):
    """Complete turn-loop state for one game.

    ``pending_wave`` is non-empty while a cascade is still being stepped;
    no move may be submitted until it drains.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    board: Board
    players: List[Player]
    current_player_index: int = Field(default=0, ge=0, alias="currentPlayerIndex")
    turn_count: int = Field(default=0, ge=0, alias="turnCount")
    pending_wave: Wave = Field(default=EMPTY_WAVE, alias="pendingWave")
    # Waves resolved so far in the current cascade.
    cascade_waves: int = Field(default=0, ge=0, alias="cascadeWaves")
    game_status: GameStatus = Field(default=GameStatus.ACTIVE, alias="gameStatus")
    winner: Optional[PlayerId] = None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def current_player_id(self) -> PlayerId:
        return self.current_player.id

    @property
    def is_animating(self) -> bool:
        return bool(self.pending_wave)

    def get_player(self, player_id: PlayerId) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None


class AIConfig(BaseModel):
    """AI configuration.

    ``search_depth`` and ``max_cascade_waves`` override the difficulty
    defaults from :mod:`chainreaction.config`. ``think_time`` (ms) caps the
    wall-clock spent in the top-level move loop.
    """
    model_config = ConfigDict(populate_by_name=True)

    difficulty: Difficulty = Difficulty.MEDIUM
    think_time: Optional[int] = Field(None, ge=0, alias="thinkTime")
    rng_seed: Optional[int] = Field(None, ge=0, alias="rngSeed")
    search_depth: Optional[int] = Field(None, ge=1, alias="searchDepth")
    max_cascade_waves: Optional[int] = Field(None, ge=1, alias="maxCascadeWaves")
    num_workers: Optional[int] = Field(None, ge=1, alias="numWorkers")
