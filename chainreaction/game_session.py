"""Turn loop for a Chain Reaction game.

Drives the pure engine for a full game: seat rotation, paced cascade
stepping, elimination and victory. State lives in an explicit
:class:`GameState`; every operation returns a new one, so a host can keep
the authoritative copy and relay it verbatim to other participants.

A human turn is::

    state = GameSession.submit_move(state, "p1", row, col)
    while state.is_animating:
        state = GameSession.step(state)  # sleep EXPLOSION_DELAY_MS between steps

Elimination only starts once every seat has had a first turn; before that
an empty-handed player is simply someone who has not played yet.
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import Mapping, Optional, Sequence

from .ai.factory import choose_move
from .board_manager import BoardManager
from .config import DEFAULT_COLS, DEFAULT_ROWS, MAX_PLAYERS, MIN_PLAYERS, PLAYER_COLORS
from .errors import InvalidMoveError, InvalidStateError
from .game_engine import apply_move, create_grid, is_valid_move, resolve_wave
from .metrics import CASCADE_WAVES
from .models import (
    EMPTY_WAVE,
    AIConfig,
    Difficulty,
    GameState,
    GameStatus,
    Player,
    PlayerId,
    PlayerType,
)

logger = logging.getLogger(__name__)

__all__ = ["GameSession"]


class GameSession:
    """Stateless turn-loop operations over :class:`GameState`."""

    @staticmethod
    def create_players(
        num_players: int,
        bots: Optional[Mapping[int, Difficulty]] = None,
    ) -> list[Player]:
        """Seats ``p1..pN``; ``bots`` maps seat index (0-based) to difficulty."""
        if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
            raise InvalidStateError(
                f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}",
                context={"num_players": num_players},
            )
        bots = bots or {}
        players = []
        for i in range(num_players):
            difficulty = bots.get(i)
            players.append(
                Player(
                    id=f"p{i + 1}",
                    name=f"Player {i + 1}" if difficulty is None else f"Bot {i + 1}",
                    color=PLAYER_COLORS[i % len(PLAYER_COLORS)],
                    is_alive=True,
                    order=i,
                    type=PlayerType.HUMAN if difficulty is None else PlayerType.BOT,
                    difficulty=difficulty,
                )
            )
        return players

    @staticmethod
    def start_game(
        num_players: int = 2,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        *,
        players: Optional[Sequence[Player]] = None,
        bots: Optional[Mapping[int, Difficulty]] = None,
        game_id: Optional[str] = None,
    ) -> GameState:
        """Fresh game on an empty grid with seat 0 to move."""
        if players is None:
            players = GameSession.create_players(num_players, bots)
        elif not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
            raise InvalidStateError(
                f"Player count must be between {MIN_PLAYERS} and {MAX_PLAYERS}",
                context={"num_players": len(players)},
            )
        ids = [p.id for p in players]
        if len(set(ids)) != len(ids):
            raise InvalidStateError("Player ids must be unique", context={"ids": ids})

        state = GameState(
            id=game_id or uuid.uuid4().hex,
            board=create_grid(rows, cols),
            players=list(players),
        )
        logger.info(
            "Game %s started: %dx%d, players=%s", state.id, rows, cols, ids
        )
        return state

    @staticmethod
    def submit_move(
        state: GameState, player_id: PlayerId, row: int, col: int
    ) -> GameState:
        """Place an orb for the player to move and queue the first wave.

        Raises:
            InvalidMoveError: game over, cascade pending, wrong player, or
                a cell owned by someone else.
            CellOutOfBoundsError: (row, col) is not on the board.
        """
        if state.game_status != GameStatus.ACTIVE:
            raise InvalidMoveError("Game is over", player_id=player_id)
        if state.is_animating:
            raise InvalidMoveError(
                "A cascade is still resolving", player_id=player_id
            )
        if state.current_player_id != player_id:
            raise InvalidMoveError(
                "Not this player's turn",
                player_id=player_id,
                context={"current_player": state.current_player_id},
            )
        cell = BoardManager.get_cell(state.board, row, col)
        if not is_valid_move(cell, player_id):
            raise InvalidMoveError(
                "Cell belongs to another player",
                player_id=player_id,
                context={"row": row, "col": col, "owner": cell.owner},
            )

        applied = apply_move(state.board, row, col, player_id)
        state = state.model_copy(
            update={
                "board": applied.board,
                "pending_wave": applied.wave,
                "cascade_waves": 0,
            }
        )
        if not applied.wave:
            return GameSession.advance_turn(state)
        return state

    @staticmethod
    def step(state: GameState) -> GameState:
        """Resolve exactly one pending wave; advance the turn once stable."""
        if not state.pending_wave:
            return state

        resolved = resolve_wave(state.board, state.pending_wave)
        state = state.model_copy(
            update={
                "board": resolved.board,
                "pending_wave": resolved.next_wave,
                "cascade_waves": state.cascade_waves + 1,
            }
        )

        if resolved.next_wave and GameSession._decided_without_rest(state):
            # The outcome is fixed and the orbs may never come to rest.
            logger.info(
                "Game %s: %s captured the board mid-cascade after %d waves",
                state.id,
                state.current_player_id,
                state.cascade_waves,
            )
            state = state.model_copy(update={"pending_wave": EMPTY_WAVE})

        if not state.pending_wave:
            CASCADE_WAVES.observe(state.cascade_waves)
            return GameSession.advance_turn(state)
        return state

    @staticmethod
    def run_cascade(state: GameState) -> GameState:
        """Step until no wave is pending (no pacing)."""
        while state.pending_wave:
            state = GameSession.step(state)
        return state

    @staticmethod
    def _decided_without_rest(state: GameState) -> bool:
        """Mover owns every orb and the cascade is not bound to settle.

        Fewer orbs than neighbour links always come to rest, so those
        cascades are played out and the finished board is stable. Above
        that the board is left as it stands, possibly with unstable cells.
        """
        if state.turn_count < len(state.players):
            return False
        if BoardManager.owners(state.board) != {state.current_player_id}:
            return False
        links = sum(cell.capacity for cell in state.board.iter_cells()) // 2
        return BoardManager.total_orbs(state.board) >= links

    @staticmethod
    def advance_turn(state: GameState) -> GameState:
        """Apply eliminations, detect a winner, or pass to the next live seat."""
        if state.game_status != GameStatus.ACTIVE:
            return state

        active = BoardManager.owners(state.board)
        elimination_open = state.turn_count >= len(state.players)
        players = []
        for p in state.players:
            alive = p.is_alive and (not elimination_open or p.id in active)
            if p.is_alive and not alive:
                logger.info("Game %s: %s eliminated", state.id, p.id)
            players.append(p if alive == p.is_alive else p.model_copy(update={"is_alive": alive}))

        alive_players = [p for p in players if p.is_alive]
        if elimination_open and len(alive_players) == 1:
            winner = alive_players[0].id
            logger.info(
                "Game %s finished after %d turns, winner %s",
                state.id,
                state.turn_count + 1,
                winner,
            )
            return state.model_copy(
                update={
                    "players": players,
                    "game_status": GameStatus.FINISHED,
                    "winner": winner,
                }
            )

        next_index = (state.current_player_index + 1) % len(players)
        loops = 0
        while not players[next_index].is_alive and loops < len(players):
            next_index = (next_index + 1) % len(players)
            loops += 1

        return state.model_copy(
            update={
                "players": players,
                "current_player_index": next_index,
                "turn_count": state.turn_count + 1,
            }
        )

    @staticmethod
    def play_bot_turn(
        state: GameState,
        *,
        rng: Optional[random.Random] = None,
        config: Optional[AIConfig] = None,
    ) -> GameState:
        """Let the bot in the current seat move.

        Returns the state right after the move (cascade still pending, for
        the caller to step) or, when the bot has no legal move, the state
        with the turn passed on.
        """
        if state.game_status != GameStatus.ACTIVE:
            raise InvalidMoveError("Game is over")
        player = state.current_player
        if player.type != PlayerType.BOT:
            raise InvalidMoveError(
                "Current seat is not a bot", player_id=player.id
            )

        difficulty = player.difficulty or Difficulty.MEDIUM
        alive = [p.id for p in state.players if p.is_alive]
        opponent_id = None
        turn_order = None
        if len(alive) == 2:
            opponent_id = next(pid for pid in alive if pid != player.id)
        else:
            turn_order = alive

        move = choose_move(
            state.board,
            player.id,
            difficulty,
            opponent_id=opponent_id,
            turn_order=turn_order,
            config=config,
            rng=rng,
        )
        if move is None:
            logger.info("Game %s: %s has no legal moves, passing", state.id, player.id)
            return GameSession.advance_turn(state)
        return GameSession.submit_move(state, player.id, move.row, move.col)
