"""
Chain Reaction AI Service - FastAPI Application
Exposes the simulation engine and bot move selection over HTTP
"""

import logging
import time
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field

from . import __version__
from .ai.evaluation import evaluate, evaluation_breakdown
from .ai.factory import create_ai, get_difficulty_profile
from .board_manager import BoardManager
from .config import CORS_ORIGINS, DEFAULT_COLS, DEFAULT_ROWS
from .errors import ChainReactionError, InvalidMoveError
from .game_engine import apply_move, create_grid, is_valid_move, resolve_wave
from .metrics import observe_ai_move
from .models import (
    AIConfig,
    Board,
    Coord,
    Difficulty,
    Move,
    MoveApplied,
    PlayerId,
    WaveResolved,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Chain Reaction AI Service",
    description="Grid simulation and bot move selection for Chain Reaction",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GridRequest(BaseModel):
    """Request model for a fresh grid"""
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS


class ApplyRequest(BaseModel):
    """Request model for placing one orb"""
    board: Board
    row: int
    col: int
    player_id: PlayerId


class ResolveRequest(BaseModel):
    """Request model for resolving one wave"""
    board: Board
    wave: List[Coord]


class MoveRequest(BaseModel):
    """Request model for AI move selection"""
    board: Board
    player_id: PlayerId
    difficulty: Difficulty = Difficulty.MEDIUM
    opponent_id: Optional[PlayerId] = None
    turn_order: Optional[List[PlayerId]] = None
    seed: Optional[int] = Field(
        None,
        ge=0,
        le=0x7FFFFFFF,
        description="Optional RNG seed for deterministic AI behavior"
    )
    think_time: Optional[int] = Field(
        None, ge=0, description="Wall-clock budget in milliseconds"
    )


class MoveResponse(BaseModel):
    """Response model for AI move selection"""
    move: Optional[Move]
    evaluation: float
    thinking_time_ms: int
    ai_type: str
    difficulty: Difficulty


class EvaluationRequest(BaseModel):
    """Request model for position evaluation"""
    board: Board
    player_id: PlayerId


class EvaluationResponse(BaseModel):
    """Response model for position evaluation"""
    score: float
    breakdown: Dict[str, float]


def _bad_request(e: ChainReactionError) -> HTTPException:
    logger.warning("Rejected request: %s", e)
    return HTTPException(status_code=400, detail=e.to_dict())


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": "Chain Reaction AI Service",
        "status": "running",
        "version": __version__,
    }


@app.get("/health")
async def health_check():
    """Health check for container orchestration"""
    return {"status": "healthy"}


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint (text exposition format)."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.post("/engine/grid", response_model=Board)
async def new_grid(request: GridRequest):
    """Create an empty grid."""
    try:
        return create_grid(request.rows, request.cols)
    except ChainReactionError as e:
        raise _bad_request(e)


@app.post("/engine/apply", response_model=MoveApplied)
async def engine_apply(request: ApplyRequest):
    """
    Place one orb for a player.

    Unlike the turn loop, this endpoint checks ownership itself since the
    raw engine transition leaves that to the caller.
    """
    try:
        cell = BoardManager.get_cell(request.board, request.row, request.col)
        if not is_valid_move(cell, request.player_id):
            raise InvalidMoveError(
                "Cell belongs to another player",
                player_id=request.player_id,
                context={
                    "row": request.row,
                    "col": request.col,
                    "owner": cell.owner,
                },
            )
        return apply_move(
            request.board, request.row, request.col, request.player_id
        )
    except ChainReactionError as e:
        raise _bad_request(e)


@app.post("/engine/resolve", response_model=WaveResolved)
async def engine_resolve(request: ResolveRequest):
    """Resolve exactly one wave."""
    try:
        return resolve_wave(request.board, request.wave)
    except ChainReactionError as e:
        raise _bad_request(e)


@app.post("/ai/move", response_model=MoveResponse)
async def get_ai_move(request: MoveRequest):
    """
    Get AI-selected move for the current board.

    Args:
        request: MoveRequest containing the board and AI configuration.

    Returns:
        MoveResponse with the selected move (``null`` when the player has
        no legal move) and its evaluation.
    """
    start_time = time.time()
    ai_type = get_difficulty_profile(request.difficulty)["ai_type"]

    try:
        config = AIConfig(
            difficulty=request.difficulty,
            think_time=request.think_time,
            rngSeed=request.seed,
        )
        ai = create_ai(
            request.player_id,
            request.difficulty,
            config=config,
            opponent_id=request.opponent_id,
            turn_order=request.turn_order,
        )
        move = ai.select_move(request.board)

        evaluation = getattr(ai, "last_score", None)
        if move is None or evaluation is None:
            evaluation = ai.evaluate_position(request.board)

        duration_seconds = time.time() - start_time
        thinking_time = int(duration_seconds * 1000)
        observe_ai_move(
            request.difficulty.value,
            "move" if move is not None else "no_move",
            duration_seconds,
        )

        logger.info(
            "AI move: ai=%r, time=%dms, eval=%.2f",
            ai,
            thinking_time,
            evaluation,
        )

        return MoveResponse(
            move=move,
            evaluation=evaluation,
            thinking_time_ms=thinking_time,
            ai_type=type(ai).__name__,
            difficulty=request.difficulty,
        )

    except ChainReactionError as e:
        observe_ai_move(
            request.difficulty.value, "rejected", time.time() - start_time
        )
        raise _bad_request(e)
    except Exception as e:
        observe_ai_move(
            request.difficulty.value, "error", time.time() - start_time
        )
        logger.error(
            "Error generating AI move (%s): %s", ai_type.value, str(e),
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/ai/evaluate", response_model=EvaluationResponse)
async def evaluate_position(request: EvaluationRequest):
    """
    Evaluate the board from a player's perspective

    Args:
        request: EvaluationRequest with board and player id

    Returns:
        EvaluationResponse with position score and breakdown
    """
    try:
        return EvaluationResponse(
            score=evaluate(request.board, request.player_id),
            breakdown=evaluation_breakdown(request.board, request.player_id),
        )
    except Exception as e:
        logger.error(f"Error evaluating position: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
