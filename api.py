"""FastAPI backend for Janggi game sessions."""

import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel
from typing import Optional, List, Dict, Any

from janggi_engine.board import Board, Move, Setup, Side
from janggi_engine.config import RuleConfig, SessionConfig
from janggi_engine.fen import board_to_fen
from janggi_engine.notation import notation_to_position, position_to_notation
from janggi_engine.session import GameSession, PlayerType, SessionStats
from janggi_engine.strategy import STRATEGIES, get_strategy

logger = logging.getLogger(__name__)

# Defaults read once at import; main.py sets the environment before uvicorn imports us
DEFAULT_RULES = RuleConfig.from_env()
DEFAULT_SESSION_CONFIG = SessionConfig.from_env()


class GameState:
    """A session plus the lock and autoplay task that belong to it."""

    def __init__(self, session: GameSession):
        self.session = session
        self.lock = asyncio.Lock()
        self.autoplay_task: Optional[asyncio.Task] = None


games: Dict[str, GameState] = {}
games_lock = asyncio.Lock()
stats = SessionStats()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    yield
    # Stop autoplay loops on shutdown
    for state in games.values():
        state.session.stop()
        if state.autoplay_task is not None:
            state.autoplay_task.cancel()


app = FastAPI(title="Janggi Rules Engine", lifespan=lifespan)


async def get_game_state(game_id: str) -> GameState:
    """Get game state with proper error handling."""
    async with games_lock:
        if game_id not in games:
            raise HTTPException(status_code=404, detail="Game not found")
        return games[game_id]


def parse_square(square: str):
    pos = notation_to_position(square)
    if pos is None:
        raise HTTPException(status_code=400, detail=f"Invalid square notation: {square!r}")
    return pos


def move_to_dict(move: Move) -> Dict[str, str]:
    return {
        "from": position_to_notation(move.from_pos),
        "to": position_to_notation(move.to_pos),
    }


class NewGameRequest(BaseModel):
    """Request model for creating a new game."""

    game_id: str
    han_setup: Setup = Setup.MSSM
    cho_setup: Setup = Setup.MSSM
    han_player: PlayerType = PlayerType.HUMAN
    cho_player: PlayerType = PlayerType.AI
    strategy: Optional[str] = None  # "random" or "greedy"; server default if None
    seed: Optional[int] = None
    enforce_general_safety: Optional[bool] = None
    palace_diagonals: Optional[bool] = None
    custom_setup: Optional[Dict[str, str]] = None  # e.g., {"e8": "hK", "e1": "cK"}


class MoveRequest(BaseModel):
    """Request model for making a move."""

    game_id: str
    from_square: str  # e.g., "a6"
    to_square: str  # e.g., "a5"


class BoardResponse(BaseModel):
    """Response model for board state."""

    board: List[List[int]]
    fen: str
    side_to_move: str
    game_over: bool
    result: str
    winner: Optional[str]
    finish_reason: Optional[str] = None
    legal_moves: List[Dict[str, str]]
    move_history: List[Dict[str, Any]]
    autoplaying: bool = False


class MoveResponse(BaseModel):
    """Response model for a played move, human or AI."""

    status: str = "ok"
    move: Dict[str, str]  # {"from": "a3", "to": "a4"}
    game_over: bool = False
    winner: Optional[str] = None
    reason: Optional[str] = None


class StatsResponse(BaseModel):
    """Response model for win/draw statistics."""

    han_wins: int
    cho_wins: int
    draws: int
    total_games: int


def build_move_response(session: GameSession, move: Move) -> MoveResponse:
    winner = session.result.winner
    return MoveResponse(
        move=move_to_dict(move),
        game_over=session.game_over,
        winner=winner.value if winner else None,
        reason=session.finish_reason,
    )


def build_board_response(state: GameState) -> BoardResponse:
    session = state.session
    winner = session.result.winner
    return BoardResponse(
        board=session.board.to_rows(),
        fen=board_to_fen(session.board, session.side_to_move, len(session.history) // 2 + 1),
        side_to_move=session.side_to_move.value,
        game_over=session.game_over,
        result=session.result.value,
        winner=winner.value if winner else None,
        finish_reason=session.finish_reason,
        legal_moves=[move_to_dict(m) for m in session.legal_moves()],
        move_history=session.history,
        autoplaying=session.is_autoplaying,
    )


@app.post("/api/new-game")
async def new_game(request: NewGameRequest):
    """Create a new game."""
    strategy_name = request.strategy or DEFAULT_SESSION_CONFIG.strategy
    if strategy_name not in STRATEGIES:
        raise HTTPException(status_code=400, detail=f"Unknown strategy: {strategy_name}")

    rules = RuleConfig(
        enforce_general_safety=(
            DEFAULT_RULES.enforce_general_safety
            if request.enforce_general_safety is None
            else request.enforce_general_safety
        ),
        palace_diagonals=(
            DEFAULT_RULES.palace_diagonals
            if request.palace_diagonals is None
            else request.palace_diagonals
        ),
    )
    board = None
    if request.custom_setup:
        try:
            board = Board.from_dict(request.custom_setup)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    # Cho plays with seed + 1
    seed = request.seed
    session = GameSession(
        han_setup=request.han_setup,
        cho_setup=request.cho_setup,
        players={Side.HAN: request.han_player, Side.CHO: request.cho_player},
        strategies={
            Side.HAN: get_strategy(strategy_name, seed),
            Side.CHO: get_strategy(strategy_name, None if seed is None else seed + 1),
        },
        rules=rules,
        config=DEFAULT_SESSION_CONFIG,
        stats=stats,
        board=board,
    )

    async with games_lock:
        old = games.get(request.game_id)
        if old is not None:
            old.session.stop()
        games[request.game_id] = GameState(session)

    logger.info("New game %s (%s vs %s, strategy=%s)", request.game_id,
                request.han_setup.value, request.cho_setup.value, strategy_name)
    return {
        "status": "ok",
        "game_id": request.game_id,
        "strategy": strategy_name,
        "rules": {
            "enforce_general_safety": rules.enforce_general_safety,
            "palace_diagonals": rules.palace_diagonals,
        },
    }


@app.get("/api/board/{game_id}")
async def get_board(game_id: str) -> BoardResponse:
    """Get current board state."""
    state = await get_game_state(game_id)
    try:
        async with state.lock:
            return build_board_response(state)
    except Exception as e:
        logger.exception("Error in get_board for %s", game_id)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")


@app.get("/api/legal-moves/{game_id}")
async def get_legal_moves_for_square(game_id: str, square: str = Query(...)):
    """Get legal destinations for the piece on `square` (move hinting)."""
    state = await get_game_state(game_id)
    origin = parse_square(square)
    async with state.lock:
        moves = state.session.legal_moves(origin)
    return {"square": square, "destinations": [position_to_notation(m.to_pos) for m in moves]}


@app.post("/api/move")
async def make_move(request: MoveRequest) -> MoveResponse:
    """Make a human move."""
    state = await get_game_state(request.game_id)
    move = Move(parse_square(request.from_square), parse_square(request.to_square))

    async with state.lock:
        session = state.session
        if session.is_autoplaying:
            raise HTTPException(status_code=409, detail="Autoplay is running")
        if session.game_over:
            raise HTTPException(status_code=400, detail="Game is over")
        if session.players[session.side_to_move] == PlayerType.AI:
            raise HTTPException(status_code=400, detail="Side to move is played by the AI")
        if not session.make_move(move):
            raise HTTPException(status_code=400, detail="Illegal move")
        return build_move_response(session, move)


@app.post("/api/ai-move/{game_id}")
async def ai_move(game_id: str) -> MoveResponse:
    """Get AI move."""
    state = await get_game_state(game_id)

    async with state.lock:
        session = state.session
        if session.is_autoplaying:
            raise HTTPException(status_code=409, detail="Autoplay is running")
        best_move = session.play_ai_move()
        if best_move is None:
            raise HTTPException(status_code=400, detail="No legal moves available")
        return build_move_response(session, best_move)


async def _run_autoplay(game_id: str, state: GameState, delay: Optional[float]):
    try:
        await state.session.autoplay(delay)
    except Exception:
        logger.exception("Autoplay failed for game %s", game_id)


@app.post("/api/autoplay/{game_id}")
async def start_autoplay(game_id: str, delay: Optional[float] = None):
    """Start AI-vs-AI (or AI-to-move) play in the background."""
    state = await get_game_state(game_id)

    async with state.lock:
        if state.session.is_autoplaying:
            raise HTTPException(status_code=409, detail="Autoplay is already running")
        if state.session.game_over:
            raise HTTPException(status_code=400, detail="Game is over")
        state.autoplay_task = asyncio.create_task(_run_autoplay(game_id, state, delay))

    return {"status": "ok", "message": "Autoplay started"}


@app.post("/api/autoplay/{game_id}/stop")
async def stop_autoplay(game_id: str):
    """Ask autoplay to stop after the move in flight."""
    state = await get_game_state(game_id)
    state.session.stop()
    return {"status": "ok", "message": "Autoplay stop requested"}


@app.get("/api/stats")
async def get_stats() -> StatsResponse:
    """Get win/draw statistics for finished games."""
    return StatsResponse(**stats.to_dict())


@app.post("/api/stats/reset")
async def reset_stats() -> StatsResponse:
    """Zero the win/draw counters."""
    async with games_lock:
        stats.reset()
    logger.info("Stats reset")
    return StatsResponse(**stats.to_dict())
