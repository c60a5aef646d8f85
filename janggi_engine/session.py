"""Game session: turn order, move history, AI moves and autoplay."""

import asyncio
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .board import Board, Move, PieceType, Position, Setup, Side, create_initial_board, piece_type_of
from .config import DEFAULT_RULES, RuleConfig, SessionConfig
from .moves import get_all_legal_moves, get_legal_moves
from .notation import position_to_notation
from .result import GameResult, get_game_result
from .strategy import MoveStrategy, get_ai_move, get_strategy

logger = logging.getLogger(__name__)

PIECE_NAMES = {
    PieceType.GENERAL: "왕",
    PieceType.GUARD: "사",
    PieceType.ELEPHANT: "상",
    PieceType.HORSE: "마",
    PieceType.CHARIOT: "차",
    PieceType.CANNON: "포",
    PieceType.SOLDIER: "졸",
}
SIDE_NAMES = {Side.HAN: "한", Side.CHO: "초"}


class PlayerType(Enum):
    HUMAN = "human"
    AI = "ai"


@dataclass
class SessionStats:
    """Win/draw counters across the games of one or more sessions."""

    han_wins: int = 0
    cho_wins: int = 0
    draws: int = 0
    total_games: int = 0

    def record(self, result: GameResult) -> None:
        if result == GameResult.HAN_WINS:
            self.han_wins += 1
        elif result == GameResult.CHO_WINS:
            self.cho_wins += 1
        elif result == GameResult.DRAW:
            self.draws += 1
        else:
            return
        self.total_games += 1

    def reset(self) -> None:
        self.han_wins = self.cho_wins = self.draws = self.total_games = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class GameSession:
    """One game in progress plus the players taking part in it.

    The board is replaced after every move, never modified. Autoplay runs
    as a coroutine that yields to the event loop between plies; `stop()`
    is checked between moves, so a move in flight always completes.
    """

    def __init__(
        self,
        han_setup: Setup = Setup.MSSM,
        cho_setup: Setup = Setup.MSSM,
        players: Optional[Dict[Side, PlayerType]] = None,
        strategies: Optional[Dict[Side, MoveStrategy]] = None,
        rules: Optional[RuleConfig] = None,
        config: Optional[SessionConfig] = None,
        stats: Optional[SessionStats] = None,
        board: Optional[Board] = None,
    ):
        self.config = config or SessionConfig()
        self.rules = rules or DEFAULT_RULES
        self.players = {Side.HAN: PlayerType.HUMAN, Side.CHO: PlayerType.AI}
        self.players.update(players or {})
        strategies = strategies or {}
        self.strategies = {
            side: strategies.get(side) or get_strategy(self.config.strategy) for side in Side
        }
        self.stats = stats if stats is not None else SessionStats()
        self.han_setup = han_setup
        self.cho_setup = cho_setup
        self.is_autoplaying = False
        self._stop_requested = False
        self.new_game(board=board)

    def new_game(
        self,
        han_setup: Optional[Setup] = None,
        cho_setup: Optional[Setup] = None,
        board: Optional[Board] = None,
    ) -> None:
        """Start over, stopping any autoplay in progress."""
        self.stop()
        if han_setup is not None:
            self.han_setup = han_setup
        if cho_setup is not None:
            self.cho_setup = cho_setup
        self.board = board if board is not None else create_initial_board(self.han_setup, self.cho_setup)
        self.side_to_move = self.config.first_side
        self.history: List[Dict[str, Any]] = []
        self.result = GameResult.ONGOING
        self.finish_reason: Optional[str] = None
        self._update_status()

    @property
    def game_over(self) -> bool:
        return self.result.is_over

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def legal_moves(self, origin: Optional[Position] = None) -> List[Move]:
        """Legal moves for the side to move, optionally for one piece only."""
        if self.game_over:
            return []
        if origin is not None:
            return get_legal_moves(self.board, origin, self.side_to_move, self.rules)
        return get_all_legal_moves(self.board, self.side_to_move, self.rules)

    def make_move(self, move: Move) -> bool:
        """Play a move for the side to move. Returns True if legal, False otherwise."""
        if self.game_over:
            return False
        if move not in get_legal_moves(self.board, move.from_pos, self.side_to_move, self.rules):
            return False
        self._play(move)
        return True

    def play_ai_move(self) -> Optional[Move]:
        """Let the strategy of the side to move pick and play a move."""
        if self.game_over:
            return None
        side = self.side_to_move
        move = get_ai_move(self.board, side, self.strategies[side], self.rules)
        if move is None:
            return None
        self._play(move)
        return move

    async def autoplay(self, delay: Optional[float] = None) -> GameResult:
        """Play AI moves until the game ends, a human is to move or stop() is called."""
        if self.is_autoplaying:
            raise RuntimeError("Autoplay is already running")
        delay = self.config.autoplay_delay if delay is None else delay
        self._stop_requested = False
        self.is_autoplaying = True
        logger.info("Autoplay started (%s to move)", self.side_to_move.value)
        try:
            while not self.game_over and not self._stop_requested:
                if self.players[self.side_to_move] != PlayerType.AI:
                    break
                self.play_ai_move()
                await asyncio.sleep(delay)
        finally:
            self.is_autoplaying = False
            logger.info("Autoplay stopped after %d plies (%s)", len(self.history), self.result.value)
        return self.result

    def stop(self) -> None:
        """Ask autoplay to stop before its next move."""
        self._stop_requested = True

    def _play(self, move: Move) -> None:
        piece = self.board.get_piece(move.from_pos)
        captured = self.board.get_piece(move.to_pos)
        side = self.side_to_move

        from_square = position_to_notation(move.from_pos)
        to_square = position_to_notation(move.to_pos)
        piece_name = PIECE_NAMES[piece_type_of(piece)]
        captured_info = ""
        if captured:
            captured_name = PIECE_NAMES[piece_type_of(captured)]
            captured_info = f" ({SIDE_NAMES[side.opponent]}{captured_name} 잡음)"

        self.history.append({
            "move_number": len(self.history) + 1,
            "side": side.value,
            "piece": piece_name,
            "from": from_square,
            "to": to_square,
            "notation": f"{SIDE_NAMES[side]}{piece_name} {from_square}→{to_square}{captured_info}",
            "captured": bool(captured),
        })
        logger.debug("%s", self.history[-1]["notation"])

        self.board = self.board.apply_move(move)
        self.side_to_move = side.opponent
        self._update_status()

    def _update_status(self) -> None:
        result = get_game_result(self.board)
        if result.is_over:
            reason = "bikjang" if result == GameResult.DRAW else "general_captured"
            self._finish(result, reason)
        elif not get_all_legal_moves(self.board, self.side_to_move, self.rules):
            # The side that cannot move loses
            self._finish(GameResult.win_for(self.side_to_move.opponent), "no_legal_moves")
        elif self.config.max_plies and len(self.history) >= self.config.max_plies:
            self._finish(GameResult.DRAW, "move_limit")

    def _finish(self, result: GameResult, reason: str) -> None:
        self.result = result
        self.finish_reason = reason
        self.stats.record(result)
        logger.info("Game over after %d plies: %s (%s)", len(self.history), result.value, reason)
