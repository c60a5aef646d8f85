"""Game termination detection."""

from enum import Enum
from typing import Optional

import numpy as np

from .board import PALACE_ROWS, Board, PieceType, Side, make_piece


class GameResult(Enum):
    """Outcome of a board, derived on demand."""

    HAN_WINS = "HAN_WINS"
    CHO_WINS = "CHO_WINS"
    DRAW = "DRAW"
    ONGOING = "ONGOING"

    @property
    def is_over(self) -> bool:
        return self != GameResult.ONGOING

    @property
    def winner(self) -> Optional[Side]:
        if self == GameResult.HAN_WINS:
            return Side.HAN
        if self == GameResult.CHO_WINS:
            return Side.CHO
        return None

    @classmethod
    def win_for(cls, side: Side) -> "GameResult":
        return cls.HAN_WINS if side == Side.HAN else cls.CHO_WINS


def _general_in_band(board: Board, general_side: Side, band_side: Side) -> bool:
    """Check if `general_side`'s General stands in the three palace rows of `band_side`."""
    rows = PALACE_ROWS[band_side]
    band = board.grid[rows.start:rows.stop]
    return bool(np.any(band == make_piece(general_side, PieceType.GENERAL)))


def get_game_result(board: Board) -> GameResult:
    """Classify a board.

    A side loses once its General is no longer within its own home band
    (in practice: once it has been captured). If the winner's General has
    itself entered the loser's band, the game is a draw (bikjang).
    """
    if not _general_in_band(board, Side.HAN, Side.HAN):
        if _general_in_band(board, Side.CHO, Side.HAN):
            return GameResult.DRAW
        return GameResult.CHO_WINS

    if not _general_in_band(board, Side.CHO, Side.CHO):
        if _general_in_band(board, Side.HAN, Side.CHO):
            return GameResult.DRAW
        return GameResult.HAN_WINS

    return GameResult.ONGOING
