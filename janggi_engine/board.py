"""Janggi board representation and move application."""

from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Optional, Tuple
from dataclasses import dataclass

import numpy as np


class Side(Enum):
    """Player sides."""

    HAN = "HAN"  # Bottom side (rows 6-9), positive pieces
    CHO = "CHO"  # Top side (rows 0-3), negative pieces, moves first

    @property
    def sign(self) -> int:
        return 1 if self == Side.HAN else -1

    @property
    def opponent(self) -> "Side":
        return Side.CHO if self == Side.HAN else Side.HAN

    @property
    def forward(self) -> int:
        """Row delta that moves toward the opponent's back rank."""
        return -1 if self == Side.HAN else 1


class PieceType(IntEnum):
    """Piece classes. The value is the magnitude of the encoded piece."""

    SOLDIER = 1
    ELEPHANT = 2
    HORSE = 3
    CANNON = 4
    CHARIOT = 5
    GUARD = 6
    GENERAL = 7


EMPTY = 0


class Setup(Enum):
    """Horse/Elephant arrangements on back-rank columns 1, 2, 6, 7."""

    MSSM = "MSSM"  # 마상상마
    SMMS = "SMMS"  # 상마마상
    SMSM = "SMSM"  # 상마상마
    MSMS = "MSMS"  # 마상마상

    @property
    def korean(self) -> str:
        return self.value.replace("M", "마").replace("S", "상")

    @property
    def order(self) -> Tuple[PieceType, PieceType, PieceType, PieceType]:
        types = {"M": PieceType.HORSE, "S": PieceType.ELEPHANT}
        return tuple(types[c] for c in self.value)

    @classmethod
    def from_korean(cls, name: str) -> "Setup":
        for setup in cls:
            if setup.korean == name:
                return setup
        raise ValueError(f"Unknown setup: {name}")


@dataclass(frozen=True)
class Position:
    """A board intersection. Row 0 is Cho's back rank, row 9 is Han's."""

    row: int
    col: int

    def offset(self, d_row: int, d_col: int) -> "Position":
        return Position(self.row + d_row, self.col + d_col)

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


@dataclass(frozen=True)
class Move:
    """Represents a move."""

    from_pos: Position
    to_pos: Position

    def __str__(self) -> str:
        return self.to_uci()

    def to_uci(self) -> str:
        """Convert to four-character notation, e.g. "a6a5"."""
        from .notation import move_to_notation
        return move_to_notation(self)

    @classmethod
    def from_uci(cls, uci: str) -> "Move":
        """Parse four-character notation. Raises ValueError when malformed."""
        from .notation import notation_to_move
        move = notation_to_move(uci)
        if move is None:
            raise ValueError(f"Invalid move notation: {uci!r}")
        return move


ROWS = 10
COLS = 9

# Palace rows per side; columns are 3-5 for both
PALACE_ROWS = {
    Side.CHO: range(0, 3),
    Side.HAN: range(7, 10),
}
PALACE_COLS = range(3, 6)

PIECE_CODES = {
    "P": PieceType.SOLDIER,
    "E": PieceType.ELEPHANT,
    "H": PieceType.HORSE,
    "C": PieceType.CANNON,
    "R": PieceType.CHARIOT,
    "G": PieceType.GUARD,
    "K": PieceType.GENERAL,
}


def make_piece(side: Side, piece_type: PieceType) -> int:
    """Encode a piece of the given side and class."""
    return side.sign * int(piece_type)


def piece_type_of(piece: int) -> Optional[PieceType]:
    if piece == EMPTY:
        return None
    return PieceType(abs(piece))


def is_han_piece(piece: int) -> bool:
    return piece > 0


def is_cho_piece(piece: int) -> bool:
    return piece < 0


def side_of(piece: int) -> Optional[Side]:
    if piece > 0:
        return Side.HAN
    if piece < 0:
        return Side.CHO
    return None


def in_board(pos: Position) -> bool:
    return 0 <= pos.row < ROWS and 0 <= pos.col < COLS


def in_palace(pos: Position, side: Optional[Side] = None) -> bool:
    """Check if a position is in the palace of `side`, or in either palace."""
    if pos.col not in PALACE_COLS:
        return False
    if side is None:
        return any(pos.row in rows for rows in PALACE_ROWS.values())
    return pos.row in PALACE_ROWS[side]


def _check_generals(arr: np.ndarray) -> None:
    """Raise ValueError if either side has more than one General."""
    for side in Side:
        count = int(np.count_nonzero(arr == make_piece(side, PieceType.GENERAL)))
        if count > 1:
            raise ValueError(f"{side.value} has {count} Generals; at most one is allowed")


class Board:
    """Immutable 10x9 Janggi board.

    Cells hold signed piece codes (see `PieceType`); the backing numpy
    array is read-only and never shared between two boards.
    """

    ROWS = ROWS
    COLS = COLS

    def __init__(self, grid=None):
        if grid is None:
            arr = np.zeros((ROWS, COLS), dtype=np.int8)
        else:
            arr = np.array(grid, dtype=np.int8)
        if arr.shape != (ROWS, COLS):
            raise ValueError(f"Board must be {ROWS}x{COLS}, got {arr.shape}")
        _check_generals(arr)
        arr.flags.writeable = False
        self._grid = arr

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> "Board":
        """Adopt a freshly built array without copying it again."""
        board = cls.__new__(cls)
        arr.flags.writeable = False
        board._grid = arr
        return board

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def from_dict(cls, custom_setup: Dict[str, str]) -> "Board":
        """Build a board from square -> piece code pairs.

        Args:
            custom_setup: e.g. {"e8": "hK", "e1": "cK", "a9": "hR"}.
                Squares use file letter + row digit, piece codes are
                "h"/"c" followed by one of K, G, E, H, R, C, P.
                Malformed entries are skipped.

        Raises:
            ValueError: If a side is given more than one General.
        """
        from .notation import notation_to_position

        arr = np.zeros((ROWS, COLS), dtype=np.int8)
        for square, code in custom_setup.items():
            pos = notation_to_position(square)
            if pos is None or len(code) != 2:
                continue
            side = {"h": Side.HAN, "c": Side.CHO}.get(code[0])
            piece_type = PIECE_CODES.get(code[1])
            if side is None or piece_type is None:
                continue
            arr[pos.row, pos.col] = make_piece(side, piece_type)
        _check_generals(arr)
        return cls._wrap(arr)

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the cells, indexed [row, col]."""
        return self._grid

    def get_piece(self, pos: Position) -> int:
        """Get piece at position; EMPTY for out-of-range positions."""
        if not in_board(pos):
            return EMPTY
        return int(self._grid[pos.row, pos.col])

    def with_pieces(self, changes: Dict[Position, int]) -> "Board":
        """Return a copy with the given cells overwritten."""
        arr = self._grid.copy()
        for pos, piece in changes.items():
            if in_board(pos):
                arr[pos.row, pos.col] = piece
        return Board._wrap(arr)

    def apply_move(self, move: Move) -> "Board":
        """Return a new board with `move` played. No legality check."""
        piece = self.get_piece(move.from_pos)
        return self.with_pieces({move.from_pos: EMPTY, move.to_pos: piece})

    def pieces(self, side: Optional[Side] = None) -> Iterator[Tuple[Position, int]]:
        """Yield (position, piece) for occupied cells in row-major order."""
        for row, col in zip(*np.nonzero(self._grid)):
            piece = int(self._grid[row, col])
            if side is None or side_of(piece) == side:
                yield Position(int(row), int(col)), piece

    def find(self, piece: int) -> List[Position]:
        return [Position(int(r), int(c)) for r, c in zip(*np.nonzero(self._grid == piece))]

    def to_rows(self) -> List[List[int]]:
        return self._grid.tolist()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self._grid, other._grid))

    def __hash__(self) -> int:
        return hash(self._grid.tobytes())

    def __repr__(self) -> str:
        return f"Board({self.to_rows()!r})"


def _place_setup(arr: np.ndarray, row: int, side: Side, setup: Setup) -> None:
    for col, piece_type in zip((1, 2, 6, 7), setup.order):
        arr[row, col] = make_piece(side, piece_type)


def create_initial_board(han_setup: Setup = Setup.MSSM, cho_setup: Setup = Setup.MSSM) -> Board:
    """Set up the starting position for the chosen setup variants."""
    arr = np.zeros((ROWS, COLS), dtype=np.int8)

    for side, back, general, cannons, soldiers, setup in (
        (Side.CHO, 0, 1, 2, 3, cho_setup),
        (Side.HAN, 9, 8, 7, 6, han_setup),
    ):
        arr[back, 0] = arr[back, 8] = make_piece(side, PieceType.CHARIOT)
        arr[back, 3] = arr[back, 5] = make_piece(side, PieceType.GUARD)
        arr[general, 4] = make_piece(side, PieceType.GENERAL)
        arr[cannons, 1] = arr[cannons, 7] = make_piece(side, PieceType.CANNON)
        for col in (0, 2, 4, 6, 8):
            arr[soldiers, col] = make_piece(side, PieceType.SOLDIER)
        _place_setup(arr, back, side, setup)

    return Board._wrap(arr)


def get_piece(board: Board, pos: Position) -> int:
    return board.get_piece(pos)


def apply_move(board: Board, move: Move) -> Board:
    """Apply move to board (returns new board)."""
    return board.apply_move(move)
