"""FEN and move-string conversion for external Janggi engines.

External engines (Fairy-Stockfish and friends) describe a Janggi board
with a chess-like FEN, top rank first:

    rnba1abnr/4k4/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/4K4/RNBA1ABNR w - - 0 1

Uppercase pieces are Han (bottom), lowercase are Cho (top); "w" means
Han to move. Engine move strings use ranks 1-10 counted from the bottom,
so rank 1 is row 9 and rank 10 is row 0.
"""

import re
from typing import Tuple

import numpy as np

from .board import COLS, EMPTY, ROWS, Board, Move, PieceType, Position, Side, make_piece, side_of

FILES = "abcdefghi"

FEN_LETTERS = {
    PieceType.GENERAL: "k",
    PieceType.GUARD: "a",
    PieceType.ELEPHANT: "b",
    PieceType.HORSE: "n",
    PieceType.CHARIOT: "r",
    PieceType.CANNON: "c",
    PieceType.SOLDIER: "p",
}
_LETTER_TO_TYPE = {letter: piece_type for piece_type, letter in FEN_LETTERS.items()}

_ENGINE_MOVE_RE = re.compile(r"^([a-i])(10|[1-9])([a-i])(10|[1-9])$")


def board_to_fen(board: Board, side_to_move: Side, move_number: int = 1) -> str:
    """Convert board to FEN string."""
    ranks = []
    for row in range(ROWS):
        rank_str = ""
        empty_count = 0
        for col in range(COLS):
            piece = board.get_piece(Position(row, col))
            if piece == EMPTY:
                empty_count += 1
                continue
            if empty_count > 0:
                rank_str += str(empty_count)
                empty_count = 0
            letter = FEN_LETTERS[PieceType(abs(piece))]
            rank_str += letter.upper() if side_of(piece) == Side.HAN else letter
        if empty_count > 0:
            rank_str += str(empty_count)
        ranks.append(rank_str)

    turn = "w" if side_to_move == Side.HAN else "b"
    return f"{'/'.join(ranks)} {turn} - - 0 {move_number}"


def fen_to_board(fen: str) -> Tuple[Board, Side]:
    """Parse a FEN string into a board and the side to move.

    Raises:
        ValueError: If the placement field is not 10 ranks of 9 cells or
            contains an unknown piece letter, or if a side has more
            than one General.
    """
    parts = fen.split()
    if not parts:
        raise ValueError("Empty FEN")
    ranks = parts[0].split("/")
    if len(ranks) != ROWS:
        raise ValueError(f"FEN must have {ROWS} ranks, got {len(ranks)}")

    arr = np.zeros((ROWS, COLS), dtype=np.int8)
    for row, rank_str in enumerate(ranks):
        col = 0
        for char in rank_str:
            if char.isdigit():
                col += int(char)
                continue
            piece_type = _LETTER_TO_TYPE.get(char.lower())
            if piece_type is None:
                raise ValueError(f"Unknown piece letter {char!r} in FEN")
            if col >= COLS:
                raise ValueError(f"Rank {row} overflows the board")
            side = Side.HAN if char.isupper() else Side.CHO
            arr[row, col] = make_piece(side, piece_type)
            col += 1
        if col != COLS:
            raise ValueError(f"Rank {row} has {col} cells, expected {COLS}")

    turn = parts[1] if len(parts) > 1 else "w"
    if turn not in ("w", "b"):
        raise ValueError(f"Invalid side to move {turn!r}")
    return Board(arr), Side.HAN if turn == "w" else Side.CHO


def engine_move_to_move(engine_move: str) -> Move:
    """Convert an engine move like "e10e9" to a Move."""
    match = _ENGINE_MOVE_RE.match(engine_move.strip())
    if match is None:
        raise ValueError(f"Invalid engine move: {engine_move!r}")
    from_file, from_rank, to_file, to_rank = match.groups()
    return Move(
        Position(ROWS - int(from_rank), FILES.index(from_file)),
        Position(ROWS - int(to_rank), FILES.index(to_file)),
    )


def move_to_engine_move(move: Move) -> str:
    return (
        f"{FILES[move.from_pos.col]}{ROWS - move.from_pos.row}"
        f"{FILES[move.to_pos.col]}{ROWS - move.to_pos.row}"
    )
