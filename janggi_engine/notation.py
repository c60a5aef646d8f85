"""Conversion between board positions and algebraic squares.

A square is a file letter a-i (column 0-8) followed by a single rank
digit equal to the row index 0-9, e.g. "e4" is row 4, column 4.
"""

from typing import Optional

from .board import COLS, ROWS, Move, Position

FILES = "abcdefghi"


def position_to_notation(pos: Position) -> str:
    """Convert position to algebraic notation (e.g., "e4")."""
    return f"{FILES[pos.col]}{pos.row}"


def notation_to_position(notation: str) -> Optional[Position]:
    """Convert algebraic notation to a position, or None if malformed."""
    if len(notation) != 2:
        return None
    col = FILES.find(notation[0])
    if col < 0 or col >= COLS:
        return None
    if notation[1] not in "0123456789"[:ROWS]:
        return None
    row = int(notation[1])
    return Position(row, col)


def move_to_notation(move: Move) -> str:
    return position_to_notation(move.from_pos) + position_to_notation(move.to_pos)


def notation_to_move(notation: str) -> Optional[Move]:
    """Parse "a6a5"-style move notation, or None if malformed."""
    if len(notation) != 4:
        return None
    from_pos = notation_to_position(notation[:2])
    to_pos = notation_to_position(notation[2:])
    if from_pos is None or to_pos is None:
        return None
    return Move(from_pos, to_pos)
