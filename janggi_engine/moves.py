"""Janggi move generation.

Every piece class has one generator below; the movement tables at the top
of the module are the only place offsets are defined. Generators return
destinations that are empty or hold an enemy piece; the optional General
safety filter is applied afterwards by `get_legal_destinations`.
"""

from dataclasses import replace
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .board import (
    EMPTY,
    Board,
    Move,
    PieceType,
    Position,
    Side,
    in_board,
    in_palace,
    make_piece,
    side_of,
)
from .config import DEFAULT_RULES, RuleConfig

ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))

# (leg, landing) offsets as (d_row, d_col)
HORSE_WAYS = (
    ((-1, 0), (-2, -1)),  # up, then up-left
    ((-1, 0), (-2, 1)),   # up, then up-right
    ((1, 0), (2, -1)),    # down, then down-left
    ((1, 0), (2, 1)),     # down, then down-right
    ((0, 1), (1, 2)),     # right, then down-right
    ((0, 1), (-1, 2)),    # right, then up-right
    ((0, -1), (1, -2)),   # left, then down-left
    ((0, -1), (-1, -2)),  # left, then up-left
)

# (first leg, second leg, landing): one orthogonal step, then two
# diagonal steps continuing away from the origin
ELEPHANT_WAYS = (
    ((0, 1), (1, 2), (2, 3)),
    ((0, -1), (1, -2), (2, -3)),
    ((0, 1), (-1, 2), (-2, 3)),
    ((0, -1), (-1, -2), (-2, -3)),
    ((1, 0), (2, 1), (3, 2)),
    ((1, 0), (2, -1), (3, -2)),
    ((-1, 0), (-2, 1), (-3, 2)),
    ((-1, 0), (-2, -1), (-3, -2)),
)

# Soldier side steps; the forward step depends on the owner
SOLDIER_SIDE_STEPS = ((0, -1), (0, 1))

# The X lines drawn inside each palace, corner to corner through the centre
PALACE_DIAGONAL_LINES = (
    ((0, 3), (1, 4), (2, 5)),
    ((0, 5), (1, 4), (2, 3)),
    ((7, 3), (8, 4), (9, 5)),
    ((7, 5), (8, 4), (9, 3)),
)


def _build_palace_rays() -> Dict[Position, Tuple[Tuple[Position, ...], ...]]:
    """Map each palace diagonal point to the rays leaving it along X lines."""
    rays: Dict[Position, List[Tuple[Position, ...]]] = {}
    for line in PALACE_DIAGONAL_LINES:
        points = [Position(row, col) for row, col in line]
        for i, point in enumerate(points):
            for ray in (points[i + 1:], points[:i][::-1]):
                if ray:
                    rays.setdefault(point, []).append(tuple(ray))
    return {point: tuple(point_rays) for point, point_rays in rays.items()}


PALACE_DIAGONAL_RAYS = _build_palace_rays()


def _is_enemy(piece: int, target: int) -> bool:
    return target != EMPTY and (piece > 0) != (target > 0)


def _can_land(piece: int, target: int) -> bool:
    """Destination is empty or holds an enemy piece."""
    return target == EMPTY or _is_enemy(piece, target)


def _ray(origin: Position, d_row: int, d_col: int) -> Iterator[Position]:
    pos = origin.offset(d_row, d_col)
    while in_board(pos):
        yield pos
        pos = pos.offset(d_row, d_col)


def _line_rays(origin: Position, rules: RuleConfig) -> List[Iterator[Position]]:
    """Orthogonal rays plus, when enabled, palace diagonal rays."""
    rays = [_ray(origin, d_row, d_col) for d_row, d_col in ORTHOGONAL]
    if rules.palace_diagonals:
        rays.extend(iter(ray) for ray in PALACE_DIAGONAL_RAYS.get(origin, ()))
    return rays


def _chariot_destinations(board: Board, origin: Position, piece: int, rules: RuleConfig) -> List[Position]:
    """Slide until the first occupied cell, which is taken if it is an enemy."""
    destinations = []
    for ray in _line_rays(origin, rules):
        for pos in ray:
            target = board.get_piece(pos)
            if target == EMPTY:
                destinations.append(pos)
                continue
            if _is_enemy(piece, target):
                destinations.append(pos)
            break
    return destinations


def _cannon_destinations(board: Board, origin: Position, piece: int, rules: RuleConfig) -> List[Position]:
    """Jump exactly one non-Cannon screen; never capture a Cannon."""
    destinations = []
    for ray in _line_rays(origin, rules):
        screened = False
        for pos in ray:
            target = board.get_piece(pos)
            if not screened:
                if target == EMPTY:
                    continue
                if abs(target) == PieceType.CANNON:
                    break
                screened = True
                continue
            if target == EMPTY:
                destinations.append(pos)
                continue
            if abs(target) != PieceType.CANNON and _is_enemy(piece, target):
                destinations.append(pos)
            break
    return destinations


def _leaper_destinations(board: Board, origin: Position, piece: int, ways) -> List[Position]:
    destinations = []
    for way in ways:
        *legs, (d_row, d_col) = way
        to_pos = origin.offset(d_row, d_col)
        if not in_board(to_pos):
            continue
        if any(board.get_piece(origin.offset(*leg)) != EMPTY for leg in legs):
            continue
        if _can_land(piece, board.get_piece(to_pos)):
            destinations.append(to_pos)
    return destinations


def _horse_destinations(board: Board, origin: Position, piece: int, rules: RuleConfig) -> List[Position]:
    return _leaper_destinations(board, origin, piece, HORSE_WAYS)


def _elephant_destinations(board: Board, origin: Position, piece: int, rules: RuleConfig) -> List[Position]:
    return _leaper_destinations(board, origin, piece, ELEPHANT_WAYS)


def _palace_destinations(board: Board, origin: Position, piece: int, rules: RuleConfig) -> List[Position]:
    """Guard and General: one step, never leaving the own palace."""
    side = side_of(piece)
    line_steps = {ray[0] for ray in PALACE_DIAGONAL_RAYS.get(origin, ())}
    destinations = []
    for d_row, d_col in ORTHOGONAL + DIAGONAL:
        to_pos = origin.offset(d_row, d_col)
        if not in_palace(to_pos, side):
            continue
        if rules.palace_diagonals and d_row and d_col and to_pos not in line_steps:
            continue
        if _can_land(piece, board.get_piece(to_pos)):
            destinations.append(to_pos)
    return destinations


def _soldier_destinations(board: Board, origin: Position, piece: int, rules: RuleConfig) -> List[Position]:
    """Sideways or one step toward the opponent's back rank."""
    forward = side_of(piece).forward
    candidates = [origin.offset(d_row, d_col) for d_row, d_col in SOLDIER_SIDE_STEPS]
    candidates.append(origin.offset(forward, 0))
    if rules.palace_diagonals:
        for ray in PALACE_DIAGONAL_RAYS.get(origin, ()):
            if ray[0].row - origin.row == forward:
                candidates.append(ray[0])
    return [
        pos for pos in candidates
        if in_board(pos) and _can_land(piece, board.get_piece(pos))
    ]


_GENERATORS: Dict[PieceType, Callable[[Board, Position, int, RuleConfig], List[Position]]] = {
    PieceType.CHARIOT: _chariot_destinations,
    PieceType.CANNON: _cannon_destinations,
    PieceType.HORSE: _horse_destinations,
    PieceType.ELEPHANT: _elephant_destinations,
    PieceType.GUARD: _palace_destinations,
    PieceType.GENERAL: _palace_destinations,
    PieceType.SOLDIER: _soldier_destinations,
}


def _pseudo_destinations(board: Board, origin: Position, piece: int, rules: RuleConfig) -> List[Position]:
    return _GENERATORS[PieceType(abs(piece))](board, origin, piece, rules)


def is_general_exposed(board: Board, side: Side, rules: Optional[RuleConfig] = None) -> bool:
    """Check if any opponent piece could capture `side`'s General next ply.

    A board without that General is not considered exposed.
    """
    rules = replace(rules or DEFAULT_RULES, enforce_general_safety=False)
    generals = board.find(make_piece(side, PieceType.GENERAL))
    if not generals:
        return False
    general_pos = generals[0]
    for pos, piece in board.pieces(side.opponent):
        if general_pos in _pseudo_destinations(board, pos, piece, rules):
            return True
    return False


def get_legal_destinations(
    board: Board, origin: Position, side: Side, rules: Optional[RuleConfig] = None
) -> List[Position]:
    """Get legal destinations for the piece at `origin` if it belongs to `side`.

    Returns an empty list for an empty or out-of-range origin and for a
    piece of the other side.
    """
    rules = rules or DEFAULT_RULES
    piece = board.get_piece(origin)
    if piece == EMPTY or side_of(piece) != side:
        return []

    destinations = _pseudo_destinations(board, origin, piece, rules)
    if rules.enforce_general_safety:
        destinations = [
            to_pos for to_pos in destinations
            if not is_general_exposed(board.apply_move(Move(origin, to_pos)), side, rules)
        ]
    return destinations


def get_legal_moves(
    board: Board, origin: Position, side: Side, rules: Optional[RuleConfig] = None
) -> List[Move]:
    """Get all legal moves for a piece at given position."""
    return [Move(origin, to_pos) for to_pos in get_legal_destinations(board, origin, side, rules)]


def get_all_legal_moves(board: Board, side: Side, rules: Optional[RuleConfig] = None) -> List[Move]:
    """Get all legal moves for `side`, in row-major order of origin."""
    moves = []
    for origin, _ in board.pieces(side):
        moves.extend(get_legal_moves(board, origin, side, rules))
    return moves
