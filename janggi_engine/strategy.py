"""AI move selection.

No search is performed here: a strategy only picks one move out of the
legal move list. `RandomStrategy` is the default; `MaterialGreedyStrategy`
looks one ply ahead using a plain material count.
"""

import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import numpy as np

from .board import Board, Move, Side
from .config import RuleConfig
from .moves import get_all_legal_moves

# Indexed by piece magnitude: empty, soldier, elephant, horse, cannon,
# chariot, guard, general
PIECE_VALUES = np.array([0, 2, 3, 5, 7, 13, 3, 10000], dtype=np.int64)


def evaluate_material(board: Board) -> int:
    """Material balance; positive favours Han, negative favours Cho."""
    grid = board.grid.astype(np.int64)
    return int(np.sum(np.sign(grid) * PIECE_VALUES[np.abs(grid)]))


class MoveStrategy(ABC):
    """Picks one move out of a list of legal moves."""

    name = "base"

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    @abstractmethod
    def choose(self, board: Board, side: Side, moves: List[Move]) -> Optional[Move]:
        """Return one of `moves`, or None if the list is empty."""


class RandomStrategy(MoveStrategy):
    """Uniform random choice."""

    name = "random"

    def choose(self, board: Board, side: Side, moves: List[Move]) -> Optional[Move]:
        if not moves:
            return None
        return self.rng.choice(moves)


class MaterialGreedyStrategy(MoveStrategy):
    """Take the move with the best material balance after one ply.

    Ties are broken at random, so from a quiet position this behaves like
    `RandomStrategy`.
    """

    name = "greedy"

    def choose(self, board: Board, side: Side, moves: List[Move]) -> Optional[Move]:
        if not moves:
            return None
        scores = [evaluate_material(board.apply_move(move)) * side.sign for move in moves]
        best = max(scores)
        return self.rng.choice([move for move, score in zip(moves, scores) if score == best])


STRATEGIES: Dict[str, Type[MoveStrategy]] = {
    RandomStrategy.name: RandomStrategy,
    MaterialGreedyStrategy.name: MaterialGreedyStrategy,
}


def get_strategy(name: str, seed: Optional[int] = None) -> MoveStrategy:
    """Instantiate a strategy by name ("random" or "greedy")."""
    try:
        strategy_cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown strategy {name!r}; choose from {sorted(STRATEGIES)}") from None
    return strategy_cls(seed=seed)


def get_ai_move(
    board: Board,
    side: Side,
    strategy: Optional[MoveStrategy] = None,
    rules: Optional[RuleConfig] = None,
) -> Optional[Move]:
    """Pick a move for `side`, or None if it has no legal move.

    None does not say whether the game is over; consult
    `get_game_result` for that.
    """
    moves = get_all_legal_moves(board, side, rules)
    return (strategy or RandomStrategy()).choose(board, side, moves)
