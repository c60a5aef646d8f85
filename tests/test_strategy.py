"""Unit tests for AI move selection."""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from janggi_engine import (
    Board, Move, Position, Side, EMPTY,
    create_initial_board, get_all_legal_moves, get_ai_move, get_strategy,
    evaluate_material, RandomStrategy, MaterialGreedyStrategy, STRATEGIES,
)


class TestEvaluation:
    """Test material evaluation."""

    def test_initial_balanced(self):
        assert evaluate_material(create_initial_board()) == 0

    def test_missing_chariot(self):
        board = create_initial_board().with_pieces({Position(0, 0): EMPTY})
        assert evaluate_material(board) == 13

    def test_sign(self):
        board = create_initial_board().with_pieces({Position(9, 1): EMPTY})
        assert evaluate_material(board) == -5


class TestStrategies:
    """Test move strategies."""

    def test_random_returns_legal_move(self):
        board = create_initial_board()
        moves = get_all_legal_moves(board, Side.CHO)

        move = RandomStrategy(seed=1).choose(board, Side.CHO, moves)

        assert move in moves

    def test_seed_is_reproducible(self):
        board = create_initial_board()
        moves = get_all_legal_moves(board, Side.HAN)

        first = [RandomStrategy(seed=42).choose(board, Side.HAN, moves) for _ in range(3)]

        assert len(set(first)) == 1

    def test_empty_list(self):
        board = create_initial_board()
        assert RandomStrategy().choose(board, Side.HAN, []) is None
        assert MaterialGreedyStrategy().choose(board, Side.HAN, []) is None

    def test_greedy_takes_best_capture(self):
        board = Board.from_dict({"a5": "hR", "f5": "cH", "a0": "cR"})
        moves = get_all_legal_moves(board, Side.HAN)

        move = MaterialGreedyStrategy(seed=0).choose(board, Side.HAN, moves)

        assert move == Move(Position(5, 0), Position(0, 0))

    def test_greedy_for_cho(self):
        board = Board.from_dict({"a5": "cR", "f5": "hC", "a8": "hP"})
        moves = get_all_legal_moves(board, Side.CHO)

        move = MaterialGreedyStrategy(seed=0).choose(board, Side.CHO, moves)

        assert move == Move(Position(5, 0), Position(5, 5))

    def test_get_strategy(self):
        assert isinstance(get_strategy("random"), RandomStrategy)
        assert isinstance(get_strategy("greedy", seed=3), MaterialGreedyStrategy)
        assert set(STRATEGIES) == {"random", "greedy"}
        with pytest.raises(ValueError):
            get_strategy("minimax")


class TestGetAIMove:
    """Test the AI move entry point."""

    @pytest.mark.parametrize("side", list(Side))
    def test_move_is_legal(self, side):
        board = create_initial_board()
        move = get_ai_move(board, side, RandomStrategy(seed=5))
        assert move in get_all_legal_moves(board, side)

    def test_default_strategy(self):
        board = create_initial_board()
        assert get_ai_move(board, Side.HAN) in get_all_legal_moves(board, Side.HAN)

    def test_board_not_modified(self):
        board = create_initial_board()
        get_ai_move(board, Side.CHO, MaterialGreedyStrategy())
        assert board == create_initial_board()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
