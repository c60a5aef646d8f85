"""Unit tests for game termination detection."""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from janggi_engine import (
    Board, Move, Position, Side, GameResult, EMPTY,
    create_initial_board, get_game_result, get_all_legal_moves, get_ai_move,
)


class TestGameResult:
    """Test board classification."""

    def test_initial_is_ongoing(self):
        assert get_game_result(create_initial_board()) == GameResult.ONGOING

    def test_han_general_removed(self):
        board = create_initial_board().with_pieces({Position(8, 4): EMPTY})
        assert get_game_result(board) == GameResult.CHO_WINS

    def test_cho_general_removed(self):
        board = create_initial_board().with_pieces({Position(1, 4): EMPTY})
        assert get_game_result(board) == GameResult.HAN_WINS

    def test_capture_ends_game(self):
        """Capturing the General by a legal move decides the game."""
        board = Board.from_dict({"e8": "hK", "e1": "cK", "e5": "cR"})
        move = Move(Position(5, 4), Position(8, 4))
        assert move in get_all_legal_moves(board, Side.CHO)

        assert get_game_result(board.apply_move(move)) == GameResult.CHO_WINS

    def test_bikjang_draw(self):
        """The winner's General inside the loser's band makes it a draw."""
        board = Board.from_dict({"e8": "hK", "d7": "cK", "e5": "cR"})

        after = board.apply_move(Move(Position(5, 4), Position(8, 4)))

        assert get_game_result(after) == GameResult.DRAW

    def test_bikjang_draw_mirrored(self):
        board = Board.from_dict({"f2": "hK", "e8": "cK"})
        assert get_game_result(board) == GameResult.DRAW

    def test_general_outside_palace_band(self):
        """A General moved out of its band counts as gone."""
        board = Board.from_dict({"e5": "hK", "e1": "cK"})
        assert get_game_result(board) == GameResult.CHO_WINS

    def test_idempotent(self):
        board = create_initial_board()
        assert get_game_result(board) == get_game_result(board)

    def test_result_helpers(self):
        assert GameResult.HAN_WINS.winner == Side.HAN
        assert GameResult.DRAW.winner is None
        assert GameResult.DRAW.is_over
        assert not GameResult.ONGOING.is_over
        assert GameResult.win_for(Side.CHO) == GameResult.CHO_WINS


class TestNoLegalMoves:
    """A side can be left without moves while the board is still ongoing."""

    def setup_method(self):
        self.board = Board.from_dict({
            "d9": "hK",
            "e9": "hC",
            "d8": "hC",
            "e8": "hC",
            "c9": "cC",
            "f1": "cK",
        })

    def test_ongoing_but_stuck(self):
        assert get_game_result(self.board) == GameResult.ONGOING
        assert get_all_legal_moves(self.board, Side.HAN) == []

    def test_ai_returns_none(self):
        assert get_ai_move(self.board, Side.HAN) is None

    def test_other_side_can_move(self):
        assert get_all_legal_moves(self.board, Side.CHO)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
