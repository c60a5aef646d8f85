"""Unit tests for square notation and FEN conversion."""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from janggi_engine import (
    Board, Move, Position, Side, Setup, create_initial_board,
    position_to_notation, notation_to_position, move_to_notation, notation_to_move,
    board_to_fen, fen_to_board, engine_move_to_move, move_to_engine_move,
)

INITIAL_FEN = "rnba1abnr/4k4/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/4K4/RNBA1ABNR w - - 0 1"


class TestSquareNotation:
    """Test algebraic square conversion."""

    def test_position_to_notation(self):
        assert position_to_notation(Position(4, 4)) == "e4"
        assert position_to_notation(Position(0, 0)) == "a0"
        assert position_to_notation(Position(9, 8)) == "i9"

    def test_notation_to_position(self):
        assert notation_to_position("e4") == Position(4, 4)
        assert notation_to_position("a6") == Position(6, 0)
        assert notation_to_position("i9") == Position(9, 8)

    @pytest.mark.parametrize("square", ["", "e", "e10", "j1", "E4", "ex", "4e", "e-"])
    def test_malformed(self, square):
        assert notation_to_position(square) is None

    def test_all_squares(self):
        for row in range(10):
            for col in range(9):
                pos = Position(row, col)
                assert notation_to_position(position_to_notation(pos)) == pos

    def test_move_notation(self):
        move = Move(Position(6, 0), Position(5, 0))
        assert move_to_notation(move) == "a6a5"
        assert move.to_uci() == "a6a5"
        assert notation_to_move("a6a5") == move
        assert Move.from_uci("a6a5") == move

    def test_malformed_move(self):
        assert notation_to_move("a6a") is None
        assert notation_to_move("z6a5") is None
        with pytest.raises(ValueError):
            Move.from_uci("a6")
        with pytest.raises(ValueError):
            Move.from_uci("z6a5")

    def test_custom_setup_uses_square_notation(self):
        """Board.from_dict reads squares the same way as notation_to_position."""
        board = Board.from_dict({"i9": "hR", "e10": "cR", "j1": "cR"})
        assert list(board.pieces()) == [(notation_to_position("i9"), 5)]


class TestFEN:
    """Test FEN conversion for external engines."""

    def test_initial_position(self):
        assert board_to_fen(create_initial_board(), Side.HAN) == INITIAL_FEN

    def test_cho_to_move(self):
        fen = board_to_fen(create_initial_board(), Side.CHO, move_number=3)
        assert fen.endswith(" b - - 0 3")

    def test_parse_initial(self):
        board, side = fen_to_board(INITIAL_FEN)
        assert board == create_initial_board()
        assert side == Side.HAN

    def test_parse_other_setups(self):
        board = create_initial_board(Setup.SMSM, Setup.MSMS)
        parsed, side = fen_to_board(board_to_fen(board, Side.CHO))
        assert parsed == board
        assert side == Side.CHO

    @pytest.mark.parametrize("fen", [
        "",
        "9/9/9 w - - 0 1",
        "rnba1abnr/4k4/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/4K4/RNBA1ABNX w - - 0 1",
        "rnba1abnr/4k4/1c5c1/p1p1p1p1p/9/8/P1P1P1P1P/1C5C1/4K4/RNBA1ABNR w - - 0 1",
        "rnba1abnr/4k4/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/4K4/RNBA1ABNR x - - 0 1",
        "rnba1abnr/4k4/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/3KK4/RNBA1ABNR w - - 0 1",
    ])
    def test_invalid_fen(self, fen):
        with pytest.raises(ValueError):
            fen_to_board(fen)

    def test_engine_moves(self):
        """Engine ranks count 1-10 from Han's back rank."""
        assert engine_move_to_move("a1a2") == Move(Position(9, 0), Position(8, 0))
        assert engine_move_to_move("e10e9") == Move(Position(0, 4), Position(1, 4))
        assert move_to_engine_move(Move(Position(6, 0), Position(5, 0))) == "a4a5"
        with pytest.raises(ValueError):
            engine_move_to_move("a0a1")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
