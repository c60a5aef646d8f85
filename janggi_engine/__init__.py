"""Korean Janggi rules engine."""

from .board import (
    Board, Move, Position, Side, PieceType, Setup, EMPTY,
    create_initial_board, apply_move, get_piece, make_piece, piece_type_of,
    in_board, in_palace, is_han_piece, is_cho_piece, side_of,
)
from .config import RuleConfig, SessionConfig, DEFAULT_RULES
from .moves import (
    get_legal_destinations, get_legal_moves, get_all_legal_moves,
    is_general_exposed, HORSE_WAYS, ELEPHANT_WAYS, PALACE_DIAGONAL_RAYS,
)
from .result import GameResult, get_game_result
from .strategy import (
    MoveStrategy, RandomStrategy, MaterialGreedyStrategy,
    evaluate_material, get_ai_move, get_strategy, STRATEGIES,
)
from .notation import position_to_notation, notation_to_position, move_to_notation, notation_to_move
from .fen import board_to_fen, fen_to_board, engine_move_to_move, move_to_engine_move
from .session import GameSession, PlayerType, SessionStats

__all__ = [
    # Board
    'Board', 'Move', 'Position', 'Side', 'PieceType', 'Setup', 'EMPTY',
    'create_initial_board', 'apply_move', 'get_piece', 'make_piece', 'piece_type_of',
    'in_board', 'in_palace', 'is_han_piece', 'is_cho_piece', 'side_of',
    # Rules
    'RuleConfig', 'SessionConfig', 'DEFAULT_RULES',
    # Move generation
    'get_legal_destinations', 'get_legal_moves', 'get_all_legal_moves',
    'is_general_exposed', 'HORSE_WAYS', 'ELEPHANT_WAYS', 'PALACE_DIAGONAL_RAYS',
    # Game result
    'GameResult', 'get_game_result',
    # Move selection
    'MoveStrategy', 'RandomStrategy', 'MaterialGreedyStrategy',
    'evaluate_material', 'get_ai_move', 'get_strategy', 'STRATEGIES',
    # Notation
    'position_to_notation', 'notation_to_position', 'move_to_notation', 'notation_to_move',
    'board_to_fen', 'fen_to_board', 'engine_move_to_move', 'move_to_engine_move',
    # Session
    'GameSession', 'PlayerType', 'SessionStats',
]
