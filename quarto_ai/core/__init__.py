"""
Quarto AI Core Package

This package contains the core game logic for Quarto, including:
- Piece and attribute definitions
- The board and coordinate helpers
- Win detection
- Turn phases and the game state machine
- Human input collaborators

All core components can be imported directly from this package.
"""

# Constants
from quarto_ai.core.constants import (
    Height, Color, Density, Shape,
    BOARD_SIZE, NUM_PIECES, MAX_SCORE
)

# Pieces and board
from quarto_ai.core.pieces import Piece, create_piece_set, find_piece
from quarto_ai.core.board import Board, Coord, is_valid_coordinate, parse_square

# Rules
from quarto_ai.core.rules import is_win, matching_pieces, board_has_win

# Phases
from quarto_ai.core.phases import (
    Actor, Win, Draw, Resolution,
    Placed, Staged, Transitioning, Finished, Phase,
    describe_phase
)

# Human input
from quarto_ai.core.player import HumanInput, ScriptedHuman, RandomHuman

# Game
from quarto_ai.core.game import (
    Game, GameState, MoveRecord, InvalidMoveError, TickInvariantError, new_game
)

__all__ = [
    # Constants
    'Height', 'Color', 'Density', 'Shape',
    'BOARD_SIZE', 'NUM_PIECES', 'MAX_SCORE',

    # Pieces and board
    'Piece', 'create_piece_set', 'find_piece',
    'Board', 'Coord', 'is_valid_coordinate', 'parse_square',

    # Rules
    'is_win', 'matching_pieces', 'board_has_win',

    # Phases
    'Actor', 'Win', 'Draw', 'Resolution',
    'Placed', 'Staged', 'Transitioning', 'Finished', 'Phase',
    'describe_phase',

    # Human input
    'HumanInput', 'ScriptedHuman', 'RandomHuman',

    # Game
    'Game', 'GameState', 'MoveRecord', 'InvalidMoveError', 'TickInvariantError',
    'new_game'
]
