"""
Quarto AI - rules engine and Monte Carlo opponent for the board game Quarto.

This package provides a complete implementation of the Quarto rules, along
with a machine player that picks its moves by random rollouts under a fixed
simulation budget.
"""

__version__ = "0.1.0"
__author__ = "Quarto AI Team"

# Make key components available at package level
from quarto_ai.core.game import Game, GameState, new_game
from quarto_ai.core.phases import Actor
from quarto_ai.core.pieces import Piece
from quarto_ai.montecarlo.agent import MachinePlayer
from quarto_ai.montecarlo.config import ScorerConfig

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
