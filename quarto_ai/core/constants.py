"""
Constants for the Quarto game.

This module defines the game constants used throughout the Quarto implementation,
including the four piece attributes, board dimensions, display symbols and the
default simulation budget for the machine player.
"""
import sys
from enum import Enum
from typing import Dict, Final, List, Tuple


class Height(Enum):
    """Enum representing the height of a piece."""
    TALL = "tall"
    SHORT = "short"


class Color(Enum):
    """Enum representing the color of a piece."""
    DARK = "dark"
    LIGHT = "light"


class Density(Enum):
    """Enum representing whether a piece is solid or hollow."""
    SOLID = "solid"
    HOLLOW = "hollow"


class Shape(Enum):
    """Enum representing the shape of a piece."""
    ROUND = "round"
    SQUARE = "square"


# Enumeration order used when the piece set is generated
HEIGHTS: Final[List[Height]] = [Height.TALL, Height.SHORT]
COLORS: Final[List[Color]] = [Color.DARK, Color.LIGHT]
DENSITIES: Final[List[Density]] = [Density.SOLID, Density.HOLLOW]
SHAPES: Final[List[Shape]] = [Shape.SQUARE, Shape.ROUND]

# Board limits
BOARD_SIZE: Final[int] = 4
NUM_PIECES: Final[int] = 16

# Coordinates of the two full-length diagonals
DOWNWARD_DIAGONAL: Final[Tuple[Tuple[int, int], ...]] = ((0, 0), (1, 1), (2, 2), (3, 3))
UPWARD_DIAGONAL: Final[Tuple[Tuple[int, int], ...]] = ((0, 3), (1, 2), (2, 1), (3, 0))

# First symbol character, keyed by (color, height)
BODY_SYMBOLS: Final[Dict[Tuple[Color, Height], str]] = {
    (Color.DARK, Height.TALL): "D",
    (Color.DARK, Height.SHORT): "d",
    (Color.LIGHT, Height.TALL): "L",
    (Color.LIGHT, Height.SHORT): "l",
}

# Second symbol character, keyed by (density, shape)
FACE_SYMBOLS: Final[Dict[Tuple[Density, Shape], str]] = {
    (Density.HOLLOW, Shape.ROUND): "○",
    (Density.HOLLOW, Shape.SQUARE): "□",
    (Density.SOLID, Shape.ROUND): "●",
    (Density.SOLID, Shape.SQUARE): "■",
}

# Rollout outcomes, from the machine's point of view
MACHINE_WIN_SCORE: Final[int] = 1
HUMAN_WIN_SCORE: Final[int] = -1
DRAW_SCORE: Final[int] = 0

# Score given to a placement that wins on the spot
MAX_SCORE: Final[int] = sys.maxsize

# Simulation budget settings
DEFAULT_SIMULATIONS: Final[int] = 10000
DEFAULT_TIME_LIMIT: Final[float] = 1.0  # Seconds per decision
