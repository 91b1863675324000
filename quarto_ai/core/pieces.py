"""
Pieces for the Quarto game.

Each piece carries four independent binary attributes. The full set holds
exactly one piece per attribute combination, sixteen in all.
"""
from dataclasses import dataclass
from typing import List, Tuple

from quarto_ai.core.constants import (
    Height, Color, Density, Shape, HEIGHTS, COLORS, DENSITIES, SHAPES,
    BODY_SYMBOLS, FACE_SYMBOLS
)


Attributes = Tuple[Height, Color, Density, Shape]


@dataclass(frozen=True)
class Piece:
    """
    Represents a single Quarto piece.

    Pieces are immutable and compare equal when all four attributes match.
    """
    height: Height
    color: Color
    density: Density
    shape: Shape

    @property
    def attributes(self) -> Attributes:
        """Get the attribute values in (height, color, density, shape) order."""
        return (self.height, self.color, self.density, self.shape)

    @property
    def symbol(self) -> str:
        """Get the two-character symbol used to display the piece."""
        return BODY_SYMBOLS[(self.color, self.height)] + FACE_SYMBOLS[(self.density, self.shape)]

    def describe(self) -> str:
        """
        Get a long, human-readable description of the piece.

        Returns:
            String such as "tall dark solid round"
        """
        return " ".join(attribute.value for attribute in self.attributes)

    def __str__(self) -> str:
        return self.symbol


def create_piece_set() -> List[Piece]:
    """
    Create the sixteen distinct pieces of a Quarto set.

    Returns:
        List of pieces, one per attribute combination
    """
    pieces = []
    for height in HEIGHTS:
        for color in COLORS:
            for density in DENSITIES:
                for shape in SHAPES:
                    pieces.append(Piece(height=height, color=color, density=density, shape=shape))
    return pieces


def find_piece(pieces: List[Piece], symbol: str) -> int:
    """
    Find the index of a piece by its display symbol.

    Args:
        pieces: Pieces to search
        symbol: Two-character symbol of the piece

    Returns:
        Index of the matching piece, or -1 if none matches
    """
    for idx, piece in enumerate(pieces):
        if piece.symbol == symbol:
            return idx
    return -1
