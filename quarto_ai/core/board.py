"""
Board representation for the Quarto game.

The board is a fixed 4x4 grid of optional piece slots. Squares are addressed
by (row, column) coordinates in [0, 4).
"""
import re
from typing import Iterable, Iterator, List, Optional, Tuple

from quarto_ai.core.constants import BOARD_SIZE
from quarto_ai.core.pieces import Piece


Coord = Tuple[int, int]


def is_valid_coordinate(coord: Coord) -> bool:
    """Check whether a coordinate lies on the board."""
    row, col = coord
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def parse_square(text: str) -> Optional[Coord]:
    """
    Parse a square typed by a player.

    Accepts "12" (row 1, column 2), "1 2" or "1,2".

    Args:
        text: Raw input

    Returns:
        Coordinate, or None if the input cannot be parsed or is off the board
    """
    text = text.strip()
    if re.fullmatch(r"\d\d", text, re.ASCII):
        n = int(text)
        coord = (n // 10, n % 10)
    else:
        match = re.fullmatch(r"(\d+)\s*[, ]\s*(\d+)", text, re.ASCII)
        if match is None:
            return None
        coord = (int(match.group(1)), int(match.group(2)))

    if not is_valid_coordinate(coord):
        return None
    return coord


class Board:
    """
    A 4x4 Quarto board.

    A square, once occupied, keeps its piece for the rest of the game. Only
    scratch copies used during simulation clear squares again.
    """

    def __init__(self, grid: Optional[List[List[Optional[Piece]]]] = None):
        if grid is None:
            grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        if len(grid) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in grid):
            raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}")
        self._grid = grid

    def get(self, coord: Coord) -> Optional[Piece]:
        """Get the piece on a square, or None if it is empty."""
        return self._grid[coord[0]][coord[1]]

    def is_empty(self, coord: Coord) -> bool:
        return self._grid[coord[0]][coord[1]] is None

    def place(self, coord: Coord, piece: Piece) -> None:
        """
        Put a piece on an empty square.

        Args:
            coord: Target square
            piece: Piece to place

        Raises:
            ValueError: If the square is off the board or already occupied
        """
        if not is_valid_coordinate(coord):
            raise ValueError(f"Square {coord} is off the board")
        if not self.is_empty(coord):
            raise ValueError(f"Square {coord} is already occupied")
        self._grid[coord[0]][coord[1]] = piece

    def clear(self, coord: Coord) -> Optional[Piece]:
        """
        Remove and return the piece on a square.

        Only used on scratch copies during simulation.
        """
        piece = self._grid[coord[0]][coord[1]]
        self._grid[coord[0]][coord[1]] = None
        return piece

    def empty_squares(self) -> List[Coord]:
        """
        Get all empty squares.

        Returns:
            Empty coordinates in row-major order
        """
        return [
            (row_idx, col_idx)
            for row_idx, row in enumerate(self._grid)
            for col_idx, cell in enumerate(row)
            if cell is None
        ]

    def line(self, coords: Iterable[Coord]) -> List[Optional[Piece]]:
        """Get the contents of the given squares."""
        return [self._grid[row][col] for row, col in coords]

    @property
    def placed_count(self) -> int:
        """Get the number of pieces on the board."""
        return sum(1 for row in self._grid for cell in row if cell is not None)

    def is_full(self) -> bool:
        return self.placed_count == BOARD_SIZE * BOARD_SIZE

    def rows(self) -> Iterator[List[Optional[Piece]]]:
        """Iterate over copies of the board rows, top to bottom."""
        for row in self._grid:
            yield list(row)

    def clone(self) -> "Board":
        """
        Create an independent copy of the board.

        Pieces are immutable, so copying the rows is enough.
        """
        return Board([list(row) for row in self._grid])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __str__(self) -> str:
        lines = []
        for row in self._grid:
            lines.append(" ".join(cell.symbol if cell is not None else ".." for cell in row))
        return "\n".join(lines)
