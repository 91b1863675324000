"""
Win detection for the Quarto game.

A line (row, column or full diagonal) wins when all four squares are occupied
and the four pieces share at least one attribute value. Only the lines through
the square just played are checked.
"""
from typing import List, Optional, Sequence

from quarto_ai.core.board import Board, Coord
from quarto_ai.core.constants import (
    BOARD_SIZE, DOWNWARD_DIAGONAL, UPWARD_DIAGONAL
)
from quarto_ai.core.pieces import Piece


def matching_pieces(line: Sequence[Optional[Piece]]) -> bool:
    """
    Check whether a full line of pieces shares an attribute.

    Candidate attributes are seeded from the first piece and dropped as soon as
    a later piece disagrees.

    Args:
        line: Contents of the four squares of a line

    Returns:
        True if every square is occupied and at least one attribute matches
    """
    if any(piece is None for piece in line):
        return False

    candidates: List[Optional[object]] = list(line[0].attributes)
    for piece in line[1:]:
        for idx, value in enumerate(piece.attributes):
            if candidates[idx] != value:
                candidates[idx] = None
        if all(candidate is None for candidate in candidates):
            return False
    return True


def winning_row(board: Board, square: Coord) -> bool:
    row_idx = square[0]
    return matching_pieces(board.line((row_idx, col) for col in range(BOARD_SIZE)))


def winning_column(board: Board, square: Coord) -> bool:
    col_idx = square[1]
    return matching_pieces(board.line((row, col_idx) for row in range(BOARD_SIZE)))


def winning_downward_diagonal(board: Board, square: Coord) -> bool:
    """Check the top-left to bottom-right diagonal, if the square lies on it."""
    if square[0] != square[1]:
        return False
    return matching_pieces(board.line(DOWNWARD_DIAGONAL))


def winning_upward_diagonal(board: Board, square: Coord) -> bool:
    """Check the bottom-left to top-right diagonal, if the square lies on it."""
    if square[0] + square[1] != BOARD_SIZE - 1:
        return False
    return matching_pieces(board.line(UPWARD_DIAGONAL))


def is_win(board: Board, square: Coord) -> bool:
    """
    Check whether the piece just played on a square completed a line.

    Lines are checked in order row, column, downward diagonal, upward
    diagonal, stopping at the first win.

    Args:
        board: Board after the piece was placed
        square: Square the piece was placed on

    Returns:
        True if the move won the game
    """
    return (
        winning_row(board, square)
        or winning_column(board, square)
        or winning_downward_diagonal(board, square)
        or winning_upward_diagonal(board, square)
    )


def board_has_win(board: Board) -> bool:
    """
    Check every line of the board for a win.

    Returns:
        True if any row, column or diagonal wins
    """
    for idx in range(BOARD_SIZE):
        if winning_row(board, (idx, 0)) or winning_column(board, (0, idx)):
            return True
    return winning_downward_diagonal(board, (0, 0)) or winning_upward_diagonal(board, (0, BOARD_SIZE - 1))
