"""
Monte Carlo move scoring for Quarto.

The machine player cannot enumerate the full game tree in interactive time,
so it scores each candidate decision with random playouts:
1. Placement: for every empty square, place the staged piece there, then for
   every piece that could be handed back run random rollouts and keep the
   best piece's total. A square that wins on the spot is taken immediately.
2. Staging: for the opening hand-over, score each piece by rollouts in which
   the human drops it on a random square.

Rollouts run on clones of the game state and share its random source. The
budget is split evenly across candidates; a candidate whose time slice runs
out skips its remaining rollouts.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple
import time

from loguru import logger

from quarto_ai.core.board import Coord
from quarto_ai.core.constants import (
    MACHINE_WIN_SCORE, HUMAN_WIN_SCORE, DRAW_SCORE, MAX_SCORE
)
from quarto_ai.core.phases import Actor
from quarto_ai.core.pieces import Piece
from quarto_ai.core.rules import is_win
from quarto_ai.montecarlo.config import ScorerConfig

if TYPE_CHECKING:
    from quarto_ai.core.game import GameState


Clock = Callable[[], float]


@dataclass(frozen=True)
class ScoredPlacement:
    """
    Score of placing the staged piece on a square.

    next_piece is the index of the best piece to hand back afterwards, or None
    when the placement wins outright or no pieces are left.
    """
    square: Coord
    next_piece: Optional[int]
    score: int

    def __str__(self) -> str:
        return f"Position {self.square[0]} {self.square[1]} Next {self.next_piece} - {self.score}"


def _outcome(player: Actor) -> int:
    return MACHINE_WIN_SCORE if player is Actor.MACHINE else HUMAN_WIN_SCORE


def placement_score(state: GameState, piece: Piece, player: Actor) -> int:
    """
    Play out the rest of a game at random.

    The piece goes on the first empty square (row-major) where it wins. If no
    square wins it goes on a random empty square and play continues with a
    random hand-over to the other side.

    The state is consumed; pass a clone.

    Args:
        state: Scratch game state
        piece: Piece to place
        player: Actor placing the piece

    Returns:
        1 if the machine wins, -1 if the human wins, 0 for a draw
    """
    board = state.board
    for square in board.empty_squares():
        board.place(square, piece)
        if is_win(board, square):
            return _outcome(player)
        board.clear(square)

    board.place(state.rng.choice(board.empty_squares()), piece)
    return stage_score(state, player)


def stage_score(state: GameState, player: Actor) -> int:
    """
    Hand a random piece to the other side and keep playing.

    Args:
        state: Scratch game state
        player: Actor who just placed and now stages

    Returns:
        Rollout outcome from the machine's point of view
    """
    if not state.pieces:
        return DRAW_SCORE

    piece = state.pieces.pop(state.rng.randrange(len(state.pieces)))
    return placement_score(state, piece, player.toggle())


def _new_stats(slices: int, rollouts_per_slice: int, slice_budget: float) -> Dict[str, Any]:
    return {
        "slices": slices,
        "rollouts_per_slice": rollouts_per_slice,
        "slice_budget": slice_budget,
        "rollouts": 0,
        "slices_cut_short": 0,
        "candidates_evaluated": 0,
        "immediate_win": False,
        "time_elapsed": 0.0,
    }


def _run_slice(
    rollout: Callable[[], int],
    rollouts: int,
    budget: float,
    clock: Clock,
    stats: Dict[str, Any]
) -> int:
    """
    Run up to `rollouts` rollouts within a time budget and sum their outcomes.

    Rollouts left when the budget runs out are skipped, not counted.
    """
    total = 0
    start = clock()
    for n in range(rollouts):
        elapsed = clock() - start
        if elapsed > budget:
            logger.debug(f"Bailing due to time. Iterations: {n}, Time: {elapsed:.4f}s")
            stats["slices_cut_short"] += 1
            break
        total += rollout()
        stats["rollouts"] += 1
    return total


def score_placements(
    state: GameState,
    piece: Piece,
    config: Optional[ScorerConfig] = None,
    clock: Clock = time.monotonic
) -> Tuple[List[ScoredPlacement], Dict[str, Any]]:
    """
    Score every square for the staged piece together with the piece to hand back.

    Squares are tried in row-major order. A square where the piece wins
    immediately gets MAX_SCORE and ends the search.

    Args:
        state: Current game state (left untouched)
        piece: Piece the machine must place
        config: Simulation budget
        clock: Monotonic time source, in seconds

    Returns:
        Tuple of (scored placements in evaluation order, search statistics)
    """
    if config is None:
        config = ScorerConfig()

    squares = state.board.empty_squares()
    piece_count = len(state.pieces)

    # Every square/piece pair is a slice of the budget
    slices = len(squares) * max(1, piece_count)
    rollouts_per_slice = config.rollouts_per_slice(slices)
    slice_budget = config.time_per_slice(slices)

    stats = _new_stats(slices, rollouts_per_slice, slice_budget)
    start_time = clock()
    scores: List[ScoredPlacement] = []

    for square in squares:
        game = state.clone()
        game.board.place(square, piece)
        stats["candidates_evaluated"] += 1

        if is_win(game.board, square):
            # Always take the win if available
            scores.append(ScoredPlacement(square, None, MAX_SCORE))
            stats["immediate_win"] = True
            break

        if piece_count == 0:
            scores.append(ScoredPlacement(square, None, DRAW_SCORE))
            continue

        piece_scores = [0] * piece_count
        for idx in range(piece_count):
            def rollout(idx: int = idx) -> int:
                trial = game.clone()
                next_piece = trial.pieces.pop(idx)
                return placement_score(trial, next_piece, Actor.HUMAN)

            piece_scores[idx] = _run_slice(rollout, rollouts_per_slice, slice_budget, clock, stats)

        best_idx = max(range(piece_count), key=lambda i: piece_scores[i])
        scores.append(ScoredPlacement(square, best_idx, piece_scores[best_idx]))

    stats["time_elapsed"] = clock() - start_time

    for scored in sorted(scores, key=lambda s: s.score):
        logger.debug(str(scored))

    return scores, stats


def select_placement(scores: List[ScoredPlacement]) -> ScoredPlacement:
    """
    Pick the highest scoring placement.

    Ties go to the first one evaluated.

    Raises:
        ValueError: If there are no scored placements
    """
    if not scores:
        raise ValueError("No placements to choose from")
    return max(scores, key=lambda scored: scored.score)


def score_staging(
    state: GameState,
    config: Optional[ScorerConfig] = None,
    clock: Clock = time.monotonic
) -> Tuple[List[int], Dict[str, Any]]:
    """
    Score every remaining piece as the one to hand to the human.

    Each rollout drops the piece on a random empty square for the human,
    then plays out the game at random.

    Args:
        state: Current game state (left untouched)
        config: Simulation budget
        clock: Monotonic time source, in seconds

    Returns:
        Tuple of (accumulated score per piece index, search statistics)

    Raises:
        ValueError: If no pieces are left
    """
    if config is None:
        config = ScorerConfig()

    piece_count = len(state.pieces)
    if piece_count == 0:
        raise ValueError("No pieces left to stage")

    rollouts_per_slice = config.rollouts_per_slice(piece_count)
    slice_budget = config.time_per_slice(piece_count)

    stats = _new_stats(piece_count, rollouts_per_slice, slice_budget)
    start_time = clock()
    piece_scores = [0] * piece_count

    for idx in range(piece_count):
        def rollout(idx: int = idx) -> int:
            trial = state.clone()
            piece = trial.pieces.pop(idx)
            square = trial.rng.choice(trial.board.empty_squares())
            trial.board.place(square, piece)
            if is_win(trial.board, square):
                return HUMAN_WIN_SCORE
            return stage_score(trial, Actor.HUMAN)

        piece_scores[idx] = _run_slice(rollout, rollouts_per_slice, slice_budget, clock, stats)
        stats["candidates_evaluated"] += 1

    stats["time_elapsed"] = clock() - start_time
    logger.debug(f"Staging scores: {piece_scores}")

    return piece_scores, stats


def select_stage(piece_scores: List[int]) -> int:
    """
    Pick the index of the highest scoring piece.

    Ties go to the lowest index.

    Raises:
        ValueError: If there are no scores
    """
    if not piece_scores:
        raise ValueError("No pieces to choose from")
    return max(range(len(piece_scores)), key=lambda i: piece_scores[i])
