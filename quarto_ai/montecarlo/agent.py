"""
Monte Carlo machine player for Quarto.

This module provides the MachinePlayer class, which makes the machine's
decisions in a game: where to place the piece it was handed together with
which piece to hand back, and which piece to hand over on the opening move.
It keeps statistics about each search.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple
import time

from loguru import logger

from quarto_ai.core.pieces import Piece
from quarto_ai.montecarlo.config import ScorerConfig
from quarto_ai.montecarlo.search import (
    Clock, ScoredPlacement, score_placements, score_staging,
    select_placement, select_stage
)

if TYPE_CHECKING:
    from quarto_ai.core.game import GameState


class MachinePlayer:
    """
    Machine player driven by Monte Carlo rollouts.

    The player never mutates the state it is given; all simulation happens on
    clones.
    """

    def __init__(
        self,
        config: Optional[ScorerConfig] = None,
        name: str = "Machine",
        verbose: bool = False,
        clock: Clock = time.monotonic
    ):
        """
        Initialize a machine player.

        Args:
            config: Simulation budget
            name: Name of the player
            verbose: Whether to log a summary of every search
            clock: Monotonic time source used for budget accounting
        """
        self.config = config or ScorerConfig()
        self.name = name
        self.verbose = verbose
        self.clock = clock

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # Every decision taken, with its statistics
        self.decision_history: List[Tuple[str, Dict[str, Any]]] = []

    def choose_placement(self, state: GameState, piece: Piece) -> ScoredPlacement:
        """
        Choose a square for the staged piece and the piece to hand back.

        Args:
            state: Current game state
            piece: Piece the machine must place

        Returns:
            Selected placement
        """
        scores, stats = score_placements(state, piece, self.config, self.clock)
        decision = select_placement(scores)

        stats["decision"] = str(decision)
        self._record("place", stats)
        return decision

    def choose_stage(self, state: GameState) -> int:
        """
        Choose which piece to hand to the human.

        Args:
            state: Current game state

        Returns:
            Index into state.pieces
        """
        piece_scores, stats = score_staging(state, self.config, self.clock)
        piece_index = select_stage(piece_scores)

        stats["decision"] = f"Stage {state.pieces[piece_index].symbol} - {piece_scores[piece_index]}"
        self._record("stage", stats)
        return piece_index

    def _record(self, kind: str, stats: Dict[str, Any]) -> None:
        elapsed = stats["time_elapsed"]
        stats["rollouts_per_second"] = stats["rollouts"] / max(0.001, elapsed)

        self.last_stats = stats
        self.decision_history.append((kind, stats))

        if self.verbose:
            self._log_search_info(stats)

    def _log_search_info(self, stats: Dict[str, Any]) -> None:
        logger.info(f"{self.name} selected: {stats['decision']}")
        logger.info(
            f"Rollouts: {stats['rollouts']} over {stats['candidates_evaluated']} candidates, "
            f"{stats['slices_cut_short']} slices cut short"
        )
        logger.info(f"Time: {stats['time_elapsed']:.3f}s ({stats['rollouts_per_second']:.1f} rollouts/s)")

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.decision_history = []

    def __str__(self) -> str:
        return f"{self.name} (Monte Carlo, {self.config.simulations} simulations)"
