"""
Monte Carlo move scoring for Quarto.

This package provides the machine player. It plays without any search tree
or training: every candidate decision is scored by random playouts to the
end of the game.

1. Placement: each empty square is paired with each piece that could be
   handed back, and each pair gets an even share of the rollout budget.
2. Staging: on the opening move each piece gets an even share.

A square that wins immediately is always taken.
"""

from quarto_ai.montecarlo.config import ScorerConfig
from quarto_ai.montecarlo.search import (
    ScoredPlacement,
    placement_score,
    stage_score,
    score_placements,
    select_placement,
    score_staging,
    select_stage
)
from quarto_ai.montecarlo.agent import MachinePlayer

__all__ = [
    'MachinePlayer',
    'ScorerConfig',
    'ScoredPlacement',
    'placement_score',
    'stage_score',
    'score_placements',
    'select_placement',
    'score_staging',
    'select_stage',
]
