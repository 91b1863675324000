"""
Turn phases for the Quarto game.

A game is always in exactly one phase:
- Placed(actor): the named actor must act next (stage a piece for the other side)
- Staged(actor, piece): the actor handed a piece to the other side to place
- Finished(resolution): the game is over, with a Win(actor) or a Draw

TRANSITIONING is held only while an operation is deciding the next phase.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Union

from quarto_ai.core.pieces import Piece


class Actor(Enum):
    """The two sides of a game."""
    HUMAN = "human"
    MACHINE = "machine"

    def toggle(self) -> "Actor":
        """Get the other actor."""
        return Actor.MACHINE if self is Actor.HUMAN else Actor.HUMAN


@dataclass(frozen=True)
class Win:
    actor: Actor


@dataclass(frozen=True)
class Draw:
    pass


Resolution = Union[Win, Draw]


@dataclass(frozen=True)
class Placed:
    """The actor just placed a piece, or is first to move, and must now stage one."""
    actor: Actor


@dataclass(frozen=True)
class Staged:
    """The actor selected a piece for the other actor to place."""
    actor: Actor
    piece: Piece


@dataclass(frozen=True)
class Transitioning:
    """Marker held while an operation is in progress."""


@dataclass(frozen=True)
class Finished:
    resolution: Resolution


Phase = Union[Placed, Staged, Transitioning, Finished]

TRANSITIONING = Transitioning()


def describe_phase(phase: Phase) -> str:
    """
    Get a short message describing a phase for display.

    Args:
        phase: Phase to describe

    Returns:
        Message addressed to the human player
    """
    if isinstance(phase, Finished):
        if isinstance(phase.resolution, Draw):
            return "Cat got it!"
        if phase.resolution.actor is Actor.HUMAN:
            return "You win!"
        return "You lose!"
    if phase == Placed(Actor.HUMAN):
        return "Please select a piece for the computer to play"
    if isinstance(phase, Staged) and phase.actor is Actor.MACHINE:
        return f"Computer selected {phase.piece.symbol}. Please select a square to play it on"
    return "Thinking..."
