"""
Human-side collaborators for the Quarto game.

The game engine never reads input itself. Whenever a tick needs a decision
from the human side it asks the registered HumanInput for a piece index or a
square. The engine remains the authority on which answers are valid.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional
import random

from quarto_ai.core.board import Coord
from quarto_ai.core.pieces import Piece

if TYPE_CHECKING:
    from quarto_ai.core.game import GameState


class HumanInput(ABC):
    """
    Source of the human player's decisions.

    Implementations may prompt a terminal, replay a script, or pick at random.
    """

    name: str = "Human"

    @abstractmethod
    def choose_piece(self, state: GameState) -> int:
        """
        Choose which remaining piece to hand to the machine.

        Args:
            state: Current game state

        Returns:
            Index into state.pieces
        """
        pass

    @abstractmethod
    def choose_square(self, state: GameState, piece: Piece) -> Coord:
        """
        Choose the empty square on which to place the piece staged by the machine.

        Args:
            state: Current game state
            piece: Piece to place

        Returns:
            Coordinate of an empty square
        """
        pass


class ScriptedHuman(HumanInput):
    """
    Human stand-in that replays fixed choices.

    Useful for tests and for replaying a known line of play.
    """

    def __init__(
        self,
        pieces: Optional[Iterable[int]] = None,
        squares: Optional[Iterable[Coord]] = None,
        name: str = "Scripted Human"
    ):
        self.name = name
        self._pieces: List[int] = list(pieces or [])
        self._squares: List[Coord] = list(squares or [])

    def choose_piece(self, state: GameState) -> int:
        if not self._pieces:
            raise ValueError("No scripted piece choices left")
        return self._pieces.pop(0)

    def choose_square(self, state: GameState, piece: Piece) -> Coord:
        if not self._squares:
            raise ValueError("No scripted square choices left")
        return self._squares.pop(0)


class RandomHuman(HumanInput):
    """
    Human stand-in that picks uniformly among valid choices.

    This serves as a baseline opponent for the machine player.
    """

    def __init__(self, rng: Optional[random.Random] = None, name: str = "Random Human"):
        """
        Initialize the random human.

        Args:
            rng: Random source (a fresh one if not given)
            name: Display name
        """
        self.name = name
        self.rng = rng or random.Random()

    def choose_piece(self, state: GameState) -> int:
        if not state.pieces:
            raise ValueError("No pieces left to stage")
        return self.rng.randrange(len(state.pieces))

    def choose_square(self, state: GameState, piece: Piece) -> Coord:
        squares = state.board.empty_squares()
        if not squares:
            raise ValueError("No empty squares left")
        return self.rng.choice(squares)
