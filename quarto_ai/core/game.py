"""
Game state and turn flow for Quarto.

This module defines the core game mechanics, including:
- GameState: board, unplaced pieces, current phase and the game's random source
- Game: the turn state machine driven by the surrounding application
- new_game: helper for setting up a game against the machine player

Play alternates between staging (choosing a piece for the opponent) and
placing (putting the staged piece on the board). The human stages first.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import random

from loguru import logger

from quarto_ai.core.board import Board, Coord, is_valid_coordinate
from quarto_ai.core.phases import (
    Actor, Draw, Finished, Phase, Placed, Resolution, Staged, Transitioning, Win,
    TRANSITIONING, describe_phase
)
from quarto_ai.core.pieces import Piece, create_piece_set
from quarto_ai.core.player import HumanInput
from quarto_ai.core.rules import is_win
from quarto_ai.montecarlo.agent import MachinePlayer
from quarto_ai.montecarlo.config import ScorerConfig


class InvalidMoveError(ValueError):
    """Raised when the human collaborator hands the engine an invalid choice."""


class TickInvariantError(RuntimeError):
    """Raised when tick is called on a finished game or mid-transition."""


@dataclass
class GameState:
    """
    Complete representation of a Quarto game state.

    The random source is shared by reference with every clone, so simulations
    draw from the same per-game stream without touching the authoritative
    board or pool.
    """
    board: Board = field(default_factory=Board)
    pieces: List[Piece] = field(default_factory=create_piece_set)
    phase: Phase = Placed(Actor.HUMAN)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    @property
    def staged_piece(self) -> Optional[Piece]:
        """Get the piece waiting to be placed, if any."""
        if isinstance(self.phase, Staged):
            return self.phase.piece
        return None

    def piece_count(self) -> int:
        """
        Count every piece in the game: unplaced, staged and on the board.

        Always equals NUM_PIECES for a consistent state.
        """
        in_hand = 1 if self.staged_piece is not None else 0
        return len(self.pieces) + in_hand + self.board.placed_count

    def clone(self) -> GameState:
        """
        Create an independent copy of the game state for simulation.

        Returns:
            Copy sharing only the random source
        """
        return GameState(
            board=self.board.clone(),
            pieces=list(self.pieces),
            phase=self.phase,
            rng=self.rng,
        )


@dataclass(frozen=True)
class MoveRecord:
    """One stage or place action, kept for display."""
    actor: Actor
    piece: Piece
    square: Optional[Coord] = None

    @property
    def is_placement(self) -> bool:
        return self.square is not None

    def __str__(self) -> str:
        if self.is_placement:
            return f"{self.actor.value} placed {self.piece.symbol} at {self.square[0]}{self.square[1]}"
        return f"{self.actor.value} staged {self.piece.symbol}"


class Game:
    """
    Manager for Quarto game flow and rules.

    The caller drives the game with tick(), which advances exactly one phase,
    and with stage()/place() for human choices that arrive from outside (a
    click, a prompt). Machine decisions come from the MachinePlayer.
    """

    def __init__(
        self,
        human: Optional[HumanInput] = None,
        machine: Optional[MachinePlayer] = None,
        first: Actor = Actor.HUMAN,
        random_seed: Optional[int] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize a new Quarto game.

        Args:
            human: Source of human decisions used by tick()
            machine: Machine player (a default one if not given)
            first: Actor who stages the first piece
            random_seed: Seed for the game's random source
            rng: Random source to use instead of a seeded one
        """
        self.human = human
        self.machine = machine or MachinePlayer()
        self.first = first
        self._rng = rng if rng is not None else random.Random(random_seed)
        self.state = self._setup_game()
        self.history: List[MoveRecord] = []

    def _setup_game(self) -> GameState:
        return GameState(phase=Placed(self.first), rng=self._rng)

    def reset(self) -> GameState:
        """Reset the game to a new initial state."""
        self.state = self._setup_game()
        self.history = []
        return self.state

    def register_human(self, human: HumanInput) -> None:
        self.human = human
        logger.debug(f"Human decisions now come from {human.name}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def pieces(self) -> List[Piece]:
        """Get a copy of the remaining unplaced pieces."""
        return list(self.state.pieces)

    def piece_symbols(self) -> List[str]:
        """Get the display symbols of the remaining pieces, in index order."""
        return [piece.symbol for piece in self.state.pieces]

    def is_over(self) -> bool:
        return isinstance(self.state.phase, Finished)

    def get_result(self) -> Optional[Resolution]:
        """
        Get the result of the game.

        Returns:
            Win or Draw, or None if the game is still in progress
        """
        if isinstance(self.state.phase, Finished):
            return self.state.phase.resolution
        return None

    def get_winner(self) -> Optional[Actor]:
        """
        Get the winning actor, if any.

        Returns:
            Winner, or None if the game is not over or ended in a draw
        """
        result = self.get_result()
        if isinstance(result, Win):
            return result.actor
        return None

    def awaiting_human(self) -> bool:
        """Check whether the next step needs a decision from the human."""
        phase = self.state.phase
        if phase == Placed(Actor.HUMAN):
            # An empty pool resolves to a draw without asking
            return bool(self.state.pieces)
        return isinstance(phase, Staged) and phase.actor is Actor.MACHINE

    # ------------------------------------------------------------------
    # Human operations
    # ------------------------------------------------------------------

    def stage(self, piece_index: int) -> bool:
        """
        Stage a piece for the machine to place.

        Only valid when the human must stage. Rejected calls leave the game
        unchanged.

        Args:
            piece_index: Index into the remaining pieces

        Returns:
            True if the piece was staged, False otherwise
        """
        if self.state.phase != Placed(Actor.HUMAN):
            logger.warning(f"Cannot stage a piece while in phase {self.state.phase}")
            return False

        if not 0 <= piece_index < len(self.state.pieces):
            logger.warning(f"Piece index {piece_index} out of range")
            return False

        piece = self.state.pieces.pop(piece_index)
        self.state.phase = Staged(Actor.HUMAN, piece)
        self.history.append(MoveRecord(Actor.HUMAN, piece))
        logger.debug(f"Human staged {piece.symbol}")
        return True

    def place(self, square: Coord) -> bool:
        """
        Place the piece the machine staged.

        Only valid when the machine has staged a piece and the square is an
        empty square on the board. Rejected calls leave the game unchanged.

        Args:
            square: Target coordinate

        Returns:
            True if the piece was placed, False otherwise
        """
        if not is_valid_coordinate(square):
            logger.warning(f"Square {square} is off the board")
            return False

        if not self.state.board.is_empty(square):
            logger.warning(f"Square {square} is already occupied")
            return False

        phase = self.state.phase
        if not (isinstance(phase, Staged) and phase.actor is Actor.MACHINE):
            logger.warning(f"Cannot place a piece while in phase {phase}")
            return False

        self.state.board.place(square, phase.piece)
        self.history.append(MoveRecord(Actor.HUMAN, phase.piece, square))
        logger.debug(f"Human placed {phase.piece.symbol} at {square}")

        if is_win(self.state.board, square):
            self.state.phase = Finished(Win(Actor.HUMAN))
        else:
            self.state.phase = Placed(Actor.HUMAN)
        return True

    # ------------------------------------------------------------------
    # Turn state machine
    # ------------------------------------------------------------------

    def tick(self) -> Phase:
        """
        Advance the game by exactly one phase.

        Human phases ask the registered HumanInput; machine phases run the
        Monte Carlo scorer. An empty pool only ends the game once nothing is
        staged: a staged last piece is placed first.

        Returns:
            The new phase

        Raises:
            TickInvariantError: If the game is already finished
            InvalidMoveError: If the human collaborator returned an invalid choice
            ValueError: If a human decision is needed and no collaborator is registered
        """
        phase = self.state.phase
        if isinstance(phase, (Finished, Transitioning)):
            raise TickInvariantError(f"Tick invariant not upheld: phase is {phase}")

        if not self.state.pieces and isinstance(phase, Placed):
            logger.info("No pieces left, the game is a draw")
            self.state.phase = Finished(Draw())
            return self.state.phase

        if phase == Placed(Actor.HUMAN):
            piece_index = self._require_human().choose_piece(self.state)
            if not self.stage(piece_index):
                raise InvalidMoveError(f"Invalid piece choice: {piece_index}")

        elif isinstance(phase, Staged) and phase.actor is Actor.MACHINE:
            square = self._require_human().choose_square(self.state, phase.piece)
            if not self.place(square):
                raise InvalidMoveError(f"Invalid square choice: {square}")

        elif isinstance(phase, Staged):
            self._transition(self._machine_places)

        else:
            self._transition(self._machine_stages)

        logger.debug(f"Phase {phase} -> {self.state.phase}")
        return self.state.phase

    def advance(self) -> bool:
        """
        Tick once unless the game is over or waiting on the human.

        Returns:
            True if a tick was performed
        """
        if self.is_over() or self.awaiting_human():
            return False
        self.tick()
        return True

    def run_until_input(self) -> Phase:
        """
        Tick until the human must act or the game ends.

        Returns:
            The phase reached
        """
        while self.advance():
            pass
        return self.state.phase

    def _require_human(self) -> HumanInput:
        if self.human is None:
            raise ValueError("No human input registered for a human decision")
        return self.human

    def _transition(self, step) -> None:
        # The previous phase is taken out while the step decides the next one
        phase = self.state.phase
        self.state.phase = TRANSITIONING
        try:
            step(phase)
        except BaseException:
            self.state.phase = phase
            raise

    def _machine_places(self, phase: Staged) -> None:
        piece = phase.piece
        decision = self.machine.choose_placement(self.state, piece)
        square = decision.square

        self.state.board.place(square, piece)
        self.history.append(MoveRecord(Actor.MACHINE, piece, square))
        logger.debug(f"Machine placed {piece.symbol} at {square} (score {decision.score})")

        if is_win(self.state.board, square):
            self.state.phase = Finished(Win(Actor.MACHINE))
        elif decision.next_piece is None:
            # Last piece played, nothing left to hand over
            self.state.phase = Finished(Draw())
        else:
            next_piece = self.state.pieces.pop(decision.next_piece)
            self.history.append(MoveRecord(Actor.MACHINE, next_piece))
            self.state.phase = Staged(Actor.MACHINE, next_piece)

    def _machine_stages(self, phase: Placed) -> None:
        piece_index = self.machine.choose_stage(self.state)
        piece = self.state.pieces.pop(piece_index)
        self.history.append(MoveRecord(Actor.MACHINE, piece))
        self.state.phase = Staged(Actor.MACHINE, piece)

    def __str__(self) -> str:
        """
        Return a human-readable string representation of the game.

        Returns:
            String representation
        """
        result = f"Quarto Game ({len(self.state.pieces)} pieces left)\n"
        result += str(self.state.board) + "\n"
        result += "Pieces: " + " ".join(
            f"{idx}:{piece.symbol}" for idx, piece in enumerate(self.state.pieces)
        ) + "\n"
        result += describe_phase(self.state.phase)
        return result


def new_game(
    human: Optional[HumanInput] = None,
    config: Optional[ScorerConfig] = None,
    first: Actor = Actor.HUMAN,
    random_seed: Optional[int] = None,
    verbose: bool = False
) -> Game:
    """
    Create a game between a human and the machine player.

    Args:
        human: Source of human decisions used by tick()
        config: Simulation budget for the machine player
        first: Actor who stages the first piece
        random_seed: Seed for reproducible games
        verbose: Whether the machine player reports its searches

    Returns:
        New Game with a full pool, an empty board and the first actor to stage
    """
    machine = MachinePlayer(config=config, verbose=verbose)
    return Game(human=human, machine=machine, first=first, random_seed=random_seed)
