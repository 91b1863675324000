#!/usr/bin/env python
"""
Tests for the Quarto game engine and its turn state machine.

Covers the human operations (stage, place), every tick transition, the
terminal conditions and complete games against a random opponent.
"""
import random
import unittest

from quarto_ai.core.board import Board
from quarto_ai.core.constants import (
    Height, Color, Density, Shape, BOARD_SIZE, NUM_PIECES
)
from quarto_ai.core.game import (
    Game, GameState, InvalidMoveError, MoveRecord, TickInvariantError, new_game
)
from quarto_ai.core.phases import (
    Actor, Draw, Finished, Placed, Staged, Transitioning, Win,
    TRANSITIONING, describe_phase
)
from quarto_ai.core.pieces import Piece, create_piece_set
from quarto_ai.core.player import RandomHuman, ScriptedHuman
from quarto_ai.core.rules import board_has_win
from quarto_ai.montecarlo.agent import MachinePlayer
from quarto_ai.montecarlo.config import ScorerConfig


def frozen_clock() -> float:
    return 0.0


def small_machine(simulations: int = 1) -> MachinePlayer:
    return MachinePlayer(config=ScorerConfig(simulations=simulations), clock=frozen_clock)


class InterruptedMachine(MachinePlayer):
    """Machine whose searches are cut off by Ctrl-C."""

    def choose_placement(self, state, piece):
        raise KeyboardInterrupt

    def choose_stage(self, state):
        raise KeyboardInterrupt


def drawn_piece(row: int, col: int) -> Piece:
    """Piece for (row, col) in a full board where no line shares an attribute."""
    r1, r0 = row >> 1, row & 1
    c1, c0 = col >> 1, col & 1
    return Piece(
        Height.TALL if r1 ^ c0 else Height.SHORT,
        Color.DARK if r0 ^ c1 else Color.LIGHT,
        Density.SOLID if r1 ^ c1 ^ c0 else Density.HOLLOW,
        Shape.ROUND if r0 ^ c1 ^ c0 else Shape.SQUARE,
    )


def fill_all_but_last(game: Game) -> Piece:
    """Fill every square but (3, 3) without a win; return the piece that belongs there."""
    board = Board()
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            if (row, col) != (3, 3):
                board.place((row, col), drawn_piece(row, col))
    game.state.board = board
    last = drawn_piece(3, 3)
    game.state.pieces = [last]
    return last


DARK_ROW = [
    Piece(Height.TALL, Color.DARK, Density.SOLID, Shape.ROUND),
    Piece(Height.SHORT, Color.DARK, Density.HOLLOW, Shape.ROUND),
    Piece(Height.TALL, Color.DARK, Density.HOLLOW, Shape.SQUARE),
]
DARK_FINISHER = Piece(Height.SHORT, Color.DARK, Density.SOLID, Shape.SQUARE)


class TestNewGame(unittest.TestCase):
    """Test case for game setup."""

    def test_initial_state(self):
        game = new_game(random_seed=1)
        self.assertEqual(game.phase, Placed(Actor.HUMAN))
        self.assertEqual(len(game.pieces), NUM_PIECES)
        self.assertEqual(game.board.placed_count, 0)
        self.assertFalse(game.is_over())
        self.assertTrue(game.awaiting_human())
        self.assertEqual(game.piece_symbols(), [piece.symbol for piece in create_piece_set()])

    def test_machine_first(self):
        game = new_game(first=Actor.MACHINE)
        self.assertEqual(game.phase, Placed(Actor.MACHINE))
        self.assertFalse(game.awaiting_human())

    def test_pieces_accessor_is_a_copy(self):
        game = new_game()
        game.pieces.clear()
        self.assertEqual(len(game.state.pieces), NUM_PIECES)

    def test_reset(self):
        game = Game(machine=small_machine(), random_seed=2)
        game.stage(3)
        game.reset()
        self.assertEqual(game.phase, Placed(Actor.HUMAN))
        self.assertEqual(len(game.pieces), NUM_PIECES)
        self.assertEqual(game.history, [])


class TestHumanOperations(unittest.TestCase):
    """Test case for stage() and place()."""

    def setUp(self):
        self.game = Game(machine=small_machine(), random_seed=7)

    def test_stage(self):
        expected = self.game.pieces[5]
        self.assertTrue(self.game.stage(5))
        self.assertEqual(self.game.phase, Staged(Actor.HUMAN, expected))
        self.assertEqual(len(self.game.pieces), 15)
        self.assertNotIn(expected, self.game.pieces)
        self.assertEqual(self.game.state.piece_count(), NUM_PIECES)

    def test_stage_out_of_range_is_rejected(self):
        self.assertFalse(self.game.stage(16))
        self.assertFalse(self.game.stage(-1))
        self.assertEqual(self.game.phase, Placed(Actor.HUMAN))
        self.assertEqual(len(self.game.pieces), 16)

    def test_stage_in_wrong_phase_is_a_no_op(self):
        self.game.stage(0)
        phase = self.game.phase
        self.assertFalse(self.game.stage(0))
        self.assertEqual(self.game.phase, phase)
        self.assertEqual(len(self.game.pieces), 15)

    def test_place_in_wrong_phase_is_rejected(self):
        """Test that place() keeps the prior phase when nothing was staged for the human."""
        self.assertFalse(self.game.place((0, 0)))
        self.assertEqual(self.game.phase, Placed(Actor.HUMAN))
        self.assertEqual(self.game.board.placed_count, 0)

        self.game.stage(0)
        phase = self.game.phase
        self.assertFalse(self.game.place((0, 0)))
        self.assertEqual(self.game.phase, phase)

    def test_place(self):
        piece = self.game.state.pieces.pop(0)
        self.game.state.phase = Staged(Actor.MACHINE, piece)

        self.assertTrue(self.game.place((1, 2)))
        self.assertEqual(self.game.board.get((1, 2)), piece)
        self.assertEqual(self.game.phase, Placed(Actor.HUMAN))
        self.assertEqual(str(self.game.history[-1]), f"human placed {piece.symbol} at 12")

    def test_move_records(self):
        """Test that the history tells staging and placement apart."""
        self.game.stage(0)
        staged = self.game.history[-1]
        self.assertFalse(staged.is_placement)
        self.assertEqual(str(staged), f"human staged {staged.piece.symbol}")

        placed = MoveRecord(Actor.MACHINE, staged.piece, (3, 0))
        self.assertTrue(placed.is_placement)
        self.assertEqual(str(placed), f"machine placed {staged.piece.symbol} at 30")

    def test_place_on_occupied_square_is_rejected(self):
        first, second = self.game.state.pieces.pop(0), self.game.state.pieces.pop(0)
        self.game.state.board.place((0, 0), first)
        self.game.state.phase = Staged(Actor.MACHINE, second)

        self.assertFalse(self.game.place((0, 0)))
        self.assertEqual(self.game.board.get((0, 0)), first)
        self.assertEqual(self.game.phase, Staged(Actor.MACHINE, second))

    def test_place_off_board_is_rejected(self):
        piece = self.game.state.pieces.pop(0)
        self.game.state.phase = Staged(Actor.MACHINE, piece)
        self.assertFalse(self.game.place((0, 4)))
        self.assertEqual(self.game.phase, Staged(Actor.MACHINE, piece))

    def test_human_win(self):
        """Test that completing a dark row wins for the human."""
        for col, piece in enumerate(DARK_ROW):
            self.game.state.board.place((0, col), piece)
        self.game.state.pieces = [
            piece for piece in self.game.state.pieces
            if piece not in DARK_ROW and piece != DARK_FINISHER
        ]
        self.game.state.phase = Staged(Actor.MACHINE, DARK_FINISHER)

        self.assertTrue(self.game.place((0, 3)))
        self.assertEqual(self.game.phase, Finished(Win(Actor.HUMAN)))
        self.assertTrue(self.game.is_over())
        self.assertEqual(self.game.get_winner(), Actor.HUMAN)
        self.assertEqual(describe_phase(self.game.phase), "You win!")


class TestTick(unittest.TestCase):
    """Test case for the turn state machine."""

    def test_machine_places_and_stages_next_piece(self):
        """Test that one tick after staging removes exactly one more piece from the pool."""
        game = Game(machine=small_machine(), random_seed=11)
        staged = game.pieces[0]
        self.assertTrue(game.stage(0))
        self.assertEqual(len(game.pieces), 15)

        phase = game.tick()

        self.assertIsInstance(phase, Staged)
        self.assertEqual(phase.actor, Actor.MACHINE)
        self.assertEqual(len(game.pieces), 14)
        self.assertEqual(game.board.placed_count, 1)
        placed = [cell for row in game.board.rows() for cell in row if cell is not None]
        self.assertEqual(placed, [staged])
        self.assertNotIn(phase.piece, game.pieces)
        self.assertEqual(game.state.piece_count(), NUM_PIECES)
        self.assertTrue(game.awaiting_human())

    def test_human_phases_use_the_collaborator(self):
        game = Game(human=ScriptedHuman(pieces=[2]), machine=small_machine(), random_seed=5)

        game.tick()
        self.assertIsInstance(game.phase, Staged)
        self.assertEqual(game.phase.actor, Actor.HUMAN)

        game.tick()
        self.assertEqual(game.phase.actor, Actor.MACHINE)

        square = game.board.empty_squares()[0]
        game.register_human(ScriptedHuman(squares=[square]))
        game.tick()
        self.assertEqual(game.phase, Placed(Actor.HUMAN))
        self.assertEqual(game.board.placed_count, 2)
        self.assertEqual(game.history[-1].square, square)

    def test_machine_first_stages_from_scores(self):
        game = Game(machine=small_machine(16), first=Actor.MACHINE, random_seed=3)
        phase = game.tick()

        self.assertIsInstance(phase, Staged)
        self.assertEqual(phase.actor, Actor.MACHINE)
        self.assertEqual(len(game.pieces), 15)
        self.assertEqual(game.history[-1].actor, Actor.MACHINE)
        self.assertEqual(game.machine.decision_history[-1][0], "stage")

    def test_machine_takes_immediate_win(self):
        """Test that the machine completes the diagonal when handed the finishing piece."""
        game = Game(machine=small_machine(), random_seed=9)
        for idx, piece in enumerate(DARK_ROW):
            game.state.board.place((idx, idx), piece)
        game.state.pieces = [
            piece for piece in create_piece_set()
            if piece not in DARK_ROW and piece != DARK_FINISHER
        ]
        game.state.phase = Staged(Actor.HUMAN, DARK_FINISHER)

        game.tick()

        self.assertEqual(game.board.get((3, 3)), DARK_FINISHER)
        self.assertEqual(game.phase, Finished(Win(Actor.MACHINE)))
        self.assertEqual(len(game.pieces), 12)
        self.assertEqual(describe_phase(game.phase), "You lose!")

    def test_invalid_collaborator_choice_restores_phase(self):
        game = Game(human=ScriptedHuman(pieces=[99]), machine=small_machine())
        with self.assertRaises(InvalidMoveError):
            game.tick()
        self.assertEqual(game.phase, Placed(Actor.HUMAN))
        self.assertEqual(len(game.pieces), 16)

    def test_invalid_square_restores_phase(self):
        game = Game(human=ScriptedHuman(squares=[(0, 0)]), machine=small_machine())
        first, second = game.state.pieces.pop(0), game.state.pieces.pop(0)
        game.state.board.place((0, 0), first)
        game.state.phase = Staged(Actor.MACHINE, second)

        with self.assertRaises(InvalidMoveError):
            game.tick()
        self.assertEqual(game.phase, Staged(Actor.MACHINE, second))

    def test_human_decision_without_collaborator(self):
        game = Game(machine=small_machine())
        with self.assertRaises(ValueError):
            game.tick()

    def test_tick_after_finish_is_fatal(self):
        game = Game(machine=small_machine())
        game.state.phase = Finished(Win(Actor.HUMAN))
        with self.assertRaises(TickInvariantError):
            game.tick()
        self.assertEqual(game.phase, Finished(Win(Actor.HUMAN)))

        # Even with an empty pool the result is not overwritten
        game.state.pieces = []
        with self.assertRaises(TickInvariantError):
            game.tick()
        self.assertEqual(game.phase, Finished(Win(Actor.HUMAN)))

    def test_tick_mid_transition_is_fatal(self):
        game = Game(machine=small_machine())
        game.state.phase = TRANSITIONING
        with self.assertRaises(TickInvariantError):
            game.tick()

    def test_interrupted_placement_restores_phase(self):
        """Test that an interrupt during the machine search leaves the game playable."""
        game = Game(machine=InterruptedMachine(), random_seed=6)
        game.stage(0)
        phase = game.phase

        with self.assertRaises(KeyboardInterrupt):
            game.tick()

        self.assertNotIsInstance(game.phase, Transitioning)
        self.assertEqual(game.phase, phase)
        self.assertEqual(game.board.placed_count, 0)
        self.assertEqual(len(game.pieces), 15)

        game.machine = small_machine()
        self.assertEqual(game.tick().actor, Actor.MACHINE)

    def test_interrupted_staging_restores_phase(self):
        game = Game(machine=InterruptedMachine(), first=Actor.MACHINE)
        with self.assertRaises(KeyboardInterrupt):
            game.tick()
        self.assertEqual(game.phase, Placed(Actor.MACHINE))
        self.assertEqual(len(game.pieces), 16)

    def test_run_until_input(self):
        game = Game(machine=small_machine(), random_seed=4)
        self.assertEqual(game.run_until_input(), Placed(Actor.HUMAN))
        game.stage(0)
        phase = game.run_until_input()
        self.assertIsInstance(phase, Staged)
        self.assertEqual(phase.actor, Actor.MACHINE)
        self.assertFalse(game.advance())


class TestDraw(unittest.TestCase):
    """Test case for games that run out of pieces."""

    def setUp(self):
        self.game = Game(human=ScriptedHuman(pieces=[0]), machine=small_machine(), random_seed=1)

    def test_empty_pool_is_a_draw(self):
        """Test that a tick with no pieces left and nothing staged ends in a draw."""
        last = fill_all_but_last(self.game)
        self.game.state.board.place((3, 3), last)
        self.game.state.pieces = []

        self.game.tick()

        self.assertTrue(self.game.is_over())
        self.assertEqual(self.game.phase, Finished(Draw()))
        self.assertIsNone(self.game.get_winner())
        self.assertEqual(describe_phase(self.game.phase), "Cat got it!")

    def test_machine_plays_the_last_piece(self):
        """Test that the last staged piece is still placed before the draw."""
        fill_all_but_last(self.game)
        self.assertEqual(self.game.state.piece_count(), NUM_PIECES)

        self.game.tick()
        self.assertEqual(len(self.game.pieces), 0)
        self.game.tick()

        self.assertTrue(self.game.board.is_full())
        self.assertEqual(self.game.phase, Finished(Draw()))
        self.assertFalse(board_has_win(self.game.board))

    def test_human_plays_the_last_piece(self):
        last = fill_all_but_last(self.game)
        self.game.state.pieces = []
        self.game.state.phase = Staged(Actor.MACHINE, last)

        self.assertTrue(self.game.place((3, 3)))
        self.assertEqual(self.game.phase, Placed(Actor.HUMAN))
        self.assertFalse(self.game.awaiting_human())

        self.assertEqual(self.game.run_until_input(), Finished(Draw()))


class TestFullGames(unittest.TestCase):
    """Test case for complete games against a random opponent."""

    def play(self, first: Actor, seed: int) -> Game:
        rng = random.Random(seed)
        game = Game(
            human=RandomHuman(rng=random.Random(seed + 1)),
            machine=small_machine(),
            first=first,
            rng=rng
        )
        ticks = 0
        while not game.is_over():
            game.tick()
            ticks += 1
            self.assertLessEqual(ticks, 40)
            self.assertNotIsInstance(game.phase, Transitioning)
            self.assertEqual(game.state.piece_count(), NUM_PIECES)
        return game

    def test_games_reach_a_consistent_end(self):
        for seed in range(3):
            for first in (Actor.HUMAN, Actor.MACHINE):
                game = self.play(first, seed)
                result = game.get_result()
                if isinstance(result, Win):
                    self.assertTrue(board_has_win(game.board))
                else:
                    self.assertEqual(result, Draw())
                    self.assertTrue(game.board.is_full())

                with self.assertRaises(TickInvariantError):
                    game.tick()

    def test_machine_staging_only_opens_the_game(self):
        """Test that Placed(Machine) is reached only before the first piece is placed."""
        game = Game(
            human=RandomHuman(rng=random.Random(8)),
            machine=small_machine(),
            first=Actor.MACHINE,
            random_seed=8
        )
        seen = []
        while not game.is_over():
            seen.append(game.phase)
            game.tick()

        machine_placed = [i for i, phase in enumerate(seen) if phase == Placed(Actor.MACHINE)]
        self.assertEqual(machine_placed, [0])


if __name__ == "__main__":
    unittest.main()
