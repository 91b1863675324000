#!/usr/bin/env python
"""
Interactive Quarto game interface for playing against the machine.

This script provides a command-line interface for playing Quarto against
the Monte Carlo machine player.

Example usage:
    # Play with the default budget
    quarto-play

    # Let the machine hand over the first piece, with a faster budget
    quarto-play --machine-first --simulations 2000 --time-limit 0.5

    # Give the machine a longer think
    quarto-play --strength strong
"""
import argparse
import re
import sys
from typing import Callable, List, Optional

from loguru import logger
from rich.console import Console
from rich.table import Table

from quarto_ai.core.board import Coord, parse_square
from quarto_ai.core.constants import BOARD_SIZE
from quarto_ai.core.game import Game, GameState, new_game
from quarto_ai.core.phases import Actor, describe_phase
from quarto_ai.core.pieces import Piece, find_piece
from quarto_ai.core.player import HumanInput
from quarto_ai.montecarlo.config import ScorerConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play Quarto against the machine")

    # Machine configuration
    parser.add_argument("--strength", type=str, default="default",
                        choices=["fast", "default", "strong"],
                        help="Preset simulation budget")
    parser.add_argument("--simulations", type=int, default=None,
                        help="Number of rollouts per machine decision (overrides the preset)")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Seconds the machine may spend per decision (overrides the preset)")

    # Game configuration
    parser.add_argument("--machine-first", action="store_true",
                        help="Machine hands over the first piece")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")
    parser.add_argument("--verbose", action="store_true",
                        help="Show search information")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ScorerConfig:
    """Build the machine budget from the preset and any explicit overrides."""
    config = getattr(ScorerConfig, args.strength)().to_dict()
    if args.simulations is not None:
        config["simulations"] = args.simulations
    if args.time_limit is not None:
        config["time_limit"] = args.time_limit
    return ScorerConfig.from_dict(config)


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def parse_piece_choice(text: str, pieces: List[Piece]) -> Optional[int]:
    """
    Parse a piece typed by the player.

    Accepts an index into the remaining pieces or a piece symbol.

    Args:
        text: Raw input
        pieces: Remaining pieces

    Returns:
        Piece index, or None if the input does not name a remaining piece
    """
    text = text.strip()
    if re.fullmatch(r"\d+", text, re.ASCII):
        idx = int(text)
        return idx if idx < len(pieces) else None

    idx = find_piece(pieces, text)
    return idx if idx >= 0 else None


def board_table(game: Game) -> Table:
    """Build a table showing the board."""
    table = Table(title="Board", show_lines=True)
    table.add_column("")
    for col in range(BOARD_SIZE):
        table.add_column(str(col), justify="center")

    for row_idx, row in enumerate(game.board.rows()):
        cells = [cell.symbol if cell is not None else "" for cell in row]
        table.add_row(str(row_idx), *cells)
    return table


def pieces_table(pieces: List[Piece]) -> Table:
    """Build a table listing the remaining pieces."""
    table = Table(title="Remaining pieces")
    table.add_column("#", justify="right")
    table.add_column("Piece", justify="center")
    table.add_column("Attributes")

    for idx, piece in enumerate(pieces):
        table.add_row(str(idx), piece.symbol, piece.describe())
    return table


def display_game(console: Console, game: Game) -> None:
    """Display the current game state."""
    console.print(board_table(game))
    if game.pieces:
        console.print(pieces_table(game.pieces))
    if game.history:
        console.print(f"Last move: {game.history[-1]}")
    console.print(f"[bold]{describe_phase(game.phase)}[/bold]")


class ConsoleHuman(HumanInput):
    """
    Human player at the terminal.

    Asks again until the answer is valid, so the game only ever sees valid
    choices.
    """

    def __init__(self, console: Console, read: Optional[Callable[[str], str]] = None, name: str = "You"):
        self.console = console
        self.read = read or console.input
        self.name = name

    def choose_piece(self, state: GameState) -> int:
        self.console.print(pieces_table(state.pieces))
        while True:
            text = self.read("Piece to hand to the computer (number or symbol): ")
            idx = parse_piece_choice(text, state.pieces)
            if idx is not None:
                return idx
            self.console.print("[red]Unexpected input[/red]")

    def choose_square(self, state: GameState, piece: Piece) -> Coord:
        self.console.print(
            f"Machine staged piece [bold]{piece.symbol}[/bold] ({piece.describe()}). "
            "Choose square on which to place it"
        )
        while True:
            text = self.read("Square (row and column, e.g. 12): ")
            square = parse_square(text)
            if square is None:
                self.console.print("[red]Number out of range[/red]")
            elif not state.board.is_empty(square):
                self.console.print("[red]Square already has a piece[/red]")
            else:
                return square


def play_game(args: argparse.Namespace, console: Optional[Console] = None) -> Game:
    """Play a game of Quarto against the machine."""
    console = console or Console()
    human = ConsoleHuman(console)
    game = new_game(
        human=human,
        config=build_config(args),
        first=Actor.MACHINE if args.machine_first else Actor.HUMAN,
        random_seed=args.seed,
        verbose=args.verbose
    )
    console.print(f"{human.name} vs. {game.machine}")

    while not game.is_over():
        if game.awaiting_human():
            display_game(console, game)
            game.tick()
        else:
            with console.status("Thinking..."):
                game.tick()

    display_game(console, game)
    return game


def main(argv: Optional[List[str]] = None) -> None:
    """Run the interactive game with command-line arguments."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        play_game(args)
    except (KeyboardInterrupt, EOFError):
        print("\nGame aborted.")


if __name__ == "__main__":
    main()
