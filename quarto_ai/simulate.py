#!/usr/bin/env python
"""
Batch simulation of the machine player against a random opponent.

This script plays a series of games between the Monte Carlo machine player
and a RandomHuman stand-in, then reports wins, losses, draws and how long
the machine spent per decision. It is a quick way to check that a budget
setting still beats random play.

Example usage:
    quarto-simulate --games 50 --simulations 2000 --time-limit 0.2 --seed 7
"""
import argparse
import random
import sys
import time
from typing import Any, Dict, List, Optional

from loguru import logger
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from quarto_ai.core.game import Game
from quarto_ai.core.phases import Actor, Draw
from quarto_ai.core.player import RandomHuman
from quarto_ai.core.rules import board_has_win
from quarto_ai.montecarlo.agent import MachinePlayer
from quarto_ai.montecarlo.config import ScorerConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate machine vs. random games")
    parser.add_argument("--games", type=int, default=20, help="Number of games to play")
    parser.add_argument("--simulations", type=int, default=ScorerConfig.fast().simulations,
                        help="Number of rollouts per machine decision")
    parser.add_argument("--time-limit", type=float, default=ScorerConfig.fast().time_limit,
                        help="Seconds the machine may spend per decision")
    parser.add_argument("--machine-first", action="store_true",
                        help="Machine hands over the first piece")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Log every search")
    return parser.parse_args(argv)


def play_one(
    config: ScorerConfig,
    first: Actor = Actor.HUMAN,
    seed: Optional[int] = None
) -> Dict[str, Any]:
    """
    Play a single game of the machine against a random opponent.

    Args:
        config: Machine simulation budget
        first: Actor who stages the first piece
        seed: Seed for the game and the opponent

    Returns:
        Dictionary with the result, the number of moves and search times
    """
    rng = random.Random(seed)
    machine = MachinePlayer(config=config)
    game = Game(
        human=RandomHuman(rng=random.Random(rng.random())),
        machine=machine,
        first=first,
        rng=rng
    )

    start_time = time.time()
    while not game.is_over():
        game.tick()

    result = game.get_result()
    if not isinstance(result, Draw) and not board_has_win(game.board):
        raise RuntimeError("Game ended in a win without a winning line on the board")

    search_times = [stats["time_elapsed"] for _, stats in machine.decision_history]
    return {
        "result": "draw" if isinstance(result, Draw) else result.actor.value,
        "moves": len(game.history),
        "duration": time.time() - start_time,
        "search_times": search_times,
    }


def run_simulation(
    games: int,
    config: ScorerConfig,
    first: Actor = Actor.HUMAN,
    seed: Optional[int] = None
) -> Dict[str, Any]:
    """
    Play a series of games and aggregate the results.

    Returns:
        Dictionary of totals and averages
    """
    seeder = random.Random(seed)
    totals: Dict[str, Any] = {"machine": 0, "human": 0, "draw": 0, "moves": 0}
    search_times: List[float] = []

    for _ in tqdm(range(games), desc="Simulating"):
        outcome = play_one(config, first=first, seed=seeder.randrange(2 ** 32))
        totals[outcome["result"]] += 1
        totals["moves"] += outcome["moves"]
        search_times.extend(outcome["search_times"])

    totals["games"] = games
    totals["average_moves"] = totals["moves"] / max(1, games)
    totals["average_search_time"] = sum(search_times) / max(1, len(search_times))
    return totals


def summary_table(totals: Dict[str, Any]) -> Table:
    table = Table(title=f"Results over {totals['games']} games")
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    table.add_row("Machine wins", str(totals["machine"]))
    table.add_row("Random wins", str(totals["human"]))
    table.add_row("Draws", str(totals["draw"]))
    table.add_row("Average moves", f"{totals['average_moves']:.1f}")
    table.add_row("Average search time", f"{totals['average_search_time']:.3f}s")
    return table


def main(argv: Optional[List[str]] = None) -> None:
    """Run the simulation with command-line arguments."""
    args = parse_args(argv)
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    config = ScorerConfig(simulations=args.simulations, time_limit=args.time_limit)
    logger.info(f"Simulating with {config}")

    totals = run_simulation(
        args.games,
        config,
        first=Actor.MACHINE if args.machine_first else Actor.HUMAN,
        seed=args.seed
    )
    Console().print(summary_table(totals))


if __name__ == "__main__":
    main()
