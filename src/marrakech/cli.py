# Area: Shared
"""
marrakech.cli — Command-line interface
======================================

Plays a full seeded game between demo bots and prints the result.

Usage:
    marrakech --players 3 --seed 42
    marrakech --config config.json --verbose
    MARRAKECH_SEED=7 python -m marrakech
"""

import argparse
import sys
from typing import Optional, Sequence

from ._config import EngineConfig, load_config, validate_config
from ._engine.randomness import RandomSource
from ._session.orchestrator import GameOrchestrator
from ._session.session import MAX_PLAYERS, MIN_PLAYERS
from ._shared.logging_config import setup_logging
from .demo_player import play_demo_game


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Marrakech - play a demo game between bots",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  marrakech --players 4
  marrakech --seed 42 --board-size 9
  marrakech --config config.json --verbose
        """,
    )
    parser.add_argument(
        "--players",
        type=int,
        default=2,
        help=f"Number of bots ({MIN_PLAYERS}-{MAX_PLAYERS}, default 2)",
    )
    parser.add_argument("--seed", type=int, help="Seed for dice, shuffles and ids")
    parser.add_argument("--board-size", type=int, help="Board side length (default 7)")
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--no-shuffle", action="store_true", help="Keep join order as turn order")
    parser.add_argument("--verbose", action="store_true", help="Log every action")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> EngineConfig:
    config = load_config(args.config)
    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.board_size is not None:
        overrides["board_size"] = args.board_size
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    if overrides:
        config = validate_config({**config.model_dump(), **overrides})
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    if not MIN_PLAYERS <= args.players <= MAX_PLAYERS:
        print(f"Error: --players must be between {MIN_PLAYERS} and {MAX_PLAYERS}", file=sys.stderr)
        return 1
    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_file, level=config.log_level)
    orchestrator = GameOrchestrator(config=config, rng=RandomSource(config.seed))
    state = play_demo_game(orchestrator, player_count=args.players, shuffle=not args.no_shuffle)

    if state["status"] != "finished":
        print("Game stalled: the active bot had no legal placement.", file=sys.stderr)
        return 2
    print(f"Winner: {state['winner_id']}")
    for pid, score in sorted(state["scores"].items(), key=lambda item: -item[1]):
        print(f"  {pid:<8} score {score:>3}  (coins {state['balances'][pid]})")
    return 0
