# Area: Shared
"""
arena_round.cli — Command-line interface
========================================

Provides CLI entry point for running the round controller.

Usage:
    python -m arena_round --demo                         # Demo world, endless
    python -m arena_round --demo --iterations 3          # Demo world, 3 rounds
    python -m arena_round --demo --config config.json    # Demo with overrides

Settings come from, in increasing priority:
    1. Built-in defaults (30s intermission, 240s rounds, 4 teams)
    2. The JSON config file
    3. ARENA_* environment variables (a .env file is loaded first)

Outside demo mode the controller has no world to drive; host servers
embed RoundRunner from Python code with their own collaborators.
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ._runner_config import apply_env_overrides
from ._shared import log_and_terminate
from .demo_world import DemoWorld, PopulationSimulator
from .errors import ConfigurationError

# Short phases so a demo round finishes in well under a minute
DEMO_DEFAULTS = {
    "intermission_seconds": 5,
    "round_seconds": 15,
    "setup_settle_seconds": 1.0,
    "outcome_display_seconds": 3.0,
    "cleanup_delay_seconds": 1.0,
}


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Arena round controller",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m arena_round --demo
  python -m arena_round --demo --iterations 3 --players 12
  ARENA_ROUND_SECONDS=30 python -m arena_round --demo
        """,
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run against the in-memory demo world with simulated players",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON config file",
    )

    parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Stop after this many rounds (default: run forever)",
    )

    parser.add_argument(
        "--players",
        type=int,
        default=8,
        help="Number of simulated players at demo start",
    )

    return parser.parse_args(argv)


def load_config(config_path: Optional[str], demo: bool = False) -> Dict[str, Any]:
    """Load config from defaults, file and environment."""
    config: Dict[str, Any] = dict(DEMO_DEFAULTS) if demo else {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(reference=config_path, reason="config file not found")
        with open(path, encoding="utf-8") as f:
            config.update(json.load(f))

    return apply_env_overrides(config)


def is_demo_mode(args: argparse.Namespace) -> bool:
    """Check if demo mode is enabled via CLI or environment."""
    if args.demo:
        return True
    return os.environ.get("DEMO_MODE", "").lower() in ("true", "1", "yes")


async def run_demo(config: Dict[str, Any], iterations: Optional[int], players: int) -> None:
    """Run the controller against DemoWorld until iterations complete."""
    from .runner import RoundRunner

    world = DemoWorld(auto_respawn=True)
    runner = RoundRunner(config=config, collaborators=world.collaborators())
    simulator = PopulationSimulator(
        runner, world, seed=runner.settings.random_seed, initial_players=players
    )
    population = asyncio.create_task(simulator.run(), name="demo-population")
    try:
        await runner.run(max_iterations=iterations)
    finally:
        population.cancel()
        await asyncio.gather(population, return_exceptions=True)


def main(argv=None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    args = parse_args(argv)
    demo = is_demo_mode(args)

    if not demo:
        print("Error: only demo mode can run from the command line.", file=sys.stderr)
        print("Use --demo, or embed RoundRunner with your own collaborators.", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config, demo=True)
        asyncio.run(run_demo(config, args.iterations, args.players))
    except ConfigurationError as e:
        log_and_terminate(e)
    except KeyboardInterrupt:
        print("\nStopped.")
    return 0
