#!/usr/bin/env python3
"""
Scavenger - Command Line Interface

CLI for generating, playing and balancing Scavenger runs.

Usage:
    python cli.py map --seed ABC123 --difficulty easy
    python cli.py play --seed ABC123 --difficulty medium
    python cli.py simulate --runs 500 --difficulty hard --seed BAL1
    python cli.py stats
    python cli.py rng --seed ABC123 --count 20
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from packages.scavenger.agent import ExitSeekingAgent, play_run
from packages.scavenger.config import configure_logging, load_settings
from packages.scavenger.content.difficulty import Difficulty, get_config
from packages.scavenger.game import GamePhase, ScavengerRunner
from packages.scavenger.generation.grid import GridGenerator, grid_to_string
from packages.scavenger.services.ledger import PlayerAccount
from packages.scavenger.services.stats import RunStatsStore
from packages.scavenger.state.rng import Random, XorShift128, new_seed, seed_to_long
from packages.scavenger.state.run import GameResult, Position

logger = logging.getLogger("scavenger.cli")

DIFFICULTY_CHOICES = [d.value for d in Difficulty]

KEY_DIRECTIONS = {
    "w": (0, -1),
    "s": (0, 1),
    "a": (-1, 0),
    "d": (1, 0),
}


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_seed_info(seed_string: str, numeric_seed: int) -> str:
    """Format seed information header."""
    return f"Seed: {seed_string} (numeric: {numeric_seed})"


def format_status(runner: ScavengerRunner) -> str:
    """One-line HUD for the current run."""
    run = runner.run_state
    if run is None:
        return f"[{runner.phase.value}]"
    parts = [
        f"{runner.server_name}",
        f"moves {run.moves_remaining}/{run.move_pool}",
        f"turn {run.turn_count}",
        f"GC {run.gc_collected}",
        f"mats {len(run.materials_collected)}",
        f"frags {run.data_fragments}",
    ]
    if run.has_keycard:
        parts.append("KEYCARD")
    return " | ".join(parts)


def layout_summary(grid) -> Dict[str, int]:
    """Count tiles by type."""
    counts: Dict[str, int] = {}
    for row in grid:
        for tile in row:
            counts[tile.type.value] = counts.get(tile.type.value, 0) + 1
    return counts


def resolve_seed(raw: Optional[str]) -> str:
    """Seed from the argument, then SCAVENGER_SEED, then fresh entropy."""
    if raw:
        return raw.upper()
    settings = load_settings()
    if settings.seed:
        return settings.seed.upper()
    return str(new_seed())


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_map(args) -> int:
    """Generate and display a fully revealed map."""
    seed_string = resolve_seed(args.seed)
    seed = seed_to_long(seed_string)
    config = get_config(args.difficulty)

    print(format_seed_info(seed_string, seed))
    print(f"Server: {config.name} ({config.difficulty.value})")
    print()

    layout = GridGenerator(Random(seed), config).generate()
    print(grid_to_string(layout.grid, layout.start, layout.enemies, reveal_all=True))

    print("\nPlacement:")
    print(f"  Start: {layout.start}  Exit: {layout.exit}")
    print(f"  Walls: {layout.walls_placed}/{layout.wall_target} ({layout.wall_attempts} attempts)")
    print(f"  Enemies: {len(layout.enemies)}/{config.enemy_count}")
    for tile_type, count in sorted(layout_summary(layout.grid).items()):
        print(f"  {tile_type}: {count}")

    if args.json:
        map_data = {
            "seed": seed_string,
            "numeric_seed": seed,
            "difficulty": config.difficulty.value,
            "start": [layout.start.x, layout.start.y],
            "exit": [layout.exit.x, layout.exit.y],
            "enemies": [[e.pos.x, e.pos.y] for e in layout.enemies],
            "tiles": [
                [{"type": t.type.value, "value": t.loot_value, "rarity": t.loot_rarity}
                 for t in row]
                for row in layout.grid
            ],
        }
        print("\nJSON:")
        print(json.dumps(map_data, indent=2))

    return 0


def cmd_play(args) -> int:
    """Interactive play in the terminal."""
    settings = load_settings()
    seed_string = resolve_seed(args.seed)
    stats = RunStatsStore.open(settings.stats_path)
    account = PlayerAccount(energy=settings.starting_energy)
    runner = ScavengerRunner(account, stats, seed=seed_string)

    print("=" * 60)
    print("Scavenger - Interactive Mode")
    print("=" * 60)
    print(format_seed_info(seed_string, runner.seed))

    if not runner.start_run(args.difficulty):
        print(f"Not enough energy ({account.energy}) for {args.difficulty}.")
        return 1

    print("Commands: w/a/s/d, move <x> <y>, status, map, abandon, help, quit")
    print()

    while runner.phase == GamePhase.PLAYING:
        print(runner.render())
        print(format_status(runner))
        try:
            cmd_input = input("> ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            print("\nAbandoning run...")
            runner.abandon_run()
            break

        if not cmd_input:
            continue

        parts = cmd_input.split()
        cmd = parts[0]

        if cmd in ("quit", "exit", "q", "abandon"):
            runner.abandon_run()
        elif cmd in KEY_DIRECTIONS:
            dx, dy = KEY_DIRECTIONS[cmd]
            if not runner.move_player(runner.run_state.player_pos.offset(dx, dy)):
                print("Blocked.")
        elif cmd == "move" and len(parts) == 3:
            try:
                target = Position(int(parts[1]), int(parts[2]))
            except ValueError:
                print("Usage: move <x> <y>")
                continue
            if not runner.move_player(target):
                print("Blocked.")
        elif cmd == "status":
            print(json.dumps(runner.get_run_statistics(), indent=2))
        elif cmd == "map":
            print(runner.render(reveal_all=True))
        elif cmd == "help":
            print("w/a/s/d: step | move x y | status | map | abandon | quit")
        else:
            print(f"Unknown command: {cmd}")

    run = runner.run_state
    print()
    print(runner.render(reveal_all=True))
    print(f"\nResult: {run.result.value}")
    if run.result == GameResult.SUCCESS:
        print(f"Banked {run.gc_collected} GC (balance {account.gamecoin_balance})")
    for item in run.collected_loot:
        print(f"  {item}")
    runner.cleanup()
    return 0


def cmd_simulate(args) -> int:
    """Play many runs with the exit-seeking bot and summarize outcomes."""
    seed_string = resolve_seed(args.seed)
    config = get_config(args.difficulty)
    stats = RunStatsStore()
    account = PlayerAccount(energy=config.energy_cost * args.runs)
    runner = ScavengerRunner(account, stats, seed=seed_string)
    agent = ExitSeekingAgent(safety_margin=args.margin)

    outcomes: Dict[str, int] = {r.value: 0 for r in GameResult}
    rewards: List[int] = []
    turns: List[int] = []

    for _ in range(args.runs):
        if not runner.start_run(config.difficulty):
            logger.warning("Simulation stopped early: run refused after %d runs", len(rewards))
            break
        play_run(runner, agent)
        run = runner.run_state
        outcomes[run.result.value] += 1
        rewards.append(run.gc_collected if run.result == GameResult.SUCCESS else 0)
        turns.append(run.turn_count)
        runner.cleanup()

    reward_arr = np.array(rewards, dtype=float)
    turn_arr = np.array(turns, dtype=float)
    played = len(rewards)

    summary: Dict[str, Any] = {
        "seed": seed_string,
        "difficulty": config.difficulty.value,
        "runs": played,
        "outcomes": outcomes,
        "success_rate": round(outcomes[GameResult.SUCCESS.value] / played, 4) if played else 0.0,
        "reward_mean": round(float(reward_arr.mean()), 2) if played else 0.0,
        "reward_median": float(np.median(reward_arr)) if played else 0.0,
        "reward_p90": float(np.percentile(reward_arr, 90)) if played else 0.0,
        "turns_mean": round(float(turn_arr.mean()), 2) if played else 0.0,
        "gc_banked": account.gamecoin_balance,
    }

    if args.json:
        print(json.dumps(summary, indent=2))
        return 0

    print(format_seed_info(seed_string, seed_to_long(seed_string)))
    print(f"Server: {config.name}  Runs: {played}")
    print("\nOutcomes:")
    for name, count in outcomes.items():
        print(f"  {name:10s} {count:6d}")
    print(f"\nSuccess rate: {summary['success_rate']:.1%}")
    print(f"Reward mean/median/p90: {summary['reward_mean']} / "
          f"{summary['reward_median']} / {summary['reward_p90']}")
    print(f"Turns mean: {summary['turns_mean']}")
    return 0


def cmd_stats(args) -> int:
    """Show persisted run statistics."""
    settings = load_settings()
    stats = RunStatsStore.open(settings.stats_path)
    data = stats.to_dict()

    if args.json:
        print(json.dumps(data, indent=2))
        return 0

    print(f"Stats file: {settings.stats_path}")
    print(f"  Total runs:      {data['total_runs']}")
    print(f"  Successful runs: {data['successful_runs']}")
    print(f"  Success rate:    {data['success_rate']:.1%}")
    print(f"  Total GC earned: {data['total_gc_earned']}")
    print(f"  Best haul:       {data['best_haul']}")
    return 0


def cmd_rng(args) -> int:
    """Display RNG sequence for a seed."""
    seed_string = args.seed.upper()
    seed = seed_to_long(seed_string)
    count = args.count

    print(format_seed_info(seed_string, seed))
    print()

    state = XorShift128(seed)
    print("XorShift128 Initial State:")
    print(f"  seed0: {state.seed0}")
    print(f"  seed1: {state.seed1}")
    print()

    rng = Random(seed)
    values = [rng.random_int(99) for _ in range(count)]
    print(f"First {count} random_int(99) values:")
    for i, val in enumerate(values):
        print(f"  {i}: {val}")
    print(f"\nRNG counter after {count} calls: {rng.counter}")

    if args.json:
        print("\nJSON:")
        print(json.dumps({"seed": seed_string, "numeric_seed": seed,
                          "random_int_99": values}, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scavenger - dungeon-crawler engine CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s map --seed ABC123 --difficulty easy
  %(prog)s play --seed ABC123 --difficulty medium
  %(prog)s simulate --runs 500 --difficulty hard
  %(prog)s stats
  %(prog)s rng --seed ABC123 --count 20
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Map command
    map_parser = subparsers.add_parser("map", help="Generate and display a map")
    map_parser.add_argument("--seed", "-s", help="Seed (e.g., ABC123)")
    map_parser.add_argument("--difficulty", "-d", default="easy", choices=DIFFICULTY_CHOICES)
    map_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a run interactively")
    play_parser.add_argument("--seed", "-s", help="Seed")
    play_parser.add_argument("--difficulty", "-d", default="easy", choices=DIFFICULTY_CHOICES)

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Bot-play many runs")
    sim_parser.add_argument("--runs", "-n", type=int, default=100, help="Number of runs")
    sim_parser.add_argument("--seed", "-s", help="Seed")
    sim_parser.add_argument("--difficulty", "-d", default="easy", choices=DIFFICULTY_CHOICES)
    sim_parser.add_argument("--margin", type=int, default=3, help="Bot spare-move margin")
    sim_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show persisted run statistics")
    stats_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # RNG command
    rng_parser = subparsers.add_parser("rng", help="Show RNG sequence")
    rng_parser.add_argument("--seed", "-s", required=True, help="Seed")
    rng_parser.add_argument("--count", "-n", type=int, default=20, help="Number of values to show")
    rng_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if not args.command:
        parser.print_help()
        return 1

    # Dispatch to command handler
    commands = {
        "map": cmd_map,
        "play": cmd_play,
        "simulate": cmd_simulate,
        "stats": cmd_stats,
        "rng": cmd_rng,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
