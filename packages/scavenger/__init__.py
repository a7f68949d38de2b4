"""
Scavenger Engine

Deterministic game-state machine for the Scavenger dungeon-crawler mini-game:
break into a server, grab loot under fog of war, dodge pursuing enemies and
reach the exit before the move budget runs out.

Core subsystems:
- state: random sources, run state (grid, tiles, enemies, loot)
- content: difficulty tiers, enemy pursuit AI
- calc: distance metrics, fog of war
- generation: connectivity validator, grid generator
- handlers: movement rules, loot resolution and banking
- services: energy/currency ledger, run statistics, effect hooks

Usage:
    from packages.scavenger import ScavengerRunner, PlayerAccount, RunStatsStore

    runner = ScavengerRunner(PlayerAccount(energy=100), RunStatsStore(), seed="ABC123")
    runner.start_run("easy")
    while runner.game_active:
        actions = runner.get_available_actions()
        runner.take_action(actions[0])
"""

__version__ = "0.1.0"

from .state import (
    Random, SystemRandom, seed_to_long, long_to_seed,
    Position, Tile, TileType, Enemy, LootItem, LootType, GameResult, RunState,
    GRID_SIZE,
)
from .content import Difficulty, DifficultyConfig, SERVER_CONFIGS, get_config
from .calc import reveal_fog, manhattan, chebyshev, VISION_RANGE
from .generation import GridGenerator, GeneratedGrid, is_reachable, try_place_wall
from .handlers import LootHandler, MovementHandler
from .services import (
    EffectEvent, EffectPlayer, NullEffectPlayer, RecordingEffectPlayer,
    EnergyLedger, PlayerAccount, RunStats, RunStatsRecorder, RunStatsStore,
)
from .game import ScavengerRunner, GamePhase, MoveAction, TileView, TurnLogEntry

__all__ = [
    "__version__",
    # State
    "Random", "SystemRandom", "seed_to_long", "long_to_seed",
    "Position", "Tile", "TileType", "Enemy", "LootItem", "LootType",
    "GameResult", "RunState", "GRID_SIZE",
    # Content
    "Difficulty", "DifficultyConfig", "SERVER_CONFIGS", "get_config",
    # Calc
    "reveal_fog", "manhattan", "chebyshev", "VISION_RANGE",
    # Generation
    "GridGenerator", "GeneratedGrid", "is_reachable", "try_place_wall",
    # Handlers
    "LootHandler", "MovementHandler",
    # Services
    "EffectEvent", "EffectPlayer", "NullEffectPlayer", "RecordingEffectPlayer",
    "EnergyLedger", "PlayerAccount", "RunStats", "RunStatsRecorder", "RunStatsStore",
    # Runner
    "ScavengerRunner", "GamePhase", "MoveAction", "TileView", "TurnLogEntry",
]
