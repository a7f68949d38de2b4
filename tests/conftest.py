"""
Shared pytest fixtures for the Scavenger test suite.

This module provides reusable fixtures for:
- RNG with known seeds
- Accounts, stats stores and effect recorders
- Hand-built grids from ASCII rows
- Runners with a hand-built run already in progress
"""

import pytest
import sys

# Ensure project root is in path
import os
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.scavenger.content.difficulty import Difficulty, get_config
from packages.scavenger.calc.fog import reveal_fog
from packages.scavenger.game import GamePhase, ScavengerRunner
from packages.scavenger.services.effects import RecordingEffectPlayer
from packages.scavenger.services.ledger import PlayerAccount
from packages.scavenger.services.stats import RunStatsStore
from packages.scavenger.state.rng import Random
from packages.scavenger.state.run import (
    Enemy, Position, RunState, Tile, TileType,
)


# =============================================================================
# Grid builder
# =============================================================================

# Values used for hand-built value tiles
GC_TILE_VALUE = 50
VAULT_TILE_VALUE = 300
MATERIAL_TILE_RARITY = "rare"

_CHAR_TYPES = {
    ".": TileType.EMPTY,
    "P": TileType.EMPTY,
    "E": TileType.EMPTY,
    "#": TileType.WALL,
    "X": TileType.EXIT,
    "$": TileType.LOOT_GC,
    "m": TileType.LOOT_MATERIAL,
    "d": TileType.LOOT_DATA,
    "k": TileType.KEYCARD,
    "D": TileType.LOCKED_DOOR,
    "T": TileType.TERMINAL,
}


def grid_from_rows(rows):
    """
    Build a grid from ASCII rows (one char per cell, spaces ignored).

    Returns (grid, player, exit, enemy_positions). Missing P / X give None.
    """
    grid = []
    player = None
    exit_pos = None
    enemies = []
    for y, raw in enumerate(rows):
        row = []
        for x, char in enumerate(raw.replace(" ", "")):
            tile = Tile(type=_CHAR_TYPES[char])
            if char == "$":
                tile.loot_value = GC_TILE_VALUE
            elif char == "m":
                tile.loot_rarity = MATERIAL_TILE_RARITY
            elif char == "D":
                tile.locked = True
                tile.loot_value = VAULT_TILE_VALUE
            elif char == "P":
                player = Position(x, y)
            elif char == "X":
                exit_pos = Position(x, y)
            elif char == "E":
                enemies.append(Position(x, y))
            row.append(tile)
        grid.append(row)
    return grid, player, exit_pos, enemies


def build_run_state(rows, difficulty=Difficulty.EASY, moves=None):
    """RunState for an ASCII layout, fog initialised around the player."""
    grid, player, exit_pos, enemy_positions = grid_from_rows(rows)
    config = get_config(difficulty)
    if exit_pos is None:
        exit_pos = Position(len(grid) - 1, len(grid) - 1)
    reveal_fog(grid, player)
    move_pool = config.move_pool if moves is None else moves
    return RunState(
        grid=grid,
        player_pos=player,
        exit_pos=exit_pos,
        start_pos=player,
        enemies=[Enemy(id=i, pos=p) for i, p in enumerate(enemy_positions)],
        config=config,
        moves_remaining=move_pool,
        move_pool=move_pool,
    )


def install_run(runner, run_state):
    """Put a runner into PLAYING with a prepared run."""
    runner.run_state = run_state
    runner.phase = GamePhase.PLAYING
    return runner


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def rng_seed_42():
    """RNG initialized with seed 42 for deterministic tests."""
    return Random(42)


@pytest.fixture
def rng_seed_12345():
    """RNG initialized with seed 12345 for deterministic tests."""
    return Random(12345)


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture
def account():
    """Player with enough energy for several runs."""
    return PlayerAccount(energy=100)


@pytest.fixture
def stats_store():
    """In-memory stats store (no file)."""
    return RunStatsStore()


@pytest.fixture
def effects():
    return RecordingEffectPlayer()


@pytest.fixture
def easy_config():
    return get_config(Difficulty.EASY)


# =============================================================================
# Runner Fixtures
# =============================================================================


@pytest.fixture
def runner(account, stats_store, effects):
    """Seeded runner in SELECT."""
    return ScavengerRunner(account, stats_store, effects=effects, seed="TEST123")


@pytest.fixture
def make_runner(account, stats_store, effects):
    """Factory: runner already PLAYING the given ASCII layout."""
    def _make(rows, difficulty=Difficulty.EASY, moves=None, seed=42):
        r = ScavengerRunner(account, stats_store, effects=effects, seed=seed)
        return install_run(r, build_run_state(rows, difficulty, moves))
    return _make
