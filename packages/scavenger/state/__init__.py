"""
State module - run state and random sources.

Contains:
- Random sources (seeded XorShift128, system entropy, seed strings)
- Run state: grid tiles, positions, enemies, loot
"""

from .rng import (
    XorShift128, Random, SystemRandom, random_choice, shuffled,
    seed_to_long, long_to_seed, new_seed,
)

from .run import (
    GRID_SIZE,
    TileType,
    LootType,
    GameResult,
    BANKABLE_LOOT,
    Position,
    Tile,
    Grid,
    Enemy,
    LootItem,
    RunState,
    create_empty_grid,
)

__all__ = [
    # RNG
    "XorShift128", "Random", "SystemRandom", "random_choice", "shuffled",
    "seed_to_long", "long_to_seed", "new_seed",
    # Run State
    "GRID_SIZE",
    "TileType",
    "LootType",
    "GameResult",
    "BANKABLE_LOOT",
    "Position",
    "Tile",
    "Grid",
    "Enemy",
    "LootItem",
    "RunState",
    "create_empty_grid",
]
