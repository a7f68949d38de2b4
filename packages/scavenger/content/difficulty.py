"""
Difficulty tiers for Scavenger runs.

Each tier is a named server the player breaks into. Pure data: the grid
generator, loot handler and lifecycle read these values, nothing here has
behaviour beyond lookup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union


class Difficulty(Enum):
    """Difficulty tiers."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyConfig:
    """Parameter set for one tier."""
    difficulty: Difficulty
    name: str
    energy_cost: int
    move_pool: int
    enemy_count: int
    loot_count: int
    wall_percent: float
    gc_range: Tuple[int, int]
    material_rarities: Tuple[str, ...]

    @property
    def gc_min(self) -> int:
        return self.gc_range[0]

    @property
    def gc_max(self) -> int:
        return self.gc_range[1]

    @property
    def vault_range(self) -> Tuple[int, int]:
        """Locked-door reward range: double the gc range."""
        return (self.gc_min * 2, self.gc_max * 2)

    @property
    def fragment_bonus_range(self) -> Tuple[int, int]:
        """Data-fragment combo bonus range: [gc_max, 2 * gc_max]."""
        return (self.gc_max, self.gc_max * 2)


SERVER_CONFIGS: Dict[Difficulty, DifficultyConfig] = {
    Difficulty.EASY: DifficultyConfig(
        difficulty=Difficulty.EASY,
        name="Decommissioned Server",
        energy_cost=20,
        move_pool=35,
        enemy_count=2,
        loot_count=5,
        wall_percent=0.15,
        gc_range=(10, 200),
        material_rarities=("common", "uncommon"),
    ),
    Difficulty.MEDIUM: DifficultyConfig(
        difficulty=Difficulty.MEDIUM,
        name="Corrupted Datacenter",
        energy_cost=25,
        move_pool=30,
        enemy_count=3,
        loot_count=6,
        wall_percent=0.20,
        gc_range=(50, 350),
        material_rarities=("common", "uncommon", "rare"),
    ),
    Difficulty.HARD: DifficultyConfig(
        difficulty=Difficulty.HARD,
        name="Quarantined Mainframe",
        energy_cost=30,
        move_pool=25,
        enemy_count=4,
        loot_count=8,
        wall_percent=0.25,
        gc_range=(100, 500),
        material_rarities=("uncommon", "rare", "epic"),
    ),
}


def parse_difficulty(value: Union[str, Difficulty]) -> Difficulty:
    """Resolve a tier from its enum or (case-insensitive) name."""
    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown difficulty: {value}") from None


def get_config(value: Union[str, Difficulty]) -> DifficultyConfig:
    """Get the parameter set for a tier."""
    return SERVER_CONFIGS[parse_difficulty(value)]
