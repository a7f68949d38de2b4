"""Map generation: connectivity validation and grid layout."""

from .connectivity import is_reachable, reachable_cells, try_place_wall
from .grid import (
    GridGenerator, GeneratedGrid, loot_composition, grid_to_string,
    MAX_WALL_ATTEMPTS, EXIT_MIN_DISTANCE, ENEMY_MIN_DISTANCE,
)

__all__ = [
    "is_reachable", "reachable_cells", "try_place_wall",
    "GridGenerator", "GeneratedGrid", "loot_composition", "grid_to_string",
    "MAX_WALL_ATTEMPTS", "EXIT_MIN_DISTANCE", "ENEMY_MIN_DISTANCE",
]
