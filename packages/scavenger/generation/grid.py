"""
Grid Generation - builds the map for one Scavenger run.

Generation order (every random pick goes through the injected RNG):
1. Player start: uniformly random border cell
2. Exit: random border cell at Manhattan distance >= 8 from the start,
   falling back to any other border cell
3. Walls: up to floor(area * wall_percent), each kept only if the start can
   still reach the exit; at most 200 attempts, partial results accepted
4. Exit tile marked
5. Loot: ~50% gc, ~30% material, remainder (max 3) data fragments
6. One terminal
7. One keycard, then one locked door if a free cell remains
8. Enemies at Manhattan distance >= 4 from the start; slots with no
   eligible cell are left unfilled
9. Initial fog of war around the start

Usage:
    rng = Random(seed_to_long("ABC123"))
    generator = GridGenerator(rng, get_config("easy"))
    layout = generator.generate()
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from ..calc.fog import reveal_fog
from ..calc.geometry import border_positions, manhattan
from ..content.difficulty import DifficultyConfig
from ..state.rng import random_choice
from ..state.run import (
    GRID_SIZE, Enemy, Grid, Position, TileType, create_empty_grid,
)
from .connectivity import try_place_wall

logger = logging.getLogger(__name__)


# Constants matching the live game
MAX_WALL_ATTEMPTS = 200
EXIT_MIN_DISTANCE = 8
ENEMY_MIN_DISTANCE = 4
MAX_DATA_TILES = 3
GC_LOOT_SHARE = 0.5
MATERIAL_LOOT_SHARE = 0.3


@dataclass
class GeneratedGrid:
    """Result of one generation pass."""
    grid: Grid
    start: Position
    exit: Position
    enemies: List[Enemy] = field(default_factory=list)
    walls_placed: int = 0
    wall_target: int = 0
    wall_attempts: int = 0


def loot_composition(loot_count: int) -> List[TileType]:
    """Tile types to scatter for a loot budget, gc first then materials then data."""
    gc_count = math.ceil(loot_count * GC_LOOT_SHARE)
    material_count = math.floor(loot_count * MATERIAL_LOOT_SHARE)
    data_count = max(0, min(MAX_DATA_TILES, loot_count - gc_count - material_count))

    return ([TileType.LOOT_GC] * gc_count
            + [TileType.LOOT_MATERIAL] * material_count
            + [TileType.LOOT_DATA] * data_count)


class GridGenerator:
    """
    Generates a Scavenger map for one difficulty tier.

    The generator is single-use per call to generate(); it holds no state
    between calls other than the RNG it draws from.
    """

    def __init__(self, rng, config: DifficultyConfig, size: int = GRID_SIZE):
        """
        Args:
            rng: Random source (Random or SystemRandom)
            config: Difficulty parameters
            size: Grid edge length
        """
        self.rng = rng
        self.config = config
        self.size = size

    def generate(self) -> GeneratedGrid:
        grid = create_empty_grid(self.size)

        start = self._random_edge_position()
        exit_pos = self._random_edge_position(exclude=start)

        grid, walls_placed, wall_target, attempts = self._place_walls(grid, start, exit_pos)

        grid[exit_pos.y][exit_pos.x].type = TileType.EXIT

        occupied: List[Position] = [start, exit_pos]
        self._place_loot(grid, occupied)
        self._place_terminal(grid, occupied)
        self._place_vault(grid, occupied)
        enemies = self._place_enemies(grid, occupied, start)

        reveal_fog(grid, start)

        logger.debug(
            "Generated %s grid: start=%s exit=%s walls=%d/%d (%d attempts) enemies=%d/%d",
            self.config.difficulty.value, start, exit_pos, walls_placed, wall_target,
            attempts, len(enemies), self.config.enemy_count,
        )

        return GeneratedGrid(
            grid=grid,
            start=start,
            exit=exit_pos,
            enemies=enemies,
            walls_placed=walls_placed,
            wall_target=wall_target,
            wall_attempts=attempts,
        )

    # =========================================================================
    # Placement helpers
    # =========================================================================

    def _random_edge_position(self, exclude: Optional[Position] = None) -> Position:
        """Random border cell, preferring cells far from `exclude`."""
        edges = border_positions(self.size)
        if exclude is None:
            return random_choice(edges, self.rng)

        far = [p for p in edges if manhattan(p, exclude) >= EXIT_MIN_DISTANCE]
        candidates = far if far else [p for p in edges if p != exclude]
        return random_choice(candidates, self.rng)

    def _random_empty(self, grid: Grid, occupied: List[Position],
                      min_dist_from: Optional[Position] = None,
                      min_dist: int = ENEMY_MIN_DISTANCE) -> Optional[Position]:
        """Random EMPTY, unoccupied cell (optionally far enough from a point)."""
        taken = set(occupied)
        candidates = []
        for y in range(self.size):
            for x in range(self.size):
                if grid[y][x].type != TileType.EMPTY:
                    continue
                pos = Position(x, y)
                if pos in taken:
                    continue
                if min_dist_from is not None and manhattan(pos, min_dist_from) < min_dist:
                    continue
                candidates.append(pos)

        if not candidates:
            return None
        return random_choice(candidates, self.rng)

    def _place_walls(self, grid: Grid, start: Position, exit_pos: Position):
        wall_target = math.floor(self.size * self.size * self.config.wall_percent)
        walls_placed = 0
        attempts = 0

        while walls_placed < wall_target and attempts < MAX_WALL_ATTEMPTS:
            attempts += 1
            pos = Position(self.rng.random_int(self.size - 1),
                           self.rng.random_int(self.size - 1))
            updated = try_place_wall(grid, pos, start, exit_pos)
            if updated is not None:
                grid = updated
                walls_placed += 1

        return grid, walls_placed, wall_target, attempts

    def _place_loot(self, grid: Grid, occupied: List[Position]) -> None:
        for tile_type in loot_composition(self.config.loot_count):
            pos = self._random_empty(grid, occupied)
            if pos is None:
                continue
            tile = grid[pos.y][pos.x]
            tile.type = tile_type
            if tile_type == TileType.LOOT_GC:
                tile.loot_value = self.rng.random_int_range(*self.config.gc_range)
            elif tile_type == TileType.LOOT_MATERIAL:
                tile.loot_rarity = random_choice(self.config.material_rarities, self.rng)
            occupied.append(pos)

    def _place_terminal(self, grid: Grid, occupied: List[Position]) -> None:
        pos = self._random_empty(grid, occupied)
        if pos is not None:
            grid[pos.y][pos.x].type = TileType.TERMINAL
            occupied.append(pos)

    def _place_vault(self, grid: Grid, occupied: List[Position]) -> None:
        """Keycard first; the locked door only exists if its keycard does."""
        keycard = self._random_empty(grid, occupied)
        if keycard is None:
            return
        grid[keycard.y][keycard.x].type = TileType.KEYCARD
        occupied.append(keycard)

        door = self._random_empty(grid, occupied)
        if door is None:
            return
        tile = grid[door.y][door.x]
        tile.type = TileType.LOCKED_DOOR
        tile.locked = True
        tile.loot_value = self.rng.random_int_range(*self.config.vault_range)
        occupied.append(door)

    def _place_enemies(self, grid: Grid, occupied: List[Position],
                       start: Position) -> List[Enemy]:
        enemies = []
        for i in range(self.config.enemy_count):
            pos = self._random_empty(grid, occupied, min_dist_from=start,
                                     min_dist=ENEMY_MIN_DISTANCE)
            if pos is None:
                continue
            enemies.append(Enemy(id=i, pos=pos))
            occupied.append(pos)
        return enemies


def grid_to_string(grid: Grid, player: Optional[Position] = None,
                   enemies: Optional[List[Enemy]] = None,
                   reveal_all: bool = True) -> str:
    """
    ASCII rendering of a grid.

    @ player, E enemy, X exit, # wall, $ gc, m material, d data, k keycard,
    D locked door, T terminal, . empty or already collected. Tiles never
    revealed render as a blank unless reveal_all is set.
    """
    symbols = {
        TileType.EMPTY: ".",
        TileType.WALL: "#",
        TileType.EXIT: "X",
        TileType.LOOT_GC: "$",
        TileType.LOOT_MATERIAL: "m",
        TileType.LOOT_DATA: "d",
        TileType.KEYCARD: "k",
        TileType.LOCKED_DOOR: "D",
        TileType.TERMINAL: "T",
    }
    enemy_cells = {e.pos for e in enemies or []}

    lines = []
    for y, row in enumerate(grid):
        cells = []
        for x, tile in enumerate(row):
            pos = Position(x, y)
            if player is not None and pos == player:
                cells.append("@")
            elif not reveal_all and not tile.revealed:
                cells.append(" ")
            elif pos in enemy_cells and (reveal_all or tile.visible):
                cells.append("E")
            elif tile.collected and tile.type not in (TileType.EXIT, TileType.LOCKED_DOOR):
                cells.append(".")
            elif tile.type == TileType.LOCKED_DOOR and not tile.locked:
                cells.append("/")
            else:
                cells.append(symbols[tile.type])
        lines.append(" ".join(cells))
    return "\n".join(lines)
