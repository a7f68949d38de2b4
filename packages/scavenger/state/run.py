"""
Run State - Complete state of a Scavenger run in progress.

The grid is a list of rows indexed grid[y][x]. Tiles never move after
generation; only their per-run flags (revealed, visible, collected, locked)
change. Enemies and the player are tracked by Position, not stored on tiles.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..content.difficulty import Difficulty, DifficultyConfig


GRID_SIZE = 8


class TileType(Enum):
    """What occupies a grid cell."""
    EMPTY = "empty"
    WALL = "wall"
    EXIT = "exit"
    LOOT_GC = "loot_gc"
    LOOT_MATERIAL = "loot_material"
    LOOT_DATA = "loot_data"
    KEYCARD = "keycard"
    LOCKED_DOOR = "locked_door"
    TERMINAL = "terminal"


class LootType(Enum):
    """Category of a collected loot item."""
    GC = "gc"
    MATERIAL = "material"
    DATA_FRAGMENT = "data_fragment"
    TERMINAL_BONUS = "terminal_bonus"


class GameResult(Enum):
    """Terminal outcome of a run."""
    SUCCESS = "success"
    CAUGHT = "caught"
    NO_MOVES = "no_moves"
    ABANDONED = "abandoned"


# Loot types that count towards the banked GameCoin total
BANKABLE_LOOT = (LootType.GC, LootType.TERMINAL_BONUS)


@dataclass(frozen=True)
class Position:
    """Grid coordinate. Bounds are [0, grid size)."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> 'Position':
        return Position(self.x + dx, self.y + dy)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass
class Tile:
    """
    A single grid cell.

    revealed: ever seen during this run (never reset)
    visible: inside the vision radius after the latest move
    collected: reward already claimed (never reset)
    locked: door state, only meaningful for LOCKED_DOOR
    """
    type: TileType = TileType.EMPTY
    revealed: bool = False
    visible: bool = False
    collected: bool = False
    locked: bool = False
    loot_value: Optional[int] = None
    loot_rarity: Optional[str] = None

    def is_wall(self) -> bool:
        return self.type == TileType.WALL

    def is_sealed(self) -> bool:
        """A locked door that has not been opened yet."""
        return self.type == TileType.LOCKED_DOOR and self.locked


Grid = List[List[Tile]]


def create_empty_grid(size: int = GRID_SIZE) -> Grid:
    """Create a size x size grid of fresh EMPTY tiles."""
    return [[Tile() for _ in range(size)] for _ in range(size)]


@dataclass
class Enemy:
    """A pursuing enemy."""
    id: int
    pos: Position


@dataclass
class LootItem:
    """One entry in the collected-loot list."""
    type: LootType
    name: str
    value: int
    rarity: Optional[str] = None

    def __repr__(self) -> str:
        if self.rarity:
            return f"{self.name}[{self.rarity}]={self.value}"
        return f"{self.name}={self.value}"


@dataclass
class RunState:
    """
    Complete state of a run in progress.

    Created by ScavengerRunner.start_run, mutated only while the runner is
    resolving a turn, dropped on cleanup.
    """

    # ==================== MAP ====================
    grid: Grid
    player_pos: Position
    exit_pos: Position
    start_pos: Position          # Generation-time start, kept for audits
    enemies: List[Enemy] = field(default_factory=list)

    # ==================== CONFIG ====================
    config: Optional["DifficultyConfig"] = None

    # ==================== MOVE BUDGET ====================
    moves_remaining: int = 0
    move_pool: int = 0
    turn_count: int = 0

    # ==================== LOOT ====================
    collected_loot: List[LootItem] = field(default_factory=list)
    has_keycard: bool = False
    data_fragments: int = 0

    # ==================== OUTCOME ====================
    result: Optional[GameResult] = None
    game_active: bool = True

    @property
    def size(self) -> int:
        return len(self.grid)

    @property
    def difficulty(self) -> Optional["Difficulty"]:
        return self.config.difficulty if self.config else None

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def tile_at(self, pos: Position) -> Tile:
        return self.grid[pos.y][pos.x]

    def enemy_at(self, pos: Position) -> Optional[Enemy]:
        for enemy in self.enemies:
            if enemy.pos == pos:
                return enemy
        return None

    @property
    def gc_collected(self) -> int:
        """Sum of all bankable loot (gc + terminal bonus)."""
        return sum(item.value for item in self.collected_loot
                   if item.type in BANKABLE_LOOT)

    @property
    def materials_collected(self) -> List[LootItem]:
        return [item for item in self.collected_loot
                if item.type == LootType.MATERIAL]

    def revealed_count(self) -> int:
        return sum(1 for row in self.grid for tile in row if tile.revealed)
