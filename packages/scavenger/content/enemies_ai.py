"""
Enemy AI - greedy pursuit of the player.

Each enemy moves at most one cell per player turn, in array order:
1. Primary step along the axis with the larger absolute delta to the player
   (x wins ties), then the secondary axis step, each only if nonzero
2. All four unit directions in random order as fallbacks, skipping any
   already listed
3. The first candidate that is in bounds, not a wall, not a sealed door and
   not occupied by another enemy is taken; otherwise the enemy stays put

Because earlier enemies move first, later enemies see their updated
positions. This ordering is intentional and deterministic for a fixed RNG.
"""

import logging
from typing import List

from ..calc.geometry import DIRECTIONS, sign
from ..state.rng import shuffled
from ..state.run import Enemy, Grid, Position

logger = logging.getLogger(__name__)


def candidate_moves(enemy_pos: Position, player_pos: Position, rng) -> List[Position]:
    """Ordered list of cells the enemy will try this turn."""
    dx = player_pos.x - enemy_pos.x
    dy = player_pos.y - enemy_pos.y

    step_x = enemy_pos.offset(sign(dx), 0) if dx != 0 else None
    step_y = enemy_pos.offset(0, sign(dy)) if dy != 0 else None

    if abs(dx) >= abs(dy):
        direct = [step_x, step_y]
    else:
        direct = [step_y, step_x]
    moves = [m for m in direct if m is not None]

    for ddx, ddy in shuffled(DIRECTIONS, rng):
        fallback = enemy_pos.offset(ddx, ddy)
        if fallback not in moves:
            moves.append(fallback)

    return moves


def can_enter(grid: Grid, pos: Position, enemies: List[Enemy], mover_id: int) -> bool:
    """Whether an enemy may step onto pos."""
    size = len(grid)
    if not (0 <= pos.x < size and 0 <= pos.y < size):
        return False
    tile = grid[pos.y][pos.x]
    if tile.is_wall() or tile.is_sealed():
        return False
    return not any(e.id != mover_id and e.pos == pos for e in enemies)


def move_enemies(grid: Grid, enemies: List[Enemy], player_pos: Position, rng) -> int:
    """
    Advance every enemy one step towards the player.

    Mutates enemy positions in place. Returns how many enemies moved.
    """
    moved = 0
    for enemy in enemies:
        for candidate in candidate_moves(enemy.pos, player_pos, rng):
            if can_enter(grid, candidate, enemies, enemy.id):
                enemy.pos = candidate
                moved += 1
                break
        else:
            logger.debug("Enemy %d boxed in at %s", enemy.id, enemy.pos)
    return moved
