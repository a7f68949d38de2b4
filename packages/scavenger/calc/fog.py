"""
Fog of war.

Visibility is a Chebyshev-radius square around the player. `visible` is
recomputed for every tile on every call; `revealed` only ever turns on.
"""

from ..state.run import Grid, Position
from .geometry import chebyshev


VISION_RANGE = 2


def reveal_fog(grid: Grid, center: Position, radius: int = VISION_RANGE) -> int:
    """
    Recompute visibility around center.

    Returns the number of tiles revealed for the first time by this call.
    """
    newly_revealed = 0
    for y, row in enumerate(grid):
        for x, tile in enumerate(row):
            if chebyshev(center, Position(x, y)) <= radius:
                if not tile.revealed:
                    newly_revealed += 1
                tile.revealed = True
                tile.visible = True
            else:
                tile.visible = False
    return newly_revealed
