"""
Connectivity Validator - reachability checks over a tile grid.

Walls are the only blocking tile for connectivity purposes; locked doors,
loot and the exit all count as passable. Nothing in this module mutates the
grid it is given.
"""

from collections import deque
from dataclasses import replace
from typing import Optional, Set

from ..calc.geometry import neighbors
from ..state.run import Grid, Position, TileType


def is_reachable(grid: Grid, start: Position, end: Position) -> bool:
    """
    4-directional breadth-first search from start to end over non-wall cells.

    Returns True on the first visit to end, False once the frontier empties.
    """
    size = len(grid)
    visited: Set[Position] = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == end:
            return True

        for nxt in neighbors(current, size):
            if nxt in visited:
                continue
            if grid[nxt.y][nxt.x].type == TileType.WALL:
                continue
            visited.add(nxt)
            queue.append(nxt)

    return False


def reachable_cells(grid: Grid, start: Position) -> Set[Position]:
    """Every non-wall cell 4-connected to start (start included)."""
    size = len(grid)
    visited: Set[Position] = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for nxt in neighbors(current, size):
            if nxt not in visited and grid[nxt.y][nxt.x].type != TileType.WALL:
                visited.add(nxt)
                queue.append(nxt)

    return visited


def try_place_wall(grid: Grid, pos: Position,
                   start: Position, end: Position) -> Optional[Grid]:
    """
    Transactional wall placement.

    Returns a new grid with a wall at pos if pos is an EMPTY cell other than
    start/end and start can still reach end afterwards. Otherwise returns
    None and the caller keeps its grid. The input grid is never modified;
    rows are copied and only the wall cell gets a new Tile.
    """
    if pos == start or pos == end:
        return None
    if grid[pos.y][pos.x].type != TileType.EMPTY:
        return None

    candidate = [row[:] for row in grid]
    candidate[pos.y][pos.x] = replace(grid[pos.y][pos.x], type=TileType.WALL)

    if not is_reachable(candidate, start, end):
        return None
    return candidate
