"""
Grid geometry helpers: distance metrics, unit directions, bounds.

Manhattan distance drives adjacency and placement spacing; Chebyshev
distance drives the vision radius.
"""

from typing import List, Tuple

from ..state.run import Position


# Up, down, left, right
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (0, -1),
    (0, 1),
    (-1, 0),
    (1, 0),
)


def manhattan(a: Position, b: Position) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def chebyshev(a: Position, b: Position) -> int:
    return max(abs(a.x - b.x), abs(a.y - b.y))


def sign(value: int) -> int:
    return (value > 0) - (value < 0)


def in_bounds(pos: Position, size: int) -> bool:
    return 0 <= pos.x < size and 0 <= pos.y < size


def neighbors(pos: Position, size: int) -> List[Position]:
    """In-bounds 4-directional neighbours, in DIRECTIONS order."""
    result = []
    for dx, dy in DIRECTIONS:
        candidate = pos.offset(dx, dy)
        if in_bounds(candidate, size):
            result.append(candidate)
    return result


def border_positions(size: int) -> List[Position]:
    """
    Every border cell exactly once.

    Order: for each i, top then bottom, then left and right for the
    non-corner rows.
    """
    edges = []
    for i in range(size):
        edges.append(Position(i, 0))
        edges.append(Position(i, size - 1))
        if 0 < i < size - 1:
            edges.append(Position(0, i))
            edges.append(Position(size - 1, i))
    return edges
