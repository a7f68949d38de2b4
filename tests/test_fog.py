"""
Fog of War Tests
"""

from packages.scavenger.calc.fog import VISION_RANGE, reveal_fog
from packages.scavenger.calc.geometry import chebyshev
from packages.scavenger.state.run import Position, create_empty_grid


def visible_cells(grid):
    return {Position(x, y) for y, row in enumerate(grid)
            for x, tile in enumerate(row) if tile.visible}


def revealed_cells(grid):
    return {Position(x, y) for y, row in enumerate(grid)
            for x, tile in enumerate(row) if tile.revealed}


class TestRevealFog:

    def test_center_square(self):
        grid = create_empty_grid(8)
        assert reveal_fog(grid, Position(4, 4)) == 25
        visible = visible_cells(grid)
        assert len(visible) == 25
        assert all(chebyshev(p, Position(4, 4)) <= VISION_RANGE for p in visible)
        assert Position(6, 6) in visible
        assert Position(7, 7) not in visible

    def test_corner_clipped(self):
        grid = create_empty_grid(8)
        assert reveal_fog(grid, Position(0, 0)) == 9
        assert len(visible_cells(grid)) == 9

    def test_visible_recomputed_revealed_kept(self):
        grid = create_empty_grid(8)
        reveal_fog(grid, Position(0, 0))
        first = revealed_cells(grid)
        reveal_fog(grid, Position(4, 0))
        assert not grid[0][0].visible
        assert grid[0][0].revealed
        assert first <= revealed_cells(grid)

    def test_returns_newly_revealed_only(self):
        grid = create_empty_grid(8)
        reveal_fog(grid, Position(2, 2))
        assert reveal_fog(grid, Position(2, 2)) == 0
        # One column further right adds one new column of 5
        assert reveal_fog(grid, Position(3, 2)) == 5

    def test_custom_radius(self):
        grid = create_empty_grid(8)
        assert reveal_fog(grid, Position(4, 4), radius=0) == 1
        assert visible_cells(grid) == {Position(4, 4)}
