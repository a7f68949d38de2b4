"""Grid geometry and visibility calculations."""

from .geometry import (
    DIRECTIONS, manhattan, chebyshev, sign, in_bounds, neighbors, border_positions,
)
from .fog import VISION_RANGE, reveal_fog

__all__ = [
    "DIRECTIONS", "manhattan", "chebyshev", "sign", "in_bounds", "neighbors",
    "border_positions", "VISION_RANGE", "reveal_fog",
]
