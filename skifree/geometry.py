"""
Geometry Helpers
=================
Axis-aligned rectangles and vector math. Pure functions, no state.
"""

from dataclasses import dataclass
from typing import Tuple
import math


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in world meters. y grows downhill."""
    top: float
    left: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


# Far off-world and zero area: overlaps nothing
INVALID_HITBOX = Rect(-1000.0, -1000.0, 0.0, 0.0)


def translated_hitbox(x: float, y: float, hitbox: Tuple[int, int, int, int],
                      pixels_per_meter: float) -> Rect:
    """Convert a pixel hitbox (top, left, width, height) to world meters around (x, y)."""
    top, left, width, height = hitbox
    return Rect(
        top=y + top / pixels_per_meter,
        left=x + left / pixels_per_meter,
        width=width / pixels_per_meter,
        height=height / pixels_per_meter,
    )


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Strict AABB overlap test; touching edges do not count."""
    return (
        a.left < b.right and
        a.right > b.left and
        a.top < b.bottom and
        a.bottom > b.top
    )


def vec_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    dx = x2 - x1
    dy = y2 - y1
    return math.sqrt(dx * dx + dy * dy)


def deg_to_rad(degrees: float) -> float:
    return degrees * (math.pi / 180)
