"""Geometry primitives shared by the partition tree and corridor router.

Coordinates follow terminal conventions: ``x`` grows to the right and ``y``
grows downward, so "north" means a smaller ``y``.
"""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional, Tuple

Point = Tuple[int, int]


class Rect(NamedTuple):
    x1: int
    y1: int
    x2: int
    y2: int

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    @property
    def centroid(self) -> Point:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    @property
    def far_corner_half(self) -> Point:
        # Legacy corridor endpoint: half of the far corner, not the centroid.
        return (self.x2 // 2, self.y2 // 2)

    def inset(self, min_x: int, min_y: int, max_x: int, max_y: int) -> "Rect":
        return Rect(self.x1 + min_x, self.y1 + min_y, self.x2 - max_x, self.y2 - max_y)

    def contains(self, x: int, y: int) -> bool:
        return self.x1 <= x < self.x2 and self.y1 <= y < self.y2

    def to_list(self):
        return [self.x1, self.y1, self.x2, self.y2]


CENTER_MODES = ("centroid", "far_corner")


def center_of(rect: Rect, mode: str = "centroid") -> Point:
    """Return the corridor endpoint for ``rect`` under ``mode``."""
    if mode == "centroid":
        return rect.centroid
    if mode == "far_corner":
        return rect.far_corner_half
    raise ValueError(f"unknown center mode: {mode!r}")


class Direction(Enum):
    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"

    @property
    def is_diagonal(self) -> bool:
        return len(self.value) == 2


_SECTORS = {
    (0, -1): Direction.N,
    (1, -1): Direction.NE,
    (1, 0): Direction.E,
    (1, 1): Direction.SE,
    (0, 1): Direction.S,
    (-1, 1): Direction.SW,
    (-1, 0): Direction.W,
    (-1, -1): Direction.NW,
}


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def direction_between(a: Point, b: Point) -> Optional[Direction]:
    """Classify where ``b`` lies relative to ``a``; ``None`` when they coincide."""
    key = (_sign(b[0] - a[0]), _sign(b[1] - a[1]))
    return _SECTORS.get(key)


__all__ = ["Point", "Rect", "CENTER_MODES", "center_of", "Direction", "direction_between"]
