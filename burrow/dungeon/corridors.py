"""Corridor routing between sibling rooms.

Only "lowest branches" are connected: interior nodes whose two children are
both leaves. The result is a set of pairwise links, one per sibling pair,
rather than a spanning network over every room.

Routing:
    * Points sharing a row or column get a straight run, endpoints included.
    * Otherwise the corridor is an elbow of two straight legs. The leg order
      depends on the compass sector of the target:

          NE  east, then north
          SE  south, then east
          SW  west, then south
          NW  north, then west
"""
from __future__ import annotations

import math
from typing import Dict, List, Tuple

from ..logging_utils import get_logger
from .errors import NoLeaves
from .geometry import CENTER_MODES, Direction, Point, center_of, direction_between

log = get_logger("burrow.corridors")

LEG_ORDER: Dict[Direction, Tuple[str, str]] = {
    Direction.NE: ("E", "N"),
    Direction.SE: ("S", "E"),
    Direction.SW: ("W", "S"),
    Direction.NW: ("N", "W"),
}

_STEP = {"N": (0, -1), "S": (0, 1), "E": (1, 0), "W": (-1, 0)}


def straight_path(a: Point, b: Point) -> List[Point]:
    (x1, y1), (x2, y2) = a, b
    if y1 == y2:
        dx = 1 if x2 >= x1 else -1
        return [(x, y1) for x in range(x1, x2 + dx, dx)]
    if x1 == x2:
        dy = 1 if y2 >= y1 else -1
        return [(x1, y) for y in range(y1, y2 + dy, dy)]
    raise ValueError(f"points {a} and {b} share neither a row nor a column")


def leg_lengths(a: Point, b: Point) -> Tuple[int, int]:
    """Horizontal and vertical leg lengths of the elbow from ``a`` to ``b``.

    Projects the straight-line distance onto each axis; a 45 degree pair gives
    two legs of ``d * cos(45)`` and ``d * sin(45)``.
    """
    dx, dy = b[0] - a[0], b[1] - a[1]
    d = math.hypot(dx, dy)
    theta = math.atan2(abs(dy), abs(dx))
    return int(round(d * math.cos(theta))), int(round(d * math.sin(theta)))


def elbow_path(a: Point, b: Point) -> List[Point]:
    direction = direction_between(a, b)
    if direction is None or not direction.is_diagonal:
        raise ValueError(f"elbow routing needs a diagonal sector, got {direction}")
    horizontal, vertical = leg_lengths(a, b)
    lengths = {"E": horizontal, "W": horizontal, "N": vertical, "S": vertical}
    x, y = a
    points = [a]
    for heading in LEG_ORDER[direction]:
        sx, sy = _STEP[heading]
        for _ in range(lengths[heading]):
            x += sx
            y += sy
            points.append((x, y))
    return points


def route(a: Point, b: Point) -> List[Point]:
    if a[0] == b[0] or a[1] == b[1]:
        return straight_path(a, b)
    return elbow_path(a, b)


def generate_paths(tree: "PartitionTree", center: str = "centroid") -> List[List[Point]]:
    """Append one corridor per lowest branch of ``tree`` to ``tree.paths``.

    Endpoints come from the children's bounds via :func:`center_of`. Existing
    paths are kept, so calling twice duplicates every corridor. Returns the
    paths added by this call.
    """
    if center not in CENTER_MODES:
        raise ValueError(f"unknown center mode: {center!r}")
    branches = tree.lowest_branches()
    if not branches:
        raise NoLeaves("no interior node has two leaf children")
    added = []
    for node in branches:
        a = center_of(tree.left_of(node).bounds, center)
        b = center_of(tree.right_of(node).bounds, center)
        path = route(a, b)
        tree.paths.append(path)
        added.append(path)
        log.debug(event="corridor", node=node.id, start=a, end=b, length=len(path))
    return added


__all__ = ["LEG_ORDER", "straight_path", "leg_lengths", "elbow_path", "route", "generate_paths"]
