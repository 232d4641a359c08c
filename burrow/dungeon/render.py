"""Read-only presentation helpers: ASCII grid, ASCII file, tree outline, JSON snapshot.

Legend: ``*`` region walls, ``.`` room floor, ``#`` corridor, blank background.
The grid spans ``0..root.x2`` by ``0..root.y2``; anything outside is clipped.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from .errors import NoLeaves

WALL = "*"
FLOOR = "."
CORRIDOR = "#"
BLANK = " "


def render_ascii(tree: "PartitionTree", show_paths: bool = True, show_rooms: bool = True) -> List[str]:
    root = tree.slot(0)
    if root is None or root.bounds is None:
        return []
    width, height = max(0, root.bounds.x2), max(0, root.bounds.y2)
    grid = [[BLANK] * width for _ in range(height)]

    def put(x: int, y: int, ch: str) -> None:
        if 0 <= x < width and 0 <= y < height:
            grid[y][x] = ch

    # Index order draws parents first so children outline over their interiors.
    for n in tree.occupied():
        b = n.bounds
        for y in range(b.y1, b.y2):
            for x in range(b.x1, b.x2):
                edge = y in (b.y1, b.y2 - 1) or x in (b.x1, b.x2 - 1)
                put(x, y, WALL if edge else BLANK)
    if show_paths:
        for path in tree.paths:
            for x, y in path:
                put(x, y, CORRIDOR)
    if show_rooms:
        for _node_id, room in tree.rooms():
            for y in range(room.y1, room.y2):
                for x in range(room.x1, room.x2):
                    put(x, y, FLOOR)
    return ["".join(row) for row in grid]


def write_ascii(tree: "PartitionTree", path: str | Path = "dung.out", **kwargs) -> Path:
    out = Path(path)
    rows = render_ascii(tree, **kwargs)
    out.write_text("\n".join(rows) + "\n", encoding="utf-8")
    return out


def tree_lines(tree: "PartitionTree") -> List[str]:
    """Indented outline of the tree, left child before right."""
    lines: List[str] = []
    stack = [(0, 0)]
    while stack:
        idx, depth = stack.pop()
        n = tree.slot(idx)
        if n is None:
            continue
        prefix = "" if depth == 0 else "    " * (depth - 1) + "+-- "
        label = f"{prefix}#{n.id} {tuple(n.bounds)}"
        if n.room is not None:
            label += f" room={tuple(n.room)}"
        lines.append(label)
        for child in (n.right, n.left):
            if tree.slot(child) is not None:
                stack.append((child, depth + 1))
    return lines


def snapshot(tree: "PartitionTree") -> Dict[str, Any]:
    try:
        leaves = [n.id for n in tree.leaves()]
    except NoLeaves:
        leaves = []
    return {
        "nodes": [n.to_dict() for n in tree.occupied()],
        "leaves": leaves,
        "rooms": [{"id": node_id, "room": room.to_list()} for node_id, room in tree.rooms()],
        "paths": [[list(p) for p in path] for path in tree.paths],
    }


__all__ = ["WALL", "FLOOR", "CORRIDOR", "BLANK", "render_ascii", "write_ascii", "tree_lines", "snapshot"]
