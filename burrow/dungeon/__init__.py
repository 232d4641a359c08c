"""Public dungeon package interface.

Partition tree engine, room builder, corridor router, and the pipeline that
chains them, plus the read-only rendering helpers.
"""

from .config import DungeonConfig, SPLIT_DIRECTIONS
from .errors import (
    IndexNotFound,
    NoLeaves,
    RegionTooSmall,
    RootAlreadySet,
    SlotOccupied,
    TreeError,
)
from .geometry import Direction, Rect, center_of, direction_between
from .pipeline import Dungeon
from .render import render_ascii, snapshot, tree_lines, write_ascii
from .tree import DungeonNode, PartitionTree  # noqa: F401

__all__ = [
    "Dungeon",
    "DungeonConfig",
    "SPLIT_DIRECTIONS",
    "DungeonNode",
    "PartitionTree",
    "Rect",
    "Direction",
    "center_of",
    "direction_between",
    "TreeError",
    "RootAlreadySet",
    "IndexNotFound",
    "NoLeaves",
    "RegionTooSmall",
    "SlotOccupied",
    "render_ascii",
    "write_ascii",
    "tree_lines",
    "snapshot",
]
