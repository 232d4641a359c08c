"""Tree factories to reduce boilerplate in tests.

Usage examples:
    from tests.factories import make_tree, MIDPOINT

    def test_something():
        tree = make_tree((0, 0, 32, 16))
        tree.split(True, 0)
"""
from __future__ import annotations

import random

from burrow.dungeon import DungeonNode, PartitionTree, Rect

# A ratio range of (0.5, 0.5) makes every split land exactly on the midpoint.
MIDPOINT = (0.5, 0.5)


def make_tree(bounds=(0, 0, 64, 64), split_ratio=MIDPOINT, seed=1234) -> PartitionTree:
    tree = PartitionTree(capacity_hint=4, rng=random.Random(seed), split_ratio=split_ratio)
    tree.set_root(DungeonNode(bounds=Rect(*bounds)))
    return tree
