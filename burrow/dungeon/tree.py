"""Binary space partition tree stored in heap order.

The root lives at index 0 and the children of the node at index ``i`` live at
``2i+1`` (left) and ``2i+2`` (right). Storage is a sparse list of optional
nodes: a split grows the list with empty slots, and pruning clears slots
rather than compacting the list.

A child pointer that refers to an empty or out-of-range slot (left behind by
``prune``) is read as an absent subtree everywhere in this module.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from . import corridors as corridors_mod
from . import rooms as rooms_mod
from .errors import IndexNotFound, NoLeaves, RegionTooSmall, RootAlreadySet, SlotOccupied
from .geometry import Point, Rect

log = get_logger("burrow.tree")

DEFAULT_SPLIT_RATIO: Tuple[float, float] = (0.35, 0.65)
# Smallest extent along the split axis that leaves both children non-degenerate
# after the one-unit margins are applied.
MIN_SPLIT_EXTENT = 5
MIN_CROSS_EXTENT = 3


@dataclass
class DungeonNode:
    id: int = 0
    bounds: Optional[Rect] = None
    room: Optional[Rect] = None
    left: Optional[int] = None
    right: Optional[int] = None

    def to_dict(self):
        return {
            "id": self.id,
            "bounds": self.bounds.to_list() if self.bounds is not None else None,
            "room": self.room.to_list() if self.room is not None else None,
            "left": self.left,
            "right": self.right,
        }


class PartitionTree:
    def __init__(
        self,
        capacity_hint: int = 0,
        rng: random.Random | None = None,
        split_ratio: Tuple[float, float] = DEFAULT_SPLIT_RATIO,
    ):
        lo, hi = split_ratio
        if not 0.0 < lo <= hi < 1.0:
            raise ValueError(f"split ratio must satisfy 0 < lo <= hi < 1, got {split_ratio!r}")
        # Planned number of splits; Python lists grow on demand so this is informational.
        self.capacity_hint = max(0, int(capacity_hint))
        self.split_ratio = (float(lo), float(hi))
        self.nodes: List[Optional[DungeonNode]] = []
        self.paths: List[List[Point]] = []
        self._rng = rng if rng is not None else random.Random()

    def __len__(self) -> int:
        return sum(1 for n in self.nodes if n is not None)

    def __repr__(self) -> str:
        root = self.slot(0)
        bounds = tuple(root.bounds) if root is not None and root.bounds is not None else None
        return f"PartitionTree(root={bounds}, nodes={len(self)}, slots={len(self.nodes)})"

    # ------------------------------------------------------------------
    # Slot access
    # ------------------------------------------------------------------
    def slot(self, index: Optional[int]) -> Optional[DungeonNode]:
        """Return the node at ``index`` or ``None`` for empty/out-of-range slots."""
        if index is None or index < 0 or index >= len(self.nodes):
            return None
        return self.nodes[index]

    def node(self, index: int) -> DungeonNode:
        n = self.slot(index)
        if n is None:
            raise IndexNotFound(index)
        return n

    def left_of(self, node: DungeonNode) -> Optional[DungeonNode]:
        return self.slot(node.left)

    def right_of(self, node: DungeonNode) -> Optional[DungeonNode]:
        return self.slot(node.right)

    def is_leaf(self, node: DungeonNode) -> bool:
        return self.left_of(node) is None and self.right_of(node) is None

    def occupied(self) -> List[DungeonNode]:
        """All occupied nodes in increasing index order."""
        return [n for n in self.nodes if n is not None]

    def __iter__(self) -> Iterator[DungeonNode]:
        return iter(self.occupied())

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def set_root(self, node: DungeonNode) -> DungeonNode:
        if self.nodes:
            raise RootAlreadySet()
        if node.bounds is None:
            raise ValueError("root node requires bounds")
        root = replace(node, id=0, bounds=Rect(*node.bounds))
        self.nodes = [root]
        log.debug(event="set_root", bounds=tuple(root.bounds))
        return root

    def split(self, vertical: bool, node_index: int, rng: random.Random | None = None) -> Tuple[int, int]:
        """Split the node at ``node_index`` into two children.

        ``vertical`` cuts across the x extent (children side by side); otherwise
        the y extent is cut (children stacked). The cut position is
        ``lo + extent * ratio`` with ``ratio`` drawn uniformly from
        ``split_ratio`` and clamped so both children keep a positive extent.
        Children are inset by one unit on their outer edges and separated by
        one unit at the cut line.

        Re-splitting a node discards its previous descendants. Returns the
        ``(left, right)`` child indices.
        """
        parent = self.node(node_index)
        b = parent.bounds
        if b is None:
            raise IndexNotFound(node_index)
        lo, hi = (b.x1, b.x2) if vertical else (b.y1, b.y2)
        extent = hi - lo
        cross = b.height if vertical else b.width
        if extent < MIN_SPLIT_EXTENT:
            raise RegionTooSmall(node_index, extent)
        if cross < MIN_CROSS_EXTENT:
            raise RegionTooSmall(node_index, cross)

        left_idx, right_idx = 2 * node_index + 1, 2 * node_index + 2
        own = set(self.children_of(node_index))
        for target in (left_idx, right_idx):
            if self.slot(target) is not None and target not in own:
                raise SlotOccupied(node_index, target)

        ratio = (rng or self._rng).uniform(*self.split_ratio)
        at = lo + int(extent * ratio)
        at = max(lo + 2, min(at, hi - 3))

        for existing in (parent.left, parent.right):
            if self.slot(existing) is not None:
                self.prune(existing)

        if len(self.nodes) <= right_idx:
            self.nodes.extend([None] * (right_idx + 1 - len(self.nodes)))

        if vertical:
            left_bounds = Rect(b.x1 + 1, b.y1 + 1, at, b.y2 - 1)
            right_bounds = Rect(at + 1, b.y1 + 1, b.x2 - 1, b.y2 - 1)
        else:
            left_bounds = Rect(b.x1 + 1, b.y1 + 1, b.x2 - 1, at)
            right_bounds = Rect(b.x1 + 1, at + 1, b.x2 - 1, b.y2 - 1)
        self.nodes[left_idx] = DungeonNode(id=left_idx, bounds=left_bounds)
        self.nodes[right_idx] = DungeonNode(id=right_idx, bounds=right_bounds)
        parent.left = left_idx
        parent.right = right_idx
        log.debug(event="split", node=node_index, axis="x" if vertical else "y", at=at, ratio=round(ratio, 3))
        return left_idx, right_idx

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def leaves(self) -> List[DungeonNode]:
        """Leaf nodes below the root, in index order."""
        found = [n for n in self.occupied() if n.id != 0 and self.is_leaf(n)]
        if not found:
            raise NoLeaves()
        return found

    def children_of(self, node_index: int) -> List[int]:
        """Pre-order list of every descendant index reachable from ``node_index``."""
        start = self.node(node_index)
        order: List[int] = []
        seen = set()
        stack = [c for c in (start.right, start.left) if self.slot(c) is not None]
        while stack:
            idx = stack.pop()
            if idx in seen:
                continue
            seen.add(idx)
            order.append(idx)
            n = self.nodes[idx]
            # right pushed first so the left subtree is visited first
            for c in (n.right, n.left):
                if self.slot(c) is not None:
                    stack.append(c)
        return order

    def lowest_branches(self) -> List[DungeonNode]:
        """Interior nodes whose two children are both leaves, in index order.

        The root is never a lowest branch, so a tree split only once has none.
        """
        found = []
        for n in self.occupied():
            if n.id == 0:
                continue
            left, right = self.left_of(n), self.right_of(n)
            if left is None or right is None:
                continue
            if self.is_leaf(left) and self.is_leaf(right):
                found.append(n)
        return found

    # ------------------------------------------------------------------
    # Subtrees & deletion
    # ------------------------------------------------------------------
    def subtree(self, node_index: int, left: bool) -> Optional["PartitionTree"]:
        """Copy the left or right child's subtree into a new, renumbered tree.

        Returns ``None`` when the requested child is absent. Nodes are numbered
        ``0..n-1`` in pre-order and child pointers are rewritten to the new ids.
        The copy gets its own RNG seeded from the current state of this one.
        """
        parent = self.node(node_index)
        child_idx = parent.left if left else parent.right
        if self.slot(child_idx) is None:
            return None
        order = [child_idx] + self.children_of(child_idx)
        new_ids = {old: new for new, old in enumerate(order)}

        rng = random.Random()
        rng.setstate(self._rng.getstate())
        out = PartitionTree(capacity_hint=len(order), rng=rng, split_ratio=self.split_ratio)
        for old in order:
            n = self.nodes[old]
            out.nodes.append(
                replace(
                    n,
                    id=new_ids[old],
                    left=new_ids.get(n.left) if self.slot(n.left) is not None else None,
                    right=new_ids.get(n.right) if self.slot(n.right) is not None else None,
                )
            )
        return out

    def prune(self, node_index: int) -> List[int]:
        """Clear the node at ``node_index`` and all of its descendants.

        Walks the left spine onto an explicit stack, records each popped node
        and continues with its right child. Parent pointers into the pruned
        region are left as they are; use :meth:`collapse` to detach cleanly.
        Returns the cleared indices in removal order.
        """
        if self.slot(node_index) is None:
            raise IndexNotFound(node_index)
        stack: List[int] = []
        doomed: List[int] = []
        current: Optional[int] = node_index
        while stack or current is not None:
            if current is not None:
                n = self.slot(current)
                if n is None:
                    current = None
                    continue
                stack.append(current)
                current = n.left
            else:
                idx = stack.pop()
                doomed.append(idx)
                current = self.nodes[idx].right
        for idx in doomed:
            self.nodes[idx] = None
        log.debug(event="prune", node=node_index, removed=len(doomed))
        return doomed

    def collapse(self, node_index: int) -> List[int]:
        """Prune both children of a node and turn it back into a leaf."""
        n = self.node(node_index)
        removed: List[int] = []
        for child in (n.left, n.right):
            if self.slot(child) is not None:
                removed.extend(self.prune(child))
        n.left = None
        n.right = None
        return removed

    # ------------------------------------------------------------------
    # Rooms & corridors
    # ------------------------------------------------------------------
    def build_rooms(self, insets: Sequence[int] = (2, 2, 2, 2)) -> int:
        return rooms_mod.build_rooms(self, insets)

    def generate_paths(self, center: str = "centroid") -> List[List[Point]]:
        return corridors_mod.generate_paths(self, center=center)

    def rooms(self) -> List[Tuple[int, Rect]]:
        """``(node id, room)`` pairs for every node carrying a room."""
        return [(n.id, n.room) for n in self.occupied() if n.room is not None]


__all__ = ["DungeonNode", "PartitionTree", "DEFAULT_SPLIT_RATIO", "MIN_SPLIT_EXTENT"]
