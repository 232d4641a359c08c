"""Pipeline orchestration for dungeon generation.

Runs the generation phases in order against a single :class:`PartitionTree`:

    * partition  - set the root to the full map and split every current leaf
                   for ``config.splits`` rounds.
    * rooms      - carve an inset room inside each leaf.
    * corridors  - connect each pair of sibling leaves.

Per-phase timings land in ``metrics['phase_ms']`` when metrics are enabled.
"""
from __future__ import annotations

import random
import time
from dataclasses import replace
from typing import Any, Dict, List, Tuple

from ..logging_utils import get_logger
from .config import DungeonConfig
from .errors import NoLeaves, RegionTooSmall
from .geometry import Point, Rect
from .metrics import init_metrics
from .render import render_ascii, snapshot, tree_lines
from .tree import DungeonNode, PartitionTree

log = get_logger("burrow.pipeline")


class Dungeon:
    def __init__(
        self,
        config: DungeonConfig | None = None,
        *,
        seed: int | None = None,
        size: Tuple[int, int] | None = None,
        enable_metrics: bool = True,
    ):
        # Accept either a config object or the short (seed, size) call style
        if config is None:
            width, height = size if size is not None else (None, None)
            config = DungeonConfig.from_env(seed=seed, width=width, height=height)
        else:
            # The caller's config is never modified
            changes = {}
            if seed is not None:
                changes["seed"] = seed
            if size is not None:
                changes["width"], changes["height"] = size[0], size[1]
            config = replace(config, **changes)
        if config.seed is None:
            config = replace(config, seed=random.randint(0, 2**31 - 1))
        self.config = config
        self.seed = self.config.seed
        # Local RNG so external random usage does not affect generation
        self._rng = random.Random(self.seed)
        self.enable_metrics = enable_metrics
        self.metrics: Dict[str, Any] = init_metrics() if enable_metrics else {}
        self.tree = PartitionTree(
            capacity_hint=2**self.config.splits - 1,
            rng=self._rng,
            split_ratio=self.config.split_ratio,
        )
        self._run_pipeline()

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def _run_pipeline(self):
        phase_times: Dict[str, int] = {}
        start = time.perf_counter()

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            return r

        performed, rejected = _phase("partition", self._partition)
        built = _phase("rooms", self.tree.build_rooms, self.config.insets)
        paths = _phase("corridors", self._connect)

        leaves = self.leaves()
        if self.enable_metrics:
            self.metrics.update(
                nodes=len(self.tree),
                leaves=len(leaves),
                rooms=built,
                rooms_skipped=len(leaves) - built,
                paths=len(paths),
                splits_performed=performed,
                splits_rejected=rejected,
                runtime_ms=int((time.perf_counter() - start) * 1000),
                phase_ms=phase_times,
            )
        log.info(event="dungeon_generated", seed=self.seed, nodes=len(self.tree), rooms=built, paths=len(paths))

    def _choose_axis(self, depth: int, bounds: Rect) -> bool:
        mode = self.config.split_direction
        if mode == "vertical":
            return True
        if mode == "horizontal":
            return False
        if mode == "alternate":
            return depth % 2 == 0
        # Favor cutting across the longer side, with some jitter.
        return (bounds.width / max(1, bounds.height)) > self._rng.uniform(0.8, 1.2)

    def _partition(self) -> Tuple[int, int]:
        self.tree.set_root(DungeonNode(bounds=Rect(0, 0, self.config.width, self.config.height)))
        frontier: List[int] = [0]
        performed = rejected = 0
        for depth in range(self.config.splits):
            nxt: List[int] = []
            for idx in frontier:
                vertical = self._choose_axis(depth, self.tree.node(idx).bounds)
                try:
                    nxt.extend(self.tree.split(vertical, idx))
                    performed += 1
                except RegionTooSmall as exc:
                    rejected += 1
                    log.info(event="split_rejected", node=idx, extent=exc.extent)
            if not nxt:
                break
            frontier = nxt
        return performed, rejected

    def _connect(self) -> List[List[Point]]:
        try:
            return self.tree.generate_paths(center=self.config.center_mode)
        except NoLeaves:
            log.info(event="no_corridors", seed=self.seed)
            return []

    # ------------------------------------------------------------------
    # Read-only queries for presentation layers
    # ------------------------------------------------------------------
    def nodes(self) -> List[DungeonNode]:
        return self.tree.occupied()

    def leaves(self) -> List[DungeonNode]:
        try:
            return self.tree.leaves()
        except NoLeaves:
            return []

    def rooms(self) -> List[Tuple[int, Rect]]:
        return self.tree.rooms()

    @property
    def paths(self) -> List[List[Point]]:
        return self.tree.paths

    def ascii(self, show_paths: bool = True) -> List[str]:
        return render_ascii(self.tree, show_paths=show_paths)

    def outline(self) -> List[str]:
        return tree_lines(self.tree)

    def to_dict(self) -> Dict[str, Any]:
        data = snapshot(self.tree)
        data["seed"] = self.seed
        data["config"] = self.config.to_dict()
        data["metrics"] = self.metrics
        return data


__all__ = ["Dungeon"]
