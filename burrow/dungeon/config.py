import os
from dataclasses import asdict, dataclass, fields
from typing import Mapping, Optional, Tuple

from .geometry import CENTER_MODES

SPLIT_DIRECTIONS = ("vertical", "horizontal", "random", "alternate")

# Upper bounds on map size and split rounds; the ASCII grid is width * height
# cells and heap storage grows to 2 ** (splits + 1) slots.
MAX_WIDTH = 1000
MAX_HEIGHT = 1000
MAX_SPLITS = 12


@dataclass
class DungeonConfig:
    width: int = 80
    height: int = 40
    splits: int = 4
    homogeneity: float = 0.5
    split_direction: str = "random"
    insets: Tuple[int, int, int, int] = (2, 2, 2, 2)
    center_mode: str = "centroid"
    seed: Optional[int] = None

    def __post_init__(self):
        self.homogeneity = min(1.0, max(0.0, float(self.homogeneity)))
        if self.split_direction not in SPLIT_DIRECTIONS:
            raise ValueError(f"split_direction must be one of {SPLIT_DIRECTIONS}, got {self.split_direction!r}")
        if self.center_mode not in CENTER_MODES:
            raise ValueError(f"center_mode must be one of {CENTER_MODES}, got {self.center_mode!r}")
        if not (1 <= self.width <= MAX_WIDTH and 1 <= self.height <= MAX_HEIGHT):
            raise ValueError(f"width and height must be within 1..{MAX_WIDTH} and 1..{MAX_HEIGHT}")
        if not 0 <= self.splits <= MAX_SPLITS:
            raise ValueError(f"splits must be within 0..{MAX_SPLITS}")
        self.insets = tuple(int(v) for v in self.insets)
        if len(self.insets) != 4:
            raise ValueError("insets must have four values")

    @property
    def split_ratio(self) -> Tuple[float, float]:
        """Ratio range for split positions; higher homogeneity narrows it around 0.5."""
        half = 0.3 * (1.0 - self.homogeneity)
        return (0.5 - half, 0.5 + half)

    def to_dict(self):
        d = asdict(self)
        d["insets"] = list(self.insets)
        return d

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "DungeonConfig":
        """Build a config from ``BURROW_*`` variables, then apply ``overrides``.

        Recognized keys: BURROW_WIDTH, BURROW_HEIGHT, BURROW_SPLITS,
        BURROW_HOMOGENEITY, BURROW_SPLIT_DIRECTION, BURROW_INSETS ("2,2,2,2"),
        BURROW_CENTER_MODE, BURROW_SEED.
        """
        env = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = env.get(f"BURROW_{f.name.upper()}")
            if raw is None or raw == "":
                continue
            values[f.name] = _coerce(f.name, raw)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _coerce(name: str, raw: str):
    if name in ("width", "height", "splits", "seed"):
        return int(raw)
    if name == "homogeneity":
        return float(raw)
    if name == "insets":
        return tuple(int(p) for p in raw.split(","))
    return raw.strip().lower()


__all__ = ["DungeonConfig", "SPLIT_DIRECTIONS", "MAX_WIDTH", "MAX_HEIGHT", "MAX_SPLITS"]
