import pytest

from burrow.dungeon import Dungeon, DungeonConfig, snapshot
from burrow.dungeon.geometry import center_of


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("BURROW_"):
            monkeypatch.delenv(key, raising=False)


def test_same_seed_same_layout():
    a = Dungeon(DungeonConfig(seed=42))
    b = Dungeon(DungeonConfig(seed=42))
    assert snapshot(a.tree) == snapshot(b.tree)
    assert a.ascii() == b.ascii()


def test_different_seeds_differ_somewhere():
    layouts = {tuple(Dungeon(DungeonConfig(seed=s)).ascii()) for s in range(5)}
    assert len(layouts) > 1


@pytest.mark.parametrize("seed", [1, 7, 42, 1234, 98765])
def test_generated_layout_invariants(seed):
    d = Dungeon(DungeonConfig(seed=seed, width=100, height=60))
    tree = d.tree
    for i, n in enumerate(tree.nodes):
        if n is None:
            continue
        assert n.id == i
        assert (n.left is None) == (n.right is None)
        if not tree.is_leaf(n) or n.id == 0:
            assert n.room is None
        if n.room is not None:
            b, r = n.bounds, n.room
            assert b.x1 <= r.x1 and r.x2 <= b.x2
            assert b.y1 <= r.y1 and r.y2 <= b.y2
    branches = tree.lowest_branches()
    assert len(d.paths) == len(branches)
    for node, path in zip(branches, d.paths):
        assert path[0] == center_of(tree.left_of(node).bounds)
        assert path[-1] == center_of(tree.right_of(node).bounds)


def test_metrics_populated():
    d = Dungeon(DungeonConfig(seed=3))
    m = d.metrics
    for key in ("nodes", "leaves", "rooms", "rooms_skipped", "paths", "splits_performed", "splits_rejected"):
        assert key in m
    assert set(m["phase_ms"]) == {"partition", "rooms", "corridors"}
    assert m["nodes"] == len(d.nodes())
    assert m["leaves"] == len(d.leaves())
    assert m["rooms"] + m["rooms_skipped"] == m["leaves"]
    assert m["paths"] == len(d.paths)


def test_metrics_can_be_disabled():
    d = Dungeon(DungeonConfig(seed=3), enable_metrics=False)
    assert d.metrics == {}
    assert d.rooms()


def test_zero_splits_leaves_bare_root():
    d = Dungeon(DungeonConfig(seed=5, splits=0))
    assert len(d.nodes()) == 1
    assert d.leaves() == []
    assert d.rooms() == []
    assert d.paths == []
    assert d.metrics["splits_performed"] == 0
    assert d.to_dict()["leaves"] == []


def test_vertical_direction_places_children_side_by_side():
    d = Dungeon(DungeonConfig(seed=9, splits=1, split_direction="vertical"))
    left, right = d.tree.node(1).bounds, d.tree.node(2).bounds
    assert left.x2 < right.x1
    assert (left.y1, left.y2) == (right.y1, right.y2)


def test_alternate_direction_switches_axis_per_round():
    d = Dungeon(DungeonConfig(seed=9, splits=2, split_direction="alternate"))
    tree = d.tree
    assert tree.node(1).bounds.x2 < tree.node(2).bounds.x1
    assert tree.node(3).bounds.y2 < tree.node(4).bounds.y1


def test_tiny_map_rejects_splits():
    d = Dungeon(DungeonConfig(seed=11, width=8, height=8, splits=4))
    assert d.metrics["splits_rejected"] > 0
    for n in d.nodes():
        assert n.bounds.x1 < n.bounds.x2 and n.bounds.y1 < n.bounds.y2


def test_homogeneity_controls_ratio_range():
    assert DungeonConfig(homogeneity=1).split_ratio == (0.5, 0.5)
    lo, hi = DungeonConfig(homogeneity=0).split_ratio
    assert lo == pytest.approx(0.2) and hi == pytest.approx(0.8)
    assert DungeonConfig(homogeneity=1.7).homogeneity == 1.0
    assert DungeonConfig(homogeneity=-3).homogeneity == 0.0


def test_perfectly_homogeneous_map_splits_at_midpoint():
    d = Dungeon(DungeonConfig(seed=1, width=64, height=64, splits=1, homogeneity=1, split_direction="vertical"))
    assert d.tree.node(1).bounds.x2 == 32


def test_config_rejects_bad_values():
    with pytest.raises(ValueError):
        DungeonConfig(split_direction="sideways")
    with pytest.raises(ValueError):
        DungeonConfig(center_mode="middle")
    with pytest.raises(ValueError):
        DungeonConfig(width=0)
    with pytest.raises(ValueError):
        DungeonConfig(splits=-1)
    with pytest.raises(ValueError):
        DungeonConfig(insets=(1, 2))


def test_config_from_env_mapping():
    env = {
        "BURROW_WIDTH": "50",
        "BURROW_SPLIT_DIRECTION": "Vertical",
        "BURROW_INSETS": "1,2,3,4",
        "BURROW_SEED": "",
    }
    cfg = DungeonConfig.from_env(env, height=25, splits=None)
    assert cfg.width == 50
    assert cfg.height == 25
    assert cfg.splits == 4
    assert cfg.split_direction == "vertical"
    assert cfg.insets == (1, 2, 3, 4)
    assert cfg.seed is None
    assert DungeonConfig.from_env(env, width=60).width == 60


def test_short_constructor_form(monkeypatch):
    monkeypatch.setenv("BURROW_SPLITS", "2")
    d = Dungeon(seed=5, size=(40, 20))
    assert d.seed == 5
    assert (d.width, d.height) == (40, 20)
    assert d.config.splits == 2
    assert d.tree.node(0).bounds == (0, 0, 40, 20)


def test_missing_seed_is_chosen_and_reported():
    d = Dungeon(DungeonConfig())
    assert isinstance(d.seed, int)
    assert d.to_dict()["seed"] == d.seed
    again = Dungeon(DungeonConfig(seed=d.seed))
    assert again.ascii() == d.ascii()


def test_to_dict_shape():
    data = Dungeon(DungeonConfig(seed=21, width=60, height=30)).to_dict()
    assert set(data) >= {"nodes", "leaves", "rooms", "paths", "seed", "config", "metrics"}
    assert data["config"]["width"] == 60
    assert data["nodes"][0]["bounds"] == [0, 0, 60, 30]


def test_config_is_not_mutated_by_generation():
    cfg = DungeonConfig(width=40, height=20)
    a = Dungeon(cfg)
    b = Dungeon(cfg)
    assert cfg.seed is None
    assert a.config is not cfg and b.config is not cfg
    assert isinstance(a.seed, int) and isinstance(b.seed, int)
    c = Dungeon(cfg, seed=7, size=(30, 10))
    assert (cfg.width, cfg.height, cfg.seed) == (40, 20, None)
    assert (c.width, c.height, c.seed) == (30, 10, 7)


def test_size_override_is_validated():
    with pytest.raises(ValueError):
        Dungeon(DungeonConfig(seed=1), size=(0, -5))


def test_config_limits():
    from burrow.dungeon.config import MAX_HEIGHT, MAX_SPLITS, MAX_WIDTH

    DungeonConfig(width=MAX_WIDTH, height=MAX_HEIGHT, splits=MAX_SPLITS)
    with pytest.raises(ValueError):
        DungeonConfig(width=MAX_WIDTH + 1)
    with pytest.raises(ValueError):
        DungeonConfig(height=2_000_000_000)
    with pytest.raises(ValueError):
        DungeonConfig(splits=10**6)
