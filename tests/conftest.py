import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from burrow import create_app  # noqa: E402
from burrow.dungeon import PartitionTree  # noqa: E402
from tests.factories import MIDPOINT, make_tree  # noqa: E402


@pytest.fixture
def empty_tree():
    return PartitionTree(capacity_hint=4, rng=random.Random(1234), split_ratio=MIDPOINT)


@pytest.fixture
def root_tree():
    return make_tree()


@pytest.fixture
def example_tree():
    """Root split vertically, its left child split horizontally, then that child's right half split.

    Leaves end up at 2, 3, 9, 10 with node 4 as the only interior node whose
    two children are both leaves.
    """
    tree = make_tree()
    tree.split(True, 0)
    tree.split(False, 1)
    tree.split(False, 4)
    return tree


@pytest.fixture
def balanced_tree():
    """Root split vertically, then both children split horizontally."""
    tree = make_tree()
    tree.split(True, 0)
    tree.split(False, 1)
    tree.split(False, 2)
    return tree


@pytest.fixture()
def test_app(monkeypatch):
    for key in list(os.environ):
        if key.startswith("BURROW_"):
            monkeypatch.delenv(key, raising=False)
    app = create_app({"TESTING": True, "BURROW_DISABLE_CACHE": False})
    return app


@pytest.fixture()
def client(test_app):
    from burrow.routes import dungeon_api

    with dungeon_api._dungeon_cache_lock:
        dungeon_api._dungeon_cache.clear()
    return test_app.test_client()
