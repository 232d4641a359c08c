"""
project: Burrow
module: dungeon_api.py
License: MIT

Read-only dungeon API routes.

Every endpoint accepts the same optional query parameters describing the
dungeon to generate: seed, width, height, splits, homogeneity, direction
(split direction) and center (corridor endpoint mode). Layouts are
deterministic per parameter set and cached in-process.
"""

import json
import os
import random
import threading

from flask import Blueprint, Response, current_app, jsonify, request

from burrow import __version__
from burrow.dungeon import Dungeon, DungeonConfig, IndexNotFound, TreeError, snapshot
from burrow.dungeon.config import SPLIT_DIRECTIONS
from burrow.logging_utils import get_logger

log = get_logger("burrow.api")

bp_dungeon = Blueprint("dungeon", __name__)

# Simple in-process cache keyed by the full config. Guarded by a lock because the
# development server may handle requests on several threads.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()

_QUERY_FIELDS = {
    "seed": ("seed", int),
    "width": ("width", int),
    "height": ("height", int),
    "splits": ("splits", int),
    "homogeneity": ("homogeneity", float),
    "direction": ("split_direction", str),
    "center": ("center_mode", str),
}


class BadQuery(ValueError):
    pass


def _env_text(value) -> str:
    # App config may hold real sequences, e.g. BURROW_INSETS=(1, 1, 1, 1)
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _config_from_request() -> DungeonConfig:
    overrides = {}
    for param, (attr, cast) in _QUERY_FIELDS.items():
        raw = request.args.get(param)
        if raw is None or raw == "":
            continue
        try:
            overrides[attr] = cast(raw.strip().lower() if cast is str else raw)
        except ValueError:
            raise BadQuery(f"invalid value for {param!r}: {raw!r}")
    environ = dict(os.environ)
    environ.update({k: _env_text(v) for k, v in current_app.config.items() if k.startswith("BURROW_")})
    try:
        config = DungeonConfig.from_env(environ, **overrides)
    except ValueError as exc:
        raise BadQuery(str(exc)) from exc
    if config.seed is None:
        config.seed = random.randint(1, 1_000_000)
    return config


def get_cached_dungeon(config: DungeonConfig) -> Dungeon:
    if current_app.config.get("BURROW_DISABLE_CACHE"):
        return Dungeon(config)
    key = json.dumps(config.to_dict(), sort_keys=True)
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
        if dungeon is not None:
            return dungeon
    dungeon = Dungeon(config)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = dungeon
        if len(_dungeon_cache) > current_app.config.get("BURROW_CACHE_MAX", 8):
            first_key = next(iter(_dungeon_cache.keys()))
            if first_key != key:
                _dungeon_cache.pop(first_key, None)
    return dungeon


@bp_dungeon.errorhandler(IndexNotFound)
def _not_found(exc):
    return jsonify({"error": str(exc)}), 404


@bp_dungeon.errorhandler(TreeError)
def _tree_error(exc):
    return jsonify({"error": str(exc), "kind": type(exc).__name__}), 400


@bp_dungeon.errorhandler(BadQuery)
def _bad_request(exc):
    return jsonify({"error": str(exc)}), 400


@bp_dungeon.route("/api/health")
def health():
    return jsonify({"status": "ok", "version": __version__, "split_directions": list(SPLIT_DIRECTIONS)})


@bp_dungeon.route("/api/dungeon")
def dungeon_snapshot():
    """
    Return the full layout for the requested parameters.
    Response: { seed, config, metrics, nodes, leaves, rooms, paths }
    """
    dungeon = get_cached_dungeon(_config_from_request())
    return jsonify(dungeon.to_dict())


@bp_dungeon.route("/api/dungeon/ascii")
def dungeon_ascii():
    show_paths = request.args.get("paths", "1") not in ("0", "false", "no")
    dungeon = get_cached_dungeon(_config_from_request())
    body = "\n".join(dungeon.ascii(show_paths=show_paths)) + "\n"
    resp = Response(body, mimetype="text/plain")
    resp.headers["X-Dungeon-Seed"] = str(dungeon.seed)
    return resp


@bp_dungeon.route("/api/dungeon/outline")
def dungeon_outline():
    dungeon = get_cached_dungeon(_config_from_request())
    return jsonify({"seed": dungeon.seed, "lines": dungeon.outline()})


@bp_dungeon.route("/api/dungeon/subtree/<int:node_id>")
def dungeon_subtree(node_id: int):
    """Detached copy of one child subtree, renumbered from 0.

    Query: side=left|right (default left). 404 when the node or child is absent.
    """
    side = request.args.get("side", "left").lower()
    if side not in ("left", "right"):
        raise BadQuery(f"side must be 'left' or 'right', got {side!r}")
    dungeon = get_cached_dungeon(_config_from_request())
    sub = dungeon.tree.subtree(node_id, left=(side == "left"))
    if sub is None:
        return jsonify({"error": f"node {node_id} has no {side} child"}), 404
    log.debug(event="subtree_served", seed=dungeon.seed, node=node_id, side=side, nodes=len(sub))
    data = snapshot(sub)
    data.update(seed=dungeon.seed, node=node_id, side=side)
    return jsonify(data)
