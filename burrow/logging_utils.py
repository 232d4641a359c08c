"""Minimal structured logging helper.

Emits key=value pairs (or JSON lines) with a timestamp and level so that
generation runs can be grepped or parsed without configuring handlers.

Usage:
    from burrow.logging_utils import get_logger
    log = get_logger("burrow.tree")
    log.info(event="split", node=0, axis="x", at=31)

Non-numeric values are stringified with spaces replaced. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("BURROW_LOG_LEVEL", "warn").lower(), 30)
JSON_MODE = os.getenv("BURROW_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")
# When set, every level goes to stderr so stdout carries only command output.
TO_STDERR = os.getenv("BURROW_LOG_STDERR", "0") in ("1", "true", "TRUE", "yes", "on")


def set_level(name: str) -> None:
    """Change the global threshold at runtime (CLI ``--verbose`` and tests)."""
    global CURRENT_LEVEL
    if name not in LEVELS:
        raise ValueError(f"unknown log level: {name!r}")
    CURRENT_LEVEL = LEVELS[name]


def route_to_stderr(enabled: bool = True) -> None:
    global TO_STDERR
    TO_STDERR = enabled


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "burrow"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        if "logger" not in fields:
            fields["logger"] = self.name
        stream = sys.stderr if (lvl == "error" or TO_STDERR) else sys.stdout
        print(_format(lvl, **fields), file=stream)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("burrow")
