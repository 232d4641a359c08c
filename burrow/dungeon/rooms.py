from __future__ import annotations

from typing import Sequence

from ..logging_utils import get_logger

log = get_logger("burrow.rooms")

# Leaves with a width or height at or below this get no room.
MIN_ROOM_REGION = 3


def build_rooms(tree: "PartitionTree", insets: Sequence[int] = (2, 2, 2, 2)) -> int:
    """Carve an inset room inside every leaf region of ``tree``.

    ``insets`` is ``(min_x, min_y, max_x, max_y)``: the margin kept from each
    edge of the leaf bounds. Leaves too small to carve a margin are skipped
    with ``room = None``; interior nodes and the root never carry a room.
    The resulting rectangle is not validated, so oversized insets can yield
    an inverted room. Returns the number of rooms assigned.
    """
    if len(insets) != 4:
        raise ValueError(f"insets must be (min_x, min_y, max_x, max_y), got {tuple(insets)!r}")
    min_x, min_y, max_x, max_y = (int(v) for v in insets)
    built = 0
    for node in tree.occupied():
        if node.id == 0 or not tree.is_leaf(node):
            node.room = None
            continue
        b = node.bounds
        if b.width <= MIN_ROOM_REGION or b.height <= MIN_ROOM_REGION:
            log.info(event="room_skipped", node=node.id, width=b.width, height=b.height)
            node.room = None
            continue
        node.room = b.inset(min_x, min_y, max_x, max_y)
        built += 1
    log.debug(event="rooms_built", rooms=built)
    return built


__all__ = ["build_rooms", "MIN_ROOM_REGION"]
