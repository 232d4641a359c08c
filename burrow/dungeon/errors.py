class TreeError(Exception):
    """Base class for recoverable partition tree failures."""


class RootAlreadySet(TreeError):
    def __init__(self):
        super().__init__("tree already has a root node")


class IndexNotFound(TreeError):
    def __init__(self, index):
        self.index = index
        super().__init__(f"no node at index {index}")


class NoLeaves(TreeError):
    def __init__(self, message: str = "tree has no leaves to operate on"):
        super().__init__(message)


class RegionTooSmall(TreeError):
    def __init__(self, index, extent):
        self.index = index
        self.extent = extent
        super().__init__(f"node {index} is too small to split (extent {extent})")


class SlotOccupied(TreeError):
    def __init__(self, index, slot):
        self.index = index
        self.slot = slot
        super().__init__(f"child slot {slot} of node {index} holds an unrelated node")


__all__ = ["TreeError", "RootAlreadySet", "IndexNotFound", "NoLeaves", "RegionTooSmall", "SlotOccupied"]
