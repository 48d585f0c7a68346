"""Exception types raised by the triangulation."""
from __future__ import annotations


class DelaunayError(Exception):
    """Base class for all deltri errors."""


class InvalidCapacityError(DelaunayError, ValueError):
    """Arena capacity is too small (fewer than four points) or not an integer."""


class OutOfRegionError(DelaunayError, ValueError):
    """The query point lies outside the region established by setup()."""

    def __init__(self, x: float, y: float):
        super().__init__(f"point ({x!r}, {y!r}) lies outside the triangulated region")
        self.x = x
        self.y = y


class DuplicatePointError(DelaunayError, ValueError):
    """The query point coincides with an existing vertex."""

    def __init__(self, x: float, y: float, point_id: int):
        super().__init__(f"point ({x!r}, {y!r}) duplicates vertex {point_id}")
        self.x = x
        self.y = y
        self.point_id = point_id


class CapacityExceededError(DelaunayError, RuntimeError):
    """An arena would grow past the capacity fixed at construction."""

    def __init__(self, arena: str, capacity: int):
        super().__init__(f"{arena} arena is full (capacity {capacity})")
        self.arena = arena
        self.capacity = capacity


class RegionStateError(DelaunayError, RuntimeError):
    """setup() called twice, or insert() called before setup()."""


class InvariantError(DelaunayError, AssertionError):
    """A post-insert structural check failed (only raised in validate mode)."""

    def __init__(self, messages):
        self.messages = list(messages)
        head = self.messages[0] if self.messages else 'unknown failure'
        more = f" (+{len(self.messages) - 1} more)" if len(self.messages) > 1 else ''
        super().__init__(f"triangulation invariant violated: {head}{more}")


__all__ = [
    'DelaunayError', 'InvalidCapacityError', 'OutOfRegionError', 'DuplicatePointError',
    'CapacityExceededError', 'RegionStateError', 'InvariantError',
]
