"""Point location by walking across the mesh."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .predicates import side_of_query
from .logging_utils import get_logger

__all__ = ['WalkResult', 'find_triangle', 'scan_for_triangle']

logger = get_logger('deltri.locator')


@dataclass(frozen=True)
class WalkResult:
    triangle: Optional[int]  # None: outside the region (or empty mesh)
    steps: int               # triangles visited by the walk
    fallback: bool = False   # the walk gave up and a linear scan answered


def _contains(storage, tid: int, x: float, y: float) -> bool:
    p0, p1, p2 = storage.triangle_points(tid)
    a = storage.point_xy(p0); b = storage.point_xy(p1); c = storage.point_xy(p2)
    return (side_of_query(b, c, x, y) >= 0
            and side_of_query(c, a, x, y) >= 0
            and side_of_query(a, b, x, y) >= 0)


def scan_for_triangle(storage, x: float, y: float) -> Optional[int]:
    """Return the first triangle containing (x, y) (boundary inclusive), or None."""
    for tid in range(storage.num_triangles):
        if _contains(storage, tid, x, y):
            return tid
    return None


def find_triangle(storage, x: float, y: float, max_steps: Optional[int] = None) -> WalkResult:
    """Locate the triangle containing (x, y).

    The walk starts at the most recently created triangle. At each triangle
    the edges are tested in slot order (e0, e1, e2); the first edge, other
    than the one just crossed, that has the query strictly on its outer side
    is crossed. Reaching an edge with no triangle beyond it means the query
    lies outside the region. When no edge rejects the query the current
    triangle contains it (points on an edge or vertex included).

    Walks are bounded by ``max_steps`` (default: live triangle count + 1).
    On a Delaunay mesh the bound is never reached; if tolerance leftovers
    make the walk cycle, a linear scan answers instead.
    """
    n = storage.num_triangles
    if n == 0:
        return WalkResult(None, 0)
    limit = (n + 1) if max_steps is None else max_steps
    tid = n - 1
    entry = None
    steps = 0
    while steps < limit:
        steps += 1
        p0, p1, p2 = storage.triangle_points(tid)
        edges = storage.triangle_edges(tid)
        xy = (storage.point_xy(p0), storage.point_xy(p1), storage.point_xy(p2))
        crossed = None
        # slot k holds the edge from vertex k+1 to vertex k+2
        for k in range(3):
            eid = edges[k]
            if eid == entry:
                continue
            if side_of_query(xy[(k + 1) % 3], xy[(k + 2) % 3], x, y) < 0:
                crossed = eid
                break
        if crossed is None:
            return WalkResult(tid, steps)
        nxt = storage.other_triangle(crossed, tid)
        if nxt is None:
            return WalkResult(None, steps)
        entry = crossed
        tid = nxt
    logger.warning("walk to (%r, %r) exceeded %d steps; falling back to a linear scan", x, y, limit)
    return WalkResult(scan_for_triangle(storage, x, y), steps, fallback=True)
