"""Split a triangle into three around a newly inserted point."""
from __future__ import annotations

from typing import List, Tuple

__all__ = ['divide_triangle']


def divide_triangle(storage, px: int, tid: int, stack: List[int]) -> Tuple[int, int, int]:
    """Replace triangle ``tid`` by three triangles fanned around point ``px``.

    With ``tid = (p0, p1, p2; e0, e1, e2)`` the result is::

        tid : (p1, p2, px)   keeps the slot, borders e0
        t1  : (p2, p0, px)   new id, borders e1
        t2  : (p0, p1, px)   new id, borders e2

    joined by three new spokes p0-px, p1-px and p2-px. The original edges
    e0, e1, e2 are pushed onto ``stack`` for legalization; the spokes need no
    check. ``px`` must lie inside (or on the boundary of) ``tid`` and the
    caller must have verified there is room for 2 triangles and 3 edges.
    """
    p0, p1, p2 = storage.triangle_points(tid)
    e0, e1, e2 = storage.triangle_edges(tid)
    t0 = tid
    t1 = storage.allocate_triangle()
    t2 = storage.allocate_triangle()

    # e0 stays with the recycled slot
    storage.replace_edge_triangle(e1, tid, t1)
    storage.replace_edge_triangle(e2, tid, t2)

    # spokes; left side first
    e3 = storage.add_edge(p0, px, t1, t2)
    e4 = storage.add_edge(p1, px, t2, t0)
    e5 = storage.add_edge(p2, px, t0, t1)

    storage.set_triangle(t0, p1, p2, px, e5, e4, e0)
    storage.set_triangle(t1, p2, p0, px, e3, e5, e1)
    storage.set_triangle(t2, p0, p1, px, e4, e3, e2)

    stack.append(e0)
    stack.append(e1)
    stack.append(e2)
    return (t0, t1, t2)
