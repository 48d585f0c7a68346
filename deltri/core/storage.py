"""Fixed-capacity arenas for points, edges and triangles.

Storage is struct-of-arrays in numpy, allocated once:

* ``points``    float64 (max_points, 2)        x, y
* ``edges``     int32   (3 * max_points, 4)    p0, p1, t0, t1
* ``triangles`` int32   (2 * max_points, 6)    p0, p1, p2, e0, e1, e2

Conventions shared by every mesh routine:

* a triangle lists its vertices counter-clockwise; ``e0`` is the edge
  p1-p2 (opposite p0), ``e1`` is p2-p0 and ``e2`` is p0-p1;
* an edge's ``t0`` lies left of the directed edge p0->p1, ``t1`` right;
* a side without a triangle is ``None`` for callers. The arena stores it as
  ``NO_TRIANGLE`` and that encoding only escapes through the raw read views.

Ids are never reused. Edges are rewritten in place when flipped and
triangle slots are overwritten by splits and flips.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .constants import MIN_POINTS, EDGES_PER_POINT, TRIANGLES_PER_POINT, NO_TRIANGLE
from .errors import InvalidCapacityError, CapacityExceededError

__all__ = ['Point', 'Edge', 'Triangle', 'MeshStorage']


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __iter__(self):
        yield self.x
        yield self.y


@dataclass(frozen=True)
class Edge:
    p0: int
    p1: int
    t0: Optional[int]
    t1: Optional[int]

    @property
    def is_boundary(self) -> bool:
        return self.t0 is None or self.t1 is None


@dataclass(frozen=True)
class Triangle:
    p0: int
    p1: int
    p2: int
    e0: int
    e1: int
    e2: int

    @property
    def vertices(self) -> Tuple[int, int, int]:
        return (self.p0, self.p1, self.p2)

    @property
    def edges(self) -> Tuple[int, int, int]:
        return (self.e0, self.e1, self.e2)


def _decode(t: int) -> Optional[int]:
    return None if t == NO_TRIANGLE else t


def _encode(t: Optional[int]) -> int:
    return NO_TRIANGLE if t is None else t


def _readonly(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.setflags(write=False)
    return view


class MeshStorage:
    """Append-only arenas with a capacity fixed at construction."""

    def __init__(self, max_points: int):
        if isinstance(max_points, bool) or not isinstance(max_points, (int, np.integer)):
            raise InvalidCapacityError(f"max_points must be an integer, got {max_points!r}")
        max_points = int(max_points)
        if max_points < MIN_POINTS:
            raise InvalidCapacityError(f"max_points must be at least {MIN_POINTS}, got {max_points}")
        self.max_points = max_points
        self._points = np.zeros((max_points, 2), dtype=np.float64)
        self._edges = np.full((max_points * EDGES_PER_POINT, 4), NO_TRIANGLE, dtype=np.int32)
        self._triangles = np.full((max_points * TRIANGLES_PER_POINT, 6), -1, dtype=np.int32)
        self.num_points = 0
        self.num_edges = 0
        self.num_triangles = 0

    # --- capacity ---
    @property
    def capacity(self) -> Tuple[int, int, int]:
        """(points, edges, triangles) capacity."""
        return (self._points.shape[0], self._edges.shape[0], self._triangles.shape[0])

    def has_room(self, points: int = 0, edges: int = 0, triangles: int = 0) -> bool:
        cp, ce, ct = self.capacity
        return (self.num_points + points <= cp
                and self.num_edges + edges <= ce
                and self.num_triangles + triangles <= ct)

    def require_room(self, points: int = 0, edges: int = 0, triangles: int = 0) -> None:
        """Raise CapacityExceededError unless the requested growth fits every arena."""
        cp, ce, ct = self.capacity
        if self.num_points + points > cp:
            raise CapacityExceededError('point', cp)
        if self.num_edges + edges > ce:
            raise CapacityExceededError('edge', ce)
        if self.num_triangles + triangles > ct:
            raise CapacityExceededError('triangle', ct)

    def clear(self) -> None:
        self.num_points = 0
        self.num_edges = 0
        self.num_triangles = 0

    # --- allocation ---
    def add_point(self, x: float, y: float) -> int:
        self.require_room(points=1)
        pid = self.num_points
        self._points[pid, 0] = x
        self._points[pid, 1] = y
        self.num_points += 1
        return pid

    def add_edge(self, p0: int, p1: int, t0: Optional[int], t1: Optional[int]) -> int:
        self.require_room(edges=1)
        eid = self.num_edges
        self._edges[eid] = (p0, p1, _encode(t0), _encode(t1))
        self.num_edges += 1
        return eid

    def allocate_triangle(self) -> int:
        """Reserve the next triangle id; its slot is filled by set_triangle()."""
        self.require_room(triangles=1)
        tid = self.num_triangles
        self.num_triangles += 1
        return tid

    def set_triangle(self, tid: int, p0: int, p1: int, p2: int, e0: int, e1: int, e2: int) -> None:
        if not 0 <= tid < self.num_triangles:
            raise IndexError(f"triangle {tid} is not allocated")
        self._triangles[tid] = (p0, p1, p2, e0, e1, e2)

    # --- edge rewiring ---
    def set_edge_points(self, eid: int, p0: int, p1: int) -> None:
        self._edges[eid, 0] = p0
        self._edges[eid, 1] = p1

    def replace_edge_triangle(self, eid: int, old: int, new: int) -> None:
        """Point whichever side of edge ``eid`` referenced ``old`` at ``new``."""
        row = self._edges[eid]
        if row[2] == old:
            row[2] = new
        elif row[3] == old:
            row[3] = new
        else:
            raise ValueError(f"edge {eid} does not border triangle {old}")

    # --- scalar accessors (plain Python values) ---
    def point_xy(self, pid: int) -> Tuple[float, float]:
        x, y = self._points[pid].tolist()
        return (x, y)

    def edge_points(self, eid: int) -> Tuple[int, int]:
        p0, p1 = self._edges[eid, :2].tolist()
        return (p0, p1)

    def edge_triangles(self, eid: int) -> Tuple[Optional[int], Optional[int]]:
        t0, t1 = self._edges[eid, 2:].tolist()
        return (_decode(t0), _decode(t1))

    def triangle_points(self, tid: int) -> Tuple[int, int, int]:
        p0, p1, p2 = self._triangles[tid, :3].tolist()
        return (p0, p1, p2)

    def triangle_edges(self, tid: int) -> Tuple[int, int, int]:
        e0, e1, e2 = self._triangles[tid, 3:].tolist()
        return (e0, e1, e2)

    def other_triangle(self, eid: int, tid: int) -> Optional[int]:
        """The triangle across edge ``eid`` from ``tid`` (None on the outer boundary)."""
        t0, t1 = self.edge_triangles(eid)
        return t1 if t0 == tid else t0

    # --- records ---
    def point_record(self, pid: int) -> Point:
        self._check_index(pid, self.num_points, 'point')
        return Point(*self.point_xy(pid))

    def edge_record(self, eid: int) -> Edge:
        self._check_index(eid, self.num_edges, 'edge')
        return Edge(*self.edge_points(eid), *self.edge_triangles(eid))

    def triangle_record(self, tid: int) -> Triangle:
        self._check_index(tid, self.num_triangles, 'triangle')
        return Triangle(*self._triangles[tid].tolist())

    @staticmethod
    def _check_index(idx: int, count: int, kind: str) -> None:
        if not 0 <= idx < count:
            raise IndexError(f"{kind} id {idx} out of range (count {count})")

    # --- read-only views sized to the live counts ---
    @property
    def points(self) -> np.ndarray:
        return _readonly(self._points[:self.num_points])

    @property
    def edges(self) -> np.ndarray:
        return _readonly(self._edges[:self.num_edges])

    @property
    def triangles(self) -> np.ndarray:
        return _readonly(self._triangles[:self.num_triangles])
