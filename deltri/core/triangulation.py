"""Incremental Delaunay triangulation facade.

Typical use::

    tri = Triangulation(max_points=1024)
    tri.setup(0.0, 0.0, 4.0)          # square region, 4 corners, 2 triangles
    pid = tri.insert(0.25, -0.5)      # locate, split, legalize
    pts, tris = tri.mesh_arrays()     # renderer-ready arrays without the frame

Each insertion locates the containing triangle by walking from the most
recent one, splits it into three around the new point and then flips edges
until every interior edge is locally Delaunay again. Storage is fixed at
construction: ``max_points`` points, three edges and two triangles per point.
"""
from __future__ import annotations

import math
import time
from collections import defaultdict
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .config import TriangulationConfig
from .constants import FRAME_POINTS
from .errors import (CapacityExceededError, DuplicatePointError, InvariantError,
                     OutOfRegionError, RegionStateError)
from .legalizer import flip_flop
from .locator import find_triangle as _walk
from .logging_utils import get_logger
from .splitter import divide_triangle
from .stats import OpStats, print_stats as _print_stats
from .storage import Edge, MeshStorage, Point, Triangle

__all__ = ['Triangulation', 'bounding_square', 'triangulate']

logger = get_logger('deltri.triangulation')


class Triangulation:
    """Delaunay triangulation of a square region, built one point at a time.

    Parameters
    ----------
    max_points : int
        Total number of points, the four region corners included. Must be at
        least 4; ``InvalidCapacityError`` otherwise.
    config : TriangulationConfig, optional
        Tolerances and debugging switches.
    """

    def __init__(self, max_points: int, config: Optional[TriangulationConfig] = None):
        self.config = config if config is not None else TriangulationConfig()
        self._store = MeshStorage(max_points)
        self._flip_stack: List[int] = []
        self._op_stats = defaultdict(OpStats)
        self.logger = get_logger(f'deltri.triangulation.{self.__class__.__name__}')

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def is_setup(self) -> bool:
        return self._store.num_triangles > 0

    def setup(self, x: float, y: float, size: float) -> None:
        """Establish the square region of side ``size`` centred on (x, y).

        Creates corner points 0..3 at (x-h, y-h), (x+h, y-h), (x-h, y+h),
        (x+h, y+h) with h = size/2, five edges and the two triangles
        (0, 1, 2) and (3, 2, 1). Must be called once before insert(), and
        again only after clear().
        """
        if self.is_setup:
            raise RegionStateError("setup() already called; clear() first to start over")
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"region centre must be finite, got ({x!r}, {y!r})")
        if not (math.isfinite(size) and size > 0.0):
            raise ValueError(f"region size must be a positive finite number, got {size!r}")
        t_start = time.perf_counter()
        s = self._store
        hs = size * 0.5
        t0 = s.allocate_triangle()
        t1 = s.allocate_triangle()
        p0 = s.add_point(x - hs, y - hs)
        p1 = s.add_point(x + hs, y - hs)
        p2 = s.add_point(x - hs, y + hs)
        p3 = s.add_point(x + hs, y + hs)
        e0 = s.add_edge(p0, p1, t0, None)
        e1 = s.add_edge(p1, p2, t0, t1)
        e2 = s.add_edge(p2, p0, t0, None)
        e3 = s.add_edge(p2, p3, None, t1)
        e4 = s.add_edge(p3, p1, None, t1)
        s.set_triangle(t0, p0, p1, p2, e1, e2, e0)
        s.set_triangle(t1, p3, p2, p1, e1, e4, e3)
        st = self._op_stats['setup']
        st.attempts += 1
        st.success += 1
        st.record_time(time.perf_counter() - t_start)
        self.logger.debug("setup: centre=(%g, %g) size=%g capacity=%s", x, y, size, s.capacity)

    def clear(self) -> None:
        """Forget every point, edge and triangle; storage is kept for reuse."""
        self._store.clear()
        self._flip_stack.clear()
        self.logger.debug("cleared")

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------
    def find_triangle(self, x: float, y: float) -> Optional[int]:
        """Id of the triangle containing (x, y), or None outside the region."""
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return _walk(self._store, x, y, self.config.max_walk_steps).triangle

    def insert(self, x: float, y: float) -> int:
        """Insert (x, y) and return its point id.

        Raises
        ------
        RegionStateError
            setup() has not been called.
        OutOfRegionError
            The point is outside the region (or not finite).
        DuplicatePointError
            The point coincides with an existing vertex (``reject_duplicates``).
        CapacityExceededError
            The arenas are full.

        Every check runs before the mesh is touched, so a failed insert
        leaves the triangulation unchanged.
        """
        if not self.is_setup:
            raise RegionStateError("insert() called before setup()")
        st = self._op_stats['insert']
        st.attempts += 1
        t_start = time.perf_counter()
        try:
            pid = self._insert(float(x), float(y), st)
        except (OutOfRegionError, DuplicatePointError, CapacityExceededError):
            st.fail += 1
            raise
        finally:
            st.record_time(time.perf_counter() - t_start)
        st.success += 1
        return pid

    def _insert(self, x: float, y: float, st: OpStats) -> int:
        cfg = self.config
        s = self._store
        if not (math.isfinite(x) and math.isfinite(y)):
            st.out_of_region += 1
            raise OutOfRegionError(x, y)
        walk = _walk(s, x, y, cfg.max_walk_steps)
        st.walk_steps += walk.steps
        if walk.fallback:
            st.walk_fallbacks += 1
        tid = walk.triangle
        if tid is None:
            st.out_of_region += 1
            self.logger.debug("reject (%r, %r): outside region", x, y)
            raise OutOfRegionError(x, y)
        if cfg.reject_duplicates:
            dup = self._coincident_vertex(tid, x, y)
            if dup is not None:
                st.duplicates += 1
                self.logger.debug("reject (%r, %r): duplicate of vertex %d", x, y, dup)
                raise DuplicatePointError(x, y, dup)
        if not s.has_room(points=1, edges=3, triangles=2):
            st.capacity_rejects += 1
            s.require_room(points=1, edges=3, triangles=2)

        px = s.add_point(x, y)
        divide_triangle(s, px, tid, self._flip_stack)
        res = flip_flop(s, px, self._flip_stack, cfg.eps_orient, cfg.eps_incircle, debug=cfg.debug)
        st.flip_checks += res.checks
        st.flips += res.flips
        if cfg.debug:
            self.logger.debug("insert %d at (%r, %r): triangle %d, %d steps, %d flips",
                              px, x, y, tid, walk.steps, res.flips)
        if cfg.validate:
            self._validate()
        return px

    def _coincident_vertex(self, tid: int, x: float, y: float) -> Optional[int]:
        tol = self.config.duplicate_tol
        for pid in self._store.triangle_points(tid):
            vx, vy = self._store.point_xy(pid)
            if abs(vx - x) <= tol and abs(vy - y) <= tol:
                return pid
        return None

    def _validate(self) -> None:
        from .conformity import check_triangulation
        ok, msgs = check_triangulation(self, eps_orient=self.config.eps_orient,
                                       eps_incircle=self.config.eps_incircle)
        if not ok:
            raise InvariantError(msgs)

    def insert_many(self, points: Iterable, skip_outside: bool = False) -> List[int]:
        """Insert every (x, y) row of ``points`` in order; return their point ids.

        With ``skip_outside`` points outside the region and duplicates are
        skipped instead of raising. Capacity errors always propagate.
        """
        ids: List[int] = []
        for row in np.asarray(points, dtype=np.float64).reshape(-1, 2):
            x, y = float(row[0]), float(row[1])
            try:
                ids.append(self.insert(x, y))
            except (OutOfRegionError, DuplicatePointError) as exc:
                if not skip_outside:
                    raise
                self.logger.debug("insert_many: skipped (%r, %r): %s", x, y, exc)
        return ids

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------
    @property
    def max_points(self) -> int:
        return self._store.max_points

    @property
    def capacity(self) -> Tuple[int, int, int]:
        return self._store.capacity

    @property
    def num_points(self) -> int:
        return self._store.num_points

    @property
    def num_edges(self) -> int:
        return self._store.num_edges

    @property
    def num_triangles(self) -> int:
        return self._store.num_triangles

    @property
    def points(self) -> np.ndarray:
        """Read-only (num_points, 2) float64 coordinates."""
        return self._store.points

    @property
    def edges(self) -> np.ndarray:
        """Read-only (num_edges, 4) int32 rows p0, p1, t0, t1 (-1: no triangle)."""
        return self._store.edges

    @property
    def triangles(self) -> np.ndarray:
        """Read-only (num_triangles, 6) int32 rows p0, p1, p2, e0, e1, e2."""
        return self._store.triangles

    @property
    def triangle_vertices(self) -> np.ndarray:
        """Read-only (num_triangles, 3) counter-clockwise vertex ids."""
        return self._store.triangles[:, :3]

    def point(self, pid: int) -> Point:
        return self._store.point_record(pid)

    def edge(self, eid: int) -> Edge:
        return self._store.edge_record(eid)

    def triangle(self, tid: int) -> Triangle:
        return self._store.triangle_record(tid)

    def iter_edges(self) -> Iterator[Edge]:
        for eid in range(self._store.num_edges):
            yield self._store.edge_record(eid)

    def iter_triangles(self) -> Iterator[Triangle]:
        for tid in range(self._store.num_triangles):
            yield self._store.triangle_record(tid)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    @property
    def frame_point_ids(self) -> Tuple[int, ...]:
        """Ids of the region corners created by setup()."""
        return tuple(range(min(FRAME_POINTS, self._store.num_points)))

    def interior_triangles(self) -> np.ndarray:
        """(K, 3) vertex triples of the triangles that touch no region corner."""
        tv = np.asarray(self.triangle_vertices)
        keep = np.all(tv >= FRAME_POINTS, axis=1)
        return np.array(tv[keep], dtype=np.int32)

    def mesh_arrays(self, drop_frame: bool = True, clockwise: bool = False) -> Tuple[np.ndarray, np.ndarray]:
        """Copy out (points, triangles) for a renderer.

        ``drop_frame`` removes triangles touching a region corner (point ids
        are kept, so corners stay in ``points``). ``clockwise`` emits each
        triangle as p0, p2, p1 for renderers with the opposite winding.
        """
        tris = self.interior_triangles() if drop_frame else np.array(self.triangle_vertices, dtype=np.int32)
        if clockwise:
            tris = tris[:, [0, 2, 1]]
        return np.array(self.points, dtype=np.float64), np.ascontiguousarray(tris, dtype=np.int32)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------
    def stats_summary(self):
        return {k: v.to_dict() for k, v in self._op_stats.items()}

    def print_stats(self, pretty: bool = True, file=None):
        """Delegate to `stats.print_stats` for presentation."""
        _print_stats(self.stats_summary(), file=file, pretty=pretty)

    def reset_stats(self, drop_ops: bool = False):
        """Zero all counters and timings; ``drop_ops`` forgets the op keys too."""
        if drop_ops:
            self._op_stats.clear()
            return
        for stats in self._op_stats.values():
            stats.reset()

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(points={self.num_points}/{self.max_points}, "
                f"edges={self.num_edges}, triangles={self.num_triangles})")


def bounding_square(points, margin: float = 0.1) -> Tuple[float, float, float]:
    """Centre and side of a square enclosing ``points`` with a relative ``margin``.

    The side is the larger bounding-box extent times ``1 + 2 * margin`` so
    that no point lands on the region boundary. A single point (or all equal
    points) gets a unit square.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if pts.shape[0] == 0:
        raise ValueError("bounding_square needs at least one point")
    if not np.all(np.isfinite(pts)):
        raise ValueError("points must be finite")
    lo = pts.min(axis=0)
    hi = pts.max(axis=0)
    cx, cy = ((lo + hi) * 0.5).tolist()
    extent = float(np.max(hi - lo))
    if extent == 0.0:
        extent = 1.0
    return cx, cy, extent * (1.0 + 2.0 * margin)


def triangulate(points, margin: float = 0.1, config: Optional[TriangulationConfig] = None) -> Triangulation:
    """Build the Delaunay triangulation of ``points`` inside a fitted square region.

    Point ``i`` of the input becomes point id ``i + 4`` unless it duplicates an
    earlier one (duplicates are skipped).
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    cx, cy, size = bounding_square(pts, margin)
    tri = Triangulation(pts.shape[0] + FRAME_POINTS, config=config)
    tri.setup(cx, cy, size)
    ids = tri.insert_many(pts, skip_outside=True)
    logger.debug("triangulate: %d of %d points inserted into square (%g, %g, %g)",
                 len(ids), pts.shape[0], cx, cy, size)
    return tri
