"""Diagnostics helpers: mesh summaries and a scipy reference triangulation.

Functions take a :class:`~deltri.core.triangulation.Triangulation` (or any
object exposing the same read views) or raw numpy arrays.
"""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, Set

import numpy as np
from scipy.spatial import Delaunay

from .constants import EPS_TINY
from .predicates import triangles_signed_areas
from .logging_utils import get_logger

__all__ = [
    'triangles_min_angles', 'mesh_summary', 'reference_triangles', 'triangle_set',
    'matches_reference',
]

logger = get_logger('deltri.diagnostics')


def triangles_min_angles(points, tris) -> np.ndarray:
    """Vectorized per-triangle minimum internal angle (degrees).

    points: (N,2) float array
    tris:   (M,3) int array
    """
    pts = np.asarray(points, dtype=np.float64)
    T = np.asarray(tris, dtype=np.int64)
    if T.size == 0:
        return np.empty((0,), dtype=float)
    p0 = pts[T[:, 0]]
    p1 = pts[T[:, 1]]
    p2 = pts[T[:, 2]]
    # side lengths opposite to vertices: a=|p1-p2|, b=|p0-p2|, c=|p0-p1|
    a = np.linalg.norm(p1 - p2, axis=1)
    b = np.linalg.norm(p0 - p2, axis=1)
    c = np.linalg.norm(p0 - p1, axis=1)
    def angle_opposite(A, B, C):
        cosang = (B * B + C * C - A * A) / (2.0 * B * C + EPS_TINY)
        return np.degrees(np.arccos(np.clip(cosang, -1.0, 1.0)))
    return np.minimum(angle_opposite(a, b, c), np.minimum(angle_opposite(b, c, a), angle_opposite(c, a, b)))


def mesh_summary(tri) -> Dict[str, Any]:
    """Counts, capacity use, covered area and worst angle of a triangulation."""
    pts = np.asarray(tri.points, dtype=np.float64)
    tv = np.asarray(tri.triangle_vertices, dtype=np.int64)
    cap_p, cap_e, cap_t = tri.capacity
    areas2 = triangles_signed_areas(pts, tv)
    mins = triangles_min_angles(pts, tv)
    mins = mins[np.isfinite(mins)]
    interior = tri.interior_triangles()
    return {
        'points': int(tri.num_points),
        'edges': int(tri.num_edges),
        'triangles': int(tri.num_triangles),
        'interior_triangles': int(len(interior)),
        'capacity': (int(cap_p), int(cap_e), int(cap_t)),
        'fill_ratio': (tri.num_points / cap_p) if cap_p else 0.0,
        'area': float(0.5 * areas2.sum()) if areas2.size else 0.0,
        'min_angle_deg': float(mins.min()) if mins.size else float('nan'),
    }


def triangle_set(tris) -> Set[FrozenSet[int]]:
    """Triangles as a set of vertex frozensets (winding and order independent)."""
    return {frozenset(int(v) for v in row[:3]) for row in np.asarray(tris)}


def reference_triangles(points) -> np.ndarray:
    """Delaunay triangles of ``points`` as computed by scipy (qhull)."""
    pts = np.asarray(points, dtype=np.float64)
    return np.asarray(Delaunay(pts).simplices, dtype=np.int32)


def matches_reference(tri) -> bool:
    """Whether ``tri`` has exactly the triangles scipy computes for its points.

    Only meaningful for points in general position (no four co-circular
    points; the four region corners are co-circular but never form a
    triangle together once an interior point exists).
    """
    ours = triangle_set(tri.triangle_vertices)
    ref = triangle_set(reference_triangles(tri.points))
    if ours != ref:
        logger.debug("reference mismatch: %d only here, %d only in scipy",
                     len(ours - ref), len(ref - ours))
        return False
    return True
