"""Structural and Delaunay checks over a triangulation (or its raw arrays)."""
from __future__ import annotations

from typing import List, Tuple

import numpy as np

from .constants import EPS_ORIENT, EPS_INCIRCLE, FRAME_POINTS, NO_TRIANGLE, EDGES_PER_POINT, TRIANGLES_PER_POINT
from .predicates import (orientation, flippable, in_circumcircle,
                         triangles_signed_areas)
from .logging_utils import get_logger

__all__ = [
    'inverted_triangles', 'delaunay_violations', 'check_triangulation',
]


def _arrays(tri):
    return (np.asarray(tri.points, dtype=np.float64),
            np.asarray(tri.edges, dtype=np.int64),
            np.asarray(tri.triangles, dtype=np.int64))


def inverted_triangles(tri, eps: float = EPS_ORIENT) -> List[int]:
    """Ids of triangles whose vertices turn clockwise beyond ``eps``."""
    pts, _, tris = _arrays(tri)
    if tris.size == 0:
        return []
    areas = triangles_signed_areas(pts, tris[:, :3])
    return [int(i) for i in np.nonzero(areas < -eps)[0]]


def delaunay_violations(tri, eps_orient: float = EPS_ORIENT,
                        eps_incircle: float = EPS_INCIRCLE) -> List[Tuple[int, int, int]]:
    """Interior edges that are not locally Delaunay.

    Returns ``(edge, triangle, vertex)`` triples where ``vertex`` (the apex
    across the edge) lies strictly inside the circumcircle of ``triangle``.
    Edges whose quad is not flippable are locally Delaunay by definition
    and are skipped, as the legalizer does.
    """
    pts, edges, tris = _arrays(tri)
    out: List[Tuple[int, int, int]] = []
    for eid, (a, b, t0, t1) in enumerate(edges.tolist()):
        if t0 == NO_TRIANGLE or t1 == NO_TRIANGLE:
            continue
        apex0 = _apex(tris[t0], a, b)
        apex1 = _apex(tris[t1], a, b)
        if apex0 is None or apex1 is None:
            continue  # reported by the structural check
        p0, p1, p2, p3 = pts[a], pts[apex1], pts[b], pts[apex0]
        if not flippable(p0, p1, p2, p3, eps_orient):
            continue
        if in_circumcircle(p0, p2, p3, p1, eps_incircle, eps_orient):
            out.append((eid, int(t0), int(apex1)))
        elif in_circumcircle(p0, p1, p2, p3, eps_incircle, eps_orient):
            out.append((eid, int(t1), int(apex0)))
    return out


def _apex(row, a: int, b: int):
    others = [int(v) for v in row[:3] if v != a and v != b]
    return others[0] if len(others) == 1 else None


def check_triangulation(tri, check_delaunay: bool = True, verbose: bool = False,
                        eps_orient: float = EPS_ORIENT,
                        eps_incircle: float = EPS_INCIRCLE) -> Tuple[bool, List[str]]:
    """Validate every invariant of an incremental triangulation.

    ``tri`` is anything exposing ``points``, ``edges`` and ``triangles``
    arrays laid out like :class:`~deltri.core.triangulation.Triangulation`.

    Checks: count law for a set-up mesh, index bounds, counter-clockwise
    triangles, edge slot correspondence (slot k joins vertices k+1 and k+2),
    edge back-references and sides (t0 left, t1 right) and, optionally, the
    local Delaunay property.

    Returns (ok, messages).
    """
    pts, edges, tris = _arrays(tri)
    n_p, n_e, n_t = len(pts), len(edges), len(tris)
    msgs: List[str] = []
    ok = True

    if n_t == 0:
        if n_p or n_e:
            msgs.append(f"{n_p} points and {n_e} edges but no triangles.")
            ok = False
        return _finish(ok, msgs, verbose)

    # Count law: setup gives 4/5/2, each insert adds 1/3/2
    inserted = n_p - FRAME_POINTS
    if n_e != 5 + EDGES_PER_POINT * inserted or n_t != 2 + TRIANGLES_PER_POINT * inserted:
        msgs.append(f"Counts break the insertion law: points={n_p} edges={n_e} triangles={n_t}.")
        ok = False

    # Index bounds
    bad_tv = np.any((tris[:, :3] < 0) | (tris[:, :3] >= n_p))
    bad_te = np.any((tris[:, 3:] < 0) | (tris[:, 3:] >= n_e))
    bad_ep = np.any((edges[:, :2] < 0) | (edges[:, :2] >= n_p))
    side = edges[:, 2:]
    bad_et = np.any((side != NO_TRIANGLE) & ((side < 0) | (side >= n_t)))
    if bad_tv or bad_te or bad_ep or bad_et:
        msgs.append("Index out of range in edge or triangle arrays.")
        return _finish(False, msgs, verbose)

    # Orientation
    areas = triangles_signed_areas(pts, tris[:, :3])
    for t in np.nonzero(areas < -eps_orient)[0][:10]:
        msgs.append(f"Triangle {int(t)} is clockwise (signed area2 {float(areas[t]):.3e}).")
        ok = False

    # Triangle -> edge slot correspondence and back-references
    for tid, row in enumerate(tris.tolist()):
        verts = row[:3]
        for k in range(3):
            eid = row[3 + k]
            a, b, t0, t1 = edges[eid].tolist()
            want = {verts[(k + 1) % 3], verts[(k + 2) % 3]}
            if {a, b} != want:
                msgs.append(f"Triangle {tid} slot e{k} holds edge {eid}=({a},{b}), expected {tuple(sorted(want))}.")
                ok = False
            if tid not in (t0, t1):
                msgs.append(f"Edge {eid} does not reference triangle {tid} that lists it.")
                ok = False

    # Edge -> triangle back-references and sides
    for eid, (a, b, t0, t1) in enumerate(edges.tolist()):
        if t0 == NO_TRIANGLE and t1 == NO_TRIANGLE:
            msgs.append(f"Edge {eid} has no triangle on either side.")
            ok = False
            continue
        for side_idx, t in ((0, t0), (1, t1)):
            if t == NO_TRIANGLE:
                continue
            row = tris[t]
            if eid not in row[3:].tolist():
                msgs.append(f"Edge {eid} references triangle {t} which does not list it.")
                ok = False
                continue
            apex = _apex(row, a, b)
            if apex is None:
                continue
            o = orientation(pts[a], pts[b], pts[apex], eps_orient)
            if (side_idx == 0 and o < 0) or (side_idx == 1 and o > 0):
                msgs.append(f"Edge {eid} has triangle {t} on the wrong side (t{side_idx}).")
                ok = False

    if check_delaunay:
        for eid, t, v in delaunay_violations(tri, eps_orient, eps_incircle)[:10]:
            msgs.append(f"Edge {eid} is not locally Delaunay: vertex {v} inside circumcircle of triangle {t}.")
            ok = False

    return _finish(ok, msgs, verbose)


def _finish(ok: bool, msgs: List[str], verbose: bool) -> Tuple[bool, List[str]]:
    if verbose:
        logger = get_logger('deltri.conformity')
        for m in msgs:
            logger.info("Conformity: %s", m)
    return ok, msgs
