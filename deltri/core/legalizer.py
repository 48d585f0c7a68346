"""Edge-flip legalization restoring the Delaunay property after a split."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from .constants import EPS_ORIENT, EPS_INCIRCLE
from .predicates import flippable, in_circumcircle
from .logging_utils import get_logger

__all__ = ['Quad', 'LegalizeResult', 'edge_quad', 'flip_edge', 'flip_flop']

logger = get_logger('deltri.legalizer')


class Quad(NamedTuple):
    """The two triangles around an interior edge ``e = (p0, p2)``.

    ``t0`` (left of p0->p2) is (p0, p2, p3) and ``t1`` (right) is
    (p0, p1, p2), so p0, p1, p2, p3 runs counter-clockwise around the quad.
    ``e0 = p2-p3`` and ``e1 = p3-p0`` are the other edges of t0,
    ``e2 = p0-p1`` and ``e3 = p1-p2`` those of t1.
    """
    edge: int
    t0: int
    t1: int
    p0: int
    p1: int
    p2: int
    p3: int
    e0: int
    e1: int
    e2: int
    e3: int


@dataclass
class LegalizeResult:
    checks: int = 0
    flips: int = 0


def _opposite(storage, tid: int, eid: int):
    """Vertex of ``tid`` opposite edge ``eid`` and the two following edges (CCW)."""
    pts = storage.triangle_points(tid)
    eds = storage.triangle_edges(tid)
    k = eds.index(eid)
    return pts[k], eds[(k + 1) % 3], eds[(k + 2) % 3]


def edge_quad(storage, eid: int) -> Optional[Quad]:
    """Describe the quad around edge ``eid``; None for an outer boundary edge."""
    t0, t1 = storage.edge_triangles(eid)
    if t0 is None or t1 is None:
        return None
    p0, p2 = storage.edge_points(eid)
    p3, e0, e1 = _opposite(storage, t0, eid)
    p1, e2, e3 = _opposite(storage, t1, eid)
    return Quad(eid, t0, t1, p0, p1, p2, p3, e0, e1, e2, e3)


def flip_edge(storage, q: Quad) -> None:
    """Replace diagonal p0-p2 of quad ``q`` by p1-p3, rewriting both triangles in place.

    Afterwards t0 is (p3, p0, p1) and t1 is (p1, p2, p3); e0 moves from t0
    to t1 and e2 from t1 to t0. The edge keeps its id and t0 stays on its
    left side.
    """
    storage.set_edge_points(q.edge, q.p1, q.p3)
    storage.replace_edge_triangle(q.e0, q.t0, q.t1)
    storage.replace_edge_triangle(q.e2, q.t1, q.t0)
    storage.set_triangle(q.t0, q.p3, q.p0, q.p1, q.e2, q.edge, q.e1)
    storage.set_triangle(q.t1, q.p1, q.p2, q.p3, q.e0, q.edge, q.e3)


def flip_flop(storage, px: int, stack: List[int],
              eps_orient: float = EPS_ORIENT, eps_incircle: float = EPS_INCIRCLE,
              debug: bool = False) -> LegalizeResult:
    """Drain ``stack``, flipping every edge that is not locally Delaunay.

    Every stacked edge has the new point ``px`` as the apex of one of its two
    triangles. The edge is flipped when the quad is flippable and ``px`` lies
    strictly inside the circumcircle of the triangle on the other side; the
    two edges of the quad opposite ``px`` are then stacked for re-examination.
    """
    result = LegalizeResult()
    xy = storage.point_xy
    while stack:
        eid = stack.pop()
        q = edge_quad(storage, eid)
        if q is None:
            continue
        result.checks += 1
        a0, a1, a2, a3 = xy(q.p0), xy(q.p1), xy(q.p2), xy(q.p3)
        if not flippable(a0, a1, a2, a3, eps_orient):
            continue
        if q.p1 == px:
            illegal = in_circumcircle(a0, a2, a3, a1, eps_incircle, eps_orient)
        else:
            illegal = in_circumcircle(a0, a1, a2, a3, eps_incircle, eps_orient)
        if not illegal:
            continue
        flip_edge(storage, q)
        result.flips += 1
        if debug:
            logger.debug("flip edge %d: (%d,%d) -> (%d,%d)", eid, q.p0, q.p2, q.p1, q.p3)
        if q.p1 == px:
            stack.append(q.e0)
            stack.append(q.e1)
        else:
            stack.append(q.e2)
            stack.append(q.e3)
    return result
