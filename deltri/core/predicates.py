"""Geometric predicates over 2D points.

Points are any ``(x, y)`` pair (tuple, list, length-2 numpy array). The
scalar predicates are what the mesh kernel calls on every step; the
vectorized helpers at the bottom serve the conformity checks and
diagnostics, which look at a whole mesh at once.

All tolerances are absolute. Ties are always resolved towards "colinear"
and "not inside the circle" so that legalization never oscillates.
"""
from __future__ import annotations

import numpy as np

from .constants import EPS_ORIENT, EPS_INCIRCLE

__all__ = [
    'signed_area2', 'orientation', 'side_of_query', 'flippable', 'incircle_det',
    'in_circumcircle', 'triangles_signed_areas', 'incircle_determinants',
]


def signed_area2(a, b, c) -> float:
    """Twice the signed area of triangle a,b,c (cross product (b-a) x (c-a)).

    Positive when (a,b,c) turns counter-clockwise, negative when clockwise.
    """
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def orientation(a, b, c, eps: float = EPS_ORIENT) -> int:
    """+1 if a->b->c is counter-clockwise, -1 if clockwise, 0 if colinear within eps."""
    z = signed_area2(a, b, c)
    if z > eps:
        return 1
    if z < -eps:
        return -1
    return 0


def side_of_query(a, b, x: float, y: float) -> int:
    """Exact side of the raw coordinate (x, y) relative to the directed edge a->b.

    Used during point location, before the query is stored as a point. No
    tolerance is applied: only a strictly negative cross product puts the
    query outside.
    """
    z = (b[0] - a[0]) * (y - a[1]) - (b[1] - a[1]) * (x - a[0])
    if z > 0.0:
        return 1
    if z < 0.0:
        return -1
    return 0


def flippable(p0, p1, p2, p3, eps: float = EPS_ORIENT) -> bool:
    """Whether diagonal p0-p2 of quad p0,p1,p2,p3 may be replaced by p1-p3.

    The replacement triangles (p3,p0,p1) and (p1,p2,p3) must share one
    non-zero orientation, and neither current triangle (p0,p1,p2) nor
    (p2,p3,p0) may have the opposite one. A vertex lying on the current
    diagonal is accepted (the flip removes the sliver); a reflex quad is not.
    """
    s = orientation(p3, p0, p1, eps)
    if s == 0 or orientation(p1, p2, p3, eps) != s:
        return False
    return orientation(p0, p1, p2, eps) != -s and orientation(p2, p3, p0, eps) != -s


def incircle_det(p0, p1, p2, p3) -> float:
    """Lifted 3x3 in-circle determinant of p3 against p0,p1,p2.

    Positive when p3 is inside the circumcircle and p0,p1,p2 is
    counter-clockwise; the sign flips with the winding.
    """
    adx = p0[0] - p3[0]; ady = p0[1] - p3[1]
    bdx = p1[0] - p3[0]; bdy = p1[1] - p3[1]
    cdx = p2[0] - p3[0]; cdy = p2[1] - p3[1]
    alift = adx * adx + ady * ady
    blift = bdx * bdx + bdy * bdy
    clift = cdx * cdx + cdy * cdy
    return (alift * (bdx * cdy - cdx * bdy)
            + blift * (cdx * ady - adx * cdy)
            + clift * (adx * bdy - bdx * ady))


def in_circumcircle(p0, p1, p2, p3, eps: float = EPS_INCIRCLE, eps_orient: float = EPS_ORIENT) -> bool:
    """True iff p3 lies strictly inside the circumcircle of triangle p0,p1,p2.

    Works for either winding of p0,p1,p2. A determinant within eps of zero
    (p3 on the circle) and a degenerate triangle both answer False.
    """
    o = orientation(p0, p1, p2, eps_orient)
    if o == 0:
        return False
    return o * incircle_det(p0, p1, p2, p3) > eps


# ---------------------------------------------------------------------------
# Vectorized helpers
# ---------------------------------------------------------------------------

def triangles_signed_areas(points, tris) -> np.ndarray:
    """Twice the signed area of each triangle row of ``tris`` (M,3) over ``points`` (N,2)."""
    pts = np.asarray(points, dtype=np.float64)
    t = np.asarray(tris, dtype=np.int64)
    if t.size == 0:
        return np.zeros((0,), dtype=np.float64)
    a = pts[t[:, 0]]; b = pts[t[:, 1]]; c = pts[t[:, 2]]
    return (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])


def incircle_determinants(a, b, c, d) -> np.ndarray:
    """Row-wise :func:`incircle_det` for equal-length (M,2) arrays."""
    a = np.asarray(a, dtype=np.float64); b = np.asarray(b, dtype=np.float64)
    c = np.asarray(c, dtype=np.float64); d = np.asarray(d, dtype=np.float64)
    ad = a - d; bd = b - d; cd = c - d
    alift = np.einsum('ij,ij->i', ad, ad)
    blift = np.einsum('ij,ij->i', bd, bd)
    clift = np.einsum('ij,ij->i', cd, cd)
    return (alift * (bd[:, 0] * cd[:, 1] - cd[:, 0] * bd[:, 1])
            + blift * (cd[:, 0] * ad[:, 1] - ad[:, 0] * cd[:, 1])
            + clift * (ad[:, 0] * bd[:, 1] - bd[:, 0] * ad[:, 1]))
