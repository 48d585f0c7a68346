"""Configuration object for the incremental triangulation."""
from __future__ import annotations

from dataclasses import dataclass, replace as _dc_replace
from typing import Optional

from .constants import EPS_ORIENT, EPS_INCIRCLE, EPS_DUPLICATE


@dataclass
class TriangulationConfig:
    """Tunable knobs of a :class:`~deltri.core.triangulation.Triangulation`.

    Attributes
    ----------
    eps_orient : float
        Absolute tolerance of the orientation predicate; cross products within
        it count as colinear.
    eps_incircle : float
        Absolute tolerance of the in-circle predicate; determinants within it
        count as "on the circle" and never trigger a flip.
    reject_duplicates : bool
        Refuse to insert a point that coincides with an existing vertex.
    duplicate_tol : float
        Per-axis distance under which two points are the same vertex.
    validate : bool
        Run the full conformity check after every insertion and raise
        ``InvariantError`` on failure. Quadratic overall; for tests and debugging.
    debug : bool
        Log every split and flip at DEBUG level.
    max_walk_steps : int, optional
        Cap on the point-location walk before falling back to a linear scan.
        ``None`` uses the live triangle count.
    """
    eps_orient: float = EPS_ORIENT
    eps_incircle: float = EPS_INCIRCLE
    reject_duplicates: bool = True
    duplicate_tol: float = EPS_DUPLICATE
    validate: bool = False
    debug: bool = False
    max_walk_steps: Optional[int] = None

    def replace(self, **changes) -> 'TriangulationConfig':
        return _dc_replace(self, **changes)


__all__ = ['TriangulationConfig']
