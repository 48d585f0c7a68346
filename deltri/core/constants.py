"""Central numerical tolerances and fixed sizes.

This module centralizes the tiny thresholds used by the predicates so they
can be tuned consistently and referenced without scattering literals.
"""
from __future__ import annotations

import numpy as np

# Predicate tolerances (single-precision machine epsilon, absolute)
EPS_ORIENT: float = float(np.finfo(np.float32).eps)    # orientation: |cross| <= eps is colinear
EPS_INCIRCLE: float = float(np.finfo(np.float32).eps)  # in-circle ties resolve to "not inside"

# Coordinates closer than this (per axis) to an existing vertex are duplicates
EPS_DUPLICATE: float = 1e-12

# Guards divisions by zero-length sides in angle computations
EPS_TINY: float = 1e-20

# Arena layout
MIN_POINTS: int = 4          # the enclosing square needs four corners
EDGES_PER_POINT: int = 3
TRIANGLES_PER_POINT: int = 2
FRAME_POINTS: int = 4        # ids 0..3 are the region corners after setup

# Encoding of "no triangle on this side" inside the edge arena
NO_TRIANGLE: int = -1

__all__ = [
    'EPS_ORIENT',
    'EPS_INCIRCLE',
    'EPS_DUPLICATE',
    'EPS_TINY',
    'MIN_POINTS',
    'EDGES_PER_POINT',
    'TRIANGLES_PER_POINT',
    'FRAME_POINTS',
    'NO_TRIANGLE',
]
