"""Public package API for deltri, an incremental Delaunay triangulation engine.

This facade provides a flat import surface on top of the internal
implementation package ``deltri.core``.

Example
-------
    from deltri import Triangulation, OutOfRegionError

    tri = Triangulation(max_points=256)
    tri.setup(0.0, 0.0, 4.0)
    tri.insert(0.5, 0.25)

The deeper modules (``deltri.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound
    __version__ = _pkg_version("deltri")  # populated when installed
except _NotFound:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

_const = _imp('deltri.core.constants')
_errors = _imp('deltri.core.errors')
_pred = _imp('deltri.core.predicates')
_store = _imp('deltri.core.storage')
_tri = _imp('deltri.core.triangulation')
_conf = _imp('deltri.core.conformity')
_cfg = _imp('deltri.core.config')
_log = _imp('deltri.core.logging_utils')

# Facade
Triangulation = _tri.Triangulation
triangulate = _tri.triangulate
bounding_square = _tri.bounding_square
TriangulationConfig = _cfg.TriangulationConfig

# Records
Point = _store.Point
Edge = _store.Edge
Triangle = _store.Triangle

# Errors
DelaunayError = _errors.DelaunayError
InvalidCapacityError = _errors.InvalidCapacityError
OutOfRegionError = _errors.OutOfRegionError
DuplicatePointError = _errors.DuplicatePointError
CapacityExceededError = _errors.CapacityExceededError
RegionStateError = _errors.RegionStateError
InvariantError = _errors.InvariantError

# Predicates
orientation = _pred.orientation
side_of_query = _pred.side_of_query
flippable = _pred.flippable
in_circumcircle = _pred.in_circumcircle

# Checks and logging
check_triangulation = _conf.check_triangulation
configure_logging = _log.configure_logging
get_logger = _log.get_logger

# Tolerances
EPS_ORIENT = _const.EPS_ORIENT
EPS_INCIRCLE = _const.EPS_INCIRCLE

# Namespace submodules for exploratory users
predicates = _pred
storage = _store
triangulation = _tri
conformity = _conf
constants = _const
errors = _errors

__all__ = [
    '__version__',
    'Triangulation', 'triangulate', 'bounding_square', 'TriangulationConfig',
    'Point', 'Edge', 'Triangle',
    'DelaunayError', 'InvalidCapacityError', 'OutOfRegionError', 'DuplicatePointError',
    'CapacityExceededError', 'RegionStateError', 'InvariantError',
    'orientation', 'side_of_query', 'flippable', 'in_circumcircle',
    'check_triangulation', 'configure_logging', 'get_logger',
    'EPS_ORIENT', 'EPS_INCIRCLE',
    'predicates', 'storage', 'triangulation', 'conformity', 'constants', 'errors',
]
