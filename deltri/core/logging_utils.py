"""Logging utilities for deltri.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All deltri code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_deltri_root() -> logging.Logger:
    """Ensure the 'deltri' logger has a single stream handler and is isolated
    from the process root logger. Returns the 'deltri' logger.
    """
    root = logging.getLogger('deltri')
    has_non_null = any(not isinstance(h, logging.NullHandler) for h in root.handlers)
    if not has_non_null:
        # Drop the NullHandler added by the package __init__ so records are not swallowed
        for h in list(root.handlers):
            root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO') -> None:
    """Configure the 'deltri' logger family level.

    This does NOT modify the process root logger.
    """
    root = _ensure_deltri_root()
    root.setLevel(_to_level(level))


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a configured logger under the 'deltri' namespace.

    If a level is provided, it sets the logger's level; otherwise the logger
    is set to NOTSET so it inherits from the 'deltri' parent configured via
    configure_logging().
    """
    _ensure_deltri_root()
    log = logging.getLogger(name)
    log.setLevel(_to_level(level) if level is not None else logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
