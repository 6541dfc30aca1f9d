"""Logging setup for workflow entry points.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
host workflow calls :func:`configure_logging` once before using them.
"""

from __future__ import annotations

import logging

from qbo_monday.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int | Settings = "INFO") -> int:
    """Configure root logging for a workflow run.

    Args:
        level: A level name (case-insensitive), a numeric level, or a
            Settings instance whose ``log_level`` is used.

    Returns:
        The numeric level that was applied.
    """
    if isinstance(level, Settings):
        level = level.log_level
    if isinstance(level, str):
        numeric = logging.getLevelName(level.strip().upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
    else:
        numeric = level

    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("qbo_monday").setLevel(numeric)
    return numeric
