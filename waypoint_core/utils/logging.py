"""Logging setup for the waypoint package logger.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Union[int, str] = "INFO",
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Attach a formatted handler to the ``waypoint_core`` logger.

    Calling it again replaces the handler installed by the previous call.
    """
    package_logger = logging.getLogger("waypoint_core")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")
    package_logger.setLevel(level)

    for existing in list(package_logger.handlers):
        if getattr(existing, "_waypoint_handler", False):
            package_logger.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler._waypoint_handler = True
    package_logger.addHandler(handler)
    return package_logger


__all__ = [
    "configure_logging",
    "LOG_FORMAT",
]
