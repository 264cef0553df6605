"""Error Reporter - Fault classification and the error-log sink.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Callable, Optional

from waypoint_core.errors import (
    CompilationFault,
    DeadlineExceeded,
    HandlerFault,
    RegistrationClosed,
    RouteNotFound,
)

logger = logging.getLogger(__name__)


class FaultKind(Enum):
    """Fault categories raised out of dispatch."""

    NOT_FOUND = auto()
    COMPILATION = auto()
    HANDLER = auto()
    DEADLINE = auto()
    REGISTRATION = auto()
    UNKNOWN = auto()


def classify(error: BaseException) -> FaultKind:
    """Map an exception to its fault category."""
    if isinstance(error, RouteNotFound):
        return FaultKind.NOT_FOUND
    if isinstance(error, CompilationFault):
        return FaultKind.COMPILATION
    if isinstance(error, HandlerFault):
        return FaultKind.HANDLER
    if isinstance(error, DeadlineExceeded):
        return FaultKind.DEADLINE
    if isinstance(error, RegistrationClosed):
        return FaultKind.REGISTRATION
    return FaultKind.UNKNOWN


def source_location(error: BaseException) -> str:
    """``file:line`` of the innermost frame in the exception's traceback."""
    if isinstance(error, HandlerFault):
        return error.location
    frames = traceback.extract_tb(error.__traceback__)
    if not frames:
        return "unknown"
    frame = frames[-1]
    return f"{frame.filename}:{frame.lineno}"


@dataclass
class ReporterConfig:
    """Error reporter configuration."""

    enabled: bool = False
    log_path: str = "logs/errors.log"
    log_not_found: bool = False
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"


class ErrorReporter:
    """Classifies faults and appends them to an error-log file.

    One line per fault::

        [2026-01-31 12:00:00] ValueError: boom in app/handlers.py:42

    Writing is best-effort. A failure to write is logged as a warning and
    never replaces the fault being reported; callers re-raise the original.
    """

    def __init__(
        self,
        config: Optional[ReporterConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or ReporterConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._reported = 0

    @property
    def reported(self) -> int:
        """Number of lines written to the sink."""
        return self._reported

    def should_log(self, error: BaseException) -> bool:
        if not self.config.enabled:
            return False
        if classify(error) is FaultKind.NOT_FOUND:
            return self.config.log_not_found
        return True

    def format(self, error: BaseException) -> str:
        """Format one sink line for a fault."""
        timestamp = self._clock().strftime(self.config.timestamp_format)
        message = " ".join(str(error).splitlines())
        return f"[{timestamp}] {message} in {source_location(error)}"

    def report(self, error: BaseException) -> bool:
        """Record a fault if logging is enabled.

        Returns:
            True if a line was written to the sink
        """
        if not self.should_log(error):
            return False

        path = Path(self.config.log_path)
        try:
            line = self.format(error)
            logger.error(line)
            with self._lock:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, "a", encoding="utf-8", errors="backslashreplace") as f:
                    f.write(line + "\n")
                self._reported += 1
        except Exception as e:
            logger.warning(f"Could not write error log {path}: {e!r}")
            return False

        return True


__all__ = [
    "ErrorReporter",
    "ReporterConfig",
    "FaultKind",
    "classify",
    "source_location",
]
