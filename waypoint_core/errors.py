"""Errors - Exception hierarchy shared by routing and dispatch.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Optional


class WaypointError(Exception):
    """Base for all waypoint errors."""


class CompilationFault(WaypointError):
    """Raised at registration time when a path template is malformed."""

    def __init__(self, template: str, reason: str):
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid path template {template!r}: {reason}")


class RouteNotFound(WaypointError):
    """No registered route matches the requested method and path."""

    status = 404

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f"Route not found: {method} {path}")


class HandlerFault(WaypointError):
    """Unexpected exception raised by a middleware or a handler.

    The original exception is available as ``original`` and as
    ``__cause__``; ``location`` is the ``file:line`` of the innermost
    frame that raised it.
    """

    def __init__(self, original: BaseException, location: str = "unknown"):
        self.original = original
        self.location = location
        super().__init__(f"{type(original).__name__}: {original}")


class RegistrationClosed(WaypointError):
    """Raised when routes or middleware are registered after serving began."""


class DeadlineExceeded(WaypointError):
    """The request deadline passed before dispatch finished."""

    def __init__(self, stage: str, overrun: Optional[float] = None):
        self.stage = stage
        self.overrun = overrun
        message = f"Deadline exceeded before {stage}"
        if overrun is not None:
            message += f" ({overrun * 1000:.1f}ms late)"
        super().__init__(message)


class ResponseAlreadySent(WaypointError):
    """A terminal response operation was called twice."""


__all__ = [
    "WaypointError",
    "CompilationFault",
    "RouteNotFound",
    "HandlerFault",
    "RegistrationClosed",
    "DeadlineExceeded",
    "ResponseAlreadySent",
]
