"""Dispatch module - Request dispatch and fault reporting."""

from waypoint_core.dispatch.dispatcher import Dispatcher, DispatchResult
from waypoint_core.dispatch.reporter import ErrorReporter, FaultKind, ReporterConfig, classify

__all__ = [
    "Dispatcher",
    "DispatchResult",
    "ErrorReporter",
    "FaultKind",
    "ReporterConfig",
    "classify",
]
