"""HTTP module - Request/response contracts and in-memory views."""

from waypoint_core.http.contracts import RequestView, ResponseView, remaining_time
from waypoint_core.http.request import Request
from waypoint_core.http.response import Response

__all__ = [
    "RequestView",
    "ResponseView",
    "remaining_time",
    "Request",
    "Response",
]
