"""Dispatcher - Matches requests and drives the middleware pipeline.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from waypoint_core.dispatch.reporter import ErrorReporter, source_location
from waypoint_core.errors import (
    CompilationFault,
    DeadlineExceeded,
    HandlerFault,
    RouteNotFound,
    WaypointError,
)
from waypoint_core.middleware.base import (
    MiddlewarePipeline,
    PipelineResult,
    check_deadline,
    middleware_name,
)
from waypoint_core.routing.router import Route, Router

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Everything that happened during one dispatch."""

    route: Route
    params: Dict[str, str] = field(default_factory=dict)
    pipeline: Optional[PipelineResult] = None
    value: Any = None

    @property
    def handled(self) -> bool:
        """True if the handler ran."""
        return self.pipeline is not None and self.pipeline.completed


class _NullView:
    """Stand-in view for dispatches made without request/response objects."""

    def is_sent(self) -> bool:
        return False


class Dispatcher:
    """Request dispatcher.

    Dispatch flow:
    1. Linear scan of the route table in registration order
    2. First route with the same method and a full path match wins
    3. Captures are bound to parameter names in declaration order
    4. Global middleware, then the route's chain, until one halts
    5. Handler runs only if the pipeline completed

    The first dispatch freezes the router's table; registration after that
    raises RegistrationClosed.

    Usage:
        dispatcher = Dispatcher(router)
        result = dispatcher.dispatch("GET", "/users/42", request, response)
    """

    def __init__(self, router: Router, reporter: Optional[ErrorReporter] = None):
        self.router = router
        self.reporter = reporter or ErrorReporter()

    def match(self, method: str, path: str):
        """Find the route for method and path.

        Raises:
            RouteNotFound: If no route matches
        """
        found = self.router.table.match(method, path)
        if found is None:
            raise RouteNotFound(method.upper(), path)
        return found

    def dispatch(
        self,
        method: str,
        path: str,
        request: Any = None,
        response: Any = None,
    ) -> Any:
        """Dispatch one request.

        Returns:
            The handler's return value, or None if middleware halted

        Raises:
            RouteNotFound: If no route matches
            HandlerFault: If a middleware or the handler raised
            DeadlineExceeded: If the request deadline passed
        """
        return self.dispatch_detailed(method, path, request, response).value

    def dispatch_detailed(
        self,
        method: str,
        path: str,
        request: Any = None,
        response: Any = None,
    ) -> DispatchResult:
        """Dispatch one request and return the full outcome."""
        if response is None:
            response = _NullView()

        try:
            route, params = self.match(method, path)
            result = DispatchResult(route=route, params=params)

            pipeline = MiddlewarePipeline.compose(self.router.middleware, route.middleware)
            result.pipeline = self._guard(pipeline.run, request, response, params)

            if result.pipeline.halted:
                logger.debug(
                    f"{route.method} {route.path} halted by "
                    f"{middleware_name(result.pipeline.halted_by)} "
                    f"({result.pipeline.reason.name.lower()})"
                )
                return result

            check_deadline(request, "handler")
            result.value = self._guard(route.handler, request, response, params)
            return result

        except WaypointError as e:
            self.reporter.report(e)
            raise

    def _guard(self, func, *args):
        """Call middleware or a handler, wrapping unexpected exceptions."""
        try:
            return func(*args)
        except (RouteNotFound, CompilationFault, DeadlineExceeded, HandlerFault):
            raise
        except Exception as e:
            raise HandlerFault(e, source_location(e)) from e


__all__ = [
    "Dispatcher",
    "DispatchResult",
]
