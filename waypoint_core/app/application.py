"""Application - Router, dispatcher and configuration in one object.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from waypoint_core.dispatch.dispatcher import Dispatcher
from waypoint_core.dispatch.reporter import ErrorReporter, ReporterConfig
from waypoint_core.errors import HandlerFault, RouteNotFound
from waypoint_core.http.request import Request
from waypoint_core.http.response import Response
from waypoint_core.routing.router import Handler, MiddlewareFunc, Route, RouteHandle, Router
from waypoint_core.utils.config import Config

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[HandlerFault, Response], Any]


class Application:
    """Embeddable routing application.

    Features:
    - Route registration with groups and middleware
    - Dispatch of in-memory requests to responses
    - 404 rendering for unmatched routes
    - Optional error-log file

    Usage:
        app = Application(Config(base_path="/v1"))
        app.use(cors())
        app.get("/ping", lambda req, res, params: "pong")

        response = app.handle(Request(method="GET", path="/v1/ping"))
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.router = Router(base_path=self.config.base_path)
        self.reporter = ErrorReporter(
            ReporterConfig(
                enabled=self.config.log_errors,
                log_path=self.config.log_path,
            )
        )
        self.dispatcher = Dispatcher(self.router, self.reporter)
        self._handled = 0
        self._catch_faults = False
        self._error_handler: Optional[ErrorHandler] = None

    # Registration

    def add_route(
        self,
        method: str,
        path: str,
        handler: Handler,
        middleware: Optional[Iterable[MiddlewareFunc]] = None,
    ) -> RouteHandle:
        """Add a route."""
        return self.router.add_route(method, path, handler, middleware)

    def get(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        return self.router.get(path, handler, middleware)

    def post(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        return self.router.post(path, handler, middleware)

    def put(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        return self.router.put(path, handler, middleware)

    def patch(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        return self.router.patch(path, handler, middleware)

    def delete(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        return self.router.delete(path, handler, middleware)

    def options(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        return self.router.options(path, handler, middleware)

    def group(
        self,
        prefix: str,
        builder: Callable[[Router], Any],
        middleware: Optional[Iterable[MiddlewareFunc]] = None,
    ) -> "Application":
        """Register routes under a shared prefix and middleware."""
        self.router.group(prefix, builder, middleware)
        return self

    def use(self, middleware: MiddlewareFunc) -> "Application":
        """Add global middleware."""
        self.router.add_middleware(middleware)
        return self

    add_middleware = use

    def error_handler(self, handler: Optional[ErrorHandler] = None) -> "Application":
        """Render handler faults from ``handle`` instead of raising them.

        ``handler(fault, response)`` is called with the HandlerFault. Without
        one, an unsent response gets a 500 ``Exception: <message>`` error.
        """
        self._catch_faults = True
        self._error_handler = handler
        return self

    # Serving

    def dispatch(
        self,
        method: str,
        path: str,
        request: Any = None,
        response: Any = None,
    ) -> Any:
        """Dispatch directly; RouteNotFound and faults propagate."""
        return self.dispatcher.dispatch(method, path, request, response)

    def make_response(self, request: Request) -> Response:
        """Create a response configured for this application and request."""
        return Response(
            use_json=self.config.use_json,
            debug=self.config.debug,
            request_headers=request.get_headers(),
        )

    def handle(self, request: Request, response: Optional[Response] = None) -> Response:
        """Handle one request and return its response.

        Unmatched routes become a 404 error response. Faults from middleware
        or handlers propagate to the caller unless ``error_handler`` was set.
        """
        if response is None:
            response = self.make_response(request)

        self._handled += 1
        try:
            value = self.dispatcher.dispatch(request.get_method(), request.path, request, response)
        except RouteNotFound:
            logger.info(f"No route for {request.get_method()} {request.path}")
            response.with_error("Route not found", 404)
            return response
        except HandlerFault as e:
            if not self._catch_faults:
                raise
            self._render_fault(e, response)
            return response

        if not response.is_sent() and value is not None:
            self._render(response, value)

        return response

    def _render_fault(self, fault: HandlerFault, response: Response) -> None:
        if self._error_handler is not None:
            self._error_handler(fault, response)
        elif not response.is_sent():
            response.with_error(f"Exception: {fault.original}", 500)

    def _render(self, response: Response, value: Any) -> None:
        """Send a handler's return value when it did not send a response itself."""
        if isinstance(value, Response):
            return
        if isinstance(value, (dict, list)):
            response.with_json(value)
        elif isinstance(value, str):
            response.with_html(value)

    def get_routes(self) -> List[Route]:
        """Get all registered routes."""
        return self.router.get_routes()

    def get_stats(self) -> Dict[str, Any]:
        """Get application statistics."""
        return {
            "routes": len(self.router.table),
            "middleware": len(self.router.middleware),
            "serving": self.router.table.frozen,
            "handled": self._handled,
            "errors_logged": self.reporter.reported,
        }


__all__ = [
    "Application",
]
