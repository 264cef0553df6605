"""Router - Route registration and the route table.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from waypoint_core.errors import RegistrationClosed
from waypoint_core.routing.matcher import CompiledPath, PathMatcher
from waypoint_core.routing.scope import ScopeStack

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Any, Dict[str, str]], Any]
MiddlewareFunc = Callable[[Any, Any, Dict[str, str]], Any]

@dataclass
class Route:
    """Route definition.

    ``middleware`` is the group chain snapshotted at registration time
    followed by route-specific middleware.
    """

    method: str
    path: str
    compiled: CompiledPath = field(repr=False)
    handler: Handler = field(repr=False)
    middleware: List[MiddlewareFunc] = field(default_factory=list, repr=False)

    @property
    def param_names(self) -> Tuple[str, ...]:
        return self.compiled.param_names

    def matches(self, method: str, path: str) -> Optional[Dict[str, str]]:
        """Check if route matches method and path.

        Returns:
            Dict of path parameters if match, None otherwise
        """
        if method.upper() != self.method:
            return None
        return self.compiled.match(path)


class RouteTable:
    """Ordered list of routes.

    Registration order is the only precedence rule. Once frozen the table
    is a tuple and may be read from many threads without locking.
    """

    def __init__(self):
        self._routes: List[Route] = []
        self._frozen: Optional[Tuple[Route, ...]] = None
        self._lock = threading.RLock()

    @property
    def frozen(self) -> bool:
        return self._frozen is not None

    def append(self, route: Route) -> Route:
        with self._lock:
            self.ensure_open()
            self._routes.append(route)
        return route

    def freeze(self) -> Tuple[Route, ...]:
        """Close registration and return the immutable route tuple."""
        with self._lock:
            if self._frozen is None:
                self._frozen = tuple(self._routes)
                logger.debug(f"Route table frozen with {len(self._frozen)} routes")
            return self._frozen

    def attach(self, route: Route, middleware: Iterable[MiddlewareFunc]) -> None:
        """Append middleware to a registered route's chain."""
        with self._lock:
            self.ensure_open()
            route.middleware.extend(middleware)

    def ensure_open(self) -> None:
        if self._frozen is not None:
            raise RegistrationClosed("Route table is frozen; registration is closed")

    def match(self, method: str, path: str) -> Optional[Tuple[Route, Dict[str, str]]]:
        """Find the first route matching method and path."""
        for route in self.freeze():
            params = route.matches(method, path)
            if params is not None:
                return route, params
        return None

    def __iter__(self):
        return iter(self._frozen if self._frozen is not None else list(self._routes))

    def __len__(self) -> int:
        return len(self._routes)


class RouteHandle:
    """Handle returned by route registration.

    Attaches middleware to the single route it was returned for.

    Usage:
        router.get("/admin", admin_page).use(require_admin)
    """

    def __init__(self, route: Route, table: RouteTable):
        self._route = route
        self._table = table

    @property
    def route(self) -> Route:
        return self._route

    def use(self, *middleware: MiddlewareFunc) -> "RouteHandle":
        """Append route-scoped middleware."""
        self._table.attach(self._route, middleware)
        return self

    add_middleware = use


class Router:
    """Request Router.

    Features:
    - Path parameters (/users/:id)
    - Parameter patterns (/files/:name(\\d+))
    - Nested groups with shared prefix and middleware
    - Global and route-scoped middleware

    Usage:
        router = Router()
        router.use(cors())
        router.get("/users/:id", get_user)

        def api(r):
            r.post("/items", create_item).use(json_only())

        router.group("/api", api, [bearer_auth()])
    """

    def __init__(self, base_path: str = "", table: Optional[RouteTable] = None):
        self.table = table or RouteTable()
        self.scope = ScopeStack(base_path)
        self.middleware: List[MiddlewareFunc] = []
        self._matcher = PathMatcher()

    @property
    def base_path(self) -> str:
        return self.scope.current.prefix

    def add_route(
        self,
        method: str,
        path: str,
        handler: Handler,
        middleware: Optional[Iterable[MiddlewareFunc]] = None,
    ) -> RouteHandle:
        """Add a route.

        Args:
            method: HTTP method
            path: Path template, relative to the current group
            handler: Callable taking (request, response, params)
            middleware: Route-specific middleware

        Raises:
            CompilationFault: If the path template is malformed
            RegistrationClosed: If the table is frozen
        """
        self.table.ensure_open()
        resolved = self.scope.resolve(path)
        frame = self.scope.current

        route = Route(
            method=method.upper(),
            path=resolved,
            compiled=self._matcher.compile(resolved),
            handler=handler,
            middleware=list(frame.middleware) + list(middleware or ()),
        )
        self.table.append(route)

        logger.debug(f"Registered {route.method} {route.path}")
        return RouteHandle(route, self.table)

    def group(
        self,
        prefix: str,
        builder: Callable[["Router"], Any],
        middleware: Optional[Iterable[MiddlewareFunc]] = None,
    ) -> "Router":
        """Register routes under a shared prefix and middleware.

        The builder is called synchronously with this router; the enclosing
        prefix and middleware are restored when it returns or raises.
        """
        self.table.ensure_open()
        with self.scope.scope(prefix, middleware):
            builder(self)
        return self

    def add_middleware(self, middleware: MiddlewareFunc) -> "Router":
        """Add global middleware, run before every route's own chain."""
        self.table.ensure_open()
        self.middleware.append(middleware)
        return self

    use = add_middleware

    def get_routes(self) -> List[Route]:
        """Get all routes in registration order."""
        return list(self.table)

    def get(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        """Add GET route."""
        return self.add_route("GET", path, handler, middleware)

    def post(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        """Add POST route."""
        return self.add_route("POST", path, handler, middleware)

    def put(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        """Add PUT route."""
        return self.add_route("PUT", path, handler, middleware)

    def patch(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        """Add PATCH route."""
        return self.add_route("PATCH", path, handler, middleware)

    def delete(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        """Add DELETE route."""
        return self.add_route("DELETE", path, handler, middleware)

    def options(self, path: str, handler: Handler, middleware=None) -> RouteHandle:
        """Add OPTIONS route."""
        return self.add_route("OPTIONS", path, handler, middleware)


__all__ = [
    "Handler",
    "MiddlewareFunc",
    "Route",
    "RouteHandle",
    "RouteTable",
    "Router",
]
