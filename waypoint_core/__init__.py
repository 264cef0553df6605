"""Waypoint - Embeddable HTTP routing and middleware dispatch.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Waypoint maps a (method, path) pair to a registered handler after running
the request through a short-circuiting middleware chain:
- Path templates with parameters (/users/:id, /files/:name(\\d+))
- Nested route groups sharing a prefix and middleware
- Global, group and route-scoped middleware
- Structured errors and an optional error-log file

Architecture Overview:
┌─────────────────────────────────────────────────────────────────────────────┐
│                               Waypoint                                       │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                              │
│  Build phase                                                                 │
│  ┌───────────────────────────────────────────────────────────────────────┐  │
│  │  Router ──▶ ScopeStack (prefix, group middleware) ──▶ PathMatcher      │  │
│  │                                  │                                     │  │
│  │                                  ▼                                     │  │
│  │                             RouteTable (registration order)            │  │
│  └───────────────────────────────────────────────────────────────────────┘  │
│                                                                              │
│  Serve phase (table frozen)                                                  │
│  ┌───────────────────────────────────────────────────────────────────────┐  │
│  │  Dispatcher ──▶ first match ──▶ Global MW ──▶ Route MW ──▶ Handler     │  │
│  │       │                                │                               │  │
│  │       │                                └──▶ halt (False / sent)        │  │
│  │       └──▶ ErrorReporter (RouteNotFound, HandlerFault, ...)            │  │
│  └───────────────────────────────────────────────────────────────────────┘  │
│                                                                              │
└─────────────────────────────────────────────────────────────────────────────┘

Usage:
    from waypoint_core import Application, Request, cors, bearer_auth

    app = Application()
    app.use(cors())
    app.get("/users/:id", lambda req, res, params: {"id": params["id"]})

    def admin(r):
        r.get("/stats", get_stats)

    app.group("/admin", admin, [bearer_auth()])

    response = app.handle(Request(method="GET", path="/users/42"))
"""

__version__ = "0.1.0"
__author__ = "BlackRoad OS, Inc."

# Application
from waypoint_core.app.application import Application

# Errors
from waypoint_core.errors import (
    WaypointError,
    CompilationFault,
    RouteNotFound,
    HandlerFault,
    RegistrationClosed,
    DeadlineExceeded,
    ResponseAlreadySent,
)

# HTTP views
from waypoint_core.http.contracts import RequestView, ResponseView
from waypoint_core.http.request import Request
from waypoint_core.http.response import Response

# Routing
from waypoint_core.routing.router import Router, Route, RouteHandle, RouteTable
from waypoint_core.routing.matcher import CompiledPath, PathMatcher, compile_path
from waypoint_core.routing.scope import ScopeFrame, ScopeStack

# Dispatch
from waypoint_core.dispatch.dispatcher import Dispatcher, DispatchResult
from waypoint_core.dispatch.reporter import ErrorReporter, ReporterConfig, FaultKind

# Middleware
from waypoint_core.middleware.base import MiddlewarePipeline, PipelineResult, HaltReason
from waypoint_core.middleware.auth import api_key, bearer_auth
from waypoint_core.middleware.cache import cache
from waypoint_core.middleware.cors import cors
from waypoint_core.middleware.logging import request_logger
from waypoint_core.middleware.validation import json_only, validate

# Rate limiting
from waypoint_core.ratelimit.limiter import RateLimiter
from waypoint_core.ratelimit.middleware import rate_limit

# Utils
from waypoint_core.utils.config import Config, load_config
from waypoint_core.utils.logging import configure_logging

__all__ = [
    # Version
    "__version__",
    # Application
    "Application",
    # Errors
    "WaypointError",
    "CompilationFault",
    "RouteNotFound",
    "HandlerFault",
    "RegistrationClosed",
    "DeadlineExceeded",
    "ResponseAlreadySent",
    # HTTP
    "RequestView",
    "ResponseView",
    "Request",
    "Response",
    # Routing
    "Router",
    "Route",
    "RouteHandle",
    "RouteTable",
    "CompiledPath",
    "PathMatcher",
    "compile_path",
    "ScopeFrame",
    "ScopeStack",
    # Dispatch
    "Dispatcher",
    "DispatchResult",
    "ErrorReporter",
    "ReporterConfig",
    "FaultKind",
    # Middleware
    "MiddlewarePipeline",
    "PipelineResult",
    "HaltReason",
    "api_key",
    "bearer_auth",
    "cache",
    "cors",
    "request_logger",
    "json_only",
    "validate",
    # Rate limiting
    "RateLimiter",
    "rate_limit",
    # Utils
    "Config",
    "load_config",
    "configure_logging",
]
