"""Routing module - Path templates, scoping and the route table."""

from waypoint_core.routing.router import Router, Route, RouteHandle, RouteTable
from waypoint_core.routing.matcher import CompiledPath, PathMatcher, compile_path
from waypoint_core.routing.scope import ScopeFrame, ScopeStack

__all__ = [
    "Router",
    "Route",
    "RouteHandle",
    "RouteTable",
    "CompiledPath",
    "PathMatcher",
    "compile_path",
    "ScopeFrame",
    "ScopeStack",
]
