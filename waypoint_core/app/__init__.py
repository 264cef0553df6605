"""App module - Application facade."""

from waypoint_core.app.application import Application

__all__ = [
    "Application",
]
