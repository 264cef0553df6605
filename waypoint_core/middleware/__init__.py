"""Middleware module - Pipeline and bundled middleware."""

from waypoint_core.middleware.base import (
    Middleware,
    MiddlewarePipeline,
    PipelineResult,
    HaltReason,
)
from waypoint_core.middleware.auth import APIKeyMiddleware, BearerAuthMiddleware, api_key, bearer_auth
from waypoint_core.middleware.cache import CacheMiddleware, ResponseCache, cache
from waypoint_core.middleware.cors import CORSConfig, CORSMiddleware, cors
from waypoint_core.middleware.logging import LoggingConfig, RequestLoggerMiddleware, request_logger
from waypoint_core.middleware.validation import json_only, validate

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "PipelineResult",
    "HaltReason",
    "APIKeyMiddleware",
    "BearerAuthMiddleware",
    "api_key",
    "bearer_auth",
    "CacheMiddleware",
    "ResponseCache",
    "cache",
    "CORSConfig",
    "CORSMiddleware",
    "cors",
    "LoggingConfig",
    "RequestLoggerMiddleware",
    "request_logger",
    "json_only",
    "validate",
]
