"""Logging Middleware - Request logging.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from waypoint_core.utils.helpers import extract_client_ip, get_header

logger = logging.getLogger(__name__)


@dataclass
class LoggingConfig:
    """Logging middleware configuration."""

    logger_name: str = __name__
    level: int = logging.INFO
    log_headers: bool = False
    log_query: bool = True
    skip_paths: List[str] = field(default_factory=list)


class RequestLoggerMiddleware:
    """Logs each request that reaches it and continues the pipeline.

    A short request id is stored in ``request.context["request_id"]``
    when the request has a ``context`` mapping.
    """

    def __init__(self, config: Optional[LoggingConfig] = None):
        self.config = config or LoggingConfig()
        self._logger = logging.getLogger(self.config.logger_name)

    def __call__(self, request: Any, response: Any, params: Dict[str, str]) -> bool:
        path = getattr(request, "path", "")
        if path in self.config.skip_paths:
            return True

        request_id = str(uuid.uuid4())[:8]
        context = getattr(request, "context", None)
        if isinstance(context, dict):
            context["request_id"] = request_id

        log_parts = [
            f"[{request_id}] --> {request.get_method()} {path}",
            f"ip={extract_client_ip(request) or '-'}",
        ]

        user_agent = get_header(request.get_headers(), "User-Agent")
        if user_agent:
            log_parts.append(f"ua={user_agent!r}")

        if self.config.log_query:
            query = request.get_query_params()
            if query:
                log_parts.append(f"query={query}")

        if self.config.log_headers:
            log_parts.append(f"headers={request.get_headers()}")

        self._logger.log(self.config.level, " ".join(log_parts))
        return True


def request_logger(**kwargs) -> RequestLoggerMiddleware:
    """Create request logging middleware; keyword arguments are LoggingConfig fields."""
    return RequestLoggerMiddleware(LoggingConfig(**kwargs))


__all__ = [
    "RequestLoggerMiddleware",
    "LoggingConfig",
    "request_logger",
]
