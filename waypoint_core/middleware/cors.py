"""CORS Middleware - Cross-Origin Resource Sharing.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CORSConfig:
    """CORS configuration."""

    origin: str = "*"
    methods: str = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
    headers: str = "Content-Type, Authorization, X-Requested-With, X-API-Key"
    credentials: bool = False
    max_age: int = 86400


class CORSMiddleware:
    """Adds CORS headers to every response.

    Preflight ``OPTIONS`` requests are answered with 200 right away and
    the pipeline stops.
    """

    def __init__(self, config: Optional[CORSConfig] = None):
        self.config = config or CORSConfig()

    def __call__(self, request: Any, response: Any, params: Dict[str, str]) -> bool:
        response.set_header("Access-Control-Allow-Origin", self.config.origin)
        response.set_header("Access-Control-Allow-Methods", self.config.methods)
        response.set_header("Access-Control-Allow-Headers", self.config.headers)

        if self.config.credentials:
            response.set_header("Access-Control-Allow-Credentials", "true")

        response.set_header("Access-Control-Max-Age", str(self.config.max_age))

        if request.get_method() == "OPTIONS":
            logger.debug("Answering CORS preflight")
            response.with_status(200)
            return False

        return True


def cors(**kwargs) -> CORSMiddleware:
    """Create CORS middleware; keyword arguments are CORSConfig fields."""
    return CORSMiddleware(CORSConfig(**kwargs))


__all__ = [
    "CORSMiddleware",
    "CORSConfig",
    "cors",
]
