"""Auth Middleware - Bearer token and API key checks.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from waypoint_core.utils.helpers import get_auth_token, get_header

logger = logging.getLogger(__name__)

TokenValidator = Callable[[str, Any, Any, Dict[str, str]], Any]
KeyValidator = Callable[[str, Any], bool]


class BearerAuthMiddleware:
    """Requires an ``Authorization: Bearer <token>`` header.

    Without a validator any token is accepted. A validator returning
    ``False`` rejects the request; one returning a mapping or an object
    has that value stored on ``request.user``.
    """

    def __init__(self, validator: Optional[TokenValidator] = None):
        self._validator = validator

    def __call__(self, request: Any, response: Any, params: Dict[str, str]) -> bool:
        token = get_auth_token(request.get_headers(), schemes=("Bearer",))

        if token is None:
            response.with_error("Unauthorized: Token not provided", 401)
            return False

        if self._validator is None:
            return True

        result = self._validator(token, request, response, params)
        if result is False:
            logger.info("Rejected bearer token")
            response.with_error("Unauthorized: Invalid token", 401)
            return False

        if result is not None and not isinstance(result, bool):
            request.user = result

        return True


class APIKeyMiddleware:
    """Requires an API key header, optionally checked by a validator."""

    def __init__(
        self,
        header_name: str = "X-API-Key",
        validator: Optional[KeyValidator] = None,
    ):
        self._header_name = header_name
        self._validator = validator

    def __call__(self, request: Any, response: Any, params: Dict[str, str]) -> bool:
        key = get_header(request.get_headers(), self._header_name)

        if not key:
            response.with_error("Unauthorized: API Key not provided", 401)
            return False

        if self._validator is not None and self._validator(key, request) is False:
            logger.info(f"Rejected API key from {self._header_name}")
            response.with_error("Unauthorized: Invalid API Key", 401)
            return False

        return True


def bearer_auth(validator: Optional[TokenValidator] = None) -> BearerAuthMiddleware:
    """Create bearer-token middleware."""
    return BearerAuthMiddleware(validator)


def api_key(
    header_name: str = "X-API-Key",
    validator: Optional[KeyValidator] = None,
) -> APIKeyMiddleware:
    """Create API key middleware."""
    return APIKeyMiddleware(header_name, validator)


__all__ = [
    "BearerAuthMiddleware",
    "APIKeyMiddleware",
    "bearer_auth",
    "api_key",
]
