"""Rate Limiter Middleware - Middleware for rate limiting.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional

from waypoint_core.ratelimit.limiter import RateLimiter
from waypoint_core.utils.helpers import extract_client_ip

KeyFunc = Callable[[Any], str]


class RateLimiterMiddleware:
    """Middleware that enforces rate limits (429 when exceeded)."""

    def __init__(
        self,
        limiter: RateLimiter,
        key_func: Optional[KeyFunc] = None,
        include_headers: bool = True,
        trusted_proxies: Optional[Iterable[str]] = None,
    ):
        self.limiter = limiter
        self._trusted = list(trusted_proxies or [])
        self._key_func = key_func or self._client_key
        self._include_headers = include_headers

    def _client_key(self, request: Any) -> str:
        """Connection address; forwarding headers only from trusted proxies."""
        return extract_client_ip(request, self._trusted) or "unknown"

    def __call__(self, request: Any, response: Any, params: Dict[str, str]) -> bool:
        result = self.limiter.check(self._key_func(request))

        if self._include_headers:
            for name, value in self.limiter.get_headers(result).items():
                response.set_header(name, value)

        if not result.allowed:
            response.with_error("Rate limit exceeded. Try again later.", 429)
            return False

        return True


def rate_limit(
    max_requests: int = 60,
    window_seconds: float = 60.0,
    key_func: Optional[KeyFunc] = None,
    trusted_proxies: Optional[Iterable[str]] = None,
) -> RateLimiterMiddleware:
    """Create sliding-window rate limiting middleware keyed by client address."""
    return RateLimiterMiddleware(
        RateLimiter(max_requests=max_requests, window_seconds=window_seconds),
        key_func=key_func,
        trusted_proxies=trusted_proxies,
    )


__all__ = [
    "RateLimiterMiddleware",
    "rate_limit",
]
