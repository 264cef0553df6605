"""Rate Limiter - Per-key rate limiting.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from waypoint_core.ratelimit.algorithms import Algorithm, SlidingWindow

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    """Result of rate limit check."""

    allowed: bool
    remaining: int = 0
    limit: int = 0
    retry_after: float = 0.0


class RateLimiter:
    """Rate Limiter.

    Keeps one algorithm instance per key (client address, user id, ...).

    Usage:
        limiter = RateLimiter(max_requests=60, window_seconds=60)

        if not limiter.allow("10.0.0.1"):
            # Return 429 Too Many Requests
            pass
    """

    def __init__(
        self,
        max_requests: int = 60,
        window_seconds: float = 60.0,
        factory: Optional[Callable[[], Algorithm]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._factory = factory or (
            lambda: SlidingWindow(
                window_size=window_seconds,
                max_requests=max_requests,
                clock=clock,
            )
        )
        self._clock = clock
        self._buckets: Dict[str, Algorithm] = {}
        self._last_seen: Dict[str, float] = {}
        self._last_sweep = clock()
        self._lock = threading.RLock()

    def allow(self, key: str) -> bool:
        """Check if request is allowed."""
        return self.check(key).allowed

    def check(self, key: str) -> RateLimitResult:
        """Check rate limit and get detailed result."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._buckets[key] = self._factory()
            self._last_seen[key] = now

        allowed = bucket.allow()
        if not allowed:
            logger.info(f"Rate limit exceeded for {key}")

        return RateLimitResult(
            allowed=allowed,
            remaining=bucket.remaining(),
            limit=self.max_requests,
            retry_after=0.0 if allowed else bucket.retry_after(),
        )

    def reset(self, key: str) -> None:
        """Reset rate limit for key."""
        with self._lock:
            self._buckets.pop(key, None)
            self._last_seen.pop(key, None)

    def _sweep(self, now: float) -> None:
        """Drop keys idle for a full window, at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for key, seen in list(self._last_seen.items()):
            if now - seen >= self.window_seconds:
                del self._last_seen[key]
                del self._buckets[key]

    def __len__(self) -> int:
        return len(self._buckets)

    def get_headers(self, result: RateLimitResult) -> Dict[str, str]:
        """Get rate limit response headers."""
        headers = {
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
        }

        if not result.allowed:
            headers["Retry-After"] = str(max(1, int(result.retry_after + 0.999)))

        return headers


__all__ = [
    "RateLimiter",
    "RateLimitResult",
]
