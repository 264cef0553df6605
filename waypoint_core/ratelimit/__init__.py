"""Rate Limiting module - Request rate limiting."""

from waypoint_core.ratelimit.limiter import RateLimiter, RateLimitResult
from waypoint_core.ratelimit.algorithms import Algorithm, SlidingWindow, TokenBucket
from waypoint_core.ratelimit.middleware import RateLimiterMiddleware, rate_limit

__all__ = [
    "RateLimiter",
    "RateLimitResult",
    "Algorithm",
    "SlidingWindow",
    "TokenBucket",
    "RateLimiterMiddleware",
    "rate_limit",
]
