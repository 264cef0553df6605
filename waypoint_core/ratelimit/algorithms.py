"""Rate Limiting Algorithms - Per-key request windows.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque


class Algorithm(ABC):
    """Abstract rate limiting algorithm."""

    @abstractmethod
    def allow(self) -> bool:
        """Check if request is allowed."""
        pass

    @abstractmethod
    def remaining(self) -> int:
        """Requests left before the limit is reached."""
        pass

    @abstractmethod
    def retry_after(self) -> float:
        """Seconds until the next request would be allowed."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Reset the algorithm state."""
        pass


@dataclass
class SlidingWindow(Algorithm):
    """Sliding Window Algorithm.

    Keeps the timestamps of accepted requests inside the window and
    rejects once ``max_requests`` of them are still in it.
    """

    window_size: float = 60.0  # seconds
    max_requests: int = 60
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _requests: Deque[float] = field(default_factory=deque, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _evict(self, now: float) -> None:
        window_start = now - self.window_size
        while self._requests and self._requests[0] <= window_start:
            self._requests.popleft()

    def allow(self) -> bool:
        """Check if request is allowed and record it."""
        with self._lock:
            now = self.clock()
            self._evict(now)

            if len(self._requests) < self.max_requests:
                self._requests.append(now)
                return True

            return False

    def remaining(self) -> int:
        with self._lock:
            self._evict(self.clock())
            return max(0, self.max_requests - len(self._requests))

    def retry_after(self) -> float:
        with self._lock:
            now = self.clock()
            self._evict(now)
            if len(self._requests) < self.max_requests:
                return 0.0
            return max(0.0, self._requests[0] + self.window_size - now)

    def reset(self) -> None:
        """Reset window."""
        with self._lock:
            self._requests.clear()


@dataclass
class TokenBucket(Algorithm):
    """Token Bucket Algorithm.

    Tokens are added at a fixed rate (refill_rate).
    Each request consumes one token.

    Good for: Allowing bursts while maintaining average rate.
    """

    capacity: int = 10
    refill_rate: float = 1.0  # tokens per second
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    tokens: float = field(default=None)
    last_refill: float = field(default=None)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self):
        if self.tokens is None:
            self.tokens = float(self.capacity)
        if self.last_refill is None:
            self.last_refill = self.clock()

    def _refill(self) -> None:
        """Refill tokens based on elapsed time."""
        now = self.clock()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    def allow(self) -> bool:
        """Check if request is allowed and consume token."""
        with self._lock:
            self._refill()

            if self.tokens >= 1:
                self.tokens -= 1
                return True
            return False

    def remaining(self) -> int:
        with self._lock:
            self._refill()
            return int(self.tokens)

    def retry_after(self) -> float:
        with self._lock:
            self._refill()
            if self.tokens >= 1 or self.refill_rate <= 0:
                return 0.0
            return (1 - self.tokens) / self.refill_rate

    def reset(self) -> None:
        """Reset to full capacity."""
        with self._lock:
            self.tokens = float(self.capacity)
            self.last_refill = self.clock()


__all__ = [
    "Algorithm",
    "SlidingWindow",
    "TokenBucket",
]
