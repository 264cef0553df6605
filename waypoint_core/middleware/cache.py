"""Cache Middleware - Replays cached JSON payloads for GET requests.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


def cache_key(request: Any) -> str:
    """Key a request by path and sorted query string."""
    path = getattr(request, "path", "")
    query = urlencode(sorted(request.get_query_params().items()))
    return hashlib.md5(f"{path}?{query}".encode()).hexdigest()


@dataclass
class CacheEntry:
    """A cached payload."""

    content: Any
    stored_at: float


class ResponseCache:
    """In-memory TTL store for response payloads."""

    def __init__(self, ttl: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Get a fresh entry's content; expired entries are dropped."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self.ttl:
                del self._entries[key]
                return None
            return entry.content

    def set(self, key: str, content: Any) -> None:
        """Store content, dropping every expired entry first."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now - e.stored_at >= self.ttl]
            for k in expired:
                del self._entries[k]
            self._entries[key] = CacheEntry(content=content, stored_at=now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CacheMiddleware:
    """Answers GET requests from the cache and halts on a hit.

    Handlers fill the cache with ``store_response``::

        page_cache = cache(ttl=60)

        def list_items(request, response, params):
            items = load_items()
            page_cache.store_response(request, items)
            return response.with_json(items)
    """

    def __init__(self, store: ResponseCache):
        self.store = store

    def __call__(self, request: Any, response: Any, params: Dict[str, str]) -> bool:
        if request.get_method() != "GET":
            return True

        content = self.store.get(cache_key(request))
        if content is None:
            return True

        logger.debug(f"Cache hit for {getattr(request, 'path', '')}")
        response.set_header("X-Cache", "HIT")
        response.with_json(content)
        return False

    def store_response(self, request: Any, content: Any) -> None:
        """Cache a payload for this request's path and query."""
        self.store.set(cache_key(request), content)


def cache(ttl: float = 3600.0, store: Optional[ResponseCache] = None) -> CacheMiddleware:
    """Create cache middleware backed by ``store`` or a new in-memory cache."""
    return CacheMiddleware(store or ResponseCache(ttl=ttl))


__all__ = [
    "CacheMiddleware",
    "ResponseCache",
    "cache",
    "cache_key",
]
