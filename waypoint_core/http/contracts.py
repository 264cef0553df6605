"""Contracts - Request and response views consumed by the dispatcher.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

The routing core only talks to these protocols. Any object with the
right methods works; no base class is required.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class RequestView(Protocol):
    """Read-only view of an already-parsed request."""

    def get_method(self) -> str: ...

    def get_headers(self) -> Dict[str, str]: ...

    def get_body(self) -> Any: ...

    def get_query_params(self) -> Dict[str, Any]: ...

    def get_post_params(self) -> Dict[str, Any]: ...

    def get_files(self) -> Dict[str, Any]: ...


@runtime_checkable
class ResponseView(Protocol):
    """Mutable response shared by middleware and the handler."""

    def set_header(self, name: str, value: str) -> Any: ...

    def with_json(self, data: Any, code: int = 200) -> Any: ...

    def with_error(self, message: str, code: int = 400) -> Any: ...

    def with_html(self, html: str, code: int = 200) -> Any: ...

    def with_download(self, path: str, name: Optional[str] = None) -> Any: ...

    def with_status(self, code: int, message: Optional[str] = None) -> Any: ...

    def is_sent(self) -> bool: ...


def remaining_time(request: Any) -> Optional[float]:
    """Seconds left before the request deadline.

    Returns None when the request carries no ``deadline`` attribute
    (an absolute ``time.monotonic()`` value).
    """
    deadline = getattr(request, "deadline", None)
    if deadline is None:
        return None
    return deadline - time.monotonic()


__all__ = [
    "RequestView",
    "ResponseView",
    "remaining_time",
]
