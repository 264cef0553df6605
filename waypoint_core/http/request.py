"""Request - In-memory request view.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, unquote

from waypoint_core.utils.helpers import get_auth_token, get_header, parse_content_type


@dataclass
class Request:
    """HTTP Request object.

    Represents an already-parsed request. ``deadline`` is an absolute
    ``time.monotonic()`` value after which dispatch stops, or None.
    """

    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    form: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, Any] = field(default_factory=dict)
    body: bytes = b""
    remote_addr: str = ""
    protocol: str = "HTTP/1.1"
    timestamp: float = field(default_factory=time.time)
    deadline: Optional[float] = None

    # Set by middleware
    user: Any = None
    context: Dict[str, Any] = field(default_factory=dict)

    def get_method(self) -> str:
        return self.method.upper()

    def get_headers(self) -> Dict[str, str]:
        return self.headers

    def get_body(self) -> Any:
        """Parsed JSON payload, falling back to form fields."""
        try:
            return self.json()
        except ValueError:
            return self.form

    def get_query_params(self) -> Dict[str, str]:
        return self.query

    def get_post_params(self) -> Dict[str, Any]:
        return self.form

    def get_files(self) -> Dict[str, Any]:
        return self.files

    @property
    def content_type(self) -> str:
        """Get Content-Type header."""
        return self.get_header("Content-Type")

    @property
    def is_json(self) -> bool:
        """Check if request is JSON."""
        media_type, _ = parse_content_type(self.content_type)
        return media_type == "application/json"

    def json(self) -> Any:
        """Parse body as JSON.

        Raises:
            ValueError: If the body is empty or not valid JSON
        """
        if not self.body:
            raise ValueError("Empty request body")
        return json.loads(self.body.decode())

    def text(self) -> str:
        """Get body as text."""
        return self.body.decode()

    def get_header(self, name: str, default: str = "") -> str:
        """Get header value (case-insensitive)."""
        return get_header(self.headers, name, default)

    def get_auth(self, header_name: str = "Authorization") -> Optional[str]:
        """Bearer or Basic credentials, or the raw value of a custom header."""
        return get_auth_token(self.headers, header_name)

    def get_user_agent(self) -> Optional[str]:
        return self.get_header("User-Agent") or None

    def get_content_type(self) -> str:
        """Content-Type, assuming JSON when the header is absent."""
        return self.content_type or "application/json"

    def with_timeout(self, seconds: float) -> "Request":
        """Set the deadline ``seconds`` from now."""
        self.deadline = time.monotonic() + seconds
        return self

    @classmethod
    def from_raw(cls, data: bytes, remote_addr: str = "") -> "Request":
        """Build a request from a received HTTP/1.x message."""
        head, _, body = data.partition(b"\r\n\r\n")
        lines = head.split(b"\r\n")

        # Parse request line
        parts = lines[0].decode().split(" ")
        method = parts[0]
        target = parts[1] if len(parts) > 1 else "/"
        protocol = parts[2] if len(parts) > 2 else "HTTP/1.1"

        path, _, query_string = target.partition("?")
        query = dict(parse_qsl(query_string, keep_blank_values=True))

        headers = {}
        for line in lines[1:]:
            if b":" in line:
                key, value = line.decode().split(":", 1)
                headers[key.strip()] = value.strip()

        request = cls(
            method=method,
            path=unquote(path),
            headers=headers,
            query=query,
            body=body,
            remote_addr=remote_addr,
            protocol=protocol,
        )

        media_type, _ = parse_content_type(request.content_type)
        if media_type == "application/x-www-form-urlencoded":
            request.form = dict(parse_qsl(body.decode(), keep_blank_values=True))

        return request


__all__ = [
    "Request",
]
