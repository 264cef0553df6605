"""Response - In-memory response view.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import html as html_lib
import json
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional

from waypoint_core.errors import ResponseAlreadySent
from waypoint_core.utils.helpers import get_header


@dataclass
class Response:
    """HTTP Response object.

    Terminal operations (``with_*``) fill in status, headers and body and
    mark the response sent. The dispatcher polls ``is_sent()`` after every
    middleware step.
    """

    status: int = 200
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    use_json: bool = True
    debug: bool = False
    request_headers: Dict[str, str] = field(default_factory=dict, repr=False)
    _sent: bool = field(default=False, init=False, repr=False)

    # Common status messages
    STATUS_MESSAGES: ClassVar[Dict[int, str]] = {
        200: "OK",
        201: "Created",
        204: "No Content",
        301: "Moved Permanently",
        302: "Found",
        304: "Not Modified",
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        405: "Method Not Allowed",
        408: "Request Timeout",
        415: "Unsupported Media Type",
        422: "Unprocessable Entity",
        429: "Too Many Requests",
        500: "Internal Server Error",
        502: "Bad Gateway",
        503: "Service Unavailable",
        504: "Gateway Timeout",
    }

    @property
    def status_message(self) -> str:
        """Get status message."""
        return self.STATUS_MESSAGES.get(self.status, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if response is successful (2xx)."""
        return 200 <= self.status < 300

    @property
    def is_error(self) -> bool:
        """Check if response is error (4xx or 5xx)."""
        return self.status >= 400

    def is_sent(self) -> bool:
        return self._sent

    def set_header(self, name: str, value: Any) -> "Response":
        """Set header value."""
        self.headers[name] = str(value)
        return self

    def get_header(self, name: str, default: str = "") -> str:
        """Get header value (case-insensitive)."""
        return get_header(self.headers, name, default)

    def _send(self, status: int, body: bytes, content_type: Optional[str] = None) -> "Response":
        if self._sent:
            raise ResponseAlreadySent(f"Response already sent with status {self.status}")
        self.status = status
        self.body = body
        if content_type:
            self.headers["Content-Type"] = content_type
        self._sent = True
        return self

    def with_json(self, data: Any, code: int = 200) -> "Response":
        """Send a JSON body."""
        body = json.dumps(data, indent=4, ensure_ascii=False).encode()
        return self._send(code, body, "application/json")

    def with_error(self, message: str = "An error occurred.", code: int = 400) -> "Response":
        """Send an error as JSON, or as HTML to clients that did not ask for JSON."""
        location = _caller_location() if self.debug else None

        if not self._wants_json():
            page = (
                f"<h1>Error: {html_lib.escape(message)}</h1>"
                f"<p>Status Code: {code}</p>"
            )
            if location:
                page += f"<pre>{html_lib.escape(location)}</pre>"
            return self._send(code, page.encode(), "text/html; charset=utf-8")

        return self.with_json(
            {
                "error": True,
                "code": code,
                "message": message,
                "backtrace": location,
            },
            code,
        )

    def with_html(self, html: str, code: int = 200) -> "Response":
        """Send an HTML body."""
        return self._send(code, html.encode(), "text/html; charset=utf-8")

    def with_download(self, path: str, name: Optional[str] = None) -> "Response":
        """Send a file as an attachment; 404 if it does not exist."""
        file_path = Path(path)
        if not file_path.is_file():
            return self._send(404, b"File not found.", "text/plain")

        data = file_path.read_bytes()
        filename = name or file_path.name
        self.headers.update({
            "Content-Description": "File Transfer",
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Expires": "0",
            "Cache-Control": "must-revalidate",
            "Pragma": "public",
            "Content-Length": str(len(data)),
        })
        return self._send(200, data, "application/octet-stream")

    def with_status(self, code: int = 200, message: Optional[str] = None) -> "Response":
        """Send a bare status, with an optional plain-text message."""
        body = message.encode() if message else b""
        return self._send(code, body, "text/plain" if message else None)

    def _wants_json(self) -> bool:
        if self.use_json:
            return True
        for key, value in self.request_headers.items():
            if key.lower() in ("accept", "content-type") and "application/json" in value:
                return True
        return False

    def to_bytes(self) -> bytes:
        """Convert to raw HTTP response."""
        lines = [f"HTTP/1.1 {self.status} {self.status_message}"]

        # Add Content-Length if not set
        if "Content-Length" not in self.headers:
            self.headers["Content-Length"] = str(len(self.body))

        for key, value in self.headers.items():
            lines.append(f"{key}: {value}")

        lines.append("")
        header_bytes = "\r\n".join(lines).encode()

        return header_bytes + b"\r\n" + self.body


def _caller_location() -> str:
    """Location of the code that called the terminal operation."""
    for frame in reversed(traceback.extract_stack()[:-1]):
        if frame.filename != __file__:
            return f"{frame.filename}:{frame.lineno} in {frame.name}"
    return "unknown"


__all__ = [
    "Response",
]
