"""Helper utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple


def get_header(headers: Dict[str, str], name: str, default: str = "") -> str:
    """Look up a header case-insensitively."""
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return default


def extract_client_ip(
    request: Any,
    trusted_proxies: Optional[List[str]] = None,
) -> str:
    """Extract real client IP from a request view.

    Forwarding headers are only honoured when the connection comes from
    one of ``trusted_proxies``; with no list given they are always used.
    """
    remote_addr = getattr(request, "remote_addr", "") or ""
    if trusted_proxies is not None and remote_addr not in trusted_proxies:
        return remote_addr

    headers = request.get_headers()

    # Check X-Forwarded-For
    xff = get_header(headers, "X-Forwarded-For")
    if xff:
        # Get first IP (client)
        return xff.split(",")[0].strip()

    # Check X-Real-IP
    real_ip = get_header(headers, "X-Real-IP")
    if real_ip:
        return real_ip

    # Fall back to connection IP
    return remote_addr


def get_auth_token(
    headers: Dict[str, str],
    header_name: str = "Authorization",
    schemes: Iterable[str] = ("Bearer", "Basic"),
) -> Optional[str]:
    """Credentials from an auth header.

    For ``Authorization`` the scheme must be one of ``schemes`` and only the
    credentials after it are returned. Any other header is returned as is.
    """
    value = get_header(headers, header_name).strip()
    if not value:
        return None
    if header_name.lower() != "authorization":
        return value

    scheme, _, token = value.partition(" ")
    if scheme.lower() not in {s.lower() for s in schemes}:
        return None
    return token.strip() or None


def parse_content_type(content_type: str) -> Tuple[str, Dict[str, str]]:
    """Parse Content-Type header."""
    parts = content_type.split(";")
    media_type = parts[0].strip().lower()

    params = {}
    for part in parts[1:]:
        if "=" in part:
            key, value = part.split("=", 1)
            params[key.strip().lower()] = value.strip().strip('"')

    return media_type, params


__all__ = [
    "get_header",
    "extract_client_ip",
    "get_auth_token",
    "parse_content_type",
]
