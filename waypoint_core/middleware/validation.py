"""Validation Middleware - Content type and required field checks.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from waypoint_core.utils.helpers import get_header, parse_content_type

SOURCES = ("body", "query", "params")


def json_only():
    """Reject non-GET requests whose Content-Type is not JSON (415)."""

    def json_only_middleware(request: Any, response: Any, params: Dict[str, str]) -> bool:
        if request.get_method() == "GET":
            return True

        media_type, _ = parse_content_type(get_header(request.get_headers(), "Content-Type"))
        if media_type != "application/json":
            response.with_error("Content-Type must be application/json", 415)
            return False

        return True

    return json_only_middleware


def validate(required_fields: Iterable[str], source: str = "body"):
    """Require fields to be present and non-empty (422 listing the missing ones).

    Args:
        required_fields: Field names to check
        source: Where to look: "body", "query" or "params"
    """
    if source not in SOURCES:
        raise ValueError(f"Unknown validation source {source!r}; expected one of {SOURCES}")
    fields = list(required_fields)

    def validate_middleware(request: Any, response: Any, params: Dict[str, str]) -> bool:
        if source == "body":
            data = request.get_body()
        elif source == "query":
            data = request.get_query_params()
        else:
            data = params

        if not isinstance(data, dict):
            data = {}

        missing: List[str] = [
            name for name in fields if data.get(name) is None or data.get(name) == ""
        ]
        if missing:
            response.with_error(f"Missing required fields: {', '.join(missing)}", 422)
            return False

        return True

    return validate_middleware


__all__ = [
    "json_only",
    "validate",
]
