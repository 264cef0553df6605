"""Utils module - Configuration, logging and helpers."""

from waypoint_core.utils.config import Config, load_config
from waypoint_core.utils.helpers import (
    extract_client_ip,
    get_auth_token,
    get_header,
    parse_content_type,
)
from waypoint_core.utils.logging import configure_logging

__all__ = [
    "Config",
    "load_config",
    "configure_logging",
    "extract_client_ip",
    "get_auth_token",
    "get_header",
    "parse_content_type",
]
