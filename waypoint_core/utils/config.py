"""Configuration utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Config")


@dataclass
class Config:
    """Application configuration."""

    # Routing
    base_path: str = ""

    # Responses
    use_json: bool = True
    debug: bool = False

    # Error log sink
    log_errors: bool = False
    log_path: str = "logs/errors.log"

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Create config from dictionary."""
        # Filter to only valid fields
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in (data or {}).items() if k in valid_fields}
        unknown = set(data or {}) - valid_fields
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**filtered)

    @classmethod
    def from_json(cls: Type[T], path: str) -> T:
        """Load config from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls: Type[T], path: str) -> T:
        """Load config from YAML file."""
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML config")
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def env_values(cls, prefix: str = "WAYPOINT_") -> Dict[str, Any]:
        """Read config values from environment variables."""
        data = {}

        for key, value in os.environ.items():
            if key.startswith(prefix):
                config_key = key[len(prefix):].lower()

                # Type conversion
                if value.lower() in ("true", "false"):
                    data[config_key] = value.lower() == "true"
                elif value.isdigit():
                    data[config_key] = int(value)
                else:
                    try:
                        data[config_key] = float(value)
                    except ValueError:
                        data[config_key] = value

        valid_fields = {f.name for f in fields(cls)}
        return {k: v for k, v in data.items() if k in valid_fields}

    @classmethod
    def from_env(cls: Type[T], prefix: str = "WAYPOINT_") -> T:
        """Load config from environment variables."""
        return cls.from_dict(cls.env_values(prefix))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def merge(self, overrides: Dict[str, Any]) -> "Config":
        """Return a copy with ``overrides`` applied."""
        data = self.to_dict()
        data.update(overrides)
        return type(self).from_dict(data)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "WAYPOINT_",
) -> Config:
    """Load configuration from multiple sources.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (if provided)
    3. Defaults
    """
    config = Config()

    # Load from file if provided
    if path:
        path_obj = Path(path)
        if path_obj.exists():
            if path_obj.suffix == ".json":
                config = Config.from_json(path)
            elif path_obj.suffix in (".yaml", ".yml"):
                config = Config.from_yaml(path)
            else:
                logger.warning(f"Unknown config format: {path}")
        else:
            logger.warning(f"Config file not found: {path}")

    # Override with environment variables
    return config.merge(Config.env_values(env_prefix))


__all__ = [
    "Config",
    "load_config",
]
