"""
Config system - Typed response configuration with layered loading.

The default charset and content type are injected into each Response
through ResponseConfig instead of being read from global state.
"""

from typing import Any, Dict, Optional, Type, get_origin, get_args
from dataclasses import dataclass, fields, is_dataclass, MISSING
from pathlib import Path
import json
import logging
import os
import types

from dotenv import dotenv_values


logger = logging.getLogger("outbound.config")


@dataclass
class ResponseConfig:
    """Defaults applied to responses at finalization time."""

    default_charset: str = "utf-8"
    default_content_type: str = "text/html"
    validate_headers: bool = True
    cache_namespace: Optional[str] = None


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources with precedence:
    overrides > environment variables > .env file > JSON config files > defaults
    """

    def __init__(self, env_prefix: str = "OUTBOUND_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "OUTBOUND_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources.

        Merge order (later overrides earlier):
        1. JSON config files
        2. .env file (keys carrying env_prefix)
        3. Environment variables (keys carrying env_prefix)
        4. Manual overrides

        Args:
            paths: List of JSON config file paths (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON files matching pattern."""
        from glob import glob

        for path_str in sorted(glob(pattern)):
            path = Path(path_str)
            if path.suffix == ".json":
                self._load_json_file(path)
            else:
                logger.warning(f"Ignoring unsupported config file: {path}")

    def _load_json_file(self, path: Path):
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
            self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load config from .env file."""
        env_path = Path(path)
        if not env_path.exists():
            logger.debug(f"No .env file at {env_path}")
            return

        for key, value in dotenv_values(env_path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert OUTBOUND_RESPONSE__DEFAULT_CHARSET to nested dict."""
        key = key[len(self.env_prefix):]

        # Double underscore separates nesting levels
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes", "1"):
            return True
        if value.lower() in ("false", "no", "0"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        parts = path.split(".")
        current = self.config_data

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def response_config(self) -> ResponseConfig:
        """
        Build a validated ResponseConfig.

        Values under the ``response`` section override root-level keys.
        """
        root_data = {k: v for k, v in self.config_data.items() if not isinstance(v, dict)}
        merged = {**root_data, **self.get("response", {})}
        return self._instantiate_dataclass(ResponseConfig, merged)

    def _instantiate_dataclass(self, config_class: Type, data: dict):
        """Instantiate dataclass config with validation."""
        if not is_dataclass(config_class):
            raise ConfigError(f"{config_class!r} is not a dataclass")

        kwargs = {}

        for field_info in fields(config_class):
            field_name = field_info.name

            if field_name in data:
                value = data[field_name]

                if not self._check_type(value, field_info.type):
                    raise ConfigError(
                        f"Config field '{field_name}' expected {field_info.type}, "
                        f"got {type(value).__name__}"
                    )

                kwargs[field_name] = value
            elif field_info.default is not MISSING:
                kwargs[field_name] = field_info.default
            elif field_info.default_factory is not MISSING:
                kwargs[field_name] = field_info.default_factory()
            else:
                raise ConfigError(
                    f"Required config field '{field_name}' not provided"
                )

        return config_class(**kwargs)

    def _check_type(self, value: Any, expected_type: Any) -> bool:
        """Basic type checking."""
        origin = get_origin(expected_type)
        if origin is types.UnionType or str(origin) == 'typing.Union':
            if value is None:
                return True
            return any(
                self._check_type(value, arg)
                for arg in get_args(expected_type)
                if arg is not type(None)
            )

        if origin:
            return isinstance(value, origin)

        if expected_type is int and isinstance(value, bool):
            return False

        try:
            return isinstance(value, expected_type)
        except TypeError:
            return True

    def to_dict(self) -> dict:
        """Export all config as dictionary."""
        return self.config_data.copy()


def load_response_config(**kwargs: Any) -> ResponseConfig:
    """Shortcut for ``ConfigLoader.load(**kwargs).response_config()``."""
    return ConfigLoader.load(**kwargs).response_config()
