"""Configuration management.

Engine settings come from built-in defaults, YAML files and environment
variables, in that order of precedence (later wins).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated, Any

import msgspec
import yaml

from recordquery.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "RECORDQUERY_"


class EngineConfig(msgspec.Struct, frozen=True, kw_only=True, forbid_unknown_fields=True):
    """Tunable engine settings."""

    fuzzy_threshold: Annotated[float, msgspec.Meta(ge=0.0, le=1.0)] = 0.85
    min_word_length: Annotated[int, msgspec.Meta(ge=1)] = 3
    default_page_size: Annotated[int, msgspec.Meta(ge=1)] = 20
    page_size_options: tuple[int, ...] = (20, 50, 100)
    export_delimiter: Annotated[str, msgspec.Meta(min_length=1, max_length=1)] = ","
    date_format: str = "%Y-%m-%d"
    history_size: Annotated[int, msgspec.Meta(ge=1)] = 5
    history_min_length: Annotated[int, msgspec.Meta(ge=0)] = 2

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> EngineConfig:
        """Build and validate a config from plain data.

        Raises:
            ConfigError: If a value has the wrong type or is out of range
        """
        try:
            return msgspec.convert(data or {}, cls, strict=False)
        except msgspec.ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


class Config:
    """Configuration file discovery and merging."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading config file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        return [
            xdg_config_home / "recordquery" / "config.yaml",
            Path(".recordquery.yaml"),
            Path("recordquery.yaml"),
        ]

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def env_overrides() -> dict[str, Any]:
    """Read engine settings from environment variables."""
    overrides: dict[str, Any] = {}
    if threshold := os.environ.get(f"{ENV_PREFIX}FUZZY_THRESHOLD"):
        overrides["fuzzy_threshold"] = threshold
    if min_word := os.environ.get(f"{ENV_PREFIX}MIN_WORD_LENGTH"):
        overrides["min_word_length"] = min_word
    if page_size := os.environ.get(f"{ENV_PREFIX}PAGE_SIZE"):
        overrides["default_page_size"] = page_size
    if delimiter := os.environ.get(f"{ENV_PREFIX}DELIMITER"):
        overrides["export_delimiter"] = "\t" if delimiter in ("tab", "\\t") else delimiter
    return overrides


def load_config(path: Path | None = None) -> EngineConfig:
    """Load engine configuration.

    Args:
        path: Explicit config file; when given, default locations are skipped

    Raises:
        ConfigError: If a file is unreadable or a value is invalid
    """
    data: dict[str, Any] = {}

    if path is not None:
        data = Config.from_file(path)
    else:
        for candidate in Config.get_config_paths():
            if candidate.exists():
                logger.debug(f"Loading config from {candidate}")
                data = Config.merge_configs(data, Config.from_file(candidate))

    data = Config.merge_configs(data, env_overrides())
    return EngineConfig.from_mapping(data)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
