"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ambiance.core.channels.catalog import ChannelLayoutCatalog, default_catalog
from ambiance.core.config.models import AppConfig
from ambiance.core.project.models import ProjectConfig
from ambiance.core.utils.json import read_json, write_json
from ambiance.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

# Default app config path (can be overridden)
_DEFAULT_APP_CONFIG_PATH = Path("config.json")
_app_config_cache: AppConfig | None = None


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("project.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Format is auto-detected from file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            content = read_json(path)
        except Exception as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Expected a mapping at the top of {path}, got {type(content).__name__}")
    return content


def save_config(data: dict[str, Any], path: str | Path) -> None:
    """Write a configuration dictionary as JSON or YAML (by extension).

    Raises:
        ValueError: If format is not supported
    """
    path = Path(path)
    fmt = detect_format(path)

    if fmt == "json":
        write_json(path, data)
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    Args:
        path: Path to app config file (.json, .yaml, or .yml).
              Defaults to config.json

    Returns:
        Validated AppConfig instance with defaults for missing values

    Raises:
        ValidationError: If config is invalid
    """
    global _app_config_cache

    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH

    if _app_config_cache is not None and path == _DEFAULT_APP_CONFIG_PATH:
        return _app_config_cache

    if Path(path).exists():
        config = AppConfig.model_validate(load_config(path))
    else:
        logger.debug(f"No app config at {path}; using defaults")
        config = AppConfig()

    if path == _DEFAULT_APP_CONFIG_PATH:
        _app_config_cache = config

    return config


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance (loads default if None)
    """
    if config is None:
        config = load_app_config()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        structured=config.logging.structured,
    )


def load_channel_catalog(path: str | Path | None = None) -> ChannelLayoutCatalog:
    """Load and validate a channel layout catalog.

    Args:
        path: Catalog file (.json, .yaml, or .yml), or None for the
              built-in catalog

    Returns:
        Validated catalog

    Raises:
        FileNotFoundError: If the catalog file does not exist
        ValidationError: If a layout is malformed
        ValueError: If a layout id is registered twice

    Example:
        >>> catalog = load_channel_catalog("layouts.yaml")
        >>> catalog.get_layout(2).name
        '5.0'
    """
    if path is None:
        return default_catalog()

    catalog = ChannelLayoutCatalog.from_dict(load_config(path))
    logger.debug(f"Loaded {len(catalog)} channel layouts from {path}")
    return catalog


def load_project(path: str | Path) -> ProjectConfig:
    """Load and validate an ambiance project file.

    Raises:
        FileNotFoundError: If the project file does not exist
        ValidationError: If the project is invalid
    """
    return ProjectConfig.model_validate(load_config(path))


def save_project(project: ProjectConfig, path: str | Path) -> None:
    """Write a project back to JSON or YAML."""
    save_config(project.model_dump(mode="json"), path)
