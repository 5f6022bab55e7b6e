"""Configuration management for Ambiance."""

from ambiance.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_channel_catalog,
    load_config,
    load_project,
    save_config,
    save_project,
)
from ambiance.core.config.models import AppConfig, LoggingConfig, RoutingConfig

__all__ = [
    # Loaders
    "detect_format",
    "load_config",
    "save_config",
    "load_app_config",
    "load_channel_catalog",
    "load_project",
    "save_project",
    "configure_logging",
    # App-level config
    "AppConfig",
    "LoggingConfig",
    "RoutingConfig",
]
