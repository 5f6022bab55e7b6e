"""Shared utilities for Ambiance."""

from ambiance.core.utils.json import read_json, write_json
from ambiance.core.utils.logging import StructuredJSONFormatter, configure_logging

__all__ = [
    "StructuredJSONFormatter",
    "configure_logging",
    "read_json",
    "write_json",
]
