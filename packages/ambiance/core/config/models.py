"""Configuration models for Ambiance."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON lines instead of text")


class RoutingConfig(BaseModel):
    """Channel routing conflict handling."""

    model_config = ConfigDict(extra="forbid")

    catalog_path: str | None = Field(
        default=None,
        description="Channel layout catalog file (.json/.yaml); built-in catalog if unset",
    )
    subordinate_fallback: Literal["skip", "shift"] = Field(
        default="skip",
        description=(
            "Handling of stereo/quad containers that only clash with each other: "
            "'skip' (leave for manual resolution) or 'shift' (first container wins, "
            "later ones move to free channels)"
        ),
    )


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")
    logging: LoggingConfig = LoggingConfig()
    routing: RoutingConfig = RoutingConfig()
