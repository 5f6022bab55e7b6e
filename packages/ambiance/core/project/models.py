"""Project models: groups of ambiance containers and their routing settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ContainerConfig(BaseModel):
    """A sound source container and its output routing selection."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    name: str = Field(..., min_length=1)
    channel_mode: int = Field(default=0, ge=0, description="Channel layout id (0 = none)")
    channel_variant: int | None = Field(default=None, ge=0, description="Layout variant id")
    custom_routing: list[int] | None = Field(
        default=None, description="Routing override (1-based physical channels)"
    )
    needs_regeneration: bool = False

    @field_validator("custom_routing")
    @classmethod
    def _check_routing(cls, value: list[int] | None) -> list[int] | None:
        if value is not None and any(ch < 1 for ch in value):
            raise ValueError(f"Routing channels are 1-based: {value}")
        return value


class GroupConfig(BaseModel):
    """Named group of containers, generated as one folder track."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    containers: list[ContainerConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_containers(self) -> GroupConfig:
        names = [c.name for c in self.containers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate container names in group '{self.name}': {duplicates}")
        return self


class ProjectConfig(BaseModel):
    """Whole ambiance project as far as routing is concerned."""

    model_config = ConfigDict(extra="ignore")

    groups: list[GroupConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_groups(self) -> ProjectConfig:
        names = [g.name for g in self.groups]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate group names: {duplicates}")
        return self
