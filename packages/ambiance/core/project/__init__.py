"""Project model and its container store."""

from ambiance.core.project.models import ContainerConfig, GroupConfig, ProjectConfig
from ambiance.core.project.store import ProjectContainerStore

__all__ = [
    "ContainerConfig",
    "GroupConfig",
    "ProjectConfig",
    "ProjectContainerStore",
]
