"""ContainerStore backed by a ProjectConfig."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from ambiance.core.channels.models import ContainerDescriptor, ContainerKey
from ambiance.core.host.errors import ContainerNotFoundError
from ambiance.core.project.models import ContainerConfig, ProjectConfig

logger = logging.getLogger(__name__)


class ProjectContainerStore:
    """Exposes a project's containers to the routing core.

    Mutations write straight into the wrapped ProjectConfig.

    Example:
        >>> store = ProjectContainerStore(project)
        >>> report = detect_conflicts(store.iter_containers())
    """

    def __init__(self, project: ProjectConfig) -> None:
        self.project = project

    def iter_containers(self) -> Iterator[ContainerDescriptor]:
        for group in self.project.groups:
            for container in group.containers:
                yield ContainerDescriptor.create(
                    group.name,
                    container.name,
                    channel_layout_id=container.channel_mode,
                    variant_id=container.channel_variant,
                    custom_routing=container.custom_routing,
                )

    def get_container(self, key: ContainerKey) -> ContainerConfig:
        """Lookup a container by key.

        Raises:
            ContainerNotFoundError: If no such group/container exists.
        """
        for group in self.project.groups:
            if group.name != key.group_name:
                continue
            for container in group.containers:
                if container.name == key.container_name:
                    return container
        raise ContainerNotFoundError(f"Unknown container: {key}")

    def set_custom_routing(self, key: ContainerKey, routing: Sequence[int]) -> None:
        container = self.get_container(key)
        container.custom_routing = list(routing)
        logger.debug(f"Stored custom routing for {key}: {list(routing)}")

    def clear_custom_routing(self, key: ContainerKey) -> None:
        """Drop the override so the layout routing applies again."""
        self.get_container(key).custom_routing = None

    def mark_needs_regeneration(self, key: ContainerKey) -> None:
        self.get_container(key).needs_regeneration = True
