"""Shared pytest fixtures for ambiance tests."""

from __future__ import annotations

import logging

import pytest

from ambiance.core.channels import ChannelLayoutCatalog, ContainerDescriptor
from ambiance.core.host import FakeTrackGraph, RecordingRegenerator, TrackRef
from ambiance.core.project import ProjectConfig, ProjectContainerStore

# Built-in layout ids
QUAD = 1
SURROUND_5_0 = 2
SURROUND_7_0 = 3
STEREO = 4

# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def catalog() -> ChannelLayoutCatalog:
    """Fresh copy of the built-in layout catalog."""
    return ChannelLayoutCatalog.builtin()


# ============================================================================
# Container Fixtures
# ============================================================================


@pytest.fixture
def quad_and_surround() -> list[ContainerDescriptor]:
    """Quad (L R LS RS) and ITU 5.0 (L R C LS RS) in the same group."""
    return [
        ContainerDescriptor.create("Forest", "Amb_Quad", channel_layout_id=QUAD),
        ContainerDescriptor.create("Forest", "Amb_5_0", channel_layout_id=SURROUND_5_0),
    ]


@pytest.fixture
def project() -> ProjectConfig:
    """Project with one quad/5.0 clash and one unrelated stereo container."""
    return ProjectConfig.model_validate(
        {
            "groups": [
                {
                    "name": "Forest",
                    "containers": [
                        {"name": "Amb_Quad", "channel_mode": QUAD},
                        {"name": "Amb_5_0", "channel_mode": SURROUND_5_0, "channel_variant": 0},
                    ],
                },
                {
                    "name": "Village",
                    "containers": [
                        {"name": "Voices", "channel_mode": 0},
                    ],
                },
            ]
        }
    )


@pytest.fixture
def store(project: ProjectConfig) -> ProjectContainerStore:
    return ProjectContainerStore(project)


# ============================================================================
# Host Fixtures
# ============================================================================


def _add_folder_container(
    graph: FakeTrackGraph,
    group: TrackRef,
    name: str,
    channels: int,
) -> tuple[TrackRef, list[TrackRef]]:
    container = graph.add_track(
        name, parent=group, folder=True, channels=channels + channels % 2
    )
    children = []
    for index in range(channels):
        child = graph.add_track(f"{name} ch{index + 1}", parent=container)
        graph.add_send(child, container, channel=index)
        children.append(child)
    return container, children


@pytest.fixture
def add_folder_container():
    """Factory adding a container folder with one mono child per channel.

    Each child sends to the container on its own channel (child n -> channel n).
    """
    return _add_folder_container


@pytest.fixture
def track_graph() -> FakeTrackGraph:
    return FakeTrackGraph()


@pytest.fixture
def regenerator() -> RecordingRegenerator:
    return RecordingRegenerator()



# ============================================================================
# Logging
# ============================================================================


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo configure_logging calls made by a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
