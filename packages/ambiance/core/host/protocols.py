"""Protocols for the collaborators the routing core talks to.

The routing core never touches host or application state directly; it works
through these narrow interfaces so real hosts, fakes, and offline stand-ins
are interchangeable.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol

from ambiance.core.host.models import SendRef, TrackRef

if TYPE_CHECKING:
    from ambiance.core.channels.models import ContainerDescriptor, ContainerKey


class ContainerStore(Protocol):
    """Owner of container entities and their persistent routing overrides."""

    def iter_containers(self) -> Iterable[ContainerDescriptor]:
        """Yield containers in group order, then container order."""
        ...

    def set_custom_routing(self, key: ContainerKey, routing: Sequence[int]) -> None:
        """Persist a routing override that supersedes the layout routing.

        Raises:
            ContainerNotFoundError: If the container does not exist.
        """
        ...

    def mark_needs_regeneration(self, key: ContainerKey) -> None:
        """Flag a container so the next regeneration rebuilds its tracks.

        Raises:
            ContainerNotFoundError: If the container does not exist.
        """
        ...


class TrackGraph(Protocol):
    """Thin wrapper over the host's live track API.

    Mutations are expected inside begin_transaction/end_transaction so the
    host records them as one named, undoable operation.
    """

    def find_track_by_name(self, name: str) -> TrackRef | None:
        """Find a group track by name."""
        ...

    def find_child_container_track(self, parent: TrackRef, name: str) -> TrackRef | None:
        """Find a container track beneath a group track."""
        ...

    def is_folder_track(self, track: TrackRef) -> bool:
        """True if the track owns child tracks."""
        ...

    def get_parent_track(self, track: TrackRef) -> TrackRef | None:
        """Folder track containing this track, or None at top level."""
        ...

    def get_track_channel_count(self, track: TrackRef) -> int:
        """Number of audio channels the track carries."""
        ...

    def set_track_channel_count(self, track: TrackRef, channels: int) -> None:
        """Resize a track's channel count (host requires an even count)."""
        ...

    def list_direct_children(self, track: TrackRef) -> list[TrackRef]:
        """Direct children in track order (grandchildren excluded)."""
        ...

    def list_outbound_sends(self, track: TrackRef) -> list[SendRef]:
        """Sends from this track with their destinations."""
        ...

    def set_send_destination_channel(self, send: SendRef, channel: int) -> None:
        """Route a send mono onto a zero-based destination channel."""
        ...

    def begin_transaction(self, label: str) -> None:
        """Open an undoable host transaction."""
        ...

    def end_transaction(self) -> None:
        """Close the transaction opened by begin_transaction."""
        ...

    def refresh_view(self) -> None:
        """Ask the host UI to redraw tracks."""
        ...


class Regenerator(Protocol):
    """Rebuilds tracks for containers flagged as needing regeneration.

    Safe to call repeatedly.
    """

    def regenerate_all(self) -> None: ...
