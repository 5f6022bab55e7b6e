"""In-memory track graph for tests and offline tooling.

Models tracks as an ordered list with parent links, folder flags, and
outbound sends carrying host-encoded destination channels.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field

from ambiance.core.host.models import SendRef, TrackRef, encode_mono_destination

logger = logging.getLogger(__name__)


@dataclass
class _FakeTrack:
    ref: TrackRef
    parent: TrackRef | None
    folder: bool
    channels: int = 2
    sends: list[_FakeSend] = field(default_factory=list)


@dataclass
class _FakeSend:
    destination: TrackRef | None
    raw_destination: int


class FakeTrackGraph:
    """In-memory TrackGraph.

    Example:
        >>> graph = FakeTrackGraph()
        >>> group = graph.add_track("Forest", folder=True)
        >>> quad = graph.add_track("Birds", parent=group, folder=True)
        >>> left = graph.add_track("Birds L", parent=quad)
        >>> graph.add_send(left, quad, channel=0)
        >>> graph.send_destinations(left)
        [1]
    """

    def __init__(self) -> None:
        self._tracks: dict[TrackRef, _FakeTrack] = {}
        self._ids = itertools.count(1)
        self.transactions: list[str] = []
        self.open_transaction: str | None = None
        self.refresh_count = 0

    # Setup helpers

    def add_track(
        self,
        name: str,
        *,
        parent: TrackRef | None = None,
        folder: bool = False,
        channels: int = 2,
    ) -> TrackRef:
        """Append a track at the end of the track list."""
        if parent is not None and parent not in self._tracks:
            raise KeyError(f"Unknown parent track: {parent}")
        ref = TrackRef(track_id=f"track-{next(self._ids)}", name=name)
        self._tracks[ref] = _FakeTrack(ref=ref, parent=parent, folder=folder, channels=channels)
        return ref

    def add_send(
        self,
        source: TrackRef,
        destination: TrackRef | None,
        *,
        channel: int = 0,
    ) -> None:
        """Add a mono send from source onto a zero-based destination channel."""
        self._tracks[source].sends.append(
            _FakeSend(destination=destination, raw_destination=encode_mono_destination(channel))
        )

    def send_destinations(self, source: TrackRef) -> list[int]:
        """1-based destination channels of a track's sends, in send order."""
        return [send.destination_channel for send in self.list_outbound_sends(source)]

    # TrackGraph protocol

    def find_track_by_name(self, name: str) -> TrackRef | None:
        for ref in self._tracks:
            if ref.name == name:
                return ref
        return None

    def find_child_container_track(self, parent: TrackRef, name: str) -> TrackRef | None:
        for ref in self._descendants(parent):
            if ref.name == name:
                return ref
        return None

    def is_folder_track(self, track: TrackRef) -> bool:
        return self._tracks[track].folder

    def get_parent_track(self, track: TrackRef) -> TrackRef | None:
        return self._tracks[track].parent

    def get_track_channel_count(self, track: TrackRef) -> int:
        return self._tracks[track].channels

    def set_track_channel_count(self, track: TrackRef, channels: int) -> None:
        if self.open_transaction is None:
            raise RuntimeError("Track graph mutated outside a transaction")
        if channels < 2 or channels % 2:
            raise ValueError(f"Track channel count must be even and >= 2, got {channels}")
        self._tracks[track].channels = channels

    def list_direct_children(self, track: TrackRef) -> list[TrackRef]:
        return [t.ref for t in self._tracks.values() if t.parent == track]

    def list_outbound_sends(self, track: TrackRef) -> list[SendRef]:
        return [
            SendRef(
                source=track,
                index=index,
                destination=send.destination,
                raw_destination=send.raw_destination,
            )
            for index, send in enumerate(self._tracks[track].sends)
        ]

    def set_send_destination_channel(self, send: SendRef, channel: int) -> None:
        if self.open_transaction is None:
            raise RuntimeError("Track graph mutated outside a transaction")
        self._tracks[send.source].sends[send.index].raw_destination = encode_mono_destination(
            channel
        )

    def begin_transaction(self, label: str) -> None:
        if self.open_transaction is not None:
            raise RuntimeError(f"Transaction already open: {self.open_transaction}")
        self.open_transaction = label

    def end_transaction(self) -> None:
        if self.open_transaction is None:
            raise RuntimeError("No transaction open")
        self.transactions.append(self.open_transaction)
        self.open_transaction = None

    def refresh_view(self) -> None:
        self.refresh_count += 1

    def _descendants(self, track: TrackRef) -> list[TrackRef]:
        result: list[TrackRef] = []
        for child in self.list_direct_children(track):
            result.append(child)
            result.extend(self._descendants(child))
        return result


class RecordingRegenerator:
    """Regenerator that only counts how often it was triggered."""

    def __init__(self) -> None:
        self.calls = 0

    def regenerate_all(self) -> None:
        self.calls += 1
        logger.debug(f"Regeneration requested ({self.calls})")
