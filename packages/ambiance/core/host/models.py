"""Handles exchanged with the host's live track graph."""

from __future__ import annotations

from dataclasses import dataclass

# Host flag marking a send as mono onto a single destination channel
MONO_SEND_FLAG = 1024


def encode_mono_destination(channel: int) -> int:
    """Host destination value for a mono send onto a zero-based channel."""
    if channel < 0:
        raise ValueError(f"Destination channel must be >= 0, got {channel}")
    return MONO_SEND_FLAG + channel


def decode_destination_channel(raw: int) -> int:
    """1-based first destination channel of a raw host send value.

    Mono sends carry the flag plus a zero-based channel; stereo pairs store
    the zero-based offset of their first channel shifted by one pair slot.
    Negative values mean the send is not routed to a specific channel.
    """
    if raw >= MONO_SEND_FLAG:
        return raw - MONO_SEND_FLAG + 1
    if raw >= 0:
        return raw + 2
    return 1


@dataclass(frozen=True)
class TrackRef:
    """Opaque host track handle."""

    track_id: str
    name: str


@dataclass(frozen=True)
class SendRef:
    """Outbound send of a track.

    Attributes:
        source: Track owning the send.
        index: Send index on the source track.
        destination: Receiving track, or None if the host lost it.
        raw_destination: Host-encoded destination channel value.
    """

    source: TrackRef
    index: int
    destination: TrackRef | None
    raw_destination: int = 0

    @property
    def destination_channel(self) -> int:
        return decode_destination_channel(self.raw_destination)

    @property
    def is_mono(self) -> bool:
        return self.raw_destination >= MONO_SEND_FLAG
