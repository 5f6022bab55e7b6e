"""No-op collaborators for running the routing core without a host.

NullTrackGraph has no live tracks, so every applied resolution falls back to
regeneration; NullRegenerator only logs the request.
"""

from __future__ import annotations

import logging

from ambiance.core.host.models import SendRef, TrackRef

logger = logging.getLogger(__name__)


class NullTrackGraph:
    """TrackGraph without any tracks."""

    def find_track_by_name(self, name: str) -> TrackRef | None:
        return None

    def find_child_container_track(self, parent: TrackRef, name: str) -> TrackRef | None:
        return None

    def is_folder_track(self, track: TrackRef) -> bool:
        return False

    def get_parent_track(self, track: TrackRef) -> TrackRef | None:
        return None

    def get_track_channel_count(self, track: TrackRef) -> int:
        return 0

    def set_track_channel_count(self, track: TrackRef, channels: int) -> None:
        pass

    def list_direct_children(self, track: TrackRef) -> list[TrackRef]:
        return []

    def list_outbound_sends(self, track: TrackRef) -> list[SendRef]:
        return []

    def set_send_destination_channel(self, send: SendRef, channel: int) -> None:
        pass

    def begin_transaction(self, label: str) -> None:
        logger.debug(f"Begin transaction (no host): {label}")

    def end_transaction(self) -> None:
        logger.debug("End transaction (no host)")

    def refresh_view(self) -> None:
        pass


class NullRegenerator:
    """Regenerator that defers rebuilding to the next host session."""

    def regenerate_all(self) -> None:
        logger.info("Regeneration deferred: no host attached")
