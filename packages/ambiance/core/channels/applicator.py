"""Commit accepted resolutions to containers and live tracks.

Every resolution first persists its routing override on the container, then
widens the container track to the new highest channel and rewires its live
child tracks. Containers whose tracks cannot be found are flagged for
regeneration, and one regeneration pass is triggered for the whole batch.
All of it happens inside a single host transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ambiance.core.channels.models import ApplyOutcome, ContainerKey, Resolution
from ambiance.core.host.errors import ContainerNotFoundError

if TYPE_CHECKING:
    from ambiance.core.host.models import TrackRef
    from ambiance.core.host.protocols import ContainerStore, Regenerator, TrackGraph

logger = logging.getLogger(__name__)

TRANSACTION_LABEL = "Apply Channel Routing Resolution"


class ResolutionApplicator:
    """Applies resolutions through the container store and live track graph."""

    def __init__(
        self,
        store: ContainerStore,
        tracks: TrackGraph,
        regenerator: Regenerator,
    ) -> None:
        self.store = store
        self.tracks = tracks
        self.regenerator = regenerator

    def apply(self, resolutions: Sequence[Resolution]) -> ApplyOutcome:
        """Apply resolutions as one undoable host operation.

        Args:
            resolutions: Accepted resolutions.

        Returns:
            ApplyOutcome describing which containers were rewired, which
            were flagged for regeneration, and which were not found.

        Raises:
            TypeError: If resolutions is None.
        """
        if resolutions is None:
            raise TypeError("resolutions must be a sequence, got None")

        outcome = ApplyOutcome()
        self.tracks.begin_transaction(TRANSACTION_LABEL)
        try:
            for resolution in resolutions:
                self._apply_one(resolution, outcome)

            if outcome.any_failed:
                logger.info(
                    f"Regenerating tracks for {len(outcome.needs_regeneration)} container(s)"
                )
                self.regenerator.regenerate_all()
                outcome.regenerated = True
        finally:
            self.tracks.end_transaction()
            self.tracks.refresh_view()

        logger.info(
            f"Applied {outcome.resolved_count} of {len(resolutions)} routing resolution(s); "
            f"{len(outcome.needs_regeneration)} need regeneration"
        )
        return outcome

    def _apply_one(self, resolution: Resolution, outcome: ApplyOutcome) -> None:
        key = resolution.container
        try:
            self.store.set_custom_routing(key, resolution.new_routing)
        except ContainerNotFoundError:
            logger.warning(f"Container {key} no longer exists; skipping its resolution")
            outcome.missing.append(key)
            return

        if self.rewire_live_tracks(key, resolution.new_routing):
            outcome.applied.append(key)
            return

        logger.warning(f"No live tracks to rewire for {key}; flagging for regeneration")
        self.store.mark_needs_regeneration(key)
        outcome.needs_regeneration.append(key)
        outcome.any_failed = True

    def rewire_live_tracks(self, key: ContainerKey, new_routing: Sequence[int]) -> bool:
        """Point each child track's send at its new container channel.

        Returns:
            False if the group or container track is missing, or the
            container track has no child channel tracks.
        """
        group_track = self.tracks.find_track_by_name(key.group_name)
        if group_track is None:
            return False

        container_track = self.tracks.find_child_container_track(group_track, key.container_name)
        if container_track is None:
            return False

        if not self.tracks.is_folder_track(container_track):
            return False

        if new_routing:
            self.widen_track_channels(container_track, max(new_routing))

        children = self.tracks.list_direct_children(container_track)
        for channel_index, child in enumerate(children[: len(new_routing)]):
            for send in self.tracks.list_outbound_sends(child):
                if send.destination is None:
                    logger.debug(f"Ignoring send {send.index} of {child.name}: no destination")
                    continue
                if send.destination == container_track:
                    self.tracks.set_send_destination_channel(send, new_routing[channel_index] - 1)
                    break

        return True

    def widen_track_channels(self, track: TrackRef, highest_channel: int) -> None:
        """Make a track and its folder parents carry at least highest_channel.

        Counts are rounded up to even. Tracks that are already wide enough
        are left alone, and the walk stops at the first such parent.
        """
        required = required_track_channels(highest_channel)

        if self.tracks.get_track_channel_count(track) < required:
            logger.debug(f"Widening {track.name} to {required} channels")
            self.tracks.set_track_channel_count(track, required)

        parent = self.tracks.get_parent_track(track)
        while parent is not None and self.tracks.get_track_channel_count(parent) < required:
            logger.debug(f"Widening parent {parent.name} to {required} channels")
            self.tracks.set_track_channel_count(parent, required)
            parent = self.tracks.get_parent_track(parent)


def required_track_channels(highest_channel: int) -> int:
    """Even track channel count able to carry a 1-based channel."""
    return highest_channel + highest_channel % 2


def apply_resolutions(
    resolutions: Sequence[Resolution],
    *,
    store: ContainerStore,
    tracks: TrackGraph,
    regenerator: Regenerator,
) -> ApplyOutcome:
    """Apply resolutions in one host transaction.

    Convenience wrapper around ResolutionApplicator.
    """
    return ResolutionApplicator(store, tracks, regenerator).apply(resolutions)
