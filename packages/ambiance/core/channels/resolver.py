"""Conflict classification and re-routing proposals.

Containers in a conflict report are split into masters (5.0/7.0-class
layouts, the routing reference) and subordinates (stereo/quad-class). Each
conflicting subordinate is re-routed greedily, channel by channel, to line
up its labels with the first master it clashes with.
"""

from __future__ import annotations

import logging
from typing import Literal

from ambiance.core.channels.models import (
    ChannelChange,
    ConflictReport,
    ContainerKey,
    ContainerRoutingInfo,
    Resolution,
)

logger = logging.getLogger(__name__)

SubordinateFallback = Literal["skip", "shift"]


def find_intelligent_routing(
    report: ConflictReport,
    *,
    fallback: SubordinateFallback = "skip",
) -> list[Resolution]:
    """Propose a re-routing for every conflicting subordinate container.

    Args:
        report: Output of detect_conflicts.
        fallback: Policy for subordinates that only clash with other
            subordinates. "skip" leaves them unresolved; "shift" keeps the
            first-scanned container and moves later ones to free channels.

    Returns:
        Resolutions in report scan order. Containers whose routing would not
        change get no entry.
    """
    resolutions: list[Resolution] = []
    claimed: set[int] = set()

    for info in report.containers.values():
        if info.is_master or not info.has_conflicts:
            continue

        master = _first_conflicting_master(info, report)
        if master is not None:
            resolution = match_channels_by_label(info, master)
        elif fallback == "shift":
            resolution = shift_to_free_channels(info, report, claimed)
        else:
            logger.debug(f"Leaving {info.key} unresolved: no conflicting master")
            resolution = None

        if resolution is not None:
            logger.debug(
                f"Proposed routing for {resolution.container}: "
                f"{list(resolution.original_routing)} -> {list(resolution.new_routing)}"
            )
            resolutions.append(resolution)

    return resolutions


def _first_conflicting_master(
    info: ContainerRoutingInfo, report: ConflictReport
) -> ContainerRoutingInfo | None:
    for entries in info.conflicts.values():
        for entry in entries:
            other = report.containers.get(entry.conflicting_container)
            if other is not None and other.is_master:
                return other
    return None


def match_channels_by_label(
    sub: ContainerRoutingInfo, master: ContainerRoutingInfo
) -> Resolution | None:
    """Align a subordinate's channels with a master by label.

    Per channel, first match wins:
        1. Label present in the master: use the master's channel.
        2. "L": channel 1.
        3. "R": channel 3 if the master has C on channel 2 (L C R order),
           else channel 2.
        4. Otherwise keep the original channel.

    Returns:
        Resolution, or None if no channel would move.
    """
    master_channels: dict[str, int] = {}
    for label, channel in zip(master.active_labels, master.active_routing, strict=True):
        master_channels[label] = channel

    changes: list[ChannelChange] = []
    for label, old_channel in zip(sub.active_labels, sub.active_routing, strict=True):
        matched: str | None = None

        if label in master_channels:
            new_channel = master_channels[label]
            matched = f"{master.container_name} {label}"
            reason = f"Match {master.layout_name} {label} on channel {new_channel}"
        elif label == "L":
            new_channel = 1
            reason = "Standard L position"
        elif label == "R":
            if master_channels.get("C") == 2:
                new_channel = 3
                reason = "Adapt to L C R layout"
            else:
                new_channel = 2
                reason = "Standard R position"
        else:
            new_channel = old_channel
            reason = "Keep original"

        changes.append(
            ChannelChange(
                label=label,
                old_channel=old_channel,
                new_channel=new_channel,
                reason=reason,
                matched=matched,
            )
        )

    if not any(change.changed for change in changes):
        return None

    return Resolution(
        container=sub.key,
        affected_by=master.key,
        original_routing=sub.active_routing,
        new_routing=tuple(change.new_channel for change in changes),
        changes=tuple(changes),
    )


def shift_to_free_channels(
    sub: ContainerRoutingInfo,
    report: ConflictReport,
    claimed: set[int],
) -> Resolution | None:
    """Move a subordinate off channels held by earlier-scanned containers.

    The earliest container keeps its routing; only channels that clash with
    a container scanned before this one are moved, each to the lowest
    physical channel no other container uses. Channels handed out are
    added to `claimed` so later shifts in the same pass do not collide.

    Returns:
        Resolution against the earliest conflicting container, or None if
        this container was scanned first among its counterparts.
    """
    order = {key: index for index, key in enumerate(report.containers)}
    own_index = order[sub.key]

    earlier: list[ContainerKey] = []
    shifted_channels: set[int] = set()
    for channel, entries in sub.conflicts.items():
        for entry in entries:
            if order.get(entry.conflicting_container, own_index) < own_index:
                shifted_channels.add(channel)
                earlier.append(entry.conflicting_container)

    if not shifted_channels:
        return None

    occupied = set(claimed) | set(sub.active_routing)
    for channel, usages in report.channel_usage.items():
        if any(usage.container != sub.key for usage in usages):
            occupied.add(channel)

    changes: list[ChannelChange] = []
    candidate = 1
    for label, old_channel in zip(sub.active_labels, sub.active_routing, strict=True):
        if old_channel not in shifted_channels:
            changes.append(ChannelChange(label, old_channel, old_channel, "Keep original"))
            continue

        while candidate in occupied:
            candidate += 1
        occupied.add(candidate)
        claimed.add(candidate)
        changes.append(
            ChannelChange(label, old_channel, candidate, f"Shift to free channel {candidate}")
        )

    return Resolution(
        container=sub.key,
        affected_by=min(earlier, key=order.__getitem__),
        original_routing=sub.active_routing,
        new_routing=tuple(change.new_channel for change in changes),
        changes=tuple(changes),
    )
