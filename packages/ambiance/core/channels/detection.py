"""Channel routing conflict detection.

Builds a physical-channel usage index over all multi-channel containers and
reports every pair of containers that place different labels on the same
physical channel.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ambiance.core.channels.catalog import NO_LAYOUT_ID, ChannelLayoutCatalog, default_catalog
from ambiance.core.channels.models import (
    ChannelConflict,
    ChannelUsage,
    ConflictingChannel,
    ConflictPair,
    ConflictReport,
    ContainerDescriptor,
    ContainerKey,
    ContainerRoutingInfo,
)

logger = logging.getLogger(__name__)


def build_routing_info(
    descriptor: ContainerDescriptor, catalog: ChannelLayoutCatalog
) -> ContainerRoutingInfo | None:
    """Resolve a container's active labels and routing.

    Active routing is the custom override if present and it fits the active
    labels, else the variant or layout default routing.

    Returns:
        Routing info, or None if the container has no multi-channel routing
        or names an unknown layout or variant.
    """
    if descriptor.channel_layout_id == NO_LAYOUT_ID:
        return None

    active = catalog.resolve_active(descriptor.channel_layout_id, descriptor.variant_id)
    if active is None:
        logger.debug(
            f"Skipping {descriptor.key}: unknown layout {descriptor.channel_layout_id} "
            f"or variant {descriptor.variant_id}"
        )
        return None

    routing = active.routing
    if descriptor.custom_routing is not None:
        custom = descriptor.custom_routing
        if len(custom) != len(active.labels) or any(ch < 1 for ch in custom):
            logger.warning(
                f"Ignoring stale custom routing {list(custom)} on {descriptor.key}: "
                f"does not fit {active.layout_name} ({len(active.labels)} channels); "
                f"using layout routing {list(active.routing)}"
            )
        else:
            routing = custom

    return ContainerRoutingInfo(
        key=descriptor.key,
        channel_layout_id=active.layout_id,
        layout_name=active.layout_name,
        variant_id=active.variant_id,
        channel_count=active.channel_count,
        active_labels=active.labels,
        active_routing=routing,
    )


def detect_conflicts(
    containers: Iterable[ContainerDescriptor],
    catalog: ChannelLayoutCatalog | None = None,
) -> ConflictReport | None:
    """Scan containers for label clashes on shared physical channels.

    Containers are scanned in the given order (group order, then container
    order). Each conflict pair is keyed (earlier container, later container).
    Pure: no side effects, and identical input yields an identical report.

    Args:
        containers: Descriptors in stable scan order.
        catalog: Layout catalog (built-in catalog if None).

    Returns:
        ConflictReport, or None if no two containers conflict.
    """
    if catalog is None:
        catalog = default_catalog()

    infos: dict[ContainerKey, ContainerRoutingInfo] = {}
    pairs: dict[tuple[ContainerKey, ContainerKey], ConflictPair] = {}
    channel_usage: dict[int, list[ChannelUsage]] = {}

    for descriptor in containers:
        if descriptor.key in infos:
            logger.warning(f"Skipping duplicate container {descriptor.key}")
            continue

        info = build_routing_info(descriptor, catalog)
        if info is None:
            continue
        infos[info.key] = info

        for channel, label in zip(info.active_routing, info.active_labels, strict=True):
            usages = channel_usage.setdefault(channel, [])

            for usage in usages:
                if usage.container == info.key or usage.label == label:
                    continue

                pair_key = (usage.container, info.key)
                pair = pairs.get(pair_key)
                if pair is None:
                    pair = ConflictPair(container1=usage.container, container2=info.key)
                    pairs[pair_key] = pair
                pair.conflicting_channels.append(
                    ConflictingChannel(channel=channel, label1=usage.label, label2=label)
                )

                info.conflicts.setdefault(channel, []).append(
                    ChannelConflict(
                        label=label,
                        conflicting_label=usage.label,
                        conflicting_container=usage.container,
                    )
                )
                infos[usage.container].conflicts.setdefault(channel, []).append(
                    ChannelConflict(
                        label=usage.label,
                        conflicting_label=label,
                        conflicting_container=info.key,
                    )
                )

            usages.append(ChannelUsage(label=label, container=info.key))

    if not pairs:
        logger.debug(f"No routing conflicts among {len(infos)} multi-channel containers")
        return None

    logger.debug(f"Detected {len(pairs)} conflicting container pair(s)")
    return ConflictReport(containers=infos, conflict_pairs=pairs, channel_usage=channel_usage)
