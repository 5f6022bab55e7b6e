"""Routing records produced and consumed by conflict detection and resolution.

All records here are transient values owned by the call that produced them.
Persistent routing overrides live on the container entities behind a
ContainerStore.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Containers with at least this many active channels act as routing reference
MASTER_CHANNEL_THRESHOLD = 5


@dataclass(frozen=True, order=True)
class ContainerKey:
    """Composite (group, container) identity with structural equality."""

    group_name: str
    container_name: str

    def __str__(self) -> str:
        return f"{self.group_name} / {self.container_name}"


@dataclass(frozen=True)
class ContainerDescriptor:
    """One container as seen by the detector.

    Attributes:
        key: Group and container names.
        channel_layout_id: Catalog mode id; 0 means no multi-channel routing.
        variant_id: Selected layout variant, if any.
        custom_routing: Persistent override superseding the layout routing.
    """

    key: ContainerKey
    channel_layout_id: int
    variant_id: int | None = None
    custom_routing: tuple[int, ...] | None = None

    @classmethod
    def create(
        cls,
        group_name: str,
        container_name: str,
        channel_layout_id: int,
        variant_id: int | None = None,
        custom_routing: list[int] | tuple[int, ...] | None = None,
    ) -> ContainerDescriptor:
        return cls(
            key=ContainerKey(group_name, container_name),
            channel_layout_id=channel_layout_id,
            variant_id=variant_id,
            custom_routing=tuple(custom_routing) if custom_routing is not None else None,
        )


@dataclass(frozen=True)
class ChannelConflict:
    """One clash recorded on a container for a physical channel.

    Attributes:
        label: This container's label on the channel.
        conflicting_label: The other container's label on the channel.
        conflicting_container: The other container.
    """

    label: str
    conflicting_label: str
    conflicting_container: ContainerKey


@dataclass
class ContainerRoutingInfo:
    """Per-detection routing snapshot of one multi-channel container."""

    key: ContainerKey
    channel_layout_id: int
    layout_name: str
    variant_id: int | None
    channel_count: int
    active_labels: tuple[str, ...]
    active_routing: tuple[int, ...]
    conflicts: dict[int, list[ChannelConflict]] = field(default_factory=dict)

    @property
    def group_name(self) -> str:
        return self.key.group_name

    @property
    def container_name(self) -> str:
        return self.key.container_name

    @property
    def is_master(self) -> bool:
        return self.channel_count >= MASTER_CHANNEL_THRESHOLD

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def conflicting_containers(self) -> list[ContainerKey]:
        """Distinct counterparts in the order their conflicts were recorded."""
        seen: dict[ContainerKey, None] = {}
        for entries in self.conflicts.values():
            for entry in entries:
                seen.setdefault(entry.conflicting_container, None)
        return list(seen)


@dataclass(frozen=True)
class ChannelUsage:
    """A label placed on a physical channel by a container."""

    label: str
    container: ContainerKey


@dataclass(frozen=True)
class ConflictingChannel:
    channel: int
    label1: str
    label2: str


@dataclass
class ConflictPair:
    """Two containers that put different labels on shared channels.

    container1 is the container scanned first.
    """

    container1: ContainerKey
    container2: ContainerKey
    conflicting_channels: list[ConflictingChannel] = field(default_factory=list)

    @property
    def key(self) -> tuple[ContainerKey, ContainerKey]:
        return (self.container1, self.container2)


@dataclass
class ConflictReport:
    """Result of a detection pass that found at least one conflict."""

    containers: dict[ContainerKey, ContainerRoutingInfo]
    conflict_pairs: dict[tuple[ContainerKey, ContainerKey], ConflictPair]
    channel_usage: dict[int, list[ChannelUsage]]

    @property
    def pair_count(self) -> int:
        return len(self.conflict_pairs)

    @property
    def conflicting_channel_count(self) -> int:
        return sum(len(pair.conflicting_channels) for pair in self.conflict_pairs.values())

    def conflicts_between(self, a: ContainerKey, b: ContainerKey) -> ConflictPair | None:
        """Pair for two containers regardless of scan order."""
        return self.conflict_pairs.get((a, b)) or self.conflict_pairs.get((b, a))

    def masters(self) -> list[ContainerRoutingInfo]:
        return [info for info in self.containers.values() if info.is_master]

    def subordinates(self) -> list[ContainerRoutingInfo]:
        return [info for info in self.containers.values() if not info.is_master]


@dataclass(frozen=True)
class ChannelChange:
    """Per-channel line of a Resolution (recorded even when unchanged).

    matched names the master container and label the channel was aligned
    with, e.g. "Amb_5_0 LS", or is None when a fallback rule applied.
    """

    label: str
    old_channel: int
    new_channel: int
    reason: str
    matched: str | None = None

    @property
    def changed(self) -> bool:
        return self.old_channel != self.new_channel


@dataclass(frozen=True)
class Resolution:
    """Proposed re-routing for one subordinate container."""

    container: ContainerKey
    affected_by: ContainerKey
    original_routing: tuple[int, ...]
    new_routing: tuple[int, ...]
    changes: tuple[ChannelChange, ...]

    @property
    def changed_channels(self) -> list[ChannelChange]:
        return [c for c in self.changes if c.changed]


@dataclass
class ApplyOutcome:
    """What applying a batch of resolutions did.

    Attributes:
        any_failed: True if at least one container lacked live tracks.
        applied: Containers whose override was stored and live sends rewired.
        needs_regeneration: Containers whose override was stored but whose
            live tracks could not be updated.
        missing: Resolutions whose container is not in the store.
        regenerated: True if the regeneration pass was triggered.
    """

    any_failed: bool = False
    applied: list[ContainerKey] = field(default_factory=list)
    needs_regeneration: list[ContainerKey] = field(default_factory=list)
    missing: list[ContainerKey] = field(default_factory=list)
    regenerated: bool = False

    @property
    def resolved_count(self) -> int:
        return len(self.applied) + len(self.needs_regeneration)
