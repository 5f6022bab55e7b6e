"""Multi-channel routing conflict detection and resolution.

Pipeline:
    containers -> detect_conflicts -> ConflictReport
    ConflictReport -> find_intelligent_routing -> list[Resolution]
    list[Resolution] -> apply_resolutions -> ApplyOutcome

Example:
    >>> from ambiance.core.channels import ContainerDescriptor, detect_conflicts
    >>> report = detect_conflicts([
    ...     ContainerDescriptor.create("Forest", "Birds", channel_layout_id=1),
    ...     ContainerDescriptor.create("Forest", "Wind", channel_layout_id=2),
    ... ])
    >>> sorted(c.channel for p in report.conflict_pairs.values() for c in p.conflicting_channels)
    [3, 4]
"""

from ambiance.core.channels.applicator import (
    TRANSACTION_LABEL,
    ResolutionApplicator,
    apply_resolutions,
)
from ambiance.core.channels.catalog import (
    BUILTIN_CATALOG_PATH,
    DEFAULT_VARIANT_ID,
    NO_LAYOUT_ID,
    ActiveConfiguration,
    CatalogDefinition,
    ChannelLayout,
    ChannelLayoutCatalog,
    LayoutNotFoundError,
    LayoutVariant,
    default_catalog,
)
from ambiance.core.channels.detection import build_routing_info, detect_conflicts
from ambiance.core.channels.models import (
    MASTER_CHANNEL_THRESHOLD,
    ApplyOutcome,
    ChannelChange,
    ChannelConflict,
    ChannelUsage,
    ConflictingChannel,
    ConflictPair,
    ConflictReport,
    ContainerDescriptor,
    ContainerKey,
    ContainerRoutingInfo,
    Resolution,
)
from ambiance.core.channels.resolver import (
    SubordinateFallback,
    find_intelligent_routing,
    match_channels_by_label,
    shift_to_free_channels,
)

__all__ = [
    # Catalog
    "ActiveConfiguration",
    "BUILTIN_CATALOG_PATH",
    "CatalogDefinition",
    "ChannelLayout",
    "ChannelLayoutCatalog",
    "DEFAULT_VARIANT_ID",
    "LayoutNotFoundError",
    "LayoutVariant",
    "NO_LAYOUT_ID",
    "default_catalog",
    # Records
    "ApplyOutcome",
    "ChannelChange",
    "ChannelConflict",
    "ChannelUsage",
    "ConflictPair",
    "ConflictReport",
    "ConflictingChannel",
    "ContainerDescriptor",
    "ContainerKey",
    "ContainerRoutingInfo",
    "MASTER_CHANNEL_THRESHOLD",
    "Resolution",
    # Detection
    "build_routing_info",
    "detect_conflicts",
    # Resolution
    "SubordinateFallback",
    "find_intelligent_routing",
    "match_channels_by_label",
    "shift_to_free_channels",
    # Application
    "ResolutionApplicator",
    "TRANSACTION_LABEL",
    "apply_resolutions",
]
