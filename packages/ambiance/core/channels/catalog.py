"""Channel layout catalog.

Static table of output channel layouts (stereo, quad, 5.0, 7.0, ...) with
per-channel labels, default physical routing, and optional variants that
reorder the same layout (e.g. ITU/Dolby vs. SMPTE).

Layouts are immutable frozen models validated on load; the catalog is
process-wide and read-only once built.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)

BUILTIN_CATALOG_PATH = Path(__file__).with_name("builtin_layouts.yaml")

# Layout id meaning "no multi-channel routing"
NO_LAYOUT_ID = 0
DEFAULT_VARIANT_ID = 0


class LayoutNotFoundError(KeyError):
    """Raised when a channel layout id is not in the catalog."""

    pass


def _check_configuration(labels: tuple[str, ...], routing: tuple[int, ...], count: int) -> None:
    if len(labels) != count:
        raise ValueError(f"Expected {count} labels, got {len(labels)}")
    if len(routing) != count:
        raise ValueError(f"Expected {count} routing entries, got {len(routing)}")
    if any(ch < 1 for ch in routing):
        raise ValueError(f"Routing channels are 1-based: {list(routing)}")
    if len(set(routing)) != len(routing):
        raise ValueError(f"Duplicate physical channel in routing: {list(routing)}")


class LayoutVariant(BaseModel):
    """Alternate label/routing ordering for a layout."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Display name (e.g. 'SMPTE')")
    labels: tuple[str, ...] = Field(..., min_length=1, description="Per-channel labels")
    routing: tuple[int, ...] = Field(..., min_length=1, description="1-based physical channels")

    @model_validator(mode="after")
    def _validate_shape(self) -> LayoutVariant:
        _check_configuration(self.labels, self.routing, len(self.labels))
        return self


class ChannelLayout(BaseModel):
    """Named channel configuration identified by an integer mode id.

    Example:
        >>> quad = ChannelLayout(
        ...     layout_id=1,
        ...     name="4.0 Quad",
        ...     channel_count=4,
        ...     labels=("L", "R", "LS", "RS"),
        ...     routing=(1, 2, 3, 4),
        ... )
        >>> quad.has_variants
        False
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    layout_id: int = Field(..., ge=1, description="Channel mode id (0 is reserved)")
    name: str = Field(..., min_length=1)
    channel_count: int = Field(..., gt=0)
    labels: tuple[str, ...]
    routing: tuple[int, ...]
    variants: dict[int, LayoutVariant] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_shape(self) -> ChannelLayout:
        _check_configuration(self.labels, self.routing, self.channel_count)
        for variant_id, variant in self.variants.items():
            if len(variant.labels) != self.channel_count:
                raise ValueError(
                    f"Variant {variant_id} of layout {self.layout_id} has "
                    f"{len(variant.labels)} channels, expected {self.channel_count}"
                )
        return self

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)


class CatalogDefinition(BaseModel):
    """File shape of a layout catalog."""

    model_config = ConfigDict(extra="forbid")

    layouts: list[ChannelLayout] = Field(default_factory=list)


@dataclass(frozen=True)
class ActiveConfiguration:
    """Flattened view of a layout with its selected variant applied.

    Channel count always comes from the base layout; variants only reorder
    labels and routing.
    """

    layout_id: int
    layout_name: str
    variant_id: int | None
    variant_name: str | None
    channel_count: int
    labels: tuple[str, ...]
    routing: tuple[int, ...]


class ChannelLayoutCatalog:
    """Registry of channel layouts keyed by mode id.

    Example:
        >>> catalog = ChannelLayoutCatalog.builtin()
        >>> catalog.get_layout(2).name
        '5.0'
        >>> catalog.resolve_active(2, 1).labels
        ('L', 'C', 'R', 'LS', 'RS')
    """

    def __init__(self, layouts: Iterable[ChannelLayout] = ()) -> None:
        self._layouts: dict[int, ChannelLayout] = {}
        for layout in layouts:
            self.register(layout)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChannelLayoutCatalog:
        """Build a catalog from raw config data.

        Raises:
            ValidationError: If any layout is malformed.
            ValueError: If a layout id is registered twice.
        """
        definition = CatalogDefinition.model_validate(data)
        return cls(definition.layouts)

    @classmethod
    def builtin(cls) -> ChannelLayoutCatalog:
        """Catalog with the output formats shipped with the package."""
        with BUILTIN_CATALOG_PATH.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def register(self, layout: ChannelLayout) -> None:
        """Register a layout.

        Raises:
            ValueError: If the layout id is already registered.
        """
        if layout.layout_id in self._layouts:
            raise ValueError(f"Channel layout already registered: {layout.layout_id}")
        self._layouts[layout.layout_id] = layout
        logger.debug(f"Registered channel layout {layout.layout_id}: {layout.name}")

    def get_layout(self, layout_id: int) -> ChannelLayout | None:
        return self._layouts.get(layout_id)

    def require_layout(self, layout_id: int) -> ChannelLayout:
        """Lookup a layout, raising if it is unknown.

        Raises:
            LayoutNotFoundError: If the id is not registered.
        """
        layout = self._layouts.get(layout_id)
        if layout is None:
            raise LayoutNotFoundError(f"Unknown channel layout: {layout_id}")
        return layout

    def get_variant(self, layout_id: int, variant_id: int) -> LayoutVariant | None:
        layout = self._layouts.get(layout_id)
        if layout is None:
            return None
        return layout.variants.get(variant_id)

    def resolve_active(
        self, layout_id: int, variant_id: int | None = None
    ) -> ActiveConfiguration | None:
        """Project a layout and variant selection into its active configuration.

        Layouts with variants default to variant 0 when none is selected;
        a variant id on a layout without variants is ignored.

        Returns:
            The flattened configuration, or None for an unknown layout or
            variant. Stored layouts are never modified.
        """
        layout = self._layouts.get(layout_id)
        if layout is None:
            return None

        if not layout.has_variants:
            return ActiveConfiguration(
                layout_id=layout.layout_id,
                layout_name=layout.name,
                variant_id=None,
                variant_name=None,
                channel_count=layout.channel_count,
                labels=layout.labels,
                routing=layout.routing,
            )

        selected = DEFAULT_VARIANT_ID if variant_id is None else variant_id
        variant = layout.variants.get(selected)
        if variant is None:
            return None
        return ActiveConfiguration(
            layout_id=layout.layout_id,
            layout_name=layout.name,
            variant_id=selected,
            variant_name=variant.name,
            channel_count=layout.channel_count,
            labels=variant.labels,
            routing=variant.routing,
        )

    def variant_name(self, layout_id: int, variant_id: int | None) -> str:
        """Display name of a variant, or "Unknown"."""
        active = self.resolve_active(layout_id, variant_id)
        if active is None or active.variant_name is None:
            return "Unknown"
        return active.variant_name

    def list_layouts(self) -> list[ChannelLayout]:
        """All layouts ordered by id."""
        return [self._layouts[k] for k in sorted(self._layouts)]

    def has(self, layout_id: int) -> bool:
        return layout_id in self._layouts

    def __len__(self) -> int:
        return len(self._layouts)

    def __iter__(self) -> Iterator[ChannelLayout]:
        return iter(self.list_layouts())


@functools.cache
def default_catalog() -> ChannelLayoutCatalog:
    """Process-wide built-in catalog, loaded once."""
    return ChannelLayoutCatalog.builtin()
