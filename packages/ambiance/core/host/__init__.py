"""Host collaborator layer for Ambiance.

Defines the protocols the routing core uses to reach container state, the
live track graph, and the regeneration pass, plus fake and null
implementations.

Example:
    >>> from ambiance.core.host import FakeTrackGraph, RecordingRegenerator
    >>> graph = FakeTrackGraph()
    >>> group = graph.add_track("Forest", folder=True)
"""

from .errors import ContainerNotFoundError
from .impl_fake import FakeTrackGraph, RecordingRegenerator
from .impl_null import NullRegenerator, NullTrackGraph
from .models import (
    MONO_SEND_FLAG,
    SendRef,
    TrackRef,
    decode_destination_channel,
    encode_mono_destination,
)
from .protocols import ContainerStore, Regenerator, TrackGraph

__all__ = [
    # Handles
    "TrackRef",
    "SendRef",
    "MONO_SEND_FLAG",
    "encode_mono_destination",
    "decode_destination_channel",
    # Protocols
    "ContainerStore",
    "TrackGraph",
    "Regenerator",
    # Errors
    "ContainerNotFoundError",
    # Implementations
    "FakeTrackGraph",
    "RecordingRegenerator",
    "NullTrackGraph",
    "NullRegenerator",
]
