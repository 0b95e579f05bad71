"""Public API for the histogram_brush package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Coordinator API
# ----------------------------------------------------------------------
from histogram_brush.adapters.session import connect_visualizations
from histogram_brush.adapters.transport import RecordingTransport
from histogram_brush.core.config.coordinator_config import CoordinatorConfig
from histogram_brush.core.coordinator.query_coordinator import (
    HistogramUpdate,
    QueryCoordinator,
)

# ----------------------------------------------------------------------
# Domain
# ----------------------------------------------------------------------
from histogram_brush.core.domain.combine import (
    BinViolation,
    CombinedHistogram,
    combine_ranges,
)
from histogram_brush.core.domain.errors import (
    HistogramBrushError,
    HistogramIntegrityError,
    HistogramLengthMismatchError,
    UnknownDimensionError,
)
from histogram_brush.core.domain.range_cache import CacheLookup, RangeCache
from histogram_brush.core.domain.scales import LinearScale, ScaleRegistry
from histogram_brush.core.domain.types import (
    Dimension,
    InitMessage,
    Interval,
    LoadMessage,
    PreloadMessage,
    ResultMessage,
    SetRangeMessage,
    TransportMessage,
)

# ----------------------------------------------------------------------
# Ports and events
# ----------------------------------------------------------------------
from histogram_brush.core.events.event_bus import EventBus
from histogram_brush.core.events.sinks.prometheus_sink import PrometheusEventSink
from histogram_brush.core.ports.transport import Transport
from histogram_brush.core.ports.visualization import Visualization

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Coordinator
    "QueryCoordinator",
    "HistogramUpdate",
    "CoordinatorConfig",
    "RecordingTransport",
    "connect_visualizations",

    # Domain
    "Dimension",
    "Interval",
    "RangeCache",
    "CacheLookup",
    "LinearScale",
    "ScaleRegistry",
    "combine_ranges",
    "CombinedHistogram",
    "BinViolation",

    # Wire messages
    "TransportMessage",
    "InitMessage",
    "SetRangeMessage",
    "LoadMessage",
    "PreloadMessage",
    "ResultMessage",

    # Errors
    "HistogramBrushError",
    "HistogramLengthMismatchError",
    "HistogramIntegrityError",
    "UnknownDimensionError",

    # Ports / events
    "Transport",
    "Visualization",
    "EventBus",
    "PrometheusEventSink",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("histogram-brush")
except PackageNotFoundError:
    __version__ = "0.0.0"
