"""Range-query coordinator.

The coordinator owns the active dimension, the last brushed range of every
dimension and the prefix-sum cache. A brushed range is mapped to two scaled
indices; when both boundary cumulative histograms are cached for another
dimension, the range histogram of that dimension is reconstructed locally
(``high - low``) and emitted synchronously. Otherwise the coordinator waits
for asynchronous results from the transport and completes the query when
both boundaries have arrived.

All entry points are synchronous and non-blocking. Results are matched
against the coordinator's state at the time they arrive, never against the
state at the time the request was sent.
"""

# pylint: disable=too-many-instance-attributes
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from histogram_brush.core.config.coordinator_config import CoordinatorConfig
from histogram_brush.core.domain.combine import BinViolation, combine_ranges
from histogram_brush.core.domain.dimension_state_machine import ActiveDimensionState
from histogram_brush.core.domain.errors import HistogramIntegrityError, UnknownDimensionError
from histogram_brush.core.domain.range_cache import RangeCache
from histogram_brush.core.domain.scales import DEFAULT_RESOLUTION, ScaleRegistry
from histogram_brush.core.domain.types import (
    Dimension,
    Histogram,
    InitMessage,
    Interval,
    LoadMessage,
    PreloadMessage,
    Resolution,
    ResultMessage,
    SetRangeMessage,
)
from histogram_brush.core.events.event_bus import EventBus
from histogram_brush.core.events.events import (
    ActiveDimensionChangedEvent,
    CacheInvalidatedEvent,
    CacheLookupEvent,
    HistogramEmittedEvent,
    MonotonicityViolationEvent,
    StaleResultDroppedEvent,
    TransportRequestEvent,
)
from histogram_brush.core.events.sinks.null_event_bus import NullEventBus
from histogram_brush.core.ports.transport import Transport

LOGGER = logging.getLogger(__name__)

ResultCallback = Callable[[str, list[float]], None]


@dataclass(frozen=True, slots=True)
class HistogramUpdate:
    """A range histogram delivered to the consumer.

    ``data`` is always the difference of two cumulative histograms.
    ``violations`` lists bins that came out negative.
    """

    dimension: str
    data: Histogram
    violations: tuple[BinViolation, ...] = ()

    @property
    def is_consistent(self) -> bool:
        return not self.violations


ResultHandler = Callable[[ResultMessage | Mapping[str, Any]], HistogramUpdate | None]


class QueryCoordinator:
    """Resolves brushed ranges from the cache or forwards them to the transport."""

    def __init__(
        self,
        dimensions: Sequence[Dimension],
        transport: Transport,
        *,
        default_resolution: int = DEFAULT_RESOLUTION,
        resolutions: Mapping[str, int] | None = None,
        raise_on_integrity_violation: bool = False,
        event_bus: EventBus | None = None,
    ) -> None:
        if not dimensions:
            raise ValueError("at least one dimension is required")

        self._dimensions: dict[str, Dimension] = {d.name: d for d in dimensions}
        if len(self._dimensions) != len(dimensions):
            raise ValueError("dimension names must be unique")

        self._transport = transport
        self._event_bus = event_bus if event_bus is not None else NullEventBus()
        self._raise_on_integrity_violation = raise_on_integrity_violation

        names = list(self._dimensions)
        self._state = ActiveDimensionState(names, initial=names[0])
        self._ranges: dict[str, Interval] = {d.name: d.range for d in dimensions}

        self._scales = ScaleRegistry(dimensions, default_resolution=default_resolution)
        if resolutions:
            self._scales.init(resolutions)

        self._cache = RangeCache(names, active_dimension=self._state.active)
        self._callback: ResultCallback | None = None

    @classmethod
    def from_config(
        cls,
        config: CoordinatorConfig,
        transport: Transport,
        *,
        event_bus: EventBus | None = None,
    ) -> QueryCoordinator:
        return cls(
            config.dimensions,
            transport,
            default_resolution=config.default_resolution,
            resolutions=config.resolutions,
            raise_on_integrity_violation=config.raise_on_integrity_violation,
            event_bus=event_bus,
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def active_dimension(self) -> str:
        return self._state.active

    @property
    def ranges(self) -> dict[str, Interval]:
        """Last known interval per dimension (a copy)."""
        return dict(self._ranges)

    @property
    def cache(self) -> RangeCache:
        return self._cache

    @property
    def scales(self) -> ScaleRegistry:
        return self._scales

    @property
    def dimensions(self) -> tuple[Dimension, ...]:
        return tuple(self._dimensions.values())

    def dimension(self, name: str) -> Dimension:
        dimension = self._dimensions.get(name)
        if dimension is None:
            raise UnknownDimensionError(name)
        return dimension

    def scaled_range(self, name: str) -> tuple[int, int]:
        """Boundary indices of the last range of ``name`` under its scale."""
        interval = self._ranges.get(name)
        if interval is None:
            raise UnknownDimensionError(name)
        return (self._scales.index(name, interval.low), self._scales.index(name, interval.high))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def init(self, resolutions: Mapping[str, int | None] | None = None) -> InitMessage:
        """(Re)initialize index-space resolutions and announce them to the transport.

        Without arguments every dimension keeps its current resolution and the
        full resolution table is sent. Cached indices are invalidated because
        they are not comparable across resolutions.
        """
        if resolutions:
            self._scales.init(resolutions)
            names = list(resolutions)
        else:
            names = list(self._dimensions)

        self._invalidate(reason="resolution_change")

        message = InitMessage(
            resolutions=[
                Resolution(dimension=name, value=self._scales.resolution(name)) for name in names
            ]
        )
        self._send(message, dimension=None)
        return message

    def set_active_dimension(self, dimension: Dimension | str) -> bool:
        """Make ``dimension`` active. Returns True if the active dimension changed.

        A change invalidates the whole cache. This is the only path that
        reassigns the active dimension.
        """
        name = dimension if isinstance(dimension, str) else dimension.name
        transition = self._state.transition(name)
        if not transition.changed:
            return False

        self._event_bus.emit(
            ActiveDimensionChangedEvent(prev_dimension=transition.prev, next_dimension=transition.next)
        )
        LOGGER.info(
            "active_dimension_changed",
            extra={"prev_dimension": transition.prev, "next_dimension": transition.next},
        )
        if transition.requires_invalidation:
            self._invalidate(reason="dimension_switch")
        return True

    def set_state(
        self,
        dimension: Dimension,
        range: Interval | Sequence[float],  # pylint: disable=redefined-builtin
    ) -> list[HistogramUpdate]:
        """Record a brush move and emit every range histogram the cache can answer.

        Dimensions with a partial or missing boundary pair are not emitted;
        a later result completes them.
        """
        interval = _as_interval(range)
        self.set_active_dimension(dimension)
        self._ranges[dimension.name] = interval

        low_index, high_index = self.scaled_range(dimension.name)
        updates: list[HistogramUpdate] = []
        for other in self._cache.expected_dimensions:
            low = self._cache.get(low_index, other)
            high = self._cache.get(high_index, other)
            hit = low.hit and high.hit
            self._event_bus.emit(
                CacheLookupEvent(
                    active_dimension=dimension.name,
                    dimension=other,
                    low_index=low_index,
                    high_index=high_index,
                    hit=hit,
                )
            )
            if hit:
                updates.append(
                    self._combine_and_emit(other, low_index, high_index, low.data, high.data, source="cache")
                )
        return updates

    def set_range(
        self,
        dimension: Dimension,
        range: Interval | Sequence[float],  # pylint: disable=redefined-builtin
    ) -> list[HistogramUpdate]:
        """``set_state`` followed by an unconditional ``setRange`` request.

        The request is sent even on a full hit so the remote side can keep
        refining cache coverage around the brush. A combination error raised
        by ``set_state`` still propagates, after the request has gone out.
        """
        interval = _as_interval(range)
        self.dimension(dimension.name)
        try:
            return self.set_state(dimension, interval)
        finally:
            self._send(
                SetRangeMessage(dimension=dimension.name, range=interval.as_tuple()),
                dimension=dimension.name,
            )

    def load(self, dimension: Dimension, value: float) -> bool:
        """Request immediate computation at the scaled index of ``value``.

        Skipped when the active dimension's cache already holds a full row at
        that index. Returns True if a request was sent.
        """
        index = self._scales.index(dimension.name, value)
        if self._state.is_active(dimension.name) and self._cache.has_full_data(index):
            LOGGER.debug("load_skipped", extra={"dimension": dimension.name, "index": index})
            return False
        self._send(LoadMessage(dimension=dimension.name, value=index), dimension=dimension.name)
        return True

    def preload(self, dimension: Dimension, value: float) -> None:
        """Hint background computation at the scaled index of ``value``. Always sent."""
        index = self._scales.index(dimension.name, value)
        self._send(PreloadMessage(dimension=dimension.name, value=index), dimension=dimension.name)

    # ------------------------------------------------------------------
    # Result intake
    # ------------------------------------------------------------------

    def on_result(self, callback: ResultCallback) -> ResultHandler:
        """Register the consumer callback and return the handler for the transport.

        The callback receives ``(dimension, data)`` where ``data`` is a range
        histogram, never a raw cumulative one. Registering again replaces the
        previous callback.
        """
        self._callback = callback
        return self.handle_result

    def handle_result(self, result: ResultMessage | Mapping[str, Any]) -> HistogramUpdate | None:
        """Store an incoming cumulative histogram and complete the active query if possible.

        Results computed for a dimension that is no longer active are dropped.
        """
        if not isinstance(result, ResultMessage):
            result = ResultMessage.model_validate(result)

        active = self._state.active
        if result.active_dimension != active:
            self._event_bus.emit(
                StaleResultDroppedEvent(
                    result_active_dimension=result.active_dimension,
                    current_active_dimension=active,
                    dimension=result.dimension,
                    index=result.index,
                )
            )
            LOGGER.debug(
                "stale_result_dropped",
                extra={
                    "result_active_dimension": result.active_dimension,
                    "active_dimension": active,
                    "dimension": result.dimension,
                    "index": result.index,
                },
            )
            return None

        self._cache.set(result.index, result.dimension, result.data)

        # The brushed dimension is never emitted, on arrival or on a cache hit.
        if result.dimension == active:
            LOGGER.debug(
                "active_dimension_result_stored",
                extra={"dimension": result.dimension, "index": result.index},
            )
            return None

        # Only a boundary of the current query can change its outcome.
        low_index, high_index = self.scaled_range(active)
        if result.index not in (low_index, high_index):
            return None

        low = self._cache.get(low_index, result.dimension)
        high = self._cache.get(high_index, result.dimension)
        if not (low.hit and high.hit):
            return None

        return self._combine_and_emit(
            result.dimension, low_index, high_index, low.data, high.data, source="result"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _combine_and_emit(
        self,
        dimension: str,
        low_index: int,
        high_index: int,
        low: Histogram,
        high: Histogram,
        *,
        source: str,
    ) -> HistogramUpdate:
        # Length mismatches propagate to whoever triggered the combination.
        combined = combine_ranges(low, high)
        active = self._state.active

        if combined.violations:
            self._event_bus.emit(
                MonotonicityViolationEvent(
                    active_dimension=active,
                    dimension=dimension,
                    low_index=low_index,
                    high_index=high_index,
                    bins=[v.bin for v in combined.violations],
                )
            )
            LOGGER.warning(
                "negative_combined_bins",
                extra={
                    "active_dimension": active,
                    "dimension": dimension,
                    "low_index": low_index,
                    "high_index": high_index,
                    "bins": [v.bin for v in combined.violations],
                },
            )
            if self._raise_on_integrity_violation:
                raise HistogramIntegrityError(dimension, combined.violations)

        update = HistogramUpdate(dimension=dimension, data=combined.data, violations=combined.violations)
        self._event_bus.emit(
            HistogramEmittedEvent(
                active_dimension=active,
                dimension=dimension,
                source=source,
                low_index=low_index,
                high_index=high_index,
            )
        )
        if self._callback is not None:
            self._callback(dimension, list(update.data))
        return update

    def _invalidate(self, *, reason: str) -> None:
        active = self._state.active
        dropped = self._cache.invalidate(active_dimension=active)
        self._event_bus.emit(
            CacheInvalidatedEvent(active_dimension=active, dropped_entries=dropped, reason=reason)
        )

    def _send(
        self,
        message: InitMessage | SetRangeMessage | LoadMessage | PreloadMessage,
        *,
        dimension: str | None,
    ) -> None:
        self._transport.send(message)
        self._event_bus.emit(TransportRequestEvent(message_type=message.type, dimension=dimension))


def _as_interval(value: Interval | Sequence[float]) -> Interval:
    if isinstance(value, Interval):
        return value
    return Interval.model_validate(value)
