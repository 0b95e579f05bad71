from __future__ import annotations

from typing import Any

from prometheus_client import CollectorRegistry, Counter

from histogram_brush.core.events.events import (
    CacheInvalidatedEvent,
    CacheLookupEvent,
    HistogramEmittedEvent,
    MonotonicityViolationEvent,
    StaleResultDroppedEvent,
    TransportRequestEvent,
)


class PrometheusEventSink:
    """Counts coordinator activity in Prometheus counters.

    Counters live on their own ``CollectorRegistry`` (a fresh one unless a
    registry is injected), so several coordinators in one process do not
    collide on metric names. Exposing or pushing the registry is left to the
    hosting application.
    """

    def __init__(self, registry: CollectorRegistry | None = None, *, namespace: str = "histogram_brush") -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        self._lookups = Counter(
            "cache_lookups",
            "Boundary pair lookups against the range cache.",
            labelnames=["outcome"],
            namespace=namespace,
            registry=self.registry,
        )
        self._requests = Counter(
            "transport_requests",
            "Messages sent to the transport.",
            labelnames=["type"],
            namespace=namespace,
            registry=self.registry,
        )
        self._invalidations = Counter(
            "cache_invalidations",
            "Full cache invalidations.",
            labelnames=["reason"],
            namespace=namespace,
            registry=self.registry,
        )
        self._stale = Counter(
            "stale_results_dropped",
            "Results dropped because their active dimension is no longer active.",
            namespace=namespace,
            registry=self.registry,
        )
        self._emissions = Counter(
            "histograms_emitted",
            "Range histograms delivered to the consumer.",
            labelnames=["source"],
            namespace=namespace,
            registry=self.registry,
        )
        self._violations = Counter(
            "monotonicity_violations",
            "Combined histograms with negative bins.",
            namespace=namespace,
            registry=self.registry,
        )

    def on_event(self, event: Any) -> None:
        if isinstance(event, CacheLookupEvent):
            self._lookups.labels(outcome="hit" if event.hit else "miss").inc()
        elif isinstance(event, TransportRequestEvent):
            self._requests.labels(type=event.message_type).inc()
        elif isinstance(event, CacheInvalidatedEvent):
            self._invalidations.labels(reason=event.reason).inc()
        elif isinstance(event, StaleResultDroppedEvent):
            self._stale.inc()
        elif isinstance(event, HistogramEmittedEvent):
            self._emissions.labels(source=event.source).inc()
        elif isinstance(event, MonotonicityViolationEvent):
            self._violations.inc()

    def sample(self, name: str, labels: dict[str, str] | None = None) -> float:
        """Return the current value of a counter sample (0.0 if absent)."""
        value = self.registry.get_sample_value(name, labels or {})
        return 0.0 if value is None else value
