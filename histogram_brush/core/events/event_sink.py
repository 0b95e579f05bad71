"""
Event sink interface.

Sinks observe what a QueryCoordinator does: cache lookups, transport
requests, invalidations, stale drops and emitted histograms. They must not
call back into the coordinator.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume one coordinator event (see ``core/events/events.py``)."""
