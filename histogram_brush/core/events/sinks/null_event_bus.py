from __future__ import annotations

from typing import Any

from histogram_brush.core.events.event_bus import EventBus


class NullEventBus(EventBus):
    """Bus with no sinks; the default when a coordinator has no observers."""

    def __init__(self) -> None:
        super().__init__(sinks=())

    def emit(self, event: Any) -> None:
        return
