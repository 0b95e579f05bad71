"""
Logging event sink.
"""
from __future__ import annotations

import logging
from typing import Any

from histogram_brush.core.events.events import (
    MonotonicityViolationEvent,
    StaleResultDroppedEvent,
)


class LoggingEventSink:
    """Logs domain events using the standard logging module.

    Monotonicity violations are logged at WARNING, stale drops at DEBUG,
    everything else at INFO.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def on_event(self, event: Any) -> None:
        if isinstance(event, MonotonicityViolationEvent):
            self._logger.warning("domain_event", extra={"event": event})
        elif isinstance(event, StaleResultDroppedEvent):
            self._logger.debug("domain_event", extra={"event": event})
        else:
            self._logger.info("domain_event", extra={"event": event})
