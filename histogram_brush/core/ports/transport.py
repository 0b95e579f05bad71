"""Transport protocol for remote histogram computation.

The transport is a fire-and-forget message sender. Results come back
asynchronously through the handler returned by
``QueryCoordinator.on_result``; retries and backoff are the transport's
concern.
"""

from __future__ import annotations

from typing import Protocol

from histogram_brush.core.domain.types import (
    InitMessage,
    LoadMessage,
    PreloadMessage,
    SetRangeMessage,
)


class Transport(Protocol):
    """Coordinator-facing transport boundary."""

    def send(self, message: InitMessage | SetRangeMessage | LoadMessage | PreloadMessage) -> None:
        """Send one message without waiting for a reply."""
