"""In-process transport that records outgoing messages."""

from __future__ import annotations

from collections.abc import Callable

from histogram_brush.core.domain.types import (
    InitMessage,
    LoadMessage,
    PreloadMessage,
    SetRangeMessage,
)
from histogram_brush.core.ports.transport import Transport

OutgoingMessage = InitMessage | SetRangeMessage | LoadMessage | PreloadMessage


class RecordingTransport(Transport):
    """Transport implementation that keeps every sent message in memory.

    An optional ``forward`` callable receives each message after it was
    recorded, e.g. to push it onto a websocket or print it.
    """

    def __init__(self, forward: Callable[[OutgoingMessage], None] | None = None) -> None:
        self.sent: list[OutgoingMessage] = []
        self._forward = forward

    def send(self, message: OutgoingMessage) -> None:
        self.sent.append(message)
        if self._forward is not None:
            self._forward(message)

    def of_type(self, message_type: str) -> list[OutgoingMessage]:
        return [m for m in self.sent if m.type == message_type]

    def wire(self) -> list[dict]:
        """Sent messages in their JSON wire form."""
        return [m.to_wire() for m in self.sent]

    def clear(self) -> None:
        self.sent.clear()
