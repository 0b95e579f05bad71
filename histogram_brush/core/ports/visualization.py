"""Visualization protocol.

A visualization draws one dimension's bars and brush. It is a pure event
source (brush range changes) and sink (bar data).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from histogram_brush.core.domain.types import Dimension, Interval

BrushCallback = Callable[[Dimension, Interval], None]


class Visualization(Protocol):

    @property
    def dimension(self) -> Dimension:
        """Dimension drawn by this visualization."""

    def update(self, data: Sequence[float]) -> None:
        """Redraw the bars, one value per bin."""

    def on(self, event_name: str, callback: BrushCallback) -> None:
        """Register a callback for brush events (e.g. ``"brush"``)."""
