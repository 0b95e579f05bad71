"""
Semantic test: visualizations are wired to the coordinator.

Invariant:
A brush event on a visualization becomes set_range on its dimension; each
emitted range histogram is drawn by the visualization of that dimension only.
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from histogram_brush.adapters.session import connect_visualizations
from histogram_brush.core.domain.errors import UnknownDimensionError
from histogram_brush.core.domain.types import Dimension, Interval, SetRangeMessage


class FakeBar:
    """Stand-in for a brushable bar chart."""

    def __init__(self, dimension: Dimension) -> None:
        self._dimension = dimension
        self.callbacks: dict[str, object] = {}
        self.drawn: list[list[float]] = []

    @property
    def dimension(self) -> Dimension:
        return self._dimension

    def update(self, data: Sequence[float]) -> None:
        self.drawn.append(list(data))

    def on(self, event_name: str, callback) -> None:
        self.callbacks[event_name] = callback

    def brush(self, low: float, high: float) -> None:
        self.callbacks["brush"](self._dimension, Interval(low=low, high=high))


def test_brush_and_results_flow_through(coordinator, dims, transport) -> None:
    bars = {name: FakeBar(d) for name, d in dims.items()}
    handler = connect_visualizations(coordinator, bars.values())

    bars["X"].brush(20, 80)
    assert transport.sent == [SetRangeMessage(dimension="X", range=(20, 80))]

    handler({"activeDimension": "X", "dimension": "Y", "index": 20, "data": [0, 1]})
    handler({"activeDimension": "X", "dimension": "Y", "index": 80, "data": [2, 4]})

    assert bars["Y"].drawn == [[2, 3]]
    assert bars["X"].drawn == []
    assert bars["Z"].drawn == []


def test_histogram_without_visualization_is_ignored(coordinator, dims) -> None:
    handler = connect_visualizations(coordinator, [FakeBar(dims["X"])])

    coordinator.set_state(dims["X"], (20, 80))
    handler({"activeDimension": "X", "dimension": "Z", "index": 20, "data": [0]})
    update = handler({"activeDimension": "X", "dimension": "Z", "index": 80, "data": [1]})

    assert update is not None
    assert list(update.data) == [1]


def test_rejects_unknown_or_duplicate_dimensions(coordinator, dims) -> None:
    stranger = FakeBar(Dimension(name="W", range=(0, 1), bins=1))
    with pytest.raises(UnknownDimensionError):
        connect_visualizations(coordinator, [stranger])

    with pytest.raises(ValueError):
        connect_visualizations(coordinator, [FakeBar(dims["X"]), FakeBar(dims["X"])])
