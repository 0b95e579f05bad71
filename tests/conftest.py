from __future__ import annotations

import pytest

from histogram_brush.adapters.transport import RecordingTransport
from histogram_brush.core.coordinator.query_coordinator import QueryCoordinator
from histogram_brush.core.domain.types import Dimension


class Emissions(list):
    """Collects (dimension, data) pairs delivered to the result callback."""

    def __call__(self, dimension: str, data: list[float]) -> None:
        self.append((dimension, data))


@pytest.fixture
def dimensions() -> list[Dimension]:
    return [
        Dimension(name="X", range=(0, 100), bins=10, title="X axis"),
        Dimension(name="Y", range=(0, 50), bins=10),
        Dimension(name="Z", range=(-10, 10), bins=10),
    ]


@pytest.fixture
def dims(dimensions: list[Dimension]) -> dict[str, Dimension]:
    return {d.name: d for d in dimensions}


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def coordinator(dimensions: list[Dimension], transport: RecordingTransport) -> QueryCoordinator:
    return QueryCoordinator(dimensions, transport, default_resolution=100)


@pytest.fixture
def emissions() -> Emissions:
    return Emissions()
