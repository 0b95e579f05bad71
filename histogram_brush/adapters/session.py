"""Wiring between visualizations and a QueryCoordinator."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from histogram_brush.core.coordinator.query_coordinator import QueryCoordinator, ResultHandler
from histogram_brush.core.domain.types import Dimension, Interval
from histogram_brush.core.ports.visualization import Visualization

LOGGER = logging.getLogger(__name__)

BRUSH_EVENT = "brush"


def connect_visualizations(
    coordinator: QueryCoordinator,
    visualizations: Iterable[Visualization],
    *,
    event_name: str = BRUSH_EVENT,
) -> ResultHandler:
    """Connect brush events to ``set_range`` and emissions to ``update``.

    Returns the result handler to attach to the transport's result stream.
    Emissions for a dimension without a visualization are ignored.
    """
    by_name: dict[str, Visualization] = {}
    for viz in visualizations:
        name = viz.dimension.name
        coordinator.dimension(name)
        if name in by_name:
            raise ValueError(f"more than one visualization for dimension {name!r}")
        by_name[name] = viz

    def _on_brush(dimension: Dimension, interval: Interval | Sequence[float]) -> None:
        coordinator.set_range(dimension, interval)

    for viz in by_name.values():
        viz.on(event_name, _on_brush)

    def _on_histogram(dimension: str, data: list[float]) -> None:
        viz = by_name.get(dimension)
        if viz is None:
            LOGGER.debug("histogram_without_visualization", extra={"dimension": dimension})
            return
        viz.update(data)

    return coordinator.on_result(_on_histogram)
