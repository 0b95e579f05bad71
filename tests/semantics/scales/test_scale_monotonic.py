"""
Semantic test: scales are monotonic and fully determined by (dimension, resolution).

Invariant:
value1 <= value2 implies scale(value1) <= scale(value2), for every
dimension and resolution. Re-initializing a resolution replaces the scale.
"""

from __future__ import annotations

import pytest

from histogram_brush.core.domain.errors import UnknownDimensionError
from histogram_brush.core.domain.scales import DEFAULT_RESOLUTION, LinearScale, ScaleRegistry
from histogram_brush.core.domain.types import Dimension


@pytest.mark.parametrize("resolution", [1, 7, 100, 1000])
@pytest.mark.parametrize(
    "domain",
    [(0.0, 100.0), (-10.0, 10.0), (3.5, 3.75), (-1e6, 1e6)],
)
def test_scale_is_non_decreasing(resolution: int, domain: tuple[float, float]) -> None:
    dimension = Dimension(name="d", range=domain, bins=4)
    registry = ScaleRegistry([dimension])
    registry.init({"d": resolution})

    low, high = domain
    steps = 257
    values = [low + (high - low) * i / steps for i in range(-3, steps + 4)]

    scaled = [registry.scale("d", v) for v in values]
    indices = [registry.index("d", v) for v in values]

    assert scaled == sorted(scaled)
    assert indices == sorted(indices)
    assert registry.index("d", low) == 0
    assert registry.index("d", high) == resolution


def test_default_resolution_is_used_when_not_supplied() -> None:
    registry = ScaleRegistry([Dimension(name="d", range=(0, 10), bins=2)])

    assert registry.resolution("d") == DEFAULT_RESOLUTION == 100

    registry.init({"d": None})
    assert registry.resolution("d") == DEFAULT_RESOLUTION


def test_reinit_replaces_mapping() -> None:
    registry = ScaleRegistry([Dimension(name="d", range=(0, 100), bins=2)])
    assert registry.index("d", 50) == 50

    registry.init({"d": 10})
    assert registry.index("d", 50) == 5
    assert registry.resolutions() == {"d": 10}


def test_scale_is_deterministic_from_dimension_and_resolution() -> None:
    dimension = Dimension(name="d", range=(2, 12), bins=5)

    a = LinearScale.for_dimension(dimension, 40)
    b = LinearScale.for_dimension(dimension, 40)

    assert a == b
    assert [a.index(v) for v in (2, 4.6, 7, 12)] == [b.index(v) for v in (2, 4.6, 7, 12)]


def test_index_rounds_half_up() -> None:
    scale = LinearScale(domain_low=0.0, domain_high=16.0, resolution=16)

    assert scale.index(2.5) == 3
    assert scale.index(3.5) == 4
    assert scale.index(2.49) == 2


def test_zero_width_domain_maps_to_zero() -> None:
    scale = LinearScale(domain_low=5.0, domain_high=5.0, resolution=100)

    assert scale(5.0) == 0.0
    assert scale.index(4.0) == scale.index(6.0) == 0


def test_invert_maps_index_back_to_value() -> None:
    registry = ScaleRegistry([Dimension(name="d", range=(-10, 10), bins=4)])

    assert registry.invert("d", 0) == -10
    assert registry.invert("d", 50) == 0
    assert registry.invert("d", 100) == 10


def test_unknown_dimension_is_rejected() -> None:
    registry = ScaleRegistry([Dimension(name="d", range=(0, 1), bins=1)])

    with pytest.raises(UnknownDimensionError):
        registry.index("missing", 0.5)
    with pytest.raises(UnknownDimensionError):
        registry.init({"missing": 10})


def test_non_positive_resolution_is_rejected() -> None:
    with pytest.raises(ValueError):
        LinearScale(domain_low=0.0, domain_high=1.0, resolution=0)
    with pytest.raises(ValueError):
        ScaleRegistry([], default_resolution=0)
