"""Per-dimension mapping from continuous values to cache indices.

Every scale is a pure linear map from a dimension's value range onto
``[0, resolution]`` and is fully determined by (dimension, resolution).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from histogram_brush.core.domain.errors import UnknownDimensionError
from histogram_brush.core.domain.types import Dimension

DEFAULT_RESOLUTION: int = 100


@dataclass(frozen=True, slots=True)
class LinearScale:
    """Monotonic map from ``[domain_low, domain_high]`` to ``[0, resolution]``.

    Values outside the domain extrapolate linearly. A zero-width domain maps
    every value to 0.
    """

    domain_low: float
    domain_high: float
    resolution: int

    def __post_init__(self) -> None:
        if self.resolution <= 0:
            raise ValueError(f"resolution must be positive, got {self.resolution}")
        if self.domain_low > self.domain_high:
            raise ValueError("scale domain must be ordered (low <= high)")

    @classmethod
    def for_dimension(cls, dimension: Dimension, resolution: int) -> LinearScale:
        return cls(
            domain_low=dimension.range.low,
            domain_high=dimension.range.high,
            resolution=int(resolution),
        )

    @property
    def _span(self) -> float:
        return self.domain_high - self.domain_low

    def __call__(self, value: float) -> float:
        if self._span == 0:
            return 0.0
        return (value - self.domain_low) / self._span * self.resolution

    def index(self, value: float) -> int:
        """Scale ``value`` and round half-up to the nearest integer index."""
        return int(math.floor(self(value) + 0.5))

    def invert(self, index: float) -> float:
        """Map an index back into the value domain."""
        return self.domain_low + (index / self.resolution) * self._span


class ScaleRegistry:
    """Holds one LinearScale per dimension name."""

    def __init__(
        self,
        dimensions: Iterable[Dimension],
        *,
        default_resolution: int = DEFAULT_RESOLUTION,
    ) -> None:
        if default_resolution <= 0:
            raise ValueError(f"default_resolution must be positive, got {default_resolution}")
        self._default_resolution = int(default_resolution)
        self._dimensions: dict[str, Dimension] = {d.name: d for d in dimensions}
        self._scales: dict[str, LinearScale] = {
            name: LinearScale.for_dimension(d, self._default_resolution)
            for name, d in self._dimensions.items()
        }

    @property
    def default_resolution(self) -> int:
        return self._default_resolution

    def init(self, resolutions: Mapping[str, int | None]) -> None:
        """Replace the scale of every named dimension.

        A ``None`` resolution falls back to the default resolution. Indices
        produced by a replaced scale must not be mixed with the new ones.
        Nothing is replaced unless every name and resolution is valid.
        """
        replaced: dict[str, LinearScale] = {}
        for name, resolution in resolutions.items():
            dimension = self._dimension(name)
            value = self._default_resolution if resolution is None else int(resolution)
            replaced[name] = LinearScale.for_dimension(dimension, value)
        self._scales.update(replaced)

    def resolution(self, name: str) -> int:
        return self.get(name).resolution

    def resolutions(self) -> dict[str, int]:
        return {name: scale.resolution for name, scale in self._scales.items()}

    def get(self, name: str) -> LinearScale:
        scale = self._scales.get(name)
        if scale is None:
            raise UnknownDimensionError(name)
        return scale

    def scale(self, name: str, value: float) -> float:
        return self.get(name)(value)

    def index(self, name: str, value: float) -> int:
        return self.get(name).index(value)

    def invert(self, name: str, index: float) -> float:
        return self.get(name).invert(index)

    def _dimension(self, name: str) -> Dimension:
        dimension = self._dimensions.get(name)
        if dimension is None:
            raise UnknownDimensionError(name)
        return dimension
