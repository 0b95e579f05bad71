"""Error taxonomy for range-histogram combination and dimension lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from histogram_brush.core.domain.combine import BinViolation


class HistogramBrushError(Exception):
    """Base class for all errors raised by histogram_brush."""


class HistogramLengthMismatchError(HistogramBrushError, ValueError):
    """Two cumulative histograms of differing bin counts were combined."""

    def __init__(self, low_length: int, high_length: int) -> None:
        super().__init__(
            f"cannot combine cumulative histograms of length {low_length} and {high_length}"
        )
        self.low_length = low_length
        self.high_length = high_length


class HistogramIntegrityError(HistogramBrushError):
    """A combined histogram has negative bins (non-monotonic cumulative data)."""

    def __init__(self, dimension: str, violations: tuple[BinViolation, ...]) -> None:
        bins = ", ".join(str(v.bin) for v in violations)
        super().__init__(f"negative combined bins for dimension {dimension!r}: {bins}")
        self.dimension = dimension
        self.violations = violations


class UnknownDimensionError(HistogramBrushError, KeyError):
    """A dimension name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown dimension: {self.name!r}"
