"""Range reconstruction from two cumulative histograms.

A cumulative histogram at index ``i`` holds, per bin of another dimension,
the aggregate of all records whose active-dimension value maps at or below
``i``. The histogram of the range ``[low, high]`` is therefore the
element-wise difference ``high - low``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from histogram_brush.core.domain.errors import HistogramLengthMismatchError


@dataclass(frozen=True, slots=True)
class BinViolation:
    """A bin whose upper cumulative value is below its lower one."""

    bin: int
    low: float
    high: float

    @property
    def delta(self) -> float:
        return self.high - self.low


@dataclass(frozen=True, slots=True)
class CombinedHistogram:
    """Result of combining two cumulative histograms.

    ``data`` is always fully computed. ``violations`` is non-empty when the
    inputs were not monotonic, which points at a bug in the remote engine.
    """

    data: tuple[float, ...]
    violations: tuple[BinViolation, ...] = ()

    @property
    def is_consistent(self) -> bool:
        return not self.violations


def combine_ranges(low: Sequence[float], high: Sequence[float]) -> CombinedHistogram:
    """Return the per-bin difference ``high[i] - low[i]``.

    Raises:
        HistogramLengthMismatchError: if the sequences differ in length.
    """
    if len(low) != len(high):
        raise HistogramLengthMismatchError(len(low), len(high))

    data: list[float] = []
    violations: list[BinViolation] = []
    for i, (lo, hi) in enumerate(zip(low, high)):
        value = hi - lo
        if value < 0:
            violations.append(BinViolation(bin=i, low=lo, high=hi))
        data.append(value)

    return CombinedHistogram(data=tuple(data), violations=tuple(violations))
