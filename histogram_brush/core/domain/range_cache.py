"""Prefix-sum cache of cumulative histograms.

Entries are keyed by (scaled index, dimension name). Indices are only
comparable within the index space of one active dimension, so the cache is
scoped to a single active dimension at a time and is reset as a whole when
that changes.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from histogram_brush.core.domain.types import Histogram


@dataclass(frozen=True, slots=True)
class CacheKey:
    """Typed cache address."""

    index: int
    dimension: str


@dataclass(frozen=True, slots=True)
class CacheLookup:
    """Outcome of a point lookup.

    ``data`` is empty on a miss.
    """

    hit: bool
    data: Histogram = ()


@dataclass(frozen=True, slots=True)
class CacheRowLookup:
    """Outcome of a full-row lookup (all expected dimensions at one index)."""

    hit: bool
    data: Mapping[str, Histogram] = field(default_factory=dict)


_MISS = CacheLookup(hit=False)


class RangeCache:
    """Two-level store ``index -> dimension name -> cumulative histogram``.

    ``dimensions`` are the tracked dimension names; ``active_dimension`` is the
    dimension whose index space the entries live in. It is excluded from the
    set of dimensions a full row is expected to hold.

    Writes are unconditional (last writer wins). Monotonicity of the stored
    cumulative histograms is not checked here.
    """

    def __init__(self, dimensions: Iterable[str], active_dimension: str | None = None) -> None:
        self._dimensions: tuple[str, ...] = tuple(dimensions)
        self._active_dimension = active_dimension
        self._rows: dict[int, dict[str, Histogram]] = {}
        self._size = 0

    # ---- Scope ----
    @property
    def dimensions(self) -> tuple[str, ...]:
        return self._dimensions

    @property
    def active_dimension(self) -> str | None:
        return self._active_dimension

    @property
    def expected_dimensions(self) -> tuple[str, ...]:
        """Tracked dimensions other than the active one."""
        return tuple(d for d in self._dimensions if d != self._active_dimension)

    # ---- Reads ----
    def get(self, index: int, dimension: str) -> CacheLookup:
        row = self._rows.get(index)
        if row is None:
            return _MISS
        data = row.get(dimension)
        if data is None:
            return _MISS
        return CacheLookup(hit=True, data=data)

    def get_all(self, index: int) -> CacheRowLookup:
        """Return every expected dimension at ``index``.

        A partial row is a miss; callers that can use partial data must go
        through ``get`` per dimension.
        """
        row = self._rows.get(index)
        if row is None or not self._row_is_full(row):
            return CacheRowLookup(hit=False)
        return CacheRowLookup(
            hit=True,
            data={name: row[name] for name in self.expected_dimensions},
        )

    def has_full_data(self, index: int) -> bool:
        row = self._rows.get(index)
        return row is not None and self._row_is_full(row)

    def keys(self) -> Iterator[CacheKey]:
        for index, row in self._rows.items():
            for name in row:
                yield CacheKey(index=index, dimension=name)

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, CacheKey):
            return False
        return self.get(key.index, key.dimension).hit

    # ---- Writes ----
    def set(self, index: int, dimension: str, data: Sequence[float]) -> None:
        row = self._rows.get(index)
        if row is None:
            row = {}
            self._rows[index] = row
        if dimension not in row:
            self._size += 1
        row[dimension] = tuple(data)

    def invalidate(self, active_dimension: str | None = None) -> int:
        """Drop every entry, optionally rescoping to a new active dimension.

        Returns the number of entries dropped.
        """
        dropped = self._size
        self._rows = {}
        self._size = 0
        if active_dimension is not None:
            self._active_dimension = active_dimension
        return dropped

    def _row_is_full(self, row: Mapping[str, Histogram]) -> bool:
        return all(name in row for name in self.expected_dimensions)
