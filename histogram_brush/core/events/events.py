"""
Domain event models.

These events represent immutable facts observed while coordinating range
queries. They are consumed by loggers, recorders, and metrics sinks.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ActiveDimensionChangedEvent:
    prev_dimension: str
    next_dimension: str


@dataclass(slots=True)
class CacheInvalidatedEvent:
    active_dimension: str
    dropped_entries: int
    reason: str  # dimension_switch | resolution_change


@dataclass(slots=True)
class CacheLookupEvent:
    active_dimension: str
    dimension: str

    low_index: int
    high_index: int

    hit: bool


@dataclass(slots=True)
class TransportRequestEvent:
    message_type: str
    dimension: str | None


@dataclass(slots=True)
class StaleResultDroppedEvent:
    result_active_dimension: str
    current_active_dimension: str
    dimension: str
    index: int


@dataclass(slots=True)
class HistogramEmittedEvent:
    active_dimension: str
    dimension: str
    source: str  # cache | result

    low_index: int
    high_index: int


@dataclass(slots=True)
class MonotonicityViolationEvent:
    active_dimension: str
    dimension: str

    low_index: int
    high_index: int

    bins: list[int]
