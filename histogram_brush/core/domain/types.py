"""Core shared data models and wire schemas.

This module defines the canonical Pydantic models for dimensions, brush
intervals, transport messages and asynchronous result messages. The wire
models mirror the JSON Schemas in ``histogram_brush/core/schemas`` and keep
their camelCase names through aliases.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring
from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# A cumulative (or combined) histogram: one number per bin.
Histogram = tuple[float, ...]


# ---------------------------------------------------------------------------
# Dimension models
# ---------------------------------------------------------------------------


class Interval(BaseModel):
    """Closed interval ``[low, high]`` in a dimension's continuous domain.

    Accepts a two-element sequence (the wire form) as well as a mapping.
    """

    low: float
    high: float

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
            if len(data) != 2:
                raise ValueError("interval must have exactly two endpoints")
            return {"low": data[0], "high": data[1]}
        return data

    @model_validator(mode="after")
    def validate_order(self) -> Interval:
        if self.low > self.high:
            raise ValueError(f"interval low ({self.low}) must be <= high ({self.high})")
        return self

    def as_tuple(self) -> tuple[float, float]:
        return (self.low, self.high)


class Dimension(BaseModel):
    """A dataset dimension: identity, value range and bin count."""

    name: str = Field(..., min_length=1)
    range: Interval
    bins: int = Field(..., gt=0)
    title: str | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)


# ---------------------------------------------------------------------------
# Transport messages (coordinator -> transport)
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump to the JSON-compatible camelCase wire form."""
        return self.model_dump(mode="json", by_alias=True)


class Resolution(_WireModel):
    dimension: str = Field(..., min_length=1)
    value: int = Field(..., gt=0)


class InitMessage(_WireModel):
    """Establish or resize the index-space resolution per dimension."""

    type: Literal["init"] = "init"
    resolutions: list[Resolution]


class SetRangeMessage(_WireModel):
    """Request or refine background computation for a brushed range."""

    type: Literal["setRange"] = "setRange"
    dimension: str = Field(..., min_length=1)
    range: tuple[float, float]


class LoadMessage(_WireModel):
    """Request immediate computation at one scaled index."""

    type: Literal["load"] = "load"
    dimension: str = Field(..., min_length=1)
    value: int


class PreloadMessage(_WireModel):
    """Low priority hint to compute one scaled index in the background."""

    type: Literal["preload"] = "preload"
    dimension: str = Field(..., min_length=1)
    value: int


# Discriminated union: Pydantic selects the model based on ``type``.
TransportMessage = Annotated[
    InitMessage | SetRangeMessage | LoadMessage | PreloadMessage,
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Result messages (transport -> coordinator)
# ---------------------------------------------------------------------------


class ResultMessage(_WireModel):
    """One cumulative histogram computed by the remote engine.

    ``index`` is a scaled index in the index space of ``active_dimension``;
    ``data`` is broken down by the bins of ``dimension``.
    """

    active_dimension: str = Field(..., min_length=1, alias="activeDimension")
    dimension: str = Field(..., min_length=1)
    index: int
    data: Histogram
