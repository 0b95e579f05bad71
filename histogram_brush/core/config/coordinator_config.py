"""Coordinator configuration model."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from histogram_brush.core.domain.scales import DEFAULT_RESOLUTION
from histogram_brush.core.domain.types import Dimension


class CoordinatorConfig(BaseModel):
    """Dimensions plus index-space resolutions.

    JSON example:
        {
          "dimensions": [
            {"name": "delay", "range": [0, 100], "bins": 10, "title": "Delay"},
            {"name": "distance", "range": [0, 5000], "bins": 20}
          ],
          "default_resolution": 100,
          "resolutions": {"delay": 200}
        }

    The first dimension is the initially active one.
    """

    dimensions: list[Dimension] = Field(..., min_length=1)
    default_resolution: int = Field(default=DEFAULT_RESOLUTION, gt=0)
    resolutions: dict[str, int] = Field(default_factory=dict)

    # Raise HistogramIntegrityError instead of flagging negative combined bins.
    raise_on_integrity_violation: bool = False

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> CoordinatorConfig:
        """Create a CoordinatorConfig instance from a JSON-compatible object."""
        return cls.model_validate(obj)

    @classmethod
    def from_json_file(cls, path: str | Path) -> CoordinatorConfig:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        return cls.from_json_obj(json.loads(path.read_text(encoding="utf-8")))

    @model_validator(mode="after")
    def validate_consistency(self) -> CoordinatorConfig:
        names = [d.name for d in self.dimensions]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate dimension names: {duplicates}")

        unknown = sorted(set(self.resolutions) - set(names))
        if unknown:
            raise ValueError(f"resolutions reference unknown dimensions: {unknown}")

        for name, value in self.resolutions.items():
            if value <= 0:
                raise ValueError(f"resolution for {name!r} must be positive, got {value}")
        return self

    @property
    def initial_dimension(self) -> Dimension:
        return self.dimensions[0]

    def resolution_for(self, name: str) -> int:
        return self.resolutions.get(name, self.default_resolution)

    def resolution_map(self) -> dict[str, int]:
        return {d.name: self.resolution_for(d.name) for d in self.dimensions}
