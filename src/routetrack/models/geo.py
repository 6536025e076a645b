"""Geographic value types."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class LatLng(BaseModel):
    """A geographic point in degrees.

    Accepts ``{"lat": .., "lng": ..}`` mappings (``latitude``/``longitude``
    and ``lon`` are tolerated) as well as ``[lat, lng]`` pairs.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    lat: float = Field(validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(validation_alias=AliasChoices("lng", "lon", "longitude"))

    @model_validator(mode="before")
    @classmethod
    def _accept_pair(cls, values: Any) -> Any:
        if isinstance(values, (list, tuple)):
            if len(values) != 2:
                raise ValueError("position pair must contain exactly [lat, lng]")
            return {"lat": values[0], "lng": values[1]}
        return values

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _reject_non_numeric(cls, value: Any) -> float:
        # bool is an int subclass; true/false is never a coordinate.
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError("coordinate must be a number")
        try:
            result = float(value)
        except (OverflowError, ValueError) as exc:
            raise ValueError("coordinate must be a number") from exc
        if not math.isfinite(result):
            raise ValueError("coordinate must be finite")
        return result

    @field_validator("lat")
    @classmethod
    def _check_lat_range(cls, value: float) -> float:
        if not -90.0 <= value <= 90.0:
            raise ValueError("latitude must be within [-90, 90]")
        return value

    @field_validator("lng")
    @classmethod
    def _check_lng_range(cls, value: float) -> float:
        if not -180.0 <= value <= 180.0:
            raise ValueError("longitude must be within [-180, 180]")
        return value

    @classmethod
    def from_pair(cls, pair: Sequence[float]) -> LatLng:
        """Build a point from a ``[lat, lng]`` sequence."""
        return cls.model_validate(list(pair))

    def as_pair(self) -> tuple[float, float]:
        return (self.lat, self.lng)

    def __str__(self) -> str:
        return f"({self.lat}, {self.lng})"
