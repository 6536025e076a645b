"""Geolocation boundary: resolve the operator's position once."""

from __future__ import annotations

from typing import Protocol

from routetrack.models.geo import LatLng


class Geolocator(Protocol):
    async def current_position(self, *, enable_high_accuracy: bool = True) -> LatLng:
        ...


class StaticGeolocator:
    """Geolocator that always reports a configured position."""

    def __init__(self, position: LatLng) -> None:
        self._position = position

    async def current_position(self, *, enable_high_accuracy: bool = True) -> LatLng:
        return self._position
