"""Map SDK boundary.

The controller needs three capabilities from a map: place/move a marker,
remove a marker, and instantiate a view centered on a point.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Protocol

from routetrack.models.geo import LatLng
from routetrack.models.marker import MarkerIcon, MarkerRef

_logger = logging.getLogger(__name__)


class MapSurface(Protocol):
    """Structural interface of a rendered (or headless) map."""

    def create_view(self, center: LatLng, zoom: int) -> None:
        ...

    def place_marker(self, position: LatLng, icon: MarkerIcon) -> MarkerRef:
        ...

    def move_marker(self, marker: MarkerRef, position: LatLng) -> None:
        ...

    def remove_marker(self, marker: MarkerRef) -> None:
        ...


@dataclass(frozen=True)
class PlacedMarker:
    marker_id: int
    position: LatLng
    icon: MarkerIcon


class InMemoryMapSurface:
    """Headless map surface that keeps the visible marker set in memory."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._markers: dict[int, PlacedMarker] = {}
        self.center: LatLng | None = None
        self.zoom: int | None = None

    def create_view(self, center: LatLng, zoom: int) -> None:
        self.center = center
        self.zoom = zoom
        _logger.debug("Map view created center=%s zoom=%d", center, zoom)

    def place_marker(self, position: LatLng, icon: MarkerIcon) -> int:
        marker_id = next(self._ids)
        self._markers[marker_id] = PlacedMarker(marker_id=marker_id, position=position, icon=icon)
        return marker_id

    def move_marker(self, marker: MarkerRef, position: LatLng) -> None:
        placed = self._markers.get(marker)  # type: ignore[call-overload]
        if placed is None:
            raise KeyError(f"Unknown marker {marker!r}")
        self._markers[placed.marker_id] = PlacedMarker(marker_id=placed.marker_id, position=position, icon=placed.icon)

    def remove_marker(self, marker: MarkerRef) -> None:
        self._markers.pop(marker, None)  # type: ignore[call-overload]

    def marker(self, marker: MarkerRef) -> PlacedMarker | None:
        return self._markers.get(marker)  # type: ignore[call-overload]

    def visible_markers(self) -> list[PlacedMarker]:
        return list(self._markers.values())
