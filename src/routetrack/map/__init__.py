"""Map layer: marker icons, the map surface boundary and the route controller."""

from routetrack.map.controller import (
    AddRouteOptions,
    AddRouteOutcome,
    MapController,
    RouteAdded,
    RouteAlreadyTracked,
)
from routetrack.map.icons import make_car_icon, make_pin_icon
from routetrack.map.surface import InMemoryMapSurface, MapSurface, PlacedMarker

__all__ = [
    "AddRouteOptions",
    "AddRouteOutcome",
    "InMemoryMapSurface",
    "MapController",
    "MapSurface",
    "PlacedMarker",
    "RouteAdded",
    "RouteAlreadyTracked",
    "make_car_icon",
    "make_pin_icon",
]
