"""Data models for routetrack."""

from routetrack.models._base import RouteTrackBaseModel
from routetrack.models.geo import LatLng
from routetrack.models.marker import MarkerIcon, MarkerRef
from routetrack.models.notifications import PositionNotification, StartCommand
from routetrack.models.route import Route
from routetrack.models.tracking import TrackedRoute, TrackedRouteView, TrackingState

__all__ = [
    "LatLng",
    "MarkerIcon",
    "MarkerRef",
    "PositionNotification",
    "Route",
    "RouteTrackBaseModel",
    "StartCommand",
    "TrackedRoute",
    "TrackedRouteView",
    "TrackingState",
]
