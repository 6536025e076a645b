"""routetrack - Async client-side tracker for live vehicle routes."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("routetrack")
except PackageNotFoundError:
    __version__ = "0+local"
from routetrack.catalog import RouteCatalog
from routetrack.colors import ColorAllocator
from routetrack.config import DEFAULT_PALETTE, TrackerConfig
from routetrack.exceptions import (
    RouteAlreadyTrackedError,
    RouteNotFoundError,
    RouteTrackChannelError,
    RouteTrackConfigError,
    RouteTrackError,
    RouteTrackTransportError,
)
from routetrack.geolocation import Geolocator, StaticGeolocator
from routetrack.map import (
    AddRouteOptions,
    InMemoryMapSurface,
    MapController,
    MapSurface,
    RouteAdded,
    RouteAlreadyTracked,
)
from routetrack.models import (
    LatLng,
    MarkerIcon,
    PositionNotification,
    Route,
    StartCommand,
    TrackedRouteView,
    TrackingState,
)
from routetrack.notify import LoggingNotifier, Notice, NoticeLevel, Notifier, RecordingNotifier
from routetrack.orchestrator import StartOutcome, TrackingOrchestrator
from routetrack.realtime import LoopbackChannel, MqttRealtimeChannel, RealtimeChannel
from routetrack.service import TrackingService

__all__ = [
    "__version__",
    "AddRouteOptions",
    "ColorAllocator",
    "DEFAULT_PALETTE",
    "Geolocator",
    "InMemoryMapSurface",
    "LatLng",
    "LoggingNotifier",
    "LoopbackChannel",
    "MapController",
    "MapSurface",
    "MarkerIcon",
    "MqttRealtimeChannel",
    "Notice",
    "NoticeLevel",
    "Notifier",
    "PositionNotification",
    "RealtimeChannel",
    "RecordingNotifier",
    "Route",
    "RouteAdded",
    "RouteAlreadyTracked",
    "RouteAlreadyTrackedError",
    "RouteCatalog",
    "RouteNotFoundError",
    "RouteTrackChannelError",
    "RouteTrackConfigError",
    "RouteTrackError",
    "RouteTrackTransportError",
    "StartCommand",
    "StartOutcome",
    "StaticGeolocator",
    "TrackedRouteView",
    "TrackingOrchestrator",
    "TrackingService",
    "TrackingState",
]
