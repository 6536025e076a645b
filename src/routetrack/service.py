"""Process-scoped tracking service.

Wires the catalog, map controller, realtime channel and orchestrator
together with an explicit lifecycle independent of any UI.
"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from routetrack._transport import HttpTransport, Transport
from routetrack.catalog import RouteCatalog
from routetrack.colors import ColorAllocator
from routetrack.config import TrackerConfig
from routetrack.exceptions import RouteTrackChannelError, RouteTrackError, RouteTrackTransportError
from routetrack.geolocation import Geolocator, StaticGeolocator
from routetrack.map.controller import MapController
from routetrack.map.surface import InMemoryMapSurface, MapSurface
from routetrack.notify import LoggingNotifier, Notice, NoticeLevel, Notifier
from routetrack.orchestrator import StartOutcome, TrackingOrchestrator
from routetrack.realtime.channel import RealtimeChannel
from routetrack.realtime.mqtt import MqttRealtimeChannel

_logger = logging.getLogger(__name__)


class TrackingService:
    """Live route tracker.

    Usage::

        async with TrackingService(config) as service:
            await service.start_tracking(route_id)

    ``start`` loads the route catalog once, connects the realtime channel and
    centers the map on the operator's position. ``stop`` releases the channel
    and clears every tracked route.
    """

    def __init__(
        self,
        config: TrackerConfig,
        *,
        channel: RealtimeChannel | None = None,
        surface: MapSurface | None = None,
        geolocator: Geolocator | None = None,
        notifier: Notifier | None = None,
        transport: Transport | None = None,
        session: aiohttp.ClientSession | None = None,
        colors: ColorAllocator | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._channel: RealtimeChannel = channel if channel is not None else MqttRealtimeChannel(config)
        self._geolocator: Geolocator = geolocator or StaticGeolocator(config.default_center)
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._catalog = RouteCatalog()
        self._controller = MapController(surface if surface is not None else InMemoryMapSurface())
        self._orchestrator = TrackingOrchestrator(
            catalog=self._catalog,
            controller=self._controller,
            channel=self._channel,
            notifier=self._notifier,
            colors=colors or ColorAllocator(config.palette),
        )
        self._started = False

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TrackingService:
        try:
            await self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    async def start(self) -> None:
        """Load the catalog, connect the channel and create the map view."""
        transport = self._require_transport()

        try:
            await self._catalog.load(transport)
        except RouteTrackTransportError as exc:
            self._notifier.notify(Notice(f"Could not load routes: {exc}", NoticeLevel.ERROR))
            raise

        self._channel.on_position(self._orchestrator.handle_position_payload)
        self._channel.on_error(self._on_channel_error)
        try:
            await self._channel.connect()
        except RouteTrackChannelError as exc:
            self._notifier.notify(Notice(f"Realtime connection failed: {exc}", NoticeLevel.ERROR))
            raise
        _logger.info("Realtime channel connected")

        try:
            center = await self._geolocator.current_position(enable_high_accuracy=True)
        except RouteTrackError:
            _logger.warning("Geolocation unavailable, centering map on default", exc_info=True)
            center = self._config.default_center
        self._controller.create_view(center, self._config.map_zoom)
        self._started = True

    async def stop(self) -> None:
        """Release the channel and clear tracked routes. Safe to call twice."""
        self._started = False
        self._channel.on_position(None)
        self._channel.on_error(None)
        try:
            await self._channel.close()
        finally:
            self._controller.clear()
            if not self._external_session and self._http_session is not None:
                await self._http_session.close()
                self._http_session = None
                self._transport = None

    def _on_channel_error(self, error: RouteTrackChannelError) -> None:
        _logger.warning("Realtime channel failure: %s", error)
        self._notifier.notify(Notice(f"Realtime connection failed: {error}", NoticeLevel.ERROR))

    def _require_transport(self) -> Transport:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self._transport

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def start_tracking(self, route_id: str) -> StartOutcome:
        if not self._started:
            raise RouteTrackError("Service not started. Use 'async with TrackingService(...) as service:'")
        return await self._orchestrator.start_tracking(route_id)

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def catalog(self) -> RouteCatalog:
        return self._catalog

    @property
    def controller(self) -> MapController:
        return self._controller

    @property
    def orchestrator(self) -> TrackingOrchestrator:
        return self._orchestrator

    @property
    def channel(self) -> RealtimeChannel:
        return self._channel
