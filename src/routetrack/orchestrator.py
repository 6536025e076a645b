"""Tracking session orchestration.

Bridges operator intent and inbound realtime events to the map controller.
All entry points run on the event loop thread; none of them lets an error
escape into the channel's dispatch path.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from routetrack.catalog import RouteCatalog
from routetrack.colors import ColorAllocator
from routetrack.exceptions import RouteNotFoundError, RouteTrackChannelError
from routetrack.map.controller import AddRouteOptions, MapController, RouteAlreadyTracked
from routetrack.models.notifications import PositionNotification, StartCommand
from routetrack.notify import (
    Notice,
    NoticeLevel,
    Notifier,
    route_already_tracked_message,
    route_finished_message,
    route_not_found_message,
)
from routetrack.realtime.channel import RealtimeChannel

_logger = logging.getLogger(__name__)


class StartOutcome(StrEnum):
    STARTED = "started"
    ALREADY_TRACKED = "already_tracked"


class TrackingOrchestrator:
    """Start routes on operator request and apply their position updates.

    Per route: ``Idle -> Active`` when :meth:`start_tracking` succeeds and
    ``Active -> Idle`` on a finished notification. Starting an active route
    is rejected with a warning and sends nothing to the server.
    """

    def __init__(
        self,
        *,
        catalog: RouteCatalog,
        controller: MapController,
        channel: RealtimeChannel,
        notifier: Notifier,
        colors: ColorAllocator,
    ) -> None:
        self._catalog = catalog
        self._controller = controller
        self._channel = channel
        self._notifier = notifier
        self._colors = colors

    async def start_tracking(self, route_id: str) -> StartOutcome:
        """Put ``route_id`` on the map and ask the server to start it.

        Raises
        ------
        RouteNotFoundError
            ``route_id`` is not in the catalog. Nothing is mutated.
        RouteTrackChannelError
            The start command could not be sent. The route is removed again.
        """
        try:
            route = self._catalog.get(route_id)
        except RouteNotFoundError:
            self._notifier.notify(Notice(route_not_found_message(route_id), NoticeLevel.ERROR))
            raise

        options = AddRouteOptions(
            color_seed=self._colors.allocate(),
            start_position=route.start_position,
            end_position=route.end_position,
        )
        outcome = self._controller.try_add_route(route.id, options)
        if isinstance(outcome, RouteAlreadyTracked):
            self._notifier.notify(Notice(route_already_tracked_message(route.title), NoticeLevel.WARNING))
            return StartOutcome.ALREADY_TRACKED

        try:
            await self._channel.emit_start(StartCommand(route_id=route.id))
        except RouteTrackChannelError as exc:
            self._controller.remove_route(route.id)
            self._notifier.notify(Notice(f"Could not start {route.title}: {exc}", NoticeLevel.ERROR))
            raise

        _logger.info("Tracking started for route %s (%s)", route.id, route.title)
        return StartOutcome.STARTED

    def on_position_notification(self, notification: PositionNotification) -> None:
        """Move the route's marker; tear the session down when finished.

        Updates for routes that are not tracked (never started, already
        finished, or from before a restart) change nothing and present
        nothing.
        """
        route_id = notification.route_id
        self._controller.move_current_marker(route_id, notification.position)
        if not notification.finished:
            return
        if not self._controller.is_tracking(route_id):
            _logger.debug("Ignoring finish for untracked route %s", route_id)
            return

        title = self._catalog.title_for(route_id)
        self._notifier.notify(Notice(route_finished_message(title), NoticeLevel.SUCCESS))
        self._controller.remove_route(route_id)
        _logger.info("Tracking finished for route %s (%s)", route_id, title)

    def handle_position_payload(self, payload: Any) -> None:
        """Inbound ``new-position`` handler registered on the channel."""
        try:
            notification = PositionNotification.model_validate(payload)
        except ValidationError as exc:
            _logger.debug(
                "Discarding malformed position payload %r: %s",
                payload,
                exc.errors(include_url=False),
            )
            return

        try:
            self.on_position_notification(notification)
        except Exception:
            # Never raise into the channel's dispatch.
            _logger.exception("Position update for route %s failed", notification.route_id)
