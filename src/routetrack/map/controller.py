"""Map controller: the registry of currently tracked routes.

State representation
--------------------
A route is tracked exactly while ``MapController`` holds an entry for its id.
There is no "inactive" record and no separate state enum that could drift from
the mapping: adding inserts the entry, removing deletes it, and every operation
keyed by an id that has no entry is a no-op (except ``add``). This keeps the
controller idempotent under any ordering of start/move/finish events.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from routetrack.exceptions import RouteAlreadyTrackedError
from routetrack.map.icons import make_car_icon, make_pin_icon
from routetrack.map.surface import MapSurface
from routetrack.models.geo import LatLng
from routetrack.models.tracking import TrackedRoute, TrackedRouteView

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class AddRouteOptions:
    color_seed: str
    start_position: LatLng
    end_position: LatLng


@dataclass(frozen=True)
class RouteAdded:
    """Successful add: the route is now tracked."""

    route: TrackedRouteView


@dataclass(frozen=True)
class RouteAlreadyTracked:
    """Rejected add: a tracking session for the id is still active."""

    route_id: str


AddRouteOutcome = RouteAdded | RouteAlreadyTracked


class MapController:
    """Owns the ``route_id -> TrackedRoute`` mapping and the markers on the map.

    Callers only ever get :class:`TrackedRouteView` snapshots back; the
    mutable entries never leave this class.
    """

    def __init__(self, surface: MapSurface, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._surface = surface
        self._clock = clock
        self._routes: dict[str, TrackedRoute] = {}

    @property
    def surface(self) -> MapSurface:
        return self._surface

    def create_view(self, center: LatLng, zoom: int) -> None:
        self._surface.create_view(center, zoom)

    def try_add_route(self, route_id: str, options: AddRouteOptions) -> AddRouteOutcome:
        """Start tracking ``route_id`` unless it is already tracked."""
        if route_id in self._routes:
            _logger.debug("Route %s already tracked; add rejected", route_id)
            return RouteAlreadyTracked(route_id=route_id)

        car_icon = make_car_icon(options.color_seed)
        pin_icon = make_pin_icon(options.color_seed)
        current_marker = self._surface.place_marker(options.start_position, car_icon)
        try:
            end_marker = self._surface.place_marker(options.end_position, pin_icon)
        except Exception:
            self._surface.remove_marker(current_marker)
            raise

        now = self._clock()
        entry = TrackedRoute(
            route_id=route_id,
            color=options.color_seed,
            current_marker=current_marker,
            end_marker=end_marker,
            current_position=options.start_position,
            end_position=options.end_position,
            started_at=now,
            updated_at=now,
        )
        self._routes[route_id] = entry
        _logger.debug("Route %s added color=%s start=%s", route_id, options.color_seed, options.start_position)
        return RouteAdded(route=entry.view())

    def add_route(self, route_id: str, options: AddRouteOptions) -> TrackedRouteView:
        """Like :meth:`try_add_route` but raises on the duplicate case.

        Raises
        ------
        RouteAlreadyTrackedError
            A tracking session for ``route_id`` is still active.
        """
        outcome = self.try_add_route(route_id, options)
        if isinstance(outcome, RouteAlreadyTracked):
            raise RouteAlreadyTrackedError(route_id)
        return outcome.route

    def move_current_marker(self, route_id: str, position: LatLng) -> bool:
        """Relocate the current-position marker; no-op for untracked ids."""
        entry = self._routes.get(route_id)
        if entry is None:
            _logger.debug("Ignoring move for untracked route %s", route_id)
            return False
        self._surface.move_marker(entry.current_marker, position)
        entry.current_position = position
        entry.updated_at = self._clock()
        _logger.debug("Route %s moved to %s", route_id, position)
        return True

    def remove_route(self, route_id: str) -> bool:
        """Remove both markers and forget the route; no-op for untracked ids."""
        entry = self._routes.pop(route_id, None)
        if entry is None:
            return False
        self._surface.remove_marker(entry.current_marker)
        self._surface.remove_marker(entry.end_marker)
        _logger.debug("Route %s removed", route_id)
        return True

    def clear(self) -> None:
        for route_id in list(self._routes):
            self.remove_route(route_id)

    def is_tracking(self, route_id: str) -> bool:
        return route_id in self._routes

    def get(self, route_id: str) -> TrackedRouteView | None:
        entry = self._routes.get(route_id)
        return entry.view() if entry is not None else None

    def tracked_route_ids(self) -> list[str]:
        return list(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, route_id: object) -> bool:
        return route_id in self._routes
