"""Custom exception hierarchy for routetrack."""

from __future__ import annotations


class RouteTrackError(Exception):
    """Base exception for all routetrack errors."""


class RouteTrackConfigError(RouteTrackError):
    """Invalid or missing configuration."""


class RouteTrackTransportError(RouteTrackError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class RouteTrackChannelError(RouteTrackError):
    """Realtime channel could not connect or deliver an outbound event."""


class RouteAlreadyTrackedError(RouteTrackError):
    """A route is already being tracked on the map.

    Raised by :meth:`MapController.add_route` when a second add for the
    same route id arrives before the first session has been removed.
    The orchestrator uses the non-raising ``try_add_route`` instead and
    turns the outcome into a warning notice.
    """

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"Route {route_id!r} is already being tracked")


class RouteNotFoundError(RouteTrackError):
    """The route id is not present in the loaded route catalog."""

    def __init__(self, route_id: str) -> None:
        self.route_id = route_id
        super().__init__(f"Route {route_id!r} not found in catalog")
