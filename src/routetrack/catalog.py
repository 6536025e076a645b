"""Route catalog loaded once from the backend listing."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError

from routetrack._transport import Transport
from routetrack.exceptions import RouteNotFoundError, RouteTrackTransportError
from routetrack.models.route import Route

_logger = logging.getLogger(__name__)

ROUTES_ENDPOINT = "/routes"


def parse_route_listing(payload: Any) -> list[Route]:
    """Parse a ``GET /routes`` body into routes.

    Entries that fail validation are skipped; a body that is not a JSON
    array is a transport-level error.
    """
    if not isinstance(payload, list):
        raise RouteTrackTransportError(
            "Route listing is not a JSON array",
            endpoint=ROUTES_ENDPOINT,
        )
    routes: list[Route] = []
    for index, item in enumerate(payload):
        try:
            routes.append(Route.model_validate(item))
        except ValidationError as exc:
            _logger.warning("Skipping invalid route entry #%d: %s", index, exc.errors(include_url=False))
    return routes


class RouteCatalog:
    """Immutable-per-fetch list of available routes.

    The catalog is either *not yet loaded* or *loaded*; a successful
    :meth:`load` replaces the whole content at once.
    """

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def load(self, transport: Transport) -> list[Route]:
        """Fetch the listing and replace the catalog content."""
        payload = await transport.get_json(ROUTES_ENDPOINT)
        routes = parse_route_listing(payload)
        self.replace(routes)
        _logger.info("Route catalog loaded with %d route(s)", len(routes))
        return routes

    def replace(self, routes: list[Route]) -> None:
        by_id: dict[str, Route] = {}
        for route in routes:
            if route.id in by_id:
                _logger.warning("Duplicate route id %s in listing; keeping the first entry", route.id)
                continue
            by_id[route.id] = route
        self._routes = by_id
        self._loaded = True

    def find(self, route_id: str) -> Route | None:
        return self._routes.get(route_id)

    def get(self, route_id: str) -> Route:
        """Return the route or raise :class:`RouteNotFoundError`."""
        route = self._routes.get(route_id)
        if route is None:
            raise RouteNotFoundError(route_id)
        return route

    def title_for(self, route_id: str) -> str:
        """Display title for a route, falling back to its id."""
        route = self._routes.get(route_id)
        return route.title if route is not None else route_id

    @property
    def routes(self) -> list[Route]:
        return list(self._routes.values())

    def __iter__(self) -> Iterator[Route]:
        return iter(list(self._routes.values()))

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, route_id: object) -> bool:
        return route_id in self._routes
