"""Realtime channel payload models.

``new-direction`` (client to server) carries a :class:`StartCommand`;
``new-position`` (server to client) carries a :class:`PositionNotification`.
"""

from __future__ import annotations

from typing import Any

from pydantic import StrictBool, field_validator

from routetrack.models._base import RouteTrackBaseModel
from routetrack.models.geo import LatLng


class StartCommand(RouteTrackBaseModel):
    """Request the server to start emitting positions for a route."""

    route_id: str

    def to_payload(self) -> dict[str, Any]:
        """Wire form: ``{"routeId": ...}``."""
        return self.model_dump(by_alias=True, exclude={"raw"})


class PositionNotification(RouteTrackBaseModel):
    """A position update for a tracked route.

    ``position`` arrives on the wire as ``[lat, lng]``.  ``finished`` marks
    the last update of the tracking session.
    """

    route_id: str
    position: LatLng
    finished: StrictBool

    @field_validator("route_id")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("routeId must be non-empty")
        return stripped
