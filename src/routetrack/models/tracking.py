"""Tracked route records.

The "not tracked" state has no record: a route is tracked exactly while the
map controller holds a :class:`TrackedRoute` for its id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from routetrack.models.geo import LatLng
from routetrack.models.marker import MarkerRef


class TrackingState(StrEnum):
    ACTIVE = "active"


@dataclass
class TrackedRoute:
    """Live tracking record, owned and mutated only by the map controller."""

    route_id: str
    color: str
    current_marker: MarkerRef
    end_marker: MarkerRef
    current_position: LatLng
    end_position: LatLng
    started_at: datetime
    updated_at: datetime
    state: TrackingState = TrackingState.ACTIVE

    def view(self) -> TrackedRouteView:
        return TrackedRouteView(
            route_id=self.route_id,
            color=self.color,
            current_position=self.current_position,
            end_position=self.end_position,
            started_at=self.started_at,
            updated_at=self.updated_at,
            state=self.state,
        )


@dataclass(frozen=True)
class TrackedRouteView:
    """Read-only snapshot of a :class:`TrackedRoute` handed to callers."""

    route_id: str
    color: str
    current_position: LatLng
    end_position: LatLng
    started_at: datetime
    updated_at: datetime
    state: TrackingState
