"""Realtime channel contract.

Outbound, ``new-direction`` asks the server to start a route:
``{"routeId": "..."}``.  Inbound, ``new-position`` reports progress:
``{"routeId": "...", "position": [lat, lng], "finished": false}``.

Channels guarantee neither ordering across routes nor exactly-once delivery.
Inbound payloads are handed to the registered handler undecoded beyond JSON;
validating them is the consumer's job.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from routetrack.exceptions import RouteTrackChannelError
from routetrack.models.notifications import StartCommand

NEW_DIRECTION_EVENT = "new-direction"
NEW_POSITION_EVENT = "new-position"

PositionHandler = Callable[[Any], None]
ErrorHandler = Callable[[RouteTrackChannelError], None]


class RealtimeChannel(Protocol):
    """Bidirectional event stream between the tracker and the server."""

    @property
    def is_connected(self) -> bool:
        ...

    async def connect(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def emit_start(self, command: StartCommand) -> None:
        ...

    def on_position(self, handler: PositionHandler | None) -> None:
        ...

    def on_error(self, handler: ErrorHandler | None) -> None:
        """Register a callback for failures detected after :meth:`connect` returned."""
        ...
