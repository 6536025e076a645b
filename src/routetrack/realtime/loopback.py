"""In-process realtime channel."""

from __future__ import annotations

import logging
from typing import Any

from routetrack.exceptions import RouteTrackChannelError
from routetrack.models.notifications import StartCommand
from routetrack.realtime.channel import ErrorHandler, PositionHandler

_logger = logging.getLogger(__name__)


class LoopbackChannel:
    """Channel that records outbound commands and lets callers inject inbound payloads.

    Useful for tests and for driving the tracker without a broker.
    """

    def __init__(self) -> None:
        self._connected = False
        self._handler: PositionHandler | None = None
        self._error_handler: ErrorHandler | None = None
        self.sent: list[dict[str, Any]] = []

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    async def close(self) -> None:
        self._connected = False

    async def emit_start(self, command: StartCommand) -> None:
        if not self._connected:
            raise RouteTrackChannelError("Loopback channel is not connected")
        payload = command.to_payload()
        _logger.debug("Loopback emit new-direction %s", payload)
        self.sent.append(payload)

    def on_position(self, handler: PositionHandler | None) -> None:
        self._handler = handler

    def on_error(self, handler: ErrorHandler | None) -> None:
        self._error_handler = handler

    def deliver(self, payload: Any) -> None:
        """Hand an inbound ``new-position`` payload to the registered handler."""
        if self._handler is None:
            _logger.debug("Loopback payload dropped, no handler registered")
            return
        self._handler(payload)

    def fail(self, message: str) -> None:
        """Drop the connection and report ``message`` to the registered error handler."""
        self._connected = False
        if self._error_handler is not None:
            self._error_handler(RouteTrackChannelError(message))
