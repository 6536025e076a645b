"""HTTP transport for the route listing backend."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from routetrack.config import TrackerConfig
from routetrack.exceptions import RouteTrackTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the route catalog.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed JSON transport rooted at ``config.base_url``."""

    def __init__(self, config: TrackerConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def get_json(self, endpoint: str) -> Any:
        """GET ``{base_url}{endpoint}`` and return the decoded JSON body."""
        url = f"{self._config.base_url}{endpoint}"
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers={"accept": "application/json"}, timeout=timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise RouteTrackTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except RouteTrackTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise RouteTrackTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise RouteTrackTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
