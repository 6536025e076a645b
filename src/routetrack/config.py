"""Client configuration for routetrack."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from routetrack.exceptions import RouteTrackConfigError
from routetrack.map.icons import is_hex_color
from routetrack.models.geo import LatLng

#: Marker colors offered to newly started routes.
DEFAULT_PALETTE: tuple[str, ...] = (
    "#b71c1c",
    "#4a148c",
    "#2e7d32",
    "#e65100",
    "#2962ff",
    "#c2185b",
    "#FFCD00",
    "#3e2723",
    "#03a9f4",
    "#827717",
)


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class TrackerConfig:
    """Tracker configuration.

    Parameters
    ----------
    base_url : str
        Backend base URL. The route listing is read from ``{base_url}/routes``.
    request_timeout : float
        Total timeout in seconds for the route listing request.
    mqtt_host : str
        Realtime broker host.
    mqtt_port : int
        Realtime broker port.
    mqtt_topic_prefix : str
        Prefix for the ``new-direction`` / ``new-position`` topics.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    mqtt_tls : bool
        Use TLS towards the broker.
    mqtt_username : str or None
        Optional broker username.
    mqtt_password : str or None
        Optional broker password.
    map_zoom : int
        Initial map zoom level.
    default_center : LatLng
        Map center used by the static geolocator when no position is known.
    palette : tuple of str
        Marker colors offered to newly started routes.
    """

    base_url: str = "http://localhost:3000"
    request_timeout: float = 10.0
    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_topic_prefix: str = "routetrack"
    mqtt_keepalive: int = 60
    mqtt_tls: bool = False
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    map_zoom: int = 15
    default_center: LatLng = dataclasses.field(default_factory=lambda: LatLng(lat=0.0, lng=0.0))
    palette: tuple[str, ...] = DEFAULT_PALETTE

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise RouteTrackConfigError("base_url must be non-empty")
        # Normalise away the trailing slash so "{base_url}/routes" stays clean.
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        if self.request_timeout <= 0:
            raise RouteTrackConfigError("request_timeout must be positive")
        if not 0 < self.mqtt_port < 65536:
            raise RouteTrackConfigError(f"mqtt_port out of range: {self.mqtt_port}")
        if self.map_zoom <= 0:
            raise RouteTrackConfigError("map_zoom must be positive")
        if not self.palette:
            raise RouteTrackConfigError("palette must contain at least one color")
        invalid = [color for color in self.palette if not is_hex_color(color)]
        if invalid:
            raise RouteTrackConfigError(f"palette entries must be hex colors: {invalid}")
        object.__setattr__(self, "mqtt_topic_prefix", self.mqtt_topic_prefix.strip("/"))

    @property
    def routes_url(self) -> str:
        return f"{self.base_url}/routes"

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackerConfig:
        """Create configuration from environment variables.

        Reads optional ``ROUTETRACK_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        TrackerConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "ROUTETRACK_BASE_URL": "base_url",
            "ROUTETRACK_MQTT_HOST": "mqtt_host",
            "ROUTETRACK_MQTT_TOPIC_PREFIX": "mqtt_topic_prefix",
            "ROUTETRACK_MQTT_USERNAME": "mqtt_username",
            "ROUTETRACK_MQTT_PASSWORD": "mqtt_password",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        try:
            timeout_env = env.get("ROUTETRACK_REQUEST_TIMEOUT")
            if timeout_env is not None:
                config_kwargs["request_timeout"] = float(timeout_env)

            port_env = env.get("ROUTETRACK_MQTT_PORT")
            if port_env is not None:
                config_kwargs["mqtt_port"] = int(port_env)

            keepalive_env = env.get("ROUTETRACK_MQTT_KEEPALIVE")
            if keepalive_env is not None:
                config_kwargs["mqtt_keepalive"] = int(keepalive_env)

            zoom_env = env.get("ROUTETRACK_MAP_ZOOM")
            if zoom_env is not None:
                config_kwargs["map_zoom"] = int(zoom_env)

            lat_env = env.get("ROUTETRACK_CENTER_LAT")
            lng_env = env.get("ROUTETRACK_CENTER_LNG")
            if lat_env is not None and lng_env is not None:
                config_kwargs["default_center"] = LatLng(lat=float(lat_env), lng=float(lng_env))
        except ValueError as exc:
            raise RouteTrackConfigError(f"Invalid numeric environment value: {exc}") from exc

        palette_env = env.get("ROUTETRACK_PALETTE")
        if palette_env is not None:
            config_kwargs["palette"] = tuple(c.strip() for c in palette_env.split(",") if c.strip())

        config_kwargs["mqtt_tls"] = _env_bool(env.get("ROUTETRACK_MQTT_TLS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
