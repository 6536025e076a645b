"""MQTT realtime channel.

Runs the paho-mqtt network loop in its own thread and re-dispatches every
inbound payload onto the asyncio loop via ``call_soon_threadsafe``, so all
tracking logic runs on the loop thread only.
"""

from __future__ import annotations

import asyncio
import json
import logging
import secrets
from typing import Any, cast

import paho.mqtt.client as mqtt

from routetrack.config import TrackerConfig
from routetrack.exceptions import RouteTrackChannelError
from routetrack.models.notifications import StartCommand
from routetrack.realtime.channel import (
    NEW_DIRECTION_EVENT,
    NEW_POSITION_EVENT,
    ErrorHandler,
    PositionHandler,
)


def decode_message_payload(payload: bytes) -> Any:
    """Decode an MQTT payload as UTF-8 JSON."""
    return json.loads(payload.decode("utf-8"))


def topic_for(prefix: str, event: str) -> str:
    return f"{prefix}/{event}" if prefix else event


class MqttRealtimeChannel:
    """Realtime channel carried over MQTT topics.

    Topics are ``{prefix}/new-direction`` (published) and
    ``{prefix}/new-position`` (subscribed).
    """

    def __init__(
        self,
        config: TrackerConfig,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._loop = loop
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._handler: PositionHandler | None = None
        self._error_handler: ErrorHandler | None = None
        self._refused = False
        self.direction_topic = topic_for(config.mqtt_topic_prefix, NEW_DIRECTION_EVENT)
        self.position_topic = topic_for(config.mqtt_topic_prefix, NEW_POSITION_EVENT)

    @property
    def is_connected(self) -> bool:
        return self._running and not self._refused

    def on_position(self, handler: PositionHandler | None) -> None:
        self._handler = handler

    def on_error(self, handler: ErrorHandler | None) -> None:
        self._error_handler = handler

    async def connect(self) -> None:
        """Connect to the broker and subscribe to position updates."""
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        try:
            await self._loop.run_in_executor(None, self._start)
        except (OSError, ValueError) as exc:
            raise RouteTrackChannelError(
                f"MQTT connect to {self._config.mqtt_host}:{self._config.mqtt_port} failed: {exc}"
            ) from exc

    async def close(self) -> None:
        loop = self._loop or asyncio.get_running_loop()
        await loop.run_in_executor(None, self._stop)

    async def emit_start(self, command: StartCommand) -> None:
        client = self._client
        if client is None or not self.is_connected:
            raise RouteTrackChannelError("MQTT channel is not connected")
        body = json.dumps(command.to_payload(), separators=(",", ":"))
        self._logger.debug("MQTT publish topic=%s payload=%s", self.direction_topic, body)
        info = client.publish(self.direction_topic, body, qos=1)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise RouteTrackChannelError(f"MQTT publish failed: {mqtt.error_string(info.rc)}")

    def _start(self) -> None:
        self._stop()
        self._refused = False
        config = self._config
        client_id = f"routetrack-{secrets.token_hex(4)}"
        self._logger.debug(
            "MQTT start requested host=%s port=%s topic=%s client_id=%s",
            config.mqtt_host,
            config.mqtt_port,
            self.position_topic,
            client_id,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=client_id,
            protocol=mqtt.MQTTv311,
        )
        client.enable_logger(self._logger)
        if config.mqtt_username:
            client.username_pw_set(config.mqtt_username, config.mqtt_password)
        if config.mqtt_tls:
            client.tls_set()

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            self._handle_connack(c, reason_code)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self._handle_message(msg.topic, msg.payload)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        client.connect(config.mqtt_host, config.mqtt_port, keepalive=config.mqtt_keepalive)
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def _stop(self) -> None:
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def _handle_message(self, topic: str, payload: bytes) -> None:
        """Decode in the network thread, dispatch on the event loop."""
        if topic != self.position_topic:
            return
        try:
            decoded = decode_message_payload(payload)
        except (UnicodeDecodeError, json.JSONDecodeError):
            self._logger.debug("MQTT payload decode failure topic=%s", topic, exc_info=True)
            return
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._dispatch, decoded)

    def _dispatch(self, payload: Any) -> None:
        handler = self._handler
        if handler is None:
            self._logger.debug("MQTT position payload dropped, no handler registered")
            return
        handler(payload)

    def _handle_connack(self, client: mqtt.Client, reason_code: Any) -> None:
        """Subscribe on acceptance; report a refusal once until the broker accepts again."""
        if reason_code.value == 0:
            self._refused = False
            self._logger.debug("MQTT connected, subscribing topic=%s", self.position_topic)
            client.subscribe(self.position_topic, qos=0)
            return

        self._logger.warning("MQTT connect refused: %s", reason_code)
        if self._refused:
            return
        self._refused = True
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        error = RouteTrackChannelError(f"MQTT broker refused connection: {reason_code}")
        loop.call_soon_threadsafe(self._report_error, error)

    def _report_error(self, error: RouteTrackChannelError) -> None:
        handler = self._error_handler
        if handler is None:
            return
        handler(error)
