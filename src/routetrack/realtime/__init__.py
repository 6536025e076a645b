"""Realtime channel contract and its adapters."""

from routetrack.realtime.channel import (
    NEW_DIRECTION_EVENT,
    NEW_POSITION_EVENT,
    ErrorHandler,
    PositionHandler,
    RealtimeChannel,
)
from routetrack.realtime.loopback import LoopbackChannel
from routetrack.realtime.mqtt import MqttRealtimeChannel

__all__ = [
    "ErrorHandler",
    "LoopbackChannel",
    "MqttRealtimeChannel",
    "NEW_DIRECTION_EVENT",
    "NEW_POSITION_EVENT",
    "PositionHandler",
    "RealtimeChannel",
]
