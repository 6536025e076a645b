from __future__ import annotations

import json
import logging
import random

import pytest

from routetrack.catalog import RouteCatalog
from routetrack.colors import ColorAllocator
from routetrack.exceptions import RouteNotFoundError, RouteTrackChannelError
from routetrack.map import InMemoryMapSurface, MapController
from routetrack.models import LatLng, PositionNotification, Route, StartCommand
from routetrack.notify import NoticeLevel, RecordingNotifier
from routetrack.orchestrator import StartOutcome, TrackingOrchestrator
from routetrack.realtime import LoopbackChannel


class _FailingChannel(LoopbackChannel):
    async def emit_start(self, command: StartCommand) -> None:
        raise RouteTrackChannelError("broker gone")


def _catalog() -> RouteCatalog:
    catalog = RouteCatalog()
    catalog.replace(
        [
            Route.model_validate(
                {
                    "_id": "A",
                    "title": "Trip A",
                    "startPosition": {"lat": 1, "lng": 1},
                    "endPosition": {"lat": 2, "lng": 2},
                }
            ),
            Route.model_validate(
                {
                    "_id": "B",
                    "title": "Trip B",
                    "startPosition": {"lat": 5, "lng": 5},
                    "endPosition": {"lat": 6, "lng": 6},
                }
            ),
        ]
    )
    return catalog


async def _setup(
    channel: LoopbackChannel | None = None,
) -> tuple[TrackingOrchestrator, MapController, InMemoryMapSurface, LoopbackChannel, RecordingNotifier]:
    surface = InMemoryMapSurface()
    controller = MapController(surface)
    channel = channel or LoopbackChannel()
    notifier = RecordingNotifier()
    orchestrator = TrackingOrchestrator(
        catalog=_catalog(),
        controller=controller,
        channel=channel,
        notifier=notifier,
        colors=ColorAllocator(rng=random.Random(7)),
    )
    channel.on_position(orchestrator.handle_position_payload)
    await channel.connect()
    return orchestrator, controller, surface, channel, notifier


def _car_position(surface: InMemoryMapSurface) -> LatLng:
    (car,) = [m for m in surface.visible_markers() if m.icon.kind == "car"]
    return car.position


@pytest.mark.asyncio
async def test_full_trip_scenario() -> None:
    orchestrator, controller, surface, channel, notifier = await _setup()

    outcome = await orchestrator.start_tracking("A")

    assert outcome is StartOutcome.STARTED
    assert channel.sent == [{"routeId": "A"}]
    assert _car_position(surface) == LatLng(lat=1, lng=1)

    channel.deliver({"routeId": "A", "position": [1.5, 1.5], "finished": False})
    assert _car_position(surface) == LatLng(lat=1.5, lng=1.5)

    channel.deliver({"routeId": "A", "position": [2, 2], "finished": True})
    assert not controller.is_tracking("A")
    assert surface.visible_markers() == []
    assert notifier.messages(NoticeLevel.SUCCESS) == ["Trip A finished!"]


@pytest.mark.asyncio
async def test_duplicate_start_warns_and_emits_nothing() -> None:
    orchestrator, controller, _surface, channel, notifier = await _setup()
    await orchestrator.start_tracking("A")

    outcome = await orchestrator.start_tracking("A")

    assert outcome is StartOutcome.ALREADY_TRACKED
    assert channel.sent == [{"routeId": "A"}]
    assert controller.tracked_route_ids() == ["A"]
    assert notifier.messages(NoticeLevel.WARNING) == ["Trip A already added, wait for it to finish."]


@pytest.mark.asyncio
async def test_restart_after_finish_is_accepted() -> None:
    orchestrator, _controller, _surface, channel, _notifier = await _setup()
    await orchestrator.start_tracking("A")
    channel.deliver({"routeId": "A", "position": [2, 2], "finished": True})

    outcome = await orchestrator.start_tracking("A")

    assert outcome is StartOutcome.STARTED
    assert channel.sent == [{"routeId": "A"}, {"routeId": "A"}]


@pytest.mark.asyncio
async def test_unknown_route_raises_without_mutation() -> None:
    orchestrator, controller, surface, channel, notifier = await _setup()

    with pytest.raises(RouteNotFoundError) as exc_info:
        await orchestrator.start_tracking("missing")

    assert exc_info.value.route_id == "missing"
    assert len(controller) == 0
    assert surface.visible_markers() == []
    assert channel.sent == []
    assert notifier.messages(NoticeLevel.ERROR) == ["Route missing is not available."]


@pytest.mark.asyncio
async def test_emit_failure_rolls_back_the_add() -> None:
    orchestrator, controller, surface, _channel, notifier = await _setup(_FailingChannel())

    with pytest.raises(RouteTrackChannelError):
        await orchestrator.start_tracking("A")

    assert not controller.is_tracking("A")
    assert surface.visible_markers() == []
    assert len(notifier.messages(NoticeLevel.ERROR)) == 1


@pytest.mark.asyncio
async def test_finish_for_untracked_route_is_silent() -> None:
    orchestrator, controller, surface, _channel, notifier = await _setup()

    orchestrator.on_position_notification(
        PositionNotification(route_id="A", position=LatLng(lat=2, lng=2), finished=True)
    )

    assert len(controller) == 0
    assert surface.visible_markers() == []
    assert notifier.notices == []


@pytest.mark.asyncio
async def test_late_and_duplicate_events_after_finish_are_inert() -> None:
    orchestrator, controller, surface, channel, notifier = await _setup()
    await orchestrator.start_tracking("A")

    channel.deliver({"routeId": "A", "position": [2, 2], "finished": True})
    channel.deliver({"routeId": "A", "position": [2, 2], "finished": True})
    channel.deliver({"routeId": "A", "position": [1.2, 1.2], "finished": False})

    assert not controller.is_tracking("A")
    assert surface.visible_markers() == []
    assert notifier.messages(NoticeLevel.SUCCESS) == ["Trip A finished!"]


@pytest.mark.asyncio
async def test_routes_are_tracked_independently() -> None:
    orchestrator, controller, _surface, channel, _notifier = await _setup()
    await orchestrator.start_tracking("A")
    await orchestrator.start_tracking("B")

    channel.deliver({"routeId": "B", "position": [6, 6], "finished": True})
    channel.deliver({"routeId": "A", "position": [1.1, 1.1], "finished": False})

    assert controller.tracked_route_ids() == ["A"]
    view = controller.get("A")
    assert view is not None
    assert view.current_position == LatLng(lat=1.1, lng=1.1)


@pytest.mark.asyncio
async def test_finish_title_falls_back_to_route_id() -> None:
    orchestrator, controller, _surface, _channel, notifier = await _setup()
    await orchestrator.start_tracking("A")
    # Catalog reloaded without "A" while the trip is in flight.
    orchestrator._catalog.replace([])  # noqa: SLF001

    orchestrator.on_position_notification(
        PositionNotification(route_id="A", position=LatLng(lat=2, lng=2), finished=True)
    )

    assert notifier.messages(NoticeLevel.SUCCESS) == ["A finished!"]
    assert not controller.is_tracking("A")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        None,
        "new-position",
        [1, 2],
        {},
        {"routeId": "A"},
        {"routeId": "A", "position": [1], "finished": False},
        {"routeId": "A", "position": [1, 2], "finished": None},
        json.loads('{"routeId": "A", "position": [1' + "0" * 400 + ', 1], "finished": false}'),
        {"routeId": "A", "position": [123.0, 1.0], "finished": False},
    ],
)
async def test_malformed_payloads_are_discarded(payload: object) -> None:
    orchestrator, controller, surface, channel, _notifier = await _setup()
    await orchestrator.start_tracking("A")
    before = surface.visible_markers()

    channel.deliver(payload)

    assert controller.tracked_route_ids() == ["A"]
    assert surface.visible_markers() == before


@pytest.mark.asyncio
async def test_handler_swallows_unexpected_errors(
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    orchestrator, _controller, surface, channel, _notifier = await _setup()
    await orchestrator.start_tracking("A")

    def _boom(*_args: object) -> None:
        raise RuntimeError("renderer crashed")

    monkeypatch.setattr(surface, "move_marker", _boom)

    with caplog.at_level(logging.ERROR, logger="routetrack.orchestrator"):
        channel.deliver({"routeId": "A", "position": [1.5, 1.5], "finished": False})

    assert "Position update for route A failed" in caplog.text
