from __future__ import annotations

from datetime import UTC, datetime

import pytest

from routetrack.exceptions import RouteAlreadyTrackedError
from routetrack.map import (
    AddRouteOptions,
    InMemoryMapSurface,
    MapController,
    RouteAdded,
    RouteAlreadyTracked,
    make_car_icon,
    make_pin_icon,
)
from routetrack.models import LatLng, TrackingState


def _options(color: str = "#2962ff") -> AddRouteOptions:
    return AddRouteOptions(
        color_seed=color,
        start_position=LatLng(lat=1, lng=1),
        end_position=LatLng(lat=2, lng=2),
    )


def _controller() -> tuple[MapController, InMemoryMapSurface]:
    surface = InMemoryMapSurface()
    return MapController(surface, clock=lambda: datetime(2026, 1, 1, tzinfo=UTC)), surface


def test_add_places_car_and_pin_markers() -> None:
    controller, surface = _controller()

    view = controller.add_route("r1", _options("#b71c1c"))

    assert view.route_id == "r1"
    assert view.state is TrackingState.ACTIVE
    assert view.current_position == LatLng(lat=1, lng=1)
    markers = {m.icon.kind: m for m in surface.visible_markers()}
    assert markers["car"].position == LatLng(lat=1, lng=1)
    assert markers["pin"].position == LatLng(lat=2, lng=2)
    assert markers["car"].icon == make_car_icon("#b71c1c")
    assert markers["pin"].icon == make_pin_icon("#b71c1c")


def test_duplicate_add_is_rejected_and_keeps_one_entry() -> None:
    controller, surface = _controller()
    controller.add_route("r1", _options())

    with pytest.raises(RouteAlreadyTrackedError) as exc_info:
        controller.add_route("r1", _options("#4a148c"))

    assert exc_info.value.route_id == "r1"
    assert controller.tracked_route_ids() == ["r1"]
    assert len(surface.visible_markers()) == 2
    # First add's color survives.
    view = controller.get("r1")
    assert view is not None
    assert view.color == "#2962ff"


def test_try_add_returns_outcome_instead_of_raising() -> None:
    controller, _surface = _controller()

    first = controller.try_add_route("r1", _options())
    second = controller.try_add_route("r1", _options())

    assert isinstance(first, RouteAdded)
    assert first.route.route_id == "r1"
    assert second == RouteAlreadyTracked(route_id="r1")


def test_move_for_unknown_route_is_inert() -> None:
    controller, surface = _controller()
    controller.add_route("other", _options())
    before = surface.visible_markers()

    moved = controller.move_current_marker("ghost", LatLng(lat=9, lng=9))

    assert moved is False
    assert "ghost" not in controller
    assert surface.visible_markers() == before


def test_move_relocates_current_marker_only() -> None:
    times = iter([datetime(2026, 1, 1, tzinfo=UTC), datetime(2026, 1, 1, 0, 5, tzinfo=UTC)])
    surface = InMemoryMapSurface()
    controller = MapController(surface, clock=lambda: next(times))
    controller.add_route("r1", _options())

    assert controller.move_current_marker("r1", LatLng(lat=1.5, lng=1.5)) is True

    markers = {m.icon.kind: m for m in surface.visible_markers()}
    assert markers["car"].position == LatLng(lat=1.5, lng=1.5)
    assert markers["pin"].position == LatLng(lat=2, lng=2)
    view = controller.get("r1")
    assert view is not None
    assert view.current_position == LatLng(lat=1.5, lng=1.5)
    assert view.updated_at > view.started_at


def test_remove_is_idempotent() -> None:
    controller, surface = _controller()
    controller.add_route("r1", _options())

    assert controller.remove_route("r1") is True
    assert controller.remove_route("r1") is False
    assert len(controller) == 0
    assert surface.visible_markers() == []


def test_reject_then_accept_after_remove() -> None:
    controller, _surface = _controller()

    controller.add_route("r1", _options())
    with pytest.raises(RouteAlreadyTrackedError):
        controller.add_route("r1", _options())
    controller.remove_route("r1")
    view = controller.add_route("r1", _options())

    assert view.route_id == "r1"
    assert controller.is_tracking("r1")


def test_move_after_remove_does_not_resurrect_marker() -> None:
    controller, surface = _controller()
    controller.add_route("r1", _options())
    controller.remove_route("r1")

    controller.move_current_marker("r1", LatLng(lat=3, lng=3))

    assert controller.get("r1") is None
    assert surface.visible_markers() == []


def test_clear_removes_everything() -> None:
    controller, surface = _controller()
    controller.add_route("r1", _options())
    controller.add_route("r2", _options())

    controller.clear()

    assert controller.tracked_route_ids() == []
    assert surface.visible_markers() == []


def test_icons_reject_non_hex_colors() -> None:
    with pytest.raises(ValueError):
        make_car_icon("red")
    with pytest.raises(ValueError):
        make_pin_icon("#12345")


def test_invalid_color_leaves_no_trace() -> None:
    controller, surface = _controller()

    with pytest.raises(ValueError):
        controller.add_route("r1", _options("blue"))

    assert "r1" not in controller
    assert surface.visible_markers() == []
