"""Marker icon factories.

Pure functions of a color: the same color always yields an equal icon.
"""

from __future__ import annotations

import re

from routetrack.models.marker import MarkerIcon

_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

CAR_PATH = (
    "M23.5 7c.276 0 .5.224.5.5v.511c0 .793-.926.989-1.616.989l-1.086-2h2.202z"
    "m-1.441 3.506c.639 1.186.946 2.252.946 3.666 0 1.37-.397 2.533-1.005 3.981v1.847"
    "c0 .552-.448 1-1 1h-1.5c-.552 0-1-.448-1-1v-1h-13v1c0 .552-.448 1-1 1h-1.5"
    "c-.552 0-1-.448-1-1v-1.847c-.608-1.448-1.005-2.611-1.005-3.981 0-1.414.307-2.48.946-3.666"
    ".829-1.537 1.851-3.453 2.93-5.252.828-1.382 1.262-1.707 2.278-1.889 1.532-.275 2.918-.365"
    " 4.851-.365s3.319.09 4.851.365c1.016.182 1.45.507 2.278 1.889 1.079 1.799 2.101 3.715 2.93 5.252z"
    "m-16.059 2.994c0-.828-.672-1.5-1.5-1.5s-1.5.672-1.5 1.5.672 1.5 1.5 1.5 1.5-.672 1.5-1.5z"
    "m10 1c0-.276-.224-.5-.5-.5h-7c-.276 0-.5.224-.5.5s.224.5.5.5h7c.276 0 .5-.224.5-.5z"
    "m2.941-5.527s-.74-1.826-1.631-3.142c-.202-.298-.515-.502-.869-.566-1.511-.272-2.835-.359"
    "-4.441-.359s-2.93.087-4.441.359c-.354.063-.667.267-.869.566-.891 1.315-1.631 3.142-1.631 3.142"
    " 1.64.313 4.309.497 6.941.497s5.301-.184 6.941-.497z"
    "m2.059 4.527c0-.828-.672-1.5-1.5-1.5s-1.5.672-1.5 1.5.672 1.5 1.5 1.5 1.5-.672 1.5-1.5z"
    "m-18.298-6.5h-2.202c-.276 0-.5.224-.5.5v.511c0 .793.926.989 1.616.989l1.086-2z"
)

PIN_PATH = (
    "M66.9,41.8c0-11.3-9.1-20.4-20.4-20.4c-11.3,0-20.4,9.1-20.4,20.4"
    "c0,11.3,20.4,32.4,20.4,32.4S66.9,53.1,66.9,41.8z"
    " M37,41.4c0-5.2,4.3-9.5,9.5-9.5c5.2,0,9.5,4.2,9.5,9.5"
    "c0,5.2-4.2,9.5-9.5,9.5C41.3,50.9,37,46.6,37,41.4z"
)


def is_hex_color(color: str) -> bool:
    return bool(_COLOR_RE.match(color))


def _check_color(color: str) -> str:
    if not is_hex_color(color):
        raise ValueError(f"Not a hex color: {color!r}")
    return color


def make_car_icon(color: str) -> MarkerIcon:
    """Icon for a route's moving current-position marker."""
    color = _check_color(color)
    return MarkerIcon(
        kind="car",
        path=CAR_PATH,
        fill_color=color,
        stroke_color=color,
        anchor=(26.0, 20.0),
    )


def make_pin_icon(color: str) -> MarkerIcon:
    """Icon for a route's static destination marker."""
    color = _check_color(color)
    return MarkerIcon(
        kind="pin",
        path=PIN_PATH,
        fill_color=color,
        stroke_color=color,
        anchor=(46.0, 70.0),
    )
