"""Map marker values shared by the controller and map surfaces."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import TypeAlias

MarkerRef: TypeAlias = Hashable
"""Opaque handle returned by a map surface for a placed marker."""


@dataclass(frozen=True)
class MarkerIcon:
    """Vector icon description, parameterised by color.

    Mirrors the symbol options map SDKs accept: an SVG path plus fill and
    stroke styling and the anchor point within the path's coordinate space.
    """

    kind: str
    path: str
    fill_color: str
    stroke_color: str
    stroke_weight: float = 1.0
    fill_opacity: float = 1.0
    stroke_opacity: float = 1.0
    anchor: tuple[float, float] = (0.0, 0.0)
