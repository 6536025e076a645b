"""Marker color allocation."""

from __future__ import annotations

import random
from collections.abc import Sequence

from routetrack.config import DEFAULT_PALETTE


class ColorAllocator:
    """Pick a color for a newly started route.

    Each pick is independent; two active routes may share a color.
    """

    def __init__(self, palette: Sequence[str] = DEFAULT_PALETTE, *, rng: random.Random | None = None) -> None:
        if not palette:
            raise ValueError("palette must contain at least one color")
        self._palette = tuple(palette)
        self._rng = rng or random.Random()

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    def allocate(self) -> str:
        return self._rng.choice(self._palette)
