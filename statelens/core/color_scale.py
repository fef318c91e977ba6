"""Linear two-stop color scale used to shade regions by metric value."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Normalized position used when min == max (every value is both the
# lowest and the highest, so it is rendered at the saturated end).
DEGENERATE_T = 1.0


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int

    def to_css(self) -> str:
        return f"rgb({self.red},{self.green},{self.blue})"

    def __str__(self) -> str:
        return self.to_css()


def _clamp_channel(value: float) -> int:
    return max(0, min(255, math.floor(value)))


def normalize(value: float, min_value: float, max_value: float) -> float:
    """Map *value* into [0, 1] relative to the [min_value, max_value] range.

    A zero-width range yields ``DEGENERATE_T``; NaN yields 0.
    """
    if max_value == min_value:
        return DEGENERATE_T
    t = (value - min_value) / (max_value - min_value)
    if math.isnan(t):
        return 0.0
    return max(0.0, min(1.0, t))


def interpolate(value: float, min_value: float, max_value: float) -> Color:
    """Return the scale color for *value* within [min_value, max_value].

    Light (t=0) ``rgb(128,255,255)`` to dark warm (t=1) ``rgb(255,64,26)``.
    """
    t = normalize(value, min_value, max_value)
    return Color(
        red=_clamp_channel(128 + (255 - 128) * t),
        green=_clamp_channel(64 + (255 - 64) * (1 - t)),
        blue=_clamp_channel(26 + (255 - 26) * (1 - t)),
    )
