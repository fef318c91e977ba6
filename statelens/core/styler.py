"""Per-region style decision from selection state and metric value."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable

from statelens.core.color_scale import interpolate
from statelens.core.metric_store import MetricStore
from statelens.core.selection import SelectionSet

SELECTED_COLOR = "#cccccc"
DEFAULT_COLOR = "#3388ff"  # no metric value for the region

STROKE_COLOR = "white"
STROKE_WIDTH = 2
STROKE_OPACITY = 1.0
FILL_OPACITY = 0.7


@dataclass(frozen=True)
class Style:
    fill_color: str
    stroke_color: str = STROKE_COLOR
    stroke_width: int = STROKE_WIDTH
    stroke_opacity: float = STROKE_OPACITY
    fill_opacity: float = FILL_OPACITY

    def to_dict(self) -> dict:
        return asdict(self)


class RegionStyler:
    """Computes a region's style from a snapshot of metrics and selection.

    Build a new styler (or call :meth:`style_for` again) after either input
    changes; nothing is cached between calls.
    """

    def __init__(self, metrics: MetricStore, selection: SelectionSet):
        self.metrics = metrics
        self.selection = selection

    def fill_color_for(self, region: str) -> str:
        if region in self.selection:
            return SELECTED_COLOR
        value = self.metrics.get(region)
        if value is None:
            return DEFAULT_COLOR
        low, high = self.metrics.range()
        return interpolate(value, low, high).to_css()

    def style_for(self, region: str) -> Style:
        return Style(fill_color=self.fill_color_for(region))

    def styles(self, regions: Iterable[str]) -> dict[str, Style]:
        return {region: self.style_for(region) for region in regions}
