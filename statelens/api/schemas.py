"""Pydantic schemas for API request validation and response serialization."""

from __future__ import annotations

from pydantic import BaseModel

from statelens.core.filter_sync import FilterCommand

# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------


class RegionStyleOut(BaseModel):
    region: str
    fill_color: str
    stroke_color: str
    stroke_width: int
    stroke_opacity: float
    fill_opacity: float


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


class MetricRangeOut(BaseModel):
    min: float
    max: float
    count: int
    has_data: bool


class MetricValueOut(BaseModel):
    region: str
    value: float


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


class ToggleIn(BaseModel):
    region: str


class SelectionOut(BaseModel):
    regions: list[str]
    label: str
    explore_visible: bool
    panel_visible: bool
    panel_z_index: int


class ExploreOut(SelectionOut):
    applied: bool
    filter: FilterCommand | None = None


# ---------------------------------------------------------------------------
# Embed
# ---------------------------------------------------------------------------


class EmbedOut(BaseModel):
    ready: bool
    url: str


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthOut(BaseModel):
    status: str
    boundaries: int
    metrics: int
    uptime_seconds: float
    total_requests: int
