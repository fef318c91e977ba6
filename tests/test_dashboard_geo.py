"""Tests for the dashboard map helpers (no Streamlit runtime needed)."""

from __future__ import annotations

import plotly.graph_objects as go

from dashboard.geo import build_map_figure, clicked_regions
from statelens.core.styler import Style

GEOJSON = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"name": name},
            "geometry": {"type": "Polygon", "coordinates": [[[x, 0], [x + 1, 0], [x + 1, 1], [x, 0]]]},
        }
        for x, name in enumerate(["Texas", "Ohio"])
    ],
}


class TestBuildMapFigure:
    def test_one_trace_per_region(self):
        styles = {"Texas": Style("#cccccc"), "Ohio": Style("rgb(128,255,255)")}
        fig = build_map_figure(GEOJSON, styles, {"Ohio": 100})
        assert sorted(trace.name for trace in fig.data) == ["Ohio", "Texas"]
        assert fig.layout.showlegend is False

    def test_no_regions(self):
        fig = build_map_figure(GEOJSON, {}, {})
        assert isinstance(fig, go.Figure)


class TestClickedRegions:
    def test_location_then_curve_fallback(self):
        fig = go.Figure([go.Scatter(name="Texas"), go.Scatter(name="Ohio")])
        points = [
            {"location": "Maine"},
            {"curve_number": 1},
            {"curve_number": 7},
            {"location": "Maine"},
        ]
        assert clicked_regions(fig, points) == ["Maine", "Ohio"]

    def test_empty(self):
        assert clicked_regions(go.Figure(), []) == []
