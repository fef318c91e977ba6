"""Plotly choropleth for the region boundaries, colored by RegionStyler."""

from __future__ import annotations

from typing import Any

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from statelens.core.styler import Style

# Initial view (continental USA)
MAP_CENTER = {"lat": 37.8, "lon": -96.0}
MAP_ZOOM = 3
MAP_STYLE = "open-street-map"


def build_map_figure(
    geojson: dict[str, Any],
    styles: dict[str, Style],
    values: dict[str, float],
) -> go.Figure:
    """One trace per region so each can carry its own fill color.

    Trace names are the region ids; :func:`clicked_regions` relies on that.
    """
    if not styles:
        fig = go.Figure()
        fig.update_layout(
            map=dict(style=MAP_STYLE, center=MAP_CENTER, zoom=MAP_ZOOM),
            margin=dict(l=0, r=0, t=0, b=0),
            height=650,
            showlegend=False,
        )
        return fig

    df = pd.DataFrame({
        "region": list(styles),
        "value": [values.get(r) for r in styles],
    })
    color_map = {region: style.fill_color for region, style in styles.items()}

    fig = px.choropleth_map(
        df,
        geojson=geojson,
        locations="region",
        featureidkey="properties.name",
        color="region",
        color_discrete_map=color_map,
        hover_name="region",
        hover_data={"region": False, "value": ":,.0f"},
        center=MAP_CENTER,
        zoom=MAP_ZOOM,
        map_style=MAP_STYLE,
    )
    # stroke and opacity are identical for every region
    first = next(iter(styles.values()))
    fig.update_traces(
        marker_opacity=first.fill_opacity,
        marker_line_color=first.stroke_color,
        marker_line_width=first.stroke_width,
    )
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        height=650,
        showlegend=False,
        clickmode="event+select",
    )
    return fig


def clicked_regions(fig: go.Figure, points: list[dict[str, Any]]) -> list[str]:
    """Region ids for the points of a Streamlit plotly selection event."""
    regions: list[str] = []
    for point in points:
        region = point.get("location")
        if region is None:
            curve = point.get("curve_number")
            if curve is None or curve >= len(fig.data):
                continue
            region = fig.data[curve].name
        if region not in regions:
            regions.append(region)
    return regions
