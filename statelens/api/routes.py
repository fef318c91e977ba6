"""FastAPI REST endpoints for StateLens.

Handlers are ``async`` so every state mutation runs on the event loop.
"""

from __future__ import annotations

import io
import time

import pandas as pd
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from statelens.api.schemas import (
    EmbedOut,
    ExploreOut,
    HealthOut,
    MetricRangeOut,
    MetricValueOut,
    RegionStyleOut,
    SelectionOut,
    ToggleIn,
)
from statelens.controller import AppController

router = APIRouter(prefix="/api/v1", tags=["StateLens API"])

# Track startup time for health reporting
_start_time = time.time()
_request_count = 0


def _inc_requests():
    global _request_count
    _request_count += 1


def get_controller(request: Request) -> AppController:
    return request.app.state.controller


def _selection_view(ctl: AppController) -> SelectionOut:
    return SelectionOut(
        regions=ctl.selection.list(),
        label=ctl.selection_label,
        explore_visible=ctl.explore_visible,
        panel_visible=ctl.panel_visible,
        panel_z_index=ctl.filter_sync.z_index,
    )


# ---------------------------------------------------------------------------
# Regions and styles
# ---------------------------------------------------------------------------


@router.get("/regions", summary="Region ids in boundary order", response_model=list[str])
async def list_regions(ctl: AppController = Depends(get_controller)) -> list[str]:
    _inc_requests()
    return ctl.regions


@router.get("/styles", summary="Current style of every region", response_model=list[RegionStyleOut])
async def list_styles(ctl: AppController = Depends(get_controller)) -> list[RegionStyleOut]:
    _inc_requests()
    return [
        RegionStyleOut(region=region, **style.to_dict())
        for region, style in ctl.styles().items()
    ]


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


@router.get("/metrics/range", summary="Metric range used by the color scale", response_model=MetricRangeOut)
async def metric_range(ctl: AppController = Depends(get_controller)) -> MetricRangeOut:
    _inc_requests()
    low, high = ctl.metrics.range()
    return MetricRangeOut(min=low, max=high, count=len(ctl.metrics), has_data=ctl.metrics.has_data)


@router.get("/metrics", summary="Metric value per region", response_model=list[MetricValueOut])
async def list_metrics(ctl: AppController = Depends(get_controller)) -> list[MetricValueOut]:
    _inc_requests()
    return [MetricValueOut(region=r, value=v) for r, v in ctl.metrics.items()]


@router.post("/refresh", summary="Re-fetch boundaries and metrics", response_model=MetricRangeOut)
async def refresh(ctl: AppController = Depends(get_controller)) -> MetricRangeOut:
    _inc_requests()
    await ctl.refresh()
    low, high = ctl.metrics.range()
    return MetricRangeOut(min=low, max=high, count=len(ctl.metrics), has_data=ctl.metrics.has_data)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


@router.get("/selection", summary="Current selection", response_model=SelectionOut)
async def get_selection(ctl: AppController = Depends(get_controller)) -> SelectionOut:
    _inc_requests()
    return _selection_view(ctl)


@router.post("/selection/toggle", summary="Toggle a region in the selection", response_model=SelectionOut)
async def toggle_region(body: ToggleIn, ctl: AppController = Depends(get_controller)) -> SelectionOut:
    _inc_requests()
    ctl.click(body.region)
    return _selection_view(ctl)


@router.post("/selection/explore", summary="Filter the panel to the selection", response_model=ExploreOut)
async def explore(ctl: AppController = Depends(get_controller)) -> ExploreOut:
    _inc_requests()
    applied = ctl.explore()
    view = _selection_view(ctl)
    return ExploreOut(
        **view.model_dump(),
        applied=applied,
        filter=ctl.filter_sync.last_command if applied else None,
    )


@router.post("/selection/close", summary="Clear the filter and the selection", response_model=SelectionOut)
async def close_panel(ctl: AppController = Depends(get_controller)) -> SelectionOut:
    _inc_requests()
    ctl.close_panel()
    return _selection_view(ctl)


# ---------------------------------------------------------------------------
# Embed
# ---------------------------------------------------------------------------


@router.post("/embed/ready", summary="Mark the embedded panel as initialized", response_model=EmbedOut)
async def embed_ready(ctl: AppController = Depends(get_controller)) -> EmbedOut:
    _inc_requests()
    ctl.mark_embed_ready()
    return EmbedOut(ready=ctl.embed.ready, url=ctl.embed.frame_url())


@router.get("/embed/url", summary="Frame URL of the embedded panel", response_model=EmbedOut)
async def embed_url(ctl: AppController = Depends(get_controller)) -> EmbedOut:
    _inc_requests()
    return EmbedOut(ready=ctl.embed.ready, url=ctl.embed.frame_url())


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


@router.get("/export/metrics", summary="Export metrics as CSV")
async def export_metrics_csv(ctl: AppController = Depends(get_controller)):
    _inc_requests()
    df = pd.DataFrame(list(ctl.metrics.items()), columns=["region", "value"])
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    buf.seek(0)
    return StreamingResponse(
        iter([buf.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=metrics.csv"},
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", summary="Health check", response_model=HealthOut)
async def health(ctl: AppController = Depends(get_controller)) -> HealthOut:
    boundaries = len(ctl.boundaries) if ctl.boundaries is not None else 0
    return HealthOut(
        status="ok" if boundaries else "degraded",
        boundaries=boundaries,
        metrics=len(ctl.metrics),
        uptime_seconds=round(time.time() - _start_time, 2),
        total_requests=_request_count,
    )
