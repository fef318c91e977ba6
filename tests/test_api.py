"""Integration tests for the FastAPI REST API.

The controller is built with in-memory fakes so no network is required.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from statelens.api.routes import router
from statelens.config import Settings
from statelens.controller import AppController
from statelens.core.metric_store import MetricRow
from statelens.core.styler import DEFAULT_COLOR, SELECTED_COLOR
from statelens.ingestion.boundaries import BoundaryDataset

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeMetricSource:
    def __init__(self, rows):
        self.rows = rows

    def query(self, query, dataset):
        return list(self.rows)


def make_controller() -> AppController:
    features = [
        {"type": "Feature", "properties": {"name": n}, "geometry": None}
        for n in ("Texas", "Ohio", "Maine")
    ]
    ctl = AppController(
        Settings(host="https://ts.test", liveboard="lb-1"),
        metric_source=FakeMetricSource([MetricRow("Texas", 500), MetricRow("Ohio", 100)]),
        boundary_source=lambda: BoundaryDataset(features=features),
    )
    ctl.load()
    return ctl


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.include_router(router)
    app.state.controller = make_controller()
    return TestClient(app)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    def test_health_ok(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["boundaries"] == 3
        assert data["metrics"] == 2

    def test_health_degraded_without_boundaries(self):
        app = FastAPI()
        app.include_router(router)
        app.state.controller = AppController(
            Settings(),
            metric_source=FakeMetricSource([]),
            boundary_source=lambda: BoundaryDataset(),
        )
        resp = TestClient(app).get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "degraded"


class TestRegionsAndStyles:
    def test_regions(self, client):
        assert client.get("/api/v1/regions").json() == ["Texas", "Ohio", "Maine"]

    def test_styles(self, client):
        resp = client.get("/api/v1/styles")
        assert resp.status_code == 200
        styles = {s["region"]: s for s in resp.json()}
        assert styles["Texas"]["fill_color"] == "rgb(255,64,26)"
        assert styles["Ohio"]["fill_color"] == "rgb(128,255,255)"
        assert styles["Maine"]["fill_color"] == DEFAULT_COLOR
        assert styles["Maine"]["stroke_width"] == 2

    def test_styles_after_toggle(self, client):
        client.post("/api/v1/selection/toggle", json={"region": "Ohio"})
        styles = {s["region"]: s for s in client.get("/api/v1/styles").json()}
        assert styles["Ohio"]["fill_color"] == SELECTED_COLOR


class TestMetrics:
    def test_range(self, client):
        data = client.get("/api/v1/metrics/range").json()
        assert data == {"min": 100.0, "max": 500.0, "count": 2, "has_data": True}

    def test_values(self, client):
        data = client.get("/api/v1/metrics").json()
        assert {"region": "Texas", "value": 500.0} in data

    def test_refresh(self, client):
        resp = client.post("/api/v1/refresh")
        assert resp.status_code == 200
        assert resp.json()["count"] == 2


class TestSelection:
    def test_empty_selection(self, client):
        data = client.get("/api/v1/selection").json()
        assert data["regions"] == []
        assert data["explore_visible"] is False
        assert data["panel_z_index"] == 0

    def test_toggle(self, client):
        client.post("/api/v1/selection/toggle", json={"region": "Texas"})
        data = client.post("/api/v1/selection/toggle", json={"region": "Ohio"}).json()
        assert data["regions"] == ["Texas", "Ohio"]
        assert data["label"] == "Texas, Ohio"
        assert data["explore_visible"] is True

    def test_toggle_requires_region(self, client):
        resp = client.post("/api/v1/selection/toggle", json={})
        assert resp.status_code == 422

    def test_explore_before_ready_is_noop(self, client):
        client.post("/api/v1/selection/toggle", json={"region": "Texas"})
        data = client.post("/api/v1/selection/explore").json()
        assert data["applied"] is False
        assert data["filter"] is None
        assert data["panel_visible"] is False

    def test_explore_and_close(self, client):
        client.post("/api/v1/embed/ready")
        client.post("/api/v1/selection/toggle", json={"region": "Texas"})

        data = client.post("/api/v1/selection/explore").json()
        assert data["applied"] is True
        assert data["panel_visible"] is True
        assert data["panel_z_index"] == 99999
        assert data["filter"] == {"columnName": "Store State", "operator": "IN", "values": ["Texas"]}
        assert "val1=Texas" in client.get("/api/v1/embed/url").json()["url"]

        data = client.post("/api/v1/selection/close").json()
        assert data["regions"] == []
        assert data["panel_visible"] is False
        assert "val1" not in client.get("/api/v1/embed/url").json()["url"]


class TestEmbed:
    def test_ready(self, client):
        assert client.get("/api/v1/embed/url").json()["ready"] is False
        data = client.post("/api/v1/embed/ready").json()
        assert data["ready"] is True
        assert data["url"].endswith("#/embed/viz/lb-1")


class TestExport:
    def test_export_metrics_csv(self, client):
        resp = client.get("/api/v1/export/metrics")
        assert resp.status_code == 200
        assert "text/csv" in resp.headers["content-type"]
        assert "metrics.csv" in resp.headers["content-disposition"]
        lines = resp.text.strip().split("\n")
        assert lines[0] == "region,value"
        assert len(lines) == 3  # header + 2 rows


class TestLifespan:
    def test_startup_loads_and_shutdown_closes(self):
        from statelens.main import app as main_app

        ctl = AppController(
            Settings(),
            metric_source=FakeMetricSource([MetricRow("Texas", 1)]),
            boundary_source=lambda: BoundaryDataset(features=[
                {"type": "Feature", "properties": {"name": "Texas"}, "geometry": None}
            ]),
        )
        main_app.state.controller = ctl
        try:
            with TestClient(main_app) as c:
                assert c.get("/").json()["name"] == "StateLens"
                assert c.get("/api/v1/regions").json() == ["Texas"]
            token = ctl.begin_load()
            assert ctl.set_metrics(token, [MetricRow("Ohio", 2)]) is False
        finally:
            del main_app.state.controller
