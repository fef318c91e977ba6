"""Metric rows from the remote tabular search service.

The controller only depends on the :class:`MetricSource` protocol, so tests
and alternative back ends can supply rows without network access.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, Field, StrictStr, ValidationError

from statelens.config import normalize_host
from statelens.core.metric_store import MetricRow
from statelens.ingestion.errors import FetchError

logger = logging.getLogger(__name__)

SEARCH_DATA_PATH = "/api/rest/2.0/searchdata"


class MetricSource(Protocol):
    def query(self, query: str, dataset: str) -> list[MetricRow]: ...


# ---------------------------------------------------------------------------
# Response schema
# ---------------------------------------------------------------------------


class SearchDataContent(BaseModel):
    data_rows: list[Any] = Field(default_factory=list)
    column_names: list[str] = Field(default_factory=list)


class SearchDataResponse(BaseModel):
    contents: list[SearchDataContent]


class RowIn(BaseModel):
    region: StrictStr
    value: float = Field(strict=True, allow_inf_nan=False)


def parse_rows(data_rows: list[Any]) -> list[MetricRow]:
    """Column 0 is the region id, column 1 the metric; other columns are ignored."""
    rows: list[MetricRow] = []
    dropped = 0
    for raw in data_rows:
        if not isinstance(raw, (list, tuple)) or len(raw) < 2:
            dropped += 1
            continue
        try:
            row = RowIn(region=raw[0], value=raw[1])
        except ValidationError:
            dropped += 1
            continue
        rows.append(MetricRow(row.region, row.value))
    if dropped:
        logger.warning("Dropped %d malformed metric rows", dropped)
    return rows


def parse_search_response(payload: Any) -> list[MetricRow]:
    """Extract metric rows from the first result batch of a search response."""
    try:
        response = SearchDataResponse.model_validate(payload)
    except ValidationError as exc:
        raise FetchError(f"Unexpected search response shape: {exc}") from exc
    if not response.contents:
        return []
    return parse_rows(response.contents[0].data_rows)


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


class SearchDataClient:
    """Unauthenticated client for the search-data REST endpoint."""

    def __init__(self, host: str, timeout: float = 30.0, client: httpx.Client | None = None):
        self.base_url = normalize_host(host)
        self.timeout = timeout
        self._client = client

    def _post(self, url: str, body: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(url, json=body, timeout=self.timeout)
        return httpx.post(url, json=body, timeout=self.timeout)

    def query(self, query: str, dataset: str) -> list[MetricRow]:
        url = f"{self.base_url}{SEARCH_DATA_PATH}"
        body = {"query_string": query, "logical_table_identifier": dataset}
        logger.info("Querying metrics %r on %s", query, dataset)
        try:
            resp = self._post(url, body)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            raise FetchError(f"Metric query failed: {exc}") from exc
        rows = parse_search_response(payload)
        logger.info("Received %d metric rows", len(rows))
        return rows
