"""Fetch and validate the region boundary GeoJSON.

Each feature must carry a string ``name`` property, used as the region id.
Features that do not are dropped with a warning rather than failing the load.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from statelens.ingestion.errors import FetchError

logger = logging.getLogger(__name__)


class FeatureProperties(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str


class Feature(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = "Feature"
    properties: FeatureProperties
    geometry: dict[str, Any] | None = None


@dataclass
class BoundaryDataset:
    """Validated features, keyed by region name in document order."""

    features: list[dict[str, Any]] = field(default_factory=list)

    @property
    def regions(self) -> list[str]:
        return [f["properties"]["name"] for f in self.features]

    def to_geojson(self) -> dict[str, Any]:
        return {"type": "FeatureCollection", "features": self.features}

    def __len__(self) -> int:
        return len(self.features)


def parse_boundaries(payload: Any) -> BoundaryDataset:
    """Validate a FeatureCollection document into a :class:`BoundaryDataset`."""
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise FetchError("Boundary document is not a GeoJSON FeatureCollection")

    features: list[dict[str, Any]] = []
    seen: set[str] = set()
    dropped = 0
    for raw in payload["features"]:
        try:
            feature = Feature.model_validate(raw)
        except ValidationError:
            dropped += 1
            continue
        name = feature.properties.name
        if name in seen:
            logger.warning("Duplicate boundary feature %r, keeping the first", name)
            continue
        seen.add(name)
        features.append(feature.model_dump(mode="json"))

    if dropped:
        logger.warning("Dropped %d boundary features without a string 'name'", dropped)
    logger.info("Loaded %d boundary features", len(features))
    return BoundaryDataset(features=features)


def fetch_boundaries(
    url: str,
    timeout: float = 30.0,
    client: httpx.Client | None = None,
) -> BoundaryDataset:
    """GET the boundary document at *url* and validate it."""
    logger.info("Fetching boundaries from %s", url)
    try:
        if client is None:
            resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        else:
            resp = client.get(url, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
        raise FetchError(f"Boundary fetch failed: {exc}") from exc
    return parse_boundaries(payload)
