"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BOUNDARY_URL = (
    "https://raw.githubusercontent.com/PublicaMundi/MappingAPI/master/data/geojson/us-states.json"
)
DEFAULT_HOST = "https://se-thoughtspot-cloud.thoughtspot.cloud/"
DEFAULT_DATASET = "782b50d1-fe89-4fee-812f-b5f9eb0a552d"
DEFAULT_QUERY = "[Store State] [Sales]"
DEFAULT_LIVEBOARD = "b71ff337-725e-4211-a292-d29837b9f5c2"
DEFAULT_FILTER_COLUMN = "Store State"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    boundary_url: str = DEFAULT_BOUNDARY_URL
    host: str = DEFAULT_HOST
    dataset: str = DEFAULT_DATASET
    query: str = DEFAULT_QUERY
    liveboard: str = DEFAULT_LIVEBOARD
    filter_column: str = DEFAULT_FILTER_COLUMN
    timeout: float = DEFAULT_TIMEOUT


def normalize_host(host: str) -> str:
    """Drop hash-route fragments and a trailing slash from a host URL."""
    host = host.replace("#/", "").replace("#", "")
    if host.endswith("/"):
        host = host[:-1]
    return host


def load_settings() -> Settings:
    """Build settings from ``STATELENS_*`` environment variables."""
    timeout = os.getenv("STATELENS_TIMEOUT")
    return Settings(
        boundary_url=os.getenv("STATELENS_BOUNDARY_URL", DEFAULT_BOUNDARY_URL),
        host=os.getenv("STATELENS_HOST", DEFAULT_HOST),
        dataset=os.getenv("STATELENS_DATASET", DEFAULT_DATASET),
        query=os.getenv("STATELENS_QUERY", DEFAULT_QUERY),
        liveboard=os.getenv("STATELENS_LIVEBOARD", DEFAULT_LIVEBOARD),
        filter_column=os.getenv("STATELENS_FILTER_COLUMN", DEFAULT_FILTER_COLUMN),
        timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
    )
