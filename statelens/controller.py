"""Application controller: owns the map state and wires events into it.

All state lives here and is handed to the core components as values:
the boundary dataset, the :class:`MetricStore`, the :class:`SelectionSet`
and the :class:`FilterSync` that carries the panel visibility flag.
Mutations are expected to happen on a single event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from statelens.config import Settings
from statelens.core.filter_sync import FilterSync
from statelens.core.metric_store import MetricRow, MetricStore
from statelens.core.selection import SelectionSet
from statelens.core.styler import RegionStyler, Style
from statelens.embed.liveboard import LiveboardEmbed
from statelens.ingestion.boundaries import BoundaryDataset, fetch_boundaries
from statelens.ingestion.errors import FetchError
from statelens.ingestion.metric_source import MetricSource, SearchDataClient

logger = logging.getLogger(__name__)

BoundarySource = Callable[[], BoundaryDataset]


class AppController:
    def __init__(
        self,
        settings: Settings,
        metric_source: MetricSource | None = None,
        boundary_source: BoundarySource | None = None,
        embed: LiveboardEmbed | None = None,
    ):
        self.settings = settings
        self.metric_source = metric_source or SearchDataClient(settings.host, timeout=settings.timeout)
        self.boundary_source = boundary_source or (
            lambda: fetch_boundaries(settings.boundary_url, timeout=settings.timeout)
        )
        self.embed = embed or LiveboardEmbed(settings.host, settings.liveboard)
        self.filter_sync = FilterSync(self.embed, settings.filter_column)

        self.boundaries: BoundaryDataset | None = None
        self.metrics = MetricStore()
        self.selection = SelectionSet()

        self._generation = 0
        self._closed = False

    # -----------------------------------------------------------------------
    # Loading
    # -----------------------------------------------------------------------

    def begin_load(self) -> int:
        """Start a load cycle; results tagged with an older token are ignored."""
        self._generation += 1
        return self._generation

    def _is_current(self, token: int) -> bool:
        if self._closed:
            logger.info("Controller shut down, ignoring late fetch result")
            return False
        if token != self._generation:
            logger.info("Ignoring stale fetch result (load %d, current %d)", token, self._generation)
            return False
        return True

    def _fetch_boundaries(self) -> BoundaryDataset | None:
        try:
            return self.boundary_source()
        except FetchError:
            logger.warning("Boundary fetch failed, no regions to draw", exc_info=True)
            return None

    def _fetch_metrics(self) -> list[MetricRow]:
        try:
            return self.metric_source.query(self.settings.query, self.settings.dataset)
        except FetchError:
            logger.warning("Metric fetch failed, regions keep the default color", exc_info=True)
            return []

    def set_boundaries(self, token: int, dataset: BoundaryDataset | None) -> bool:
        """Install fetched boundaries. Returns True if metrics may be fetched next."""
        if not self._is_current(token):
            return False
        if dataset is not None:
            self.boundaries = dataset
        return self.boundaries is not None

    def set_metrics(self, token: int, rows: list[MetricRow]) -> bool:
        if not self._is_current(token):
            return False
        if not rows:
            logger.warning("No metric rows received, keeping previous metrics")
            return False
        self.metrics = MetricStore(rows)
        low, high = self.metrics.range()
        logger.info("Loaded metrics for %d regions (range %s .. %s)", len(self.metrics), low, high)
        return True

    def load(self) -> None:
        """Fetch boundaries, then metrics once boundaries are available."""
        token = self.begin_load()
        if self.set_boundaries(token, self._fetch_boundaries()):
            self.set_metrics(token, self._fetch_metrics())

    async def refresh(self) -> None:
        """Same as :meth:`load`, with the blocking fetches run off the event loop."""
        token = self.begin_load()
        dataset = await asyncio.to_thread(self._fetch_boundaries)
        if not self.set_boundaries(token, dataset):
            return
        rows = await asyncio.to_thread(self._fetch_metrics)
        self.set_metrics(token, rows)

    def shutdown(self) -> None:
        self._closed = True

    # -----------------------------------------------------------------------
    # User events
    # -----------------------------------------------------------------------

    def click(self, region: str) -> SelectionSet:
        self.selection = self.selection.toggle(region)
        return self.selection

    def explore(self) -> bool:
        return self.filter_sync.apply(self.selection)

    def close_panel(self) -> SelectionSet:
        self.selection = self.filter_sync.clear()
        return self.selection

    def mark_embed_ready(self) -> None:
        self.embed.mark_ready()

    # -----------------------------------------------------------------------
    # Derived views
    # -----------------------------------------------------------------------

    @property
    def regions(self) -> list[str]:
        return self.boundaries.regions if self.boundaries is not None else []

    @property
    def styler(self) -> RegionStyler:
        return RegionStyler(self.metrics, self.selection)

    def styles(self) -> dict[str, Style]:
        return self.styler.styles(self.regions)

    @property
    def explore_visible(self) -> bool:
        return len(self.selection) > 0

    @property
    def selection_label(self) -> str:
        return self.selection.label()

    @property
    def panel_visible(self) -> bool:
        return self.filter_sync.panel_visible
