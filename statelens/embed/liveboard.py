"""Adapter for the embedded liveboard panel.

The browser-side embed reports readiness through :meth:`LiveboardEmbed.mark_ready`;
until then filter commands are dropped by :class:`~statelens.core.filter_sync.FilterSync`.
The active runtime filter is rendered into the frame URL as
``col1``/``op1``/``val1`` query parameters.
"""

from __future__ import annotations

import logging

import httpx

from statelens.config import normalize_host
from statelens.core.filter_sync import FilterCommand

logger = logging.getLogger(__name__)


class LiveboardEmbed:
    def __init__(self, host: str, liveboard_id: str):
        self.host = normalize_host(host)
        self.liveboard_id = liveboard_id
        self._ready = False
        self.active_filter: FilterCommand | None = None

    @property
    def ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> None:
        if not self._ready:
            logger.info("Liveboard %s is ready", self.liveboard_id)
        self._ready = True

    def update_filter(self, command: FilterCommand) -> None:
        self.active_filter = None if command.is_empty else command
        logger.info("Runtime filter on %r -> %s", command.column_name, command.values)

    def filter_params(self) -> httpx.QueryParams:
        params: list[tuple[str, str]] = [("embedApp", "true")]
        command = self.active_filter
        if command is not None:
            params.append(("col1", command.column_name))
            params.append(("op1", command.operator))
            params.extend(("val1", value) for value in command.values)
        return httpx.QueryParams(params)

    def frame_url(self) -> str:
        return f"{self.host}/?{self.filter_params()}#/embed/viz/{self.liveboard_id}"
