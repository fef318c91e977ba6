"""Push the current selection to the embedded panel as a runtime filter."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from pydantic import BaseModel, ConfigDict, Field

from statelens.core.selection import SelectionSet

logger = logging.getLogger(__name__)

# Stacking order of the embedded panel.
PANEL_RAISED_Z = 99999
PANEL_LOWERED_Z = 0


class FilterCommand(BaseModel):
    """A set-membership (``IN``) runtime filter on one column."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    column_name: str = Field(alias="columnName")
    operator: str = "IN"
    values: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """An empty inclusion filter means "no filter"."""
        return not self.values


class EmbedClient(Protocol):
    @property
    def ready(self) -> bool: ...

    def update_filter(self, command: FilterCommand) -> None: ...


class FilterSync:
    """Sends apply/clear filter commands and tracks the panel visibility flag.

    Commands are fire-and-forget. When the embed is not ready the command is
    dropped without error and nothing is queued.
    """

    def __init__(self, embed: EmbedClient, column_name: str):
        self.embed = embed
        self.column_name = column_name
        self.panel_visible = False
        self.last_command: FilterCommand | None = None

    @property
    def z_index(self) -> int:
        return PANEL_RAISED_Z if self.panel_visible else PANEL_LOWERED_Z

    def _send(self, values: Iterable[str]) -> bool:
        if not self.embed.ready:
            logger.debug("Embed not ready, dropping filter on %s", self.column_name)
            return False
        command = FilterCommand(column_name=self.column_name, values=list(values))
        self.embed.update_filter(command)
        self.last_command = command
        return True

    def apply(self, selection: Iterable[str]) -> bool:
        """Filter the panel to *selection* and raise it.

        Returns False (and leaves the panel lowered) if the embed is not ready.
        """
        if not self._send(selection):
            return False
        self.panel_visible = True
        return True

    def clear(self) -> SelectionSet:
        """Remove the filter, lower the panel and return the reset selection.

        The panel is lowered and the selection reset even when the embed is
        not ready; only the filter command is dropped in that case.
        """
        self._send([])
        self.panel_visible = False
        return SelectionSet()
