"""Region -> metric value mapping with its derived [min, max] range."""

from __future__ import annotations

from typing import Iterable, Iterator, NamedTuple


class MetricRow(NamedTuple):
    region: str
    value: float


class MetricStore:
    """Holds one metric value per region.

    The mapping is only ever replaced wholesale by :meth:`load`; min and max
    are recomputed in the same pass. An empty store reports ``(0, 0)``,
    which callers treat as "no data".
    """

    def __init__(self, rows: Iterable[MetricRow] = ()):
        self._values: dict[str, float] = {}
        self._min = 0.0
        self._max = 0.0
        self.load(rows)

    def load(self, rows: Iterable[MetricRow]) -> None:
        values: dict[str, float] = {}
        for region, value in rows:
            # Duplicate regions: the later row wins.
            values[region] = value
        self._values = values
        if values:
            self._min = min(values.values())
            self._max = max(values.values())
        else:
            self._min = self._max = 0.0

    def get(self, region: str) -> float | None:
        return self._values.get(region)

    def range(self) -> tuple[float, float]:
        return self._min, self._max

    @property
    def has_data(self) -> bool:
        return bool(self._values)

    def items(self) -> Iterator[tuple[str, float]]:
        return iter(self._values.items())

    def __contains__(self, region: object) -> bool:
        return region in self._values

    def __len__(self) -> int:
        return len(self._values)
