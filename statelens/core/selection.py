"""Ordered, duplicate-free set of selected regions with toggle semantics."""

from __future__ import annotations

from typing import Iterable, Iterator


class SelectionSet:
    """Immutable selection value.

    Every mutation returns a new ``SelectionSet``; the controller that owns
    the current selection swaps its reference. Insertion order is kept for
    display, and toggling a region off and on again moves it to the end.
    """

    __slots__ = ("_items", "_members")

    def __init__(self, regions: Iterable[str] = ()):
        # dict keys keep first-insertion order and drop duplicates
        self._items: tuple[str, ...] = tuple(dict.fromkeys(regions))
        self._members = frozenset(self._items)

    def toggle(self, region: str) -> SelectionSet:
        if region in self._members:
            return SelectionSet(r for r in self._items if r != region)
        return SelectionSet(self._items + (region,))

    def contains(self, region: str) -> bool:
        return region in self._members

    def clear(self) -> SelectionSet:
        return SelectionSet()

    def list(self) -> list[str]:
        return list(self._items)

    def label(self, separator: str = ", ") -> str:
        """Selected regions joined for display, in selection order."""
        return separator.join(self._items)

    def __contains__(self, region: object) -> bool:
        return region in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionSet):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"SelectionSet({list(self._items)!r})"
