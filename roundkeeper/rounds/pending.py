"""
RandomPendingSet — the entrants waiting for an opponent.

Elements live in a list with a position map beside it, so add, remove and
remove_random are all O(1): removal swaps the victim with the last element
before popping.  Selection is uniform over the current elements and does
not depend on insertion order.
"""

from __future__ import annotations

import random
from typing import Generic, Hashable, Iterable, Iterator, TypeVar

E = TypeVar("E", bound=Hashable)


class RandomPendingSet(Generic[E]):
    """A set with uniform random removal."""

    def __init__(self, elements: Iterable[E] = (), rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._items: list[E] = []
        self._positions: dict[E, int] = {}
        for element in elements:
            self.add(element)

    def __contains__(self, element: object) -> bool:
        return element in self._positions

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[E]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"RandomPendingSet({self._items!r})"

    def add(self, element: E) -> bool:
        if element in self._positions:
            return False
        self._positions[element] = len(self._items)
        self._items.append(element)
        return True

    def remove(self, element: E) -> bool:
        index = self._positions.pop(element, None)
        if index is None:
            return False
        last = self._items.pop()
        if index < len(self._items):
            self._items[index] = last
            self._positions[last] = index
        return True

    def remove_random(self) -> E:
        """
        Remove and return a uniformly chosen element.

        Raises:
            KeyError: the set is empty (same as set.pop()).
        """
        if not self._items:
            raise KeyError("remove_random from an empty RandomPendingSet")
        element = self._items[self._rng.randrange(len(self._items))]
        self.remove(element)
        return element

    def elements(self) -> frozenset[E]:
        return frozenset(self._items)
