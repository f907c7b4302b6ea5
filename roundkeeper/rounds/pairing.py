"""
Pairing — a single match between two distinct entrants.

Equality and hashing ignore the order of the entrants, so a pairing built
as (a, b) finds one stored as (b, a).  The positional first/second are kept
as created because callers display and index them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Hashable, Iterator, TypeVar

E = TypeVar("E", bound=Hashable)


@dataclass(frozen=True, eq=False)
class Pairing(Generic[E]):
    """An immutable, unordered pair of entrants."""

    first: E
    second: E

    def __post_init__(self) -> None:
        if self.first == self.second:
            raise ValueError(f"A pairing needs two distinct entrants, got {self.first!r} twice")

    # Unordered identity: same two entrants -> same pairing.
    def __hash__(self) -> int:
        return hash(frozenset((self.first, self.second)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pairing):
            return NotImplemented
        return frozenset((self.first, self.second)) == frozenset((other.first, other.second))

    def __contains__(self, entrant: object) -> bool:
        return self.contains(entrant)

    def __iter__(self) -> Iterator[E]:
        yield self.first
        yield self.second

    def __repr__(self) -> str:
        return f"Pairing({self.first!r}, {self.second!r})"

    def contains(self, entrant: object) -> bool:
        return entrant == self.first or entrant == self.second

    def other(self, entrant: E) -> E:
        """
        Return the opponent of entrant.

        Raises:
            ValueError: entrant is not part of this pairing.
        """
        if entrant == self.first:
            return self.second
        if entrant == self.second:
            return self.first
        raise ValueError(f"{entrant!r} is not part of {self!r}")
