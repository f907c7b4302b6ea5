"""ResultIndex — which entrants advanced and which were eliminated."""

from __future__ import annotations

from typing import Generic, Hashable, Literal, TypeVar

E = TypeVar("E", bound=Hashable)

Outcome = Literal["advanced", "eliminated"]


class ResultIndex(Generic[E]):
    """
    Two disjoint sets of entrants: advanced and eliminated.

    A round keeps one instance for its own entrants and a second one for the
    "floating" results of entrants that were removed from the round.
    """

    def __init__(self) -> None:
        self._advanced: set[E] = set()
        self._eliminated: set[E] = set()

    def __contains__(self, entrant: object) -> bool:
        return entrant in self._advanced or entrant in self._eliminated

    def __len__(self) -> int:
        return len(self._advanced) + len(self._eliminated)

    def contains(self, entrant: E) -> bool:
        return entrant in self

    def advance(self, entrant: E) -> None:
        self._eliminated.discard(entrant)
        self._advanced.add(entrant)

    def eliminate(self, entrant: E) -> None:
        self._advanced.discard(entrant)
        self._eliminated.add(entrant)

    def is_advanced(self, entrant: E) -> bool:
        return entrant in self._advanced

    def is_eliminated(self, entrant: E) -> bool:
        return entrant in self._eliminated

    def outcome_of(self, entrant: E) -> Outcome | None:
        if entrant in self._advanced:
            return "advanced"
        if entrant in self._eliminated:
            return "eliminated"
        return None

    def reset(self, entrant: E) -> bool:
        """Forget the entrant's result.  Returns whether there was one."""
        if entrant in self._advanced:
            self._advanced.remove(entrant)
            return True
        if entrant in self._eliminated:
            self._eliminated.remove(entrant)
            return True
        return False

    def move_to(self, other: ResultIndex[E], entrant: E) -> bool:
        """
        Transfer the entrant's result to another index, replacing whatever
        that index held for it.  Returns whether there was a result to move.
        """
        outcome = self.outcome_of(entrant)
        if outcome is None:
            return False
        self.reset(entrant)
        if outcome == "advanced":
            other.advance(entrant)
        else:
            other.eliminate(entrant)
        return True

    def get_advanced(self) -> frozenset[E]:
        return frozenset(self._advanced)

    def get_eliminated(self) -> frozenset[E]:
        return frozenset(self._eliminated)
