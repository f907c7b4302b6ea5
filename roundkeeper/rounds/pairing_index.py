"""
PairingIndex — active and finished pairings of a round, with lookups by entrant.

Two partitions:
  active   — unresolved pairings; an entrant is in at most one.
  finished — resolved pairings in the order they were resolved; an entrant
             may be in several.

Ordered sets are plain dicts mapping pairing -> None, so insertion order is
resolution order and the last key of an entrant's finished dict is its most
recent finished pairing.
"""

from __future__ import annotations

from typing import Generic, Hashable, TypeVar

from roundkeeper.rounds.exceptions import NoSuchPairingError
from roundkeeper.rounds.pairing import Pairing

E = TypeVar("E", bound=Hashable)


class PairingIndex(Generic[E]):
    def __init__(self) -> None:
        self._active: dict[Pairing[E], None] = {}
        self._active_by_entrant: dict[E, Pairing[E]] = {}
        self._finished: dict[Pairing[E], None] = {}
        self._finished_by_entrant: dict[E, dict[Pairing[E], None]] = {}

    def __contains__(self, pairing: object) -> bool:
        return pairing in self._active or pairing in self._finished

    def __len__(self) -> int:
        return len(self._active) + len(self._finished)

    # ------------------------------------------------------------------ #
    # Mutation                                                             #
    # ------------------------------------------------------------------ #

    def add(self, pairing: Pairing[E]) -> None:
        """
        Register a new active pairing.

        Raises:
            ValueError: the pairing is already indexed, or one of its entrants
                        already has an active pairing.
        """
        if pairing in self:
            raise ValueError(f"{pairing!r} is already indexed")
        for entrant in pairing:
            if entrant in self._active_by_entrant:
                raise ValueError(f"{entrant!r} already has an active pairing")

        self._active[pairing] = None
        for entrant in pairing:
            self._active_by_entrant[entrant] = pairing

    def finish(self, pairing: Pairing[E]) -> None:
        """
        Move an active pairing to the tail of the finished partition.

        Raises:
            NoSuchPairingError: the pairing is not active.
        """
        if pairing not in self._active:
            raise NoSuchPairingError(f"{pairing!r} is not active")

        self._unlink_active(pairing)
        self._finished[pairing] = None
        for entrant in pairing:
            self._finished_by_entrant.setdefault(entrant, {})[pairing] = None

    def remove(self, pairing: Pairing[E]) -> bool:
        """Drop the pairing from whichever partition holds it."""
        return self.remove_active(pairing) or self.remove_finished(pairing)

    def remove_active(self, pairing: Pairing[E]) -> bool:
        if pairing not in self._active:
            return False
        self._unlink_active(pairing)
        return True

    def remove_finished(self, pairing: Pairing[E]) -> bool:
        if pairing not in self._finished:
            return False
        del self._finished[pairing]
        for entrant in pairing:
            by_entrant = self._finished_by_entrant[entrant]
            del by_entrant[pairing]
            if not by_entrant:
                del self._finished_by_entrant[entrant]
        return True

    def remove_active_by_entrant(self, entrant: E) -> Pairing[E] | None:
        """Drop the entrant's active pairing and return it, or None if it has none."""
        pairing = self._active_by_entrant.get(entrant)
        if pairing is not None:
            self._unlink_active(pairing)
        return pairing

    def _unlink_active(self, pairing: Pairing[E]) -> None:
        del self._active[pairing]
        for entrant in pairing:
            del self._active_by_entrant[entrant]

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    def is_active(self, pairing: Pairing[E] | None) -> bool:
        return pairing is not None and pairing in self._active

    def is_finished(self, pairing: Pairing[E] | None) -> bool:
        return pairing is not None and pairing in self._finished

    def has_active(self) -> bool:
        return bool(self._active)

    def has_active_entrant(self, entrant: E) -> bool:
        return entrant in self._active_by_entrant

    def find_active_by_entrant(self, entrant: E) -> Pairing[E] | None:
        return self._active_by_entrant.get(entrant)

    def find_finished_by_entrant(self, entrant: E) -> frozenset[Pairing[E]]:
        return frozenset(self._finished_by_entrant.get(entrant, ()))

    def get_last_finished_pairing(self, entrant: E) -> Pairing[E] | None:
        """The most recently finished pairing containing entrant, or None."""
        by_entrant = self._finished_by_entrant.get(entrant)
        if not by_entrant:
            return None
        return next(reversed(by_entrant))

    def get_last_pairing(self, entrant: E) -> Pairing[E] | None:
        """
        The entrant's newest pairing: its active one if it has one,
        otherwise its most recently finished one, otherwise None.
        """
        active = self._active_by_entrant.get(entrant)
        if active is not None:
            return active
        return self.get_last_finished_pairing(entrant)

    def get_active(self) -> frozenset[Pairing[E]]:
        return frozenset(self._active)

    def get_finished(self) -> tuple[Pairing[E], ...]:
        """Finished pairings, oldest resolution first."""
        return tuple(self._finished)

    def get_active_entrants(self) -> frozenset[E]:
        return frozenset(self._active_by_entrant)

    def get_finished_entrants(self) -> frozenset[E]:
        return frozenset(self._finished_by_entrant)
