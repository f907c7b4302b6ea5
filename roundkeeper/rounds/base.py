"""
Round abstractions — the EliminationRound interface and the RoundSnapshot it exports.

A round tracks a single elimination round: who is waiting for an opponent,
who is currently matched, and who has advanced or been eliminated.  Anything
above that (brackets of rounds, persistence, presentation) lives with the
caller, which talks to a round only through this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Hashable, Iterable, Iterator, TypeVar

from roundkeeper.rounds.pairing import Pairing
from roundkeeper.rounds.state import EntrantState

E = TypeVar("E", bound=Hashable)


@dataclass(frozen=True)
class RoundSnapshot(Generic[E]):
    """
    Read-only copy of everything needed to rebuild a round.

    finished keeps resolution order; all other collections are unordered.
    """

    entrants: frozenset[E]
    pending: frozenset[E]
    active: frozenset[Pairing[E]]
    finished: tuple[Pairing[E], ...]
    advanced: frozenset[E]
    eliminated: frozenset[E]
    floating_advanced: frozenset[E]
    floating_eliminated: frozenset[E]

    @property
    def is_finished(self) -> bool:
        return not self.pending and not self.active


class EliminationRound(ABC, Generic[E]):
    """
    Abstract base class for elimination rounds.

    Failures raise RoundError subclasses (see rounds/exceptions.py) before
    any state changes.  Calls that find nothing to do return False.
    """

    # ------------------------------------------------------------------ #
    # Entrant lifecycle                                                    #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def add_entrant(self, entrant: E) -> bool:
        """
        Register an entrant.

        An entrant with a floating result comes back with that result;
        any other new entrant becomes pending.  False if already registered.
        """

    @abstractmethod
    def remove_entrant(self, entrant: E) -> bool:
        """
        Take an entrant out of the round.

        An active pairing is discarded and the opponent goes back to pending.
        A result is kept as a floating result.  False if not registered.
        """

    @abstractmethod
    def reset_entrant(self, entrant: E) -> bool:
        """
        Forget the entrant's pairing or result and make it pending again
        (or, if it was removed, drop its floating result).  Finished pairings
        whose other entrant holds no result either are pruned.

        False if the round knows nothing about the entrant or it is pending.
        """

    # ------------------------------------------------------------------ #
    # Matching and outcomes                                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def next_pairing(self) -> Pairing[E]:
        """Pair two uniformly chosen pending entrants."""

    @abstractmethod
    def create_pairing(self, first: E, second: E) -> Pairing[E]:
        """Pair two specific pending entrants."""

    @abstractmethod
    def declare_winner(self, winner: E, pairing: Pairing[E] | None = None) -> Pairing[E]:
        """
        Resolve a pairing with a winner.  Without an explicit pairing the
        winner's active pairing is used.  Returns the resolved pairing.
        """

    @abstractmethod
    def declare_tie(self, pairing: Pairing[E]) -> None:
        """Resolve a pairing with both entrants eliminated."""

    @abstractmethod
    def replay_pairing(self, pairing: Pairing[E]) -> bool:
        """
        Reactivate a finished pairing, discarding both results.
        False if the pairing is already active.
        """

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def classify(self, entrant: E) -> EntrantState:
        """Return the one state the entrant is in."""

    @abstractmethod
    def is_pairing_orphaned(self, pairing: Pairing[E]) -> bool:
        """Whether a finished pairing is stale relative to its entrants' newer pairings."""

    @abstractmethod
    def is_finished(self) -> bool:
        """True once nobody is pending and no pairing is active."""

    @abstractmethod
    def has_entrant(self, entrant: E) -> bool: ...

    @abstractmethod
    def has_state_about(self, entrant: E) -> bool: ...

    @abstractmethod
    def get_entrants(self) -> frozenset[E]: ...

    @abstractmethod
    def get_entrants_with_state(self) -> Iterator[E]: ...

    @abstractmethod
    def get_pending_entrants(self) -> frozenset[E]: ...

    @abstractmethod
    def get_paired_entrants(self) -> frozenset[E]: ...

    @abstractmethod
    def get_advanced_entrants(self) -> frozenset[E]: ...

    @abstractmethod
    def get_eliminated_entrants(self) -> frozenset[E]: ...

    @abstractmethod
    def get_active_pairings(self) -> frozenset[Pairing[E]]: ...

    @abstractmethod
    def get_finished_pairings(self) -> tuple[Pairing[E], ...]:
        """Finished pairings, oldest resolution first."""

    @abstractmethod
    def get_last_pairing(self, entrant: E) -> Pairing[E] | None: ...

    @abstractmethod
    def snapshot(self) -> RoundSnapshot[E]: ...

    def add_entrants(self, entrants: Iterable[E]) -> int:
        """Register several entrants.  Returns how many were new."""
        return sum(1 for entrant in entrants if self.add_entrant(entrant))
