"""
Dynamic single-elimination round.

Entrants can join, leave and be reset at any time while the round is
running.  Pairings are drawn uniformly at random from the pending entrants
(or created explicitly), several can be active at once, and they may be
resolved in any order.

State lives in five structures that must agree with each other:

    entrants   every entrant currently in the round
    pending    entrants waiting for an opponent
    pairings   active and finished pairings (PairingIndex)
    results    advanced / eliminated entrants of the round (ResultIndex)
    floating   results of entrants that were removed from the round

so that |entrants| == |pending| + 2*|active| + |advanced| + |eliminated|
holds after every call.  Every public method runs under one lock per round.
"""

from __future__ import annotations

import functools
import logging
import random
import threading
from typing import Callable, Hashable, Iterable, Iterator, TypeVar

from roundkeeper.config import RoundConfig
from roundkeeper.rounds.base import EliminationRound, RoundSnapshot
from roundkeeper.rounds.exceptions import (
    EntrantNotPendingError,
    InconsistentRoundError,
    MissingEntrantError,
    MissingPairingError,
    NoEntrantsError,
    NoOpponentError,
    NoSuchEntrantError,
    NoSuchPairingError,
    OrphanedPairingError,
)
from roundkeeper.rounds.pairing import Pairing
from roundkeeper.rounds.pairing_index import PairingIndex
from roundkeeper.rounds.pending import RandomPendingSet
from roundkeeper.rounds.result_index import ResultIndex
from roundkeeper.rounds.state import (
    Advanced,
    Eliminated,
    EntrantState,
    Floating,
    Paired,
    Pending,
    Unknown,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Hashable)
F = TypeVar("F", bound=Callable)


def _synchronized(method: F) -> F:
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class DynamicElimination(EliminationRound[E]):
    """Single-elimination round with random pairing and late entrants."""

    def __init__(
        self,
        entrants: Iterable[E] = (),
        config: RoundConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or RoundConfig()
        if rng is None:
            rng = random.Random(self.config.seed)

        self._lock = threading.RLock()
        self._entrants: set[E] = set()
        self._pending: RandomPendingSet[E] = RandomPendingSet(rng=rng)
        self._pairings: PairingIndex[E] = PairingIndex()
        self._results: ResultIndex[E] = ResultIndex()
        self._floating: ResultIndex[E] = ResultIndex()

        for entrant in entrants:
            self.add_entrant(entrant)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(entrants={len(self._entrants)}, "
            f"pending={len(self._pending)}, active={len(self._pairings.get_active())}, "
            f"finished={len(self._pairings.get_finished())})"
        )

    # ------------------------------------------------------------------ #
    # Entrant lifecycle                                                    #
    # ------------------------------------------------------------------ #

    @_synchronized
    def add_entrant(self, entrant: E) -> bool:
        if entrant in self._entrants:
            return False

        self._entrants.add(entrant)
        if entrant in self._floating:
            self._floating.move_to(self._results, entrant)
            logger.debug("Entrant %r rejoined with result %s", entrant, self._results.outcome_of(entrant))
        else:
            self._pending.add(entrant)
            logger.debug("Entrant %r added as pending", entrant)

        self._check_invariants()
        return True

    @_synchronized
    def remove_entrant(self, entrant: E) -> bool:
        match self.classify(entrant):
            case Pending():
                self._pending.remove(entrant)
            case Paired(pairing=pairing):
                self._pairings.remove_active(pairing)
                self._pending.add(pairing.other(entrant))
                logger.debug("Discarded %r: %r left the round", pairing, entrant)
            case Advanced() | Eliminated():
                self._results.move_to(self._floating, entrant)
            case Floating() | Unknown():
                return False

        self._entrants.remove(entrant)
        logger.debug("Entrant %r removed", entrant)
        self._check_invariants()
        return True

    @_synchronized
    def reset_entrant(self, entrant: E) -> bool:
        match self.classify(entrant):
            case Unknown() | Pending():
                return False
            case Paired(pairing=pairing):
                self._pairings.remove_active(pairing)
                self._pending.add(pairing.other(entrant))
                self._pending.add(entrant)
            case Advanced() | Eliminated():
                self._results.reset(entrant)
                self._pending.add(entrant)
            case Floating():
                self._floating.reset(entrant)

        logger.debug("Entrant %r reset", entrant)
        self._prune_finished(entrant)
        self._check_invariants()
        return True

    def _prune_finished(self, entrant: E) -> None:
        # A finished pairing survives while at least one side still holds a result.
        for pairing in self._pairings.find_finished_by_entrant(entrant):
            other = pairing.other(entrant)
            if other not in self._results and other not in self._floating:
                self._pairings.remove_finished(pairing)
                logger.info("Pruned %r: neither entrant holds a result", pairing)

    # ------------------------------------------------------------------ #
    # Matching and outcomes                                                #
    # ------------------------------------------------------------------ #

    @_synchronized
    def next_pairing(self) -> Pairing[E]:
        if len(self._pending) == 0:
            raise NoEntrantsError("No entrant is waiting for an opponent")
        if len(self._pending) == 1:
            raise NoOpponentError("Only one entrant is waiting for an opponent")

        first = self._pending.remove_random()
        second = self._pending.remove_random()
        return self._register_pairing(Pairing(first, second))

    @_synchronized
    def create_pairing(self, first: E, second: E) -> Pairing[E]:
        pairing = Pairing(first, second)
        for entrant in pairing:
            if entrant not in self._entrants:
                raise NoSuchEntrantError(f"{entrant!r} is not in the round")
        for entrant in pairing:
            if entrant not in self._pending:
                raise EntrantNotPendingError(f"{entrant!r} is not pending")

        self._pending.remove(first)
        self._pending.remove(second)
        return self._register_pairing(pairing)

    @_synchronized
    def declare_winner(self, winner: E, pairing: Pairing[E] | None = None) -> Pairing[E]:
        if pairing is None:
            if winner not in self._entrants:
                raise NoSuchEntrantError(f"{winner!r} is not in the round")
            pairing = self._pairings.find_active_by_entrant(winner)
            if pairing is None:
                raise MissingPairingError(f"{winner!r} has no active pairing")

        if winner not in pairing:
            raise ValueError(f"{winner!r} is not part of {pairing!r}")
        if winner not in self._entrants:
            raise NoSuchEntrantError(f"{winner!r} is not in the round")
        if not self._pairings.is_active(pairing):
            raise NoSuchPairingError(f"{pairing!r} is not active")

        loser = pairing.other(winner)
        self._results.advance(winner)
        self._results.eliminate(loser)
        self._finish_pairing(pairing)
        logger.debug("%r won against %r", winner, loser)
        return pairing

    @_synchronized
    def declare_tie(self, pairing: Pairing[E]) -> None:
        if not self._pairings.is_active(pairing):
            raise NoSuchPairingError(f"{pairing!r} is not active")

        self._results.eliminate(pairing.first)
        self._results.eliminate(pairing.second)
        self._finish_pairing(pairing)
        logger.debug("%r ended in a tie", pairing)

    @_synchronized
    def replay_pairing(self, pairing: Pairing[E]) -> bool:
        if self._pairings.is_active(pairing):
            return False
        if not self._pairings.is_finished(pairing):
            raise NoSuchPairingError(f"{pairing!r} is neither active nor finished")

        # Finished pairings outlive a removed entrant until both sides are reset.
        for entrant in pairing:
            if entrant not in self._entrants:
                raise MissingEntrantError(f"{entrant!r} of {pairing!r} has left the round")

        if self.is_pairing_orphaned(pairing):
            raise OrphanedPairingError(f"{pairing!r} predates a newer pairing of its entrants")

        self._results.reset(pairing.first)
        self._results.reset(pairing.second)
        self._pairings.remove_finished(pairing)
        self._pending.remove(pairing.first)
        self._pending.remove(pairing.second)
        self._register_pairing(pairing)
        logger.info("Replaying %r", pairing)

        # Both results are gone, so older pairings may have lost their last result holder.
        for entrant in pairing:
            self._prune_finished(entrant)
        return True

    def _register_pairing(self, pairing: Pairing[E]) -> Pairing[E]:
        """Index a new active pairing.  Membership and pending state are the caller's job."""
        self._pairings.add(pairing)
        logger.debug("Paired %r", pairing)
        self._check_invariants()
        return pairing

    def _finish_pairing(self, pairing: Pairing[E]) -> None:
        self._pairings.finish(pairing)
        self._check_invariants()

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    @_synchronized
    def classify(self, entrant: E) -> EntrantState:
        if entrant in self._entrants:
            if entrant in self._pending:
                return Pending()
            pairing = self._pairings.find_active_by_entrant(entrant)
            if pairing is not None:
                return Paired(pairing)
            if self._results.is_advanced(entrant):
                return Advanced()
            if self._results.is_eliminated(entrant):
                return Eliminated()
            raise InconsistentRoundError(f"{entrant!r} is in the round but in no state")

        outcome = self._floating.outcome_of(entrant)
        if outcome is not None:
            return Floating(outcome)
        return Unknown()

    @_synchronized
    def is_pairing_orphaned(self, pairing: Pairing[E]) -> bool:
        if self._pairings.is_active(pairing):
            return False
        if not self._pairings.is_finished(pairing):
            raise NoSuchPairingError(f"{pairing!r} is neither active nor finished")

        last_first = self._pairings.get_last_pairing(pairing.first)
        last_second = self._pairings.get_last_pairing(pairing.second)
        if not self._pairings.is_active(last_first) and not self._pairings.is_active(last_second):
            return False

        return pairing != last_first or pairing != last_second

    @_synchronized
    def is_finished(self) -> bool:
        return len(self._pending) == 0 and not self._pairings.has_active()

    @_synchronized
    def has_entrant(self, entrant: E) -> bool:
        return entrant in self._entrants

    @_synchronized
    def has_state_about(self, entrant: E) -> bool:
        return entrant in self._entrants or entrant in self._floating

    @_synchronized
    def has_entrant_result(self, entrant: E) -> bool:
        """In-round results only; floating results do not count."""
        return entrant in self._results

    @_synchronized
    def has_won(self, entrant: E) -> bool:
        return self._results.is_advanced(entrant) or self._floating.is_advanced(entrant)

    @_synchronized
    def has_lost(self, entrant: E) -> bool:
        return self._results.is_eliminated(entrant) or self._floating.is_eliminated(entrant)

    @_synchronized
    def is_entrant_pending(self, entrant: E) -> bool:
        return entrant in self._pending

    @_synchronized
    def is_entrant_paired(self, entrant: E) -> bool:
        return self._pairings.has_active_entrant(entrant)

    @_synchronized
    def is_entrant_advanced(self, entrant: E) -> bool:
        return self._results.is_advanced(entrant)

    @_synchronized
    def is_entrant_eliminated(self, entrant: E) -> bool:
        return self._results.is_eliminated(entrant)

    @_synchronized
    def get_entrants(self) -> frozenset[E]:
        return frozenset(self._entrants)

    @_synchronized
    def get_entrants_with_state(self) -> Iterator[E]:
        floating = self._floating.get_advanced() | self._floating.get_eliminated()
        return iter([*self._entrants, *floating])

    @_synchronized
    def get_pending_entrants(self) -> frozenset[E]:
        return self._pending.elements()

    @_synchronized
    def get_paired_entrants(self) -> frozenset[E]:
        return self._pairings.get_active_entrants()

    @_synchronized
    def get_advanced_entrants(self) -> frozenset[E]:
        return self._results.get_advanced()

    @_synchronized
    def get_eliminated_entrants(self) -> frozenset[E]:
        return self._results.get_eliminated()

    @_synchronized
    def get_active_pairings(self) -> frozenset[Pairing[E]]:
        return self._pairings.get_active()

    @_synchronized
    def get_finished_pairings(self) -> tuple[Pairing[E], ...]:
        return self._pairings.get_finished()

    @_synchronized
    def get_pairing(self, entrant: E) -> Pairing[E] | None:
        """The entrant's active pairing, or None."""
        return self._pairings.find_active_by_entrant(entrant)

    @_synchronized
    def get_last_pairing(self, entrant: E) -> Pairing[E] | None:
        return self._pairings.get_last_pairing(entrant)

    @_synchronized
    def snapshot(self) -> RoundSnapshot[E]:
        return RoundSnapshot(
            entrants=frozenset(self._entrants),
            pending=self._pending.elements(),
            active=self._pairings.get_active(),
            finished=self._pairings.get_finished(),
            advanced=self._results.get_advanced(),
            eliminated=self._results.get_eliminated(),
            floating_advanced=self._floating.get_advanced(),
            floating_eliminated=self._floating.get_eliminated(),
        )

    # ------------------------------------------------------------------ #
    # Consistency                                                          #
    # ------------------------------------------------------------------ #

    def _check_invariants(self) -> None:
        if not self.config.check_invariants:
            return

        active = self._pairings.get_active()
        advanced = self._results.get_advanced()
        eliminated = self._results.get_eliminated()
        pending = self._pending.elements()

        expected = len(pending) + 2 * len(active) + len(advanced) + len(eliminated)
        if len(self._entrants) != expected:
            raise InconsistentRoundError(
                f"{len(self._entrants)} entrants but {len(pending)} pending, "
                f"{len(active)} active pairings, {len(advanced)} advanced, "
                f"{len(eliminated)} eliminated"
            )
        if not active.isdisjoint(self._pairings.get_finished()):
            raise InconsistentRoundError("A pairing is both active and finished")

        paired = self._pairings.get_active_entrants()
        in_results = advanced | eliminated
        if not (pending | paired | in_results) <= self._entrants:
            raise InconsistentRoundError("Pending, paired or result entrants outside the round")
        if not pending.isdisjoint(paired) or not pending.isdisjoint(in_results) or not paired.isdisjoint(in_results):
            raise InconsistentRoundError("An entrant is in more than one state")

        floating = self._floating.get_advanced() | self._floating.get_eliminated()
        if not floating.isdisjoint(self._entrants):
            raise InconsistentRoundError("An entrant has both a round and a floating result")
