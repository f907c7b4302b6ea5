"""
Tests for the building blocks of a round: Pairing, RandomPendingSet,
PairingIndex and ResultIndex.
"""

from __future__ import annotations

import random
from collections import Counter

import pytest

from roundkeeper.rounds import NoSuchPairingError, Pairing, PairingIndex, RandomPendingSet, ResultIndex


# --------------------------------------------------------------------------- #
# Pairing                                                                      #
# --------------------------------------------------------------------------- #

class TestPairing:
    def test_equality_ignores_order(self):
        assert Pairing("a", "b") == Pairing("b", "a")
        assert hash(Pairing("a", "b")) == hash(Pairing("b", "a"))

    def test_positions_are_kept(self):
        pairing = Pairing("b", "a")
        assert (pairing.first, pairing.second) == ("b", "a")
        assert list(pairing) == ["b", "a"]

    def test_different_entrants_not_equal(self):
        assert Pairing("a", "b") != Pairing("a", "c")

    def test_same_entrant_twice_rejected(self):
        with pytest.raises(ValueError):
            Pairing("a", "a")

    def test_contains(self):
        pairing = Pairing("a", "b")
        assert "a" in pairing
        assert pairing.contains("b")
        assert "c" not in pairing

    def test_other(self):
        pairing = Pairing("a", "b")
        assert pairing.other("a") == "b"
        assert pairing.other("b") == "a"
        with pytest.raises(ValueError, match="not part of"):
            pairing.other("c")

    def test_usable_as_dict_key(self):
        d = {Pairing(1, 2): "x"}
        assert d[Pairing(2, 1)] == "x"

    def test_immutable(self):
        pairing = Pairing("a", "b")
        with pytest.raises(AttributeError):
            pairing.first = "c"  # type: ignore[misc]


# --------------------------------------------------------------------------- #
# RandomPendingSet                                                             #
# --------------------------------------------------------------------------- #

class TestRandomPendingSet:
    def test_add_and_contains(self):
        pending = RandomPendingSet()
        assert pending.add("a")
        assert not pending.add("a")
        assert "a" in pending
        assert len(pending) == 1

    def test_remove(self):
        pending = RandomPendingSet(["a", "b", "c"])
        assert pending.remove("a")
        assert not pending.remove("a")
        assert pending.elements() == {"b", "c"}

    def test_remove_keeps_remaining_elements_reachable(self):
        pending = RandomPendingSet(range(10))
        for element in (0, 9, 4, 5):
            pending.remove(element)
        assert set(pending) == {1, 2, 3, 6, 7, 8}
        for element in (1, 2, 3, 6, 7, 8):
            assert pending.remove(element)
        assert len(pending) == 0

    def test_remove_random_drains_without_repeats(self):
        pending = RandomPendingSet(range(20), rng=random.Random(1))
        drawn = [pending.remove_random() for _ in range(20)]
        assert sorted(drawn) == list(range(20))
        assert len(pending) == 0

    def test_remove_random_on_empty_raises(self):
        with pytest.raises(KeyError):
            RandomPendingSet().remove_random()

    def test_remove_random_is_uniform(self):
        rng = random.Random(1234)
        counts: Counter[str] = Counter()
        for _ in range(4000):
            pending = RandomPendingSet(["a", "b", "c", "d"], rng=rng)
            counts[pending.remove_random()] += 1
        # Each of 4 elements expects 1000 draws; allow a generous margin.
        for element in "abcd":
            assert 850 < counts[element] < 1150


# --------------------------------------------------------------------------- #
# PairingIndex                                                                 #
# --------------------------------------------------------------------------- #

AB = Pairing("a", "b")
AC = Pairing("a", "c")
CD = Pairing("c", "d")


class TestPairingIndex:
    def test_add_makes_pairing_active(self):
        index = PairingIndex()
        index.add(AB)
        assert index.is_active(AB)
        assert not index.is_finished(AB)
        assert AB in index
        assert index.find_active_by_entrant("a") == AB
        assert index.get_active_entrants() == {"a", "b"}

    def test_add_twice_rejected(self):
        index = PairingIndex()
        index.add(AB)
        with pytest.raises(ValueError):
            index.add(Pairing("b", "a"))

    def test_entrant_with_active_pairing_rejected(self):
        index = PairingIndex()
        index.add(AB)
        with pytest.raises(ValueError, match="already has an active pairing"):
            index.add(AC)
        assert not index.is_active(AC)

    def test_finish_moves_pairing(self):
        index = PairingIndex()
        index.add(AB)
        index.finish(AB)
        assert not index.is_active(AB)
        assert index.is_finished(AB)
        assert index.find_active_by_entrant("a") is None
        assert index.find_finished_by_entrant("a") == {AB}
        assert index.get_finished_entrants() == {"a", "b"}

    def test_finish_inactive_raises(self):
        with pytest.raises(NoSuchPairingError):
            PairingIndex().finish(AB)

    def test_finished_order_is_resolution_order(self):
        index = PairingIndex()
        index.add(AB)
        index.add(CD)
        index.finish(CD)
        index.finish(AB)
        assert index.get_finished() == (CD, AB)

    def test_last_finished_pairing_of_entrant(self):
        index = PairingIndex()
        index.add(AB)
        index.finish(AB)
        index.add(AC)
        assert index.get_last_finished_pairing("a") == AB
        assert index.get_last_pairing("a") == AC
        index.finish(AC)
        assert index.get_last_finished_pairing("a") == AC
        assert index.get_last_pairing("b") == AB
        assert index.get_last_pairing("z") is None

    def test_remove_finished_restores_previous_last(self):
        index = PairingIndex()
        for pairing in (AB, AC):
            index.add(pairing)
            index.finish(pairing)
        assert index.remove(AC)
        assert index.get_last_finished_pairing("a") == AB
        assert index.get_last_finished_pairing("c") is None
        assert index.get_finished_entrants() == {"a", "b"}

    def test_remove_active_by_entrant(self):
        index = PairingIndex()
        index.add(AB)
        assert index.remove_active_by_entrant("b") == AB
        assert index.remove_active_by_entrant("b") is None
        assert not index.has_active()
        assert len(index) == 0

    def test_remove_unknown_returns_false(self):
        assert not PairingIndex().remove(AB)

    def test_membership_of_none(self):
        index = PairingIndex()
        assert not index.is_active(None)
        assert not index.is_finished(None)


# --------------------------------------------------------------------------- #
# ResultIndex                                                                  #
# --------------------------------------------------------------------------- #

class TestResultIndex:
    def test_advance_and_eliminate(self):
        results = ResultIndex()
        results.advance("a")
        results.eliminate("b")
        assert results.is_advanced("a")
        assert results.is_eliminated("b")
        assert results.contains("a") and "b" in results
        assert results.outcome_of("a") == "advanced"
        assert results.outcome_of("c") is None

    def test_sets_stay_disjoint(self):
        results = ResultIndex()
        results.advance("a")
        results.eliminate("a")
        assert results.get_advanced() == frozenset()
        assert results.get_eliminated() == {"a"}
        assert len(results) == 1

    def test_reset(self):
        results = ResultIndex()
        results.advance("a")
        assert results.reset("a")
        assert not results.reset("a")
        assert "a" not in results

    def test_move_to(self):
        live, floating = ResultIndex(), ResultIndex()
        live.eliminate("a")
        assert live.move_to(floating, "a")
        assert "a" not in live
        assert floating.is_eliminated("a")

    def test_move_to_without_result(self):
        live, floating = ResultIndex(), ResultIndex()
        assert not live.move_to(floating, "a")
        assert len(floating) == 0
