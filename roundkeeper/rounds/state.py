"""
Entrant state variants.

A round never stores a status per entrant; it derives one from its indices.
DynamicElimination.classify() is the only place that derivation happens and
returns exactly one of these, so callers can dispatch with a match statement.
"""

from __future__ import annotations

from dataclasses import dataclass

from roundkeeper.rounds.pairing import Pairing
from roundkeeper.rounds.result_index import Outcome


@dataclass(frozen=True)
class Pending:
    """Waiting for an opponent."""


@dataclass(frozen=True)
class Paired:
    """Member of exactly one active pairing."""

    pairing: Pairing


@dataclass(frozen=True)
class Advanced:
    """Won its last pairing."""


@dataclass(frozen=True)
class Eliminated:
    """Lost or tied its last pairing."""


@dataclass(frozen=True)
class Floating:
    """Removed from the round, but its result is still on record."""

    outcome: Outcome


@dataclass(frozen=True)
class Unknown:
    """The round holds no state about the entrant."""


EntrantState = Pending | Paired | Advanced | Eliminated | Floating | Unknown
