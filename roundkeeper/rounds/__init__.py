"""
Rounds package.

create_round() is the single entry point for instantiating any round.

To add a new round format:
  1. Create roundkeeper/rounds/<name>.py implementing EliminationRound
  2. Add a case here
"""

from __future__ import annotations

import random
from typing import Hashable, Iterable, Literal

from roundkeeper.config import RoundConfig
from roundkeeper.rounds.base import EliminationRound, RoundSnapshot
from roundkeeper.rounds.dynamic import DynamicElimination
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
    RoundError,
)
from roundkeeper.rounds.pairing import Pairing
from roundkeeper.rounds.pairing_index import PairingIndex
from roundkeeper.rounds.pending import RandomPendingSet
from roundkeeper.rounds.result_index import Outcome, ResultIndex
from roundkeeper.rounds.state import (
    Advanced,
    Eliminated,
    EntrantState,
    Floating,
    Paired,
    Pending,
    Unknown,
)

RoundKind = Literal["dynamic"]

__all__ = [
    # Base types
    "EliminationRound",
    "RoundSnapshot",
    "Pairing",
    "Outcome",
    # Collaborators
    "PairingIndex",
    "RandomPendingSet",
    "ResultIndex",
    # Entrant states
    "EntrantState",
    "Pending",
    "Paired",
    "Advanced",
    "Eliminated",
    "Floating",
    "Unknown",
    # Errors
    "RoundError",
    "NoEntrantsError",
    "NoOpponentError",
    "NoSuchEntrantError",
    "NoSuchPairingError",
    "MissingPairingError",
    "MissingEntrantError",
    "OrphanedPairingError",
    "EntrantNotPendingError",
    "InconsistentRoundError",
    # Implementations
    "DynamicElimination",
    # Factory
    "RoundKind",
    "create_round",
]


def create_round(
    kind: RoundKind = "dynamic",
    entrants: Iterable[Hashable] = (),
    config: RoundConfig | None = None,
    rng: random.Random | None = None,
) -> EliminationRound:
    """
    Instantiate the correct EliminationRound subclass.

    Args:
        kind:     "dynamic"
        entrants: registered in iteration order; all start out pending
        config:   seed and invariant checking; defaults to RoundConfig()
        rng:      overrides config.seed for pending selection
    """
    match kind:
        case "dynamic":
            return DynamicElimination(entrants, config=config, rng=rng)
        case _:
            raise ValueError(f"Unknown round kind: {kind!r}. Valid kinds: dynamic")
