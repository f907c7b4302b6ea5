"""
Round exceptions.

Every failure of a round operation is one of these, raised before any state
is touched, so the caller can always recover and carry on with the round.
Operations that merely have nothing to do return False instead of raising.
"""

from __future__ import annotations


class RoundError(Exception):
    """Base class for all round errors."""


class NoEntrantsError(RoundError):
    """A pairing was requested but no entrant is pending."""


class NoOpponentError(RoundError):
    """A pairing was requested but only one entrant is pending."""


class NoSuchEntrantError(RoundError):
    """The entrant is not registered in the round."""


class NoSuchPairingError(RoundError):
    """The pairing is neither active nor finished."""


class MissingPairingError(RoundError):
    """The entrant has no active pairing."""


class MissingEntrantError(RoundError):
    """A pairing references an entrant that has left the round."""


class OrphanedPairingError(RoundError):
    """A finished pairing is stale relative to a newer pairing of one of its entrants."""


class EntrantNotPendingError(RoundError):
    """The entrant is registered but not waiting for an opponent."""


class InconsistentRoundError(RoundError):
    """The round's indices disagree with each other. Always a bug."""
