"""
Engine errors.

Only configuration mistakes raise. Mistimed or invalid clicks are
no-ops in the reducer and never reach this module.
"""

from __future__ import annotations


class MemoryMatchError(Exception):
    """Base class for engine errors."""


class InvalidPairCount(MemoryMatchError, ValueError):
    """Requested pair count is outside the supported range."""

    def __init__(self, pair_count, minimum: int, maximum: int, reason: str | None = None):
        self.pair_count = pair_count
        self.minimum = minimum
        self.maximum = maximum
        message = reason or (
            f"Number of pairs must be between {minimum} and {maximum}, got {pair_count!r}"
        )
        super().__init__(message)


class DeckIntegrityError(MemoryMatchError):
    """A deck breaks the two-cards-per-image rule."""
