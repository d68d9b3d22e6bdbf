"""
Shuffle - Fisher-Yates permutations of a card sequence.

Two sources of randomness:
- FisherYatesRandom: the process RNG (or an injected random.Random)
- SeededFisherYates: a linear congruential generator, so a seed always
  produces the same ordering (reproducible previews, tests)

Shuffles never mutate their input; they return a new list.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence, TypeVar
import random

T = TypeVar("T")

# LCG constants (same generator for every seeded shuffle)
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def _fisher_yates(sequence: Sequence[T], pick: Callable[[int], int]) -> list[T]:
    """Shuffle a copy of `sequence`; `pick(n)` returns an index in [0, n)."""
    items = list(sequence)
    for i in range(len(items) - 1, 0, -1):
        j = pick(i + 1)
        items[i], items[j] = items[j], items[i]
    return items


def shuffle(sequence: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Return a uniformly shuffled copy of `sequence`.

    Uses the module-level RNG unless an explicit `rng` is given.
    """
    source = rng or random
    return _fisher_yates(sequence, lambda n: source.randrange(n))


class LinearCongruentialGenerator:
    """Small deterministic generator. Not for anything security related."""

    def __init__(self, seed: int):
        self.state = int(seed)

    def next_int(self) -> int:
        """Advance and return the raw state in [0, LCG_MODULUS)."""
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state

    def next_float(self) -> float:
        """Advance and return a value in [0, 1)."""
        return self.next_int() / LCG_MODULUS

    def next_index(self, n: int) -> int:
        """Advance and return an index in [0, n)."""
        return int(self.next_float() * n)


def seeded_shuffle(sequence: Sequence[T], seed: int) -> list[T]:
    """Return a shuffled copy of `sequence`, identical for identical seeds."""
    generator = LinearCongruentialGenerator(seed)
    return _fisher_yates(sequence, generator.next_index)


class Shuffler(ABC):
    """
    Strategy for ordering a freshly built deck.

    Any plain callable taking and returning a list works too;
    see as_shuffler().
    """

    @abstractmethod
    def shuffle(self, sequence: Sequence[T]) -> list[T]:
        """Return a reordered copy of `sequence`."""
        pass

    def __call__(self, sequence: Sequence[T]) -> list[T]:
        return self.shuffle(sequence)

    def reseeded(self) -> Shuffler:
        """Strategy for the next deal of the same game (a restart)."""
        return self


class FisherYatesRandom(Shuffler):
    """Unbiased random shuffle."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng

    def shuffle(self, sequence: Sequence[T]) -> list[T]:
        return shuffle(sequence, self.rng)


class SeededFisherYates(Shuffler):
    """
    Reproducible shuffle.

    Every call restarts the generator from `seed`, so shuffling the same
    deck twice gives the same layout.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)

    def shuffle(self, sequence: Sequence[T]) -> list[T]:
        return seeded_shuffle(sequence, self.seed)

    def reseeded(self) -> SeededFisherYates:
        """
        Same generator, next seed.

        Restarts get a new layout while a session's sequence of deals stays
        reproducible from the original seed.
        """
        return SeededFisherYates(LinearCongruentialGenerator(self.seed).next_int())

    def __repr__(self) -> str:
        return f"SeededFisherYates(seed={self.seed})"


class IdentityShuffle(Shuffler):
    """Keeps deck order (cards come out as 1, 2, 3, ...)."""

    def shuffle(self, sequence: Sequence[T]) -> list[T]:
        return list(sequence)


DEFAULT_SHUFFLER: Shuffler = FisherYatesRandom()


def as_shuffler(shuffler: Shuffler | Callable[[list[Any]], list[Any]] | None) -> Callable[[list[Any]], list[Any]]:
    """Normalize None, a Shuffler or a plain function to a callable."""
    if shuffler is None:
        return DEFAULT_SHUFFLER
    if not callable(shuffler):
        raise TypeError(f"Shuffler must be callable, got {type(shuffler).__name__}")
    return shuffler
