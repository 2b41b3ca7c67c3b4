from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class RNG:
    """
    Deterministic-friendly RNG wrapper around random.Random.

    Round generators draw from an injected RNG instead of Python's global
    random state, so a fixed seed reproduces the same turns, targets and
    expressions in tests.
    """

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def random(self) -> float:
        """Return the next random float in the range [0.0, 1.0)."""
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self._rng.randrange(len(seq))]

    def sample(self, population: Sequence[T], k: int) -> List[T]:
        """Choose k unique elements from population (no replacement)."""
        return self._rng.sample(population, k)

    def state(self):
        """Return the internal PRNG state for debugging."""
        return self._rng.getstate()

    def set_state(self, state) -> None:
        """Restore the internal PRNG state."""
        self._rng.setstate(state)
