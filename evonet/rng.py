"""Uniform random sources threaded through construction, mutation and breeding."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Protocol


class RandomSource(Protocol):
    """Uniform random capability consumed by the engine."""

    def uniform_float(self, lo: float, hi: float) -> float:
        """Return a float drawn uniformly from ``[lo, hi]``."""
        ...

    def uniform_int(self, lo: int, hi: int) -> int:
        """Return an integer drawn uniformly from ``[lo, hi)``."""
        ...


@dataclass(slots=True)
class PythonRandom:
    """``RandomSource`` backed by a ``random.Random`` instance."""

    rng: Random = field(default_factory=Random)

    @classmethod
    def seeded(cls, seed: int | None) -> PythonRandom:
        return cls(Random(seed))

    def uniform_float(self, lo: float, hi: float) -> float:
        return self.rng.uniform(lo, hi)

    def uniform_int(self, lo: int, hi: int) -> int:
        if hi <= lo:
            msg = f"Empty integer range [{lo}, {hi})."
            raise ValueError(msg)
        return self.rng.randrange(lo, hi)


def ensure_source(rng: RandomSource | Random | None) -> RandomSource:
    """Wrap plain ``random.Random`` objects so callers may pass either."""
    if rng is None:
        return PythonRandom()
    if isinstance(rng, Random):
        return PythonRandom(rng)
    return rng


__all__ = ["PythonRandom", "RandomSource", "ensure_source"]
