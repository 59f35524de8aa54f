"""
RNG - Seedable Random Source
============================

Every random decision in the game (piece type, spawn column, apple and star
cells, star delay) is drawn through one RandomSource so that a seed fully
determines placement.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource:
    """
    Thin wrapper over random.Random.

    Tests may subclass it and override randrange/uniform to script exact
    placements.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize random source.

        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def randrange(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        return self._rng.randrange(n)

    def uniform(self, low: float, high: float) -> float:
        """Uniform float in [low, high]."""
        return self._rng.uniform(low, high)

    def choice(self, items: Sequence[T]) -> T:
        """
        Uniform choice from a non-empty sequence.

        Routed through randrange so scripted subclasses control it too.
        """
        return items[self.randrange(len(items))]

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)
