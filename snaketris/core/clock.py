"""
Clocks
======

Wall-clock source injected into the engine. Every timer in the game (piece
cadence, destruction mode, explosions, star delay) is a timestamp compared
against `clock.now()`, so a VirtualClock makes a game fully deterministic.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Current time in seconds."""
        ...


class MonotonicClock:
    """Real time, immune to system clock changes."""

    def now(self) -> float:
        return time.monotonic()


class VirtualClock:
    """Manually advanced clock for tests and scripted runs."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move time forward and return the new time."""
        if seconds < 0:
            raise ValueError(f"Cannot advance a clock backwards ({seconds})")
        self._now += seconds
        return self._now

    def set(self, when: float) -> None:
        if when < self._now:
            raise ValueError(f"Cannot rewind clock from {self._now} to {when}")
        self._now = float(when)
