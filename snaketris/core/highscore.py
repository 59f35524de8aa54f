"""
High Score Store
================

Persists the single lifetime high score. The store is read once when a game
is created and written whenever the current score beats it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, Union

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    def load(self) -> int:
        ...

    def save(self, value: int) -> None:
        ...


class MemoryHighScoreStore:
    """Process-local store; survives restarts but not the process."""

    def __init__(self, initial: int = 0):
        self._value = int(initial)

    def load(self) -> int:
        return self._value

    def save(self, value: int) -> None:
        self._value = int(value)


class JsonHighScoreStore:
    """
    High score kept in a small JSON document: {"high_score": n}.

    A missing or unreadable file reads as 0. Write failures are logged and
    otherwise ignored so the game keeps running.
    """

    KEY = "high_score"

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> int:
        if not self._path.exists():
            return 0
        try:
            with open(self._path, "r") as f:
                data = json.load(f)
            return max(0, int(data.get(self.KEY, 0)))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable high score file %s: %s", self._path, e)
            return 0

    def save(self, value: int) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w") as f:
                json.dump({self.KEY: int(value)}, f)
        except OSError as e:
            logger.warning("Could not write high score to %s: %s", self._path, e)
