"""
Scoring System
==============

Applies points for game events and keeps the persisted high score in step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from snaketris.core.config_loader import GameConfig, get_config
from snaketris.core.highscore import HighScoreStore, MemoryHighScoreStore
from snaketris.core.presentation import NullScoreDisplay, ScoreDisplaySink

# Score event kinds
APPLE = "apple"
STAR = "star"
DESTROY_SETTLED = "destroy_settled"
DESTROY_FALLING = "destroy_falling"


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    kind: str

    def __repr__(self) -> str:
        return f"ScoreEvent({self.kind}={self.points})"


class ScoreTracker:
    """
    Tracks current score and the lifetime high score.

    - Apple: points per segment times the new snake length
    - Star: flat bonus
    - Destroying a settled cell / the falling piece: flat bonus each

    The high score is loaded from the store once and survives reset().
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[HighScoreStore] = None,
        display: Optional[ScoreDisplaySink] = None
    ):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
            store: High score persistence. In-memory if None.
            display: Notified on every length/score change.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._store = store if store is not None else MemoryHighScoreStore()
        self._display = display if display is not None else NullScoreDisplay()
        self._score: int = 0
        self._high_score: int = self._store.load()
        self._events: List[ScoreEvent] = []

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def high_score(self) -> int:
        return self._high_score

    @property
    def events(self) -> List[ScoreEvent]:
        """Score events since the last reset."""
        return list(self._events)

    def apple_points(self, new_length: int) -> int:
        return self._config.scoring.apple_points_per_segment * new_length

    def apply_apple(self, new_length: int) -> ScoreEvent:
        return self._award(self.apple_points(new_length), APPLE)

    def apply_star(self) -> ScoreEvent:
        return self._award(self._config.scoring.star_bonus, STAR)

    def apply_destroy_settled(self) -> ScoreEvent:
        return self._award(self._config.scoring.destroy_settled_points, DESTROY_SETTLED)

    def apply_destroy_falling(self) -> ScoreEvent:
        return self._award(self._config.scoring.destroy_falling_points, DESTROY_FALLING)

    def _award(self, points: int, kind: str) -> ScoreEvent:
        event = ScoreEvent(points=points, kind=kind)
        self._score += points
        self._events.append(event)
        if self._score > self._high_score:
            self._high_score = self._score
            self._store.save(self._high_score)
        return event

    def notify(self, length: int) -> None:
        """Push length, score and high score to the display."""
        self._display.update_score(length, self._score, self._high_score)

    def reset(self) -> None:
        """Reset score to zero. The high score is kept."""
        self._score = 0
        self._events = []
