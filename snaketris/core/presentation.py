"""
Presentation Sinks
==================

Interfaces the engine and loop call out to. Drawing, sound and score display
are implemented outside the core (see tools/play_human.py); the engine only
ever hands them read-only values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from snaketris.core.state_snapshot import GameSnapshot


class RenderSink(Protocol):
    def render(self, snapshot: "GameSnapshot") -> None:
        """Draw one frame."""
        ...


class AudioSink(Protocol):
    def apple_eaten(self) -> None:
        """Rising three-note cue."""
        ...

    def game_over(self) -> None:
        """Descending cue."""
        ...


class ScoreDisplaySink(Protocol):
    def update_score(self, length: int, score: int, high_score: int) -> None:
        ...


class NullRender:
    def render(self, snapshot: "GameSnapshot") -> None:
        pass


class NullAudio:
    def apple_eaten(self) -> None:
        pass

    def game_over(self) -> None:
        pass


class NullScoreDisplay:
    def update_score(self, length: int, score: int, high_score: int) -> None:
        pass
