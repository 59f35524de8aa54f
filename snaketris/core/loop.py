"""
Game Loop
=========

Single-threaded scheduler: drain input, tick once, render once, then wait
for the game's *current* snake interval before the next cycle.
"""

from __future__ import annotations

from typing import Optional

from snaketris.core.clock import Clock
from snaketris.core.controls import InputController
from snaketris.core.game import CoreGame, TickResult
from snaketris.core.presentation import NullRender, RenderSink


class GameLoop:
    """
    Drives a CoreGame from a frame loop.

    Call poll() as often as convenient (e.g. every display frame); a cycle
    runs only when the previous one's interval has elapsed. The interval is
    read from the game after every tick since eating apples shortens it.
    """

    def __init__(
        self,
        game: CoreGame,
        controller: Optional[InputController] = None,
        render: Optional[RenderSink] = None,
        clock: Optional[Clock] = None
    ):
        self._game = game
        self._controller = controller if controller is not None else InputController(game)
        self._render = render if render is not None else NullRender()
        self._clock = clock if clock is not None else game.clock
        self._next_cycle_at: Optional[float] = None
        self._cycles = 0

    @property
    def controller(self) -> InputController:
        return self._controller

    @property
    def next_cycle_at(self) -> Optional[float]:
        return self._next_cycle_at

    @property
    def cycles(self) -> int:
        return self._cycles

    def is_due(self) -> bool:
        return self._next_cycle_at is None or self._clock.now() >= self._next_cycle_at

    def cycle(self) -> TickResult:
        """Run one full cycle regardless of timing."""
        self._controller.drain()
        result = self._game.tick()
        self._render.render(result.snapshot)
        self._cycles += 1
        self._next_cycle_at = self._clock.now() + self._game.snake_interval
        return result

    def poll(self) -> Optional[TickResult]:
        """Run a cycle if one is due."""
        if not self.is_due():
            return None
        return self.cycle()
