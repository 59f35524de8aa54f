"""
Input Controller
================

Turns key presses into queued intents and applies them to the game at a
single point per tick, so input never lands in the middle of a tick.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, Iterable, Mapping, Optional

from snaketris.core.game import CoreGame
from snaketris.core.geometry import DOWN, LEFT, RIGHT, UP, Direction, is_reverse
from snaketris.core.intents import Intent

logger = logging.getLogger(__name__)


DIRECTION_INTENTS: Dict[Intent, Direction] = {
    Intent.SNAKE_UP: UP,
    Intent.SNAKE_DOWN: DOWN,
    Intent.SNAKE_LEFT: LEFT,
    Intent.SNAKE_RIGHT: RIGHT,
}

PIECE_INTENTS = (
    Intent.PIECE_LEFT,
    Intent.PIECE_RIGHT,
    Intent.ROTATE_CW,
    Intent.ROTATE_CCW,
)


def build_key_map(bindings: Mapping[str, Iterable[str]]) -> Dict[str, Intent]:
    """Invert {intent_name: [key, ...]} into {key: Intent}."""
    key_map: Dict[str, Intent] = {}
    for intent_name, keys in bindings.items():
        intent = Intent(intent_name)
        for key in keys:
            key_map[key.lower()] = intent
    return key_map


class InputController:
    """
    Buffers player intents between ticks.

    - Direction: one pending slot. An intent that reverses the current
      heading is dropped on arrival; otherwise the latest one wins.
    - Piece control: every intent is queued and applied in arrival order.
    - Restart: only acts once the game has ended.

    drain() is called once at the start of each tick.
    """

    def __init__(
        self,
        game: CoreGame,
        bindings: Optional[Mapping[str, Iterable[str]]] = None
    ):
        if bindings is None:
            bindings = game.config.controls.as_dict()

        self._game = game
        self._key_map = build_key_map(bindings)
        self._pending_direction: Optional[Direction] = None
        self._piece_queue: Deque[Intent] = deque()
        self._restart_requested = False

    @property
    def pending_direction(self) -> Optional[Direction]:
        return self._pending_direction

    @property
    def queued_piece_intents(self) -> int:
        return len(self._piece_queue)

    def press(self, key: str) -> Optional[Intent]:
        """
        Handle a key-down by name. Unknown keys are ignored.

        Returns:
            The intent the key mapped to, or None.
        """
        intent = self._key_map.get(key.lower())
        if intent is not None:
            self.submit(intent)
        return intent

    def submit(self, intent: Intent) -> None:
        if intent is Intent.RESTART:
            self._restart_requested = True
            return

        if self._game.is_over:
            return

        direction = DIRECTION_INTENTS.get(intent)
        if direction is not None:
            if not is_reverse(self._game.world.direction, direction):
                self._pending_direction = direction
            return

        self._piece_queue.append(intent)

    def drain(self) -> int:
        """
        Apply buffered intents to the game.

        Returns:
            Number of intents that changed game state.
        """
        applied = 0
        game = self._game

        if game.is_over:
            if self._restart_requested:
                game.reset()
                applied += 1
            self.clear()
            return applied
        self._restart_requested = False

        if self._pending_direction is not None:
            if game.set_direction(self._pending_direction):
                applied += 1
            self._pending_direction = None

        while self._piece_queue:
            intent = self._piece_queue.popleft()
            if self._apply_piece_intent(intent):
                applied += 1

        return applied

    def _apply_piece_intent(self, intent: Intent) -> bool:
        if intent is Intent.PIECE_LEFT:
            return self._game.move_piece(-1)
        if intent is Intent.PIECE_RIGHT:
            return self._game.move_piece(1)
        if intent is Intent.ROTATE_CW:
            return self._game.rotate_piece(clockwise=True)
        if intent is Intent.ROTATE_CCW:
            return self._game.rotate_piece(clockwise=False)
        logger.debug("Ignoring unexpected piece intent %s", intent)
        return False

    def clear(self) -> None:
        self._pending_direction = None
        self._piece_queue.clear()
        self._restart_requested = False
