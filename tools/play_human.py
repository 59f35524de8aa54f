"""
Human Play Mode
================

Play Snaketris interactively: one hand steers the snake, the other steers
the falling blocks.

Controls:
    - Arrows: Steer the snake
    - A / D: Shift the falling piece left / right
    - S / W: Rotate the falling piece clockwise / counter-clockwise
    - Enter: Restart after game over
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--cell-size PX] [--fps FPS]
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import Optional, Tuple

import numpy as np
import pygame

from snaketris.core.config_loader import GameConfig, load_config
from snaketris.core.controls import InputController
from snaketris.core.game import CoreGame
from snaketris.core.geometry import round_half_up
from snaketris.core.highscore import JsonHighScoreStore
from snaketris.core.loop import GameLoop
from snaketris.core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


class SnaketrisRenderer:
    """
    Dark, vintage-styled grid renderer with a score panel on the right.

    Implements both the render sink and the score display sink.
    """

    def __init__(self, config: GameConfig, screen: pygame.Surface, cell_size: int):
        self._config = config
        self._screen = screen
        self._cell = cell_size
        self._board_w = config.board.width * cell_size
        self._board_h = config.board.height * cell_size
        self._panel_x = self._board_w

        # Colors - vintage palette
        self._bg_top = (10, 10, 10)
        self._bg_bottom = (26, 26, 26)
        self._grid_line = (45, 27, 14)
        self._head = (34, 139, 34)
        self._body = (0, 100, 0)
        self._head_hot = (255, 69, 0)
        self._body_hot = (255, 99, 71)
        self._apple = (139, 0, 0)
        self._apple_highlight = (220, 20, 60)
        self._star = (255, 215, 0)
        self._text_dark = (230, 220, 200)
        self._text_light = (150, 140, 120)

        # Score display state
        self._length = 0
        self._score = 0
        self._high_score = 0

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 42)
        self._font_medium = pygame.font.Font(None, 28)
        self._font_small = pygame.font.Font(None, 20)

        self._bg_surface = self._create_background()

    def _create_background(self) -> pygame.Surface:
        """Gradient board background with a faint grid."""
        surface = pygame.Surface((self._board_w, self._board_h))
        for y in range(self._board_h):
            t = y / self._board_h
            color = tuple(
                int(a * (1 - t) + b * t) for a, b in zip(self._bg_top, self._bg_bottom)
            )
            pygame.draw.line(surface, color, (0, y), (self._board_w, y))
        for x in range(self._config.board.width + 1):
            pygame.draw.line(surface, self._grid_line, (x * self._cell, 0), (x * self._cell, self._board_h))
        for y in range(self._config.board.height + 1):
            pygame.draw.line(surface, self._grid_line, (0, y * self._cell), (self._board_w, y * self._cell))
        return surface

    def update_score(self, length: int, score: int, high_score: int) -> None:
        self._length = length
        self._score = score
        self._high_score = high_score

    def render(self, snapshot: GameSnapshot) -> None:
        """Render the complete game scene."""
        self._screen.fill((0, 0, 0))
        self._screen.blit(self._bg_surface, (0, 0))

        for settled in snapshot.settled:
            self._draw_block(settled.cell[0], settled.cell[1], settled.color)

        if snapshot.falling is not None:
            piece = snapshot.falling
            # Draw at the fractional row so the fall looks continuous
            drift = piece.y - round_half_up(piece.y)
            for (cx, cy) in piece.cells:
                self._draw_block(cx, cy + drift, piece.color)

        if snapshot.apple is not None:
            self._draw_apple(snapshot.apple)
        if snapshot.star is not None:
            self._draw_star(snapshot.star)

        self._draw_snake(snapshot)
        for explosion in snapshot.explosions:
            self._draw_explosion(explosion.cell, explosion.progress)

        self._draw_panel(snapshot)
        if snapshot.is_over:
            self._draw_game_over(snapshot)

        pygame.display.flip()

    def _cell_rect(self, x: float, y: float) -> pygame.Rect:
        return pygame.Rect(
            int(x * self._cell) + 1, int(y * self._cell) + 1, self._cell - 2, self._cell - 2
        )

    def _draw_block(self, x: float, y: float, color: Tuple[int, int, int]) -> None:
        pygame.draw.rect(self._screen, color, self._cell_rect(x, y))

    def _draw_snake(self, snapshot: GameSnapshot) -> None:
        hot = snapshot.destruction_mode
        for index, (x, y) in enumerate(snapshot.snake):
            if index == 0:
                self._draw_block(x, y, self._head_hot if hot else self._head)
                self._draw_eyes(x, y, snapshot.direction)
            else:
                self._draw_block(x, y, self._body_hot if hot else self._body)

    def _draw_eyes(self, x: int, y: int, direction: Tuple[int, int]) -> None:
        eye, offset, pupil = 4, 6, 2
        left = x * self._cell + offset
        right = x * self._cell + self._cell - offset - eye
        top = y * self._cell + offset
        for ex in (left, right):
            pygame.draw.rect(self._screen, (255, 255, 255), (ex, top, eye, eye))
            px = ex + 1 + direction[0]
            py = top + 1 + direction[1]
            pygame.draw.rect(self._screen, (0, 0, 0), (px, py, pupil, pupil))

    def _center(self, cell: Tuple[int, int]) -> Tuple[int, int]:
        return (cell[0] * self._cell + self._cell // 2, cell[1] * self._cell + self._cell // 2)

    def _draw_apple(self, cell: Tuple[int, int]) -> None:
        cx, cy = self._center(cell)
        size = self._cell // 3
        pygame.draw.circle(self._screen, self._apple, (cx, cy + 2), size)
        pygame.draw.circle(self._screen, self._apple_highlight, (cx - 3, cy - 1), int(size * 0.7))
        pygame.draw.rect(self._screen, (101, 67, 33), (cx - 2, cy - size - 2, 4, 8))

    def _draw_star(self, cell: Tuple[int, int]) -> None:
        cx, cy = self._center(cell)
        outer = self._cell / 3
        inner = outer * 0.4
        points = []
        for i in range(10):
            radius = outer if i % 2 == 0 else inner
            angle = i * math.pi / 5 - math.pi / 2
            points.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))
        pygame.draw.polygon(self._screen, self._star, points)
        pygame.draw.polygon(self._screen, (255, 255, 0), points, 2)

    def _draw_explosion(self, cell: Tuple[int, int], progress: float) -> None:
        if progress >= 1.0:
            return
        cx, cy = self._center(cell)
        overlay = pygame.Surface((self._cell * 4, self._cell * 4), pygame.SRCALPHA)
        oc = self._cell * 2
        alpha = int(255 * (1 - progress))
        rings = (
            ((255, 69, 0), 1.0, alpha),
            ((255, 255, 0), 0.6, int(255 * (1 - progress * 0.7))),
            ((255, 255, 255), 0.3, int(255 * (1 - progress * 0.5))),
        )
        for color, scale, a in rings:
            radius = max(1, int(self._cell * progress * scale))
            pygame.draw.circle(overlay, (*color, a), (oc, oc), radius)
        for i in range(8):
            angle = i * math.pi / 4
            distance = self._cell * progress * 1.5
            px = oc + math.cos(angle) * distance
            py = oc + math.sin(angle) * distance
            pygame.draw.circle(overlay, (255, 165, 0, alpha), (int(px), int(py)), 3)
        self._screen.blit(overlay, (cx - oc, cy - oc))

    def _draw_panel(self, snapshot: GameSnapshot) -> None:
        """Draw length, score and high score beside the board."""
        x = self._panel_x + 20
        rows = (
            ("LENGTH", f"{self._length}"),
            ("SCORE", f"{self._score:,}"),
            ("HIGH SCORE", f"{self._high_score:,}"),
        )
        y = 20
        for label, value in rows:
            self._screen.blit(self._font_small.render(label, True, self._text_light), (x, y))
            self._screen.blit(self._font_large.render(value, True, self._text_dark), (x, y + 18))
            y += 70

        if snapshot.destruction_mode:
            text = f"DESTROY {snapshot.destruction_remaining:.1f}s"
            self._screen.blit(self._font_medium.render(text, True, self._head_hot), (x, y))
        y += 50

        controls = (
            ("Arrows", "Snake"),
            ("A / D", "Move block"),
            ("S / W", "Rotate"),
            ("Enter", "Restart"),
            ("ESC", "Quit"),
        )
        for key, action in controls:
            self._screen.blit(self._font_small.render(key, True, self._text_dark), (x, y))
            self._screen.blit(self._font_small.render(action, True, self._text_light), (x + 70, y))
            y += 22

    def _draw_game_over(self, snapshot: GameSnapshot) -> None:
        """Draw game over overlay."""
        overlay = pygame.Surface((self._board_w, self._board_h), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        self._screen.blit(overlay, (0, 0))

        title = self._font_large.render("GAME OVER", True, self._text_dark)
        score = self._font_medium.render(f"Score: {snapshot.score:,}", True, self._text_dark)
        hint = self._font_small.render("Press Enter to restart", True, self._text_light)
        y = self._board_h // 2 - 50
        for surface in (title, score, hint):
            self._screen.blit(surface, ((self._board_w - surface.get_width()) // 2, y))
            y += surface.get_height() + 12


def _tone(frequencies, duration: float, wave: str, volume: float) -> np.ndarray:
    """
    Synthesize a tone whose frequency glides through `frequencies`
    (evenly spaced over `duration`) under an exponential fade-out.
    """
    n = int(SAMPLE_RATE * duration)
    t = np.arange(n) / SAMPLE_RATE
    anchors = np.linspace(0.0, duration, num=len(frequencies))
    freq = np.interp(t, anchors, frequencies)
    phase = 2 * np.pi * np.cumsum(freq) / SAMPLE_RATE
    if wave == "sawtooth":
        samples = 2.0 * (phase / (2 * np.pi) % 1.0) - 1.0
    else:
        samples = np.sin(phase)
    envelope = volume * np.exp(np.log(0.001 / volume) * t / duration)
    return (samples * envelope * 32767).astype(np.int16)


class ToneAudio:
    """Audio sink playing synthesized cues through pygame.mixer."""

    def __init__(self):
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        _, _, channels = pygame.mixer.get_init()
        # Rising C5-E5-G5 steps
        apple = np.concatenate([
            _tone([523.25, 523.25], 0.1, "sine", 0.1),
            _tone([659.25, 659.25], 0.1, "sine", 0.1),
            _tone([783.99, 783.99], 0.2, "sine", 0.1),
        ])
        # Descending A4 -> A3 -> A2 glide
        death = _tone([440.0, 220.0, 110.0], 1.0, "sawtooth", 0.15)
        self._apple = self._make_sound(apple, channels)
        self._death = self._make_sound(death, channels)

    @staticmethod
    def _make_sound(samples: np.ndarray, channels: int) -> pygame.mixer.Sound:
        if channels > 1:
            samples = np.ascontiguousarray(np.column_stack([samples] * channels))
        return pygame.sndarray.make_sound(samples)

    def apple_eaten(self) -> None:
        self._apple.play()

    def game_over(self) -> None:
        self._death.play()


class HumanPlayer:
    """
    Human-playable Snaketris window.

    The display refreshes at the target FPS for input responsiveness, while
    the GameLoop only ticks the simulation at the game's snake interval.
    """

    PANEL_WIDTH = 220

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        cell_size: int = 30,
        target_fps: int = 60
    ):
        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps

        pygame.init()
        window = (config.board.width * cell_size + self.PANEL_WIDTH, config.board.height * cell_size)
        self._screen = pygame.display.set_mode(window)
        pygame.display.set_caption("Snaketris")
        self._clock = pygame.time.Clock()

        self._renderer = SnaketrisRenderer(config, self._screen, cell_size)
        audio = None
        try:
            audio = ToneAudio()
        except pygame.error as e:
            logger.warning("Sound disabled: %s", e)

        store = JsonHighScoreStore(config.high_score.resolved_path)
        self._game = CoreGame(
            config=config,
            seed=seed,
            high_score_store=store,
            audio=audio,
            score_display=self._renderer
        )
        self._controller = InputController(self._game)
        self._loop = GameLoop(self._game, self._controller, render=self._renderer)
        self._running = True
        self._was_over = False

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Snaketris ===")
        print("Arrows steer the snake; A/D move and S/W rotate the falling block")
        print("Enter restarts after game over, ESC quits")
        print()

        while self._running:
            self._handle_events()
            if self._loop.poll() is None:
                # Keep explosions and the destruction timer animating between ticks
                self._renderer.render(self._game.snapshot())

            if self._game.is_over and not self._was_over:
                print(f"\nGAME OVER ({self._game.termination_reason}) - Score: {self._game.score}")
            self._was_over = self._game.is_over

            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                else:
                    self._controller.press(pygame.key.name(event.key))


def main():
    parser = argparse.ArgumentParser(description="Play Snaketris interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--cell-size", type=int, default=30, help="Cell size in pixels (default: 30)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--verbose", action="store_true", help="Log engine events")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )

    config = load_config()
    player = HumanPlayer(
        config=config,
        seed=args.seed,
        cell_size=args.cell_size,
        target_fps=args.fps
    )
    score = player.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
