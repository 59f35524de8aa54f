"""
Core Game
=========

Main simulation orchestrator: snake motion, falling pieces, apples, stars,
destruction mode, scoring and the Running -> Ended lifecycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from snaketris.core.clock import Clock, MonotonicClock
from snaketris.core.config_loader import GameConfig, get_config
from snaketris.core.geometry import DIRECTIONS, Cell, Direction, is_reverse, round_half_up, step
from snaketris.core.highscore import HighScoreStore
from snaketris.core.piece_catalog import PieceCatalog, get_catalog
from snaketris.core.presentation import AudioSink, NullAudio, ScoreDisplaySink
from snaketris.core.rng import RandomSource
from snaketris.core.rules import (
    FALLING_PIECE,
    SELF,
    SETTLED_PIECE,
    WALL,
    PlacementRules,
    TerminationResult,
)
from snaketris.core.scoring import ScoreEvent, ScoreTracker
from snaketris.core.state_snapshot import GameSnapshot, SnapshotBuilder
from snaketris.core.world import Explosion, FallingPiece, World

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Result of a single engine tick."""
    snapshot: GameSnapshot
    terminated: bool
    termination_reason: str
    delta_score: int
    ate_apple: bool = False
    ate_star: bool = False
    spawned_piece: bool = False
    settled: bool = False
    destroyed: List[Cell] = field(default_factory=list)
    score_events: List[ScoreEvent] = field(default_factory=list)


class CoreGame:
    """
    Main game simulation class.

    Owns the World and every rule that mutates it. One tick runs, in order:

    1. Snake advance and collision resolution
    2. Apple (grow or shift)
    3. Star pickup
    4. Falling piece spawn / fall / settle / suspend
    5. Destruction mode expiry and star spawning
    6. Explosion aging

    Contact between snake and a piece ends the game unless destruction
    mode is active, in which case the piece is destroyed instead.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        clock: Optional[Clock] = None,
        rng: Optional[RandomSource] = None,
        high_score_store: Optional[HighScoreStore] = None,
        audio: Optional[AudioSink] = None,
        score_display: Optional[ScoreDisplaySink] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed, used when no rng is given.
            clock: Time source. Real monotonic time if None.
            rng: Random source for every spawn decision.
            high_score_store: High score persistence. In-memory if None.
            audio: Receives apple and game-over cues.
            score_display: Notified when length or score changes.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._clock = clock if clock is not None else MonotonicClock()
        self._rng = rng if rng is not None else RandomSource(seed)
        self._audio = audio if audio is not None else NullAudio()

        # Initialize subsystems
        self._catalog = get_catalog(config)
        self._placement = PlacementRules(config)
        self._grid = self._placement.grid
        self._scorer = ScoreTracker(config, high_score_store, score_display)
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self._world = self._new_world()
        self._terminated: bool = False
        self._termination_reason: str = ""
        self._scorer.notify(self._world.length)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def catalog(self) -> PieceCatalog:
        """Piece catalog."""
        return self._catalog

    @property
    def world(self) -> World:
        """The live world. Replaced on reset; do not hold on to it."""
        return self._world

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def high_score(self) -> int:
        return self._scorer.high_score

    @property
    def length(self) -> int:
        return self._world.length

    @property
    def snake_interval(self) -> float:
        """Seconds until the next tick should run."""
        return self._world.speed.snake_interval

    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return self._terminated

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._termination_reason

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Restart: fresh world, base speeds, zero score. The high score stays.

        Args:
            seed: New random seed. Keeps the current stream if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._rng.reset(seed)

        self._scorer.reset()
        self._world = self._new_world()
        self._terminated = False
        self._termination_reason = ""
        self._scorer.notify(self._world.length)

        logger.info("Game reset (high score %d)", self._scorer.high_score)
        return self.snapshot()

    def _new_world(self) -> World:
        world = World.fresh(self._config, self._clock.now(), self._rng)
        world.apple = self._pick_apple_cell(world)
        return world

    def tick(self) -> TickResult:
        """
        Advance the game by one step.

        Returns:
            TickResult with new state and what happened this tick.
        """
        if self.is_over:
            # Game already ended, return current state
            return TickResult(
                snapshot=self.snapshot(),
                terminated=True,
                termination_reason=self._termination_reason,
                delta_score=0
            )

        now = self._clock.now()
        world = self._world
        score_before = self._scorer.score
        events_before = len(self._scorer.events)
        length_before = world.length
        destroyed: List[Cell] = []

        termination = self._advance_snake(world, now, destroyed)
        if termination.terminated:
            self._end(termination.reason)
            if self._scorer.score != score_before:
                self._scorer.notify(world.length)
            return TickResult(
                snapshot=self.snapshot(),
                terminated=True,
                termination_reason=termination.reason,
                delta_score=self._scorer.score - score_before,
                destroyed=destroyed,
                score_events=self._scorer.events[events_before:]
            )

        ate_apple = self._resolve_apple(world)
        ate_star = self._resolve_star(world, now)
        spawned, settled = self._advance_piece(world, now)
        self._update_destruction_mode(world, now)
        self._update_star_spawn(world, now)
        self._age_explosions(world, now)

        delta_score = self._scorer.score - score_before
        if delta_score or world.length != length_before:
            self._scorer.notify(world.length)

        return TickResult(
            snapshot=self.snapshot(),
            terminated=False,
            termination_reason="",
            delta_score=delta_score,
            ate_apple=ate_apple,
            ate_star=ate_star,
            spawned_piece=spawned,
            settled=settled,
            destroyed=destroyed,
            score_events=self._scorer.events[events_before:]
        )

    def _advance_snake(
        self,
        world: World,
        now: float,
        destroyed: List[Cell]
    ) -> TerminationResult:
        """Move the head one cell, resolving walls, self and pieces."""
        head = step(world.head, world.direction)

        if not self._grid.in_bounds(head):
            return TerminationResult.game_over(WALL)

        if world.snake_occupies(head):
            return TerminationResult.game_over(SELF)

        if head in world.settled:
            if not world.destruction_mode:
                return TerminationResult.game_over(SETTLED_PIECE)
            del world.settled[head]
            self._explode(world, head, now)
            self._scorer.apply_destroy_settled()
            destroyed.append(head)
            logger.debug("Destroyed settled cell at %s", head)

        # Uses the piece's pre-tick rounded row
        piece = world.falling
        if piece is not None and head in piece.cells():
            if not world.destruction_mode:
                return TerminationResult.game_over(FALLING_PIECE)
            world.falling = None
            self._explode(world, head, now)
            self._scorer.apply_destroy_falling()
            destroyed.append(head)
            logger.debug("Destroyed falling %s piece at %s", piece.piece_type.name, head)

        world.snake.appendleft(head)
        return TerminationResult.none()

    def _resolve_apple(self, world: World) -> bool:
        """Grow on an apple, otherwise drop the tail."""
        if world.apple is None or world.head != world.apple:
            world.snake.pop()
            if world.apple is None:
                self.spawn_apple()
            return False

        world.apples_eaten += 1
        self._scorer.apply_apple(world.length)
        world.apple = None
        self.spawn_apple()
        self._audio.apple_eaten()

        world.speed.apply_speed_up(self._config)
        if world.falling is not None:
            world.falling.suspended = False
        return True

    def _resolve_star(self, world: World, now: float) -> bool:
        if world.star is None or world.head != world.star:
            return False

        self._scorer.apply_star()
        world.star = None
        world.star_due_at = now + self._star_delay()

        # Restarts the window even if already active
        world.destruction_mode = True
        world.destruction_started_at = now
        logger.info("Destruction mode on")
        return True

    def _advance_piece(self, world: World, now: float) -> Tuple[bool, bool]:
        """
        Spawn, fall, settle or suspend the falling piece.

        Returns:
            Tuple of (spawned, settled).
        """
        spawned = False
        if world.falling is None and self._piece_due(world, now):
            spawned = self.spawn_piece() is not None

        piece = world.falling
        if piece is None:
            return spawned, False

        fall_rate = world.speed.fall_rate
        if piece.suspended:
            if self._placement.snake_blocks(world, piece, round_half_up(piece.y + fall_rate)):
                return spawned, False
            piece.suspended = False

        new_y = piece.y + fall_rate
        grid_y = round_half_up(new_y)

        if self._placement.can_fall(world, piece, grid_y):
            piece.y = new_y
            return spawned, False

        if self._placement.blocked_ignoring_snake(world, piece, grid_y):
            self._settle(world, piece, now)
            return spawned, True

        # Only the snake is in the way
        piece.suspended = True
        return spawned, False

    def _piece_due(self, world: World, now: float) -> bool:
        if world.last_drop_at is None:
            return True
        return now - world.last_drop_at > world.speed.drop_interval

    def _settle(self, world: World, piece: FallingPiece, now: float) -> None:
        """Break the piece into individual settled cells at its rounded row."""
        color = piece.piece_type.color
        for cell in piece.cells():
            world.settled[cell] = color
        world.falling = None
        world.last_drop_at = now
        logger.debug("Settled %s piece at x=%d y=%d", piece.piece_type.name, piece.x, piece.grid_y)

    def _update_destruction_mode(self, world: World, now: float) -> None:
        duration = self._config.star.destruction_duration
        if world.destruction_mode and now - world.destruction_started_at > duration:
            world.destruction_mode = False
            logger.info("Destruction mode off")

    def _update_star_spawn(self, world: World, now: float) -> None:
        if world.star is None and now > world.star_due_at:
            self.spawn_star()

    def _age_explosions(self, world: World, now: float) -> None:
        world.explosions = [e for e in world.explosions if not e.is_expired(now)]

    def _explode(self, world: World, cell: Cell, now: float) -> None:
        world.explosions.append(
            Explosion(cell=cell, started_at=now, duration=self._config.explosion.duration)
        )

    def _star_delay(self) -> float:
        star = self._config.star
        return self._rng.uniform(star.spawn_delay_min, star.spawn_delay_max)

    def _end(self, reason: str) -> None:
        self._terminated = True
        self._termination_reason = reason
        self._audio.game_over()
        logger.info("Game over (%s) - score %d", reason, self._scorer.score)

    # Spawning

    def _pick_apple_cell(self, world: World) -> Optional[Cell]:
        blocked = list(world.snake) + list(world.settled)
        cells = self._grid.free_cells(blocked)
        if not cells:
            return None
        return self._rng.choice(cells)

    def spawn_apple(self) -> Optional[Cell]:
        """
        Place the apple on a random cell free of snake and settled cells.

        Leaves the apple unset when the grid has no such cell; safe to call
        again on a later tick.
        """
        cell = self._pick_apple_cell(self._world)
        self._world.apple = cell
        if cell is None:
            logger.debug("No free cell for apple")
        return cell

    def spawn_star(self) -> Optional[Cell]:
        """
        Place the star on a random cell free of snake, settled cells and apple.

        Returns None (and changes nothing) when no such cell exists.
        """
        world = self._world
        blocked = list(world.snake) + list(world.settled)
        if world.apple is not None:
            blocked.append(world.apple)
        cells = self._grid.free_cells(blocked)
        if not cells:
            logger.debug("No free cell for star")
            return None
        world.star = self._rng.choice(cells)
        return world.star

    def spawn_piece(self) -> Optional[FallingPiece]:
        """
        Start a new falling piece at row 0 if none exists.

        The type is uniform over the catalog; the column is uniform over the
        spawn columns in [0, W - spawn_margin] where the piece fits. With no
        such column nothing spawns and the attempt repeats next tick.
        """
        world = self._world
        if world.falling is not None:
            return None

        piece_type = self._rng.choice(self._catalog.all_types)
        piece = FallingPiece(piece_type=piece_type, rotation=0, x=0, y=0.0)
        columns = [
            x for x in range(self._config.max_spawn_x + 1)
            if self._placement.can_place(world, piece, x, 0, grid_y=0)
        ]
        if not columns:
            logger.debug("No room to spawn %s piece", piece_type.name)
            return None

        piece.x = self._rng.choice(columns)
        world.falling = piece
        world.last_drop_at = self._clock.now()
        return piece

    # Controls

    def set_direction(self, direction: Direction) -> bool:
        """
        Steer the snake. Reversals and non-cardinal vectors are rejected.

        Returns:
            True if the direction changed.
        """
        if self.is_over or direction not in DIRECTIONS.values():
            return False
        if is_reverse(self._world.direction, direction):
            return False
        self._world.direction = direction
        return True

    def move_piece(self, dx: int) -> bool:
        """Shift the falling piece horizontally if the new spot is clear."""
        piece = self._world.falling
        if self.is_over or piece is None:
            return False
        if not self._placement.can_place(self._world, piece, piece.x + dx, piece.rotation):
            return False
        piece.x += dx
        return True

    def rotate_piece(self, clockwise: bool = True) -> bool:
        """
        Rotate the falling piece, trying kicks of -1, +1, -2, +2 columns.

        Rotation and column change together or not at all.
        """
        piece = self._world.falling
        if self.is_over or piece is None:
            return False

        turn = 1 if clockwise else -1
        new_rotation = (piece.rotation + turn) % piece.piece_type.rotation_count
        for kick in (0, -1, 1, -2, 2):
            if self._placement.can_place(self._world, piece, piece.x + kick, new_rotation):
                piece.x += kick
                piece.rotation = new_rotation
                return True
        return False

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            world=self._world,
            now=self._clock.now(),
            score=self._scorer.score,
            high_score=self._scorer.high_score,
            is_over=self._terminated,
            termination_reason=self._termination_reason
        )
