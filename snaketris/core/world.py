"""
World State
===========

The single mutable aggregate the engine owns: snake, falling piece, settled
cells, apple, star, explosions, speed scalars and the timers that drive them.
A restart replaces the whole World rather than clearing it field by field.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Tuple

from snaketris.core.config_loader import GameConfig
from snaketris.core.geometry import Cell, Direction, Grid, round_half_up
from snaketris.core.piece_catalog import PieceType
from snaketris.core.rng import RandomSource

Color = Tuple[int, int, int]


@dataclass
class FallingPiece:
    """The one live piece. `y` is fractional so the piece can glide between rows."""
    piece_type: PieceType
    rotation: int
    x: int
    y: float
    suspended: bool = False

    @property
    def grid_y(self) -> int:
        """Row the piece occupies for collision purposes."""
        return round_half_up(self.y)

    def cells(
        self,
        x: Optional[int] = None,
        grid_y: Optional[int] = None,
        rotation: Optional[int] = None
    ) -> List[Cell]:
        """
        Occupied cells, optionally at a hypothetical position or rotation.
        """
        return self.piece_type.cells_at(
            self.rotation if rotation is None else rotation,
            self.x if x is None else x,
            self.grid_y if grid_y is None else grid_y,
        )


@dataclass(frozen=True)
class Explosion:
    """Visual-only burst left where the snake destroyed a block."""
    cell: Cell
    started_at: float
    duration: float

    @property
    def expires_at(self) -> float:
        return self.started_at + self.duration

    def elapsed(self, now: float) -> float:
        return now - self.started_at

    def progress(self, now: float) -> float:
        """Fraction of the lifetime used, in [0, 1]."""
        if self.duration <= 0:
            return 1.0
        return max(0.0, min(1.0, self.elapsed(now) / self.duration))

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class SpeedState:
    """
    Speed scalars that only change when an apple is eaten.

    Intervals only shrink and the fall rate only grows, each clamped.
    """
    snake_interval: float
    drop_interval: float
    fall_rate: float

    @classmethod
    def base(cls, config: GameConfig) -> "SpeedState":
        speed = config.speed
        return cls(
            snake_interval=speed.snake_interval,
            drop_interval=speed.drop_interval,
            fall_rate=speed.fall_rate,
        )

    def apply_speed_up(self, config: GameConfig) -> None:
        speed = config.speed
        self.snake_interval = max(
            speed.snake_interval_min, self.snake_interval * speed.speed_up_factor
        )
        self.drop_interval = max(
            speed.drop_interval_min, self.drop_interval * speed.speed_up_factor
        )
        self.fall_rate = min(speed.fall_rate_max, self.fall_rate * speed.fall_rate_factor)


@dataclass
class World:
    """All entity state of one game, from start to restart."""
    snake: Deque[Cell]
    direction: Direction
    speed: SpeedState
    star_due_at: float
    falling: Optional[FallingPiece] = None
    settled: Dict[Cell, Color] = field(default_factory=dict)
    apple: Optional[Cell] = None
    star: Optional[Cell] = None
    destruction_mode: bool = False
    destruction_started_at: float = 0.0
    explosions: List[Explosion] = field(default_factory=list)
    last_drop_at: Optional[float] = None
    apples_eaten: int = 0

    @classmethod
    def fresh(cls, config: GameConfig, now: float, rng: RandomSource) -> "World":
        """
        Build the starting world: snake centred and trailing away from its
        heading, no pieces, first star scheduled. The apple is placed by
        the engine once the world exists.
        """
        cx, cy = Grid(config.board.width, config.board.height).center
        dx, dy = config.snake.start_direction
        snake = deque(
            (cx - dx * i, cy - dy * i) for i in range(config.snake.start_length)
        )
        star_due_at = now + rng.uniform(
            config.star.spawn_delay_min, config.star.spawn_delay_max
        )
        return cls(
            snake=snake,
            direction=(dx, dy),
            speed=SpeedState.base(config),
            star_due_at=star_due_at,
        )

    @property
    def head(self) -> Cell:
        return self.snake[0]

    @property
    def length(self) -> int:
        return len(self.snake)

    def snake_occupies(self, cell: Cell) -> bool:
        return cell in self.snake

    def destruction_remaining(self, now: float, duration: float) -> float:
        if not self.destruction_mode:
            return 0.0
        return max(0.0, self.destruction_started_at + duration - now)
