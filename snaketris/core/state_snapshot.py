"""
State Snapshot
==============

Freezes the world into an immutable view for renderers and tests, with an
optional numpy occupancy grid.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from snaketris.core.config_loader import GameConfig, get_config
from snaketris.core.geometry import Cell, Direction, Grid
from snaketris.core.world import Color, World

# Occupancy codes used by GameSnapshot.to_grid()
EMPTY = 0
SNAKE = 1
HEAD = 2
SETTLED = 3
FALLING = 4
APPLE = 5
STAR = 6


@dataclass(frozen=True)
class SettledCellView:
    cell: Cell
    color: Color


@dataclass(frozen=True)
class FallingPieceView:
    name: str
    color: Color
    rotation: int
    x: int
    y: float                    # Fractional row, for smooth drawing
    cells: Tuple[Cell, ...]     # Cells at the rounded row
    suspended: bool


@dataclass(frozen=True)
class ExplosionView:
    cell: Cell
    elapsed: float
    progress: float             # 0 at start, 1 when it disappears


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete read-only game state at one instant.
    """
    width: int
    height: int

    snake: Tuple[Cell, ...]     # Head first
    direction: Direction
    settled: Tuple[SettledCellView, ...]
    falling: Optional[FallingPieceView]
    apple: Optional[Cell]
    star: Optional[Cell]
    explosions: Tuple[ExplosionView, ...]

    destruction_mode: bool
    destruction_remaining: float

    score: int
    high_score: int
    apples_eaten: int
    is_over: bool
    termination_reason: str

    @property
    def length(self) -> int:
        return len(self.snake)

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def to_grid(self) -> np.ndarray:
        """
        (height, width) int8 array of occupancy codes.

        Later layers overwrite earlier ones: settled, falling, apple, star,
        snake body, head.
        """
        grid = np.full((self.height, self.width), EMPTY, dtype=np.int8)
        layers = (
            ((v.cell for v in self.settled), SETTLED),
            (self.falling.cells if self.falling else (), FALLING),
            ((self.apple,) if self.apple else (), APPLE),
            ((self.star,) if self.star else (), STAR),
            (self.snake[1:], SNAKE),
            (self.snake[:1], HEAD),
        )
        for cells, code in layers:
            for x, y in cells:
                if 0 <= x < self.width and 0 <= y < self.height:
                    grid[y, x] = code
        return grid


class SnapshotBuilder:
    """Builds game state snapshots from a World."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._grid = Grid(config.board.width, config.board.height)

    def build(
        self,
        world: World,
        now: float,
        score: int,
        high_score: int,
        is_over: bool,
        termination_reason: str
    ) -> GameSnapshot:
        falling = None
        if world.falling is not None:
            piece = world.falling
            falling = FallingPieceView(
                name=piece.piece_type.name,
                color=piece.piece_type.color,
                rotation=piece.rotation,
                x=piece.x,
                y=piece.y,
                cells=tuple(piece.cells()),
                suspended=piece.suspended,
            )

        return GameSnapshot(
            width=self._grid.width,
            height=self._grid.height,
            snake=tuple(world.snake),
            direction=world.direction,
            settled=tuple(
                SettledCellView(cell=cell, color=color)
                for cell, color in world.settled.items()
            ),
            falling=falling,
            apple=world.apple,
            star=world.star,
            explosions=tuple(
                ExplosionView(
                    cell=e.cell,
                    elapsed=e.elapsed(now),
                    progress=e.progress(now),
                )
                for e in world.explosions
            ),
            destruction_mode=world.destruction_mode,
            destruction_remaining=world.destruction_remaining(
                now, self._config.star.destruction_duration
            ),
            score=score,
            high_score=high_score,
            apples_eaten=world.apples_eaten,
            is_over=is_over,
            termination_reason=termination_reason,
        )
