"""
Game Rules
==========

Handles termination outcomes and piece placement checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from snaketris.core.config_loader import GameConfig, get_config
from snaketris.core.geometry import Grid
from snaketris.core.world import FallingPiece, World


@dataclass
class TerminationResult:
    """Result of a snake collision check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


# Termination reasons
WALL = "wall"
SELF = "self"
SETTLED_PIECE = "settled_piece"
FALLING_PIECE = "falling_piece"


class PlacementRules:
    """
    Piece placement checks against the grid, settled cells and the snake.

    Falling treats the snake as an obstacle but not as ground: a piece
    blocked only by the snake is suspended, never settled. Player moves and
    rotations are blocked by the snake like any other obstacle.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize placement rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._grid = Grid(config.board.width, config.board.height)

    @property
    def grid(self) -> Grid:
        return self._grid

    def can_fall(self, world: World, piece: FallingPiece, grid_y: int) -> bool:
        """True if every cell at row `grid_y` is above the floor and unoccupied."""
        for cell in piece.cells(grid_y=grid_y):
            if self._grid.below_floor(cell[1]):
                return False
            if cell in world.settled or world.snake_occupies(cell):
                return False
        return True

    def blocked_ignoring_snake(self, world: World, piece: FallingPiece, grid_y: int) -> bool:
        """True if the floor or a settled cell blocks row `grid_y`."""
        for cell in piece.cells(grid_y=grid_y):
            if self._grid.below_floor(cell[1]) or cell in world.settled:
                return True
        return False

    def snake_blocks(self, world: World, piece: FallingPiece, grid_y: int) -> bool:
        return any(world.snake_occupies(cell) for cell in piece.cells(grid_y=grid_y))

    def can_place(
        self,
        world: World,
        piece: FallingPiece,
        x: int,
        rotation: int,
        grid_y: Optional[int] = None
    ) -> bool:
        """
        True if the piece fits at column `x` with `rotation`.

        Every cell must be in bounds and clear of settled cells and snake.
        """
        for cell in piece.cells(x=x, grid_y=grid_y, rotation=rotation):
            if not self._grid.in_bounds(cell):
                return False
            if cell in world.settled or world.snake_occupies(cell):
                return False
        return True
