"""
Geometry
========

Grid coordinates, cardinal directions, and occupancy queries.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Tuple

import numpy as np

Cell = Tuple[int, int]
Direction = Tuple[int, int]

UP: Direction = (0, -1)
DOWN: Direction = (0, 1)
LEFT: Direction = (-1, 0)
RIGHT: Direction = (1, 0)

DIRECTIONS: Dict[str, Direction] = {
    "up": UP,
    "down": DOWN,
    "left": LEFT,
    "right": RIGHT,
}


def is_reverse(current: Direction, requested: Direction) -> bool:
    """True if `requested` points exactly back along `current`."""
    return current[0] + requested[0] == 0 and current[1] + requested[1] == 0


def step(cell: Cell, direction: Direction) -> Cell:
    return (cell[0] + direction[0], cell[1] + direction[1])


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


class Grid:
    """
    Fixed-size W x H lattice shared by every entity.

    x grows to the right, y grows downward; (0, 0) is the top-left cell.
    """

    def __init__(self, width: int, height: int):
        self._width = width
        self._height = height

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def center(self) -> Cell:
        return (self._width // 2, self._height // 2)

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self._width and 0 <= y < self._height

    def below_floor(self, y: int) -> bool:
        return y >= self._height

    def occupancy(self, cells: Iterable[Cell]) -> np.ndarray:
        """
        Boolean mask of shape (height, width) with the given cells set.

        Cells outside the grid are ignored.
        """
        mask = np.zeros((self._height, self._width), dtype=bool)
        for cell in cells:
            if self.in_bounds(cell):
                mask[cell[1], cell[0]] = True
        return mask

    def free_cells(self, blocked: Iterable[Cell]) -> List[Cell]:
        """
        All cells not in `blocked`, scanned column by column.

        The scan order (x outer, y inner) is stable so that a seeded random
        choice over the result is reproducible.
        """
        mask = self.occupancy(blocked)
        xs, ys = np.nonzero(~mask.T)
        return [(int(x), int(y)) for x, y in zip(xs, ys)]

    def __repr__(self) -> str:
        return f"Grid({self._width}x{self._height})"
