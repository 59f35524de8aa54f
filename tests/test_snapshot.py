"""
Tests for GameSnapshot contents and the occupancy grid.
"""

import dataclasses

import numpy as np
import pytest

from snaketris.core.state_snapshot import APPLE, EMPTY, FALLING, HEAD, SETTLED, SNAKE, STAR
from snaketris.core.world import FallingPiece


class TestSnapshotContents:
    """Test what a snapshot exposes."""

    def test_initial_snapshot(self, game):
        """Snapshot of a fresh game."""
        snapshot = game.snapshot()

        assert snapshot.width == 18
        assert snapshot.height == 25
        assert snapshot.length == 4
        assert snapshot.head == (9, 12)
        assert snapshot.apple == (0, 0)
        assert snapshot.falling is None
        assert snapshot.score == 0
        assert not snapshot.is_over
        assert snapshot.destruction_remaining == 0.0

    def test_snapshot_is_frozen(self, game):
        snapshot = game.snapshot()

        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.score = 10

    def test_snapshot_detached_from_world(self, game):
        """Later ticks do not change an earlier snapshot."""
        snapshot = game.snapshot()
        game.tick()

        assert snapshot.head == (9, 12)
        assert game.snapshot().head == (10, 12)

    def test_falling_piece_view(self, game):
        """Falling piece view carries the fractional row and rounded cells."""
        t_piece = game.catalog.get_by_name("T")
        game.world.falling = FallingPiece(t_piece, 0, x=4, y=2.6)

        view = game.snapshot().falling

        assert view.name == "T"
        assert view.color == t_piece.color
        assert view.y == pytest.approx(2.6)
        assert view.cells == ((5, 3), (4, 4), (5, 4), (6, 4))
        assert not view.suspended

    def test_termination_reason(self, game):
        """Tick result snapshot reports the game over."""
        game.world.settled[(10, 12)] = (1, 1, 1)
        result = game.tick()

        assert result.snapshot.is_over
        assert result.snapshot.termination_reason == "settled_piece"


class TestOccupancyGrid:
    """Test to_grid codes."""

    def test_codes(self, game):
        """Each entity is written with its own code."""
        game.world.settled[(0, 24)] = (1, 1, 1)
        game.world.star = (17, 0)
        o_piece = game.catalog.get_by_name("O")
        game.world.falling = FallingPiece(o_piece, 0, x=3, y=5.0)

        grid = game.snapshot().to_grid()

        assert grid.shape == (25, 18)
        assert grid.dtype == np.int8
        assert grid[12, 9] == HEAD
        assert grid[12, 8] == SNAKE
        assert grid[12, 6] == SNAKE
        assert grid[24, 0] == SETTLED
        assert grid[0, 0] == APPLE
        assert grid[0, 17] == STAR
        assert grid[5, 3] == FALLING
        assert grid[6, 4] == FALLING
        assert grid[1, 1] == EMPTY

    def test_cell_counts(self, game):
        """Body and head codes do not overlap."""
        grid = game.snapshot().to_grid()

        assert np.count_nonzero(grid == SNAKE) == 3
        assert np.count_nonzero(grid == HEAD) == 1
        assert np.count_nonzero(grid == APPLE) == 1
