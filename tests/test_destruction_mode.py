"""
Tests for the star, destruction mode and explosions.
"""

import pytest

from snaketris.core.scoring import DESTROY_SETTLED, STAR, ScoreEvent
from snaketris.core.world import Explosion, FallingPiece


def activate(game, at):
    game.world.destruction_mode = True
    game.world.destruction_started_at = at


class TestStar:
    """Test star pickup and spawning."""

    def test_pickup_activates_destruction(self, game, clock):
        """Star under the head: bonus, star removed, mode on from now."""
        game.world.star = (10, 12)

        result = game.tick()

        assert result.ate_star
        assert result.delta_score == 50
        assert game.world.star is None
        assert game.world.destruction_mode
        assert game.world.destruction_started_at == clock.now()
        assert clock.now() + 5.0 <= game.world.star_due_at <= clock.now() + 13.0

    def test_pickup_while_active_restarts_window(self, game, clock):
        """A second star extends destruction mode from the new pickup."""
        activate(game, clock.now())
        clock.advance(4.0)
        game.world.star = (10, 12)
        game.tick()

        clock.advance(1.5)
        game.tick()

        assert game.world.destruction_mode
        assert game.world.destruction_started_at == pytest.approx(104.0)

    def test_star_spawns_when_due(self, game, clock):
        """Star appears once its delay has passed, on a free cell."""
        game.world.star_due_at = clock.now() + 1.0

        clock.advance(0.5)
        game.tick()
        assert game.world.star is None

        clock.advance(1.0)
        game.tick()
        star = game.world.star
        assert star is not None
        assert star not in game.world.snake
        assert star not in game.world.settled
        assert star != game.world.apple

    def test_star_not_placed_without_free_cell(self, game):
        """With every cell taken the star is left unset."""
        taken = set(game.world.snake) | {game.world.apple}
        for x in range(18):
            for y in range(25):
                if (x, y) not in taken:
                    game.world.settled[(x, y)] = (1, 1, 1)

        assert game.spawn_star() is None
        assert game.world.star is None


class TestDestruction:
    """Test destroying pieces while destruction mode is on."""

    def test_destroy_settled_cell(self, game, clock):
        """Head on a settled cell removes it, scores and explodes."""
        activate(game, clock.now())
        game.world.settled[(10, 12)] = (255, 0, 0)
        game.world.settled[(0, 24)] = (255, 0, 0)

        result = game.tick()

        assert not result.terminated
        assert result.destroyed == [(10, 12)]
        assert result.delta_score == 20
        assert game.world.head == (10, 12)
        assert list(game.world.settled) == [(0, 24)]
        assert [e.cell for e in game.world.explosions] == [(10, 12)]

    def test_destroy_falling_piece(self, game, clock):
        """Head on the falling piece removes the whole piece."""
        activate(game, clock.now())
        o_piece = game.catalog.get_by_name("O")
        game.world.falling = FallingPiece(o_piece, 0, x=10, y=11.0)

        result = game.tick()

        assert not result.terminated
        assert game.world.falling is None
        assert result.delta_score == 30
        assert result.destroyed == [(10, 12)]
        assert game.world.settled == {}

    def test_score_events_per_tick(self, game, clock):
        """Each tick reports only the awards it made."""
        activate(game, clock.now())
        game.world.settled[(10, 12)] = (1, 1, 1)
        game.world.star = (11, 12)

        first = game.tick()
        second = game.tick()
        third = game.tick()

        assert first.score_events == [ScoreEvent(points=20, kind=DESTROY_SETTLED)]
        assert second.score_events == [ScoreEvent(points=50, kind=STAR)]
        assert third.score_events == []

    def test_falling_piece_below_pre_tick_row_is_not_destroyed(self, game, clock):
        """Only the pre-fall position counts; the piece is suspended instead."""
        activate(game, clock.now())
        o_piece = game.catalog.get_by_name("O")
        game.world.falling = FallingPiece(o_piece, 0, x=10, y=9.6)

        result = game.tick()

        assert not result.terminated
        assert result.destroyed == []
        assert result.delta_score == 0
        assert game.world.explosions == []
        assert game.world.falling.suspended
        assert game.world.falling.y == pytest.approx(9.6)

    def test_mode_lasts_full_duration(self, game, clock):
        """Still active at exactly the duration; off just after."""
        activate(game, clock.now())

        clock.advance(5.0)
        game.tick()
        assert game.world.destruction_mode

        clock.advance(0.01)
        game.tick()
        assert not game.world.destruction_mode

    def test_settled_fatal_after_expiry(self, game, clock):
        """Once the mode ends, settled cells kill again."""
        activate(game, clock.now() - 10.0)
        game.tick()
        assert not game.world.destruction_mode

        game.world.settled[(11, 12)] = (1, 1, 1)
        result = game.tick()

        assert result.termination_reason == "settled_piece"

    def test_remaining_time_in_snapshot(self, game, clock):
        """Snapshot reports the time left in destruction mode."""
        activate(game, clock.now())
        clock.advance(2.0)

        snapshot = game.snapshot()

        assert snapshot.destruction_mode
        assert snapshot.destruction_remaining == pytest.approx(3.0)


class TestExplosions:
    """Test explosion lifetime."""

    def test_explosion_expires(self, game, clock):
        """Explosions last their duration, then are dropped."""
        activate(game, clock.now())
        game.world.settled[(10, 12)] = (1, 1, 1)
        game.tick()
        assert len(game.world.explosions) == 1

        clock.advance(0.35)
        game.tick()
        assert len(game.world.explosions) == 1
        assert game.snapshot().explosions[0].progress == pytest.approx(0.35 / 0.6)

        clock.advance(0.35)
        game.tick()
        assert game.world.explosions == []

    def test_explosion_expires_at_timestamp(self, game, clock):
        """A destroyed cell's explosion carries its own expiry time."""
        activate(game, clock.now())
        game.world.settled[(10, 12)] = (1, 1, 1)
        game.tick()

        explosion = game.world.explosions[0]
        assert explosion.expires_at == pytest.approx(clock.now() + 0.6)
        assert not explosion.is_expired(explosion.expires_at - 0.01)
        assert explosion.is_expired(explosion.expires_at)

    def test_explosions_are_visual_only(self, game, clock):
        """An explosion cell does not block the snake."""
        game.world.explosions.append(Explosion((10, 12), clock.now(), 0.6))

        result = game.tick()

        assert not result.terminated
        assert game.world.head == (10, 12)
