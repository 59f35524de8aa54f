"""
Shared fixtures: config, virtual clock, scripted RNG and a quiet game.
"""

from collections import deque

import pytest

from snaketris.core.clock import VirtualClock
from snaketris.core.config_loader import load_config
from snaketris.core.game import CoreGame
from snaketris.core.rng import RandomSource


class ScriptedRandom(RandomSource):
    """
    RandomSource that answers from scripted queues first, then falls back
    to its seeded stream.
    """

    def __init__(self, seed=0):
        super().__init__(seed)
        self.ranges = deque()
        self.uniforms = deque()

    def randrange(self, n):
        if self.ranges:
            value = self.ranges.popleft()
            assert 0 <= value < n, f"scripted {value} outside [0, {n})"
            return value
        return super().randrange(n)

    def uniform(self, low, high):
        if self.uniforms:
            return self.uniforms.popleft()
        return super().uniform(low, high)


class RecordingAudio:
    def __init__(self):
        self.cues = []

    def apple_eaten(self):
        self.cues.append("apple")

    def game_over(self):
        self.cues.append("game_over")


class RecordingDisplay:
    def __init__(self):
        self.updates = []

    def update_score(self, length, score, high_score):
        self.updates.append((length, score, high_score))


class RecordingRender:
    def __init__(self):
        self.frames = []

    def render(self, snapshot):
        self.frames.append(snapshot)


def quiet(game):
    """
    Park the apple in a corner, postpone the star and the next piece, so a
    test only sees what it sets up itself.
    """
    world = game.world
    world.apple = (0, 0)
    world.star = None
    world.star_due_at = float("inf")
    world.falling = None
    world.last_drop_at = game.clock.now()
    return game


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def clock():
    return VirtualClock(100.0)


@pytest.fixture
def rng():
    return ScriptedRandom(seed=7)


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def render():
    return RecordingRender()


@pytest.fixture
def game(config, clock, rng, audio, display):
    """Game on a virtual clock with nothing moving but the snake."""
    return quiet(CoreGame(
        config=config,
        clock=clock,
        rng=rng,
        audio=audio,
        score_display=display
    ))
