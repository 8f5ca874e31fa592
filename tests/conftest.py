import random

import pytest

from skifree.config import SimConfig
from skifree.ecs import World
from skifree.simulation import Simulation
from skifree.skier import create_skier
from skifree.timers import Scheduler


class FakeKey(str):
    """Stand-in for blessed's Keystroke."""

    def __new__(cls, text, name=None, is_sequence=False):
        key = str.__new__(cls, text)
        key.name = name
        key.is_sequence = is_sequence
        return key


def quiet_config(**overrides) -> SimConfig:
    """A mountain with no obstacles, dogs or yetis unless asked for."""
    settings = dict(
        min_spawn_distance=1e9,
        dog_spawn_interval=(10 ** 6, 10 ** 6),
        yeti_milestone=10 ** 9,
    )
    settings.update(overrides)
    return SimConfig(**settings)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def world():
    return World()


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def skier_id(world):
    return create_skier(world, 0.0, 0.0)


@pytest.fixture
def quiet_sim(rng):
    return Simulation(quiet_config(), rng)


class FakeTerminal:
    """Just enough of blessed.Terminal for the renderer and input loop."""
    width = 80
    height = 24
    normal = ''
    home = ''
    clear = ''

    def __init__(self, keys=()):
        self._keys = list(keys)

    def inkey(self, timeout=None):
        return self._keys.pop(0) if self._keys else FakeKey('')

    def move_xy(self, x, y):
        return f'<{x},{y}>'

    def color(self, c):
        return ''

    def on_color(self, c):
        return ''
