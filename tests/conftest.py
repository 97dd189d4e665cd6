"""Pytest configuration and shared fixtures."""

import os

# Ensure headless pygame for all tests
os.environ['SDL_VIDEODRIVER'] = 'dummy'

import pytest

from money_catcher.config import GameConfig, SimulationParams, PlayfieldConfig
from money_catcher.state import reset


class ScriptedRandom:
    """Random source that replays a fixed sequence and fails when exhausted."""

    def __init__(self, values):
        self._values = list(values)
        self.draws = 0

    def random(self) -> float:
        if not self._values:
            raise AssertionError(f"Random source exhausted after {self.draws} draws")
        self.draws += 1
        return self._values.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._values)


@pytest.fixture
def scripted():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def playfield():
    return PlayfieldConfig()


@pytest.fixture
def params():
    """Default params."""
    return SimulationParams()


@pytest.fixture
def quiet_params():
    """Default cart feel with spawning disabled."""
    return SimulationParams(reward_spawn_rate=0.0, hazard_spawn_rate=0.0)


@pytest.fixture
def initial_state(playfield):
    return reset(playfield)


@pytest.fixture
def game_config():
    """Default game configuration."""
    return GameConfig()
