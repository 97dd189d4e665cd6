"""Gymnasium wrappers for the catcher environment.

Wrapper stack order:
  1. ParamRandomizationWrapper - sample new simulation params per reset
  2. StateOnlyWrapper - extract flat state vector from Dict obs
"""

import random
from typing import Callable, Dict, Optional

import gymnasium
from gymnasium import spaces

from .config import GameConfig, SimulationParams
from .constraints import ConstrainedSampler


class StateOnlyWrapper(gymnasium.ObservationWrapper):
    """Extract the flat state vector from the env's Dict observation.

    Discards RGB and returns a flat Box(24,) observation.
    """

    def __init__(self, env: gymnasium.Env):
        super().__init__(env)
        assert isinstance(env.observation_space, spaces.Dict), (
            f"StateOnlyWrapper expects Dict obs space, got {type(env.observation_space)}"
        )
        assert "state" in env.observation_space.spaces, (
            "StateOnlyWrapper expects 'state' key in obs Dict"
        )
        self.observation_space = env.observation_space["state"]

    def observation(self, obs):
        return obs["state"]


class ParamRandomizationWrapper(gymnasium.Wrapper):
    """Sample new simulation params on each episode reset.

    On each reset(), the wrapper calls ``config_sampler`` for a fresh
    GameConfig and installs it on the underlying env before delegating.
    CatcherEnv.reset() rebuilds the simulation from ``self.config``, so
    replacing it before reset is sufficient.

    Args:
        env: A CatcherEnv instance.
        config_sampler: A callable that returns a new GameConfig each time.
    """

    def __init__(self, env: gymnasium.Env, config_sampler: Callable[[], GameConfig]):
        super().__init__(env)
        self.config_sampler = config_sampler

    def reset(self, **kwargs):
        self.env.unwrapped.config = self.config_sampler()
        return self.env.reset(**kwargs)


# ---------------------------------------------------------------------------
# Config sampler factories
# ---------------------------------------------------------------------------

def make_param_sampler(
    fixed: Optional[Dict[str, float]] = None,
    seed: Optional[int] = None,
    max_attempts: int = 100,
) -> Callable[[], GameConfig]:
    """Create a config sampler that randomizes params, keeping some fixed.

    Samples are drawn through ConstrainedSampler, so every config is valid.

    Args:
        fixed: Param values to hold constant, e.g. ``{"fall_speed": 3.0}``.
        seed: Seed for the sampler's generator.
        max_attempts: Rejection-sampling attempts per config.

    Returns:
        A callable that produces a GameConfig.
    """
    fixed = dict(fixed or {})
    unknown = set(fixed) - set(SimulationParams.FIELDS)
    assert not unknown, f"Unknown simulation params: {sorted(unknown)}"

    sampler = ConstrainedSampler(max_attempts=max_attempts, rng=random.Random(seed))

    def sample() -> GameConfig:
        params = sampler.sample_params()
        for name, value in fixed.items():
            setattr(params, name, value)
        return GameConfig(params=params)

    return sample
