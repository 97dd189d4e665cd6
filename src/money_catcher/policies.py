"""Scripted policies for automated play and data collection.

Each policy takes an observation and returns an action compatible with
CatcherEnv's MultiBinary(2) action space: (moving_left, moving_right).
"""

import numpy as np
from typing import Dict, Optional


class BasePolicy:
    """Base class for scripted policies."""

    name: str = "base"

    def __call__(self, obs: Dict[str, np.ndarray]) -> np.ndarray:
        return self.act(obs)

    def act(self, obs: Dict[str, np.ndarray]) -> np.ndarray:
        raise NotImplementedError

    def reset(self):
        """Called at the start of each episode."""
        pass

    def _make_action(self, left: bool, right: bool) -> np.ndarray:
        return np.array([int(left), int(right)], dtype=np.int8)


class IdlePolicy(BasePolicy):
    """Never touches the keys. Catches only what falls into the cart."""

    name = "idle"

    def act(self, obs):
        return self._make_action(False, False)


class RandomPolicy(BasePolicy):
    """Independent random key presses each step.

    Broad state coverage, no intent.
    """

    name = "random"

    def __init__(self, rng: Optional[np.random.Generator] = None, press_prob: float = 0.5):
        self.rng = rng or np.random.default_rng()
        self.press_prob = press_prob

    def act(self, obs):
        left = self.rng.random() < self.press_prob
        right = self.rng.random() < self.press_prob
        return self._make_action(left, right)


class ChaserPolicy(BasePolicy):
    """Steers toward the nearest reward, sidesteps bombs about to land.

    Uses the structured state vector only:
        [1] cart velocity, [13] nearest reward dx, [14] its y,
        [16] nearest hazard dx, [17] its y, [23] catch line.
    """

    name = "chaser"

    def __init__(self, deadzone: float = 10.0, danger_height: float = 150.0, danger_width: float = 80.0):
        self.deadzone = deadzone  # |dx| below which the cart stops steering
        self.danger_height = danger_height  # Bombs closer than this above the cart are a threat
        self.danger_width = danger_width  # Horizontal reach of a threat

    def act(self, obs):
        state = obs["state"]
        velocity = state[1]
        reward_dx, reward_y = state[13], state[14]
        hazard_dx, hazard_y = state[16], state[17]
        catch_line = state[23]

        # Dodge: move away from a bomb that is low and close
        if hazard_y >= 0 and catch_line - hazard_y < self.danger_height and abs(hazard_dx) < self.danger_width:
            if hazard_dx > 0:
                return self._make_action(True, False)
            return self._make_action(False, True)

        if reward_y < 0:
            # Nothing to chase: brake
            return self._make_action(velocity > 1.0, velocity < -1.0)

        if reward_dx > self.deadzone:
            return self._make_action(False, True)
        if reward_dx < -self.deadzone:
            return self._make_action(True, False)
        return self._make_action(velocity > 1.0, velocity < -1.0)


POLICIES = {
    "idle": IdlePolicy,
    "random": RandomPolicy,
    "chaser": ChaserPolicy,
}


def make_policy(name: str, **kwargs) -> BasePolicy:
    """Instantiate a registered policy by name."""
    if name not in POLICIES:
        raise ValueError(f"Unknown policy: {name}. Choose from {sorted(POLICIES)}")
    return POLICIES[name](**kwargs)
