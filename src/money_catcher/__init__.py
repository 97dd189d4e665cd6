"""money-catcher: catch falling money, dodge the goblin's bombs.

The game is a deterministic per-frame simulation step: inertial cart motion,
stochastic spawning of rewards and bombs, rectangle-overlap catches and
inverse-value weighted rewards. Drivers (a pygame window, a Gymnasium
environment) call the step once per tick and render its output.
"""

from .config import SimulationParams, PlayfieldConfig, GameConfig, CONFIGS, get_config
from .rewards import RewardKind, RewardDefinition, SORTED_REWARDS, PROBABILITIES, pick_random_reward
from .entities import Cart, Goblin, FallingReward, FallingHazard
from .state import SimulationState, reset
from .simulation import Simulation, step
from .constraints import ParameterConstraints, ConstrainedSampler, ConstraintResult, ConstraintViolation

__all__ = [
    "SimulationParams",
    "PlayfieldConfig",
    "GameConfig",
    "CONFIGS",
    "get_config",
    "RewardKind",
    "RewardDefinition",
    "SORTED_REWARDS",
    "PROBABILITIES",
    "pick_random_reward",
    "Cart",
    "Goblin",
    "FallingReward",
    "FallingHazard",
    "SimulationState",
    "reset",
    "Simulation",
    "step",
    "ParameterConstraints",
    "ConstrainedSampler",
    "ConstraintResult",
    "ConstraintViolation",
]
