"""Configuration system for the catcher simulation.

Two kinds of configuration feed the simulation step:
- SimulationParams: the six tunable numbers (cart feel, fall speed, spawn rates).
  These are what a player-facing UI exposes as sliders.
- PlayfieldConfig: fixed geometry of the playfield and its sprites.

Both are read-only from the simulation's point of view. Nothing here is
validated on construction; see constraints.py for range checks.
"""

import copy
from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, ClassVar, Optional
import random


@dataclass
class SimulationParams:
    """Tunable parameters of the per-frame simulation step.

    All values are per logical tick, not per second: the simulation advances
    by one fixed step per driver call regardless of real elapsed time.
    """

    # Cart feel
    cart_acceleration: float = 0.5  # Velocity added per tick while a movement key is held (px/tick^2)
    cart_friction: float = 0.98  # Velocity multiplier applied every tick, in (0, 1]. 1.0 = no friction.
    cart_max_speed: float = 5.0  # Velocity magnitude cap (px/tick)

    # Falling items
    fall_speed: float = 3.0  # Vertical advance of every falling item (px/tick)

    # Spawning
    reward_spawn_rate: float = 0.02  # Probability of a new reward per tick (0-1)
    hazard_spawn_rate: float = 0.01  # Probability of the goblin dropping a bomb per tick (0-1)

    # === SAMPLING RANGES (match the slider ranges of the settings panel) ===

    CART_ACCELERATION_RANGE: ClassVar[Tuple[float, float]] = (0.0, 1.0)
    CART_FRICTION_RANGE: ClassVar[Tuple[float, float]] = (0.9, 1.0)
    CART_MAX_SPEED_RANGE: ClassVar[Tuple[float, float]] = (0.0, 10.0)
    FALL_SPEED_RANGE: ClassVar[Tuple[float, float]] = (0.0, 10.0)
    REWARD_SPAWN_RATE_RANGE: ClassVar[Tuple[float, float]] = (0.0, 0.1)
    HAZARD_SPAWN_RATE_RANGE: ClassVar[Tuple[float, float]] = (0.0, 0.1)

    FIELDS: ClassVar[Tuple[str, ...]] = (
        "cart_acceleration",
        "cart_friction",
        "cart_max_speed",
        "fall_speed",
        "reward_spawn_rate",
        "hazard_spawn_rate",
    )

    @classmethod
    def sample(cls, rng: Optional[random.Random] = None) -> "SimulationParams":
        """Sample all parameters uniformly from their ranges.

        Args:
            rng: Optional seeded generator. Uses the random module if None.
        """
        rng = rng or random
        return cls(
            cart_acceleration=rng.uniform(*cls.CART_ACCELERATION_RANGE),
            cart_friction=rng.uniform(*cls.CART_FRICTION_RANGE),
            cart_max_speed=rng.uniform(*cls.CART_MAX_SPEED_RANGE),
            fall_speed=rng.uniform(*cls.FALL_SPEED_RANGE),
            reward_spawn_rate=rng.uniform(*cls.REWARD_SPAWN_RATE_RANGE),
            hazard_spawn_rate=rng.uniform(*cls.HAZARD_SPAWN_RATE_RANGE),
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {
            "cart_acceleration": self.cart_acceleration,
            "cart_friction": self.cart_friction,
            "cart_max_speed": self.cart_max_speed,
            "fall_speed": self.fall_speed,
            "reward_spawn_rate": self.reward_spawn_rate,
            "hazard_spawn_rate": self.hazard_spawn_rate,
        }

    def to_tuple(self) -> Tuple[float, ...]:
        """Parameters in FIELDS order (used by state vectors)."""
        return tuple(getattr(self, name) for name in self.FIELDS)

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "SimulationParams":
        """Create from dictionary. Missing keys fall back to defaults."""
        return cls(
            cart_acceleration=d.get("cart_acceleration", 0.5),
            cart_friction=d.get("cart_friction", 0.98),
            cart_max_speed=d.get("cart_max_speed", 5.0),
            fall_speed=d.get("fall_speed", 3.0),
            reward_spawn_rate=d.get("reward_spawn_rate", 0.02),
            hazard_spawn_rate=d.get("hazard_spawn_rate", 0.01),
        )


@dataclass(frozen=True)
class PlayfieldConfig:
    """Playfield and sprite geometry (pixels, origin at top-left, y grows down).

    Not parameterized by the settings panel; fixed for a game session.
    """
    width: float = 800.0
    height: float = 500.0
    cart_width: float = 100.0
    cart_height: float = 60.0
    reward_size: float = 40.0
    hazard_size: float = 30.0
    goblin_step: float = 2.0  # Goblin horizontal speed (px/tick), not tunable
    hazard_spawn_y: float = 30.0  # Bombs appear just below the goblin

    @property
    def half_cart_width(self) -> float:
        return self.cart_width / 2

    @property
    def catch_line(self) -> float:
        """Top edge of the cart. Items whose bottom edge passes it can be caught."""
        return self.height - self.cart_height

    def to_dict(self) -> Dict[str, float]:
        return {
            "width": self.width,
            "height": self.height,
            "cart_width": self.cart_width,
            "cart_height": self.cart_height,
            "reward_size": self.reward_size,
            "hazard_size": self.hazard_size,
            "goblin_step": self.goblin_step,
            "hazard_spawn_y": self.hazard_spawn_y,
        }


DEFAULT_PLAYFIELD = PlayfieldConfig()


@dataclass
class GameConfig:
    """Complete game configuration."""
    params: SimulationParams = field(default_factory=SimulationParams)
    playfield: PlayfieldConfig = field(default_factory=PlayfieldConfig)

    # Driver settings (not part of the simulation)
    fps: int = 60
    seed: Optional[int] = None

    @classmethod
    def sample(cls, rng: Optional[random.Random] = None) -> "GameConfig":
        """Sample random simulation params on the default playfield."""
        return cls(params=SimulationParams.sample(rng))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "params": self.params.to_dict(),
            "playfield": self.playfield.to_dict(),
            "fps": self.fps,
            "seed": self.seed,
        }


# Predefined configurations for play and testing
CONFIGS = {
    # Defaults of the settings panel
    "default": GameConfig(),

    # Slow rain of rewards, rare bombs, responsive cart
    "easy": GameConfig(params=SimulationParams(
        cart_acceleration=0.8,
        cart_max_speed=7.0,
        fall_speed=2.0,
        reward_spawn_rate=0.03,
        hazard_spawn_rate=0.004,
    )),

    # Fast items, frequent bombs
    "hard": GameConfig(params=SimulationParams(
        fall_speed=6.0,
        reward_spawn_rate=0.02,
        hazard_spawn_rate=0.04,
    )),

    # Almost no friction: the cart keeps sliding after the key is released
    "slippery": GameConfig(params=SimulationParams(
        cart_acceleration=0.3,
        cart_friction=1.0,
        cart_max_speed=8.0,
    )),

    # Lots of rewards, lots of bombs
    "rain": GameConfig(params=SimulationParams(
        fall_speed=4.0,
        reward_spawn_rate=0.1,
        hazard_spawn_rate=0.05,
    )),
}


def get_config(name: str) -> GameConfig:
    """Return an independent copy of a named preset."""
    if name not in CONFIGS:
        raise ValueError(f"Unknown config: {name}. Choose from {sorted(CONFIGS)}")
    return copy.deepcopy(CONFIGS[name])
