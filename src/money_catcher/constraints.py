"""Parameter constraints and validation for settings panels and samplers.

The simulation step never validates its parameters: bad values degrade
(a negative spawn rate simply never spawns) instead of crashing. Keeping
values in a sane range is the job of whoever owns the parameters, and this
module is what they use to do it.

Severity levels:
- "error": outside the documented domain (negative rates, friction outside (0, 1])
- "warning": legal but degenerate (cart cannot move, items never fall or outrun the cart)
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import random

from .config import SimulationParams, PlayfieldConfig, GameConfig, DEFAULT_PLAYFIELD


@dataclass
class ConstraintViolation:
    """Describes a constraint violation."""
    param: str
    message: str
    severity: str  # "error" or "warning"


@dataclass
class ConstraintResult:
    """Result of constraint validation."""
    valid: bool
    violations: List[ConstraintViolation]

    def __bool__(self) -> bool:
        return self.valid

    @property
    def errors(self) -> List[ConstraintViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> List[ConstraintViolation]:
        return [v for v in self.violations if v.severity == "warning"]


class ParameterConstraints:
    """Checks SimulationParams against their documented domains."""

    FRICTION_MIN = 0.0  # Exclusive
    FRICTION_MAX = 1.0  # Inclusive
    SPAWN_RATE_MIN = 0.0
    SPAWN_RATE_MAX = 1.0

    # Above this, the screen fills with items faster than they can fall off
    SPAWN_RATE_WARN = 0.2

    @classmethod
    def validate_params(
        cls,
        params: SimulationParams,
        playfield: Optional[PlayfieldConfig] = None,
    ) -> ConstraintResult:
        """Validate simulation params, optionally against playfield geometry."""
        playfield = playfield or DEFAULT_PLAYFIELD
        violations = []

        for name in ("cart_acceleration", "cart_max_speed", "fall_speed"):
            value = getattr(params, name)
            if value < 0:
                violations.append(ConstraintViolation(
                    name,
                    f"{name} {value} is negative",
                    "error"
                ))

        if not (cls.FRICTION_MIN < params.cart_friction <= cls.FRICTION_MAX):
            violations.append(ConstraintViolation(
                "cart_friction",
                f"Cart friction {params.cart_friction} outside (0, 1]",
                "error"
            ))

        for name in ("reward_spawn_rate", "hazard_spawn_rate"):
            value = getattr(params, name)
            if not (cls.SPAWN_RATE_MIN <= value <= cls.SPAWN_RATE_MAX):
                violations.append(ConstraintViolation(
                    name,
                    f"{name} {value} outside [0, 1]",
                    "error"
                ))
            elif value > cls.SPAWN_RATE_WARN:
                violations.append(ConstraintViolation(
                    name,
                    f"{name} {value} is very high",
                    "warning"
                ))

        if params.cart_acceleration == 0 or params.cart_max_speed == 0:
            violations.append(ConstraintViolation(
                "cart_acceleration",
                "Cart cannot move (zero acceleration or zero max speed)",
                "warning"
            ))

        if params.fall_speed == 0:
            violations.append(ConstraintViolation(
                "fall_speed",
                "Items never fall (zero fall speed)",
                "warning"
            ))

        # Faster than the cart is tall: items can be caught below the cart's top edge
        if params.fall_speed > playfield.cart_height:
            violations.append(ConstraintViolation(
                "fall_speed",
                f"Fall speed {params.fall_speed} > cart height {playfield.cart_height}",
                "warning"
            ))

        errors = [v for v in violations if v.severity == "error"]
        return ConstraintResult(valid=len(errors) == 0, violations=violations)

    @classmethod
    def validate_config(cls, config: GameConfig) -> ConstraintResult:
        """Validate full game config."""
        return cls.validate_params(config.params, config.playfield)


class ConstrainedSampler:
    """Samples parameters, rejecting samples that fail validation.

    Range overrides are clamped to the valid domain before sampling.
    """

    def __init__(self, max_attempts: int = 100, rng: Optional[random.Random] = None):
        self.max_attempts = max_attempts
        self.rng = rng or random.Random()

    def sample_params(
        self,
        fall_speed_range: Optional[Tuple[float, float]] = None,
        reward_spawn_rate_range: Optional[Tuple[float, float]] = None,
        hazard_spawn_rate_range: Optional[Tuple[float, float]] = None,
        allow_warnings: bool = True,
    ) -> SimulationParams:
        """Sample valid params with optional range overrides.

        Args:
            fall_speed_range: Override for fall speed sampling range.
            reward_spawn_rate_range: Override for reward spawn rate range.
            hazard_spawn_rate_range: Override for hazard spawn rate range.
            allow_warnings: If False, also reject samples with warnings.

        Raises:
            ValueError: If no acceptable sample is found within max_attempts.
        """
        fs_range = fall_speed_range or SimulationParams.FALL_SPEED_RANGE
        rs_range = reward_spawn_rate_range or SimulationParams.REWARD_SPAWN_RATE_RANGE
        hs_range = hazard_spawn_rate_range or SimulationParams.HAZARD_SPAWN_RATE_RANGE

        # Clamp to valid bounds
        fs_range = (max(fs_range[0], 0.0), fs_range[1])
        rs_range = (
            max(rs_range[0], ParameterConstraints.SPAWN_RATE_MIN),
            min(rs_range[1], ParameterConstraints.SPAWN_RATE_MAX),
        )
        hs_range = (
            max(hs_range[0], ParameterConstraints.SPAWN_RATE_MIN),
            min(hs_range[1], ParameterConstraints.SPAWN_RATE_MAX),
        )

        for _ in range(self.max_attempts):
            params = SimulationParams.sample(self.rng)
            params.fall_speed = self.rng.uniform(*fs_range)
            params.reward_spawn_rate = self.rng.uniform(*rs_range)
            params.hazard_spawn_rate = self.rng.uniform(*hs_range)

            result = ParameterConstraints.validate_params(params)
            if result.valid and (allow_warnings or not result.warnings):
                return params

        raise ValueError(
            f"No valid params found in {self.max_attempts} attempts"
        )

    def sample_config(self, **kwargs) -> GameConfig:
        """Sample a complete valid config on the default playfield."""
        return GameConfig(params=self.sample_params(**kwargs))
