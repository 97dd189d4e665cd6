"""The per-frame simulation step and a small driver that owns the RNG.

``step`` is a pure transition function: it reads the previous state, the
parameters and the two movement flags, draws from the random source it is
given, and returns a brand new state. It never reads the clock; every call is
one logical tick.

Order of operations inside a tick:
    1. game over -> return the input unchanged
    2. cart physics (accelerate, friction, clamp speed, move, clamp position)
    3. goblin oscillation (single reflection at either edge)
    4. maybe spawn a reward at the top edge
    5. maybe spawn a bomb under the goblin
    6. advance rewards, score catches, drop misses
    7. advance bombs, end the game on a hit, drop misses
"""

import random
from typing import Optional

from .collision import resolve_rewards, resolve_hazards
from .config import GameConfig, SimulationParams, PlayfieldConfig, DEFAULT_PLAYFIELD
from .entities import Cart, Goblin, FallingReward, FallingHazard
from .rewards import RandomSource, pick_random_reward
from .state import SimulationState, reset as initial_state


def update_cart(
    cart: Cart,
    params: SimulationParams,
    moving_left: bool,
    moving_right: bool,
    playfield: PlayfieldConfig,
) -> Cart:
    """Inertial cart motion. Walls clamp position but keep the velocity."""
    velocity = cart.velocity
    if moving_left:
        velocity -= params.cart_acceleration
    if moving_right:
        velocity += params.cart_acceleration
    velocity *= params.cart_friction
    velocity = max(min(velocity, params.cart_max_speed), -params.cart_max_speed)

    half_w = playfield.half_cart_width
    x = cart.x + velocity
    x = max(half_w, min(x, playfield.width - half_w))
    return Cart(x=x, velocity=velocity)


def update_goblin(goblin: Goblin, playfield: PlayfieldConfig) -> Goblin:
    """Move one step; on reaching an edge, flip and step from the old position."""
    direction = goblin.direction
    x = goblin.x + direction * playfield.goblin_step
    if x <= 0 or x >= playfield.width:
        direction = -direction
        x = goblin.x + direction * playfield.goblin_step
    return Goblin(x=x, direction=direction)


def step(
    state: SimulationState,
    params: SimulationParams,
    moving_left: bool,
    moving_right: bool,
    rng: RandomSource,
    playfield: PlayfieldConfig = DEFAULT_PLAYFIELD,
) -> SimulationState:
    """Advance the simulation by one tick.

    Args:
        state: Previous state. Not modified.
        params: Simulation parameters (read-only).
        moving_left: Left movement key held this tick.
        moving_right: Right movement key held this tick.
        rng: Random source for spawn decisions, spawn positions and reward kinds.
        playfield: Playfield geometry.

    Returns:
        The next state, or ``state`` itself if the game is already over.
    """
    if state.is_game_over:
        return state

    cart = update_cart(state.cart, params, moving_left, moving_right, playfield)
    goblin = update_goblin(state.goblin, playfield)

    rewards = list(state.rewards)
    if rng.random() < params.reward_spawn_rate:
        x = rng.random() * (playfield.width - playfield.reward_size)
        kind = pick_random_reward(rng).kind
        rewards.append(FallingReward(x=x, y=-playfield.reward_size, kind=kind))

    hazards = list(state.hazards)
    if rng.random() < params.hazard_spawn_rate:
        hazards.append(FallingHazard(x=goblin.x, y=playfield.hazard_spawn_y))

    caught = resolve_rewards(
        tuple(rewards), cart.x, params.fall_speed, state.collection, playfield
    )
    bombed = resolve_hazards(tuple(hazards), cart.x, params.fall_speed, playfield)

    return SimulationState(
        cart=cart,
        goblin=goblin,
        rewards=caught.remaining,
        hazards=bombed.remaining,
        score=state.score + caught.score_gained,
        collection=caught.collection,
        is_game_over=bombed.hit,
    )


class Simulation:
    """Holds the current state and the random source between ticks.

    This is the piece a render loop or an RL environment talks to: sample the
    input, call ``tick``, draw ``state``.
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        """Initialize simulation.

        Args:
            config: Game configuration. Uses defaults if None.
            seed: Random seed. Falls back to ``config.seed``; random if both None.
        """
        self.config = config or GameConfig()
        self._rng = random.Random(seed if seed is not None else self.config.seed)
        self.state = initial_state(self.config.playfield)
        self.tick_count = 0

    @property
    def params(self) -> SimulationParams:
        return self.config.params

    @property
    def playfield(self) -> PlayfieldConfig:
        return self.config.playfield

    def tick(self, moving_left: bool = False, moving_right: bool = False) -> SimulationState:
        """Advance one tick and return the new state."""
        self.state = step(
            self.state,
            self.config.params,
            moving_left,
            moving_right,
            self._rng,
            self.config.playfield,
        )
        self.tick_count += 1
        return self.state

    def reset(self, seed: Optional[int] = None) -> SimulationState:
        """Restore the initial state. Reseeds the random source if seed given."""
        if seed is not None:
            self._rng = random.Random(seed)
        self.state = initial_state(self.config.playfield)
        self.tick_count = 0
        return self.state
