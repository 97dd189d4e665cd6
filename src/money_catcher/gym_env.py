"""Gymnasium environment wrapper for the catcher game.

Provides standard Gym API for RL training and data collection.
Observations include both RGB frames and a structured state vector.
"""

from typing import Optional, Dict, Tuple

import numpy as np
import gymnasium
from gymnasium import spaces

import pygame

from .config import GameConfig
from .rewards import SORTED_REWARDS, reward_for
from .simulation import Simulation
from .state import SimulationState


STATE_DIM = 24

# Semantic colors (same as engine.py)
_COLOR_BG = (219, 234, 254)
_COLOR_CART = (97, 175, 239)
_COLOR_GOBLIN = (152, 195, 121)
_COLOR_HAZARD = (224, 108, 117)
_COLOR_REWARD = (229, 192, 123)


class CatcherEnv(gymnasium.Env):
    """Gymnasium wrapper for the catcher game.

    Observation space (Dict):
        'rgb': uint8 array of shape (H, W, 3) - rendered frame
        'state': float32 array of shape (24,) - state vector containing:
            [0-1]   cart x, cart velocity
            [2-3]   goblin x, goblin direction
            [4]     score
            [5]     episode progress (steps / max_steps)
            [6]     game over (0/1)
            [7-12]  simulation params (SimulationParams.FIELDS order)
            [13-15] nearest reward: dx to cart center, y, value  (0, -1, 0 if none)
            [16-17] nearest hazard: dx to cart center, y         (0, -1 if none)
            [18]    falling reward count
            [19]    falling hazard count
            [20-22] tally per reward kind, catalog order
            [23]    catch line (top of the cart)

    Action space:
        MultiBinary(2) - (moving_left, moving_right) key flags

    Reward = weighted sum of raw signals (stored in info['reward_signals']):
        catch: score gained this step
        death: 1.0 when a bomb hits the cart
        step:  1.0 every step
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        obs_resolution: Tuple[int, int] = (128, 128),
        max_episode_steps: int = 2000,
        reward_weights: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.obs_height, self.obs_width = obs_resolution
        self.max_episode_steps = max_episode_steps

        self.reward_weights = reward_weights or {
            "catch": 1.0,
            "death": -50.0,
            "step": 0.0,
        }

        self.action_space = spaces.MultiBinary(2)

        self.observation_space = spaces.Dict({
            "rgb": spaces.Box(
                low=0, high=255,
                shape=(self.obs_height, self.obs_width, 3),
                dtype=np.uint8,
            ),
            "state": spaces.Box(
                low=-np.inf, high=np.inf,
                shape=(STATE_DIM,),
                dtype=np.float32,
            ),
        })

        # Initialize pygame (caller sets SDL_VIDEODRIVER for headless)
        if not pygame.get_init():
            pygame.init()

        playfield = self.config.playfield
        self._surface = pygame.Surface((int(playfield.width), int(playfield.height)))

        self._display = None
        if render_mode == "human":
            self._display = pygame.display.set_mode(
                (int(playfield.width), int(playfield.height))
            )
            pygame.display.set_caption("CatcherEnv")

        # Populated on reset
        self._simulation: Optional[Simulation] = None
        self._episode_steps = 0
        self._episode_seed: int = 0

    @property
    def state(self) -> SimulationState:
        assert self._simulation is not None, "Must call reset() before accessing state"
        return self._simulation.state

    def reset(self, *, seed=None, options=None):
        super().reset(seed=seed)

        # Simulation randomness derives from the env's seeded generator
        self._episode_seed = int(self.np_random.integers(0, 2**31))
        if self._simulation is None:
            self._simulation = Simulation(self.config, seed=self._episode_seed)
        else:
            self._simulation.config = self.config
            self._simulation.reset(seed=self._episode_seed)
        self._episode_steps = 0

        obs = self._get_obs()
        info = self._get_info()
        return obs, info

    def step(self, action):
        assert self._simulation is not None, "Must call reset() before step()"

        moving_left, moving_right = self._parse_action(action)
        prev_score = self._simulation.state.score
        was_over = self._simulation.state.is_game_over

        self._simulation.tick(moving_left, moving_right)
        self._episode_steps += 1

        state = self._simulation.state
        reward_signals = {
            "catch": float(state.score - prev_score),
            "death": 1.0 if state.is_game_over and not was_over else 0.0,
            "step": 1.0,
        }
        reward = sum(
            self.reward_weights.get(k, 0.0) * v
            for k, v in reward_signals.items()
        )

        terminated = state.is_game_over
        truncated = self._episode_steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        info["reward_signals"] = reward_signals

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # ------------------------------------------------------------------
    # Action handling
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_action(action) -> Tuple[bool, bool]:
        flags = np.asarray(action).reshape(-1)
        return bool(flags[0]), bool(flags[1])

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------

    def _get_obs(self):
        # Only render RGB when someone will actually use it
        if self.render_mode in ("rgb_array", "human"):
            rgb = self._render_frame()
        else:
            rgb = np.zeros(
                (self.obs_height, self.obs_width, 3), dtype=np.uint8
            )
        return {"rgb": rgb, "state": self._get_state_vector()}

    def _get_state_vector(self):
        state = np.zeros(STATE_DIM, dtype=np.float32)
        sim_state = self._simulation.state
        playfield = self.config.playfield

        state[0] = sim_state.cart.x
        state[1] = sim_state.cart.velocity
        state[2] = sim_state.goblin.x
        state[3] = float(sim_state.goblin.direction)
        state[4] = float(sim_state.score)
        state[5] = float(self._episode_steps) / max(self.max_episode_steps, 1)
        state[6] = float(sim_state.is_game_over)
        state[7:13] = self.config.params.to_tuple()

        cart_x = sim_state.cart.x
        state[13:16] = (0.0, -1.0, 0.0)
        nearest_reward = _nearest(sim_state.rewards, cart_x, playfield.catch_line, playfield.reward_size)
        if nearest_reward is not None:
            state[13] = nearest_reward.x + playfield.reward_size / 2 - cart_x
            state[14] = nearest_reward.y
            state[15] = float(reward_for(nearest_reward.kind).value)

        state[16:18] = (0.0, -1.0)
        nearest_hazard = _nearest(sim_state.hazards, cart_x, playfield.catch_line, playfield.hazard_size)
        if nearest_hazard is not None:
            state[16] = nearest_hazard.x + playfield.hazard_size / 2 - cart_x
            state[17] = nearest_hazard.y

        state[18] = float(len(sim_state.rewards))
        state[19] = float(len(sim_state.hazards))
        for i, reward in enumerate(SORTED_REWARDS):
            state[20 + i] = float(sim_state.collection[reward.kind])
        state[23] = playfield.catch_line

        return state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_frame(self):
        """Render current state to numpy array (H, W, 3) uint8."""
        self._surface.fill(_COLOR_BG)
        sim_state = self._simulation.state
        playfield = self.config.playfield

        pygame.draw.rect(self._surface, _COLOR_GOBLIN, (int(sim_state.goblin.x) - 15, 20, 30, 30))

        size = int(playfield.reward_size)
        for r in sim_state.rewards:
            pygame.draw.rect(self._surface, _COLOR_REWARD, (int(r.x), int(r.y), size, size))

        size = int(playfield.hazard_size)
        for h in sim_state.hazards:
            pygame.draw.rect(self._surface, _COLOR_HAZARD, (int(h.x), int(h.y), size, size))

        left, top, right, bottom = sim_state.cart.bounds(playfield)
        pygame.draw.rect(
            self._surface, _COLOR_CART,
            (int(left), int(top), int(right - left), int(bottom - top)),
        )

        # Scale to observation resolution
        scaled = pygame.transform.scale(
            self._surface, (self.obs_width, self.obs_height)
        )
        # surfarray gives (W, H, 3); transpose to (H, W, 3)
        array = pygame.surfarray.array3d(scaled)
        return np.transpose(array, (1, 0, 2)).astype(np.uint8)

    def render(self):
        if self.render_mode == "rgb_array":
            return self._render_frame()
        elif self.render_mode == "human" and self._display:
            self._render_frame()  # updates self._surface
            self._display.blit(self._surface, (0, 0))
            self._draw_hud()
            pygame.display.flip()

    def _draw_hud(self):
        """Draw score/status text on the display surface."""
        sim_state = self._simulation.state
        font = pygame.font.Font(None, 28)
        score_surface = font.render(f"Score: {sim_state.score}", True, (40, 44, 52))
        self._display.blit(score_surface, (10, 10))

        if sim_state.is_game_over:
            font = pygame.font.Font(None, 48)
            surface = font.render("GAME OVER!", True, _COLOR_HAZARD)
            rect = surface.get_rect(
                center=(int(self.config.playfield.width) // 2, int(self.config.playfield.height) // 2)
            )
            self._display.blit(surface, rect)

    def _get_info(self):
        sim_state = self._simulation.state
        return {
            "score": sim_state.score,
            "episode_steps": self._episode_steps,
            "is_game_over": sim_state.is_game_over,
            "collection": {kind.value: count for kind, count in sim_state.collection.items()},
            "params": self.config.params.to_dict(),
            "episode_seed": self._episode_seed,
        }

    def close(self):
        if self._display:
            pygame.display.quit()
            self._display = None


def _nearest(items, cart_x: float, catch_line: float, size: float):
    """Item whose center is closest to the middle of the cart's top edge."""
    best = None
    best_dist = float("inf")
    for item in items:
        dx = item.x + size / 2 - cart_x
        dy = item.y + size / 2 - catch_line
        dist = dx * dx + dy * dy
        if dist < best_dist:
            best, best_dist = item, dist
    return best
