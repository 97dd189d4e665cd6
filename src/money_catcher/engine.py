"""Interactive game engine: pygame window, keyboard input and rendering.

The engine is a thin driver around Simulation. Each frame it samples the
movement keys, advances the simulation one tick, and draws the new state.
All game rules live in simulation.py.
"""

import argparse
import sys
from typing import Optional, Dict, Any, Tuple

import pygame

from .config import GameConfig, CONFIGS, get_config
from .constraints import ParameterConstraints
from .rewards import RewardKind, SORTED_REWARDS
from .simulation import Simulation
from .state import SimulationState


# Colors (RGB)
COLOR_BG = (219, 234, 254)
COLOR_CART = (97, 175, 239)
COLOR_GOBLIN = (152, 195, 121)
COLOR_HAZARD = (224, 108, 117)
COLOR_TEXT = (40, 44, 52)
COLOR_REWARDS: Dict[RewardKind, Tuple[int, int, int]] = {
    RewardKind.BILL: (120, 190, 120),
    RewardKind.TREASURE: (229, 192, 123),
    RewardKind.GEM: (86, 182, 194),
}

# Number keys switch presets in this order
PRESET_KEYS = {
    pygame.K_1: "default",
    pygame.K_2: "easy",
    pygame.K_3: "hard",
    pygame.K_4: "slippery",
    pygame.K_5: "rain",
}

HUD_HEIGHT = 40


class CatcherEngine:
    """Main game engine coordinating simulation, input and rendering.

    Handles:
    - Game loop with one simulation tick per frame
    - Pygame rendering
    - Keyboard input (arrows / A-D to move, R to restart, 1-5 presets, Esc to quit)
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        """Initialize game engine.

        Args:
            config: Game configuration. Uses defaults if None.
            seed: Random seed for the simulation.
        """
        self.config = config or GameConfig()

        pygame.init()
        self.width = int(self.config.playfield.width)
        self.height = int(self.config.playfield.height) + HUD_HEIGHT
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption("Money Catcher")
        self.clock = pygame.time.Clock()

        self.simulation = Simulation(self.config, seed=seed)
        self.running = False
        self._game_over_reported = False

        # Input state
        self._keys_pressed: Dict[int, bool] = {}

        self._report_param_warnings()

    @property
    def state(self) -> SimulationState:
        return self.simulation.state

    def _report_param_warnings(self) -> None:
        result = ParameterConstraints.validate_config(self.config)
        for violation in result.violations:
            print(f"PARAMS {violation.severity.upper()}: {violation.message}")

    def reset(self) -> None:
        """Restart the game with the current parameters."""
        self.simulation.reset()
        self._game_over_reported = False
        print("NEW GAME")

    def load_preset(self, name: str) -> None:
        """Switch simulation params to a named preset and restart."""
        preset = get_config(name)
        self.config.params = preset.params
        self._report_param_warnings()
        p = self.config.params
        print(f"PRESET {name}: accel={p.cart_acceleration:.2f} friction={p.cart_friction:.2f} "
              f"fall={p.fall_speed:.1f} rewards={p.reward_spawn_rate:.3f} bombs={p.hazard_spawn_rate:.3f}")
        self.reset()

    def handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._keys_pressed[event.key] = True
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_r:
                    self.reset()
                elif event.key in PRESET_KEYS:
                    self.load_preset(PRESET_KEYS[event.key])
            elif event.type == pygame.KEYUP:
                self._keys_pressed[event.key] = False

    def sample_input(self) -> Tuple[bool, bool]:
        """Movement flags for this frame: (moving_left, moving_right)."""
        left = bool(self._keys_pressed.get(pygame.K_LEFT) or self._keys_pressed.get(pygame.K_a))
        right = bool(self._keys_pressed.get(pygame.K_RIGHT) or self._keys_pressed.get(pygame.K_d))
        return left, right

    def update(self) -> None:
        """Advance the simulation by one tick using the sampled input."""
        moving_left, moving_right = self.sample_input()
        self.simulation.tick(moving_left, moving_right)

        if self.state.is_game_over and not self._game_over_reported:
            tally = ", ".join(
                f"{reward.name}={self.state.collection[reward.kind]}" for reward in SORTED_REWARDS
            )
            print(f"GAME OVER: score={self.state.score} after {self.simulation.tick_count} ticks | {tally}")
            self._game_over_reported = True

    def render(self) -> None:
        """Render current game state."""
        self.screen.fill(COLOR_BG)
        playfield = self.config.playfield
        state = self.state

        # Goblin along the top edge
        pygame.draw.rect(
            self.screen, COLOR_GOBLIN,
            (int(state.goblin.x) - 15, HUD_HEIGHT + 20, 30, 30)
        )

        for reward in state.rewards:
            pygame.draw.rect(
                self.screen, COLOR_REWARDS[reward.kind],
                (int(reward.x), HUD_HEIGHT + int(reward.y),
                 int(playfield.reward_size), int(playfield.reward_size))
            )

        for hazard in state.hazards:
            pygame.draw.rect(
                self.screen, COLOR_HAZARD,
                (int(hazard.x), HUD_HEIGHT + int(hazard.y),
                 int(playfield.hazard_size), int(playfield.hazard_size))
            )

        left, top, right, bottom = state.cart.bounds(playfield)
        pygame.draw.rect(
            self.screen, COLOR_CART,
            (int(left), HUD_HEIGHT + int(top), int(right - left), int(bottom - top))
        )

        # HUD: score and tally
        font = pygame.font.Font(None, 28)
        tally = "   ".join(
            f"{reward.name}: {state.collection[reward.kind]}" for reward in SORTED_REWARDS
        )
        hud_surface = font.render(f"Score: {state.score}   |   {tally}", True, COLOR_TEXT)
        self.screen.blit(hud_surface, (10, 10))

        if state.is_game_over:
            self._draw_text(f"GAME OVER! Score {state.score}. Press R to restart", COLOR_HAZARD)

        pygame.display.flip()

    def _draw_text(self, text: str, color: Tuple[int, int, int]) -> None:
        """Draw centered text on screen."""
        font = pygame.font.Font(None, 40)
        text_surface = font.render(text, True, color)
        text_rect = text_surface.get_rect(center=(self.width // 2, self.height // 2))
        self.screen.blit(text_surface, text_rect)

    def run(self) -> int:
        """Main game loop. Returns the final score."""
        self.running = True

        while self.running:
            self.handle_events()
            self.update()
            self.render()
            self.clock.tick(self.config.fps)

        pygame.quit()
        return self.state.score

    def get_state(self) -> Dict[str, Any]:
        """Get current game state for observation/logging."""
        state = self.state.to_dict()
        state["tick"] = self.simulation.tick_count
        return state


def main() -> int:
    parser = argparse.ArgumentParser(description="Catch the money, dodge the bombs")
    parser.add_argument("--preset", default="default", choices=sorted(CONFIGS), help="Parameter preset")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")

    args = parser.parse_args()

    config = get_config(args.preset)
    config.fps = args.fps
    engine = CatcherEngine(config, seed=args.seed)
    score = engine.run()
    print(f"\nFinal Score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
