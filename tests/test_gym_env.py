"""Tests for Gymnasium environment wrapper."""

import numpy as np
import pytest

from money_catcher.config import GameConfig, SimulationParams
from money_catcher.entities import FallingReward, FallingHazard
from money_catcher.gym_env import CatcherEnv, STATE_DIM
from money_catcher.rewards import RewardKind
from money_catcher.state import SimulationState


def _quiet_config():
    return GameConfig(params=SimulationParams(reward_spawn_rate=0.0, hazard_spawn_rate=0.0))


class TestCatcherEnvCreation:
    def test_create_default(self):
        env = CatcherEnv()
        assert env.action_space.n == 2
        assert env.observation_space["state"].shape == (STATE_DIM,)
        env.close()

    def test_create_with_config(self):
        config = GameConfig(params=SimulationParams(fall_speed=7.0))
        env = CatcherEnv(config=config)
        assert env.config.params.fall_speed == 7.0
        env.close()

    def test_custom_resolution(self):
        env = CatcherEnv(render_mode="rgb_array", obs_resolution=(64, 64))
        obs, _ = env.reset(seed=42)
        assert obs["rgb"].shape == (64, 64, 3)
        assert obs["rgb"].dtype == np.uint8
        assert obs["rgb"].any()
        env.close()

    def test_state_before_reset(self):
        env = CatcherEnv()
        with pytest.raises(AssertionError):
            env.state
        env.close()


class TestCatcherEnvReset:
    def test_reset_returns_obs_and_info(self):
        env = CatcherEnv()
        obs, info = env.reset(seed=42)
        assert obs["state"].shape == (STATE_DIM,)
        assert obs["rgb"].shape == (128, 128, 3)
        assert info["score"] == 0
        assert info["episode_steps"] == 0
        assert info["collection"] == {"bill": 0, "treasure": 0, "gem": 0}
        assert env.observation_space.contains(obs)
        env.close()

    def test_initial_state_vector(self):
        env = CatcherEnv()
        obs, _ = env.reset(seed=0)
        state = obs["state"]
        assert state[0] == 400.0
        assert state[1] == 0.0
        assert state[2] == 0.0
        assert state[3] == 1.0
        assert state[4] == 0.0
        assert state[6] == 0.0
        np.testing.assert_allclose(state[7:13], SimulationParams().to_tuple(), rtol=1e-6)
        np.testing.assert_array_equal(state[13:16], [0.0, -1.0, 0.0])
        np.testing.assert_array_equal(state[16:18], [0.0, -1.0])
        np.testing.assert_array_equal(state[18:23], 0.0)
        assert state[23] == 440.0
        env.close()

    def test_same_seed_same_episode(self):
        def run(seed):
            env = CatcherEnv(config=GameConfig(params=SimulationParams(reward_spawn_rate=0.2)))
            env.reset(seed=seed)
            states = []
            for i in range(100):
                obs, _, terminated, _, _ = env.step([i % 2, 0])
                states.append(obs["state"])
                if terminated:
                    break
            env.close()
            return np.array(states)

        np.testing.assert_array_equal(run(7), run(7))

    def test_reset_after_episode(self):
        env = CatcherEnv(config=_quiet_config())
        env.reset(seed=1)
        for _ in range(10):
            env.step([0, 1])
        obs, info = env.reset()
        assert info["episode_steps"] == 0
        assert obs["state"][0] == 400.0
        env.close()


class TestCatcherEnvStep:
    def test_step_returns_tuple(self):
        env = CatcherEnv()
        env.reset(seed=42)
        obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
        assert obs["state"].shape == (STATE_DIM,)
        assert isinstance(reward, float)
        assert isinstance(terminated, bool)
        assert isinstance(truncated, bool)
        assert set(info["reward_signals"]) == {"catch", "death", "step"}
        env.close()

    def test_right_action_moves_cart(self):
        env = CatcherEnv(config=_quiet_config())
        env.reset(seed=0)
        obs, *_ = env.step(np.array([0, 1], dtype=np.int8))
        assert obs["state"][0] == pytest.approx(400.49)
        assert obs["state"][1] == pytest.approx(0.49)
        env.close()

    def test_catch_reward(self):
        env = CatcherEnv(config=_quiet_config())
        env.reset(seed=0)
        start = env.state
        env._simulation.state = SimulationState(
            cart=start.cart,
            rewards=(FallingReward(x=380.0, y=398.0, kind=RewardKind.TREASURE),),
        )
        _, reward, terminated, _, info = env.step([0, 0])
        assert info["reward_signals"]["catch"] == 3.0
        assert reward == 3.0
        assert not terminated
        assert info["collection"]["treasure"] == 1
        env.close()

    def test_hazard_terminates(self):
        env = CatcherEnv(config=_quiet_config())
        env.reset(seed=0)
        env._simulation.state = SimulationState(
            cart=env.state.cart,
            hazards=(FallingHazard(x=385.0, y=410.0),),
        )
        obs, reward, terminated, _, info = env.step([0, 0])
        assert terminated
        assert info["reward_signals"]["death"] == 1.0
        assert reward == -50.0
        assert obs["state"][6] == 1.0
        env.close()

    def test_truncation(self):
        env = CatcherEnv(config=_quiet_config(), max_episode_steps=5)
        env.reset(seed=0)
        truncated = False
        for _ in range(5):
            _, _, _, truncated, _ = env.step([0, 0])
        assert truncated
        env.close()

    def test_custom_reward_weights(self):
        env = CatcherEnv(config=_quiet_config(), reward_weights={"step": 0.1})
        env.reset(seed=0)
        _, reward, *_ = env.step([0, 0])
        assert reward == pytest.approx(0.1)
        env.close()

    def test_nearest_items_in_state(self):
        env = CatcherEnv(config=_quiet_config())
        env.reset(seed=0)
        env._simulation.state = SimulationState(
            cart=env.state.cart,
            rewards=(
                FallingReward(x=100.0, y=10.0, kind=RewardKind.BILL),
                FallingReward(x=500.0, y=300.0, kind=RewardKind.GEM),
            ),
            hazards=(FallingHazard(x=200.0, y=100.0),),
        )
        obs, *_ = env.step([0, 0])
        state = obs["state"]
        # Gem at (500, 303) is closer to the cart than the bill
        assert state[13] == pytest.approx(500.0 + 20.0 - 400.0)
        assert state[14] == pytest.approx(303.0)
        assert state[15] == 10.0
        assert state[16] == pytest.approx(200.0 + 15.0 - 400.0)
        assert state[17] == pytest.approx(103.0)
        assert state[18] == 2.0
        assert state[19] == 1.0
        env.close()

    def test_render_rgb_array(self):
        env = CatcherEnv(render_mode="rgb_array", obs_resolution=(32, 48))
        env.reset(seed=0)
        frame = env.render()
        assert frame.shape == (32, 48, 3)
        env.close()
