"""Tests for configuration system."""

import random

import pytest

from money_catcher.config import (
    SimulationParams,
    PlayfieldConfig,
    GameConfig,
    CONFIGS,
    get_config,
)


class TestSimulationParams:
    def test_defaults(self):
        params = SimulationParams()
        assert params.cart_acceleration == 0.5
        assert params.cart_friction == 0.98
        assert params.cart_max_speed == 5.0
        assert params.fall_speed == 3.0
        assert params.reward_spawn_rate == 0.02
        assert params.hazard_spawn_rate == 0.01

    def test_sample_within_ranges(self):
        rng = random.Random(0)
        for _ in range(20):
            params = SimulationParams.sample(rng)
            assert SimulationParams.CART_ACCELERATION_RANGE[0] <= params.cart_acceleration <= SimulationParams.CART_ACCELERATION_RANGE[1]
            assert SimulationParams.CART_FRICTION_RANGE[0] <= params.cart_friction <= SimulationParams.CART_FRICTION_RANGE[1]
            assert SimulationParams.CART_MAX_SPEED_RANGE[0] <= params.cart_max_speed <= SimulationParams.CART_MAX_SPEED_RANGE[1]
            assert SimulationParams.FALL_SPEED_RANGE[0] <= params.fall_speed <= SimulationParams.FALL_SPEED_RANGE[1]
            assert SimulationParams.REWARD_SPAWN_RATE_RANGE[0] <= params.reward_spawn_rate <= SimulationParams.REWARD_SPAWN_RATE_RANGE[1]
            assert SimulationParams.HAZARD_SPAWN_RATE_RANGE[0] <= params.hazard_spawn_rate <= SimulationParams.HAZARD_SPAWN_RATE_RANGE[1]

    def test_sample_seeded_reproducible(self):
        assert SimulationParams.sample(random.Random(3)) == SimulationParams.sample(random.Random(3))

    def test_sample_without_rng(self):
        params = SimulationParams.sample()
        assert 0.0 <= params.reward_spawn_rate <= 0.1

    def test_round_trip_dict(self):
        params = SimulationParams(cart_acceleration=0.7, fall_speed=4.5)
        assert SimulationParams.from_dict(params.to_dict()) == params

    def test_from_dict_defaults(self):
        params = SimulationParams.from_dict({"fall_speed": 9.0})
        assert params.fall_speed == 9.0
        assert params.cart_friction == 0.98

    def test_to_tuple_order(self):
        params = SimulationParams()
        assert params.to_tuple() == (0.5, 0.98, 5.0, 3.0, 0.02, 0.01)
        assert len(params.to_tuple()) == len(SimulationParams.FIELDS)


class TestPlayfieldConfig:
    def test_defaults(self):
        playfield = PlayfieldConfig()
        assert playfield.width == 800
        assert playfield.height == 500
        assert playfield.cart_width == 100
        assert playfield.cart_height == 60
        assert playfield.reward_size == 40
        assert playfield.hazard_size == 30

    def test_derived(self):
        playfield = PlayfieldConfig()
        assert playfield.half_cart_width == 50
        assert playfield.catch_line == 440

    def test_frozen(self):
        playfield = PlayfieldConfig()
        with pytest.raises(AttributeError):
            playfield.width = 1000


class TestGameConfig:
    def test_defaults(self):
        config = GameConfig()
        assert config.params == SimulationParams()
        assert config.playfield == PlayfieldConfig()
        assert config.fps == 60
        assert config.seed is None

    def test_to_dict(self):
        d = GameConfig().to_dict()
        assert d["params"]["fall_speed"] == 3.0
        assert d["playfield"]["width"] == 800
        assert d["fps"] == 60

    def test_sample(self):
        config = GameConfig.sample(random.Random(1))
        assert config.playfield == PlayfieldConfig()
        assert config.params != SimulationParams()


class TestPresets:
    def test_presets_exist(self):
        for name in ("default", "easy", "hard", "slippery", "rain"):
            assert name in CONFIGS

    def test_default_preset_is_defaults(self):
        assert CONFIGS["default"].params == SimulationParams()

    def test_hard_is_harder_than_easy(self):
        assert CONFIGS["hard"].params.hazard_spawn_rate > CONFIGS["easy"].params.hazard_spawn_rate
        assert CONFIGS["hard"].params.fall_speed > CONFIGS["easy"].params.fall_speed

    def test_get_config_returns_copy(self):
        config = get_config("easy")
        config.params.fall_speed = 99.0
        assert CONFIGS["easy"].params.fall_speed != 99.0

    def test_get_config_unknown(self):
        with pytest.raises(ValueError, match="Unknown config"):
            get_config("nightmare")
