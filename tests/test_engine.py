"""Tests for game engine."""

import pygame
import pytest

from money_catcher.config import GameConfig, SimulationParams
from money_catcher.engine import CatcherEngine, PRESET_KEYS
from money_catcher.entities import FallingHazard
from money_catcher.state import SimulationState, reset


@pytest.fixture
def engine():
    config = GameConfig(params=SimulationParams(reward_spawn_rate=0.0, hazard_spawn_rate=0.0))
    eng = CatcherEngine(config, seed=0)
    yield eng
    pygame.quit()


class TestCatcherEngine:
    def test_initialization(self, engine):
        assert engine.state == reset()
        assert engine.height == 500 + 40
        assert engine.running is False

    def test_update_without_keys_idles(self, engine):
        engine.update()
        assert engine.state.cart.x == 400.0
        assert engine.simulation.tick_count == 1

    def test_arrow_keys_move_cart(self, engine):
        engine._keys_pressed[pygame.K_RIGHT] = True
        for _ in range(10):
            engine.update()
        assert engine.state.cart.x > 400.0

        engine._keys_pressed[pygame.K_RIGHT] = False
        engine._keys_pressed[pygame.K_a] = True
        assert engine.sample_input() == (True, False)

    def test_game_over_reported_once(self, engine, capsys):
        start = engine.state
        engine.simulation.state = SimulationState(
            cart=start.cart,
            hazards=(FallingHazard(x=385.0, y=410.0),),
        )
        engine.update()
        engine.update()
        out = capsys.readouterr().out
        assert engine.state.is_game_over
        assert out.count("GAME OVER") == 1

    def test_reset_restores_state(self, engine, capsys):
        engine._keys_pressed[pygame.K_LEFT] = True
        for _ in range(5):
            engine.update()
        engine.reset()

        assert engine.state == reset()
        assert engine.simulation.tick_count == 0
        assert "NEW GAME" in capsys.readouterr().out

    def test_load_preset(self, engine, capsys):
        engine.load_preset("hard")
        assert engine.config.params.fall_speed == 6.0
        assert engine.simulation.params.fall_speed == 6.0
        out = capsys.readouterr().out
        assert "PRESET hard" in out
        assert "NEW GAME" in out

    def test_load_unknown_preset(self, engine):
        with pytest.raises(ValueError):
            engine.load_preset("nightmare")

    def test_preset_keys(self):
        assert list(PRESET_KEYS.values()) == ["default", "easy", "hard", "slippery", "rain"]

    def test_param_warnings_printed(self, capsys):
        CatcherEngine(GameConfig(params=SimulationParams(cart_acceleration=0.0)), seed=0)
        assert "PARAMS WARNING" in capsys.readouterr().out
        pygame.quit()

    def test_get_state(self, engine):
        engine.update()
        state = engine.get_state()
        assert state["tick"] == 1
        assert state["score"] == 0
        assert "cart_x" in state
        assert "collection" in state

    def test_render_does_not_crash(self, engine):
        engine.update()
        engine.render()
