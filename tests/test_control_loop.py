"""
Tests for the frame loop.
"""

import pytest

from waterdrop.drop_core.config_loader import load_config
from waterdrop.drop_core.control_loop import FrameLoop
from waterdrop.drop_core.game import CoreGame


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return CoreGame(config=config, seed=42)


class TestFrameLoop:
    """Test tick scheduling and ordering."""

    def test_not_scheduled_initially(self, game):
        renders = []
        loop = FrameLoop(game, render_callback=lambda: renders.append(1))

        assert not loop.scheduled
        assert loop.tick(16.0) is None
        assert renders == []

    def test_step_then_render(self, game):
        seen = []
        loop = FrameLoop(game, render_callback=lambda: seen.append(game.frame))
        loop.restart(0.0)

        loop.tick(16.0)
        loop.tick(32.0)

        # Rendering always observes the completed step
        assert seen == [1, 2]
        assert loop.ticks == 2

    def test_dt_measured(self, game):
        loop = FrameLoop(game)
        loop.restart(1000.0)
        loop.tick(1016.0)

        assert loop.dt == pytest.approx(0.016)

    def test_stops_after_game_over(self, game, config):
        renders = []
        loop = FrameLoop(game, render_callback=lambda: renders.append(game.running))
        loop.restart(0.0)
        game.drop.y = config.board.height + 1

        result = loop.tick(16.0)

        assert result.terminated
        assert not loop.scheduled
        # The final frame is still rendered
        assert renders == [False]
        assert loop.tick(32.0) is None
        assert len(renders) == 1

    def test_activate_when_idle_schedules(self, game):
        loop = FrameLoop(game)
        loop.activate(0.0)

        assert game.running
        assert loop.scheduled

    def test_activate_while_running_lifts(self, game):
        loop = FrameLoop(game)
        loop.restart(0.0)
        loop.activate(5.0)

        assert game.drop.vy == -8.8

    def test_restart_while_running_single_loop(self, game):
        renders = []
        loop = FrameLoop(game, render_callback=lambda: renders.append(1))
        loop.restart(0.0)
        loop.tick(16.0)
        loop.restart(20.0)
        loop.tick(36.0)

        assert len(renders) == 2
        assert game.frame == 1

    def test_runs_until_drop_falls_out(self, game):
        loop = FrameLoop(game)
        loop.restart(0.0)
        now = 0.0
        while loop.scheduled and now < 10000:
            now += 16.0
            loop.tick(now)

        assert not loop.scheduled
        assert game.termination_reason == "out_of_bounds"
