"""
Tests for run lifecycle: start, activate, restart and game over.
"""

from dataclasses import replace

import pytest

from waterdrop.drop_core.config_loader import load_config
from waterdrop.drop_core.game import CoreGame
from waterdrop.drop_core.obstacle_generator import Obstacle


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return CoreGame(config=config, seed=42)


def end_run(game):
    game.drop.y = game.config.board.height + 1
    game.step(game.last_spawn + 1)


class TestStart:
    """Test Idle -> Running."""

    def test_initial_state_is_idle(self, game):
        assert not game.running
        assert game.drop is None
        assert game.score == 0
        assert game.game_over_message is None

    def test_start_resets_drop(self, game, config):
        game.start(100.0)

        drop = game.drop
        assert game.running
        assert drop.x == 110
        assert drop.y == config.board.height / 2
        assert drop.radius == 14
        assert drop.vy == 0
        assert drop.color == (63, 230, 255)
        assert game.last_spawn == 100.0
        assert game.frame == 0

    def test_restart_clears_run(self, game):
        game.start(0.0)
        game._obstacles.append(Obstacle(x=12.2, width=84, gap_y=250, gap_height=140))
        game.step(1.0)
        assert game.score == 1

        game.start(50.0)
        assert game.score == 0
        assert game.obstacles == ()
        assert game.running
        assert game.termination_reason == ""

    def test_restart_from_game_over(self, game):
        game.start(0.0)
        end_run(game)
        assert not game.running

        game.start(10.0)
        assert game.running
        assert game.game_over_message is None
        assert game.runs == 2

    def test_speed_resets_interval_persists(self, config):
        forced = replace(config, difficulty=replace(
            config.difficulty,
            speed_increase_probability=1.0,
            interval_decrease_probability=1.0
        ))
        game = CoreGame(config=forced, seed=1)
        game.start(0.0)
        game.step(1401.0)
        assert game.speed == pytest.approx(2.25)
        assert game.spawn_interval == pytest.approx(1380)

        game.start(2000.0)
        assert game.speed == pytest.approx(2.2)
        assert game.spawn_interval == pytest.approx(1380)

    def test_interval_reset_when_configured(self, config):
        forced = replace(config, difficulty=replace(
            config.difficulty,
            interval_decrease_probability=1.0,
            reset_interval_on_start=True
        ))
        game = CoreGame(config=forced, seed=1)
        game.start(0.0)
        game.step(1401.0)
        assert game.spawn_interval == pytest.approx(1380)

        game.start(2000.0)
        assert game.spawn_interval == pytest.approx(1400)

    def test_interval_reset_on_request(self, config):
        forced = replace(config, difficulty=replace(
            config.difficulty,
            interval_decrease_probability=1.0
        ))
        game = CoreGame(config=forced, seed=1)
        game.start(0.0)
        game.step(1401.0)
        assert game.spawn_interval == pytest.approx(1380)

        game.start(2000.0, seed=1, reset_interval=True)
        assert game.spawn_interval == pytest.approx(1400)

    def test_seeded_runs_repeat(self, config):
        def gaps(seed):
            game = CoreGame(config=config)
            game.start(0.0, seed=seed)
            now = 0.0
            for _ in range(3):
                now += 1401.0
                game.drop.y, game.drop.vy = 320.0, 0.0
                game.step(now)
            return [ob.gap_y for ob in game.obstacles]

        assert gaps(9) == gaps(9)


class TestActivate:
    """Test the single player action."""

    def test_lift_sets_velocity(self, game):
        game.start(0.0)
        game.drop.vy = 5.0
        y = game.drop.y

        started = game.activate(10.0)

        assert not started
        assert game.drop.vy == -8.8
        assert game.drop.y == y

    def test_lift_ignores_prior_velocity(self, game):
        game.start(0.0)
        for vy in (-20.0, 0.0, 12.5):
            game.drop.vy = vy
            game.activate(0.0)
            assert game.drop.vy == -8.8

    def test_lift_does_not_touch_obstacles(self, game):
        game.start(0.0)
        game._obstacles.append(Obstacle(x=300, width=84, gap_y=200, gap_height=140))
        game.activate(0.0)

        assert game.obstacles[0].x == 300
        assert not game.obstacles[0].scored
        assert game.score == 0

    def test_activate_when_idle_starts_run(self, game):
        assert game.activate(25.0)
        assert game.running
        assert game.drop.vy == 0
        assert game.last_spawn == 25.0

    def test_activate_after_game_over_starts_run(self, game):
        game.start(0.0)
        end_run(game)

        assert game.activate(100.0)
        assert game.running
        assert game.score == 0

    def test_first_frame_after_lift(self, game):
        game.start(0.0)
        game.activate(0.0)
        y = game.drop.y
        game.step(1.0)

        assert game.drop.vy == pytest.approx(-8.35)
        assert game.drop.y == pytest.approx(y - 8.35)


class TestGameOver:
    """Test Running -> GameOver."""

    def test_state_kept_for_display(self, game):
        game.start(0.0)
        game._obstacles.append(Obstacle(x=12.2, width=84, gap_y=250, gap_height=140))
        game._obstacles.append(Obstacle(x=300, width=84, gap_y=250, gap_height=140))
        game.step(1.0)
        end_run(game)

        assert not game.running
        assert game.score == 1
        assert len(game.obstacles) == 2
        assert game.game_over_message == (
            "You delivered water to 1 people. Real clean water lasts a lifetime."
        )

    def test_render_data_after_game_over(self, game):
        game.start(0.0)
        end_run(game)
        data = game.get_render_data()

        assert data["running"] is False
        assert data["drop"] is not None
        assert data["game_over_message"].startswith("You delivered water to 0 people.")

    def test_stop(self, game):
        game.start(0.0)
        game.stop()
        assert not game.running
        assert game.termination_reason == "stopped"

    def test_best_score_survives_restart(self, game):
        game.start(0.0)
        game._obstacles.append(Obstacle(x=12.2, width=84, gap_y=250, gap_height=140))
        game.step(1.0)
        game.start(10.0)

        assert game.score == 0
        assert game.best_score == 1


class TestRenderContract:
    """Test the data handed to renderers."""

    def test_keys(self, game):
        game.start(0.0)
        game._obstacles.append(Obstacle(x=300, width=84, gap_y=200, gap_height=140))
        data = game.get_render_data()

        assert data["board_width"] == 480
        assert data["board_height"] == 640
        assert data["drop"] == {"x": 110, "y": 320, "radius": 14, "color": (63, 230, 255)}
        assert data["obstacles"] == [{
            "x": 300, "width": 84, "gap_y": 200, "gap_height": 140,
            "scored": False, "type": "pipe",
        }]
        assert data["running"] is True
        assert data["score_text"] == "Water delivered: 0"
        assert data["game_over_message"] is None

    def test_before_first_run(self, game):
        data = game.get_render_data()
        assert data["drop"] is None
        assert data["obstacles"] == []
        assert data["running"] is False
