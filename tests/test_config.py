"""
Tests for configuration loading and validation.
"""

import os

import pytest
import yaml

from waterdrop.drop_core.config_loader import get_config, load_config, reload_config


DEFAULT_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "waterdrop", "game_config.yaml"
)


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def raw():
    with open(DEFAULT_PATH, "r") as f:
        return yaml.safe_load(f)


def write_config(tmp_path, raw):
    path = tmp_path / "game_config.yaml"
    path.write_text(yaml.safe_dump(raw))
    return str(path)


class TestDefaults:
    """Default tunables match the shipped game."""

    def test_physics(self, config):
        assert config.physics.gravity == 0.45
        assert config.physics.lift == -8.8

    def test_difficulty(self, config):
        d = config.difficulty
        assert d.base_speed == 2.2
        assert d.speed_increment == 0.05
        assert d.base_spawn_interval == 1400
        assert d.spawn_interval_decrement == 20
        assert d.min_spawn_interval == 900
        assert d.speed_increase_probability == 0.12
        assert d.interval_decrease_probability == 0.07
        assert d.reset_interval_on_start is False

    def test_geometry(self, config):
        assert config.obstacles.gap_height == 140
        assert config.obstacles.min_gap_margin == 90
        assert config.obstacles.width == 84
        assert config.drop.radius == 14
        assert config.drop.x == 110
        assert config.min_gap_y == 90
        assert config.max_gap_y == config.board.height - 230

    def test_explicit_default_path(self):
        assert load_config(DEFAULT_PATH).board.width == load_config().board.width


class TestValidation:
    """Bad configs are rejected."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_probability_out_of_range(self, tmp_path, raw):
        raw["difficulty"]["speed_increase_probability"] = 1.5
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw))

    def test_gap_does_not_fit(self, tmp_path, raw):
        raw["board"]["height"] = 300
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw))

    def test_min_interval_above_base(self, tmp_path, raw):
        raw["difficulty"]["min_spawn_interval"] = 2000
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw))

    def test_bad_color(self, tmp_path, raw):
        raw["drop"]["color"] = [1, 2]
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw))

    def test_bad_render_style(self, tmp_path, raw):
        raw["observation"]["render_style"] = "ascii"
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, raw))

    def test_round_trip_custom_file(self, tmp_path, raw):
        raw["physics"]["gravity"] = 0.5
        assert load_config(write_config(tmp_path, raw)).physics.gravity == 0.5


class TestCachedConfig:
    """Test the module-level cached configuration."""

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_custom_file(self, tmp_path, raw):
        raw["board"]["width"] = 400
        try:
            reloaded = reload_config(write_config(tmp_path, raw))
            assert reloaded.board.width == 400
            assert get_config() is reloaded
        finally:
            reload_config()

        assert get_config().board.width == 480
