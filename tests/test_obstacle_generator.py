"""
Tests for obstacle generation.
"""

import pytest

from waterdrop.drop_core.config_loader import load_config
from waterdrop.drop_core.obstacle_generator import Obstacle, ObstacleGenerator


@pytest.fixture
def config():
    return load_config()


class TestObstacleGenerator:
    """Test spawned obstacle pairs."""

    def test_gap_within_margins(self, config):
        """Every gap keeps min_gap_margin clear above and below."""
        generator = ObstacleGenerator(config, seed=42)
        margin = config.obstacles.min_gap_margin
        height = config.board.height

        for _ in range(500):
            ob = generator.spawn(height)
            assert margin <= ob.gap_y
            assert ob.gap_y + ob.gap_height <= height - margin

    def test_gap_is_integer(self, config):
        generator = ObstacleGenerator(config, seed=7)
        for _ in range(50):
            ob = generator.spawn()
            assert ob.gap_y == int(ob.gap_y)

    def test_spawns_beyond_right_edge(self, config):
        generator = ObstacleGenerator(config, seed=1)
        ob = generator.spawn()

        assert ob.x == config.board.width + 10
        assert ob.width == 84
        assert ob.gap_height == 140
        assert ob.scored is False
        assert ob.type == "pipe"

    def test_deterministic_with_seed(self, config):
        """Same seed should produce same gaps."""
        g1 = ObstacleGenerator(config, seed=42)
        g2 = ObstacleGenerator(config, seed=42)

        assert [g1.spawn().gap_y for _ in range(30)] == [g2.spawn().gap_y for _ in range(30)]

    def test_reset_restores_sequence(self, config):
        generator = ObstacleGenerator(config, seed=3)
        initial = [generator.spawn().gap_y for _ in range(10)]

        generator.reset(seed=3)
        assert generator.spawned == 0
        assert [generator.spawn().gap_y for _ in range(10)] == initial

    def test_exact_fit_height(self, config):
        """When the gap and margins exactly fill the board there is one choice."""
        generator = ObstacleGenerator(config, seed=0)
        # 90 + 140 + 90
        for _ in range(10):
            assert generator.spawn(320).gap_y == 90

    def test_height_too_small_raises(self, config):
        generator = ObstacleGenerator(config, seed=0)
        with pytest.raises(ValueError):
            generator.spawn(300)

    def test_gap_range(self, config):
        generator = ObstacleGenerator(config)
        assert generator.gap_range(640) == (90, 410)


class TestObstacle:
    """Test obstacle geometry helpers."""

    def test_rects(self):
        ob = Obstacle(x=100, width=84, gap_y=50, gap_height=140)

        assert ob.top_rect() == (100, 0.0, 84, 50)
        assert ob.bottom_rect(640) == (100, 190, 84, 450)
        assert ob.trailing_edge == 184
        assert ob.gap_bottom == 190
