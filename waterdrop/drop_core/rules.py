"""
Game Rules
==========

Handles difficulty drift, collision and boundary termination.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from waterdrop.drop_core.config_loader import GameConfig, get_config
from waterdrop.drop_core.geometry import circle_intersects_rect
from waterdrop.drop_core.obstacle_generator import Obstacle, ObstacleGenerator

if TYPE_CHECKING:
    from waterdrop.drop_core.game import Drop


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


class DifficultyRules:
    """
    Holds the scroll speed and spawn interval and drifts them after spawns.

    After every spawn, speed grows by a fixed increment with a small
    probability and, independently, the spawn interval shrinks by a fixed
    decrement with another small probability, never below the minimum.
    Speed has no upper bound.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize difficulty rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._cfg = config.difficulty
        self._speed: float = self._cfg.base_speed
        self._spawn_interval: float = self._cfg.base_spawn_interval

    @property
    def speed(self) -> float:
        """Horizontal obstacle speed in pixels per frame."""
        return self._speed

    @property
    def spawn_interval(self) -> float:
        """Time between spawns (milliseconds)."""
        return self._spawn_interval

    def should_spawn(self, now: float, last_spawn: float) -> bool:
        """True once strictly more than one interval has elapsed."""
        return now - last_spawn > self._spawn_interval

    def apply_drift(self, generator: ObstacleGenerator) -> None:
        """
        Roll both drift events using the generator's RNG.

        Args:
            generator: Source of randomness for the run.
        """
        if generator.chance(self._cfg.speed_increase_probability):
            self._speed += self._cfg.speed_increment
        if generator.chance(self._cfg.interval_decrease_probability):
            self._spawn_interval = max(
                self._cfg.min_spawn_interval,
                self._spawn_interval - self._cfg.spawn_interval_decrement
            )

    def reset(self, reset_interval: bool = False) -> None:
        """
        Restore base speed.

        The spawn interval only returns to its base value when asked to or
        when configured to.
        """
        self._speed = self._cfg.base_speed
        if reset_interval or self._cfg.reset_interval_on_start:
            self._spawn_interval = self._cfg.base_spawn_interval


class TerminationRules:
    """
    Handles run-ending conditions.

    - Collision: drop circle touches a top or bottom pipe rectangle
    - Out of bounds: drop crosses the top or bottom edge of the board
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._board_height = config.board.height

    @property
    def board_height(self) -> float:
        return self._board_height

    def hits_obstacle(self, drop: "Drop", obstacle: Obstacle) -> bool:
        """Test the drop against both rectangles of one obstacle pair."""
        if circle_intersects_rect(drop.x, drop.y, drop.radius, *obstacle.top_rect()):
            return True
        return circle_intersects_rect(
            drop.x, drop.y, drop.radius, *obstacle.bottom_rect(self._board_height)
        )

    def out_of_bounds(self, drop: "Drop") -> bool:
        """True if the drop's lowest point is below the floor or its highest above the top."""
        return drop.y + drop.radius > self._board_height or drop.y - drop.radius < 0

    def check_termination(
        self,
        drop: "Drop",
        obstacles: Iterable[Obstacle]
    ) -> TerminationResult:
        """
        Check all termination conditions.

        Collisions are checked first; the first hit short-circuits.

        Args:
            drop: The player's drop.
            obstacles: Active obstacle pairs.

        Returns:
            TerminationResult indicating game state.
        """
        for obstacle in obstacles:
            if self.hits_obstacle(drop, obstacle):
                return TerminationResult.game_over("collision")

        if self.out_of_bounds(drop):
            return TerminationResult.game_over("out_of_bounds")

        return TerminationResult.none()


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.difficulty = DifficultyRules(config)
        self.termination = TerminationRules(config)

    def reset(self, reset_interval: bool = False) -> None:
        """Reset all rule state."""
        self.difficulty.reset(reset_interval)
