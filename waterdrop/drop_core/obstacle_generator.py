"""
Obstacle Generator
==================

Creates obstacle pairs with a randomized gap position. The same seeded RNG
also drives difficulty drift so a whole run is reproducible from one seed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Tuple

from waterdrop.drop_core.config_loader import GameConfig, get_config


Rect = Tuple[float, float, float, float]


@dataclass
class Obstacle:
    """A pipe pair scrolling right to left with a passable gap."""
    x: float
    width: float
    gap_y: float          # Top of the gap
    gap_height: float
    scored: bool = False
    type: str = "pipe"

    @property
    def trailing_edge(self) -> float:
        """Right-hand edge of the pair."""
        return self.x + self.width

    @property
    def gap_bottom(self) -> float:
        return self.gap_y + self.gap_height

    def top_rect(self) -> Rect:
        """Blocking rectangle from the top of the board down to the gap."""
        return (self.x, 0.0, self.width, self.gap_y)

    def bottom_rect(self, board_height: float) -> Rect:
        """Blocking rectangle from the bottom of the gap to the board floor."""
        return (self.x, self.gap_bottom, self.width, board_height - self.gap_bottom)

    def __repr__(self) -> str:
        flag = ", scored" if self.scored else ""
        return f"Obstacle(x={self.x:.1f}, gap={self.gap_y:.0f}+{self.gap_height:.0f}{flag})"


class ObstacleGenerator:
    """
    Produces new obstacle pairs just beyond the right edge of the board.

    Gap tops are drawn uniformly from the integer range
    [min_gap_margin, height - min_gap_margin - gap_height].
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize generator.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._spawned: int = 0

    @property
    def rng(self) -> random.Random:
        """The generator's RNG (shared with difficulty drift)."""
        return self._rng

    @property
    def spawned(self) -> int:
        """Number of obstacles produced since the last reset."""
        return self._spawned

    def gap_range(self, play_height: Optional[float] = None) -> Tuple[int, int]:
        """
        Valid range for the gap top.

        Args:
            play_height: Board height. Uses the configured height if None.

        Returns:
            (min_gap_y, max_gap_y) tuple, both inclusive.
        """
        if play_height is None:
            play_height = self._config.board.height
        cfg = self._config.obstacles
        min_gap_y = cfg.min_gap_margin
        max_gap_y = int(play_height - cfg.min_gap_margin - cfg.gap_height)
        if max_gap_y < min_gap_y:
            raise ValueError(
                f"Play height {play_height} cannot fit a gap of {cfg.gap_height} "
                f"with margins of {cfg.min_gap_margin}"
            )
        return (min_gap_y, max_gap_y)

    def spawn(self, play_height: Optional[float] = None) -> Obstacle:
        """
        Create a new obstacle pair.

        Args:
            play_height: Board height. Uses the configured height if None.

        Returns:
            Fresh, unscored obstacle positioned beyond the right edge.
        """
        cfg = self._config.obstacles
        min_gap_y, max_gap_y = self.gap_range(play_height)
        gap_y = self._rng.randint(min_gap_y, max_gap_y)

        self._spawned += 1
        return Obstacle(
            x=self._config.board.width + cfg.spawn_offset,
            width=cfg.width,
            gap_y=float(gap_y),
            gap_height=cfg.gap_height,
            scored=False,
            type=cfg.type
        )

    def chance(self, probability: float) -> bool:
        """Bernoulli draw from the generator's RNG."""
        return self._rng.random() < probability

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator with optional new seed.

        Args:
            seed: New random seed. Keeps current RNG state if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._spawned = 0
