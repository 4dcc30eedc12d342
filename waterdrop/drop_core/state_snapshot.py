"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
Includes derived features about the next obstacle the drop has to pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
import numpy as np

from waterdrop.drop_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from waterdrop.drop_core.game import CoreGame


@dataclass
class GameSnapshot:
    """
    Complete game state snapshot.

    Obstacle arrays are fixed-size with masking; slot order is spawn order.
    """
    # Core state
    running: bool
    score: int
    frame: int
    obstacle_count: int

    # Drop
    drop_y: float
    drop_vy: float

    # Difficulty
    speed: float
    spawn_interval: float

    # Board info (for normalization)
    board_width: float
    board_height: float

    # Next unscored obstacle (zeros when there is none)
    next_dx: float                    # Obstacle left edge minus drop leading edge
    next_gap_top: float
    next_gap_bottom: float
    next_gap_offset: float            # Gap centre minus drop y

    # Obstacle arrays (fixed size, padded)
    obs_x: np.ndarray                 # (MAX_OBS,) float32
    obs_gap_y: np.ndarray             # (MAX_OBS,) float32
    obs_gap_height: np.ndarray        # (MAX_OBS,) float32
    obs_scored: np.ndarray            # (MAX_OBS,) bool
    obs_mask: np.ndarray              # (MAX_OBS,) bool

    # Optional image
    board_rgb: Optional[np.ndarray] = None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        obs = {
            "running": np.array(int(self.running), dtype=np.int8),
            "score": np.array(self.score, dtype=np.int64),
            "frame": np.array(self.frame, dtype=np.int64),
            "obstacle_count": np.array(self.obstacle_count, dtype=np.int32),

            "drop_y": np.array(self.drop_y, dtype=np.float32),
            "drop_vy": np.array(self.drop_vy, dtype=np.float32),

            "speed": np.array(self.speed, dtype=np.float32),
            "spawn_interval": np.array(self.spawn_interval, dtype=np.float32),

            "board_width": np.array(self.board_width, dtype=np.float32),
            "board_height": np.array(self.board_height, dtype=np.float32),

            "next_dx": np.array(self.next_dx, dtype=np.float32),
            "next_gap_top": np.array(self.next_gap_top, dtype=np.float32),
            "next_gap_bottom": np.array(self.next_gap_bottom, dtype=np.float32),
            "next_gap_offset": np.array(self.next_gap_offset, dtype=np.float32),

            "obs_x": self.obs_x.copy(),
            "obs_gap_y": self.obs_gap_y.copy(),
            "obs_gap_height": self.obs_gap_height.copy(),
            "obs_scored": self.obs_scored.copy(),
            "obs_mask": self.obs_mask.copy(),
        }

        if self.board_rgb is not None:
            obs["board_rgb"] = self.board_rgb

        return obs


class SnapshotBuilder:
    """Builds game state snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_obstacles = config.observation.max_obstacles

        self._board_width = float(config.board.width)
        self._board_height = float(config.board.height)

        # Pre-allocate arrays
        self._obs_x = np.zeros(self._max_obstacles, dtype=np.float32)
        self._obs_gap_y = np.zeros(self._max_obstacles, dtype=np.float32)
        self._obs_gap_height = np.zeros(self._max_obstacles, dtype=np.float32)
        self._obs_scored = np.zeros(self._max_obstacles, dtype=bool)
        self._obs_mask = np.zeros(self._max_obstacles, dtype=bool)

    @property
    def max_obstacles(self) -> int:
        return self._max_obstacles

    def build(
        self,
        game: "CoreGame",
        board_rgb: Optional[np.ndarray] = None
    ) -> GameSnapshot:
        """Build a snapshot from current game state."""
        self._obs_x.fill(0)
        self._obs_gap_y.fill(0)
        self._obs_gap_height.fill(0)
        self._obs_scored.fill(False)
        self._obs_mask.fill(False)

        obstacles = game.obstacles
        count = min(len(obstacles), self._max_obstacles)
        for i in range(count):
            ob = obstacles[i]
            self._obs_x[i] = ob.x
            self._obs_gap_y[i] = ob.gap_y
            self._obs_gap_height[i] = ob.gap_height
            self._obs_scored[i] = ob.scored
            self._obs_mask[i] = True

        drop = game.drop
        if drop is not None:
            drop_y, drop_vy = drop.y, drop.vy
            leading_edge = drop.x - drop.radius
        else:
            drop_y, drop_vy = self._board_height / 2, 0.0
            leading_edge = self._config.drop.x - self._config.drop.radius

        next_dx = next_top = next_bottom = next_offset = 0.0
        for ob in obstacles:
            if not ob.scored:
                next_dx = ob.x - leading_edge
                next_top = ob.gap_y
                next_bottom = ob.gap_bottom
                next_offset = (ob.gap_y + ob.gap_height / 2) - drop_y
                break

        return GameSnapshot(
            running=game.running,
            score=game.score,
            frame=game.frame,
            obstacle_count=len(obstacles),
            drop_y=drop_y,
            drop_vy=drop_vy,
            speed=game.speed,
            spawn_interval=game.spawn_interval,
            board_width=self._board_width,
            board_height=self._board_height,
            next_dx=next_dx,
            next_gap_top=next_top,
            next_gap_bottom=next_bottom,
            next_gap_offset=next_offset,
            obs_x=self._obs_x,
            obs_gap_y=self._obs_gap_y,
            obs_gap_height=self._obs_gap_height,
            obs_scored=self._obs_scored,
            obs_mask=self._obs_mask,
            board_rgb=board_rgb
        )
