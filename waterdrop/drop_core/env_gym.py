"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Water Drop game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from waterdrop.drop_core.config_loader import GameConfig, load_config
from waterdrop.drop_core.game import CoreGame
from waterdrop.drop_core.state_snapshot import GameSnapshot


class DropEnv(gym.Env):
    """
    Water Drop as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = let the drop fall, 1 = activate (lift impulse).

    Observation Space:
        Dict containing structured game state and optional RGB image.

    Reward:
        Always 0.0. Use info["delta_score"] to build a reward.

    Time:
        A simulated clock advances observation.frame_ms per step, so one
        env step is exactly one game frame.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    NOOP = 0
    ACTIVATE = 1

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        render_style: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            render_style: "solid" for numpy rendering, "full" for pygame.
                Uses the configured style if None.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            debug: If True, prints per-step diagnostics.
        """
        super().__init__()

        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._render_style = render_style or self._config.observation.render_style
        self._image_obs = image_obs
        self._debug = debug

        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height

        self._game = CoreGame(config=self._config)
        self._clock_ms: float = 0.0
        self._frame_ms = self._config.observation.frame_ms
        self._max_frames = self._config.caps.max_frames

        # Initialize renderer (lazy)
        self._renderer = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] DropEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Frame: {self._frame_ms:.3f} ms, max frames {self._max_frames}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obs = self._config.observation.max_obstacles
        board = self._config.board
        span = float(max(board.width, board.height)) * 4

        obs_dict = {
            "running": spaces.Discrete(2),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "frame": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "obstacle_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),

            "drop_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "drop_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),

            "speed": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "spawn_interval": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),

            "board_width": spaces.Box(low=0, high=span, shape=(), dtype=np.float32),
            "board_height": spaces.Box(low=0, high=span, shape=(), dtype=np.float32),

            "next_dx": spaces.Box(low=-span, high=span, shape=(), dtype=np.float32),
            "next_gap_top": spaces.Box(low=0, high=board.height, shape=(), dtype=np.float32),
            "next_gap_bottom": spaces.Box(low=0, high=board.height, shape=(), dtype=np.float32),
            "next_gap_offset": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),

            "obs_x": spaces.Box(low=-span, high=span, shape=(max_obs,), dtype=np.float32),
            "obs_gap_y": spaces.Box(low=0, high=board.height, shape=(max_obs,), dtype=np.float32),
            "obs_gap_height": spaces.Box(low=0, high=board.height, shape=(max_obs,), dtype=np.float32),
            "obs_scored": spaces.MultiBinary(max_obs),
            "obs_mask": spaces.MultiBinary(max_obs),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a new run.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._clock_ms = 0.0
        snapshot = self._game.start(self._clock_ms, seed=seed, reset_interval=True)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: 0 (no-op) or 1 (activate).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = action.item()
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action!r}, expected 0 or 1")

        if action == self.ACTIVATE and self._game.running:
            self._game.activate(self._clock_ms)

        self._clock_ms += self._frame_ms
        result = self._game.step(self._clock_ms)

        obs = self._snapshot_to_obs(self._game.snapshot())
        reward = 0.0
        terminated = not self._game.running
        truncated = not terminated and self._game.frame >= self._max_frames

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["spawned"] = result.spawned

        if self._debug:
            print(f"[DEBUG] Step: action={action}, y={obs['drop_y']:.1f}, "
                  f"vy={obs['drop_vy']:.2f}, score={info['score']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()

        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            self._init_renderer()

        render_data = self._game.get_render_data()
        return self._renderer.render(
            render_data,
            self._img_width,
            self._img_height
        )

    def _init_renderer(self) -> None:
        """Initialize renderer based on style."""
        if self._render_style == "full" or self.render_mode == "human":
            from waterdrop.drop_core.render_full_pygame import PygameRenderer
            self._renderer = PygameRenderer(self._config)
        else:
            from waterdrop.drop_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            if self._renderer is None:
                self._init_renderer()

            render_data = self._game.get_render_data()
            self._renderer.render_to_screen(render_data)
            if not self._renderer.handle_events():
                self.close()
            return None

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
