"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Play area geometry."""
    width: int                   # Play area width in pixels
    height: int                  # Play area height in pixels
    ground_height: int           # Decorative ground strip (pixels)


@dataclass(frozen=True)
class PhysicsConfig:
    """Per-frame physics constants."""
    gravity: float               # Velocity added each frame
    lift: float                  # Velocity set by an activate action


@dataclass(frozen=True)
class DropConfig:
    """The player-controlled drop."""
    x: float
    radius: float
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class ObstacleConfig:
    """Obstacle pair geometry."""
    width: float
    gap_height: float
    min_gap_margin: int
    spawn_offset: float          # Distance beyond the right edge at spawn
    despawn_margin: float        # Distance past the left edge before removal
    type: str


@dataclass(frozen=True)
class DifficultyConfig:
    """Scroll speed, spawn cadence and their stochastic drift."""
    base_speed: float
    speed_increment: float
    speed_increase_probability: float
    base_spawn_interval: float
    spawn_interval_decrement: float
    min_spawn_interval: float
    interval_decrease_probability: float
    reset_interval_on_start: bool


@dataclass(frozen=True)
class MessagesConfig:
    """Player-facing text templates."""
    score: str
    game_over: str
    tagline: str


@dataclass(frozen=True)
class ColorsConfig:
    """Renderer palette."""
    background_top: Tuple[int, int, int]
    background_bottom: Tuple[int, int, int]
    ground: Tuple[int, int, int]
    obstacle: Tuple[int, int, int]
    blotch: Tuple[int, ...]
    highlight: Tuple[int, ...]
    text: Tuple[int, int, int]


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_obstacles: int
    frame_ms: float
    image_width: int
    image_height: int
    render_style: str


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits."""
    max_frames: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    physics: PhysicsConfig
    drop: DropConfig
    obstacles: ObstacleConfig
    difficulty: DifficultyConfig
    messages: MessagesConfig
    colors: ColorsConfig
    observation: ObservationConfig
    caps: CapsConfig

    @property
    def min_gap_y(self) -> int:
        """Smallest gap top allowed at spawn."""
        return self.obstacles.min_gap_margin

    @property
    def max_gap_y(self) -> int:
        """Largest gap top allowed at spawn."""
        return int(
            self.board.height
            - self.obstacles.min_gap_margin
            - self.obstacles.gap_height
        )


def _parse_color(color_data: List, allow_alpha: bool = False) -> Tuple[int, ...]:
    """Parse RGB (or RGBA) color from YAML."""
    valid_lengths = (3, 4) if allow_alpha else (3,)
    if len(color_data) not in valid_lengths:
        raise ValueError(f"Color must have {' or '.join(map(str, valid_lengths))} values, got {color_data}")
    values = tuple(int(c) for c in color_data)
    for c in values:
        if not 0 <= c <= 255:
            raise ValueError(f"Color channel out of range [0, 255]: {color_data}")
    return values


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.board.width <= 0 or config.board.height <= 0:
        raise ValueError(
            f"Board size must be positive, got {config.board.width}x{config.board.height}"
        )

    if config.drop.radius <= 0:
        raise ValueError(f"drop.radius must be positive, got {config.drop.radius}")

    if config.obstacles.width <= 0 or config.obstacles.gap_height <= 0:
        raise ValueError("obstacles.width and obstacles.gap_height must be positive")

    # The gap plus both margins has to fit on the board
    if config.max_gap_y < config.min_gap_y:
        raise ValueError(
            f"Board height {config.board.height} cannot fit a gap of "
            f"{config.obstacles.gap_height} with margins of {config.obstacles.min_gap_margin}"
        )

    difficulty = config.difficulty
    for name in ("speed_increase_probability", "interval_decrease_probability"):
        p = getattr(difficulty, name)
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"difficulty.{name} must be in [0, 1], got {p}")

    if difficulty.min_spawn_interval > difficulty.base_spawn_interval:
        raise ValueError(
            f"min_spawn_interval ({difficulty.min_spawn_interval}) exceeds "
            f"base_spawn_interval ({difficulty.base_spawn_interval})"
        )

    if config.observation.max_obstacles <= 0:
        raise ValueError("observation.max_obstacles must be positive")

    if config.observation.render_style not in ("solid", "full"):
        raise ValueError(f"render_style must be 'solid' or 'full', got '{config.observation.render_style}'")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"]),
        ground_height=int(board_data.get("ground_height", 26))
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        lift=float(physics_data["lift"])
    )

    drop_data = raw["drop"]
    drop = DropConfig(
        x=float(drop_data["x"]),
        radius=float(drop_data["radius"]),
        color=_parse_color(drop_data["color"])
    )

    obstacle_data = raw["obstacles"]
    obstacles = ObstacleConfig(
        width=float(obstacle_data["width"]),
        gap_height=float(obstacle_data["gap_height"]),
        min_gap_margin=int(obstacle_data["min_gap_margin"]),
        spawn_offset=float(obstacle_data.get("spawn_offset", 10)),
        despawn_margin=float(obstacle_data.get("despawn_margin", 50)),
        type=str(obstacle_data.get("type", "pipe"))
    )

    difficulty_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        base_speed=float(difficulty_data["base_speed"]),
        speed_increment=float(difficulty_data["speed_increment"]),
        speed_increase_probability=float(difficulty_data["speed_increase_probability"]),
        base_spawn_interval=float(difficulty_data["base_spawn_interval"]),
        spawn_interval_decrement=float(difficulty_data["spawn_interval_decrement"]),
        min_spawn_interval=float(difficulty_data["min_spawn_interval"]),
        interval_decrease_probability=float(difficulty_data["interval_decrease_probability"]),
        reset_interval_on_start=bool(difficulty_data.get("reset_interval_on_start", False))
    )

    messages_data = raw.get("messages", {})
    messages = MessagesConfig(
        score=str(messages_data.get("score", "Water delivered: {score}")),
        game_over=str(messages_data.get("game_over", "You delivered water to {score} people.")),
        tagline=str(messages_data.get("tagline", "Real clean water lasts a lifetime."))
    )

    colors_data = raw["colors"]
    colors = ColorsConfig(
        background_top=_parse_color(colors_data["background_top"]),
        background_bottom=_parse_color(colors_data["background_bottom"]),
        ground=_parse_color(colors_data["ground"]),
        obstacle=_parse_color(colors_data["obstacle"]),
        blotch=_parse_color(colors_data.get("blotch", [0, 0, 0, 31]), allow_alpha=True),
        highlight=_parse_color(colors_data.get("highlight", [255, 255, 255, 102]), allow_alpha=True),
        text=_parse_color(colors_data.get("text", [16, 58, 82]))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_obstacles=int(obs_data.get("max_obstacles", 8)),
        frame_ms=float(obs_data.get("frame_ms", 1000.0 / 60.0)),
        image_width=int(obs_data.get("image_width", 240)),
        image_height=int(obs_data.get("image_height", 320)),
        render_style=str(obs_data.get("render_style", "solid"))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_frames=int(caps_data.get("max_frames", 20000))
    )

    config = GameConfig(
        board=board,
        physics=physics,
        drop=drop,
        obstacles=obstacles,
        difficulty=difficulty,
        messages=messages,
        colors=colors,
        observation=observation,
        caps=caps
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
