"""
Solid Renderer
==============

Fast numpy-based renderer: gradient sky, ground strip, solid pipe pairs and
the drop as a filled circle with a soft highlight. Board coordinates are
screen coordinates (y grows downward), so no flipping is needed.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence
import numpy as np

from waterdrop.drop_core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the game board to an RGB array without pygame.

    Used for image observations and rgb_array rendering.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        colors = config.colors
        self._bg_top = np.array(colors.background_top, dtype=np.float32)
        self._bg_bottom = np.array(colors.background_bottom, dtype=np.float32)
        self._ground_color = np.array(colors.ground, dtype=np.uint8)
        self._obstacle_color = np.array(colors.obstacle, dtype=np.uint8)
        self._highlight = colors.highlight

        # Cached background per output size
        self._bg_cache: Dict[tuple, np.ndarray] = {}

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        board_width = render_data["board_width"]
        board_height = render_data["board_height"]
        scale = min(width / board_width, height / board_height)

        # Offset to center the board in the image
        offset_x = (width - board_width * scale) / 2
        offset_y = (height - board_height * scale) / 2

        img = self._background(width, height).copy()

        # Ground strip
        ground_top = int(offset_y + (board_height - render_data["ground_height"]) * scale)
        ground_bottom = int(offset_y + board_height * scale)
        img[max(0, ground_top):ground_bottom, int(offset_x):int(offset_x + board_width * scale)] = self._ground_color

        # Pipe pairs
        for ob in render_data["obstacles"]:
            gap_bottom = ob["gap_y"] + ob["gap_height"]
            self._fill_rect(img, ob["x"], 0, ob["width"], ob["gap_y"], scale, offset_x, offset_y)
            self._fill_rect(
                img, ob["x"], gap_bottom, ob["width"], board_height - gap_bottom,
                scale, offset_x, offset_y
            )

        # Drop
        drop = render_data.get("drop")
        if drop is not None:
            cx = int(drop["x"] * scale + offset_x)
            cy = int(drop["y"] * scale + offset_y)
            radius = max(1, int(drop["radius"] * scale))
            self._draw_circle(img, cx, cy, radius, np.array(drop["color"], dtype=np.uint8))
            self._blend_circle(
                img,
                int((drop["x"] - 4) * scale + offset_x),
                int((drop["y"] - 6) * scale + offset_y),
                max(1, int(5 * scale)),
                self._highlight
            )

        return img

    def _background(self, width: int, height: int) -> np.ndarray:
        """Vertical gradient from sky to water."""
        key = (width, height)
        if key not in self._bg_cache:
            t = np.linspace(0.0, 1.0, height, dtype=np.float32)[:, None]
            rows = self._bg_top * (1 - t) + self._bg_bottom * t
            bg = np.repeat(rows[:, None, :], width, axis=1)
            self._bg_cache[key] = bg.astype(np.uint8)
        return self._bg_cache[key]

    def _fill_rect(
        self,
        img: np.ndarray,
        x: float,
        y: float,
        w: float,
        h: float,
        scale: float,
        offset_x: float,
        offset_y: float
    ) -> None:
        """Fill a board-space rectangle, clipped to the image."""
        height, width = img.shape[:2]
        x0 = max(0, int(x * scale + offset_x))
        x1 = min(width, int((x + w) * scale + offset_x))
        y0 = max(0, int(y * scale + offset_y))
        y1 = min(height, int((y + h) * scale + offset_y))
        if x0 >= x1 or y0 >= y1:
            return
        img[y0:y1, x0:x1] = self._obstacle_color

    def _circle_mask(self, img: np.ndarray, cx: int, cy: int, radius: int):
        """Bounding box slices and inside-circle mask, or None if off-image."""
        height, width = img.shape[:2]

        y_min = max(0, cy - radius)
        y_max = min(height, cy + radius + 1)
        x_min = max(0, cx - radius)
        x_max = min(width, cx + radius + 1)

        if y_min >= y_max or x_min >= x_max:
            return None

        yy, xx = np.meshgrid(
            np.arange(y_min, y_max), np.arange(x_min, x_max), indexing='ij'
        )
        mask = (xx - cx)**2 + (yy - cy)**2 <= radius**2
        return (slice(y_min, y_max), slice(x_min, x_max)), mask

    def _draw_circle(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        color: np.ndarray
    ) -> None:
        """Draw a filled circle using numpy."""
        found = self._circle_mask(img, cx, cy, radius)
        if found is None:
            return
        region, mask = found
        img[region][mask] = color

    def _blend_circle(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        rgba: Sequence[int]
    ) -> None:
        """Alpha-blend a filled circle."""
        found = self._circle_mask(img, cx, cy, radius)
        if found is None:
            return
        region, mask = found
        alpha = (rgba[3] if len(rgba) > 3 else 255) / 255.0
        color = np.array(rgba[:3], dtype=np.float32)
        patch = img[region]
        blended = patch[mask].astype(np.float32) * (1 - alpha) + color * alpha
        patch[mask] = blended.astype(np.uint8)

    def render_to_screen(self, render_data: Dict[str, Any]) -> None:
        """
        Render to screen (no-op for solid renderer).

        Use PygameRenderer for screen display.
        """
        pass

    def close(self) -> None:
        """Clean up resources."""
        self._bg_cache.clear()
