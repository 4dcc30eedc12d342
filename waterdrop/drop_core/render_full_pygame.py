"""
Full Pygame Renderer
====================

Pretty renderer using pygame: water gradient, ground strip, rusty pipes with
occasional pollution blotches, the drop with a highlight, the live score and
the game-over overlay. Supports both display mode (human play) and headless
RGB output.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from waterdrop.drop_core.config_loader import GameConfig, get_config


class PygameRenderer:
    """
    Full-featured renderer using pygame.

    Supports:
    - Gradient background and ground strip
    - Pipe pairs with cosmetic blotches (random, never part of game state)
    - Score readout and game-over overlay
    - Screen display for human mode
    - RGB array output for agents
    """

    # Chance per pipe per frame of drawing a blotch
    BLOTCH_CHANCE = 0.02

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            seed: Seed for the cosmetic blotch RNG.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)

        if not pygame.get_init():
            pygame.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        # Fonts
        pygame.font.init()
        self._font = pygame.font.Font(None, 28)
        self._font_large = pygame.font.Font(None, 40)
        self._font_small = pygame.font.Font(None, 22)

        colors = config.colors
        self._bg_top = colors.background_top
        self._bg_bottom = colors.background_bottom
        self._ground_color = colors.ground
        self._pipe_color = colors.obstacle
        self._blotch_color = colors.blotch
        self._highlight_color = colors.highlight
        self._text_color = colors.text
        self._panel_color = (255, 255, 255)

        # Pre-rendered backgrounds keyed by size
        self._bg_cache: Dict[Tuple[int, int], pygame.Surface] = {}

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((width, height))
        self._render_to_surface(surface, render_data, show_ui=False)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        render_data: Dict[str, Any],
        window_width: Optional[int] = None,
        window_height: Optional[int] = None
    ) -> None:
        """
        Render to pygame window.

        Args:
            render_data: Data from CoreGame.get_render_data().
            window_width: Window width. Defaults to the board width.
            window_height: Window height. Defaults to the board height.
        """
        window_width = window_width or render_data["board_width"]
        window_height = window_height or render_data["board_height"]
        if self._screen is None or self._screen_size != (window_width, window_height):
            self._screen = pygame.display.set_mode((window_width, window_height))
            self._screen_size = (window_width, window_height)
            pygame.display.set_caption("Water Drop")

        self.draw(self._screen, render_data)
        pygame.display.flip()

    def draw(self, surface: pygame.Surface, render_data: Dict[str, Any]) -> None:
        """Render the full scene, UI included, onto an existing surface."""
        self._render_to_surface(surface, render_data, show_ui=True)

    def _render_to_surface(
        self,
        surface: pygame.Surface,
        render_data: Dict[str, Any],
        show_ui: bool
    ) -> None:
        """Render game state to a pygame surface."""
        width, height = surface.get_size()

        board_width = render_data["board_width"]
        board_height = render_data["board_height"]
        scale = min(width / board_width, height / board_height)
        offset_x = (width - board_width * scale) / 2
        offset_y = (height - board_height * scale) / 2

        surface.fill((0, 0, 0))
        surface.blit(
            self._background(int(board_width * scale), int(board_height * scale)),
            (int(offset_x), int(offset_y))
        )

        # Ground strip hinting at the village well
        ground_h = render_data["ground_height"] * scale
        pygame.draw.rect(surface, self._ground_color, pygame.Rect(
            int(offset_x), int(offset_y + board_height * scale - ground_h),
            int(board_width * scale), int(ground_h)
        ))

        for ob in render_data["obstacles"]:
            self._draw_obstacle(surface, ob, scale, offset_x, offset_y, board_height)

        drop = render_data.get("drop")
        if drop is not None:
            self._draw_drop(surface, drop, scale, offset_x, offset_y)

        if show_ui:
            if render_data.get("drop") is not None:
                self._draw_score(surface, render_data["score_text"])
            if render_data.get("game_over_message"):
                self._draw_game_over(surface, render_data["game_over_message"])

    def _background(self, width: int, height: int) -> pygame.Surface:
        """Vertical gradient from sky to water."""
        key = (width, height)
        if key not in self._bg_cache:
            bg = pygame.Surface((max(1, width), max(1, height)))
            for y in range(height):
                t = y / max(1, height - 1)
                color = tuple(
                    int(top * (1 - t) + bottom * t)
                    for top, bottom in zip(self._bg_top, self._bg_bottom)
                )
                pygame.draw.line(bg, color, (0, y), (width, y))
            self._bg_cache[key] = bg
        return self._bg_cache[key]

    def _draw_obstacle(
        self,
        surface: pygame.Surface,
        ob: Dict[str, Any],
        scale: float,
        offset_x: float,
        offset_y: float,
        board_height: float
    ) -> None:
        """Draw one pipe pair and, rarely, a pollution blotch."""
        x = int(ob["x"] * scale + offset_x)
        w = int(ob["width"] * scale)
        gap_top = ob["gap_y"]
        gap_bottom = ob["gap_y"] + ob["gap_height"]

        pygame.draw.rect(surface, self._pipe_color, pygame.Rect(
            x, int(offset_y), w, int(gap_top * scale)
        ))
        pygame.draw.rect(surface, self._pipe_color, pygame.Rect(
            x, int(offset_y + gap_bottom * scale), w, int((board_height - gap_bottom) * scale)
        ))

        if self._rng.random() < self.BLOTCH_CHANCE:
            rx, ry = int(10 * scale), int(6 * scale)
            cx = ob["x"] + ob["width"] * 0.6
            cy = min(gap_top, 60)
            blotch = pygame.Surface((rx * 2 + 1, ry * 2 + 1), pygame.SRCALPHA)
            pygame.draw.ellipse(blotch, self._blotch_color, blotch.get_rect())
            surface.blit(blotch, (int(cx * scale + offset_x) - rx, int(cy * scale + offset_y) - ry))

    def _draw_drop(
        self,
        surface: pygame.Surface,
        drop: Dict[str, Any],
        scale: float,
        offset_x: float,
        offset_y: float
    ) -> None:
        """Draw the drop with a small white highlight."""
        cx = int(drop["x"] * scale + offset_x)
        cy = int(drop["y"] * scale + offset_y)
        radius = max(2, int(drop["radius"] * scale))
        pygame.draw.circle(surface, drop["color"], (cx, cy), radius)

        hr = max(1, int(5 * scale))
        highlight = pygame.Surface((hr * 2 + 1, hr * 2 + 1), pygame.SRCALPHA)
        pygame.draw.circle(highlight, self._highlight_color, (hr, hr), hr)
        surface.blit(highlight, (cx - int(4 * scale) - hr, cy - int(6 * scale) - hr))

    def _draw_score(self, surface: pygame.Surface, text: str) -> None:
        """Draw the live score readout in the top-left corner."""
        label = self._font.render(text, True, self._text_color)
        panel = pygame.Surface((label.get_width() + 16, label.get_height() + 10), pygame.SRCALPHA)
        panel.fill((*self._panel_color, 170))
        surface.blit(panel, (10, 10))
        surface.blit(label, (18, 15))

    def _wrap(self, text: str, font: "pygame.font.Font", max_width: int) -> List[str]:
        """Greedy word wrap."""
        lines: List[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}".strip()
            if current and font.size(candidate)[0] > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines

    def _draw_game_over(self, surface: pygame.Surface, message: str) -> None:
        """Draw game over overlay."""
        width, height = surface.get_size()

        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 140))
        surface.blit(overlay, (0, 0))

        box_w = min(width - 40, 380)
        lines = self._wrap(message, self._font, box_w - 40)
        line_h = self._font.get_linesize()
        box_h = 100 + line_h * len(lines)
        box_x = (width - box_w) // 2
        box_y = (height - box_h) // 2

        pygame.draw.rect(surface, self._panel_color, (box_x, box_y, box_w, box_h), border_radius=14)
        pygame.draw.rect(surface, self._ground_color, (box_x, box_y, box_w, box_h), 3, border_radius=14)

        title = self._font_large.render("GAME OVER", True, self._text_color)
        surface.blit(title, (box_x + (box_w - title.get_width()) // 2, box_y + 18))

        y = box_y + 60
        for line in lines:
            text = self._font.render(line, True, self._text_color)
            surface.blit(text, (box_x + (box_w - text.get_width()) // 2, y))
            y += line_h

        hint = self._font_small.render("Click, Space or R to play again", True, self._ground_color)
        surface.blit(hint, (box_x + (box_w - hint.get_width()) // 2, y + 8))

    def handle_events(self) -> bool:
        """Handle pygame events. Returns False if quit requested."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
        return True

    def close(self) -> None:
        """Clean up pygame resources."""
        self._bg_cache.clear()
        if self._screen is not None:
            self._screen = None
