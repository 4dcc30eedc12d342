"""
Human Play Mode
================

Play Water Drop in a pygame window.

Controls:
    - Click/Space: Float upward (starts a new run when the game is over)
    - R: Restart
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT] [--fps FPS]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from waterdrop.drop_core.config_loader import load_config, GameConfig
from waterdrop.drop_core.control_loop import FrameLoop
from waterdrop.drop_core.game import CoreGame


class HumanPlayer:
    """
    Interactive host: owns the window, maps input to the game's single
    action and drives the frame loop at the display's cadence.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        window_width: Optional[int] = None,
        window_height: Optional[int] = None,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._window_width = window_width or config.board.width
        self._window_height = window_height or config.board.height
        self._target_fps = target_fps

        pygame.init()
        self._screen = pygame.display.set_mode((self._window_width, self._window_height))
        pygame.display.set_caption("Water Drop")
        self._clock = pygame.time.Clock()

        # Imported here so the renderer's pygame init happens after ours
        from waterdrop.drop_core.render_full_pygame import PygameRenderer
        self._renderer = PygameRenderer(config, seed=seed)

        self._game = CoreGame(
            config=config,
            seed=seed,
            on_score_change=self._on_score_change,
            on_game_over=self._on_game_over
        )
        self._loop = FrameLoop(self._game, render_callback=self._render)

        self._running = True

    def run(self) -> int:
        """Run the window loop. Returns the best score of the session."""
        print("=== Water Drop ===")
        print("Click or Space to float upward")
        print("R to restart, ESC to quit")
        print()

        # The first run starts on load
        self._restart()

        while self._running:
            self._handle_events()

            if self._loop.scheduled:
                self._loop.tick(pygame.time.get_ticks())
            else:
                # Idle: keep showing the final frame and overlay
                self._render()

            pygame.display.flip()
            self._clock.tick(self._target_fps)

        self._renderer.close()
        pygame.quit()
        return self._game.best_score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()
                elif event.key == pygame.K_SPACE:
                    self._activate()

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self._activate()

    def _activate(self) -> None:
        """Lift the drop, or start a new run when idle."""
        if not self._game.running:
            print("\n=== New Run ===\n")
        self._loop.activate(pygame.time.get_ticks())

    def _restart(self) -> None:
        """Restart the game from any state."""
        self._loop.restart(pygame.time.get_ticks())
        print("\n=== Game Restarted ===\n")

    def _on_score_change(self, score: int, text: str) -> None:
        if score > 0:
            print(f"  {text}")

    def _on_game_over(self, score: int, message: str) -> None:
        print(f"\nGAME OVER ({self._game.termination_reason}) - {message}")

    def _render(self) -> None:
        """Render the game."""
        self._renderer.draw(self._screen, self._game.get_render_data())


def main():
    parser = argparse.ArgumentParser(description="Play Water Drop interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=None, help="Window width (default: board width)")
    parser.add_argument("--height", type=int, default=None, help="Window height (default: board height)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")

    args = parser.parse_args()

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps
        )
        best = player.run()
        print(f"\nBest Score: {best}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
