"""
Control Loop
============

Frame driver: one physics step then one render per tick, rescheduled only
while a run is active. The host supplies the cadence (a display clock, a
test, or a gym wrapper) by calling tick() whenever ``scheduled`` is True.
"""

from __future__ import annotations

from typing import Callable, Optional

from waterdrop.drop_core.game import CoreGame, StepResult


class FrameLoop:
    """
    Drives a CoreGame frame by frame.

    ``dt`` is computed every tick and exposed, but the physics ignores it:
    the simulation is fixed-timestep per frame.
    """

    def __init__(
        self,
        game: CoreGame,
        render_callback: Optional[Callable[[], None]] = None
    ):
        """
        Initialize loop.

        Args:
            game: The game to drive.
            render_callback: Called after every physics step.
        """
        self._game = game
        self._render_callback = render_callback
        self._scheduled: bool = False
        self._last_time: float = 0.0
        self._dt: float = 0.0
        self._ticks: int = 0

    @property
    def game(self) -> CoreGame:
        return self._game

    @property
    def scheduled(self) -> bool:
        """True if the host should call tick() on its next frame."""
        return self._scheduled

    @property
    def dt(self) -> float:
        """Seconds between the last two ticks."""
        return self._dt

    @property
    def ticks(self) -> int:
        """Ticks processed since the loop was created."""
        return self._ticks

    def start(self, now: float) -> None:
        """
        Schedule ticking from ``now`` (milliseconds).

        Calling this while already scheduled only resets the clock; there is
        never more than one loop per game.
        """
        self._last_time = now
        self._scheduled = True

    def restart(self, now: float) -> None:
        """Start a new run and (re)schedule the loop."""
        self._game.start(now)
        self.start(now)

    def activate(self, now: float) -> None:
        """Forward the player action; schedule the loop if it started a run."""
        if self._game.activate(now):
            self.start(now)

    def tick(self, now: float) -> Optional[StepResult]:
        """
        Process one frame.

        Args:
            now: Current time in milliseconds.

        Returns:
            The step result, or None if the loop is not scheduled.
        """
        if not self._scheduled:
            return None

        self._dt = (now - self._last_time) / 1000.0
        result = self._game.step(now)
        if self._render_callback is not None:
            self._render_callback()
        self._last_time = now
        self._ticks += 1

        self._scheduled = self._game.running
        return result
