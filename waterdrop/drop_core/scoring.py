"""
Scoring System
==============

Counts cleared obstacle pairs and formats the player-facing score text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from waterdrop.drop_core.config_loader import GameConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    score: int            # Total after the event
    frame: int            # Frame on which the pair was cleared

    def __repr__(self) -> str:
        return f"ScoreEvent(score={self.score}, frame={self.frame})"


class ScoreTracker:
    """
    Tracks the score of the current run.

    One point per obstacle pair cleared. The score only ever increases
    during a run and returns to zero on reset.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._score: int = 0
        self._best: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def best(self) -> int:
        """Highest score reached by this tracker across runs."""
        return self._best

    def apply_clear(self, frame: int) -> ScoreEvent:
        """
        Award a point for a cleared obstacle pair.

        Args:
            frame: Current frame number.

        Returns:
            ScoreEvent describing the new total.
        """
        self._score += 1
        self._best = max(self._best, self._score)
        return ScoreEvent(score=self._score, frame=frame)

    def score_text(self) -> str:
        """Live readout, e.g. "Water delivered: 3"."""
        return self._config.messages.score.format(score=self._score)

    def game_over_text(self) -> str:
        """End-of-run message including the tagline."""
        messages = self._config.messages
        return f"{messages.game_over.format(score=self._score)} {messages.tagline}"

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
