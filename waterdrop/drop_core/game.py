"""
Core Game
=========

Simulation state, the per-frame physics and rules step, and the run lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from waterdrop.drop_core.config_loader import GameConfig, get_config
from waterdrop.drop_core.obstacle_generator import Obstacle, ObstacleGenerator
from waterdrop.drop_core.rules import GameRules
from waterdrop.drop_core.scoring import ScoreEvent, ScoreTracker
from waterdrop.drop_core.state_snapshot import GameSnapshot, SnapshotBuilder


ScoreCallback = Callable[[int, str], None]
GameOverCallback = Callable[[int, str], None]


@dataclass
class Drop:
    """The player-controlled circle. Only y and vy change during a run."""
    x: float
    y: float
    radius: float
    vy: float
    color: Tuple[int, int, int]


@dataclass
class StepResult:
    """Result of a single frame."""
    frame: int
    delta_score: int
    spawned: bool
    terminated: bool
    termination_reason: str
    score_events: List[ScoreEvent]


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - The drop and its per-frame integration
    - Obstacle spawning, scrolling and pruning
    - Difficulty drift
    - Scoring
    - Collision and boundary termination
    - State snapshots and the render contract

    One step = one frame. Physics is fixed-timestep: every call adds gravity
    and velocity once regardless of wall time. ``now`` (milliseconds) is only
    used for the spawn timer.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        on_score_change: Optional[ScoreCallback] = None,
        on_game_over: Optional[GameOverCallback] = None
    ):
        """
        Initialize game. No run is active until start() is called.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            on_score_change: Called with (score, score_text) on start and
                every time the score increments.
            on_game_over: Called with (final_score, message) when a run ends.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self.on_score_change = on_score_change
        self.on_game_over = on_game_over

        # Subsystems
        self._generator = ObstacleGenerator(config, seed)
        self._scorer = ScoreTracker(config)
        self._rules = GameRules(config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Simulation state
        self._drop: Optional[Drop] = None
        self._obstacles: List[Obstacle] = []
        self._running: bool = False
        self._last_spawn: float = 0.0
        self._frame: int = 0
        self._runs: int = 0
        self._termination_reason: str = ""

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def drop(self) -> Optional[Drop]:
        """The drop, or None before the first run."""
        return self._drop

    @property
    def obstacles(self) -> Tuple[Obstacle, ...]:
        """Active obstacles in spawn (left-to-right) order."""
        return tuple(self._obstacles)

    @property
    def running(self) -> bool:
        """True while a run is in progress."""
        return self._running

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def best_score(self) -> int:
        return self._scorer.best

    @property
    def speed(self) -> float:
        """Current obstacle speed (pixels per frame)."""
        return self._rules.difficulty.speed

    @property
    def spawn_interval(self) -> float:
        """Current spawn interval (milliseconds)."""
        return self._rules.difficulty.spawn_interval

    @property
    def last_spawn(self) -> float:
        return self._last_spawn

    @property
    def frame(self) -> int:
        """Frames simulated in the current run."""
        return self._frame

    @property
    def runs(self) -> int:
        """Number of runs started on this instance."""
        return self._runs

    @property
    def termination_reason(self) -> str:
        """Reason the last run ended, or empty string."""
        return self._termination_reason

    @property
    def score_text(self) -> str:
        """Live score readout."""
        return self._scorer.score_text()

    @property
    def game_over_message(self) -> Optional[str]:
        """End-of-run message, or None while running or before the first run."""
        if self._running or self._drop is None:
            return None
        return self._scorer.game_over_text()

    def start(
        self,
        now: float,
        seed: Optional[int] = None,
        reset_interval: bool = False
    ) -> GameSnapshot:
        """
        Start a new run, or restart from any state.

        Args:
            now: Current time in milliseconds.
            seed: New random seed. Keeps the current RNG stream if None.
            reset_interval: Also restore the base spawn interval, so a seeded
                start replays the same run regardless of earlier runs.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed
        self._generator.reset(seed)

        drop_cfg = self._config.drop
        self._drop = Drop(
            x=drop_cfg.x,
            y=self._config.board.height / 2,
            radius=drop_cfg.radius,
            vy=0.0,
            color=drop_cfg.color
        )
        self._obstacles = []
        self._scorer.reset()
        self._rules.reset(reset_interval)
        self._last_spawn = now
        self._frame = 0
        self._termination_reason = ""
        self._running = True
        self._runs += 1

        self._notify_score()
        return self._build_snapshot()

    def activate(self, now: float) -> bool:
        """
        Handle the single player action.

        Starts a run when idle; otherwise sets the drop's velocity to the
        lift constant. Obstacles and score are never touched here.

        Args:
            now: Current time in milliseconds.

        Returns:
            True if a new run was started.
        """
        if not self._running:
            self.start(now)
            return True
        self._drop.vy = self._config.physics.lift
        return False

    def step(self, now: float) -> StepResult:
        """
        Advance the simulation by one frame.

        Does nothing while no run is active; the result then carries an
        empty termination reason.

        Args:
            now: Current time in milliseconds.

        Returns:
            StepResult describing what happened this frame.
        """
        if not self._running:
            return StepResult(
                frame=self._frame,
                delta_score=0,
                spawned=False,
                terminated=False,
                termination_reason="",
                score_events=[]
            )

        self._frame += 1
        drop = self._drop
        physics = self._config.physics
        difficulty = self._rules.difficulty

        # Integrate
        drop.vy += physics.gravity
        drop.y += drop.vy

        # Spawn gate (the new pair joins the list after this frame's scroll)
        fresh: Optional[Obstacle] = None
        if difficulty.should_spawn(now, self._last_spawn):
            fresh = self._generator.spawn(self._config.board.height)
            self._last_spawn = now
            difficulty.apply_drift(self._generator)

        # Scroll and score
        events: List[ScoreEvent] = []
        speed = difficulty.speed
        leading_edge = drop.x - drop.radius
        for obstacle in self._obstacles:
            obstacle.x -= speed
            if not obstacle.scored and obstacle.trailing_edge < leading_edge:
                obstacle.scored = True
                events.append(self._scorer.apply_clear(self._frame))
                self._notify_score()

        # Prune pairs that are fully off-screen
        limit = -self._config.obstacles.despawn_margin
        self._obstacles = [ob for ob in self._obstacles if ob.trailing_edge >= limit]

        if fresh is not None:
            self._obstacles.append(fresh)

        result = self._rules.termination.check_termination(drop, self._obstacles)
        if result.terminated:
            self._end_run(result.reason)

        return StepResult(
            frame=self._frame,
            delta_score=len(events),
            spawned=fresh is not None,
            terminated=result.terminated,
            termination_reason=result.reason,
            score_events=events
        )

    def stop(self, reason: str = "stopped") -> None:
        """End the current run immediately (no-op while idle)."""
        if self._running:
            self._end_run(reason)

    def _end_run(self, reason: str) -> None:
        """Running -> GameOver. Obstacles and score stay for the final frame."""
        self._running = False
        self._termination_reason = reason
        if self.on_game_over is not None:
            self.on_game_over(self._scorer.score, self._scorer.game_over_text())

    def _notify_score(self) -> None:
        if self.on_score_change is not None:
            self.on_score_change(self._scorer.score, self._scorer.score_text())

    def _build_snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(self)

    def snapshot(self) -> GameSnapshot:
        """Current game state snapshot."""
        return self._build_snapshot()

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "frame": self._frame,
            "speed": self.speed,
            "spawn_interval": self.spawn_interval,
            "obstacle_count": len(self._obstacles),
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with board size, drop, obstacles and UI text. Renderers
            need nothing else.
        """
        drop_data = None
        if self._drop is not None:
            drop_data = {
                "x": self._drop.x,
                "y": self._drop.y,
                "radius": self._drop.radius,
                "color": self._drop.color,
            }

        obstacles_data = [
            {
                "x": ob.x,
                "width": ob.width,
                "gap_y": ob.gap_y,
                "gap_height": ob.gap_height,
                "scored": ob.scored,
                "type": ob.type,
            }
            for ob in self._obstacles
        ]

        return {
            "board_width": self._config.board.width,
            "board_height": self._config.board.height,
            "ground_height": self._config.board.ground_height,
            "drop": drop_data,
            "obstacles": obstacles_data,
            "running": self._running,
            "score": self._scorer.score,
            "score_text": self.score_text,
            "game_over_message": self.game_over_message,
        }
