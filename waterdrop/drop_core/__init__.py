"""
Drop Core - The game simulation.

This module provides the fixed-timestep simulation, the frame loop, the
Gymnasium environment wrapper and the renderers.

Main exports:
- CoreGame: Simulation state, physics step and run lifecycle
- FrameLoop: Frame driver (step then render, while running)
- DropEnv: Gymnasium environment for agents
- ObstacleGenerator / Obstacle: Pipe pair creation
- circle_intersects_rect: Circle vs rectangle collision test
- GameConfig: Configuration loaded from game_config.yaml
"""

from waterdrop.drop_core.config_loader import GameConfig, load_config, get_config
from waterdrop.drop_core.geometry import circle_intersects_rect
from waterdrop.drop_core.obstacle_generator import Obstacle, ObstacleGenerator
from waterdrop.drop_core.scoring import ScoreTracker, ScoreEvent
from waterdrop.drop_core.rules import GameRules, TerminationResult
from waterdrop.drop_core.game import CoreGame, Drop, StepResult
from waterdrop.drop_core.control_loop import FrameLoop
from waterdrop.drop_core.env_gym import DropEnv

__all__ = [
    "GameConfig",
    "load_config",
    "get_config",
    "circle_intersects_rect",
    "Obstacle",
    "ObstacleGenerator",
    "ScoreTracker",
    "ScoreEvent",
    "GameRules",
    "TerminationResult",
    "CoreGame",
    "Drop",
    "StepResult",
    "FrameLoop",
    "DropEnv",
]
