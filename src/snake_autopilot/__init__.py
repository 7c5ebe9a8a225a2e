"""Snake Autopilot: tail-safe navigation engine and game core."""

from snake_autopilot.config import SPEED_LEVELS, GameConfig
from snake_autopilot.engine import GameEngine, GameEvent, GameStatus
from snake_autopilot.grid import Cell, Direction, Grid
from snake_autopilot.navigation import Decision, Tier, decide, plan
from snake_autopilot.snake import Snake, check_body

__all__ = [
    "SPEED_LEVELS",
    "Cell",
    "Decision",
    "Direction",
    "GameConfig",
    "GameEngine",
    "GameEvent",
    "GameStatus",
    "Grid",
    "Snake",
    "Tier",
    "check_body",
    "decide",
    "plan",
]
