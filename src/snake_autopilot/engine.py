"""Step-based single-snake game with an optional autopilot driver."""

from __future__ import annotations

import enum
import logging

import numpy as np

from snake_autopilot.config import GameConfig
from snake_autopilot.food import FoodSpawner
from snake_autopilot.grid import Cell, CellType, Direction, Grid
from snake_autopilot.navigation import decide
from snake_autopilot.snake import Snake, check_body

logger = logging.getLogger(__name__)


class GameStatus(str, enum.Enum):
    IDLE = "idle"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class GameEvent(str, enum.Enum):
    """Notable things that happened during the last tick."""

    START = "start"
    MILESTONE = "milestone"
    GAME_OVER = "game_over"


class GameEngine:
    """Authoritative game state for one snake.

    The engine owns the grid, snake, and food spawner. Each call to
    :meth:`step` advances the game by one tick and returns the updated
    state dictionary. With the autopilot enabled the direction for every
    tick comes from :func:`snake_autopilot.navigation.decide`; the engine
    still performs its own wall and body collision checks.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
        autopilot: bool = True,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.grid = Grid(
            width=self.config.board_width, height=self.config.board_height,
        )
        self.rng = np.random.default_rng(seed)
        self.autopilot = autopilot
        self.high_score = 0
        self.previous_high_score = 0
        self.reset()

    def reset(self) -> dict:
        """Lay out a fresh board and wait for :meth:`start`.

        The high score carries over.
        """
        self.grid.clear()
        start = Cell(self.grid.width // 2, self.grid.height // 2)
        self.snake = Snake(start, Direction.UP, length=self.config.initial_length)
        for cell in self.snake.body:
            self.grid.set(cell, CellType.SNAKE)

        self.food = FoodSpawner(self.grid, rng=self.rng)
        self.food.spawn()

        self.score = 0
        self.tick = 0
        self.status = GameStatus.IDLE
        self.end_reason: str | None = None
        self.events: list[GameEvent] = []
        self._turned = False
        return self.get_state()

    def start(self) -> dict:
        """Begin play on an idle board, starting over after a game over."""
        if self.status == GameStatus.PLAYING:
            raise ValueError("Game is already running.")
        if self.status == GameStatus.GAME_OVER:
            self.reset()
        self.status = GameStatus.PLAYING
        self.events = [GameEvent.START]
        logger.info(
            "Game started (%dx%d, autopilot=%s).",
            self.grid.width, self.grid.height, self.autopilot,
        )
        return self.get_state()

    @property
    def game_over(self) -> bool:
        return self.status == GameStatus.GAME_OVER

    def set_autopilot(self, enabled: bool) -> None:
        self.autopilot = enabled
        self._turned = False
        logger.info("Switched to %s.", "autopilot" if enabled else "manual")

    def set_direction(self, direction: Direction) -> bool:
        """Turn the snake manually; at most one turn counts per tick.

        Ignored while the autopilot drives, after game over, when a turn was
        already made this tick, or when it would reverse the snake.
        """
        if self.autopilot or self.game_over or self._turned:
            return False
        if not self.snake.set_direction(direction):
            return False
        self._turned = True
        return True

    def step(self) -> dict:
        """Advance the game by one tick.

        Does nothing unless the game is playing. Returns the full game state
        as a serializable dict.
        """
        if self.status != GameStatus.PLAYING:
            return self.get_state()
        self.events = []
        self.tick += 1
        self._turned = False

        if self.autopilot:
            body = check_body(self.snake.snapshot(), self.grid)
            direction = decide(body, self.food.position, self.grid)
            if direction is None:
                self._end("trapped")
                return self.get_state()
            self.snake.direction = direction

        nxt = self.snake.next_head()
        if not self.grid.in_bounds(nxt):
            self._end("wall")
            return self.get_state()

        will_grow = nxt == self.food.position
        # The tail moves away this tick unless the snake grows.
        body_set = set(self.snake.body)
        if not will_grow:
            body_set.discard(self.snake.tail)
        if nxt in body_set:
            self._end("self")
            return self.get_state()

        vacated = self.snake.advance(grow=will_grow)
        if vacated is not None:
            self.grid.set(vacated, CellType.EMPTY)
        else:
            self.food.remove()
        self.grid.set(nxt, CellType.SNAKE)

        if will_grow:
            self.score += self.config.score_per_food
            if self.score % self.config.milestone_every == 0:
                self.events.append(GameEvent.MILESTONE)
            if self.food.spawn() is None:
                self._end("board_full")
        return self.get_state()

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick,
            "score": self.score,
            "high_score": self.high_score,
            "status": self.status.value,
            "end_reason": self.end_reason,
            "autopilot": self.autopilot,
            "events": [e.value for e in self.events],
            "grid": self.grid.to_dict(),
            "snake": self.snake.to_dict(),
            "food": self.food.to_dict(),
        }

    def _end(self, reason: str) -> None:
        """Mark the game as over and record the high score."""
        self.status = GameStatus.GAME_OVER
        self.end_reason = reason
        self.previous_high_score = self.high_score
        self.high_score = max(self.high_score, self.score)
        self.events.append(GameEvent.GAME_OVER)
        logger.info(
            "Game over (%s) at tick %d with score %d.",
            reason, self.tick, self.score,
        )
