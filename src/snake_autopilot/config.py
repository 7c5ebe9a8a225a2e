"""Game configuration with JSON round-tripping."""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Named tick intervals in milliseconds (lower is faster).
SPEED_LEVELS: dict[str, int] = {
    "Ultra Slow": 400,
    "Very Slow": 200,
    "Slow": 150,
    "Normal": 100,
    "Fast": 60,
    "Super Speed": 30,
    "Ultra (10x)": 15,
}


@dataclass(frozen=True)
class GameConfig:
    """Board and session settings.

    Supports JSON serialization so headless runs can be reproduced.
    """

    # Board
    board_width: int = 25
    board_height: int = 25
    initial_length: int = 3

    # Scoring
    score_per_food: int = 10
    milestone_every: int = 50

    # Pacing
    tick_rate_ms: int = SPEED_LEVELS["Normal"]

    # Commentary
    commentary_cooldown_seconds: float = 60.0
    comment_history: int = 20

    def __post_init__(self) -> None:
        if self.board_width < 2 or self.board_height < 2:
            raise ValueError("Board dimensions must be at least 2×2.")
        if not 1 <= self.initial_length <= self.board_height - self.board_height // 2:
            raise ValueError(
                "initial_length must fit below the board centre.",
            )
        if self.score_per_food < 1 or self.milestone_every < 1:
            raise ValueError("Scoring values must be positive.")
        if self.tick_rate_ms < 1:
            raise ValueError("tick_rate_ms must be positive.")
        if self.comment_history < 1:
            raise ValueError("comment_history must be at least 1.")

    def with_speed(self, name: str) -> GameConfig:
        """Return a copy ticking at the named speed level."""
        try:
            tick = SPEED_LEVELS[name]
        except KeyError:
            raise ValueError(
                f"Unknown speed level {name!r}. "
                f"Expected one of {list(SPEED_LEVELS)}.",
            ) from None
        return dataclasses.replace(self, tick_rate_ms=tick)

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls(**json.loads(Path(path).read_text()))
