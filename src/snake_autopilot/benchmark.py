"""Headless autopilot runs and throughput measurement."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from snake_autopilot.config import GameConfig
from snake_autopilot.engine import GameEngine

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Outcome of one headless autopilot game."""

    seed: int
    score: int
    length: int
    ticks: int
    end_reason: str

    def summary(self) -> str:
        return (
            f"seed={self.seed} score={self.score} length={self.length} "
            f"ticks={self.ticks} end={self.end_reason}"
        )


def play_game(
    config: GameConfig | None = None,
    *,
    seed: int = 0,
    max_ticks: int = 10_000,
) -> GameResult:
    """Let the autopilot play one game until it ends or *max_ticks* pass."""
    engine = GameEngine(config, seed=seed, autopilot=True)
    engine.start()
    while not engine.game_over and engine.tick < max_ticks:
        engine.step()
    return GameResult(
        seed=seed,
        score=engine.score,
        length=len(engine.snake.body),
        ticks=engine.tick,
        end_reason=engine.end_reason or "max_ticks",
    )


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    total_games: int
    total_ticks: int
    mean_score: float
    wall_time_seconds: float
    games_per_second: float
    decisions_per_second: float

    def summary(self) -> str:
        return (
            f"Benchmark: {self.total_games} games, {self.total_ticks} "
            f"decisions in {self.wall_time_seconds:.2f}s | "
            f"{self.games_per_second:.1f} games/s, "
            f"{self.decisions_per_second:.1f} decisions/s, "
            f"mean score {self.mean_score:.1f}"
        )


def benchmark_throughput(
    *,
    num_games: int = 10,
    board_width: int = 25,
    board_height: int = 25,
    max_ticks: int = 2_000,
    seed: int = 42,
) -> BenchmarkResult:
    """Measure how fast the autopilot plays complete games."""
    if num_games < 1:
        raise ValueError("num_games must be at least 1.")
    config = GameConfig(board_width=board_width, board_height=board_height)
    rng = np.random.default_rng(seed)

    results: list[GameResult] = []
    start = time.perf_counter()
    for _ in range(num_games):
        results.append(
            play_game(config, seed=int(rng.integers(2**31)), max_ticks=max_ticks),
        )
    elapsed = time.perf_counter() - start

    total_ticks = sum(r.ticks for r in results)
    result = BenchmarkResult(
        total_games=num_games,
        total_ticks=total_ticks,
        mean_score=float(np.mean([r.score for r in results])),
        wall_time_seconds=elapsed,
        games_per_second=num_games / max(elapsed, 1e-9),
        decisions_per_second=total_ticks / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
