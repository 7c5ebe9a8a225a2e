"""In-memory game registry, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from snake_autopilot.commentary import (
    CommentaryEvent,
    CommentaryFeed,
    Commentator,
    CommentKind,
    TextGenerator,
)
from snake_autopilot.config import GameConfig
from snake_autopilot.engine import GameEngine, GameEvent
from snake_autopilot.grid import Direction
from snake_autopilot.server.models import GameStatus, GameSummary

logger = logging.getLogger(__name__)

_MAX_FINISHED_GAMES = 100

_END_MESSAGES: dict[str, tuple[str, CommentKind]] = {
    "trapped": ("Auto-Pilot trapped!", CommentKind.FAILURE),
    "wall": ("Hit the wall!", CommentKind.FAILURE),
    "self": ("Ouch! Self collision.", CommentKind.FAILURE),
    "board_full": ("Board cleared!", CommentKind.SUCCESS),
}


@dataclass
class GameInstance:
    """All state for a single hosted game."""

    game_id: str
    engine: GameEngine
    feed: CommentaryFeed
    status: GameStatus = GameStatus.WAITING
    connections: list[WebSocket] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    _task: asyncio.Task | None = field(default=None, repr=False)
    _comment_tasks: set[asyncio.Task] = field(default_factory=set, repr=False)

    @property
    def tick_rate_ms(self) -> int:
        return self.engine.config.tick_rate_ms

    def summary(self) -> GameSummary:
        return GameSummary(
            game_id=self.game_id,
            status=self.status,
            autopilot=self.engine.autopilot,
            score=self.engine.score,
            high_score=self.engine.high_score,
            tick_rate_ms=self.tick_rate_ms,
        )

    def snapshot(self) -> dict:
        """Engine state plus hosting metadata and recent comments."""
        state = self.engine.get_state()
        state["game_id"] = self.game_id
        state["game_status"] = self.status.value
        state["comments"] = self.feed.to_list()
        return state


def _mode_name(autopilot: bool) -> str:
    return "Auto-Pilot" if autopilot else "Manual"


class GameManager:
    """Central registry managing all hosted games."""

    def __init__(
        self,
        generate: TextGenerator | None = None,
        base_config: GameConfig | None = None,
        max_finished_games: int = _MAX_FINISHED_GAMES,
    ) -> None:
        self._games: dict[str, GameInstance] = {}
        self._max_finished_games = max_finished_games
        self._base_config = base_config if base_config is not None else GameConfig()
        self.commentator = Commentator(
            generate,
            cooldown_seconds=self._base_config.commentary_cooldown_seconds,
        )

    def create_game(
        self,
        board_width: int = 25,
        board_height: int = 25,
        initial_length: int = 3,
        autopilot: bool = True,
        speed: str | None = None,
        tick_rate_ms: int | None = None,
        seed: int | None = None,
    ) -> GameInstance:
        """Create a game in the waiting state and return the instance."""
        config = dataclasses.replace(
            self._base_config,
            board_width=board_width,
            board_height=board_height,
            initial_length=initial_length,
        )
        if speed is not None:
            config = config.with_speed(speed)
        if tick_rate_ms is not None:
            config = dataclasses.replace(config, tick_rate_ms=tick_rate_ms)

        game_id = uuid.uuid4().hex[:12]
        instance = GameInstance(
            game_id=game_id,
            engine=GameEngine(config, seed=seed, autopilot=autopilot),
            feed=CommentaryFeed(maxlen=config.comment_history),
        )
        self._games[game_id] = instance
        logger.info(
            "Game %s created (%dx%d, %s).",
            game_id, board_width, board_height, _mode_name(autopilot),
        )
        return instance

    def get_game(self, game_id: str) -> GameInstance | None:
        return self._games.get(game_id)

    def _require(self, game_id: str) -> GameInstance:
        game = self._games.get(game_id)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        return game

    def list_games(self) -> list[GameSummary]:
        """Return summaries of games that have not finished."""
        return [
            g.summary() for g in self._games.values()
            if g.status != GameStatus.FINISHED
        ]

    def start_game(self, game_id: str) -> GameInstance:
        """Start the tick loop for a waiting game."""
        game = self._require(game_id)
        if game.status != GameStatus.WAITING:
            raise ValueError("Game is not in waiting state.")
        game.engine.start()
        game.status = GameStatus.ACTIVE
        game.feed.add(f"Game Started. Mode: {_mode_name(game.engine.autopilot)}")
        self._schedule_commentary(game, CommentaryEvent.START)
        game._task = asyncio.create_task(self._tick_loop(game))
        logger.info("Game %s started.", game_id)
        return game

    async def stop_game(self, game_id: str) -> GameInstance:
        """Stop a game's tick loop and mark it finished."""
        game = self._require(game_id)
        task = game._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._mark_finished(game)
        await self._close_connections(game)
        self._prune_finished_games()
        return game

    def set_direction(self, game_id: str, direction: Direction) -> bool:
        """Queue a manual direction; rejected while the autopilot drives."""
        game = self._require(game_id)
        if game.engine.autopilot:
            raise ValueError("Manual directions are disabled in autopilot mode.")
        return game.engine.set_direction(direction)

    def set_autopilot(self, game_id: str, enabled: bool) -> GameInstance:
        game = self._require(game_id)
        game.engine.set_autopilot(enabled)
        game.feed.add(f"Switched to {_mode_name(enabled)}")
        return game

    async def _tick_loop(self, game: GameInstance) -> None:
        """Run the game tick loop, broadcasting state each tick."""
        tick_interval = game.tick_rate_ms / 1000.0
        try:
            while game.status == GameStatus.ACTIVE:
                await asyncio.sleep(tick_interval)
                async with game.lock:
                    game.engine.step()
                    self._handle_events(game)
                    if game.engine.game_over:
                        self._mark_finished(game)
                    state = game.snapshot()
                await self._broadcast(game, state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for game %s.", game.game_id)
        except Exception:
            logger.exception("Tick loop error in game %s.", game.game_id)
            self._mark_finished(game)
        finally:
            if game.status == GameStatus.FINISHED:
                await self._close_connections(game)
                self._prune_finished_games()

    def _handle_events(self, game: GameInstance) -> None:
        engine = game.engine
        for event in engine.events:
            if event == GameEvent.MILESTONE:
                self._schedule_commentary(game, CommentaryEvent.MILESTONE)
            elif event == GameEvent.GAME_OVER:
                text, kind = _END_MESSAGES.get(
                    engine.end_reason or "", ("Game over.", CommentKind.FAILURE),
                )
                game.feed.add(text, kind)
                self._schedule_commentary(
                    game, CommentaryEvent.GAME_OVER,
                    high_score=engine.previous_high_score,
                )

    def _schedule_commentary(
        self,
        game: GameInstance,
        event: CommentaryEvent,
        high_score: int | None = None,
    ) -> None:
        """Fetch commentary in the background so ticks never wait on it.

        *high_score* defaults to the engine's current high score.
        """
        if not self.commentator.available:
            return
        if high_score is None:
            high_score = game.engine.high_score
        task = asyncio.create_task(
            self._comment(game, event, game.engine.score, high_score),
        )
        game._comment_tasks.add(task)
        task.add_done_callback(game._comment_tasks.discard)

    def _mark_finished(self, game: GameInstance) -> None:
        """Transition a game to finished exactly once."""
        if game.status != GameStatus.FINISHED:
            game.status = GameStatus.FINISHED
            game.finished_at = time.monotonic()

    def _prune_finished_games(self) -> None:
        """Drop the oldest finished games beyond the retention limit."""
        finished = [
            g for g in self._games.values() if g.status == GameStatus.FINISHED
        ]
        overflow = len(finished) - self._max_finished_games
        if overflow <= 0:
            return
        finished.sort(
            key=lambda g: g.finished_at if g.finished_at is not None else g.created_at,
        )
        for stale in finished[:overflow]:
            self._games.pop(stale.game_id, None)
        logger.info(
            "Pruned %d finished games (retaining up to %d).",
            overflow, self._max_finished_games,
        )

    async def _comment(
        self,
        game: GameInstance,
        event: CommentaryEvent,
        score: int,
        high_score: int,
    ) -> None:
        text = await self.commentator.comment(event, score, high_score)
        game.feed.add(text, CommentKind.AI)

    async def _close_connections(self, game: GameInstance) -> None:
        """Close any live sockets for a finished game."""
        for ws in list(game.connections):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Game finished.")
            except Exception:
                logger.warning("Failed closing socket in game %s.", game.game_id)
        game.connections.clear()

    async def _broadcast(self, game: GameInstance, state: dict) -> None:
        """Send game state to every connected client."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []
        # Snapshot: disconnect handlers may mutate the live list meanwhile.
        for ws in list(game.connections):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            if ws in game.connections:
                game.connections.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running tick loops and pending commentary."""
        tasks: list[asyncio.Task] = []
        for game in self._games.values():
            if game._task and not game._task.done():
                tasks.append(game._task)
            tasks.extend(t for t in game._comment_tasks if not t.done())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("GameManager cleanup complete.")
