"""Flavour commentary from an optional text-generation backend.

The backend is any ``async (prompt) -> str`` callable. It is treated as
unreliable: failures, empty replies and rate limiting all fall back to
canned local lines so gameplay never waits on it.
"""

from __future__ import annotations

import enum
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import asdict, dataclass, field

logger = logging.getLogger(__name__)

TextGenerator = Callable[[str], Awaitable[str]]

OFFLINE_MESSAGE = "AI Commentator is offline."
_RATE_LIMIT_MARKERS = ("429", "RESOURCE_EXHAUSTED", "quota")


class CommentaryEvent(str, enum.Enum):
    START = "start"
    GAME_OVER = "game_over"
    MILESTONE = "milestone"


class CommentKind(str, enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    FAILURE = "failure"
    AI = "ai"


def fallback_commentary(event: CommentaryEvent, score: int) -> str:
    """Local line used whenever the backend cannot answer."""
    if event == CommentaryEvent.START:
        return "Systems online. Ready to play!"
    if event == CommentaryEvent.GAME_OVER:
        return f"Game Over! Final Score: {score}."
    return f"Amazing! Score hit {score}!"


def build_prompt(event: CommentaryEvent, score: int, high_score: int) -> str:
    if event == CommentaryEvent.START:
        return (
            "You are a hyped-up e-sports announcer for a Snake game. The game "
            "just started. Give a one-sentence opening remark. Be energetic."
        )
    if event == CommentaryEvent.GAME_OVER:
        return (
            "You are a sarcastic game commentator. The player just lost the "
            f"game of Snake. Score: {score}. All-time High Score: {high_score}. "
            "Give a short, witty, slightly roasting one-sentence comment about "
            "their performance."
        )
    return (
        "You are an impressed commentator. The player just reached a score of "
        f"{score} in Snake! Give a very short one-sentence compliment."
    )


def is_rate_limit_error(exc: BaseException) -> bool:
    text = f"{exc!r} {exc}"
    return any(marker in text for marker in _RATE_LIMIT_MARKERS)


class Commentator:
    """Asks the backend for a line, with a cooldown after rate limiting."""

    def __init__(
        self,
        generate: TextGenerator | None = None,
        *,
        cooldown_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must be >= 0.")
        self._generate = generate
        self._cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._cooldown_until: float | None = None

    @property
    def available(self) -> bool:
        return self._generate is not None

    @property
    def cooling_down(self) -> bool:
        return (
            self._cooldown_until is not None
            and self._clock() <= self._cooldown_until
        )

    async def comment(
        self, event: CommentaryEvent, score: int, high_score: int,
    ) -> str:
        if self._generate is None:
            return OFFLINE_MESSAGE
        if self._cooldown_until is not None:
            if self.cooling_down:
                return fallback_commentary(event, score)
            self._cooldown_until = None

        try:
            text = await self._generate(build_prompt(event, score, high_score))
        except Exception as exc:
            logger.warning("Commentary backend failed: %s", exc)
            if is_rate_limit_error(exc):
                logger.warning(
                    "Commentary rate limited; cooling down for %.0fs.",
                    self._cooldown_seconds,
                )
                self._cooldown_until = self._clock() + self._cooldown_seconds
            return fallback_commentary(event, score)
        return text or fallback_commentary(event, score)


@dataclass
class Comment:
    text: str
    kind: CommentKind = CommentKind.INFO
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["kind"] = self.kind.value
        return d


class CommentaryFeed:
    """Most recent comments, oldest first."""

    def __init__(self, maxlen: int = 20) -> None:
        if maxlen < 1:
            raise ValueError("maxlen must be at least 1.")
        self._comments: deque[Comment] = deque(maxlen=maxlen)

    def add(self, text: str, kind: CommentKind = CommentKind.INFO) -> Comment:
        comment = Comment(text=text, kind=kind)
        self._comments.append(comment)
        return comment

    def clear(self) -> None:
        self._comments.clear()

    def __len__(self) -> int:
        return len(self._comments)

    def to_list(self) -> list[dict]:
        return [c.to_dict() for c in self._comments]
