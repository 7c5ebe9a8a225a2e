"""Tests for the commentary service and feed."""

from __future__ import annotations

import pytest

from snake_autopilot.commentary import (
    OFFLINE_MESSAGE,
    CommentaryEvent,
    CommentaryFeed,
    Commentator,
    CommentKind,
    build_prompt,
    fallback_commentary,
    is_rate_limit_error,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class RecordingBackend:
    def __init__(self, reply: str = "What a move!", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class TestPromptsAndFallbacks:
    def test_fallback_lines(self):
        assert fallback_commentary(CommentaryEvent.START, 0) == (
            "Systems online. Ready to play!"
        )
        assert fallback_commentary(CommentaryEvent.GAME_OVER, 40) == (
            "Game Over! Final Score: 40."
        )
        assert fallback_commentary(CommentaryEvent.MILESTONE, 50) == (
            "Amazing! Score hit 50!"
        )

    def test_game_over_prompt_mentions_scores(self):
        prompt = build_prompt(CommentaryEvent.GAME_OVER, 30, 120)
        assert "Score: 30" in prompt
        assert "High Score: 120" in prompt

    @pytest.mark.parametrize(
        "message",
        ["HTTP 429 Too Many Requests", "RESOURCE_EXHAUSTED", "quota exceeded"],
    )
    def test_rate_limit_detection(self, message):
        assert is_rate_limit_error(RuntimeError(message))

    def test_other_errors_not_rate_limits(self):
        assert not is_rate_limit_error(RuntimeError("connection reset"))


class TestCommentator:
    @pytest.mark.asyncio
    async def test_offline_without_backend(self):
        commentator = Commentator()
        assert not commentator.available
        text = await commentator.comment(CommentaryEvent.START, 0, 0)
        assert text == OFFLINE_MESSAGE

    @pytest.mark.asyncio
    async def test_returns_backend_text(self):
        backend = RecordingBackend()
        commentator = Commentator(backend)
        text = await commentator.comment(CommentaryEvent.MILESTONE, 50, 90)
        assert text == "What a move!"
        assert "50" in backend.prompts[0]

    @pytest.mark.asyncio
    async def test_empty_reply_falls_back(self):
        commentator = Commentator(RecordingBackend(reply=""))
        text = await commentator.comment(CommentaryEvent.START, 0, 0)
        assert text == "Systems online. Ready to play!"

    @pytest.mark.asyncio
    async def test_error_falls_back_without_cooldown(self):
        backend = RecordingBackend(error=RuntimeError("boom"))
        commentator = Commentator(backend)
        text = await commentator.comment(CommentaryEvent.GAME_OVER, 20, 20)
        assert text == "Game Over! Final Score: 20."
        assert not commentator.cooling_down
        await commentator.comment(CommentaryEvent.GAME_OVER, 20, 20)
        assert len(backend.prompts) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_starts_cooldown(self):
        clock = FakeClock()
        backend = RecordingBackend(error=RuntimeError("429 RESOURCE_EXHAUSTED"))
        commentator = Commentator(backend, cooldown_seconds=60.0, clock=clock)

        await commentator.comment(CommentaryEvent.START, 0, 0)
        assert commentator.cooling_down

        clock.now += 30
        text = await commentator.comment(CommentaryEvent.MILESTONE, 50, 50)
        assert text == "Amazing! Score hit 50!"
        assert len(backend.prompts) == 1

    @pytest.mark.asyncio
    async def test_cooldown_expires(self):
        clock = FakeClock()
        backend = RecordingBackend(error=RuntimeError("quota"))
        commentator = Commentator(backend, cooldown_seconds=60.0, clock=clock)
        await commentator.comment(CommentaryEvent.START, 0, 0)

        backend.error = None
        clock.now += 61
        text = await commentator.comment(CommentaryEvent.START, 0, 0)
        assert text == "What a move!"
        assert not commentator.cooling_down

    def test_negative_cooldown_rejected(self):
        with pytest.raises(ValueError, match=">= 0"):
            Commentator(cooldown_seconds=-1)


class TestCommentaryFeed:
    def test_add_and_list(self):
        feed = CommentaryFeed()
        feed.add("Game Started. Mode: Auto-Pilot")
        feed.add("Auto-Pilot trapped!", CommentKind.FAILURE)
        items = feed.to_list()
        assert [c["text"] for c in items] == [
            "Game Started. Mode: Auto-Pilot", "Auto-Pilot trapped!",
        ]
        assert items[1]["kind"] == "failure"
        assert isinstance(items[0]["timestamp"], float)

    def test_bounded_history(self):
        feed = CommentaryFeed(maxlen=3)
        for i in range(5):
            feed.add(f"c{i}")
        assert len(feed) == 3
        assert [c["text"] for c in feed.to_list()] == ["c2", "c3", "c4"]

    def test_clear(self):
        feed = CommentaryFeed()
        feed.add("x")
        feed.clear()
        assert len(feed) == 0

    def test_invalid_maxlen(self):
        with pytest.raises(ValueError, match="at least 1"):
            CommentaryFeed(maxlen=0)
