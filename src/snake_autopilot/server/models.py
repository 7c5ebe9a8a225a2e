"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum
from typing import Literal

from pydantic import BaseModel, Field

DirectionName = Literal["up", "down", "left", "right"]


class GameStatus(str, enum.Enum):
    """Lifecycle states for a hosted game."""

    WAITING = "waiting"
    ACTIVE = "active"
    FINISHED = "finished"


class NavigateRequest(BaseModel):
    """Request body for POST /navigate."""

    body: list[tuple[int, int]] = Field(min_length=1)
    target: tuple[int, int]
    board_width: int = Field(default=25, ge=1, le=256)
    board_height: int = Field(default=25, ge=1, le=256)


class NavigateResponse(BaseModel):
    """Chosen direction (``None`` when trapped) and the rule that chose it."""

    direction: DirectionName | None
    tier: str


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    board_width: int = Field(default=25, ge=4, le=100)
    board_height: int = Field(default=25, ge=4, le=100)
    initial_length: int = Field(default=3, ge=1)
    autopilot: bool = True
    speed: str | None = None
    tick_rate_ms: int | None = Field(default=None, ge=15, le=2000)
    seed: int | None = None


class DirectionRequest(BaseModel):
    """Request body for POST /games/{game_id}/direction."""

    direction: DirectionName


class AutopilotRequest(BaseModel):
    """Request body for POST /games/{game_id}/autopilot."""

    enabled: bool


class GameSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: GameStatus
    autopilot: bool
    score: int
    high_score: int
    tick_rate_ms: int


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
