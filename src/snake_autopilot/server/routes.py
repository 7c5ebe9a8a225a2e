"""REST API route handlers."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from snake_autopilot.grid import Direction, Grid
from snake_autopilot.navigation import plan
from snake_autopilot.server.game_manager import GameManager
from snake_autopilot.server.models import (
    AutopilotRequest,
    CreateGameRequest,
    DirectionRequest,
    ErrorResponse,
    GameSummary,
    NavigateRequest,
    NavigateResponse,
)
from snake_autopilot.snake import check_body

router = APIRouter(tags=["games"])

_NOT_FOUND = {404: {"model": ErrorResponse}}
_CONFLICT = {**_NOT_FOUND, 409: {"model": ErrorResponse}}


def _get_manager(request: Request) -> GameManager:
    return request.app.state.game_manager


@router.post("/navigate")
async def navigate(body: NavigateRequest) -> NavigateResponse:
    """Stateless autopilot decision for an arbitrary board snapshot."""
    grid = Grid(width=body.board_width, height=body.board_height)
    try:
        cells = check_body(body.body, grid)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if not grid.in_bounds(body.target):
        raise HTTPException(status_code=422, detail="Target is out of bounds.")
    if tuple(body.target) in cells:
        raise HTTPException(status_code=422, detail="Target lies on the body.")

    decision = plan(cells, body.target, grid)
    direction = decision.direction
    return NavigateResponse(
        direction=direction.name.lower() if direction is not None else None,
        tier=decision.tier.value,
    )


@router.post("/games", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> GameSummary:
    """Create a new game in the waiting state."""
    manager = _get_manager(request)
    try:
        game = manager.create_game(**body.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return game.summary()


@router.get("/games")
async def list_games(request: Request) -> list[GameSummary]:
    """List waiting and active games."""
    return _get_manager(request).list_games()


@router.get("/games/{game_id}", responses=_NOT_FOUND)
async def get_game(game_id: str, request: Request) -> dict:
    """Full game state, metadata and recent comments."""
    game = _get_manager(request).get_game(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    return game.snapshot()


@router.post("/games/{game_id}/start", responses=_CONFLICT)
async def start_game(game_id: str, request: Request) -> GameSummary:
    manager = _get_manager(request)
    try:
        game = manager.start_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return game.summary()


@router.post("/games/{game_id}/stop", responses=_NOT_FOUND)
async def stop_game(game_id: str, request: Request) -> GameSummary:
    manager = _get_manager(request)
    try:
        game = await manager.stop_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return game.summary()


@router.post("/games/{game_id}/direction", responses=_CONFLICT)
async def set_direction(
    game_id: str, body: DirectionRequest, request: Request,
) -> dict:
    """Manual override; only allowed while the autopilot is off."""
    manager = _get_manager(request)
    try:
        accepted = manager.set_direction(game_id, Direction[body.direction.upper()])
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return {"accepted": accepted}


@router.post("/games/{game_id}/autopilot", responses=_NOT_FOUND)
async def set_autopilot(
    game_id: str, body: AutopilotRequest, request: Request,
) -> GameSummary:
    manager = _get_manager(request)
    try:
        game = manager.set_autopilot(game_id, body.enabled)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return game.summary()
