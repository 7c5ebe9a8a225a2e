"""Breadth-first search and flood fill over the grid minus obstacles."""

from __future__ import annotations

from collections import deque
from collections.abc import Container

from snake_autopilot.grid import Cell, Direction, Grid


def shortest_path(
    grid: Grid,
    start: Cell,
    goal: Cell,
    obstacles: Container[Cell],
) -> list[Direction] | None:
    """Return the directions of a shortest path from *start* to *goal*.

    Returns ``[]`` when ``start == goal`` and ``None`` when *goal* cannot be
    reached. *start* is always expanded even if it appears in *obstacles*.
    Neighbours are expanded UP, DOWN, LEFT, RIGHT, so among equally short
    paths the one found first in that order wins.
    """
    if start == goal:
        return []

    # cell -> (previous cell, direction taken to get here)
    came_from: dict[Cell, tuple[Cell, Direction] | None] = {start: None}
    queue: deque[Cell] = deque([start])

    while queue:
        current = queue.popleft()
        for nxt, direction in grid.neighbors(current):
            if nxt in came_from or nxt in obstacles:
                continue
            came_from[nxt] = (current, direction)
            if nxt == goal:
                return _reconstruct(came_from, goal)
            queue.append(nxt)
    return None


def _reconstruct(
    came_from: dict[Cell, tuple[Cell, Direction] | None],
    goal: Cell,
) -> list[Direction]:
    path: list[Direction] = []
    link = came_from[goal]
    while link is not None:
        prev, direction = link
        path.append(direction)
        link = came_from[prev]
    path.reverse()
    return path


def reachable_count(
    grid: Grid,
    start: Cell,
    obstacles: Container[Cell],
) -> int:
    """Count the cells 4-connected to *start*, *start* included."""
    seen = {start}
    queue: deque[Cell] = deque([start])
    while queue:
        current = queue.popleft()
        for nxt, _ in grid.neighbors(current):
            if nxt not in seen and nxt not in obstacles:
                seen.add(nxt)
                queue.append(nxt)
    return len(seen)
