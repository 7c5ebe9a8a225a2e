"""Blocked-cell sets derived from body snapshots."""

from __future__ import annotations

from collections.abc import Sequence

from snake_autopilot.grid import Cell

ObstacleSet = frozenset[Cell]


def build_obstacles(body: Sequence[Cell], exclude_tail: bool) -> ObstacleSet:
    """Return the cells of *body* as an immutable set.

    With *exclude_tail* the last cell is left out: the tail vacates its cell
    on the same tick the head advances unless the snake grows.
    """
    cells = body[:-1] if exclude_tail else body
    return frozenset(cells)
