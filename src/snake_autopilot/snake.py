"""Snake body representation and validation."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

from snake_autopilot.grid import Cell, Direction, Grid

# Pairs that would cause an instant 180° reversal.
OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def check_body(body: Sequence[tuple[int, int]], grid: Grid) -> tuple[Cell, ...]:
    """Validate a body snapshot and return it as a tuple of cells.

    Raises :class:`ValueError` if the body is empty, leaves the grid,
    repeats a cell, or has a gap between consecutive segments.
    """
    if not body:
        raise ValueError("Snake body must contain at least one cell.")
    cells = tuple(Cell(*seg) for seg in body)
    for cell in cells:
        if not grid.in_bounds(cell):
            raise ValueError(f"Body cell {tuple(cell)} is out of bounds.")
    if len(set(cells)) != len(cells):
        raise ValueError("Snake body intersects itself.")
    for a, b in zip(cells, cells[1:]):
        if abs(a.x - b.x) + abs(a.y - b.y) != 1:
            raise ValueError(
                f"Body cells {tuple(a)} and {tuple(b)} are not adjacent.",
            )
    return cells


class Snake:
    """A snake represented as an ordered deque of cells.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(
        self,
        start: Cell,
        direction: Direction = Direction.UP,
        length: int = 3,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dx, dy = direction.value
        self.body: deque[Cell] = deque(
            Cell(start.x - dx * i, start.y - dy * i) for i in range(length)
        )
        self.direction = direction

    @property
    def head(self) -> Cell:
        return self.body[0]

    @property
    def tail(self) -> Cell:
        return self.body[-1]

    def set_direction(self, new_direction: Direction) -> bool:
        """Change direction, ignoring 180° reversals.

        Returns whether the change was accepted.
        """
        if len(self.body) > 1 and OPPOSITES[new_direction] == self.direction:
            return False
        self.direction = new_direction
        return True

    def next_head(self) -> Cell:
        """Compute the next head position without moving."""
        return self.head.step(self.direction)

    def advance(self, grow: bool = False) -> Cell | None:
        """Move one cell in the current direction.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.appendleft(self.next_head())
        if grow:
            return None
        return self.body.pop()

    def snapshot(self) -> tuple[Cell, ...]:
        """Immutable copy of the body, safe to hand to the navigator."""
        return tuple(self.body)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name,
            "length": len(self.body),
        }
