"""Grid geometry and occupancy for the snake board."""

from __future__ import annotations

import enum
from typing import NamedTuple

import numpy as np

DEFAULT_WIDTH = 25
DEFAULT_HEIGHT = 25


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) deltas.

    Declaration order is the enumeration order used for tie-breaking.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)


class Cell(NamedTuple):
    """A board coordinate. ``x`` grows to the right, ``y`` grows downward."""

    x: int
    y: int

    def step(self, direction: Direction) -> Cell:
        """Return the adjacent cell in *direction* (may be out of bounds)."""
        dx, dy = direction.value
        return Cell(self.x + dx, self.y + dy)


class CellType(enum.IntEnum):
    """Integer codes stored in the occupancy array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Grid:
    """Fixed-size rectangular board.

    Geometry (:meth:`in_bounds`, :meth:`neighbors`) is pure and is what the
    navigation code relies on. The NumPy occupancy array is only painted by
    the game engine and is indexed ``cells[y, x]``.
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError("Grid dimensions must be positive.")
        self.width = width
        self.height = height
        self.cells = np.zeros((height, width), dtype=np.int8)

    @property
    def size(self) -> int:
        return self.width * self.height

    def in_bounds(self, cell: tuple[int, int]) -> bool:
        """Check whether a coordinate lies within the grid."""
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, cell: tuple[int, int]) -> list[tuple[Cell, Direction]]:
        """In-bounds neighbours of *cell* paired with the move producing them.

        Always enumerated UP, DOWN, LEFT, RIGHT; callers rely on this order
        for deterministic tie-breaking.
        """
        x, y = cell
        result: list[tuple[Cell, Direction]] = []
        for direction in Direction:
            dx, dy = direction.value
            nxt = Cell(x + dx, y + dy)
            if self.in_bounds(nxt):
                result.append((nxt, direction))
        return result

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = CellType.EMPTY

    def get(self, cell: tuple[int, int]) -> CellType:
        x, y = cell
        return CellType(self.cells[y, x])

    def set(self, cell: tuple[int, int], cell_type: CellType) -> None:
        x, y = cell
        self.cells[y, x] = cell_type

    def empty_cells(self) -> list[Cell]:
        """Return all empty cells in row-major order."""
        ys, xs = np.where(self.cells == CellType.EMPTY)
        return [Cell(x, y) for x, y in zip(xs.tolist(), ys.tolist(), strict=True)]

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "cells": self.cells.tolist(),
        }
