"""Food placement."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from snake_autopilot.grid import Cell, CellType

if TYPE_CHECKING:
    from snake_autopilot.grid import Grid

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Keeps a single food item on a random empty cell.

    Uses a seeded NumPy RNG for reproducible placement.
    """

    def __init__(self, grid: Grid, rng: np.random.Generator | None = None) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.position: Cell | None = None

    def spawn(self) -> Cell | None:
        """Place food on an empty cell, replacing any previous one.

        Returns the new position, or ``None`` if the board is full.
        """
        self.remove()
        empty = self.grid.empty_cells()
        if not empty:
            logger.warning("No empty cells available for food.")
            return None
        pos = empty[int(self.rng.integers(len(empty)))]
        self.grid.set(pos, CellType.FOOD)
        self.position = pos
        return pos

    def remove(self) -> None:
        """Clear the food cell if it still shows food."""
        if self.position is None:
            return
        if self.grid.get(self.position) == CellType.FOOD:
            self.grid.set(self.position, CellType.EMPTY)
        self.position = None

    def to_dict(self) -> dict:
        return {"position": list(self.position) if self.position else None}
