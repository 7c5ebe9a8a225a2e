"""One-tick lookahead: the body a candidate step would produce."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from snake_autopilot.grid import Cell
from snake_autopilot.navigation.obstacles import ObstacleSet, build_obstacles


@dataclass(frozen=True)
class VirtualState:
    """Hypothetical next-tick snapshot; never committed to the real game."""

    body: tuple[Cell, ...]
    tail: Cell
    obstacles: ObstacleSet
    grew: bool

    @property
    def head(self) -> Cell:
        return self.body[0]


def simulate(
    body: Sequence[Cell],
    candidate_head: Cell,
    target: Cell,
) -> VirtualState:
    """Build the virtual state after moving the head to *candidate_head*.

    Reaching *target* keeps every existing segment (growth); any other step
    drops the last one. The returned obstacles exclude the virtual tail,
    which will move away again on the following tick.
    """
    grew = candidate_head == target
    kept = tuple(body) if grew else tuple(body[:-1])
    virtual_body = (candidate_head, *kept)
    return VirtualState(
        body=virtual_body,
        tail=virtual_body[-1],
        obstacles=build_obstacles(virtual_body, exclude_tail=True),
        grew=grew,
    )
