"""Three-tier move selection for the autopilot.

Every tick the policy looks at the (up to four) legal first steps and, for
each, simulates the body one tick ahead. A step is *safe* when the new head
can still reach the cell the tail will occupy; chasing the tail is always
possible from there, so the snake cannot have sealed itself in with that
step alone. The policy then prefers, in order:

1. the safe step closest to the target (``Tier.TARGET``);
2. the safe step with the most reachable space (``Tier.SPACE``);
3. any legal step with the most reachable space (``Tier.EMERGENCY``).

When no legal step exists the decision carries no direction
(``Tier.TRAPPED``). The policy keeps no state between calls.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from snake_autopilot.grid import Cell, Direction, Grid
from snake_autopilot.navigation.obstacles import build_obstacles
from snake_autopilot.navigation.pathfinding import reachable_count, shortest_path
from snake_autopilot.navigation.simulation import VirtualState, simulate

logger = logging.getLogger(__name__)

_DEFAULT_GRID = Grid()


class Tier(enum.Enum):
    """Which rule produced a decision."""

    TARGET = "target"
    SPACE = "space"
    EMERGENCY = "emergency"
    TRAPPED = "trapped"


@dataclass(frozen=True)
class Candidate:
    """A legal first step and the virtual state it leads to."""

    direction: Direction
    head: Cell
    state: VirtualState
    reaches_target: bool


@dataclass(frozen=True)
class Decision:
    """Outcome of :func:`plan`.

    ``scores`` holds the ranking metric of the winning tier for every
    candidate it ranked: path length to the target for ``TARGET``,
    reachable cell count for ``SPACE`` and ``EMERGENCY``.
    """

    direction: Direction | None
    tier: Tier
    candidates: tuple[Candidate, ...] = ()
    safe: tuple[Direction, ...] = ()
    scores: dict[Direction, int] = field(default_factory=dict)


def legal_candidates(
    body: Sequence[Cell],
    target: Cell,
    grid: Grid,
) -> list[Candidate]:
    """Steps from the head that stay on the board and off the body.

    The neck is never a candidate. The current tail is, since it moves out
    of the way on the same tick.
    """
    head = body[0]
    neck = body[1] if len(body) > 1 else None
    blocked = build_obstacles(body, exclude_tail=True)
    candidates: list[Candidate] = []
    for cell, direction in grid.neighbors(head):
        if cell == neck or cell in blocked:
            continue
        candidates.append(
            Candidate(
                direction=direction,
                head=cell,
                state=simulate(body, cell, target),
                reaches_target=cell == target,
            ),
        )
    return candidates


def is_safe(candidate: Candidate, grid: Grid) -> bool:
    """Whether the virtual head can still reach the virtual tail."""
    state = candidate.state
    return shortest_path(grid, state.head, state.tail, state.obstacles) is not None


def plan(
    body: Sequence[tuple[int, int]],
    target: tuple[int, int],
    grid: Grid | None = None,
) -> Decision:
    """Choose the next step for *body* heading for *target*.

    *body* must be a valid snake (see :func:`snake_autopilot.snake.check_body`)
    and *target* a free in-bounds cell; neither is validated here.
    """
    grid = grid if grid is not None else _DEFAULT_GRID
    cells = tuple(Cell(*seg) for seg in body)
    goal = Cell(*target)

    candidates = legal_candidates(cells, goal, grid)
    if not candidates:
        logger.debug("No legal move from %s.", cells[0])
        return Decision(direction=None, tier=Tier.TRAPPED)

    safe = [c for c in candidates if is_safe(c, grid)]
    safe_dirs = tuple(c.direction for c in safe)

    distances: dict[Direction, int] = {}
    for c in safe:
        path = shortest_path(grid, c.head, goal, c.state.obstacles)
        if path is not None:
            distances[c.direction] = len(path)
    if distances:
        # min() keeps the first of equal keys, i.e. enumeration order.
        best = min(distances, key=distances.__getitem__)
        return Decision(
            direction=best,
            tier=Tier.TARGET,
            candidates=tuple(candidates),
            safe=safe_dirs,
            scores=distances,
        )

    if safe:
        logger.debug("Target unreachable by any safe step; maximizing space.")
        space = {
            c.direction: reachable_count(grid, c.head, c.state.obstacles)
            for c in safe
        }
        return Decision(
            direction=max(space, key=space.__getitem__),
            tier=Tier.SPACE,
            candidates=tuple(candidates),
            scores=space,
            safe=safe_dirs,
        )

    logger.debug("No safe step from %s; emergency fallback.", cells[0])
    current = build_obstacles(cells, exclude_tail=True)
    space = {
        c.direction: reachable_count(grid, c.head, current) for c in candidates
    }
    return Decision(
        direction=max(space, key=space.__getitem__),
        tier=Tier.EMERGENCY,
        candidates=tuple(candidates),
        scores=space,
    )


def decide(
    body: Sequence[tuple[int, int]],
    target: tuple[int, int],
    grid: Grid | None = None,
) -> Direction | None:
    """Return the autopilot's next direction, or ``None`` if it is trapped."""
    return plan(body, target, grid).direction
