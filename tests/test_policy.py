"""Tests for the autopilot decision policy."""

import numpy as np
import pytest

from snake_autopilot.grid import Cell, Direction, Grid
from snake_autopilot.navigation import (
    Tier,
    build_obstacles,
    decide,
    legal_candidates,
    plan,
    reachable_count,
    shortest_path,
    simulate,
)


def _cells(*pairs):
    return [Cell(x, y) for x, y in pairs]


def _random_board(seed):
    """A random valid snake (self-avoiding walk) and a free target cell."""
    rng = np.random.default_rng(seed)
    grid = Grid(int(rng.integers(3, 8)), int(rng.integers(3, 8)))
    length = int(rng.integers(1, grid.size // 2 + 2))
    body = [Cell(int(rng.integers(grid.width)), int(rng.integers(grid.height)))]
    while len(body) < length:
        options = [c for c, _ in grid.neighbors(body[-1]) if c not in body]
        if not options:
            break
        body.append(options[int(rng.integers(len(options)))])
    free = [
        Cell(x, y) for y in range(grid.height) for x in range(grid.width)
        if Cell(x, y) not in body
    ]
    target = free[int(rng.integers(len(free)))]
    return grid, body, target


class TestCandidates:
    def test_neck_excluded(self):
        grid = Grid(5, 5)
        body = _cells((2, 2), (2, 3), (2, 4))
        dirs = [c.direction for c in legal_candidates(body, Cell(0, 0), grid)]
        assert dirs == [Direction.UP, Direction.LEFT, Direction.RIGHT]

    def test_out_of_bounds_excluded(self):
        grid = Grid(5, 5)
        body = _cells((0, 0), (1, 0))
        dirs = [c.direction for c in legal_candidates(body, Cell(4, 4), grid)]
        assert dirs == [Direction.DOWN]

    def test_tail_cell_is_a_candidate(self):
        grid = Grid(3, 2)
        body = _cells((0, 0), (1, 0), (1, 1), (0, 1))
        candidates = legal_candidates(body, Cell(2, 0), grid)
        assert [c.direction for c in candidates] == [Direction.DOWN]
        assert candidates[0].head == Cell(0, 1)

    def test_candidate_records_virtual_state(self):
        grid = Grid(5, 5)
        body = _cells((2, 2), (2, 3))
        (up, *_) = legal_candidates(body, Cell(2, 1), grid)
        assert up.direction == Direction.UP
        assert up.reaches_target
        assert up.state.body == (Cell(2, 1), Cell(2, 2), Cell(2, 3))


class TestScenarios:
    def test_straight_run_to_target(self):
        grid = Grid(5, 5)
        body = _cells((2, 2), (2, 3), (2, 4))
        target = Cell(2, 0)

        path = shortest_path(
            grid, body[0], target, build_obstacles(body, exclude_tail=False),
        )
        assert path == [Direction.UP, Direction.UP]

        decision = plan(body, target, grid)
        assert decision.direction == Direction.UP
        assert decision.tier == Tier.TARGET
        assert decision.scores[Direction.UP] == 1
        assert decide(body, target, grid) == Direction.UP

    def test_unsafe_shortcut_rejected_for_space(self):
        # Food sits in a corner pocket whose only opening is the head. Eating
        # it leaves the head walled in, away from the tail.
        grid = Grid(5, 5)
        body = _cells((1, 0), (1, 1), (0, 1), (0, 2), (0, 3))
        target = Cell(0, 0)

        decision = plan(body, target, grid)
        assert [c.direction for c in decision.candidates] == [
            Direction.LEFT, Direction.RIGHT,
        ]
        assert decision.safe == (Direction.RIGHT,)
        assert decision.tier == Tier.SPACE
        assert decision.direction == Direction.RIGHT
        assert decision.scores == {Direction.RIGHT: 21}

    def test_enclosed_head_returns_none(self):
        grid = Grid(3, 3)
        body = _cells(
            (0, 0), (1, 0), (2, 0), (2, 1), (1, 1), (0, 1), (0, 2), (1, 2),
        )
        decision = plan(body, Cell(2, 2), grid)
        assert decision.direction is None
        assert decision.tier == Tier.TRAPPED
        assert decide(body, Cell(2, 2), grid) is None

    def test_adjacent_target_single_cell(self):
        grid = Grid(5, 5)
        assert decide([Cell(2, 2)], Cell(3, 2), grid) == Direction.RIGHT

    def test_adjacent_target_longer_body(self):
        grid = Grid(5, 5)
        body = _cells((2, 2), (1, 2), (0, 2))
        decision = plan(body, Cell(2, 1), grid)
        assert decision.direction == Direction.UP
        assert decision.scores[Direction.UP] == 0


class TestTiers:
    def test_distance_tie_prefers_enumeration_order(self):
        grid = Grid(5, 5)
        decision = plan([Cell(2, 2)], Cell(3, 1), grid)
        assert decision.scores == {
            Direction.UP: 1,
            Direction.DOWN: 3,
            Direction.LEFT: 3,
            Direction.RIGHT: 1,
        }
        assert decision.direction == Direction.UP

    def test_sealed_target_falls_back_to_space(self):
        grid = Grid(5, 5)
        body = _cells((2, 1), (2, 0), (1, 0), (1, 1), (0, 1), (0, 2), (0, 3))
        decision = plan(body, Cell(0, 0), grid)
        assert decision.tier == Tier.SPACE
        assert decision.safe == (Direction.DOWN, Direction.RIGHT)
        assert decision.scores == {Direction.DOWN: 19, Direction.RIGHT: 19}
        assert decision.direction == Direction.DOWN

    def test_emergency_when_every_step_is_unsafe(self):
        # Head on the top edge between two dead-end pockets; the tail is
        # out of reach from either.
        grid = Grid(5, 5)
        body = _cells(
            (2, 0), (2, 1), (1, 1), (0, 1), (0, 2), (1, 2), (2, 2),
            (3, 2), (3, 1), (4, 1), (4, 2), (4, 3), (4, 4),
        )
        decision = plan(body, Cell(0, 4), grid)
        assert decision.tier == Tier.EMERGENCY
        assert decision.safe == ()
        assert decision.scores == {Direction.LEFT: 2, Direction.RIGHT: 2}
        assert decision.direction == Direction.LEFT

    def test_accepts_plain_tuples_and_default_grid(self):
        body = [(12, 12), (12, 13), (12, 14)]
        assert decide(body, (12, 5)) == Direction.UP

    def test_input_body_not_mutated(self):
        grid = Grid(5, 5)
        body = _cells((2, 2), (2, 3), (2, 4))
        snapshot = list(body)
        plan(body, Cell(0, 0), grid)
        assert body == snapshot

    def test_room_to_move_never_trapped(self):
        grid = Grid(6, 6)
        body = _cells((2, 2), (2, 3), (2, 4), (3, 4), (4, 4))
        target = Cell(5, 0)
        blocked = build_obstacles(body, exclude_tail=True)
        roomy = [
            cell for cell, _ in grid.neighbors(body[0])
            if cell != body[1] and cell not in blocked
            and reachable_count(grid, cell, blocked) >= len(body) + 1
        ]
        assert roomy
        assert decide(body, target, grid) is not None


class TestNarrowBoards:
    def test_single_column_moves_up_to_target(self):
        decision = plan(_cells((0, 2), (0, 3)), Cell(0, 0), Grid(1, 5))
        assert decision.direction == Direction.UP
        assert decision.tier == Tier.TARGET

    def test_single_row_moves_toward_target(self):
        decision = plan(_cells((2, 0)), Cell(4, 0), Grid(5, 1))
        assert decision.direction == Direction.RIGHT
        assert decision.scores == {Direction.LEFT: 3, Direction.RIGHT: 1}

    def test_single_column_head_at_end_is_trapped(self):
        grid = Grid(1, 5)
        assert decide(_cells((0, 0), (0, 1)), Cell(0, 4), grid) is None
        assert plan(_cells((0, 0), (0, 1)), Cell(0, 4), grid).tier == Tier.TRAPPED


class TestProperties:
    @pytest.mark.parametrize("seed", range(60))
    def test_legal(self, seed):
        grid, body, target = _random_board(seed)
        direction = decide(body, target, grid)
        if direction is None:
            return
        head = body[0].step(direction)
        assert grid.in_bounds(head)
        assert head not in body[:-1]
        if len(body) > 1:
            assert head != body[1]

    @pytest.mark.parametrize("seed", range(60))
    def test_deterministic(self, seed):
        grid, body, target = _random_board(seed)
        first = plan(body, target, grid)
        second = plan(body, target, grid)
        assert first.direction == second.direction
        assert first.tier == second.tier
        assert first.scores == second.scores

    @pytest.mark.parametrize("seed", range(60))
    def test_safe_tiers_keep_tail_reachable(self, seed):
        grid, body, target = _random_board(seed)
        decision = plan(body, target, grid)
        if decision.tier not in (Tier.TARGET, Tier.SPACE):
            return
        state = simulate(body, body[0].step(decision.direction), target)
        assert shortest_path(grid, state.head, state.tail, state.obstacles) is not None
        assert decision.direction in decision.safe

    @pytest.mark.parametrize("seed", range(60))
    def test_target_tier_picks_minimum_distance(self, seed):
        grid, body, target = _random_board(seed)
        decision = plan(body, target, grid)
        if decision.tier != Tier.TARGET:
            return
        assert decision.scores[decision.direction] == min(decision.scores.values())

    @pytest.mark.parametrize("seed", range(60))
    def test_none_only_without_legal_steps(self, seed):
        grid, body, target = _random_board(seed)
        legal = [
            cell for cell, _ in grid.neighbors(body[0])
            if cell not in body[:-1] and (len(body) == 1 or cell != body[1])
        ]
        assert (decide(body, target, grid) is None) == (not legal)
