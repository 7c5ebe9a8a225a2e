"""Stateless autopilot: tail-safe pathfinding for a single snake."""

from snake_autopilot.navigation.obstacles import ObstacleSet, build_obstacles
from snake_autopilot.navigation.pathfinding import reachable_count, shortest_path
from snake_autopilot.navigation.policy import (
    Candidate,
    Decision,
    Tier,
    decide,
    legal_candidates,
    plan,
)
from snake_autopilot.navigation.simulation import VirtualState, simulate

__all__ = [
    "Candidate",
    "Decision",
    "ObstacleSet",
    "Tier",
    "VirtualState",
    "build_obstacles",
    "decide",
    "legal_candidates",
    "plan",
    "reachable_count",
    "shortest_path",
    "simulate",
]
