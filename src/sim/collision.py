# src/sim/collision.py
from __future__ import annotations
from enum import Enum
from typing import Iterable, List

from .obstacles import Obstacle


class Outcome(str, Enum):
    CONTINUING = "continuing"
    CRASHED_BOUNDARY = "crashed_boundary"
    CRASHED_OBSTACLE = "crashed_obstacle"
    TIME_EXPIRED = "time_expired"

    @property
    def crashed(self) -> bool:
        return self in (Outcome.CRASHED_BOUNDARY, Outcome.CRASHED_OBSTACLE)


def overlaps_horizontally(anchor_x: float, radius: float, obs: Obstacle) -> bool:
    """Open-interval overlap of [anchor-r, anchor+r] with [x, x+width]."""
    return anchor_x + radius > obs.x and anchor_x - radius < obs.right


def in_gap(y: float, obs: Obstacle) -> bool:
    """Strictly inside the gap: touching either edge counts as a hit."""
    return obs.gap_top < y < obs.gap_bottom


def out_of_bounds(y: float, viewport_h: float) -> bool:
    return y < 0 or y > viewport_h


def check_collision(anchor_x: float, y: float, radius: float,
                    obstacles: Iterable[Obstacle], viewport_h: float) -> Outcome:
    """
    Boundary first, then obstacles. Every overlapping obstacle is checked;
    the caller's spacing usually means there is only one, but nothing here relies on it.
    """
    if out_of_bounds(y, viewport_h):
        return Outcome.CRASHED_BOUNDARY
    for obs in obstacles:
        if overlaps_horizontally(anchor_x, radius, obs) and not in_gap(y, obs):
            return Outcome.CRASHED_OBSTACLE
    return Outcome.CONTINUING


def collect_passes(anchor_x: float, obstacles: Iterable[Obstacle]) -> List[Obstacle]:
    """Mark and return obstacles whose trailing edge the anchor has just cleared."""
    cleared: List[Obstacle] = []
    for obs in obstacles:
        if not obs.passed and anchor_x > obs.right:
            obs.passed = True
            cleared.append(obs)
    return cleared
