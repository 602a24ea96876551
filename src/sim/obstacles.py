# src/sim/obstacles.py
from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Optional

from .config import (
    SessionConfig,
    MIN_GAP_HEIGHT, MAX_DIFFICULTY_MOD, SCORE_PER_DIFFICULTY_STEP, GAP_MARGIN,
    MOVING_THRESHOLD, DIRECTION_THRESHOLD, MOVING_STEP_PX, SPAWN_OFFSET_X, PRUNE_X,
)
from .rng import SeededRNG

logger = logging.getLogger(__name__)


class ObstacleKind(str, Enum):
    STATIC = "static"
    OSCILLATING = "oscillating"


@dataclass
class Obstacle:
    """A full-height column with one passable gap. Scrolls left every tick."""
    x: float
    width: float
    gap_top: float
    gap_height: float
    passed: bool = False

    kind: ClassVar[ObstacleKind] = ObstacleKind.STATIC

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def gap_bottom(self) -> float:
        return self.gap_top + self.gap_height

    @property
    def direction(self) -> Optional[int]:
        return None

    def update_movement(self, viewport_h: float):
        """Static obstacles keep their gap where it is."""


@dataclass
class OscillatingObstacle(Obstacle):
    """Gap slides 2 px per tick and bounces between the margins (triangle wave)."""
    moving_direction: int = 1

    kind: ClassVar[ObstacleKind] = ObstacleKind.OSCILLATING

    @property
    def direction(self) -> Optional[int]:
        return self.moving_direction

    def update_movement(self, viewport_h: float):
        self.gap_top += self.moving_direction * MOVING_STEP_PX
        # flip after the move, once the gap pokes past a margin
        if self.gap_top < GAP_MARGIN or self.gap_top > viewport_h - self.gap_height - GAP_MARGIN:
            self.moving_direction *= -1


def difficulty_mod(score: float) -> int:
    return min(MAX_DIFFICULTY_MOD, math.floor(score / SCORE_PER_DIFFICULTY_STEP))


def gap_height_for(score: float, gap_size: float) -> float:
    """Gaps shrink by 1 px per 50 points, never more than 60 px and never below the floor."""
    return max(MIN_GAP_HEIGHT, gap_size - difficulty_mod(score))


def spawn_obstacle(rng: SeededRNG, score: float, config: SessionConfig) -> Obstacle:
    """
    Build the next obstacle just past the right edge of the viewport.
    Exactly three draws, always in this order: gap offset, kind, direction.
    """
    if not isinstance(rng, SeededRNG):
        raise TypeError(f"obstacle geometry needs a SeededRNG, got {type(rng).__name__}")

    gap_height = gap_height_for(score, config.gap_size)
    min_gap_y = GAP_MARGIN
    max_gap_y = config.viewport_h - gap_height - GAP_MARGIN

    gap_top = rng.next_float() * (max_gap_y - min_gap_y) + min_gap_y
    is_moving = rng.next_float() > MOVING_THRESHOLD
    direction = 1 if rng.next_float() > DIRECTION_THRESHOLD else -1

    x = config.viewport_w + SPAWN_OFFSET_X
    if is_moving:
        obs: Obstacle = OscillatingObstacle(
            x=x, width=config.obstacle_width, gap_top=gap_top, gap_height=gap_height,
            moving_direction=direction,
        )
    else:
        obs = Obstacle(x=x, width=config.obstacle_width, gap_top=gap_top, gap_height=gap_height)

    logger.debug("spawn %s gap_top=%.2f gap_height=%.1f", obs.kind.value, gap_top, gap_height)
    return obs


def should_spawn(obstacles: List[Obstacle], config: SessionConfig) -> bool:
    """Spawn when nothing is on screen yet or the newest obstacle has moved far enough left."""
    if not obstacles:
        return True
    return config.viewport_w - obstacles[-1].x > config.spawn_distance


def scroll_obstacles(obstacles: List[Obstacle], speed: float, viewport_h: float) -> List[Obstacle]:
    """Move every obstacle left by `speed`, oscillate gaps, and drop the ones far off-screen."""
    for obs in obstacles:
        obs.x -= speed
        obs.update_movement(viewport_h)
    return [o for o in obstacles if o.right > PRUNE_X]
