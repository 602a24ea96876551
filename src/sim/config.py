# src/sim/config.py
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .errors import ConfigError

# --- Timing ---
TICK_RATE = 60              # logical ticks per second
TIME_HUD_EVERY_TICKS = 10   # remaining-time updates are throttled to this cadence
TIME_ATTACK_LIMIT_S = 60.0

# --- Viewport ---
VIEWPORT_W = 1280
VIEWPORT_H = 800
PLAYER_ANCHOR_FRAC = 0.3    # player's fixed x as a fraction of viewport width
PLAYER_RADIUS = 4.0

# --- Physics (per tick, screen-space units) ---
GRAVITY = 0.25
LIFT = 0.35
TERMINAL_VELOCITY = 6.0
BASE_SPEED = 3.0
SPEED_INCREMENT = 0.0015

# --- Obstacle generation ---
OBSTACLE_WIDTH = 50.0
OBSTACLE_GAP = 200.0
OBSTACLE_SPAWN_DISTANCE = 350.0
MIN_GAP_HEIGHT = 130.0      # playability floor
MAX_DIFFICULTY_MOD = 60
SCORE_PER_DIFFICULTY_STEP = 50
GAP_MARGIN = 50.0           # gaps stay this far from the top and bottom edges
MOVING_THRESHOLD = 0.7      # draw > threshold -> oscillating (30%)
DIRECTION_THRESHOLD = 0.5
MOVING_STEP_PX = 2.0
SPAWN_OFFSET_X = 50.0       # new obstacles appear this far past the right edge
PRUNE_X = -100.0            # obstacles whose right edge is at or left of this are dropped

# --- Scoring ---
SCORE_PER_SPEED = 0.05
PASS_BONUS = 50.0

# --- Trail (render bookkeeping) ---
TRAIL_SEED_POINTS = 20
TRAIL_SEED_SPACING = 5.0

# --- Colors (RGB) ---
COLOR_BG = (15, 23, 42)
COLOR_PLAYER = (34, 211, 238)
COLOR_DAILY = (244, 114, 182)
COLOR_OBSTACLE = (51, 65, 85)
COLOR_OBSTACLE_BORDER = (71, 85, 105)
COLOR_FG = (248, 250, 252)
COLOR_STAR = (120, 128, 150)


class GameMode(str, Enum):
    CLASSIC = "classic"
    TIME_ATTACK = "time_attack"
    DAILY = "daily"
    PVP = "pvp"  # ghost opponent not implemented; plays as classic


@dataclass(frozen=True)
class SessionConfig:
    """
    Everything a session needs, fixed at reset time.
    Defaults mirror the shipped tuning; tests override freely.
    """
    gravity: float = GRAVITY
    lift: float = LIFT
    terminal_velocity: float = TERMINAL_VELOCITY
    base_speed: float = BASE_SPEED
    speed_increment: float = SPEED_INCREMENT
    obstacle_width: float = OBSTACLE_WIDTH
    gap_size: float = OBSTACLE_GAP
    spawn_distance: float = OBSTACLE_SPAWN_DISTANCE
    mode: GameMode = GameMode.CLASSIC
    time_limit: Optional[float] = None   # seconds, TimeAttack only
    seed: int = 0
    viewport_w: float = VIEWPORT_W
    viewport_h: float = VIEWPORT_H
    anchor_frac: float = PLAYER_ANCHOR_FRAC
    player_radius: float = PLAYER_RADIUS
    tick_rate: int = TICK_RATE

    def __post_init__(self):
        # accept "time_attack" etc. from CLIs and JSON; frozen, so bypass __setattr__
        try:
            mode = GameMode(self.mode)
        except ValueError:
            raise ConfigError(f"unknown mode {self.mode!r}") from None
        object.__setattr__(self, "mode", mode)

    @property
    def anchor_x(self) -> float:
        return self.viewport_w * self.anchor_frac

    @property
    def timed(self) -> bool:
        return self.mode is GameMode.TIME_ATTACK

    def validate(self) -> "SessionConfig":
        """Raise ConfigError if the geometry or timing would be undefined."""
        if self.gap_size <= 0:
            raise ConfigError(f"gap_size must be > 0, got {self.gap_size}")
        if self.spawn_distance <= 0:
            raise ConfigError(f"spawn_distance must be > 0, got {self.spawn_distance}")
        if self.speed_increment <= 0:
            raise ConfigError(f"speed_increment must be > 0, got {self.speed_increment}")
        if self.terminal_velocity <= 0:
            raise ConfigError(f"terminal_velocity must be > 0, got {self.terminal_velocity}")
        if self.tick_rate <= 0:
            raise ConfigError(f"tick_rate must be > 0, got {self.tick_rate}")
        if self.obstacle_width <= 0:
            raise ConfigError(f"obstacle_width must be > 0, got {self.obstacle_width}")
        tallest_gap = max(self.gap_size, MIN_GAP_HEIGHT)
        if self.viewport_h < tallest_gap + 2 * GAP_MARGIN:
            raise ConfigError(
                f"viewport_h={self.viewport_h} cannot fit a {tallest_gap} gap with {GAP_MARGIN} margins"
            )
        if self.timed:
            if self.time_limit is None or self.time_limit <= 0:
                raise ConfigError("time_attack needs a positive time_limit")
        elif self.time_limit is not None:
            raise ConfigError(f"time_limit is only valid in time_attack, mode is {self.mode.value}")
        return self

    @classmethod
    def for_mode(cls, mode: GameMode, seed: Optional[int] = None, **overrides) -> "SessionConfig":
        """Default config for `mode`. seed=None applies the mode's seed policy."""
        from .seeds import seed_for_mode

        mode = GameMode(mode)
        if seed is None:
            seed = seed_for_mode(mode)
        time_limit = TIME_ATTACK_LIMIT_S if mode is GameMode.TIME_ATTACK else None
        cfg = cls(mode=mode, seed=int(seed), time_limit=time_limit)
        return replace(cfg, **overrides) if overrides else cfg
