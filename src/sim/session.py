# src/sim/session.py
"""
The simulation session: the only object hosts talk to.

    session = Session(SessionConfig.for_mode(GameMode.DAILY))
    while True:
        result = session.step(lift_held)
        if result.terminal:
            break

One `step` is one tick. The session does no timing of its own; the host owns
the clock and decides how many ticks to run per frame. Renderers read
`snapshot()`, which is a frozen copy and cannot write back.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, DefaultDict, List, Optional, Tuple

from .collision import Outcome, check_collision, collect_passes, out_of_bounds
from .config import GameMode, SessionConfig, TRAIL_SEED_POINTS, TRAIL_SEED_SPACING
from .errors import InvalidStateError
from .obstacles import Obstacle, ObstacleKind, scroll_obstacles, should_spawn, spawn_obstacle
from .player import Player
from .rng import SeededRNG
from .scoring import CountdownClock, ScoreTracker

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    TERMINATED = "terminated"


class SessionEvent(str, Enum):
    SCORE_CHANGED = "score_changed"   # handler(score: int)
    TIME_CHANGED = "time_changed"     # handler(seconds_left: int)
    PASS_THROUGH = "pass_through"     # handler(obstacle: ObstacleView)
    TERMINATED = "terminated"         # handler(outcome: Outcome, final_score: int)


@dataclass(frozen=True)
class ObstacleView:
    x: float
    width: float
    gap_top: float
    gap_height: float
    passed: bool
    kind: ObstacleKind
    direction: Optional[int]

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def gap_bottom(self) -> float:
        return self.gap_top + self.gap_height

    @classmethod
    def of(cls, obs: Obstacle) -> "ObstacleView":
        return cls(obs.x, obs.width, obs.gap_top, obs.gap_height, obs.passed, obs.kind, obs.direction)


@dataclass(frozen=True)
class StepResult:
    tick: int
    outcome: Outcome
    score: Optional[int] = None       # set only when the displayed score went up
    time_left: Optional[int] = None   # TimeAttack only, throttled
    passed: int = 0                   # pass-through events this tick

    @property
    def terminal(self) -> bool:
        return self.outcome is not Outcome.CONTINUING


@dataclass(frozen=True)
class Snapshot:
    tick: int
    phase: Phase
    outcome: Outcome
    mode: GameMode
    seed: int
    player_x: float
    player_y: float
    velocity: float
    speed: float
    score: int
    raw_score: float
    time_left: Optional[float]
    obstacles: Tuple[ObstacleView, ...]
    trail: Tuple[Tuple[float, float], ...] = field(default=())


class Session:
    def __init__(self, config: Optional[SessionConfig] = None):
        self._handlers: DefaultDict[SessionEvent, List[Callable[..., Any]]] = defaultdict(list)
        self.reset(config or SessionConfig())

    # -------------------- Core API --------------------

    def reset(self, config: SessionConfig):
        """Validate `config` and rebuild all state. The RNG is reseeded every time."""
        self.config = config.validate()
        self.rng = SeededRNG(config.seed)
        self.player = Player.centered(config)
        self.obstacles: List[Obstacle] = []
        self.score = ScoreTracker()
        self.clock: Optional[CountdownClock] = (
            CountdownClock(config.time_limit, config.tick_rate) if config.timed else None
        )
        self.speed = config.base_speed
        self.tick = 0
        self.phase = Phase.IDLE
        self.outcome = Outcome.CONTINUING
        head_x = config.anchor_x
        self.trail: List[Tuple[float, float]] = [
            (head_x - i * TRAIL_SEED_SPACING, self.player.y)
            for i in reversed(range(TRAIL_SEED_POINTS))
        ]
        if config.mode is GameMode.PVP:
            logger.warning("pvp ghost replay is not implemented; running classic rules")
        logger.info("reset mode=%s seed=%d", config.mode.value, config.seed)

    def start(self):
        if self.phase is Phase.TERMINATED:
            raise InvalidStateError("session has terminated; call reset() first")
        self.phase = Phase.RUNNING

    def step(self, lift_held: bool) -> StepResult:
        """Advance exactly one tick."""
        if self.phase is Phase.TERMINATED:
            raise InvalidStateError(
                f"step() after termination ({self.outcome.value} at tick {self.tick}); call reset() first"
            )
        if self.phase is Phase.IDLE:
            self.start()

        cfg = self.config
        self.tick += 1
        self.speed += cfg.speed_increment

        # (a) timer runs first so expiry wins over anything else this tick
        time_left: Optional[int] = None
        if self.clock is not None:
            self.clock.tick()
            if self.clock.expired:
                self._emit(SessionEvent.TIME_CHANGED, 0)
                return self._terminate(Outcome.TIME_EXPIRED, time_left=0)
            if self.clock.hud_due:
                time_left = self.clock.hud_seconds
                self._emit(SessionEvent.TIME_CHANGED, time_left)

        # (b) physics
        self.player.update_physics(bool(lift_held), cfg)

        # (c) score + trail
        new_score: Optional[int] = None
        if self.score.advance(self.speed):
            new_score = self.score.displayed
            self._emit(SessionEvent.SCORE_CHANGED, new_score)
        self._advance_trail()

        # (d) spawn
        if should_spawn(self.obstacles, cfg):
            self.obstacles.append(spawn_obstacle(self.rng, self.score.displayed, cfg))

        # (e)+(f) scroll, oscillate, prune
        self.obstacles = scroll_obstacles(self.obstacles, self.speed, cfg.viewport_h)

        # (g) collisions
        if out_of_bounds(self.player.y, cfg.viewport_h):
            return self._terminate(Outcome.CRASHED_BOUNDARY, score=new_score, time_left=time_left)

        cleared = collect_passes(self.player.x, self.obstacles)
        if cleared:
            self.score.add_pass_bonus(len(cleared))
            for obs in cleared:
                self._emit(SessionEvent.PASS_THROUGH, ObstacleView.of(obs))

        outcome = check_collision(self.player.x, self.player.y, cfg.player_radius,
                                  self.obstacles, cfg.viewport_h)
        if outcome is not Outcome.CONTINUING:
            return self._terminate(outcome, score=new_score, time_left=time_left, passed=len(cleared))

        return StepResult(self.tick, Outcome.CONTINUING, new_score, time_left, len(cleared))

    # -------------------- Read access --------------------

    @property
    def terminated(self) -> bool:
        return self.phase is Phase.TERMINATED

    @property
    def time_left(self) -> Optional[float]:
        return self.clock.remaining if self.clock is not None else None

    def snapshot(self) -> Snapshot:
        return Snapshot(
            tick=self.tick,
            phase=self.phase,
            outcome=self.outcome,
            mode=self.config.mode,
            seed=self.config.seed,
            player_x=self.player.x,
            player_y=self.player.y,
            velocity=self.player.vy,
            speed=self.speed,
            score=self.score.displayed,
            raw_score=self.score.raw,
            time_left=self.time_left,
            obstacles=tuple(ObstacleView.of(o) for o in self.obstacles),
            trail=tuple(self.trail),
        )

    # -------------------- Events --------------------

    def subscribe(self, event: SessionEvent, handler: Callable[..., Any]):
        self._handlers[SessionEvent(event)].append(handler)

    def unsubscribe(self, event: SessionEvent, handler: Callable[..., Any]):
        self._handlers[SessionEvent(event)].remove(handler)

    def _emit(self, event: SessionEvent, *args):
        for handler in list(self._handlers[event]):
            handler(*args)

    # -------------------- Helpers --------------------

    def _advance_trail(self):
        speed = self.speed
        self.trail = [(x - speed, y) for (x, y) in self.trail if x - speed > 0]
        self.trail.append((self.player.x, self.player.y))

    def _terminate(self, outcome: Outcome, score: Optional[int] = None,
                   time_left: Optional[int] = None, passed: int = 0) -> StepResult:
        self.phase = Phase.TERMINATED
        self.outcome = outcome
        logger.info("terminated %s tick=%d score=%d", outcome.value, self.tick, self.score.displayed)
        self._emit(SessionEvent.TERMINATED, outcome, self.score.displayed)
        return StepResult(self.tick, outcome, score, time_left, passed)
