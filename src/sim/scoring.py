# src/sim/scoring.py
from __future__ import annotations
import math
from dataclasses import dataclass

from .config import SCORE_PER_SPEED, PASS_BONUS, TIME_HUD_EVERY_TICKS


@dataclass
class ScoreTracker:
    """
    raw      : continuous accumulator (distance + bonuses)
    displayed: floor(raw), but only ever raised, so it never goes backwards
    """
    raw: float = 0.0
    displayed: int = 0

    def advance(self, speed: float) -> bool:
        """Add this tick's distance and refresh the displayed score. True if it went up."""
        self.raw += speed * SCORE_PER_SPEED
        shown = math.floor(self.raw)
        if shown > self.displayed:
            self.displayed = shown
            return True
        return False

    def add_pass_bonus(self, count: int = 1):
        self.raw += PASS_BONUS * count


@dataclass
class CountdownClock:
    """TimeAttack timer, derived from the tick count so it hits zero on an exact tick."""
    limit: float
    tick_rate: int
    ticks: int = 0

    def tick(self):
        self.ticks += 1

    @property
    def remaining(self) -> float:
        return max(0.0, self.limit - self.ticks / self.tick_rate)

    @property
    def expired(self) -> bool:
        return self.remaining <= 0.0

    @property
    def hud_due(self) -> bool:
        return self.ticks % TIME_HUD_EVERY_TICKS == 0

    @property
    def hud_seconds(self) -> int:
        return math.ceil(self.remaining)
