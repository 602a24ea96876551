# src/sim/player.py
from __future__ import annotations
from dataclasses import dataclass

from .config import SessionConfig


@dataclass
class Player:
    """
    The runner's body. x is the fixed horizontal anchor (the world scrolls
    left), y grows downward in screen space.
    """
    x: float
    y: float
    vy: float = 0.0

    def update_physics(self, lift_held: bool, config: SessionConfig):
        """One explicit Euler step: gravity, optional lift, clamp, integrate."""
        self.vy += config.gravity
        if lift_held:
            self.vy -= config.lift

        # Clamp vertical speed
        vmax = config.terminal_velocity
        if self.vy > vmax: self.vy = vmax
        if self.vy < -vmax: self.vy = -vmax

        self.y += self.vy

    @classmethod
    def centered(cls, config: SessionConfig) -> "Player":
        return cls(x=config.anchor_x, y=config.viewport_h / 2, vy=0.0)
