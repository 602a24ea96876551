# src/game/render.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import List, Tuple
import pygame

from src.sim.config import (
    COLOR_BG, COLOR_PLAYER, COLOR_DAILY, COLOR_OBSTACLE, COLOR_OBSTACLE_BORDER,
    COLOR_FG, COLOR_STAR, GameMode,
)
from src.sim.rng import CosmeticRNG
from src.sim.session import Snapshot

PARTICLES_PER_CRASH = 20
PARTICLE_DECAY = 0.02
STAR_COUNT = 50


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: float = 1.0
    color: Tuple[int, int, int] = COLOR_PLAYER


@dataclass
class Star:
    x: float
    y: float
    size: float
    speed: float


@dataclass
class Effects:
    """
    Purely visual state: starfield and crash particles.
    Uses CosmeticRNG only; nothing here is read back by the simulation.
    """
    width: int
    height: int
    rng: CosmeticRNG = field(default_factory=CosmeticRNG)
    stars: List[Star] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)

    def __post_init__(self):
        if not self.stars:
            self.stars = [
                Star(x=self.rng.uniform(0, self.width), y=self.rng.uniform(0, self.height),
                     size=self.rng.uniform(0.5, 2.5), speed=self.rng.uniform(0.1, 0.6))
                for _ in range(STAR_COUNT)
            ]

    def explode(self, x: float, y: float):
        for i in range(PARTICLES_PER_CRASH):
            angle = self.rng.uniform(0.0, 2.0 * math.pi)
            speed = self.rng.uniform(2.0, 7.0)
            self.particles.append(Particle(
                x=x, y=y, vx=math.cos(angle) * speed, vy=math.sin(angle) * speed,
                color=COLOR_PLAYER if i % 2 == 0 else COLOR_DAILY,
            ))

    def update(self, scrolling: bool):
        if scrolling:
            for s in self.stars:
                s.x -= s.speed
                if s.x < 0:
                    s.x = self.width
        for p in self.particles:
            p.x += p.vx
            p.y += p.vy
            p.life -= PARTICLE_DECAY
        self.particles = [p for p in self.particles if p.life > 0]


def draw_session(surf: pygame.Surface, snap: Snapshot, fx: Effects | None = None):
    """Draw one frame from a snapshot. Never touches the session."""
    w, h = surf.get_size()
    surf.fill(COLOR_BG)

    if fx is not None:
        for s in fx.stars:
            pygame.draw.circle(surf, COLOR_STAR, (int(s.x), int(s.y)), max(1, int(s.size)))

    for o in snap.obstacles:
        top = pygame.Rect(int(o.x), 0, int(o.width), int(o.gap_top))
        bottom_y = int(o.gap_bottom)
        bottom = pygame.Rect(int(o.x), bottom_y, int(o.width), max(0, h - bottom_y))
        for r in (top, bottom):
            pygame.draw.rect(surf, COLOR_OBSTACLE, r)
            pygame.draw.rect(surf, COLOR_OBSTACLE_BORDER, r, width=2)

    color = COLOR_DAILY if snap.mode is GameMode.DAILY else COLOR_PLAYER
    if len(snap.trail) > 1:
        pts = [(int(x), int(y)) for (x, y) in snap.trail]
        pygame.draw.lines(surf, color, False, pts, 4)
    pygame.draw.circle(surf, color, (int(snap.player_x), int(snap.player_y)), 5)

    if fx is not None:
        for p in fx.particles:
            c = tuple(int(ch * max(0.0, p.life)) for ch in p.color)
            pygame.draw.circle(surf, c, (int(p.x), int(p.y)), 3)


def draw_hud(surf: pygame.Surface, font: pygame.font.Font, snap: Snapshot, best: int | None = None):
    hud = f"Score: {snap.score}   Seed: {snap.seed}   Mode: {snap.mode.value}"
    if snap.time_left is not None:
        hud += f"   Time: {math.ceil(snap.time_left)}"
    if best is not None:
        hud += f"   Best: {best}"
    surf.blit(font.render(hud, True, COLOR_FG), (12, 10))
