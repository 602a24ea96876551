"""
Player integration, collision rules and score bookkeeping.

Usage (from repo root):
  python -m pytest src/tests/physics_tests.py
"""
from __future__ import annotations
import random
import pytest

from src.sim.config import SessionConfig
from src.sim.player import Player
from src.sim.obstacles import Obstacle
from src.sim.collision import Outcome, check_collision, collect_passes, overlaps_horizontally
from src.sim.scoring import ScoreTracker, CountdownClock

CFG = SessionConfig(gravity=0.3, lift=0.5, terminal_velocity=8.0)
ANCHOR = 384.0
R = 4.0


# -------------------- Player --------------------

def test_single_tick_no_input():
    p = Player(x=ANCHOR, y=400.0)
    p.update_physics(False, CFG)
    assert p.vy == pytest.approx(0.3)
    assert p.y == pytest.approx(400.3)


def test_lift_opposes_gravity():
    p = Player(x=ANCHOR, y=400.0)
    p.update_physics(True, CFG)
    assert p.vy == pytest.approx(-0.2)
    assert p.y == pytest.approx(399.8)


def test_velocity_always_clamped():
    rng = random.Random(3)
    p = Player(x=ANCHOR, y=0.0)
    for _ in range(2000):
        p.update_physics(rng.random() < 0.5, CFG)
        assert abs(p.vy) <= CFG.terminal_velocity
    for held in (True, False):
        for _ in range(200):
            p.update_physics(held, CFG)
            assert abs(p.vy) <= CFG.terminal_velocity
        assert abs(p.vy) == pytest.approx(CFG.terminal_velocity)


def test_centered_player():
    cfg = SessionConfig(viewport_w=1000, viewport_h=600)
    p = Player.centered(cfg)
    assert (p.x, p.y, p.vy) == (300.0, 300.0, 0.0)


# -------------------- Collision --------------------

def _column(x: float, gap_top: float = 300.0, gap_height: float = 200.0) -> Obstacle:
    return Obstacle(x=x, width=50.0, gap_top=gap_top, gap_height=gap_height)


def test_boundary_crash_both_edges():
    assert check_collision(ANCHOR, -0.01, R, [], 800) is Outcome.CRASHED_BOUNDARY
    assert check_collision(ANCHOR, 800.01, R, [], 800) is Outcome.CRASHED_BOUNDARY
    assert check_collision(ANCHOR, 0.0, R, [], 800) is Outcome.CONTINUING
    assert check_collision(ANCHOR, 800.0, R, [], 800) is Outcome.CONTINUING


def test_boundary_wins_over_obstacle():
    assert check_collision(ANCHOR, 900.0, R, [_column(ANCHOR - 10)], 800) is Outcome.CRASHED_BOUNDARY


def test_exactly_on_gap_edge_is_a_crash():
    col = _column(ANCHOR - 10, gap_top=400.0)
    assert check_collision(ANCHOR, 400.0, R, [col], 800) is Outcome.CRASHED_OBSTACLE
    assert check_collision(ANCHOR, 600.0, R, [col], 800) is Outcome.CRASHED_OBSTACLE
    assert check_collision(ANCHOR, 400.001, R, [col], 800) is Outcome.CONTINUING
    assert check_collision(ANCHOR, 599.999, R, [col], 800) is Outcome.CONTINUING


def test_horizontal_overlap_is_open_interval():
    assert not overlaps_horizontally(ANCHOR, R, _column(ANCHOR + R))          # touching the leading edge
    assert overlaps_horizontally(ANCHOR, R, _column(ANCHOR + R - 0.01))
    assert not overlaps_horizontally(ANCHOR, R, _column(ANCHOR - R - 50.0))   # touching the trailing edge
    assert overlaps_horizontally(ANCHOR, R, _column(ANCHOR - R - 49.99))


def test_non_overlapping_column_is_ignored():
    col = _column(ANCHOR + 100, gap_top=700.0, gap_height=50.0)
    assert check_collision(ANCHOR, 100.0, R, [col], 800) is Outcome.CONTINUING


def test_every_overlapping_obstacle_is_checked():
    safe = _column(ANCHOR - 20, gap_top=300.0)
    unsafe = _column(ANCHOR - 10, gap_top=500.0)
    assert check_collision(ANCHOR, 400.0, R, [safe, unsafe], 800) is Outcome.CRASHED_OBSTACLE


def test_pass_through_flags_once():
    col = _column(ANCHOR - 50.5)   # right edge at ANCHOR - 0.5
    assert collect_passes(ANCHOR, [col]) == [col]
    assert col.passed
    assert collect_passes(ANCHOR, [col]) == []


def test_no_pass_until_trailing_edge_cleared():
    col = _column(ANCHOR - 50.0)   # right edge exactly at the anchor
    assert collect_passes(ANCHOR, [col]) == []
    assert not col.passed


# -------------------- Scoring --------------------

def test_score_rate_and_floor():
    s = ScoreTracker()
    assert not s.advance(3.502)
    assert s.raw == pytest.approx(0.1751)
    assert s.displayed == 0
    for _ in range(5):
        s.advance(3.502)
    assert s.displayed == 1


def test_bonus_lands_on_next_recompute():
    s = ScoreTracker()
    s.add_pass_bonus()
    assert s.displayed == 0
    assert s.advance(2.0)
    assert s.displayed == 50


def test_displayed_never_goes_backwards():
    s = ScoreTracker(raw=120.7, displayed=120)
    s.raw = 10.0   # external adjustment downwards
    assert not s.advance(1.0)
    assert s.displayed == 120


def test_countdown_hits_zero_on_exact_tick():
    c = CountdownClock(limit=2.0, tick_rate=60)
    for _ in range(119):
        c.tick()
        assert not c.expired
    c.tick()
    assert c.expired and c.remaining == 0.0 and c.hud_seconds == 0


def test_countdown_hud_cadence():
    c = CountdownClock(limit=2.0, tick_rate=60)
    due = []
    for _ in range(60):
        c.tick()
        if c.hud_due:
            due.append((c.ticks, c.hud_seconds))
    assert due == [(10, 2), (20, 2), (30, 2), (40, 2), (50, 2), (60, 1)]
