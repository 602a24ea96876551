"""
Obstacle generation and oscillation.

Usage (from repo root):
  python -m pytest src/tests/obstacles_tests.py
"""
from __future__ import annotations
import pytest

from src.sim.config import SessionConfig, MIN_GAP_HEIGHT, PRUNE_X
from src.sim.obstacles import (
    Obstacle, OscillatingObstacle, ObstacleKind,
    gap_height_for, spawn_obstacle, should_spawn, scroll_obstacles,
)
from src.sim.rng import SeededRNG, CosmeticRNG

CFG = SessionConfig(gap_size=190, viewport_w=1280, viewport_h=800, seed=1)


def test_gap_never_below_floor():
    for gap in (130, 150, 190, 200, 400):
        for score in range(0, 200_000, 37):
            assert gap_height_for(score, gap) >= MIN_GAP_HEIGHT, f"gap={gap} score={score}"


def test_gap_shrinks_one_px_per_fifty_points_up_to_sixty():
    assert gap_height_for(0, 190) == 190
    assert gap_height_for(49, 190) == 190
    assert gap_height_for(50, 190) == 189
    assert gap_height_for(1000, 200) == 180
    assert gap_height_for(10_000, 200) == 140   # capped at -60
    assert gap_height_for(10_000, 190) == 130   # floor


def test_first_obstacle_for_seed_1():
    obs = spawn_obstacle(SeededRNG(1), 0, CFG)
    expected_top = (2693262067 / 4294967296) * (800 - 190 - 50 - 50) + 50
    assert obs.gap_top == pytest.approx(expected_top)
    assert obs.gap_height == 190
    assert obs.kind is ObstacleKind.STATIC      # second draw is ~0.003
    assert obs.direction is None
    assert obs.x == 1280 + 50
    assert obs.width == CFG.obstacle_width
    assert not obs.passed


def test_spawn_uses_exactly_three_draws():
    rng = SeededRNG(1)
    spawn_obstacle(rng, 0, CFG)
    assert rng.next() == 4213581821  # fourth word of the seed-1 stream


def test_direction_comes_from_third_draw():
    for seed in range(1, 500):
        probe = SeededRNG(seed)
        _, kind_draw, dir_draw = probe.next_float(), probe.next_float(), probe.next_float()
        if kind_draw > 0.7:
            obs = spawn_obstacle(SeededRNG(seed), 0, CFG)
            assert isinstance(obs, OscillatingObstacle)
            assert obs.kind is ObstacleKind.OSCILLATING
            assert obs.direction == (1 if dir_draw > 0.5 else -1)
            return
    pytest.fail("no oscillating obstacle in the first 500 seeds")


def test_gap_stays_inside_margins():
    rng = SeededRNG(99)
    for score in range(0, 6000, 50):
        obs = spawn_obstacle(rng, score, CFG)
        assert 50 <= obs.gap_top <= 800 - obs.gap_height - 50


def test_spawn_rejects_cosmetic_rng():
    with pytest.raises(TypeError):
        spawn_obstacle(CosmeticRNG(), 0, CFG)


def test_oscillation_flips_at_top_margin():
    o = OscillatingObstacle(x=0, width=50, gap_top=51, gap_height=200, moving_direction=-1)
    o.update_movement(800)
    assert o.gap_top == 49 and o.direction == 1
    o.update_movement(800)
    assert o.gap_top == 51 and o.direction == 1


def test_oscillation_flips_at_bottom_margin():
    o = OscillatingObstacle(x=0, width=50, gap_top=549, gap_height=200, moving_direction=1)
    o.update_movement(800)
    assert o.gap_top == 551 and o.direction == -1


def test_static_obstacle_never_moves_its_gap():
    o = Obstacle(x=0, width=50, gap_top=300, gap_height=200)
    for _ in range(100):
        o.update_movement(800)
    assert o.gap_top == 300


def test_should_spawn_rules():
    assert should_spawn([], CFG)
    near = Obstacle(x=1000, width=50, gap_top=300, gap_height=200)
    assert not should_spawn([near], CFG)            # 1280 - 1000 = 280 <= 350
    far = Obstacle(x=929, width=50, gap_top=300, gap_height=200)
    assert should_spawn([near, far], CFG)           # only the newest counts


def test_scroll_and_prune():
    keep = Obstacle(x=-140, width=50, gap_top=300, gap_height=200)
    drop = Obstacle(x=-150, width=50, gap_top=300, gap_height=200)
    out = scroll_obstacles([drop, keep], 5.0, 800)
    assert out == [keep]
    assert keep.right > PRUNE_X
