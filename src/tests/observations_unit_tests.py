"""
Unit checks for build_observation on hand-built snapshots.

Usage (from repo root):
  python -m pytest src/tests/observations_unit_tests.py
"""
from __future__ import annotations
from dataclasses import replace
import numpy as np
import pytest

from src.env.observations import build_observation, observation_bounds, OBS_DIM, EMPTY_BLOCK
from src.sim.config import SessionConfig
from src.sim.collision import Outcome
from src.sim.obstacles import ObstacleKind
from src.sim.session import ObstacleView, Phase, Snapshot, Session

CFG = SessionConfig(seed=0, viewport_w=1000, viewport_h=800, terminal_velocity=8.0, base_speed=3.0)


def make_snapshot(obstacles=(), y=400.0, vy=0.0, speed=3.0) -> Snapshot:
    return Snapshot(
        tick=1, phase=Phase.RUNNING, outcome=Outcome.CONTINUING, mode=CFG.mode, seed=0,
        player_x=CFG.anchor_x, player_y=y, velocity=vy, speed=speed,
        score=0, raw_score=0.0, time_left=None, obstacles=tuple(obstacles),
    )


def view(x, gap_top=200.0, gap_height=200.0, kind=ObstacleKind.STATIC, direction=None, passed=False):
    return ObstacleView(x, 50.0, gap_top, gap_height, passed, kind, direction)


def test_shape_dtype_and_bounds():
    obs = build_observation(make_snapshot(), CFG)
    low, high = observation_bounds()
    assert isinstance(obs, np.ndarray) and obs.dtype == np.float32 and obs.shape == (OBS_DIM,)
    assert np.all(obs >= low) and np.all(obs <= high)


def test_player_features():
    obs = build_observation(make_snapshot(y=200.0, vy=-4.0, speed=4.5), CFG)
    assert obs[0] == pytest.approx(0.25)
    assert obs[1] == pytest.approx(-0.5)
    assert obs[2] == pytest.approx(0.5)


def test_empty_lookahead_uses_sentinels():
    obs = build_observation(make_snapshot(), CFG)
    assert tuple(obs[3:7]) == EMPTY_BLOCK
    assert tuple(obs[7:11]) == EMPTY_BLOCK


def test_obstacles_behind_player_are_skipped():
    behind = view(CFG.anchor_x - 200)           # right edge well behind
    first = view(CFG.anchor_x + 100, gap_top=160.0, gap_height=240.0)
    second = view(CFG.anchor_x + 500, kind=ObstacleKind.OSCILLATING, direction=-1)
    obs = build_observation(make_snapshot([behind, first, second]), CFG)
    assert obs[3] == pytest.approx(0.1)
    assert obs[4] == pytest.approx(0.2)
    assert obs[5] == pytest.approx(0.5)
    assert obs[6] == 0.0
    assert obs[7] == pytest.approx(0.5)
    assert obs[10] == -1.0


def test_overlapping_obstacle_clamps_dx_to_zero():
    overlapping = view(CFG.anchor_x - 20)
    obs = build_observation(make_snapshot([overlapping]), CFG)
    assert obs[3] == 0.0


def test_live_session_observation_in_bounds():
    s = Session(replace(CFG, seed=11))
    low, high = observation_bounds()
    for t in range(200):
        res = s.step(t % 3 == 0)
        obs = build_observation(s.snapshot(), s.config)
        assert np.all(obs >= low) and np.all(obs <= high), f"tick {t}: {obs}"
        if res.terminal:
            break
