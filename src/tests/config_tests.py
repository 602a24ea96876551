"""
SessionConfig defaults and seed policy.

Usage (from repo root):
  python -m pytest src/tests/config_tests.py
"""
from __future__ import annotations
from datetime import date

import pytest

from src.sim.config import SessionConfig, GameMode, TIME_ATTACK_LIMIT_S
from src.sim.errors import ConfigError
from src.sim.seeds import daily_seed, seed_for_mode, wall_clock_seed
from src.sim.session import Session


def test_daily_seed_concatenates_without_padding():
    assert daily_seed(date(2023, 10, 27)) == 20231027
    assert daily_seed(date(2024, 1, 5)) == 202415


def test_daily_mode_uses_calendar_seed():
    d = date(2025, 3, 14)
    assert seed_for_mode(GameMode.DAILY, d) == daily_seed(d)


def test_other_modes_use_wall_clock():
    before = wall_clock_seed()
    s = seed_for_mode(GameMode.CLASSIC)
    assert s >= before


def test_for_mode_defaults():
    ta = SessionConfig.for_mode(GameMode.TIME_ATTACK, seed=5)
    assert ta.time_limit == TIME_ATTACK_LIMIT_S and ta.timed and ta.seed == 5
    classic = SessionConfig.for_mode("classic", seed=5)
    assert classic.mode is GameMode.CLASSIC and classic.time_limit is None
    assert classic.validate() is classic


def test_for_mode_overrides():
    cfg = SessionConfig.for_mode(GameMode.CLASSIC, seed=1, gravity=0.3, viewport_w=1000)
    assert cfg.gravity == 0.3
    assert cfg.anchor_x == 300.0


def test_for_mode_without_seed_applies_policy():
    cfg = SessionConfig.for_mode(GameMode.CLASSIC)
    assert cfg.seed > 0


def test_string_mode_is_coerced():
    cfg = SessionConfig(mode="classic", seed=1)
    assert cfg.mode is GameMode.CLASSIC
    Session(cfg).step(False)

    timed = SessionConfig(mode="time_attack", time_limit=2.0, seed=1)
    assert timed.timed
    assert Session(timed).time_left == 2.0


def test_string_time_attack_without_limit_is_rejected():
    with pytest.raises(ConfigError):
        SessionConfig(mode="time_attack", seed=1).validate()


def test_unknown_mode_is_a_config_error():
    with pytest.raises(ConfigError):
        SessionConfig(mode="zen")
