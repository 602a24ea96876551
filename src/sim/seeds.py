# src/sim/seeds.py
from __future__ import annotations
import time
from datetime import date
from typing import Optional

from .config import GameMode


def wall_clock_seed() -> int:
    """Milliseconds since the epoch. The RNG keeps the low 32 bits."""
    return int(time.time() * 1000)


def daily_seed(day: Optional[date] = None) -> int:
    """
    Shared seed for the daily challenge: year, month and day concatenated
    without zero-padding (2023-10-27 -> 20231027, 2024-01-05 -> 202415).
    Everyone playing on the same calendar day gets the same obstacle run.
    """
    day = day or date.today()
    return int(f"{day.year}{day.month}{day.day}")


def seed_for_mode(mode: GameMode, day: Optional[date] = None) -> int:
    if GameMode(mode) is GameMode.DAILY:
        return daily_seed(day)
    return wall_clock_seed()
