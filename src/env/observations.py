# src/env/observations.py
from __future__ import annotations
from typing import List, Optional, Tuple
import numpy as np

from src.sim.session import ObstacleView, Snapshot
from src.sim.config import SessionConfig

# How many obstacles ahead of the player are described
LOOKAHEAD = 2
OBS_DIM = 3 + 4 * LOOKAHEAD
# Sentinel block for a missing obstacle: far away, gap spanning the whole screen, static
EMPTY_BLOCK: Tuple[float, float, float, float] = (1.0, 0.0, 1.0, 0.0)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def _clamp11(x: float) -> float:
    return -1.0 if x < -1.0 else (1.0 if x > 1.0 else x)


def _upcoming(snap: Snapshot, radius: float) -> List[ObstacleView]:
    """Obstacles whose right edge is still ahead of the player's back edge, nearest first."""
    back = snap.player_x - radius
    return [o for o in snap.obstacles if o.right > back][:LOOKAHEAD]


def observation_bounds() -> Tuple[np.ndarray, np.ndarray]:
    low = np.array([0.0, -1.0, 0.0] + [0.0, 0.0, 0.0, -1.0] * LOOKAHEAD, dtype=np.float32)
    high = np.array([1.0, 1.0, 1.0] + [1.0, 1.0, 1.0, 1.0] * LOOKAHEAD, dtype=np.float32)
    return low, high


def build_observation(snap: Snapshot, config: SessionConfig,
                      speed_span: Optional[float] = None) -> np.ndarray:
    """
    Returns a fixed (11,) float32 vector:
      [ y_norm, vy_norm, speed_norm,
        dx@1, gap_top@1, gap_bottom@1, dir@1,
        dx@2, gap_top@2, gap_bottom@2, dir@2 ]
    - y_norm, gap_top, gap_bottom are screen fractions in [0,1]
    - vy_norm in [-1,1] relative to terminal velocity
    - speed_norm: speed gained over the base speed, saturating at +base_speed
    - dx: obstacle left edge minus player x, as a fraction of viewport width
    - dir: -1/+1 for oscillating gaps, 0 for static
    """
    h = float(config.viewport_h)
    span = speed_span if speed_span is not None else config.base_speed
    feats: List[float] = [
        _clamp01(snap.player_y / h),
        _clamp11(snap.velocity / config.terminal_velocity),
        _clamp01((snap.speed - config.base_speed) / max(1e-6, span)),
    ]

    ahead = _upcoming(snap, config.player_radius)
    for i in range(LOOKAHEAD):
        if i >= len(ahead):
            feats.extend(EMPTY_BLOCK)
            continue
        o = ahead[i]
        feats.extend([
            _clamp01((o.x - snap.player_x) / float(config.viewport_w)),
            _clamp01(o.gap_top / h),
            _clamp01(o.gap_bottom / h),
            float(o.direction or 0),
        ])

    return np.asarray(feats, dtype=np.float32)
