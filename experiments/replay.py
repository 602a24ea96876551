# experiments/replay.py
"""
Replay tool for RunnerEnv: quick command cheat sheet

# Typical usage (run from REPO ROOT so `src/...` imports work)

# Replay a HEURISTIC episode by seed (uses actions at experiments/runs/traces/heuristic/<seed>_actions.npy)
python -m experiments.replay --policy heuristic --seed 105

# Replay by pointing directly to a specific actions file (bypasses --policy/--seed lookup)
python -m experiments.replay --trace experiments/runs/traces/heuristic/105_actions.npy --frame-skip 4

# Slow the display to ~decision rate (~15 fps) for readability
python -m experiments.replay --policy heuristic --seed 105 --slow

# Controls during replay
SPACE = pause/resume
R     = restart episode
ESC   = quit

# Notes
- Deterministic: given the same seed, mode, frame_skip and action sequence, replay matches the original run.
- If you pass --trace, the script does not read meta; supply --frame-skip / --mode if they differ from the defaults.
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Optional, List

import numpy as np
import pygame

from src.env.runner_env import RunnerEnv
from src.sim.config import GameMode, COLOR_FG

DEFAULT_OUT_DIR = "experiments/runs"


def _find_trace(out_dir: Path, policy: str, seed: int) -> Path:
    p = out_dir / "traces" / policy / f"{seed}_actions.npy"
    if not p.exists():
        raise FileNotFoundError(f"Trace not found: {p}")
    return p

def _read_meta(out_dir: Path, policy: str, seed: int) -> dict:
    meta_path = out_dir / "traces" / policy / f"{seed}_meta.txt"
    meta = {}
    if meta_path.exists():
        for line in meta_path.read_text(encoding="utf-8").splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                meta[k.strip()] = v.strip()
    return meta

def _draw_overlay(env: RunnerEnv, step_idx: int, action: Optional[int]):
    surf = pygame.display.get_surface()
    if surf is None or env.session is None:
        return
    font = pygame.font.SysFont("jetbrainsmono", 16)
    snap = env.session.snapshot()

    lines: List[str] = [
        f"Step={step_idx}  Action={'HOLD' if action == 1 else ('RELEASE' if action == 0 else '-')}",
        f"Tick={snap.tick}  Speed={snap.speed:.3f}  Outcome={snap.outcome.value}",
        f"y={snap.player_y:.1f}  vy={snap.velocity:+.2f}  raw={snap.raw_score:.2f}",
    ]

    panel_w = 360
    panel_h = 20 * (len(lines) + 1)
    panel = pygame.Surface((panel_w, panel_h), pygame.SRCALPHA)
    panel.fill((10, 20, 35, 160))
    surf.blit(panel, (12, 40))

    y0 = 46
    for i, txt in enumerate(lines):
        surf.blit(font.render(txt, True, COLOR_FG), (20, y0 + i*20))

    pygame.display.flip()

def replay_episode(seed: int, actions: np.ndarray, frame_skip: int, mode: GameMode, slow: bool = False):
    """
    Replays an episode deterministically using RunnerEnv with on-screen overlay.
    Controls:
      SPACE: pause/resume   R: restart episode    ESC: quit
    """
    env = RunnerEnv(render_mode="human", frame_skip=frame_skip, mode=mode)
    env.reset(seed=seed)
    env.render()

    paused = False
    step_idx = 0
    action: Optional[int] = None
    clock = pygame.time.Clock()

    try:
        running = True
        while running and step_idx < len(actions):
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_r:
                        env.reset(seed=seed)
                        step_idx = 0
                        paused = False

            if paused:
                env.render()
                _draw_overlay(env, step_idx, action=None)
                clock.tick(60)
                continue

            action = int(actions[step_idx])
            _, _, term, trunc, _ = env.step(action)
            _draw_overlay(env, step_idx, action)
            step_idx += 1

            # Optional slow mode: cap to ~15 fps (decision rate) for readability
            clock.tick(15 if slow else 60)

            if term or trunc:
                # Final frame is already drawn; wait a moment
                pygame.time.delay(600)
                break
    finally:
        env.close()

def main():
    ap = argparse.ArgumentParser(description="Replay a recorded RunnerEnv episode with overlay.")
    ap.add_argument("--seed", type=int, help="Episode seed")
    ap.add_argument("--policy", type=str, default="random",
                    help="Trace subfolder name, e.g. random / heuristic / rl")
    ap.add_argument("--trace", type=str, default="",
                    help="Optional explicit path to a .npy action file")
    ap.add_argument("--out-dir", type=str, default=DEFAULT_OUT_DIR,
                    help="Base directory where experiments/runs live")
    ap.add_argument("--frame-skip", type=int, default=-1,
                    help="Override frame_skip. If <0, use meta or default=4")
    ap.add_argument("--mode", type=str, default="",
                    help="Override mode. If empty, use meta or classic")
    ap.add_argument("--slow", action="store_true", help="Slow display (~15 fps) for readability")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    meta = {}

    if args.trace:
        trace_path = Path(args.trace)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")
        if args.seed is None:
            stem = trace_path.stem.split("_")[0]
            if not stem.isdigit():
                raise SystemExit(f"Cannot infer seed from {trace_path.name}; pass --seed")
            args.seed = int(stem)
    else:
        if args.seed is None:
            raise SystemExit("Please provide --seed or --trace")
        trace_path = _find_trace(out_dir, args.policy, args.seed)
        meta = _read_meta(out_dir, args.policy, args.seed)

    actions = np.load(trace_path)
    if actions.ndim != 1:
        raise ValueError(f"Expected 1D action array, got shape {actions.shape}")

    fs = args.frame_skip if args.frame_skip >= 0 else int(meta.get("frame_skip", 4))
    mode = GameMode(args.mode or meta.get("mode", GameMode.CLASSIC.value))

    print(f"Replaying seed={args.seed}  policy={args.policy}  mode={mode.value}  steps={len(actions)}  frame_skip={fs}")
    print("Controls: SPACE pause/resume | R restart | ESC quit")

    replay_episode(seed=args.seed, actions=actions, frame_skip=fs, mode=mode, slow=args.slow)

if __name__ == "__main__":
    main()
