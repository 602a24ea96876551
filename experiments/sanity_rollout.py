# /experiments/sanity_rollout.py
"""
Sanity rollouts for RunnerEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis
- Saves per-episode action sequences (and optionally observations) for exact replay

Usage examples (from repo root):
  # Run both policies over 20 default seeds, frame_skip=4, save traces:
  python -m experiments.sanity_rollout --policies both --save-traces

  # Only heuristic in time attack, custom seeds, also save observations:
  python -m experiments.sanity_rollout --policies heuristic --mode time_attack --seeds 111,222,333 --save-traces --save-obs
"""

from __future__ import annotations
import argparse
import csv
import logging
from pathlib import Path
from typing import List, Tuple, Optional

import numpy as np

from src.env.runner_env import RunnerEnv
from src.sim.config import GameMode


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int, hold_prob: float = 0.45):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.random_sample() < hold_prob)
    return act

def tiny_heuristic_policy_init():
    """
    Very small rule: aim for the middle of the next gap (or the screen
    centre when nothing is ahead). Hold lift while below the target and
    not already rising fast.
    """
    def act(obs: np.ndarray) -> int:
        y, vy = obs[0], obs[1]
        gap_top, gap_bot = obs[4], obs[5]
        target = 0.5 * (gap_top + gap_bot)
        if y > target and vy > -0.3:
            return 1
        return 0
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    mode: GameMode,
                    frame_skip: int,
                    steps_limit: int,
                    save_traces: bool,
                    save_obs: bool,
                    out_dir: Path) -> Tuple[int, float, int, int, bool, bool, Optional[str]]:
    """
    Returns: (ep_len, ret_sum, score, ticks, terminated, truncated, outcome)
    Also writes traces to disk if requested.
    """
    env = RunnerEnv(frame_skip=frame_skip, mode=mode)

    if policy_name == "random":
        # Make action RNG seed a function of seed for determinism
        action_seed = 10_000 + seed
        policy = random_policy_init(action_seed)
    elif policy_name == "heuristic":
        action_seed = -1
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError(f"Unknown policy {policy_name!r}")

    actions: List[int] = []
    obs_list: List[np.ndarray] = []

    ret_sum = 0.0
    ep_len = 0
    term = trunc = False
    info = {}

    try:
        obs, info = env.reset(seed=seed)
        if save_obs:
            obs_list.append(obs.copy())

        for _ in range(steps_limit):
            a = policy(obs)
            actions.append(int(a))

            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1

            if save_obs:
                obs_list.append(obs.copy())

            if term or trunc:
                break
    finally:
        env.close()

    if save_traces:
        trace_dir = out_dir / "traces" / policy_name
        ensure_dir(trace_dir)
        np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))
        if save_obs:
            np.save(trace_dir / f"{seed}_obs.npy", np.asarray(obs_list, dtype=np.float32))

        # Tiny metadata sidecar so replay can rebuild the same env
        meta_lines = [
            f"seed={seed}",
            f"mode={mode.value}",
            f"frame_skip={frame_skip}",
            f"policy={policy_name}",
            f"action_rng_seed={action_seed}",
            f"steps_limit={steps_limit}",
        ]
        (trace_dir / f"{seed}_meta.txt").write_text("\n".join(meta_lines), encoding="utf-8")

    return (ep_len, ret_sum, int(info.get("score", 0)), int(info.get("tick", 0)),
            bool(term), bool(trunc), info.get("outcome"))


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--mode", type=str, default=GameMode.CLASSIC.value,
                    choices=[m.value for m in GameMode])
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Sim ticks per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv and traces/")
    ap.add_argument("--save-traces", action="store_true",
                    help="Save action sequences (and optional obs) for replay")
    ap.add_argument("--save-obs", action="store_true",
                    help="Also save observations per step (larger files)")
    ap.add_argument("--log-level", type=str, default="WARNING")
    args = ap.parse_args()
    logging.basicConfig(level=args.log_level.upper())

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)
    mode = GameMode(args.mode)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))  # 20 fixed eval seeds by default

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "env_name", "mode", "policy_name", "seed",
        "frame_skip", "decision_hz",
        "episode_len_decisions", "return_sum", "score", "ticks",
        "terminated", "truncated", "outcome",
    ]
    sim_fps = 60
    decision_hz = sim_fps / max(1, args.frame_skip)

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds "
          f"(mode={mode.value}, frame_skip={args.frame_skip}, decision_hz≈{decision_hz:.1f})")
    print(f"Writing summaries to {episodes_csv} and traces under {out_dir}/traces/")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, score, ticks, terminated, truncated, outcome = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                mode=mode,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
                save_traces=args.save_traces,
                save_obs=args.save_obs,
                out_dir=out_dir
            )

            row = [
                "RunnerEnv", mode.value, policy_name, seed,
                args.frame_skip, decision_hz,
                ep_len, f"{ret_sum:.1f}", score, ticks,
                int(terminated), int(truncated), (outcome or ""),
            ]
            write_episode_row(episodes_csv, header, row)

            print(f"[{policy_name}] seed={seed}  len={ep_len}  score={score}  ticks={ticks}  "
                  f"ret={ret_sum:.1f}  term={terminated} trunc={truncated}  outcome={outcome}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
