# src/env/runner_env.py
from __future__ import annotations
from dataclasses import replace
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from src.sim.config import SessionConfig, GameMode
from src.sim.collision import Outcome
from src.sim.session import Session
from src.env.observations import build_observation, observation_bounds
from src.game.render import Effects, draw_session, draw_hud


class RunnerEnv(gym.Env):
    """
    Gap runner Gymnasium environment (vector observations).
    - One sim tick per frame at the config's tick rate (60 Hz by default).
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Action is held for the whole decision: 0 = release, 1 = hold lift.
    - Observation: shape (11,), float32 (see build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 mode: GameMode = GameMode.CLASSIC,
                 config: Optional[SessionConfig] = None,
                 time_limit_seconds: Optional[float] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        # Template config; the seed is replaced on every reset
        self.base_config = (config or SessionConfig.for_mode(mode, seed=0)).validate()

        # Optional built-in truncation (you can also use a TimeLimit wrapper)
        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.base_config.tick_rate * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        self.action_space = gym.spaces.Discrete(2)
        low, high = observation_bounds()
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[Session] = None
        self.timestep: int = 0                   # number of *decision* steps elapsed
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.font = None
        self.fx: Optional[Effects] = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # Seeding policy:
        # - an explicit seed goes straight to the session for strict reproducibility
        # - otherwise draw one from np_random so gym-level seeding still reproduces runs
        if seed is not None:
            sim_seed = int(seed)
        else:
            sim_seed = int(self.np_random.integers(0, 2**32))

        self.session = Session(replace(self.base_config, seed=sim_seed))
        self.timestep = 0
        self.current_seed = sim_seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0, "tick": 0}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "call reset() before step()"

        hold = bool(action == 1)
        result = None
        passed = 0
        for _ in range(self.frame_skip):
            result = self.session.step(hold)
            passed += result.passed
            if result.terminal:
                break

        crashed = result.outcome.crashed
        reward = -1.0 if crashed else 1.0

        self.timestep += 1
        terminated = crashed
        truncated = result.outcome is Outcome.TIME_EXPIRED
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {
            "score": self.session.score.displayed,
            "tick": self.session.tick,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "outcome": result.outcome.value,
            "passed": passed,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.session is not None
        return build_observation(self.session.snapshot(), self.session.config)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return None

        cfg = self.session.config
        size = (int(cfg.viewport_w), int(cfg.viewport_h))
        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("Gap Runner - Gym Env")
            else:
                self.screen = pygame.Surface(size)
            self.clock = pygame.time.Clock()
            self.font = pygame.font.SysFont("jetbrainsmono", 18)
            self.fx = Effects(*size)

        snap = self.session.snapshot()
        self.fx.update(scrolling=not self.session.terminated)
        draw_session(self.screen, snap, self.fx)
        draw_hud(self.screen, self.font, snap)

        if self.render_mode == "human":
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        # Return an (H, W, 3) uint8 array
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
