# src/flopbird/env/flop_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import random
import numpy as np
import gymnasium as gym
import pygame

from flopbird.game.config import WIDTH, HEIGHT, FPS
from flopbird.game.difficulty import DifficultyProfile, DEFAULT_PROFILE, get_profile
from flopbird.game.level import WorldBounds
from flopbird.game.render import CHARACTERS, draw_frame
from flopbird.game.score import MemoryBestScoreStore
from flopbird.game.sim import Simulation, Command, RunState, SimSnapshot
from flopbird.env.observations import build_observation, OBS_LOW, OBS_HIGH


class FlopEnv(gym.Env):
    """
    FLOP_BIRD Gymnasium environment (vector observations).
    - One sim step per frame, as in the game (frame-coupled physics).
    - Agent acts every `frame_skip` frames (default 4).
    - Observation: shape (6,), float32 (see observations.build_observation).
    Actions: 0 = NOOP, 1 = JUMP.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    ALIVE_REWARD = 0.1
    PASS_REWARD = 1.0
    DEATH_REWARD = -1.0

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 level: DifficultyProfile | int = DEFAULT_PROFILE,
                 width: int = WIDTH,
                 height: int = HEIGHT,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.profile = level if isinstance(level, DifficultyProfile) else get_profile(level)
        self.bounds = WorldBounds(width, height).validate()

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(2)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.sim: Optional[Simulation] = None
        self.snap: Optional[SimSnapshot] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.font = None
        self.big = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # The layout seed is drawn from np_random so reset(seed=s) is reproducible
        self.current_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.sim = Simulation(
            profile=self.profile,
            bounds_provider=lambda: self.bounds,
            store=MemoryBestScoreStore(),
            rng=random.Random(self.current_seed),
        )
        self.sim.handle(Command.START)
        self.snap = self.sim.snapshot()
        self.timestep = 0

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), self._info()

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.sim is not None, "Call reset() first."

        if int(action) == 1:
            self.sim.post(Command.JUMP)

        score_before = self.sim.score.current
        for _ in range(self.frame_skip):
            self.snap = self.sim.step()
            if self.snap.state is not RunState.RUNNING:
                break

        terminated = self.snap.state is RunState.ENDED
        passed = self.snap.score - score_before
        reward = self.PASS_REWARD * passed
        reward += self.DEATH_REWARD if terminated else self.ALIVE_REWARD

        self.timestep += 1
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = not terminated

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), float(reward), terminated, truncated, self._info()

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.snap is not None
        return build_observation(self.snap)

    def _info(self) -> Dict[str, Any]:
        assert self.snap is not None
        return {
            "seed": self.current_seed,
            "score": self.snap.score,
            "frame": self.snap.frame,
            "timestep": self.timestep,
            "speed": self.snap.speed,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.snap is None:
            return None

        if self.screen is None:
            pygame.init()
            size = (int(self.bounds.width), int(self.bounds.height))
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("FLOP_BIRD - Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface(size)
            self.font = pygame.font.SysFont("jetbrainsmono", 18)
            self.big = pygame.font.SysFont("jetbrainsmono", 64, bold=True)

        draw_frame(self.screen, self.snap, CHARACTERS[0], self.font, self.big)

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", FPS))
            return None

        # (H, W, 3) uint8
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
