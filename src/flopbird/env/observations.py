# src/flopbird/env/observations.py
from __future__ import annotations
from typing import Optional
import numpy as np

from flopbird.game.config import HITBOX_HALF, JUMP_IMPULSE
from flopbird.game.sim import SimSnapshot, ObstacleView

OBS_SIZE = 6
MAX_VY = abs(JUMP_IMPULSE) * 2.0   # clamp for vy normalization
MAX_SPEED = 20.0                   # clamp for speed normalization

OBS_LOW = np.array([0.0, -1.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float32)
OBS_HIGH = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def next_obstacle(snap: SimSnapshot) -> Optional[ObstacleView]:
    """First obstacle whose right edge is still ahead of the actor's hit box."""
    actor_left = snap.actor_x - HITBOX_HALF
    ahead = [o for o in snap.obstacles if o.x + o.width >= actor_left]
    return min(ahead, key=lambda o: o.x) if ahead else None


def build_observation(snap: SimSnapshot) -> np.ndarray:
    """
    Returns a fixed (6,) float32 vector:
      [ y_norm, vy_norm, next_dx_norm, gap_top_norm, gap_bottom_norm, speed_norm ]
    - y_norm, gap_*_norm are screen-space y / world height, in [0,1]
    - vy_norm in [-1,1]
    - next_dx_norm: horizontal distance to the next obstacle's left edge / width;
      sentinel 1.0 with gap 0.0/1.0 (fully open) when no obstacle is ahead
    - speed_norm: live speed / MAX_SPEED
    """
    h = float(max(1.0, snap.bounds.height))
    w = float(max(1.0, snap.bounds.width))

    y_norm = _clamp01(snap.actor_y / h)
    vy = max(-MAX_VY, min(snap.actor_vy, MAX_VY))
    vy_norm = vy / MAX_VY

    nxt = next_obstacle(snap)
    if nxt is None:
        dx_norm, top_norm, bot_norm = 1.0, 0.0, 1.0
    else:
        dx_norm = _clamp01((nxt.x - snap.actor_x) / w)
        top_norm = _clamp01(nxt.gap_top / h)
        bot_norm = _clamp01(nxt.gap_bottom / h)

    speed_norm = _clamp01(snap.speed / MAX_SPEED)
    obs = np.asarray([y_norm, vy_norm, dx_norm, top_norm, bot_norm, speed_norm], dtype=np.float32)
    return np.clip(obs, OBS_LOW, OBS_HIGH)
