# src/flopbird/game/player.py
from __future__ import annotations
from dataclasses import dataclass
from .config import GRAVITY, JUMP_IMPULSE, PLAYER_HALF_W, PLAYER_HALF_H, HITBOX_HALF


@dataclass
class Actor:
    """
    The controlled body. Horizontal position is fixed by the world, so only
    the vertical state lives here:
    - y  is the CENTRE of the body (screen coords, +y down)
    - vy is in px per frame (+ = falling)
    """
    y: float
    vy: float = 0.0
    half_width: float = PLAYER_HALF_W
    half_height: float = PLAYER_HALF_H

    def reset(self, y: float):
        self.y = float(y)
        self.vy = 0.0

    def jump(self):
        """Overwrite vy with the upward kick. No cooldown, no double-jump rule."""
        self.vy = JUMP_IMPULSE

    def update_physics(self):
        """One frame of gravity. Frame-coupled: one GRAVITY per rendered frame."""
        self.vy += GRAVITY
        self.y += self.vy

    def pin(self, y: float):
        """Hold the actor still at y (grace window)."""
        self.y = float(y)
        self.vy = 0.0

    def hitbox(self, x: float) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) of the box used against obstacles."""
        return (x - HITBOX_HALF, self.y - HITBOX_HALF, x + HITBOX_HALF, self.y + HITBOX_HALF)

    @property
    def top(self) -> float:
        return self.y - self.half_height

    @property
    def bottom(self) -> float:
        return self.y + self.half_height
