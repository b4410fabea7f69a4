# src/flopbird/game/difficulty.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple
from .config import SPEED_SCORE_FACTOR
from .errors import ConfigError


@dataclass(frozen=True)
class DifficultyProfile:
    id: int
    name: str
    gap_height: float
    base_speed: float

    def live_speed(self, score: int) -> float:
        """Obstacle travel speed (px/frame). Grows with the current score."""
        return self.base_speed + score * SPEED_SCORE_FACTOR


# Ordered easiest -> hardest: gap shrinks, speed grows.
PROFILES: Tuple[DifficultyProfile, ...] = (
    DifficultyProfile(1, "Lvl 01", 250, 3),
    DifficultyProfile(2, "Lvl 02", 220, 4),
    DifficultyProfile(3, "Lvl 03", 190, 5),
    DifficultyProfile(4, "Lvl 04", 170, 6),
    DifficultyProfile(5, "Lvl 05", 150, 7),
    DifficultyProfile(6, "MAX", 130, 9),
)
_BY_ID: Dict[int, DifficultyProfile] = {p.id: p for p in PROFILES}
DEFAULT_PROFILE = PROFILES[0]


def get_profile(profile_id: int) -> DifficultyProfile:
    try:
        return _BY_ID[int(profile_id)]
    except (KeyError, ValueError, TypeError):
        raise ConfigError(f"Unknown difficulty level: {profile_id!r}") from None
