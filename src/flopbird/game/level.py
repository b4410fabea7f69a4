# src/flopbird/game/level.py
from __future__ import annotations
import random
import math
import logging
from dataclasses import dataclass
from typing import List, Tuple, Optional, Iterator
from .config import (
    OBSTACLE_WIDTH, PIPE_SPACING, MIN_OBSTACLE_EXTENT, GROUND_HEIGHT, PLAYER_X_RATIO
)
from .errors import ConfigError, InvalidBoundsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorldBounds:
    width: float
    height: float

    def validate(self) -> "WorldBounds":
        if not (self.width > 0 and self.height > 0):
            raise InvalidBoundsError(f"Degenerate world bounds {self.width}x{self.height}")
        return self

    @property
    def player_x(self) -> float:
        """Fixed x of the actor's centre (the world scrolls past it)."""
        return self.width * PLAYER_X_RATIO

    @property
    def floor_y(self) -> float:
        return self.height - GROUND_HEIGHT


@dataclass
class Obstacle:
    """A column with a gap. `x` is the LEFT edge, `gap_top` the y where the gap starts."""
    x: float
    gap_top: float
    passed: bool = False

    @property
    def right(self) -> float:
        return self.x + OBSTACLE_WIDTH

    def gap_bottom(self, gap_height: float) -> float:
        return self.gap_top + gap_height


def gap_range(bounds: WorldBounds, gap_height: float) -> Tuple[int, int]:
    """
    Inclusive [lo, hi] range for an obstacle's gap_top. Both segments keep at
    least MIN_OBSTACLE_EXTENT px, and the bottom one stops at the ground band.
    Raises ConfigError when the gap cannot fit.
    """
    lo = MIN_OBSTACLE_EXTENT
    hi = math.floor(bounds.height - gap_height - MIN_OBSTACLE_EXTENT - GROUND_HEIGHT)
    if hi < lo:
        raise ConfigError(
            f"gap_height={gap_height} does not fit a {bounds.height}px world "
            f"(needs {gap_height + 2 * MIN_OBSTACLE_EXTENT + GROUND_HEIGHT}px)"
        )
    return lo, hi


class ObstacleField:
    """
    Endless stream of obstacles entering at the right edge and scrolling left.
    Obstacles are kept in creation order: the newest is last and has the
    largest x.
    """
    def __init__(self, bounds: WorldBounds, gap_height: float, rng: random.Random):
        self.bounds = bounds
        self.gap_height = float(gap_height)
        self.rng = rng
        self.obstacles: List[Obstacle] = []
        self.spawned = 0
        # raises ConfigError when no gap fits this world
        self._gap_lo, self._gap_hi = gap_range(bounds, gap_height)

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self.obstacles)

    def __len__(self) -> int:
        return len(self.obstacles)

    @property
    def newest(self) -> Optional[Obstacle]:
        return self.obstacles[-1] if self.obstacles else None

    def needs_spawn(self) -> bool:
        last = self.newest
        return last is None or (self.bounds.width - last.x) >= PIPE_SPACING

    def spawn(self) -> Obstacle:
        gap_top = float(self.rng.randint(self._gap_lo, self._gap_hi))
        obstacle = Obstacle(x=float(self.bounds.width), gap_top=gap_top)
        self.obstacles.append(obstacle)
        self.spawned += 1
        logger.debug(f"Spawned obstacle #{self.spawned} gap_top={gap_top:.0f}")
        return obstacle

    def maybe_spawn(self) -> Optional[Obstacle]:
        """Spawn at most one obstacle if the spacing rule allows it."""
        if self.needs_spawn():
            return self.spawn()
        return None

    def advance(self, speed: float) -> int:
        """Scroll every obstacle left by `speed`, then retire those fully off-screen."""
        for obstacle in self.obstacles:
            obstacle.x -= speed
        before = len(self.obstacles)
        self.obstacles = [o for o in self.obstacles if o.right >= 0]
        return before - len(self.obstacles)

    def mark_passed(self, actor_left: float) -> List[Obstacle]:
        """Flip `passed` on every obstacle whose right edge the actor has cleared."""
        newly: List[Obstacle] = []
        for obstacle in self.obstacles:
            if not obstacle.passed and actor_left > obstacle.right:
                obstacle.passed = True
                newly.append(obstacle)
        return newly
