# src/flopbird/game/collision.py
from __future__ import annotations
from typing import Iterable, Tuple
from .config import GROUND_HEIGHT, OBSTACLE_WIDTH
from .level import Obstacle, WorldBounds
from .player import Actor

Box = Tuple[float, float, float, float]  # left, top, right, bottom


def boxes_overlap(a: Box, b: Box) -> bool:
    """Strict AABB overlap: touching edges do not count."""
    return a[2] > b[0] and a[0] < b[2] and a[3] > b[1] and a[1] < b[3]


def obstacle_segments(obstacle: Obstacle, gap_height: float, bounds: WorldBounds,
                      ground_height: float = GROUND_HEIGHT) -> Tuple[Box, Box]:
    """Top segment [0, gap_top] and bottom segment [gap_top + gap, floor]."""
    left, right = obstacle.x, obstacle.x + OBSTACLE_WIDTH
    top = (left, 0.0, right, obstacle.gap_top)
    bottom = (left, obstacle.gap_top + gap_height, right, bounds.height - ground_height)
    return top, bottom


def hits_bounds(actor: Actor, bounds: WorldBounds, ground_height: float = GROUND_HEIGHT) -> bool:
    """Ground or ceiling contact, using the actor's body half-height."""
    return actor.bottom >= bounds.height - ground_height or actor.top <= 0


def hits_obstacle(actor: Actor, obstacle: Obstacle, gap_height: float, bounds: WorldBounds,
                  ground_height: float = GROUND_HEIGHT) -> bool:
    box = actor.hitbox(bounds.player_x)
    return any(boxes_overlap(box, seg)
               for seg in obstacle_segments(obstacle, gap_height, bounds, ground_height))


def detect_collision(actor: Actor, obstacles: Iterable[Obstacle], bounds: WorldBounds,
                     gap_height: float, ground_height: float = GROUND_HEIGHT) -> bool:
    """
    Pure check: True as soon as any obstacle or the ground/ceiling is hit.
    Order of obstacles does not matter and we stop at the first hit.
    """
    if hits_bounds(actor, bounds, ground_height):
        return True
    return any(hits_obstacle(actor, o, gap_height, bounds, ground_height) for o in obstacles)
