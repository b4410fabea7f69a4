"""
ObstacleField and collision checks.

Usage (from repo root):
  python -m pytest src/tests/test_level.py
  python src/tests/test_level.py
"""

from __future__ import annotations
import random

import pytest

from flopbird.game.config import PIPE_SPACING, OBSTACLE_WIDTH
from flopbird.game.collision import detect_collision, hits_bounds, hits_obstacle
from flopbird.game.difficulty import PROFILES, get_profile
from flopbird.game.errors import ConfigError, InvalidBoundsError
from flopbird.game.level import ObstacleField, Obstacle, WorldBounds, gap_range
from flopbird.game.player import Actor

WORLD = WorldBounds(800, 600)


# ------------------------ Difficulty ------------------------

def test_profiles_are_ordered():
    gaps = [p.gap_height for p in PROFILES]
    speeds = [p.base_speed for p in PROFILES]
    assert gaps == sorted(gaps, reverse=True), "Gap shrinks with difficulty"
    assert speeds == sorted(speeds), "Base speed grows with difficulty"
    assert get_profile(6).name == "MAX"


def test_live_speed_grows_with_score():
    p = get_profile(2)
    assert p.live_speed(0) == 4
    assert p.live_speed(5) == pytest.approx(5.0)
    assert all(p.live_speed(s + 1) > p.live_speed(s) for s in range(50))


# ------------------------ Spawning ------------------------

def test_gap_range():
    assert gap_range(WORLD, 250) == (50, 280)
    assert gap_range(WorldBounds(800, 370), 250) == (50, 50), "Exact fit is allowed"
    with pytest.raises(ConfigError):
        gap_range(WorldBounds(800, 369), 250)
    with pytest.raises(ConfigError):
        gap_range(WorldBounds(800, 100), 250)


def test_field_rejects_unfit_world():
    with pytest.raises(ConfigError):
        ObstacleField(WorldBounds(800, 100), 250, rng=random.Random(0))
    with pytest.raises(InvalidBoundsError):
        WorldBounds(800, 0).validate()


def test_spawn_is_deterministic_and_in_range():
    a = ObstacleField(WORLD, 130, rng=random.Random(42))
    b = ObstacleField(WORLD, 130, rng=random.Random(42))
    lo, hi = gap_range(WORLD, 130)
    tops_a = [a.spawn().gap_top for _ in range(200)]
    tops_b = [b.spawn().gap_top for _ in range(200)]
    assert tops_a == tops_b, "Same rng seed -> same layout"
    assert all(lo <= t <= hi for t in tops_a), "gap_top within valid range"
    assert all(o.x == WORLD.width for o in a), "Obstacles enter at the right edge"


def test_spacing_invariant():
    field = ObstacleField(WORLD, 250, rng=random.Random(3))
    speed = 3.0
    for frame in range(2000):
        last = field.newest
        spawned = field.maybe_spawn()
        if spawned is not None and last is not None:
            assert WORLD.width - last.x >= PIPE_SPACING, f"Frame {frame}: spawned too early"
        field.advance(speed)
        speed += 0.01
        xs = [o.x for o in field]
        assert xs == sorted(xs), "Creation order == increasing x"
        assert all(b - a >= PIPE_SPACING - 1e-6 for a, b in zip(xs, xs[1:]))
    assert field.spawned > 5


def test_retirement():
    field = ObstacleField(WORLD, 250, rng=random.Random(0))
    field.obstacles = [Obstacle(x=-OBSTACLE_WIDTH + 1, gap_top=60)]
    assert field.advance(1.0) == 0, "Right edge at 0 is still on screen"
    assert len(field) == 1
    assert field.advance(0.5) == 1
    assert len(field) == 0


def test_mark_passed_once():
    field = ObstacleField(WORLD, 250, rng=random.Random(0))
    field.obstacles = [Obstacle(x=40, gap_top=60), Obstacle(x=400, gap_top=60)]
    newly = field.mark_passed(actor_left=145)
    assert [o.x for o in newly] == [40]
    assert field.mark_passed(actor_left=145) == [], "Never counted twice"
    assert field.mark_passed(actor_left=120.0) == []


# ------------------------ Collision ------------------------

def test_ground_and_ceiling_bounds():
    assert detect_collision(Actor(y=561), [], WORLD, 250) is True, "561 + 20 >= 580"
    assert detect_collision(Actor(y=559), [], WORLD, 250) is False
    assert hits_bounds(Actor(y=560), WORLD) is True, "Touching the ground counts"
    assert hits_bounds(Actor(y=20), WORLD) is True, "Touching the ceiling counts"
    assert hits_bounds(Actor(y=21), WORLD) is False


def test_obstacle_segments():
    # actor centre x = 160, obstacle hit box half extent 15; gap [100, 350]
    o = Obstacle(x=150, gap_top=100)
    assert not hits_obstacle(Actor(y=300), o, 250, WORLD), "Inside the gap"
    assert not hits_obstacle(Actor(y=115), o, 250, WORLD), "Top edge touching is not a hit"
    assert hits_obstacle(Actor(y=114), o, 250, WORLD)
    assert not hits_obstacle(Actor(y=335), o, 250, WORLD)
    assert hits_obstacle(Actor(y=336), o, 250, WORLD)


def test_obstacle_horizontal_overlap_is_strict():
    actor = Actor(y=60)  # inside the top segment vertically
    assert not hits_obstacle(actor, Obstacle(x=175, gap_top=100), 250, WORLD)
    assert hits_obstacle(actor, Obstacle(x=174, gap_top=100), 250, WORLD)
    assert not hits_obstacle(actor, Obstacle(x=145 - OBSTACLE_WIDTH, gap_top=100), 250, WORLD)


def test_detection_is_order_independent():
    actor = Actor(y=300)
    obstacles = [Obstacle(x=600, gap_top=100), Obstacle(x=150, gap_top=320), Obstacle(x=900, gap_top=50)]
    assert detect_collision(actor, obstacles, WORLD, 250) is True
    assert detect_collision(actor, list(reversed(obstacles)), WORLD, 250) is True
    assert detect_collision(actor, obstacles[::2], WORLD, 250) is False


def main():
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    for t in tests:
        t()
        print(f"✓ {t.__name__}")
    print("🎉 All level and collision tests passed")


if __name__ == "__main__":
    main()
