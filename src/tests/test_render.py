"""
Unit sprites and frame drawing on an offscreen surface.

  python -m pytest src/tests/test_render.py
"""

from __future__ import annotations
import os

import pygame
import pytest

from flopbird.game.config import COLOR_ACCENT
from flopbird.game.render import (
    CHARACTERS, SPRITE_SIZE, actor_sprite, character_roster, custom_character, draw_frame
)
from flopbird.game.sim import Simulation


@pytest.fixture(autouse=True)
def headless_pygame(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    pygame.init()
    yield
    pygame.quit()


def _save_unit(path, color=(200, 30, 30)) -> str:
    img = pygame.Surface((10, 6))
    img.fill(color)
    pygame.image.save(img, str(path))
    return str(path)


def test_roster_adds_custom_unit_last():
    assert character_roster() == CHARACTERS
    assert character_roster("") == CHARACTERS
    roster = character_roster("me.png")
    assert roster[:-1] == CHARACTERS
    assert roster[-1].name == "CUSTOM" and roster[-1].image == "me.png"


def test_custom_image_is_scaled_to_actor_size(tmp_path):
    unit = custom_character(_save_unit(tmp_path / "unit.bmp"))
    sprite = actor_sprite(unit)
    assert sprite.get_size() == SPRITE_SIZE
    assert tuple(sprite.get_at((SPRITE_SIZE[0] // 2, SPRITE_SIZE[1] // 2)))[:3] == (200, 30, 30)
    assert actor_sprite(unit) is sprite, "Loaded once per unit"


def test_unreadable_image_falls_back_to_accent_square(tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_text("not an image", encoding="utf-8")
    for path in (broken, tmp_path / "missing.png"):
        sprite = actor_sprite(custom_character(str(path)))
        assert sprite.get_size() == SPRITE_SIZE
        assert tuple(sprite.get_at((0, 0)))[:3] == COLOR_ACCENT
        assert tuple(sprite.get_at((SPRITE_SIZE[0] - 1, SPRITE_SIZE[1] - 1)))[:3] == COLOR_ACCENT


def test_builtin_sprites_have_actor_size():
    for character in CHARACTERS:
        assert actor_sprite(character).get_size() == SPRITE_SIZE, character.name


def test_draw_frame_with_custom_unit(tmp_path):
    sim = Simulation(seed=3)
    sim.start()
    snap = sim.step()
    surf = pygame.Surface((800, 600))
    font = pygame.font.SysFont("jetbrainsmono", 18)
    big = pygame.font.SysFont("jetbrainsmono", 64, bold=True)
    unit = custom_character(_save_unit(tmp_path / "unit.bmp", color=(10, 20, 250)))
    draw_frame(surf, snap, unit, font, big)
    # actor is pinned at (160, 300) during the grace window
    assert tuple(surf.get_at((int(snap.actor_x), int(snap.actor_y))))[:3] == (10, 20, 250)


if __name__ == "__main__":
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    raise SystemExit(pytest.main([__file__, "-q"]))
