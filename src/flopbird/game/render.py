# src/flopbird/game/render.py
from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
import pygame
from .config import (
    GROUND_HEIGHT, PLAYER_HALF_W, PLAYER_HALF_H,
    COLOR_BG, COLOR_GRID, COLOR_FG, COLOR_ACCENT, COLOR_PIPE, COLOR_GROUND, COLOR_DIM
)
from .sim import SimSnapshot, RunState

logger = logging.getLogger(__name__)

GRID_SIZE = 50
SPRITE_SIZE = (PLAYER_HALF_W * 2, PLAYER_HALF_H * 2)


@dataclass(frozen=True)
class Character:
    name: str
    body: Tuple[int, int, int]
    wing: Tuple[int, int, int]
    image: Optional[str] = None  # path of a user-supplied sprite


CHARACTERS: Tuple[Character, ...] = (
    Character("BIRD", (255, 220, 80), (230, 150, 40)),
    Character("EAGLE", (150, 100, 60), (240, 240, 240)),
    Character("DUCK", (250, 240, 120), (60, 160, 80)),
    Character("OWL", (170, 130, 90), (90, 60, 40)),
    Character("BAT", (80, 70, 90), (40, 30, 50)),
    Character("BEE", (250, 200, 30), (20, 20, 20)),
    Character("ROCKET", (220, 220, 230), (240, 80, 60)),
    Character("UFO", (140, 240, 200), (80, 120, 255)),
)


def custom_character(path: str) -> Character:
    """The "custom unit": a user image drawn in place of the built-in glyph."""
    return Character("CUSTOM", COLOR_ACCENT, COLOR_ACCENT, image=str(path))


def character_roster(unit_image: Optional[str] = None) -> Tuple[Character, ...]:
    """Built-in units, plus the custom one last when an image was given."""
    if unit_image:
        return CHARACTERS + (custom_character(unit_image),)
    return CHARACTERS


def _image_sprite(path: str) -> pygame.Surface:
    try:
        img = pygame.image.load(path)
        return pygame.transform.scale(img, SPRITE_SIZE)
    except (pygame.error, OSError) as e:
        logger.warning(f"Cannot load unit image {path}: {e}")
        surf = pygame.Surface(SPRITE_SIZE)
        surf.fill(COLOR_ACCENT)
        return surf


@lru_cache(maxsize=None)
def actor_sprite(character: Character) -> pygame.Surface:
    """Unrotated SPRITE_SIZE surface for a unit, built once per character."""
    if character.image is not None:
        return _image_sprite(character.image)
    w, h = SPRITE_SIZE
    surf = pygame.Surface((w, h), pygame.SRCALPHA)
    pygame.draw.ellipse(surf, character.body, (2, 4, w - 4, h - 8))
    pygame.draw.ellipse(surf, character.wing, (6, h // 2 - 2, w // 2 - 4, h // 4))
    pygame.draw.circle(surf, (255, 255, 255), (w - 12, 14), 5)
    pygame.draw.circle(surf, (10, 10, 10), (w - 10, 14), 2)
    pygame.draw.polygon(surf, (255, 140, 40), [(w - 4, 20), (w + 2, 23), (w - 4, 26)])
    return surf


def draw_background(surf: pygame.Surface):
    width, height = surf.get_size()
    surf.fill(COLOR_BG)
    for x in range(0, width, GRID_SIZE):
        pygame.draw.line(surf, COLOR_GRID, (x, 0), (x, height), 1)
    for y in range(0, height, GRID_SIZE):
        pygame.draw.line(surf, COLOR_GRID, (0, y), (width, y), 1)


def draw_obstacles(surf: pygame.Surface, snap: SimSnapshot):
    floor_y = snap.bounds.height - GROUND_HEIGHT
    for o in snap.obstacles:
        x, w = int(o.x), int(o.width)
        top = pygame.Rect(x, 0, w, int(o.gap_top))
        bottom = pygame.Rect(x, int(o.gap_bottom), w, int(floor_y - o.gap_bottom))
        for r in (top, bottom):
            pygame.draw.rect(surf, COLOR_PIPE, r)
            pygame.draw.rect(surf, COLOR_ACCENT, r, width=2)
        # stripes next to the gap
        pygame.draw.rect(surf, COLOR_ACCENT, (x + 10, int(o.gap_top) - 20, w - 20, 5))
        pygame.draw.rect(surf, COLOR_ACCENT, (x + 10, int(o.gap_bottom) + 15, w - 20, 5))


def draw_actor(surf: pygame.Surface, snap: SimSnapshot, character: Character):
    # nose up when rising, down when falling
    angle = max(-math.pi / 4, min(math.pi / 4, snap.actor_vy * 0.1))
    sprite = pygame.transform.rotate(actor_sprite(character), -math.degrees(angle))
    rect = sprite.get_rect(center=(int(snap.actor_x), int(snap.actor_y)))
    surf.blit(sprite, rect)


def draw_ground(surf: pygame.Surface, snap: SimSnapshot):
    width = int(snap.bounds.width)
    floor_y = int(snap.bounds.height - GROUND_HEIGHT)
    pygame.draw.rect(surf, COLOR_GROUND, (0, floor_y, width, GROUND_HEIGHT))
    pygame.draw.line(surf, COLOR_ACCENT, (0, floor_y), (width, floor_y), 2)


def draw_hud(surf: pygame.Surface, snap: SimSnapshot, font: pygame.font.Font, big: pygame.font.Font):
    width, height = surf.get_size()
    score_txt = big.render(str(snap.score), True, (60, 60, 60))
    surf.blit(score_txt, (width // 2 - score_txt.get_width() // 2, 32))
    speed_txt = font.render(f"SPEED: {snap.speed:.1f}", True, COLOR_DIM)
    surf.blit(speed_txt, (width // 2 - speed_txt.get_width() // 2, height - GROUND_HEIGHT - 28))
    if snap.in_grace:
        msg = font.render("SYSTEM REBOOTING...", True, COLOR_ACCENT)
        surf.blit(msg, (width // 2 - msg.get_width() // 2, height // 2 + 80))


def draw_frame(surf: pygame.Surface, snap: SimSnapshot, character: Character,
               font: pygame.font.Font, big: pygame.font.Font):
    """Draw the world as seen in `snap`. Never touches simulation state."""
    draw_background(surf)
    draw_obstacles(surf, snap)
    if snap.state is not RunState.IDLE:
        draw_actor(surf, snap, character)
    draw_ground(surf, snap)
    if snap.state is RunState.RUNNING:
        draw_hud(surf, snap, font, big)


def blit_center(surf: pygame.Surface, font: pygame.font.Font, text: str, y: int,
                color: Tuple[int, int, int] = COLOR_FG):
    img = font.render(text, True, color)
    surf.blit(img, (surf.get_width() // 2 - img.get_width() // 2, y))
