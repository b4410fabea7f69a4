# src/flopbird/game/game.py
import sys, argparse, logging, random
import pygame
from pygame import K_SPACE, K_UP, K_ESCAPE, K_m, K_c, K_LEFT, K_RIGHT
from .config import WIDTH, HEIGHT, FPS, SEED_DEFAULT, COLOR_ACCENT, COLOR_DANGER, COLOR_DIM, COLOR_FG
from .difficulty import PROFILES, get_profile
from .errors import ConfigError
from .level import WorldBounds
from .render import character_roster, draw_frame, blit_center
from .score import FileBestScoreStore
from .sim import Simulation, Command, RunState
from .audio import SoundBoard

logger = logging.getLogger(__name__)

LEVEL_KEYS = {pygame.K_1 + i: p.id for i, p in enumerate(PROFILES)}


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="FLOP_BIRD - fly through the gaps.")
    p.add_argument("--seed", type=int, default=SEED_DEFAULT,
                   help="Obstacle layout seed. Omit for a random layout each launch.")
    p.add_argument("--level", type=int, default=PROFILES[0].id,
                   choices=[pr.id for pr in PROFILES], help="Starting difficulty level")
    p.add_argument("--width", type=int, default=WIDTH)
    p.add_argument("--height", type=int, default=HEIGHT)
    p.add_argument("--fps", type=int, default=FPS, help="Display refresh (one sim step per frame)")
    p.add_argument("--best-file", type=str, default=None,
                   help="Best score file (default: $FLOPBIRD_BEST_FILE or ~/.flopbird_best)")
    p.add_argument("--unit-image", type=str, default=None,
                   help="Image file to fly as a custom unit (selectable with C)")
    p.add_argument("--mute", action="store_true", help="Disable sound effects")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def draw_menu(screen, sim, character, font, big, error):
    blit_center(screen, big, "FLOP_BIRD", screen.get_height() // 2 - 170, COLOR_ACCENT)
    blit_center(screen, font, "PRESS ANY KEY TO INITIALIZE", screen.get_height() // 2 - 100, COLOR_DIM)
    levels = "  ".join(
        f"[{p.name}]" if p.id == sim.profile.id else f" {p.name} " for p in PROFILES
    )
    blit_center(screen, font, "DIFFICULTY (1-6 / LEFT RIGHT)", screen.get_height() // 2 - 40, COLOR_ACCENT)
    blit_center(screen, font, levels, screen.get_height() // 2 - 14)
    blit_center(screen, font, f"UNIT (C): {character.name}", screen.get_height() // 2 + 30, COLOR_ACCENT)
    blit_center(screen, font, f"HIGH SCORE {sim.score.best}", screen.get_height() // 2 + 70, COLOR_DIM)
    if error:
        blit_center(screen, font, error, screen.get_height() // 2 + 110, COLOR_DANGER)


def draw_game_over(screen, snap, font, big):
    blit_center(screen, big, "SYSTEM FAILURE", screen.get_height() // 2 - 120, COLOR_DANGER)
    blit_center(screen, font, "CURRENT SCORE", screen.get_height() // 2 - 50, COLOR_DANGER)
    blit_center(screen, big, str(snap.score), screen.get_height() // 2 - 28, COLOR_FG)
    blit_center(screen, font, "HIGH SCORE", screen.get_height() // 2 + 30, COLOR_ACCENT)
    blit_center(screen, big, str(snap.best), screen.get_height() // 2 + 52, COLOR_ACCENT)
    blit_center(screen, font, "PRESS ANY KEY TO REBOOT  |  M: RETURN TO TERMINAL",
                screen.get_height() // 2 + 120, COLOR_DIM)


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    pygame.init()
    pygame.display.set_caption("FLOP_BIRD")
    screen = pygame.display.set_mode((args.width, args.height), pygame.RESIZABLE)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 18)
    big = pygame.font.SysFont("jetbrainsmono", 64, bold=True)

    def current_bounds():
        w, h = screen.get_size()
        return WorldBounds(w, h)

    rng = random.Random(args.seed)
    sim = Simulation(
        profile=get_profile(args.level),
        bounds_provider=current_bounds,
        store=FileBestScoreStore.default(args.best_file),
        rng=rng,
    )
    sound = SoundBoard()
    if not args.mute and sound.init():
        sound.attach(sim.events)

    characters = character_roster(args.unit_image)
    char_idx = 0
    error = ""

    def try_start():
        nonlocal error
        try:
            sim.handle(Command.START)
            error = ""
        except ConfigError as e:
            logger.warning(f"Cannot start run: {e}")
            error = "WINDOW TOO SMALL FOR THIS LEVEL"

    while True:
        clock.tick(args.fps)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.VIDEORESIZE and sim.state is not RunState.RUNNING:
                screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
            if event.type == pygame.KEYDOWN:
                if sim.state is RunState.RUNNING:
                    if event.key in (K_SPACE, K_UP):
                        sim.post(Command.JUMP)
                    elif event.key == K_ESCAPE:
                        pygame.quit(); sys.exit()
                elif sim.state is RunState.IDLE:
                    if event.key == K_ESCAPE:
                        pygame.quit(); sys.exit()
                    elif event.key in LEVEL_KEYS:
                        sim.select_profile(LEVEL_KEYS[event.key])
                    elif event.key in (K_LEFT, K_RIGHT):
                        i = PROFILES.index(sim.profile) + (1 if event.key == K_RIGHT else -1)
                        sim.select_profile(PROFILES[i % len(PROFILES)])
                    elif event.key == K_c:
                        char_idx = (char_idx + 1) % len(characters)
                    else:
                        try_start()
                else:  # ENDED
                    if event.key in (K_m, K_ESCAPE):
                        sim.handle(Command.MENU)
                    else:
                        try_start()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if sim.state is RunState.RUNNING:
                    sim.post(Command.JUMP)
                else:
                    try_start()

        snap = sim.step()

        # --- Render ---
        draw_frame(screen, snap, characters[char_idx], font, big)
        if snap.state is RunState.IDLE:
            draw_menu(screen, sim, characters[char_idx], font, big, error)
        elif snap.state is RunState.ENDED:
            draw_game_over(screen, snap, font, big)
        pygame.display.flip()


if __name__ == "__main__":
    run()
