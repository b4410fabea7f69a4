"""
Watch a recorded FlopEnv episode.

  python -m experiments.replay --policy gap --seed 105
  python -m experiments.replay --trace experiments/runs/traces/random/112_actions.npy --frame-skip 4

Keys: SPACE pause, . single step while paused, R restart, ESC quit.

Seed, level and frame_skip come from the <seed>_meta.txt written next to the
trace by experiments.sanity_rollout; flags given on the command line win.
With the same three values the episode plays out exactly as recorded.
"""

from __future__ import annotations
import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

import numpy as np
import pygame

from flopbird.env.flop_env import FlopEnv


@dataclass
class Trace:
    actions: np.ndarray
    seed: int
    level: int
    frame_skip: int


def read_meta(actions_path: Path) -> Dict[str, str]:
    meta_path = actions_path.with_name(actions_path.name.replace("_actions.npy", "_meta.txt"))
    if not meta_path.exists():
        return {}
    pairs = (line.split("=", 1) for line in meta_path.read_text(encoding="utf-8").splitlines() if "=" in line)
    return {k.strip(): v.strip() for k, v in pairs}


def load_trace(args) -> Trace:
    if args.trace:
        path = Path(args.trace)
    elif args.seed is not None:
        path = Path(args.out_dir) / "traces" / args.policy / f"{args.seed}_actions.npy"
    else:
        raise SystemExit("Pass --seed (with --policy) or --trace")
    if not path.exists():
        raise SystemExit(f"Trace not found: {path}")

    actions = np.load(path)
    if actions.ndim != 1:
        raise SystemExit(f"Expected a 1D action array in {path}, got {actions.shape}")

    meta = read_meta(path)
    seed = args.seed if args.seed is not None else meta.get("seed", path.stem.split("_")[0])
    try:
        seed = int(seed)
    except ValueError:
        raise SystemExit(f"Cannot infer the seed from {path.name}, pass --seed")
    return Trace(
        actions=actions,
        seed=seed,
        level=args.level or int(meta.get("level", 1)),
        frame_skip=args.frame_skip or int(meta.get("frame_skip", 4)),
    )


def draw_overlay(env: FlopEnv, trace: Trace, step: int, paused: bool):
    surf = pygame.display.get_surface()
    if surf is None or env.snap is None:
        return
    snap = env.snap
    font = pygame.font.SysFont("jetbrainsmono", 16)
    last = "FLAP" if step and trace.actions[step - 1] else "----"
    lines = [
        f"seed {trace.seed}  lvl {trace.level}  step {step}/{len(trace.actions)}  {last}"
        + ("  [PAUSED]" if paused else ""),
        f"score {snap.score}  frame {snap.frame}  speed {snap.speed:.1f}",
        f"y {snap.actor_y:.1f}  vy {snap.actor_vy:+.1f}  {snap.state.name}",
    ]
    panel = pygame.Surface((380, 20 * len(lines) + 12), pygame.SRCALPHA)
    panel.fill((0, 0, 0, 170))
    for i, txt in enumerate(lines):
        panel.blit(font.render(txt, True, (0, 255, 0)), (8, 6 + 20 * i))
    surf.blit(panel, (12, 12))
    pygame.display.flip()


def replay(trace: Trace):
    env = FlopEnv(render_mode="human", frame_skip=trace.frame_skip, level=trace.level,
                  time_limit_seconds=None)
    env.reset(seed=trace.seed)
    step, paused, done = 0, False, False
    clock = pygame.time.Clock()
    try:
        while True:
            advance = not paused and not done
            for event in pygame.event.get():
                if event.type == pygame.QUIT or (event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                    return
                if event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_PERIOD and paused and not done:
                        advance = True
                    elif event.key == pygame.K_r:
                        env.reset(seed=trace.seed)
                        step, done = 0, False

            if advance and step < len(trace.actions):
                _obs, _r, term, trunc, _info = env.step(int(trace.actions[step]))
                step += 1
                done = term or trunc or step >= len(trace.actions)
            else:
                env.render()
                clock.tick(30)
            draw_overlay(env, trace, step, paused)
    finally:
        env.close()


def main():
    ap = argparse.ArgumentParser(description="Replay a recorded FlopEnv episode.")
    ap.add_argument("--seed", type=int, help="Episode seed")
    ap.add_argument("--policy", default="random", help="Trace folder under traces/ (random, gap)")
    ap.add_argument("--trace", default="", help="Explicit path to a *_actions.npy file")
    ap.add_argument("--out-dir", default="experiments/runs")
    ap.add_argument("--frame-skip", type=int, default=0, help="Override frame_skip (0 = from meta)")
    ap.add_argument("--level", type=int, default=0, help="Override level (0 = from meta)")
    trace = load_trace(ap.parse_args())

    print(f"Replaying seed={trace.seed} level={trace.level} frame_skip={trace.frame_skip} "
          f"({len(trace.actions)} decisions)")
    replay(trace)


if __name__ == "__main__":
    main()
