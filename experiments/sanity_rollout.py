# /experiments/sanity_rollout.py
"""
Baseline rollouts for FlopEnv.

Plays a random flapper and a gap-following heuristic over a fixed list of
seeds, appends one row per episode to <out-dir>/episodes.csv and, with
--save-traces, stores the action sequence of every episode so
experiments.replay can show it again frame for frame.

  python -m experiments.sanity_rollout --policies both --save-traces
  python -m experiments.sanity_rollout --policies gap --level 6 --seeds 111,222,333 --save-obs
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/flop
"""

from __future__ import annotations
import argparse
import csv
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, Dict, List

import numpy as np

from flopbird.env.flop_env import FlopEnv
from flopbird.game.config import FPS

Policy = Callable[[np.ndarray], int]


def make_random(seed: int, flap_prob: float = 0.08) -> Policy:
    rng = np.random.default_rng(10_000 + seed)
    return lambda _obs: int(rng.random() < flap_prob)


def make_gap_follower(seed: int, margin: float = 0.04) -> Policy:
    """Flap whenever we are falling below a line slightly under the gap centre."""
    def act(obs: np.ndarray) -> int:
        y, vy, gap_top, gap_bottom = obs[0], obs[1], obs[3], obs[4]
        return int(vy > 0.0 and y > 0.5 * (gap_top + gap_bottom) + margin)
    return act


POLICIES: Dict[str, Callable[[int], Policy]] = {
    "random": make_random,
    "gap": make_gap_follower,
}


@dataclass
class EpisodeResult:
    policy: str
    seed: int
    level: int
    frame_skip: int
    decisions: int
    reward: float
    score: int
    frames: int
    terminated: bool
    truncated: bool
    flap_ratio: float


def play(policy_name: str, seed: int, level: int, frame_skip: int, max_steps: int,
         trace_dir: Path | None = None, keep_obs: bool = False) -> EpisodeResult:
    policy = POLICIES[policy_name](seed)
    env = FlopEnv(frame_skip=frame_skip, level=level)
    actions: List[int] = []
    observations: List[np.ndarray] = []
    reward = 0.0
    terminated = truncated = False
    try:
        obs, info = env.reset(seed=seed)
        observations.append(obs)
        while len(actions) < max_steps and not (terminated or truncated):
            action = policy(obs)
            actions.append(action)
            obs, r, terminated, truncated, info = env.step(action)
            observations.append(obs)
            reward += r
    finally:
        env.close()

    if trace_dir is not None:
        trace_dir.mkdir(parents=True, exist_ok=True)
        np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))
        if keep_obs:
            np.save(trace_dir / f"{seed}_obs.npy", np.stack(observations).astype(np.float32))
        meta = {"seed": seed, "level": level, "frame_skip": frame_skip,
                "policy": policy_name, "max_steps": max_steps}
        (trace_dir / f"{seed}_meta.txt").write_text(
            "\n".join(f"{k}={v}" for k, v in meta.items()), encoding="utf-8")

    return EpisodeResult(
        policy=policy_name, seed=seed, level=level, frame_skip=frame_skip,
        decisions=len(actions), reward=round(reward, 2),
        score=int(info["score"]), frames=int(info["frame"]),
        terminated=bool(terminated), truncated=bool(truncated),
        flap_ratio=round(float(np.mean(actions)) if actions else 0.0, 3),
    )


def append_rows(csv_path: Path, results: List[EpisodeResult]):
    new_file = not csv_path.exists()
    with csv_path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=[fl.name for fl in fields(EpisodeResult)])
        if new_file:
            writer.writeheader()
        writer.writerows(asdict(r) for r in results)


def summarize(results: List[EpisodeResult]) -> str:
    scores = np.array([r.score for r in results])
    frames = np.array([r.frames for r in results])
    return (f"score mean={scores.mean():.2f} max={scores.max()}  "
            f"survived {frames.mean() / FPS:.1f}s on average")


def main():
    ap = argparse.ArgumentParser(description="Random / gap-follower baselines for FlopEnv.")
    ap.add_argument("--policies", default="both", choices=[*POLICIES, "both"])
    ap.add_argument("--seeds", default="", help="Comma-separated seeds (default 101..120)")
    ap.add_argument("--level", type=int, default=1, help="Difficulty level 1..6")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim frames per decision")
    ap.add_argument("--steps", type=int, default=10_000, help="Cap on decisions per episode")
    ap.add_argument("--out-dir", default="experiments/runs")
    ap.add_argument("--save-traces", action="store_true", help="Write .npy action traces for replay")
    ap.add_argument("--save-obs", action="store_true", help="Also write observations (needs --save-traces)")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    seeds = [int(s) for s in args.seeds.split(",") if s.strip()] or list(range(101, 121))
    names = list(POLICIES) if args.policies == "both" else [args.policies]

    print(f"Level {args.level}, frame_skip={args.frame_skip}, {len(seeds)} seeds -> {out_dir}")
    for name in names:
        trace_dir = out_dir / "traces" / name if args.save_traces else None
        results = []
        for seed in seeds:
            res = play(name, seed, args.level, args.frame_skip, args.steps, trace_dir, args.save_obs)
            results.append(res)
            print(f"[{name}] seed={seed} score={res.score} frames={res.frames} "
                  f"reward={res.reward:.1f} {'truncated' if res.truncated else 'crashed'}")
        append_rows(out_dir / "episodes.csv", results)
        print(f"[{name}] {summarize(results)}")

    print("✓ Rollouts complete")


if __name__ == "__main__":
    main()
