"""
Run state machine and per-frame simulation step.

States:
    IDLE:    title screen, difficulty may be chosen
    RUNNING: one step() per rendered frame
    ENDED:   run over, waiting for restart or return to menu

The simulation owns all mutable game state. Front-ends read a frozen
SimSnapshot and talk back only through commands.
"""

from __future__ import annotations
import logging
import random
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Deque, Optional, Tuple

from .config import WIDTH, HEIGHT, GRACE_FRAMES, HITBOX_HALF, OBSTACLE_WIDTH, MAX_QUEUED_COMMANDS
from .collision import detect_collision
from .difficulty import DifficultyProfile, DEFAULT_PROFILE, get_profile
from .events import EventBus, SimEvent
from .level import ObstacleField, WorldBounds
from .player import Actor
from .score import BestScoreStore, MemoryBestScoreStore, ScoreTracker

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = auto()
    RUNNING = auto()
    ENDED = auto()


class Command(Enum):
    START = auto()
    JUMP = auto()
    MENU = auto()


@dataclass(frozen=True)
class ObstacleView:
    x: float
    width: float
    gap_top: float
    gap_bottom: float
    passed: bool


@dataclass(frozen=True)
class SimSnapshot:
    """Read-only view of the core after a step (render / HUD / observations)."""
    state: RunState
    frame: int
    grace_remaining: int
    actor_x: float
    actor_y: float
    actor_vy: float
    obstacles: Tuple[ObstacleView, ...]
    score: int
    best: int
    speed: float
    bounds: WorldBounds
    profile: DifficultyProfile

    @property
    def in_grace(self) -> bool:
        return self.state is RunState.RUNNING and self.grace_remaining > 0


BoundsProvider = Callable[[], WorldBounds]


def _default_bounds() -> WorldBounds:
    return WorldBounds(WIDTH, HEIGHT)


class Simulation:
    VALID_TRANSITIONS = {
        (RunState.IDLE, RunState.RUNNING),
        (RunState.RUNNING, RunState.ENDED),
        (RunState.ENDED, RunState.RUNNING),
        (RunState.ENDED, RunState.IDLE),
    }

    def __init__(self,
                 profile: DifficultyProfile = DEFAULT_PROFILE,
                 bounds_provider: Optional[BoundsProvider] = None,
                 store: Optional[BestScoreStore] = None,
                 rng: Optional[random.Random] = None,
                 seed: int | None = None,
                 events: Optional[EventBus] = None,
                 grace_frames: int = GRACE_FRAMES):
        self.rng = rng if rng is not None else random.Random(seed)
        self.store = store if store is not None else MemoryBestScoreStore()
        self.events = events if events is not None else EventBus()
        self.bounds_provider = bounds_provider or _default_bounds
        self.grace_frames = int(grace_frames)
        self.profile = profile

        self.state = RunState.IDLE
        self.score = ScoreTracker(best=max(0, int(self.store.load())))
        self.bounds = self.bounds_provider()
        self.actor = Actor(y=self.bounds.height / 2)
        self.field: Optional[ObstacleField] = None
        self.frame = 0
        self.start_time: Optional[float] = None
        self._commands: Deque[Command] = deque()
        logger.info(f"Simulation ready (profile={profile.name}, best={self.score.best})")

    # -------------------- Queries --------------------

    def can_transition(self, to_state: RunState) -> bool:
        return (self.state, to_state) in self.VALID_TRANSITIONS

    @property
    def current_speed(self) -> float:
        return self.profile.live_speed(self.score.current)

    @property
    def grace_remaining(self) -> int:
        if self.state is not RunState.RUNNING:
            return 0
        return max(0, self.grace_frames - self.frame)

    def snapshot(self) -> SimSnapshot:
        gap = self.profile.gap_height
        obstacles = tuple(
            ObstacleView(o.x, OBSTACLE_WIDTH, o.gap_top, o.gap_top + gap, o.passed)
            for o in (self.field or ())
        )
        return SimSnapshot(
            state=self.state,
            frame=self.frame,
            grace_remaining=self.grace_remaining,
            actor_x=self.bounds.player_x,
            actor_y=self.actor.y,
            actor_vy=self.actor.vy,
            obstacles=obstacles,
            score=self.score.current,
            best=self.score.best,
            speed=self.current_speed,
            bounds=self.bounds,
            profile=self.profile,
        )

    # -------------------- Commands --------------------

    def select_profile(self, profile: DifficultyProfile | int) -> bool:
        """Choose the difficulty tier. Only honoured while IDLE."""
        if not isinstance(profile, DifficultyProfile):
            profile = get_profile(profile)
        if self.state is not RunState.IDLE:
            logger.debug(f"Ignoring difficulty change while {self.state.name}")
            return False
        self.profile = profile
        logger.info(f"Difficulty set to {profile.name}")
        return True

    def post(self, command: Command) -> bool:
        """
        Buffer a command; it is applied at the top of the next step().
        Once MAX_QUEUED_COMMANDS are waiting, newer commands are refused
        (returns False) so earlier ones are never lost.
        """
        if len(self._commands) >= MAX_QUEUED_COMMANDS:
            logger.debug(f"Command queue full, dropping {command.name}")
            return False
        self._commands.append(command)
        return True

    def handle(self, command: Command) -> bool:
        """Apply a command now. Returns True if it had an effect."""
        if command is Command.START:
            return self.start()
        if command is Command.JUMP:
            return self.jump()
        if command is Command.MENU:
            return self.return_to_menu()
        return False

    def start(self) -> bool:
        """
        IDLE/ENDED -> RUNNING. Re-reads the world bounds, resets actor, field,
        score and grace window. Raises InvalidBoundsError / ConfigError (state
        unchanged) when the world or profile cannot host a run.
        """
        if not self.can_transition(RunState.RUNNING):
            logger.debug(f"Ignoring start while {self.state.name}")
            return False

        bounds = self.bounds_provider().validate()
        field = ObstacleField(bounds, self.profile.gap_height, rng=self.rng)

        old_state = self.state
        if self.score.commit_best():
            self.store.save(self.score.best)
        self.score.reset_current()
        self.bounds = bounds
        self.field = field
        self.actor.reset(bounds.height / 2)
        self.frame = 0
        self.start_time = time.monotonic()
        self.state = RunState.RUNNING
        logger.info(f"State transition: {old_state.name} -> RUNNING "
                    f"({bounds.width:.0f}x{bounds.height:.0f}, {self.profile.name})")
        return True

    def jump(self) -> bool:
        if self.state is not RunState.RUNNING:
            logger.debug(f"Ignoring jump while {self.state.name}")
            return False
        self.actor.jump()
        self.events.emit(SimEvent.JUMP)
        return True

    def return_to_menu(self) -> bool:
        if self.state is not RunState.ENDED:
            logger.debug(f"Ignoring return to menu while {self.state.name}")
            return False
        self.state = RunState.IDLE
        logger.info("State transition: ENDED -> IDLE")
        return True

    # -------------------- Frame --------------------

    def step(self) -> SimSnapshot:
        """
        Advance one rendered frame. Queued commands are applied first; the
        rest is a no-op unless RUNNING.
        """
        while self._commands:
            self.handle(self._commands.popleft())

        if self.state is not RunState.RUNNING:
            return self.snapshot()

        assert self.field is not None
        self.frame += 1
        self.actor.update_physics()

        # Grace window: pinned at centre, nothing else happens
        if self.frame <= self.grace_frames:
            self.actor.pin(self.bounds.height / 2)
            return self.snapshot()

        speed = self.current_speed
        self.field.maybe_spawn()
        self.field.advance(speed)

        if detect_collision(self.actor, self.field, self.bounds, self.profile.gap_height):
            self._end_run()
            return self.snapshot()

        for _ in self.field.mark_passed(self.bounds.player_x - HITBOX_HALF):
            self.score.increment()
            self.events.emit(SimEvent.SCORE)

        return self.snapshot()

    def _end_run(self) -> None:
        self.state = RunState.ENDED
        if self.score.commit_best():
            self.store.save(self.score.best)
        logger.info(f"State transition: RUNNING -> ENDED (score={self.score.current}, "
                    f"best={self.score.best}, frame={self.frame})")
        self.events.emit(SimEvent.COLLISION)
