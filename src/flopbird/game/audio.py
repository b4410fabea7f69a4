"""
Sound effects for simulation events.

Short chiptune blips synthesized with numpy and played through pygame.mixer.
If no audio device is available the board stays silent.
"""

from __future__ import annotations
import logging
from typing import Dict, Optional

import numpy as np
import pygame

from .events import EventBus, SimEvent

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


def _ramp(start: float, end: float, n: int) -> np.ndarray:
    """Exponential ramp from start to end over n samples."""
    t = np.linspace(0.0, 1.0, n, endpoint=False)
    return start * (end / start) ** t


def tone(wave: str, f0: float, f1: float, gain0: float, gain1: float,
         duration: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Mono float samples in [-1, 1] with exponential pitch and gain ramps."""
    n = max(1, int(duration * sample_rate))
    freq = _ramp(f0, f1, n)
    phase = np.cumsum(freq) / sample_rate  # in cycles
    frac = phase % 1.0
    if wave == "square":
        osc = np.where(frac < 0.5, 1.0, -1.0)
    elif wave == "sawtooth":
        osc = 2.0 * frac - 1.0
    else:
        osc = np.sin(2.0 * np.pi * phase)
    return (osc * _ramp(gain0, gain1, n)).astype(np.float32)


# (wave, f0, f1, gain0, gain1, seconds)
SOUNDS: Dict[SimEvent, tuple] = {
    SimEvent.JUMP: ("square", 150.0, 300.0, 0.05, 0.01, 0.1),
    SimEvent.SCORE: ("sine", 800.0, 1200.0, 0.05, 0.01, 0.1),
    SimEvent.COLLISION: ("sawtooth", 100.0, 20.0, 0.1, 0.01, 0.3),
}


class SoundBoard:
    """Plays one blip per SimEvent. Subscribe with attach(bus)."""

    def __init__(self, volume: float = 1.0):
        self.volume = volume
        self._sounds: Dict[SimEvent, pygame.mixer.Sound] = {}
        self._initialized = False

    def init(self) -> bool:
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(SAMPLE_RATE, -16, 2, 512)
            freq, _size, channels = pygame.mixer.get_init()
            for event, spec in SOUNDS.items():
                self._sounds[event] = self._make_sound(tone(*spec, sample_rate=freq), channels)
            self._initialized = True
            logger.info("Audio initialized")
        except pygame.error as e:
            logger.warning(f"Audio unavailable, running silent: {e}")
            self._initialized = False
        return self._initialized

    def _make_sound(self, samples: np.ndarray, channels: int) -> pygame.mixer.Sound:
        pcm = np.clip(samples * self.volume, -1.0, 1.0)
        pcm = (pcm * 32767).astype(np.int16)
        if channels > 1:
            pcm = np.repeat(pcm[:, None], channels, axis=1)
        return pygame.sndarray.make_sound(np.ascontiguousarray(pcm))

    def play(self, event: SimEvent):
        sound: Optional[pygame.mixer.Sound] = self._sounds.get(event)
        if self._initialized and sound is not None:
            sound.play()

    def attach(self, bus: EventBus):
        bus.subscribe_all(self.play)
