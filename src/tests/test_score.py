"""
Score tracking, best-score stores, event bus and sound synthesis.

Usage (from repo root):
  python -m pytest src/tests/test_score.py
  python src/tests/test_score.py
"""

from __future__ import annotations

import numpy as np

from flopbird.game.audio import tone, SOUNDS, SAMPLE_RATE, SoundBoard
from flopbird.game.events import EventBus, SimEvent
from flopbird.game.score import FileBestScoreStore, MemoryBestScoreStore, ScoreTracker


def test_tracker_best_is_monotonic():
    t = ScoreTracker(best=4)
    for _ in range(3):
        t.increment()
    assert t.commit_best() is False, "3 does not beat 4"
    assert t.best == 4
    t.increment(); t.increment()
    assert t.commit_best() is True
    assert t.best == 5
    t.reset_current()
    assert (t.current, t.best) == (0, 5)
    assert t.commit_best() is False


def test_file_store_roundtrip(tmp_path):
    store = FileBestScoreStore(tmp_path / "nested" / "best")
    assert store.load() == 0, "Missing file reads as 0"
    store.save(12)
    assert store.path.read_text(encoding="utf-8") == "12"
    assert FileBestScoreStore(store.path).load() == 12


def test_file_store_ignores_garbage(tmp_path):
    path = tmp_path / "best"
    path.write_text("not a number", encoding="utf-8")
    assert FileBestScoreStore(path).load() == 0
    path.write_text("-3", encoding="utf-8")
    assert FileBestScoreStore(path).load() == 0
    path.write_text(" 41\n", encoding="utf-8")
    assert FileBestScoreStore(path).load() == 41


def test_file_store_default_path(tmp_path, monkeypatch):
    monkeypatch.setenv("FLOPBIRD_BEST_FILE", str(tmp_path / "env_best"))
    assert FileBestScoreStore.default().path == tmp_path / "env_best"
    assert FileBestScoreStore.default(str(tmp_path / "cli")).path == tmp_path / "cli"


def test_memory_store_records_saves():
    store = MemoryBestScoreStore(-2)
    assert store.load() == 0
    store.save(3)
    store.save(9)
    assert store.load() == 9 and store.saves == [3, 9]


def test_event_bus_isolates_handler_errors():
    bus = EventBus()
    seen = []

    def broken(_event):
        raise RuntimeError("speaker on fire")

    bus.subscribe("score", broken)
    unsubscribe = bus.subscribe(SimEvent.SCORE, seen.append)
    bus.subscribe_all(lambda e: seen.append(f"all:{e.value}"))

    bus.emit(SimEvent.SCORE)
    assert seen == [SimEvent.SCORE, "all:score"], "Other handlers still run"

    unsubscribe()
    bus.emit(SimEvent.SCORE)
    bus.emit(SimEvent.JUMP)
    assert seen[2:] == ["all:score", "all:jump"]


def test_sound_board_plays_on_bus_events():
    played = []

    class Blip:
        def __init__(self, event):
            self.event = event

        def play(self):
            played.append(self.event)

    bus = EventBus()
    board = SoundBoard()
    board.attach(bus)
    bus.emit(SimEvent.JUMP)
    assert played == [], "Silent until the mixer is initialized"

    board._sounds = {e: Blip(e) for e in (SimEvent.JUMP, SimEvent.COLLISION)}
    board._initialized = True
    for event in (SimEvent.JUMP, SimEvent.SCORE, SimEvent.COLLISION):
        bus.emit(event)
    assert played == [SimEvent.JUMP, SimEvent.COLLISION], "Events without a sound are skipped"


def test_tones_are_short_and_quiet():
    for event, spec in SOUNDS.items():
        samples = tone(*spec)
        seconds = spec[-1]
        assert samples.dtype == np.float32
        assert len(samples) == int(seconds * SAMPLE_RATE), f"{event.value}: wrong length"
        assert np.max(np.abs(samples)) <= spec[3] + 1e-6, f"{event.value}: louder than its start gain"


if __name__ == "__main__":
    # tests needing pytest fixtures (tmp_path, monkeypatch) run under pytest only
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and fn.__code__.co_argcount == 0:
            fn()
            print(f"✓ {name}")
