"""
Score keeping and best-score persistence.

The core only talks to a `BestScoreStore` (load once, save on every new best);
what sits behind it is up to the front-end.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .config import BEST_FILE_ENV, BEST_FILE_DEFAULT

logger = logging.getLogger(__name__)


class BestScoreStore(Protocol):
    def load(self) -> int: ...
    def save(self, value: int) -> None: ...


class MemoryBestScoreStore:
    """Keeps the best score in memory. Records every save for inspection."""

    def __init__(self, value: int = 0) -> None:
        self.value = max(0, int(value))
        self.saves: list[int] = []

    def load(self) -> int:
        return self.value

    def save(self, value: int) -> None:
        self.value = int(value)
        self.saves.append(self.value)


class FileBestScoreStore:
    """A single non-negative integer in a UTF-8 text file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    @classmethod
    def default(cls, path: Optional[str] = None) -> "FileBestScoreStore":
        return cls(path or os.environ.get(BEST_FILE_ENV) or BEST_FILE_DEFAULT)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            value = int(self.path.read_text(encoding="utf-8").strip())
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable best score file {self.path}: {e}")
            return 0
        if value < 0:
            logger.warning(f"Ignoring negative best score in {self.path}")
            return 0
        return value

    def save(self, value: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(str(int(value)), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not save best score to {self.path}: {e}")


@dataclass
class ScoreTracker:
    current: int = 0
    best: int = 0

    def reset_current(self) -> None:
        self.current = 0

    def increment(self) -> int:
        self.current += 1
        return self.current

    def commit_best(self) -> bool:
        """Raise best to current if beaten. Returns True when best changed."""
        if self.current > self.best:
            self.best = self.current
            return True
        return False
