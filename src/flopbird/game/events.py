"""
Fire-and-forget notifications emitted by the simulation (audio sink, HUD
effects). Handlers run synchronously; their errors are logged, never raised.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class SimEvent(str, Enum):
    JUMP = "jump"
    SCORE = "score"
    COLLISION = "collision"


Handler = Callable[[SimEvent], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: Dict[SimEvent, List[Handler]] = defaultdict(list)
        self._global_handlers: List[Handler] = []

    def subscribe(self, event: SimEvent | str, handler: Handler) -> Callable[[], None]:
        """Subscribe to one event. Returns an unsubscribe function."""
        event = SimEvent(event)
        self._handlers[event].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: SimEvent) -> None:
        for handler in self._handlers.get(event, []) + self._global_handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in {event.value} handler: {e}")
