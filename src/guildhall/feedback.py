"""Fire-and-forget feedback signals for presentation layers.

Sound, haptics and similar cues subscribe to the bus; the simulation never
waits on them and never fails because of them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

logger = logging.getLogger(__name__)


class FeedbackSignal(StrEnum):
    QUEST_ACCEPTED = "quest_accepted"
    QUEST_RESOLVED = "quest_resolved"
    LEVEL_UP = "level_up"
    WEEK_ADVANCED = "week_advanced"
    SAVE_COMPLETED = "save_completed"
    LOAD_COMPLETED = "load_completed"
    ERROR = "error"


FeedbackHandler = Callable[[FeedbackSignal], None]


class FeedbackBus:
    """Dispatch signals to subscribers, isolating handler failures."""

    def __init__(self) -> None:
        self._handlers: list[FeedbackHandler] = []
        self._last_publish_errors: list[Exception] = []

    def subscribe(self, handler: FeedbackHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: FeedbackHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, signal: FeedbackSignal) -> None:
        self._last_publish_errors = []
        for handler in list(self._handlers):
            try:
                handler(signal)
            except Exception as exc:
                self._last_publish_errors.append(exc)
                logger.exception(
                    "feedback handler %s failed for %s",
                    getattr(handler, "__qualname__", repr(handler)),
                    signal,
                )

    def last_publish_errors(self) -> list[Exception]:
        return list(self._last_publish_errors)
