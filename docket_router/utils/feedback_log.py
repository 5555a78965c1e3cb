"""Thread-safe log of feedback events exposed to the presentation layer."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

from docket_router.core.enums import FeedbackKind


@dataclass(frozen=True, slots=True)
class FeedbackEvent:
    """A transient outcome message (correct / wrong / stuck)."""

    step: int
    clock: float
    kind: FeedbackKind
    message: str
    token_id: int
    score_delta: int
    expires_at: float

    def active(self, clock: float) -> bool:
        return clock < self.expires_at


class FeedbackLog:
    """Unbounded feedback log. The engine appends; readers snapshot a slice.

    All events are kept until manually cleared via ``clear()``.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self) -> None:
        self._buffer: deque[FeedbackEvent] = deque()
        self._lock = threading.Lock()

    def append(self, event: FeedbackEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def append_many(self, events: list[FeedbackEvent]) -> None:
        with self._lock:
            self._buffer.extend(events)

    def since_step(self, step: int) -> list[FeedbackEvent]:
        """Return all events with step >= *step*."""
        with self._lock:
            return [e for e in self._buffer if e.step >= step]

    def latest(self, count: int = 50) -> list[FeedbackEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def current(self, now: float) -> FeedbackEvent | None:
        """The message still on screen at *now*, if any (newest wins).

        *now* must share the timebase of ``expires_at``: the session clock
        for events straight from the loop, the wall clock once the
        EngineManager has re-stamped them.
        """
        with self._lock:
            if not self._buffer:
                return None
            last = self._buffer[-1]
        return last if last.active(now) else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
