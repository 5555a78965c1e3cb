"""Thread-safe input queue connecting API handlers to the SessionLoop."""

from __future__ import annotations

import queue

from docket_router.core.models import GridPos


class InputQueue:
    """MPSC (multiple-producer, single-consumer) queue of cell rotations.

    Request handlers push; the SessionLoop drains at the start of each step
    so the grid is only ever mutated on the engine thread.
    """

    __slots__ = ("_queue",)

    def __init__(self) -> None:
        self._queue: queue.Queue[GridPos] = queue.Queue()

    def push(self, pos: GridPos) -> None:
        """Thread-safe enqueue."""
        self._queue.put_nowait(pos)

    def drain(self) -> list[GridPos]:
        """Drain all pending rotations in arrival order."""
        rotations: list[GridPos] = []
        while True:
            try:
                rotations.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return rotations
