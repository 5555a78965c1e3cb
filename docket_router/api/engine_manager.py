"""EngineManager — singleton wrapper that drives a SessionLoop on a background thread.

The API reads from an atomically-swapped immutable Snapshot; the SessionLoop
mutates SessionState exclusively on its own thread (Single-Writer preserved).
Rotations from request handlers travel through the loop's InputQueue.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import TYPE_CHECKING

from docket_router.core.snapshot import Snapshot
from docket_router.engine.input_queue import InputQueue
from docket_router.engine.session_loop import SessionLoop, build_session
from docket_router.presentation import BoardLayout
from docket_router.utils.feedback_log import FeedbackEvent, FeedbackLog

if TYPE_CHECKING:
    from docket_router.config import SessionConfig
    from docket_router.core.models import GridPos
    from docket_router.core.session_state import SessionSummary
    from docket_router.presentation import SoundPlayer

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages session lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - feedback log (lock-guarded buffer)
      - control commands (start / pause / resume / step / restart / rotate)
    """

    def __init__(self, config: SessionConfig, sound: SoundPlayer | None = None) -> None:
        self._config = config
        self.config = config
        self._sound = sound
        self._frame_interval: float = 1.0 / config.frame_rate

        self._loop: SessionLoop | None = None
        self._inputs = InputQueue()

        # Thread-safe shared state
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: Snapshot | None = None
        self._feedback_log = FeedbackLog()
        self._sessions_started: int = 0

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def has_session(self) -> bool:
        return self._loop is not None

    @property
    def feedback_log(self) -> FeedbackLog:
        return self._feedback_log

    @property
    def sessions_started(self) -> int:
        return self._sessions_started

    # -- snapshot access --

    def get_snapshot(self) -> Snapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    def current_feedback(self) -> FeedbackEvent | None:
        """The message still on screen, measured on the wall clock so it clears after the session ends."""
        if self.get_snapshot() is None:
            return None
        return self._feedback_log.current(time.monotonic())

    def summary(self) -> SessionSummary | None:
        """Summary of the published snapshot (never the live state)."""
        snap = self.get_snapshot()
        return snap.summary() if snap is not None else None

    # -- lifecycle --

    def start(self, difficulty: str, seed: int | None = None) -> Snapshot:
        """Build a fresh session and begin stepping it. Raises ValueError on bad difficulty."""
        loop = build_session(
            self._config, difficulty, seed=seed, sound=self._sound, input_queue=self._inputs,
        )
        self.stop()
        self._inputs.drain()
        self._feedback_log.clear()
        self._loop = loop
        self._sessions_started += 1
        self._publish(loop)

        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="session-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started %s session (frame=%.3fs)", difficulty, self._frame_interval)
        snap = self.get_snapshot()
        assert snap is not None
        return snap

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at step %d", self._current_step())

    def resume(self) -> None:
        if self._loop is not None:
            self._loop.reset_clock()
        self._paused.clear()
        logger.info("EngineManager resumed at step %d", self._current_step())

    def step(self) -> None:
        """Execute exactly one frame (pauses first)."""
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        if self._thread and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=5.0)
        self._running.clear()
        self._thread = None

    def restart(self) -> None:
        """Stop and discard the session; the next start() picks a difficulty."""
        self.stop()
        self._loop = None
        self._inputs.drain()
        self._feedback_log.clear()
        with self._snapshot_lock:
            self._latest_snapshot = None
        logger.info("EngineManager reset.")

    # -- input --

    def rotate(self, r: int, c: int) -> None:
        """Queue a rotation. Raises LookupError without a live session, ValueError off-grid."""
        if self._loop is None or not self._loop.running:
            raise LookupError("No session in progress.")
        self._loop.queue_rotation(r, c)

    def click(self, x: float, y: float, width: float, height: float) -> GridPos | None:
        """Translate a canvas click into a cell and rotate it. Returns the cell hit."""
        layout = BoardLayout(width, height, self._config.grid_rows, self._config.grid_cols)
        pos = layout.cell_at(x, y)
        if pos is not None:
            self.rotate(pos.row, pos.col)
        return pos

    # -- internals --

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Session thread started.")
        loop = self._loop
        assert loop is not None

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            try:
                if single_step:
                    can_continue = loop.step(self._frame_interval)
                    loop.reset_clock()
                else:
                    can_continue = loop.advance(time.perf_counter())
            except Exception:
                logger.exception("Session step failed — stopping loop")
                break

            self._publish(loop)
            if not can_continue:
                logger.info("Session ended at step %d.", loop.state.step_count)
                break

            if not single_step:
                time.sleep(self._frame_interval)

        self._running.clear()
        logger.info("Session thread exited.")

    def _publish(self, loop: SessionLoop) -> None:
        """Swap snapshot + push feedback from the last step."""
        snap = loop.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

        events = loop.tick_events
        if events:
            # Re-stamp display windows on the wall clock; the session clock stops at the end
            shown_until = time.monotonic() + self._config.feedback_seconds
            self._feedback_log.append_many([replace(e, expires_at=shown_until) for e in events])

    def _current_step(self) -> int:
        if self._loop:
            return self._loop.state.step_count
        return 0
