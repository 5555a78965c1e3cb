"""SessionLoop — the authoritative fixed-cadence step engine.

Step cycle:
  1. Input — apply queued switch rotations
  2. Countdown — while active, nothing else moves
  3. Clock — elapsed / remaining time
  4. Spawning — difficulty-tiered spawn timer
  5. Entry — showcase, cooldown, single-occupancy entry node
  6. Movement — stage machine, room resolution, stall removal
  7. Termination — life or time exhausted ends the session
"""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING

from docket_router.config import get_difficulty, validate_config
from docket_router.core.enums import Direction, FeedbackKind
from docket_router.core.models import GridPos
from docket_router.core.session_state import SessionState, SessionSummary
from docket_router.core.snapshot import Snapshot
from docket_router.engine.countdown import Countdown
from docket_router.engine.entry_gate import EntryGate
from docket_router.engine.input_queue import InputQueue
from docket_router.engine.movement import MovementEngine, Resolution
from docket_router.engine.spawn_scheduler import SpawnScheduler
from docket_router.presentation import CUE_CORRECT, CUE_START, CUE_WRONG, NullSound
from docket_router.systems.arrow_init import initialize_grid
from docket_router.systems.rng import DeterministicRNG
from docket_router.utils.feedback_log import FeedbackEvent
from docket_router.utils.replay import ReplayRecorder

if TYPE_CHECKING:
    from docket_router.config import DifficultyProfile, SessionConfig
    from docket_router.presentation import FrameRenderer, SoundPlayer

logger = logging.getLogger(__name__)

_CUES = {
    FeedbackKind.CORRECT: CUE_CORRECT,
    FeedbackKind.WRONG: CUE_WRONG,
    FeedbackKind.STUCK: CUE_WRONG,
}


class SessionLoop:
    """The heartbeat of one play session.

    Single-threaded mutation of SessionState. The core never schedules
    itself: a driver calls :meth:`advance` (timestamps) or :meth:`step`
    (deltas) once per frame and stops calling once :attr:`running` is False.
    """

    __slots__ = (
        "_config",
        "_difficulty",
        "_rng",
        "_state",
        "_sound",
        "_recorder",
        "_inputs",
        "_countdown",
        "_spawner",
        "_gate",
        "_movement",
        "_last_timestamp",
        "_tick_events",
    )

    def __init__(
        self,
        config: SessionConfig,
        difficulty: DifficultyProfile,
        rng: DeterministicRNG,
        sound: SoundPlayer | None = None,
        recorder: ReplayRecorder | None = None,
        input_queue: InputQueue | None = None,
    ) -> None:
        self._config = config
        self._difficulty = difficulty
        self._rng = rng
        self._sound = sound or NullSound()
        self._recorder = recorder
        self._inputs = input_queue or InputQueue()
        self._countdown = Countdown()
        self._spawner = SpawnScheduler(config, difficulty, rng)
        self._gate = EntryGate(config)
        self._movement = MovementEngine(config, difficulty)
        self._last_timestamp: float | None = None
        self._tick_events: list[FeedbackEvent] = []
        self._state = self._build_state()

    # -- construction --

    def _build_state(self) -> SessionState:
        cfg = self._config
        grid = initialize_grid(
            cfg.grid_rows, cfg.grid_cols, self._difficulty.arrow_init, self._rng, cfg.outlet_bias,
        )
        state = SessionState(cfg, self._difficulty, grid, seed=getattr(self._rng, "seed", 0))
        # The first token is always shown at the entry desk before play starts
        self._spawner.spawn(state)
        logger.info(
            "Session built (difficulty=%s, seed=%s, max_tokens=%d)",
            self._difficulty.key, state.seed, self._difficulty.max_tokens,
        )
        return state

    # -- public properties --

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def input_queue(self) -> InputQueue:
        return self._inputs

    @property
    def tick_events(self) -> list[FeedbackEvent]:
        """Feedback events emitted during the most recent step."""
        return self._tick_events

    @property
    def recorder(self) -> ReplayRecorder | None:
        return self._recorder

    def line_move_seconds(self) -> float:
        return self._movement.line_move_seconds(self._state.elapsed_time)

    # -- input --

    def rotate(self, r: int, c: int) -> Direction:
        """Rotate a switch immediately (single-threaded callers only)."""
        if not self._state.running:
            raise RuntimeError("Session has ended; rotations are ignored.")
        return self._state.grid.rotate(r, c)

    def queue_rotation(self, r: int, c: int) -> None:
        """Validate and queue a rotation for the next step (thread-safe)."""
        if not self._state.grid.in_bounds_rc(r, c):
            raise ValueError(f"Cell ({r}, {c}) is outside the grid")
        self._inputs.push(GridPos(r, c))

    # -- stepping --

    def reset_clock(self) -> None:
        """Forget the last timestamp so the next advance() starts at delta 0."""
        self._last_timestamp = None

    def advance(self, timestamp: float) -> bool:
        """Step by the time since the previous call. *timestamp* is in seconds."""
        if self._last_timestamp is None:
            delta = 0.0
        else:
            delta = timestamp - self._last_timestamp
        self._last_timestamp = timestamp
        return self.step(delta)

    def step(self, delta: float) -> bool:
        """Execute one step. Returns False once the session has ended."""
        state = self._state
        if not state.running:
            return False

        delta = min(self._config.max_delta_seconds, max(0.0, delta))
        self._tick_events = []
        state.step_count += 1
        state.clock += delta

        rotations = self._inputs.drain()
        for pos in rotations:
            state.grid.rotate(pos.row, pos.col)

        if state.countdown_active:
            if self._countdown.tick(state, delta):
                self._sound.play(CUE_START)
        else:
            self._play_step(delta)

        if self._recorder is not None:
            self._recorder.record_step(delta, rotations, state)
        return state.running

    def _play_step(self, delta: float) -> None:
        state = self._state
        state.elapsed_time += delta
        state.time_left = max(0.0, self._config.time_limit_seconds - state.elapsed_time)

        self._spawner.tick(state, delta)
        self._gate.process(state, delta)
        for resolution in self._movement.step(state, delta):
            self._emit(resolution)

        if state.game_over:
            self._end()

    def _emit(self, resolution: Resolution) -> None:
        state = self._state
        self._tick_events.append(FeedbackEvent(
            step=state.step_count,
            clock=state.clock,
            kind=resolution.kind,
            message=resolution.message,
            token_id=resolution.token_id,
            score_delta=resolution.score_delta,
            expires_at=state.clock + self._config.feedback_seconds,
        ))
        self._sound.play(_CUES[resolution.kind])

    def _end(self) -> None:
        state = self._state
        state.running = False
        state.ended = True
        summary = state.summary()
        logger.info(
            "Session over at %.2fs: score=%d correct=%d wrong=%d stuck=%d max_combo=%d",
            state.elapsed_time, summary.score, summary.correct, summary.wrong,
            summary.stuck, summary.max_combo,
        )

    # -- readers --

    def create_snapshot(self) -> Snapshot:
        return Snapshot.from_state(self._state)

    def summary(self) -> SessionSummary:
        return self._state.summary()

    def run(
        self,
        frame_delta: float | None = None,
        renderer: FrameRenderer | None = None,
        render_every: int = 0,
    ) -> SessionSummary:
        """Step headless at a fixed frame delta until the session ends."""
        delta = frame_delta if frame_delta is not None else self._config.max_delta_seconds
        logger.info("=== Session started (%s) ===", self._difficulty.key)
        while self.step(delta):
            if renderer is not None and render_every and self._state.step_count % render_every == 0:
                renderer.render(self.create_snapshot())
        if renderer is not None:
            renderer.render(self.create_snapshot())
        if self._recorder is not None:
            self._recorder.flush()
        return self.summary()


def build_session(
    config: SessionConfig,
    difficulty: str,
    seed: int | None = None,
    sound: SoundPlayer | None = None,
    recorder_path: str | None = None,
    input_queue: InputQueue | None = None,
) -> SessionLoop:
    """Validate *config* and *difficulty*, then assemble a ready-to-step SessionLoop."""

    validate_config(config)
    profile = get_difficulty(difficulty)
    if seed is None:
        seed = config.seed if config.seed is not None else secrets.randbits(31)
    rng = DeterministicRNG(seed)
    recorder = ReplayRecorder(recorder_path, seed, profile.key) if recorder_path else None
    return SessionLoop(config, profile, rng, sound=sound, recorder=recorder, input_queue=input_queue)
