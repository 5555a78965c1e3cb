"""Immutable snapshot of the session state for readers on other threads."""

from __future__ import annotations

import math
from dataclasses import dataclass

from docket_router.core.grid import SwitchGrid
from docket_router.core.models import Token
from docket_router.core.session_state import SessionState, SessionSummary


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of one session, safe to share across threads.

    Tokens and the grid are deep-copied at capture time.
    """

    step: int
    clock: float
    seed: int
    difficulty: str
    score: int
    life: int
    combo: int
    max_combo: int
    elapsed_time: float
    time_left: float
    spawn_interval: float
    countdown_active: bool
    countdown_value: int
    correct_count: int
    wrong_count: int
    stuck_count: int
    running: bool
    ended: bool
    grid: SwitchGrid
    waiting: tuple[Token, ...]
    in_grid: tuple[Token, ...]

    @classmethod
    def from_state(cls, state: SessionState) -> Snapshot:
        return cls(
            step=state.step_count,
            clock=state.clock,
            seed=state.seed,
            difficulty=state.difficulty.key,
            score=state.score,
            life=state.life,
            combo=state.combo,
            max_combo=state.max_combo,
            elapsed_time=state.elapsed_time,
            time_left=state.time_left,
            spawn_interval=state.spawn_interval,
            countdown_active=state.countdown_active,
            countdown_value=state.countdown_value,
            correct_count=state.correct_count,
            wrong_count=state.wrong_count,
            stuck_count=state.stuck_count,
            running=state.running,
            ended=state.ended,
            grid=state.grid.copy(),
            waiting=tuple(t.copy() for t in state.waiting_tokens()),
            in_grid=tuple(t.copy() for t in state.grid_tokens()),
        )

    @property
    def display_time(self) -> int:
        """Whole seconds shown in the header (rounded up)."""
        return math.ceil(self.time_left)

    @property
    def hearts(self) -> str:
        return "❤" * max(0, self.life)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            difficulty=self.difficulty,
            score=self.score,
            correct=self.correct_count,
            wrong=self.wrong_count,
            stuck=self.stuck_count,
            max_combo=self.max_combo,
            life=self.life,
            elapsed_time=self.elapsed_time,
        )
