"""Mutable authoritative session state — only mutated by the SessionLoop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from docket_router.core.enums import TokenState
from docket_router.core.grid import SwitchGrid
from docket_router.core.models import GridPos, Token

if TYPE_CHECKING:
    from docket_router.config import DifficultyProfile, SessionConfig


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """End-of-session report."""

    difficulty: str
    score: int
    correct: int
    wrong: int
    stuck: int
    max_combo: int
    life: int
    elapsed_time: float


class SessionState:
    """The single source of truth for one play session.

    Tokens live in one insertion-ordered collection tagged WAITING or
    IN_GRID, so a token can never be in the queue and on the grid at once.
    """

    __slots__ = (
        "config", "difficulty", "seed", "grid", "tokens",
        "score", "life", "combo", "max_combo",
        "elapsed_time", "time_left", "clock", "step_count",
        "spawn_interval", "spawn_accumulator",
        "countdown_active", "countdown_value", "countdown_timer",
        "correct_count", "wrong_count", "stuck_count",
        "running", "ended", "_next_token_id",
    )

    def __init__(
        self,
        config: SessionConfig,
        difficulty: DifficultyProfile,
        grid: SwitchGrid,
        seed: int = 0,
    ) -> None:
        self.config = config
        self.difficulty = difficulty
        self.seed = seed
        self.grid = grid
        self.tokens: dict[int, Token] = {}

        self.score: int = 0
        self.life: int = config.starting_life
        self.combo: int = 0
        self.max_combo: int = 0

        self.elapsed_time: float = 0.0
        self.time_left: float = config.time_limit_seconds
        self.clock: float = 0.0
        self.step_count: int = 0

        self.spawn_interval: float = difficulty.spawn_intervals[0]
        self.spawn_accumulator: float = 0.0

        self.countdown_active: bool = True
        self.countdown_value: int = config.countdown_start
        self.countdown_timer: float = 0.0

        self.correct_count: int = 0
        self.wrong_count: int = 0
        self.stuck_count: int = 0

        self.running: bool = True
        self.ended: bool = False
        self._next_token_id: int = 1

    # -- tokens --

    def allocate_token_id(self) -> int:
        tid = self._next_token_id
        self._next_token_id += 1
        return tid

    def add_token(self, token: Token) -> None:
        self.tokens[token.id] = token

    def remove_token(self, token_id: int) -> Token | None:
        return self.tokens.pop(token_id, None)

    def waiting_tokens(self) -> list[Token]:
        """Queued tokens, earliest spawn first."""
        return sorted(
            (t for t in self.tokens.values() if t.state == TokenState.WAITING),
            key=lambda t: t.spawn_order,
        )

    def grid_tokens(self) -> list[Token]:
        """In-grid tokens, earliest spawn first (movement priority order)."""
        return sorted(
            (t for t in self.tokens.values() if t.state == TokenState.IN_GRID),
            key=lambda t: t.spawn_order,
        )

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def is_occupied(self, pos: GridPos) -> bool:
        """A node is taken by a token standing on it or a token heading to it."""
        return any(t.occupies(pos) for t in self.tokens.values())

    # -- scoring --

    def record_correct(self) -> int:
        """Apply a correct delivery; returns points awarded."""
        cfg = self.config
        self.combo += 1
        self.max_combo = max(self.max_combo, self.combo)
        points = cfg.correct_base_points + min(self.combo, cfg.combo_bonus_cap)
        self.score += points
        self.correct_count += 1
        return points

    def record_wrong(self) -> int:
        """Apply a misdelivery; returns the (negative) score delta."""
        self.score -= self.config.wrong_penalty
        self.life -= 1
        self.combo = 0
        self.wrong_count += 1
        return -self.config.wrong_penalty

    def record_stuck(self) -> int:
        """Apply a stall removal; returns the (negative) score delta."""
        self.score -= self.config.stuck_penalty
        self.life -= 1
        self.combo = 0
        self.stuck_count += 1
        return -self.config.stuck_penalty

    # -- lifecycle --

    @property
    def game_over(self) -> bool:
        return self.life <= 0 or self.time_left <= 0

    def summary(self) -> SessionSummary:
        return SessionSummary(
            difficulty=self.difficulty.key,
            score=self.score,
            correct=self.correct_count,
            wrong=self.wrong_count,
            stuck=self.stuck_count,
            max_combo=self.max_combo,
            life=self.life,
            elapsed_time=self.elapsed_time,
        )
