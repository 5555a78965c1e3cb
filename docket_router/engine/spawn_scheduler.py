"""Spawn scheduler — admits new tokens into the waiting queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docket_router.core.enums import Domain, TokenState
from docket_router.core.models import Token

if TYPE_CHECKING:
    from docket_router.config import DifficultyProfile, SessionConfig
    from docket_router.core.session_state import SessionState
    from docket_router.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


class SpawnScheduler:
    """Spawns tokens on a difficulty-driven interval up to a concurrency cap.

    The interval steps down through three tiers as elapsed time passes the
    configured boundaries; the accumulator resets on every expiry even when
    the cap blocks the spawn.
    """

    __slots__ = ("_config", "_difficulty", "_rng")

    def __init__(
        self,
        config: SessionConfig,
        difficulty: DifficultyProfile,
        rng: DeterministicRNG,
    ) -> None:
        self._config = config
        self._difficulty = difficulty
        self._rng = rng

    def interval_for(self, elapsed: float) -> float:
        tier1_at, tier2_at = self._config.spawn_tier_boundaries
        intervals = self._difficulty.spawn_intervals
        if elapsed >= tier2_at:
            return intervals[2]
        if elapsed >= tier1_at:
            return intervals[1]
        return intervals[0]

    def has_capacity(self, state: SessionState) -> bool:
        return state.token_count < self._difficulty.max_tokens

    def spawn(self, state: SessionState) -> Token:
        """Create a token with a random destination and queue it."""
        tid = state.allocate_token_id()
        destination = self._rng.next_int(Domain.DESTINATION, tid, 0, 1, self._config.room_count)
        token = Token(
            id=tid,
            destination=destination,
            spawn_order=tid,
            state=TokenState.WAITING,
            showcasing=True,
            showcase_remaining=self._config.showcase_seconds,
            entry_cooldown=self._config.entry_cooldown_seconds,
            spawned_at=state.clock,
        )
        state.add_token(token)
        logger.debug("Spawned token %d -> room %d at %.2fs", tid, destination, state.elapsed_time)
        return token

    def tick(self, state: SessionState, delta: float) -> Token | None:
        """Advance the spawn timer; returns the spawned token, if any."""
        state.spawn_interval = self.interval_for(state.elapsed_time)
        state.spawn_accumulator += delta
        if state.spawn_accumulator < state.spawn_interval:
            return None

        token = None
        if self.has_capacity(state):
            token = self.spawn(state)
        else:
            logger.debug("Spawn skipped at %.2fs: %d tokens at cap", state.elapsed_time, state.token_count)
        state.spawn_accumulator = 0.0
        return token
