"""Pre-game 3-2-1 countdown."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docket_router.core.session_state import SessionState

logger = logging.getLogger(__name__)


class Countdown:
    """Ticks ``countdown_value`` down once per accumulated whole second.

    Finishing resets the play clock and spawn accumulator so the first spawn
    tier starts cleanly.
    """

    __slots__ = ()

    def tick(self, state: SessionState, delta: float) -> bool:
        """Advance the countdown. Returns True on the step it completes."""
        if not state.countdown_active:
            return False

        state.countdown_timer += delta
        if state.countdown_timer < 1.0:
            return False

        state.countdown_timer = 0.0
        state.countdown_value -= 1
        if state.countdown_value > 0:
            return False

        state.countdown_active = False
        state.elapsed_time = 0.0
        state.spawn_accumulator = 0.0
        logger.info("Countdown finished — clock started.")
        return True
