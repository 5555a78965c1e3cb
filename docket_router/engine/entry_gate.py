"""Entry gate — moves waiting tokens onto the grid's entry node."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docket_router.core.enums import MoveStage, TokenState
from docket_router.core.models import GridPos

if TYPE_CHECKING:
    from docket_router.config import SessionConfig
    from docket_router.core.models import Token
    from docket_router.core.session_state import SessionState

logger = logging.getLogger(__name__)


class EntryGate:
    """Showcase, then cooldown, then entry if the entry node is free.

    Waiting tokens are evaluated in ascending spawn order, and an entry is
    visible to the tokens evaluated after it, so the earliest eligible token
    wins and the entry node never holds two tokens.
    """

    __slots__ = ("_config", "_entry")

    def __init__(self, config: SessionConfig) -> None:
        self._config = config
        self._entry = GridPos(config.entry_row, config.entry_col)

    @property
    def entry(self) -> GridPos:
        return self._entry

    def process(self, state: SessionState, delta: float) -> list[Token]:
        """Advance waiting timers and admit eligible tokens. Returns entrants."""
        entered: list[Token] = []
        for token in state.waiting_tokens():
            if token.showcasing:
                token.showcase_remaining -= delta
                if token.showcase_remaining > 0:
                    continue
                # Showcase just ended; entry is considered from the next step
                token.showcasing = False
                continue
            if token.entry_cooldown > 0:
                token.entry_cooldown -= delta
                continue
            if state.is_occupied(self._entry):
                continue
            self._admit(token)
            entered.append(token)
            logger.debug("Token %d entered at %s (step %d)", token.id, self._entry, state.step_count)
        return entered

    def _admit(self, token: Token) -> None:
        token.state = TokenState.IN_GRID
        token.current = self._entry
        token.target = None
        token.move_stage = MoveStage.AT_NODE
        token.move_progress = 0.0
