"""Movement & resolution — advances in-grid tokens through the move cycle.

Per token, per step, exactly one stage handler runs:
  0. AT_NODE  — follow the switch: exit to a room, claim a free node, or wait
  1. TRANSIT  — progress along the edge at the ramped speed
  2. ARRIVED  — commit the claimed node as the new position
Then the stall check runs regardless of stage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from docket_router.core.enums import FeedbackKind, MoveStage
from docket_router.core.models import GridPos, RoomExit

if TYPE_CHECKING:
    from docket_router.config import DifficultyProfile, SessionConfig, SpeedRamp
    from docket_router.core.models import Token
    from docket_router.core.session_state import SessionState

logger = logging.getLogger(__name__)


def line_move_seconds(ramp: SpeedRamp, elapsed: float, time_limit: float = 60.0) -> float:
    """Edge transit duration, easing from ``base`` to ``min`` over the session."""
    progress = min(1.0, max(0.0, elapsed / time_limit))
    return ramp.base - (ramp.base - ramp.min) * progress


@dataclass(frozen=True, slots=True)
class Resolution:
    """A token leaving play: delivered, misdelivered, or stalled out."""

    token_id: int
    kind: FeedbackKind
    score_delta: int
    room: int | None = None

    @property
    def message(self) -> str:
        match self.kind:
            case FeedbackKind.CORRECT:
                return f"Correct! +{self.score_delta}"
            case FeedbackKind.WRONG:
                return f"Misdelivered! {self.score_delta}"
            case FeedbackKind.STUCK:
                return f"Stalled (congestion) {self.score_delta}"
        return ""


class MovementEngine:
    """Drives every in-grid token one step and settles room arrivals.

    Tokens are processed in ascending spawn order so earlier tokens win
    contested nodes. Removals are applied after all tokens have moved;
    until then a resolved token still holds its node.
    """

    __slots__ = ("_config", "_difficulty")

    def __init__(self, config: SessionConfig, difficulty: DifficultyProfile) -> None:
        self._config = config
        self._difficulty = difficulty

    def line_move_seconds(self, elapsed: float) -> float:
        return line_move_seconds(self._difficulty.speed, elapsed, self._config.time_limit_seconds)

    def step(self, state: SessionState, delta: float) -> list[Resolution]:
        resolutions: list[Resolution] = []
        removed: list[int] = []

        for token in state.grid_tokens():
            match token.move_stage:
                case MoveStage.AT_NODE:
                    resolution = self._decide(token, state, delta)
                    if resolution is not None:
                        resolutions.append(resolution)
                        removed.append(token.id)
                        continue
                case MoveStage.TRANSIT:
                    self._advance(token, state, delta)
                case MoveStage.ARRIVED:
                    self._commit(token)

            if self._stalled(token):
                delta_score = state.record_stuck()
                resolutions.append(Resolution(token.id, FeedbackKind.STUCK, delta_score))
                removed.append(token.id)
                logger.debug(
                    "Token %d stalled (steps=%d, stuck=%.2fs)",
                    token.id, token.move_steps, token.stuck_time,
                )

        for tid in removed:
            state.remove_token(tid)
        return resolutions

    # -- stage handlers --

    def _decide(self, token: Token, state: SessionState, delta: float) -> Resolution | None:
        if token.target is not None or token.current is None:
            return None

        move = state.grid.next_move(token.current)
        if isinstance(move, RoomExit):
            return self._deliver(token, move.room, state)

        if isinstance(move, GridPos) and not state.is_occupied(move):
            token.target = move
            token.move_steps += 1
            token.stuck_time = 0.0
            token.move_stage = MoveStage.TRANSIT
            token.move_progress = 0.0
            return None

        # Blocked by another token or pointing off the grid
        token.stuck_time += delta
        return None

    def _advance(self, token: Token, state: SessionState, delta: float) -> None:
        token.move_progress += delta / self.line_move_seconds(state.elapsed_time)
        if token.move_progress >= 1.0:
            token.move_progress = 0.0
            token.move_stage = MoveStage.ARRIVED

    @staticmethod
    def _commit(token: Token) -> None:
        token.current = token.target
        token.target = None
        token.move_stage = MoveStage.AT_NODE
        token.move_progress = 0.0

    def _stalled(self, token: Token) -> bool:
        cfg = self._config
        return (
            token.move_steps + token.stuck_time > cfg.stall_budget
            or token.stuck_time >= cfg.stall_seconds
        )

    # -- resolution --

    @staticmethod
    def _deliver(token: Token, room: int, state: SessionState) -> Resolution:
        if room == token.destination:
            points = state.record_correct()
            logger.debug("Token %d delivered to room %d (+%d, combo %d)", token.id, room, points, state.combo)
            return Resolution(token.id, FeedbackKind.CORRECT, points, room)

        penalty = state.record_wrong()
        logger.debug("Token %d misdelivered to room %d (wanted %d)", token.id, room, token.destination)
        return Resolution(token.id, FeedbackKind.WRONG, penalty, room)
