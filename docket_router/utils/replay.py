"""Replay serialization — records step-by-step inputs and state."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docket_router.core.models import GridPos
    from docket_router.core.session_state import SessionState

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates per-step records and flushes them to a JSON replay file.

    Seed, difficulty, step deltas and rotations are enough to reproduce a
    session; token positions are kept for inspection.
    """

    __slots__ = ("_path", "_steps", "_seed", "_difficulty")

    def __init__(self, path: str | Path, seed: int, difficulty: str) -> None:
        self._path = Path(path)
        self._seed = seed
        self._difficulty = difficulty
        self._steps: list[dict[str, Any]] = []

    @property
    def step_count(self) -> int:
        return len(self._steps)

    def record_step(
        self,
        delta: float,
        rotations: list[GridPos],
        state: SessionState,
    ) -> None:
        tokens = [
            {
                "id": t.id,
                "destination": t.destination,
                "state": t.state.name,
                "pos": [t.current.row, t.current.col] if t.current else None,
                "target": [t.target.row, t.target.col] if t.target else None,
                "stage": int(t.move_stage),
            }
            for t in state.tokens.values()
        ]
        self._steps.append(
            {
                "step": state.step_count,
                "delta": delta,
                "rotations": [[p.row, p.col] for p in rotations],
                "score": state.score,
                "life": state.life,
                "tokens": tokens,
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": "1.0",
            "seed": self._seed,
            "difficulty": self._difficulty,
            "total_steps": len(self._steps),
            "steps": self._steps,
        }

    def flush(self) -> None:
        """Write accumulated data to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d steps)", self._path, len(self._steps))
