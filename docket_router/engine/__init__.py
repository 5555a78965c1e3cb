"""Engine layer: session loop, spawn scheduling, entry gate, movement."""

from docket_router.engine.countdown import Countdown
from docket_router.engine.entry_gate import EntryGate
from docket_router.engine.input_queue import InputQueue
from docket_router.engine.movement import MovementEngine, Resolution, line_move_seconds
from docket_router.engine.session_loop import SessionLoop, build_session
from docket_router.engine.spawn_scheduler import SpawnScheduler

__all__ = [
    "Countdown",
    "EntryGate",
    "InputQueue",
    "MovementEngine",
    "Resolution",
    "SessionLoop",
    "SpawnScheduler",
    "build_session",
    "line_move_seconds",
]
