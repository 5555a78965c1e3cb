"""Core data models and session representation."""

from docket_router.core.enums import ArrowInitMode, Direction, Domain, FeedbackKind, MoveStage, TokenState
from docket_router.core.models import GridPos, RoomExit, Token
from docket_router.core.grid import Cell, SwitchGrid
from docket_router.core.session_state import SessionState, SessionSummary
from docket_router.core.snapshot import Snapshot

__all__ = [
    "ArrowInitMode",
    "Cell",
    "Direction",
    "Domain",
    "FeedbackKind",
    "GridPos",
    "MoveStage",
    "RoomExit",
    "SessionState",
    "SessionSummary",
    "Snapshot",
    "SwitchGrid",
    "Token",
    "TokenState",
]
