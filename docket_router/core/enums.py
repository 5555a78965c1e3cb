"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class Direction(IntEnum):
    """Switch directions, in rotation order."""

    N = 0
    E = 1
    S = 2
    W = 3

    def rotated(self) -> Direction:
        return Direction((self.value + 1) % 4)


@unique
class TokenState(IntEnum):
    """Where a token lives: the outside queue or the grid."""

    WAITING = 0
    IN_GRID = 1


@unique
class MoveStage(IntEnum):
    """Three-stage move cycle of an in-grid token."""

    AT_NODE = 0     # deciding / waiting at a node
    TRANSIT = 1     # interpolating along an edge
    ARRIVED = 2     # reached the target, commit pending


@unique
class ArrowInitMode(str, Enum):
    """Grid initialisation policy."""

    RANDOM = "random"
    BIASED = "biased"


@unique
class FeedbackKind(str, Enum):
    """Outcome categories surfaced to the presentation layer."""

    CORRECT = "correct"
    WRONG = "wrong"
    STUCK = "stuck"


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    DESTINATION = 0
    ARROW_BIAS = 1
    ARROW_PICK = 2
