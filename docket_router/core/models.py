"""Core data models: GridPos, Token."""

from __future__ import annotations

from dataclasses import dataclass, replace

from docket_router.core.enums import Direction, MoveStage, TokenState


@dataclass(frozen=True, slots=True)
class GridPos:
    """Immutable (row, col) node coordinate."""

    row: int = 0
    col: int = 0

    def __add__(self, other: GridPos) -> GridPos:
        return GridPos(self.row + other.row, self.col + other.col)

    def __repr__(self) -> str:
        return f"({self.row}, {self.col})"


# Direction offsets in (row, col)
DIRECTION_OFFSETS: dict[Direction, GridPos] = {
    Direction.N: GridPos(-1, 0),
    Direction.E: GridPos(0, 1),
    Direction.S: GridPos(1, 0),
    Direction.W: GridPos(0, -1),
}


@dataclass(frozen=True, slots=True)
class RoomExit:
    """A move that leaves the grid into a destination room."""

    room: int


@dataclass(slots=True)
class Token:
    """A docket routed through the grid.

    While ``move_stage`` is AT_NODE the token sits on ``current``; during
    TRANSIT and ARRIVED ``target`` is the node it has claimed.
    """

    id: int
    destination: int
    spawn_order: int
    state: TokenState = TokenState.WAITING
    current: GridPos | None = None
    target: GridPos | None = None
    move_stage: MoveStage = MoveStage.AT_NODE
    move_progress: float = 0.0
    move_steps: int = 0
    stuck_time: float = 0.0

    # Pre-entry showcase and cooldown
    showcasing: bool = True
    showcase_remaining: float = 0.0
    entry_cooldown: float = 0.0

    spawned_at: float = 0.0

    @property
    def waiting(self) -> bool:
        return self.state == TokenState.WAITING

    @property
    def in_grid(self) -> bool:
        return self.state == TokenState.IN_GRID

    def occupies(self, pos: GridPos) -> bool:
        """True if this token holds *pos* (standing on it or heading to it)."""
        if not self.in_grid:
            return False
        if self.move_stage == MoveStage.AT_NODE:
            return self.current == pos
        return self.target == pos

    def display_position(self) -> tuple[float, float] | None:
        """Fractional (row, col) for renderers; None while waiting."""
        if not self.in_grid or self.current is None:
            return None
        if self.move_stage == MoveStage.TRANSIT and self.target is not None:
            t = self.move_progress
            return (
                self.current.row + (self.target.row - self.current.row) * t,
                self.current.col + (self.target.col - self.current.col) * t,
            )
        if self.move_stage == MoveStage.ARRIVED and self.target is not None:
            return (float(self.target.row), float(self.target.col))
        return (float(self.current.row), float(self.current.col))

    def copy(self) -> Token:
        return replace(self)
