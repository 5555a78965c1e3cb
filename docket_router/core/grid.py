"""Switch grid: a fixed array of rotatable direction cells."""

from __future__ import annotations

from dataclasses import dataclass

from docket_router.core.enums import Direction
from docket_router.core.models import DIRECTION_OFFSETS, GridPos, RoomExit


@dataclass(slots=True)
class Cell:
    """A directional switch at one node."""

    valid_directions: frozenset[Direction]
    direction: Direction

    def copy(self) -> Cell:
        return Cell(self.valid_directions, self.direction)


class SwitchGrid:
    """Rows x cols switches backed by a flat list.

    East exits from the last column lead to rooms ``1..rows`` (by row);
    south exits from the last row lead to rooms ``rows+1..rows+cols`` (by col).
    """

    __slots__ = ("rows", "cols", "_cells")

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols
        self._cells: list[Cell] = []
        for r in range(rows):
            for c in range(cols):
                valid = self.valid_directions(r, c)
                # Placeholder until an init policy assigns a direction
                self._cells.append(Cell(valid, min(valid)))

    # -- access --

    def _idx(self, r: int, c: int) -> int:
        return r * self.cols + c

    def in_bounds(self, pos: GridPos) -> bool:
        return 0 <= pos.row < self.rows and 0 <= pos.col < self.cols

    def in_bounds_rc(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def _check(self, r: int, c: int) -> None:
        if not self.in_bounds_rc(r, c):
            raise ValueError(f"Cell ({r}, {c}) is outside the {self.rows}x{self.cols} grid")

    def cell(self, r: int, c: int) -> Cell:
        self._check(r, c)
        return self._cells[self._idx(r, c)]

    def direction(self, r: int, c: int) -> Direction:
        return self.cell(r, c).direction

    def set_direction(self, r: int, c: int, direction: Direction) -> None:
        self.cell(r, c).direction = direction

    def cells(self) -> list[tuple[int, int, Cell]]:
        return [(i // self.cols, i % self.cols, cell) for i, cell in enumerate(self._cells)]

    def in_grid_directions(self, r: int, c: int) -> frozenset[Direction]:
        """Directions whose neighbour node is on the grid."""
        moves = set()
        if r > 0:
            moves.add(Direction.N)
        if c < self.cols - 1:
            moves.add(Direction.E)
        if r < self.rows - 1:
            moves.add(Direction.S)
        if c > 0:
            moves.add(Direction.W)
        return frozenset(moves)

    def exit_directions(self, r: int, c: int) -> list[Direction]:
        """Room-exit directions at (r, c), east first."""
        exits: list[Direction] = []
        if c == self.cols - 1:
            exits.append(Direction.E)
        if r == self.rows - 1:
            exits.append(Direction.S)
        return exits

    def valid_directions(self, r: int, c: int) -> frozenset[Direction]:
        """Routable directions: in-grid moves plus room exits."""
        return self.in_grid_directions(r, c) | frozenset(self.exit_directions(r, c))

    # -- player input --

    def rotate(self, r: int, c: int) -> Direction:
        """Advance the switch at (r, c) one step clockwise and return it."""
        cell = self.cell(r, c)
        cell.direction = cell.direction.rotated()
        return cell.direction

    # -- routing --

    def exit_room(self, r: int, c: int, direction: Direction) -> int | None:
        if c == self.cols - 1 and direction == Direction.E:
            return r + 1
        if r == self.rows - 1 and direction == Direction.S:
            return self.rows + 1 + c
        return None

    def next_move(self, pos: GridPos) -> RoomExit | GridPos | None:
        """Where a token at *pos* goes next: a room, a node, or nowhere."""
        direction = self.direction(pos.row, pos.col)
        room = self.exit_room(pos.row, pos.col, direction)
        if room is not None:
            return RoomExit(room)
        nxt = pos + DIRECTION_OFFSETS[direction]
        if self.in_bounds(nxt):
            return nxt
        return None

    # -- copy --

    def copy(self) -> SwitchGrid:
        new = SwitchGrid.__new__(SwitchGrid)
        new.rows = self.rows
        new.cols = self.cols
        new._cells = [cell.copy() for cell in self._cells]
        return new
