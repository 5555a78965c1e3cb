"""Presentation adapters: the collaborators the engine talks to.

The engine never draws or plays audio itself. It calls an injected
:class:`SoundPlayer` for cues and hands :class:`Snapshot` objects to a
:class:`FrameRenderer`. :class:`BoardLayout` translates a pointer position
into a grid cell for rotation input.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TextIO

from docket_router.core.enums import Direction
from docket_router.core.models import GridPos

if TYPE_CHECKING:
    from docket_router.core.snapshot import Snapshot

CUE_START = "start"
CUE_CORRECT = "correct"
CUE_WRONG = "wrong"


class SoundPlayer(Protocol):
    def play(self, cue: str) -> None: ...


class FrameRenderer(Protocol):
    def render(self, snapshot: Snapshot) -> None: ...


class NullSound:
    """Discards every cue (headless runs, tests)."""

    def play(self, cue: str) -> None:
        return None


@dataclass(frozen=True, slots=True)
class BoardLayout:
    """Node placement on a canvas of ``width`` x ``height`` pixels.

    8% margins on each side, square nodes capped at ``max_node_size``,
    grid centred on the canvas.
    """

    width: float
    height: float
    rows: int = 4
    cols: int = 4
    margin_ratio: float = 0.08
    max_node_size: float = 60.0

    @property
    def node_size(self) -> float:
        usable_w = self.width - self.width * self.margin_ratio * 2
        usable_h = self.height - self.height * self.margin_ratio * 2
        return min(usable_w / self.cols, usable_h / self.rows, self.max_node_size)

    @property
    def grid_origin(self) -> tuple[float, float]:
        size = self.node_size
        return (self.width - size * self.cols) / 2, (self.height - size * self.rows) / 2

    def node_pos(self, r: float, c: float) -> tuple[float, float]:
        """Canvas centre of node (r, c); fractional values interpolate."""
        size = self.node_size
        x0, y0 = self.grid_origin
        return x0 + c * size + size / 2, y0 + r * size + size / 2

    def cell_at(self, x: float, y: float) -> GridPos | None:
        """The node whose hit circle contains (x, y), if any."""
        radius = self.node_size / 2.5
        for r in range(self.rows):
            for c in range(self.cols):
                nx, ny = self.node_pos(r, c)
                if math.hypot(x - nx, y - ny) < radius:
                    return GridPos(r, c)
        return None


_ARROWS = {
    Direction.N: "^",
    Direction.E: ">",
    Direction.S: "v",
    Direction.W: "<",
}


def format_frame(snapshot: Snapshot) -> str:
    """Plain-text board: header, switches with tokens, room labels, queue."""
    grid = snapshot.grid
    lines = [
        f"score {snapshot.score:>4} | time {snapshot.display_time:>2} | "
        f"life {snapshot.hearts or '-'} | combo {snapshot.combo}",
    ]
    if snapshot.countdown_active:
        lines.append(f"  -- {snapshot.countdown_value} --")

    at_node: dict[tuple[int, int], int] = {}
    for token in snapshot.in_grid:
        pos = token.display_position()
        if pos is not None:
            at_node[(round(pos[0]), round(pos[1]))] = token.destination

    for r in range(grid.rows):
        row = []
        for c in range(grid.cols):
            arrow = _ARROWS[grid.direction(r, c)]
            dest = at_node.get((r, c))
            row.append(f"{arrow}{dest}" if dest is not None else f"{arrow}.")
        queue = ""
        if r == 1 and snapshot.waiting:
            queue = ",".join(
                f"{t.destination}{'*' if t.showcasing else ''}" for t in snapshot.waiting
            )
        lines.append(f"{queue:>8} | " + "  ".join(row) + f"  | {r + 1}")
    rooms = "  ".join(f"{grid.rows + 1 + c:>2}" for c in range(grid.cols))
    lines.append(f"{'':>8}   {rooms}")
    return "\n".join(lines)


class TextRenderer:
    """Writes :func:`format_frame` output to a text stream."""

    __slots__ = ("_stream",)

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def render(self, snapshot: Snapshot) -> None:
        self._stream.write(format_frame(snapshot) + "\n\n")
