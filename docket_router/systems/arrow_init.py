"""Initial switch directions for a new session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docket_router.core.enums import ArrowInitMode, Direction, Domain
from docket_router.core.grid import SwitchGrid

if TYPE_CHECKING:
    from docket_router.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


def _pick_uniform(rng: DeterministicRNG, key: int, choices: frozenset[Direction]) -> Direction:
    ordered = sorted(choices)
    return ordered[rng.next_int(Domain.ARROW_PICK, key, 0, 0, len(ordered) - 1)]


def initialize_grid(
    rows: int,
    cols: int,
    mode: ArrowInitMode,
    rng: DeterministicRNG,
    outlet_bias: float = 0.8,
) -> SwitchGrid:
    """Build a grid with every switch pointing in one of its valid directions.

    ``RANDOM`` draws uniformly from the cell's in-grid moves. ``BIASED``
    points cells on the exit column/row outward with probability
    *outlet_bias* so early levels route more directly, falling back to the
    uniform draw otherwise; interior cells are always uniform.
    """
    grid = SwitchGrid(rows, cols)
    for r, c, cell in grid.cells():
        key = r * cols + c
        if mode == ArrowInitMode.BIASED:
            exits = grid.exit_directions(r, c)
            if exits and rng.next_bool(Domain.ARROW_BIAS, key, 0, outlet_bias):
                cell.direction = exits[0]
                continue
        cell.direction = _pick_uniform(rng, key, grid.in_grid_directions(r, c))
    logger.debug("Initialised %dx%d grid (%s)", rows, cols, mode.value)
    return grid
