"""Tests for the switch grid and arrow initialisation.

Covers:
- Valid / in-grid / exit direction sets per cell
- Rotation order and single-cell effect
- Room-exit mapping (east column → rooms 1-4, south row → rooms 5-8)
- Random and biased initialisation keep every switch in its valid set
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from docket_router.core.enums import ArrowInitMode, Direction, Domain
from docket_router.core.grid import SwitchGrid
from docket_router.core.models import GridPos, RoomExit
from docket_router.systems.arrow_init import initialize_grid
from docket_router.systems.rng import DeterministicRNG

N, E, S, W = Direction.N, Direction.E, Direction.S, Direction.W


class _FixedRNG:
    """Returns the same float for every draw."""

    seed = 0

    def __init__(self, value: float) -> None:
        self.value = value

    def next_float(self, domain, key, draw):
        return self.value

    def next_int(self, domain, key, draw, low, high):
        return low + int(self.value * (high - low + 1))

    def next_bool(self, domain, key, draw, probability=0.5):
        return self.value < probability


class _RecordingRNG(_FixedRNG):
    """Fixed draws that remember the (domain, key, draw) of every call."""

    def __init__(self, value: float) -> None:
        super().__init__(value)
        self.calls: list[tuple] = []

    def next_int(self, domain, key, draw, low, high):
        self.calls.append((domain, key, draw))
        return super().next_int(domain, key, draw, low, high)

    def next_bool(self, domain, key, draw, probability=0.5):
        self.calls.append((domain, key, draw))
        return super().next_bool(domain, key, draw, probability)


def _grid_pointing(direction: Direction) -> SwitchGrid:
    grid = SwitchGrid(4, 4)
    for _r, _c, cell in grid.cells():
        cell.direction = direction
    return grid


class TestDirectionSets:

    def test_corner_in_grid_directions(self):
        grid = SwitchGrid(4, 4)
        assert grid.in_grid_directions(0, 0) == {E, S}
        assert grid.in_grid_directions(0, 3) == {S, W}
        assert grid.in_grid_directions(3, 0) == {N, E}
        assert grid.in_grid_directions(3, 3) == {N, W}

    def test_interior_has_all_four(self):
        grid = SwitchGrid(4, 4)
        assert grid.in_grid_directions(1, 2) == {N, E, S, W}

    def test_exit_directions_only_on_far_edges(self):
        grid = SwitchGrid(4, 4)
        assert grid.exit_directions(1, 3) == [E]
        assert grid.exit_directions(3, 1) == [S]
        assert grid.exit_directions(3, 3) == [E, S]
        assert grid.exit_directions(0, 0) == []

    def test_valid_directions_add_room_exits(self):
        grid = SwitchGrid(4, 4)
        assert grid.valid_directions(0, 3) == {S, W, E}
        assert grid.valid_directions(3, 3) == {N, E, S, W}
        assert grid.valid_directions(0, 0) == {E, S}

    def test_cell_stores_valid_set(self):
        grid = SwitchGrid(4, 4)
        for r, c, cell in grid.cells():
            assert cell.valid_directions == grid.valid_directions(r, c)


class TestRotation:

    def test_rotation_order(self):
        grid = SwitchGrid(4, 4)
        grid.set_direction(1, 1, N)
        assert [grid.rotate(1, 1) for _ in range(4)] == [E, S, W, N]

    def test_four_rotations_restore_every_cell(self):
        grid = initialize_grid(4, 4, ArrowInitMode.RANDOM, DeterministicRNG(3))
        before = {(r, c): cell.direction for r, c, cell in grid.cells()}
        for r, c in before:
            for _ in range(4):
                grid.rotate(r, c)
        after = {(r, c): cell.direction for r, c, cell in grid.cells()}
        assert before == after

    def test_rotation_ignores_valid_set(self):
        """A corner switch can be turned to point off the grid."""
        grid = SwitchGrid(4, 4)
        grid.set_direction(0, 0, E)
        grid.rotate(0, 0)
        grid.rotate(0, 0)
        assert grid.direction(0, 0) == W
        assert W not in grid.valid_directions(0, 0)

    def test_rotation_touches_one_cell(self):
        grid = _grid_pointing(N)
        grid.rotate(2, 1)
        changed = [(r, c) for r, c, cell in grid.cells() if cell.direction != N]
        assert changed == [(2, 1)]

    def test_out_of_range_raises(self):
        grid = SwitchGrid(4, 4)
        with pytest.raises(ValueError):
            grid.rotate(4, 0)
        with pytest.raises(ValueError):
            grid.rotate(0, -1)


class TestNextMove:

    def test_east_column_exits(self):
        grid = _grid_pointing(E)
        for r in range(4):
            assert grid.next_move(GridPos(r, 3)) == RoomExit(r + 1)

    def test_south_row_exits(self):
        grid = _grid_pointing(S)
        for c in range(4):
            assert grid.next_move(GridPos(3, c)) == RoomExit(c + 5)

    def test_in_grid_step(self):
        grid = _grid_pointing(E)
        assert grid.next_move(GridPos(1, 1)) == GridPos(1, 2)
        grid.set_direction(1, 1, S)
        assert grid.next_move(GridPos(1, 1)) == GridPos(2, 1)

    def test_dead_ends(self):
        grid = _grid_pointing(N)
        assert grid.next_move(GridPos(0, 2)) is None
        grid.set_direction(2, 0, W)
        assert grid.next_move(GridPos(2, 0)) is None


class TestInitialisation:

    @pytest.mark.parametrize("mode", [ArrowInitMode.RANDOM, ArrowInitMode.BIASED])
    def test_every_switch_in_valid_set(self, mode):
        for seed in range(25):
            grid = initialize_grid(4, 4, mode, DeterministicRNG(seed))
            for r, c, cell in grid.cells():
                assert cell.direction in cell.valid_directions, (seed, r, c)

    def test_random_mode_never_points_at_rooms(self):
        for seed in range(25):
            grid = initialize_grid(4, 4, ArrowInitMode.RANDOM, DeterministicRNG(seed))
            for r, c, cell in grid.cells():
                assert cell.direction in grid.in_grid_directions(r, c)

    def test_biased_mode_points_outward_when_roll_succeeds(self):
        grid = initialize_grid(4, 4, ArrowInitMode.BIASED, _FixedRNG(0.0))
        for r in range(4):
            assert grid.direction(r, 3) == E
        for c in range(3):
            assert grid.direction(3, c) == S

    def test_biased_mode_falls_back_to_uniform(self):
        grid = initialize_grid(4, 4, ArrowInitMode.BIASED, _FixedRNG(0.9))
        for r, c, cell in grid.cells():
            assert cell.direction in grid.in_grid_directions(r, c)

    def test_biased_interior_matches_random(self):
        """Interior cells use the same uniform draw in both modes."""
        rng = DeterministicRNG(11)
        biased = initialize_grid(4, 4, ArrowInitMode.BIASED, rng)
        uniform = initialize_grid(4, 4, ArrowInitMode.RANDOM, rng)
        for r in range(3):
            for c in range(3):
                assert biased.direction(r, c) == uniform.direction(r, c)

    def test_same_seed_same_grid(self):
        a = initialize_grid(4, 4, ArrowInitMode.BIASED, DeterministicRNG(5))
        b = initialize_grid(4, 4, ArrowInitMode.BIASED, DeterministicRNG(5))
        assert [cell.direction for *_rc, cell in a.cells()] == [cell.direction for *_rc, cell in b.cells()]

    def test_draws_keyed_by_cell_index(self):
        rng = _RecordingRNG(0.9)
        initialize_grid(3, 5, ArrowInitMode.BIASED, rng)
        picks = {key for domain, key, _ in rng.calls if domain == Domain.ARROW_PICK}
        biases = {key for domain, key, _ in rng.calls if domain == Domain.ARROW_BIAS}
        assert picks == set(range(15))
        assert biases == {r * 5 + c for r in range(3) for c in range(5) if r == 2 or c == 4}
        assert {draw for *_dk, draw in rng.calls} == {0}

    def test_bias_is_roughly_eighty_percent(self):
        outward = 0
        total = 0
        for seed in range(200):
            grid = initialize_grid(4, 4, ArrowInitMode.BIASED, DeterministicRNG(seed))
            for r in range(3):
                total += 1
                outward += grid.direction(r, 3) == E
        assert 0.7 < outward / total < 0.9


class TestCopy:

    def test_copy_is_independent(self):
        grid = _grid_pointing(N)
        clone = grid.copy()
        grid.rotate(1, 1)
        assert clone.direction(1, 1) == N
        assert grid.direction(1, 1) == E
