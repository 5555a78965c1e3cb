"""Tests for MovementEngine.

Covers:
- AT_NODE → TRANSIT → ARRIVED → AT_NODE stage cycle
- Node exclusivity and spawn-order priority
- Room resolution: correct / wrong scoring, combo bonus cap
- Stall removal (stuck-time threshold and move budget)
- Speed ramp
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from docket_router.config import DIFFICULTIES, DifficultyProfile, SessionConfig, SpeedRamp
from docket_router.core.enums import ArrowInitMode, Direction, FeedbackKind, MoveStage, TokenState
from docket_router.core.grid import SwitchGrid
from docket_router.core.models import GridPos, Token
from docket_router.core.session_state import SessionState
from docket_router.engine.movement import MovementEngine, line_move_seconds

N, E, S, W = Direction.N, Direction.E, Direction.S, Direction.W

# One-second edges with quarter-second steps keep progress exact
UNIT = DifficultyProfile(
    key="unit", tick_seconds=1.0, max_tokens=3,
    spawn_intervals=(9.0, 8.0, 7.0), arrow_init=ArrowInitMode.RANDOM,
    speed=SpeedRamp(base=1.0, min=0.5),
)


def _make(default: Direction = N, profile: DifficultyProfile = UNIT):
    config = SessionConfig()
    grid = SwitchGrid(4, 4)
    for _r, _c, cell in grid.cells():
        cell.direction = default
    state = SessionState(config, profile, grid)
    return state, MovementEngine(config, profile)


def _place(state, r, c, destination=1) -> Token:
    tid = state.allocate_token_id()
    token = Token(
        id=tid, destination=destination, spawn_order=tid,
        state=TokenState.IN_GRID, current=GridPos(r, c), showcasing=False,
    )
    state.add_token(token)
    return token


class TestStageCycle:

    def test_claim_then_transit_then_commit(self):
        state, engine = _make()
        state.grid.set_direction(1, 0, E)
        token = _place(state, 1, 0)

        engine.step(state, 0.25)
        assert token.move_stage == MoveStage.TRANSIT
        assert token.target == GridPos(1, 1)
        assert token.current == GridPos(1, 0)
        assert token.move_steps == 1

        for expected in (0.25, 0.5, 0.75):
            engine.step(state, 0.25)
            assert token.move_stage == MoveStage.TRANSIT
            assert token.move_progress == pytest.approx(expected)

        engine.step(state, 0.25)
        assert token.move_stage == MoveStage.ARRIVED
        assert token.move_progress == 0.0

        engine.step(state, 0.25)
        assert token.move_stage == MoveStage.AT_NODE
        assert token.current == GridPos(1, 1)
        assert token.target is None

    def test_claim_resets_stuck_time(self):
        state, engine = _make()
        state.grid.set_direction(1, 0, E)
        token = _place(state, 1, 0)
        token.stuck_time = 2.0
        engine.step(state, 0.25)
        assert token.stuck_time == 0.0

    def test_rotation_mid_transit_does_not_redirect(self):
        state, engine = _make()
        state.grid.set_direction(1, 0, E)
        token = _place(state, 1, 0)
        engine.step(state, 0.25)
        state.grid.set_direction(1, 0, S)
        for _ in range(5):
            engine.step(state, 0.25)
        assert token.current == GridPos(1, 1)

    def test_dead_end_accumulates_stuck_time(self):
        state, engine = _make()
        token = _place(state, 0, 2)
        engine.step(state, 0.25)
        engine.step(state, 0.25)
        assert token.move_stage == MoveStage.AT_NODE
        assert token.stuck_time == pytest.approx(0.5)


class TestOccupancy:

    def test_earlier_spawn_wins_contested_node(self):
        state, engine = _make()
        state.grid.set_direction(1, 0, E)
        state.grid.set_direction(0, 1, S)
        first = _place(state, 1, 0)
        second = _place(state, 0, 1)
        engine.step(state, 0.25)
        assert first.target == GridPos(1, 1)
        assert second.move_stage == MoveStage.AT_NODE
        assert second.stuck_time == pytest.approx(0.25)

    def test_priority_follows_spawn_order_not_id(self):
        state, engine = _make()
        state.grid.set_direction(1, 0, E)
        state.grid.set_direction(0, 1, S)
        a = _place(state, 1, 0)
        b = _place(state, 0, 1)
        a.spawn_order, b.spawn_order = 2, 1
        engine.step(state, 0.25)
        assert b.target == GridPos(1, 1)
        assert a.target is None

    def test_blocked_by_token_standing_on_target(self):
        state, engine = _make()
        state.grid.set_direction(0, 0, E)
        mover = _place(state, 0, 0)
        _place(state, 0, 1)
        engine.step(state, 0.25)
        assert mover.target is None
        assert mover.stuck_time == pytest.approx(0.25)

    def test_exiting_token_holds_node_until_step_ends(self):
        state, engine = _make(E)
        leaver = _place(state, 1, 3, destination=2)
        follower = _place(state, 1, 2)
        engine.step(state, 0.25)
        assert leaver.id not in state.tokens
        assert follower.target is None
        engine.step(state, 0.25)
        assert follower.target == GridPos(1, 3)

    def test_no_shared_nodes_in_a_crowd(self):
        state, engine = _make(E)
        for r in range(4):
            for c in range(3):
                _place(state, r, c, destination=r + 1)
        for _ in range(40):
            engine.step(state, 0.25)
            held = []
            for t in state.grid_tokens():
                held.append(t.current if t.move_stage == MoveStage.AT_NODE else t.target)
            assert len(held) == len(set(held))


class TestResolution:

    def test_correct_delivery(self):
        state, engine = _make(E)
        token = _place(state, 1, 3, destination=2)
        [res] = engine.step(state, 0.25)
        assert res.kind == FeedbackKind.CORRECT
        assert res.room == 2
        assert res.score_delta == 11
        assert res.message == "Correct! +11"
        assert state.score == 11
        assert state.combo == 1
        assert state.correct_count == 1
        assert token.id not in state.tokens

    def test_south_exit_room_numbers(self):
        state, engine = _make(S)
        _place(state, 3, 2, destination=7)
        [res] = engine.step(state, 0.25)
        assert res.room == 7
        assert res.kind == FeedbackKind.CORRECT

    def test_combo_bonus_caps_at_five(self):
        state, engine = _make(E)
        awarded = []
        for _ in range(7):
            _place(state, 0, 3, destination=1)
            [res] = engine.step(state, 0.25)
            awarded.append(res.score_delta)
        assert awarded == [11, 12, 13, 14, 15, 15, 15]
        assert state.max_combo == 7

    def test_wrong_delivery(self):
        state, engine = _make(E)
        state.combo = 3
        state.max_combo = 3
        _place(state, 1, 3, destination=5)
        [res] = engine.step(state, 0.25)
        assert res.kind == FeedbackKind.WRONG
        assert res.message == "Misdelivered! -5"
        assert state.score == -5
        assert state.life == 2
        assert state.combo == 0
        assert state.max_combo == 3
        assert state.wrong_count == 1

    def test_corner_follows_its_arrow(self):
        state, engine = _make()
        state.grid.set_direction(3, 3, S)
        _place(state, 3, 3, destination=8)
        [res] = engine.step(state, 0.25)
        assert res.room == 8


class TestStall:

    def test_stuck_time_threshold(self):
        state, engine = _make()
        token = _place(state, 0, 0)
        token.stuck_time = 7.9
        assert engine.step(state, 0.05) == []
        token.stuck_time = 7.99
        [res] = engine.step(state, 0.05)
        assert res.kind == FeedbackKind.STUCK
        assert res.message == "Stalled (congestion) -3"
        assert state.score == -3
        assert state.life == 2
        assert state.stuck_count == 1
        assert token.id not in state.tokens

    def test_stall_resets_combo(self):
        state, engine = _make()
        state.combo = 4
        token = _place(state, 0, 0)
        token.stuck_time = 7.99
        engine.step(state, 0.05)
        assert state.combo == 0

    def test_move_budget_removes_mid_transit(self):
        state, engine = _make()
        token = _place(state, 1, 0)
        token.target = GridPos(1, 1)
        token.move_stage = MoveStage.TRANSIT
        token.move_steps = 25
        token.stuck_time = 5.5
        [res] = engine.step(state, 0.05)
        assert res.kind == FeedbackKind.STUCK
        assert token.id not in state.tokens

    def test_budget_is_strictly_greater(self):
        state, engine = _make()
        token = _place(state, 1, 0)
        token.target = GridPos(1, 1)
        token.move_stage = MoveStage.TRANSIT
        token.move_steps = 30
        assert engine.step(state, 0.05) == []


class TestSpeedRamp:

    def test_easy_ramp_endpoints(self):
        ramp = DIFFICULTIES["easy"].speed
        assert line_move_seconds(ramp, 0.0) == pytest.approx(1.2)
        assert line_move_seconds(ramp, 60.0) == pytest.approx(0.95)

    def test_ramp_midpoint(self):
        assert line_move_seconds(DIFFICULTIES["normal"].speed, 30.0) == pytest.approx(0.85)
        assert line_move_seconds(DIFFICULTIES["hard"].speed, 30.0) == pytest.approx(0.725)

    def test_ramp_is_clamped(self):
        ramp = DIFFICULTIES["hard"].speed
        assert line_move_seconds(ramp, -5.0) == pytest.approx(0.95)
        assert line_move_seconds(ramp, 500.0) == pytest.approx(0.50)

    def test_later_edges_are_faster(self):
        state, engine = _make(E)
        token = _place(state, 1, 0)
        state.elapsed_time = 60.0
        engine.step(state, 0.25)
        engine.step(state, 0.25)
        assert token.move_progress == pytest.approx(0.5)
