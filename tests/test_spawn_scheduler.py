"""Tests for SpawnScheduler: tiered intervals, concurrency cap, accumulator."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from docket_router.config import DIFFICULTIES, SessionConfig
from docket_router.core.enums import Domain, TokenState
from docket_router.core.grid import SwitchGrid
from docket_router.core.session_state import SessionState
from docket_router.engine.spawn_scheduler import SpawnScheduler
from docket_router.systems.rng import DeterministicRNG


def _make(difficulty: str = "easy", seed: int = 42, **overrides):
    config = SessionConfig(**overrides)
    profile = DIFFICULTIES[difficulty]
    state = SessionState(config, profile, SwitchGrid(config.grid_rows, config.grid_cols), seed=seed)
    return state, SpawnScheduler(config, profile, DeterministicRNG(seed))


class TestIntervalTiers:

    @pytest.mark.parametrize("elapsed, expected", [
        (0.0, 9.0), (19.99, 9.0), (20.0, 8.0), (39.9, 8.0), (40.0, 7.0), (59.0, 7.0),
    ])
    def test_easy_tiers(self, elapsed, expected):
        _state, spawner = _make("easy")
        assert spawner.interval_for(elapsed) == expected

    def test_hard_tiers(self):
        _state, spawner = _make("hard")
        assert [spawner.interval_for(t) for t in (5.0, 25.0, 45.0)] == [7.0, 6.0, 5.0]

    def test_tick_updates_current_interval(self):
        state, spawner = _make("normal")
        state.elapsed_time = 25.0
        spawner.tick(state, 0.01)
        assert state.spawn_interval == 7.0


class TestSpawning:

    def test_no_spawn_before_interval(self):
        state, spawner = _make("easy")
        state.spawn_accumulator = 8.9
        assert spawner.tick(state, 0.05) is None
        assert state.token_count == 0
        assert state.spawn_accumulator == pytest.approx(8.95)

    def test_spawn_when_interval_reached(self):
        state, spawner = _make("easy")
        state.spawn_accumulator = 8.97
        token = spawner.tick(state, 0.05)
        assert token is not None
        assert state.spawn_accumulator == 0.0
        assert token.state == TokenState.WAITING
        assert token.showcasing
        assert token.showcase_remaining == pytest.approx(1.2)
        assert token.entry_cooldown == pytest.approx(0.4)
        assert 1 <= token.destination <= 8

    def test_cap_blocks_spawn_but_resets_accumulator(self):
        state, spawner = _make("easy")
        spawner.spawn(state)
        spawner.spawn(state)
        state.spawn_accumulator = 8.97
        assert spawner.tick(state, 0.05) is None
        assert state.token_count == 2
        assert state.spawn_accumulator == 0.0

    def test_capacity_frees_after_removal(self):
        state, spawner = _make("easy")
        first = spawner.spawn(state)
        spawner.spawn(state)
        assert not spawner.has_capacity(state)
        state.remove_token(first.id)
        assert spawner.has_capacity(state)

    def test_ids_and_spawn_order_increase(self):
        state, spawner = _make("normal")
        tokens = [spawner.spawn(state) for _ in range(5)]
        assert [t.id for t in tokens] == [1, 2, 3, 4, 5]
        assert [t.spawn_order for t in tokens] == [1, 2, 3, 4, 5]

    def test_spawn_stamps_clock(self):
        state, spawner = _make("normal")
        state.clock = 12.5
        assert spawner.spawn(state).spawned_at == 12.5


class TestDestinations:

    def test_all_rooms_reachable(self):
        state, spawner = _make("normal", seed=3)
        seen = {spawner.spawn(state).destination for _ in range(200)}
        assert seen == set(range(1, 9))

    def test_same_seed_same_destinations(self):
        a_state, a = _make("normal", seed=9)
        b_state, b = _make("normal", seed=9)
        assert [a.spawn(a_state).destination for _ in range(20)] == [
            b.spawn(b_state).destination for _ in range(20)
        ]

    def test_destination_keyed_by_token_id(self):
        state, spawner = _make("normal", seed=3)
        rng = DeterministicRNG(3)
        for _ in range(10):
            token = spawner.spawn(state)
            assert token.destination == rng.next_int(Domain.DESTINATION, token.id, 0, 1, 8)
