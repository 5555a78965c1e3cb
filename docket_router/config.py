"""Session configuration and difficulty profiles."""

from __future__ import annotations

from dataclasses import dataclass

from docket_router.core.enums import ArrowInitMode


@dataclass(frozen=True)
class SessionConfig:
    """Immutable configuration for one play session."""

    # Grid
    grid_rows: int = 4
    grid_cols: int = 4
    entry_row: int = 1
    entry_col: int = 0
    room_count: int = 8

    # Timing
    time_limit_seconds: float = 60.0
    max_delta_seconds: float = 0.05        # clamp per step (avoids catch-up jumps)
    countdown_start: int = 3
    frame_rate: float = 60.0               # EngineManager driver cadence

    # Spawn ramp: elapsed-time boundaries for spawn_intervals[1] and [2]
    spawn_tier_boundaries: tuple[float, float] = (20.0, 40.0)

    # Entry
    showcase_seconds: float = 1.2
    entry_cooldown_seconds: float = 0.4

    # Session
    starting_life: int = 3

    # Scoring
    correct_base_points: int = 10
    combo_bonus_cap: int = 5
    wrong_penalty: int = 5
    stuck_penalty: int = 3

    # Stall detection
    stall_budget: float = 30.0             # move_steps + stuck_time
    stall_seconds: float = 8.0

    # Arrow initialisation
    outlet_bias: float = 0.8

    # Feedback display window (seconds)
    feedback_seconds: float = 1.0

    # Determinism
    seed: int | None = None

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"


@dataclass(frozen=True)
class SpeedRamp:
    """Edge transit duration: ``base`` at the start, ``min`` at the time limit."""

    base: float
    min: float


@dataclass(frozen=True)
class DifficultyProfile:
    """Per-difficulty tuning selected at session start."""

    key: str
    tick_seconds: float                    # informational, not used by the engine
    max_tokens: int
    spawn_intervals: tuple[float, ...]
    arrow_init: ArrowInitMode
    speed: SpeedRamp


DIFFICULTIES: dict[str, DifficultyProfile] = {
    "easy": DifficultyProfile(
        key="easy", tick_seconds=1.2, max_tokens=2,
        spawn_intervals=(9.0, 8.0, 7.0), arrow_init=ArrowInitMode.BIASED,
        speed=SpeedRamp(base=1.2, min=0.95),
    ),
    "normal": DifficultyProfile(
        key="normal", tick_seconds=1.0, max_tokens=3,
        spawn_intervals=(8.0, 7.0, 6.0), arrow_init=ArrowInitMode.RANDOM,
        speed=SpeedRamp(base=1.05, min=0.65),
    ),
    "hard": DifficultyProfile(
        key="hard", tick_seconds=0.9, max_tokens=3,
        spawn_intervals=(7.0, 6.0, 5.0), arrow_init=ArrowInitMode.BIASED,
        speed=SpeedRamp(base=0.95, min=0.50),
    ),
}

ROOM_NAMES: dict[int, str] = {n: f"Room {n}" for n in range(1, 9)}


def validate_config(config: SessionConfig) -> SessionConfig:
    """Raise ``ValueError`` if *config* describes an unplayable board."""
    rows, cols = config.grid_rows, config.grid_cols
    if rows < 1 or cols < 1:
        raise ValueError(f"Grid must be at least 1x1, got {rows}x{cols}")
    if not (0 <= config.entry_row < rows and 0 <= config.entry_col < cols):
        raise ValueError(
            f"Entry node ({config.entry_row}, {config.entry_col}) is outside the {rows}x{cols} grid"
        )
    # East exits give one room per row, south exits one per column
    if config.room_count != rows + cols:
        raise ValueError(
            f"room_count must equal grid_rows + grid_cols ({rows + cols}), got {config.room_count}"
        )
    return config


def validate_difficulty(profile: DifficultyProfile) -> DifficultyProfile:
    """Raise ``ValueError`` if *profile* cannot drive a session."""
    if len(profile.spawn_intervals) != 3:
        raise ValueError(
            f"Difficulty {profile.key!r} needs 3 spawn intervals, got {len(profile.spawn_intervals)}"
        )
    if any(interval <= 0 for interval in profile.spawn_intervals):
        raise ValueError(f"Difficulty {profile.key!r} has a non-positive spawn interval")
    if profile.max_tokens < 1:
        raise ValueError(f"Difficulty {profile.key!r} must allow at least one token")
    if not isinstance(profile.arrow_init, ArrowInitMode):
        raise ValueError(f"Difficulty {profile.key!r} has unknown arrow init {profile.arrow_init!r}")
    if profile.speed.min <= 0 or profile.speed.min > profile.speed.base:
        raise ValueError(
            f"Difficulty {profile.key!r} speed ramp must satisfy 0 < min <= base "
            f"(got base={profile.speed.base}, min={profile.speed.min})"
        )
    return profile


def get_difficulty(key: str) -> DifficultyProfile:
    """Look up and validate a difficulty profile by key."""
    profile = DIFFICULTIES.get(key)
    if profile is None:
        raise ValueError(f"Unknown difficulty {key!r}; expected one of {sorted(DIFFICULTIES)}")
    return validate_difficulty(profile)
