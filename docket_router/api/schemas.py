"""Pydantic response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Tokens ---

class TokenSchema(BaseModel):
    id: int
    destination: int
    spawn_order: int
    state: str
    row: int | None = None
    col: int | None = None
    target_row: int | None = None
    target_col: int | None = None
    move_stage: int = 0
    move_progress: float = 0.0
    move_steps: int = 0
    stuck_time: float = 0.0
    showcasing: bool = False
    entry_cooldown: float = 0.0
    display_row: float | None = Field(None, description="Interpolated row for rendering")
    display_col: float | None = Field(None, description="Interpolated column for rendering")


# --- Grid ---

class CellSchema(BaseModel):
    row: int
    col: int
    direction: str
    valid_directions: list[str]


class GridResponse(BaseModel):
    rows: int
    cols: int
    entry_row: int
    entry_col: int
    cells: list[CellSchema]
    rooms: dict[int, str] = Field(default_factory=dict)


# --- Feedback ---

class FeedbackSchema(BaseModel):
    step: int
    kind: str
    message: str
    token_id: int
    score_delta: int


# --- Session state ---

class SessionStateResponse(BaseModel):
    step: int
    difficulty: str
    seed: int
    score: int
    life: int
    combo: int
    max_combo: int
    time_left: float
    display_time: int
    elapsed_time: float
    spawn_interval: float
    countdown_active: bool
    countdown_value: int
    running: bool
    ended: bool
    feedback: FeedbackSchema | None = None
    waiting: list[TokenSchema] = Field(default_factory=list)
    tokens: list[TokenSchema] = Field(default_factory=list)


class SummaryResponse(BaseModel):
    difficulty: str
    score: int
    correct: int
    wrong: int
    stuck: int
    max_combo: int
    life: int
    elapsed_time: float
    ended: bool


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    step: int = 0


class RotateResponse(BaseModel):
    status: str
    row: int | None = None
    col: int | None = None


# --- Config ---

class DifficultySchema(BaseModel):
    key: str
    tick_seconds: float
    max_tokens: int
    spawn_intervals: list[float]
    arrow_init: str
    speed_base: float
    speed_min: float


class SessionConfigResponse(BaseModel):
    grid_rows: int
    grid_cols: int
    time_limit_seconds: float
    starting_life: int
    countdown_start: int
    showcase_seconds: float
    entry_cooldown_seconds: float
    max_delta_seconds: float
    frame_rate: float
    spawn_tier_boundaries: list[float]


# --- Stats ---

class SessionStats(BaseModel):
    step: int
    sessions_started: int
    token_count: int
    running: bool
    paused: bool
    has_session: bool
