"""GET /api/v1/config, /difficulties — expose session configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from docket_router.api.dependencies import get_engine_manager
from docket_router.api.engine_manager import EngineManager
from docket_router.api.schemas import DifficultySchema, SessionConfigResponse
from docket_router.config import DIFFICULTIES

router = APIRouter()


@router.get("/config", response_model=SessionConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SessionConfigResponse:
    cfg = manager.config
    return SessionConfigResponse(
        grid_rows=cfg.grid_rows,
        grid_cols=cfg.grid_cols,
        time_limit_seconds=cfg.time_limit_seconds,
        starting_life=cfg.starting_life,
        countdown_start=cfg.countdown_start,
        showcase_seconds=cfg.showcase_seconds,
        entry_cooldown_seconds=cfg.entry_cooldown_seconds,
        max_delta_seconds=cfg.max_delta_seconds,
        frame_rate=cfg.frame_rate,
        spawn_tier_boundaries=list(cfg.spawn_tier_boundaries),
    )


@router.get("/difficulties", response_model=list[DifficultySchema])
def get_difficulties() -> list[DifficultySchema]:
    return [
        DifficultySchema(
            key=p.key,
            tick_seconds=p.tick_seconds,
            max_tokens=p.max_tokens,
            spawn_intervals=list(p.spawn_intervals),
            arrow_init=p.arrow_init.value,
            speed_base=p.speed.base,
            speed_min=p.speed.min,
        )
        for p in DIFFICULTIES.values()
    ]
