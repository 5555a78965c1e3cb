"""GET /api/v1/grid — switch directions and routing constraints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from docket_router.api.dependencies import get_engine_manager
from docket_router.api.engine_manager import EngineManager
from docket_router.api.schemas import CellSchema, GridResponse
from docket_router.config import ROOM_NAMES

router = APIRouter()


@router.get("/grid", response_model=GridResponse)
def get_grid(manager: EngineManager = Depends(get_engine_manager)) -> GridResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No session — start one first.")

    grid = snapshot.grid
    cells = [
        CellSchema(
            row=r,
            col=c,
            direction=cell.direction.name,
            valid_directions=[d.name for d in sorted(cell.valid_directions)],
        )
        for r, c, cell in grid.cells()
    ]
    cfg = manager.config
    return GridResponse(
        rows=grid.rows,
        cols=grid.cols,
        entry_row=cfg.entry_row,
        entry_col=cfg.entry_col,
        cells=cells,
        rooms=dict(ROOM_NAMES),
    )
