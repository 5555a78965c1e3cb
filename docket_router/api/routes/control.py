"""POST /api/v1/control/{action}, /rotate, /click — session controls and player input."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query

from docket_router.api.dependencies import get_engine_manager
from docket_router.api.engine_manager import EngineManager
from docket_router.api.schemas import ControlResponse, RotateResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    restart = "restart"


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    difficulty: str = Query("normal", description="Difficulty key (start only)"),
    seed: int | None = Query(None, ge=0, lt=2**31, description="RNG seed (start only)"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    snapshot = manager.get_snapshot()
    step = snapshot.step if snapshot else 0

    match action:
        case ControlAction.start:
            try:
                snap = manager.start(difficulty, seed=seed)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            return ControlResponse(status="ok", message=f"Session started ({difficulty}).", step=snap.step)

        case ControlAction.pause:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", step=step)
            manager.pause()
            return ControlResponse(status="ok", message="Session paused.", step=step)

        case ControlAction.resume:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", step=step)
            manager.resume()
            return ControlResponse(status="ok", message="Session resumed.", step=step)

        case ControlAction.step:
            if not manager.running:
                raise HTTPException(status_code=409, detail="No running session to step.")
            manager.step()
            return ControlResponse(status="ok", message="Single step executed.", step=step)

        case ControlAction.restart:
            manager.restart()
            return ControlResponse(status="ok", message="Session cleared; choose a difficulty.", step=0)


@router.post("/rotate", response_model=RotateResponse)
def rotate(
    row: int = Query(..., ge=0),
    col: int = Query(..., ge=0),
    manager: EngineManager = Depends(get_engine_manager),
) -> RotateResponse:
    try:
        manager.rotate(row, col)
    except LookupError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return RotateResponse(status="queued", row=row, col=col)


@router.post("/click", response_model=RotateResponse)
def click(
    x: float = Query(...),
    y: float = Query(...),
    width: float = Query(..., gt=0),
    height: float = Query(..., gt=0),
    manager: EngineManager = Depends(get_engine_manager),
) -> RotateResponse:
    try:
        pos = manager.click(x, y, width, height)
    except LookupError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if pos is None:
        return RotateResponse(status="miss")
    return RotateResponse(status="queued", row=pos.row, col=pos.col)
