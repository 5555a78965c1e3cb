"""GET /api/v1/state — dynamic session data (polled by the UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from docket_router.api.dependencies import get_engine_manager
from docket_router.api.engine_manager import EngineManager
from docket_router.api.schemas import (
    FeedbackSchema,
    SessionStateResponse,
    SessionStats,
    SummaryResponse,
    TokenSchema,
)
from docket_router.core.models import Token
from docket_router.utils.feedback_log import FeedbackEvent

router = APIRouter()


def serialize_token(t: Token) -> TokenSchema:
    display = t.display_position()
    return TokenSchema(
        id=t.id,
        destination=t.destination,
        spawn_order=t.spawn_order,
        state=t.state.name,
        row=t.current.row if t.current else None,
        col=t.current.col if t.current else None,
        target_row=t.target.row if t.target else None,
        target_col=t.target.col if t.target else None,
        move_stage=int(t.move_stage),
        move_progress=t.move_progress,
        move_steps=t.move_steps,
        stuck_time=t.stuck_time,
        showcasing=t.showcasing,
        entry_cooldown=max(0.0, t.entry_cooldown),
        display_row=display[0] if display else None,
        display_col=display[1] if display else None,
    )


def serialize_feedback(ev: FeedbackEvent) -> FeedbackSchema:
    return FeedbackSchema(
        step=ev.step, kind=ev.kind.value, message=ev.message,
        token_id=ev.token_id, score_delta=ev.score_delta,
    )


@router.get("/state", response_model=SessionStateResponse)
def get_state(manager: EngineManager = Depends(get_engine_manager)) -> SessionStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No session — start one first.")

    feedback = manager.current_feedback()
    return SessionStateResponse(
        step=snapshot.step,
        difficulty=snapshot.difficulty,
        seed=snapshot.seed,
        score=snapshot.score,
        life=snapshot.life,
        combo=snapshot.combo,
        max_combo=snapshot.max_combo,
        time_left=snapshot.time_left,
        display_time=snapshot.display_time,
        elapsed_time=snapshot.elapsed_time,
        spawn_interval=snapshot.spawn_interval,
        countdown_active=snapshot.countdown_active,
        countdown_value=snapshot.countdown_value,
        running=snapshot.running,
        ended=snapshot.ended,
        feedback=serialize_feedback(feedback) if feedback else None,
        waiting=[serialize_token(t) for t in snapshot.waiting],
        tokens=[serialize_token(t) for t in snapshot.in_grid],
    )


@router.get("/events", response_model=list[FeedbackSchema])
def get_events(
    since_step: int = Query(0, ge=0, description="Only return feedback emitted at or after this step"),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[FeedbackSchema]:
    return [serialize_feedback(ev) for ev in manager.feedback_log.since_step(since_step)]


@router.get("/summary", response_model=SummaryResponse)
def get_summary(manager: EngineManager = Depends(get_engine_manager)) -> SummaryResponse:
    # One snapshot read so the totals and the ended flag describe the same step
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No session — start one first.")
    summary = snapshot.summary()
    return SummaryResponse(
        difficulty=summary.difficulty,
        score=summary.score,
        correct=summary.correct,
        wrong=summary.wrong,
        stuck=summary.stuck,
        max_combo=summary.max_combo,
        life=summary.life,
        elapsed_time=summary.elapsed_time,
        ended=snapshot.ended,
    )


@router.get("/stats", response_model=SessionStats)
def get_stats(manager: EngineManager = Depends(get_engine_manager)) -> SessionStats:
    snapshot = manager.get_snapshot()
    return SessionStats(
        step=snapshot.step if snapshot else 0,
        sessions_started=manager.sessions_started,
        token_count=(len(snapshot.waiting) + len(snapshot.in_grid)) if snapshot else 0,
        running=manager.running,
        paused=manager.paused,
        has_session=manager.has_session,
    )
