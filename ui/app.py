from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Iterator

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from sanctum import (
    AlreadyStartedError,
    EngagementFacade,
    InvalidDayError,
    LockedError,
    NotFoundError,
    SanctumError,
    StoreError,
)
from sanctum.config import load_settings
from sanctum.logger import get_logger, setup_logging


log = get_logger("ui")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(log_level=load_settings().log_level)
    yield


app = FastAPI(title="Sanctum Engagement API", version="0.1.0", lifespan=lifespan)


def get_facade() -> Iterator[EngagementFacade]:
    """One facade per request, built from the workspace profile.

    The facade's store is closed once the response is sent.
    """
    facade = EngagementFacade.from_workspace()
    try:
        yield facade
    finally:
        facade.close()


# ── Error mapping ─────────────────────────────────────────────

@app.exception_handler(SanctumError)
def handle_sanctum_error(request: Request, exc: SanctumError) -> JSONResponse:
    if isinstance(exc, LockedError):
        return JSONResponse(status_code=423, content={
            "detail": exc.message,
            "unlocksAt": exc.unlocks_at.isoformat(),
            "daysRemaining": exc.remaining_days,
        })
    if isinstance(exc, StoreError):
        return JSONResponse(status_code=503, content={"detail": "Couldn't save, try again"})
    if isinstance(exc, AlreadyStartedError):
        return JSONResponse(status_code=409, content={"detail": exc.message})
    if isinstance(exc, NotFoundError):
        return JSONResponse(status_code=404, content={"detail": exc.message})
    if isinstance(exc, InvalidDayError):
        return JSONResponse(status_code=400, content={"detail": exc.message})
    log.error("unhandled engine error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(ValueError)
def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/streak")
def api_streak(facade: EngagementFacade = Depends(get_facade)) -> dict[str, Any]:
    return facade.current_streak_summary()


@app.post("/api/engagement")
def api_record_engagement(
    payload: dict[str, Any] = Body(default={}),
    facade: EngagementFacade = Depends(get_facade),
) -> dict[str, Any]:
    """Count today toward the streak; optional ``durationMinutes`` is logged too."""
    minutes = payload.get("durationMinutes")
    state = facade.record_engagement_today(
        duration_minutes=float(minutes) if minutes is not None else None,
        tag=str(payload.get("tag", "prayer")),
    )
    return {"ok": True, "streak": state.to_dict()}


@app.post("/api/activity")
def api_log_activity(
    payload: dict[str, Any] = Body(...),
    facade: EngagementFacade = Depends(get_facade),
) -> dict[str, Any]:
    if "durationMinutes" not in payload:
        raise HTTPException(status_code=400, detail="Missing durationMinutes")
    entry = facade.log_activity(
        float(payload["durationMinutes"]),
        tag=str(payload.get("tag", "prayer")),
        day=payload.get("date"),
    )
    return {"ok": True, "entry": entry.to_dict()}


@app.get("/api/weekly")
def api_weekly(date: str | None = None, facade: EngagementFacade = Depends(get_facade)) -> dict[str, Any]:
    return facade.weekly_summary(date).to_dict()


@app.get("/api/plans")
def api_list_plans(facade: EngagementFacade = Depends(get_facade)) -> dict[str, Any]:
    return {"plans": facade.list_plans()}


@app.post("/api/plans")
def api_start_plan(
    payload: dict[str, Any] = Body(...),
    facade: EngagementFacade = Depends(get_facade),
) -> dict[str, Any]:
    plan_id = payload.get("planId")
    if not plan_id:
        raise HTTPException(status_code=400, detail="Missing planId")
    total = payload.get("totalDays")
    progress = facade.start_plan(
        str(plan_id),
        total_days=int(total) if total is not None else None,
        kind=payload.get("kind"),
        gated=payload.get("gated"),
    )
    return {"ok": True, "plan": progress.to_dict()}


@app.get("/api/plans/{plan_id}")
def api_plan_summary(plan_id: str, facade: EngagementFacade = Depends(get_facade)) -> dict[str, Any]:
    return facade.plan_summary(plan_id)


@app.post("/api/plans/{plan_id}/days/{day}")
def api_complete_day(
    plan_id: str,
    day: int,
    payload: dict[str, Any] = Body(default={}),
    facade: EngagementFacade = Depends(get_facade),
) -> dict[str, Any]:
    progress = facade.complete_day(plan_id, day, note=payload.get("note"))
    return {"ok": True, "plan": progress.to_dict()}


@app.get("/api/sealed")
def api_list_sealed(facade: EngagementFacade = Depends(get_facade)) -> dict[str, Any]:
    return {"items": facade.list_sealed()}


@app.post("/api/sealed")
def api_seal(
    payload: dict[str, Any] = Body(...),
    facade: EngagementFacade = Depends(get_facade),
) -> dict[str, Any]:
    if "payload" not in payload:
        raise HTTPException(status_code=400, detail="Missing payload")
    item = facade.seal_content(
        payload["payload"],
        float(payload.get("delayDays", 0)),
        with_scripture=bool(payload.get("withScripture", False)),
    )
    d = item.to_dict()
    if item.unlock_at is not None:
        # Sealed content is not echoed back
        d.pop("payload")
    return {"ok": True, "item": d}


@app.post("/api/sealed/{sealed_id}/open")
def api_open_sealed(sealed_id: str, facade: EngagementFacade = Depends(get_facade)) -> dict[str, Any]:
    return {"ok": True, "payload": facade.try_open_sealed(sealed_id)}


@app.get("/api/verse")
def api_verse(facade: EngagementFacade = Depends(get_facade)) -> dict[str, Any]:
    return facade.daily_verse()


@app.get("/api/export")
def api_export(facade: EngagementFacade = Depends(get_facade)) -> dict[str, Any]:
    return facade.export_state()
