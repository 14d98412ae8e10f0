from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from timetabler.core.config import get_settings
from timetabler.core.exceptions import ConfigurationError
from timetabler.db.session import engine

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    db_ok = True
    db_error: str | None = None
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:  # pragma: no cover - environment dependent
        db_ok = False
        db_error = str(exc)

    config_ok = True
    config_error: str | None = None
    policy_summary: dict = {}
    try:
        policy = get_settings().allocation_policy()
        policy_summary = {
            "days": policy.days,
            "time_slots": policy.time_slots,
            "working_hours": [policy.day_start_hour, policy.day_end_hour],
            "enforce_lecturer_break": policy.enforce_lecturer_break,
        }
    except ConfigurationError as exc:
        config_ok = False
        config_error = exc.message

    ready = db_ok and config_ok
    payload = {
        "status": "ok" if ready else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": {"ok": db_ok, "error": db_error},
        "allocation": {"ok": config_ok, "error": config_error, "policy": policy_summary},
    }
    return JSONResponse(status_code=200 if ready else 503, content=payload)
