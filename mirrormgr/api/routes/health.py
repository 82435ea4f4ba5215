from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from mirrormgr.core.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/ping")
def ping() -> dict[str, str]:
    return {"message": "pong"}


@router.get("/health")
def get_health() -> dict[str, object]:
    settings = get_settings()
    return {
        "status": "ok",
        "service": settings.app_name,
        "environment": settings.environment,
        "timestamp": datetime.now(tz=timezone.utc),
    }
