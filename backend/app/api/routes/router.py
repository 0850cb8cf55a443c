"""API router aggregating all sub-routers."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from app.api.routes.chat import router as chat_router
from app.api.routes.models import router as models_router
from app.api.routes.structured_chat import router as structured_chat_router

_STARTED_AT = time.monotonic()

# Mounted at the application root
health_router = APIRouter()


@health_router.get("/health")
async def health_check() -> dict[str, object]:
    """Liveness check with process uptime in seconds."""
    return {
        "status": "ok",
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Mounted under /api
api_router = APIRouter()
api_router.include_router(structured_chat_router)
api_router.include_router(chat_router)
api_router.include_router(models_router)
