from __future__ import annotations

import structlog
from fastapi import APIRouter

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


@router.get("/health", summary="Service health check")
async def health_check() -> dict:
    """Liveness check; does not touch the database."""
    await logger.adebug("health_check")
    return {"status": "ok"}
