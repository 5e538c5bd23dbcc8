"""
Health check endpoints
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import logging

from app.core.database import get_session
from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


async def _database_ok(db: AsyncSession) -> bool:
    try:
        return (await db.execute(text("SELECT 1"))).scalar() == 1
    except Exception as e:
        logger.warning(f"Readiness: database check failed: {e}")
        return False


async def _revocation_store_ok(request: Request) -> bool:
    try:
        client = await request.app.state.auth_service.redis_provider()
        return bool(await client.ping())
    except Exception as e:
        logger.warning(f"Readiness: redis check failed: {e}")
        return False


@router.get("/live")
async def liveness() -> Any:
    """
    Liveness probe
    """
    return {"status": "alive", "service": settings.APP_NAME, "version": settings.APP_VERSION}


@router.get("/ready")
async def readiness(
    request: Request,
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Readiness probe. The event store is required; the revocation store is
    reported but only degrades the status.
    """
    checks: Dict[str, bool] = {
        "database": await _database_ok(db),
        "redis": await _revocation_store_ok(request),
    }

    if not checks["database"]:
        state, code = "not ready", status.HTTP_503_SERVICE_UNAVAILABLE
    elif not checks["redis"]:
        state, code = "degraded", status.HTTP_200_OK
    else:
        state, code = "ready", status.HTTP_200_OK

    return JSONResponse(status_code=code, content={"status": state, "checks": checks})
