"""Liveness and database readiness endpoint."""

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from guideforge.api.v1.dependencies import SessionDep
from guideforge.config import settings

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health", operation_id="healthCheck", response_model=None)
async def health_check(session: SessionDep) -> dict[str, str] | JSONResponse:
    """Report whether the database answers; 503 when it does not."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Health check failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unavailable", "storage": settings.storage_backend},
        )
    return {"status": "healthy", "database": "ok", "storage": settings.storage_backend}
