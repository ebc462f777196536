"""
Health check API endpoints.

Routes: GET /health, GET /health/ready

Dependencies: legal_pipeline.boundary.db
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from legal_pipeline.boundary.db import get_async_db
from legal_pipeline.core.chunking import CHUNKER_VERSION
from legal_pipeline.observability import get_logger

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    chunker_version: str = CHUNKER_VERSION


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic liveness check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(db: AsyncSession = Depends(get_async_db)):
    """Readiness check: the database answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"{__name__}:readiness_check - Database unavailable: {e}")
        return JSONResponse(
            status_code=503,
            content=HealthResponse(status="unhealthy", message="Database unavailable").model_dump(),
        )
    return HealthResponse(status="healthy", message="Database connection OK")
