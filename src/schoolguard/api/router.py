"""Root router: unauthenticated health checks plus the versioned module routers."""

from typing import Any

import structlog
from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from schoolguard import __version__
from schoolguard.api.dependencies import DBSession
from schoolguard.config import settings
from schoolguard.modules import discover_modules


logger = structlog.get_logger()


class HealthResponse(BaseModel):
    status: str


# Health checks sit outside /api/v1 and outside the access policy registry
health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live", response_model=HealthResponse, summary="Liveness check"
)
async def liveness() -> HealthResponse:
    return HealthResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=HealthResponse,
    summary="Readiness check",
    description="503 while the student record store cannot be reached.",
)
async def readiness(db: DBSession, response: Response) -> HealthResponse:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("readiness_check_failed", exc_info=True)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unavailable")
    return HealthResponse(status="ready")


@health_router.get("/info", summary="Application info")
async def info() -> dict[str, Any]:
    return {
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
    }


v1_router = APIRouter(prefix="/api/v1")
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(v1_router)
