"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from continuum.api.deps import SessionDep
from continuum.config import settings
from continuum.logging import get_logger

router = APIRouter(tags=["Health"])
logger = get_logger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, bool] | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    database: bool


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Basic health check endpoint that verifies the API is running.",
)
async def health_check() -> HealthResponse:
    """Basic health check - is the API up?

    Reports whether a real completion provider is configured.
    """
    from continuum import __version__

    llm_configured = settings.llm_provider != "stub" and bool(
        settings.anthropic_api_key or settings.openai_api_key
    )
    return HealthResponse(
        status="healthy",
        version=__version__,
        components={"llm": llm_configured},
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Readiness check that verifies the database is reachable.",
)
def readiness_check(session: SessionDep) -> ReadinessResponse:
    """Readiness check including the database."""
    database_ok = False
    try:
        session.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError as e:
        logger.error("database_health_check_failed", error=str(e))

    return ReadinessResponse(ready=database_ok, database=database_ok)


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
)
async def liveness_check() -> dict[str, str]:
    """Liveness probe - is the process alive?"""
    return {"status": "alive"}
