"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from continuum import __version__
from continuum.api.routes import feedback, generate, health, intelligence, predict, prompts
from continuum.config import settings
from continuum.db.session import init_db
from continuum.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("application_starting", version=__version__)

    try:
        init_db()
        logger.info("database_connected")
    except Exception as e:
        logger.error("database_connection_failed", error=str(e))
        # Readiness probe reports the failure

    yield

    logger.info("application_shutting_down")


app = FastAPI(
    title="Continuum",
    description="Brand-aware prompt synthesis with platform prediction and feedback learning",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(generate.router, prefix="/api/v1")
app.include_router(predict.router, prefix="/api/v1")
app.include_router(feedback.router, prefix="/api/v1")
app.include_router(prompts.router, prefix="/api/v1")
app.include_router(intelligence.router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Service summary."""
    return {
        "name": "Continuum",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "continuum.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
