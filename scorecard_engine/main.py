"""
Business Scorecard Engine
FastAPI Application Entry Point
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scorecard_engine.config import settings
from scorecard_engine.core.errors import ScorecardError, global_exception_handler
from scorecard_engine.scoring.router import (
    portfolio_router,
    router as scorecard_router,
    visibility_router,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.
    Logs startup and shutdown; the engine holds no resources.
    """
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    logger.info("Environment: %s, debug: %s", settings.environment, settings.debug)
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; analysis endpoints will be unavailable")

    yield

    logger.info("%s shutdown complete", settings.app_name)


def create_application() -> FastAPI:
    """
    Application factory.
    Creates and configures the FastAPI application.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Scoring, trend and portfolio aggregation engine for monthly business scorecards",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Scoring and analysis errors get sanitized responses
    app.add_exception_handler(ScorecardError, global_exception_handler)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    register_routers(app)

    return app


def register_routers(app: FastAPI) -> None:
    """
    Register all API routers.
    """
    # Health check endpoint (always available)
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name} API",
            "version": settings.app_version,
            "docs": "/docs" if settings.debug else "Disabled in production",
        }

    # Scoring
    app.include_router(scorecard_router)

    # Portfolio
    app.include_router(portfolio_router)

    # Visibility
    app.include_router(visibility_router)


# Create the application instance
app = create_application()


if __name__ == "__main__":
    uvicorn.run(
        "scorecard_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
