"""
RepoPrep - Repository-Grounded Mock Interview Platform

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config.settings import Settings, get_settings
from src.api.router import api_router
from src.api.dependencies import cleanup, not_found_handler, pipeline_error_handler
from src.core.exceptions import NotFoundError, PipelineError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting {settings.app_name} {settings.app_version}...")
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")
    logger.info(f"AI service {'configured' if settings.ai_available else 'not configured'} ({settings.gemini_model})")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await cleanup()


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (the cached environment settings when None)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Mock technical interviews generated from a repository's README",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Failed pipeline stages answer 400/502/503 with the stage; unknown ids answer 404
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "ai_available": settings.ai_available,
        }

    return app


app = create_app()


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
