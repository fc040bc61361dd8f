"""
API Dependencies

Provides dependency injection for API endpoints.
Manages the singleton pipeline and the shared HTTP clients it owns.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from src.config.settings import get_settings
from src.core.exceptions import (
    GroundingUnavailableError,
    InvalidReferenceError,
    NotFoundError,
    PipelineError,
    QuestionGenerationError,
)
from src.core.interview_pipeline import InterviewPipeline

logger = logging.getLogger(__name__)


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_pipeline: InterviewPipeline | None = None


def get_pipeline() -> InterviewPipeline:
    """
    Get the interview pipeline singleton.

    Lazily builds the pipeline and its collaborators from settings.
    """
    global _pipeline

    if _pipeline is None:
        settings = get_settings()
        _pipeline = InterviewPipeline.from_settings(settings)
        if not settings.ai_available:
            logger.warning("AI service not configured: questions need a readable README, answers get neutral scores")

    return _pipeline


async def cleanup():
    """Cleanup resources on shutdown."""
    global _pipeline

    if _pipeline:
        await _pipeline.close()

    _pipeline = None


# ============================================================================
# ERROR HANDLERS
# ============================================================================

_STATUS_BY_ERROR: list[tuple[type[PipelineError], int]] = [
    (InvalidReferenceError, 400),
    (GroundingUnavailableError, 502),
    (QuestionGenerationError, 503),
]


def pipeline_status_code(error: PipelineError) -> int:
    """HTTP status for a failed pipeline stage (500 when unmapped)."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return 500


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    """Answer a pipeline failure with the stage that failed."""
    status_code = pipeline_status_code(exc)
    logger.warning(f"{request.method} {request.url.path} failed at {exc.stage}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.to_detail()})


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=404, content={"detail": str(exc)})
