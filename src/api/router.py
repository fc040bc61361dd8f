"""
Main API router for RepoPrep

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from src.api.endpoints import interview, responses, stats, metadata

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/interviews",
    tags=["Interviews"]
)

api_router.include_router(
    responses.router,
    prefix="/responses",
    tags=["Responses"]
)

api_router.include_router(
    stats.router,
    prefix="/stats",
    tags=["Statistics"]
)

api_router.include_router(
    metadata.router,
    prefix="/metadata",
    tags=["Metadata"]
)
