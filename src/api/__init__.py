"""
API layer for RepoPrep

Contains FastAPI routers for:
- Interview management and question generation
- Answer submission
- Statistics and trends
- Reference metadata
"""

from src.api.router import api_router

__all__ = ["api_router"]
