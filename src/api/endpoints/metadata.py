"""
Metadata API endpoints

Provides reference data for:
- Interview difficulty levels
- Supported languages
"""

from fastapi import APIRouter
from pydantic import BaseModel

from src.core.difficulty import difficulty_label
from src.models.interview import SUPPORTED_LANGUAGES, InterviewLevel

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class DifficultyInfo(BaseModel):
    """Information about a difficulty level."""
    id: str
    name: str


class LanguageInfo(BaseModel):
    """Information about a supported language."""
    code: str
    name: str


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("/difficulties")
async def get_difficulties() -> list[DifficultyInfo]:
    """Get the difficulty levels accepted for generated interviews."""
    return [
        DifficultyInfo(id=level.value, name=difficulty_label(level.value))
        for level in InterviewLevel
        if level != InterviewLevel.MANUAL
    ]


@router.get("/languages")
async def get_languages() -> list[LanguageInfo]:
    """Get the languages questions and feedback can be written in."""
    return [LanguageInfo(code=code, name=name) for code, name in SUPPORTED_LANGUAGES.items()]
