"""
Interview models for RepoPrep
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from src.models.question import GeneratedQuestion, Question
from src.models.repository import GroundingContext, GroundingSummary
from src.models.statistics import InterviewStatistics


class InterviewType(str, Enum):
    """How the interview's questions were produced."""

    AI_GENERATED = "ai_generated"
    CUSTOM = "custom"


class InterviewLevel(str, Enum):
    """Requested seniority of an interview."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    MANUAL = "manual"


class InterviewStatus(str, Enum):
    """Interview lifecycle states."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"


SUPPORTED_LANGUAGES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "pt": "Portuguese",
    "it": "Italian",
    "ja": "Japanese",
    "zh": "Chinese",
}


def language_name(code: str | None) -> str:
    """Human-readable name of a language code, English when unknown."""
    return SUPPORTED_LANGUAGES.get((code or "en").lower(), "English")


class Interview(BaseModel):
    """A stored interview owned by an account."""

    # Identification
    id: str = Field(default_factory=lambda: f"iv_{uuid4().hex[:12]}")
    account_id: str

    # Setup
    title: str
    repo_url: str | None = None
    type: InterviewType = InterviewType.AI_GENERATED
    difficulty: InterviewLevel = InterviewLevel.MID
    language: str = "en"

    # State
    status: InterviewStatus = InterviewStatus.IN_PROGRESS
    duration_seconds: float = Field(default=0.0, ge=0)

    # Grounding, reused when scoring answers
    grounding_context: Optional[GroundingContext] = None

    # Cached derived values (recomputed after every write)
    statistics: InterviewStatistics | None = None
    total_score: int = Field(default=0, ge=0, le=100)

    # Timing
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None

    @property
    def grounding_text(self) -> str | None:
        if self.grounding_context is None:
            return None
        return self.grounding_context.text

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()


class InterviewCreation(BaseModel):
    """Result of creating an interview from a repository."""

    interview: Interview
    questions: list[Question]
    grounding: GroundingSummary
    used_fallback_questions: bool = False


class QuestionPreview(BaseModel):
    """Result of the direct question-generation operation (nothing stored)."""

    repository: str
    repo_url: str
    grounding: GroundingSummary
    grounding_text: str
    questions: list[GeneratedQuestion]
