"""
Question models for RepoPrep
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class QuestionDifficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    MANUAL = "manual"  # Caller-supplied questions in custom interviews


class GeneratedQuestion(BaseModel):
    """A question produced by the generation service, before it is stored."""

    text: str
    difficulty: QuestionDifficulty = QuestionDifficulty.MEDIUM


class Question(BaseModel):
    """A stored interview question."""

    # Identification
    id: str = Field(default_factory=lambda: f"q_{uuid4().hex[:12]}")
    interview_id: str

    # Content
    text: str = Field(..., description="The question text")
    order: int = Field(..., ge=1, description="1-based presentation order")
    difficulty: QuestionDifficulty = QuestionDifficulty.MANUAL

    # Timing
    time_limit_seconds: int = Field(default=300, ge=1)
    created_at: datetime = Field(default_factory=datetime.utcnow)


# ============================================================================
# STRUCTURED OUTPUT PAYLOADS
# ============================================================================

class QuestionItemPayload(BaseModel):
    """One entry of the generative service's question array."""

    question: str
    difficulty: str = "medium"


class QuestionBatchPayload(BaseModel):
    """Top-level object the generative service must return."""

    questions: list[QuestionItemPayload]


QUESTION_BATCH_SCHEMA: dict = {
    "type": "OBJECT",
    "properties": {
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question": {"type": "STRING"},
                    "difficulty": {"type": "STRING"},
                },
                "required": ["question", "difficulty"],
            },
        },
    },
    "required": ["questions"],
}
