"""
Evaluation models for RepoPrep

Defines the scoring structures for candidate answers.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class EvaluationOutcome(str, Enum):
    """How an answer's score was obtained."""

    EVALUATED = "evaluated"  # Scored by the generative service
    DEGRADED = "degraded"    # Service unavailable, neutral score assigned
    SKIPPED = "skipped"      # Empty answer, neutral score by policy


class EvaluationResult(BaseModel):
    """Score and qualitative feedback for one answer."""

    score: int = Field(..., ge=0, le=100)
    feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    outcome: EvaluationOutcome = EvaluationOutcome.EVALUATED


class Answer(BaseModel):
    """A submitted answer together with its evaluation."""

    # Reference
    id: str = Field(default_factory=lambda: f"a_{uuid4().hex[:12]}")
    interview_id: str
    question_id: str

    # Response data
    text: str = ""
    audio_ref: str | None = None
    duration_seconds: float = Field(default=0.0, ge=0)

    # Evaluation
    score: int = Field(..., ge=0, le=100)
    feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    outcome: EvaluationOutcome = EvaluationOutcome.EVALUATED

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime | None = None

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())

    def apply(self, result: EvaluationResult) -> None:
        """Overwrite the evaluation fields with a new result."""
        self.score = result.score
        self.feedback = result.feedback
        self.strengths = list(result.strengths)
        self.improvements = list(result.improvements)
        self.keywords = list(result.keywords)
        self.outcome = result.outcome


# ============================================================================
# STRUCTURED OUTPUT PAYLOAD
# ============================================================================

class EvaluationPayload(BaseModel):
    """Object the generative service must return when scoring an answer."""

    score: float = Field(..., allow_inf_nan=False)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    feedback: str = ""


EVALUATION_SCHEMA: dict = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER"},
        "strengths": {"type": "ARRAY", "items": {"type": "STRING"}},
        "improvements": {"type": "ARRAY", "items": {"type": "STRING"}},
        "keywords": {"type": "ARRAY", "items": {"type": "STRING"}},
        "feedback": {"type": "STRING"},
    },
    "required": ["score", "strengths", "improvements", "keywords", "feedback"],
}


class FeedbackRun(BaseModel):
    """Outcome of re-scoring an interview's degraded answers."""

    interview_id: str
    total_answers: int = 0
    evaluated_count: int = 0
    degraded_count: int = 0
    average_score: int = Field(default=0, ge=0, le=100)
