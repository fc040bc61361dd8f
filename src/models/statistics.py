"""
Statistics models for RepoPrep

All of these are derived values; none is a source of truth.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class InterviewStatistics(BaseModel):
    """Completion and scoring rollup for one interview."""

    total_questions: int = 0
    answered_questions: int = 0
    skipped_questions: int = 0
    average_response_time_seconds: int = 0
    confidence: int = Field(default=0, ge=0, le=100)


class DifficultyBreakdown(BaseModel):
    """Scores of the questions sharing one difficulty tag."""

    count: int = 0
    total_score: float = 0.0
    average_score: int = 0


class AnswerStat(BaseModel):
    score: int
    feedback: str
    duration_seconds: float


class QuestionStat(BaseModel):
    """Per-question view used by the detailed interview statistics."""

    question_id: str
    question: str
    difficulty: str
    order: int
    answers: list[AnswerStat] = Field(default_factory=list)


class InterviewStatisticsDetail(BaseModel):
    """Interview rollup plus per-difficulty and per-question breakdowns."""

    interview_id: str
    title: str
    repo_url: str | None = None
    status: str
    total_score: int = 0
    statistics: InterviewStatistics
    scores_by_difficulty: dict[str, DifficultyBreakdown] = Field(default_factory=dict)
    question_stats: list[QuestionStat] = Field(default_factory=list)
    duration_seconds: float = 0.0
    created_at: datetime
    completed_at: datetime | None = None


class AccountStatistics(BaseModel):
    """Rollup across every interview owned by an account."""

    total_interviews: int = 0
    completed_interviews: int = 0
    average_score: int = 0
    total_duration_seconds: float = 0.0
    interviews_by_month: dict[str, int] = Field(default_factory=dict)
    interviews_by_repository: dict[str, int] = Field(default_factory=dict)


class TrendPoint(BaseModel):
    """One completed interview on the performance time series."""

    interview_id: str
    date: datetime
    score: int
    repo_url: str | None = None
    duration_seconds: float = 0.0
