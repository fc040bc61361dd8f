"""
Data models and schemas for RepoPrep

Contains Pydantic models for:
- Repository references and grounding context
- Questions and generated question payloads
- Answers and evaluation results
- Interviews
- Derived statistics
"""

from src.models.repository import (
    RepositoryReference,
    RepositoryMetadata,
    DocumentContext,
    MetadataContext,
    GroundingContext,
    GroundingSummary,
)
from src.models.question import GeneratedQuestion, Question, QuestionDifficulty
from src.models.evaluation import Answer, EvaluationOutcome, EvaluationResult, FeedbackRun
from src.models.interview import (
    Interview,
    InterviewCreation,
    InterviewLevel,
    InterviewStatus,
    InterviewType,
    QuestionPreview,
)
from src.models.statistics import (
    AccountStatistics,
    DifficultyBreakdown,
    InterviewStatistics,
    InterviewStatisticsDetail,
    TrendPoint,
)

__all__ = [
    # Repository
    "RepositoryReference",
    "RepositoryMetadata",
    "DocumentContext",
    "MetadataContext",
    "GroundingContext",
    "GroundingSummary",
    # Question
    "GeneratedQuestion",
    "Question",
    "QuestionDifficulty",
    # Evaluation
    "Answer",
    "EvaluationOutcome",
    "EvaluationResult",
    "FeedbackRun",
    # Interview
    "Interview",
    "InterviewCreation",
    "InterviewLevel",
    "InterviewStatus",
    "InterviewType",
    "QuestionPreview",
    # Statistics
    "AccountStatistics",
    "DifficultyBreakdown",
    "InterviewStatistics",
    "InterviewStatisticsDetail",
    "TrendPoint",
]
