"""
Interview API endpoints

Handles the interview lifecycle:
- Generating questions from a repository (preview or stored interview)
- Creating custom interviews
- Reading, updating and deleting interviews
- Regenerating degraded feedback

Pipeline failures and unknown ids are translated by the application's
exception handlers (see main.create_app).
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field, field_validator

from src.api.dependencies import get_pipeline
from src.config.settings import get_settings
from src.core.interview_pipeline import InterviewPipeline
from src.models.evaluation import FeedbackRun
from src.models.interview import (
    Interview,
    InterviewCreation,
    InterviewStatus,
    QuestionPreview,
)
from src.models.question import Question

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class GenerateQuestionsRequest(BaseModel):
    """Request model for previewing generated questions."""
    repo_url: str
    question_count: int | None = Field(default=None, ge=1)
    difficulty: str = "mid"
    language: str = "en"

    @field_validator("question_count")
    @classmethod
    def within_configured_maximum(cls, value: int | None) -> int | None:
        limit = get_settings().max_question_count
        if value is not None and value > limit:
            raise ValueError(f"question_count must be at most {limit}")
        return value


class RepositoryInterviewRequest(GenerateQuestionsRequest):
    """Request model for a stored repository interview."""
    account_id: str
    title: str | None = None


class CustomInterviewRequest(BaseModel):
    """Request model for an interview with caller-supplied questions."""
    account_id: str
    title: str
    questions: list[str] = Field(..., min_length=1)
    language: str = "en"
    repo_url: str | None = None


class InterviewWithQuestions(BaseModel):
    """An interview together with its ordered questions."""
    interview: Interview
    questions: list[Question]


class StatusUpdateRequest(BaseModel):
    """Request model for a status change."""
    status: InterviewStatus
    duration_seconds: float | None = Field(default=None, ge=0)


class RepositoryUpdateRequest(BaseModel):
    """Request model for re-pointing an interview; blank or null detaches it."""
    repo_url: str | None = None


# ============================================================================
# CREATION
# ============================================================================

@router.post("/generate", response_model=QuestionPreview)
async def generate_questions(
    request: GenerateQuestionsRequest,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> QuestionPreview:
    """
    Generate questions for a repository without creating an interview.

    Fails with 503 when the AI service is unavailable; there is no
    paragraph fallback on this route.
    """
    try:
        return await pipeline.preview_questions(
            request.repo_url,
            question_count=request.question_count,
            difficulty=request.difficulty,
            language=request.language,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/repository", response_model=InterviewCreation, status_code=201)
async def create_repository_interview(
    request: RepositoryInterviewRequest,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> InterviewCreation:
    """Create and store an interview grounded in a repository."""
    try:
        return await pipeline.create_interview_from_repository(
            account_id=request.account_id,
            repo_url=request.repo_url,
            question_count=request.question_count,
            difficulty=request.difficulty,
            language=request.language,
            title=request.title,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/custom", response_model=InterviewWithQuestions, status_code=201)
async def create_custom_interview(
    request: CustomInterviewRequest,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> InterviewWithQuestions:
    """Create an interview from the caller's own questions."""
    try:
        interview, questions = await pipeline.create_custom_interview(
            account_id=request.account_id,
            title=request.title,
            questions=request.questions,
            language=request.language,
            repo_url=request.repo_url,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return InterviewWithQuestions(interview=interview, questions=questions)


# ============================================================================
# MANAGEMENT
# ============================================================================

@router.get("", response_model=list[Interview])
async def list_interviews(
    account_id: str = Query(...),
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> list[Interview]:
    """List an account's interviews, newest first."""
    return await pipeline.list_interviews(account_id)


@router.get("/{interview_id}", response_model=InterviewWithQuestions)
async def get_interview(
    interview_id: str,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> InterviewWithQuestions:
    """Get an interview with its questions."""
    interview = await pipeline.get_interview(interview_id)
    questions = await pipeline.list_questions(interview_id)
    return InterviewWithQuestions(interview=interview, questions=questions)


@router.patch("/{interview_id}/status", response_model=Interview)
async def update_status(
    interview_id: str,
    request: StatusUpdateRequest,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> Interview:
    """Pause, resume or complete an interview."""
    return await pipeline.update_status(
        interview_id,
        request.status,
        duration_seconds=request.duration_seconds,
    )


@router.put("/{interview_id}/repository", response_model=Interview)
async def update_repository(
    interview_id: str,
    request: RepositoryUpdateRequest,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> Interview:
    return await pipeline.update_interview_repository(interview_id, request.repo_url)


@router.delete("/{interview_id}", status_code=204)
async def delete_interview(
    interview_id: str,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> Response:
    """Delete an interview with its questions and answers."""
    await pipeline.delete_interview(interview_id)
    return Response(status_code=204)


@router.post("/{interview_id}/feedback", response_model=FeedbackRun)
async def regenerate_feedback(
    interview_id: str,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> FeedbackRun:
    """Re-score answers that only received the neutral fallback score."""
    return await pipeline.regenerate_feedback(interview_id)
