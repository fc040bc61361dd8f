"""
Response API endpoints

Submitting, reading and editing scored answers.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.api.dependencies import get_pipeline
from src.core.interview_pipeline import InterviewPipeline
from src.models.evaluation import Answer

router = APIRouter()


class SubmitAnswerRequest(BaseModel):
    """Request model for submitting an answer."""
    interview_id: str
    question_id: str
    text: str = ""
    duration_seconds: float = Field(default=0.0, ge=0)
    audio_ref: str | None = None


class UpdateAnswerRequest(BaseModel):
    """Request model for editing an answer; omitted fields stay as stored."""
    text: str | None = None
    duration_seconds: float | None = Field(default=None, ge=0)
    audio_ref: str | None = None


@router.post("", response_model=Answer, status_code=201)
async def submit_answer(
    request: SubmitAnswerRequest,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> Answer:
    """
    Score and store an answer.

    An unreachable AI service yields a neutral score with outcome
    "degraded" rather than an error.
    """
    return await pipeline.submit_answer(
        request.interview_id,
        request.question_id,
        request.text,
        duration_seconds=request.duration_seconds,
        audio_ref=request.audio_ref,
    )


@router.get("/{interview_id}", response_model=list[Answer])
async def list_answers(
    interview_id: str,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> list[Answer]:
    """All answers of an interview, oldest first."""
    return await pipeline.list_answers(interview_id)


@router.get("/answer/{answer_id}", response_model=Answer)
async def get_answer(
    answer_id: str,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> Answer:
    return await pipeline.get_answer(answer_id)


@router.put("/answer/{answer_id}", response_model=Answer)
async def update_answer(
    answer_id: str,
    request: UpdateAnswerRequest,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> Answer:
    """Edit an answer; a new text is scored again and statistics refreshed."""
    return await pipeline.update_answer(
        answer_id,
        text=request.text,
        duration_seconds=request.duration_seconds,
        audio_ref=request.audio_ref,
    )
