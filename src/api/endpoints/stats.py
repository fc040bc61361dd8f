"""
Statistics API endpoints

Read-only rollups, recomputed from the stored answers on every request.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_pipeline
from src.core.interview_pipeline import InterviewPipeline
from src.models.statistics import AccountStatistics, InterviewStatisticsDetail, TrendPoint

router = APIRouter()


@router.get("/accounts/{account_id}", response_model=AccountStatistics)
async def get_account_statistics(
    account_id: str,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> AccountStatistics:
    return await pipeline.get_account_statistics(account_id)


@router.get("/accounts/{account_id}/trends", response_model=list[TrendPoint])
async def get_performance_trend(
    account_id: str,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> list[TrendPoint]:
    """Scores of completed interviews in chronological order."""
    return await pipeline.get_performance_trend(account_id)


@router.get("/interviews/{interview_id}", response_model=InterviewStatisticsDetail)
async def get_interview_statistics(
    interview_id: str,
    pipeline: InterviewPipeline = Depends(get_pipeline),
) -> InterviewStatisticsDetail:
    """Interview rollup with per-difficulty and per-question breakdowns."""
    return await pipeline.get_interview_detail(interview_id)
