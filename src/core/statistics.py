"""
Statistics Aggregator for RepoPrep

Derives interview- and account-level rollups from the stored answers every
time it is asked. Nothing here is cached or written back; callers may store
a copy as an optimization.

Numeric rules:
- Empty inputs give 0, never NaN
- Every displayed number goes through round_percent (half up)
"""

import logging
from collections import defaultdict
from typing import Iterable

from src.core.scoring import mean_or_zero, round_percent
from src.core.store import InterviewStore
from src.models.evaluation import Answer
from src.models.interview import Interview, InterviewStatus
from src.models.question import Question
from src.models.statistics import (
    AccountStatistics,
    AnswerStat,
    DifficultyBreakdown,
    InterviewStatistics,
    InterviewStatisticsDetail,
    QuestionStat,
    TrendPoint,
)

logger = logging.getLogger(__name__)

NO_REPOSITORY = "No repository"
MONTH_KEY_FORMAT = "%b %Y"


# ============================================================================
# PURE COMPUTATIONS
# ============================================================================

def latest_answers(answers: Iterable[Answer]) -> dict[str, Answer]:
    """Most recent answer per question (ties go to the later-stored one)."""
    latest: dict[str, Answer] = {}
    for answer in answers:
        current = latest.get(answer.question_id)
        if current is None or answer.created_at >= current.created_at:
            latest[answer.question_id] = answer
    return latest


def _answers_for(questions: list[Question], answers: Iterable[Answer]) -> list[Answer]:
    known = {q.id for q in questions}
    return [a for a in answers if a.question_id in known]


def compute_interview_statistics(
    questions: list[Question],
    answers: Iterable[Answer],
) -> InterviewStatistics:
    """
    Completion and scoring rollup for one interview.

    Args:
        questions: All questions of the interview
        answers: Every stored answer, including resubmissions

    Returns:
        InterviewStatistics with answered + skipped == total
    """
    recorded = _answers_for(questions, answers)
    latest = latest_answers(recorded)

    total = len(questions)
    answered = sum(1 for q in questions if q.id in latest and latest[q.id].has_text)

    return InterviewStatistics(
        total_questions=total,
        answered_questions=answered,
        skipped_questions=total - answered,
        average_response_time_seconds=round_percent(mean_or_zero(a.duration_seconds for a in recorded)),
        confidence=round_percent(mean_or_zero(a.score for a in latest.values())),
    )


def compute_scores_by_difficulty(
    questions: list[Question],
    answers: Iterable[Answer],
) -> dict[str, DifficultyBreakdown]:
    """
    Group questions by difficulty and average their scores.

    Each question contributes the mean of all its answers (0 when it has
    none), and the group average is taken over those per-question means.
    This average-of-averages differs from a flat mean once questions have
    different numbers of resubmissions.
    """
    by_question: dict[str, list[int]] = defaultdict(list)
    for answer in _answers_for(questions, answers):
        by_question[answer.question_id].append(answer.score)

    groups: dict[str, DifficultyBreakdown] = {}
    for question in questions:
        key = question.difficulty.value
        group = groups.setdefault(key, DifficultyBreakdown())
        group.count += 1
        group.total_score += mean_or_zero(by_question.get(question.id, []))

    for group in groups.values():
        group.average_score = round_percent(group.total_score / group.count) if group.count else 0

    return groups


def compute_question_stats(
    questions: list[Question],
    answers: Iterable[Answer],
) -> list[QuestionStat]:
    by_question: dict[str, list[Answer]] = defaultdict(list)
    for answer in _answers_for(questions, answers):
        by_question[answer.question_id].append(answer)

    return [
        QuestionStat(
            question_id=q.id,
            question=q.text,
            difficulty=q.difficulty.value,
            order=q.order,
            answers=[
                AnswerStat(score=a.score, feedback=a.feedback, duration_seconds=a.duration_seconds)
                for a in by_question.get(q.id, [])
            ],
        )
        for q in questions
    ]


def compute_account_statistics(
    interviews: list[Interview],
    scores: dict[str, int],
) -> AccountStatistics:
    """
    Rollup across an account's interviews.

    Args:
        interviews: Every interview owned by the account
        scores: Recomputed score per interview id

    Only completed interviews count toward the average score; duration is
    summed over all interviews.
    """
    completed = [i for i in interviews if i.status == InterviewStatus.COMPLETED]

    by_month: dict[str, int] = {}
    by_repository: dict[str, int] = {}
    for interview in interviews:
        month = interview.created_at.strftime(MONTH_KEY_FORMAT)
        by_month[month] = by_month.get(month, 0) + 1

        repository = interview.repo_url or NO_REPOSITORY
        by_repository[repository] = by_repository.get(repository, 0) + 1

    return AccountStatistics(
        total_interviews=len(interviews),
        completed_interviews=len(completed),
        average_score=round_percent(mean_or_zero(scores.get(i.id, 0) for i in completed)),
        total_duration_seconds=sum(i.duration_seconds for i in interviews),
        interviews_by_month=by_month,
        interviews_by_repository=by_repository,
    )


def compute_performance_trend(
    interviews: list[Interview],
    scores: dict[str, int],
) -> list[TrendPoint]:
    """Completed interviews as a chronological score series."""
    completed = sorted(
        (i for i in interviews if i.status == InterviewStatus.COMPLETED),
        key=lambda i: i.created_at,
    )
    return [
        TrendPoint(
            interview_id=i.id,
            date=i.created_at,
            score=scores.get(i.id, 0),
            repo_url=i.repo_url,
            duration_seconds=i.duration_seconds,
        )
        for i in completed
    ]


# ============================================================================
# STORE-BACKED AGGREGATOR
# ============================================================================

class StatisticsAggregator:
    """Reads the current answer set from the store and recomputes rollups."""

    def __init__(self, store: InterviewStore):
        self.store = store

    async def aggregate_interview(self, interview_id: str) -> InterviewStatistics:
        questions = await self.store.list_questions(interview_id)
        answers = await self.store.list_answers(interview_id)
        return compute_interview_statistics(questions, answers)

    async def aggregate_interview_detail(self, interview: Interview) -> InterviewStatisticsDetail:
        """Rollup plus per-difficulty and per-question breakdowns."""
        questions = await self.store.list_questions(interview.id)
        answers = await self.store.list_answers(interview.id)
        statistics = compute_interview_statistics(questions, answers)

        return InterviewStatisticsDetail(
            interview_id=interview.id,
            title=interview.title,
            repo_url=interview.repo_url,
            status=interview.status.value,
            total_score=statistics.confidence,
            statistics=statistics,
            scores_by_difficulty=compute_scores_by_difficulty(questions, answers),
            question_stats=compute_question_stats(questions, answers),
            duration_seconds=interview.duration_seconds,
            created_at=interview.created_at,
            completed_at=interview.completed_at,
        )

    async def aggregate_account(self, account_id: str) -> AccountStatistics:
        interviews = await self.store.list_interviews(account_id)
        scores = await self._scores(interviews)
        return compute_account_statistics(interviews, scores)

    async def performance_trend(self, account_id: str) -> list[TrendPoint]:
        interviews = await self.store.list_interviews(account_id)
        scores = await self._scores(i for i in interviews if i.status == InterviewStatus.COMPLETED)
        return compute_performance_trend(interviews, scores)

    async def _scores(self, interviews: Iterable[Interview]) -> dict[str, int]:
        scores = {}
        for interview in interviews:
            statistics = await self.aggregate_interview(interview.id)
            scores[interview.id] = statistics.confidence
        logger.debug(f"Recomputed scores for {len(scores)} interviews")
        return scores
