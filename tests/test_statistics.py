import asyncio
from datetime import datetime, timedelta

from src.core.statistics import (
    NO_REPOSITORY,
    StatisticsAggregator,
    compute_account_statistics,
    compute_interview_statistics,
    compute_performance_trend,
    compute_scores_by_difficulty,
)
from src.models.evaluation import Answer
from src.models.interview import Interview, InterviewStatus
from src.models.question import Question, QuestionDifficulty

T0 = datetime(2026, 10, 5, 12, 0, 0)


def _questions(*difficulties):
    return [
        Question(id=f"q{i}", interview_id="iv", text=f"Question {i}", order=i, difficulty=d)
        for i, d in enumerate(difficulties, start=1)
    ]


def _answer(question_id, score, text="an answer", duration=30, minutes=0):
    return Answer(
        interview_id="iv",
        question_id=question_id,
        text=text,
        score=score,
        duration_seconds=duration,
        created_at=T0 + timedelta(minutes=minutes),
    )


def test_no_answers_gives_zeros():
    stats = compute_interview_statistics(_questions(QuestionDifficulty.EASY, QuestionDifficulty.HARD), [])

    assert stats.total_questions == 2
    assert stats.answered_questions == 0
    assert stats.skipped_questions == 2
    assert stats.average_response_time_seconds == 0
    assert stats.confidence == 0


def test_latest_answer_decides_answered_and_confidence():
    questions = _questions(QuestionDifficulty.EASY, QuestionDifficulty.MEDIUM, QuestionDifficulty.HARD)
    answers = [
        _answer("q1", 40, duration=10, minutes=0),
        _answer("q1", 90, duration=20, minutes=5),
        _answer("q2", 60, duration=30, minutes=1),
        _answer("q2", 50, text="  ", duration=45, minutes=6),
    ]

    stats = compute_interview_statistics(questions, answers)

    assert stats.answered_questions == 1
    assert stats.skipped_questions == 2
    assert stats.answered_questions + stats.skipped_questions == stats.total_questions
    assert stats.average_response_time_seconds == 26  # 105 / 4 = 26.25
    assert stats.confidence == 70  # latest scores 90 and 50


def test_equal_timestamps_prefer_later_stored_answer():
    questions = _questions(QuestionDifficulty.MEDIUM)
    answers = [_answer("q1", 20), _answer("q1", 80)]

    assert compute_interview_statistics(questions, answers).confidence == 80


def test_scores_by_difficulty_is_average_of_averages():
    questions = _questions(QuestionDifficulty.HARD, QuestionDifficulty.HARD, QuestionDifficulty.EASY)
    answers = [
        _answer("q1", 100),
        _answer("q1", 60),
        _answer("q1", 50),
        _answer("q2", 75),
    ]

    groups = compute_scores_by_difficulty(questions, answers)

    # q1 mean 70, q2 mean 75: (70 + 75) / 2 = 72.5, not the flat mean 71.25
    assert groups["hard"].count == 2
    assert groups["hard"].total_score == 145
    assert groups["hard"].average_score == 73
    assert groups["easy"].count == 1
    assert groups["easy"].average_score == 0


def _interview(iid, status, created, repo_url=None, duration=0.0):
    return Interview(
        id=iid,
        account_id="acct",
        title=iid,
        repo_url=repo_url,
        status=status,
        duration_seconds=duration,
        created_at=created,
    )


def test_account_average_counts_completed_only():
    interviews = [
        _interview("a", InterviewStatus.COMPLETED, datetime(2026, 9, 30), "https://github.com/acme/queue", 600),
        _interview("b", InterviewStatus.COMPLETED, datetime(2026, 10, 2), "https://github.com/acme/queue", 300),
        _interview("c", InterviewStatus.IN_PROGRESS, datetime(2026, 10, 3), None, 120),
    ]
    scores = {"a": 70, "b": 90, "c": 10}

    stats = compute_account_statistics(interviews, scores)

    assert stats.total_interviews == 3
    assert stats.completed_interviews == 2
    assert stats.average_score == 80
    assert stats.total_duration_seconds == 1020
    assert stats.interviews_by_month == {"Sep 2026": 1, "Oct 2026": 2}
    assert stats.interviews_by_repository == {"https://github.com/acme/queue": 2, NO_REPOSITORY: 1}


def test_account_without_interviews():
    stats = compute_account_statistics([], {})

    assert stats.total_interviews == 0
    assert stats.average_score == 0
    assert stats.interviews_by_month == {}


def test_trend_is_chronological_and_completed_only():
    interviews = [
        _interview("late", InterviewStatus.COMPLETED, datetime(2026, 10, 9)),
        _interview("paused", InterviewStatus.PAUSED, datetime(2026, 10, 1)),
        _interview("early", InterviewStatus.COMPLETED, datetime(2026, 10, 2)),
    ]

    trend = compute_performance_trend(interviews, {"late": 90, "early": 60})

    assert [p.interview_id for p in trend] == ["early", "late"]
    assert [p.score for p in trend] == [60, 90]


def test_aggregator_reads_from_store(store):
    interview = _interview("iv", InterviewStatus.COMPLETED, T0)
    questions = _questions(QuestionDifficulty.EASY, QuestionDifficulty.HARD)

    async def scenario():
        await store.create_interview(interview, questions)
        await store.save_answer(_answer("q1", 60))
        await store.save_answer(_answer("q2", 100))
        aggregator = StatisticsAggregator(store)
        return (
            await aggregator.aggregate_interview("iv"),
            await aggregator.aggregate_interview_detail(interview),
            await aggregator.aggregate_account("acct"),
        )

    stats, detail, account = asyncio.run(scenario())

    assert stats.confidence == 80
    assert detail.total_score == 80
    assert [q.question_id for q in detail.question_stats] == ["q1", "q2"]
    assert detail.scores_by_difficulty["hard"].average_score == 100
    assert account.average_score == 80
