import asyncio

import pytest

from conftest import (
    README,
    FakeGenerativeClient,
    content_host,
    evaluation_reply,
    make_pipeline,
    question_reply,
)
from src.core.exceptions import (
    AnswerNotFoundError,
    GenerativeServiceUnavailableError,
    GroundingUnavailableError,
    InterviewNotFoundError,
    InvalidReferenceError,
    QuestionGenerationError,
    QuestionNotFoundError,
)
from src.core.statistics import compute_interview_statistics
from src.models.evaluation import EvaluationOutcome
from src.models.interview import InterviewLevel, InterviewStatus, InterviewType
from src.models.question import QuestionDifficulty
from src.models.repository import DocumentContext, MetadataContext

REPO_URL = "https://github.com/acme/queue"
README_HOST = content_host(documents={"acme/queue/main/README.md": README})
METADATA_HOST = content_host(
    metadata={"name": "queue", "description": "Job queue", "language": "Go", "topics": ["jobs"]}
)


def _three_questions():
    return question_reply(
        ("How are retries scheduled?", "hard"),
        ("Which backends exist?", "easy"),
        ("When is a job acknowledged?", "medium"),
    )


def test_metadata_grounded_interview_end_to_end(store):
    client = FakeGenerativeClient([_three_questions()])
    pipeline = make_pipeline(METADATA_HOST, client, store)

    creation = asyncio.run(
        pipeline.create_interview_from_repository("acct", REPO_URL, question_count=3, difficulty="senior")
    )

    interview = creation.interview
    assert interview.type == InterviewType.AI_GENERATED
    assert interview.difficulty == InterviewLevel.SENIOR
    assert interview.title == "queue interview"
    assert isinstance(interview.grounding_context, MetadataContext)
    assert creation.grounding.source == "metadata"
    assert creation.grounding.repository == "acme/queue"
    assert creation.used_fallback_questions is False
    assert [q.order for q in creation.questions] == [1, 2, 3]
    assert [q.difficulty for q in creation.questions] == [
        QuestionDifficulty.HARD,
        QuestionDifficulty.EASY,
        QuestionDifficulty.MEDIUM,
    ]
    assert "Primary Language: Go" in client.calls[0]["prompt"]

    stored = asyncio.run(store.list_questions(interview.id))
    assert [q.id for q in stored] == [q.id for q in creation.questions]
    assert interview.statistics.total_questions == 3


@pytest.mark.parametrize(
    "repo_url, handler, replies, error",
    [
        ("https://gitlab.com/acme/queue", README_HOST, [], InvalidReferenceError),
        (REPO_URL, content_host(), [], GroundingUnavailableError),
        (REPO_URL, README_HOST, [{"questions": []}], QuestionGenerationError),
        (REPO_URL, METADATA_HOST, [GenerativeServiceUnavailableError("down")], QuestionGenerationError),
    ],
)
def test_failed_creation_persists_nothing(store, repo_url, handler, replies, error):
    pipeline = make_pipeline(handler, FakeGenerativeClient(replies), store)

    with pytest.raises(error):
        asyncio.run(pipeline.create_interview_from_repository("acct", repo_url, question_count=3))

    assert asyncio.run(store.list_interviews("acct")) == []


def test_document_fallback_when_service_unavailable(store):
    client = FakeGenerativeClient([GenerativeServiceUnavailableError("down")])
    pipeline = make_pipeline(README_HOST, client, store)

    creation = asyncio.run(pipeline.create_interview_from_repository("acct", REPO_URL, question_count=6))

    assert creation.used_fallback_questions is True
    assert isinstance(creation.interview.grounding_context, DocumentContext)
    assert len(creation.questions) == 6
    assert all(q.difficulty == QuestionDifficulty.MEDIUM for q in creation.questions)


def test_preview_has_no_fallback_and_stores_nothing(store):
    down = FakeGenerativeClient([GenerativeServiceUnavailableError("down")])
    with pytest.raises(QuestionGenerationError):
        asyncio.run(make_pipeline(README_HOST, down, store).preview_questions(REPO_URL, 3))

    client = FakeGenerativeClient([_three_questions()])
    preview = asyncio.run(make_pipeline(README_HOST, client, store).preview_questions(REPO_URL, 2))

    assert preview.repository == "acme/queue"
    assert preview.grounding.source == "document"
    assert preview.grounding_text == README
    assert len(preview.questions) == 2
    assert asyncio.run(store.list_interviews("acct")) == []


def test_custom_interview(store):
    pipeline = make_pipeline(content_host(), FakeGenerativeClient(), store)

    interview, questions = asyncio.run(
        pipeline.create_custom_interview("acct", "My set", ["First?", "  ", "Second?"], language="de")
    )

    assert interview.type == InterviewType.CUSTOM
    assert interview.difficulty == InterviewLevel.MANUAL
    assert [q.text for q in questions] == ["First?", "Second?"]
    assert all(q.difficulty == QuestionDifficulty.MANUAL for q in questions)

    with pytest.raises(ValueError):
        asyncio.run(pipeline.create_custom_interview("acct", "Empty", [" "]))


def _created(store, replies):
    client = FakeGenerativeClient([_three_questions(), *replies])
    pipeline = make_pipeline(README_HOST, client, store)
    creation = asyncio.run(pipeline.create_interview_from_repository("acct", REPO_URL, question_count=3))
    return pipeline, client, creation


def test_submit_answer_scores_with_grounding_and_refreshes_statistics(store):
    pipeline, client, creation = _created(store, [evaluation_reply(88)])
    question = creation.questions[0]

    answer = asyncio.run(
        pipeline.submit_answer(creation.interview.id, question.id, "Exponential backoff.", duration_seconds=42)
    )

    assert answer.score == 88
    assert answer.outcome == EvaluationOutcome.EVALUATED
    assert "Acme Queue" in client.calls[-1]["prompt"]

    interview = asyncio.run(pipeline.get_interview(creation.interview.id))
    fresh = compute_interview_statistics(
        asyncio.run(store.list_questions(interview.id)),
        asyncio.run(store.list_answers(interview.id)),
    )
    assert interview.statistics == fresh
    assert interview.total_score == 88
    assert fresh.answered_questions == 1
    assert fresh.average_response_time_seconds == 42


def test_submit_answer_never_fails_on_evaluator_outage(store):
    pipeline, _, creation = _created(store, [GenerativeServiceUnavailableError("down")])

    answer = asyncio.run(
        pipeline.submit_answer(creation.interview.id, creation.questions[1].id, "Redis and memory.")
    )

    assert answer.score == 50
    assert answer.outcome == EvaluationOutcome.DEGRADED


def test_submit_answer_rejects_foreign_question(store):
    pipeline, _, creation = _created(store, [])
    _, other = asyncio.run(pipeline.create_custom_interview("acct", "Other", ["Elsewhere?"]))

    with pytest.raises(QuestionNotFoundError):
        asyncio.run(pipeline.submit_answer(creation.interview.id, other[0].id, "text"))
    with pytest.raises(InterviewNotFoundError):
        asyncio.run(pipeline.submit_answer("iv_missing", other[0].id, "text"))


def test_regenerate_feedback_rescores_degraded_answers(store):
    pipeline, _, creation = _created(
        store,
        [
            GenerativeServiceUnavailableError("down"),
            evaluation_reply(64),
            evaluation_reply(90),
        ],
    )
    interview_id = creation.interview.id
    first, second, third = creation.questions

    asyncio.run(pipeline.submit_answer(interview_id, first.id, "Backoff doubles each time."))
    asyncio.run(pipeline.submit_answer(interview_id, second.id, "Redis."))
    asyncio.run(pipeline.submit_answer(interview_id, third.id, ""))

    run = asyncio.run(pipeline.regenerate_feedback(interview_id))

    assert run.total_answers == 3
    assert run.evaluated_count == 1
    assert run.degraded_count == 0
    answers = {a.question_id: a for a in asyncio.run(pipeline.list_answers(interview_id))}
    assert answers[first.id].score == 90
    assert answers[first.id].outcome == EvaluationOutcome.EVALUATED
    assert answers[third.id].outcome == EvaluationOutcome.SKIPPED
    assert run.average_score == 68  # (90 + 64 + 50) / 3


def test_status_updates_and_account_views(store):
    pipeline, _, creation = _created(store, [evaluation_reply(80)])
    interview_id = creation.interview.id
    asyncio.run(pipeline.submit_answer(interview_id, creation.questions[0].id, "An answer."))

    paused = asyncio.run(pipeline.update_status(interview_id, InterviewStatus.PAUSED))
    assert paused.completed_at is None

    completed = asyncio.run(pipeline.update_status(interview_id, InterviewStatus.COMPLETED, duration_seconds=900))
    assert completed.completed_at is not None
    assert completed.duration_seconds == 900

    account = asyncio.run(pipeline.get_account_statistics("acct"))
    assert account.completed_interviews == 1
    assert account.average_score == 80
    assert account.total_duration_seconds == 900

    trend = asyncio.run(pipeline.get_performance_trend("acct"))
    assert [p.score for p in trend] == [80]

    detail = asyncio.run(pipeline.get_interview_detail(interview_id))
    assert detail.statistics == asyncio.run(pipeline.get_interview_statistics(interview_id))


def test_delete_cascades(store):
    pipeline, _, creation = _created(store, [evaluation_reply(80)])
    interview_id = creation.interview.id
    asyncio.run(pipeline.submit_answer(interview_id, creation.questions[0].id, "An answer."))

    asyncio.run(pipeline.delete_interview(interview_id))

    assert asyncio.run(store.list_answers(interview_id)) == []
    assert asyncio.run(store.list_questions(interview_id)) == []
    with pytest.raises(InterviewNotFoundError):
        asyncio.run(pipeline.delete_interview(interview_id))


@pytest.mark.parametrize("count", [0, -1, 21])
def test_question_count_outside_range_is_rejected(store, count):
    client = FakeGenerativeClient([_three_questions()])
    pipeline = make_pipeline(README_HOST, client, store)

    with pytest.raises(ValueError):
        asyncio.run(pipeline.create_interview_from_repository("acct", REPO_URL, question_count=count))
    with pytest.raises(ValueError):
        asyncio.run(pipeline.preview_questions(REPO_URL, count))

    assert client.calls == []
    assert asyncio.run(store.list_interviews("acct")) == []


def test_update_answer_rescores_and_refreshes_statistics(store):
    pipeline, client, creation = _created(store, [evaluation_reply(40), evaluation_reply(85)])
    interview_id = creation.interview.id
    question = creation.questions[0]
    answer = asyncio.run(pipeline.submit_answer(interview_id, question.id, "Retries.", duration_seconds=10))

    updated = asyncio.run(pipeline.update_answer(answer.id, text="Exponential backoff with jitter."))

    assert updated.id == answer.id
    assert updated.score == 85
    assert updated.text == "Exponential backoff with jitter."
    assert updated.duration_seconds == 10
    assert updated.updated_at is not None
    assert "Exponential backoff with jitter." in client.calls[-1]["prompt"]

    assert asyncio.run(pipeline.get_answer(answer.id)).score == 85
    assert len(asyncio.run(pipeline.list_answers(interview_id))) == 1
    assert asyncio.run(pipeline.get_interview(interview_id)).total_score == 85


def test_update_answer_duration_only_keeps_the_score(store):
    pipeline, client, creation = _created(store, [evaluation_reply(70)])
    interview_id = creation.interview.id
    answer = asyncio.run(pipeline.submit_answer(interview_id, creation.questions[0].id, "An answer."))
    calls = len(client.calls)

    updated = asyncio.run(pipeline.update_answer(answer.id, duration_seconds=30))

    assert updated.score == 70
    assert len(client.calls) == calls
    interview = asyncio.run(pipeline.get_interview(interview_id))
    assert interview.statistics.average_response_time_seconds == 30


def test_unknown_answer(store):
    pipeline, _, _ = _created(store, [])

    with pytest.raises(AnswerNotFoundError):
        asyncio.run(pipeline.get_answer("a_missing"))
    with pytest.raises(AnswerNotFoundError):
        asyncio.run(pipeline.update_answer("a_missing", text="x"))


def test_update_interview_repository(store):
    pipeline, _, creation = _created(store, [])
    interview_id = creation.interview.id
    before = creation.interview.updated_at

    moved = asyncio.run(pipeline.update_interview_repository(interview_id, "  https://github.com/acme/other  "))
    assert moved.repo_url == "https://github.com/acme/other"
    assert moved.updated_at >= before

    detached = asyncio.run(pipeline.update_interview_repository(interview_id, ""))
    assert detached.repo_url is None
    assert len(asyncio.run(store.list_questions(interview_id))) == 3

    account = asyncio.run(pipeline.get_account_statistics("acct"))
    assert account.interviews_by_repository == {"No repository": 1}

    with pytest.raises(InterviewNotFoundError):
        asyncio.run(pipeline.update_interview_repository("iv_missing", None))
