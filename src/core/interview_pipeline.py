"""
Interview Pipeline - coordinator for repository-grounded interviews.

This is the single entry point the API layer talks to. It wires the
pipeline stages together:

    parse reference -> retrieve grounding -> generate questions -> store
    per answer: evaluate -> store -> refresh cached statistics

Interview creation is all-or-nothing: any failing stage raises its
PipelineError and nothing is written to the store.
"""

import logging
from datetime import datetime

from src.config.settings import Settings
from src.core.difficulty import normalize_difficulty
from src.core.exceptions import (
    AnswerNotFoundError,
    InterviewNotFoundError,
    QuestionGenerationError,
    QuestionNotFoundError,
)
from src.core.generative_client import GenerativeClient
from src.core.grounding import GroundingTextRetriever
from src.core.question_generator import (
    QuestionGenerationService,
    derive_questions_from_document,
)
from src.core.reference_parser import parse_repository_url, require_repository_reference
from src.core.response_evaluator import ResponseEvaluator
from src.core.scoring import mean_or_zero, round_percent
from src.core.statistics import (
    StatisticsAggregator,
    compute_interview_statistics,
    latest_answers,
)
from src.core.store import InMemoryInterviewStore, InterviewStore
from src.models.evaluation import Answer, EvaluationOutcome, FeedbackRun
from src.models.interview import (
    Interview,
    InterviewCreation,
    InterviewLevel,
    InterviewStatus,
    InterviewType,
    QuestionPreview,
)
from src.models.question import GeneratedQuestion, Question, QuestionDifficulty
from src.models.repository import DocumentContext, GroundingSummary
from src.models.statistics import (
    AccountStatistics,
    InterviewStatistics,
    InterviewStatisticsDetail,
    TrendPoint,
)

logger = logging.getLogger(__name__)

_LEVEL_BY_DIFFICULTY = {
    QuestionDifficulty.EASY: InterviewLevel.JUNIOR,
    QuestionDifficulty.MEDIUM: InterviewLevel.MID,
    QuestionDifficulty.HARD: InterviewLevel.SENIOR,
}


def interview_level(difficulty: str | None) -> InterviewLevel:
    """Map any difficulty vocabulary onto the interview level."""
    return _LEVEL_BY_DIFFICULTY[normalize_difficulty(difficulty)]


class InterviewPipeline:
    """
    Coordinates interview creation, answer scoring and statistics.

    Collaborators are injected so tests can replace any of them:
    - store: persistence of interviews, questions and answers
    - retriever: grounding text for a repository
    - generator: question generation
    - evaluator: answer scoring
    - aggregator: derived statistics (built on the store when omitted)
    """

    def __init__(
        self,
        store: InterviewStore,
        retriever: GroundingTextRetriever,
        generator: QuestionGenerationService,
        evaluator: ResponseEvaluator,
        aggregator: StatisticsAggregator | None = None,
        default_question_count: int = 5,
    ):
        self.store = store
        self.retriever = retriever
        self.generator = generator
        self.evaluator = evaluator
        self.aggregator = aggregator or StatisticsAggregator(store)
        self.default_question_count = default_question_count

    @classmethod
    def from_settings(cls, settings: Settings, store: InterviewStore | None = None) -> "InterviewPipeline":
        """Build the pipeline and its HTTP-backed collaborators from settings."""
        client = GenerativeClient.from_settings(settings)
        store = store or InMemoryInterviewStore()
        return cls(
            store=store,
            retriever=GroundingTextRetriever.from_settings(settings),
            generator=QuestionGenerationService(client, max_question_count=settings.max_question_count),
            evaluator=ResponseEvaluator(client, context_chars=settings.evaluation_context_chars),
            default_question_count=settings.default_question_count,
        )

    async def close(self):
        """Release the shared HTTP clients."""
        await self.retriever.close()
        await self.generator.client.close()
        if self.evaluator.client is not self.generator.client:
            await self.evaluator.client.close()

    # =========================================================================
    # INTERVIEW CREATION
    # =========================================================================

    async def create_interview_from_repository(
        self,
        account_id: str,
        repo_url: str,
        question_count: int | None = None,
        difficulty: str = "mid",
        language: str = "en",
        title: str | None = None,
    ) -> InterviewCreation:
        """
        Create an AI-generated interview grounded in a repository.

        Args:
            account_id: Owner of the new interview
            repo_url: Repository URL in any accepted form
            question_count: Number of questions (settings default when None)
            difficulty: Requested level (junior/mid/senior or synonyms)
            language: Language code for questions and feedback
            title: Interview title, derived from the repository when None

        Returns:
            InterviewCreation with the stored interview and its questions

        Raises:
            InvalidReferenceError: repo_url is not a repository URL
            GroundingUnavailableError: no document and no metadata
            QuestionGenerationError: no usable questions
            ValueError: question_count outside the configured range
        """
        count = self._question_count(question_count)
        reference = require_repository_reference(repo_url)
        context = await self.retriever.retrieve(reference)

        used_fallback = False
        try:
            generated = await self.generator.generate(
                context.text,
                count,
                difficulty=difficulty,
                language=language,
                repository=reference.slug,
            )
        except QuestionGenerationError as e:
            if not (e.service_unavailable and isinstance(context, DocumentContext)):
                raise
            logger.warning(f"AI service unavailable, deriving questions from the document of {reference.slug}")
            generated = derive_questions_from_document(context.text, count)
            used_fallback = True

        interview = Interview(
            account_id=account_id,
            title=title or f"{reference.project} interview",
            repo_url=repo_url.strip(),
            type=InterviewType.AI_GENERATED,
            difficulty=interview_level(difficulty),
            language=language,
            grounding_context=context,
        )
        questions = self._build_questions(interview.id, generated)
        await self._persist_new(interview, questions)

        logger.info(
            f"Created interview {interview.id} for {reference.slug} "
            f"with {len(questions)} questions ({context.kind} grounding)"
        )

        return InterviewCreation(
            interview=interview,
            questions=questions,
            grounding=GroundingSummary.build(reference, context),
            used_fallback_questions=used_fallback,
        )

    async def preview_questions(
        self,
        repo_url: str,
        question_count: int | None = None,
        difficulty: str = "mid",
        language: str = "en",
    ) -> QuestionPreview:
        """Generate questions for a repository without storing anything."""
        count = self._question_count(question_count)
        reference = require_repository_reference(repo_url)
        context = await self.retriever.retrieve(reference)
        generated = await self.generator.generate(
            context.text,
            count,
            difficulty=difficulty,
            language=language,
            repository=reference.slug,
        )
        return QuestionPreview(
            repository=reference.slug,
            repo_url=repo_url.strip(),
            grounding=GroundingSummary.build(reference, context),
            grounding_text=context.text,
            questions=generated,
        )

    async def create_custom_interview(
        self,
        account_id: str,
        title: str,
        questions: list[str],
        language: str = "en",
        repo_url: str | None = None,
    ) -> tuple[Interview, list[Question]]:
        """
        Create an interview from caller-supplied questions.

        Raises:
            ValueError: no non-blank question was supplied
        """
        texts = [q.strip() for q in questions if q and q.strip()]
        if not texts:
            raise ValueError("A custom interview needs at least one question")

        interview = Interview(
            account_id=account_id,
            title=title,
            repo_url=repo_url,
            type=InterviewType.CUSTOM,
            difficulty=InterviewLevel.MANUAL,
            language=language,
        )
        stored = [
            Question(interview_id=interview.id, text=text, order=index, difficulty=QuestionDifficulty.MANUAL)
            for index, text in enumerate(texts, start=1)
        ]
        await self._persist_new(interview, stored)

        logger.info(f"Created custom interview {interview.id} with {len(stored)} questions")
        return interview, stored

    def _question_count(self, question_count: int | None) -> int:
        """Resolve the requested count; None means the configured default."""
        count = self.default_question_count if question_count is None else question_count
        if not 1 <= count <= self.generator.max_question_count:
            raise ValueError(
                f"question_count must be between 1 and {self.generator.max_question_count}, got {count}"
            )
        return count

    def _build_questions(self, interview_id: str, generated: list[GeneratedQuestion]) -> list[Question]:
        return [
            Question(interview_id=interview_id, text=item.text, order=index, difficulty=item.difficulty)
            for index, item in enumerate(generated, start=1)
        ]

    async def _persist_new(self, interview: Interview, questions: list[Question]):
        interview.statistics = compute_interview_statistics(questions, [])
        interview.total_score = interview.statistics.confidence
        await self.store.create_interview(interview, questions)

    # =========================================================================
    # ANSWERS
    # =========================================================================

    async def submit_answer(
        self,
        interview_id: str,
        question_id: str,
        text: str | None,
        duration_seconds: float = 0.0,
        audio_ref: str | None = None,
    ) -> Answer:
        """
        Evaluate and store an answer, then refresh the interview's statistics.

        Evaluator outages degrade the score; they never fail the submission.

        Raises:
            InterviewNotFoundError: unknown interview
            QuestionNotFoundError: question unknown or owned by another interview
        """
        interview = await self.get_interview(interview_id)
        question = await self.store.get_question(question_id)
        if question is None or question.interview_id != interview.id:
            raise QuestionNotFoundError(f"Question {question_id} not found in interview {interview_id}")

        result = await self.evaluator.evaluate(
            question.text,
            text,
            grounding_text=interview.grounding_text,
            language=interview.language,
            repository=self._repository_label(interview),
        )

        answer = Answer(
            interview_id=interview.id,
            question_id=question.id,
            text=text or "",
            audio_ref=audio_ref,
            duration_seconds=duration_seconds,
            score=result.score,
        )
        answer.apply(result)
        await self.store.save_answer(answer)
        await self._refresh_statistics(interview)

        logger.info(f"Answer {answer.id} for {question.id}: score {answer.score} ({answer.outcome.value})")
        return answer

    async def regenerate_feedback(self, interview_id: str) -> FeedbackRun:
        """
        Re-score the latest answers that were recorded as degraded.

        Answers whose re-evaluation degrades again keep their degraded
        outcome and neutral score.
        """
        interview = await self.get_interview(interview_id)
        questions = {q.id: q for q in await self.store.list_questions(interview.id)}
        answers = await self.store.list_answers(interview.id)

        latest = latest_answers(answers)

        run = FeedbackRun(interview_id=interview.id, total_answers=len(latest))
        for answer in latest.values():
            question = questions.get(answer.question_id)
            if question is None or answer.outcome != EvaluationOutcome.DEGRADED or not answer.has_text:
                continue

            result = await self.evaluator.evaluate(
                question.text,
                answer.text,
                grounding_text=interview.grounding_text,
                language=interview.language,
                repository=self._repository_label(interview),
            )
            answer.apply(result)
            await self.store.save_answer(answer)

            if result.outcome == EvaluationOutcome.EVALUATED:
                run.evaluated_count += 1
            else:
                run.degraded_count += 1

        statistics = await self._refresh_statistics(interview)
        run.average_score = round_percent(mean_or_zero(a.score for a in latest.values()))

        logger.info(
            f"Feedback regenerated for {interview.id}: {run.evaluated_count} evaluated, "
            f"{run.degraded_count} still degraded (confidence {statistics.confidence})"
        )
        return run

    async def list_answers(self, interview_id: str) -> list[Answer]:
        interview = await self.get_interview(interview_id)
        answers = await self.store.list_answers(interview.id)
        return sorted(answers, key=lambda a: a.created_at)

    async def get_answer(self, answer_id: str) -> Answer:
        answer = await self.store.get_answer(answer_id)
        if answer is None:
            raise AnswerNotFoundError(f"Answer {answer_id} not found")
        return answer

    async def update_answer(
        self,
        answer_id: str,
        text: str | None = None,
        duration_seconds: float | None = None,
        audio_ref: str | None = None,
    ) -> Answer:
        """
        Edit a stored answer in place.

        Only the supplied fields change. A new text is evaluated again with
        the interview's grounding; the id and created_at are kept either way.

        Raises:
            AnswerNotFoundError: unknown answer
            InterviewNotFoundError: the owning interview is gone
        """
        answer = await self.get_answer(answer_id)
        interview = await self.get_interview(answer.interview_id)

        if duration_seconds is not None:
            answer.duration_seconds = duration_seconds
        if audio_ref is not None:
            answer.audio_ref = audio_ref

        if text is not None:
            question = await self.store.get_question(answer.question_id)
            if question is None:
                raise QuestionNotFoundError(f"Question {answer.question_id} not found")
            answer.text = text
            result = await self.evaluator.evaluate(
                question.text,
                text,
                grounding_text=interview.grounding_text,
                language=interview.language,
                repository=self._repository_label(interview),
            )
            answer.apply(result)

        answer.updated_at = datetime.utcnow()
        await self.store.save_answer(answer)
        await self._refresh_statistics(interview)

        logger.info(f"Answer {answer.id} updated: score {answer.score} ({answer.outcome.value})")
        return answer

    def _repository_label(self, interview: Interview) -> str | None:
        reference = parse_repository_url(interview.repo_url)
        return reference.slug if reference else None

    async def _refresh_statistics(self, interview: Interview) -> InterviewStatistics:
        """Recompute and cache the interview's statistics."""
        statistics = await self.aggregator.aggregate_interview(interview.id)
        interview.statistics = statistics
        interview.total_score = statistics.confidence
        interview.touch()
        await self.store.save_interview(interview)
        return statistics

    # =========================================================================
    # INTERVIEW MANAGEMENT
    # =========================================================================

    async def get_interview(self, interview_id: str) -> Interview:
        interview = await self.store.get_interview(interview_id)
        if interview is None:
            raise InterviewNotFoundError(f"Interview {interview_id} not found")
        return interview

    async def list_interviews(self, account_id: str) -> list[Interview]:
        """Interviews of an account, newest first."""
        interviews = await self.store.list_interviews(account_id)
        return sorted(interviews, key=lambda i: i.created_at, reverse=True)

    async def list_questions(self, interview_id: str) -> list[Question]:
        interview = await self.get_interview(interview_id)
        return await self.store.list_questions(interview.id)

    async def update_status(
        self,
        interview_id: str,
        status: InterviewStatus,
        duration_seconds: float | None = None,
    ) -> Interview:
        """
        Move an interview to a new status.

        Completing stamps completed_at; leaving the completed state clears it.
        """
        interview = await self.get_interview(interview_id)
        interview.status = status
        if duration_seconds is not None:
            interview.duration_seconds = duration_seconds

        if status == InterviewStatus.COMPLETED:
            interview.completed_at = interview.completed_at or datetime.utcnow()
        else:
            interview.completed_at = None

        await self._refresh_statistics(interview)
        logger.info(f"Interview {interview.id} is now {status.value}")
        return interview

    async def update_interview_repository(self, interview_id: str, repo_url: str | None) -> Interview:
        """
        Point an interview at another repository, or detach it with a blank value.

        The stored questions and grounding are left as they are.
        """
        interview = await self.get_interview(interview_id)
        interview.repo_url = (repo_url or "").strip() or None
        interview.touch()
        await self.store.save_interview(interview)

        logger.info(f"Interview {interview.id} repository set to {interview.repo_url or 'none'}")
        return interview

    async def delete_interview(self, interview_id: str) -> None:
        if not await self.store.delete_interview(interview_id):
            raise InterviewNotFoundError(f"Interview {interview_id} not found")
        logger.info(f"Deleted interview {interview_id}")

    # =========================================================================
    # STATISTICS
    # =========================================================================

    async def get_interview_statistics(self, interview_id: str) -> InterviewStatistics:
        interview = await self.get_interview(interview_id)
        return await self.aggregator.aggregate_interview(interview.id)

    async def get_interview_detail(self, interview_id: str) -> InterviewStatisticsDetail:
        interview = await self.get_interview(interview_id)
        return await self.aggregator.aggregate_interview_detail(interview)

    async def get_account_statistics(self, account_id: str) -> AccountStatistics:
        return await self.aggregator.aggregate_account(account_id)

    async def get_performance_trend(self, account_id: str) -> list[TrendPoint]:
        return await self.aggregator.performance_trend(account_id)
