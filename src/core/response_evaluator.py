"""
Response Evaluator for RepoPrep

Scores free-text answers against the interview's grounding context.

Evaluation never fails the caller: an empty answer or an unavailable
service produces the neutral score instead of an exception.
"""

import logging

from pydantic import ValidationError

from src.core.exceptions import GenerativeServiceError
from src.core.generative_client import GenerativeClient
from src.core.scoring import NEUTRAL_SCORE, clamp_score
from src.models.evaluation import (
    EVALUATION_SCHEMA,
    EvaluationOutcome,
    EvaluationPayload,
    EvaluationResult,
)
from src.prompts.evaluator import EvaluatorPrompts

logger = logging.getLogger(__name__)

DEGRADED_FEEDBACK = (
    "Automatic evaluation is not available right now. "
    "A neutral score was assigned; feedback can be regenerated later."
)


class ResponseEvaluator:
    """
    Central evaluation component for interview answers.

    Responsibilities:
    - Skip empty answers with the neutral score
    - Ask the generative service for a structured evaluation
    - Clamp whatever score comes back into [0, 100]
    - Degrade to the neutral score when the service is unavailable
    """

    def __init__(self, client: GenerativeClient, context_chars: int = 3000):
        """
        Initialize the evaluator.

        Args:
            client: Generative client used for scoring
            context_chars: Grounding text is cut to this many characters
        """
        self.client = client
        self.context_chars = context_chars
        self.prompts = EvaluatorPrompts()

    async def evaluate(
        self,
        question: str,
        answer_text: str | None,
        grounding_text: str | None = None,
        language: str = "en",
        repository: str | None = None,
    ) -> EvaluationResult:
        """
        Evaluate one answer.

        Args:
            question: The question that was asked
            answer_text: Candidate's answer, may be empty
            grounding_text: Repository context, included as a bounded prefix
            language: Language code for the feedback
            repository: "owner/project" label for the prompt

        Returns:
            EvaluationResult with a score in [0, 100]
        """
        if not answer_text or not answer_text.strip():
            return EvaluationResult(score=NEUTRAL_SCORE, outcome=EvaluationOutcome.SKIPPED)

        if not self.client.available:
            logger.warning("Evaluation degraded: AI service not configured")
            return self._degraded()

        context = grounding_text[: self.context_chars] if grounding_text else None
        prompt = self.prompts.generate_evaluation_prompt(
            question=question,
            answer=answer_text,
            language=language,
            grounding_text=context,
            repository=repository,
        )

        try:
            raw = await self.client.generate_json(
                prompt,
                EVALUATION_SCHEMA,
                max_tokens=2048,
                temperature=0.4,
                trace_name="answer_evaluation",
                trace_metadata={"answer_length": len(answer_text), "grounded": bool(context)},
            )
            payload = EvaluationPayload.model_validate(raw)
        except GenerativeServiceError as e:
            logger.warning(f"Evaluation degraded: {e}")
            return self._degraded()
        except ValidationError as e:
            logger.warning(f"Evaluation degraded, payload does not match schema: {e.error_count()} errors")
            return self._degraded()

        score = clamp_score(payload.score)
        if score != payload.score:
            logger.info(f"Clamped evaluation score {payload.score} -> {score}")

        return EvaluationResult(
            score=score,
            feedback=payload.feedback,
            strengths=payload.strengths,
            improvements=payload.improvements,
            keywords=payload.keywords,
            outcome=EvaluationOutcome.EVALUATED,
        )

    def _degraded(self) -> EvaluationResult:
        return EvaluationResult(
            score=NEUTRAL_SCORE,
            feedback=DEGRADED_FEEDBACK,
            outcome=EvaluationOutcome.DEGRADED,
        )
