"""
Question Generation Service for RepoPrep

Turns grounding text into an exact number of (question, difficulty) pairs
via the generative service, and offers a paragraph-based degraded path for
when the service is unreachable.
"""

import logging
import re
from typing import Any

from pydantic import ValidationError

from src.core.difficulty import normalize_difficulty
from src.core.exceptions import (
    GenerativeResponseError,
    GenerativeServiceUnavailableError,
    QuestionGenerationError,
)
from src.core.generative_client import GenerativeClient
from src.models.question import (
    QUESTION_BATCH_SCHEMA,
    GeneratedQuestion,
    QuestionBatchPayload,
    QuestionDifficulty,
)
from src.prompts.interviewer import InterviewerPrompts, PARAGRAPH_QUESTION_TEMPLATES

logger = logging.getLogger(__name__)

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_MARKDOWN_NOISE = re.compile(r"^[#>*\-\s]+|[`*]+")


class QuestionGenerationService:
    """
    Bounded question generation on top of the generative client.

    Guarantees:
    - Exactly min(count, served) questions are returned
    - Zero or malformed output is a QuestionGenerationError, never an empty list
    """

    def __init__(self, client: GenerativeClient, max_question_count: int = 20):
        self.client = client
        self.max_question_count = max_question_count
        self.prompts = InterviewerPrompts()

    async def generate(
        self,
        grounding_text: str,
        count: int,
        difficulty: str = "mid",
        language: str = "en",
        repository: str | None = None,
    ) -> list[GeneratedQuestion]:
        """
        Generate interview questions from grounding text.

        Args:
            grounding_text: Document or metadata text about the repository
            count: Number of questions wanted
            difficulty: Advisory difficulty hint (any vocabulary)
            language: Language code for the questions
            repository: "owner/project" label for the prompt

        Returns:
            At most ``count`` questions, in service order

        Raises:
            ValueError: count outside 1..max_question_count
            QuestionGenerationError: service unavailable, malformed or empty output
        """
        if not 1 <= count <= self.max_question_count:
            raise ValueError(f"count must be between 1 and {self.max_question_count}, got {count}")

        prompt = self.prompts.generate_question_prompt(
            grounding_text=grounding_text,
            count=count,
            difficulty=difficulty,
            language=language,
            repository=repository,
        )

        logger.info(f"Generating {count} questions for {repository or 'repository'} ({difficulty}, {language})")

        try:
            raw = await self.client.generate_json(
                prompt,
                QUESTION_BATCH_SCHEMA,
                max_tokens=4096,
                trace_name="question_generation",
                trace_metadata={"count": count, "difficulty": difficulty, "language": language},
            )
        except GenerativeServiceUnavailableError as e:
            raise QuestionGenerationError(str(e), service_unavailable=True) from e
        except GenerativeResponseError as e:
            raise QuestionGenerationError(f"Malformed question payload: {e}") from e

        questions = self._parse_questions(raw)
        if not questions:
            raise QuestionGenerationError("The AI service did not generate any questions")

        if len(questions) < count:
            logger.warning(f"Requested {count} questions, service returned {len(questions)}")

        return questions[:count]

    def _parse_questions(self, raw: Any) -> list[GeneratedQuestion]:
        """Validate the payload against the declared schema."""
        # Some replies are a bare array instead of {"questions": [...]}
        if isinstance(raw, list):
            raw = {"questions": raw}

        try:
            payload = QuestionBatchPayload.model_validate(raw)
        except ValidationError as e:
            raise QuestionGenerationError(f"Question payload does not match schema: {e.error_count()} errors") from e

        return [
            GeneratedQuestion(
                text=item.question.strip(),
                difficulty=normalize_difficulty(item.difficulty),
            )
            for item in payload.questions
            if item.question and item.question.strip()
        ]


# ============================================================================
# DEGRADED PATH
# ============================================================================

def split_paragraphs(text: str) -> list[str]:
    """Split a document into cleaned, non-trivial paragraphs."""
    paragraphs = []
    for block in _PARAGRAPH_SPLIT.split(text or ""):
        lines = [_MARKDOWN_NOISE.sub("", line).strip() for line in block.splitlines()]
        cleaned = " ".join(line for line in lines if line)
        if len(cleaned) >= 3:
            paragraphs.append(cleaned)
    return paragraphs


def derive_questions_from_document(
    text: str,
    count: int,
    excerpt_chars: int = 200,
) -> list[GeneratedQuestion]:
    """
    Build ``count`` naive questions straight from document paragraphs.

    One template per paragraph, cycling through paragraphs when there are
    fewer than ``count``. Always tagged medium.

    Raises:
        QuestionGenerationError: the document has no usable paragraph
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    paragraphs = split_paragraphs(text)
    if not paragraphs:
        raise QuestionGenerationError("Document has no paragraphs to derive questions from")

    questions = []
    for index in range(count):
        paragraph = paragraphs[index % len(paragraphs)]
        excerpt = paragraph if len(paragraph) <= excerpt_chars else paragraph[: excerpt_chars - 3].rstrip() + "..."
        template = PARAGRAPH_QUESTION_TEMPLATES[(index // len(paragraphs)) % len(PARAGRAPH_QUESTION_TEMPLATES)]
        questions.append(
            GeneratedQuestion(
                text=template.format(excerpt=excerpt),
                difficulty=QuestionDifficulty.MEDIUM,
            )
        )
    return questions
