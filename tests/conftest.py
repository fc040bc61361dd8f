from collections.abc import Callable

import httpx
import pytest

from src.config.settings import Settings
from src.core.grounding import GroundingTextRetriever
from src.core.interview_pipeline import InterviewPipeline
from src.core.question_generator import QuestionGenerationService
from src.core.response_evaluator import ResponseEvaluator
from src.core.store import InMemoryInterviewStore

RAW_HOST = "https://raw.test"
API_HOST = "https://api.test"

README = """# Acme Queue

A lightweight job queue for Python services.

## Features

- Retries with exponential backoff
- Redis and in-memory backends

## Usage

Workers pull jobs and acknowledge them once processed.
"""


class FakeGenerativeClient:
    """Stands in for GenerativeClient; replies are served in order."""

    def __init__(self, replies=None, available: bool = True):
        self.replies = list(replies or [])
        self.available = available
        self.calls: list[dict] = []
        self.closed = False

    async def generate_json(self, prompt, response_schema, **kwargs):
        self.calls.append({"prompt": prompt, "schema": response_schema, **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def close(self):
        self.closed = True


def mock_http(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def content_host(documents: dict[str, str] | None = None, metadata: dict | None = None, seen: list | None = None):
    """
    Handler for a fake content host.

    documents maps "owner/project/branch/filename" to a body; metadata is
    served for any /repos/ request (404 when None).
    """
    documents = documents or {}

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(str(request.url))
        if request.url.host == "raw.test":
            body = documents.get(request.url.path.lstrip("/"))
            if body is None:
                return httpx.Response(404, text="404: Not Found")
            return httpx.Response(200, text=body)
        if request.url.path.startswith("/repos/") and metadata is not None:
            return httpx.Response(200, json=metadata)
        return httpx.Response(404, json={"message": "Not Found"})

    return handler


def make_retriever(handler, **kwargs) -> GroundingTextRetriever:
    return GroundingTextRetriever(mock_http(handler), raw_host=RAW_HOST, api_host=API_HOST, **kwargs)


def make_pipeline(handler, client: FakeGenerativeClient, store=None) -> InterviewPipeline:
    store = store or InMemoryInterviewStore()
    return InterviewPipeline(
        store=store,
        retriever=make_retriever(handler),
        generator=QuestionGenerationService(client),
        evaluator=ResponseEvaluator(client),
    )


def question_reply(*items: tuple[str, str]) -> dict:
    return {"questions": [{"question": text, "difficulty": level} for text, level in items]}


def evaluation_reply(score, feedback: str = "Solid answer.") -> dict:
    return {
        "score": score,
        "strengths": ["clear"],
        "improvements": ["add examples"],
        "keywords": ["queue"],
        "feedback": feedback,
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        gemini_base_url="https://gemini.test/v1beta",
        content_raw_host=RAW_HOST,
        content_api_host=API_HOST,
    )


@pytest.fixture
def store() -> InMemoryInterviewStore:
    return InMemoryInterviewStore()
