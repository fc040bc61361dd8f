"""
Generative text service client for RepoPrep

Wraps one request/response call to Gemini's generateContent REST API with a
declared JSON output schema. Question generation and answer evaluation both
go through here.

Integrated with Langfuse for observability and tracing.
"""

import json
import logging
from typing import Any

import httpx

from src.config.settings import Settings
from src.core.exceptions import (
    GenerativeResponseError,
    GenerativeServiceUnavailableError,
)

logger = logging.getLogger(__name__)

# Langfuse imports
try:
    from langfuse import Langfuse
    LANGFUSE_AVAILABLE = True
except ImportError:
    LANGFUSE_AVAILABLE = False
    Langfuse = None
    logger.warning("Langfuse not installed. Tracing disabled.")


class GenerativeClient:
    """
    Structured-output client for the generative text service.

    The "AI configured" capability is decided once at construction
    (``enabled``) and never re-read from the environment, so tests can build
    clients with the capability on or off.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout_seconds: float = 60.0,
        enabled: bool = True,
        http_client: httpx.AsyncClient | None = None,
        langfuse: Any = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key
            model: Model name, e.g. "gemini-2.5-flash"
            base_url: API root, e.g. "https://generativelanguage.googleapis.com/v1beta"
            timeout_seconds: Per-call timeout
            enabled: Capability flag; False makes every call unavailable
            http_client: Optional preconfigured client (used by tests)
            langfuse: Optional Langfuse instance for tracing
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.enabled = enabled and bool(api_key)
        self.headers = {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }
        self.client = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self.timeout_seconds = timeout_seconds
        self.langfuse = langfuse

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> "GenerativeClient":
        """Build a client from application settings."""
        if not settings.ai_available:
            logger.warning("GEMINI_API_KEY not configured. AI features will be disabled.")
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout_seconds=settings.generative_timeout_seconds,
            enabled=settings.ai_available,
            http_client=http_client,
            langfuse=_init_langfuse(settings),
        )

    @property
    def available(self) -> bool:
        return self.enabled

    async def close(self):
        """Close the HTTP client and flush Langfuse."""
        await self.client.aclose()
        if self.langfuse:
            try:
                self.langfuse.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    # =========================================================================
    # CORE CALL
    # =========================================================================

    async def generate_json(
        self,
        prompt: str,
        response_schema: dict[str, Any],
        max_tokens: int = 2048,
        temperature: float = 0.7,
        trace_name: str = "generate_json",
        trace_metadata: dict | None = None,
    ) -> Any:
        """
        Send a prompt and return the parsed JSON reply.

        Args:
            prompt: The prompt to send
            response_schema: Output schema declared to the service
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature
            trace_name: Name for Langfuse span
            trace_metadata: Additional metadata for span

        Returns:
            Decoded JSON value (object or array)

        Raises:
            GenerativeServiceUnavailableError: disabled, transport error,
                timeout or error status
            GenerativeResponseError: reply content is missing or not JSON
        """
        if not self.enabled:
            raise GenerativeServiceUnavailableError("AI service not available: API key is not configured")

        span = self._start_span(trace_name, trace_metadata)

        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]}
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
                "maxOutputTokens": max_tokens,
                "temperature": temperature,
            },
        }

        try:
            response = await self.client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                json=payload,
                headers=self.headers,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            result = response.json()
        except httpx.TimeoutException as e:
            logger.error(f"Gemini request timed out after {self.timeout_seconds}s: {e}")
            self._end_span(span, {"error": "timeout"})
            raise GenerativeServiceUnavailableError("AI service timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini API error: {e}")
            self._end_span(span, {"error": str(e)})
            raise GenerativeServiceUnavailableError(f"AI service error: {e}") from e
        except ValueError as e:
            self._end_span(span, {"error": "invalid envelope"})
            raise GenerativeResponseError("AI service returned a non-JSON envelope") from e

        content = self._extract_content(result)
        if not content.strip():
            self._end_span(span, {"error": "empty"})
            raise GenerativeResponseError("AI service returned an empty response")

        try:
            data = json.loads(_strip_code_fences(content))
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse Gemini JSON: {e}; raw={content[:300]!r}")
            self._end_span(span, {"error": "invalid json"})
            raise GenerativeResponseError(f"Failed to parse AI response as JSON: {e}") from e

        self._end_span(span, {"chars": len(content)})
        return data

    def _extract_content(self, result: Any) -> str:
        """Extract text content from a generateContent reply."""
        if not isinstance(result, dict):
            return ""
        candidates = result.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""
        candidate = candidates[0]
        content = candidate.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""

        text_parts = []
        for part in parts:
            if isinstance(part, str):
                text_parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                text_parts.append(part["text"])
        return "".join(text_parts)

    # =========================================================================
    # TRACING
    # =========================================================================

    def _start_span(self, name: str, metadata: dict | None):
        if not self.langfuse:
            return None
        try:
            return self.langfuse.start_span(
                name=name,
                metadata={"model": self.model, **(metadata or {})},
            )
        except Exception as lf_err:
            logger.warning(f"Langfuse span start failed: {lf_err}")
            return None

    def _end_span(self, span, output: dict) -> None:
        if span is None:
            return
        try:
            span.end(output=output)
        except Exception as lf_err:
            logger.debug(f"Langfuse span end failed: {lf_err}")


def _init_langfuse(settings: Settings):
    """Create a Langfuse client when tracing is enabled and configured."""
    if not (LANGFUSE_AVAILABLE and settings.langfuse_enabled):
        return None
    if not (settings.langfuse_secret_key and settings.langfuse_public_key):
        logger.info("Langfuse keys not configured, tracing disabled")
        return None
    try:
        client = Langfuse(
            secret_key=settings.langfuse_secret_key,
            public_key=settings.langfuse_public_key,
            host=settings.langfuse_base_url,
        )
        logger.info("Langfuse initialized for LLM observability")
        return client
    except Exception as e:
        logger.warning(f"Failed to initialize Langfuse: {e}")
        return None


def _strip_code_fences(content: str) -> str:
    """Remove a markdown fence some models wrap around JSON."""
    text = content.strip()
    if text.startswith("```"):
        lines = text.splitlines()[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text
