"""
Grounding text retrieval for RepoPrep

Resolves descriptive text about a repository in two tiers:

1. Document probes: an ordered list of (branch, filename) candidates, each
   fetched once from the raw content host. The first candidate that answers
   2xx with a non-blank body wins, even if a later one would also succeed.
2. Metadata fallback: the repository metadata API, rendered into a short
   paragraph.

If both tiers fail the retrieval fails with GroundingUnavailableError.
"""

import logging
from dataclasses import dataclass
from itertools import product
from typing import Awaitable, Callable, Sequence, TypeVar

import httpx
from pydantic import ValidationError

from src.config.settings import Settings
from src.core.exceptions import GroundingUnavailableError
from src.models.repository import (
    DocumentContext,
    MetadataContext,
    RepositoryMetadata,
    RepositoryReference,
)

logger = logging.getLogger(__name__)

BRANCH_CANDIDATES: tuple[str, ...] = ("main", "master", "develop")
DOCUMENT_FILENAMES: tuple[str, ...] = (
    "README.md",
    "readme.md",
    "Readme.md",
    "README.MD",
    "README",
)

T = TypeVar("T")


@dataclass(frozen=True)
class ProbeHit:
    """Text found by a probe and where it came from."""

    text: str
    branch: str | None = None
    filename: str | None = None


ProbingStrategy = Callable[[RepositoryReference], Awaitable[ProbeHit | None]]


async def first_match(
    strategies: Sequence[Callable[[RepositoryReference], Awaitable[T | None]]],
    reference: RepositoryReference,
) -> T | None:
    """
    Run strategies left to right and return the first non-None result.

    Strategies are awaited one at a time so precedence never depends on
    response latency.
    """
    for strategy in strategies:
        result = await strategy(reference)
        if result is not None:
            return result
    return None


class DocumentProbe:
    """Fetch one (branch, filename) candidate from the raw content host."""

    def __init__(self, client: httpx.AsyncClient, raw_host: str, branch: str, filename: str):
        self.client = client
        self.raw_host = raw_host.rstrip("/")
        self.branch = branch
        self.filename = filename

    def url_for(self, reference: RepositoryReference) -> str:
        return f"{self.raw_host}/{reference.owner}/{reference.project}/{self.branch}/{self.filename}"

    async def __call__(self, reference: RepositoryReference) -> ProbeHit | None:
        url = self.url_for(reference)
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            logger.debug(f"Probe {self.branch}/{self.filename} failed: {e}")
            return None

        if not response.is_success:
            return None

        text = response.text
        if not text or not text.strip():
            return None

        logger.info(f"Document found for {reference.slug}: {self.branch}/{self.filename}")
        return ProbeHit(text=text, branch=self.branch, filename=self.filename)

    def __repr__(self) -> str:
        return f"DocumentProbe({self.branch!r}, {self.filename!r})"


class GroundingTextRetriever:
    """
    Multi-strategy grounding retrieval.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        raw_host: str = "https://raw.githubusercontent.com",
        api_host: str = "https://api.github.com",
        max_document_chars: int = 8000,
        api_token: str = "",
        branches: Sequence[str] = BRANCH_CANDIDATES,
        filenames: Sequence[str] = DOCUMENT_FILENAMES,
    ):
        """
        Args:
            client: Shared HTTP client; its timeout bounds every call
            raw_host: Root of the raw document host
            api_host: Root of the repository metadata API
            max_document_chars: Document text is cut to this many characters
            api_token: Optional bearer token for the metadata API
            branches: Branch candidates in precedence order
            filenames: Filename candidates in precedence order
        """
        self.client = client
        self.raw_host = raw_host.rstrip("/")
        self.api_host = api_host.rstrip("/")
        self.max_document_chars = max_document_chars
        self.api_token = api_token
        self.probes: list[ProbingStrategy] = [
            DocumentProbe(client, self.raw_host, branch, filename)
            for branch, filename in product(branches, filenames)
        ]

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> "GroundingTextRetriever":
        client = client or httpx.AsyncClient(
            timeout=settings.content_timeout_seconds,
            follow_redirects=True,
        )
        return cls(
            client=client,
            raw_host=settings.content_raw_host,
            api_host=settings.content_api_host,
            max_document_chars=settings.max_document_chars,
            api_token=settings.github_token,
        )

    async def close(self):
        await self.client.aclose()

    # =========================================================================
    # RETRIEVAL
    # =========================================================================

    async def retrieve(self, reference: RepositoryReference) -> DocumentContext | MetadataContext:
        """
        Resolve grounding context for a repository.

        Returns:
            DocumentContext when a document is found, else MetadataContext

        Raises:
            GroundingUnavailableError: no document and no metadata
        """
        document = await self.fetch_document(reference)
        if document is not None:
            return document

        logger.info(f"No document found for {reference.slug}, falling back to metadata")
        metadata = await self.fetch_metadata(reference)
        if metadata is not None:
            return MetadataContext.from_metadata(metadata)

        raise GroundingUnavailableError(
            f"Repository {reference.slug} has no readable document and its metadata "
            f"could not be fetched (it may be private or may not exist)"
        )

    async def fetch_document(self, reference: RepositoryReference) -> DocumentContext | None:
        """Run the document probes in precedence order."""
        hit = await first_match(self.probes, reference)
        if hit is None:
            return None

        text = hit.text
        if len(text) > self.max_document_chars:
            text = text[: self.max_document_chars]
        return DocumentContext(text=text, branch=hit.branch, filename=hit.filename)

    async def fetch_metadata(self, reference: RepositoryReference) -> RepositoryMetadata | None:
        """Query the metadata endpoint; None on any failure."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "RepoPrep-Interview-App",
        }
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"

        url = f"{self.api_host}/repos/{reference.owner}/{reference.project}"
        try:
            response = await self.client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Error fetching repository metadata for {reference.slug}: {e}")
            return None

        if not response.is_success:
            logger.warning(f"Metadata request for {reference.slug} returned {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"Metadata for {reference.slug} is not JSON")
            return None
        if not isinstance(data, dict):
            return None

        topics = data.get("topics")
        try:
            metadata = RepositoryMetadata(
                name=data.get("name") or reference.project,
                description=data.get("description") or "",
                language=data.get("language") or "Unknown",
                topics=[str(t) for t in topics] if isinstance(topics, list) else [],
                homepage=data.get("homepage") or "",
                stars=int(data.get("stargazers_count") or 0),
                forks=int(data.get("forks_count") or 0),
            )
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Malformed metadata for {reference.slug}: {e}")
            return None

        logger.info(f"Repository metadata obtained: {metadata.name}")
        return metadata
