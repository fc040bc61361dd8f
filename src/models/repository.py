"""
Repository reference and grounding context models for RepoPrep
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class RepositoryReference(BaseModel):
    """Canonical (owner, project) identifier of a hosted repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    project: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.project}"


class RepositoryMetadata(BaseModel):
    """Structured attributes returned by the content host metadata API."""

    name: str
    description: str = ""
    language: str = "Unknown"
    topics: list[str] = Field(default_factory=list)
    homepage: str = ""
    stars: int = 0
    forks: int = 0


class DocumentContext(BaseModel):
    """Grounding text taken from a long-form document in the repository."""

    kind: Literal["document"] = "document"
    text: str = Field(..., description="Document text, already truncated")
    branch: str | None = None
    filename: str | None = None


class MetadataContext(BaseModel):
    """Grounding synthesized from repository metadata when no document exists."""

    kind: Literal["metadata"] = "metadata"
    name: str
    description: str = ""
    primary_language: str = "Unknown"
    topics: list[str] = Field(default_factory=list)
    star_count: int = 0
    fork_count: int = 0
    homepage: str = ""

    @classmethod
    def from_metadata(cls, metadata: RepositoryMetadata) -> "MetadataContext":
        return cls(
            name=metadata.name,
            description=metadata.description,
            primary_language=metadata.language,
            topics=list(metadata.topics),
            star_count=metadata.stars,
            fork_count=metadata.forks,
            homepage=metadata.homepage,
        )

    @property
    def text(self) -> str:
        """Render the metadata as a short descriptive paragraph."""
        topics = ", ".join(self.topics)
        focus = f" focused on {topics}" if self.topics else ""
        return (
            f"Repository: {self.name}\n"
            f"Description: {self.description or 'No description available'}\n"
            f"Primary Language: {self.primary_language}\n"
            f"Topics: {topics or 'None'}\n"
            f"Stars: {self.star_count}\n"
            f"Forks: {self.fork_count}\n"
            f"Homepage: {self.homepage or 'None'}\n"
            f"This is a {self.primary_language} project{focus}."
        )


GroundingContext = Annotated[
    Union[DocumentContext, MetadataContext],
    Field(discriminator="kind"),
]


class GroundingSummary(BaseModel):
    """Short description of the grounding used for an interview."""

    source: Literal["document", "metadata"]
    repository: str
    length: int
    preview: str

    @classmethod
    def build(
        cls,
        reference: RepositoryReference,
        context: DocumentContext | MetadataContext,
        preview_chars: int = 280,
    ) -> "GroundingSummary":
        text = context.text
        return cls(
            source=context.kind,
            repository=reference.slug,
            length=len(text),
            preview=text[:preview_chars],
        )
