"""
Exception hierarchy for the interview pipeline.

Pipeline errors carry the stage that failed so callers can tell bad input
from a bad repository from an unavailable AI service.
"""


class PipelineError(Exception):
    """Fatal failure of an interview-creation stage."""

    stage = "pipeline"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, str]:
        return {"stage": self.stage, "message": self.message}


class InvalidReferenceError(PipelineError):
    """The repository string does not look like a hosted repository URL."""

    stage = "reference_parsing"


class GroundingUnavailableError(PipelineError):
    """Neither a document nor repository metadata could be obtained."""

    stage = "grounding_retrieval"


class QuestionGenerationError(PipelineError):
    """The generative service produced no usable questions."""

    stage = "question_generation"

    def __init__(self, message: str, service_unavailable: bool = False):
        super().__init__(message)
        self.service_unavailable = service_unavailable


# ============================================================================
# GENERATIVE SERVICE
# ============================================================================

class GenerativeServiceError(Exception):
    """Base error of a generative service call."""
    pass


class GenerativeServiceUnavailableError(GenerativeServiceError):
    """Service disabled, unreachable, timed out or answered with an error status."""
    pass


class GenerativeResponseError(GenerativeServiceError):
    """Service answered but the content is not the requested JSON."""
    pass


# ============================================================================
# LOOKUPS
# ============================================================================

class NotFoundError(LookupError):
    """A stored interview, question or answer does not exist."""


class InterviewNotFoundError(NotFoundError):
    pass


class QuestionNotFoundError(NotFoundError):
    pass


class AnswerNotFoundError(NotFoundError):
    pass
