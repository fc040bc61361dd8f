"""
Repository reference parsing.

Extracts the (owner, project) pair from the many ways users paste a
repository location:

    https://github.com/owner/project
    https://github.com/owner/project.git/
    git@github.com:owner/project.git
    github.com/owner/project/tree/main
"""

import re

from src.core.exceptions import InvalidReferenceError
from src.models.repository import RepositoryReference

_REFERENCE_PATTERN = re.compile(
    r"(?:^|[/@.])github\.com[/:](?P<owner>[^/\s:?#]+)/(?P<project>[^/\s?#]+)",
    re.IGNORECASE,
)


def parse_repository_url(value: object) -> RepositoryReference | None:
    """
    Parse a repository URL into a reference.

    Never raises: anything that is not a recognizable hosting URL
    (including non-string input) yields None.
    """
    if not isinstance(value, str):
        return None

    match = _REFERENCE_PATTERN.search(value.strip())
    if not match:
        return None

    owner = match.group("owner")
    project = match.group("project")
    if project.lower().endswith(".git"):
        project = project[:-4]

    if not owner or not project or owner in {".", ".."} or project in {".", ".."}:
        return None

    return RepositoryReference(owner=owner, project=project)


def require_repository_reference(value: object) -> RepositoryReference:
    """Parse a repository URL, raising InvalidReferenceError when it is not one."""
    reference = parse_repository_url(value)
    if reference is None:
        raise InvalidReferenceError(f"Invalid repository URL format: {value!r}")
    return reference
