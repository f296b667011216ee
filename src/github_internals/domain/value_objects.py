"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from github_internals.domain.exceptions import InvalidRepoCoordinateError

Ref = str
"""A Git reference name, e.g. ``my-branch``."""

Sha = str
"""A Git SHA-1.  Opaque to this library."""

PullRequestNumber = int

_SLUG_RE = re.compile(r"^(?P<owner>[A-Za-z0-9\-_.]+)/(?P<repo>[A-Za-z0-9\-_.]+)$")


@dataclass(frozen=True, slots=True)
class RepoCoordinate:
    """The ``(owner, repo)`` pair every ref and commit operation is scoped to."""

    owner: str
    repo: str

    @classmethod
    def from_string(cls, slug: str) -> RepoCoordinate:
        """Parse and validate an ``owner/repo`` slug."""
        slug = slug.strip()
        match = _SLUG_RE.match(slug)
        if not match:
            raise InvalidRepoCoordinateError(
                f"Invalid repository slug: '{slug}'. Expected format: <owner>/<repo>"
            )
        return cls(owner=match["owner"], repo=match["repo"])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
