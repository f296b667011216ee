"""Port: GitHub git-data API — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, Protocol

from github_internals.domain.value_objects import PullRequestNumber, RepoCoordinate, Sha


class GitDataApi(Protocol):
    """Abstract contract for an already-authenticated GitHub client.

    Reference paths are used verbatim: callers pass ``heads/<ref>`` or
    ``refs/heads/<ref>`` as the endpoint expects.
    """

    async def get_ref(self, repo: RepoCoordinate, ref: str) -> Sha:
        """Return the sha the reference points at."""
        ...

    async def create_ref(self, repo: RepoCoordinate, ref: str, sha: Sha) -> None:
        """Create a new reference pointing at *sha*."""
        ...

    async def update_ref(
        self, repo: RepoCoordinate, ref: str, sha: Sha, *, force: bool
    ) -> None:
        """Move an existing reference to *sha*."""
        ...

    async def delete_ref(self, repo: RepoCoordinate, ref: str) -> None:
        """Remove the reference."""
        ...

    async def list_pull_request_commits(
        self, repo: RepoCoordinate, pull_request_number: PullRequestNumber
    ) -> list[dict[str, Any]]:
        """Return every raw commit entry of the pull request, all pages drained."""
        ...
