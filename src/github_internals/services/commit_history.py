"""Pull-request commit history."""

from __future__ import annotations

import logging
from typing import Any

from github_internals.domain.entities import CommitDetails, CommitIdentity
from github_internals.domain.exceptions import CommitFetchError
from github_internals.domain.ports.git_data_api import GitDataApi
from github_internals.domain.value_objects import PullRequestNumber, RepoCoordinate, Sha

logger = logging.getLogger(__name__)


def _to_identity(raw: dict[str, Any] | None) -> CommitIdentity | None:
    # GitHub sends null when the commit carries no usable signature.
    if raw is None:
        return None
    return CommitIdentity(name=raw.get("name"), email=raw.get("email"), date=raw.get("date"))


def to_commit_details(entry: dict[str, Any]) -> CommitDetails:
    """Project a raw ``GET /pulls/{n}/commits`` entry into :class:`CommitDetails`."""
    commit = entry["commit"]
    return CommitDetails(
        sha=entry["sha"],
        tree=commit["tree"]["sha"],
        author=_to_identity(commit.get("author")),
        committer=_to_identity(commit.get("committer")),
        message=commit["message"],
    )


class CommitHistoryFetcher:
    """Reads the full commit list of a pull request.

    The listing is drained eagerly and is all-or-nothing: a failing page
    discards whatever earlier pages returned.
    """

    def __init__(self, api: GitDataApi) -> None:
        self._api = api

    async def fetch_commits_details(
        self, repo: RepoCoordinate, pull_request_number: PullRequestNumber
    ) -> list[CommitDetails]:
        try:
            entries = await self._api.list_pull_request_commits(repo, pull_request_number)
            details = [to_commit_details(entry) for entry in entries]
        except Exception as exc:
            logger.error(
                "could not fetch_commits_details %s for PR [%s]: %s",
                repo.full_name,
                pull_request_number,
                exc,
                exc_info=exc,
            )
            raise CommitFetchError(repo, pull_request_number) from exc

        logger.debug(
            "Fetched %d commits of %s PR #%s", len(details), repo.full_name, pull_request_number
        )
        return details

    async def fetch_commits(
        self, repo: RepoCoordinate, pull_request_number: PullRequestNumber
    ) -> list[Sha]:
        details = await self.fetch_commits_details(repo, pull_request_number)
        return [commit.sha for commit in details]
