"""Domain exception hierarchy.

Transport-level errors are raised by the GitHub adapter.  The service layer
catches them, logs the original cause and re-raises one of the operation
errors below, which form the closed set callers are expected to handle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from github_internals.domain.value_objects import RepoCoordinate


class GitHubInternalsError(Exception):
    """Base exception for the entire library."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidRepoCoordinateError(GitHubInternalsError):
    """The supplied slug is not a valid ``owner/repo`` pair."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class GitHubApiError(GitHubInternalsError):
    """GitHub answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubTransportError(GitHubApiError):
    """The request never produced a response (DNS, TLS, timeout, ...)."""


class GitHubNotFoundError(GitHubApiError):
    """The repository or the reference does not exist (404)."""


class GitHubAccessDeniedError(GitHubApiError):
    """The token is not allowed to perform the operation (403)."""


class GitHubRateLimitError(GitHubApiError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class GitHubUnprocessableError(GitHubApiError):
    """GitHub rejected the payload (409 / 422), e.g. a non-fast-forward update."""


# ── Operation errors ────────────────────────────────────────────────────────


class RefOperationError(GitHubInternalsError):
    """A reference operation failed against the remote store."""

    operation = "ref"

    def __init__(self, repo: RepoCoordinate, ref: str) -> None:
        super().__init__(f"could not {self.operation} {repo.full_name} [{ref}]")
        self.repo = repo
        self.ref = ref


class RefReadError(RefOperationError):
    operation = "fetch_ref_sha"


class RefCreateError(RefOperationError):
    operation = "create_ref"


class RefUpdateError(RefOperationError):
    operation = "update_ref"


class RefDeleteError(RefOperationError):
    operation = "delete_ref"


class CommitFetchError(GitHubInternalsError):
    """The commit listing of a pull request could not be retrieved."""

    operation = "fetch_commits_details"

    def __init__(self, repo: RepoCoordinate, pull_request_number: int) -> None:
        super().__init__(
            f"could not {self.operation} {repo.full_name} "
            f"for PR [{pull_request_number}]"
        )
        self.repo = repo
        self.pull_request_number = pull_request_number
