"""Dependency wiring — builds the services over one shared HTTP client."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

import httpx

from github_internals.domain.entities import CommitDetails, TemporaryRef
from github_internals.domain.ports.git_data_api import GitDataApi
from github_internals.domain.value_objects import PullRequestNumber, Ref, RepoCoordinate, Sha
from github_internals.infrastructure.config import Settings, get_settings
from github_internals.infrastructure.github_rest_adapter import GitHubRestAdapter
from github_internals.services.commit_history import CommitHistoryFetcher
from github_internals.services.ref_client import RefClient
from github_internals.services.ref_naming import TokenSource
from github_internals.services.temporary_ref import TemporaryRefManager

T = TypeVar("T")


class GitHubSession:
    """Facade over the ref, temporary-ref and commit-history services."""

    def __init__(self, api: GitDataApi, token_source: TokenSource | None = None) -> None:
        self.refs = RefClient(api)
        self.temporary_refs = TemporaryRefManager(self.refs, token_source)
        self.commits = CommitHistoryFetcher(api)

    async def fetch_ref_sha(self, repo: RepoCoordinate, ref: Ref) -> Sha:
        return await self.refs.fetch_ref_sha(repo, ref)

    async def create_ref(self, repo: RepoCoordinate, ref: Ref, sha: Sha) -> None:
        await self.refs.create_ref(repo, ref, sha)

    async def update_ref(
        self, repo: RepoCoordinate, ref: Ref, sha: Sha, *, force: bool = False
    ) -> None:
        await self.refs.update_ref(repo, ref, sha, force=force)

    async def delete_ref(self, repo: RepoCoordinate, ref: Ref) -> None:
        await self.refs.delete_ref(repo, ref)

    async def create_temporary_ref(
        self, repo: RepoCoordinate, ref: Ref, sha: Sha
    ) -> TemporaryRef:
        return await self.temporary_refs.create_temporary_ref(repo, ref, sha)

    async def with_temporary_ref(
        self,
        repo: RepoCoordinate,
        ref: Ref,
        sha: Sha,
        action: Callable[[Ref], Awaitable[T]],
    ) -> T:
        return await self.temporary_refs.with_temporary_ref(repo, ref, sha, action)

    async def fetch_commits_details(
        self, repo: RepoCoordinate, pull_request_number: PullRequestNumber
    ) -> list[CommitDetails]:
        return await self.commits.fetch_commits_details(repo, pull_request_number)

    async def fetch_commits(
        self, repo: RepoCoordinate, pull_request_number: PullRequestNumber
    ) -> list[Sha]:
        return await self.commits.fetch_commits(repo, pull_request_number)


def build_adapter(client: httpx.AsyncClient, settings: Settings) -> GitHubRestAdapter:
    token = settings.github_token.get_secret_value() if settings.github_token else None
    return GitHubRestAdapter(
        client=client,
        token=token,
        api_url=settings.github_api_url,
        per_page=settings.github_per_page,
        user_agent=settings.user_agent,
    )


@asynccontextmanager
async def open_github_session(
    settings: Settings | None = None,
) -> AsyncIterator[GitHubSession]:
    """Open an HTTP client, wire the services and close the client on exit."""
    settings = settings or get_settings()
    client = httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout_s))
    try:
        yield GitHubSession(build_adapter(client, settings))
    finally:
        await client.aclose()
