"""Pytest configuration and fixtures for github-internals tests.

This module provides a FakeGitDataApi: an in-memory stand-in for GitHub's
git-data endpoints so the services can be tested without network access.
"""

from __future__ import annotations

import os

# Keep a developer's real token out of the tests.
os.environ.pop("GITHUB_TOKEN", None)

from typing import Any

import pytest

from github_internals.domain.exceptions import (
    GitHubApiError,
    GitHubNotFoundError,
    GitHubUnprocessableError,
)
from github_internals.domain.value_objects import RepoCoordinate


def commit_entry(
    sha: str,
    message: str = "commit",
    tree: str | None = None,
    author: str = "Ada",
) -> dict[str, Any]:
    """Build a raw entry shaped like ``GET /pulls/{n}/commits`` output."""
    identity = {"name": author, "email": f"{author.lower()}@example.com", "date": "2024-01-01T00:00:00Z"}
    return {
        "sha": sha,
        "commit": {
            "author": identity,
            "committer": dict(identity),
            "message": message,
            "tree": {"sha": tree or f"tree-{sha}"},
        },
    }


class FakeGitDataApi:
    """A fake git-data API keeping refs in memory.

    Refs are stored under their fully qualified path.  ``get_ref``,
    ``update_ref`` and ``delete_ref`` resolve ``refs/<path>`` the way GitHub
    does, so a caller using the wrong path form gets a 404.  Non-forced
    updates are only accepted when the new sha descends from the current one
    according to ``parents``.
    """

    def __init__(self) -> None:
        self.refs: dict[tuple[str, str], str] = {}
        self.parents: dict[str, tuple[str, ...]] = {}
        self.pages: dict[tuple[str, int], list[list[dict[str, Any]]]] = {}
        self.failing_page: int | None = None
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, str]] = []

    # ── Test helpers ────────────────────────────────────────────────────

    def set_branch(self, repo: RepoCoordinate, name: str, sha: str) -> None:
        self.refs[(repo.full_name, f"refs/heads/{name}")] = sha

    def branch_sha(self, repo: RepoCoordinate, name: str) -> str | None:
        return self.refs.get((repo.full_name, f"refs/heads/{name}"))

    def branches(self, repo: RepoCoordinate) -> list[str]:
        prefix = "refs/heads/"
        return sorted(
            path[len(prefix):] for owner_repo, path in self.refs if owner_repo == repo.full_name
        )

    def fail(self, method: str, exc: Exception | None = None) -> None:
        self.failures[method] = exc or GitHubApiError(f"{method} exploded", 500)

    def calls_to(self, method: str) -> list[str]:
        return [ref for name, ref in self.calls if name == method]

    def _check(self, method: str, ref: str) -> None:
        self.calls.append((method, ref))
        if method in self.failures:
            raise self.failures[method]

    def _is_ancestor(self, old: str, new: str) -> bool:
        stack, seen = [new], set()
        while stack:
            sha = stack.pop()
            if sha == old:
                return True
            if sha in seen:
                continue
            seen.add(sha)
            stack.extend(self.parents.get(sha, ()))
        return False

    # ── GitDataApi ──────────────────────────────────────────────────────

    async def get_ref(self, repo: RepoCoordinate, ref: str) -> str:
        self._check("get_ref", ref)
        try:
            return self.refs[(repo.full_name, f"refs/{ref}")]
        except KeyError:
            raise GitHubNotFoundError(f"Not found: {ref}", 404) from None

    async def create_ref(self, repo: RepoCoordinate, ref: str, sha: str) -> None:
        self._check("create_ref", ref)
        if not ref.startswith("refs/"):
            raise GitHubUnprocessableError("Reference name must start with 'refs/'", 422)
        key = (repo.full_name, ref)
        if key in self.refs:
            raise GitHubUnprocessableError("Reference already exists", 422)
        self.refs[key] = sha

    async def update_ref(self, repo: RepoCoordinate, ref: str, sha: str, *, force: bool) -> None:
        self._check("update_ref", ref)
        key = (repo.full_name, f"refs/{ref}")
        if key not in self.refs:
            raise GitHubUnprocessableError("Reference does not exist", 422)
        if not force and not self._is_ancestor(self.refs[key], sha):
            raise GitHubUnprocessableError("Update is not a fast forward", 422)
        self.refs[key] = sha

    async def delete_ref(self, repo: RepoCoordinate, ref: str) -> None:
        self._check("delete_ref", ref)
        key = (repo.full_name, f"refs/{ref}")
        if key not in self.refs:
            raise GitHubUnprocessableError("Reference does not exist", 422)
        del self.refs[key]

    async def list_pull_request_commits(
        self, repo: RepoCoordinate, pull_request_number: int
    ) -> list[dict[str, Any]]:
        self._check("list_pull_request_commits", str(pull_request_number))
        key = (repo.full_name, pull_request_number)
        if key not in self.pages:
            raise GitHubNotFoundError(f"Not found: PR #{pull_request_number}", 404)
        commits: list[dict[str, Any]] = []
        for index, page in enumerate(self.pages[key], start=1):
            if index == self.failing_page:
                raise GitHubApiError(f"page {index} failed", 502)
            commits.extend(page)
        return commits


@pytest.fixture
def repo() -> RepoCoordinate:
    return RepoCoordinate(owner="acme", repo="widgets")


@pytest.fixture
def api(repo: RepoCoordinate) -> FakeGitDataApi:
    fake = FakeGitDataApi()
    fake.set_branch(repo, "main", "abc123")
    return fake
