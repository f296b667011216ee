"""Reference CRUD against the remote store, with uniform failure translation.

Every operation calls the remote exactly once.  A failure is logged with the
original cause and re-raised as the operation-specific error, chained to that
cause.  Nothing is retried here.
"""

from __future__ import annotations

import logging

from github_internals.domain.exceptions import (
    RefCreateError,
    RefDeleteError,
    RefOperationError,
    RefReadError,
    RefUpdateError,
)
from github_internals.domain.ports.git_data_api import GitDataApi
from github_internals.domain.value_objects import Ref, RepoCoordinate, Sha
from github_internals.services.ref_naming import get_fully_qualified_ref, get_head_ref

logger = logging.getLogger(__name__)


def _failure(
    error_type: type[RefOperationError],
    repo: RepoCoordinate,
    ref: Ref,
    exc: Exception,
) -> RefOperationError:
    logger.error(
        "could not %s %s [%s]: %s",
        error_type.operation,
        repo.full_name,
        ref,
        exc,
        exc_info=exc,
    )
    return error_type(repo, ref)


class RefClient:
    """Create, read, update and delete branches of a repository."""

    def __init__(self, api: GitDataApi) -> None:
        self._api = api

    async def fetch_ref_sha(self, repo: RepoCoordinate, ref: Ref) -> Sha:
        try:
            return await self._api.get_ref(repo, get_head_ref(ref))
        except Exception as exc:
            raise _failure(RefReadError, repo, ref, exc) from exc

    async def create_ref(self, repo: RepoCoordinate, ref: Ref, sha: Sha) -> None:
        try:
            await self._api.create_ref(repo, get_fully_qualified_ref(ref), sha)
        except Exception as exc:
            raise _failure(RefCreateError, repo, ref, exc) from exc

    async def update_ref(
        self, repo: RepoCoordinate, ref: Ref, sha: Sha, *, force: bool
    ) -> None:
        """Point *ref* at *sha*.

        Without *force* GitHub only accepts fast-forwards.
        """
        try:
            await self._api.update_ref(repo, get_head_ref(ref), sha, force=force)
        except Exception as exc:
            raise _failure(RefUpdateError, repo, ref, exc) from exc

    async def delete_ref(self, repo: RepoCoordinate, ref: Ref) -> None:
        try:
            await self._api.delete_ref(repo, get_head_ref(ref))
        except Exception as exc:
            raise _failure(RefDeleteError, repo, ref, exc) from exc
