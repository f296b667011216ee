"""Temporary-reference lifecycle.

A temporary ref is created under a generated name, handed to caller logic and
deleted afterwards on every exit path.  GitHub offers no transactions or
locks, so isolation between concurrent callers comes only from the uniqueness
of the generated names.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from github_internals.domain.entities import TemporaryRef
from github_internals.domain.exceptions import RefDeleteError
from github_internals.domain.value_objects import Ref, RepoCoordinate, Sha
from github_internals.services.ref_client import RefClient
from github_internals.services.ref_naming import TokenSource, generate_unique_ref

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _delete_to_completion(handle: TemporaryRef) -> None:
    """Run the delete even if the surrounding task gets cancelled meanwhile."""
    task = asyncio.ensure_future(handle.delete())
    try:
        await asyncio.shield(task)
    except asyncio.CancelledError:
        await asyncio.wait({task})
        if not task.cancelled() and (cleanup_exc := task.exception()) is not None:
            logger.error(
                "Temporary ref %s [%s] could not be deleted during cancellation: %s",
                handle.repo.full_name,
                handle.ref,
                cleanup_exc,
                exc_info=cleanup_exc,
            )
        raise


class TemporaryRefManager:
    """Creates temporary refs and guarantees their deletion.

    Parameters
    ----------
    ref_client:
        Client used for the create and delete calls.
    token_source:
        Zero-argument callable producing the random suffix of generated
        names.  Defaults to a UUID4.
    """

    def __init__(self, ref_client: RefClient, token_source: TokenSource | None = None) -> None:
        self._refs = ref_client
        self._token_source = token_source

    async def create_temporary_ref(
        self, repo: RepoCoordinate, ref: Ref, sha: Sha
    ) -> TemporaryRef:
        """Create ``<ref>-<token>`` at *sha* and return a handle to delete it.

        If creation fails, :class:`RefCreateError` propagates and there is
        nothing to clean up.
        """
        temporary_ref = generate_unique_ref(ref, self._token_source)
        await self._refs.create_ref(repo, temporary_ref, sha)
        logger.info("Created temporary ref %s [%s] at %s", repo.full_name, temporary_ref, sha)

        async def delete_temporary_ref() -> None:
            await self._refs.delete_ref(repo, temporary_ref)
            logger.info("Deleted temporary ref %s [%s]", repo.full_name, temporary_ref)

        return TemporaryRef(ref=temporary_ref, repo=repo, _delete=delete_temporary_ref)

    @asynccontextmanager
    async def temporary_ref(
        self, repo: RepoCoordinate, ref: Ref, sha: Sha
    ) -> AsyncIterator[Ref]:
        """Yield the name of a temporary ref that is deleted on exit.

        When the body raises, its exception is the one that propagates.  A
        failing cleanup is then logged and attached to it as a note.  When
        the body succeeds, a failing cleanup raises :class:`RefDeleteError`.
        """
        handle = await self.create_temporary_ref(repo, ref, sha)
        try:
            yield handle.ref
        except BaseException as exc:
            try:
                await _delete_to_completion(handle)
            except RefDeleteError as cleanup_exc:
                logger.error(
                    "Leaked temporary ref %s [%s] after a failed action: %s",
                    repo.full_name,
                    handle.ref,
                    cleanup_exc,
                )
                exc.add_note(f"cleanup also failed: {cleanup_exc}")
            raise
        await _delete_to_completion(handle)

    async def with_temporary_ref(
        self,
        repo: RepoCoordinate,
        ref: Ref,
        sha: Sha,
        action: Callable[[Ref], Awaitable[T]],
    ) -> T:
        """Await ``action(temporary_ref)`` with a temporary ref created from *ref* at *sha*."""
        async with self.temporary_ref(repo, ref, sha) as temporary_ref:
            return await action(temporary_ref)
