"""Domain entities — commit records and the temporary-ref handle."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from github_internals.domain.value_objects import Ref, RepoCoordinate, Sha

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommitIdentity:
    """Git-level author or committer of a commit."""

    name: str | None
    email: str | None
    date: str | None = None  # ISO 8601, as returned by GitHub


@dataclass(frozen=True, slots=True)
class CommitDetails:
    """A pull-request commit, normalised from the raw API entry."""

    sha: Sha
    tree: Sha
    author: CommitIdentity | None
    committer: CommitIdentity | None
    message: str


@dataclass(slots=True)
class TemporaryRef:
    """Handle on a temporary reference that exists in the remote store.

    ``delete`` is bound to ``(repo, ref)`` at creation time.  The remote
    delete is issued at most once; later calls are no-ops.
    """

    ref: Ref
    repo: RepoCoordinate
    _delete: Callable[[], Awaitable[None]] = field(repr=False)
    deleted: bool = False

    async def delete(self) -> None:
        if self.deleted:
            logger.debug("Temporary ref %s [%s] already deleted", self.repo.full_name, self.ref)
            return
        # Flag first so a failed delete is not retried through this handle.
        self.deleted = True
        await self._delete()
