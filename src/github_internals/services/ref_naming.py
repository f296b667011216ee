"""Reference naming — path forms of a ref and collision-resistant temporary names.

GitHub addresses a branch differently depending on the verb: reads, updates
and deletes use the head path (``heads/<ref>``) while creation needs the fully
qualified path (``refs/heads/<ref>``).
"""

from __future__ import annotations

import uuid
from collections.abc import Callable

from github_internals.domain.value_objects import Ref

TokenSource = Callable[[], str]


def _uuid_token() -> str:
    return str(uuid.uuid4())


def get_head_ref(ref: Ref) -> str:
    return f"heads/{ref}"


def get_fully_qualified_ref(ref: Ref) -> str:
    return f"refs/{get_head_ref(ref)}"


def generate_unique_ref(ref: Ref, token_source: TokenSource | None = None) -> Ref:
    """Return ``<ref>-<token>``; the token defaults to a random UUID4."""
    token = (token_source or _uuid_token)()
    return f"{ref}-{token}"
