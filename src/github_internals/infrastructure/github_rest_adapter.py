"""GitHub REST API adapter — implements the GitDataApi port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from github_internals.domain.exceptions import (
    GitHubAccessDeniedError,
    GitHubApiError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubTransportError,
    GitHubUnprocessableError,
)
from github_internals.domain.value_objects import PullRequestNumber, RepoCoordinate, Sha

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"


class GitHubRestAdapter:
    """Concrete GitDataApi backed by the GitHub v3 REST API.

    One HTTP request per call (per page for listings).  Retries, if wanted,
    belong to the transport given as *client*.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        *,
        api_url: str = _GITHUB_API,
        per_page: int = 100,
        user_agent: str = "github-internals/1.0",
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._per_page = per_page
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": user_agent,
        }
        if token:
            self._api_headers["Authorization"] = f"Bearer {token}"

    # ── References ──────────────────────────────────────────────────────

    async def get_ref(self, repo: RepoCoordinate, ref: str) -> Sha:
        """GET /repos/{owner}/{repo}/git/ref/{ref} → object.sha."""
        resp = await self._api_request(
            "GET", f"/repos/{repo.full_name}/git/ref/{_ref_path(ref)}"
        )
        data = resp.json()
        try:
            return data["object"]["sha"]
        except (KeyError, TypeError) as exc:
            raise GitHubApiError(
                f"Unexpected reference payload for {repo.full_name} [{ref}]",
                resp.status_code,
            ) from exc

    async def create_ref(self, repo: RepoCoordinate, ref: str, sha: Sha) -> None:
        """POST /repos/{owner}/{repo}/git/refs."""
        await self._api_request(
            "POST",
            f"/repos/{repo.full_name}/git/refs",
            json={"ref": ref, "sha": sha},
        )

    async def update_ref(
        self, repo: RepoCoordinate, ref: str, sha: Sha, *, force: bool
    ) -> None:
        """PATCH /repos/{owner}/{repo}/git/refs/{ref}."""
        await self._api_request(
            "PATCH",
            f"/repos/{repo.full_name}/git/refs/{_ref_path(ref)}",
            json={"sha": sha, "force": force},
        )

    async def delete_ref(self, repo: RepoCoordinate, ref: str) -> None:
        """DELETE /repos/{owner}/{repo}/git/refs/{ref}."""
        await self._api_request(
            "DELETE", f"/repos/{repo.full_name}/git/refs/{_ref_path(ref)}"
        )

    # ── Pull requests ───────────────────────────────────────────────────

    async def list_pull_request_commits(
        self, repo: RepoCoordinate, pull_request_number: PullRequestNumber
    ) -> list[dict[str, Any]]:
        """GET /repos/{owner}/{repo}/pulls/{n}/commits, following ``Link: rel="next"``."""
        commits: list[dict[str, Any]] = []
        url: str | None = f"{self._api_url}/repos/{repo.full_name}/pulls/{pull_request_number}/commits"
        params: dict[str, str] | None = {"per_page": str(self._per_page)}
        page = 1
        while url:
            resp = await self._request("GET", url, params=params)
            items = resp.json()
            if not isinstance(items, list):
                raise GitHubApiError(
                    f"Unexpected commit listing payload for {repo.full_name} PR #{pull_request_number}",
                    resp.status_code,
                )
            logger.debug(
                "Page %d of %s PR #%s: %d commits",
                page,
                repo.full_name,
                pull_request_number,
                len(items),
            )
            commits.extend(items)
            # The next link already carries the query string.
            url = resp.links.get("next", {}).get("url")
            params = None
            page += 1
        return commits

    # ── HTTP ────────────────────────────────────────────────────────────

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        json: dict[str, object] | None = None,
    ) -> httpx.Response:
        return await self._request(method, f"{self._api_url}{endpoint}", json=json)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, object] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API request with error translation."""
        try:
            resp = await self._client.request(
                method, url, headers=self._api_headers, params=params, json=json
            )
        except httpx.HTTPError as exc:
            raise GitHubTransportError(f"Network error on {method} {url}: {exc}") from exc

        if 200 <= resp.status_code < 300:
            return resp

        detail = _error_message(resp)

        if resp.status_code == 404:
            raise GitHubNotFoundError(f"Not found: {method} {url}", 404)

        if resp.status_code in (403, 429):
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if remaining == "0" or resp.status_code == 429:
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}.",
                    resp.status_code,
                )
            raise GitHubAccessDeniedError(
                f"Access denied on {method} {url}: {detail}", 403
            )

        if resp.status_code in (409, 422):
            raise GitHubUnprocessableError(
                f"GitHub rejected {method} {url}: {detail}", resp.status_code
            )

        raise GitHubApiError(
            f"GitHub API returned HTTP {resp.status_code} for {method} {url}: {detail}",
            resp.status_code,
        )


def _error_message(resp: httpx.Response) -> str:
    """Extract GitHub's ``message`` field, falling back to the raw body."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.text


def _ref_path(ref: str) -> str:
    """Percent-encode a ref for use in a URL path, keeping ``/`` separators."""
    return quote(ref, safe="/")
