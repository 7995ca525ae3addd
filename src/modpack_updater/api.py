"""
Async GitHub releases client.

Wraps the GitHub REST API with an :class:`httpx.AsyncClient`, adding
optional token header injection and mapping HTTP failures onto the
updater's error types.

Reference: https://docs.github.com/en/rest/releases/releases
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Optional

import httpx
from pydantic import ValidationError

from modpack_updater.errors import AuthError, NetworkError, NotFoundError
from modpack_updater.models import Release

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"


class GitHubReleases:
    """
    Async client for the GitHub releases endpoints.

    Usage::

        async with GitHubReleases() as gh:
            release = await gh.get_latest_release("thebearodactyl", "originalife-s4")
            print(release.tag_name)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token or os.environ.get("GITHUB_TOKEN", "")
        self.api_base = api_base.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=self._build_headers(),
            transport=transport,
            follow_redirects=True,
        )

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def __aenter__(self) -> GitHubReleases:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # ── Low-level helpers ──────────────────────────────────────────

    async def _get(self, path: str, what: str) -> dict:
        url = f"{self.api_base}{path}"
        step = f"Fetching {what}"
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as e:
            raise NetworkError(f"Request to {url} failed: {e}", step=step) from e

        if resp.status_code == 404:
            raise NotFoundError(f"No {what} found at {url}", step=step)
        if resp.status_code in (401, 403, 429):
            raise AuthError(_describe_denial(resp), step=step)
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(f"GitHub returned HTTP {resp.status_code}", step=step) from e
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(f"Response from {url} is not JSON: {e}", step=step) from e

    # ── Releases ───────────────────────────────────────────────────

    async def get_latest_release(self, owner: str, repo: str) -> Release:
        """Get the most recent published (non-draft, non-prerelease) release."""
        what = f"latest release of {owner}/{repo}"
        data = await self._get(f"/repos/{owner}/{repo}/releases/latest", what)
        try:
            release = Release.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
                for err in e.errors()
            )
            raise NetworkError(
                f"Unexpected release payload ({problems})", step=f"Fetching {what}"
            ) from e
        logger.info(
            "Latest release of %s/%s: %s (%d assets)",
            owner,
            repo,
            release.tag_name,
            len(release.assets),
        )
        return release


def _describe_denial(resp: httpx.Response) -> str:
    """Build a message for 401/403/429, mentioning the rate-limit reset when known."""
    if resp.status_code == 401:
        return "GitHub rejected the token (HTTP 401); check GITHUB_TOKEN"

    message = f"GitHub denied the request (HTTP {resp.status_code})"
    remaining = resp.headers.get("X-RateLimit-Remaining")
    reset = resp.headers.get("X-RateLimit-Reset")
    if resp.status_code == 429 or remaining == "0":
        message = f"GitHub API rate limit exceeded (HTTP {resp.status_code})"
        if reset and reset.isdigit():
            when = datetime.fromtimestamp(int(reset), tz=timezone.utc)
            message += f"; resets at {when:%Y-%m-%d %H:%M:%S} UTC"
        message += "; set GITHUB_TOKEN for a higher limit"
    return message
