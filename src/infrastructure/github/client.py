"""GitHub REST client used for the public repository listing."""

import logging
from typing import Any, Optional

import httpx

from core.config import settings

logger = logging.getLogger(__name__)

REPOS_PAGE_SIZE = 5
REPOS_SORT = "created:asc"


class GithubClient:
    """Thin async wrapper over ``GET /users/{username}/repos``."""

    def __init__(
        self,
        base_url: str = settings.github_api_url,
        token: str = settings.github_token,
        timeout: float = settings.github_timeout_seconds,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": "devconnect-api",
            "Accept": "application/vnd.github+json",
        }
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        return headers

    async def list_repos(self, username: str) -> Optional[list[dict[str, Any]]]:
        """
        Fetch the first page of a user's public repositories.

        Args:
            username: GitHub login

        Returns:
            The decoded JSON list, or None on any non-200 response,
            transport failure or unexpected payload.
        """
        url = f"{self._base_url}/users/{username}/repos"
        params = {"per_page": REPOS_PAGE_SIZE, "sort": REPOS_SORT}

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError:
            logger.warning("GitHub request failed for %s", username, exc_info=True)
            return None

        if response.status_code != 200:
            logger.info(
                "GitHub returned %d for %s", response.status_code, username
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.warning("GitHub returned a non-JSON body for %s", username)
            return None

        if not isinstance(payload, list):
            return None
        return payload
