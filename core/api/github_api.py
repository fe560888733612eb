"""GitHub repository listing proxy."""

from dataclasses import dataclass
from typing import Any

import requests  # type: ignore[import-untyped]
import structlog

from core.config import Settings
from core.exceptions import UpstreamError
from core.logging import get_logger

NO_GITHUB_PROFILE_MESSAGE = "No github profile found"
REPOS_PER_PAGE = 5
REPOS_SORT = "created:asc"


@dataclass
class RepoListing:
    """
    Outcome of one repository listing call.

    ``repos`` holds the parsed body even when ``ok`` is False: the body of an
    error response is still parsed, and callers decide what to do with it.
    """

    status_code: int
    repos: Any = None
    parse_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class GitHubClient:
    """
    Minimal GitHub REST client for the profile repository proxy.

    One GET per call. No retries, no caching, and no timeout unless
    GITHUB_TIMEOUT is configured.
    """

    def __init__(
        self,
        settings: Settings,
        logger: structlog.stdlib.BoundLogger | None = None,
        session: requests.Session | None = None,
    ):
        self.settings = settings
        self.logger = logger or get_logger("github")
        self.http = session or requests.Session()

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "DevConnector/1.0",
        }

    def _get_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"per_page": REPOS_PER_PAGE, "sort": REPOS_SORT}
        if self.settings.github_client_id:
            params["client_id"] = self.settings.github_client_id
        if self.settings.github_client_secret:
            params["client_secret"] = self.settings.github_client_secret
        return params

    def repos_url(self, username: str) -> str:
        base = self.settings.github_api_base.rstrip("/")
        return f"{base}/users/{username}/repos"

    def fetch_repos(self, username: str) -> RepoListing:
        """
        List the five most recently created repositories of ``username``.

        Raises:
            UpstreamError: The request could not be completed at all.
        """
        url = self.repos_url(username)
        try:
            response = self.http.get(
                url,
                headers=self._get_headers(),
                params=self._get_params(),
                timeout=self.settings.github_timeout,
            )
        except requests.RequestException as e:
            self.logger.error("github_request_failed", error=str(e), username=username)
            raise UpstreamError(NO_GITHUB_PROFILE_MESSAGE) from e

        listing = RepoListing(status_code=response.status_code)
        try:
            listing.repos = response.json()
        except ValueError as e:
            listing.parse_error = str(e)

        if not listing.ok:
            self.logger.warning(
                "github_api_error", status=response.status_code, username=username
            )
        elif listing.parse_error:
            self.logger.error(
                "github_invalid_body", username=username, error=listing.parse_error
            )
        return listing


__all__ = [
    "GitHubClient",
    "NO_GITHUB_PROFILE_MESSAGE",
    "RepoListing",
]
