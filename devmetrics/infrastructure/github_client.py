import aiohttp
import asyncio
import logging
from typing import Any, Dict, List
from urllib.parse import quote

from devmetrics.domain.exceptions import FetchFailureException, UserNotFoundException

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 30
# A single page is all the dashboard ever looks at.
REPOS_PER_PAGE = 100
REPOS_SORT = "pushed"

USER_FAILURE_MESSAGE = "Could not fetch user profile"
REPOS_FAILURE_MESSAGE = "Could not fetch repositories"


class GitHubRestClient:
    """
    Client for the two public GitHub REST endpoints the dashboard reads.
    Every call is a single unauthenticated attempt; failures are surfaced as
    domain exceptions and never retried.
    """

    def __init__(self, api_base: str = DEFAULT_API_BASE, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "devmetrics-dashboard",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self.api_base = api_base.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    def user_url(self, handle: str) -> str:
        return f"{self.api_base}/users/{quote(handle, safe='')}"

    def repos_url(self, handle: str) -> str:
        return f"{self.user_url(handle)}/repos"

    async def fetch_user(self, session: aiohttp.ClientSession, handle: str) -> Dict[str, Any]:
        """
        Fetches the raw profile JSON for a handle.

        Raises:
            UserNotFoundException: the API answered 404.
            FetchFailureException: any other non-success status or transport error.
        """
        url = self.user_url(handle)
        try:
            async with session.get(url, headers=self.headers, timeout=self.timeout) as response:
                if response.status == 404:
                    logger.info(f"Profile '{handle}' not found.")
                    raise UserNotFoundException(handle)
                if response.status >= 400:
                    logger.warning(f"Profile request for '{handle}' failed with status {response.status}.")
                    raise FetchFailureException(USER_FAILURE_MESSAGE, status=response.status)
                data = await response.json()
        # ValueError covers a body that is not valid JSON.
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"Profile request for '{handle}' failed: {e!r}")
            raise FetchFailureException(USER_FAILURE_MESSAGE) from e

        if not isinstance(data, dict):
            raise FetchFailureException(USER_FAILURE_MESSAGE)
        return data

    async def fetch_repositories(self, session: aiohttp.ClientSession, handle: str) -> List[Dict[str, Any]]:
        """
        Fetches the first page (up to 100) of a user's repositories, most recently pushed first.

        Raises:
            FetchFailureException: any non-success status or transport error.
        """
        url = self.repos_url(handle)
        params = {"per_page": str(REPOS_PER_PAGE), "sort": REPOS_SORT}
        try:
            async with session.get(url, headers=self.headers, params=params, timeout=self.timeout) as response:
                if response.status >= 400:
                    logger.warning(f"Repository request for '{handle}' failed with status {response.status}.")
                    raise FetchFailureException(REPOS_FAILURE_MESSAGE, status=response.status)
                data = await response.json()
        # ValueError covers a body that is not valid JSON.
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"Repository request for '{handle}' failed: {e!r}")
            raise FetchFailureException(REPOS_FAILURE_MESSAGE) from e

        if not isinstance(data, list):
            raise FetchFailureException(REPOS_FAILURE_MESSAGE)
        logger.info(f"Fetched {len(data)} repositories for '{handle}'.")
        return data
