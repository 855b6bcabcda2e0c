import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import aiohttp

from devmetrics.application.insights import generate_insights
from devmetrics.application.languages import compute_language_breakdown
from devmetrics.application.metrics import compute_stats, select_top_repositories
from devmetrics.domain.exceptions import FetchFailureException
from devmetrics.domain.models import DashboardViewModel, Repository, UserProfile
from devmetrics.infrastructure.acl import GitHubTranslator
from devmetrics.infrastructure.github_client import GitHubRestClient

logger = logging.getLogger(__name__)

MALFORMED_PAYLOAD_MESSAGE = "Unexpected response from GitHub"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProfileAnalyzer:
    """
    Turns a GitHub handle into a DashboardViewModel.

    Each call to `analyze` is an isolated computation: it opens its own HTTP
    session, fetches the profile and the repository list in parallel, and derives
    everything from that snapshot. Nothing is kept between calls.
    """

    def __init__(
            self,
            github_client: GitHubRestClient,
            clock: Optional[Callable[[], datetime]] = None,
    ):
        self.github_client = github_client
        self.clock = clock or _utc_now

    @staticmethod
    def normalize_handle(raw_handle: Optional[str]) -> Optional[str]:
        """Strips surrounding whitespace; returns None when nothing is left."""
        handle = (raw_handle or "").strip()
        return handle or None

    @staticmethod
    def build_dashboard(
        profile: UserProfile,
        repositories: Sequence[Repository],
        now: datetime,
    ) -> DashboardViewModel:
        return DashboardViewModel(
            profile=profile,
            stats=compute_stats(repositories, now),
            languages=compute_language_breakdown(repositories),
            top_repositories=select_top_repositories(repositories),
            insights=generate_insights(profile, repositories, now),
        )

    async def _fetch_both(
        self, session: aiohttp.ClientSession, handle: str,
    ) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Runs both fetches concurrently. The first failure cancels the other
        request and propagates; its eventual result is never looked at.
        """
        tasks = [
            asyncio.ensure_future(self.github_client.fetch_user(session, handle)),
            asyncio.ensure_future(self.github_client.fetch_repositories(session, handle)),
        ]
        try:
            raw_user, raw_repos = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Drain cancelled tasks so no result or exception is left unretrieved.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return raw_user, raw_repos

    async def analyze(self, handle: str) -> DashboardViewModel:
        """
        Fetches and derives the dashboard for a single handle.

        Raises:
            AnalyzerException: when either endpoint fails. No partial dashboard is built.
        """
        logger.info(f"Analyzing profile '{handle}'.")

        async with aiohttp.ClientSession() as session:
            raw_user, raw_repos = await self._fetch_both(session, handle)

        try:
            profile = GitHubTranslator.user_to_domain(raw_user)
            repositories = [GitHubTranslator.repository_to_domain(node) for node in raw_repos if node]
        except ValueError as e:
            # pydantic's ValidationError is a ValueError too.
            logger.warning(f"Malformed payload for '{handle}': {e}")
            raise FetchFailureException(MALFORMED_PAYLOAD_MESSAGE) from e

        dashboard = self.build_dashboard(profile, repositories, self.clock())
        logger.info(
            f"Analysis of '{handle}' complete: {len(repositories)} repositories, "
            f"{dashboard.stats.total_stars} stars, {len(dashboard.insights)} insights."
        )
        return dashboard
