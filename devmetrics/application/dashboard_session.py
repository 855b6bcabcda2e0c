import logging
from typing import Optional
from urllib.parse import parse_qs, parse_qsl, urlencode, urlsplit, urlunsplit

from devmetrics.application.analyzer_service import ProfileAnalyzer
from devmetrics.domain.exceptions import AnalyzerException
from devmetrics.domain.models import AnalysisState, AnalysisStatus

logger = logging.getLogger(__name__)

USER_QUERY_PARAM = "user"


def handle_from_query(query: str) -> Optional[str]:
    """Reads the handle from a `?user=...` style query string or full URL."""
    if "?" in query:
        query = urlsplit(query).query
    values = parse_qs(query.lstrip("?")).get(USER_QUERY_PARAM)
    if not values:
        return None
    return ProfileAnalyzer.normalize_handle(values[0])


def share_link(base_url: str, handle: str) -> str:
    """Sets the `user` parameter on base_url, keeping any other parameters in place."""
    parts = urlsplit(base_url)
    params = [(key, value) for key, value in parse_qsl(parts.query) if key != USER_QUERY_PARAM]
    params.append((USER_QUERY_PARAM, handle))
    return urlunsplit(parts._replace(query=urlencode(params)))


class DashboardSession:
    """
    Host-side owner of the Idle -> Loading -> Dashboard | Error state machine.

    Each `submit` is a fresh analysis. When a newer submit starts before an older
    one finishes, the older result is discarded.
    """

    def __init__(self, analyzer: ProfileAnalyzer):
        self.analyzer = analyzer
        self.state = AnalysisState.idle()
        self._generation = 0

    async def submit(self, raw_handle: Optional[str]) -> AnalysisState:
        """
        Runs one analysis and returns the state the session ends up in.
        A blank handle leaves the state untouched.
        """
        handle = ProfileAnalyzer.normalize_handle(raw_handle)
        if handle is None:
            logger.debug("Ignoring empty handle.")
            return self.state

        self._generation += 1
        generation = self._generation
        self._transition(AnalysisState.loading(handle))

        try:
            dashboard = await self.analyzer.analyze(handle)
            outcome = AnalysisState.ready(handle, dashboard)
        except AnalyzerException as e:
            logger.error(f"Analysis of '{handle}' failed: {e}")
            outcome = AnalysisState.failed(handle, str(e))

        if generation != self._generation:
            logger.debug(f"Discarding stale result for '{handle}'.")
            return self.state

        self._transition(outcome)
        return self.state

    def share_query(self) -> Optional[str]:
        """Query string that reopens the current dashboard, or None when there is none."""
        if self.state.status is not AnalysisStatus.DASHBOARD:
            return None
        return "?" + urlencode({USER_QUERY_PARAM: self.state.handle})

    def _transition(self, state: AnalysisState) -> None:
        logger.debug(f"State {self.state.status.value} -> {state.status.value}")
        self.state = state
