import os
import tempfile
import unittest

from devmetrics.domain.models import (
    AnalysisState,
    DashboardViewModel,
    Insight,
    LanguageShare,
    StatsBlock,
    TopRepository,
    UserProfile,
)
from devmetrics.presentation.renderer import render_dashboard, write_dashboard


def _dashboard() -> DashboardViewModel:
    return DashboardViewModel(
        profile=UserProfile(login="octocat", bio="<script>alert(1)</script>", followers=1500),
        stats=StatsBlock(total_stars=2500000, total_forks=12, avg_repo_size_bytes=1536, active_repo_count=4),
        languages=[LanguageShare(language="Go", count=1, percent=100.0, color="#00ADD8")],
        top_repositories=[TopRepository(name="spoon-knife", url="https://github.com/octocat/spoon-knife", stars=12)],
        insights=[Insight(icon="💼", text="Open to job opportunities!")],
    )


class TestRenderDashboard(unittest.TestCase):
    def test_dashboard_state_renders_every_section(self) -> None:
        html = render_dashboard(AnalysisState.ready("octocat", _dashboard()))

        self.assertIn('id="dashboard"', html)
        self.assertIn("@octocat", html)
        self.assertIn("1.5K", html)
        self.assertIn("2.5M", html)
        self.assertIn("1.5 KB", html)
        self.assertIn("4 active", html)
        self.assertIn("width: 100.0%", html)
        self.assertIn("spoon-knife", html)
        self.assertIn("No description", html)
        self.assertIn("Open to job opportunities!", html)
        self.assertNotIn('id="error"', html)

    def test_api_text_is_escaped(self) -> None:
        html = render_dashboard(AnalysisState.ready("octocat", _dashboard()))

        self.assertNotIn("<script>alert(1)</script>", html)
        self.assertIn("&lt;script&gt;", html)

    def test_error_state_shows_only_the_message(self) -> None:
        html = render_dashboard(AnalysisState.failed("ghost", "User not found"))

        self.assertIn("User not found", html)
        self.assertNotIn('id="dashboard"', html)

    def test_loading_and_idle_states(self) -> None:
        self.assertIn('id="loading"', render_dashboard(AnalysisState.loading("octocat")))
        self.assertIn("Enter a GitHub username", render_dashboard(AnalysisState.idle()))

    def test_write_dashboard(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out.html")

            write_dashboard(AnalysisState.failed("ghost", "User not found"), path)

            with open(path, encoding="utf-8") as f:
                self.assertIn("User not found", f.read())
