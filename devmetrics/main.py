import argparse
import asyncio
import os
import sys
import logging
from typing import List, Optional
from dotenv import load_dotenv

from devmetrics.infrastructure.github_client import DEFAULT_API_BASE, DEFAULT_TIMEOUT_SECONDS, GitHubRestClient
from devmetrics.application.analyzer_service import ProfileAnalyzer
from devmetrics.application.dashboard_session import DashboardSession, handle_from_query, share_link
from devmetrics.domain.models import AnalysisStatus
from devmetrics.presentation.renderer import write_dashboard

logger = logging.getLogger(__name__)

DEFAULT_SHARE_URL = "http://localhost/"
DEFAULT_OUTPUT = "dashboard.html"


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devmetrics",
        description="Render an analytics dashboard for a public GitHub profile",
    )
    parser.add_argument("username", nargs="?", help="GitHub username to analyze")
    parser.add_argument("--link", help="Shared dashboard link; its 'user' parameter is analyzed when no username is given")
    parser.add_argument("--output", help="Path of the HTML page to write", default=None)
    return parser


async def run(argv: Optional[List[str]] = None) -> int:
    # Load environment variables from .env file
    load_dotenv()
    args = create_parser().parse_args(argv)

    raw_handle = args.username
    if not raw_handle and args.link:
        raw_handle = handle_from_query(args.link)

    if not ProfileAnalyzer.normalize_handle(raw_handle):
        logger.info("No username given. Nothing to analyze.")
        return 0

    output_path = args.output or os.getenv("DEVMETRICS_OUTPUT", DEFAULT_OUTPUT)
    github_client = GitHubRestClient(
        api_base=os.getenv("DEVMETRICS_API_BASE", DEFAULT_API_BASE),
        timeout=float(os.getenv("DEVMETRICS_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)),
    )
    session = DashboardSession(ProfileAnalyzer(github_client))

    state = await session.submit(raw_handle)
    write_dashboard(state, output_path)

    if state.status is not AnalysisStatus.DASHBOARD:
        return 1

    logger.info(f"Share this dashboard: {share_link(os.getenv('DEVMETRICS_SHARE_URL', DEFAULT_SHARE_URL), state.handle)}")
    return 0


def main() -> None:
    configure_logging()
    try:
        sys.exit(asyncio.run(run()))
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user. Exiting gracefully.")
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
