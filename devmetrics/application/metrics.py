import math
from datetime import datetime, timedelta
from typing import List, Sequence

from devmetrics.domain.models import (
    NO_DESCRIPTION_FALLBACK,
    Repository,
    StatsBlock,
    TopRepository,
)

# Repositories pushed within this window count as "active" on the stats tiles.
ACTIVE_WINDOW_DAYS = 365
TOP_REPOSITORY_LIMIT = 5


def pushed_within(repository: Repository, days: int, now: datetime) -> bool:
    """True when the last push is strictly newer than `now - days`."""
    if repository.pushed_at is None:
        return False
    return repository.pushed_at > now - timedelta(days=days)


def compute_stats(repositories: Sequence[Repository], now: datetime) -> StatsBlock:
    """
    Aggregates the headline numbers shown on the stats tiles.

    The average size is rounded (half up) in kilobytes first and only then scaled to bytes.
    """
    total_stars = sum(repo.stars for repo in repositories)
    total_forks = sum(repo.forks for repo in repositories)
    total_size_kb = sum(repo.size_kb for repo in repositories)
    avg_size_kb = math.floor(total_size_kb / len(repositories) + 0.5) if repositories else 0

    return StatsBlock(
        total_stars=total_stars,
        total_forks=total_forks,
        avg_repo_size_bytes=avg_size_kb * 1024,
        active_repo_count=sum(1 for repo in repositories if pushed_within(repo, ACTIVE_WINDOW_DAYS, now)),
    )


def select_top_repositories(
    repositories: Sequence[Repository],
    limit: int = TOP_REPOSITORY_LIMIT,
) -> List[TopRepository]:
    """Most-starred non-fork repositories; ties keep the order the API returned them in."""
    originals = [repo for repo in repositories if not repo.fork]
    ranked = sorted(originals, key=lambda repo: repo.stars, reverse=True)

    return [
        TopRepository(
            name=repo.name,
            description=repo.description or NO_DESCRIPTION_FALLBACK,
            url=repo.html_url,
            stars=repo.stars,
            forks=repo.forks,
        )
        for repo in ranked[:limit]
    ]
