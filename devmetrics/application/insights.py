"""
Rule engine producing the short observations shown under the dashboard.

Every rule looks at the whole (profile, repositories) snapshot on its own and
yields at most one insight. All matching rules are reported, in the order of
INSIGHT_RULES.
"""
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from devmetrics.application.metrics import pushed_within
from devmetrics.domain.models import Insight, Repository, UserProfile

POPULAR_STARS_THRESHOLD = 100
RISING_STARS_THRESHOLD = 10
POLYGLOT_LANGUAGE_THRESHOLD = 5
POPULAR_REPO_STARS_THRESHOLD = 10
RECENT_ACTIVITY_DAYS = 30
VERY_ACTIVE_THRESHOLD = 3
INFLUENTIAL_FOLLOWERS_THRESHOLD = 100

GROWING_DEVELOPER = Insight(icon="🌱", text="Growing developer - keep building!")

InsightRule = Callable[[UserProfile, Sequence[Repository], datetime], Optional[Insight]]


def star_power(profile: UserProfile, repositories: Sequence[Repository], now: datetime) -> Optional[Insight]:
    total_stars = sum(repo.stars for repo in repositories)
    if total_stars >= POPULAR_STARS_THRESHOLD:
        return Insight(icon="🌟", text=f"Popular developer with {total_stars} total stars!")
    if total_stars >= RISING_STARS_THRESHOLD:
        return Insight(icon="⭐", text=f"Rising developer with {total_stars} stars earned")
    return None


def polyglot(profile: UserProfile, repositories: Sequence[Repository], now: datetime) -> Optional[Insight]:
    languages = {repo.language for repo in repositories if repo.language}
    if len(languages) >= POLYGLOT_LANGUAGE_THRESHOLD:
        return Insight(icon="🔧", text=f"Polyglot developer using {len(languages)} different languages")
    return None


def popular_repository(profile: UserProfile, repositories: Sequence[Repository], now: datetime) -> Optional[Insight]:
    # First match in API order, forks included.
    popular = next((repo for repo in repositories if repo.stars >= POPULAR_REPO_STARS_THRESHOLD), None)
    if popular is None:
        return None
    return Insight(icon="🚀", text=f"Has a popular repo: {popular.name}")


def recent_activity(profile: UserProfile, repositories: Sequence[Repository], now: datetime) -> Optional[Insight]:
    recent = sum(1 for repo in repositories if pushed_within(repo, RECENT_ACTIVITY_DAYS, now))
    if recent >= VERY_ACTIVE_THRESHOLD:
        return Insight(icon="🔥", text=f"Very active! {recent} repos updated this month")
    if recent > 0:
        return Insight(icon="💪", text=f"Active developer with {recent} recent updates")
    return None


def influence(profile: UserProfile, repositories: Sequence[Repository], now: datetime) -> Optional[Insight]:
    if profile.followers >= INFLUENTIAL_FOLLOWERS_THRESHOLD:
        return Insight(icon="👥", text=f"Influential with {profile.followers} followers")
    return None


def hireable(profile: UserProfile, repositories: Sequence[Repository], now: datetime) -> Optional[Insight]:
    if profile.hireable:
        return Insight(icon="💼", text="Open to job opportunities!")
    return None


INSIGHT_RULES: Sequence[InsightRule] = (
    star_power,
    polyglot,
    popular_repository,
    recent_activity,
    influence,
    hireable,
)


def generate_insights(
    profile: UserProfile,
    repositories: Sequence[Repository],
    now: datetime,
    rules: Sequence[InsightRule] = INSIGHT_RULES,
) -> List[Insight]:
    """Evaluates every rule; falls back to a single encouragement when none fires."""
    insights = [insight for insight in (rule(profile, repositories, now) for rule in rules) if insight]
    return insights or [GROWING_DEVELOPER]
