from datetime import datetime, timezone
from typing import Any, Dict, Optional
from devmetrics.domain.models import Repository, UserProfile


def _parse_timestamp(raw_date: Optional[str]) -> Optional[datetime]:
    if not raw_date:
        return None
    if not isinstance(raw_date, str):
        raise ValueError(f"Expected an ISO timestamp, got {raw_date!r}.")
    parsed = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))
    # GitHub timestamps are UTC even when the offset is missing.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_object(raw: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a JSON object for {kind}, got {type(raw).__name__}.")
    return raw


class GitHubTranslator:
    """
    Anti-corruption layer that translates raw GitHub REST JSON payloads into domain models.
    """

    @staticmethod
    def user_to_domain(raw_user: Dict[str, Any]) -> UserProfile:
        """
        Transforms a `/users/{handle}` payload into a UserProfile.

        Args:
            raw_user (Dict[str, Any]): The raw JSON object returned by the REST API.

        Returns:
            UserProfile: The immutable profile snapshot.
        """
        raw_user = _require_object(raw_user, 'user')
        login = raw_user.get('login')
        if not login:
            raise ValueError("login is required to build UserProfile.")

        return UserProfile(
            login=login,
            name=raw_user.get('name') or None,
            bio=raw_user.get('bio') or None,
            avatar_url=raw_user.get('avatar_url') or '',
            followers=raw_user.get('followers') or 0,
            following=raw_user.get('following') or 0,
            public_repos=raw_user.get('public_repos') or 0,
            hireable=bool(raw_user.get('hireable')),
        )

    @staticmethod
    def repository_to_domain(raw_repo: Dict[str, Any]) -> Repository:
        """
        Transforms one element of a `/users/{handle}/repos` payload into a Repository.
        Optional text fields stay None when absent or empty.
        """
        raw_repo = _require_object(raw_repo, 'repository')
        return Repository(
            name=raw_repo.get('name', ''),
            description=raw_repo.get('description') or None,
            language=raw_repo.get('language') or None,
            stars=raw_repo.get('stargazers_count') or 0,
            forks=raw_repo.get('forks_count') or 0,
            size_kb=raw_repo.get('size') or 0,
            fork=bool(raw_repo.get('fork')),
            pushed_at=_parse_timestamp(raw_repo.get('pushed_at')),
            html_url=raw_repo.get('html_url') or '',
        )
