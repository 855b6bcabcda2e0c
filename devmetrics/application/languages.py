from typing import Dict, List, Sequence

from devmetrics.domain.models import LanguageShare, Repository

LANGUAGE_COLORS: Dict[str, str] = {
    "JavaScript": "#f1e05a",
    "TypeScript": "#3178c6",
    "Python": "#3572A5",
    "Java": "#b07219",
    "C++": "#f34b7d",
    "C": "#555555",
    "C#": "#178600",
    "Go": "#00ADD8",
    "Rust": "#dea584",
    "Ruby": "#701516",
    "PHP": "#4F5D95",
    "Swift": "#F05138",
    "Kotlin": "#A97BFF",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
    "Shell": "#89e051",
    "Jupyter": "#DA5B0B",
    "Vue": "#41b883",
    "Dart": "#00B4AB",
    "R": "#198CE7",
}
FALLBACK_COLOR = "#8b949e"
TOP_LANGUAGE_LIMIT = 6


def language_color(language: str) -> str:
    return LANGUAGE_COLORS.get(language, FALLBACK_COLOR)


def count_languages(repositories: Sequence[Repository]) -> Dict[str, int]:
    """Repository count per primary language, in first-encounter order."""
    counts: Dict[str, int] = {}
    for repo in repositories:
        if repo.language:
            counts[repo.language] = counts.get(repo.language, 0) + 1
    return counts


def compute_language_breakdown(
    repositories: Sequence[Repository],
    limit: int = TOP_LANGUAGE_LIMIT,
) -> List[LanguageShare]:
    """
    Top languages by repository count.

    Percentages are taken against every repository with a language, so entries
    beyond `limit` are dropped from the result but still weigh in the base.
    sorted() is stable, so ties keep the order in which languages were first seen.
    """
    counts = count_languages(repositories)
    total = sum(counts.values())
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]

    return [
        LanguageShare(
            language=language,
            count=count,
            percent=count / total * 100,
            color=language_color(language),
        )
        for language, count in ranked
    ]
