from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

NO_BIO_FALLBACK = "No bio available"
NO_DESCRIPTION_FALLBACK = "No description"


class UserProfile(BaseModel):
    """
    Immutable snapshot of a GitHub user profile, fetched once per analysis.
    """
    model_config = ConfigDict(frozen=True)

    login: str = Field(..., min_length=1, description="Unique handle of the user")
    name: Optional[str] = Field(None, description="Display name, when the user set one")
    bio: Optional[str] = Field(None, description="Free-form profile bio")
    avatar_url: str = Field("", description="URL of the profile picture")
    followers: int = Field(0, ge=0)
    following: int = Field(0, ge=0)
    public_repos: int = Field(0, ge=0)
    hireable: bool = Field(False, description="Whether the user marked themselves available for hire")

    @property
    def display_name(self) -> str:
        return self.name or self.login

    @property
    def display_bio(self) -> str:
        return self.bio or NO_BIO_FALLBACK


class Repository(BaseModel):
    """
    Immutable snapshot of a single public repository as listed for a user.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name of the repository")
    description: Optional[str] = None
    language: Optional[str] = Field(None, description="Primary language detected by GitHub")
    stars: int = Field(0, ge=0, description="Total number of stargazers")
    forks: int = Field(0, ge=0)
    size_kb: int = Field(0, ge=0, description="Repository size in kilobytes")
    fork: bool = Field(False, description="True when the repository is a fork of another")
    pushed_at: Optional[datetime] = Field(None, description="Timestamp of the last push")
    html_url: str = ""


class StatsBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_stars: int = Field(0, ge=0)
    total_forks: int = Field(0, ge=0)
    avg_repo_size_bytes: int = Field(0, ge=0)
    # Repositories pushed within the last year. A heuristic, not a commit count.
    active_repo_count: int = Field(0, ge=0)

    @property
    def active_label(self) -> str:
        return f"{self.active_repo_count} active"


class LanguageShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    language: str
    count: int = Field(..., ge=1)
    # Unrounded; rounding happens only for display.
    percent: float = Field(..., ge=0, le=100)
    color: str

    @property
    def percent_label(self) -> str:
        return f"{self.percent:.1f}"


class TopRepository(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = NO_DESCRIPTION_FALLBACK
    url: str = ""
    stars: int = Field(0, ge=0)
    forks: int = Field(0, ge=0)


class Insight(BaseModel):
    model_config = ConfigDict(frozen=True)

    icon: str
    text: str


class DashboardViewModel(BaseModel):
    """
    Everything the presentation layer needs to draw one dashboard.
    This is the sole output of an analysis.
    """
    model_config = ConfigDict(frozen=True)

    profile: UserProfile
    stats: StatsBlock
    languages: List[LanguageShare] = Field(default_factory=list)
    top_repositories: List[TopRepository] = Field(default_factory=list, max_length=5)
    insights: List[Insight] = Field(..., min_length=1)


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    DASHBOARD = "dashboard"
    ERROR = "error"


class AnalysisState(BaseModel):
    """
    Value held by the host describing where the analysis flow currently is.
    Only DASHBOARD carries a dashboard and only ERROR carries an error message.
    """
    model_config = ConfigDict(frozen=True)

    status: AnalysisStatus = AnalysisStatus.IDLE
    handle: Optional[str] = None
    dashboard: Optional[DashboardViewModel] = None
    error: Optional[str] = None

    @classmethod
    def idle(cls) -> "AnalysisState":
        return cls()

    @classmethod
    def loading(cls, handle: str) -> "AnalysisState":
        return cls(status=AnalysisStatus.LOADING, handle=handle)

    @classmethod
    def ready(cls, handle: str, dashboard: DashboardViewModel) -> "AnalysisState":
        return cls(status=AnalysisStatus.DASHBOARD, handle=handle, dashboard=dashboard)

    @classmethod
    def failed(cls, handle: str, message: str) -> "AnalysisState":
        return cls(status=AnalysisStatus.ERROR, handle=handle, error=message)
