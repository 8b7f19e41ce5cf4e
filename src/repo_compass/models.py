"""데이터 모델 정의."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

MAX_TAGS = 5


def build_tags(language: str | None, topics: list[str], limit: int = MAX_TAGS) -> list[str]:
    """언어를 맨 앞에 두고 토픽을 이어 붙인 태그 목록을 만든다.

    대소문자를 무시하고 중복을 제거하며 최대 ``limit``개까지만 유지한다.
    """
    tags: list[str] = []
    seen: set[str] = set()
    for value in [language, *topics]:
        if not value:
            continue
        key = value.lower()
        if key in seen:
            continue
        if len(tags) >= limit:
            break
        seen.add(key)
        tags.append(value)
    return tags


class Owner(BaseModel):
    """저장소 소유자."""

    login: str = Field(description="소유자 로그인")
    avatar_url: str = Field(
        default="",
        validation_alias=AliasChoices("avatar_url", "avatarUrl"),
        description="아바타 URL",
    )


class Repository(BaseModel):
    """GitHub 저장소 스냅샷.

    불변 객체이며 파생 점수는 ``with_fit_score``로 복사본에만 붙인다.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="저장소 고유 ID")
    name: str = Field(description="저장소 이름")
    full_name: str = Field(
        validation_alias=AliasChoices("full_name", "fullName"),
        description="저장소 전체 이름 (owner/repo)",
    )
    description: str = Field(default="", description="저장소 설명")
    stars: int = Field(default=0, ge=0, description="스타 수")
    forks: int = Field(default=0, ge=0, description="포크 수")
    pushed_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("pushed_at", "pushedAt"),
        description="마지막 푸시 시각",
    )
    language: str | None = Field(default=None, description="주 프로그래밍 언어")
    tags: list[str] = Field(default_factory=list, description="언어 + 토픽 태그")
    topics: list[str] = Field(default_factory=list, description="GitHub 토픽")
    owner: Owner | None = Field(default=None, description="소유자")
    license: str | None = Field(default=None, description="라이선스 이름")
    url: str = Field(default="", description="저장소 URL")
    fit_score: int | None = Field(
        default=None,
        validation_alias=AliasChoices("fit_score", "fitScore"),
        description="사용자 적합도 (0-100)",
    )

    @field_validator("description", mode="before")
    @classmethod
    def _none_description(cls, value: object) -> object:
        return "" if value is None else value

    def with_fit_score(self, score: int) -> "Repository":
        """적합도를 붙인 복사본을 반환한다."""
        return self.model_copy(update={"fit_score": score})

    def days_since_push(self, now: datetime | None = None) -> float | None:
        """마지막 푸시 이후 경과 일수. 알 수 없으면 None."""
        if self.pushed_at is None:
            return None
        now = now or datetime.now(UTC)
        return max(0.0, (now - self.pushed_at).total_seconds() / 86400)

    @property
    def search_text(self) -> str:
        """키워드 매칭용 소문자 텍스트."""
        parts = [
            self.description,
            " ".join(self.tags),
            self.name,
            self.full_name,
            " ".join(self.topics),
        ]
        return " ".join(parts).lower()


class Goal(str, Enum):
    """사용자 목표."""

    learning = "learning"
    building = "building"
    contributing = "contributing"
    finding_solutions = "finding-solutions"
    exploring = "exploring"


# 이전 온보딩 버전에서 쓰던 값
_LEGACY_GOALS = {
    "learning-new-tech": Goal.learning,
    "building-project": Goal.building,
    "discovering": Goal.exploring,
}


class ProjectType(str, Enum):
    """선호 프로젝트 유형."""

    library = "library"
    framework = "framework"
    tool = "tool"
    tutorial = "tutorial"
    full_app = "full-app"
    boilerplate = "boilerplate"


class ActivityPreference(str, Enum):
    """활동성 선호."""

    active = "active"
    stable = "stable"
    trending = "trending"
    any = "any"


class PopularityWeight(str, Enum):
    """인기도 가중치."""

    low = "low"
    medium = "medium"
    high = "high"


class DocumentationImportance(str, Enum):
    """문서 중요도."""

    critical = "critical"
    important = "important"
    nice_to_have = "nice-to-have"


class UserPreferences(BaseModel):
    """온보딩에서 수집한 사용자 선호."""

    model_config = ConfigDict(populate_by_name=True)

    primary_cluster: str | None = Field(
        default=None,
        validation_alias=AliasChoices("primary_cluster", "primaryCluster"),
        description="주 관심 클러스터",
    )
    secondary_clusters: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("secondary_clusters", "secondaryClusters"),
        description="보조 관심 클러스터",
    )
    tech_stack: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tech_stack", "techStack"),
        description="기술 스택 태그",
    )
    interests: list[str] = Field(default_factory=list, description="관심 도메인")
    goals: list[Goal] = Field(default_factory=list, description="목표")
    project_types: list[ProjectType] = Field(
        default_factory=list,
        validation_alias=AliasChoices("project_types", "projectTypes"),
        description="선호 프로젝트 유형",
    )
    activity_preference: ActivityPreference | None = Field(
        default=None,
        validation_alias=AliasChoices("activity_preference", "activityPreference"),
    )
    popularity_weight: PopularityWeight | None = Field(
        default=None,
        validation_alias=AliasChoices("popularity_weight", "popularityWeight"),
    )
    documentation_importance: DocumentationImportance | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "documentation_importance", "documentationImportance"
        ),
    )
    license_preference: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("license_preference", "licensePreference"),
    )
    repo_size: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("repo_size", "repoSize"),
    )
    onboarding_completed: bool = Field(
        default=False,
        validation_alias=AliasChoices("onboarding_completed", "onboardingCompleted"),
    )

    @field_validator("goals", mode="before")
    @classmethod
    def _upgrade_legacy_goals(cls, value: object) -> object:
        if not isinstance(value, list):
            return value
        upgraded: list[object] = []
        for goal in value:
            goal = _LEGACY_GOALS.get(goal, goal) if isinstance(goal, str) else goal
            if goal not in upgraded:
                upgraded.append(goal)
        return upgraded


class InteractionAction(str, Enum):
    """사용자 상호작용 종류."""

    view = "view"
    like = "like"
    save = "save"
    skip = "skip"
    click_through = "click-through"


# 추천 풀에서 제외되는 상호작용
SEEN_ACTIONS = frozenset(
    {
        InteractionAction.save,
        InteractionAction.like,
        InteractionAction.skip,
        InteractionAction.view,
    }
)
# 세션 재정렬의 긍정 신호. 저장뿐 아니라 좋아요도 같은 무게로 센다
POSITIVE_ACTIONS = frozenset({InteractionAction.save, InteractionAction.like})


class InteractionContext(BaseModel):
    """상호작용이 발생한 화면 정보."""

    position: int = Field(default=0, ge=0, description="피드 내 위치")
    source: str = Field(default="discover", description="discover | trending | agent")


class Interaction(BaseModel):
    """사용자 상호작용 로그 한 건."""

    user_id: str = Field(description="사용자 ID")
    repo_id: str = Field(description="저장소 ID")
    action: InteractionAction = Field(description="상호작용 종류")
    session_id: str = Field(default="", description="세션 ID")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    time_spent_ms: int | None = Field(default=None, ge=0, description="체류 시간 (ms)")
    context: InteractionContext | None = Field(default=None)


class Cluster(BaseModel):
    """사전 큐레이션된 저장소 클러스터."""

    name: str = Field(description="클러스터 이름")
    display_name: str = Field(default="", description="표시 이름")
    description: str = Field(default="", description="설명")
    icon: str = Field(default="📦", description="아이콘")
    repo_count: int = Field(default=0, ge=0, description="저장소 수")
    is_active: bool = Field(default=True, description="활성 여부")


class ClusterMember(BaseModel):
    """클러스터에 속한 저장소와 사전 계산된 점수."""

    repository: Repository
    tags: list[str] = Field(default_factory=list, description="정규화된 클러스터 태그")
    quality_score: float = Field(default=0.0, description="사전 계산된 품질 점수")
    rotation_priority: float = Field(default=0.0, description="노출 순환 우선순위")
    cluster_name: str | None = Field(default=None, description="소속 클러스터")


class RepoPool(BaseModel):
    """사용자별로 캐시되는 후보 풀."""

    user_id: str
    repositories: list[Repository] = Field(default_factory=list)
    preferences_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def is_fresh(self, now: datetime, ttl_hours: float) -> bool:
        """TTL 안에 있는지 확인한다."""
        age = (now - self.created_at).total_seconds()
        return 0 <= age < ttl_hours * 3600


class HealthSignals(BaseModel):
    """건강도 계산에 쓰는 원시 신호."""

    stars: int = Field(default=0, ge=0)
    forks: int = Field(default=0, ge=0)
    open_issues: int = Field(default=0, ge=0)
    watchers: int = Field(default=0, ge=0)
    last_push: datetime = Field(description="마지막 푸시 시각")
    created_at: datetime = Field(description="생성 시각")
    license: str | None = None
    language: str | None = None
    topics: list[str] = Field(default_factory=list)
    default_branch: str = "main"
    contributor_count: int = Field(default=0, ge=0)
    avg_issue_close_time_days: float | None = Field(default=None, ge=0)
    issue_close_rate: float | None = Field(default=None, ge=0)
    commit_activity_52w: int = Field(default=0, ge=0, description="최근 52주 커밋 수")
    release_count: int = Field(default=0, ge=0)
    last_release_date: datetime | None = None
    has_readme: bool = True
    has_contributing: bool = False
    size_kb: int = Field(default=0, ge=0)


class HealthBreakdown(BaseModel):
    """여섯 개 축별 점수 (각 0-100)."""

    popularity: int = Field(ge=0, le=100)
    activity: int = Field(ge=0, le=100)
    maintenance: int = Field(ge=0, le=100)
    community: int = Field(ge=0, le=100)
    documentation: int = Field(ge=0, le=100)
    maturity: int = Field(ge=0, le=100)


class HealthScore(BaseModel):
    """저장소 건강도 종합 점수."""

    overall: int = Field(ge=0, le=100)
    grade: str = Field(description="A+ ~ F")
    breakdown: HealthBreakdown
    signals: HealthSignals | None = Field(
        default=None,
        description="계산에 쓴 신호. 추정치이면 None.",
    )
    summary: str = ""

    @property
    def is_estimate(self) -> bool:
        """신호 없이 스타 수만으로 추정한 점수인지 여부."""
        return self.signals is None


class QualityResult(BaseModel):
    """품질 게이트 결과."""

    passed: bool
    score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ScoredRepository(BaseModel):
    """건강도가 붙은 저장소."""

    repository: Repository
    health: HealthScore
    star_velocity: int = Field(default=0, description="월간 스타 증가 추정치")


class Comparison(BaseModel):
    """저장소 비교 결과."""

    repos: list[ScoredRepository] = Field(default_factory=list)
    category_winners: dict[str, str] = Field(default_factory=dict)
    verdict: str = ""
    summary: str = ""
    reason: str | None = Field(default=None, description="비교하지 못한 이유")


class TrendingRepository(BaseModel):
    """GitHub Trending 페이지의 저장소."""

    full_name: str = Field(description="저장소 전체 이름 (owner/repo)")
    url: str = Field(description="저장소 URL")
    description: str | None = Field(default=None, description="저장소 설명")
    language: str | None = Field(default=None, description="주 프로그래밍 언어")
    stars: int = Field(default=0, description="총 스타 수")
    forks: int = Field(default=0, description="포크 수")
    stars_in_period: int = Field(default=0, description="기간 내 추가된 스타 수")

    def to_repository(self) -> Repository:
        """Repository 스냅샷으로 변환한다."""
        owner, _, name = self.full_name.partition("/")
        return Repository(
            id=self.full_name,
            name=name or self.full_name,
            full_name=self.full_name,
            description=self.description or "",
            stars=self.stars,
            forks=self.forks,
            language=self.language,
            tags=build_tags(self.language, []),
            owner=Owner(login=owner),
            url=self.url,
        )


class IntentKind(str, Enum):
    """자연어 질의 의도."""

    search = "search"
    compare = "compare"
    health = "health-check"
    alternatives = "alternatives"
    trending = "trending"


class Intent(BaseModel):
    """분류된 질의 의도와 추출된 인자."""

    kind: IntentKind
    query: str = Field(description="원문")
    search_terms: str = Field(default="", description="압축된 검색어")
    language: str | None = None
    repos: list[str] = Field(default_factory=list, description="대상 저장소 (owner/repo)")
    period: str = Field(default="daily", description="daily | weekly | monthly")

    @property
    def repo(self) -> str | None:
        """단일 저장소 의도의 대상."""
        return self.repos[0] if self.repos else None
