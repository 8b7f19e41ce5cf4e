"""공용 테스트 픽스처."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from repo_compass.errors import UpstreamError
from repo_compass.models import (
    Cluster,
    ClusterMember,
    HealthSignals,
    Repository,
    TrendingRepository,
    build_tags,
)
from repo_compass.storage.memory import (
    InMemoryClusterStore,
    InMemoryInteractionLog,
    InMemoryPoolStore,
)

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)

RepoFactory = Callable[..., Repository]
SignalsFactory = Callable[..., HealthSignals]


def _make_repo(repo_id: str, **overrides: Any) -> Repository:
    name = overrides.pop("name", f"repo-{repo_id}")
    owner = overrides.pop("owner", "octo")
    language = overrides.pop("language", "TypeScript")
    topics = overrides.pop("topics", [])
    pushed_days_ago = overrides.pop("pushed_days_ago", 3)
    values: dict[str, Any] = {
        "id": repo_id,
        "name": name,
        "full_name": f"{owner}/{name}",
        "description": "A fast library to build web apps with great docs",
        "stars": 1200,
        "forks": 100,
        "pushed_at": datetime.now(UTC) - timedelta(days=pushed_days_ago),
        "language": language,
        "topics": topics,
        "tags": build_tags(language, topics),
        "url": f"https://github.com/{owner}/{name}",
    }
    values.update(overrides)
    return Repository(**values)


def _make_signals(**overrides: Any) -> HealthSignals:
    values: dict[str, Any] = {
        "stars": 5000,
        "forks": 800,
        "open_issues": 40,
        "watchers": 150,
        "last_push": NOW - timedelta(days=2),
        "created_at": NOW - timedelta(days=1500),
        "license": "MIT",
        "language": "Python",
        "topics": ["web", "api", "async"],
        "contributor_count": 120,
        "avg_issue_close_time_days": 4.0,
        "issue_close_rate": 0.8,
        "commit_activity_52w": 400,
        "release_count": 25,
        "has_readme": True,
        "has_contributing": True,
    }
    values.update(overrides)
    return HealthSignals(**values)


class FakeRepositoryIndex:
    """메모리 기반 RepositoryIndex."""

    def __init__(self) -> None:
        self.repositories: dict[str, Repository] = {}
        self.signals: dict[str, HealthSignals] = {}
        self.signal_errors: set[str] = set()
        self.search_results: list[Repository] = []
        self.search_error: Exception | None = None
        self.alternatives: list[Repository] = []
        self.queries: list[str] = []
        self.signal_requests: list[str] = []

    async def search_repositories(
        self,
        query: str,
        sort: str = "stars",
        order: str = "desc",
        per_page: int = 30,
        max_pages: int = 1,
    ) -> list[Repository]:
        self.queries.append(query)
        if self.search_error:
            raise self.search_error
        return self.search_results[: per_page * max_pages]

    async def get_repository(self, full_name: str) -> Repository | None:
        return self.repositories.get(full_name)

    async def get_health_signals(self, full_name: str) -> HealthSignals | None:
        self.signal_requests.append(full_name)
        if full_name in self.signal_errors:
            raise UpstreamError("github", f"signals failed for {full_name}")
        return self.signals.get(full_name)

    async def find_alternatives(self, full_name: str, limit: int = 6) -> list[Repository]:
        return [r for r in self.alternatives if r.full_name != full_name][:limit]


class FakeTrendingSource:
    """고정된 목록을 반환하는 TrendingSource."""

    def __init__(self, repositories: list[TrendingRepository] | None = None) -> None:
        self.repositories = repositories or []
        self.error: Exception | None = None
        self.requests: list[tuple[str, str | None]] = []

    async def fetch(
        self,
        since: str = "daily",
        language: str | None = None,
    ) -> list[TrendingRepository]:
        self.requests.append((since, language))
        if self.error:
            raise self.error
        return self.repositories


def add_cluster(
    store: InMemoryClusterStore,
    name: str,
    repos: list[Repository],
    quality: float = 80.0,
) -> None:
    """저장소 목록을 클러스터로 등록한다. 앞선 저장소일수록 품질 점수가 높다."""
    members = [
        ClusterMember(
            repository=repo,
            tags=[t.lower() for t in repo.tags],
            quality_score=quality - i * 0.1,
        )
        for i, repo in enumerate(repos)
    ]
    store.add_cluster(Cluster(name=name, display_name=name.title()), members)


@pytest.fixture
def now() -> datetime:
    """고정된 기준 시각을 반환한다."""
    return NOW


@pytest.fixture
def make_repo() -> RepoFactory:
    """Repository 팩토리를 반환한다."""
    return _make_repo


@pytest.fixture
def make_signals() -> SignalsFactory:
    """HealthSignals 팩토리를 반환한다."""
    return _make_signals


@pytest.fixture
def fake_index() -> FakeRepositoryIndex:
    """빈 FakeRepositoryIndex를 반환한다."""
    return FakeRepositoryIndex()


@pytest.fixture
def fake_trending() -> FakeTrendingSource:
    """빈 FakeTrendingSource를 반환한다."""
    return FakeTrendingSource()


@pytest.fixture
def cluster_store() -> InMemoryClusterStore:
    """빈 인메모리 클러스터 저장소를 반환한다."""
    return InMemoryClusterStore()


@pytest.fixture
def interaction_log() -> InMemoryInteractionLog:
    """빈 인메모리 상호작용 로그를 반환한다."""
    return InMemoryInteractionLog()


@pytest.fixture
def pool_store() -> InMemoryPoolStore:
    """빈 인메모리 풀 저장소를 반환한다."""
    return InMemoryPoolStore()
