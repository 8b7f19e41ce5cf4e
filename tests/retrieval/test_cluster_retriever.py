"""클러스터 후보 조회 테스트."""

import pytest

from conftest import RepoFactory, add_cluster
from repo_compass.models import ClusterMember, UserPreferences
from repo_compass.retrieval.cluster import (
    ClusterRetriever,
    detect_primary_cluster,
    normalize_tag,
    tag_match_count,
)
from repo_compass.storage.memory import InMemoryClusterStore


class TestDetectPrimaryCluster:
    """detect_primary_cluster 테스트."""

    def test_explicit_cluster_wins(self) -> None:
        """명시된 주 클러스터를 그대로 쓴다."""
        prefs = UserPreferences(primary_cluster="devops", interests=["ai"])
        assert detect_primary_cluster(prefs) == "devops"

    @pytest.mark.parametrize(
        ("interests", "stack", "expected"),
        [
            (["machine-learning"], [], "ai-ml"),
            ([], ["django"], "backend"),
            ([], ["flutter"], "mobile"),
            (["data"], [], "data-science"),
            ([], [], "frontend"),
        ],
    )
    def test_detects_from_interests_and_stack(
        self, interests: list[str], stack: list[str], expected: str
    ) -> None:
        """관심사와 기술 스택 키워드로 추정한다."""
        prefs = UserPreferences(interests=interests, tech_stack=stack)
        assert detect_primary_cluster(prefs) == expected


class TestTagMatching:
    """태그 매칭 테스트."""

    def test_normalize_tag(self) -> None:
        """소문자-하이픈 형식으로 바꾼다."""
        assert normalize_tag("  Machine Learning ") == "machine-learning"

    def test_tag_match_count(self, make_repo: RepoFactory) -> None:
        """태그, 언어, 토픽 일치를 센다."""
        repo = make_repo("1", language="Python", topics=["fastapi", "rest-api"])
        member = ClusterMember(repository=repo, tags=["web", "backend"])
        assert tag_match_count(member, ["python", "fastapi", "backend", "rust"]) == 3


class TestClusterRetriever:
    """ClusterRetriever 테스트."""

    @pytest.mark.asyncio
    async def test_best_of_cluster_excludes_and_limits(
        self, cluster_store: InMemoryClusterStore, make_repo: RepoFactory
    ) -> None:
        """제외 ID를 빼고 limit개까지 반환한다."""
        add_cluster(cluster_store, "frontend", [make_repo(str(i)) for i in range(10)])
        retriever = ClusterRetriever(cluster_store)

        repos = await retriever.best_of_cluster("frontend", 3, {"0", "1"}, "alice")
        assert len(repos) == 3
        assert not {"0", "1"} & {r.id for r in repos}

    @pytest.mark.asyncio
    async def test_best_of_cluster_is_deterministic_per_user(
        self, cluster_store: InMemoryClusterStore, make_repo: RepoFactory
    ) -> None:
        """같은 사용자는 같은 순서, 다른 사용자는 다른 순서를 받는다."""
        add_cluster(cluster_store, "frontend", [make_repo(str(i)) for i in range(40)])
        retriever = ClusterRetriever(cluster_store)

        first = await retriever.best_of_cluster("frontend", 20, (), "alice")
        again = await retriever.best_of_cluster("frontend", 20, (), "alice")
        other = await retriever.best_of_cluster("frontend", 20, (), "bob")

        assert [r.id for r in first] == [r.id for r in again]
        assert [r.id for r in first] != [r.id for r in other]

    @pytest.mark.asyncio
    async def test_unknown_cluster_is_empty(
        self, cluster_store: InMemoryClusterStore
    ) -> None:
        """없는 클러스터는 빈 목록이다."""
        retriever = ClusterRetriever(cluster_store)
        assert await retriever.best_of_cluster("nope", 10) == []

    @pytest.mark.asyncio
    async def test_by_tags_prefers_more_matches(
        self, cluster_store: InMemoryClusterStore, make_repo: RepoFactory
    ) -> None:
        """겹치는 태그가 많은 멤버를 먼저 고른다."""
        add_cluster(
            cluster_store,
            "backend",
            [
                make_repo("weak", language="Python", topics=["cli"]),
                make_repo("strong", language="Python", topics=["fastapi", "async"]),
            ],
        )
        retriever = ClusterRetriever(cluster_store)

        repos = await retriever.by_tags(["Python", "FastAPI", "async"], limit=1)
        assert [r.id for r in repos] == ["strong"]

    @pytest.mark.asyncio
    async def test_by_tags_without_tags(self, cluster_store: InMemoryClusterStore) -> None:
        """태그가 없으면 조회하지 않는다."""
        retriever = ClusterRetriever(cluster_store)
        assert await retriever.by_tags(["  "], limit=5) == []
