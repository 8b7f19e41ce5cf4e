"""외부 협력자 프로토콜 정의."""

from collections.abc import Collection
from typing import Protocol

from repo_compass.models import (
    Cluster,
    ClusterMember,
    HealthSignals,
    Interaction,
    InteractionAction,
    RepoPool,
    Repository,
    TrendingRepository,
)


class RepositoryIndex(Protocol):
    """저장소 메타데이터와 건강 신호를 제공하는 인덱스."""

    async def search_repositories(
        self,
        query: str,
        sort: str = "stars",
        order: str = "desc",
        per_page: int = 30,
        max_pages: int = 1,
    ) -> list[Repository]:
        """검색어로 저장소를 찾는다."""
        ...

    async def get_repository(self, full_name: str) -> Repository | None:
        """저장소 하나를 가져온다. 없으면 None."""
        ...

    async def get_health_signals(self, full_name: str) -> HealthSignals | None:
        """건강 신호를 가져온다. 없으면 None."""
        ...

    async def find_alternatives(self, full_name: str, limit: int = 6) -> list[Repository]:
        """비슷한 저장소를 찾는다."""
        ...


class ClusterStore(Protocol):
    """사전 큐레이션된 클러스터 저장소."""

    async def list_clusters(self) -> list[Cluster]:
        """활성 클러스터 목록."""
        ...

    async def get_cluster_members(
        self,
        name: str,
        limit: int,
        exclude_ids: Collection[str] = (),
    ) -> list[ClusterMember]:
        """품질 점수, 순환 우선순위 내림차순으로 멤버를 가져온다."""
        ...

    async def query_by_tag_overlap(
        self,
        tags: list[str],
        limit: int,
        exclude_ids: Collection[str] = (),
    ) -> list[ClusterMember]:
        """태그가 하나라도 겹치는 멤버를 가져온다."""
        ...


class InteractionLog(Protocol):
    """사용자 상호작용 로그."""

    async def get_seen_repository_ids(self, user_id: str) -> set[str]:
        """추천에서 제외할 저장소 ID."""
        ...

    async def record_interaction(self, interaction: Interaction) -> None:
        """상호작용을 추가한다."""
        ...

    async def get_recent_interactions(
        self,
        user_id: str,
        actions: Collection[InteractionAction],
        limit: int,
    ) -> list[Interaction]:
        """최근 상호작용을 최신순으로 가져온다."""
        ...


class PoolStore(Protocol):
    """사용자별 후보 풀 영속화."""

    async def save_pool(
        self,
        user_id: str,
        repositories: list[Repository],
        preferences_hash: str,
    ) -> None:
        """풀을 저장한다. 사용자당 하나만 유지한다."""
        ...

    async def load_pool(self, user_id: str) -> RepoPool | None:
        """저장된 풀을 불러온다."""
        ...


class TrendingSource(Protocol):
    """트렌딩 저장소 소스."""

    async def fetch(
        self,
        since: str = "daily",
        language: str | None = None,
    ) -> list[TrendingRepository]:
        """트렌딩 저장소를 가져온다."""
        ...
