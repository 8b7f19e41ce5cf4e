"""인메모리 스토리지 모듈.

Supabase가 설정되지 않았을 때와 테스트에서 같은 프로토콜로 쓴다.
"""

from collections.abc import Collection
from datetime import UTC, datetime

from repo_compass.models import (
    SEEN_ACTIONS,
    Cluster,
    ClusterMember,
    Interaction,
    InteractionAction,
    RepoPool,
    Repository,
)


class InMemoryClusterStore:
    """클러스터 멤버를 메모리에 보관한다."""

    def __init__(self) -> None:
        self.clusters: dict[str, Cluster] = {}
        self.members: dict[str, list[ClusterMember]] = {}

    def add_cluster(self, cluster: Cluster, members: list[ClusterMember]) -> None:
        """클러스터와 멤버를 등록한다."""
        members = [
            m if m.cluster_name else m.model_copy(update={"cluster_name": cluster.name})
            for m in members
        ]
        self.clusters[cluster.name] = cluster.model_copy(update={"repo_count": len(members)})
        self.members[cluster.name] = members

    async def list_clusters(self) -> list[Cluster]:
        active = [c for c in self.clusters.values() if c.is_active]
        return sorted(active, key=lambda c: c.display_name or c.name)

    async def get_cluster_members(
        self,
        name: str,
        limit: int,
        exclude_ids: Collection[str] = (),
    ) -> list[ClusterMember]:
        ranked = sorted(
            self.members.get(name, []),
            key=lambda m: (m.quality_score, m.rotation_priority),
            reverse=True,
        )[:limit]
        excluded = set(exclude_ids)
        return [m for m in ranked if m.repository.id not in excluded]

    async def query_by_tag_overlap(
        self,
        tags: list[str],
        limit: int,
        exclude_ids: Collection[str] = (),
    ) -> list[ClusterMember]:
        wanted = {t.lower() for t in tags}
        matches = [
            m
            for members in self.members.values()
            for m in members
            if wanted & {t.lower() for t in m.tags}
        ]
        ranked = sorted(matches, key=lambda m: m.quality_score, reverse=True)[:limit]
        excluded = set(exclude_ids)
        return [m for m in ranked if m.repository.id not in excluded]


class InMemoryInteractionLog:
    """상호작용을 추가 전용 리스트로 보관한다."""

    def __init__(self) -> None:
        self.interactions: list[Interaction] = []

    async def get_seen_repository_ids(self, user_id: str) -> set[str]:
        return {
            i.repo_id
            for i in self.interactions
            if i.user_id == user_id and i.action in SEEN_ACTIONS
        }

    async def record_interaction(self, interaction: Interaction) -> None:
        self.interactions.append(interaction)

    async def get_recent_interactions(
        self,
        user_id: str,
        actions: Collection[InteractionAction],
        limit: int,
    ) -> list[Interaction]:
        matching = [
            i for i in self.interactions if i.user_id == user_id and i.action in actions
        ]
        matching.sort(key=lambda i: i.timestamp, reverse=True)
        return matching[:limit]


class InMemoryPoolStore:
    """사용자당 하나의 풀을 보관한다."""

    def __init__(self) -> None:
        self.pools: dict[str, RepoPool] = {}

    async def save_pool(
        self,
        user_id: str,
        repositories: list[Repository],
        preferences_hash: str,
    ) -> None:
        self.pools[user_id] = RepoPool(
            user_id=user_id,
            repositories=list(repositories),
            preferences_hash=preferences_hash,
            created_at=datetime.now(UTC),
        )

    async def load_pool(self, user_id: str) -> RepoPool | None:
        return self.pools.get(user_id)
