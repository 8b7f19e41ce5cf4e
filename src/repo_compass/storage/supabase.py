"""Supabase 스토리지 모듈.

클러스터 저장소, 상호작용 로그, 풀 저장소를 하나의 클라이언트로 구현한다.
"""

import asyncio
import logging
from collections.abc import Collection
from datetime import UTC, datetime
from typing import Any

import httpx
from supabase import Client, PostgrestAPIError, create_client

from repo_compass.errors import UpstreamError
from repo_compass.models import (
    SEEN_ACTIONS,
    Cluster,
    ClusterMember,
    Interaction,
    InteractionAction,
    RepoPool,
    Repository,
)

logger = logging.getLogger(__name__)


def _member(row: dict[str, Any]) -> ClusterMember:
    return ClusterMember(
        repository=Repository.model_validate(row["repo_data"]),
        tags=row.get("tags") or [],
        quality_score=row.get("quality_score") or 0.0,
        rotation_priority=row.get("rotation_priority") or 0.0,
        cluster_name=row.get("cluster_name"),
    )


class SupabaseStore:
    """Supabase 테이블을 협력자 프로토콜로 노출한다."""

    def __init__(self, url: str | None, key: str | None) -> None:
        """
        Args:
            url: Supabase 프로젝트 URL
            key: Supabase anon key
        """
        self.client: Client | None = None
        if url and key:
            self.client = create_client(url, key)

    @property
    def is_configured(self) -> bool:
        """Supabase가 설정되었는지 확인한다."""
        return self.client is not None

    async def _execute(self, query: Any) -> list[dict[str, Any]]:
        """쿼리를 스레드에서 실행한다. 실패는 UpstreamError로 바꾼다."""
        try:
            response = await asyncio.to_thread(query.execute)
        except (PostgrestAPIError, httpx.HTTPError) as e:
            raise UpstreamError("supabase", str(e)) from e
        return response.data or []

    # 클러스터

    async def list_clusters(self) -> list[Cluster]:
        """활성 클러스터를 표시 이름순으로 조회한다."""
        if not self.client:
            return []

        rows = await self._execute(
            self.client.table("cluster_metadata")
            .select("*")
            .eq("is_active", True)
            .order("display_name")
        )
        return [
            Cluster(
                name=row["cluster_name"],
                display_name=row.get("display_name") or row["cluster_name"],
                description=row.get("description") or "",
                icon=row.get("icon") or "📦",
                repo_count=row.get("repo_count") or 0,
            )
            for row in rows
        ]

    async def get_cluster_members(
        self,
        name: str,
        limit: int,
        exclude_ids: Collection[str] = (),
    ) -> list[ClusterMember]:
        """클러스터 멤버를 품질 점수, 순환 우선순위 내림차순으로 조회한다."""
        if not self.client:
            return []

        rows = await self._execute(
            self.client.table("repo_clusters")
            .select("repo_data, tags, quality_score, rotation_priority, cluster_name")
            .eq("cluster_name", name)
            .order("quality_score", desc=True)
            .order("rotation_priority", desc=True)
            .limit(limit)
        )
        excluded = set(exclude_ids)
        members = [_member(row) for row in rows if row.get("repo_data")]
        return [m for m in members if m.repository.id not in excluded]

    async def query_by_tag_overlap(
        self,
        tags: list[str],
        limit: int,
        exclude_ids: Collection[str] = (),
    ) -> list[ClusterMember]:
        """태그 배열이 겹치는(&&) 멤버를 품질 점수순으로 조회한다."""
        if not self.client or not tags:
            return []

        rows = await self._execute(
            self.client.table("repo_clusters")
            .select("repo_data, tags, quality_score, rotation_priority, cluster_name")
            .overlaps("tags", tags)
            .order("quality_score", desc=True)
            .limit(limit)
        )
        excluded = set(exclude_ids)
        members = [_member(row) for row in rows if row.get("repo_data")]
        return [m for m in members if m.repository.id not in excluded]

    # 상호작용

    async def get_seen_repository_ids(self, user_id: str) -> set[str]:
        """상호작용, 저장, 좋아요 테이블의 저장소 ID 합집합."""
        if not self.client:
            return set()

        interactions, saved, liked = await asyncio.gather(
            self._execute(
                self.client.table("user_interactions")
                .select("repo_id")
                .eq("user_id", user_id)
                .in_("action", sorted(a.value for a in SEEN_ACTIONS))
            ),
            self._execute(
                self.client.table("saved_repos").select("repo_id").eq("user_id", user_id)
            ),
            self._execute(
                self.client.table("liked_repos").select("repo_id").eq("user_id", user_id)
            ),
        )
        return {str(row["repo_id"]) for row in [*interactions, *saved, *liked]}

    async def record_interaction(self, interaction: Interaction) -> None:
        """상호작용 로그를 추가한다."""
        if not self.client:
            return

        await self._execute(
            self.client.table("user_interactions").insert(
                {
                    "user_id": interaction.user_id,
                    "repo_id": interaction.repo_id,
                    "action": interaction.action.value,
                    "session_id": interaction.session_id,
                    "time_spent": interaction.time_spent_ms,
                    "context": interaction.context.model_dump()
                    if interaction.context
                    else {},
                    "created_at": interaction.timestamp.isoformat(),
                }
            )
        )

    async def get_recent_interactions(
        self,
        user_id: str,
        actions: Collection[InteractionAction],
        limit: int,
    ) -> list[Interaction]:
        """최근 상호작용을 최신순으로 조회한다."""
        if not self.client:
            return []

        rows = await self._execute(
            self.client.table("user_interactions")
            .select("repo_id, action, session_id, time_spent, context, created_at")
            .eq("user_id", user_id)
            .in_("action", [a.value for a in actions])
            .order("created_at", desc=True)
            .limit(limit)
        )
        return [
            Interaction(
                user_id=user_id,
                repo_id=str(row["repo_id"]),
                action=row["action"],
                session_id=row.get("session_id") or "",
                time_spent_ms=row.get("time_spent"),
                context=row.get("context") or None,
                timestamp=row["created_at"],
            )
            for row in rows
        ]

    # 풀

    async def save_pool(
        self,
        user_id: str,
        repositories: list[Repository],
        preferences_hash: str,
    ) -> None:
        """사용자 풀을 upsert한다."""
        if not self.client or not repositories:
            return

        await self._execute(
            self.client.table("repo_pools").upsert(
                {
                    "user_id": user_id,
                    "repos": [repo.model_dump(mode="json") for repo in repositories],
                    "preferences_hash": preferences_hash,
                    "pool_size": len(repositories),
                    "updated_at": datetime.now(UTC).isoformat(),
                },
                on_conflict="user_id",
            )
        )
        logger.info(f"Saved pool for {user_id}: {len(repositories)} repos")

    async def load_pool(self, user_id: str) -> RepoPool | None:
        """저장된 풀을 조회한다. 없으면 None."""
        if not self.client:
            return None

        rows = await self._execute(
            self.client.table("repo_pools")
            .select("repos, preferences_hash, updated_at")
            .eq("user_id", user_id)
            .limit(1)
        )
        if not rows or not rows[0].get("repos"):
            return None

        row = rows[0]
        return RepoPool(
            user_id=user_id,
            repositories=[Repository.model_validate(r) for r in row["repos"]],
            preferences_hash=row["preferences_hash"],
            created_at=row["updated_at"],
        )
