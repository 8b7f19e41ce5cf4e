"""인메모리 스토리지 테스트."""

from datetime import UTC, datetime, timedelta

import pytest

from conftest import RepoFactory, add_cluster
from repo_compass.models import Cluster, Interaction, InteractionAction
from repo_compass.storage.memory import (
    InMemoryClusterStore,
    InMemoryInteractionLog,
    InMemoryPoolStore,
)


class TestInMemoryClusterStore:
    """InMemoryClusterStore 테스트."""

    @pytest.mark.asyncio
    async def test_list_only_active(self, cluster_store: InMemoryClusterStore) -> None:
        """비활성 클러스터는 목록에서 뺀다."""
        cluster_store.add_cluster(Cluster(name="backend", display_name="Backend"), [])
        cluster_store.add_cluster(
            Cluster(name="legacy", display_name="Legacy", is_active=False), []
        )
        assert [c.name for c in await cluster_store.list_clusters()] == ["backend"]

    @pytest.mark.asyncio
    async def test_members_ordered_by_quality(
        self, cluster_store: InMemoryClusterStore, make_repo: RepoFactory
    ) -> None:
        """품질 점수 내림차순으로 limit개를 자른 뒤 제외 ID를 뺀다."""
        add_cluster(cluster_store, "frontend", [make_repo(str(i)) for i in range(5)])
        members = await cluster_store.get_cluster_members("frontend", 3, {"1"})

        assert [m.repository.id for m in members] == ["0", "2"]
        assert all(m.cluster_name == "frontend" for m in members)

    @pytest.mark.asyncio
    async def test_tag_overlap(
        self, cluster_store: InMemoryClusterStore, make_repo: RepoFactory
    ) -> None:
        """태그가 하나라도 겹치는 멤버만 반환한다."""
        add_cluster(
            cluster_store,
            "backend",
            [make_repo("py", language="Python"), make_repo("go", language="Go")],
        )
        members = await cluster_store.query_by_tag_overlap(["PYTHON"], 10)
        assert [m.repository.id for m in members] == ["py"]


class TestInMemoryInteractionLog:
    """InMemoryInteractionLog 테스트."""

    @pytest.mark.asyncio
    async def test_seen_ids_use_seen_actions(
        self, interaction_log: InMemoryInteractionLog
    ) -> None:
        """click-through는 본 것으로 치지 않는다."""
        for repo_id, action in [
            ("1", InteractionAction.view),
            ("2", InteractionAction.skip),
            ("3", InteractionAction.click_through),
        ]:
            await interaction_log.record_interaction(
                Interaction(user_id="alice", repo_id=repo_id, action=action)
            )
        await interaction_log.record_interaction(
            Interaction(user_id="bob", repo_id="4", action=InteractionAction.like)
        )

        assert await interaction_log.get_seen_repository_ids("alice") == {"1", "2"}

    @pytest.mark.asyncio
    async def test_recent_interactions_newest_first(
        self, interaction_log: InMemoryInteractionLog
    ) -> None:
        """최신순으로 limit개를 반환한다."""
        start = datetime(2026, 10, 1, tzinfo=UTC)
        for i in range(4):
            await interaction_log.record_interaction(
                Interaction(
                    user_id="alice",
                    repo_id=str(i),
                    action=InteractionAction.like,
                    timestamp=start + timedelta(minutes=i),
                )
            )

        recent = await interaction_log.get_recent_interactions(
            "alice", [InteractionAction.like], 2
        )
        assert [i.repo_id for i in recent] == ["3", "2"]


class TestInMemoryPoolStore:
    """InMemoryPoolStore 테스트."""

    @pytest.mark.asyncio
    async def test_save_and_load(
        self, pool_store: InMemoryPoolStore, make_repo: RepoFactory
    ) -> None:
        """사용자당 마지막으로 저장한 풀을 반환한다."""
        await pool_store.save_pool("alice", [make_repo("1")], "a")
        await pool_store.save_pool("alice", [make_repo("2")], "b")

        pool = await pool_store.load_pool("alice")
        assert pool is not None
        assert [r.id for r in pool.repositories] == ["2"]
        assert pool.preferences_hash == "b"
        assert await pool_store.load_pool("bob") is None
