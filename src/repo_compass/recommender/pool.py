"""사용자별 후보 풀 빌더.

주 클러스터 → 보조 클러스터 → 태그 검색 → 동적 검색 → 일반 폴백 순서로
후보를 모으고, 본 저장소를 제외한 뒤 사용자별로 셔플해 캐시/저장한다.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime

from repo_compass.cache import TTLCache
from repo_compass.config import settings
from repo_compass.errors import PoolExhaustedError, UpstreamError
from repo_compass.filters.quality import QualityGate
from repo_compass.models import RepoPool, Repository, UserPreferences
from repo_compass.retrieval.cluster import ClusterRetriever
from repo_compass.retrieval.shuffle import shuffle_for_user, string_hash32
from repo_compass.retrieval.strategies import (
    DynamicSearchStrategy,
    GenericFallbackStrategy,
    PoolContext,
    PrimaryClusterStrategy,
    RetrievalStrategy,
    SecondaryClusterStrategy,
    TagSearchStrategy,
)
from repo_compass.scoring.content import ContentScorer
from repo_compass.sources.base import ClusterStore, InteractionLog, PoolStore, RepositoryIndex

logger = logging.getLogger(__name__)


def hash_preferences(preferences: UserPreferences) -> str:
    """풀 캐시 무효화용 선호 해시.

    기술 스택, 목표, 프로젝트 유형(정렬)과 인기도 가중치만 반영한다.
    """
    canonical = json.dumps(
        {
            "techStack": sorted(preferences.tech_stack),
            "goals": sorted(goal.value for goal in preferences.goals),
            "projectTypes": sorted(p.value for p in preferences.project_types),
            "popularityWeight": (
                preferences.popularity_weight.value
                if preferences.popularity_weight
                else "medium"
            ),
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return str(string_hash32(canonical))


class PoolBuilder:
    """후보 풀을 만들고 캐시한다."""

    def __init__(
        self,
        cluster_store: ClusterStore,
        interactions: InteractionLog,
        pool_store: PoolStore,
        index: RepositoryIndex,
        gate: QualityGate | None = None,
        scorer: ContentScorer | None = None,
        pool_cache: TTLCache[str, RepoPool] | None = None,
        seen_cache: TTLCache[str, set[str]] | None = None,
        strategies: list[RetrievalStrategy] | None = None,
        pool_size: int | None = None,
        ttl_hours: float | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Args:
            cluster_store: 클러스터 저장소
            interactions: 상호작용 로그 (본 저장소 ID 조회용)
            pool_store: 풀 영속화 저장소
            index: 동적 검색용 저장소 인덱스
            pool_cache: 사용자별 풀 캐시. None이면 TTL 설정값으로 생성.
            seen_cache: 사용자별 본 저장소 ID 캐시
            strategies: 수집 전략 목록. None이면 기본 순서 사용.
            pool_size: 풀 크기. None이면 설정값 사용.
            ttl_hours: 풀 유효 시간. None이면 설정값 사용.
            now: 현재 시각 함수 (테스트용)
        """
        self.cluster_store = cluster_store
        self.interactions = interactions
        self.pool_store = pool_store
        self.gate = gate or QualityGate()
        self.scorer = scorer or ContentScorer()
        self.pool_size = pool_size or settings.pool_size
        self.ttl_hours = ttl_hours or settings.pool_ttl_hours
        self._now = now or (lambda: datetime.now(UTC))
        self.pool_cache = (
            pool_cache if pool_cache is not None else TTLCache(self.ttl_hours * 3600)
        )
        self.seen_cache = (
            seen_cache
            if seen_cache is not None
            else TTLCache(settings.seen_cache_minutes * 60)
        )
        self.retriever = ClusterRetriever(cluster_store)
        self.strategies = strategies or self._default_strategies(index)
        # 무효화 후 다음 빌드 전까지 저장된 풀도 쓰지 않는 사용자
        self._invalidated: set[str] = set()

    def _default_strategies(self, index: RepositoryIndex) -> list[RetrievalStrategy]:
        return [
            PrimaryClusterStrategy(),
            SecondaryClusterStrategy(self.retriever),
            TagSearchStrategy(
                self.retriever, settings.tag_search_floor, settings.tag_search_limit
            ),
            DynamicSearchStrategy(
                index,
                self.gate,
                self.scorer,
                settings.min_relevance_score,
                self.pool_size,
            ),
            GenericFallbackStrategy(
                self.retriever, self.cluster_store, settings.fallback_cluster_limit
            ),
        ]

    async def get_seen_ids(self, user_id: str) -> set[str]:
        """본 저장소 ID를 캐시를 거쳐 가져온다. 조회 실패 시 빈 집합."""
        cached = self.seen_cache.get(user_id)
        if cached is not None:
            return cached
        try:
            seen = await self.interactions.get_seen_repository_ids(user_id)
        except UpstreamError as e:
            logger.warning(f"Seen ids unavailable for {user_id}: {e}")
            return set()
        self.seen_cache.set(user_id, seen)
        return seen

    def invalidate_seen(self, user_id: str) -> None:
        self.seen_cache.invalidate(user_id)

    def invalidate_pool(self, user_id: str) -> None:
        """캐시된 풀을 버린다. 다음 조회는 저장된 풀도 건너뛰고 새로 만든다."""
        self.pool_cache.invalidate(user_id)
        self._invalidated.add(user_id)

    async def get_pool(self, user_id: str, preferences: UserPreferences) -> RepoPool:
        """유효한 캐시가 있으면 재사용하고, 없으면 새로 만든다."""
        preferences_hash = hash_preferences(preferences)
        now = self._now()

        cached = self.pool_cache.get(user_id)
        if cached is not None and self._is_reusable(cached, preferences_hash, now):
            logger.info(f"Reusing cached pool for {user_id}")
            return cached

        stored = None
        if user_id not in self._invalidated:
            try:
                stored = await self.pool_store.load_pool(user_id)
            except UpstreamError as e:
                logger.warning(f"Stored pool unavailable for {user_id}: {e}")
        if stored is not None and self._is_reusable(stored, preferences_hash, now):
            logger.info(f"Reusing stored pool for {user_id}")
            self.pool_cache.set(user_id, stored)
            return stored

        return await self.build_pool(user_id, preferences)

    def _is_reusable(self, pool: RepoPool, preferences_hash: str, now: datetime) -> bool:
        return (
            bool(pool.repositories)
            and pool.preferences_hash == preferences_hash
            and pool.is_fresh(now, self.ttl_hours)
        )

    async def build_pool(self, user_id: str, preferences: UserPreferences) -> RepoPool:
        """전략 목록을 순서대로 실행해 풀을 새로 만든다."""
        seen_ids, primary = await asyncio.gather(
            self.get_seen_ids(user_id),
            self._fetch_primary(user_id, preferences),
        )
        context = PoolContext(
            user_id=user_id,
            preferences=preferences,
            seen_ids=set(seen_ids),
            pool_size=self.pool_size,
            primary_candidates=primary,
        )

        for strategy in self.strategies:
            if not strategy.should_attempt(context):
                continue
            try:
                found = await strategy.attempt(context)
            except UpstreamError as e:
                logger.warning(f"Strategy {strategy.name} failed, falling through: {e}")
                continue
            accepted = [
                repo
                for repo in found
                if repo.id not in context.seen_ids
                and self.gate.passes(repo, preferences)
            ]
            context.add(accepted)
            logger.info(
                f"Strategy {strategy.name}: +{len(accepted)} (total {context.count})"
            )

        if context.count == 0:
            logger.error(f"All retrieval tiers exhausted for {user_id}")
            raise PoolExhaustedError(user_id)

        repositories = shuffle_for_user(list(context.candidates.values()), user_id)
        pool = RepoPool(
            user_id=user_id,
            repositories=repositories[: self.pool_size],
            preferences_hash=hash_preferences(preferences),
            created_at=self._now(),
        )
        self.pool_cache.set(user_id, pool)
        self._invalidated.discard(user_id)
        await self._persist(pool)
        logger.info(f"Built pool of {len(pool.repositories)} for {user_id}")
        return pool

    async def _fetch_primary(
        self, user_id: str, preferences: UserPreferences
    ) -> list[Repository]:
        if not preferences.primary_cluster:
            return []
        try:
            return await self.retriever.best_of_cluster(
                preferences.primary_cluster, self.pool_size, (), user_id
            )
        except UpstreamError as e:
            logger.warning(f"Primary cluster {preferences.primary_cluster} failed: {e}")
            return []

    async def _persist(self, pool: RepoPool) -> None:
        try:
            await self.pool_store.save_pool(
                pool.user_id, pool.repositories, pool.preferences_hash
            )
        except UpstreamError as e:
            logger.warning(f"Failed to persist pool for {pool.user_id}: {e}")
