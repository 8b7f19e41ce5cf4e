"""추천 엔진 진입점.

풀 빌더, 콘텐츠 점수, 다양성/세션 재정렬, 건강도, 비교, 의도 분류를
하나의 객체로 묶어 UI/CLI 계층에 노출한다.
"""

import asyncio
import logging
from collections.abc import Collection

from repo_compass.agent.comparison import compare
from repo_compass.agent.intent import IntentRouter
from repo_compass.cache import TTLCache
from repo_compass.config import settings
from repo_compass.enrichers.health import HealthEnricher
from repo_compass.errors import UpstreamError
from repo_compass.models import (
    POSITIVE_ACTIONS,
    SEEN_ACTIONS,
    Comparison,
    HealthScore,
    Intent,
    Interaction,
    InteractionAction,
    Repository,
    UserPreferences,
)
from repo_compass.ranking.diversity import apply_diversity
from repo_compass.ranking.session import (
    RECENT_POSITIVE_LIMIT,
    RECENT_SKIP_LIMIT,
    SessionRanker,
)
from repo_compass.recommender.pool import PoolBuilder
from repo_compass.scoring.content import ContentScorer
from repo_compass.scoring.health import fallback_score
from repo_compass.sources.base import InteractionLog

logger = logging.getLogger(__name__)

POOL_INVALIDATING_ACTIONS = frozenset({InteractionAction.save, InteractionAction.like})
# 세션 재정렬용으로 기억하는 사용자별 저장소 수
SERVED_LIMIT = 200


class RecommendationEngine:
    """개인화 추천과 저장소 건강도 조회를 제공한다."""

    def __init__(
        self,
        pool_builder: PoolBuilder,
        interactions: InteractionLog,
        enricher: HealthEnricher,
        scorer: ContentScorer | None = None,
        session_ranker: SessionRanker | None = None,
        router: IntentRouter | None = None,
        score_band_width: int | None = None,
        served_cache: TTLCache[str, dict[str, Repository]] | None = None,
    ) -> None:
        """
        Args:
            pool_builder: 사용자별 후보 풀 빌더
            interactions: 상호작용 로그
            enricher: 건강도 enrichment
            scorer: 콘텐츠 적합도 계산기
            session_ranker: 세션 재정렬기
            router: 질의 의도 분류기
            score_band_width: 같은 밴드로 묶는 점수 폭. None이면 설정값 사용.
            served_cache: 사용자에게 보여준 저장소 캐시. 세션 재정렬에서
                풀 재빌드로 빠진 저장소를 찾는 데 쓴다.
        """
        self.pool_builder = pool_builder
        self.interactions = interactions
        self.enricher = enricher
        self.scorer = scorer or ContentScorer()
        self.session_ranker = session_ranker or SessionRanker()
        self.router = router or IntentRouter()
        self.score_band_width = score_band_width or settings.score_band_width
        self.served_cache = (
            served_cache
            if served_cache is not None
            else TTLCache(settings.pool_ttl_hours * 3600)
        )

    def remember_served(self, user_id: str, repositories: list[Repository]) -> None:
        """보여준 저장소를 기억한다. 최근 SERVED_LIMIT개만 남긴다."""
        served = self.served_cache.get(user_id) or {}
        for repo in repositories:
            served.pop(repo.id, None)
            served[repo.id] = repo
        self.served_cache.set(user_id, dict(list(served.items())[-SERVED_LIMIT:]))

    async def _candidates(
        self,
        user_id: str,
        preferences: UserPreferences,
        exclude_ids: Collection[str],
    ) -> list[Repository]:
        """풀에서 본 저장소와 제외 ID를 뺀다. 풀 순서를 유지한다."""
        pool = await self.pool_builder.get_pool(user_id, preferences)
        excluded = await self.pool_builder.get_seen_ids(user_id) | set(exclude_ids)

        candidates: list[Repository] = []
        ids: set[str] = set()
        for repo in pool.repositories:
            if repo.id in excluded or repo.id in ids:
                continue
            ids.add(repo.id)
            candidates.append(repo)
        return candidates

    async def get_recommendations(
        self,
        user_id: str,
        preferences: UserPreferences,
        count: int = 20,
        exclude_ids: Collection[str] = (),
    ) -> list[Repository]:
        """적합도가 붙은 추천 목록을 반환한다.

        결과는 적합도 엄격 내림차순이 아니다. 풀의 사용자별 셔플 순서를
        유지한 채 ``fit_score // score_band_width`` 밴드 단위로만 안정 정렬하므로,
        같은 밴드 안에서는 점수가 낮은 저장소가 앞설 수 있고 선호가 같은
        사용자라도 밴드 안의 순서는 서로 다르다.
        """
        candidates = await self._candidates(user_id, preferences, exclude_ids)
        scored = [
            repo.with_fit_score(self.scorer.score(repo, preferences)) for repo in candidates
        ]
        scored.sort(key=lambda r: (r.fit_score or 0) // self.score_band_width, reverse=True)

        recommendations = apply_diversity(scored, count)
        self.remember_served(user_id, recommendations)
        logger.info(
            f"Recommendations for {user_id}: {len(recommendations)} of {len(candidates)}"
        )
        return recommendations

    async def get_session_recommendations(
        self,
        user_id: str,
        preferences: UserPreferences,
        count: int = 20,
    ) -> list[Repository]:
        """최근 저장/좋아요와 스킵을 반영해 재정렬한다.

        세션 신호가 없거나 올려줄 후보가 없으면 일반 추천을 반환한다.
        """
        # 스킵이 많아도 긍정 신호가 밀려나지 않도록 따로 조회한다
        positives, skips = await asyncio.gather(
            self.interactions.get_recent_interactions(
                user_id, POSITIVE_ACTIONS, RECENT_POSITIVE_LIMIT
            ),
            self.interactions.get_recent_interactions(
                user_id, {InteractionAction.skip}, RECENT_SKIP_LIMIT
            ),
        )
        history = sorted([*positives, *skips], key=lambda i: i.timestamp)
        if not history:
            return await self.get_recommendations(user_id, preferences, count)

        pool = await self.pool_builder.get_pool(user_id, preferences)
        # 좋아요/스킵한 저장소는 재빌드된 풀에서 빠지므로 보여준 목록에서도 찾는다
        catalog = {
            **(self.served_cache.get(user_id) or {}),
            **{repo.id: repo for repo in pool.repositories},
        }
        candidates = await self._candidates(user_id, preferences, ())

        ranked = self.session_ranker.rank(candidates, history, catalog)
        if not ranked:
            return await self.get_recommendations(user_id, preferences, count)
        recommendations = apply_diversity(ranked, count)
        self.remember_served(user_id, recommendations)
        return recommendations

    async def record_interaction(self, interaction: Interaction) -> None:
        """상호작용을 기록하고 관련 캐시를 무효화한다."""
        await self.interactions.record_interaction(interaction)

        if interaction.action in SEEN_ACTIONS:
            self.pool_builder.invalidate_seen(interaction.user_id)
        if interaction.action in POOL_INVALIDATING_ACTIONS:
            self.pool_builder.invalidate_pool(interaction.user_id)
            logger.info(
                f"Invalidated pool for {interaction.user_id} after {interaction.action.value}"
            )

    async def get_health_score(self, full_name: str) -> HealthScore:
        """저장소 건강도. 신호가 없으면 메타데이터의 스타 수로 추정한다.

        저장소를 찾지 못하면 0점 추정을 반환한다.
        """
        try:
            scored = await self.enricher.score_by_name(full_name)
        except UpstreamError as e:
            logger.warning(f"Health signals failed for {full_name}: {e}")
            scored = None
        if scored is not None:
            return scored.health

        logger.warning(f"Repository {full_name} unavailable, using estimate")
        return fallback_score(0)

    async def compare(self, full_names: list[str]) -> Comparison:
        """2-5개 저장소를 비교한다."""
        return await compare(self.enricher, full_names)

    def route_query(self, text: str) -> Intent:
        """자유 질의를 의도로 분류한다."""
        return self.router.route(text)
