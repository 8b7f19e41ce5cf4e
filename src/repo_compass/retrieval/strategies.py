"""후보 풀 수집 전략.

풀 빌더는 전략 목록을 순서대로 돌면서 ``should_attempt``가 참인 전략만
실행한다. 각 전략은 지금까지 모인 후보(``PoolContext``)를 보고 스스로
실행 여부를 판단한다.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, TypeVar

from repo_compass.filters.quality import QualityGate
from repo_compass.models import PopularityWeight, Repository, UserPreferences
from repo_compass.retrieval.cluster import ClusterRetriever, detect_primary_cluster
from repo_compass.scoring.content import ContentScorer
from repo_compass.scoring.keywords import (
    GOAL_TAGS,
    GOAL_TEXT_FILTERS,
    PROJECT_TYPE_TEXT_FILTERS,
    contains_any,
)
from repo_compass.sources.base import ClusterStore, RepositoryIndex

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


@dataclass
class PoolContext:
    """풀 빌드 한 번의 진행 상태."""

    user_id: str
    preferences: UserPreferences
    seen_ids: set[str]
    pool_size: int
    primary_candidates: list[Repository] = field(default_factory=list)
    candidates: dict[str, Repository] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.candidates)

    @property
    def exclude_ids(self) -> set[str]:
        """이미 본 것과 이미 모은 것."""
        return self.seen_ids | self.candidates.keys()

    def add(self, repositories: list[Repository]) -> None:
        """ID 기준으로 합친다. 같은 ID는 나중 값이 남는다."""
        for repo in repositories:
            self.candidates[repo.id] = repo


class RetrievalStrategy(Protocol):
    """후보 수집 전략 프로토콜."""

    name: str

    def should_attempt(self, context: PoolContext) -> bool:
        """현재 상태에서 이 전략을 실행할지 판단한다."""
        ...

    async def attempt(self, context: PoolContext) -> list[Repository]:
        """후보를 가져온다."""
        ...


def build_comprehensive_tags(preferences: UserPreferences) -> list[str]:
    """기술 스택, 관심사, 프로젝트 유형, 목표 키워드를 합친 태그 목록."""
    tags = [t.lower() for t in preferences.tech_stack]
    tags += [i.lower() for i in preferences.interests]
    tags += [p.value for p in preferences.project_types]
    for goal in preferences.goals:
        tags += GOAL_TAGS.get(goal, ())
    return list(dict.fromkeys(tags))


def _text_filter_match(
    text: str,
    selected: Sequence[E],
    filters: Mapping[E, tuple[str, ...]],
) -> bool:
    """선택값 중 하나라도 키워드가 맞으면 참. 키워드가 없는 선택값은 항상 참."""
    for value in selected:
        markers = filters.get(value)
        if not markers or contains_any(text, markers):
            return True
    return False


def filter_by_preferences(
    repositories: list[Repository],
    preferences: UserPreferences,
) -> list[Repository]:
    """기술 스택, 목표, 프로젝트 유형 키워드로 클러스터 후보를 좁힌다."""
    filtered: list[Repository] = []
    for repo in repositories:
        text = " ".join(
            [repo.name, repo.description, repo.language or "", " ".join(repo.topics)]
        ).lower()

        if preferences.tech_stack:
            language = (repo.language or "").lower()
            if not any(
                tech.lower() in text or tech.lower() == language
                for tech in preferences.tech_stack
            ):
                continue
        if preferences.goals and not _text_filter_match(
            text, preferences.goals, GOAL_TEXT_FILTERS
        ):
            continue
        if preferences.project_types and not _text_filter_match(
            text, preferences.project_types, PROJECT_TYPE_TEXT_FILTERS
        ):
            continue
        filtered.append(repo)
    return filtered


class PrimaryClusterStrategy:
    """1순위: 주 클러스터. 후보는 빌더가 본 ID 조회와 동시에 미리 가져온다."""

    name = "primary-cluster"

    def should_attempt(self, context: PoolContext) -> bool:
        return bool(context.preferences.primary_cluster)

    async def attempt(self, context: PoolContext) -> list[Repository]:
        prefs = context.preferences
        repos = [r for r in context.primary_candidates if r.id not in context.seen_ids]
        if prefs.tech_stack or prefs.goals or prefs.project_types:
            repos = filter_by_preferences(repos, prefs)
        return repos


class SecondaryClusterStrategy:
    """2순위: 보조 클러스터로 풀 크기까지 채운다."""

    name = "secondary-clusters"

    def __init__(self, retriever: ClusterRetriever) -> None:
        self.retriever = retriever

    def should_attempt(self, context: PoolContext) -> bool:
        return bool(context.preferences.secondary_clusters) and (
            context.count < context.pool_size
        )

    async def attempt(self, context: PoolContext) -> list[Repository]:
        found: dict[str, Repository] = {}
        exclude_ids = set(context.exclude_ids)
        for cluster in context.preferences.secondary_clusters:
            remaining = context.pool_size - context.count - len(found)
            if remaining <= 0:
                break
            repos = await self.retriever.best_of_cluster(
                cluster, remaining, exclude_ids, context.user_id
            )
            for repo in repos:
                found[repo.id] = repo
                exclude_ids.add(repo.id)
        return list(found.values())


class TagSearchStrategy:
    """3순위: 후보가 하한 미만이면 태그 겹침으로 보충한다."""

    name = "tag-search"

    def __init__(self, retriever: ClusterRetriever, floor: int, limit: int) -> None:
        self.retriever = retriever
        self.floor = floor
        self.limit = limit

    def should_attempt(self, context: PoolContext) -> bool:
        return context.count < self.floor

    async def attempt(self, context: PoolContext) -> list[Repository]:
        tags = build_comprehensive_tags(context.preferences)
        if not tags:
            return []
        return await self.retriever.by_tags(
            tags, self.limit, context.exclude_ids, context.user_id
        )


# 인기도 가중치별 동적 검색 최소 스타 수
DYNAMIC_MIN_STARS = {
    PopularityWeight.high: 100,
    PopularityWeight.medium: 50,
    PopularityWeight.low: 10,
}


class DynamicSearchStrategy:
    """4순위: 큐레이션 후보가 하나도 없을 때 실시간 검색."""

    name = "dynamic-search"

    def __init__(
        self,
        index: RepositoryIndex,
        gate: QualityGate,
        scorer: ContentScorer,
        min_relevance: int,
        limit: int,
    ) -> None:
        self.index = index
        self.gate = gate
        self.scorer = scorer
        self.min_relevance = min_relevance
        self.limit = limit

    def should_attempt(self, context: PoolContext) -> bool:
        return context.count == 0

    def build_query(self, preferences: UserPreferences) -> str:
        """검색어를 만든다 (기술 스택 최대 3개 + 스타 범위)."""
        terms = " ".join(preferences.tech_stack[:3]) or "stars:>100"
        min_stars = DYNAMIC_MIN_STARS[preferences.popularity_weight or PopularityWeight.low]
        return f"{terms} stars:>{min_stars} stars:<50000"

    async def attempt(self, context: PoolContext) -> list[Repository]:
        prefs = context.preferences
        repos = await self.index.search_repositories(
            self.build_query(prefs), sort="stars", order="desc", per_page=100
        )
        scored = [
            repo.with_fit_score(self.scorer.score(repo, prefs))
            for repo in self.gate.filter(repos, prefs)
        ]
        relevant = [r for r in scored if (r.fit_score or 0) > self.min_relevance]
        relevant.sort(key=lambda r: r.fit_score or 0, reverse=True)
        return relevant[: self.limit]


class GenericFallbackStrategy:
    """마지막: 추정 클러스터, 그것도 비면 아무 활성 클러스터."""

    name = "generic-fallback"

    def __init__(self, retriever: ClusterRetriever, store: ClusterStore, limit: int) -> None:
        self.retriever = retriever
        self.store = store
        self.limit = limit

    def should_attempt(self, context: PoolContext) -> bool:
        return context.count == 0

    async def attempt(self, context: PoolContext) -> list[Repository]:
        detected = detect_primary_cluster(context.preferences)
        repos = await self.retriever.best_of_cluster(
            detected, self.limit, context.seen_ids, context.user_id
        )
        if repos:
            return repos

        logger.warning(f"Detected cluster {detected} is empty, trying any active cluster")
        for cluster in await self.store.list_clusters():
            if not cluster.is_active or cluster.name == detected:
                continue
            repos = await self.retriever.best_of_cluster(
                cluster.name, self.limit, context.seen_ids, context.user_id
            )
            if repos:
                return repos
        return []
