"""대화형 저장소 탐색 어시스턴트.

질의 의도를 분류하고 의도별 핸들러가 검색, 비교, 건강도, 대안, 트렌딩 응답을 만든다.
"""

import logging
from datetime import UTC, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

from repo_compass.agent.comparison import compare
from repo_compass.agent.intent import IntentRouter
from repo_compass.agent.summary import SearchSummarizer
from repo_compass.enrichers.health import HealthEnricher
from repo_compass.errors import UpstreamError
from repo_compass.models import (
    Comparison,
    IntentKind,
    Repository,
    ScoredRepository,
)
from repo_compass.sources.base import RepositoryIndex, TrendingSource

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 8
SEARCH_MIN_STARS = 20
TRENDING_FALLBACK_MIN_STARS = 50
ENRICH_LIMIT = 6

PERIOD_DAYS = {"daily": 1, "weekly": 7, "monthly": 30}


class ResponseType(str, Enum):
    """어시스턴트 응답 종류."""

    text = "text"
    recommendations = "recommendations"
    comparison = "comparison"
    health_report = "health-report"
    alternatives = "alternatives"


class AssistantResponse(BaseModel):
    """어시스턴트 응답."""

    type: ResponseType
    text: str
    recommendations: list[ScoredRepository] = Field(default_factory=list)
    comparison: Comparison | None = None
    health_report: ScoredRepository | None = None
    actions: list[str] = Field(default_factory=list, description="추천 후속 질의")


def build_search_query(
    terms: str,
    language: str | None = None,
    min_stars: int | None = None,
) -> str:
    """검색어에 language, stars 한정자를 붙인다."""
    query = terms
    if language:
        query += f" language:{language}"
    if min_stars:
        query += f" stars:>={min_stars}"
    return query.strip()


def recommendation_actions(repos: list[ScoredRepository]) -> list[str]:
    """상위 저장소 기준 후속 질의."""
    if not repos:
        return []
    first = repos[0].repository.full_name
    actions = []
    if len(repos) >= 2:
        actions.append(f"Compare {first} vs {repos[1].repository.full_name}")
    actions.append(f"Alternatives to {first}")
    actions.append(f"Health of {first}")
    return actions


class Assistant:
    """자유 질의를 의도별로 처리한다."""

    def __init__(
        self,
        index: RepositoryIndex,
        trending: TrendingSource,
        enricher: HealthEnricher | None = None,
        router: IntentRouter | None = None,
        summarizer: SearchSummarizer | None = None,
    ) -> None:
        self.index = index
        self.trending = trending
        self.enricher = enricher or HealthEnricher(index)
        self.router = router or IntentRouter()
        self.summarizer = summarizer or SearchSummarizer()

    async def respond(self, message: str) -> AssistantResponse:
        """질의를 분류해 응답한다. 외부 호출 실패는 일반 오류 응답으로 바꾼다."""
        intent = self.router.route(message)
        try:
            match intent.kind:
                case IntentKind.compare:
                    return await self.handle_compare(intent.repos)
                case IntentKind.health:
                    return await self.handle_health(intent.repos[0])
                case IntentKind.alternatives:
                    return await self.handle_alternatives(intent.repos[0])
                case IntentKind.trending:
                    return await self.handle_trending(intent.language, intent.period)
                case _:
                    return await self.handle_search(
                        intent.search_terms or intent.query, intent.language
                    )
        except UpstreamError as e:
            logger.error(f"Assistant failed for '{message}': {e}")
            return AssistantResponse(
                type=ResponseType.text,
                text="Something went wrong while processing your request. Please try again.",
                actions=["Try again"],
            )

    async def _enrich_sorted(
        self,
        repos: list[Repository],
        by_velocity: bool = False,
    ) -> list[ScoredRepository]:
        scored = await self.enricher.enrich_many(repos[:ENRICH_LIMIT])
        if by_velocity:
            scored.sort(key=lambda r: r.star_velocity, reverse=True)
        else:
            scored.sort(key=lambda r: r.health.overall, reverse=True)
        return scored

    async def smart_search(
        self,
        terms: str,
        language: str | None = None,
        limit: int = SEARCH_LIMIT,
        min_stars: int = SEARCH_MIN_STARS,
    ) -> list[Repository]:
        """검색어를 GitHub 검색 쿼리로 바꿔 상위 ``limit``개를 가져온다."""
        query = build_search_query(terms, language, min_stars)
        found = await self.index.search_repositories(query, per_page=min(limit * 2, 50))
        return found[:limit]

    async def handle_search(self, terms: str, language: str | None) -> AssistantResponse:
        repos = await self.smart_search(terms, language)
        if not repos:
            return AssistantResponse(
                type=ResponseType.text,
                text=(
                    f'I couldn\'t find any repositories matching "{terms}". '
                    "Try broadening your search or using different keywords."
                ),
                actions=["Try different terms", "Search trending instead"],
            )

        scored = await self._enrich_sorted(repos)
        return AssistantResponse(
            type=ResponseType.recommendations,
            text=await self.summarizer.summarize(terms, scored),
            recommendations=scored,
            actions=recommendation_actions(scored),
        )

    async def handle_compare(self, names: list[str]) -> AssistantResponse:
        comparison = await compare(self.enricher, names)
        if comparison.reason:
            return AssistantResponse(
                type=ResponseType.text,
                text=(
                    "I couldn't compare those repositories. Make sure you're using the "
                    'format "owner/repo" (e.g., "facebook/react vs vuejs/vue").'
                ),
                actions=["Try again"],
            )

        return AssistantResponse(
            type=ResponseType.comparison,
            text=comparison.verdict,
            comparison=comparison,
            actions=[f"Alternatives to {r.repository.full_name}" for r in comparison.repos],
        )

    async def handle_health(self, name: str) -> AssistantResponse:
        scored = await self.enricher.score_by_name(name)
        if scored is None:
            return AssistantResponse(
                type=ResponseType.text,
                text=(
                    f'I couldn\'t find or analyze "{name}". '
                    "Make sure the repository exists (format: owner/repo)."
                ),
                actions=["Try again"],
            )

        health = scored.health
        return AssistantResponse(
            type=ResponseType.health_report,
            text=f"**{name}** — Health Score: {health.overall}/100 ({health.grade})",
            health_report=scored,
            actions=[f"Alternatives to {name}", f"Compare {name} with..."],
        )

    async def handle_alternatives(self, name: str) -> AssistantResponse:
        alternatives = await self.index.find_alternatives(name)
        if not alternatives:
            return AssistantResponse(
                type=ResponseType.text,
                text=(
                    f'I couldn\'t find alternatives to "{name}". '
                    "The repo might be too niche or unique."
                ),
                actions=[f"Health of {name}", "Search for something else"],
            )

        scored = await self._enrich_sorted(alternatives)
        return AssistantResponse(
            type=ResponseType.alternatives,
            text=f"Here are alternatives to **{name}**, ranked by health score:",
            recommendations=scored,
            actions=["Compare top 2", f"Health of {name}"],
        )

    async def _trending_repositories(
        self,
        language: str | None,
        period: str,
    ) -> list[Repository]:
        """Trending 페이지를 먼저 시도하고 실패하면 최근 푸시 기준 검색으로 대체한다."""
        try:
            trending = await self.trending.fetch(since=period, language=language)
            return [t.to_repository() for t in trending[:SEARCH_LIMIT]]
        except UpstreamError as e:
            logger.warning(f"Trending page unavailable, using search: {e}")

        since = datetime.now(UTC) - timedelta(days=PERIOD_DAYS.get(period, 1))
        return await self.smart_search(
            f"stars:>100 pushed:>{since.date().isoformat()}",
            language,
            min_stars=TRENDING_FALLBACK_MIN_STARS,
        )

    async def handle_trending(self, language: str | None, period: str) -> AssistantResponse:
        repos = await self._trending_repositories(language, period)
        scored = await self._enrich_sorted(repos, by_velocity=True)
        label = f" in {language}" if language else ""
        return AssistantResponse(
            type=ResponseType.recommendations,
            text=f"Here are the trending repos{label} ({period}):",
            recommendations=scored,
            actions=["Weekly trending", "Monthly trending"],
        )
