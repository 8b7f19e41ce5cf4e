"""건강도 점수 enrichment 모듈."""

import asyncio
import logging
from datetime import UTC, datetime

from repo_compass.models import HealthSignals, Repository, ScoredRepository, build_tags
from repo_compass.scoring.health import HealthScorer, fallback_score
from repo_compass.sources.base import RepositoryIndex

logger = logging.getLogger(__name__)


def star_velocity(signals: HealthSignals, now: datetime | None = None) -> int:
    """생성 이후 평균 월간 스타 증가량."""
    now = now or datetime.now(UTC)
    age_days = max(1.0, (now - signals.created_at).total_seconds() / 86400)
    return round(signals.stars / age_days * 30)


def repository_from_signals(full_name: str, signals: HealthSignals) -> Repository:
    """메타데이터를 못 가져왔을 때 신호만으로 저장소 스냅샷을 만든다."""
    return Repository(
        id=full_name,
        name=full_name.rsplit("/", 1)[-1],
        full_name=full_name,
        stars=signals.stars,
        forks=signals.forks,
        pushed_at=signals.last_push,
        language=signals.language,
        tags=build_tags(signals.language, signals.topics),
        topics=signals.topics,
        license=signals.license,
        url=f"https://github.com/{full_name}",
    )


class HealthEnricher:
    """저장소 목록에 건강도 점수를 병렬로 붙인다."""

    def __init__(self, index: RepositoryIndex, scorer: HealthScorer | None = None) -> None:
        """
        Args:
            index: 건강 신호를 제공하는 저장소 인덱스
            scorer: 건강도 계산기
        """
        self.index = index
        self.scorer = scorer or HealthScorer()

    def _score(
        self,
        repo: Repository,
        signals: HealthSignals | BaseException | None,
    ) -> ScoredRepository:
        if isinstance(signals, BaseException) or signals is None:
            reason = signals if signals is not None else "no signals"
            logger.warning(f"Health fallback for {repo.full_name}: {reason}")
            return ScoredRepository(repository=repo, health=fallback_score(repo.stars))
        return ScoredRepository(
            repository=repo,
            health=self.scorer.score(signals),
            star_velocity=star_velocity(signals),
        )

    async def enrich(self, repo: Repository) -> ScoredRepository:
        """저장소 하나를 enrichment한다. 실패하면 추정 점수."""
        return (await self.enrich_many([repo]))[0]

    async def enrich_many(self, repositories: list[Repository]) -> list[ScoredRepository]:
        """여러 저장소의 신호를 병렬로 가져온다. 실패한 저장소만 추정 점수로 대체한다."""
        results = await asyncio.gather(
            *(self.index.get_health_signals(repo.full_name) for repo in repositories),
            return_exceptions=True,
        )
        return [
            self._score(repo, signals)
            for repo, signals in zip(repositories, results, strict=True)
        ]

    async def score_by_name(self, full_name: str) -> ScoredRepository | None:
        """이름으로 신호와 메타데이터를 가져온다.

        신호 조회가 실패하거나 비어 있어도 메타데이터가 있으면 스타 수 기반
        추정 점수를 붙인다. 메타데이터도 없으면 실패는 그대로 전달하고,
        신호가 없을 뿐이면 None을 반환한다.
        """
        repo, signals = await asyncio.gather(
            self.index.get_repository(full_name),
            self.index.get_health_signals(full_name),
            return_exceptions=True,
        )
        if isinstance(repo, BaseException):
            raise repo
        if isinstance(signals, HealthSignals):
            return self._score(repo or repository_from_signals(full_name, signals), signals)
        if repo is not None:
            return self._score(repo, signals)
        if isinstance(signals, BaseException):
            raise signals
        return None
