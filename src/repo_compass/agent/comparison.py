"""저장소 비교 모듈.

2-5개 저장소의 건강도를 나란히 계산해 축별 승자와 판정을 만든다.
"""

import asyncio
import logging

from repo_compass.enrichers.health import HealthEnricher
from repo_compass.models import Comparison, ScoredRepository
from repo_compass.scoring.health import PILLAR_WEIGHTS

logger = logging.getLogger(__name__)

MIN_REPOS = 2
MAX_REPOS = 5


def category_winners(repos: list[ScoredRepository]) -> dict[str, str]:
    """축별 최고 점수 저장소. 동점이면 앞선 저장소가 이긴다."""
    winners: dict[str, str] = {}
    for pillar in PILLAR_WEIGHTS:
        best = repos[0]
        for repo in repos[1:]:
            if getattr(repo.health.breakdown, pillar) > getattr(best.health.breakdown, pillar):
                best = repo
        winners[pillar] = best.repository.full_name
    return winners


def build_verdict(repos: list[ScoredRepository], winners: dict[str, str]) -> str:
    """종합 1위와 2위가 이긴 축을 한두 문장으로 요약한다."""
    ranked = sorted(repos, key=lambda r: r.health.overall, reverse=True)
    leader = ranked[0]
    parts = [
        f"**{leader.repository.full_name}** leads overall with a health score of "
        f"{leader.health.overall}/100 ({leader.health.grade})."
    ]

    runner_up = ranked[1]
    runner_up_wins = [
        pillar for pillar, name in winners.items() if name == runner_up.repository.full_name
    ]
    if runner_up_wins:
        parts.append(
            f"However, **{runner_up.repository.full_name}** wins in {', '.join(runner_up_wins)}."
        )
    return " ".join(parts)


def build_summary(repos: list[ScoredRepository]) -> str:
    """저장소당 한 줄 요약."""
    return "\n".join(
        f"• {r.repository.full_name}: {r.health.overall}/100 ({r.health.grade}) — "
        f"{r.repository.stars:,} stars, {r.star_velocity} stars/month"
        for r in repos
    )


async def compare(enricher: HealthEnricher, full_names: list[str]) -> Comparison:
    """저장소들을 비교한다.

    6번째 이후 이름은 버린다. 신호를 가져오지 못한 저장소는 스타 수 기반
    추정 점수로 비교하고, 저장소 자체를 찾지 못한 경우에만 뺀다.
    남은 저장소가 2개 미만이면 ``reason``만 채운 빈 결과를 반환한다.
    """
    names = list(dict.fromkeys(full_names))[:MAX_REPOS]
    if len(names) < MIN_REPOS:
        return Comparison(reason="At least two repositories are required to compare.")

    results = await asyncio.gather(
        *(enricher.score_by_name(name) for name in names),
        return_exceptions=True,
    )

    repos: list[ScoredRepository] = []
    for name, result in zip(names, results, strict=True):
        if isinstance(result, BaseException):
            logger.warning(f"Comparison skipped {name}: {result}")
        elif result is None:
            logger.warning(f"Comparison skipped {name}: repository not found")
        else:
            repos.append(result)

    if len(repos) < MIN_REPOS:
        missing = [n for n in names if n not in {r.repository.full_name for r in repos}]
        return Comparison(
            reason=f"Could not analyze enough repositories (missing: {', '.join(missing)}).",
        )

    winners = category_winners(repos)
    return Comparison(
        repos=repos,
        category_winners=winners,
        verdict=build_verdict(repos, winners),
        summary=build_summary(repos),
    )
