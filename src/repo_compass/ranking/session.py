"""세션 피드백 기반 재정렬."""

import logging

from repo_compass.models import POSITIVE_ACTIONS, Interaction, InteractionAction, Repository
from repo_compass.ranking.similarity import repo_similarity

logger = logging.getLogger(__name__)

RECENT_POSITIVE_LIMIT = 5
RECENT_SKIP_LIMIT = 10

POSITIVE_WEIGHT = 0.5
NEGATIVE_WEIGHT = 0.3
SIMILARITY_WEIGHT = 0.2


def _topic_set(repositories: list[Repository]) -> set[str]:
    topics: set[str] = set()
    for repo in repositories:
        topics.update(t.lower() for t in repo.topics)
        topics.update(t.lower() for t in repo.tags)
    return topics


def _match_count(repo: Repository, topics: set[str]) -> int:
    return sum(1 for t in repo.topics if t.lower() in topics) + sum(
        1 for t in repo.tags if t.lower() in topics
    )


class SessionRanker:
    """최근 저장/좋아요와 스킵으로 후보를 다시 매긴다."""

    def rank(
        self,
        candidates: list[Repository],
        history: list[Interaction],
        catalog: dict[str, Repository],
        limit: int = 50,
    ) -> list[Repository]:
        """세션 점수가 양수인 후보만 점수 내림차순으로 반환한다.

        Args:
            candidates: 재정렬할 후보
            history: 세션 상호작용 (오래된 것부터)
            catalog: 상호작용 대상 저장소를 찾을 ID → 저장소 사전
            limit: 최대 반환 개수

        반환되는 저장소의 fit_score에는 0-100 세션 점수가 들어간다.
        """
        positives = [i for i in history if i.action in POSITIVE_ACTIONS][-RECENT_POSITIVE_LIMIT:]
        skips = [i for i in history if i.action == InteractionAction.skip][-RECENT_SKIP_LIMIT:]
        if not positives and not skips:
            return []

        liked = [catalog[i.repo_id] for i in positives if i.repo_id in catalog]
        skipped = [catalog[i.repo_id] for i in skips if i.repo_id in catalog]
        preferred = _topic_set(liked)
        avoided = _topic_set(skipped)
        excluded = {i.repo_id for i in positives} | {i.repo_id for i in skips}

        scored: list[tuple[int, Repository]] = []
        for repo in candidates:
            if repo.id in excluded:
                continue
            score = _match_count(repo, preferred) * POSITIVE_WEIGHT
            score -= _match_count(repo, avoided) * NEGATIVE_WEIGHT
            score += sum(repo_similarity(saved, repo) for saved in liked) * SIMILARITY_WEIGHT
            value = round(max(0.0, min(100.0, score * 100)))
            if value > 0:
                scored.append((value, repo))

        scored.sort(key=lambda item: item[0], reverse=True)
        logger.info(
            f"Session ranking: {len(scored)} of {len(candidates)} candidates boosted"
        )
        return [repo.with_fit_score(value) for value, repo in scored[:limit]]
