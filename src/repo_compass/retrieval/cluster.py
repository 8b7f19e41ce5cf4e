"""클러스터 기반 후보 조회."""

import logging
import math
from collections.abc import Collection

from repo_compass.models import ClusterMember, Repository, UserPreferences
from repo_compass.retrieval.shuffle import shuffle_for_user
from repo_compass.scoring.keywords import CLUSTER_HINTS, DEFAULT_CLUSTER
from repo_compass.sources.base import ClusterStore

logger = logging.getLogger(__name__)

TAG_OVERFETCH = 2.5


def normalize_tag(tag: str) -> str:
    """태그를 소문자-하이픈 형식으로 정규화한다."""
    return "-".join(tag.strip().lower().split())


def detect_primary_cluster(preferences: UserPreferences) -> str:
    """관심사와 기술 스택에서 주 클러스터를 추정한다."""
    if preferences.primary_cluster:
        return preferences.primary_cluster
    values = [value.lower() for value in preferences.interests + preferences.tech_stack]
    for cluster, hints in CLUSTER_HINTS:
        if any(value in hints for value in values):
            return cluster
    return DEFAULT_CLUSTER


def tag_match_count(member: ClusterMember, tags: list[str]) -> int:
    """요청 태그 중 멤버와 맞는 개수.

    태그 완전/부분 일치, 언어 일치, 토픽 일치를 모두 인정한다.
    """
    repo = member.repository
    member_tags = [t.lower() for t in member.tags]
    language = (repo.language or "").lower()
    topics = [t.lower() for t in repo.topics]

    count = 0
    for tag in tags:
        if any(tag == t or tag in t or t in tag for t in member_tags):
            count += 1
        elif language and tag == language:
            count += 1
        elif any(tag == topic or tag in topic for topic in topics):
            count += 1
    return count


class ClusterRetriever:
    """사전 점수화된 클러스터에서 후보를 가져온다. 사용자별로 셔플한다."""

    def __init__(self, store: ClusterStore) -> None:
        self.store = store

    async def best_of_cluster(
        self,
        name: str,
        limit: int,
        exclude_ids: Collection[str] = (),
        user_id: str = "",
    ) -> list[Repository]:
        """클러스터 상위 멤버를 limit의 2배까지 가져와 셔플한 뒤 자른다."""
        members = await self.store.get_cluster_members(name, limit * 2, exclude_ids)
        excluded = set(exclude_ids)
        repos = [m.repository for m in members if m.repository.id not in excluded]
        if user_id:
            repos = shuffle_for_user(repos, user_id)
        logger.info(f"Cluster {name}: {len(repos)} candidates")
        return repos[:limit]

    async def by_tags(
        self,
        tags: list[str],
        limit: int,
        exclude_ids: Collection[str] = (),
        user_id: str = "",
    ) -> list[Repository]:
        """태그 겹침 수, 품질 점수 순으로 고른 뒤 셔플한다."""
        normalized = list(dict.fromkeys(normalize_tag(t) for t in tags if t.strip()))
        if not normalized:
            return []

        members = await self.store.query_by_tag_overlap(
            normalized, math.ceil(limit * TAG_OVERFETCH), exclude_ids
        )
        excluded = set(exclude_ids)
        ranked = sorted(
            (m for m in members if m.repository.id not in excluded),
            key=lambda m: (tag_match_count(m, normalized), m.quality_score),
            reverse=True,
        )
        repos = [m.repository for m in ranked[:limit]]
        if user_id:
            repos = shuffle_for_user(repos, user_id)
        logger.info(f"Tag search {normalized[:5]}: {len(repos)} candidates")
        return repos
