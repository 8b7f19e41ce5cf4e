"""일반적인(저신호) 저장소 분류기.

콘텐츠 점수의 generic 패널티와 품질 게이트의 하드 리젝트가 같은 판정을
공유하도록 한 곳에 모아 둔다.
"""

from dataclasses import dataclass

from repo_compass.models import Repository
from repo_compass.scoring.keywords import (
    CORPORATE_ORGS,
    GENERIC_WORDS,
    LIST_MARKERS,
    MIRROR_MARKERS,
    TUTORIAL_MARKERS,
    contains_any,
)

LIST_STAR_THRESHOLD = 1_000
AWESOME_NAME_STAR_THRESHOLD = 5_000
CORPORATE_STAR_THRESHOLD = 10_000
SHORT_DESCRIPTION_LENGTH = 30

HEAVY_PENALTY = 0.1
GENERIC_WORDS_PENALTY = 0.3
SHORT_DESCRIPTION_PENALTY = 0.5
NO_PENALTY = 1.0


@dataclass(frozen=True)
class RepoClassification:
    """저장소 분류 결과."""

    is_tutorial: bool
    is_curated_list: bool
    is_corporate_mirror: bool
    is_platform_mirror: bool
    generic_word_count: int
    short_description: bool

    @property
    def penalty(self) -> float:
        """콘텐츠 점수용 패널티 계수 (1.0이면 패널티 없음)."""
        if self.is_tutorial:
            return NO_PENALTY
        if self.is_curated_list or self.is_corporate_mirror or self.is_platform_mirror:
            return HEAVY_PENALTY
        if self.short_description:
            return SHORT_DESCRIPTION_PENALTY
        if self.generic_word_count >= 3:
            return GENERIC_WORDS_PENALTY
        return NO_PENALTY


def is_tutorial(repo: Repository) -> bool:
    """이름, 설명, 토픽에 학습용 표식이 있는지 확인한다."""
    name = repo.name.lower()
    description = repo.description.lower()
    if contains_any(name, TUTORIAL_MARKERS) or contains_any(description, TUTORIAL_MARKERS):
        return True
    return any(contains_any(topic.lower(), TUTORIAL_MARKERS) for topic in repo.topics)


def is_curated_list(repo: Repository) -> bool:
    """별이 많은 큐레이션 목록 저장소인지 확인한다."""
    name = repo.name.lower()
    texts = (repo.description.lower(), name, repo.full_name.lower())
    if repo.stars > LIST_STAR_THRESHOLD and any(
        contains_any(text, LIST_MARKERS) for text in texts
    ):
        return True
    return name.startswith("awesome-") and repo.stars > AWESOME_NAME_STAR_THRESHOLD


def is_corporate_mirror(repo: Repository, tutorial: bool | None = None) -> bool:
    """대기업 조직의 초대형 저장소인지 확인한다. 학습용이면 제외한다."""
    full_name = repo.full_name.lower()
    if not full_name.startswith(CORPORATE_ORGS) or repo.stars <= CORPORATE_STAR_THRESHOLD:
        return False
    if tutorial is None:
        tutorial = is_tutorial(repo)
    return not tutorial


def classify(repo: Repository) -> RepoClassification:
    """저장소를 분류한다."""
    tutorial = is_tutorial(repo)
    description = repo.description.lower()
    return RepoClassification(
        is_tutorial=tutorial,
        is_curated_list=is_curated_list(repo),
        is_corporate_mirror=is_corporate_mirror(repo, tutorial),
        is_platform_mirror=contains_any(repo.full_name.lower(), MIRROR_MARKERS),
        generic_word_count=sum(1 for word in GENERIC_WORDS if word in description),
        short_description=len(repo.description.strip()) < SHORT_DESCRIPTION_LENGTH,
    )
