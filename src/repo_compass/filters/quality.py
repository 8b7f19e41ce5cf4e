"""품질 게이트 모듈.

하드 리젝트(즉시 탈락) 뒤에 소프트 감점을 적용하는 2단계 필터다.
"""

import logging
from datetime import datetime

from repo_compass.models import PopularityWeight, QualityResult, Repository, UserPreferences
from repo_compass.scoring.classifier import classify
from repo_compass.scoring.keywords import (
    EXCELLENT_DESCRIPTION_WORDS,
    POOR_DESCRIPTION_WORDS,
    PURPOSE_WORDS,
)

logger = logging.getLogger(__name__)

# 인기도 가중치별 최소 스타 수
MIN_STARS = {
    PopularityWeight.low: 5,
    PopularityWeight.medium: 20,
    PopularityWeight.high: 50,
}
DEFAULT_MIN_STARS = 10

MIN_DESCRIPTION_LENGTH = 20
PASSING_SCORE = 50


class QualityGate:
    """저품질/일반적인 저장소를 후보에서 걸러낸다."""

    def evaluate(
        self,
        repo: Repository,
        preferences: UserPreferences,
        now: datetime | None = None,
    ) -> QualityResult:
        """저장소를 평가한다. 탈락 사유는 reasons에 담는다."""
        weight = preferences.popularity_weight
        min_stars = MIN_STARS[weight] if weight else DEFAULT_MIN_STARS
        if repo.stars < min_stars:
            return self._reject(f"Too few stars ({repo.stars} < {min_stars} required)")

        if len(repo.description.strip()) < MIN_DESCRIPTION_LENGTH:
            return self._reject("Missing or too short description")

        classification = classify(repo)
        if classification.is_curated_list:
            return self._reject("Generic curated list repository")
        if classification.is_corporate_mirror:
            return self._reject("Mega-corporate repository (too generic)")

        score = 100
        warnings: list[str] = []

        days = repo.days_since_push(now)
        if days is not None and days > 365:
            score -= 10
            warnings.append("Not updated in over a year")
        elif days is not None and days > 180:
            score -= 5
            warnings.append("Not updated in 6+ months")

        if not repo.language and not repo.tags:
            score -= 5
            warnings.append("No language or tags")

        description = repo.description.lower()
        poor = sum(1 for word in POOR_DESCRIPTION_WORDS if word in description)
        excellent = sum(1 for word in EXCELLENT_DESCRIPTION_WORDS if word in description)
        if poor >= 3:
            score -= 10
            warnings.append("Poor description quality")
        elif excellent >= 2:
            score += 5

        if repo.forks == 0 and repo.stars < 50:
            score -= 5
            warnings.append("No community engagement")

        if not repo.topics:
            score -= 3
            warnings.append("No topics")

        if not any(word in description for word in PURPOSE_WORDS):
            score -= 5
            warnings.append("Unclear purpose")

        score = max(0, min(100, score))
        if score < PASSING_SCORE:
            return QualityResult(
                passed=False,
                score=score,
                reasons=["Quality score too low"],
                warnings=warnings,
            )

        return QualityResult(passed=True, score=score, warnings=warnings)

    def passes(
        self,
        repo: Repository,
        preferences: UserPreferences,
        now: datetime | None = None,
    ) -> bool:
        """통과 여부만 반환한다."""
        result = self.evaluate(repo, preferences, now)
        if not result.passed:
            logger.warning(f"Filtered out {repo.full_name}: {', '.join(result.reasons)}")
        return result.passed

    def filter(
        self,
        repositories: list[Repository],
        preferences: UserPreferences,
        now: datetime | None = None,
    ) -> list[Repository]:
        """통과한 저장소만 순서를 유지해 반환한다."""
        return [repo for repo in repositories if self.passes(repo, preferences, now)]

    def _reject(self, reason: str) -> QualityResult:
        return QualityResult(passed=False, score=0, reasons=[reason])
