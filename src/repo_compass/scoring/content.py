"""사용자 선호 기반 콘텐츠 적합도 점수."""

from datetime import datetime

from repo_compass.models import (
    ActivityPreference,
    DocumentationImportance,
    Goal,
    PopularityWeight,
    ProjectType,
    Repository,
    UserPreferences,
    build_tags,
)
from repo_compass.scoring.classifier import NO_PENALTY, classify
from repo_compass.scoring.keywords import (
    EXTENDED_TUTORIAL_MARKERS,
    TUTORIAL_MARKERS,
    TUTORIAL_NAME_MARKERS,
    contains_any,
)

# 하위 점수별 배점 (총 100점)
WEIGHTS = {
    "tech_stack": 30,
    "language": 20,
    "goals": 15,
    "project_types": 10,
    "activity": 10,
    "documentation": 5,
    "popularity": 10,
}

POPULARITY_MULTIPLIERS = {
    PopularityWeight.high: 1.0,
    PopularityWeight.medium: 0.5,
    PopularityWeight.low: 0.2,
}

DOCUMENTATION_FALLBACK = {
    DocumentationImportance.critical: 0.3,
    DocumentationImportance.important: 0.6,
    DocumentationImportance.nice_to_have: 0.8,
}
GOOD_DESCRIPTION_LENGTH = 100


def popularity_curve(stars: int) -> float:
    """스타 수를 0-1로 매핑한다. 100~10,000이 최적 구간이다."""
    if stars <= 0:
        return 0.0
    if 100 <= stars <= 10_000:
        return 1.0
    if 10_000 < stars <= 50_000:
        return 0.7
    if stars > 50_000:
        return 0.3
    if stars >= 50:
        return 0.8
    if stars >= 10:
        return 0.5
    return 0.1


def _tutorial_strength(repo: Repository, markers: tuple[str, ...]) -> float:
    """학습용 신호의 강도 (0이면 신호 없음)."""
    name = repo.name.lower()
    if contains_any(name, TUTORIAL_NAME_MARKERS):
        return 1.0
    if any(contains_any(topic.lower(), markers) for topic in repo.topics):
        return 0.9
    text = repo.search_text
    if contains_any(text, markers):
        return 0.7
    if contains_any(text, ("tutorial", "learn", "example")):
        return 0.5
    return 0.0


def _weighted_match(strengths: list[float], total: int) -> float:
    """매칭 개수와 가장 강한 매칭 강도를 합쳐 0-1 점수로 만든다."""
    if not strengths or total == 0:
        return 0.0
    return (len(strengths) / total) * (0.5 + max(strengths) * 0.5)


class ContentScorer:
    """저장소와 사용자 선호의 적합도를 0-100으로 계산한다.

    부수 효과가 없는 순수 계산이며 ``now``를 주입하면 결정적이다.
    """

    def score(
        self,
        repo: Repository,
        preferences: UserPreferences,
        now: datetime | None = None,
    ) -> int:
        """적합도 점수를 계산한다."""
        penalty = classify(repo).penalty
        if penalty < NO_PENALTY:
            return round(penalty * 50)

        score = 0.0
        max_score = 0

        if preferences.tech_stack:
            score += self._tech_stack_match(repo, preferences.tech_stack) * WEIGHTS["tech_stack"]
            max_score += WEIGHTS["tech_stack"]
            if self._language_match(repo, preferences.tech_stack):
                score += WEIGHTS["language"]
            max_score += WEIGHTS["language"]

        if preferences.goals:
            score += self.goal_match(repo, preferences.goals) * WEIGHTS["goals"]
        max_score += WEIGHTS["goals"]

        if preferences.project_types:
            score += (
                self.project_type_match(repo, preferences.project_types)
                * WEIGHTS["project_types"]
            )
        max_score += WEIGHTS["project_types"]

        score += (
            self.activity_match(repo, preferences.activity_preference, now)
            * WEIGHTS["activity"]
        )
        max_score += WEIGHTS["activity"]

        score += (
            self.documentation_score(repo, preferences.documentation_importance)
            * WEIGHTS["documentation"]
        )
        max_score += WEIGHTS["documentation"]

        weight = preferences.popularity_weight or PopularityWeight.low
        score += (
            popularity_curve(repo.stars)
            * POPULARITY_MULTIPLIERS[weight]
            * WEIGHTS["popularity"]
        )
        max_score += WEIGHTS["popularity"]

        return max(0, min(100, round(score / max_score * 100)))

    def _tech_stack_match(self, repo: Repository, tech_stack: list[str]) -> float:
        techs = [tech.lower() for tech in tech_stack]
        matching = [
            tag
            for tag in (t.lower() for t in repo.tags or build_tags(repo.language, repo.topics))
            if any(tag in tech or tech in tag for tech in techs)
        ]
        return min(1.0, len(matching) / len(techs))

    def _language_match(self, repo: Repository, tech_stack: list[str]) -> bool:
        if not repo.language:
            return False
        language = repo.language.lower()
        return any(tech.lower() == language for tech in tech_stack)

    def goal_match(self, repo: Repository, goals: list[Goal]) -> float:
        """목표별 키워드 매칭 점수 (0-1)."""
        text = repo.search_text
        strengths: list[float] = []

        if Goal.learning in goals:
            strength = _tutorial_strength(repo, EXTENDED_TUTORIAL_MARKERS)
            if strength:
                strengths.append(strength)
        if Goal.contributing in goals and (
            "contribut" in text or "open source" in text or repo.stars > 100
        ):
            strengths.append(0.6)
        if Goal.exploring in goals and repo.stars > 500:
            strengths.append(0.5)
        if Goal.building in goals and contains_any(text, ("boilerplate", "starter", "template")):
            strengths.append(0.6)
        if Goal.finding_solutions in goals and contains_any(
            text, ("library", "package", "tool", "utility")
        ):
            strengths.append(0.6)

        return _weighted_match(strengths, len(goals))

    def project_type_match(self, repo: Repository, project_types: list[ProjectType]) -> float:
        """프로젝트 유형 매칭 점수 (0-1)."""
        text = repo.search_text
        strengths: list[float] = []

        if ProjectType.library in project_types and "lib" in text:
            strengths.append(0.7)
        if ProjectType.framework in project_types and "framework" in text:
            strengths.append(0.8)
        if ProjectType.tool in project_types and contains_any(text, ("tool", "cli")):
            strengths.append(0.7)
        if ProjectType.tutorial in project_types:
            strength = _tutorial_strength(repo, TUTORIAL_MARKERS)
            if strength:
                strengths.append(strength)
        if ProjectType.full_app in project_types and "app" in text:
            strengths.append(0.6)
        if ProjectType.boilerplate in project_types and contains_any(
            text, ("boilerplate", "starter")
        ):
            strengths.append(0.7)

        return _weighted_match(strengths, len(project_types))

    def activity_match(
        self,
        repo: Repository,
        preference: ActivityPreference | None,
        now: datetime | None = None,
    ) -> float:
        """최근성 구간 기반 활동성 매칭 (0-1)."""
        days = repo.days_since_push(now)
        if preference == ActivityPreference.active:
            if days is None:
                return 0.0
            if days < 7:
                return 1.0
            return 0.5 if days < 30 else 0.0
        if preference == ActivityPreference.stable:
            return 1.0 if days is not None and days > 30 and repo.stars > 100 else 0.5
        if preference == ActivityPreference.trending:
            if repo.stars > 1000:
                return 1.0
            return 0.7 if repo.stars > 500 else 0.3
        return 0.5

    def documentation_score(
        self,
        repo: Repository,
        importance: DocumentationImportance | None,
    ) -> float:
        """설명 길이를 문서 품질의 대리 지표로 쓴다 (0-1)."""
        if len(repo.description) >= GOOD_DESCRIPTION_LENGTH:
            return 1.0
        return DOCUMENTATION_FALLBACK[importance or DocumentationImportance.nice_to_have]
