"""저장소 건강도 점수.

원시 신호를 여섯 개 축(인기도, 활동성, 유지보수, 커뮤니티, 문서화, 성숙도)으로
나눠 0-100 점수를 매기고 고정 가중치로 합산한다.
"""

import math
from datetime import UTC, datetime

from repo_compass.models import HealthBreakdown, HealthScore, HealthSignals

# 축별 가중치 (백분율, 합계 100)
PILLAR_WEIGHTS = {
    "popularity": 20,
    "activity": 25,
    "maintenance": 20,
    "community": 15,
    "documentation": 10,
    "maturity": 10,
}

GRADE_THRESHOLDS = (
    (95, "A+"),
    (85, "A"),
    (75, "B+"),
    (65, "B"),
    (55, "C+"),
    (45, "C"),
    (30, "D"),
)

STRENGTH_THRESHOLD = 75
WEAKNESS_THRESHOLD = 45
NEUTRAL_SCORE = 50


def log_scale(value: float, minimum: float, maximum: float) -> int:
    """값을 [minimum, maximum] 로그 구간에 맞춰 0-100으로 매핑한다."""
    if value <= 0:
        return 0
    clamped = max(minimum, min(value, maximum))
    normalized = (math.log(clamped) - math.log(minimum)) / (
        math.log(maximum) - math.log(minimum)
    )
    return round(normalized * 100)


def to_grade(score: int) -> str:
    """점수를 등급 문자열로 바꾼다."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def _days_since(moment: datetime, now: datetime) -> float:
    return max(0.0, (now - moment).total_seconds() / 86400)


def _bucket(value: float, buckets: tuple[tuple[float, int], ...], default: int) -> int:
    """value 이하인 첫 구간의 점수. 모두 넘으면 default."""
    for limit, score in buckets:
        if value <= limit:
            return score
    return default


def fallback_score(stars: int) -> HealthScore:
    """신호를 가져오지 못했을 때 스타 수만으로 추정한 점수."""
    estimate = min(100, round(math.log10(max(1, stars)) * 25))
    if estimate >= 75:
        grade = "B+"
    elif estimate >= 50:
        grade = "C+"
    else:
        grade = "D"
    return HealthScore(
        overall=estimate,
        grade=grade,
        breakdown=HealthBreakdown(
            popularity=estimate,
            activity=NEUTRAL_SCORE,
            maintenance=NEUTRAL_SCORE,
            community=NEUTRAL_SCORE,
            documentation=NEUTRAL_SCORE,
            maturity=NEUTRAL_SCORE,
        ),
        signals=None,
        summary=f"{stars:,} stars. Health data unavailable — showing estimate.",
    )


class HealthScorer:
    """HealthSignals를 HealthScore로 변환한다."""

    def score(self, signals: HealthSignals, now: datetime | None = None) -> HealthScore:
        """건강도 점수를 계산한다."""
        now = now or datetime.now(UTC)
        breakdown = HealthBreakdown(
            popularity=self.popularity(signals),
            activity=self.activity(signals, now),
            maintenance=self.maintenance(signals),
            community=self.community(signals),
            documentation=self.documentation(signals),
            maturity=self.maturity(signals, now),
        )
        overall = round(
            sum(
                getattr(breakdown, pillar) * weight
                for pillar, weight in PILLAR_WEIGHTS.items()
            )
            / 100
        )
        return HealthScore(
            overall=overall,
            grade=to_grade(overall),
            breakdown=breakdown,
            signals=signals,
            summary=self.summarize(breakdown, signals, now),
        )

    def popularity(self, signals: HealthSignals) -> int:
        stars = log_scale(signals.stars, 10, 50_000)
        watchers = log_scale(signals.watchers, 5, 5_000)
        forks = log_scale(signals.forks, 5, 5_000)
        return round(stars * 0.5 + watchers * 0.25 + forks * 0.25)

    def activity(self, signals: HealthSignals, now: datetime) -> int:
        days = _days_since(signals.last_push, now)
        recency = _bucket(
            days,
            ((7, 100), (30, 85), (90, 65), (180, 40), (365, 20)),
            default=5,
        )

        per_week = signals.commit_activity_52w / 52
        if per_week >= 10:
            commits = 100
        elif per_week >= 5:
            commits = 85
        elif per_week >= 2:
            commits = 70
        elif per_week >= 1:
            commits = 55
        elif per_week >= 0.5:
            commits = 40
        elif per_week > 0:
            commits = 25
        else:
            commits = 5

        return round((recency + commits) / 2)

    def maintenance(self, signals: HealthSignals) -> int:
        close_rate = NEUTRAL_SCORE
        if signals.issue_close_rate is not None:
            close_rate = min(100, round(signals.issue_close_rate * 100))

        close_time = NEUTRAL_SCORE
        if signals.avg_issue_close_time_days is not None:
            close_time = _bucket(
                signals.avg_issue_close_time_days,
                ((1, 100), (3, 90), (7, 75), (14, 60), (30, 45), (90, 25)),
                default=10,
            )

        return round((close_rate + close_time) / 2)

    def community(self, signals: HealthSignals) -> int:
        contributors = log_scale(signals.contributor_count, 1, 500)

        ratio = signals.forks / signals.stars if signals.stars > 0 else 0.0
        if ratio >= 0.3:
            fork_score = 100
        elif ratio >= 0.2:
            fork_score = 80
        elif ratio >= 0.1:
            fork_score = 60
        elif ratio >= 0.05:
            fork_score = 40
        else:
            fork_score = 20

        return round(contributors * 0.6 + fork_score * 0.4)

    def documentation(self, signals: HealthSignals) -> int:
        score = 0
        if signals.has_readme:
            score += 50
        if signals.has_contributing:
            score += 30
        if len(signals.topics) >= 3:
            score += 10
        if signals.language:
            score += 10
        return min(100, score)

    def maturity(self, signals: HealthSignals, now: datetime) -> int:
        age_days = _days_since(signals.created_at, now)
        if age_days >= 1095:
            age = 100
        elif age_days >= 730:
            age = 85
        elif age_days >= 365:
            age = 70
        elif age_days >= 180:
            age = 55
        elif age_days >= 90:
            age = 40
        else:
            age = 25

        if signals.release_count >= 20:
            releases = 100
        elif signals.release_count >= 10:
            releases = 80
        elif signals.release_count >= 5:
            releases = 60
        elif signals.release_count >= 1:
            releases = 40
        else:
            releases = 10

        license_score = 100 if signals.license else 20
        return round(age * 0.35 + releases * 0.35 + license_score * 0.30)

    def summarize(
        self,
        breakdown: HealthBreakdown,
        signals: HealthSignals,
        now: datetime,
    ) -> str:
        """강점/약점과 주요 수치를 한 줄 요약으로 만든다."""
        pillars = breakdown.model_dump()
        parts: list[str] = []

        strengths = [name for name, value in pillars.items() if value >= STRENGTH_THRESHOLD]
        if strengths:
            parts.append(f"Strong in: {', '.join(strengths)}.")

        weaknesses = [name for name, value in pillars.items() if value < WEAKNESS_THRESHOLD]
        if weaknesses:
            parts.append(f"Needs improvement: {', '.join(weaknesses)}.")

        parts.append(
            f"{signals.stars:,} stars, {signals.contributor_count} contributors, "
            f"{signals.release_count} releases."
        )

        days = round(_days_since(signals.last_push, now))
        if days <= 7:
            parts.append("Actively maintained (pushed within last week).")
        elif days <= 30:
            parts.append(f"Last push {days} days ago.")
        else:
            parts.append(f"⚠️ Last push {days} days ago.")

        return " ".join(parts)
