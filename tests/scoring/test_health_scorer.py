"""저장소 건강도 점수 테스트."""

from datetime import datetime, timedelta

import pytest

from conftest import SignalsFactory
from repo_compass.scoring.health import (
    PILLAR_WEIGHTS,
    HealthScorer,
    fallback_score,
    log_scale,
    to_grade,
)


@pytest.fixture
def scorer() -> HealthScorer:
    """HealthScorer 인스턴스를 반환한다."""
    return HealthScorer()


class TestHealthScorer:
    """HealthScorer 테스트."""

    def test_weights_sum_to_one(self) -> None:
        """가중치 합계는 정확히 100%다."""
        assert sum(PILLAR_WEIGHTS.values()) == 100

    def test_overall_is_weighted_sum(
        self, scorer: HealthScorer, make_signals: SignalsFactory, now: datetime
    ) -> None:
        """종합 점수는 축 점수의 가중합을 반올림한 값이다."""
        result = scorer.score(make_signals(), now=now)
        pillars = result.breakdown.model_dump()
        expected = round(sum(pillars[p] * w for p, w in PILLAR_WEIGHTS.items()) / 100)
        assert result.overall == expected
        assert result.grade == to_grade(result.overall)
        assert result.signals is not None
        assert not result.is_estimate

    def test_healthy_repository_grades_well(
        self, scorer: HealthScorer, make_signals: SignalsFactory, now: datetime
    ) -> None:
        """활발하고 성숙한 저장소는 B 이상이다."""
        result = scorer.score(make_signals(), now=now)
        assert result.overall >= 65
        assert "Strong in:" in result.summary
        assert "Actively maintained" in result.summary

    def test_abandoned_repository_grades_poorly(
        self, scorer: HealthScorer, make_signals: SignalsFactory, now: datetime
    ) -> None:
        """방치된 저장소는 낮은 점수와 경고를 받는다."""
        signals = make_signals(
            stars=30,
            forks=0,
            watchers=1,
            last_push=now - timedelta(days=400),
            created_at=now - timedelta(days=500),
            license=None,
            topics=[],
            contributor_count=1,
            avg_issue_close_time_days=120.0,
            issue_close_rate=0.1,
            commit_activity_52w=0,
            release_count=0,
            has_contributing=False,
        )
        result = scorer.score(signals, now=now)
        assert result.overall < 45
        assert "Needs improvement:" in result.summary
        assert "⚠️ Last push 400 days ago." in result.summary

    def test_missing_issue_data_is_neutral(
        self, scorer: HealthScorer, make_signals: SignalsFactory
    ) -> None:
        """이슈 데이터가 없으면 유지보수는 중간값 50이다."""
        signals = make_signals(avg_issue_close_time_days=None, issue_close_rate=None)
        assert scorer.maintenance(signals) == 50

    def test_activity_buckets(
        self, scorer: HealthScorer, make_signals: SignalsFactory, now: datetime
    ) -> None:
        """최근 푸시와 주간 커밋 수를 반씩 반영한다."""
        signals = make_signals(last_push=now - timedelta(days=3), commit_activity_52w=520)
        assert scorer.activity(signals, now) == 100

        quiet = make_signals(last_push=now - timedelta(days=60), commit_activity_52w=0)
        assert scorer.activity(quiet, now) == 35

    def test_documentation(self, scorer: HealthScorer, make_signals: SignalsFactory) -> None:
        """README, CONTRIBUTING, 토픽, 언어를 합산한다."""
        assert scorer.documentation(make_signals()) == 100
        bare = make_signals(has_readme=False, has_contributing=False, topics=[], language=None)
        assert scorer.documentation(bare) == 0

    def test_community_uses_fork_ratio(
        self, scorer: HealthScorer, make_signals: SignalsFactory
    ) -> None:
        """포크 비율이 높을수록 커뮤니티 점수가 높다."""
        forked = make_signals(stars=1000, forks=400)
        starred = make_signals(stars=1000, forks=10)
        assert scorer.community(forked) > scorer.community(starred)


class TestHelpers:
    """보조 함수 테스트."""

    def test_log_scale_bounds(self) -> None:
        """구간 밖 값은 0 또는 100으로 고정된다."""
        assert log_scale(0, 10, 50_000) == 0
        assert log_scale(10, 10, 50_000) == 0
        assert log_scale(50_000, 10, 50_000) == 100
        assert log_scale(1_000_000, 10, 50_000) == 100

    def test_log_scale_is_monotonic(self) -> None:
        """값이 커지면 점수도 커진다."""
        assert log_scale(100, 10, 50_000) < log_scale(1000, 10, 50_000)

    @pytest.mark.parametrize(
        ("score", "grade"),
        [(97, "A+"), (85, "A"), (80, "B+"), (65, "B"), (55, "C+"), (50, "C"), (30, "D"), (10, "F")],
    )
    def test_to_grade(self, score: int, grade: str) -> None:
        """등급 구간."""
        assert to_grade(score) == grade

    @pytest.mark.parametrize(
        ("stars", "overall", "grade"),
        [(0, 0, "D"), (100, 50, "C+"), (1000, 75, "B+"), (1_000_000, 100, "B+")],
    )
    def test_fallback_score(self, stars: int, overall: int, grade: str) -> None:
        """신호가 없으면 스타 수의 로그로 추정한다."""
        result = fallback_score(stars)
        assert result.overall == overall
        assert result.grade == grade
        assert result.breakdown.popularity == overall
        assert result.breakdown.activity == 50
        assert result.is_estimate
        assert "Health data unavailable" in result.summary
