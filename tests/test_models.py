"""데이터 모델 테스트."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from conftest import RepoFactory
from repo_compass.models import (
    Goal,
    RepoPool,
    Repository,
    TrendingRepository,
    UserPreferences,
    build_tags,
)


class TestBuildTags:
    """build_tags 테스트."""

    def test_language_first_then_topics(self) -> None:
        """언어가 맨 앞에 온다."""
        assert build_tags("Python", ["web", "api"]) == ["Python", "web", "api"]

    def test_deduplicates_case_insensitively(self) -> None:
        """대소문자만 다른 중복은 제거한다."""
        assert build_tags("Go", ["go", "Router", "router"]) == ["Go", "Router"]

    def test_limits_to_five(self) -> None:
        """최대 5개까지만 유지한다."""
        tags = build_tags("Rust", ["a", "b", "c", "d", "e", "f"])
        assert tags == ["Rust", "a", "b", "c", "d"]

    def test_without_language(self) -> None:
        """언어가 없으면 토픽만 쓴다."""
        assert build_tags(None, ["cli"]) == ["cli"]


class TestRepository:
    """Repository 테스트."""

    def test_accepts_camel_case_payload(self) -> None:
        """저장된 풀의 camelCase 필드도 읽는다."""
        repo = Repository.model_validate(
            {
                "id": "1",
                "name": "vite",
                "fullName": "vitejs/vite",
                "description": None,
                "pushedAt": "2026-09-01T00:00:00Z",
                "fitScore": 70,
            }
        )
        assert repo.full_name == "vitejs/vite"
        assert repo.description == ""
        assert repo.fit_score == 70

    def test_is_immutable(self, make_repo: RepoFactory) -> None:
        """스냅샷은 직접 수정할 수 없다."""
        repo = make_repo("1")
        with pytest.raises(ValidationError):
            repo.stars = 10  # type: ignore[misc]

    def test_with_fit_score_returns_copy(self, make_repo: RepoFactory) -> None:
        """with_fit_score는 원본을 바꾸지 않는다."""
        repo = make_repo("1")
        scored = repo.with_fit_score(42)
        assert scored.fit_score == 42
        assert repo.fit_score is None

    def test_days_since_push(self, make_repo: RepoFactory) -> None:
        """마지막 푸시 이후 일수를 계산한다."""
        now = datetime(2026, 10, 1, tzinfo=UTC)
        repo = make_repo("1", pushed_at=now - timedelta(days=10))
        assert repo.days_since_push(now) == pytest.approx(10)
        assert make_repo("2", pushed_at=None).days_since_push(now) is None


class TestUserPreferences:
    """UserPreferences 테스트."""

    def test_upgrades_legacy_goals(self) -> None:
        """이전 온보딩 목표 값을 새 값으로 바꾸고 중복을 제거한다."""
        prefs = UserPreferences.model_validate(
            {"goals": ["learning-new-tech", "learning", "discovering", "building-project"]}
        )
        assert prefs.goals == [Goal.learning, Goal.exploring, Goal.building]

    def test_rejects_unknown_goal(self) -> None:
        """알 수 없는 목표는 거부한다."""
        with pytest.raises(ValidationError):
            UserPreferences.model_validate({"goals": ["world-domination"]})


class TestRepoPool:
    """RepoPool 테스트."""

    def test_is_fresh_within_ttl(self) -> None:
        """TTL 안에서만 유효하다."""
        created = datetime(2026, 10, 1, tzinfo=UTC)
        pool = RepoPool(user_id="u", preferences_hash="h", created_at=created)
        assert pool.is_fresh(created + timedelta(hours=23), 24)
        assert not pool.is_fresh(created + timedelta(hours=24), 24)


class TestTrendingRepository:
    """TrendingRepository 테스트."""

    def test_to_repository(self) -> None:
        """Repository 스냅샷으로 변환한다."""
        trending = TrendingRepository(
            full_name="astral-sh/uv",
            url="https://github.com/astral-sh/uv",
            description="Python package manager",
            language="Rust",
            stars=50000,
        )
        repo = trending.to_repository()
        assert repo.name == "uv"
        assert repo.owner is not None and repo.owner.login == "astral-sh"
        assert repo.tags == ["Rust"]
