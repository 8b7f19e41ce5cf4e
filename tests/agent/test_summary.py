"""검색 결과 요약 테스트."""

from types import SimpleNamespace
from typing import Any

import pytest

from conftest import RepoFactory
from repo_compass.agent.summary import SearchSummarizer, template_summary
from repo_compass.models import ScoredRepository
from repo_compass.scoring.health import fallback_score


def _fake_client(text: str | None = None, error: Exception | None = None) -> Any:
    async def generate_content(**kwargs: Any) -> SimpleNamespace:
        if error:
            raise error
        return SimpleNamespace(text=text)

    models = SimpleNamespace(generate_content=generate_content)
    return SimpleNamespace(aio=SimpleNamespace(models=models))


@pytest.fixture
def results(make_repo: RepoFactory) -> list[ScoredRepository]:
    """추정 점수가 붙은 검색 결과 두 개를 반환한다."""
    return [
        ScoredRepository(repository=make_repo("1", stars=10_000), health=fallback_score(10_000)),
        ScoredRepository(repository=make_repo("2", stars=100), health=fallback_score(100)),
    ]


@pytest.fixture
def summarizer() -> SearchSummarizer:
    """클라이언트가 없는 SearchSummarizer를 반환한다."""
    summarizer = SearchSummarizer()
    summarizer.client = None
    return summarizer


class TestTemplateSummary:
    """template_summary 테스트."""

    def test_no_results(self) -> None:
        """결과가 없으면 그렇게 말한다."""
        assert template_summary("rust orm", []) == 'No results found for "rust orm".'

    def test_with_results(self, results: list[ScoredRepository]) -> None:
        """개수, 평균 건강도, 1위를 요약한다."""
        assert template_summary("q", results) == (
            "Found 2 repositories ranked by health score (avg: 75/100). "
            "**octo/repo-1** leads with a B+ grade (100/100) and 10,000 stars."
        )


class TestSearchSummarizer:
    """SearchSummarizer 테스트."""

    def test_without_api_key(self, summarizer: SearchSummarizer) -> None:
        """키가 없으면 설정되지 않은 상태다."""
        assert summarizer.is_configured is False

    def test_prompt_lists_top_results(
        self, summarizer: SearchSummarizer, results: list[ScoredRepository]
    ) -> None:
        """프롬프트에 질의와 저장소 줄이 들어간다."""
        prompt = summarizer._build_prompt("react forms", results)
        assert 'The user searched: "react forms"' in prompt
        assert "1. octo/repo-1 — 10,000 stars, health: 100/100 (B+)" in prompt

    @pytest.mark.asyncio
    async def test_template_without_client(
        self, summarizer: SearchSummarizer, results: list[ScoredRepository]
    ) -> None:
        """클라이언트가 없으면 템플릿을 쓴다."""
        assert await summarizer.summarize("q", results) == template_summary("q", results)

    @pytest.mark.asyncio
    async def test_uses_model_text(
        self, summarizer: SearchSummarizer, results: list[ScoredRepository]
    ) -> None:
        """모델 응답을 다듬어 반환한다."""
        summarizer.client = _fake_client(text="  Both are solid picks.  ")
        assert await summarizer.summarize("q", results) == "Both are solid picks."

    @pytest.mark.asyncio
    async def test_falls_back_on_error(
        self, summarizer: SearchSummarizer, results: list[ScoredRepository]
    ) -> None:
        """호출이 실패하거나 응답이 비면 템플릿을 쓴다."""
        summarizer.client = _fake_client(error=RuntimeError("quota exceeded"))
        assert await summarizer.summarize("q", results) == template_summary("q", results)

        summarizer.client = _fake_client(text="")
        assert await summarizer.summarize("q", results) == template_summary("q", results)
