"""다양성 재정렬과 유사도 테스트."""

import pytest

from conftest import RepoFactory
from repo_compass.ranking import apply_diversity, jaccard, repo_similarity


class TestApplyDiversity:
    """apply_diversity 테스트."""

    def test_language_cap_in_window(self, make_repo: RepoFactory) -> None:
        """상위 구간에서는 언어별 2개까지만 고른다."""
        repos = [make_repo(f"p{i}", language="Python") for i in range(1, 6)]
        repos += [make_repo(f"g{i}", language="Go") for i in range(1, 3)]

        picked = apply_diversity(repos, 4)
        assert [r.id for r in picked] == ["p1", "p2", "g1", "g2"]

    def test_backfills_deferred_in_score_order(self, make_repo: RepoFactory) -> None:
        """자리가 남으면 건너뛴 항목을 원래 순서대로 채운다."""
        repos = [make_repo(f"p{i}", language="Python") for i in range(1, 6)]
        repos += [make_repo(f"g{i}", language="Go") for i in range(1, 3)]

        picked = apply_diversity(repos, 6)
        assert [r.id for r in picked] == ["p1", "p2", "g1", "g2", "p3", "p4"]

    def test_topic_cap(self, make_repo: RepoFactory) -> None:
        """같은 토픽은 3개까지만 먼저 고른다."""
        repos = [make_repo(f"r{i}", language=None, topics=["react"]) for i in range(1, 6)]
        repos.append(make_repo("v", language=None, topics=["vue"]))

        picked = apply_diversity(repos, 5)
        assert [r.id for r in picked] == ["r1", "r2", "r3", "v", "r4"]

    def test_short_input(self, make_repo: RepoFactory) -> None:
        """후보가 count보다 적으면 전부 반환한다."""
        repos = [make_repo("1"), make_repo("2")]
        assert len(apply_diversity(repos, 10)) == 2
        assert apply_diversity([], 10) == []


class TestSimilarity:
    """유사도 함수 테스트."""

    def test_jaccard(self) -> None:
        """교집합 / 합집합."""
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
        assert jaccard(set(), set()) == 0.0

    def test_identical_repositories(self, make_repo: RepoFactory) -> None:
        """같은 언어, 토픽, 태그면 1이다."""
        repo = make_repo("1", language="Rust", topics=["cli"])
        assert repo_similarity(repo, repo) == pytest.approx(1.0)

    def test_language_only(self, make_repo: RepoFactory) -> None:
        """언어만 같고 토픽이 없으면 언어와 태그 점수만 받는다."""
        a = make_repo("1", language="Rust", topics=["cli"])
        b = make_repo("2", language="rust")
        # 태그 {rust, cli} vs {rust}
        assert repo_similarity(a, b) == pytest.approx(0.3 + 0.5 * 0.3)
