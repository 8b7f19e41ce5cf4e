"""일반 저장소 분류기 테스트."""

from conftest import RepoFactory
from repo_compass.scoring.classifier import (
    GENERIC_WORDS_PENALTY,
    HEAVY_PENALTY,
    NO_PENALTY,
    SHORT_DESCRIPTION_PENALTY,
    classify,
)


class TestClassify:
    """classify 테스트."""

    def test_regular_repository_has_no_penalty(self, make_repo: RepoFactory) -> None:
        """평범한 저장소는 패널티가 없다."""
        result = classify(make_repo("1"))
        assert not result.is_curated_list
        assert not result.is_corporate_mirror
        assert result.penalty == NO_PENALTY

    def test_curated_list_with_many_stars(self, make_repo: RepoFactory) -> None:
        """목록 표식과 1,000개 초과 스타는 큐레이션 목록이다."""
        repo = make_repo(
            "1",
            name="awesome-go",
            owner="avelino",
            description="A curated list of awesome Go frameworks, libraries and software",
            stars=120_000,
        )
        result = classify(repo)
        assert result.is_curated_list
        assert result.penalty == HEAVY_PENALTY

    def test_small_list_is_not_curated_list(self, make_repo: RepoFactory) -> None:
        """스타가 적은 목록은 큐레이션 목록으로 보지 않는다."""
        repo = make_repo(
            "1",
            name="my-notes",
            description="A list of things I use every day for coding",
            stars=40,
        )
        assert not classify(repo).is_curated_list

    def test_awesome_name_threshold(self, make_repo: RepoFactory) -> None:
        """awesome- 이름은 5,000개 초과일 때만 목록이다."""
        description = "Resources for writing better shell scripts and tools"
        small = make_repo("1", name="awesome-shell", description=description, stars=900)
        large = make_repo("2", name="awesome-shell", description=description, stars=6000)
        assert not classify(small).is_curated_list
        assert classify(large).is_curated_list

    def test_corporate_repository(self, make_repo: RepoFactory) -> None:
        """대기업 조직의 초대형 저장소는 미러로 분류한다."""
        repo = make_repo(
            "1",
            name="react",
            owner="facebook",
            description="The library for web and native user interfaces.",
            stars=230_000,
        )
        result = classify(repo)
        assert result.is_corporate_mirror
        assert result.penalty == HEAVY_PENALTY

    def test_corporate_tutorial_is_exempt(self, make_repo: RepoFactory) -> None:
        """대기업 저장소라도 학습용이면 패널티가 없다."""
        repo = make_repo(
            "1",
            name="Web-Dev-For-Beginners",
            owner="microsoft",
            description="24 Lessons, 12 Weeks, Get Started as a Web Developer",
            stars=90_000,
        )
        result = classify(repo)
        assert result.is_tutorial
        assert not result.is_corporate_mirror
        assert result.penalty == NO_PENALTY

    def test_platform_mirror(self, make_repo: RepoFactory) -> None:
        """freeCodeCamp 같은 플랫폼 저장소는 무거운 패널티다."""
        repo = make_repo(
            "1",
            name="freeCodeCamp",
            owner="freeCodeCamp",
            description="freeCodeCamp.org's open-source codebase and curriculum",
            stars=400_000,
        )
        assert classify(repo).penalty == HEAVY_PENALTY

    def test_short_description(self, make_repo: RepoFactory) -> None:
        """30자 미만 설명은 0.5 패널티다."""
        repo = make_repo("1", description="HTTP router")
        assert classify(repo).penalty == SHORT_DESCRIPTION_PENALTY

    def test_generic_words(self, make_repo: RepoFactory) -> None:
        """일반 단어 3개 이상이면 0.3 패널티다."""
        repo = make_repo(
            "1",
            description="My personal collection of resources, notes and a reading list",
            stars=200,
        )
        assert classify(repo).generic_word_count >= 3
        assert classify(repo).penalty == GENERIC_WORDS_PENALTY
