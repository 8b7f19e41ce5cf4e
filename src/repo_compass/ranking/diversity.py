"""다양성 재정렬."""

from collections import Counter

from repo_compass.models import Repository

LANGUAGE_CAP = 2
LANGUAGE_WINDOW = 10
TOPIC_CAP = 3


def apply_diversity(
    repositories: list[Repository],
    count: int,
    language_cap: int = LANGUAGE_CAP,
    language_window: int = LANGUAGE_WINDOW,
    topic_cap: int = TOPIC_CAP,
) -> list[Repository]:
    """점수순 목록에서 언어/토픽 상한을 지키며 count개를 고른다.

    상위 ``language_window``개 안에서는 언어별 최대 ``language_cap``개,
    전체에서는 같은 토픽을 가진 저장소 최대 ``topic_cap``개까지만 고른다.
    건너뛴 항목은 버리지 않고, 자리가 남으면 점수순으로 채운다.
    """
    selected: list[Repository] = []
    deferred: list[Repository] = []
    languages: Counter[str] = Counter()
    topics: Counter[str] = Counter()

    for repo in repositories:
        if len(selected) >= count:
            break
        language = (repo.language or "").lower()
        repo_topics = {t.lower() for t in repo.topics}

        if (
            language
            and len(selected) < language_window
            and languages[language] >= language_cap
        ):
            deferred.append(repo)
            continue
        if any(topics[t] >= topic_cap for t in repo_topics):
            deferred.append(repo)
            continue

        selected.append(repo)
        if language:
            languages[language] += 1
        topics.update(repo_topics)

    if len(selected) < count:
        selected.extend(deferred[: count - len(selected)])
    return selected
