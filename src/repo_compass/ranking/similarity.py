"""저장소 간 유사도."""

from repo_compass.models import Repository


def jaccard(left: set[str], right: set[str]) -> float:
    """두 집합의 자카드 계수. 둘 다 비어 있으면 0."""
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


def repo_similarity(a: Repository, b: Repository) -> float:
    """언어 일치 0.3, 토픽 자카드 0.4, 태그 자카드 0.3의 가중합 (0-1)."""
    score = 0.0
    if a.language and b.language and a.language.lower() == b.language.lower():
        score += 0.3
    score += jaccard({t.lower() for t in a.topics}, {t.lower() for t in b.topics}) * 0.4
    score += jaccard({t.lower() for t in a.tags}, {t.lower() for t in b.tags}) * 0.3
    return score
