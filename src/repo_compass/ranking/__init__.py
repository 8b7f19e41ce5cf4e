"""재정렬 모듈."""

from repo_compass.ranking.diversity import apply_diversity
from repo_compass.ranking.session import SessionRanker
from repo_compass.ranking.similarity import jaccard, repo_similarity

__all__ = ["SessionRanker", "apply_diversity", "jaccard", "repo_similarity"]
