"""추천 풀 모듈."""

from repo_compass.recommender.pool import PoolBuilder, hash_preferences

__all__ = ["PoolBuilder", "hash_preferences"]
